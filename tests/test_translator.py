"""Traduction LinearProgram -> moteur (faux moteur enregistreur)."""
from __future__ import annotations

import math
import random

import pytest

from lpAdapter import ConstraintBound, EmptyModelError, LinearProgram, VariableKind
from lpAdapter.engine import RowSense
from lpAdapter.translator import constraint_rows, objective_row, translate


class TestVariableEncoding:
    def test_double_bounds_registered(self, mixed_lp, recording_engine):
        translate(mixed_lp, recording_engine)
        assert recording_engine.bounds == {1: (-3.0, 7.0), 2: (2.0, 5.0)}

    def test_none_bound_left_to_engine(self, mixed_lp, recording_engine):
        translate(mixed_lp, recording_engine)
        assert 0 not in recording_engine.bounds
        assert 3 not in recording_engine.bounds

    def test_integer_and_binary_marks(self, mixed_lp, recording_engine):
        translate(mixed_lp, recording_engine)
        assert recording_engine.integer == {1, 3}
        assert recording_engine.binary == {2}

    def test_binary_marked_after_bounds(self, recording_engine):
        lp = LinearProgram()
        lp.add_variable(kind=VariableKind.BINARY, lower=0, upper=10)
        translate(lp, recording_engine)
        calls = recording_engine.calls
        assert calls.index("set_variable_bounds") < calls.index("set_variable_binary")


class TestObjectiveEncoding:
    def test_dense_row(self, mixed_lp):
        assert objective_row(mixed_lp) == [2.0, 0.0, -1.5, 0.0]

    def test_row_length_matches_variables(self):
        lp = LinearProgram()
        for _ in range(7):
            lp.add_variable()
        assert objective_row(lp) == [0.0] * 7

    def test_sense_forwarded(self, knapsack_lp, mixed_lp, recording_engine):
        translate(knapsack_lp, recording_engine)
        assert recording_engine.maximize is True
        translate(mixed_lp, recording_engine)
        assert recording_engine.maximize is False

    def test_coefficient_preserving(self):
        rng = random.Random(7)
        lp = LinearProgram()
        for _ in range(12):
            lp.add_variable()
        coeffs = {i: rng.uniform(-5, 5) for i in rng.sample(range(12), 6)}
        lp.set_objective(coeffs)
        row = objective_row(lp)
        for _ in range(5):
            values = [rng.uniform(-10, 10) for _ in range(12)]
            dense = sum(c * v for c, v in zip(row, values))
            assert dense == pytest.approx(lp.objective().evaluate(values))


class TestConstraintEncoding:
    def test_single_row_senses(self, mixed_lp):
        fixed, lower, upper, _ = mixed_lp.constraints()
        assert [(s, r) for _, s, r in constraint_rows(fixed)] == [(RowSense.EQ, 4.0)]
        assert [(s, r) for _, s, r in constraint_rows(lower)] == [(RowSense.GE, -1.0)]
        assert [(s, r) for _, s, r in constraint_rows(upper)] == [(RowSense.LE, 1.0)]

    def test_double_emits_two_rows(self, mixed_lp):
        double = mixed_lp.constraints()[3]
        rows = constraint_rows(double)
        assert len(rows) == 2
        (p1, s1, r1), (p2, s2, r2) = rows
        assert sorted(p1) == sorted(p2) == [(0, 3.0), (3, 0.5)]
        assert (s1, r1) == (RowSense.GE, -2.0)
        assert (s2, r2) == (RowSense.LE, math.inf)

    def test_rows_in_caller_order(self, mixed_lp, recording_engine):
        total = translate(mixed_lp, recording_engine)
        assert total == 5
        assert [s for _, s, _ in recording_engine.rows] == [
            RowSense.EQ, RowSense.GE, RowSense.LE, RowSense.GE, RowSense.LE,
        ]

    def test_rows_reserved_and_batched(self, mixed_lp, recording_engine):
        translate(mixed_lp, recording_engine)
        calls = recording_engine.calls
        assert recording_engine.reserved == 5
        assert calls.index("reserve_rows") < calls.index("begin_batch_insert")
        first_row = calls.index("add_constraint_row")
        last_row = len(calls) - 1 - calls[::-1].index("add_constraint_row")
        assert calls.index("begin_batch_insert") < first_row
        assert last_row < calls.index("end_batch_insert")

    def test_pairs_preserve_sum(self):
        lp = LinearProgram()
        for _ in range(5):
            lp.add_variable()
        lp.add_constraint({4: 1.5, 0: -2.0, 2: 3.0}, ConstraintBound.UPPER, rhs=1)
        cstr = lp.constraints()[0]
        (pairs, _, _), = constraint_rows(cstr)
        values = [1.0, 2.0, 3.0, 4.0, 5.0]
        assert sum(c * values[j] for j, c in pairs) == pytest.approx(cstr.activity(values))

    def test_no_constraints(self, recording_engine):
        lp = LinearProgram()
        lp.add_variable()
        assert translate(lp, recording_engine) == 0
        assert recording_engine.rows == []
        assert "end_batch_insert" in recording_engine.calls


class TestPreconditions:
    def test_empty_model(self, recording_engine):
        with pytest.raises(EmptyModelError):
            translate(LinearProgram(), recording_engine)
        assert recording_engine.calls == []

    def test_model_not_mutated(self, mixed_lp, recording_engine):
        before = (mixed_lp.variables(), mixed_lp.objective().coefficients(), mixed_lp.constraints())
        translate(mixed_lp, recording_engine)
        after = (mixed_lp.variables(), mixed_lp.objective().coefficients(), mixed_lp.constraints())
        assert before == after

    def test_progress_bars(self, knapsack_lp, recording_engine):
        assert translate(knapsack_lp, recording_engine, progress=True) == 1
