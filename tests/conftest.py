from __future__ import annotations

import math
from typing import List, Optional, Sequence

import pytest

from lpAdapter import ConstraintBound, LinearProgram, ObjectiveSense, VariableKind
from lpAdapter.engine import RowSense, SparsePairs, StatusCode


class RecordingEngine:
    """Faux moteur: enregistre les appels et renvoie un statut choisi."""

    def __init__(self, status: int = StatusCode.OPTIMAL, solution: Optional[List[float]] = None,
                 objective: float = 0.0, fail_on: Optional[str] = None) -> None:
        self.status = status
        self.solution = solution
        self.objective = objective
        self.fail_on = fail_on
        self.calls: List[str] = []
        self.n_vars = 0
        self.bounds = {}
        self.integer = set()
        self.binary = set()
        self.objective_row: List[float] = []
        self.maximize = False
        self.reserved = 0
        self.rows: List[tuple] = []
        self.in_batch = False
        self.destroyed = 0

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"panne simulée dans {name}")

    def create_problem(self, n_vars: int) -> None:
        self._call("create_problem")
        self.n_vars = n_vars

    def set_variable_bounds(self, index: int, lower: float, upper: float) -> None:
        self._call("set_variable_bounds")
        self.bounds[index] = (lower, upper)

    def set_variable_integer(self, index: int) -> None:
        self._call("set_variable_integer")
        self.integer.add(index)

    def set_variable_binary(self, index: int) -> None:
        self._call("set_variable_binary")
        self.binary.add(index)

    def set_objective_row(self, row: Sequence[float], maximize: bool = False) -> None:
        self._call("set_objective_row")
        self.objective_row = list(row)
        self.maximize = maximize

    def reserve_rows(self, count: int) -> None:
        self._call("reserve_rows")
        self.reserved = count

    def begin_batch_insert(self) -> None:
        self._call("begin_batch_insert")
        self.in_batch = True

    def add_constraint_row(self, pairs: SparsePairs, sense: RowSense, rhs: float) -> None:
        self._call("add_constraint_row")
        assert self.in_batch
        self.rows.append((list(pairs), sense, rhs))

    def end_batch_insert(self) -> None:
        self._call("end_batch_insert")
        self.in_batch = False

    def solve(self) -> int:
        self._call("solve")
        return self.status

    def get_solution(self) -> List[float]:
        self._call("get_solution")
        if self.solution is not None:
            return list(self.solution)
        return [0.0] * self.n_vars

    def get_objective(self) -> float:
        return self.objective

    def destroy_problem(self) -> None:
        self.calls.append("destroy_problem")
        self.destroyed += 1


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def knapsack_lp():
    """max x0 + x1, x0 + x1 <= 1, x0, x1 ∈ [0, 1]"""
    lp = LinearProgram("knapsack")
    x0 = lp.add_variable(lower=0, upper=1)
    x1 = lp.add_variable(lower=0, upper=1)
    lp.set_objective({x0: 1.0, x1: 1.0}, ObjectiveSense.MAXIMIZE)
    lp.add_constraint({x0: 1.0, x1: 1.0}, ConstraintBound.UPPER, rhs=1.0)
    return lp


@pytest.fixture
def mixed_lp():
    """Un modèle qui touche tous les types de variables et de bornes."""
    lp = LinearProgram("mixed")
    a = lp.add_variable("a")
    b = lp.add_variable("b", VariableKind.INTEGER, lower=-3, upper=7)
    c = lp.add_variable("c", VariableKind.BINARY, lower=2, upper=5)
    d = lp.add_variable("d", VariableKind.INTEGER)
    lp.set_objective({a: 2.0, c: -1.5})
    lp.add_constraint({a: 1.0, b: 1.0}, ConstraintBound.FIXED, rhs=4.0)
    lp.add_constraint({b: 2.0, d: -1.0}, ConstraintBound.LOWER, rhs=-1.0)
    lp.add_constraint({c: 1.0}, ConstraintBound.UPPER, rhs=1.0)
    lp.add_constraint({a: 3.0, d: 0.5}, ConstraintBound.DOUBLE, lower=-2.0, upper=math.inf)
    return lp
