"""solve(): cycle de vie du moteur et conversion des erreurs en Failure."""
from __future__ import annotations

import pytest

from lpAdapter import (
    EngineCreationFailure,
    Failure,
    FailureReason,
    LinearProgram,
    LinearProgramSolver,
    SolverConfig,
    StatusCode,
    Success,
)
from lpAdapter.solver import engine_session

from conftest import RecordingEngine


def solver_with(engine, config=None):
    created = []

    def factory(cfg):
        created.append(cfg)
        return engine

    return LinearProgramSolver(config or SolverConfig(), factory), created


class TestEmptyModel:
    def test_no_engine_created(self):
        engine = RecordingEngine()
        solver, created = solver_with(engine)
        out = solver.solve(LinearProgram())
        assert isinstance(out, Failure)
        assert out.reason is FailureReason.EMPTY_MODEL
        assert created == []
        assert engine.calls == []


class TestLifecycle:
    def test_success_destroys_once(self, knapsack_lp):
        engine = RecordingEngine(solution=[1.0, 0.0], objective=1.0)
        solver, created = solver_with(engine)
        out = solver.solve(knapsack_lp)
        assert isinstance(out, Success)
        assert out.solution == [1.0, 0.0]
        assert len(created) == 1
        assert engine.destroyed == 1
        assert engine.calls[0] == "create_problem"
        assert engine.calls[-1] == "destroy_problem"

    def test_failure_status_destroys_once(self, knapsack_lp):
        engine = RecordingEngine(status=StatusCode.INFEASIBLE)
        solver, _ = solver_with(engine)
        out = solver.solve(knapsack_lp)
        assert out.reason is FailureReason.INFEASIBLE
        assert engine.destroyed == 1

    @pytest.mark.parametrize(
        "step", ["create_problem", "set_variable_bounds", "set_objective_row", "add_constraint_row", "solve"]
    )
    def test_exception_becomes_unexpected(self, knapsack_lp, step):
        engine = RecordingEngine(fail_on=step)
        solver, _ = solver_with(engine)
        out = solver.solve(knapsack_lp)
        assert isinstance(out, Failure)
        assert out.reason is FailureReason.UNEXPECTED
        assert "panne simulée" in out.message
        assert engine.destroyed == 1

    def test_one_engine_per_call(self, knapsack_lp):
        engines = []

        def factory(cfg):
            engines.append(RecordingEngine(solution=[0.0, 1.0]))
            return engines[-1]

        solver = LinearProgramSolver(engine_factory=factory)
        solver.solve(knapsack_lp)
        solver.solve(knapsack_lp)
        assert len(engines) == 2
        assert all(e.destroyed == 1 for e in engines)

    def test_solve_called_once(self, knapsack_lp):
        engine = RecordingEngine(status=StatusCode.NUMFAILURE)
        solver, _ = solver_with(engine)
        solver.solve(knapsack_lp)
        assert engine.calls.count("solve") == 1


class TestEngineCreation:
    def test_factory_returns_none(self, knapsack_lp):
        solver = LinearProgramSolver(engine_factory=lambda cfg: None)
        out = solver.solve(knapsack_lp)
        assert out.reason is FailureReason.ENGINE_CREATION

    def test_factory_raises(self, knapsack_lp):
        def factory(cfg):
            raise OSError("bibliothèque absente")

        out = LinearProgramSolver(engine_factory=factory).solve(knapsack_lp)
        assert out.reason is FailureReason.ENGINE_CREATION
        assert "bibliothèque absente" in out.message

    def test_create_problem_refuses(self, knapsack_lp):
        class Refusing(RecordingEngine):
            def create_problem(self, n_vars):
                raise EngineCreationFailure("pas de licence")

        engine = Refusing()
        out = LinearProgramSolver(engine_factory=lambda cfg: engine).solve(knapsack_lp)
        assert out.reason is FailureReason.ENGINE_CREATION
        assert engine.destroyed == 1


class TestEngineSession:
    def test_destroy_on_exception(self):
        engine = RecordingEngine()
        with pytest.raises(ValueError):
            with engine_session(lambda cfg: engine, SolverConfig(), 2):
                raise ValueError("boom")
        assert engine.destroyed == 1

    def test_destroy_failure_does_not_mask_result(self):
        class BadDestroy(RecordingEngine):
            def destroy_problem(self):
                raise RuntimeError("destroy")

        with engine_session(lambda cfg: BadDestroy(), SolverConfig(), 1) as engine:
            assert engine.n_vars == 1
