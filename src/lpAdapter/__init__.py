"""Adaptateur entre un programme linéaire décrit en Python et un moteur externe (PuLP/CBC)."""
from .config import SolverConfig
from .engine import RowSense, SolverEngine, StatusCode
from .errors import EmptyModelError, EngineCreationFailure, LPAdapterError, ModelError, ParseError
from .model import (
    ConstraintBound,
    LinearConstraint,
    LinearExpression,
    LinearProgram,
    ObjectiveSense,
    Variable,
    VariableBound,
    VariableKind,
)
from .outcome import Failure, FailureReason, Outcome, Success
from .parsing import parse_data_dir, parse_linear_expr
from .pulp_engine import PulpEngine
from .solver import LinearProgramSolver, solve

__version__ = "0.2.0"

__all__ = [
    "SolverConfig",
    "RowSense",
    "SolverEngine",
    "StatusCode",
    "EmptyModelError",
    "EngineCreationFailure",
    "LPAdapterError",
    "ModelError",
    "ParseError",
    "ConstraintBound",
    "LinearConstraint",
    "LinearExpression",
    "LinearProgram",
    "ObjectiveSense",
    "Variable",
    "VariableBound",
    "VariableKind",
    "Failure",
    "FailureReason",
    "Outcome",
    "Success",
    "parse_data_dir",
    "parse_linear_expr",
    "PulpEngine",
    "LinearProgramSolver",
    "solve",
]
