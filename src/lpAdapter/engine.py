"""Surface minimale qu'un moteur d'optimisation externe doit offrir à l'adaptateur.

Les codes de retour suivent la numérotation de lp_solve (solve() renvoie un int);
un moteur qui parle une autre langue traduit ses statuts vers StatusCode.
"""
from __future__ import annotations
from enum import Enum, IntEnum
from typing import List, Protocol, Sequence, Tuple


class StatusCode(IntEnum):
    NOMEMORY = -2
    NOTRUN = -1
    OPTIMAL = 0
    SUBOPTIMAL = 1
    INFEASIBLE = 2
    UNBOUNDED = 3
    DEGENERATE = 4
    NUMFAILURE = 5
    USERABORT = 6
    TIMEOUT = 7
    PRESOLVED = 9
    ACCURACYERROR = 25


class RowSense(str, Enum):
    EQ = "=="
    GE = ">="
    LE = "<="


# (colonne 0-based, coefficient)
SparsePairs = List[Tuple[int, float]]


class SolverEngine(Protocol):
    """Un problème vivant côté moteur, créé puis détruit à chaque résolution."""

    def create_problem(self, n_vars: int) -> None: ...

    def set_variable_bounds(self, index: int, lower: float, upper: float) -> None: ...

    def set_variable_integer(self, index: int) -> None: ...

    def set_variable_binary(self, index: int) -> None: ...

    def set_objective_row(self, row: Sequence[float], maximize: bool = False) -> None: ...

    def reserve_rows(self, count: int) -> None: ...

    def begin_batch_insert(self) -> None: ...

    def add_constraint_row(self, pairs: SparsePairs, sense: RowSense, rhs: float) -> None: ...

    def end_batch_insert(self) -> None: ...

    def solve(self) -> int: ...

    def get_solution(self) -> List[float]: ...

    def get_objective(self) -> float: ...

    def destroy_problem(self) -> None: ...


__all__ = ["StatusCode", "RowSense", "SparsePairs", "SolverEngine"]
