"""Moteur PuLP (CBC) derrière l'interface SolverEngine."""
from __future__ import annotations
import logging
import math
from typing import Any, List, Optional, Sequence

from pulp import (
    COIN_CMD,
    PULP_CBC_CMD,
    LpAffineExpression,
    LpConstraint,
    LpConstraintEQ,
    LpConstraintGE,
    LpConstraintLE,
    LpInteger,
    LpMaximize,
    LpMinimize,
    LpProblem,
    LpSolutionIntegerFeasible,
    LpSolutionOptimal,
    LpStatus,
    LpStatusInfeasible,
    LpStatusNotSolved,
    LpStatusOptimal,
    LpStatusUnbounded,
    LpVariable,
    value,
)

from .config import SolverConfig
from .engine import RowSense, SparsePairs, StatusCode
from .errors import EngineCreationFailure

logger = logging.getLogger(__name__)

_SENSES = {
    RowSense.EQ: LpConstraintEQ,
    RowSense.GE: LpConstraintGE,
    RowSense.LE: LpConstraintLE,
}


def _pulp_bound(b: float) -> Optional[float]:
    # PuLP représente une borne infinie par None
    return None if math.isinf(b) else float(b)


def to_status_code(status: int, sol_status: int, time_limit: Optional[int] = None) -> int:
    """Traduit le couple (status, sol_status) de PuLP vers la numérotation lp_solve."""
    if status == LpStatusOptimal:
        if sol_status == LpSolutionIntegerFeasible:
            return StatusCode.SUBOPTIMAL
        return StatusCode.OPTIMAL
    if status == LpStatusInfeasible:
        return StatusCode.INFEASIBLE
    if status == LpStatusUnbounded:
        return StatusCode.UNBOUNDED
    if status == LpStatusNotSolved and time_limit is not None:
        return StatusCode.TIMEOUT
    # NotSolved sans limite de temps, Undefined
    return StatusCode.NOTRUN


class PulpEngine:
    """Problème PuLP construit colonne par colonne, résolu par CBC.

    Les colonnes reçoivent les bornes par défaut de lp_solve, [0, +inf).
    """

    def __init__(self, config: Optional[SolverConfig] = None, name: str = "LPModel") -> None:
        self.config = config or SolverConfig()
        self.name = name
        self.prob: Optional[LpProblem] = None
        self.solver: Any = None
        self.columns: List[LpVariable] = []
        self._pending: Optional[List[LpConstraint]] = None
        self._reserved = 0
        self._rows = 0

    def _solver(self) -> Any:
        cfg = self.config
        if cfg.cbc_path:
            return COIN_CMD(path=cfg.cbc_path, msg=cfg.msg, timeLimit=cfg.time_limit)
        # PULP_CBC_CMD est déprécié depuis PuLP 3: seulement si COIN_CMD ne trouve pas CBC
        coin = COIN_CMD(msg=cfg.msg, timeLimit=cfg.time_limit)
        if coin.available():
            return coin
        return PULP_CBC_CMD(msg=cfg.msg, timeLimit=cfg.time_limit)

    def _problem(self) -> LpProblem:
        if self.prob is None:
            raise RuntimeError("aucun problème actif: appeler create_problem() d'abord")
        return self.prob

    # ---------------------------
    # Cycle de vie
    # ---------------------------
    def create_problem(self, n_vars: int) -> None:
        solver = self._solver()
        if not solver.available():
            raise EngineCreationFailure(
                f"exécutable CBC introuvable ({self.config.cbc_path or 'PULP_CBC_CMD'})"
            )
        self.solver = solver
        self.prob = LpProblem(self.name, LpMinimize)
        self.columns = [LpVariable(f"x{i}", lowBound=0) for i in range(n_vars)]
        self.prob.addVariables(self.columns)
        self._rows = 0
        logger.debug("problème PuLP créé", extra={"n_vars": n_vars})

    def destroy_problem(self) -> None:
        self.prob = None
        self.columns = []
        self._pending = None
        self._rows = 0

    # ---------------------------
    # Colonnes
    # ---------------------------
    def set_variable_bounds(self, index: int, lower: float, upper: float) -> None:
        col = self.columns[index]
        col.lowBound = _pulp_bound(lower)
        col.upBound = _pulp_bound(upper)

    def set_variable_integer(self, index: int) -> None:
        self.columns[index].cat = LpInteger

    def set_variable_binary(self, index: int) -> None:
        col = self.columns[index]
        col.cat = LpInteger
        col.lowBound = 0
        col.upBound = 1

    def set_objective_row(self, row: Sequence[float], maximize: bool = False) -> None:
        prob = self._problem()
        prob.sense = LpMaximize if maximize else LpMinimize
        prob.setObjective(LpAffineExpression(list(zip(self.columns, row))))

    # ---------------------------
    # Lignes
    # ---------------------------
    def reserve_rows(self, count: int) -> None:
        self._reserved = count

    def begin_batch_insert(self) -> None:
        self._pending = []

    def add_constraint_row(self, pairs: SparsePairs, sense: RowSense, rhs: float) -> None:
        prob = self._problem()
        self._rows += 1
        expr = LpAffineExpression([(self.columns[j], coeff) for j, coeff in pairs])
        row = LpConstraint(expr, sense=_SENSES[RowSense(sense)], rhs=rhs, name=f"r{self._rows}")
        if self._pending is None:
            prob.addConstraint(row)
        else:
            self._pending.append(row)

    def end_batch_insert(self) -> None:
        prob = self._problem()
        pending, self._pending = self._pending or [], None
        for row in pending:
            prob.addConstraint(row)
        if self._reserved and self._rows != self._reserved:
            logger.debug(
                "nombre de lignes différent de la réservation",
                extra={"rows": self._rows, "reserved": self._reserved},
            )

    # ---------------------------
    # Résolution
    # ---------------------------
    def solve(self) -> int:
        prob = self._problem()
        status = prob.solve(self.solver)
        sol_status = getattr(prob, "sol_status", LpSolutionOptimal)
        logger.debug(
            "CBC terminé",
            extra={"pulp_status": LpStatus.get(status, str(status)), "sol_status": sol_status},
        )
        return to_status_code(status, sol_status, self.config.time_limit)

    def get_solution(self) -> List[float]:
        return [col.varValue if col.varValue is not None else float("nan") for col in self.columns]

    def get_objective(self) -> float:
        obj = value(self._problem().objective)
        return float(obj) if obj is not None else float("nan")


__all__ = ["PulpEngine", "to_status_code"]
