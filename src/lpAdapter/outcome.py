"""Résultat d'une résolution et correspondance code moteur -> Outcome."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .config import SolverConfig
from .engine import SolverEngine, StatusCode

logger = logging.getLogger(__name__)


class FailureReason(str, Enum):
    EMPTY_MODEL = "empty_model"
    ENGINE_CREATION = "engine_creation"
    UNEXPECTED = "unexpected"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    SUBOPTIMAL = "suboptimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    DEGENERATE = "degenerate"
    NUMERIC_FAILURE = "numeric_failure"
    ABORTED = "aborted"
    TIMEOUT = "timeout"
    UNHANDLED = "unhandled"
    ACCURACY_ERROR = "accuracy_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Success:
    solution: List[float]
    objective_value: float = float("nan")
    status: int = StatusCode.OPTIMAL
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    message: str
    status: Optional[int] = None
    ok: bool = field(default=False, init=False)


Outcome = Union[Success, Failure]


# code -> (raison, message)
STATUS_TABLE: Dict[int, Tuple[FailureReason, str]] = {
    StatusCode.NOMEMORY: (FailureReason.RESOURCE_EXHAUSTED, "Mémoire insuffisante"),
    StatusCode.SUBOPTIMAL: (
        FailureReason.SUBOPTIMAL,
        "Le modèle est sous-optimal: une solution entière a été trouvée mais "
        "son optimalité n'est pas garantie",
    ),
    StatusCode.INFEASIBLE: (FailureReason.INFEASIBLE, "Le modèle est infaisable"),
    StatusCode.UNBOUNDED: (FailureReason.UNBOUNDED, "Le modèle est non borné"),
    StatusCode.DEGENERATE: (FailureReason.DEGENERATE, "Le modèle est dégénéré"),
    StatusCode.NUMFAILURE: (FailureReason.NUMERIC_FAILURE, "Échec numérique rencontré"),
    StatusCode.USERABORT: (FailureReason.ABORTED, "La résolution a été interrompue (abort)"),
    StatusCode.TIMEOUT: (FailureReason.TIMEOUT, "Limite de temps atteinte"),
    StatusCode.PRESOLVED: (
        FailureReason.UNHANDLED,
        "Le modèle a été résolu par le presolve (cas non géré)",
    ),
    StatusCode.ACCURACYERROR: (FailureReason.ACCURACY_ERROR, "Erreur de précision rencontrée"),
}


def _surfaced(code: int, config: SolverConfig) -> bool:
    if code == StatusCode.SUBOPTIMAL:
        return config.surface_suboptimal
    if code == StatusCode.PRESOLVED:
        return config.surface_presolved
    return False


def _extract(engine: SolverEngine, code: int, n_vars: int, offset: float) -> Outcome:
    values = [float(v) for v in engine.get_solution()]
    if len(values) != n_vars:
        raise RuntimeError(f"le moteur a renvoyé {len(values)} valeurs pour {n_vars} variables")
    return Success(values, engine.get_objective() + offset, int(code))


def map_status(
    code: int,
    engine: SolverEngine,
    n_vars: int,
    config: Optional[SolverConfig] = None,
    offset: float = 0.0,
) -> Outcome:
    """Convertit le code brut du moteur en Outcome.

    Seul OPTIMAL (ou SUBOPTIMAL / PRESOLVED si la config le demande) lit la
    solution; tout autre code donne un Failure qui garde le code d'origine.
    Un code inconnu ne lève jamais d'exception.
    """
    config = config or SolverConfig()
    if code == StatusCode.OPTIMAL or _surfaced(code, config):
        if code != StatusCode.OPTIMAL:
            logger.warning("solution non optimale renvoyée", extra={"status": int(code)})
        return _extract(engine, code, n_vars, offset)

    reason, message = STATUS_TABLE.get(
        code, (FailureReason.UNKNOWN, f"Code de retour inconnu: {code}")
    )
    logger.error(message, extra={"status": int(code), "reason": reason.value})
    return Failure(reason, message, int(code))


__all__ = ["FailureReason", "Success", "Failure", "Outcome", "STATUS_TABLE", "map_status"]
