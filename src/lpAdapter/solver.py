"""Point d'entrée: solve(LinearProgram) -> Outcome.

Une résolution = un moteur neuf, créé puis détruit dans engine_session(),
quelle que soit la branche de sortie. Aucune exception ne sort de solve():
tout est converti en Failure typé.
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from .config import SolverConfig
from .engine import SolverEngine
from .errors import EmptyModelError, EngineCreationFailure
from .model import LinearProgram
from .outcome import Failure, FailureReason, Outcome, map_status
from .pulp_engine import PulpEngine
from .translator import check_not_empty, translate

logger = logging.getLogger(__name__)

EngineFactory = Callable[[SolverConfig], Optional[SolverEngine]]


def pulp_factory(config: SolverConfig) -> SolverEngine:
    return PulpEngine(config)


@contextmanager
def engine_session(
    factory: EngineFactory, config: SolverConfig, n_vars: int
) -> Iterator[SolverEngine]:
    """Crée le problème côté moteur et garantit un seul destroy_problem()."""
    try:
        engine = factory(config)
    except Exception as e:
        raise EngineCreationFailure(f"erreur lors de la création du moteur: {e}") from e
    if engine is None:
        raise EngineCreationFailure("erreur lors de la création du modèle LP")

    created = False
    try:
        engine.create_problem(n_vars)
        created = True
        yield engine
    finally:
        # create_problem() a pu allouer avant d'échouer: on libère dans tous les cas
        try:
            engine.destroy_problem()
        except Exception:
            logger.exception("destroy_problem a échoué", extra={"problem_created": created})


def invoke(engine: SolverEngine) -> int:
    """Lance la résolution et retourne le code brut, sans l'interpréter."""
    return int(engine.solve())


class LinearProgramSolver:
    """Adaptateur LinearProgram -> moteur externe."""

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        engine_factory: Optional[EngineFactory] = None,
    ) -> None:
        self.config = config or SolverConfig()
        self.engine_factory = engine_factory or pulp_factory

    def solve(self, program: LinearProgram) -> Outcome:
        try:
            n = check_not_empty(program)
        except EmptyModelError as e:
            logger.error(str(e))
            return Failure(FailureReason.EMPTY_MODEL, str(e))

        logger.info(
            "résolution",
            extra={"model": program.name, "n_vars": n, "constraints": program.constraint_count()},
        )
        try:
            with engine_session(self.engine_factory, self.config, n) as engine:
                translate(program, engine, progress=self.config.progress)
                code = invoke(engine)
                return map_status(code, engine, n, self.config, program.objective().offset)
        except EngineCreationFailure as e:
            logger.error(str(e))
            return Failure(FailureReason.ENGINE_CREATION, str(e))
        except Exception as e:
            logger.exception("exception pendant l'optimisation")
            return Failure(FailureReason.UNEXPECTED, f"Erreur inattendue: {e}")


def solve(program: LinearProgram, config: Optional[SolverConfig] = None) -> Outcome:
    return LinearProgramSolver(config).solve(program)


__all__ = ["EngineFactory", "engine_session", "invoke", "LinearProgramSolver", "pulp_factory", "solve"]
