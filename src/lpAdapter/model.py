"""Description d'un programme linéaire (LP/MILP), indépendante de tout solveur.

Les variables sont identifiées par leur position (0, 1, ..., n-1), les
coefficients sont stockés en creux: {index_variable: coefficient}.
"""
from __future__ import annotations
import math
from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .errors import ModelError


class VariableKind(str, Enum):
    CONTINUOUS = "continuous"
    INTEGER = "integer"
    BINARY = "binary"


class VariableBound(Enum):
    NONE = "none"      # bornes par défaut du moteur
    DOUBLE = "double"  # [lower, upper] explicites


class ConstraintBound(Enum):
    FIXED = "=="
    LOWER = ">="
    UPPER = "<="
    DOUBLE = "range"


class ObjectiveSense(str, Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"


class Variable(NamedTuple):
    name: str
    kind: VariableKind = VariableKind.CONTINUOUS
    bound: VariableBound = VariableBound.NONE
    lower: float = 0.0
    upper: float = math.inf

    def get_bound(self) -> Tuple[float, float]:
        return self.lower, self.upper


class LinearExpression:
    """Expression linéaire creuse (utilisée pour l'objectif)."""

    def __init__(
        self,
        coefficients: Optional[Mapping[int, float]] = None,
        sense: ObjectiveSense = ObjectiveSense.MINIMIZE,
        offset: float = 0.0,
    ) -> None:
        self.sense = ObjectiveSense(sense)
        self.offset = float(offset)
        self._coefficients: Dict[int, float] = {}
        for idx, coeff in (coefficients or {}).items():
            self.add_coefficient(idx, coeff)

    def add_coefficient(self, index: int, coeff: float) -> None:
        """Ajoute coeff au coefficient de la variable index (les doublons s'additionnent)."""
        self._coefficients[index] = self._coefficients.get(index, 0.0) + float(coeff)

    def coefficients(self) -> Dict[int, float]:
        return dict(self._coefficients)

    def evaluate(self, values: Sequence[float]) -> float:
        return self.offset + sum(c * values[i] for i, c in self._coefficients.items())

    def __repr__(self) -> str:
        return f"LinearExpression({self._coefficients!r}, sense={self.sense.value!r})"


class LinearConstraint(NamedTuple):
    """Contrainte linéaire creuse.

    - FIXED / LOWER / UPPER utilisent rhs
    - DOUBLE utilise lower et upper
    """

    coefficients: Dict[int, float]
    bound: ConstraintBound
    rhs: float = 0.0
    lower: float = -math.inf
    upper: float = math.inf
    name: str = ""

    def get_bound(self) -> Tuple[float, float]:
        if self.bound is ConstraintBound.FIXED:
            return self.rhs, self.rhs
        if self.bound is ConstraintBound.LOWER:
            return self.rhs, math.inf
        if self.bound is ConstraintBound.UPPER:
            return -math.inf, self.rhs
        return self.lower, self.upper

    def activity(self, values: Sequence[float]) -> float:
        return sum(c * values[i] for i, c in self.coefficients.items())


class LinearProgram:
    """Modèle complet: variables ordonnées, un objectif, contraintes ordonnées.

    Construit par l'appelant, jamais modifié par le solveur.
    """

    def __init__(self, name: str = "LPModel") -> None:
        self.name = name
        self._variables: List[Variable] = []
        self._objective = LinearExpression()
        self._constraints: List[LinearConstraint] = []

    # ---------------------------
    # Construction
    # ---------------------------
    def add_variable(
        self,
        name: Optional[str] = None,
        kind: VariableKind = VariableKind.CONTINUOUS,
        lower: Optional[float] = None,
        upper: Optional[float] = None,
    ) -> int:
        """Déclare une variable et retourne son index.

        Sans lower ni upper la variable garde les bornes par défaut du moteur
        (bound NONE). Si une seule borne est donnée, l'autre vaut 0 / +inf.
        """
        idx = len(self._variables)
        kind = VariableKind(kind)
        if lower is None and upper is None:
            var = Variable(name or f"x{idx}", kind)
        else:
            low = 0.0 if lower is None else float(lower)
            up = math.inf if upper is None else float(upper)
            if up < low:
                raise ModelError(f"variable {idx}: upper ({up}) < lower ({low})")
            var = Variable(name or f"x{idx}", kind, VariableBound.DOUBLE, low, up)
        self._variables.append(var)
        return idx

    def set_objective(
        self,
        coefficients: Mapping[int, float],
        sense: ObjectiveSense = ObjectiveSense.MINIMIZE,
        offset: float = 0.0,
    ) -> LinearExpression:
        self._check_indices(coefficients, "objectif")
        self._objective = LinearExpression(coefficients, sense, offset)
        return self._objective

    def add_constraint(
        self,
        coefficients: Mapping[int, float],
        bound: ConstraintBound,
        rhs: Optional[float] = None,
        lower: Optional[float] = None,
        upper: Optional[float] = None,
        name: str = "",
    ) -> int:
        """Ajoute une contrainte et retourne sa position (0-based)."""
        bound = ConstraintBound(bound)
        pos = len(self._constraints)
        label = name or f"c{pos}"
        self._check_indices(coefficients, f"contrainte '{label}'")
        coeffs = {int(i): float(c) for i, c in coefficients.items()}

        if bound is ConstraintBound.DOUBLE:
            if lower is None or upper is None:
                raise ModelError(f"contrainte '{label}': DOUBLE demande lower et upper")
            if upper < lower:
                raise ModelError(f"contrainte '{label}': upper ({upper}) < lower ({lower})")
            cstr = LinearConstraint(coeffs, bound, lower=float(lower), upper=float(upper), name=label)
        else:
            if rhs is None:
                raise ModelError(f"contrainte '{label}': rhs manquant pour {bound.name}")
            cstr = LinearConstraint(coeffs, bound, rhs=float(rhs), name=label)
        self._constraints.append(cstr)
        return pos

    def _check_indices(self, coefficients: Mapping[int, float], where: str) -> None:
        n = len(self._variables)
        bad = [i for i in coefficients if not (isinstance(i, int) and 0 <= i < n)]
        if bad:
            raise ModelError(f"{where}: index de variable inconnu {bad} (variables: {n})")

    # ---------------------------
    # Lecture
    # ---------------------------
    def variable_count(self) -> int:
        return len(self._variables)

    def variable(self, index: int) -> Variable:
        return self._variables[index]

    def variables(self) -> List[Variable]:
        return list(self._variables)

    def objective(self) -> LinearExpression:
        return self._objective

    def constraints(self) -> List[LinearConstraint]:
        return list(self._constraints)

    def constraint_count(self) -> int:
        return len(self._constraints)

    def __repr__(self) -> str:
        return (
            f"LinearProgram({self.name!r}, variables={len(self._variables)}, "
            f"constraints={len(self._constraints)})"
        )


__all__ = [
    "VariableKind",
    "VariableBound",
    "ConstraintBound",
    "ObjectiveSense",
    "Variable",
    "LinearExpression",
    "LinearConstraint",
    "LinearProgram",
]
