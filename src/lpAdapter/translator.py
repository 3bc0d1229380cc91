"""Traduction d'un LinearProgram vers un SolverEngine.

Règles:
  - variable DOUBLE  -> bornes [lower, upper] explicites, sinon bornes du moteur
  - INTEGER          -> colonne entière (bornes conservées)
  - BINARY           -> colonne 0/1, prioritaire sur une borne DOUBLE
  - objectif         -> ligne dense de taille n, zéros par défaut
  - FIXED / LOWER / UPPER -> une ligne ==, >=, <=
  - DOUBLE           -> deux lignes (>= lower puis <= upper) avec les mêmes coefficients
"""
from __future__ import annotations
import logging
from typing import List, Tuple

from tqdm import tqdm

from .engine import RowSense, SolverEngine, SparsePairs
from .errors import EmptyModelError, ModelError
from .model import (
    ConstraintBound,
    LinearConstraint,
    LinearProgram,
    ObjectiveSense,
    VariableBound,
    VariableKind,
)

logger = logging.getLogger(__name__)

Row = Tuple[SparsePairs, RowSense, float]


def check_not_empty(program: LinearProgram) -> int:
    n = program.variable_count()
    if n <= 0:
        raise EmptyModelError("l'ensemble des variables est vide")
    return n


def objective_row(program: LinearProgram) -> List[float]:
    """Ligne dense de l'objectif, alignée sur l'ordre des variables."""
    row = [0.0] * program.variable_count()
    for idx, coeff in program.objective().coefficients().items():
        row[idx] = coeff
    return row


def constraint_rows(cstr: LinearConstraint) -> List[Row]:
    """Lignes moteur d'une contrainte (une seule, ou deux pour DOUBLE)."""
    pairs: SparsePairs = [(idx, coeff) for idx, coeff in cstr.coefficients.items()]
    if cstr.bound is ConstraintBound.FIXED:
        return [(pairs, RowSense.EQ, cstr.rhs)]
    if cstr.bound is ConstraintBound.LOWER:
        return [(pairs, RowSense.GE, cstr.rhs)]
    if cstr.bound is ConstraintBound.UPPER:
        return [(pairs, RowSense.LE, cstr.rhs)]
    if cstr.bound is ConstraintBound.DOUBLE:
        return [(pairs, RowSense.GE, cstr.lower), (list(pairs), RowSense.LE, cstr.upper)]
    raise ModelError(f"type de borne non supporté: {cstr.bound!r}")


def encode_variables(program: LinearProgram, engine: SolverEngine, progress: bool = False) -> None:
    n = program.variable_count()
    for i in tqdm(range(n), desc="Création des variables", disable=not progress):
        var = program.variable(i)
        if var.bound is VariableBound.DOUBLE:
            engine.set_variable_bounds(i, var.lower, var.upper)
        elif var.bound is not VariableBound.NONE:
            raise ModelError(f"variable {i}: type de borne non supporté {var.bound!r}")

        if var.kind is VariableKind.INTEGER:
            engine.set_variable_integer(i)
        elif var.kind is VariableKind.BINARY:
            engine.set_variable_binary(i)


def encode_constraints(program: LinearProgram, engine: SolverEngine, progress: bool = False) -> int:
    """Ajoute toutes les contraintes et retourne le nombre de lignes émises."""
    constraints = program.constraints()
    rows = [constraint_rows(c) for c in constraints]
    total = sum(len(r) for r in rows)

    # réserve la place d'un coup, puis insertion en mode batch
    engine.reserve_rows(total)
    engine.begin_batch_insert()
    for cstr_rows in tqdm(rows, desc="Ajout des contraintes", disable=not progress):
        for pairs, sense, rhs in cstr_rows:
            engine.add_constraint_row(pairs, sense, rhs)
    engine.end_batch_insert()
    return total


def translate(program: LinearProgram, engine: SolverEngine, progress: bool = False) -> int:
    """Remplit un problème déjà créé (create_problem) à partir du modèle.

    Retourne le nombre de lignes envoyées au moteur.
    """
    n = check_not_empty(program)
    encode_variables(program, engine, progress)
    maximize = program.objective().sense is ObjectiveSense.MAXIMIZE
    engine.set_objective_row(objective_row(program), maximize=maximize)
    total = encode_constraints(program, engine, progress)
    logger.info(
        "modèle traduit",
        extra={"n_vars": n, "constraints": program.constraint_count(), "rows": total},
    )
    return total


__all__ = [
    "check_not_empty",
    "objective_row",
    "constraint_rows",
    "encode_variables",
    "encode_constraints",
    "translate",
]
