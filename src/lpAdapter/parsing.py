# **************************************************************************** #
#                                                                              #
#                                                         :::      ::::::::    #
#    parsing.py                                         :+:      :+:    :+:    #
#                                                     +:+ +:+         +:+      #
#    By: Jvasseur <jvasseur@student.42.fr>          +#+  +:+       +#+         #
#                                                 +#+#+#+#+#+   +#+            #
#    Created: 2025/09/08 12:38:17 by Jvasseur          #+#    #+#              #
#    Updated: 2026/10/16 10:12:44 by Jvasseur         ###   ########.fr        #
#                                                                              #
# **************************************************************************** #

from __future__ import annotations
import csv
import logging
import os
import re
from typing import Dict, List, Optional, Tuple

from .errors import ModelError, ParseError
from .model import ConstraintBound, LinearProgram, ObjectiveSense, VariableKind

logger = logging.getLogger(__name__)

_SENSES = {
    "==": ConstraintBound.FIXED,
    "=": ConstraintBound.FIXED,
    ">=": ConstraintBound.LOWER,
    "≥": ConstraintBound.LOWER,
    "<=": ConstraintBound.UPPER,
    "≤": ConstraintBound.UPPER,
    "range": ConstraintBound.DOUBLE,
}

# ---------------------------
# Helpers généraux
# ---------------------------
def _require_file(path: str) -> None:
    if not os.path.isfile(path):
        raise ParseError(f"Fichier introuvable: {path}")

def _first_existing(*paths: str) -> str:
    """
    Retourne le premier chemin existant parmi 'paths'.
    Lève une ParseError avec la liste attendue sinon.
    """
    for p in paths:
        if os.path.isfile(p):
            return p
    raise ParseError("Aucun des fichiers suivants n'a été trouvé: " + ", ".join(paths))

def _read_csv_dicts(path: str, required_headers: List[str]) -> List[Dict[str, str]]:
    """
    Lit un CSV en dictionnaires et vérifie les en-têtes.
    Les valeurs sont nettoyées (espaces), une colonne optionnelle absente vaut "".
    """
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise ParseError(f"{path}: en-têtes manquantes.")
            headers = [h.strip() for h in reader.fieldnames]
            reader.fieldnames = headers

            missing = [h for h in required_headers if h not in headers]
            if missing:
                raise ParseError(f"{path}: en-têtes manquantes: {missing} ; attendues: {required_headers}")

            return [
                {k: (v.strip() if isinstance(v, str) else "") for k, v in row.items()}
                for row in reader
            ]
    except csv.Error as e:
        raise ParseError(f"{path}: CSV invalide ({e})")

def _parse_float(field: str, value: str, path: str, line_no: int, allow_empty: bool = False) -> Optional[float]:
    if value == "" and allow_empty:
        return None
    try:
        return float(value)
    except ValueError:
        raise ParseError(f"{path}:{line_no}: '{field}' doit être un nombre (reçu: '{value}')")

# ---------------------------------------------------
# Expressions linéaires
# Supporte:  x + 2y - 3*z + 5  (la constante 5 passe du LHS au RHS)
#            2*x + y,  -x + 1.5*y,  2.0e-3*z
# ---------------------------------------------------
_VAR_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_EXP_PLUS_RE = re.compile(r"(?<![A-Za-z_.\d])(\d[\d.]*[eE])\+(?=\d)")
_EXP_RE = re.compile(r"(?<![A-Za-z_.\d])(\d[\d.]*[eE])\+-(?=\d)")
_EXPONENT_RE = re.compile(r"-?\d")

def _find_var(term: str) -> Optional[re.Match]:
    """Premier nom de variable du terme, en ignorant l'exposant d'un nombre ('2.0e-3')."""
    for m in _VAR_NAME_RE.finditer(term):
        head = term[:m.start()].rstrip()
        is_exponent = (
            m.group(0)[0] in "eE"
            and head[-1:].isdigit()
            and _EXPONENT_RE.match(term, m.start() + 1) is not None
        )
        if not is_exponent:
            return m
    return None

def parse_linear_expr(expr: str) -> Tuple[Dict[str, float], float]:
    """
    Parse une expression linéaire et retourne:
      - coeffs: dict {nom_variable: coeff}
      - const_sum: constante présente dans l'expression
    Formes acceptées: 'x', '2x', '2*x', '- y', '+3*z', '1.2e3*a', '+ 5', '-10'
    """
    if expr is None or expr.strip() == "":
        raise ParseError("Expression vide")
    s = expr.replace("−", "-")
    s = _EXP_PLUS_RE.sub(r"\1", s)  # '1e+3' -> '1e3'
    s = s.replace("-", "+-")
    s = _EXP_RE.sub(r"\1-", s)  # '1e+-3' -> '1e-3'
    parts = [p.strip() for p in s.split("+") if p.strip() != ""]
    if not parts:
        raise ParseError(f"Expression invalide: '{expr}'")

    coeffs: Dict[str, float] = {}
    const_sum = 0.0

    for term in parts:
        m = _find_var(term)
        if m:
            var = m.group(0)
            coeff_str = term[:m.start()].replace("*", "").replace(" ", "")
            if coeff_str in ("", "+"):
                coeff = 1.0
            elif coeff_str == "-":
                coeff = -1.0
            else:
                try:
                    coeff = float(coeff_str)
                except ValueError:
                    raise ParseError(f"Terme invalide '{term}' (coeff non numérique)")
            coeffs[var] = coeffs.get(var, 0.0) + coeff
        else:
            try:
                const_sum += float(term.replace("*", "").replace(" ", ""))
            except ValueError:
                raise ParseError(f"Terme invalide '{term}' (ni variable ni constante)")

    coeffs = {v: c for v, c in coeffs.items() if abs(c) > 0.0}
    if not coeffs and const_sum == 0.0:
        raise ParseError(f"Expression sans variables ni constantes: '{expr}'")
    return coeffs, const_sum

# ---------------------------------------------------
# Dossier de données -> LinearProgram
# ---------------------------------------------------
def _parse_variables(path: str, lp: LinearProgram) -> Dict[str, int]:
    index: Dict[str, int] = {}
    allowed_types = {k.value for k in VariableKind}
    for i, row in enumerate(_read_csv_dicts(path, ["name", "low", "up", "type"]), start=2):
        name = row["name"]
        if not name:
            raise ParseError(f"{path}:{i}: 'name' vide")
        if name in index:
            raise ParseError(f"{path}:{i}: variable dupliquée: '{name}'")

        vtype = row["type"].lower() if row["type"] else "continuous"
        if vtype not in allowed_types:
            raise ParseError(f"{path}:{i}: type inconnu '{row['type']}' (attendu: {sorted(allowed_types)})")

        low = _parse_float("low", row["low"], path, i, allow_empty=True)
        up = _parse_float("up", row["up"], path, i, allow_empty=True)
        try:
            index[name] = lp.add_variable(name, VariableKind(vtype), low, up)
        except ModelError as e:
            raise ParseError(f"{path}:{i}: {e}")

    if not index:
        raise ParseError(f"{path}: aucune variable déclarée")
    return index

def _parse_objective(path: str, lp: LinearProgram, index: Dict[str, int]) -> None:
    coeffs: Dict[int, float] = {}
    senses = set()
    for i, row in enumerate(_read_csv_dicts(path, ["var", "coeff", "sense"]), start=2):
        var = row["var"]
        if not var:
            raise ParseError(f"{path}:{i}: 'var' vide")
        if var not in index:
            raise ParseError(f"{path}:{i}: variable '{var}' non déclarée dans variables.csv")
        sense = row["sense"].lower()
        if sense not in {"min", "max"}:
            raise ParseError(f"{path}:{i}: 'sense' doit être 'min' ou 'max' (reçu '{row['sense']}')")
        if index[var] in coeffs:
            raise ParseError(f"{path}:{i}: variable '{var}' dupliquée dans l'objectif")
        coeffs[index[var]] = _parse_float("coeff", row["coeff"], path, i)
        senses.add(sense)

    if not coeffs:
        raise ParseError(f"{path}: objectif vide")
    if len(senses) != 1:
        raise ParseError(f"{path}: 'sense' doit être constant (tout 'min' ou tout 'max')")
    lp.set_objective(coeffs, ObjectiveSense(senses.pop()))

def _parse_constraints(path: str, lp: LinearProgram, index: Dict[str, int]) -> None:
    seen_names = set()
    for i, row in enumerate(_read_csv_dicts(path, ["name", "expr", "sense", "rhs"]), start=2):
        orig_name = row["name"] or f"c_{i}"

        # renommage automatique en cas de doublon
        name = orig_name
        k = 2
        while name in seen_names:
            name = f"{orig_name}#{k}"
            k += 1
        if name != orig_name:
            logger.warning(
                "%s:%d: nom de contrainte dupliqué '%s' -> renommé en '%s'", path, i, orig_name, name
            )
        seen_names.add(name)

        bound = _SENSES.get(row["sense"])
        if bound is None:
            raise ParseError(f"{path}:{i}: sense doit être <=, >=, == ou range (reçu '{row['sense']}')")
        rhs = _parse_float("rhs", row["rhs"], path, i)

        try:
            coeffs, const_sum = parse_linear_expr(row["expr"])
        except ParseError as e:
            raise ParseError(f"{path}:{i}: {e}")
        for v in coeffs:
            if v not in index:
                raise ParseError(f"{path}:{i}: variable '{v}' utilisée dans expr mais non déclarée")
        by_index = {index[v]: c for v, c in coeffs.items()}

        # la constante du LHS passe à droite
        if bound is ConstraintBound.DOUBLE:
            rhs_up = _parse_float("rhs_up", row.get("rhs_up", ""), path, i)
            try:
                lp.add_constraint(by_index, bound, lower=rhs - const_sum, upper=rhs_up - const_sum, name=name)
            except ModelError as e:
                raise ParseError(f"{path}:{i}: {e}")
        else:
            lp.add_constraint(by_index, bound, rhs=rhs - const_sum, name=name)

    if not seen_names:
        raise ParseError(f"{path}: aucune contrainte fournie")

def parse_data_dir(data_dir: str) -> LinearProgram:
    """
    Parse le dossier de données contenant:
      - variables.csv : name, low, up, type
      - objective.csv (ou objectives.csv) : var, coeff, sense
      - constraints.csv: name, expr, sense, rhs [, rhs_up]
    Vérifications:
      - variables uniques, types valides, low <= up
      - objectif: sense constant (min|max), var déclarées, coeff numériques
      - contraintes: sense ∈ {<=,>=,==,range}, rhs numérique, vars déclarées
    Une variable sans low ni up garde les bornes par défaut du moteur.
    """
    if not os.path.isdir(data_dir):
        raise ParseError(f"Dossier introuvable: {data_dir}")

    var_path = os.path.join(data_dir, "variables.csv")
    obj_path = _first_existing(
        os.path.join(data_dir, "objective.csv"),
        os.path.join(data_dir, "objectives.csv"),
    )
    con_path = os.path.join(data_dir, "constraints.csv")
    _require_file(var_path)
    _require_file(con_path)

    lp = LinearProgram(os.path.basename(os.path.normpath(data_dir)) or "LPModel")
    index = _parse_variables(var_path, lp)
    _parse_objective(obj_path, lp, index)
    _parse_constraints(con_path, lp, index)
    return lp


__all__ = ["ParseError", "parse_linear_expr", "parse_data_dir"]
