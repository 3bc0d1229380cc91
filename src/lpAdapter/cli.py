# **************************************************************************** #
#                                                                              #
#                                                         :::      ::::::::    #
#    cli.py                                             :+:      :+:    :+:    #
#                                                     +:+ +:+         +:+      #
#    By: Jvasseur <jvasseur@student.42.fr>          +#+  +:+       +#+         #
#                                                 +#+#+#+#+#+   +#+            #
#    Created: 2025/09/08 12:38:17 by Jvasseur          #+#    #+#              #
#    Updated: 2026/10/16 11:02:09 by Jvasseur         ###   ########.fr        #
#                                                                              #
# **************************************************************************** #

from __future__ import annotations
import argparse
import logging
import math
import sys
from typing import List, Optional

from .config import SolverConfig
from .engine import StatusCode
from .errors import ModelError, ParseError
from .model import ConstraintBound, LinearProgram, VariableBound
from .outcome import Outcome
from .parsing import parse_data_dir
from .solver import LinearProgramSolver


def _fmt_bound(b: float) -> str:
    return "∞" if math.isinf(b) else f"{b:g}"


def _lhs(lp: LinearProgram, coeffs) -> str:
    return " + ".join(f"{c:g}*{lp.variable(i).name}" for i, c in coeffs.items()) or "0"


def _status_label(code: int) -> str:
    try:
        return StatusCode(code).name.lower()
    except ValueError:
        return "inconnu"


def describe(lp: LinearProgram) -> str:
    """Petit récap lisible du modèle."""
    lines = [f"- Variables ({lp.variable_count()}): " + ", ".join(
        "{}[{}:{},{}]".format(v.name, v.kind.value, *map(_fmt_bound, v.get_bound()))
        if v.bound is VariableBound.DOUBLE else f"{v.name}[{v.kind.value}]"
        for v in lp.variables()
    )]
    obj = lp.objective()
    lines.append(f"- Objective: {obj.sense.value}  {_lhs(lp, obj.coefficients())}")
    lines.append(f"- Constraints ({lp.constraint_count()}):")
    for c in lp.constraints():
        if c.bound is ConstraintBound.DOUBLE:
            lines.append(f"  · {c.name}: {c.lower:.6g} <= {_lhs(lp, c.coefficients)} <= {c.upper:.6g}")
        else:
            lines.append(f"  · {c.name}: {_lhs(lp, c.coefficients)} {c.bound.value} {c.rhs:.6g}")
    return "\n".join(lines)


def report(lp: LinearProgram, outcome: Outcome, tol: float = 1e-6) -> str:
    """Statut, objectif, valeurs et marge de chaque contrainte à la solution."""
    lines = ["=== Résultat solveur (PuLP/CBC) ==="]
    if not outcome.ok:
        lines.append(f"Statut: {outcome.reason.value} (code {outcome.status})")
        lines.append(outcome.message)
        return "\n".join(lines)
    code = int(outcome.status)
    lines.append(f"Statut: {_status_label(code)} (code {code})")
    lines.append(f"Objectif ({lp.objective().sense.value}): {outcome.objective_value:.6g}")
    lines.append("")
    lines.append("Variables:")
    for var, val in zip(lp.variables(), outcome.solution):
        lines.append(f"  - {var.name} = {val:.6g}")
    lines.append("")
    lines.append("Contraintes:")
    for c in lp.constraints():
        act = c.activity(outcome.solution)
        low, up = c.get_bound()
        # marge = distance à la borne la plus proche, négative si violée
        slack = min(act - low, up - act)
        flag = "" if slack >= -tol else "  (violée)"
        lines.append(f"  - {c.name}: activité={act:.6g}, marge={slack:.6g}{flag}")
    return "\n".join(lines)


class UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """argparse sans sys.exit(2): les erreurs d'usage remontent à main()."""

    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="lp-adapter", description="Résout un LP/MILP décrit en CSV.")
    parser.add_argument("data_dir", help="dossier contenant variables.csv, objective.csv, constraints.csv")
    parser.add_argument("--max-seconds", type=int, default=None, help="limite de temps CBC")
    parser.add_argument("--cbc", default=None, help="chemin d'un exécutable CBC")
    parser.add_argument("--progress", action="store_true", help="barres de progression tqdm")
    parser.add_argument("--surface-suboptimal", action="store_true",
                        help="accepte une solution entière non prouvée optimale")
    parser.add_argument("--surface-presolved", action="store_true",
                        help="accepte une solution trouvée par le presolve")
    parser.add_argument("--msg", action="store_true", help="affiche le journal CBC")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argc: int, argv: List[str]) -> int:
    """
    Point d'entrée principal.
    Attendu: chemin d'un dossier contenant les CSV du modèle.
    """
    if argc < 2:
        print("Usage: lp-adapter <data_dir>", file=sys.stderr)
        return 1
    parser = build_parser()
    try:
        args = parser.parse_args(argv[1:])
    except UsageError as e:
        print(parser.format_usage().rstrip(), file=sys.stderr)
        print(f"Usage invalide: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        config = SolverConfig(
            msg=args.msg,
            time_limit=args.max_seconds,
            cbc_path=args.cbc,
            progress=args.progress,
            surface_suboptimal=args.surface_suboptimal,
            surface_presolved=args.surface_presolved,
        )
        model = parse_data_dir(args.data_dir)
    except (ParseError, ModelError) as e:
        print(f"Erreur de parsing: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration invalide: {e}", file=sys.stderr)
        return 1

    print("== PARSING OK ==")
    print(describe(model))
    print()
    print("== Résolution du problème linéaire ==")
    outcome = LinearProgramSolver(config).solve(model)
    print(report(model, outcome))
    return 0 if outcome.ok else 2


def run(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    return main(len(argv), argv)


if __name__ == "__main__":
    raise SystemExit(run())
