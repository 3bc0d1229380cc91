from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SolverConfig:
    """Réglages de l'adaptateur.

    - msg: laisse CBC écrire son journal sur la sortie standard
    - time_limit: limite de temps en secondes (None = pas de limite)
    - cbc_path: exécutable CBC à utiliser à la place de celui livré avec PuLP
    - progress: barres tqdm pendant la traduction du modèle
    - surface_suboptimal: renvoie la solution entière sous-optimale au lieu d'un échec
    - surface_presolved: idem pour un modèle résolu par le presolve
    """

    msg: bool = False
    time_limit: Optional[int] = None
    cbc_path: Optional[str] = None
    progress: bool = False
    surface_suboptimal: bool = False
    surface_presolved: bool = False

    def __post_init__(self) -> None:
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError(f"time_limit doit être positif (reçu: {self.time_limit})")


__all__ = ["SolverConfig"]
