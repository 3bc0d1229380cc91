from __future__ import annotations


class LPAdapterError(Exception):
    """Racine de toutes les erreurs levées par lpAdapter."""


class ModelError(LPAdapterError, ValueError):
    """Modèle incohérent (index de variable inconnu, bornes inversées...)."""


class EmptyModelError(LPAdapterError):
    """Le modèle ne contient aucune variable: rien n'est envoyé au moteur."""


class EngineCreationFailure(LPAdapterError):
    """Le moteur n'a pas pu créer son problème."""


class ParseError(LPAdapterError):
    pass


__all__ = [
    "LPAdapterError",
    "ModelError",
    "EmptyModelError",
    "EngineCreationFailure",
    "ParseError",
]
