"""
Core module - podstawowe komponenty silnika.

Zawiera:
- evaluate / evaluate_float: Ewaluator formuł RPN (+ wersje safe_*)
- errors: Hierarchia wyjątków silnika
- GameRNG: Deterministyczny generator losowości
- Vec2: Wektor 2D (kierunki, pozycje)
- ConfigLoader / SpellCatalog: Wczytywanie danych z YAML
- validation: Walidacja formuł w plikach danych
"""

from .errors import (
    SpellcraftError,
    MalformedExpressionError,
    DivisionByZeroError,
    MissingCatalogEntryError,
    InvalidCompositionStateError,
    RelicDefinitionError,
)
from .rpn import evaluate, evaluate_float, safe_evaluate, safe_evaluate_float
from .rng import GameRNG
from .vector import Vec2
from .config_loader import ConfigLoader, SpellCatalog
from .validation import ValidationIssue, validate_all, validate_catalog

__all__ = [
    "SpellcraftError", "MalformedExpressionError", "DivisionByZeroError",
    "MissingCatalogEntryError", "InvalidCompositionStateError", "RelicDefinitionError",
    "evaluate", "evaluate_float", "safe_evaluate", "safe_evaluate_float",
    "GameRNG", "Vec2", "ConfigLoader", "SpellCatalog",
    "ValidationIssue", "validate_all", "validate_catalog",
]
