"""
Walidacja danych - każda formuła z YAML przez RZUCAJĄCY ewaluator.

Silnik przy błędnej formule po cichu (z ostrzeżeniem) wraca do
wartości domyślnej. Ten moduł jest dla autorów danych: zbiera
wszystkie problemy naraz, zanim gra je "połknie".

CO JEST SPRAWDZANE:
═══════════════════════════════════════════════════════════════════

    spells.yaml   - pola formuł spelli i modyfikatorów (float)
                    zmienne: power, wave + nazwy pól tego wpisu
    classes.yaml  - health, mana, mana_regeneration, spellpower,
                    speed (float), zmienna: wave
    enemies.yaml  - count, hp, speed, delay każdego spawnu (int)
                    zmienne: base, wave
                    oraz sequence (same dodatnie liczby całkowite)
    relics.yaml   - effect.amount (int), zmienna: wave
                    oraz znane typy triggerów i efektów

Użycie:
    >>> issues = validate_all(ConfigLoader("data/"))
    >>> for issue in issues:
    ...     print(issue)
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .config_loader import ConfigLoader, SpellCatalog
from .errors import MalformedExpressionError, SpellcraftError
from .rpn import Expression, evaluate, evaluate_float

logger = logging.getLogger(__name__)

# Ścieżki pól-formuł we wpisie spella (kropka = zagnieżdżenie)
SPELL_FORMULA_FIELDS = (
    "damage.amount",
    "mana_cost",
    "cooldown",
    "projectile.speed",
    "projectile.lifetime",
    "damage_multiplier",
    "mana_multiplier",
    "mana_adder",
    "speed_multiplier",
    "cooldown_multiplier",
    "delay",
    "angle",
    "force",
    "count",
    "range",
    "N",
    "spray",
    "secondary_damage",
    "secondary_projectile.speed",
    "secondary_projectile.lifetime",
)

# Nazwy, pod którymi rozwiązane pola są widoczne w kolejnych formułach
RESOLVED_NAMES = (
    "damage", "mana_cost", "cooldown", "speed", "lifetime",
    "damage_multiplier", "mana_multiplier", "mana_adder", "speed_multiplier",
    "cooldown_multiplier", "delay", "angle", "force", "count", "range", "N",
    "spray", "secondary_speed", "secondary_lifetime",
)

CLASS_FORMULA_FIELDS = ("health", "mana", "mana_regeneration", "spellpower", "speed")
SPAWN_FORMULA_FIELDS = ("count", "hp", "speed", "delay")
RELIC_FORMULA_FIELDS = ("effect.amount",)


@dataclass
class ValidationIssue:
    """
    Jedna błędna formuła.

    Attributes:
        source: Plik źródłowy ("spells", "classes", "enemies", "relics")
        key: Klucz wpisu (np. "arcane_bolt", "Easy[0]")
        field: Ścieżka pola (np. "damage.amount")
        expression: Treść formuły
        error: Wyjątek zgłoszony przez ewaluator
    """
    source: str
    key: str
    field: str
    expression: Expression
    error: SpellcraftError

    def __str__(self) -> str:
        return f"[{self.source}] {self.key}.{self.field}: {self.error}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "key": self.key,
            "field": self.field,
            "expression": self.expression,
            "error": str(self.error),
        }


# ═══════════════════════════════════════════════════════════════════════════
# POMOCNICZE
# ═══════════════════════════════════════════════════════════════════════════

def _field_values(entry: Mapping[str, Any], paths) -> Iterator[Tuple[str, Expression]]:
    for path in paths:
        node: Any = entry
        for part in path.split("."):
            if not isinstance(node, Mapping):
                node = None
                break
            node = node.get(part)
        if node is not None:
            yield path, node


def _check(
    source: str,
    key: str,
    entry: Mapping[str, Any],
    paths,
    variables: Mapping[str, float],
    evaluator: Callable[[Expression, Mapping[str, Any]], float],
) -> List[ValidationIssue]:
    issues = []
    for path, expression in _field_values(entry, paths):
        try:
            evaluator(expression, variables)
        except SpellcraftError as exc:
            issues.append(ValidationIssue(source, key, path, expression, exc))
    return issues


def _check_sequence(key: str, spawn: Mapping[str, Any]) -> List[ValidationIssue]:
    sequence = spawn.get("sequence")
    if not sequence:
        return []
    bad = [n for n in sequence if not isinstance(n, int) or n <= 0]
    if not bad:
        return []
    text = str(list(sequence))
    error = MalformedExpressionError(text, f"batch sizes must be positive integers, got {bad}")
    return [ValidationIssue("enemies", key, "sequence", text, error)]


# ═══════════════════════════════════════════════════════════════════════════
# WALIDATORY
# ═══════════════════════════════════════════════════════════════════════════

def validate_catalog(
    catalog: SpellCatalog,
    power: float = 10,
    wave: int = 1,
) -> List[ValidationIssue]:
    """
    Sprawdza formuły wszystkich wpisów katalogu.

    Args:
        catalog: Katalog spelli
        power: Przykładowy spell power
        wave: Przykładowa fala
    """
    variables: Dict[str, float] = {name: 1.0 for name in RESOLVED_NAMES}
    variables.update({"power": power, "wave": wave})
    issues: List[ValidationIssue] = []
    for key, entry in catalog.items():
        issues.extend(_check("spells", key, entry or {}, SPELL_FORMULA_FIELDS, variables, evaluate_float))
    return issues


def validate_classes(classes: Mapping[str, Mapping[str, Any]], wave: int = 1) -> List[ValidationIssue]:
    """Sprawdza formuły statystyk klas gracza."""
    issues: List[ValidationIssue] = []
    for class_id, data in classes.items():
        issues.extend(
            _check("classes", class_id, data or {}, CLASS_FORMULA_FIELDS, {"wave": wave}, evaluate_float)
        )
    return issues


def validate_levels(
    levels: Mapping[str, Mapping[str, Any]],
    enemies: Mapping[str, Mapping[str, Any]],
    wave: int = 1,
) -> List[ValidationIssue]:
    """Sprawdza formuły spawnów (ewaluator całkowity) i rozmiary paczek."""
    issues: List[ValidationIssue] = []
    for level_name, level in levels.items():
        for index, spawn in enumerate((level or {}).get("spawns", [])):
            enemy = enemies.get(spawn.get("enemy")) or {}
            variables = {"base": int(enemy.get("hp", 0)), "wave": wave}
            issues.extend(
                _check("enemies", f"{level_name}[{index}]", spawn, SPAWN_FORMULA_FIELDS, variables, evaluate)
            )
            issues.extend(_check_sequence(f"{level_name}[{index}]", spawn))
    return issues


def validate_relics(relics: Mapping[str, Mapping[str, Any]], wave: int = 1) -> List[ValidationIssue]:
    """Sprawdza typy triggerów i efektów oraz formuły kwot reliktów."""
    from ..relics.effects import create_effect
    from ..relics.triggers import create_trigger

    issues: List[ValidationIssue] = []
    for relic_id, data in relics.items():
        data = data or {}
        trigger = data.get("trigger") or {}
        effect = data.get("effect") or {}
        try:
            create_trigger(relic_id, trigger, lambda: None)
        except SpellcraftError as exc:
            issues.append(ValidationIssue("relics", relic_id, "trigger.type", trigger.get("type"), exc))
        try:
            create_effect(relic_id, effect)
        except SpellcraftError as exc:
            issues.append(ValidationIssue("relics", relic_id, "effect.type", effect.get("type"), exc))
        issues.extend(_check("relics", relic_id, data, RELIC_FORMULA_FIELDS, {"wave": wave}, evaluate))
    return issues


def validate_all(config: Optional[ConfigLoader] = None, strict: bool = False) -> List[ValidationIssue]:
    """
    Waliduje wszystkie pliki danych.

    Args:
        config: Źródło danych (domyślnie data/)
        strict: True = pierwszy problem jest rzucany dalej

    Returns:
        List[ValidationIssue]: Pusta lista = dane poprawne

    Raises:
        SpellcraftError: Tylko w trybie strict
    """
    config = config or ConfigLoader()
    issues = validate_catalog(config.load_spell_catalog())
    issues += validate_classes(config.load_class_definitions())
    issues += validate_levels(config.load_levels(), config.load_enemy_definitions())
    issues += validate_relics(config.load_relic_definitions())

    for issue in issues:
        logger.warning("Invalid formula %s", issue)
    if strict and issues:
        raise issues[0].error
    logger.info("Validation finished: %d issue(s)", len(issues))
    return issues
