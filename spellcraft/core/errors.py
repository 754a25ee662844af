"""
Hierarchia wyjątków silnika.

TAKSONOMIA:
═══════════════════════════════════════════════════════════════════

    MalformedExpressionError     - błąd gramatyki/arności formuły RPN
    DivisionByZeroError          - dzielnik lub moduł równy zero
    MissingCatalogEntryError     - brak klucza w katalogu (niekrytyczny)
    InvalidCompositionStateError - niespójny stan podczas składania spella
    RelicDefinitionError         - nieznany typ triggera lub efektu reliktu

Ścieżki silnika (budowanie, castowanie) nigdy nie przepuszczają tych
wyjątków dalej - łapią je w miejscu ewaluacji i wracają do wartości
domyślnej. Rzucają je tylko narzędzia walidujące dane.
Wyjątek: RelicDefinitionError rzuca Relic.from_dict, a RelicManager
loguje go i pomija wadliwy wpis.
"""

from __future__ import annotations


class SpellcraftError(Exception):
    """Bazowy wyjątek silnika."""


class MalformedExpressionError(SpellcraftError, ValueError):
    """
    Formuła nie jest poprawnym wyrażeniem RPN.

    Attributes:
        expression: Wyrażenie, które nie przeszło parsowania
        reason: Krótki opis problemu
    """

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Malformed expression '{expression}': {reason}")


class DivisionByZeroError(SpellcraftError, ZeroDivisionError):
    """Prawy operand `/` lub `%` jest zerem."""

    def __init__(self, expression: str, operator: str):
        self.expression = expression
        self.operator = operator
        super().__init__(f"Division by zero in '{expression}' (operator '{operator}')")


class MissingCatalogEntryError(SpellcraftError, KeyError):
    """Klucz nie istnieje w katalogu spelli."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Catalog entry '{self.key}' not found"


class InvalidCompositionStateError(SpellcraftError):
    """Budowanie spella trafiło w stan, który nie powinien wystąpić."""


class RelicDefinitionError(SpellcraftError, ValueError):
    """
    Definicja reliktu ma nieznany typ triggera lub efektu.

    Attributes:
        relic: Nazwa reliktu
        part: "trigger" lub "effect"
        kind: Typ z danych
    """

    def __init__(self, relic: str, part: str, kind: object):
        self.relic = relic
        self.part = part
        self.kind = kind
        super().__init__(f"Relic '{relic}' has unknown {part} type '{kind}'")
