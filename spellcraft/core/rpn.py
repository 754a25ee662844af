"""
Ewaluator wyrażeń w odwrotnej notacji polskiej (RPN).

Wszystkie liczby balansu (obrażenia, koszt many, cooldown, prędkość,
liczniki, opóźnienia) są zapisane w danych jako formuły RPN i
rozwiązywane w runtime względem zmiennych kontekstu.

GRAMATYKA:
═══════════════════════════════════════════════════════════════════

    Tokeny oddzielone białymi znakami:
        - nazwa zmiennej   (power, wave, base, ...)
        - literał          (5, 1.5, -3)
        - operator         + - * / %

    Każdy token jest rozwiązywany w kolejności:
        1. zmienna   → push wartości
        2. literał   → push wartości
        3. operator  → pop b, pop a, push (a op b)

    RPN nie potrzebuje priorytetów operatorów - kolejność wynika
    z samego zapisu.

PRZYKŁADY:
═══════════════════════════════════════════════════════════════════

    "3 4 +"                     → 7
    "base wave 5 * +"           → base + wave * 5
    "power 2 *"                 → power * 2
    "10 3 /"   (int)            → 3      (dzielenie obcinające)
    "-7 2 /"   (int)            → -3     (obcinanie w stronę zera)
    "10 4 /"   (float)          → 2.5

DWA WARIANTY:
═══════════════════════════════════════════════════════════════════

    evaluate()        - int   (liczniki, dyskretne czasy)
    evaluate_float()  - float (obrażenia, prędkość, mana)

    Wersje safe_* nigdy nie rzucają wyjątku - logują ostrzeżenie
    i zwracają wartość awaryjną. Silnik używa WYŁĄCZNIE wersji safe.
    Wersje rzucające są dla walidacji danych (patrz validation.py).
"""

from __future__ import annotations
import logging
import math
from typing import Callable, Dict, List, Mapping, Optional, TypeVar, Union

from .errors import DivisionByZeroError, MalformedExpressionError, SpellcraftError

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)

# Formuła w YAML może przyjść jako liczba (np. `cooldown: 2`)
Expression = Union[str, int, float, None]

OPERATORS = ("+", "-", "*", "/", "%")


# ═══════════════════════════════════════════════════════════════════════════
# ARYTMETYKA
# ═══════════════════════════════════════════════════════════════════════════

def _int_div(a: int, b: int) -> int:
    """Dzielenie całkowite obcinające w stronę zera."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _int_mod(a: int, b: int) -> int:
    """Reszta ze znakiem dzielnej (spójna z _int_div)."""
    return a - b * _int_div(a, b)


_INT_OPS: Dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _int_div,
    "%": _int_mod,
}

_FLOAT_OPS: Dict[str, Callable[[float, float], float]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
    "%": math.fmod,
}


def _parse_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


def _parse_float(token: str) -> Optional[float]:
    try:
        value = float(token)
    except ValueError:
        return None
    # "nan" / "inf" nie są literałami formuł
    return value if math.isfinite(value) else None


# ═══════════════════════════════════════════════════════════════════════════
# WSPÓLNA PĘTLA
# ═══════════════════════════════════════════════════════════════════════════

def _normalize(expression: Expression) -> str:
    if expression is None:
        raise MalformedExpressionError("", "expression is missing")
    if isinstance(expression, (int, float)) and not isinstance(expression, bool):
        return str(expression)
    if not isinstance(expression, str):
        raise MalformedExpressionError(repr(expression), "expression is not a string")
    if not expression.strip():
        raise MalformedExpressionError(expression, "expression is empty")
    return expression


def _reduce(
    expression: Expression,
    variables: Optional[Mapping[str, N]],
    parse_literal: Callable[[str], Optional[N]],
    operators: Mapping[str, Callable[[N, N], N]],
) -> N:
    """
    Jedno przejście od lewej do prawej ze stosem operandów.

    Raises:
        MalformedExpressionError: Pusty string, za mało operandów,
            nieznany token, stos nie zredukowany do jednej wartości
        DivisionByZeroError: Zero po prawej stronie `/` lub `%`
    """
    text = _normalize(expression)
    variables = variables or {}
    stack: List[N] = []

    for token in text.split():
        if token in variables:
            stack.append(variables[token])
            continue

        literal = parse_literal(token)
        if literal is not None:
            stack.append(literal)
            continue

        op = operators.get(token)
        if op is None:
            raise MalformedExpressionError(text, f"unknown token '{token}'")
        if len(stack) < 2:
            raise MalformedExpressionError(
                text, f"operator '{token}' needs two operands, stack has {len(stack)}"
            )

        b = stack.pop()
        a = stack.pop()
        if token in ("/", "%") and b == 0:
            raise DivisionByZeroError(text, token)
        stack.append(op(a, b))

    if len(stack) != 1:
        raise MalformedExpressionError(
            text, f"expected exactly one value at the end, got {len(stack)}"
        )
    return stack[0]


# ═══════════════════════════════════════════════════════════════════════════
# API PUBLICZNE
# ═══════════════════════════════════════════════════════════════════════════

def evaluate(expression: Expression, variables: Optional[Mapping[str, int]] = None) -> int:
    """
    Ewaluuje wyrażenie RPN jako liczbę całkowitą.

    Args:
        expression: Np. "base wave 5 * +"
        variables: Mapa nazwa -> wartość

    Returns:
        int: Wynik

    Example:
        >>> evaluate("base wave 5 * +", {"base": 95, "wave": 2})
        105
    """
    return _reduce(expression, variables, _parse_int, _INT_OPS)


def evaluate_float(
    expression: Expression,
    variables: Optional[Mapping[str, float]] = None,
) -> float:
    """
    Ewaluuje wyrażenie RPN jako float.

    Example:
        >>> evaluate_float("power 1.5 *", {"power": 10})
        15.0
    """
    return float(_reduce(expression, variables, _parse_float, _FLOAT_OPS))


def safe_evaluate(
    expression: Expression,
    variables: Optional[Mapping[str, int]],
    fallback: int,
) -> int:
    """Jak evaluate(), ale przy błędzie loguje ostrzeżenie i zwraca fallback."""
    try:
        return evaluate(expression, variables)
    except SpellcraftError as exc:
        logger.warning("RPN safe_evaluate failed for %r: %s", expression, exc)
        return fallback


def safe_evaluate_float(
    expression: Expression,
    variables: Optional[Mapping[str, float]],
    fallback: float,
) -> float:
    """Jak evaluate_float(), ale przy błędzie loguje ostrzeżenie i zwraca fallback."""
    try:
        return evaluate_float(expression, variables)
    except SpellcraftError as exc:
        logger.warning("RPN safe_evaluate_float failed for %r: %s", expression, exc)
        return fallback
