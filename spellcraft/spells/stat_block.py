"""
Modyfikatory statystyk spella.

ValueMod to para (operacja, wartość). StatBlock trzyma cztery
UPORZĄDKOWANE listy modyfikatorów - po jednej na statystykę.

APLIKACJA (lewy fold):
═══════════════════════════════════════════════════════════════════

    result = base
    for mod in mods:
        result = result + mod.value   (ADD)
        result = result * mod.value   (MUL)

    Kolejność ma znaczenie - to kolejność autorska:

        apply(10, [MUL 2, ADD 5]) == 25
        apply(10, [ADD 5, MUL 2]) == 30

    Brak normalizacji, sortowania czy deduplikacji.

NIEMUTOWALNOŚĆ:
═══════════════════════════════════════════════════════════════════

    StatBlock jest frozen. Łączenie bloków (merged) tworzy nowy
    obiekt, więc blok przekazany do jednej aktywacji spella nigdy
    nie "wycieka" do innej - nawet gdy aktywacje się nakładają.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, Tuple

STATS = ("damage", "mana", "cooldown", "speed")


class ModOp(Enum):
    """Operacja modyfikatora."""
    ADD = auto()
    MUL = auto()


@dataclass(frozen=True)
class ValueMod:
    """
    Pojedynczy modyfikator wartości.

    Example:
        >>> ValueMod(ModOp.MUL, 1.5).apply_to(10)
        15.0
    """
    op: ModOp
    value: float

    def apply_to(self, current: float) -> float:
        if self.op is ModOp.ADD:
            return current + self.value
        return current * self.value

    def to_dict(self) -> Dict[str, object]:
        return {"op": self.op.name.lower(), "value": self.value}


def add(value: float) -> ValueMod:
    return ValueMod(ModOp.ADD, value)


def mul(value: float) -> ValueMod:
    return ValueMod(ModOp.MUL, value)


@dataclass(frozen=True)
class StatBlock:
    """
    Cztery niezależne stosy modyfikatorów.

    Attributes:
        damage: Modyfikatory obrażeń
        mana: Modyfikatory kosztu many
        cooldown: Modyfikatory cooldownu
        speed: Modyfikatory prędkości pocisku
    """
    damage: Tuple[ValueMod, ...] = ()
    mana: Tuple[ValueMod, ...] = ()
    cooldown: Tuple[ValueMod, ...] = ()
    speed: Tuple[ValueMod, ...] = ()

    @staticmethod
    def apply(base: float, mods: Iterable[ValueMod]) -> float:
        """Lewy fold modyfikatorów na wartości bazowej."""
        result = base
        for mod in mods:
            result = mod.apply_to(result)
        return result

    def merged(self, other: StatBlock) -> StatBlock:
        """
        Nowy blok: najpierw modyfikatory self, potem other.

        Args:
            other: Blok doklejany na koniec każdego stosu
        """
        if other.is_empty():
            return self
        if self.is_empty():
            return other
        return StatBlock(
            damage=self.damage + other.damage,
            mana=self.mana + other.mana,
            cooldown=self.cooldown + other.cooldown,
            speed=self.speed + other.speed,
        )

    def is_empty(self) -> bool:
        return not (self.damage or self.mana or self.cooldown or self.speed)

    def to_dict(self) -> Dict[str, list]:
        return {stat: [m.to_dict() for m in getattr(self, stat)] for stat in STATS}


EMPTY_STAT_BLOCK = StatBlock()
