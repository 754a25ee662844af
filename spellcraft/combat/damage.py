"""
Obrażenia i cele, które można trafić.

TYPY OBRAŻEŃ:
═══════════════════════════════════════════════════════════════════

    Typ obrażeń jest czysto informacyjny (log, liczby obrażeń na
    ekranie) - silnik nie ma pancerza ani odporności. Spelle
    czytają typ z pola `damage.type` w katalogu.

        physical, arcane, fire, frost, dark, light

HITTABLE:
═══════════════════════════════════════════════════════════════════

    Hittable to wszystko, co pocisk może trafić: gracz lub potwór.

    - team: PLAYER lub MONSTERS (pocisk rani tylko przeciwną drużynę)
    - hp / max_hp: punkty życia (int, jak w danych)
    - position: pozycja w świecie (Vec2)
    - impulse: suma impulsów fizycznych (knockback) do odebrania
      przez zewnętrzny silnik fizyki

    Po każdym trafieniu, które odjęło HP, wywoływane są callbacki
    on_damage(cel, ile); przy hp <= 0 potem callbacki on_death (raz).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
import logging
from typing import Callable, List, Optional

from ..core.vector import Vec2

logger = logging.getLogger(__name__)


class DamageType(Enum):
    """Typ obrażeń (kosmetyczny)."""
    PHYSICAL = auto()
    ARCANE = auto()
    FIRE = auto()
    FROST = auto()
    DARK = auto()
    LIGHT = auto()

    @classmethod
    def parse(cls, name: Optional[str], default: Optional["DamageType"] = None) -> "DamageType":
        """
        Parsuje nazwę typu (bez rozróżniania wielkości liter).

        Nieznana nazwa -> ostrzeżenie i `default` (ARCANE).
        """
        fallback = default or cls.ARCANE
        if not name:
            return fallback
        try:
            return cls[str(name).upper()]
        except KeyError:
            logger.warning("Unknown damage type '%s', using %s", name, fallback.name)
            return fallback


class Team(Enum):
    """Drużyna celu."""
    PLAYER = auto()
    MONSTERS = auto()


@dataclass(frozen=True)
class Damage:
    """
    Porcja obrażeń zadawana przy trafieniu.

    Attributes:
        amount (int): Wartość (zaokrąglona przez spell)
        damage_type (DamageType): Typ obrażeń
    """
    amount: int
    damage_type: DamageType = DamageType.ARCANE


@dataclass(eq=False)
class Hittable:
    """
    Cel, który można trafić pociskiem.

    Attributes:
        id (str): Identyfikator (do logów)
        team (Team): Drużyna
        hp (int): Aktualne HP
        max_hp (int): Maksymalne HP
        position (Vec2): Pozycja w świecie
        impulse (Vec2): Zakumulowany impuls (knockback)
    """
    id: str
    team: Team
    hp: int
    max_hp: int = 0
    position: Vec2 = field(default_factory=Vec2)
    impulse: Vec2 = field(default_factory=Vec2)
    on_damage: List[Callable[["Hittable", int], None]] = field(default_factory=list)
    on_death: List[Callable[["Hittable"], None]] = field(default_factory=list)

    def __post_init__(self):
        if self.max_hp <= 0:
            self.max_hp = self.hp

    def is_alive(self) -> bool:
        return self.hp > 0

    def damage(self, damage: Damage) -> int:
        """
        Zadaje obrażenia.

        Args:
            damage: Porcja obrażeń

        Returns:
            int: Faktycznie odjęte HP
        """
        if not self.is_alive():
            return 0

        dealt = min(self.hp, max(0, damage.amount))
        self.hp -= dealt
        if dealt > 0:
            for listener in list(self.on_damage):
                listener(self, dealt)
        if self.hp <= 0:
            self.hp = 0
            for callback in list(self.on_death):
                callback(self)
        return dealt

    def apply_impulse(self, impulse: Vec2) -> None:
        """Dodaje impuls fizyczny (odbierany przez silnik ruchu)."""
        self.impulse = self.impulse + impulse

    def set_max_hp(self, max_hp: int, preserve_percentage: bool = True) -> None:
        """
        Ustawia nowe max HP.

        Args:
            max_hp: Nowa wartość
            preserve_percentage: True = zachowaj % HP, False = pełne HP
        """
        if preserve_percentage and self.max_hp > 0:
            ratio = self.hp / self.max_hp
            self.max_hp = max_hp
            self.hp = round(ratio * max_hp)
        else:
            self.max_hp = max_hp
            self.hp = max_hp

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "team": self.team.name,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "position": [round(self.position.x, 2), round(self.position.y, 2)],
        }
