"""
Efekty reliktów.

TYPY EFEKTÓW:
═══════════════════════════════════════════════════════════════════════════

    gain-mana                 - +kwota many (do max_mana)
    gain-spellpower           - +kwota spell power (na stałe)
    gain-spellpower           - +kwota spell power tylko do końca
      until: cast-spell         następnego castu; activate przy
                                oczekującym bonusie nic nie robi

Kwota to formuła RPN ewaluowana jako INT ze zmienną `wave`
(fala areny castera). Błędna formuła = ostrzeżenie i 0.

FORMAT (relics.yaml):
═══════════════════════════════════════════════════════════════════════════

    effect:
      type: "gain-spellpower"
      amount: "wave 10 *"
      until: "cast-spell"      # opcjonalne
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TYPE_CHECKING

from ..core.errors import RelicDefinitionError
from ..core.rpn import Expression, safe_evaluate

if TYPE_CHECKING:
    from ..spells.spell import Spell
    from ..units.spell_caster import SpellCaster

logger = logging.getLogger(__name__)


def caster_wave(caster: "SpellCaster") -> int:
    return caster.arena.wave if caster.arena else 1


# ═══════════════════════════════════════════════════════════════════════════
# BAZA
# ═══════════════════════════════════════════════════════════════════════════

class RelicEffect(ABC):
    """
    Efekt odpalany przez trigger reliktu.

    Attributes:
        relic_name (str): Nazwa reliktu (do logów)
        amount (Expression): Formuła kwoty
    """

    kind = ""

    def __init__(self, relic_name: str, amount: Expression = None):
        self.relic_name = relic_name
        self.amount = amount

    def resolve_amount(self, caster: "SpellCaster") -> int:
        return safe_evaluate(self.amount, {"wave": caster_wave(caster)}, 0)

    @abstractmethod
    def activate(self, caster: "SpellCaster") -> int:
        """Aplikuje efekt. Zwraca zaaplikowaną kwotę."""

    def deactivate(self, caster: "SpellCaster") -> None:
        """Zdejmuje efekt (domyślnie nic do zdjęcia)."""


# ═══════════════════════════════════════════════════════════════════════════
# EFEKTY
# ═══════════════════════════════════════════════════════════════════════════

class GainMana(RelicEffect):
    """+mana."""

    kind = "gain-mana"

    def activate(self, caster: "SpellCaster") -> int:
        value = self.resolve_amount(caster)
        caster.gain_mana(value)
        logger.info("Relic %s: +%d mana (%d/%d)", self.relic_name, value, caster.mana, caster.max_mana)
        return value


class GainSpellPower(RelicEffect):
    """+spell power na stałe."""

    kind = "gain-spellpower"

    def activate(self, caster: "SpellCaster") -> int:
        value = self.resolve_amount(caster)
        caster.add_spell_power(value)
        logger.info("Relic %s: +%d spell power (formula %s)", self.relic_name, value, self.amount)
        return value


class GainSpellPowerOnce(RelicEffect):
    """
    Jednorazowy bonus spell power zdejmowany po następnym caście.

    Dopóki bonus czeka na cast, kolejne activate są ignorowane.
    deactivate zdejmuje czekający bonus razem z subskrypcją castu.
    """

    kind = "gain-spellpower"

    def __init__(self, relic_name: str, amount: Expression = None):
        super().__init__(relic_name, amount)
        self.pending = 0
        self._caster: Optional["SpellCaster"] = None

    @property
    def is_pending(self) -> bool:
        return self._caster is not None

    def activate(self, caster: "SpellCaster") -> int:
        if self.is_pending:
            logger.debug("Relic %s: buff already pending, ignoring", self.relic_name)
            return 0

        value = self.resolve_amount(caster)
        self.pending = value
        self._caster = caster
        caster.add_spell_power(value)
        caster.on_cast.append(self._on_cast)
        logger.info("Relic %s: +%d spell power until next cast", self.relic_name, value)
        return value

    def _on_cast(self, caster: "SpellCaster", spell: "Spell") -> None:
        logger.info("Relic %s: -%d spell power after %s", self.relic_name, self.pending, spell.display_name)
        self._clear()

    def _clear(self) -> None:
        caster = self._caster
        if caster is None:
            return
        caster.on_cast.remove(self._on_cast)
        caster.add_spell_power(-self.pending)
        self._caster = None
        self.pending = 0

    def deactivate(self, caster: "SpellCaster") -> None:
        self._clear()


# ═══════════════════════════════════════════════════════════════════════════
# REJESTR
# ═══════════════════════════════════════════════════════════════════════════

# (type, until) -> klasa efektu
RELIC_EFFECTS: Dict[Tuple[str, Optional[str]], Type[RelicEffect]] = {
    ("gain-mana", None): GainMana,
    ("gain-spellpower", None): GainSpellPower,
    ("gain-spellpower", "cast-spell"): GainSpellPowerOnce,
}


def create_effect(relic_name: str, data: Mapping[str, Any]) -> RelicEffect:
    """
    Tworzy efekt z wpisu `effect` reliktu.

    Raises:
        RelicDefinitionError: Nieznana para (type, until)
    """
    kind = data.get("type")
    until = data.get("until")
    effect_cls = RELIC_EFFECTS.get((kind, until))
    if effect_cls is None:
        label = kind if until is None else f"{kind} until {until}"
        raise RelicDefinitionError(relic_name, "effect", label)
    return effect_cls(relic_name, data.get("amount"))
