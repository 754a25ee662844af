"""
Relic - pasywny przedmiot gracza: trigger + efekt.

CYKL ŻYCIA:
═══════════════════════════════════════════════════════════════════════════

    init(caster)   - gracz wybrał relikt, trigger subskrybuje zdarzenia
    fire()         - trigger zadziałał, efekt jest aplikowany
    end()          - efekt zdjęty, trigger odpięty

FORMAT relics.yaml:
═══════════════════════════════════════════════════════════════════════════

    relics:
      golden_mask:
        name: "Golden Mask"
        description: "..."
        sprite: 1
        trigger:
          type: "take-damage"
        effect:
          type: "gain-spellpower"
          amount: "100"
          until: "cast-spell"
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from .effects import RelicEffect, create_effect
from .triggers import RelicTrigger, create_trigger

if TYPE_CHECKING:
    from ..units.spell_caster import SpellCaster

logger = logging.getLogger(__name__)


class Relic:
    """
    Relikt podpięty (lub nie) do castera.

    Attributes:
        id (str): Klucz z relics.yaml
        name (str): Wyświetlana nazwa
        description (str): Opis
        sprite (int): Indeks ikony
        trigger (RelicTrigger): Kiedy relikt działa
        effect (RelicEffect): Co robi
        caster (Optional[SpellCaster]): Właściciel po init()
        fire_count (int): Ile razy efekt został odpalony
    """

    def __init__(
        self,
        id: str,
        trigger: Mapping[str, Any],
        effect: Mapping[str, Any],
        name: Optional[str] = None,
        description: str = "",
        sprite: int = 0,
    ):
        """
        Raises:
            RelicDefinitionError: Nieznany typ triggera lub efektu
        """
        self.id = id
        self.name = name or id
        self.description = description
        self.sprite = sprite
        self.trigger: RelicTrigger = create_trigger(self.name, trigger, self.fire)
        self.effect: RelicEffect = create_effect(self.name, effect)
        self.caster: Optional["SpellCaster"] = None
        self.fire_count = 0

    @classmethod
    def from_dict(cls, relic_id: str, data: Mapping[str, Any]) -> "Relic":
        """Tworzy Relic z danych YAML."""
        return cls(
            id=relic_id,
            trigger=data.get("trigger") or {},
            effect=data.get("effect") or {},
            name=data.get("name", relic_id),
            description=data.get("description", ""),
            sprite=int(data.get("sprite", 0)),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # CYKL ŻYCIA
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        return self.caster is not None

    def init(self, caster: "SpellCaster") -> None:
        """Podpina relikt do castera (drugi init jest ignorowany)."""
        if self.caster is not None:
            logger.warning("Relic %s already belongs to %s", self.name, self.caster.id)
            return
        self.caster = caster
        self.trigger.subscribe(caster)

    def fire(self) -> int:
        """Aplikuje efekt. Zwraca zaaplikowaną kwotę."""
        caster = self.caster
        if caster is None:
            logger.warning("Relic %s fired without an owner", self.name)
            return 0

        amount = self.effect.activate(caster)
        self.fire_count += 1
        if caster.arena and caster.arena.event_logger:
            caster.arena.event_logger.log_relic_fired(caster.id, self.name, self.effect.kind, amount)
        return amount

    def end(self) -> None:
        """Zdejmuje efekt i odpina trigger."""
        if self.caster is None:
            return
        self.effect.deactivate(self.caster)
        self.trigger.unsubscribe()
        self.caster = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sprite": self.sprite,
            "trigger": self.trigger.kind,
            "effect": self.effect.kind,
            "active": self.is_active,
        }

    def __repr__(self) -> str:
        return f"Relic({self.name!r})"
