"""
Relics module - pasywne przedmioty gracza.

Zawiera:
- Relic: Trigger + efekt z relics.yaml
- RelicTrigger: take-damage, on-kill
- RelicEffect: gain-mana, gain-spellpower (też jednorazowy do castu)
- RelicManager: Ładowanie, oferty co 3 fale, wybór
"""

from .effects import RelicEffect, GainMana, GainSpellPower, GainSpellPowerOnce, create_effect
from .triggers import RelicTrigger, DamageTrigger, KillTrigger, create_trigger
from .relic import Relic
from .relic_manager import RelicManager

__all__ = [
    "RelicEffect", "GainMana", "GainSpellPower", "GainSpellPowerOnce", "create_effect",
    "RelicTrigger", "DamageTrigger", "KillTrigger", "create_trigger",
    "Relic", "RelicManager",
]
