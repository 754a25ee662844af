"""
Spells module - spelle, modyfikatory i ich składanie.

Zawiera:
- StatBlock: Stos modyfikatorów statystyk (ADD / MUL)
- ProjectileManager: Rejestr wystrzelonych pocisków
- Spell: Bazowa klasa spella (stan, aktywacja, formuły)
- BASE_SPELLS / MODIFIER_SPELLS: Rejestry klas
- SpellBuilder: Losowe składanie spelli z katalogu
"""

from .stat_block import StatBlock, ValueMod, ModOp, EMPTY_STAT_BLOCK
from .projectile import Projectile, ProjectileManager
from .spell import Spell, SpellState, CastContext, Impact
from .base_spells import BASE_SPELLS
from .modifiers import MODIFIER_SPELLS, ModifierSpell
from .builder import SpellBuilder, BuildContext, describe_spell

__all__ = [
    "StatBlock", "ValueMod", "ModOp", "EMPTY_STAT_BLOCK",
    "Projectile", "ProjectileManager",
    "Spell", "SpellState", "CastContext", "Impact",
    "BASE_SPELLS", "MODIFIER_SPELLS", "ModifierSpell",
    "SpellBuilder", "BuildContext", "describe_spell",
]
