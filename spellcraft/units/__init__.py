"""
Units module - gracz i przeciwnicy.

Zawiera:
- SpellCaster: Jednostka z maną i slotami spelli
- PlayerClass / PlayerClassLoader: Statystyki klas skalowane falą
- SpawnPlan / resolve_spawn: Skalowanie spawnów przeciwników
"""

from .spell_caster import SpellCaster, SPELL_SLOTS
from .player_class import PlayerClass, PlayerClassLoader, DEFAULT_CLASS
from .enemy_scaling import EnemyDefinition, SpawnPlan, resolve_spawn, plan_wave

__all__ = [
    "SpellCaster", "SPELL_SLOTS",
    "PlayerClass", "PlayerClassLoader", "DEFAULT_CLASS",
    "EnemyDefinition", "SpawnPlan", "resolve_spawn", "plan_wave",
]
