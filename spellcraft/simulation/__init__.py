"""
Simulation module - scenariusze starć.

Zawiera:
- Encounter: Caster z losowym zestawem spelli kontra fala wrogów
- EncounterConfig: Parametry starcia
"""

from .encounter import Encounter, EncounterConfig

__all__ = ["Encounter", "EncounterConfig"]
