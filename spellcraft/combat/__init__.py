"""
Combat module - cele, obrażenia i rozstrzyganie trafień.

Zawiera:
- DamageType: Typy obrażeń (ARCANE, FIRE, ...)
- Damage: Pojedyncza porcja obrażeń
- Hittable: Cel z HP, drużyną i pozycją
- Arena: Rejestr celów, targeting i rozstrzyganie pocisków
"""

from .damage import DamageType, Damage, Hittable, Team
from .arena import Arena, TargetQuery

__all__ = ["DamageType", "Damage", "Hittable", "Team", "Arena", "TargetQuery"]
