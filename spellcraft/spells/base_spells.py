"""
Spelle bazowe (liście łańcucha).

Każdy spell bazowy sam emituje pociski. Statystyki pochodzą z
katalogu (spells.yaml), a gdy pola brak - z wartości domyślnych
zdefiniowanych w klasie.

SPELLE:
═══════════════════════════════════════════════════════════════════

    arcane_bolt    - jeden pocisk w stronę celu
    arcane_spray   - N pocisków rozłożonych w wachlarz, krótki lifetime
    magic_missile  - pocisk w stronę najbliższego wroga
    arcane_blast   - pocisk, którego trafienie rozrzuca N odłamków
    railgun        - pocisk przebijający

Każdy _cast() oddaje sterowanie co najmniej raz
(`await asyncio.sleep(0)`) - efekt aktywacji "dzieje się w tym ticku".
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, Mapping, Type

from ..core.rpn import safe_evaluate_float
from ..core.vector import Vec2
from .spell import CastContext, Spell

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# ARCANE BOLT
# ═══════════════════════════════════════════════════════════════════════════

class ArcaneBolt(Spell):
    """Pojedynczy pocisk. Startowy spell każdej klasy."""

    key = "arcane_bolt"
    default_name = "Arcane Bolt"
    default_description = "Fires a single arcane bolt at the target."

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        self.emit(origin, target - origin, context)
        await asyncio.sleep(0)


# ═══════════════════════════════════════════════════════════════════════════
# ARCANE SPRAY
# ═══════════════════════════════════════════════════════════════════════════

class ArcaneSpray(Spell):
    """
    Wachlarz pocisków o krótkim czasie życia.

    Pola katalogu:
        N: Liczba pocisków (domyślnie 7)
        spray: Szerokość wachlarza jako ułamek 180° (domyślnie 60°)
        projectile.lifetime: Czas życia pocisku (domyślnie 0.5 s)
    """

    key = "arcane_spray"
    default_name = "Arcane Spray"
    default_description = "Sprays a fan of short-lived arcane shards."

    SHOT_INTERVAL = 0.02

    def __init__(self, owner=None):
        super().__init__(owner)
        self.base_damage = 3
        self.base_mana = 1
        self.base_cooldown = 0.5
        self.base_speed = 8
        self.count = 7
        self.spray_angle = 60.0
        self.lifetime = 0.5

    def load_attributes(self, data: Mapping[str, Any], variables: Mapping[str, float]) -> None:
        super().load_attributes(data, variables)
        self.count = max(1, round(self._resolve("N", data.get("N"), self.count)))
        spray = self._resolve("spray", data.get("spray"), self.spray_angle / 180.0)
        self.spray_angle = spray * 180.0
        projectile = data.get("projectile") or {}
        self.lifetime = self._resolve("lifetime", projectile.get("lifetime"), self.lifetime)

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        base_angle = (target - origin).angle_degrees()
        if self.count == 1:
            angles = [base_angle]
        else:
            step = self.spray_angle / (self.count - 1)
            start = base_angle - self.spray_angle / 2
            angles = [start + i * step for i in range(self.count)]

        for angle in angles:
            self.emit(origin, Vec2.from_angle(angle), context, lifetime=self.lifetime)
            await asyncio.sleep(self.SHOT_INTERVAL)


# ═══════════════════════════════════════════════════════════════════════════
# MAGIC MISSILE
# ═══════════════════════════════════════════════════════════════════════════

class MagicMissile(Spell):
    """Pocisk wycelowany w najbliższego wroga (brak wroga -> w cel)."""

    key = "magic_missile"
    default_name = "Magic Missile"
    default_description = "Launches a missile at the nearest enemy."

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        enemy = self.arena.closest_enemy(origin, self.owner.team)
        aim = enemy.position if enemy is not None else target
        self.emit(origin, aim - origin, context)
        await asyncio.sleep(0)


# ═══════════════════════════════════════════════════════════════════════════
# ARCANE BLAST
# ═══════════════════════════════════════════════════════════════════════════

class ArcaneBlast(Spell):
    """
    Pocisk eksplodujący odłamkami w punkcie trafienia.

    Pola katalogu:
        N: Liczba odłamków (domyślnie 8)
        secondary_damage: Obrażenia odłamka (domyślnie 25% głównego)
        secondary_projectile: trajectory / speed / lifetime / sprite
    """

    key = "arcane_blast"
    default_name = "Arcane Blast"
    default_description = "Explodes into shards on impact."

    def __init__(self, owner=None):
        super().__init__(owner)
        self.base_damage = 20
        self.base_speed = 12
        self.secondary_count = 8
        self.secondary_damage_expr = None
        self.secondary_trajectory = "straight"
        self.secondary_speed = self.base_speed * 0.8
        self.secondary_lifetime = 0.3
        self.secondary_sprite = 0

    def load_attributes(self, data: Mapping[str, Any], variables: Mapping[str, float]) -> None:
        super().load_attributes(data, variables)
        self.secondary_count = max(1, round(self._resolve("N", data.get("N"), self.secondary_count)))
        self.secondary_damage_expr = data.get("secondary_damage")

        secondary = data.get("secondary_projectile") or {}
        self.secondary_trajectory = secondary.get("trajectory", "straight")
        self.secondary_speed = self._resolve(
            "secondary_speed", secondary.get("speed"), self.base_speed * 0.8
        )
        self.secondary_lifetime = self._resolve(
            "secondary_lifetime", secondary.get("lifetime"), 0.3
        )
        self.secondary_sprite = int(secondary.get("sprite", self.sprite))

    def secondary_damage(self, primary_damage: float) -> float:
        """Obrażenia odłamka dla obrażeń głównego pocisku tej aktywacji."""
        fallback = primary_damage * 0.25
        if self.secondary_damage_expr is None:
            return fallback
        scope = dict(self.variables)
        scope["damage"] = primary_damage
        return safe_evaluate_float(self.secondary_damage_expr, scope, fallback)

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        primary_damage = self.resolve_stat("damage", context.mods)
        speed = self.resolve_stat("speed", context.mods)
        shard_damage = self.secondary_damage(primary_damage)
        # Odłamki skalują się razem z prędkością pocisku głównego
        shard_speed = self.secondary_speed
        if self.base_speed:
            shard_speed = self.secondary_speed * speed / self.base_speed
        primary_hit = self.make_hit_handler(context, primary_damage, speed)

        def on_hit(target_hit, impact: Vec2) -> None:
            if self.owner is None or target_hit.team == self.owner.team:
                return
            primary_hit(target_hit, impact)
            self._spawn_shards(impact, shard_damage, shard_speed)

        self.arena.projectiles.create_projectile(
            self.sprite,
            context.trajectory or self.trajectory,
            origin,
            target - origin,
            speed,
            on_hit,
        )
        await asyncio.sleep(0)

    def _spawn_shards(self, origin: Vec2, damage: float, speed: float) -> None:
        step = 360.0 / self.secondary_count
        shard_hit = self.make_hit_handler(CastContext(), damage, speed, run_hooks=False)
        for i in range(self.secondary_count):
            self.arena.projectiles.create_projectile(
                self.secondary_sprite,
                self.secondary_trajectory,
                origin,
                Vec2.from_angle(i * step),
                speed,
                shard_hit,
                lifetime=self.secondary_lifetime,
            )


# ═══════════════════════════════════════════════════════════════════════════
# RAILGUN
# ═══════════════════════════════════════════════════════════════════════════

class Railgun(Spell):
    """Szybki pocisk przebijający wszystkie cele na linii."""

    key = "railgun"
    default_name = "Railgun"
    default_description = "Fires a piercing slug through every enemy in line."

    def __init__(self, owner=None):
        super().__init__(owner)
        self.base_damage = 50
        self.base_speed = 25
        self.base_mana = 10
        self.base_cooldown = 3

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        self.emit(origin, target - origin, context, piercing=True)
        await asyncio.sleep(0)


BASE_SPELLS: Dict[str, Type[Spell]] = {
    cls.key: cls
    for cls in (ArcaneBolt, ArcaneSpray, MagicMissile, ArcaneBlast, Railgun)
}
