"""
Modyfikatory - spelle opakowujące inny spell.

ModifierSpell jest właścicielem dokładnie jednego `inner` i jest
jedyną drogą dostępu do niego. Nazwa to nazwa inner + sufiks,
ikona jest dziedziczona bez zmian.

KONTRAKT WARSTWY:
═══════════════════════════════════════════════════════════════════

    Statystyki:
        effective(stat) = StatBlock.apply(inner.effective(stat), own_mods)

        Statystyki, których warstwa nie zmienia, przechodzą bez zmian.

    Aktywacja:
        1. child = context.with_mods(own_mods)   (+ trajektoria / hooki)
        2. await inner.try_cast(origin, target, child)

        Kontekst jest niemutowalny - żadnego "inject / clear".

RODZINA MODYFIKATORÓW:
═══════════════════════════════════════════════════════════════════

    klucz        klasa               statystyki             zachowanie
    ─────────────────────────────────────────────────────────────────
    damage_amp   DamageMagnifier     dmg ×m, mana ×m        -
    speed_amp    SpeedModifier       speed ×m               -
    doubler      Doubler             mana ×m, cd ×m         drugi cast po `delay`
    splitter     Splitter            mana ×m                dwa casty ±angle
    chaos        ChaoticModifier     dmg ×m                 trajektoria spiraling
    homing       HomingModifier      dmg ×m, mana +a        dokleja homing
    knockback    KnockbackModifier   -                      odrzut przy trafieniu
    bounce       BounceModifier      -                      odbicie do kolejnego wroga

Pola każdego modyfikatora są rozwiązywane RAZ przy konstrukcji
(load_attributes) z formuł katalogu. Wcześniej rozwiązane pola są
dostępne jako zmienne w kolejnych formułach tego samego wpisu.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List, Mapping, Type

from ..combat.damage import Damage, DamageType, Hittable
from ..core.vector import Vec2
from .spell import CastContext, Impact, Spell
from .stat_block import EMPTY_STAT_BLOCK, StatBlock, add, mul

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# BAZA
# ═══════════════════════════════════════════════════════════════════════════

class ModifierSpell(Spell):
    """
    Warstwa opakowująca inny spell.

    Attributes:
        inner: Opakowany spell (wyłączna własność tej warstwy)
        name: Sufiks doklejany do nazwy inner
    """

    default_name = "modified"

    def __init__(self, inner: Spell):
        super().__init__(inner.owner)
        self.inner = inner
        self.mods = self.build_mods()

    # ─────────────────────────────────────────────────────────────────────────
    # TOŻSAMOŚĆ
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def suffix(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return f"{self.inner.display_name} {self.suffix}"

    @property
    def icon_index(self) -> int:
        return self.inner.icon_index

    @property
    def leaf(self) -> Spell:
        return self.inner.leaf

    def chain(self) -> List[Spell]:
        return [self] + self.inner.chain()

    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────

    def resolve_stat(self, stat: str, extra: StatBlock = EMPTY_STAT_BLOCK) -> float:
        # apply(apply(x, own), extra) == apply(x, own + extra)
        return self.inner.resolve_stat(stat, self.mods.merged(extra))

    def build_mods(self) -> StatBlock:
        """Własne modyfikatory warstwy (domyślnie brak)."""
        return EMPTY_STAT_BLOCK

    # ─────────────────────────────────────────────────────────────────────────
    # FORMUŁY
    # ─────────────────────────────────────────────────────────────────────────

    def load_attributes(self, data: Mapping[str, Any], variables: Mapping[str, float]) -> None:
        self.definition = dict(data)
        self.variables = dict(variables)
        self.resolved = {}

        self.name = data.get("name", self.name)
        self.description = data.get("description", self.description)
        self.load_fields(data)
        self.mods = self.build_mods()

        logger.debug("%s resolved: %s", self.key, self.resolved)

    def load_fields(self, data: Mapping[str, Any]) -> None:
        """Pola specyficzne dla modyfikatora (nadpisywane)."""

    def refresh(self, variables: Mapping[str, float]) -> None:
        self.inner.refresh(variables)
        self.load_attributes(self.definition, variables)

    # ─────────────────────────────────────────────────────────────────────────
    # AKTYWACJA
    # ─────────────────────────────────────────────────────────────────────────

    def prepare_context(self, context: CastContext) -> CastContext:
        """Kontekst przekazywany do inner."""
        return context.with_mods(self.mods)

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        await self.inner.try_cast(origin, target, self.prepare_context(context))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["stat_mods"] = self.mods.to_dict()
        return result


# ═══════════════════════════════════════════════════════════════════════════
# MODYFIKATORY STATYSTYK
# ═══════════════════════════════════════════════════════════════════════════

class DamageMagnifier(ModifierSpell):
    """Więcej obrażeń za więcej many."""

    key = "damage_amp"
    default_name = "damage-amplified"
    default_description = "Increased damage and increased mana cost."

    damage_multiplier = 1.5
    mana_multiplier = 1.5

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.damage_multiplier = self._resolve(
            "damage_multiplier", data.get("damage_multiplier"), self.damage_multiplier
        )
        self.mana_multiplier = self._resolve(
            "mana_multiplier", data.get("mana_multiplier"), self.mana_multiplier
        )

    def build_mods(self) -> StatBlock:
        return StatBlock(
            damage=(mul(self.damage_multiplier),),
            mana=(mul(self.mana_multiplier),),
        )


class SpeedModifier(ModifierSpell):
    key = "speed_amp"
    default_name = "speed-amplified"
    default_description = "Faster projectile."

    speed_multiplier = 1.75

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.speed_multiplier = self._resolve(
            "speed_multiplier", data.get("speed_multiplier"), self.speed_multiplier
        )

    def build_mods(self) -> StatBlock:
        return StatBlock(speed=(mul(self.speed_multiplier),))


# ═══════════════════════════════════════════════════════════════════════════
# DOUBLER / SPLITTER
# ═══════════════════════════════════════════════════════════════════════════

class Doubler(ModifierSpell):
    """
    Rzuca inner drugi raz po opóźnieniu.

    Drugi cast startuje z AKTUALNEJ pozycji castera (mógł się
    przesunąć w trakcie opóźnienia), w tym samym kierunku co
    pierwszy.

    Pola katalogu:
        delay: Opóźnienie w sekundach (domyślnie 0.5)
        mana_multiplier: domyślnie 1.5
        cooldown_multiplier: domyślnie 1.5
    """

    key = "doubler"
    default_name = "doubled"
    default_description = (
        "Spell is cast a second time after a small delay; "
        "increased mana cost and cooldown."
    )

    delay = 0.5
    mana_multiplier = 1.5
    cooldown_multiplier = 1.5

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.delay = max(0.0, self._resolve("delay", data.get("delay"), self.delay))
        self.mana_multiplier = self._resolve(
            "mana_multiplier", data.get("mana_multiplier"), self.mana_multiplier
        )
        self.cooldown_multiplier = self._resolve(
            "cooldown_multiplier", data.get("cooldown_multiplier"), self.cooldown_multiplier
        )

    def build_mods(self) -> StatBlock:
        return StatBlock(
            mana=(mul(self.mana_multiplier),),
            cooldown=(mul(self.cooldown_multiplier),),
        )

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        child = self.prepare_context(context)
        await self.inner.try_cast(origin, target, child)
        await asyncio.sleep(self.delay)

        second_origin = self.owner.position if self.owner is not None else origin
        await self.inner.try_cast(second_origin, second_origin + (target - origin), child)


class Splitter(ModifierSpell):
    """
    Rzuca inner dwa razy, w kierunkach odchylonych o ±angle.

    Każdy kierunek dostaje dodatkowy losowy rozrzut ±2°.
    """

    key = "splitter"
    default_name = "split"
    default_description = (
        "Spell is cast twice in slightly different directions; increased mana cost."
    )

    JITTER = 2.0
    AIM_DISTANCE = 10.0

    angle = 10.0
    mana_multiplier = 1.5

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.angle = self._resolve("angle", data.get("angle"), self.angle)
        self.mana_multiplier = self._resolve(
            "mana_multiplier", data.get("mana_multiplier"), self.mana_multiplier
        )

    def build_mods(self) -> StatBlock:
        return StatBlock(mana=(mul(self.mana_multiplier),))

    def split_targets(self, origin: Vec2, target: Vec2) -> List[Vec2]:
        """Dwa punkty celowania: +angle i -angle (z rozrzutem)."""
        base_angle = (target - origin).angle_degrees()
        rng = self.rng
        offsets = (
            self.angle + rng.uniform(-self.JITTER, self.JITTER),
            -self.angle + rng.uniform(-self.JITTER, self.JITTER),
        )
        return [
            origin + Vec2.from_angle(base_angle + offset) * self.AIM_DISTANCE
            for offset in offsets
        ]

    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        child = self.prepare_context(context)
        for split_target in self.split_targets(origin, target):
            await self.inner.try_cast(origin, split_target, child)


# ═══════════════════════════════════════════════════════════════════════════
# TRAJEKTORIE
# ═══════════════════════════════════════════════════════════════════════════

class ChaoticModifier(ModifierSpell):
    """Wymusza trajektorię spiralną (nadpisuje wymuszenia z zewnątrz)."""

    key = "chaos"
    default_name = "chaotic"
    default_description = "Projectile spirals erratically; increased damage."

    damage_multiplier = 1.0
    trajectory_override = "spiraling"

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.damage_multiplier = self._resolve(
            "damage_multiplier", data.get("damage_multiplier"), self.damage_multiplier
        )
        self.trajectory_override = data.get("projectile_trajectory", self.trajectory_override)

    def build_mods(self) -> StatBlock:
        return StatBlock(damage=(mul(self.damage_multiplier),))

    def prepare_context(self, context: CastContext) -> CastContext:
        return context.with_mods(self.mods).override_trajectory(self.trajectory_override)


class HomingModifier(ModifierSpell):
    """Dokleja namierzanie do trajektorii; mniej obrażeń, dopłata many."""

    key = "homing"
    default_name = "homing"
    default_description = "Projectile seeks enemies; reduced damage and extra mana cost."

    damage_multiplier = 1.0
    mana_adder = 0.0
    trajectory_override = "homing"

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.damage_multiplier = self._resolve(
            "damage_multiplier", data.get("damage_multiplier"), self.damage_multiplier
        )
        self.mana_adder = self._resolve("mana_adder", data.get("mana_adder"), self.mana_adder)
        self.trajectory_override = data.get("projectile_trajectory", self.trajectory_override)

    def build_mods(self) -> StatBlock:
        return StatBlock(
            damage=(mul(self.damage_multiplier),),
            mana=(add(self.mana_adder),),
        )

    def prepare_context(self, context: CastContext) -> CastContext:
        return context.with_mods(self.mods).append_trajectory(self.trajectory_override)


# ═══════════════════════════════════════════════════════════════════════════
# EFEKTY TRAFIENIA
# ═══════════════════════════════════════════════════════════════════════════

class KnockbackModifier(ModifierSpell):
    """
    Każde trafienie inner odpycha cel od punktu trafienia.

    Impuls trafia do Hittable.impulse - ruch to sprawa
    zewnętrznego silnika fizyki.
    """

    key = "knockback"
    default_name = "knockback"
    default_description = "Applies knockback to the enemy hit."

    force = 10.0

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.force = self._resolve("force", data.get("force"), self.force)

    def prepare_context(self, context: CastContext) -> CastContext:
        return context.with_mods(self.mods).with_hook(self.apply_knockback)

    def apply_knockback(self, impact: Impact) -> None:
        target = impact.target
        direction = (target.position - impact.position).normalized()
        if direction.length() == 0 and self.owner is not None:
            # Trafienie dokładnie w środek celu
            direction = (target.position - self.owner.position).normalized()

        target.apply_impulse(direction * self.force)
        logger.debug("Knockback %.1f on %s", self.force, target.id)

        event_logger = self.arena.event_logger
        if event_logger:
            event_logger.log_knockback(target.id, self.force)


class BounceModifier(ModifierSpell):
    """
    Każde trafienie inner wypuszcza pocisk namierzający do
    najbliższego INNEGO wroga w zasięgu (brak - losowy kierunek).

    Obrażenia odbicia = round(round(obrażenia aktywacji) × damage_multiplier),
    prędkość = prędkość aktywacji × speed_multiplier. Odbicie od
    odbicia aż do wyczerpania `count`.
    """

    key = "bounce"
    default_name = "bounce"
    default_description = "Bounces to another enemy or in a random direction."

    count = 2
    bounce_range = 15.0
    damage_multiplier = 0.5
    speed_multiplier = 1.5

    def load_fields(self, data: Mapping[str, Any]) -> None:
        self.count = max(0, round(self._resolve("count", data.get("count"), self.count)))
        self.bounce_range = self._resolve("range", data.get("range"), self.bounce_range)
        self.damage_multiplier = self._resolve(
            "damage_multiplier", data.get("damage_multiplier"), self.damage_multiplier
        )
        self.speed_multiplier = self._resolve(
            "speed_multiplier", data.get("speed_multiplier"), self.speed_multiplier
        )

    def prepare_context(self, context: CastContext) -> CastContext:
        return context.with_mods(self.mods).with_hook(self.start_bounce)

    def start_bounce(self, impact: Impact) -> None:
        bounce_damage = round(round(impact.damage) * self.damage_multiplier)
        bounce_speed = impact.speed * self.speed_multiplier
        self.bounce(
            impact.spell.icon_index,
            impact.position,
            impact.target,
            self.count,
            bounce_damage,
            bounce_speed,
        )

    def bounce(
        self,
        sprite: int,
        origin: Vec2,
        previous: Hittable,
        remaining: int,
        damage: int,
        speed: float,
    ) -> None:
        """
        Wypuszcza jedno odbicie.

        Args:
            sprite: Sprite pocisku (ikona spella)
            origin: Punkt poprzedniego trafienia
            previous: Poprzednio trafiony cel (pomijany)
            remaining: Ile odbić zostało
            damage: Obrażenia każdego odbicia
            speed: Prędkość odbicia
        """
        if remaining <= 0:
            return

        arena = self.arena
        nxt = arena.closest_enemy(origin, self.owner.team, exclude=previous, max_range=self.bounce_range)
        if nxt is not None:
            direction = nxt.position - origin
        else:
            direction = Vec2(*self.rng.unit_vector())

        if arena.event_logger:
            arena.event_logger.log_bounce(remaining, nxt.id if nxt is not None else None)

        def on_hit(hit: Hittable, impact: Vec2) -> None:
            if hit.team == self.owner.team:
                return
            arena.apply_damage(hit, Damage(damage, DamageType.ARCANE), source=self.display_name)
            self.bounce(sprite, impact, hit, remaining - 1, damage, speed)

        arena.projectiles.create_projectile(sprite, "homing", origin, direction, speed, on_hit)


MODIFIER_SPELLS: Dict[str, Type[ModifierSpell]] = {
    cls.key: cls
    for cls in (
        DamageMagnifier,
        SpeedModifier,
        Doubler,
        Splitter,
        ChaoticModifier,
        HomingModifier,
        KnockbackModifier,
        BounceModifier,
    )
}
