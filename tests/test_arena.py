"""
Testy dla Areny (targeting i rozstrzyganie trafień).
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from spellcraft.combat.arena import Arena
from spellcraft.combat.damage import Damage, DamageType, Hittable, Team
from spellcraft.core.vector import Vec2
from spellcraft.events.event_logger import EventLogger, EventType


def enemy(unit_id, x, y=0.0, hp=100):
    return Hittable(unit_id, Team.MONSTERS, hp=hp, position=Vec2(x, y))


def recorder(hits):
    def on_hit(target, impact):
        hits.append((target.id, impact))
    return on_hit


@pytest.fixture
def arena():
    return Arena(wave=2, event_logger=EventLogger(seed=3))


# ═══════════════════════════════════════════════════════════════════════════
# TEST: CLOSEST ENEMY
# ═══════════════════════════════════════════════════════════════════════════

def test_closest_enemy(arena):
    arena.add(enemy("far", 10))
    near = arena.add(enemy("near", 3))
    arena.add(Hittable("ally", Team.PLAYER, hp=10, position=Vec2(1, 0)))

    assert arena.closest_enemy(Vec2(), Team.PLAYER) is near


def test_closest_enemy_exclude_and_range(arena):
    near = arena.add(enemy("near", 3))
    arena.add(enemy("far", 10))

    assert arena.closest_enemy(Vec2(), Team.PLAYER, exclude=near).id == "far"
    assert arena.closest_enemy(Vec2(), Team.PLAYER, exclude=near, max_range=5) is None


def test_dead_units_are_ignored(arena):
    dead = arena.add(enemy("dead", 1, hp=1))
    dead.damage(Damage(5, DamageType.ARCANE))

    assert arena.closest_enemy(Vec2(), Team.PLAYER) is None
    assert len(arena.event_logger.get_events_by_type(EventType.UNIT_DEATH)) == 1


# ═══════════════════════════════════════════════════════════════════════════
# TEST: TARGETS AHEAD
# ═══════════════════════════════════════════════════════════════════════════

def test_targets_ahead_prefers_alignment(arena):
    arena.add(enemy("off_axis", 3, 3))
    on_axis = arena.add(enemy("on_axis", 20))
    arena.add(enemy("behind", -5))
    arena.add(enemy("side", 0, 5))
    arena.projectiles.create_projectile(0, "straight", Vec2(), Vec2(1, 0), 8, lambda t, i: None)

    ahead = arena.targets_ahead(arena.projectiles.projectiles[0], Team.PLAYER)

    assert [u.id for u in ahead] == ["on_axis", "off_axis"]
    assert ahead[0] is on_axis


def test_targets_ahead_skips_source_body(arena):
    arena.add(enemy("source", 5))
    arena.projectiles.create_projectile(0, "straight", Vec2(4.5, 0), Vec2(1, 0), 8, lambda t, i: None)

    assert arena.targets_ahead(arena.projectiles.projectiles[0], Team.PLAYER) == []


def test_projectile_without_direction_sees_everyone(arena):
    arena.add(enemy("b", -6))
    arena.add(enemy("a", 2))
    arena.projectiles.create_projectile(0, "straight", Vec2(), Vec2(), 8, lambda t, i: None)

    ahead = arena.targets_ahead(arena.projectiles.projectiles[0], Team.PLAYER)

    assert [u.id for u in ahead] == ["a", "b"]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RESOLVE
# ═══════════════════════════════════════════════════════════════════════════

def test_resolve_hits_first_target_on_its_edge(arena):
    arena.add(enemy("e1", 10))
    hits = []
    arena.projectiles.create_projectile(0, "straight", Vec2(), Vec2(1, 0), 8, recorder(hits))

    assert arena.resolve_pending(Team.PLAYER) == 1

    assert hits == [("e1", Vec2(9.5, 0))]
    assert arena.projectiles.get_active_count() == 0


def test_resolve_expires_projectile_without_target(arena):
    hits = []
    arena.projectiles.create_projectile(0, "straight", Vec2(), Vec2(1, 0), 8, recorder(hits))

    assert arena.resolve_pending(Team.PLAYER) == 0
    assert hits == []
    assert not arena.projectiles.projectiles[0].active


def test_piercing_hits_in_distance_order(arena):
    arena.add(enemy("far", 12))
    arena.add(enemy("mid", 6, 1))
    arena.add(enemy("near", 3))
    hits = []
    arena.projectiles.create_projectile(
        0, "straight", Vec2(), Vec2(1, 0), 25, recorder(hits), piercing=True
    )

    assert arena.resolve_pending(Team.PLAYER) == 3
    assert [target for target, _ in hits] == ["near", "mid", "far"]


def test_round_limit_stops_endless_chain(arena, caplog):
    arena.add(enemy("a", 5))
    arena.add(enemy("b", -5))

    def ping_pong(target, impact):
        back = Vec2(-5, 0) if target.id == "a" else Vec2(5, 0)
        arena.projectiles.create_projectile(0, "straight", impact, back - impact, 8, ping_pong)

    arena.projectiles.create_projectile(0, "straight", Vec2(), Vec2(1, 0), 8, ping_pong)

    assert arena.resolve_pending(Team.PLAYER, max_rounds=4) == 4
    assert "round limit" in caplog.text


def test_apply_damage_logs(arena):
    target = arena.add(enemy("e1", 1, hp=30))

    dealt = arena.apply_damage(target, Damage(12, DamageType.FIRE), source="Arcane Bolt")

    assert dealt == 12
    [event] = arena.event_logger.get_events_by_type(EventType.UNIT_DAMAGE)
    assert event.unit_id == "e1"
    assert event.data["source"] == "Arcane Bolt"


def test_death_listeners_and_damage_callbacks(arena):
    target = arena.add(enemy("e1", 1, hp=10))
    deaths, hits = [], []
    arena.death_listeners.append(lambda unit: deaths.append(unit.id))
    target.on_damage.append(lambda unit, amount: hits.append(amount))

    arena.apply_damage(target, Damage(4))
    arena.apply_damage(target, Damage(0))
    arena.apply_damage(target, Damage(20))

    assert hits == [4, 6]
    assert deaths == ["e1"]
