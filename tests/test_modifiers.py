"""
Testy dla modyfikatorów spelli.

Testuje:
- Przechodzenie statystyk przez warstwy (kolejność fold)
- Brak "wycieku" modyfikatorów do inner po aktywacji
- Nakładające się aktywacje (Doubler w trakcie opóźnienia)
- Zachowania: doubler, splitter, chaos, homing, knockback, bounce
"""

import asyncio
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from spellcraft.combat.arena import Arena
from spellcraft.combat.damage import Hittable, Team
from spellcraft.core.config_loader import SpellCatalog
from spellcraft.core.rng import GameRNG
from spellcraft.core.vector import Vec2
from spellcraft.events.event_logger import EventLogger, EventType
from spellcraft.spells.base_spells import ArcaneBolt
from spellcraft.spells.builder import BuildContext, SpellBuilder
from spellcraft.spells.modifiers import (
    MODIFIER_SPELLS, BounceModifier, ChaoticModifier, DamageMagnifier, Doubler,
    HomingModifier, KnockbackModifier, SpeedModifier, Splitter,
)
from spellcraft.spells.spell import formula_vars
from spellcraft.units.spell_caster import SpellCaster


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

def enemy(unit_id, x, y=0.0, hp=1000):
    return Hittable(unit_id, Team.MONSTERS, hp=hp, position=Vec2(x, y))


def damage_of(projectile):
    """Obrażenia pocisku zmierzone na manekinie."""
    dummy = Hittable("dummy", Team.MONSTERS, hp=10_000, position=Vec2(100, 100))
    projectile.hit(dummy)
    return 10_000 - dummy.hp


@pytest.fixture
def arena():
    return Arena(wave=1, event_logger=EventLogger(seed=1))


@pytest.fixture
def caster(arena):
    caster = SpellCaster(arena=arena, rng=GameRNG(3), clock=lambda: 0.0)
    arena.add(caster.body)
    return caster


def bolt(owner=None, data=None, wave=1):
    spell = ArcaneBolt(owner)
    spell.load_attributes(data or {}, formula_vars(0, wave))
    return spell


def wrap(cls, inner, data=None, wave=1):
    modifier = cls(inner)
    modifier.load_attributes(data or {}, formula_vars(0, wave))
    return modifier


# ═══════════════════════════════════════════════════════════════════════════
# TEST: STATYSTYKI
# ═══════════════════════════════════════════════════════════════════════════

def test_damage_amp_changes_only_its_stats():
    spell = wrap(DamageMagnifier, bolt())

    assert spell.damage == 15
    assert spell.mana == 15
    assert spell.cooldown == 1
    assert spell.speed == 8


def test_speed_amp():
    assert wrap(SpeedModifier, bolt()).speed == pytest.approx(14.0)


def test_inner_stats_unchanged_by_wrapping():
    inner = bolt()
    wrap(DamageMagnifier, inner)
    assert inner.damage == 10


def test_inner_layers_fold_first():
    """Mody warstwy wewnętrznej liczone przed zewnętrzną."""
    homing_inside = wrap(DamageMagnifier, wrap(HomingModifier, bolt(), {"mana_adder": "5"}))
    homing_outside = wrap(HomingModifier, wrap(DamageMagnifier, bolt()), {"mana_adder": "5"})

    assert homing_inside.mana == pytest.approx(22.5)
    assert homing_outside.mana == pytest.approx(20.0)


def test_modifier_formula_uses_wave():
    spell = wrap(DamageMagnifier, bolt(), {"damage_multiplier": "1 wave 10 / +"}, wave=1)
    assert spell.damage == pytest.approx(11.0)

    spell.refresh(formula_vars(0, 5))

    assert spell.damage == pytest.approx(15.0)


def test_missing_modifier_fields_use_defaults():
    spell = wrap(Doubler, bolt())
    assert spell.mana == 15
    assert spell.cooldown == 1.5
    assert spell.delay == 0.5


def test_name_and_icon_come_from_chain():
    inner = bolt(data={"name": "Arcane Bolt", "icon": 4})
    spell = wrap(Doubler, wrap(DamageMagnifier, inner))

    assert spell.display_name == "Arcane Bolt damage-amplified doubled"
    assert spell.icon_index == 4
    assert spell.leaf is inner
    assert [layer.key for layer in spell.chain()] == ["doubler", "damage_amp", "arcane_bolt"]


def test_registry_contains_all_modifiers():
    assert set(MODIFIER_SPELLS) == {
        "damage_amp", "speed_amp", "doubler", "splitter",
        "chaos", "homing", "knockback", "bounce",
    }


# ═══════════════════════════════════════════════════════════════════════════
# TEST: AKTYWACJA
# ═══════════════════════════════════════════════════════════════════════════

async def test_activation_uses_modified_stats_without_leaking(caster, arena):
    """Przed: 10, w trakcie: 15, po: znowu 10 dla inner."""
    inner = bolt(caster)
    spell = wrap(DamageMagnifier, inner)
    assert inner.damage == 10

    await spell.try_cast(Vec2(), Vec2(10, 0))

    [projectile] = arena.projectiles.projectiles
    assert damage_of(projectile) == 15
    assert inner.damage == 10
    assert inner.mods.is_empty()

    await inner.try_cast(Vec2(), Vec2(10, 0))
    assert damage_of(arena.projectiles.projectiles[-1]) == 10


async def test_assembled_amp_twice_in_a_row_from_catalog_formula(caster, arena):
    """power 5: bolt "power 2 *" = 10, pod damage_amp 1.5 = 15 przy każdej aktywacji."""
    builder = SpellBuilder(
        SpellCatalog({
            "arcane_bolt": {"damage": {"amount": "power 2 *"}},
            "damage_amp": {"damage_multiplier": "1.5"},
        }),
        rng=GameRNG(1),
    )
    context = BuildContext(power=5, wave=3)

    plain = builder.assemble(caster, "arcane_bolt", [], context)
    assert plain.damage == 10

    spell = builder.assemble(caster, "arcane_bolt", ["damage_amp"], context)
    inner = spell.inner
    assert spell.damage == 15

    await spell.try_cast(Vec2(), Vec2(10, 0))
    await spell.try_cast(Vec2(), Vec2(10, 0))

    assert [damage_of(p) for p in arena.projectiles.projectiles] == [15, 15]
    assert inner.damage == 10
    assert inner.mods.is_empty()


async def test_activation_damage_matches_static_damage(caster, arena):
    spell = wrap(HomingModifier, wrap(DamageMagnifier, bolt(caster)), {"damage_multiplier": "0.5"})

    await spell.try_cast(Vec2(), Vec2(10, 0))

    assert damage_of(arena.projectiles.projectiles[0]) == round(spell.damage)


async def test_overlapping_activations_do_not_interfere(caster, arena):
    doubler = wrap(Doubler, bolt(caster), {"delay": "0.05"})
    amplified = wrap(DamageMagnifier, doubler)

    await asyncio.gather(
        amplified.try_cast(Vec2(), Vec2(10, 0)),
        doubler.try_cast(Vec2(), Vec2(10, 0)),
    )

    damages = sorted(damage_of(p) for p in arena.projectiles.projectiles)
    assert damages == [10, 10, 15, 15]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DOUBLER / SPLITTER
# ═══════════════════════════════════════════════════════════════════════════

async def test_doubler_recasts_from_current_caster_position(caster, arena):
    spell = wrap(Doubler, bolt(caster), {"delay": "0.05"})
    task = asyncio.create_task(spell.try_cast(Vec2(), Vec2(10, 0)))

    while not arena.projectiles.projectiles:
        await asyncio.sleep(0)
    caster.position = Vec2(0, 5)
    await task

    first, second = arena.projectiles.projectiles
    assert first.origin == Vec2(0, 0)
    assert second.origin == Vec2(0, 5)
    assert second.direction == first.direction == Vec2(1, 0)


async def test_splitter_casts_twice_at_opposite_angles(caster, arena):
    spell = wrap(Splitter, bolt(caster), {"angle": "10"})

    await spell.try_cast(Vec2(), Vec2(10, 0))

    first, second = (p.direction.angle_degrees() for p in arena.projectiles.projectiles)
    assert 8.0 <= first <= 12.0
    assert -12.0 <= second <= -8.0


def test_splitter_mana_cost():
    assert wrap(Splitter, bolt()).mana == 15


# ═══════════════════════════════════════════════════════════════════════════
# TEST: TRAJEKTORIE
# ═══════════════════════════════════════════════════════════════════════════

async def test_chaos_forces_spiraling(caster, arena):
    spell = wrap(ChaoticModifier, bolt(caster), {"damage_multiplier": "2"})

    await spell.try_cast(Vec2(), Vec2(10, 0))

    projectile = arena.projectiles.projectiles[0]
    assert projectile.trajectory == "spiraling"
    assert damage_of(projectile) == 20


async def test_homing_sets_trajectory(caster, arena):
    await wrap(HomingModifier, bolt(caster)).try_cast(Vec2(), Vec2(10, 0))
    assert arena.projectiles.projectiles[0].trajectory == "homing"


async def test_homing_appends_to_chaos(caster, arena):
    spell = wrap(HomingModifier, wrap(ChaoticModifier, bolt(caster)))
    await spell.try_cast(Vec2(), Vec2(10, 0))
    # Chaos jest bliżej liścia: nadpisuje wymuszenie z homing
    assert arena.projectiles.projectiles[0].trajectory == "spiraling"

    spell = wrap(ChaoticModifier, wrap(HomingModifier, bolt(caster)))
    await spell.try_cast(Vec2(), Vec2(10, 0))
    assert arena.projectiles.projectiles[1].trajectory == "spiraling+homing"


# ═══════════════════════════════════════════════════════════════════════════
# TEST: EFEKTY TRAFIENIA
# ═══════════════════════════════════════════════════════════════════════════

async def test_knockback_pushes_target_away_from_impact(caster, arena):
    target = arena.add(enemy("e1", 10))
    spell = wrap(KnockbackModifier, bolt(caster), {"force": "7"})

    await spell.try_cast(Vec2(), Vec2(10, 0))
    arena.resolve_pending(caster.team)

    assert target.impulse == Vec2(7, 0)
    assert target.hp == 990
    assert len(arena.event_logger.get_events_by_type(EventType.KNOCKBACK)) == 1


async def test_knockback_ignores_allies(caster, arena):
    ally = Hittable("ally", Team.PLAYER, hp=50, position=Vec2(3, 0))
    spell = wrap(KnockbackModifier, bolt(caster))

    await spell.try_cast(Vec2(), Vec2(3, 0))
    arena.projectiles.projectiles[0].hit(ally, Vec2(2.5, 0))

    assert ally.impulse == Vec2()


async def test_bounce_chains_between_enemies(caster, arena):
    e1 = arena.add(enemy("e1", 10, 0))
    e2 = arena.add(enemy("e2", 10, 5))
    far = arena.add(enemy("far", 10, 40))
    spell = wrap(BounceModifier, bolt(caster), {"count": "2", "range": "15"})

    await spell.try_cast(Vec2(), Vec2(10, 0))
    hits = arena.resolve_pending(caster.team)

    assert hits == 3
    # 10 z bolta + 5 z drugiego odbicia
    assert e1.hp == 1000 - 10 - 5
    assert e2.hp == 1000 - 5
    assert far.hp == 1000

    bounces = arena.projectiles.projectiles[1:]
    assert [p.trajectory for p in bounces] == ["homing", "homing"]
    assert all(p.speed == pytest.approx(12.0) for p in bounces)
    assert len(arena.event_logger.get_events_by_type(EventType.BOUNCE)) == 2


async def test_bounce_without_targets_flies_randomly(caster, arena):
    arena.add(enemy("e1", 10, 0))
    spell = wrap(BounceModifier, bolt(caster), {"count": "1"})

    await spell.try_cast(Vec2(), Vec2(10, 0))
    arena.resolve_pending(caster.team)

    bounce = arena.projectiles.projectiles[1]
    assert bounce.direction.length() == pytest.approx(1.0)
    assert not bounce.active
