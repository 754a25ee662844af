"""
Testy dla reliktów.

Testuje:
- Triggery take-damage i on-kill
- Efekty gain-mana, gain-spellpower (formuła z wave)
- Jednorazowy bonus spell power zdejmowany po caście
- RelicManager: ładowanie, oferty co 3 fale, wybór
- relics.yaml przez ConfigLoader
"""

import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from spellcraft.combat.arena import Arena
from spellcraft.combat.damage import Damage, Hittable, Team
from spellcraft.core.config_loader import ConfigLoader, SpellCatalog
from spellcraft.core.errors import RelicDefinitionError
from spellcraft.core.rng import GameRNG
from spellcraft.core.vector import Vec2
from spellcraft.events.event_logger import EventLogger, EventType
from spellcraft.relics.effects import GainSpellPowerOnce
from spellcraft.relics.relic import Relic
from spellcraft.relics.relic_manager import RelicManager
from spellcraft.spells.builder import SpellBuilder
from spellcraft.units.spell_caster import SpellCaster


DATA_PATH = Path(__file__).parent.parent / "data"

RELICS = {
    "cursed_scroll": {
        "name": "Cursed Scroll",
        "trigger": {"type": "take-damage"},
        "effect": {"type": "gain-mana", "amount": "10"},
    },
    "golden_mask": {
        "name": "Golden Mask",
        "trigger": {"type": "take-damage"},
        "effect": {"type": "gain-spellpower", "amount": "100", "until": "cast-spell"},
    },
    "green_gem": {
        "name": "Green Gem",
        "trigger": {"type": "on-kill"},
        "effect": {"type": "gain-mana", "amount": "5"},
    },
    "war_drum": {
        "name": "War Drum",
        "trigger": {"type": "on-kill"},
        "effect": {"type": "gain-spellpower", "amount": "wave 10 *"},
    },
}


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

def enemy(unit_id, x=5.0, hp=10):
    return Hittable(unit_id, Team.MONSTERS, hp=hp, position=Vec2(x, 0))


def relic(relic_id):
    return Relic.from_dict(relic_id, RELICS[relic_id])


def fired(arena):
    return arena.event_logger.get_events_by_type(EventType.RELIC_FIRED)


@pytest.fixture
def arena():
    return Arena(wave=4, event_logger=EventLogger(seed=1))


@pytest.fixture
def caster(arena):
    caster = SpellCaster(arena=arena, rng=GameRNG(3), clock=lambda: 0.0, max_mana=100, spell_power=10)
    arena.add(caster.body)
    return caster


@pytest.fixture
def bolt(caster):
    """Bolt o obrażeniach 2 * power w slocie 0."""
    builder = SpellBuilder(SpellCatalog({"arcane_bolt": {"damage": {"amount": "power 2 *"}}}), rng=GameRNG(1))
    spell = builder.assemble(caster, "arcane_bolt", [], caster.build_context(wave=4))
    caster.equip(0, spell)
    return spell


# ═══════════════════════════════════════════════════════════════════════════
# TEST: TRIGGERY
# ═══════════════════════════════════════════════════════════════════════════

def test_take_damage_grants_mana(caster, arena):
    scroll = relic("cursed_scroll")
    scroll.init(caster)
    caster.mana = 50

    arena.apply_damage(caster.body, Damage(5))

    assert caster.mana == 60
    [event] = fired(arena)
    assert event.unit_id == "player"
    assert event.data == {"relic": "Cursed Scroll", "effect": "gain-mana", "amount": 10}


def test_mana_gain_is_capped(caster, arena):
    relic("cursed_scroll").init(caster)
    caster.mana = 95

    arena.apply_damage(caster.body, Damage(5))

    assert caster.mana == 100


def test_zero_damage_does_not_fire(caster, arena):
    scroll = relic("cursed_scroll")
    scroll.init(caster)

    arena.apply_damage(caster.body, Damage(0))

    assert scroll.fire_count == 0
    assert fired(arena) == []


def test_kill_fires_only_for_enemies(caster, arena):
    gem = relic("green_gem")
    gem.init(caster)
    caster.mana = 0
    target = arena.add(enemy("zombie_1"))
    ally = arena.add(Hittable("ally", Team.PLAYER, hp=1, position=Vec2(1, 0)))

    arena.apply_damage(ally, Damage(5))
    assert gem.fire_count == 0

    arena.apply_damage(target, Damage(50))
    assert gem.fire_count == 1
    assert caster.mana == 5


def test_kill_trigger_without_arena_warns(caplog):
    lonely = SpellCaster()
    gem = relic("green_gem")

    with caplog.at_level(logging.WARNING):
        gem.init(lonely)

    assert "never fire" in caplog.text


def test_end_unsubscribes_trigger(caster, arena):
    scroll = relic("cursed_scroll")
    scroll.init(caster)
    scroll.end()

    arena.apply_damage(caster.body, Damage(5))

    assert scroll.fire_count == 0
    assert caster.body.on_damage == []
    assert not scroll.is_active


def test_fire_without_owner_does_nothing(caplog):
    scroll = relic("cursed_scroll")
    with caplog.at_level(logging.WARNING):
        assert scroll.fire() == 0
    assert "without an owner" in caplog.text


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SPELL POWER
# ═══════════════════════════════════════════════════════════════════════════

def test_spellpower_formula_uses_arena_wave(caster, arena, bolt):
    relic("war_drum").init(caster)
    assert bolt.damage == 20

    arena.apply_damage(arena.add(enemy("zombie_1")), Damage(50))

    assert caster.spell_power == 10 + 40
    assert bolt.damage == 100


def test_malformed_amount_gives_zero(caster, arena, caplog):
    broken = Relic.from_dict("broken", {
        "trigger": {"type": "on-kill"},
        "effect": {"type": "gain-spellpower", "amount": "wave +"},
    })
    broken.init(caster)

    with caplog.at_level(logging.WARNING):
        arena.apply_damage(arena.add(enemy("zombie_1")), Damage(50))

    assert caster.spell_power == 10
    assert broken.fire_count == 1


async def test_one_shot_buff_lasts_for_one_cast(caster, arena, bolt):
    mask = relic("golden_mask")
    mask.init(caster)

    arena.apply_damage(caster.body, Damage(5))
    arena.apply_damage(caster.body, Damage(5))

    assert caster.spell_power == 110
    assert bolt.damage == 220
    assert mask.fire_count == 2
    assert [e.data["amount"] for e in fired(arena)] == [100, 0]

    assert await caster.cast_slot(0, Vec2(10, 0))

    [cast] = arena.event_logger.get_events_by_type(EventType.SPELL_CAST)
    assert cast.data["damage"] == 220
    assert caster.spell_power == 10
    assert bolt.damage == 20
    assert caster.on_cast == []


async def test_one_shot_buff_can_be_earned_again(caster, arena, bolt):
    relic("golden_mask").init(caster)

    arena.apply_damage(caster.body, Damage(5))
    await caster.cast_slot(0, Vec2(10, 0))
    arena.apply_damage(caster.body, Damage(5))

    assert caster.spell_power == 110


async def test_rejected_cast_keeps_pending_buff(caster, arena, bolt):
    relic("golden_mask").init(caster)
    arena.apply_damage(caster.body, Damage(5))
    caster.mana = 0

    assert not await caster.cast_slot(0, Vec2(10, 0))

    assert caster.spell_power == 110


def test_end_clears_pending_buff(caster, arena, bolt):
    mask = relic("golden_mask")
    mask.init(caster)
    arena.apply_damage(caster.body, Damage(5))
    assert isinstance(mask.effect, GainSpellPowerOnce) and mask.effect.is_pending

    mask.end()

    assert not mask.effect.is_pending
    assert caster.spell_power == 10
    assert bolt.damage == 20
    assert caster.on_cast == []


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DEFINICJE
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("data, part", [
    ({"trigger": {"type": "stand-still"}, "effect": {"type": "gain-mana"}}, "trigger"),
    ({"trigger": {"type": "on-kill"}, "effect": {"type": "heal"}}, "effect"),
    ({"trigger": {"type": "on-kill"}, "effect": {"type": "gain-spellpower", "until": "move"}}, "effect"),
    ({"effect": {"type": "gain-mana"}}, "trigger"),
])
def test_unknown_types_raise(data, part):
    with pytest.raises(RelicDefinitionError) as excinfo:
        Relic.from_dict("odd", data)
    assert excinfo.value.part == part


def test_to_dict():
    assert relic("golden_mask").to_dict() == {
        "id": "golden_mask",
        "name": "Golden Mask",
        "description": "",
        "sprite": 0,
        "trigger": "take-damage",
        "effect": "gain-spellpower",
        "active": False,
    }


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RELIC MANAGER
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def manager():
    manager = RelicManager(GameRNG(7))
    manager.load_relics(RELICS)
    return manager


def test_load_skips_broken_entries(caplog):
    manager = RelicManager(GameRNG(1))
    data = dict(RELICS, jade_elephant={"trigger": {"type": "stand-still"}, "effect": {"type": "gain-mana"}})

    with caplog.at_level(logging.ERROR):
        assert manager.load_relics(data) == 4

    assert manager.get_relic("jade_elephant") is None
    assert "jade_elephant" in caplog.text


@pytest.mark.parametrize("wave", [0, 1, 2, 4, 5])
def test_no_offer_between_reward_waves(manager, wave):
    assert manager.offer(wave) == []


def test_offer_every_third_wave(manager):
    offer = manager.offer(3)

    assert len(offer) == 3
    assert len({r.id for r in offer}) == 3


def test_offer_skips_owned_relics(manager, caster):
    manager.pick("cursed_scroll", caster)
    manager.pick("golden_mask", caster)

    offer = manager.offer(6)

    assert sorted(r.id for r in offer) == ["green_gem", "war_drum"]


def test_same_seed_same_offer():
    offers = []
    for _ in range(2):
        manager = RelicManager(GameRNG(42))
        manager.load_relics(RELICS)
        offers.append([r.id for r in manager.offer(9)])
    assert offers[0] == offers[1]


def test_pick(manager, caster, arena):
    assert manager.pick("cursed_scroll", caster)
    assert not manager.pick("cursed_scroll", caster)
    assert not manager.pick("fireball", caster)

    assert [r.id for r in manager.owned] == ["cursed_scroll"]
    assert manager.get_relic("cursed_scroll").caster is caster
    [event] = arena.event_logger.get_events_by_type(EventType.RELIC_PICKED)
    assert event.data["relic"] == "Cursed Scroll"


def test_end_all(manager, caster):
    manager.pick("cursed_scroll", caster)
    manager.pick("green_gem", caster)

    manager.end_all()

    assert not any(r.is_active for r in manager.owned)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RELICS.YAML
# ═══════════════════════════════════════════════════════════════════════════

def test_shipped_relics_load():
    config = ConfigLoader(str(DATA_PATH))
    manager = RelicManager(GameRNG(1))

    assert manager.load_relics(config.load_relic_definitions()) == 4
    assert manager.get_relic("golden_mask").name == "Golden Mask"


def test_relic_definitions_are_copies_and_reload():
    config = ConfigLoader(str(DATA_PATH))
    config.load_relic_definitions()["golden_mask"]["name"] = "changed"

    assert config.load_relic_definitions()["golden_mask"]["name"] == "Golden Mask"
    config.reload()
    assert config._relics is None
