"""
Testy dla skalowania spawnów przeciwników.

Testuje:
- Formuły count / hp / speed / delay (INT, zmienne base i wave)
- Fallbacki i wartości przy braku pola
- Clamp prędkości
- Paczki spawnów (sequence)
"""

import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from spellcraft.combat.damage import Team
from spellcraft.core.config_loader import ConfigLoader
from spellcraft.core.rng import GameRNG
from spellcraft.core.vector import Vec2
from spellcraft.units.enemy_scaling import (
    DEFAULT_DELAY, MAX_SPEED, MIN_SPEED, EnemyDefinition, SpawnPlan,
    load_enemy_definitions, plan_wave, resolve_spawn,
)


DATA_PATH = Path(__file__).parent.parent / "data"

ZOMBIE = EnemyDefinition("zombie", hp=20, speed=5)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: FORMUŁY
# ═══════════════════════════════════════════════════════════════════════════

def test_resolve_spawn_formulas():
    spawn = {"enemy": "zombie", "count": "5 wave +", "hp": "base wave 5 * +", "delay": "3"}

    plan = resolve_spawn(spawn, ZOMBIE, wave=4)

    assert plan.count == 9
    assert plan.hp == 40
    assert plan.speed == 5
    assert plan.delay == 3


def test_speed_uses_enemy_speed_as_base():
    plan = resolve_spawn({"count": "1", "speed": "base 2 *"}, ZOMBIE, wave=1)
    assert plan.speed == 10


def test_integer_division_in_count():
    plan = resolve_spawn({"count": "wave 2 /"}, ZOMBIE, wave=5)
    assert plan.count == 2


@pytest.mark.parametrize("expression, expected", [
    ("100", MAX_SPEED),
    ("0 3 -", MIN_SPEED),
])
def test_speed_is_clamped(expression, expected):
    plan = resolve_spawn({"count": "1", "speed": expression}, ZOMBIE, wave=1)
    assert plan.speed == expected


# ═══════════════════════════════════════════════════════════════════════════
# TEST: FALLBACKI
# ═══════════════════════════════════════════════════════════════════════════

def test_absent_fields_use_enemy_values():
    plan = resolve_spawn({"count": "2"}, ZOMBIE, wave=3)

    assert plan.hp == 20
    assert plan.speed == 5
    assert plan.delay == DEFAULT_DELAY
    assert plan.sequence == [1]
    assert plan.location == "random"


def test_malformed_fields_fall_back():
    spawn = {"count": "+", "hp": "base 0 /", "speed": "x", "delay": "1 +"}

    plan = resolve_spawn(spawn, ZOMBIE, wave=1)

    assert plan.count == 0
    assert plan.hp == 20
    assert plan.speed == 5
    assert plan.delay == DEFAULT_DELAY


def test_negative_count_is_zero():
    plan = resolve_spawn({"count": "0 5 -"}, ZOMBIE, wave=1)
    assert plan.count == 0
    assert plan.batches() == []


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PACZKI I JEDNOSTKI
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("count, sequence, expected", [
    (5, [1, 2], [1, 2, 1, 1]),
    (6, [2, 3], [2, 3, 1]),
    (3, [1], [1, 1, 1]),
    (2, [5], [2]),
])
def test_batches(count, sequence, expected):
    plan = SpawnPlan("zombie", count=count, hp=20, speed=5, sequence=sequence)
    assert plan.batches() == expected


def test_create_units():
    plan = SpawnPlan("zombie", count=3, hp=40, speed=5)

    units = plan.create_units(GameRNG(1), center=Vec2(20, 0), spread=2.0)

    assert [u.id for u in units] == ["zombie_1", "zombie_2", "zombie_3"]
    assert all(u.team == Team.MONSTERS and u.hp == 40 for u in units)
    assert all(u.position.distance(Vec2(20, 0)) <= 2.0 * 2 ** 0.5 for u in units)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: POZIOMY
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def config():
    return ConfigLoader(str(DATA_PATH))


def test_plan_easy_wave(config):
    enemies = load_enemy_definitions(config.load_enemy_definitions())
    level = config.load_levels()["Easy"]

    plans = plan_wave(level, enemies, wave=4)

    zombies, skeletons = plans
    assert (zombies.enemy, zombies.count, zombies.hp) == ("zombie", 9, 40)
    assert zombies.batches()[:3] == [1, 2, 1]
    assert (skeletons.enemy, skeletons.count, skeletons.hp, skeletons.speed) == ("skeleton", 2, 42, 8)


def test_plan_skips_unknown_enemy(caplog):
    level = {"spawns": [{"enemy": "dragon", "count": "1"}, {"enemy": "zombie", "count": "1"}]}

    with caplog.at_level(logging.WARNING):
        plans = plan_wave(level, {"zombie": ZOMBIE}, wave=1)

    assert [p.enemy for p in plans] == ["zombie"]
    assert "dragon" in caplog.text


def test_to_dict():
    plan = resolve_spawn({"count": "2", "sequence": [2]}, ZOMBIE, wave=1)
    assert plan.to_dict() == {
        "enemy": "zombie",
        "count": 2,
        "hp": 20,
        "speed": 5,
        "delay": 2,
        "sequence": [2],
        "location": "random",
    }


# ═══════════════════════════════════════════════════════════════════════════
# TEST: NIEDODATNIE PACZKI
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("sequence, expected", [
    ([0], [1]),
    ([-2], [1]),
    ([2, -1, 0], [2]),
])
def test_non_positive_sequence_entries_are_dropped(sequence, expected, caplog):
    with caplog.at_level(logging.WARNING):
        plan = resolve_spawn({"count": "3", "sequence": sequence}, ZOMBIE, wave=1)

    assert plan.sequence == expected
    assert sum(plan.batches()) == 3
    assert "non-positive sequence" in caplog.text


def test_zero_sequence_spawns_one_at_a_time():
    plan = resolve_spawn({"count": "3", "sequence": [0]}, ZOMBIE, wave=1)
    assert plan.batches() == [1, 1, 1]


@pytest.mark.parametrize("sequence", [[0], [-1, 0], []])
def test_batches_terminate_for_hand_built_plan(sequence):
    plan = SpawnPlan("zombie", count=4, hp=20, speed=5, sequence=sequence)
    assert plan.batches() == [1, 1, 1, 1]


def test_positive_sequence_does_not_warn(caplog):
    with caplog.at_level(logging.WARNING):
        resolve_spawn({"count": "3", "sequence": [1, 2]}, ZOMBIE, wave=1)
    assert caplog.text == ""
