"""
Testy dla klas gracza (formuły statystyk skalowane falą).
"""

import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from spellcraft.core.config_loader import ConfigLoader
from spellcraft.units.player_class import (
    CLASS_STATS, DEFAULT_CLASS, PlayerClass, PlayerClassLoader,
)


DATA_PATH = Path(__file__).parent.parent / "data"


@pytest.fixture
def loader():
    return PlayerClassLoader(ConfigLoader(str(DATA_PATH)))


def test_default_class_wave_two():
    stats = DEFAULT_CLASS.stats_for_wave(2)

    assert stats["health"] == 105
    assert stats["mana"] == 110
    assert stats["mana_regeneration"] == 12
    assert stats["spellpower"] == 20
    assert stats["speed"] == 5


def test_loader_reads_all_classes(loader):
    classes = loader.get_all_classes()
    assert set(classes) == {"mage", "warlock", "battlemage"}
    assert loader.get_sprite_index("warlock") == 1


def test_mage_matches_default_formulas(loader):
    mage = loader.get_class("mage")
    for wave in (1, 5, 12):
        assert mage.stats_for_wave(wave) == DEFAULT_CLASS.stats_for_wave(wave)


def test_warlock_trades_health_for_mana(loader):
    warlock = loader.get_class("warlock").stats_for_wave(3)
    mage = loader.get_class("mage").stats_for_wave(3)

    assert warlock["health"] < mage["health"]
    assert warlock["mana"] > mage["mana"]
    assert warlock["spellpower"] == 45


def test_unknown_class_falls_back_to_default(loader, caplog):
    with caplog.at_level(logging.WARNING):
        assert loader.get_class("necromancer") is DEFAULT_CLASS
    assert "necromancer" in caplog.text


def test_none_class_is_default(loader):
    assert loader.get_class(None) is DEFAULT_CLASS


def test_missing_field_is_zero():
    partial = PlayerClass.from_dict("scout", {"health": "50"})
    stats = partial.stats_for_wave(4)

    assert set(stats) == set(CLASS_STATS)
    assert stats["health"] == 50
    assert stats["mana"] == 0


def test_malformed_formula_uses_fallback():
    broken = PlayerClass(
        id="broken",
        name="Broken",
        formulas={"health": "wave +"},
        fallbacks={"health": 95.0},
    )
    assert broken.stats_for_wave(1)["health"] == 95.0


def test_missing_data_dir_gives_only_default(tmp_path):
    loader = PlayerClassLoader(ConfigLoader(str(tmp_path)))
    assert loader.get_all_classes() == {}
    assert loader.get_class("mage") is DEFAULT_CLASS


def test_to_dict(loader):
    result = loader.get_class("battlemage").to_dict()
    assert result["name"] == "Battlemage"
    assert result["formulas"]["speed"] == "6"
