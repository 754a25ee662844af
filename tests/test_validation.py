"""
Testy dla walidacji formuł w plikach danych.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from spellcraft.core.config_loader import ConfigLoader, SpellCatalog
from spellcraft.core.errors import DivisionByZeroError, MalformedExpressionError, RelicDefinitionError
from spellcraft.core.validation import (
    validate_all, validate_catalog, validate_classes, validate_levels, validate_relics,
)


DATA_PATH = Path(__file__).parent.parent / "data"


def test_shipped_data_is_valid():
    assert validate_all(ConfigLoader(str(DATA_PATH))) == []


def test_catalog_reports_each_broken_field():
    catalog = SpellCatalog({
        "arcane_bolt": {
            "damage": {"amount": "25 +"},
            "mana_cost": "10",
            "projectile": {"speed": "power 0 /"},
        },
        "homing": {"mana_adder": "wave"},
    })

    issues = validate_catalog(catalog)

    assert [(i.key, i.field) for i in issues] == [
        ("arcane_bolt", "damage.amount"),
        ("arcane_bolt", "projectile.speed"),
    ]
    assert isinstance(issues[0].error, MalformedExpressionError)
    assert isinstance(issues[1].error, DivisionByZeroError)


def test_catalog_allows_resolved_field_names():
    catalog = SpellCatalog({"arcane_blast": {"secondary_damage": "damage 4 /"}})
    assert validate_catalog(catalog) == []


def test_classes_only_know_wave():
    issues = validate_classes({"mage": {"health": "95 wave +", "mana": "power 2 *"}})

    [issue] = issues
    assert (issue.source, issue.key, issue.field) == ("classes", "mage", "mana")


def test_levels_use_integer_evaluator():
    levels = {"Easy": {"spawns": [{"enemy": "zombie", "count": "1.5", "hp": "base wave +"}]}}

    [issue] = validate_levels(levels, {"zombie": {"hp": 20}})

    assert issue.key == "Easy[0]"
    assert issue.field == "count"


def test_issue_str_and_dict():
    [issue] = validate_classes({"mage": {"speed": "+"}})

    assert str(issue).startswith("[classes] mage.speed:")
    assert issue.to_dict()["expression"] == "+"


@pytest.fixture
def broken_data(tmp_path):
    (tmp_path / "spells.yaml").write_text(
        'spells:\n  arcane_bolt:\n    mana_cost: "10 0 %"\n', encoding="utf-8"
    )
    (tmp_path / "classes.yaml").write_text(
        'classes:\n  mage:\n    health: "wave"\n', encoding="utf-8"
    )
    return ConfigLoader(str(tmp_path))


def test_validate_all_collects_issues(broken_data, caplog):
    issues = validate_all(broken_data)

    assert len(issues) == 1
    assert "arcane_bolt.mana_cost" in caplog.text


def test_validate_all_strict_raises(broken_data):
    with pytest.raises(DivisionByZeroError):
        validate_all(broken_data, strict=True)


@pytest.mark.parametrize("sequence", [[0], [2, -1], [1, "x"]])
def test_levels_report_bad_sequence(sequence):
    levels = {"Easy": {"spawns": [{"enemy": "zombie", "count": "3", "sequence": sequence}]}}

    [issue] = validate_levels(levels, {"zombie": {"hp": 20}})

    assert (issue.source, issue.key, issue.field) == ("enemies", "Easy[0]", "sequence")
    assert isinstance(issue.error, MalformedExpressionError)


def test_levels_accept_positive_sequence():
    levels = {"Easy": {"spawns": [{"enemy": "zombie", "count": "3", "sequence": [1, 2]}]}}
    assert validate_levels(levels, {"zombie": {"hp": 20}}) == []


def test_relics_report_types_and_amounts():
    relics = {
        "scroll": {"trigger": {"type": "take-damage"}, "effect": {"type": "gain-mana", "amount": "10"}},
        "elephant": {"trigger": {"type": "stand-still"}, "effect": {"type": "gain-spellpower", "amount": "wave 1.5 *"}},
    }

    issues = validate_relics(relics)

    assert [(i.key, i.field) for i in issues] == [("elephant", "trigger.type"), ("elephant", "effect.amount")]
    assert isinstance(issues[0].error, RelicDefinitionError)
    assert isinstance(issues[1].error, MalformedExpressionError)
