"""Tests for the static JSON data repository."""

from __future__ import annotations

import json
import logging

import pytest

from matchup.config import PACKAGE_DATA_DIR
from matchup.domain import models as dm
from matchup.domain.enums import FactionType, SettlementType
from matchup.repository import StaticDataRepository


def _write(path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_load_units_accepts_display_keys(tmp_path):
    _write(
        tmp_path / "units_stats.json",
        [
            {"Name": "Hoplites", "Faction": "Athens", "Class": "Spear Infantry", "Armor": 65},
            {"Faction": "Athens", "Range": 140, "Ammo": 25},
        ],
    )
    units = StaticDataRepository(tmp_path).load_units()

    assert len(units) == 2
    assert units[0].name == "Hoplites"
    assert units[0].unit_class == "Spear Infantry"
    assert units[0].armor == 65
    assert units[0].hp == 0
    assert units[1].range == 140


def test_load_units_ignores_non_list_table(tmp_path, caplog):
    _write(tmp_path / "units_stats.json", {"Faction": "Athens"})
    with caplog.at_level(logging.ERROR, logger="matchup.repository.json_store"):
        assert StaticDataRepository(tmp_path).load_units() == []
    assert caplog.records


def test_missing_modifiers_file_means_neutral(tmp_path):
    assert StaticDataRepository(tmp_path).load_modifiers() == {}


def test_load_modifiers_fills_defaults(tmp_path):
    _write(tmp_path / "faction_modifiers.json", {"Rome": {"survivability": 2}})
    modifiers = StaticDataRepository(tmp_path).load_modifiers()
    assert modifiers == {"Rome": dm.FactionModifier(survivability=2.0)}


def test_load_factions_and_maps(tmp_path):
    _write(
        tmp_path / "factions.json",
        [
            {"name": "Athens", "faction_type": "hellenic", "siege_capable": True},
            {"name": "Iceni", "faction_type": "barbarian"},
        ],
    )
    _write(
        tmp_path / "maps.json",
        [{"name": "Alesia", "settlement_type": "barbarian", "requires_siege": True}],
    )
    repo = StaticDataRepository(tmp_path)

    factions = repo.load_factions()
    assert [f.name for f in factions] == ["Athens", "Iceni"]
    assert factions[0].faction_type is FactionType.HELLENIC
    assert factions[1].siege_capable is False
    assert factions[1].stats is None

    maps = repo.load_maps()
    assert maps == [dm.BattleMap("Alesia", SettlementType.BARBARIAN, requires_siege=True)]


def test_duplicate_faction_names_rejected(tmp_path):
    _write(
        tmp_path / "factions.json",
        [
            {"name": "Athens", "faction_type": "hellenic"},
            {"name": "Athens", "faction_type": "hellenic"},
        ],
    )
    with pytest.raises(ValueError, match="duplicate faction names"):
        StaticDataRepository(tmp_path).load_factions()


def test_packaged_tables_load():
    repo = StaticDataRepository(PACKAGE_DATA_DIR)

    factions = repo.load_factions()
    unit_factions = {unit.faction for unit in repo.load_units()}
    assert {f.name for f in factions} <= unit_factions
    assert set(repo.load_modifiers()) <= {f.name for f in factions}
    assert {m.settlement_type for m in repo.load_maps()} == {
        SettlementType.HELLENIC,
        SettlementType.BARBARIAN,
    }
