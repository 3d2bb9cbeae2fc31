"""Unit tests for faction stat aggregation."""

from __future__ import annotations

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from matchup.domain.enums import Tier
from matchup.domain.models import FactionModifier
from matchup.domain.stats import (
    aggregate,
    calculate_faction_stats,
    classify_tier,
    group_units_by_faction,
    round_half_up,
)
from matchup.schemas.unit import UnitRecord


def _unit(**fields) -> UnitRecord:
    return UnitRecord(**fields)


def test_single_unit_scenario():
    units = [
        UnitRecord.model_validate(
            {
                "Faction": "Rome",
                "Armor": 10,
                "HP": 20,
                "Morale": 5,
                "Missile Block Chance": 0,
                "Melee Defense": 5,
            }
        )
    ]
    stats = aggregate(units, {"Rome": FactionModifier(survivability=2)})

    rome = stats["Rome"]
    assert rome.survivability == 80.0
    assert rome.melee_strength == 0.0
    assert rome.ranged_strength == 0.0
    assert rome.cavalry_prowess == 0.0
    assert rome.pilla_prowess == 0.0
    assert rome.total_strength == 80.0
    assert rome.tier is Tier.C


def test_empty_table_yields_empty_mapping():
    assert aggregate([], {}) == {}


@pytest.mark.parametrize("table", ["not a list", None, {"Faction": "Rome"}, b"units", 42])
def test_non_sequence_table_is_logged_and_ignored(table, caplog):
    with caplog.at_level(logging.ERROR, logger="matchup.domain.stats"):
        assert aggregate(table, {}) == {}
    assert any("not a sequence" in record.message for record in caplog.records)


def test_calculate_faction_stats_tolerates_non_sequence(caplog):
    with caplog.at_level(logging.ERROR, logger="matchup.domain.stats"):
        stats = calculate_faction_stats(None)
    assert stats.total_strength == 0.0
    assert stats.tier is Tier.C
    assert caplog.records


def test_unconditional_metrics_divide_by_unit_count():
    units = [
        _unit(faction="Athens", armor=10, hp=60, melee_attack=10),
        _unit(
            faction="Athens",
            armor=20,
            hp=60,
            melee_attack=20,
            range=100,
            base_missile_damage=10,
            accuracy=40,
            ap_missile_damage=5,
            ammo=20,
        ),
    ]
    stats = calculate_faction_stats(units)

    assert stats.survivability == 75.0
    assert stats.melee_strength == 15.0
    # range + ammo + missile fields of the only archer, divided by one
    assert stats.ranged_strength == 175.0


def test_cavalry_prowess_counts_only_cavalry_classes():
    units = [
        _unit(unit_class="Shock Cavalry", charge_bonus=40, melee_attack=30, armor=50),
        _unit(unit_class="Melee Cavalry", charge_bonus=20, melee_attack=20, armor=20),
        _unit(unit_class="Missile Cavalry", charge_bonus=90, melee_attack=90, armor=90),
        _unit(unit_class="Melee Infantry", charge_bonus=90, melee_attack=90, armor=90),
    ]
    assert calculate_faction_stats(units).cavalry_prowess == 90.0


def test_pilla_prowess_covers_short_range_units_inclusive_of_threshold():
    units = [
        _unit(range=35, missile_damage=40, ap_damage=10, ammo=2),
        _unit(range=80, missile_damage=30, ammo=4),
        _unit(range=0, missile_damage=500, ammo=500),
    ]
    stats = calculate_faction_stats(units)
    assert stats.pilla_prowess == 43.0
    assert stats.ranged_strength == 0.0


def test_ranged_strength_zero_regardless_of_modifier():
    units = [_unit(armor=50, range=40, missile_damage=10)]
    stats = calculate_faction_stats(units, FactionModifier(ranged_strength=5.0))
    assert stats.ranged_strength == 0.0


def test_modifier_scales_before_rounding():
    units = [_unit(armor=1), _unit(armor=0), _unit(armor=0)]
    # 1/3 * 3 rounds to exactly 1.0 only when scaled first
    stats = calculate_faction_stats(units, FactionModifier(survivability=3))
    assert stats.survivability == 1.0


def test_missing_faction_grouped_as_unknown():
    units = [_unit(armor=10), _unit(faction="", armor=20), _unit(faction="Iceni", armor=5)]
    grouped = group_units_by_faction(units)

    assert list(grouped) == ["Unknown", "Iceni"]
    assert len(grouped["Unknown"]) == 2

    stats = aggregate(units, {})
    assert stats["Unknown"].survivability == 15.0


def test_faction_without_modifier_uses_neutral_multipliers():
    units = [_unit(faction="Boii", armor=40, melee_attack=30)]
    stats = aggregate(units, {"Rome": FactionModifier(survivability=10)})
    assert stats["Boii"].survivability == 40.0
    assert stats["Boii"].melee_strength == 30.0


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.125, 0.13),
        (0.375, 0.38),
        (2.675, 2.67),  # binary value sits just below the half
        (80.0, 80.0),
        (0.0, 0.0),
    ],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize(
    ("total", "tier"),
    [
        (1000.01, Tier.S),
        (1000.0, Tier.A),
        (500.01, Tier.A),
        (500.0, Tier.B),
        (250.01, Tier.B),
        (250.0, Tier.C),
        (0.0, Tier.C),
    ],
)
def test_tier_boundaries(total, tier):
    assert classify_tier(total) is tier


unit_values = st.integers(min_value=0, max_value=200)


@given(
    rows=st.lists(st.tuples(unit_values, unit_values, unit_values), min_size=1, max_size=12),
    multiplier=st.floats(min_value=0.0, max_value=3.0, allow_nan=False),
)
def test_survivability_is_average_over_all_units(rows, multiplier):
    units = [_unit(armor=a, hp=h, morale=m, range=a) for a, h, m in rows]
    stats = calculate_faction_stats(units, FactionModifier(survivability=multiplier))

    raw = 0.0
    for armor, hp, morale in rows:
        raw += armor + hp + morale + 0 + 0
    assert stats.survivability == round_half_up(raw / len(units) * multiplier)
    assert stats.total_strength >= 0
    assert stats.total_strength == pytest.approx(
        stats.survivability
        + stats.melee_strength
        + stats.ranged_strength
        + stats.cavalry_prowess
        + stats.pilla_prowess
    )
