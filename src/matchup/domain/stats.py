"""Faction stat aggregation.

Unit rosters are reduced to five metrics per faction:

* ``survivability`` and ``melee_strength`` average over every unit.
* ``ranged_strength`` averages over units with a range above the missile
  threshold (bows, slings, artillery).
* ``cavalry_prowess`` averages over shock and melee cavalry.
* ``pilla_prowess`` averages over units with a short thrown-weapon range.

Each metric is scaled by the faction's modifier and rounded to cents; the sum
of the rounded metrics determines the tier.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from matchup.domain.enums import Tier
from matchup.domain.models import NEUTRAL_MODIFIER, FactionModifier, FactionStats
from matchup.domain.rules_config import DEFAULT_RULES, ScoringRules
from matchup.schemas.unit import UnitRecord

logger = logging.getLogger(__name__)


def round_half_up(value: float, places: int = 2) -> float:
    """Round ``value`` half away from zero using its exact binary expansion."""

    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def classify_tier(total_strength: float, rules: ScoringRules = DEFAULT_RULES.scoring) -> Tier:
    if total_strength > rules.tier_s_threshold:
        return Tier.S
    if total_strength > rules.tier_a_threshold:
        return Tier.A
    if total_strength > rules.tier_b_threshold:
        return Tier.B
    return Tier.C


@dataclass(slots=True)
class _RawTotals:
    survivability: float = 0.0
    melee_strength: float = 0.0
    ranged_strength: float = 0.0
    cavalry_prowess: float = 0.0
    pilla_prowess: float = 0.0
    missile_units: int = 0
    cavalry_units: int = 0
    pilla_units: int = 0


def _is_unit_sequence(units: object) -> bool:
    return isinstance(units, Sequence) and not isinstance(units, str | bytes)


def _accumulate(units: Sequence[UnitRecord], rules: ScoringRules) -> _RawTotals:
    totals = _RawTotals()
    for unit in units:
        totals.survivability += (
            unit.armor + unit.hp + unit.morale + unit.missile_block_chance + unit.melee_defense
        )
        totals.melee_strength += (
            unit.melee_attack
            + unit.base_damage
            + unit.charge_bonus
            + unit.ap_damage
            + unit.bonus_vs_infantry
        )

        if unit.range > rules.missile_range_threshold:
            totals.ranged_strength += (
                unit.base_missile_damage
                + unit.accuracy
                + unit.ap_missile_damage
                + unit.range
                + unit.ammo
            )
            totals.missile_units += 1

        if unit.unit_class in rules.cavalry_classes:
            totals.cavalry_prowess += unit.charge_bonus + unit.melee_attack + unit.armor
            totals.cavalry_units += 1

        if 0 < unit.range <= rules.missile_range_threshold:
            totals.pilla_prowess += unit.missile_damage + unit.ap_damage + unit.ammo
            totals.pilla_units += 1
    return totals


def _scaled(total: float, count: int, multiplier: float) -> float:
    # Conditional metrics with no qualifying units are exactly zero.
    if count == 0:
        return 0.0
    return round_half_up(total / count * multiplier)


def calculate_faction_stats(
    units: Sequence[UnitRecord],
    modifier: FactionModifier | None = None,
    *,
    rules: ScoringRules = DEFAULT_RULES.scoring,
) -> FactionStats:
    """Compute the weighted metrics for a single faction's roster."""

    if not _is_unit_sequence(units):
        logger.error("units is not a sequence: %r", units)
        units = ()

    modifier = modifier or NEUTRAL_MODIFIER
    totals = _accumulate(units, rules)
    unit_count = len(units) or 1

    survivability = _scaled(totals.survivability, unit_count, modifier.survivability)
    melee_strength = _scaled(totals.melee_strength, unit_count, modifier.melee_strength)
    ranged_strength = _scaled(totals.ranged_strength, totals.missile_units, modifier.ranged_strength)
    cavalry_prowess = _scaled(totals.cavalry_prowess, totals.cavalry_units, modifier.cavalry_prowess)
    pilla_prowess = _scaled(totals.pilla_prowess, totals.pilla_units, modifier.pilla_prowess)

    total_strength = (
        survivability + melee_strength + ranged_strength + cavalry_prowess + pilla_prowess
    )
    return FactionStats(
        survivability=survivability,
        melee_strength=melee_strength,
        ranged_strength=ranged_strength,
        cavalry_prowess=cavalry_prowess,
        pilla_prowess=pilla_prowess,
        total_strength=total_strength,
        tier=classify_tier(total_strength, rules),
    )


def group_units_by_faction(
    units: Sequence[UnitRecord], *, rules: ScoringRules = DEFAULT_RULES.scoring
) -> dict[str, list[UnitRecord]]:
    """Partition units by owning faction, preserving first-seen order."""

    grouped: dict[str, list[UnitRecord]] = {}
    for unit in units:
        grouped.setdefault(unit.faction or rules.unknown_faction, []).append(unit)
    return grouped


def aggregate(
    units: Sequence[UnitRecord],
    modifiers: Mapping[str, FactionModifier],
    *,
    rules: ScoringRules = DEFAULT_RULES.scoring,
) -> dict[str, FactionStats]:
    """Aggregate a unit table into per-faction stats.

    A table that is not a sequence is logged and treated as empty.
    """

    if not _is_unit_sequence(units):
        logger.error("unit table is not a sequence (%s); treating it as empty", type(units))
        return {}

    stats: dict[str, FactionStats] = {}
    for faction_name, faction_units in group_units_by_faction(units, rules=rules).items():
        stats[faction_name] = calculate_faction_stats(
            faction_units, modifiers.get(faction_name), rules=rules
        )
    logger.debug("aggregated stats for %d factions from %d units", len(stats), len(units))
    return stats
