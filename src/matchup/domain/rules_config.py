"""Declarative rule configuration for scoring and allocation."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import FactionType


@dataclass(frozen=True, slots=True)
class ScoringRules:
    """Constants used when aggregating unit statistics."""

    missile_range_threshold: float = 80.0  # range above this counts as ranged
    cavalry_classes: tuple[str, ...] = ("Shock Cavalry", "Melee Cavalry")
    tier_s_threshold: float = 1000.0
    tier_a_threshold: float = 500.0
    tier_b_threshold: float = 250.0
    unknown_faction: str = "Unknown"


@dataclass(frozen=True, slots=True)
class AllocationRules:
    """Constants used by the matchup allocator."""

    strength_cap: float = 2000.0
    score_scale: float = 10.0
    max_attempts: int = 100
    team_count: int = 2
    fixed_faction: str = "Odrysian Kingdom"
    fixed_map_name: str = "Any"
    banned_faction_type: FactionType = FactionType.SALLY


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    scoring: ScoringRules = ScoringRules()
    allocation: AllocationRules = AllocationRules()


DEFAULT_RULES = RulesConfig()
