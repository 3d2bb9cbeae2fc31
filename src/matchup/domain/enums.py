"""Enumerations shared by the matchup domain."""

from __future__ import annotations

from enum import StrEnum


class BattleType(StrEnum):
    """Supported battle sizes; the leading digit is the players per team."""

    ONE_V_ONE = "1v1"
    TWO_V_TWO = "2v2"
    THREE_V_THREE = "3v3"

    @property
    def players_per_team(self) -> int:
        return int(self.value[0])

    @property
    def total_players(self) -> int:
        return self.players_per_team * 2


class SettlementType(StrEnum):
    """Map settlement filter chosen by the user."""

    ALL = "all"
    BARBARIAN = "barbarian"
    HELLENIC = "hellenic"


class FactionType(StrEnum):
    """Settlement affinity of a faction."""

    HELLENIC = "hellenic"
    BARBARIAN = "barbarian"
    EASTERN = "eastern"
    SALLY = "sally"


class MatchupOption(StrEnum):
    """Optional toggles for a generation request."""

    BAN_SALLY = "ban_sally"
    BALANCED_MATCHUP = "balanced_matchup"
    ODK_CIVIL_WAR = "odk_civil_war"


class MatchupMode(StrEnum):
    """Allocation strategy resolved from the option set."""

    FIXED = "fixed"
    RANDOM = "random"
    BALANCED = "balanced"


class Tier(StrEnum):
    """Coarse strength label derived from total strength."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
