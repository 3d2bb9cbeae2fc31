"""Dataclasses describing every matchup entity.

The rules layer operates purely on these in-memory types.  Static tables are
validated into them by :mod:`matchup.repository.json_store`, and the API layer
translates them into response schemas.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import BattleType, FactionType, MatchupMode, MatchupOption, SettlementType, Tier


@dataclass(frozen=True, slots=True)
class FactionModifier:
    """Per-faction multipliers applied to the normalized metrics."""

    survivability: float = 1.0
    melee_strength: float = 1.0
    ranged_strength: float = 1.0
    cavalry_prowess: float = 1.0
    pilla_prowess: float = 1.0


NEUTRAL_MODIFIER = FactionModifier()


@dataclass(frozen=True, slots=True)
class FactionStats:
    """Weighted metrics derived from a faction's roster."""

    survivability: float
    melee_strength: float
    ranged_strength: float
    cavalry_prowess: float
    pilla_prowess: float
    total_strength: float
    tier: Tier


@dataclass(slots=True)
class Faction:
    """Playable faction from the catalog."""

    name: str
    faction_type: FactionType
    siege_capable: bool = False
    stats: FactionStats | None = None


@dataclass(frozen=True, slots=True)
class BattleMap:
    """Map catalog entry."""

    name: str
    settlement_type: SettlementType
    requires_siege: bool = False


@dataclass(frozen=True, slots=True)
class TeamMember:
    """A player paired with the faction they will command."""

    player: str
    faction: str
    stats: FactionStats | None


@dataclass(frozen=True, slots=True)
class TeamPercentages:
    """Share of the combined strength held by each team."""

    team1: float
    team2: float


@dataclass(slots=True)
class MatchupResult:
    """Outcome of a single generation request."""

    map_name: str
    teams: list[list[TeamMember]]
    team_strengths: list[float]
    mode: MatchupMode
    percentages: TeamPercentages | None = None
    pool_reset: bool = False
    filters_relaxed: bool = False

    @property
    def factions(self) -> list[str]:
        return [member.faction for team in self.teams for member in team]


@dataclass(frozen=True, slots=True)
class FactionUsage:
    """How often a faction was handed out during a session."""

    count: int
    last_player: str


@dataclass(frozen=True, slots=True)
class SessionState:
    """Caller-owned exclusion state carried between generation requests."""

    used_factions: tuple[str, ...] = ()
    usage: dict[str, FactionUsage] = field(default_factory=dict)


@dataclass(slots=True)
class MatchupConfig:
    """User selections for a generation request."""

    battle_type: BattleType | None
    settlement_type: SettlementType | None
    players: list[str] = field(default_factory=list)
    options: frozenset[MatchupOption] = frozenset()

    @property
    def mode(self) -> MatchupMode:
        if MatchupOption.ODK_CIVIL_WAR in self.options:
            return MatchupMode.FIXED
        if MatchupOption.BALANCED_MATCHUP in self.options:
            return MatchupMode.BALANCED
        return MatchupMode.RANDOM
