"""Matchup allocation rules.

Three modes are supported, resolved from the request options in priority
order:

* fixed: every player commands the same faction (ODK civil war).
* random: the eligible pool is shuffled and dealt team by team.
* balanced: repeated greedy constructions keep the one with the smallest
  strength gap between the two teams.

The functions here never mutate the caller's :class:`SessionState`; a fresh
state is returned alongside the result.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass

from matchup.domain.enums import MatchupMode, MatchupOption, SettlementType
from matchup.domain.models import (
    BattleMap,
    Faction,
    FactionStats,
    FactionUsage,
    MatchupConfig,
    MatchupResult,
    SessionState,
    TeamMember,
    TeamPercentages,
)
from matchup.domain.rules_config import DEFAULT_RULES, AllocationRules, RulesConfig
from matchup.domain.stats import round_half_up
from matchup.utils.rng import random_choice, shuffled

logger = logging.getLogger(__name__)


class MatchupError(RuntimeError):
    """Base class for recoverable generation failures."""


class MatchupValidationError(MatchupError):
    """Request is incomplete; nothing was generated."""


class MissingPlayerInputError(MatchupValidationError):
    pass


class MissingConfigurationError(MatchupValidationError):
    pass


class NoEligibleMapError(MatchupError):
    pass


class AllocationExhaustedError(MatchupError):
    """Balanced search found no qualifying arrangement within the attempt cap."""


@dataclass(slots=True)
class MatchupOutcome:
    """Generated matchup plus the session state the caller should keep."""

    result: MatchupResult
    session: SessionState


# --- Scoring ------------------------------------------------------------------


def faction_score(
    stats: FactionStats | None, rules: AllocationRules = DEFAULT_RULES.allocation
) -> float:
    """Normalize a faction's total strength onto a 0-10 scale.

    Strengths above the cap are not clipped, so the score may exceed 10.
    """

    if stats is None:
        return 0.0
    return round_half_up(stats.total_strength / rules.strength_cap * rules.score_scale)


def team_score(
    team: Sequence[TeamMember], rules: AllocationRules = DEFAULT_RULES.allocation
) -> float:
    return sum(faction_score(member.stats, rules) for member in team)


def team_percentages(team1: float, team2: float) -> TeamPercentages:
    """Split of combined strength; two empty teams are reported as even."""

    combined = team1 + team2
    if combined == 0:
        return TeamPercentages(team1=50.0, team2=50.0)
    return TeamPercentages(team1=team1 / combined * 100, team2=team2 / combined * 100)


# --- Request handling ---------------------------------------------------------


def validate_config(config: MatchupConfig) -> None:
    if any(not player.strip() for player in config.players):
        raise MissingPlayerInputError("Please fill in all player fields.")
    if config.battle_type is None or config.settlement_type is None:
        raise MissingConfigurationError("Please select Battle Type and Map type.")


def _player_name(players: Sequence[str], index: int) -> str:
    if index < len(players) and players[index]:
        return players[index]
    return f"Player {index + 1}"


def _reset_if_exhausted(
    factions: Sequence[Faction], session: SessionState, players_needed: int
) -> tuple[SessionState, bool]:
    if len(factions) - len(session.used_factions) < players_needed:
        logger.info("faction pool exhausted; all factions are available again")
        return SessionState(usage=dict(session.usage)), True
    return session, False


def select_map(
    maps: Sequence[BattleMap], settlement_type: SettlementType, rng: random.Random
) -> BattleMap:
    eligible = [
        battle_map
        for battle_map in maps
        if settlement_type == SettlementType.ALL or battle_map.settlement_type == settlement_type
    ]
    if not eligible:
        raise NoEligibleMapError(f"no maps available for settlement type '{settlement_type}'")
    return random_choice(rng, eligible)["choice"]


def eligible_factions(
    factions: Sequence[Faction],
    session: SessionState,
    battle_map: BattleMap,
    *,
    options: frozenset[MatchupOption],
    players_needed: int,
    rules: AllocationRules = DEFAULT_RULES.allocation,
) -> tuple[list[Faction], bool]:
    """Return the faction pool for ``battle_map`` and whether map filters were dropped."""

    used = set(session.used_factions)
    unused = [faction for faction in factions if faction.name not in used]
    if MatchupOption.BAN_SALLY in options:
        unused = [f for f in unused if f.faction_type != rules.banned_faction_type]

    pool = unused
    if battle_map.requires_siege:
        pool = [f for f in pool if f.siege_capable]
    if battle_map.settlement_type in (SettlementType.HELLENIC, SettlementType.BARBARIAN):
        pool = [f for f in pool if f.faction_type == battle_map.settlement_type]

    if len(pool) < players_needed:
        logger.info(
            "only %d factions fit map %s (need %d); dropping map filters",
            len(pool),
            battle_map.name,
            players_needed,
        )
        return unused, True
    return pool, False


# --- Modes --------------------------------------------------------------------


def _fixed_teams(
    factions: Sequence[Faction],
    players: Sequence[str],
    players_needed: int,
    rules: AllocationRules,
) -> list[list[TeamMember]]:
    stats = next((f.stats for f in factions if f.name == rules.fixed_faction), None)
    teams: list[list[TeamMember]] = [[] for _ in range(rules.team_count)]
    for index in range(players_needed):
        teams[index % rules.team_count].append(
            TeamMember(_player_name(players, index), rules.fixed_faction, stats)
        )
    return teams


def _random_teams(
    pool: Sequence[Faction],
    players: Sequence[str],
    per_team: int,
    rng: random.Random,
    rules: AllocationRules,
) -> list[list[TeamMember]]:
    deck = shuffled(rng, pool)
    teams: list[list[TeamMember]] = [[] for _ in range(rules.team_count)]
    player_index = 0
    for team in teams:
        for _ in range(per_team):
            # A short deck leaves the remaining slots empty.
            if not deck:
                continue
            faction = deck.pop()
            team.append(TeamMember(_player_name(players, player_index), faction.name, faction.stats))
            player_index += 1
    return teams


def closest_to_balance(
    candidates: Sequence[Faction],
    own: float,
    other: float,
    rules: AllocationRules = DEFAULT_RULES.allocation,
) -> Faction:
    """Candidate bringing ``own + score`` nearest to ``other``; earliest wins ties."""

    best = candidates[0]
    best_diff = abs(own + faction_score(best.stats, rules) - other)
    for candidate in candidates[1:]:
        diff = abs(own + faction_score(candidate.stats, rules) - other)
        if diff < best_diff:
            best, best_diff = candidate, diff
    return best


def _balanced_attempt(
    pool: Sequence[Faction],
    players: Sequence[str],
    per_team: int,
    settlement_type: SettlementType,
    requires_siege: bool,
    rng: random.Random,
    rules: AllocationRules,
) -> list[list[TeamMember]]:
    teams: list[list[TeamMember]] = [[] for _ in range(rules.team_count)]
    taken: set[str] = set()
    player_index = 0

    for team_index, team in enumerate(teams):
        for _ in range(per_team):
            candidates = [
                f
                for f in pool
                if f.name not in taken
                and (settlement_type == SettlementType.ALL or f.faction_type == settlement_type)
                and (not requires_siege or f.siege_capable)
            ]
            if not candidates:
                continue

            if team:
                own = team_score(team, rules)
                other = team_score(teams[0], rules) if team_index > 0 else 0.0
                selected = closest_to_balance(candidates, own, other, rules)
            else:
                selected = random_choice(rng, candidates)["choice"]

            taken.add(selected.name)
            team.append(
                TeamMember(_player_name(players, player_index), selected.name, selected.stats)
            )
            player_index += 1
    return teams


def _balanced_teams(
    pool: Sequence[Faction],
    players: Sequence[str],
    per_team: int,
    settlement_type: SettlementType,
    battle_map: BattleMap,
    rng: random.Random,
    rules: AllocationRules,
) -> tuple[list[list[TeamMember]], list[float]]:
    siege_capable = {f.name for f in pool if f.siege_capable}
    best: tuple[list[list[TeamMember]], list[float]] | None = None
    smallest_difference = math.inf

    for _ in range(rules.max_attempts):
        teams = _balanced_attempt(
            pool, players, per_team, settlement_type, battle_map.requires_siege, rng, rules
        )
        strengths = [team_score(team, rules) for team in teams]
        difference = abs(strengths[0] - strengths[1])

        if difference >= smallest_difference:
            continue
        if any(len(team) != per_team for team in teams):
            continue
        if battle_map.requires_siege and not all(
            any(member.faction in siege_capable for member in team) for team in teams
        ):
            continue
        smallest_difference = difference
        best = (teams, strengths)

    if best is None:
        raise AllocationExhaustedError(
            "Could not create a balanced matchup. Please try again."
        )
    return best


def _commit_usage(session: SessionState, teams: Sequence[Sequence[TeamMember]]) -> SessionState:
    used = list(session.used_factions)
    usage = dict(session.usage)
    for team in teams:
        for member in team:
            if member.faction not in used:
                used.append(member.faction)
            previous = usage.get(member.faction)
            usage[member.faction] = FactionUsage(
                count=(previous.count if previous else 0) + 1,
                last_player=member.player,
            )
    return SessionState(used_factions=tuple(used), usage=usage)


def generate_matchup(
    config: MatchupConfig,
    factions: Sequence[Faction],
    maps: Sequence[BattleMap],
    session: SessionState,
    *,
    rng: random.Random,
    rules: RulesConfig = DEFAULT_RULES,
) -> MatchupOutcome:
    """Generate one matchup for ``config``.

    Raises:
        MissingPlayerInputError: a player name is blank
        MissingConfigurationError: battle type or settlement type missing
        NoEligibleMapError: no map matches the settlement type
        AllocationExhaustedError: balanced search found nothing usable
    """

    validate_config(config)
    allocation = rules.allocation
    players_needed = config.battle_type.total_players
    per_team = config.battle_type.players_per_team

    session, pool_reset = _reset_if_exhausted(factions, session, players_needed)
    mode = config.mode

    if mode is MatchupMode.FIXED:
        teams = _fixed_teams(factions, config.players, players_needed, allocation)
        result = MatchupResult(
            map_name=allocation.fixed_map_name,
            teams=teams,
            team_strengths=[0.0] * allocation.team_count,
            mode=mode,
            pool_reset=pool_reset,
        )
        return MatchupOutcome(result=result, session=session)

    battle_map = select_map(maps, config.settlement_type, rng)
    pool, filters_relaxed = eligible_factions(
        factions,
        session,
        battle_map,
        options=config.options,
        players_needed=players_needed,
        rules=allocation,
    )

    if mode is MatchupMode.RANDOM:
        teams = _random_teams(pool, config.players, per_team, rng, allocation)
        strengths = [team_score(team, allocation) for team in teams]
    else:
        teams, strengths = _balanced_teams(
            pool, config.players, per_team, config.settlement_type, battle_map, rng, allocation
        )
        session = _commit_usage(session, teams)

    result = MatchupResult(
        map_name=battle_map.name,
        teams=teams,
        team_strengths=strengths,
        mode=mode,
        percentages=team_percentages(strengths[0], strengths[1]),
        pool_reset=pool_reset,
        filters_relaxed=filters_relaxed,
    )
    logger.info(
        "generated %s matchup on %s: %.2f vs %.2f", mode, battle_map.name, *strengths[:2]
    )
    return MatchupOutcome(result=result, session=session)
