"""Matchup Service.

Wires the static data repository into the pure domain functions: faction stats
are aggregated once from the unit table and attached to the catalog, and every
generation request gets its own random source.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from matchup.domain.allocation import MatchupOutcome, faction_score, generate_matchup
from matchup.domain.models import BattleMap, Faction, FactionStats, MatchupConfig, SessionState
from matchup.domain.rules_config import DEFAULT_RULES, RulesConfig
from matchup.domain.stats import aggregate
from matchup.repository import StaticDataRepository
from matchup.utils.rng import create_rng

logger = logging.getLogger(__name__)


class MatchupService:
    """Service for scoring factions and generating matchups."""

    def __init__(self, repository: StaticDataRepository, *, rules: RulesConfig = DEFAULT_RULES):
        self.repository = repository
        self.rules = rules
        self._stats: dict[str, FactionStats] | None = None
        self._factions: list[Faction] | None = None
        self._maps: list[BattleMap] | None = None

    def aggregate_all(self) -> dict[str, FactionStats]:
        """Aggregate the full unit table into per-faction stats."""

        units = self.repository.load_units()
        modifiers = self.repository.load_modifiers()
        return aggregate(units, modifiers, rules=self.rules.scoring)

    def faction_stats(self) -> dict[str, FactionStats]:
        if self._stats is None:
            self._stats = self.aggregate_all()
        return self._stats

    def factions(self) -> list[Faction]:
        """Faction catalog with aggregated stats attached."""

        if self._factions is None:
            stats = self.faction_stats()
            catalog = self.repository.load_factions()
            missing = [f.name for f in catalog if f.name not in stats]
            if missing:
                logger.warning("no unit data for factions: %s", ", ".join(missing))
            self._factions = [replace(f, stats=stats.get(f.name)) for f in catalog]
        return self._factions

    def maps(self) -> list[BattleMap]:
        if self._maps is None:
            self._maps = self.repository.load_maps()
        return self._maps

    def score(self, faction: Faction) -> float:
        return faction_score(faction.stats, self.rules.allocation)

    def generate_matchup(
        self,
        config: MatchupConfig,
        session: SessionState,
        *,
        seed: str | None = None,
    ) -> MatchupOutcome:
        """Generate a matchup; a seed makes the result reproducible.

        Args:
            config: The user's selections
            session: Exclusion state from the previous request
            seed: Optional seed string (see ``matchup.utils.rng``)

        Returns:
            The matchup and the session state to keep for the next request
        """
        return generate_matchup(
            config,
            self.factions(),
            self.maps(),
            session,
            rng=create_rng(seed),
            rules=self.rules,
        )
