"""Service layer for the matchup generator.

Production Usage:
    from matchup.repository import StaticDataRepository
    from matchup.services import MatchupService

    service = MatchupService(StaticDataRepository(settings.data_dir))
    outcome = service.generate_matchup(config, SessionState())

Testing Usage:
    Point a ``StaticDataRepository`` at a temporary directory holding small JSON
    tables, or call :func:`matchup.domain.allocation.generate_matchup` directly
    with in-memory factions and a seeded ``random.Random``.
"""

from matchup.services.matchup_service import MatchupService

__all__ = ["MatchupService"]
