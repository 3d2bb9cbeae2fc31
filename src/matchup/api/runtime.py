"""Runtime primitives backing the matchup HTTP API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from matchup.config import Settings, get_settings
from matchup.domain.allocation import MatchupOutcome
from matchup.domain.models import MatchupConfig, SessionState
from matchup.repository import StaticDataRepository
from matchup.services import MatchupService
from matchup.utils.rng import generate_seed

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionRecord:
    """Exclusion state for one browser session, plus request and seed counters."""

    state: SessionState
    requests: int = 0
    derived_seeds: int = 0


class SessionStore:
    """In-memory session table; nothing survives a restart."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> str:
        session_id = uuid4().hex
        self._sessions[session_id] = SessionRecord(state=SessionState())
        return session_id

    def get(self, session_id: str) -> SessionRecord:
        """Return the record for ``session_id`` or raise ``KeyError``."""

        return self._sessions[session_id]

    def reset(self, session_id: str) -> SessionRecord:
        record = self.get(session_id)
        record.state = SessionState(usage=dict(record.state.usage))
        return record

    def clear(self) -> None:
        self._sessions.clear()


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.repository = StaticDataRepository(self.settings.data_dir)
        self.rules = self.settings.rules()
        self.matchups = MatchupService(self.repository, rules=self.rules)
        self.sessions = SessionStore()

    def resolve_seed(self, session_id: str, config: MatchupConfig, seed: str | None) -> str:
        """Return ``seed`` or derive one from the session and a per-session counter.

        A derived seed is echoed back to the client so the matchup can be replayed.
        """

        if seed is not None:
            return seed
        record = self.sessions.get(session_id)
        derived = generate_seed(session_id, record.derived_seeds, config.mode)
        record.derived_seeds += 1
        return derived

    def generate(
        self, session_id: str, config: MatchupConfig, *, seed: str | None = None
    ) -> MatchupOutcome:
        """Run a generation for ``session_id`` and keep the returned state.

        The stored state is only replaced when generation succeeds.
        """

        record = self.sessions.get(session_id)
        outcome = self.matchups.generate_matchup(config, record.state, seed=seed)
        record.state = outcome.session
        record.requests += 1
        return outcome

    async def shutdown(self) -> None:
        logger.info("discarding %d in-memory sessions", len(self.sessions))
        self.sessions.clear()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
