"""HTTP routes for the matchup API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field

from matchup.api.runtime import ApiState
from matchup.domain import models as dm
from matchup.domain.allocation import (
    AllocationExhaustedError,
    MatchupValidationError,
    NoEligibleMapError,
)
from matchup.domain.enums import (
    BattleType,
    FactionType,
    MatchupMode,
    MatchupOption,
    SettlementType,
    Tier,
)

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class FactionStatsPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    survivability: float
    melee_strength: float
    ranged_strength: float
    cavalry_prowess: float
    pilla_prowess: float
    total_strength: float
    tier: Tier


class FactionSummary(BaseModel):
    name: str
    faction_type: FactionType
    siege_capable: bool
    score: float
    stats: FactionStatsPayload | None


class MapSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    settlement_type: SettlementType
    requires_siege: bool


class SessionCreated(BaseModel):
    id: str


class SessionSummary(BaseModel):
    id: str
    requests: int
    used_factions: list[str]


class MatchupRequest(BaseModel):
    battle_type: BattleType | None = None
    settlement_type: SettlementType | None = None
    players: list[str] = Field(default_factory=list, max_length=6)
    options: list[MatchupOption] = Field(default_factory=list)
    seed: str | None = Field(default=None, min_length=1)


class TeamMemberPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player: str
    faction: str
    stats: FactionStatsPayload | None


class PercentagesPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team1: float
    team2: float


class MatchupResponse(BaseModel):
    map: str
    mode: MatchupMode
    teams: list[list[TeamMemberPayload]]
    team_strengths: list[float]
    percentages: PercentagesPayload | None
    pool_reset: bool
    filters_relaxed: bool
    used_factions: list[str]
    seed: str


def _session_or_404(state: ApiState, session_id: str):
    try:
        return state.sessions.get(session_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="session not found"
        ) from exc


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "factions": len(state.matchups.factions()),
        "maps": len(state.matchups.maps()),
        "sessions": len(state.sessions),
    }


@router.get("/factions", response_model=list[FactionSummary])
async def list_factions(state: ApiStateDep) -> list[FactionSummary]:
    return [
        FactionSummary(
            name=faction.name,
            faction_type=faction.faction_type,
            siege_capable=faction.siege_capable,
            score=state.matchups.score(faction),
            stats=(
                FactionStatsPayload.model_validate(faction.stats)
                if faction.stats is not None
                else None
            ),
        )
        for faction in state.matchups.factions()
    ]


@router.get("/maps", response_model=list[MapSummary])
async def list_maps(state: ApiStateDep) -> list[MapSummary]:
    return [MapSummary.model_validate(battle_map) for battle_map in state.matchups.maps()]


@router.post("/sessions", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
async def create_session(state: ApiStateDep) -> SessionCreated:
    return SessionCreated(id=state.sessions.create())


@router.get("/sessions/{session_id}", response_model=SessionSummary)
async def get_session(session_id: str, state: ApiStateDep) -> SessionSummary:
    record = _session_or_404(state, session_id)
    return SessionSummary(
        id=session_id,
        requests=record.requests,
        used_factions=list(record.state.used_factions),
    )


@router.delete("/sessions/{session_id}/used-factions", response_model=SessionSummary)
async def reset_used_factions(session_id: str, state: ApiStateDep) -> SessionSummary:
    _session_or_404(state, session_id)
    record = state.sessions.reset(session_id)
    return SessionSummary(id=session_id, requests=record.requests, used_factions=[])


@router.post("/sessions/{session_id}/matchups", response_model=MatchupResponse)
async def generate_matchup(
    session_id: str,
    request: MatchupRequest,
    state: ApiStateDep,
) -> MatchupResponse:
    _session_or_404(state, session_id)
    config = dm.MatchupConfig(
        battle_type=request.battle_type,
        settlement_type=request.settlement_type,
        players=request.players,
        options=frozenset(request.options),
    )
    seed = state.resolve_seed(session_id, config, request.seed)
    try:
        outcome = state.generate(session_id, config, seed=seed)
    except MatchupValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (AllocationExhaustedError, NoEligibleMapError) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    result = outcome.result
    return MatchupResponse(
        map=result.map_name,
        mode=result.mode,
        teams=[
            [TeamMemberPayload.model_validate(member) for member in team] for team in result.teams
        ],
        team_strengths=result.team_strengths,
        percentages=(
            PercentagesPayload.model_validate(result.percentages)
            if result.percentages is not None
            else None
        ),
        pool_reset=result.pool_reset,
        filters_relaxed=result.filters_relaxed,
        used_factions=list(outcome.session.used_factions),
        seed=seed,
    )
