"""FastAPI application wiring for the matchup generator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from matchup.api import routes
from matchup.api.runtime import ApiState, build_state
from matchup.config import get_settings

logger = logging.getLogger(__name__)


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        logger.info(
            "matchup API ready: %d factions, %d maps from %s",
            len(state.matchups.factions()),
            len(state.matchups.maps()),
            state.settings.data_dir,
        )
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Matchup Generator API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(routes.router)
    return app


app = create_app()
