"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_game.config import GameConfig
from snake_game.server.game_manager import GameManager
from snake_game.server.routes import router, scores_router
from snake_game.server.websocket import ws_router
from snake_game.storage import HighScoreTracker, KeyValueStore, MemoryStore


def create_app(
    config: GameConfig | None = None,
    store: KeyValueStore | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        tracker = HighScoreTracker(store if store is not None else MemoryStore())
        app.state.game_manager = GameManager(config, high_scores=tracker)
        yield
        await app.state.game_manager.cleanup()

    app = FastAPI(title="Snake Game API", version="0.1.0", lifespan=_lifespan)
    app.include_router(router)
    app.include_router(scores_router)
    app.include_router(ws_router)
    return app
