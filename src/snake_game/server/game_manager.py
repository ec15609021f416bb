"""In-memory game registry, input handling, and state broadcasting."""

from __future__ import annotations

import functools
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from snake_game.config import GameConfig
from snake_game.engine import GameEngine
from snake_game.loop import GameLoop
from snake_game.server.models import Action, GameSummary
from snake_game.storage import HighScoreTracker, MemoryStore

logger = logging.getLogger(__name__)

_MAX_GAMES = 100


@dataclass
class GameSession:
    """One player's game: engine, tick loop, and listening sockets."""

    game_id: str
    engine: GameEngine
    loop: GameLoop | None = None
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)

    def summary(self) -> GameSummary:
        state = self.engine.state
        return GameSummary(
            game_id=self.game_id,
            status=state.status.value,
            score=state.score,
            high_score=self.engine.high_score,
            speed=state.speed,
            tick=state.tick,
        )


class GameManager:
    """Central registry managing all game sessions.

    All sessions share one :class:`HighScoreTracker`, so the persisted
    best score spans every game the server has run.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        high_scores: HighScoreTracker | None = None,
        max_games: int = _MAX_GAMES,
    ) -> None:
        if max_games < 1:
            raise ValueError("max_games must be at least 1.")
        self.config = config if config is not None else GameConfig()
        self.high_scores = (
            high_scores if high_scores is not None
            else HighScoreTracker(MemoryStore())
        )
        self._games: dict[str, GameSession] = {}
        self._max_games = max_games

    def create_game(self, **overrides) -> GameSession:
        """Create a game from the server config plus *overrides* and start it.

        Must be called from within a running event loop.
        """
        if len(self._games) >= self._max_games:
            raise ValueError("Too many games in progress.")
        config = self.config.replace(**overrides)

        game_id = uuid.uuid4().hex[:12]
        session = GameSession(
            game_id=game_id,
            engine=GameEngine(config, high_scores=self.high_scores),
        )
        session.loop = GameLoop(
            session.engine, on_state=functools.partial(self._broadcast, session),
        )
        self._games[game_id] = session
        session.loop.start()
        logger.info("Game %s created (%dx%d).", game_id, config.cols, config.rows)
        return session

    def get_game(self, game_id: str) -> GameSession | None:
        return self._games.get(game_id)

    def require_game(self, game_id: str) -> GameSession:
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        return game

    def list_games(self) -> list[GameSummary]:
        return [g.summary() for g in self._games.values()]

    async def handle_input(
        self,
        game_id: str,
        direction: str | None = None,
        action: str | None = None,
    ) -> dict:
        """Apply a direction change or action and return the new state.

        Raises ``KeyError`` for unknown games and ``ValueError`` for
        malformed directions or actions.
        """
        game = self.require_game(game_id)
        assert game.loop is not None  # noqa: S101
        async with game.loop.lock:
            if direction is not None:
                game.engine.set_direction(direction)
            if action is not None:
                command = Action(action)
                if command is Action.TOGGLE:
                    game.engine.toggle_running()
                else:
                    game.engine.reset()
            state = game.engine.get_state()
        if action == Action.RESET.value and not game.loop.running:
            # The previous run ended its loop; start ticking the new one.
            game.loop.start()
        if action is not None:
            await self._broadcast(game, state)
        return state

    async def remove_game(self, game_id: str) -> None:
        """Stop a game's loop, close its sockets, and forget it."""
        game = self._games.pop(game_id, None)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        await self._shutdown(game)
        logger.info("Game %s removed.", game_id)

    async def _shutdown(self, game: GameSession) -> None:
        if game.loop is not None:
            await game.loop.stop()
        for ws in list(game.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game closed.")
            except Exception:
                logger.warning("Failed closing socket in game %s.", game.game_id)
        game.sockets.clear()

    async def _broadcast(self, game: GameSession, state: dict) -> None:
        """Send game state to every connected socket."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live list without affecting this send loop.
        for ws in list(game.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in game.sockets:
                game.sockets.remove(ws)

    async def cleanup(self) -> None:
        """Stop every tick loop and drop all sessions."""
        for game in list(self._games.values()):
            await self._shutdown(game)
        self._games.clear()
        logger.info("GameManager cleanup complete.")
