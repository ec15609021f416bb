"""Snake game: tick-based state machine on a wraparound grid."""

from snake_game.config import GameConfig
from snake_game.engine import (
    GameEngine,
    advance,
    new_game,
    set_direction,
    toggle_running,
)
from snake_game.grid import Grid
from snake_game.snake import Direction
from snake_game.state import GameState, GameStatus, StepResult
from snake_game.storage import HighScoreTracker, JsonFileStore, MemoryStore

__all__ = [
    "Direction",
    "GameConfig",
    "GameEngine",
    "GameState",
    "GameStatus",
    "Grid",
    "HighScoreTracker",
    "JsonFileStore",
    "MemoryStore",
    "StepResult",
    "advance",
    "new_game",
    "set_direction",
    "toggle_running",
]
