"""Immutable per-tick game state records."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from snake_game.grid import Cell
from snake_game.snake import Direction


class GameStatus(str, enum.Enum):
    """Lifecycle states of a single run."""

    RUNNING = "running"
    PAUSED = "paused"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class GameState:
    """Snapshot of a run between two ticks.

    The head is ``snake[0]``; the tail is ``snake[-1]``. Every update
    produces a new value; nothing mutates a state in place.
    """

    snake: tuple[Cell, ...]
    direction: Direction
    food: Cell
    speed: float
    score: int = 0
    pending_direction: Direction | None = None
    status: GameStatus = GameStatus.RUNNING
    tick: int = 0

    @property
    def head(self) -> Cell:
        return self.snake[0]

    @property
    def running(self) -> bool:
        return self.status is GameStatus.RUNNING

    @property
    def terminated(self) -> bool:
        return self.status is GameStatus.TERMINATED

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible primitives."""
        return {
            "tick": self.tick,
            "score": self.score,
            "speed": self.speed,
            "status": self.status.value,
            "running": self.running,
            "game_over": self.terminated,
            "direction": self.direction.name.lower(),
            "pending_direction": (
                self.pending_direction.name.lower()
                if self.pending_direction is not None else None
            ),
            "snake": [list(cell) for cell in self.snake],
            "food": list(self.food),
        }


@dataclass(frozen=True)
class StepResult:
    """Outcome of one :func:`~snake_game.engine.advance` call."""

    state: GameState
    terminal: bool
    ate: bool = False
