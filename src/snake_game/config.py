"""Game configuration."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from snake_game.grid import Cell, Grid
from snake_game.snake import Direction, step_head, validate_body
from snake_game.speed import SpeedPolicy, speed_for_score

logger = logging.getLogger(__name__)


def _first_step_hits_neck(
    snake: tuple[Cell, ...], direction: Direction, grid: Grid,
) -> bool:
    return len(snake) > 1 and step_head(snake[0], direction, grid) == snake[1]


@dataclass(frozen=True)
class GameConfig:
    """Board, speed, and rule settings for a game.

    Validated on construction; supports JSON serialization so a run can
    be reproduced from its saved config.
    """

    # Board
    cols: int = 20
    rows: int = 20
    initial_snake: tuple[Cell, ...] = ((9, 9), (8, 9), (7, 9))
    initial_direction: str = "right"

    # Speed (ticks per second)
    initial_speed: float = 6.0
    speed_policy: str = "linear"
    speed_increment: float = 0.5
    speed_step_every: int = 5
    max_speed: float | None = None

    # Rules
    tail_is_solid: bool = False
    auto_restart: bool = False

    # Randomness
    seed: int | None = None

    def __post_init__(self) -> None:
        # Normalise JSON lists back into hashable tuples.
        object.__setattr__(
            self, "initial_snake",
            tuple(tuple(cell) for cell in self.initial_snake),
        )
        grid = self.grid()
        validate_body(self.initial_snake, grid)
        if _first_step_hits_neck(self.initial_snake, self.direction, grid):
            raise ValueError(
                f"initial_direction {self.initial_direction!r} turns the snake "
                "back into its own body."
            )
        SpeedPolicy(self.speed_policy)
        if self.initial_speed <= 0:
            raise ValueError("initial_speed must be positive.")
        if self.speed_increment < 0:
            raise ValueError("speed_increment must not be negative.")
        if self.speed_step_every < 1:
            raise ValueError("speed_step_every must be at least 1.")
        if self.max_speed is not None and self.max_speed < self.initial_speed:
            raise ValueError("max_speed must not be below initial_speed.")

    @classmethod
    def classic(cls, **overrides) -> GameConfig:
        """Single-segment snake, 8 ticks/s plus one per 5 points, auto-restart."""
        params = {
            "initial_snake": ((10, 10),),
            "initial_speed": 8.0,
            "speed_policy": "stepped",
            "speed_step_every": 5,
            "tail_is_solid": True,
            "auto_restart": True,
        }
        params.update(overrides)
        return cls(**params)

    def grid(self) -> Grid:
        return Grid(cols=self.cols, rows=self.rows)

    @property
    def direction(self) -> Direction:
        return Direction.parse(self.initial_direction)

    def speed_for(self, score: int) -> float:
        """Tick rate for a run that has reached *score*."""
        return speed_for_score(
            score,
            self.initial_speed,
            policy=SpeedPolicy(self.speed_policy),
            increment=self.speed_increment,
            step_every=self.speed_step_every,
            max_speed=self.max_speed,
        )

    def replace(self, **overrides) -> GameConfig:
        """Return a copy with *overrides* applied (``None`` values ignored).

        Resizing the board without giving a new ``initial_snake`` moves
        the existing one so its head sits just up-left of the new centre,
        trimming segments that no longer fit on the smaller board.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        cols = changes.get("cols", self.cols)
        rows = changes.get("rows", self.rows)
        resized = (cols, rows) != (self.cols, self.rows)
        if resized and min(cols, rows) >= 2 and "initial_snake" not in changes:
            hx, hy = self.initial_snake[0]
            dx, dy = cols // 2 - 1 - hx, rows // 2 - 1 - hy
            moved: list[Cell] = []
            for x, y in self.initial_snake:
                cell = ((x + dx) % cols, (y + dy) % rows)
                if cell in moved:
                    break
                moved.append(cell)
            direction = Direction.parse(
                changes.get("initial_direction", self.initial_direction),
            )
            if _first_step_hits_neck(tuple(moved), direction, Grid(cols, rows)):
                moved = moved[:1]
            changes["initial_snake"] = tuple(moved)
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        d = asdict(self)
        d["initial_snake"] = [list(cell) for cell in self.initial_snake]
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
