"""Tick-based game state machine.

The module-level functions are pure: each takes a :class:`GameState` and
returns a new one. :class:`GameEngine` wraps them with the mutable pieces
a running game needs (RNG, current state, high-score persistence).
"""

from __future__ import annotations

import dataclasses
import logging

import numpy as np

from snake_game.config import GameConfig
from snake_game.food import place_food
from snake_game.snake import Direction, step_head
from snake_game.state import GameState, GameStatus, StepResult
from snake_game.storage import HighScoreTracker, MemoryStore

logger = logging.getLogger(__name__)


def new_game(
    config: GameConfig, rng: np.random.Generator | None = None,
) -> GameState:
    """Return a fresh running state with food placed off the snake."""
    snake = config.initial_snake
    return GameState(
        snake=snake,
        direction=config.direction,
        food=place_food(config.grid(), snake, rng),
        speed=config.initial_speed,
    )


def set_direction(state: GameState, direction: Direction | str) -> GameState:
    """Queue *direction* for the next tick.

    A direction that reverses the active one is ignored. A later valid
    call before the next tick replaces the queued direction.
    """
    direction = Direction.parse(direction)
    if direction.is_reverse_of(state.direction):
        return state
    return dataclasses.replace(state, pending_direction=direction)


def toggle_running(state: GameState) -> GameState:
    """Flip between running and paused. Terminated runs stay terminated."""
    if state.status is GameStatus.RUNNING:
        return dataclasses.replace(state, status=GameStatus.PAUSED)
    if state.status is GameStatus.PAUSED:
        return dataclasses.replace(state, status=GameStatus.RUNNING)
    return state


def advance(
    state: GameState,
    config: GameConfig,
    rng: np.random.Generator | None = None,
) -> StepResult:
    """Advance the game by one tick.

    Paused states come back unchanged and non-terminal; terminated states
    come back unchanged and terminal.
    """
    if state.status is GameStatus.PAUSED:
        return StepResult(state, terminal=False)
    if state.status is GameStatus.TERMINATED:
        return StepResult(state, terminal=True)

    direction = state.direction
    pending = state.pending_direction
    if pending is not None and not pending.is_reverse_of(direction):
        direction = pending

    grid = config.grid()
    new_head = step_head(state.head, direction, grid)
    will_grow = new_head == state.food

    # The tail moves away this tick unless the snake grows.
    occupied = set(state.snake)
    if not will_grow and not config.tail_is_solid:
        occupied.discard(state.snake[-1])

    if new_head in occupied:
        terminated = dataclasses.replace(
            state,
            direction=direction,
            pending_direction=None,
            status=GameStatus.TERMINATED,
            tick=state.tick + 1,
        )
        return StepResult(terminated, terminal=True)

    if will_grow:
        snake = (new_head, *state.snake)
        score = state.score + 1
        moved = dataclasses.replace(
            state,
            snake=snake,
            score=score,
            speed=config.speed_for(score),
            food=place_food(grid, snake, rng),
        )
    else:
        moved = dataclasses.replace(state, snake=(new_head, *state.snake[:-1]))

    moved = dataclasses.replace(
        moved,
        direction=direction,
        pending_direction=None,
        tick=state.tick + 1,
    )
    return StepResult(moved, terminal=False, ate=will_grow)


class GameEngine:
    """Single-player engine owning the current state and high score.

    Each call to :meth:`step` advances the game by one tick and returns
    the serializable state dictionary.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        high_scores: HighScoreTracker | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = np.random.default_rng(
            seed if seed is not None else self.config.seed,
        )
        self.high_scores = (
            high_scores if high_scores is not None
            else HighScoreTracker(MemoryStore())
        )
        self.state = new_game(self.config, self.rng)
        self.runs = 1
        self.last_score: int | None = None
        self._score_recorded = False

    @property
    def game_over(self) -> bool:
        return self.state.terminated

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def high_score(self) -> int:
        return self.high_scores.value

    def set_direction(self, direction: Direction | str) -> None:
        self.state = set_direction(self.state, direction)

    def toggle_running(self) -> None:
        self.state = toggle_running(self.state)

    def step(self) -> dict:
        """Advance one tick and return the full game state."""
        result = advance(self.state, self.config, self.rng)
        if result.terminal and not self.state.terminated:
            self.state = result.state
            logger.info(
                "Snake died at tick %d with score %d.",
                self.state.tick, self.state.score,
            )
            self.last_score = self.state.score
            self._record_score()
            if self.config.auto_restart:
                self._restart()
        else:
            self.state = result.state
        return self.get_state()

    def reset(self) -> dict:
        """Start a new run, first recording the current run's score."""
        self._record_score()
        self._restart()
        return self.get_state()

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        state = self.state.to_dict()
        state["high_score"] = self.high_score
        state["runs"] = self.runs
        state["last_score"] = self.last_score
        state["grid"] = self.config.grid().to_dict()
        return state

    def _record_score(self) -> None:
        if not self._score_recorded:
            self.high_scores.record(self.state.score)
            self._score_recorded = True

    def _restart(self) -> None:
        self.state = new_game(self.config, self.rng)
        self.runs += 1
        self._score_recorded = False
