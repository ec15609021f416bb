"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_game.grid import Cell, Grid

logger = logging.getLogger(__name__)

# Returned when the snake fills the whole board.
FALLBACK_CELL: tuple[int, int] = (0, 0)


def place_food(
    grid: Grid,
    occupied: Iterable[Cell],
    rng: np.random.Generator | None = None,
) -> Cell:
    """Pick a food cell uniformly at random from the unoccupied cells.

    Uses the supplied NumPy RNG so placement is reproducible under a
    seed. Fails closed with :data:`FALLBACK_CELL` when no cell is free.
    """
    free = grid.free_cells(occupied)
    if not free:
        logger.warning("No free cells for food; using fallback %s.", FALLBACK_CELL)
        return FALLBACK_CELL
    if rng is None:
        rng = np.random.default_rng()
    return free[int(rng.integers(len(free)))]
