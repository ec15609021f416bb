"""Toroidal grid geometry for the snake game."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

Cell = tuple[int, int]


class Grid:
    """Fixed-size toroidal board addressed by ``(x, y)`` cells.

    There are no walls: coordinates leaving one edge re-enter on the
    opposite edge. Occupancy masks are NumPy boolean arrays of shape
    ``(rows, cols)`` indexed as ``mask[y, x]``.
    """

    def __init__(self, cols: int = 20, rows: int = 20) -> None:
        if cols < 2 or rows < 2:
            raise ValueError("Grid dimensions must be at least 2×2.")
        self.cols = cols
        self.rows = rows

    @property
    def size(self) -> int:
        return self.cols * self.rows

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a coordinate lies within the grid."""
        x, y = cell
        return 0 <= x < self.cols and 0 <= y < self.rows

    def wrap(self, x: int, y: int) -> Cell:
        """Wrap coordinates around the grid edges."""
        return x % self.cols, y % self.rows

    def occupancy(self, cells: Iterable[Cell]) -> np.ndarray:
        """Return a boolean mask with the given cells marked occupied."""
        mask = np.zeros((self.rows, self.cols), dtype=bool)
        for x, y in cells:
            mask[y, x] = True
        return mask

    def free_cells(self, occupied: Iterable[Cell]) -> list[Cell]:
        """Return all cells not in *occupied*, in row-major order."""
        ys, xs = np.nonzero(~self.occupancy(occupied))
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"cols": self.cols, "rows": self.rows}
