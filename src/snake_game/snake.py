"""Movement directions and snake body helpers."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from numbers import Integral

from snake_game.grid import Cell, Grid


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values.

    Screen coordinates: ``y`` grows downward, so ``UP`` is ``(0, -1)``.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> Direction:
        return Direction((-self.dx, -self.dy))

    def is_reverse_of(self, other: Direction) -> bool:
        """True when moving this way would instantly reverse *other*."""
        return self.dx + other.dx == 0 and self.dy + other.dy == 0

    @classmethod
    def parse(cls, value: Direction | str | Sequence[int]) -> Direction:
        """Build a direction from a member, a name, or a unit vector.

        Raises ``ValueError`` for unknown names and non-unit vectors.
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown direction: {value!r}") from None
        try:
            dx, dy = value
        except (TypeError, ValueError):
            raise ValueError(f"Not a direction vector: {value!r}") from None
        if not (isinstance(dx, Integral) and isinstance(dy, Integral)):
            raise ValueError(f"Direction components must be integers: {value!r}")
        dx, dy = int(dx), int(dy)
        try:
            return cls((dx, dy))
        except ValueError:
            raise ValueError(
                f"Direction must be a unit vector, got ({dx}, {dy})."
            ) from None


def step_head(head: Cell, direction: Direction, grid: Grid) -> Cell:
    """Compute the next head position, wrapping around the grid."""
    x, y = head
    return grid.wrap(x + direction.dx, y + direction.dy)


def validate_body(body: Sequence[Cell], grid: Grid) -> tuple[Cell, ...]:
    """Check a snake body for bounds, duplicates, and contiguity.

    Adjacency is toroidal, so a body may straddle an edge.
    """
    if len(body) < 1:
        raise ValueError("Snake length must be at least 1.")
    cells = tuple((int(x), int(y)) for x, y in body)
    for cell in cells:
        if not grid.in_bounds(cell):
            raise ValueError(f"Snake cell {cell} lies outside the grid.")
    if len(set(cells)) != len(cells):
        raise ValueError("Snake body must not contain duplicate cells.")
    for prev, seg in zip(cells, cells[1:]):
        if not any(step_head(seg, d, grid) == prev for d in Direction):
            raise ValueError(f"Snake segments {prev} and {seg} are not adjacent.")
    return cells
