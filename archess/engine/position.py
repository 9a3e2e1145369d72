"""
A tile coordinate on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Starting layout is built for a 5x5 board. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (5, 5)


@dataclass(frozen=True)
class Position:
    """x is the column, y is the row. (0, 0) is the top-left tile."""

    x: int
    y: int

    def is_within_bounds(self, width: int, height: int) -> bool:
        return (0 <= self.x < width) and (0 <= self.y < height)

    def distance_to(self, other: Position) -> int:
        """Manhattan distance: no diagonal steps."""
        return abs(other.x - self.x) + abs(other.y - self.y)

    def is_diagonal_to(self, other: Position) -> bool:
        return self.x != other.x and self.y != other.y

    def path_to(self, other: Position) -> list[Position]:
        """
        Tiles strictly in between self and other along a straight (horizontal or vertical) line.

        NOTE: Only defined for axis-aligned displacements. Diagonal displacements have no such path.
        """
        if self.is_diagonal_to(other):
            raise ValueError(f"No straight path between {self} and {other}.")

        dx = (other.x > self.x) - (other.x < self.x)
        dy = (other.y > self.y) - (other.y < self.y)
        steps = self.distance_to(other)
        return [Position(self.x + dx * step, self.y + dy * step) for step in range(1, steps)]

    def mirrored(self, width: int, height: int) -> Position:
        """Point reflection through the centre of the board (used to build a symmetric starting layout)."""
        return Position(width - 1 - self.x, height - 1 - self.y)
