# Cardinal directions used for room adjacency and connection flags.
from __future__ import annotations

from enum import Enum
from typing import Tuple


class Direction(Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def arrow(self) -> str:
        return _ARROWS[self]

    def step(self, x: int, y: int) -> Tuple[int, int]:
        dx, dy = _OFFSETS[self]
        return x + dx, y + dy


# y grows southward (row index), matching grid[x][y] rendering top to bottom
_OFFSETS = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}
_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.EAST: Direction.WEST,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
}
_ARROWS = {
    Direction.NORTH: "^",
    Direction.EAST: ">",
    Direction.SOUTH: "v",
    Direction.WEST: "<",
}

# Fixed scan order; candidate lists and path search both rely on it.
DIRECTIONS = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)

__all__ = ["Direction", "DIRECTIONS"]
