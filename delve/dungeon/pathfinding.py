"""Entrance -> exit route recovery for rendering and diagnostics.

Depth-first search over connection flags with an explicit stack, so large
convoluted dungeons cannot exhaust the interpreter recursion limit. Each
coordinate on the returned route maps to the direction taken toward the exit;
the exit itself maps to None.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set, Tuple

from .directions import DIRECTIONS, Direction
from .grid import Coord, Grid
from .rooms import Room, RoomType

MainPath = Dict[Coord, Optional[Direction]]


def _connected_steps(grid: Grid, room: Room) -> Iterator[Tuple[Direction, Room]]:
    for d in DIRECTIONS:
        if not room.is_connected(d):
            continue
        nxt = grid.neighbour(room, d)
        if nxt is not None:
            yield d, nxt


def find_main_path(grid: Grid, entrance: Optional[Room] = None) -> Optional[MainPath]:
    """Return the route as an ordered ``{(x, y): forward_direction}`` map, or None if no exit is reachable."""
    if entrance is None:
        entrance = next((r for r in grid if r.type == RoomType.ENTRANCE), None)
        if entrance is None:
            return None

    path: MainPath = {entrance.coords: None}
    visited: Set[Coord] = {entrance.coords}
    if entrance.type == RoomType.EXIT:
        return path

    # Frames hold (room, pending neighbour steps); path insertion order mirrors the stack.
    stack: List[Tuple[Room, Iterator[Tuple[Direction, Room]]]] = [(entrance, _connected_steps(grid, entrance))]
    while stack:
        room, steps = stack[-1]
        advanced = False
        for direction, nxt in steps:
            if nxt.coords in visited:
                continue
            visited.add(nxt.coords)
            path[room.coords] = direction
            path[nxt.coords] = None
            if nxt.type == RoomType.EXIT:
                return path
            stack.append((nxt, _connected_steps(grid, nxt)))
            advanced = True
            break
        if not advanced:
            # Dead end: undo this coordinate and clear the parent's forward marker.
            stack.pop()
            del path[room.coords]
            if stack:
                path[stack[-1][0].coords] = None
    return None


def main_path_rooms(grid: Grid, entrance: Optional[Room] = None) -> List[Room]:
    """Rooms along the route in walking order (empty when no route exists)."""
    path = find_main_path(grid, entrance)
    if path is None:
        return []
    return [grid.room_at(x, y) for (x, y) in path]


__all__ = ["MainPath", "find_main_path", "main_path_rooms"]
