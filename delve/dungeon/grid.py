"""Bounded room grid.

Occupancy lives in a coordinate map ``(x, y) -> room id`` and rooms live in a
registry keyed by id (insertion ordered, so it doubles as the creation-order
room list). Both are only ever updated together inside ``place_room``.
"""

from __future__ import annotations

import uuid
from typing import Dict, Iterator, List, Optional, Tuple

from .directions import DIRECTIONS, Direction
from .errors import RoomConnectionError, RoomPlacementError
from .rooms import Room

Coord = Tuple[int, int]


class Grid:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._slots: Dict[Coord, uuid.UUID] = {}
        self._rooms: Dict[uuid.UUID, Room] = {}

    # -- queries --------------------------------------------------------
    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self._slots

    def room_at(self, x: int, y: int) -> Optional[Room]:
        room_id = self._slots.get((x, y))
        return self._rooms[room_id] if room_id is not None else None

    def get(self, room_id: uuid.UUID) -> Optional[Room]:
        return self._rooms.get(room_id)

    @property
    def rooms(self) -> List[Room]:
        return list(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def neighbour(self, room: Room, direction: Direction) -> Optional[Room]:
        nx, ny = direction.step(room.x, room.y)
        if not self.is_in_bounds(nx, ny):
            return None
        return self.room_at(nx, ny)

    def available_directions(self, room: Room) -> List[Direction]:
        """Directions whose neighbour slot is in bounds and empty (N, E, S, W order)."""
        out = []
        for d in DIRECTIONS:
            nx, ny = d.step(room.x, room.y)
            if self.is_in_bounds(nx, ny) and (nx, ny) not in self._slots:
                out.append(d)
        return out

    def occupied_directions(self, room: Room) -> List[Direction]:
        out = []
        for d in DIRECTIONS:
            nx, ny = d.step(room.x, room.y)
            if self.is_in_bounds(nx, ny) and (nx, ny) in self._slots:
                out.append(d)
        return out

    def connected_neighbours(self, room: Room) -> Dict[Direction, Room]:
        out = {}
        for d in DIRECTIONS:
            if room.is_connected(d):
                other = self.neighbour(room, d)
                if other is not None:
                    out[d] = other
        return out

    # -- mutation -------------------------------------------------------
    def place_room(self, room: Room) -> Room:
        if not self.is_in_bounds(room.x, room.y):
            raise RoomPlacementError(
                f"Room at ({room.x}, {room.y}) is outside the {self.width}x{self.height} grid."
            )
        if room.coords in self._slots:
            raise RoomPlacementError(f"A room already exists at ({room.x}, {room.y}).")
        if room.id in self._rooms:
            raise RoomPlacementError(f"Room id {room.id} is already registered.")
        self._slots[room.coords] = room.id
        self._rooms[room.id] = room
        return room

    def connect(self, room: Room, direction: Direction) -> Room:
        """Link ``room`` with its neighbour in ``direction``, setting both flags. Returns the neighbour."""
        other = self.neighbour(room, direction)
        if other is None:
            raise RoomConnectionError(f"No room {direction.value} of ({room.x}, {room.y}) to connect to.")
        if self.room_at(room.x, room.y) is not room:
            raise RoomConnectionError(f"Room {room.id} is not placed on this grid.")
        room._set_connection(direction)
        other._set_connection(direction.opposite)
        return other

    def add_adjacent_room(self, room: Room, direction: Direction, new_room: Room) -> Room:
        """Place ``new_room`` next to ``room`` and connect the pair."""
        expected = direction.step(room.x, room.y)
        if new_room.coords != expected:
            raise RoomPlacementError(f"Room at {new_room.coords} is not {direction.value} of {room.coords}.")
        self.place_room(new_room)
        self.connect(room, direction)
        return new_room

    # -- diagnostics ----------------------------------------------------
    def connection_violations(self) -> List[Tuple[Coord, Direction, str]]:
        """List (coords, direction, reason) for every flag without a matching reciprocal."""
        problems = []
        for room in self._rooms.values():
            for d in room.exits:
                other = self.neighbour(room, d)
                if other is None:
                    problems.append((room.coords, d, "missing_neighbour"))
                elif not other.is_connected(d.opposite):
                    problems.append((room.coords, d, "missing_reciprocal"))
        return problems


__all__ = ["Grid", "Coord"]
