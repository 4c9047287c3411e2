import threading
import uuid
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from .directions import DIRECTIONS, Direction
from .entities import Entity, EntityKind
from .errors import DuplicateEntityError
from .ids import new_id


class RoomType(str, Enum):
    NORMAL = "Normal"
    ENTRANCE = "Entrance"
    EXIT = "Exit"


class Room:
    """A single grid node.

    Identity and coordinates are fixed at construction. Connection flags are
    read-only here; ``Grid.connect`` is the only writer so both sides of an
    edge always change together. The content list is guarded by a per-room
    lock (it does not guard the structural fields, which never change after
    placement).
    """

    __slots__ = ("_id", "_x", "_y", "_type", "_connections", "name", "description", "_contents", "_contents_lock")

    def __init__(
        self,
        x: int,
        y: int,
        room_type: RoomType = RoomType.NORMAL,
        *,
        room_id: Optional[uuid.UUID] = None,
        name: str = "",
        description: str = "",
        connections: Iterable[Direction] = (),
    ):
        if x < 0 or y < 0:
            raise ValueError(f"Room coordinates must be >= 0 (was {(x, y)}).")
        self._id = room_id or new_id()
        self._x = x
        self._y = y
        self._type = RoomType(room_type)
        self._connections: Dict[Direction, bool] = {d: False for d in DIRECTIONS}
        for direction in connections:
            self._connections[direction] = True
        self.name = name
        self.description = description
        self._contents = []
        self._contents_lock = threading.Lock()

    # -- identity -------------------------------------------------------
    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def coords(self) -> Tuple[int, int]:
        return (self._x, self._y)

    @property
    def type(self) -> RoomType:
        return self._type

    def promote_to_exit(self):
        self._type = RoomType.EXIT

    # -- connections ----------------------------------------------------
    def is_connected(self, direction: Direction) -> bool:
        return self._connections[direction]

    @property
    def connected_north(self) -> bool:
        return self._connections[Direction.NORTH]

    @property
    def connected_east(self) -> bool:
        return self._connections[Direction.EAST]

    @property
    def connected_south(self) -> bool:
        return self._connections[Direction.SOUTH]

    @property
    def connected_west(self) -> bool:
        return self._connections[Direction.WEST]

    @property
    def exits(self) -> Tuple[Direction, ...]:
        return tuple(d for d in DIRECTIONS if self._connections[d])

    def _set_connection(self, direction: Direction):
        # Grid.connect pairs this with the neighbour's reciprocal flag.
        self._connections[direction] = True

    # -- contents -------------------------------------------------------
    @property
    def contents(self) -> Tuple[Entity, ...]:
        with self._contents_lock:
            return tuple(self._contents)

    def add_entity(self, entity: Entity):
        if entity is None:
            raise ValueError("entity is required")
        with self._contents_lock:
            if any(e.id == entity.id for e in self._contents):
                raise DuplicateEntityError(f"Entity {entity.id} already exists in room {self._id}.")
            self._contents.append(entity)

    def remove_entity_by_id(self, entity_id: uuid.UUID) -> bool:
        with self._contents_lock:
            for i, e in enumerate(self._contents):
                if e.id == entity_id:
                    del self._contents[i]
                    return True
            return False

    def remove_entity(self, entity: Optional[Entity]) -> bool:
        if entity is None:
            return False
        with self._contents_lock:
            try:
                self._contents.remove(entity)
            except ValueError:
                return False
            return True

    def has_kind(self, kind: EntityKind) -> bool:
        with self._contents_lock:
            return any(e.kind == kind for e in self._contents)

    def __repr__(self):
        return f"<Room {self._type.value} {self._id} at ({self._x}, {self._y})>"


__all__ = ["Room", "RoomType"]
