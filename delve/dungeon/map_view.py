"""Text map of a dungeon, cropped to the rooms' bounding box.

Two views share one renderer:

* path view (default): ``E``/``X`` for entrance and exit, an arrow for each
  main-path room pointing toward the exit, ``+`` for a path room without a
  forward step, ``#`` for any other room.
* entity view (``show_entities=True``): ``T`` for rooms holding a treasure
  chest, ``@`` for rooms holding an enemy, ``#`` otherwise.

Empty cells are ``.``. Rendering never prints; callers get a list of rows.
"""
from __future__ import annotations

from typing import List, Optional

from .dungeon import Dungeon
from .entities import EntityKind
from .pathfinding import MainPath
from .rooms import Room, RoomType

MAP_MARGIN = 2
EMPTY, ROOM, ENTRANCE, EXIT, CHEST, ENEMY, PATH = '.', '#', 'E', 'X', 'T', '@', '+'


def _symbol(room: Optional[Room], path: Optional[MainPath], show_entities: bool) -> str:
    if room is None:
        return EMPTY
    if room.type == RoomType.ENTRANCE:
        return ENTRANCE
    if room.type == RoomType.EXIT:
        return EXIT
    if show_entities:
        # Chest wins when both are present.
        if room.has_kind(EntityKind.TREASURE_CHEST):
            return CHEST
        if room.has_kind(EntityKind.ENEMY):
            return ENEMY
        return ROOM
    if path and room.coords in path:
        direction = path[room.coords]
        return direction.arrow if direction is not None else PATH
    return ROOM


def render_map(dungeon: Dungeon, show_entities: bool = False) -> List[str]:
    rooms = dungeon.rooms
    if not rooms:
        return []
    min_x = max(0, min(r.x for r in rooms) - MAP_MARGIN)
    max_x = min(dungeon.width - 1, max(r.x for r in rooms) + MAP_MARGIN)
    min_y = max(0, min(r.y for r in rooms) - MAP_MARGIN)
    max_y = min(dungeon.height - 1, max(r.y for r in rooms) + MAP_MARGIN)
    path = None if show_entities else dungeon.main_path()
    return [
        ''.join(_symbol(dungeon.room_at(x, y), path, show_entities) for x in range(min_x, max_x + 1))
        for y in range(min_y, max_y + 1)
    ]


__all__ = ["render_map", "MAP_MARGIN"]
