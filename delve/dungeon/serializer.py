"""Persisted dungeon document.

Format (JSON object)::

    {
      "width": int, "height": int, "theme": str,
      "rooms": [
        {"id": uuid, "x": int, "y": int, "type": "Normal"|"Entrance"|"Exit",
         "name": str, "description": str,
         "connectedNorth": bool, "connectedEast": bool,
         "connectedSouth": bool, "connectedWest": bool,
         "entities": [{"id": uuid, "kind": str, ...kind fields}]}
      ]
    }

Loading re-places every room at its recorded coordinates and never re-runs
generation. After placement every connection flag must have its
reciprocal, there must be exactly one Entrance at the grid center and at
most one Exit. Anything malformed raises ``DungeonParseError``; there is no
partial recovery.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict

from .directions import Direction
from .dungeon import Dungeon
from .entities import entity_from_record, entity_to_record
from .errors import ConfigurationError, DungeonParseError, StructuralError
from .ids import parse_id
from .rooms import Room, RoomType

_FLAG_KEYS = (
    ("connectedNorth", Direction.NORTH),
    ("connectedEast", Direction.EAST),
    ("connectedSouth", Direction.SOUTH),
    ("connectedWest", Direction.WEST),
)


def room_to_record(room: Room) -> Dict[str, Any]:
    record = {
        "id": str(room.id),
        "x": room.x,
        "y": room.y,
        "type": room.type.value,
        "name": room.name,
        "description": room.description,
    }
    for key, direction in _FLAG_KEYS:
        record[key] = room.is_connected(direction)
    record["entities"] = [entity_to_record(e) for e in room.contents]
    return record


def to_document(dungeon: Dungeon) -> Dict[str, Any]:
    return {
        "width": dungeon.width,
        "height": dungeon.height,
        "theme": dungeon.theme,
        "rooms": [room_to_record(r) for r in dungeon.rooms],
    }


def _require(record: Dict[str, Any], key: str, expected, where: str):
    if key not in record:
        raise DungeonParseError(f"{where} missing '{key}'")
    value = record[key]
    if expected is int and isinstance(value, bool):
        raise DungeonParseError(f"{where} field '{key}' must be int, got bool")
    if not isinstance(value, expected):
        raise DungeonParseError(f"{where} field '{key}' has wrong type {type(value).__name__}")
    return value


def _optional_str(record: Dict[str, Any], key: str, where: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DungeonParseError(f"{where} field '{key}' has wrong type {type(value).__name__}")
    return value


def room_from_record(record: Dict[str, Any]) -> Room:
    if not isinstance(record, dict):
        raise DungeonParseError("Room record must be an object")
    where = f"Room {record.get('id', '?')}"
    try:
        room_id = parse_id(_require(record, "id", str, where))
    except ValueError as exc:
        raise DungeonParseError(f"{where} id is not a UUID") from exc
    try:
        room_type = RoomType(_require(record, "type", str, where))
    except ValueError as exc:
        raise DungeonParseError(f"{where} has unknown type {record.get('type')!r}") from exc
    x = _require(record, "x", int, where)
    y = _require(record, "y", int, where)
    if x < 0 or y < 0:
        raise DungeonParseError(f"{where} has negative coordinates ({x}, {y})")
    connections = [d for key, d in _FLAG_KEYS if _require(record, key, bool, where)]
    room = Room(
        x,
        y,
        room_type,
        room_id=room_id,
        name=_optional_str(record, "name", where),
        description=_optional_str(record, "description", where),
        connections=connections,
    )
    entities = record.get("entities", [])
    if not isinstance(entities, list):
        raise DungeonParseError(f"{where} 'entities' must be a list")
    try:
        for entity_record in entities:
            room.add_entity(entity_from_record(entity_record))
    except StructuralError as exc:
        raise DungeonParseError(f"{where}: {exc}") from exc
    return room


def from_document(document: Dict[str, Any]) -> Dungeon:
    if not isinstance(document, dict):
        raise DungeonParseError("Dungeon document must be a JSON object")
    where = "Dungeon"
    width = _require(document, "width", int, where)
    height = _require(document, "height", int, where)
    theme = _require(document, "theme", str, where)
    rooms = _require(document, "rooms", list, where)
    try:
        dungeon = Dungeon(width, height, theme)
    except ConfigurationError as exc:
        raise DungeonParseError(str(exc)) from exc
    for record in rooms:
        room = room_from_record(record)
        try:
            dungeon.grid.place_room(room)
        except StructuralError as exc:
            raise DungeonParseError(str(exc)) from exc
    _check_structure(dungeon)
    return dungeon


def _check_structure(dungeon: Dungeon) -> None:
    """Reject documents a generator could never have written."""
    violations = dungeon.grid.connection_violations()
    if violations:
        (x, y), direction, reason = violations[0]
        raise DungeonParseError(
            f"Room at ({x}, {y}) is connected {direction.value} with {reason.replace('_', ' ')}"
            f" ({len(violations)} bad flag(s))"
        )
    entrances = [r for r in dungeon.rooms if r.type is RoomType.ENTRANCE]
    if len(entrances) != 1:
        raise DungeonParseError(f"Dungeon must have exactly one Entrance (found {len(entrances)})")
    if entrances[0].coords != dungeon.center:
        raise DungeonParseError(
            f"Entrance at {entrances[0].coords} is not at the grid center {dungeon.center}"
        )
    exits = sum(1 for r in dungeon.rooms if r.type is RoomType.EXIT)
    if exits > 1:
        raise DungeonParseError(f"Dungeon has {exits} Exit rooms; at most one is allowed")


def dumps(dungeon: Dungeon, indent: int | None = 2) -> str:
    return json.dumps(to_document(dungeon), indent=indent)


def loads(text: str) -> Dungeon:
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise DungeonParseError(f"Invalid dungeon JSON: {exc}") from exc
    return from_document(document)


def save(dungeon: Dungeon, path) -> str:
    path = os.fspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps(dungeon))
    return path


def load(path) -> Dungeon:
    with open(os.fspath(path), "r", encoding="utf-8") as f:
        return loads(f.read())


__all__ = [
    "to_document",
    "from_document",
    "room_to_record",
    "room_from_record",
    "dumps",
    "loads",
    "save",
    "load",
]
