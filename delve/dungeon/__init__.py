"""Public dungeon package interface."""

from .config import DungeonConfig
from .directions import DIRECTIONS, Direction
from .dungeon import Dungeon
from .entities import Enemy, EntityKind, MagicalLockPick, Treasure, TreasureChest, TreasureType
from .errors import (
    ConfigurationError,
    DuplicateEntityError,
    DungeonError,
    DungeonParseError,
    RoomConnectionError,
    RoomPlacementError,
    StructuralError,
)
from .grid import Grid
from .map_view import render_map
from .pathfinding import find_main_path
from .pipeline import generate_dungeon
from .rooms import Room, RoomType

__all__ = [
    "ConfigurationError",
    "DIRECTIONS",
    "Direction",
    "Dungeon",
    "DungeonConfig",
    "DungeonError",
    "DungeonParseError",
    "DuplicateEntityError",
    "Enemy",
    "EntityKind",
    "Grid",
    "MagicalLockPick",
    "Room",
    "RoomConnectionError",
    "RoomPlacementError",
    "RoomType",
    "StructuralError",
    "Treasure",
    "TreasureChest",
    "TreasureType",
    "find_main_path",
    "generate_dungeon",
    "render_map",
]
