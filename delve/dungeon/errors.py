"""Exception hierarchy for dungeon generation and persistence."""

from __future__ import annotations


class DungeonError(Exception):
    """Base class for every error raised by the dungeon package."""


class ConfigurationError(DungeonError, ValueError):
    """Invalid construction parameters (dimensions, theme, lengths)."""


class StructuralError(DungeonError):
    """A grid or room invariant would be violated. Indicates a logic bug in the caller."""


class RoomPlacementError(StructuralError):
    """Room coordinates are out of bounds or already occupied."""


class RoomConnectionError(StructuralError):
    """Attempted to connect a room toward an empty or out-of-bounds slot."""


class DuplicateEntityError(StructuralError):
    """An entity with the same id already lives in the room."""


class DungeonParseError(DungeonError):
    """A persisted dungeon document is malformed and cannot be loaded."""


__all__ = [
    "DungeonError",
    "ConfigurationError",
    "StructuralError",
    "RoomPlacementError",
    "RoomConnectionError",
    "DuplicateEntityError",
    "DungeonParseError",
]
