"""Dungeon aggregate: grid, theme and generation metadata.

Construction only validates and allocates; generation lives in
``delve.dungeon.pipeline`` and loading in ``delve.dungeon.serializer``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .config import MAX_DUNGEON_HEIGHT, MAX_DUNGEON_WIDTH, DungeonConfig
from .errors import ConfigurationError
from .grid import Grid
from .pathfinding import find_main_path
from .rooms import Room, RoomType

log = get_logger("delve.dungeon")


class Dungeon:
    def __init__(self, width: int, height: int, theme: str, *, seed: Optional[int] = None):
        if not isinstance(width, int) or isinstance(width, bool) or width < 1 or width > MAX_DUNGEON_WIDTH:
            raise ConfigurationError(f"Width must be between 1 and {MAX_DUNGEON_WIDTH} (was {width}).")
        if not isinstance(height, int) or isinstance(height, bool) or height < 1 or height > MAX_DUNGEON_HEIGHT:
            raise ConfigurationError(f"Height must be between 1 and {MAX_DUNGEON_HEIGHT} (was {height}).")
        if not isinstance(theme, str) or not theme.strip():
            raise ConfigurationError("Theme cannot be empty or whitespace.")
        self.width = width
        self.height = height
        self.theme = theme.strip()
        self.seed = seed
        self.grid = Grid(width, height)
        self.metrics: Dict[str, Any] = {}
        log.debug(event="dungeon_initialized", width=width, height=height)

    @classmethod
    def from_config(cls, config: DungeonConfig) -> "Dungeon":
        config.validate()
        return cls(config.width, config.height, config.theme, seed=config.seed)

    @property
    def rooms(self) -> List[Room]:
        return self.grid.rooms

    def room_at(self, x: int, y: int) -> Optional[Room]:
        return self.grid.room_at(x, y)

    @property
    def entrance(self) -> Optional[Room]:
        return next((r for r in self.grid if r.type == RoomType.ENTRANCE), None)

    @property
    def exit(self) -> Optional[Room]:
        return next((r for r in self.grid if r.type == RoomType.EXIT), None)

    @property
    def center(self):
        return (self.width // 2, self.height // 2)

    def main_path(self):
        """Forward direction per coordinate along the entrance->exit route, or None."""
        return find_main_path(self.grid, self.entrance)

    def __repr__(self):
        return f"<Dungeon {self.width}x{self.height} rooms={len(self.grid)} theme={self.theme!r}>"


__all__ = ["Dungeon"]
