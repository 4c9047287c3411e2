# Model package init
from .dungeon_record import DungeonRecord  # noqa: F401 re-export

__all__ = ["DungeonRecord"]
