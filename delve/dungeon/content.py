"""Content collaborators: room descriptions and the enemy type catalog.

Both are external services as far as generation is concerned. The core only
hands them rooms plus the theme (descriptions) or a theme (enemy types) and
treats whatever comes back as opaque data. The defaults here need no network
access: rooms stay undescribed and enemy types come from a built-in list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..logging_utils import get_logger
from .dungeon import Dungeon
from .rooms import Room

log = get_logger("delve.dungeon.content")

DEFAULT_ENEMY_NAMES = [
    "Bandit",
    "Bat",
    "Bone Scorpion",
    "Cave Serpent",
    "Cultist",
    "Dark Mage",
    "Dire Wolf",
    "Fire Elemental",
    "Flesh Construct",
    "Ghost",
    "Ghoul",
    "Giant Rat",
    "Goblin",
    "Hellhound",
    "Ice Wyrm",
    "Imp",
    "Lich",
    "Mimic",
    "Necromancer",
    "Orc",
    "Shadow Beast",
    "Skeleton",
    "Slime",
    "Spider",
    "Stone Golem",
    "Swamp Hag",
    "Troll",
    "Venom Drake",
    "Wraith",
    "Zombie",
]


@dataclass(frozen=True)
class EnemyType:
    name: str
    description: str = ""
    short_description: str = ""


class EnemyCatalog:
    """Source of per-theme enemy types used by the room populator."""

    def enemy_types(self, theme: str) -> List[EnemyType]:  # pragma: no cover - interface
        raise NotImplementedError


class StaticEnemyCatalog(EnemyCatalog):
    """Serves a precomputed list regardless of theme."""

    def __init__(self, types: Sequence[EnemyType]):
        if not types:
            raise ValueError("Enemy types list must not be empty.")
        self._types = list(types)

    def enemy_types(self, theme: str) -> List[EnemyType]:
        return list(self._types)


class DefaultEnemyCatalog(EnemyCatalog):
    """Built-in names, repeated when more are requested than exist."""

    def __init__(self, count: int = 10):
        if count < 1:
            raise ValueError("Count must be 1 or greater.")
        self.count = count

    def enemy_types(self, theme: str) -> List[EnemyType]:
        names = []
        while len(names) < self.count:
            names.extend(DEFAULT_ENEMY_NAMES)
        return [
            EnemyType(name, description=f"A {name.lower()} stalking the halls of {theme.strip().lower()}.")
            for name in names[: self.count]
        ]


class ContentGenerator:
    """Writes ``name`` and ``description`` onto rooms in place."""

    async def describe_rooms(self, rooms: Sequence[Room], theme: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class NullContentGenerator(ContentGenerator):
    async def describe_rooms(self, rooms: Sequence[Room], theme: str) -> None:
        return None


async def describe_dungeon(dungeon: Dungeon, generator: ContentGenerator, *, allow_clobber: bool = False) -> bool:
    """Ask ``generator`` to describe rooms (only undescribed ones unless ``allow_clobber``).

    Returns False when the collaborator fails; the dungeon stays structurally
    valid either way. Cancellation is left to the caller and propagates.
    """
    rooms = dungeon.rooms
    targets = rooms if allow_clobber else [r for r in rooms if not r.description.strip()]
    if not targets:
        log.info(event="descriptions_skipped", reason="nothing_to_describe")
        return True
    log.info(event="descriptions_requested", rooms=len(targets))
    try:
        await generator.describe_rooms(targets, dungeon.theme)
    except Exception as exc:
        log.error(event="content_generation_failed", rooms=len(targets), error=repr(exc))
        return False
    return True


__all__ = [
    "DEFAULT_ENEMY_NAMES",
    "EnemyType",
    "EnemyCatalog",
    "StaticEnemyCatalog",
    "DefaultEnemyCatalog",
    "ContentGenerator",
    "NullContentGenerator",
    "describe_dungeon",
]
