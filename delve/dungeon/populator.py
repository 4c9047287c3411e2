"""Room population (treasure chests, enemies, the guarded lock pick).

Each Normal room gets one independent roll:
    roll < chest_chance                  -> treasure chest (locked with chest_lock_chance)
    roll < chest_chance + enemy_chance   -> one enemy of a uniformly chosen catalog type
    otherwise                            -> stays empty

Per-room random sources are seeded up front, in room order, from the
caller's RNG. Rooms can then be processed on a thread pool in any order and
still produce the same contents for the same seed. Workers only touch their
own room, through the room's content lock.
"""

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .content import EnemyType
from .dungeon import Dungeon
from .entities import create_enemy, create_magical_lock_pick, create_treasure_chest
from .rooms import Room, RoomType

log = get_logger("delve.dungeon.populator")

EMPTY, CHEST, LOCKED_CHEST, ENEMY = "empty", "chest", "locked_chest", "enemy"


@dataclass
class PopulationStats:
    rooms_considered: int = 0
    chests: int = 0
    locked_chests: int = 0
    enemies: int = 0
    lock_pick_room: Optional[Tuple[int, int]] = None


def populate_room(
    room: Room,
    rng: random.Random,
    enemy_types: Sequence[EnemyType],
    config: DungeonConfig,
    theme: Optional[str] = None,
) -> str:
    """Roll and apply the outcome for a single room; returns the outcome tag."""
    if room.type != RoomType.NORMAL:
        return EMPTY
    roll = rng.random()
    if roll < config.chest_chance:
        is_locked = rng.random() < config.chest_lock_chance
        room.add_entity(create_treasure_chest(rng, is_locked=is_locked))
        log.debug(event="chest_added", x=room.x, y=room.y, locked=is_locked)
        return LOCKED_CHEST if is_locked else CHEST
    if roll < config.chest_chance + config.enemy_chance:
        enemy_type = enemy_types[rng.randrange(len(enemy_types))]
        enemy = create_enemy(enemy_type, rng, theme)
        room.add_entity(enemy)
        log.debug(event="enemy_added", x=room.x, y=room.y, enemy=enemy.name)
        return ENEMY
    return EMPTY


def place_guarded_lock_pick(
    dungeon: Dungeon,
    rooms: Sequence[Room],
    enemy_types: Sequence[EnemyType],
    rng: random.Random,
    config: DungeonConfig,
) -> Optional[Room]:
    """Drop one magical lock pick into a random Normal room alongside the strongest enemy."""
    if not rooms:
        log.warn(event="lock_pick_skipped", reason="no_normal_rooms")
        return None
    enemy_type = enemy_types[rng.randrange(len(enemy_types))]
    guardian = create_enemy(enemy_type, rng, dungeon.theme)
    guardian.attack = max(guardian.attack, config.strongest_enemy_min_attack)
    room = rooms[rng.randrange(len(rooms))]
    room.add_entity(create_magical_lock_pick(rng))
    room.add_entity(guardian)
    log.info(event="lock_pick_placed", x=room.x, y=room.y, guardian=guardian.name, attack=guardian.attack)
    return room


def populate_rooms(
    dungeon: Dungeon,
    enemy_types: Sequence[EnemyType],
    rng: random.Random,
    config: Optional[DungeonConfig] = None,
    max_workers: Optional[int] = None,
) -> PopulationStats:
    config = config or DungeonConfig()
    if (config.enemy_chance > 0 or config.place_lock_pick) and not enemy_types:
        raise ValueError("Enemy types list must not be empty.")
    normal_rooms: List[Room] = [r for r in dungeon.rooms if r.type == RoomType.NORMAL]
    seeds = [rng.getrandbits(64) for _ in normal_rooms]
    theme = dungeon.theme

    def _work(item):
        room, seed = item
        return populate_room(room, random.Random(seed), enemy_types, config, theme)

    workers = max_workers if max_workers is not None else config.populate_workers
    if workers and workers > 1 and len(normal_rooms) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="populate") as pool:
            outcomes = list(pool.map(_work, zip(normal_rooms, seeds)))
    else:
        outcomes = [_work(item) for item in zip(normal_rooms, seeds)]

    stats = PopulationStats(rooms_considered=len(normal_rooms))
    for outcome in outcomes:
        if outcome in (CHEST, LOCKED_CHEST):
            stats.chests += 1
            if outcome == LOCKED_CHEST:
                stats.locked_chests += 1
        elif outcome == ENEMY:
            stats.enemies += 1

    if config.place_lock_pick:
        room = place_guarded_lock_pick(dungeon, normal_rooms, enemy_types, rng, config)
        if room is not None:
            stats.lock_pick_room = room.coords
            stats.enemies += 1

    log.info(
        event="rooms_populated",
        rooms=stats.rooms_considered,
        chests=stats.chests,
        locked=stats.locked_chests,
        enemies=stats.enemies,
    )
    return stats


__all__ = ["PopulationStats", "populate_room", "populate_rooms", "place_guarded_lock_pick"]
