"""Side branches, nested sub-branches and loop-back connections.

Every pass roots a branch at a random room from the whole accumulated set, so
later branches can grow off earlier ones and occasionally loop into them.
Loops are the only source of cycles in the room graph.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .dungeon import Dungeon
from .ids import new_id
from .rooms import Room

log = get_logger("delve.dungeon.branches")


@dataclass
class BranchStats:
    passes: int = 0
    rooms_added: int = 0
    sub_branches: int = 0
    loops_created: int = 0


def _extend(dungeon: Dungeon, room: Room, rng: random.Random) -> Optional[Room]:
    """Grow one room off ``room`` toward a random empty neighbour; None on a dead end."""
    grid = dungeon.grid
    candidates = grid.available_directions(room)
    if not candidates:
        return None
    direction = rng.choice(candidates)
    nx, ny = direction.step(room.x, room.y)
    return grid.add_adjacent_room(room, direction, Room(nx, ny, room_id=new_id(rng)))


def create_sub_branch(
    dungeon: Dungeon, start: Room, rng: random.Random, length_range: Tuple[int, int] = (1, 3)
) -> int:
    """Short chain off ``start``; returns rooms placed."""
    length = rng.randint(*length_range)
    current = start
    placed = 0
    for _ in range(length):
        nxt = _extend(dungeon, current, rng)
        if nxt is None:
            break
        current = nxt
        placed += 1
    return placed


def try_create_loop(dungeon: Dungeon, room: Room, rng: random.Random) -> bool:
    """Connect ``room`` to a random occupied neighbour.

    Returns True only when a new edge was added; picking a neighbour that is
    already linked leaves the graph unchanged.
    """
    occupied = dungeon.grid.occupied_directions(room)
    if not occupied:
        return False
    direction = rng.choice(occupied)
    if room.is_connected(direction):
        return False
    dungeon.grid.connect(room, direction)
    return True


def create_branch(dungeon: Dungeon, config: DungeonConfig, rng: random.Random, stats: BranchStats):
    rooms = dungeon.rooms
    if not rooms:
        return
    current = rooms[rng.randrange(len(rooms))]
    length = rng.randint(*config.branch_length)
    for i in range(length):
        nxt = _extend(dungeon, current, rng)
        if nxt is None:
            break
        current = nxt
        stats.rooms_added += 1
        if rng.random() < config.sub_branch_chance:
            stats.sub_branches += 1
            stats.rooms_added += create_sub_branch(dungeon, current, rng, config.sub_branch_length)
        if i == length - 1 and rng.random() < config.loop_chance:
            if try_create_loop(dungeon, current, rng):
                stats.loops_created += 1


def create_branches(dungeon: Dungeon, config: DungeonConfig, rng: random.Random) -> BranchStats:
    stats = BranchStats()
    for _ in range(config.branch_passes):
        create_branch(dungeon, config, rng, stats)
        stats.passes += 1
    log.info(
        event="branches_created",
        passes=stats.passes,
        rooms=stats.rooms_added,
        sub_branches=stats.sub_branches,
        loops=stats.loops_created,
    )
    return stats


__all__ = ["BranchStats", "create_branches", "create_branch", "create_sub_branch", "try_create_loop"]
