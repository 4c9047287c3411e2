"""Main-path carving.

Randomized depth-first walk with backtracking from the entrance (grid
center). Each step extends the room on top of the stack toward a uniformly
chosen empty neighbour; rooms with no empty neighbour are popped. The walk
stops once ``target_length`` rooms (entrance included) exist or the stack
runs dry, and the final room is tagged Exit.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from ..logging_utils import get_logger
from .config import MIN_PATH_LENGTH
from .dungeon import Dungeon
from .errors import ConfigurationError
from .ids import new_id
from .rooms import Room, RoomType

log = get_logger("delve.dungeon.carver")

# Target length is drawn from [min_path_length, min_path_length + PATH_LENGTH_SPREAD)
PATH_LENGTH_SPREAD = 10


@dataclass
class CarveResult:
    entrance: Room
    exit: Optional[Room]
    target_length: int
    rooms_placed: int
    path: List[Room] = field(default_factory=list)  # stack contents at stop, entrance first

    @property
    def degenerate(self) -> bool:
        return self.rooms_placed < self.target_length


def place_entrance(dungeon: Dungeon, rng: Optional[random.Random] = None) -> Room:
    x, y = dungeon.center
    entrance = dungeon.grid.place_room(Room(x, y, RoomType.ENTRANCE, room_id=new_id(rng)))
    log.info(event="entrance_created", x=x, y=y)
    return entrance


def carve_main_path(dungeon: Dungeon, min_path_length: int, rng: random.Random) -> CarveResult:
    if min_path_length < MIN_PATH_LENGTH:
        raise ConfigurationError(f"min_path_length must be at least {MIN_PATH_LENGTH} (was {min_path_length}).")
    grid = dungeon.grid
    entrance = place_entrance(dungeon, rng)
    target_length = rng.randrange(min_path_length, min_path_length + PATH_LENGTH_SPREAD)
    log.info(event="main_path_target", target=target_length)

    stack: List[Room] = [entrance]
    rooms_placed = 1
    last_created: Optional[Room] = None
    while rooms_placed < target_length:
        if not stack:
            break
        current = stack[-1]
        candidates = grid.available_directions(current)
        if not candidates:
            stack.pop()
            continue
        direction = rng.choice(candidates)
        nx, ny = direction.step(current.x, current.y)
        new_room = grid.add_adjacent_room(current, direction, Room(nx, ny, room_id=new_id(rng)))
        stack.append(new_room)
        rooms_placed += 1
        last_created = new_room

    if rooms_placed < target_length:
        log.warn(
            event="main_path_degenerate",
            target=target_length,
            placed=rooms_placed,
            msg="Could not reach the desired path length. Dungeon may be smaller than expected.",
        )

    exit_room = stack[-1] if stack else last_created
    if exit_room is None or exit_room is entrance:
        # Only the entrance exists (e.g. 1x1 grid): nothing to tag.
        exit_room = None
        log.warn(event="exit_missing", placed=rooms_placed)
    else:
        exit_room.promote_to_exit()
        log.info(event="exit_created", x=exit_room.x, y=exit_room.y)

    return CarveResult(
        entrance=entrance,
        exit=exit_room,
        target_length=target_length,
        rooms_placed=rooms_placed,
        path=list(stack),
    )


__all__ = ["CarveResult", "carve_main_path", "place_entrance", "PATH_LENGTH_SPREAD"]
