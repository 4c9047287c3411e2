"""Pipeline orchestration for dungeon generation.

Runs the ordered phases (carve main path, branches and loops, population)
against one ``random.Random`` seeded from the config, recording per-phase
timings in ``dungeon.metrics['phase_ms']``.
"""
from __future__ import annotations

import random
import time
from typing import Optional

from ..logging_utils import get_logger
from .branches import create_branches
from .carver import carve_main_path
from .config import DungeonConfig
from .content import DefaultEnemyCatalog, EnemyCatalog
from .dungeon import Dungeon
from .entities import EntityKind
from .metrics import init_metrics
from .populator import populate_rooms

log = get_logger("delve.dungeon.pipeline")


def generate_dungeon(
    config: Optional[DungeonConfig] = None,
    *,
    rng: Optional[random.Random] = None,
    catalog: Optional[EnemyCatalog] = None,
    populate: bool = True,
    max_workers: Optional[int] = None,
) -> Dungeon:
    """Build a complete dungeon from ``config``.

    When ``rng`` is omitted one is created from ``config.seed``; a missing seed
    is drawn at random and recorded so the run can be reproduced.
    """
    config = (config or DungeonConfig()).validate()
    seed = config.seed
    if rng is None:
        if seed is None:
            seed = random.randint(1, 1_000_000)
        rng = random.Random(seed)

    dungeon = Dungeon(config.width, config.height, config.theme, seed=seed)
    dungeon.metrics = init_metrics()
    dungeon.metrics['seed'] = seed

    start = time.perf_counter()
    phase_times = {}

    def _phase(label, fn, *a, **k):
        ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
        phase_times[label] = int((pe - ps) * 1000)
        return r

    carve = _phase('carve_main_path', carve_main_path, dungeon, config.min_path_length, rng)
    dungeon.metrics['target_path_length'] = carve.target_length
    dungeon.metrics['main_path_rooms'] = carve.rooms_placed
    dungeon.metrics['main_path_degenerate'] = carve.degenerate

    branches = _phase('branches', create_branches, dungeon, config, rng)
    dungeon.metrics['branch_rooms'] = branches.rooms_added
    dungeon.metrics['sub_branches'] = branches.sub_branches
    dungeon.metrics['loops_created'] = branches.loops_created

    if populate:
        catalog = catalog or DefaultEnemyCatalog()
        enemy_types = catalog.enemy_types(dungeon.theme)
        stats = _phase('populate', populate_rooms, dungeon, enemy_types, rng, config, max_workers)
        dungeon.metrics['chests'] = stats.chests
        dungeon.metrics['locked_chests'] = stats.locked_chests
        dungeon.metrics['enemies'] = stats.enemies

    dungeon.metrics['rooms'] = len(dungeon.grid)
    end = time.perf_counter()
    dungeon.metrics['runtime_ms'] = int((end - start) * 1000)
    dungeon.metrics['phase_ms'] = phase_times
    log.bind(seed=seed).info(
        event="dungeon_generated",
        rooms=dungeon.metrics['rooms'],
        runtime_ms=dungeon.metrics['runtime_ms'],
    )
    return dungeon


def count_entities(dungeon: Dungeon, kind: EntityKind) -> int:
    return sum(1 for room in dungeon.rooms for e in room.contents if e.kind == kind)


__all__ = ["generate_dungeon", "count_entities"]
