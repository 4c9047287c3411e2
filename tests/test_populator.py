import random

import pytest

from delve.dungeon.config import DungeonConfig
from delve.dungeon.content import EnemyType
from delve.dungeon.entities import EntityKind
from delve.dungeon.pipeline import generate_dungeon
from delve.dungeon.populator import populate_rooms
from delve.dungeon.rooms import Room, RoomType
from delve.dungeon.serializer import dumps

from tests.dungeon_test_utils import edge_set

ENEMIES = [EnemyType("Goblin", "A goblin."), EnemyType("Bat", "A bat.")]


def bare(seed=21, size=41):
    return generate_dungeon(DungeonConfig(width=size, height=size, seed=seed), populate=False)


def test_only_normal_rooms_receive_entities():
    d = bare()
    populate_rooms(d, ENEMIES, random.Random(1), DungeonConfig(chest_chance=0.5, enemy_chance=0.5))
    for room in d.rooms:
        if room.type != RoomType.NORMAL:
            assert room.contents == ()
        else:
            assert len(room.contents) == 1


def test_counts_match_contents():
    d = bare()
    stats = populate_rooms(d, ENEMIES, random.Random(2))
    chests = sum(1 for r in d.rooms for e in r.contents if e.kind == EntityKind.TREASURE_CHEST)
    enemies = sum(1 for r in d.rooms for e in r.contents if e.kind == EntityKind.ENEMY)
    locked = sum(1 for r in d.rooms for e in r.contents if e.kind == EntityKind.TREASURE_CHEST and e.is_locked)
    assert (stats.chests, stats.enemies, stats.locked_chests) == (chests, enemies, locked)
    assert stats.rooms_considered == sum(1 for r in d.rooms if r.type == RoomType.NORMAL)


def test_population_does_not_touch_structure():
    a, b = bare(), bare()
    assert dumps(a) == dumps(b)
    populate_rooms(a, ENEMIES, random.Random(100))
    populate_rooms(b, ENEMIES, random.Random(200))
    assert [(r.id, r.coords, r.type) for r in a.rooms] == [(r.id, r.coords, r.type) for r in b.rooms]
    assert edge_set(a) == edge_set(b)


def test_threaded_matches_sequential():
    a, b = bare(), bare()
    populate_rooms(a, ENEMIES, random.Random(7), max_workers=1)
    populate_rooms(b, ENEMIES, random.Random(7), max_workers=4)
    assert dumps(a) == dumps(b)


def test_empty_enemy_list_rejected():
    with pytest.raises(ValueError):
        populate_rooms(bare(), [], random.Random(0))


def test_empty_enemy_list_allowed_without_enemies():
    d = bare()
    stats = populate_rooms(d, [], random.Random(0), DungeonConfig(enemy_chance=0.0, chest_chance=1.0))
    assert stats.enemies == 0
    assert stats.chests == stats.rooms_considered


def test_zero_chances_leave_rooms_empty():
    d = bare()
    stats = populate_rooms(d, ENEMIES, random.Random(0), DungeonConfig(enemy_chance=0.0, chest_chance=0.0))
    assert stats.chests == stats.enemies == 0
    assert all(r.contents == () for r in d.rooms)


def test_lock_pick_guarded_by_strong_enemy():
    d = bare()
    config = DungeonConfig(place_lock_pick=True, chest_chance=0.0, enemy_chance=0.0)
    stats = populate_rooms(d, ENEMIES, random.Random(3), config)
    assert stats.lock_pick_room is not None
    room = d.room_at(*stats.lock_pick_room)
    kinds = [e.kind for e in room.contents]
    assert kinds == [EntityKind.MAGICAL_LOCK_PICK, EntityKind.ENEMY]
    guardian = room.contents[1]
    assert guardian.attack >= config.strongest_enemy_min_attack
    assert room.type == RoomType.NORMAL


def test_lock_pick_skipped_when_no_normal_rooms():
    d = generate_dungeon(DungeonConfig(width=1, height=1, seed=1), populate=False)
    stats = populate_rooms(d, ENEMIES, random.Random(0), DungeonConfig(place_lock_pick=True))
    assert stats.lock_pick_room is None


def test_entrance_room_untouched_by_single_room_populate():
    from delve.dungeon.populator import EMPTY, populate_room

    room = Room(0, 0, RoomType.ENTRANCE)
    assert populate_room(room, random.Random(0), ENEMIES, DungeonConfig(chest_chance=1.0)) == EMPTY
    assert room.contents == ()
