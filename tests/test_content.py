import asyncio

import pytest

from delve.dungeon.config import DungeonConfig
from delve.dungeon.content import (
    DEFAULT_ENEMY_NAMES,
    ContentGenerator,
    DefaultEnemyCatalog,
    EnemyType,
    NullContentGenerator,
    StaticEnemyCatalog,
    describe_dungeon,
)
from delve.dungeon.pipeline import generate_dungeon
from delve.dungeon.serializer import dumps


class NamingGenerator(ContentGenerator):
    def __init__(self):
        self.calls = []

    async def describe_rooms(self, rooms, theme):
        self.calls.append((len(rooms), theme))
        for i, room in enumerate(rooms):
            room.name = f"Hall {i}"
            room.description = f"A hall in {theme}."


class BrokenGenerator(ContentGenerator):
    async def describe_rooms(self, rooms, theme):
        raise RuntimeError("service unavailable")


def bare():
    return generate_dungeon(DungeonConfig(width=21, height=21, seed=9, theme="Sunken vault"), populate=False)


def test_describe_writes_names_in_place():
    d = bare()
    gen = NamingGenerator()
    assert asyncio.run(describe_dungeon(d, gen))
    assert gen.calls == [(len(d.grid), "Sunken vault")]
    assert all(r.description.startswith("A hall in") for r in d.rooms)


def test_already_described_rooms_skipped_unless_clobber():
    d = bare()
    d.rooms[0].description = "Keep me"
    gen = NamingGenerator()
    asyncio.run(describe_dungeon(d, gen))
    assert d.rooms[0].description == "Keep me"
    assert gen.calls[0][0] == len(d.grid) - 1
    asyncio.run(describe_dungeon(d, gen, allow_clobber=True))
    assert d.rooms[0].description != "Keep me"


def test_failure_logged_and_structure_untouched(capsys):
    d = bare()
    before = dumps(d)
    assert asyncio.run(describe_dungeon(d, BrokenGenerator())) is False
    assert dumps(d) == before
    assert "content_generation_failed" in capsys.readouterr().err


def test_null_generator_changes_nothing():
    d = bare()
    before = dumps(d)
    assert asyncio.run(describe_dungeon(d, NullContentGenerator()))
    assert dumps(d) == before


def test_cancellation_propagates():
    class SlowGenerator(ContentGenerator):
        async def describe_rooms(self, rooms, theme):
            await asyncio.sleep(10)

    async def runner():
        task = asyncio.create_task(describe_dungeon(bare(), SlowGenerator()))
        await asyncio.sleep(0)
        task.cancel()
        await task

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(runner())


def test_default_catalog():
    types = DefaultEnemyCatalog(count=45).enemy_types("Dark Keep")
    assert len(types) == 45
    assert {t.name for t in types} == set(DEFAULT_ENEMY_NAMES)
    assert types[0].description.endswith("dark keep.")
    with pytest.raises(ValueError):
        DefaultEnemyCatalog(count=0)


def test_static_catalog_feeds_pipeline():
    catalog = StaticEnemyCatalog([EnemyType("Mimic")])
    d = generate_dungeon(DungeonConfig(width=31, height=31, seed=3, enemy_chance=1.0, chest_chance=0.0),
                         catalog=catalog)
    names = {e.name for r in d.rooms for e in r.contents}
    assert names == {"Mimic"}
    with pytest.raises(ValueError):
        StaticEnemyCatalog([])
