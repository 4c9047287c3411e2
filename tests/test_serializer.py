import json

import pytest

from delve.dungeon.config import DungeonConfig
from delve.dungeon.entities import EntityKind
from delve.dungeon.errors import DungeonParseError
from delve.dungeon.pipeline import generate_dungeon
from delve.dungeon.serializer import dumps, from_document, load, loads, save, to_document

from tests.dungeon_test_utils import assert_symmetric, edge_set


def test_document_shape(generated):
    doc = to_document(generated)
    assert set(doc) == {"width", "height", "theme", "rooms"}
    room = doc["rooms"][0]
    assert room["type"] == "Entrance"
    for key in ("id", "x", "y", "name", "description", "connectedNorth", "connectedEast",
                "connectedSouth", "connectedWest", "entities"):
        assert key in room


def test_round_trip_is_idempotent(generated):
    text = dumps(generated)
    again = dumps(loads(text))
    assert again == text


def test_round_trip_preserves_structure(generated):
    restored = loads(dumps(generated))
    assert len(restored.grid) == len(generated.grid)
    assert restored.entrance.coords == generated.entrance.coords
    assert restored.exit.coords == generated.exit.coords
    assert edge_set(restored) == edge_set(generated)
    assert_symmetric(restored)


def test_entity_fields_survive():
    d = generate_dungeon(DungeonConfig(width=41, height=41, seed=4, chest_chance=0.5, enemy_chance=0.5,
                                       place_lock_pick=True))
    restored = loads(dumps(d))
    originals = {e.id: e for r in d.rooms for e in r.contents}
    loaded = {e.id: e for r in restored.rooms for e in r.contents}
    assert originals == loaded
    kinds = {e.kind for e in loaded.values()}
    assert kinds == set(EntityKind)


def test_same_seed_byte_identical():
    cfg = DungeonConfig(width=31, height=31, theme="A fire temple", seed=2024)
    assert dumps(generate_dungeon(cfg)) == dumps(generate_dungeon(cfg))


def test_save_and_load(tmp_path, generated):
    path = save(generated, tmp_path / "nested" / "d.json")
    assert dumps(load(path)) == dumps(generated)


def _doc(generated):
    return json.loads(dumps(generated))


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("width"),
        lambda d: d.update(width=0),
        lambda d: d.update(height="ten"),
        lambda d: d.update(theme="   "),
        lambda d: d.update(rooms={}),
        lambda d: d["rooms"][0].pop("x"),
        lambda d: d["rooms"][0].update(type="Boss"),
        lambda d: d["rooms"][0].update(id="not-a-uuid"),
        lambda d: d["rooms"][0].update(connectedNorth="yes"),
        lambda d: d["rooms"][1].update(x=d["rooms"][0]["x"], y=d["rooms"][0]["y"]),
        lambda d: d["rooms"][1].update(x=10_000),
        lambda d: d["rooms"][1].update(y=-1),
        lambda d: d["rooms"][0].update(entities=[{"id": "x", "kind": "Dragon", "name": "n"}]),
        lambda d: d["rooms"][1].update(description=["a", "list"]),
        lambda d: d["rooms"][1].update(name=7),
    ],
)
def test_malformed_documents_rejected(generated, mutate):
    doc = _doc(generated)
    mutate(doc)
    with pytest.raises(DungeonParseError):
        from_document(doc)


def test_malformed_entity_fields_rejected():
    d = generate_dungeon(DungeonConfig(width=41, height=41, seed=4, chest_chance=0.0, enemy_chance=1.0))
    doc = json.loads(dumps(d))
    room = next(r for r in doc["rooms"] if r["entities"])
    room["entities"][0]["health"] = True
    with pytest.raises(DungeonParseError):
        from_document(doc)


def test_duplicate_entity_ids_rejected():
    d = generate_dungeon(DungeonConfig(width=41, height=41, seed=4, chest_chance=0.0, enemy_chance=1.0))
    doc = json.loads(dumps(d))
    room = next(r for r in doc["rooms"] if r["entities"])
    room["entities"].append(dict(room["entities"][0]))
    with pytest.raises(DungeonParseError):
        from_document(doc)


@pytest.mark.parametrize("text", ["", "{", "[]", "null", "42"])
def test_invalid_json_rejected(text):
    with pytest.raises(DungeonParseError):
        loads(text)


def _clear_flags(room):
    room.update(connectedNorth=False, connectedEast=False, connectedSouth=False, connectedWest=False)


def _swap_types(rooms, a, b):
    rooms[a]["type"], rooms[b]["type"] = rooms[b]["type"], rooms[a]["type"]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: [_clear_flags(r) for r in d["rooms"][1:]],
        lambda d: _clear_flags(d["rooms"][1]),
        lambda d: min(d["rooms"], key=lambda r: r["y"]).update(connectedNorth=True),
    ],
    ids=["one_sided_everywhere", "one_sided_single_room", "flag_toward_empty_slot"],
)
def test_asymmetric_connections_rejected(generated, mutate):
    doc = _doc(generated)
    mutate(doc)
    with pytest.raises(DungeonParseError, match="connected"):
        from_document(doc)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d["rooms"][1].update(type="Entrance"),
        lambda d: _swap_types(d["rooms"], 0, 1),
        lambda d: d["rooms"][0].update(type="Normal"),
        lambda d: next(r for r in d["rooms"] if r["type"] == "Normal").update(type="Exit"),
    ],
    ids=["two_entrances", "entrance_off_center", "no_entrance", "two_exits"],
)
def test_room_type_layout_rejected(generated, mutate):
    doc = _doc(generated)
    mutate(doc)
    with pytest.raises(DungeonParseError):
        from_document(doc)


def test_missing_name_and_null_description_load_as_empty(generated):
    doc = _doc(generated)
    doc["rooms"][1].pop("name")
    doc["rooms"][1]["description"] = None
    room = from_document(doc).rooms[1]
    assert room.name == "" and room.description == ""


def test_single_room_dungeon_without_exit_loads():
    d = generate_dungeon(DungeonConfig(width=1, height=1, min_path_length=2, seed=3), populate=False)
    restored = loads(dumps(d))
    assert restored.exit is None and restored.entrance.coords == (0, 0)
