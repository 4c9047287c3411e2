from delve import db
from delve.models import DungeonRecord
from delve.routes.dungeon_api import _coerce_seed


def _create(client, **body):
    resp = client.post("/api/dungeons", json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_create_and_fetch(client):
    data = _create(client, width=21, height=21, min_path_length=10, seed=42)
    assert data["seed"] == 42
    assert 10 <= data["main_path_rooms"] <= 19
    assert data["degenerate"] is False
    doc = client.get(f"/api/dungeons/{data['id']}").get_json()
    assert doc["width"] == 21 and len(doc["rooms"]) == data["rooms"]


def test_same_seed_same_document(client):
    a = _create(client, width=21, height=21, seed="alpha")
    b = _create(client, width=21, height=21, seed="alpha")
    assert a["seed"] == b["seed"]
    doc_a = client.get(f"/api/dungeons/{a['id']}").get_json()
    doc_b = client.get(f"/api/dungeons/{b['id']}").get_json()
    assert doc_a == doc_b


def test_path_endpoint(client):
    data = _create(client, width=21, height=21, seed=5)
    path = client.get(f"/api/dungeons/{data['id']}/path").get_json()
    assert path["found"] is True
    assert path["steps"][0] == {"x": 10, "y": 10, "direction": path["steps"][0]["direction"]}
    assert path["steps"][-1]["direction"] is None
    assert all(s["direction"] in ("north", "east", "south", "west") for s in path["steps"][:-1])


def test_map_endpoint(client):
    data = _create(client, width=21, height=21, seed=6)
    rows = client.get(f"/api/dungeons/{data['id']}/map").get_json()["rows"]
    assert "".join(rows).count("E") == 1
    rows = client.get(f"/api/dungeons/{data['id']}/map?entities=1").get_json()["rows"]
    assert not any(ch in "".join(rows) for ch in "^>v<")


def test_invalid_config_returns_400(client):
    assert client.post("/api/dungeons", json={"width": 0}).status_code == 400
    assert client.post("/api/dungeons", json={"theme": "   "}).status_code == 400
    assert client.post("/api/dungeons", json={"seed": [1, 2]}).status_code == 400


def test_unknown_dungeon_404(client):
    assert client.get("/api/dungeons/999999").status_code == 404
    assert client.get("/api/dungeons/999999/path").status_code == 404


def test_corrupt_document_422(client, app_ctx):
    record = DungeonRecord(seed=1, theme="t", width=5, height=5, document="{not json")
    db.session.add(record)
    db.session.commit()
    resp = client.get(f"/api/dungeons/{record.id}")
    assert resp.status_code == 422
    assert "error" in resp.get_json()
    assert client.get(f"/api/dungeons/{record.id}/map").status_code == 422


def test_coerce_seed():
    assert _coerce_seed(None) is None
    assert _coerce_seed("  ") is None
    assert _coerce_seed(12) == 12
    assert _coerce_seed("12") == 12
    assert _coerce_seed("alpha") == _coerce_seed("alpha")
    assert isinstance(_coerce_seed("alpha"), int)
