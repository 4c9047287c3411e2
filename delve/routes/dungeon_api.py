"""
project: Delve
module: dungeon_api.py
License: MIT

Dungeon generation, retrieval, route and map API endpoints.

Generated dungeons are persisted as serialized documents; every read
endpoint reloads the document rather than regenerating, so stored dungeons
stay stable even if generation tuning changes later.
"""

import hashlib
import random

from flask import Blueprint, current_app, jsonify, request

from delve import db
from delve.dungeon.config import DungeonConfig
from delve.dungeon.errors import ConfigurationError, DungeonParseError
from delve.dungeon.map_view import render_map
from delve.dungeon.pipeline import generate_dungeon
from delve.dungeon.serializer import dumps, loads, to_document
from delve.logging_utils import get_logger
from delve.models import DungeonRecord

bp_dungeon = Blueprint('dungeon', __name__)
log = get_logger("delve.routes.dungeon_api")

SQLITE_MAX_INT = 2**63 - 1


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into bounded 64-bit signed int; None stays None."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return None
    if isinstance(payload_seed, int):
        return payload_seed % SQLITE_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return None
        if s.isdigit():
            return int(s) % SQLITE_MAX_INT
        h = hashlib.sha256(s.encode('utf-8')).digest()
        return int.from_bytes(h[:8], 'big') % SQLITE_MAX_INT
    raise ConfigurationError(f"Seed must be an int or string (was {type(payload_seed).__name__}).")


def _load_record(dungeon_id):
    record = db.session.get(DungeonRecord, dungeon_id)
    if record is None:
        return None, (jsonify({'error': 'dungeon not found'}), 404)
    try:
        return loads(record.document), None
    except DungeonParseError as exc:
        log.error(event="stored_document_corrupt", dungeon_id=dungeon_id, error=str(exc))
        return None, (jsonify({'error': f'stored dungeon is corrupt: {exc}'}), 422)


@bp_dungeon.route('/api/dungeons', methods=['POST'])
def create_dungeon():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({'error': 'expected a JSON object'}), 400
    cfg = current_app.config
    try:
        seed = _coerce_seed(payload.get('seed'))
        if seed is None:
            seed = random.randint(1, 1_000_000)
        config = DungeonConfig.from_env(
            width=payload.get('width', cfg.get('DUNGEON_DEFAULT_WIDTH')),
            height=payload.get('height', cfg.get('DUNGEON_DEFAULT_HEIGHT')),
            theme=payload.get('theme', cfg.get('DUNGEON_DEFAULT_THEME')),
            min_path_length=payload.get('min_path_length'),
            seed=seed,
        )
        dungeon = generate_dungeon(config, populate=bool(payload.get('populate', True)))
    except (ConfigurationError, TypeError) as exc:
        return jsonify({'error': str(exc)}), 400

    record = DungeonRecord(
        seed=seed,
        theme=dungeon.theme,
        width=dungeon.width,
        height=dungeon.height,
        room_count=len(dungeon.grid),
        document=dumps(dungeon, indent=None),
        metrics=dungeon.metrics,
    )
    db.session.add(record)
    db.session.commit()
    log.bind(dungeon_id=record.id).info(event="dungeon_stored", seed=seed, rooms=record.room_count)
    return jsonify({
        'id': record.id,
        'seed': seed,
        'rooms': record.room_count,
        'main_path_rooms': dungeon.metrics.get('main_path_rooms'),
        'degenerate': dungeon.metrics.get('main_path_degenerate'),
    }), 201


@bp_dungeon.route('/api/dungeons/<int:dungeon_id>', methods=['GET'])
def get_dungeon(dungeon_id):
    # Reload before serving so clients never receive a document loads() would reject
    dungeon, error = _load_record(dungeon_id)
    if error:
        return error
    return jsonify(to_document(dungeon))


@bp_dungeon.route('/api/dungeons/<int:dungeon_id>/path', methods=['GET'])
def get_main_path(dungeon_id):
    dungeon, error = _load_record(dungeon_id)
    if error:
        return error
    path = dungeon.main_path()
    if path is None:
        return jsonify({'found': False, 'steps': []})
    steps = [
        {'x': x, 'y': y, 'direction': direction.value if direction is not None else None}
        for (x, y), direction in path.items()
    ]
    return jsonify({'found': True, 'steps': steps})


@bp_dungeon.route('/api/dungeons/<int:dungeon_id>/map', methods=['GET'])
def get_map(dungeon_id):
    dungeon, error = _load_record(dungeon_id)
    if error:
        return error
    show_entities = request.args.get('entities', '0').lower() in ('1', 'true', 'yes', 'on')
    return jsonify({'rows': render_map(dungeon, show_entities=show_entities)})
