"""
project: Delve
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app and SQLAlchemy for the dungeon
generation API. Configuration is sourced from environment variables with
reasonable defaults for development. A local `instance/` directory is used
for SQLite and the rotating log file.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy

from delve.dungeon.config import DEFAULT_THEME

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still work with an explicit DATABASE_URL
    pass

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")
if not database_url:
    db_path = Path(app.instance_path) / "delve.db"
    database_url = f"sqlite:///{db_path.as_posix()}"

app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    DUNGEON_DEFAULT_WIDTH=int(os.getenv("DUNGEON_DEFAULT_WIDTH", "100")),
    DUNGEON_DEFAULT_HEIGHT=int(os.getenv("DUNGEON_DEFAULT_HEIGHT", "100")),
    DUNGEON_DEFAULT_THEME=os.getenv("DUNGEON_DEFAULT_THEME", DEFAULT_THEME),
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {"timeout": 10, "check_same_thread": False}
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)

# Register HTTP blueprints (import after app/db created)
from delve.routes.dungeon_api import bp_dungeon  # noqa: E402

app.register_blueprint(bp_dungeon)


def create_app():
    """Return the Flask app instance with its tables created."""
    from delve import models  # noqa: F401  register tables with the metadata

    with app.app_context():
        db.create_all()
    return app


@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "not found"}), 404


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
