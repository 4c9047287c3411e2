import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# In-memory database for the whole session; must be set before the app module is imported
os.environ["DATABASE_URL"] = "sqlite://"

from delve import create_app, db  # noqa: E402
from delve.dungeon.config import DungeonConfig  # noqa: E402
from delve.dungeon.pipeline import generate_dungeon  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def app_ctx(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield test_app
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def small_config():
    return DungeonConfig(width=21, height=21, min_path_length=10, seed=42)


@pytest.fixture
def generated(small_config):
    """A populated 21x21 dungeon with a fixed seed."""
    return generate_dungeon(small_config)
