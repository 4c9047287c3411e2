from __future__ import annotations

import random
import uuid
from typing import Optional


def new_id(rng: Optional[random.Random] = None) -> uuid.UUID:
    """Return a version-4 UUID, drawn from ``rng`` when given so seeded runs reproduce ids."""
    if rng is None:
        return uuid.uuid4()
    return uuid.UUID(int=rng.getrandbits(128), version=4)


def parse_id(value) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


__all__ = ["new_id", "parse_id"]
