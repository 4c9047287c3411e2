"""Room content entities.

Entities form a closed variant set keyed by ``EntityKind``. Each variant is a
dataclass carrying its kind-specific payload; persistence goes through
``entity_to_record`` / ``entity_from_record`` which dispatch on the kind.

Factories at the bottom of the module draw every random value (including the
entity id) from an explicit ``random.Random`` so seeded generation is
reproducible.
"""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from .errors import DungeonParseError
from .ids import new_id, parse_id


class EntityKind(str, Enum):
    ENEMY = "Enemy"
    TREASURE_CHEST = "TreasureChest"
    MAGICAL_LOCK_PICK = "MagicalLockPick"


class TreasureType(str, Enum):
    MONEY = "Money"
    GOLD = "Gold"
    JEWELS = "Jewels"


@dataclass
class Treasure:
    type: TreasureType
    value: int

    def __str__(self) -> str:
        return f"{self.type.value} worth {self.value} gold"


@dataclass
class Entity:
    name: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    description: str = ""
    short_description: str = ""

    kind: ClassVar[EntityKind]

    def _payload(self) -> Dict[str, Any]:
        return {}


@dataclass
class Enemy(Entity):
    name: str = "Monster"
    health: int = 10
    attack: int = 2
    money_reward: int = 0

    kind: ClassVar[EntityKind] = EntityKind.ENEMY

    def _payload(self):
        return {"health": self.health, "attack": self.attack, "moneyReward": self.money_reward}


@dataclass
class TreasureChest(Entity):
    name: str = "Treasure Chest"
    is_locked: bool = False
    is_opened: bool = False
    treasure: Optional[Treasure] = None

    kind: ClassVar[EntityKind] = EntityKind.TREASURE_CHEST

    def open(self):
        if self.is_opened:
            raise ValueError("Cannot open: chest is already opened.")
        self.is_opened = True

    def _payload(self):
        return {
            "isLocked": self.is_locked,
            "isOpened": self.is_opened,
            "treasureType": self.treasure.type.value if self.treasure else None,
            "treasureValue": self.treasure.value if self.treasure else None,
        }


LOCK_PICK_DESCRIPTION = (
    "A slender, ornate pick with shimmering runes etched along its surface. It radiates a subtle magical aura."
)


@dataclass
class MagicalLockPick(Entity):
    name: str = "Magical Lock Pick"
    description: str = LOCK_PICK_DESCRIPTION
    short_description: str = "A magical tool that can unlock any chest."

    kind: ClassVar[EntityKind] = EntityKind.MAGICAL_LOCK_PICK

    def use_on(self, chest: Optional[TreasureChest]) -> bool:
        """Unlock ``chest``; False when there is nothing to unlock."""
        if chest is None or not chest.is_locked:
            return False
        chest.is_locked = False
        return True


# ---------------------------------------------------------------------------
# Record mapping
# ---------------------------------------------------------------------------


def entity_to_record(entity: Entity) -> Dict[str, Any]:
    record = {
        "id": str(entity.id),
        "kind": entity.kind.value,
        "name": entity.name,
        "description": entity.description,
        "shortDescription": entity.short_description,
    }
    record.update(entity._payload())
    return record


def _field(record: Dict[str, Any], key: str, expected, *, optional: bool = False):
    if key not in record:
        if optional:
            return None
        raise DungeonParseError(f"Entity record missing '{key}'")
    value = record[key]
    if value is None and optional:
        return None
    # bool is an int subclass; keep flags and numbers apart
    if expected is int and isinstance(value, bool):
        raise DungeonParseError(f"Entity field '{key}' must be int, got bool")
    if not isinstance(value, expected):
        raise DungeonParseError(f"Entity field '{key}' has wrong type {type(value).__name__}")
    return value


def _base_kwargs(record):
    try:
        entity_id = parse_id(_field(record, "id", str))
    except ValueError as exc:
        raise DungeonParseError(f"Entity id is not a UUID: {record.get('id')!r}") from exc
    return {
        "id": entity_id,
        "name": _field(record, "name", str),
        "description": _field(record, "description", str, optional=True) or "",
        "short_description": _field(record, "shortDescription", str, optional=True) or "",
    }


def _enemy_from_record(record) -> Enemy:
    return Enemy(
        health=_field(record, "health", int),
        attack=_field(record, "attack", int),
        money_reward=_field(record, "moneyReward", int, optional=True) or 0,
        **_base_kwargs(record),
    )


def _chest_from_record(record) -> TreasureChest:
    treasure = None
    t_type = _field(record, "treasureType", str, optional=True)
    t_value = _field(record, "treasureValue", int, optional=True)
    if t_type is not None:
        try:
            treasure = Treasure(TreasureType(t_type), t_value if t_value is not None else 0)
        except ValueError as exc:
            raise DungeonParseError(f"Unknown treasure type {t_type!r}") from exc
    return TreasureChest(
        is_locked=_field(record, "isLocked", bool),
        is_opened=_field(record, "isOpened", bool, optional=True) or False,
        treasure=treasure,
        **_base_kwargs(record),
    )


def _lock_pick_from_record(record) -> MagicalLockPick:
    return MagicalLockPick(**_base_kwargs(record))


_FROM_RECORD = {
    EntityKind.ENEMY: _enemy_from_record,
    EntityKind.TREASURE_CHEST: _chest_from_record,
    EntityKind.MAGICAL_LOCK_PICK: _lock_pick_from_record,
}


def entity_from_record(record: Dict[str, Any]) -> Entity:
    if not isinstance(record, dict):
        raise DungeonParseError("Entity record must be an object")
    try:
        kind = EntityKind(record.get("kind"))
    except ValueError as exc:
        raise DungeonParseError(f"Unknown entity kind {record.get('kind')!r}") from exc
    return _FROM_RECORD[kind](record)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def roll_treasure(rng: random.Random) -> Treasure:
    roll = rng.random()
    if roll < 0.6:
        return Treasure(TreasureType.MONEY, rng.randint(10, 500))
    if roll < 0.9:
        return Treasure(TreasureType.GOLD, rng.randint(500, 5000))
    return Treasure(TreasureType.JEWELS, rng.randint(1000, 10000))


def create_treasure_chest(rng: random.Random, is_locked: bool = False, name: str = "Treasure Chest") -> TreasureChest:
    return TreasureChest(name=name, id=new_id(rng), is_locked=is_locked, treasure=roll_treasure(rng))


def create_enemy(enemy_type, rng: random.Random, theme: Optional[str] = None) -> Enemy:
    """Instantiate an enemy of ``enemy_type`` (an ``EnemyType``) with rolled stats."""
    health = rng.randint(10, 20)
    attack = rng.randint(2, 5)
    if theme:
        lowered = theme.lower()
        if "dark" in lowered:
            health += 5
        elif "fire" in lowered:
            attack += 2
    return Enemy(
        name=enemy_type.name,
        id=new_id(rng),
        description=enemy_type.description,
        short_description=enemy_type.short_description,
        health=health,
        attack=attack,
        money_reward=rng.randint(5, 50),
    )


def create_magical_lock_pick(rng: Optional[random.Random] = None) -> MagicalLockPick:
    return MagicalLockPick(id=new_id(rng))


__all__ = [
    "EntityKind",
    "TreasureType",
    "Treasure",
    "Entity",
    "Enemy",
    "TreasureChest",
    "MagicalLockPick",
    "entity_to_record",
    "entity_from_record",
    "roll_treasure",
    "create_treasure_chest",
    "create_enemy",
    "create_magical_lock_pick",
]
