from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional, Tuple

from .errors import ConfigurationError

MAX_DUNGEON_WIDTH = 1000
MAX_DUNGEON_HEIGHT = 1000
DEFAULT_THEME = "A dark and mysterious dungeon"
DEFAULT_ESCAPE_PATH_LENGTH = 15  # minimum rooms from entrance to exit
MIN_PATH_LENGTH = 2


@dataclass
class DungeonConfig:
    width: int = 100
    height: int = 100
    theme: str = DEFAULT_THEME
    min_path_length: int = DEFAULT_ESCAPE_PATH_LENGTH
    seed: Optional[int] = None
    # Branch & loop pass tuning
    branch_passes: int = 30
    branch_length: Tuple[int, int] = (2, 5)
    sub_branch_chance: float = 0.2
    sub_branch_length: Tuple[int, int] = (1, 3)
    loop_chance: float = 0.3
    # Population odds
    chest_chance: float = 0.10
    enemy_chance: float = 0.10
    chest_lock_chance: float = 0.30
    place_lock_pick: bool = False
    strongest_enemy_min_attack: int = 8
    populate_workers: Optional[int] = None

    def validate(self) -> "DungeonConfig":
        """Raise ConfigurationError on the first invalid field; return self for chaining."""
        _check_dimension("width", self.width, MAX_DUNGEON_WIDTH)
        _check_dimension("height", self.height, MAX_DUNGEON_HEIGHT)
        if not isinstance(self.theme, str) or not self.theme.strip():
            raise ConfigurationError("Theme cannot be empty or whitespace.")
        if not isinstance(self.min_path_length, int) or self.min_path_length < MIN_PATH_LENGTH:
            raise ConfigurationError(
                f"min_path_length must be at least {MIN_PATH_LENGTH} (entrance and exit) (was {self.min_path_length})."
            )
        if self.branch_passes < 0:
            raise ConfigurationError(f"branch_passes must be >= 0 (was {self.branch_passes}).")
        for name in ("branch_length", "sub_branch_length"):
            lo, hi = getattr(self, name)
            if lo < 1 or hi < lo:
                raise ConfigurationError(f"{name} must be an ascending range of positive ints (was {(lo, hi)}).")
        for name in ("sub_branch_chance", "loop_chance", "chest_chance", "enemy_chance", "chest_lock_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1] (was {value}).")
        if self.chest_chance + self.enemy_chance > 1.0:
            raise ConfigurationError("chest_chance + enemy_chance must not exceed 1.")
        if self.populate_workers is not None and self.populate_workers < 1:
            raise ConfigurationError(f"populate_workers must be >= 1 (was {self.populate_workers}).")
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "DungeonConfig":
        """Build a config from DUNGEON_* environment variables, then apply keyword overrides."""
        env = os.environ if environ is None else environ
        env_map = {
            "DUNGEON_WIDTH": ("width", int),
            "DUNGEON_HEIGHT": ("height", int),
            "DUNGEON_THEME": ("theme", str),
            "DUNGEON_MIN_PATH_LENGTH": ("min_path_length", int),
            "DUNGEON_SEED": ("seed", int),
            "DUNGEON_BRANCH_PASSES": ("branch_passes", int),
            "DUNGEON_LOOP_CHANCE": ("loop_chance", float),
            "DUNGEON_PLACE_LOCK_PICK": ("place_lock_pick", _parse_bool),
            "DUNGEON_POPULATE_WORKERS": ("populate_workers", int),
        }
        values = {}
        for env_key, (attr, parse) in env_map.items():
            raw = env.get(env_key)
            if raw is None or raw == "":
                continue
            try:
                values[attr] = parse(raw)
            except ValueError as exc:
                raise ConfigurationError(f"{env_key}={raw!r} is not a valid {attr}") from exc
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown config fields: {sorted(unknown)}")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return replace(cls(), **values)


def _check_dimension(name: str, value, maximum: int):
    if not isinstance(value, int) or isinstance(value, bool) or value < 1 or value > maximum:
        raise ConfigurationError(f"{name.capitalize()} must be between 1 and {maximum} (was {value}).")


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


__all__ = [
    "DungeonConfig",
    "MIN_PATH_LENGTH",
    "MAX_DUNGEON_WIDTH",
    "MAX_DUNGEON_HEIGHT",
    "DEFAULT_THEME",
    "DEFAULT_ESCAPE_PATH_LENGTH",
]
