"""Structured event logging for generation and the HTTP surface.

Every record is one line: ``level=... ts=... logger=... event=... k=v`` or,
with ``DELVE_LOG_JSON`` enabled, one JSON object. Values containing spaces or
quotes are emitted as JSON strings so lines stay machine-splittable.

Usage:
    from delve.logging_utils import get_logger
    log = get_logger("delve.dungeon.carver")
    log.info(event="exit_created", x=4, y=7)

    run_log = log.bind(seed=1234)     # every record carries seed=1234
    run_log.warn(event="main_path_degenerate", placed=9)

Warnings and below go to stdout, errors to stderr. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("DELVE_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("DELVE_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def configure(level: str | None = None, json_mode: bool | None = None):
    """Override the environment-derived level / output mode at runtime."""
    global CURRENT_LEVEL, JSON_MODE
    if level is not None:
        if level.lower() not in LEVELS:
            raise ValueError(f"Unknown log level {level!r}; expected one of {sorted(LEVELS)}")
        CURRENT_LEVEL = LEVELS[level.lower()]
    if json_mode is not None:
        JSON_MODE = bool(json_mode)


def _render_value(v) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (int, float)):
        return str(v)
    s = str(v)
    if not s or any(c in s for c in ' "=\t\n'):
        return json.dumps(s)
    return s


def _format(level: str, **fields):
    fields = {k: v for k, v in fields.items() if v is not None}
    if JSON_MODE:
        rec = {"level": level, "ts": int(time.time())}
        rec.update(fields)
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": rec["ts"], "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={int(time.time())}"]
    parts.extend(f"{k}={_render_value(v)}" for k, v in fields.items())
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "delve"
        self.context = dict(context or {})

    def bind(self, **context) -> "_Logger":
        """Child logger whose records always include ``context``."""
        merged = dict(self.context)
        merged.update(context)
        return _Logger(self.name, merged)

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        record = {"logger": self.name}
        record.update(self.context)
        record.update(fields)
        stream = sys.stderr if lvl == "error" else sys.stdout
        print(_format(lvl, **record), file=stream)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("delve")
