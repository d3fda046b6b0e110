"""Event logger for the map generator and its tools.

Each call writes one line: `level=... ts=...` followed by the caller's
fields and the logger name, or a compact JSON record when
WFC_DUNGEON_LOG_JSON is set. The threshold comes from WFC_DUNGEON_LOG_LEVEL
and can be lowered or raised at runtime with `set_level`; the CLI uses that
to keep generator chatter out of printed maps.

Usage:
    from wfc_dungeon.logging_utils import get_logger
    _log = get_logger("dungeon")
    _log.info(event="map_generated", seed=42, width=40, height=25)

Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("WFC_DUNGEON_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("WFC_DUNGEON_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


def set_level(level: str) -> None:
    """Change the threshold at runtime (e.g. quieter CLI output)."""
    global CURRENT_LEVEL
    if level not in LEVELS:
        raise ValueError(f"unknown log level {level!r}")
    CURRENT_LEVEL = LEVELS[level]


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "wfc_dungeon"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

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


log = get_logger("wfc_dungeon")
