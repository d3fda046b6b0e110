"""
project: WFC Dungeon
module: dungeon_api.py
License: MIT

Dungeon map JSON API.

Endpoints generate maps and run the post-processing / navigation helpers on
a map supplied by the client. Coordinates are always [row, col]. Invalid
input raises InvalidInput, which the app turns into a 400 response.
"""

import hashlib
import os
import random
import threading

from flask import Blueprint, current_app, jsonify, request

from wfc_dungeon.dungeon import (
    MapGenerator,
    choose_positions,
    find_path,
    reachable_tiles,
    upscale,
)
from wfc_dungeon.dungeon.errors import InvalidInput
from wfc_dungeon.dungeon.navigation import PLAYER_VISIBLE_RADIUS
from wfc_dungeon.dungeon.pipeline import default_config
from wfc_dungeon.dungeon.postprocess import parse_rows

SEED_MAX = 9223372036854775807

# Simple in-process cache (seed, width, height, flags) -> (text, metrics). Thread-safe
# with a lock because the dev server may serve requests from several threads.
_map_cache = {}
_map_cache_lock = threading.Lock()
_MAP_CACHE_MAX = 8  # small LRU-ish manual cap


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, bool):
        raise InvalidInput("seed must be an integer or string")
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX
    raise InvalidInput("seed must be an integer or string")


def _int_param(name, raw, default=None, low=None, high=None):
    if raw is None or raw == "":
        if default is None:
            raise InvalidInput(f"{name} is required")
        return default
    if isinstance(raw, bool):
        raise InvalidInput(f"{name} must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be an integer") from None
    if isinstance(raw, float) and raw != value:
        raise InvalidInput(f"{name} must be an integer")
    if low is not None and value < low:
        raise InvalidInput(f"{name} must be >= {low}")
    if high is not None and value > high:
        raise InvalidInput(f"{name} must be <= {high}")
    return value


def _coord_param(name, raw):
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise InvalidInput(f"{name} must be a [row, col] pair")
    return (_int_param(name, raw[0]), _int_param(name, raw[1]))


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("request body must be a JSON object")
    return data


def _grid_param(data):
    grid = data.get("grid")
    if isinstance(grid, list) and all(isinstance(line, str) for line in grid):
        grid = "\n".join(grid)
    if not isinstance(grid, str):
        raise InvalidInput("grid must be a string or list of rows")
    return grid


def get_cached_map(seed: int, width: int, height: int):
    """Return (text, metrics) for a map, generating it on a cache miss."""

    def _build():
        gen = MapGenerator(width=width, height=height, seed=seed)
        return gen.generate(), gen.metrics

    if os.environ.get("DUNGEON_DISABLE_CACHE") == "1" or current_app.config.get("DUNGEON_DISABLE_CACHE"):
        return _build()
    flags = default_config()
    key = (seed, width, height, flags.enable_metrics, flags.verify_connectivity_after_pruning)
    with _map_cache_lock:
        cached = _map_cache.get(key)
        if cached is not None:
            return cached
    result = _build()
    with _map_cache_lock:
        _map_cache[key] = result
        if len(_map_cache) > _MAP_CACHE_MAX:
            first_key = next(iter(_map_cache.keys()))
            if first_key != key:
                _map_cache.pop(first_key, None)
    return result


def clear_map_cache():
    with _map_cache_lock:
        _map_cache.clear()


bp_dungeon = Blueprint("dungeon", __name__)


@bp_dungeon.route("/api/dungeon/map")
def dungeon_map():
    """Generate (or fetch from cache) a map.

    Query: width, height, seed (all optional).
    Response: { seed, width, height, grid, rows, metrics }
    """
    cfg = current_app.config
    max_dim = cfg.get("DUNGEON_MAX_DIMENSION", 80)
    width = _int_param("width", request.args.get("width"), cfg.get("DUNGEON_DEFAULT_WIDTH", 40), 1, max_dim)
    height = _int_param("height", request.args.get("height"), cfg.get("DUNGEON_DEFAULT_HEIGHT", 25), 1, max_dim)
    seed = _coerce_seed(request.args.get("seed"))
    text, metrics = get_cached_map(seed, width, height)
    return jsonify(
        {
            "seed": seed,
            "width": width,
            "height": height,
            "grid": text,
            "rows": text.split("\n"),
            "metrics": metrics,
        }
    )


@bp_dungeon.route("/api/dungeon/upscale", methods=["POST"])
def dungeon_upscale():
    """Body: { grid, factor } -> { grid, factor }"""
    data = _json_body()
    factor = _int_param("factor", data.get("factor"), None, 1, current_app.config.get("DUNGEON_MAX_SCALE", 8))
    return jsonify({"grid": upscale(_grid_param(data), factor), "factor": factor})


@bp_dungeon.route("/api/dungeon/positions", methods=["POST"])
def dungeon_positions():
    """Body: { grid, enemies, min_distance?, seed? } -> { player, enemies }"""
    data = _json_body()
    grid = _grid_param(data)
    enemies = _int_param("enemies", data.get("enemies"), 0, 0)
    min_distance = _int_param("min_distance", data.get("min_distance"), 5, 0)
    rng = random.Random(_coerce_seed(data.get("seed")))
    spawn = choose_positions(grid, enemies, min_distance, rng=rng)
    return jsonify(spawn.to_dict())


@bp_dungeon.route("/api/dungeon/path", methods=["POST"])
def dungeon_path():
    """Body: { grid, start: [r, c], goal: [r, c] } -> { path: [[r, c], ...] }"""
    data = _json_body()
    rows = parse_rows(_grid_param(data))
    start = _coord_param("start", data.get("start"))
    goal = _coord_param("goal", data.get("goal"))
    path = find_path(rows, start, goal)
    return jsonify({"path": [[r, c] for r, c in path]})


@bp_dungeon.route("/api/dungeon/visible", methods=["POST"])
def dungeon_visible():
    """Body: { grid, origin: [r, c], radius? } -> { tiles: [[r, c], ...] }"""
    data = _json_body()
    rows = parse_rows(_grid_param(data))
    origin = _coord_param("origin", data.get("origin"))
    radius = _int_param("radius", data.get("radius"), PLAYER_VISIBLE_RADIUS, 0, current_app.config.get("DUNGEON_MAX_DIMENSION", 80))
    tiles = reachable_tiles(rows, origin, radius)
    return jsonify({"tiles": [[r, c] for r, c in tiles]})
