"""
project: WFC Dungeon
module: __init__.py
License: MIT

Flask application setup for the dungeon map service.

Configuration is sourced from environment variables (optionally loaded from
a local `.env` via python-dotenv) with reasonable defaults for development.
Map generation itself lives in `wfc_dungeon.dungeon` and does not need the
app; the app only exposes it over a small JSON API.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so SECRET_KEY, DUNGEON_* flags, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


app = Flask(__name__, instance_relative_config=True)

app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    DUNGEON_DEFAULT_WIDTH=_env_int("DUNGEON_DEFAULT_WIDTH", 40),
    DUNGEON_DEFAULT_HEIGHT=_env_int("DUNGEON_DEFAULT_HEIGHT", 25),
    DUNGEON_MAX_DIMENSION=_env_int("DUNGEON_MAX_DIMENSION", 80),
    DUNGEON_MAX_SCALE=_env_int("DUNGEON_MAX_SCALE", 8),
    DUNGEON_DISABLE_CACHE=_env_flag("DUNGEON_DISABLE_CACHE"),
    # Generation feature flags / metrics
    DUNGEON_ENABLE_GENERATION_METRICS=_env_flag("DUNGEON_ENABLE_GENERATION_METRICS", "1"),
    DUNGEON_VERIFY_CONNECTIVITY=_env_flag("DUNGEON_VERIFY_CONNECTIVITY"),
)

# Register HTTP blueprints (import after app is configured)
from wfc_dungeon.dungeon.errors import InvalidInput, NoWalkableCells  # noqa: E402
from wfc_dungeon.routes.dungeon_api import bp_dungeon  # noqa: E402

app.register_blueprint(bp_dungeon)


@app.errorhandler(InvalidInput)
def invalid_input(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(NoWalkableCells)
def no_walkable_cells(e):
    return jsonify({"error": str(e)}), 422


@app.errorhandler(500)
def internal_error(e):
    logging.getLogger(__name__).exception("Unhandled error: %s", e)
    return jsonify({"error": "internal server error"}), 500


def create_app(overrides=None):
    """Return the Flask app instance with optional config overrides applied."""
    if overrides:
        app.config.update(overrides)
    return app
