"""Public dungeon package interface.

Map generation entry points plus the helpers gameplay code consumes
(upscaling, spawn selection, navigation).
"""

from .config import GeneratorConfig
from .errors import ContradictionState, InvalidInput, MapGenerationError, NoWalkableCells
from .grid import Grid
from .navigation import PLAYER_VISIBLE_RADIUS, find_path, is_walkable, reachable_tiles
from .patterns import DEFAULT_CATALOGUE, PatternCatalogue
from .pipeline import MapGenerator, generate
from .postprocess import SpawnPositions, choose_positions, upscale
from .tiles import EMPTY, FLOOR, HALL, WALL  # noqa: F401

__all__ = [
    "GeneratorConfig",
    "MapGenerator",
    "generate",
    "Grid",
    "PatternCatalogue",
    "DEFAULT_CATALOGUE",
    "upscale",
    "choose_positions",
    "SpawnPositions",
    "find_path",
    "reachable_tiles",
    "is_walkable",
    "PLAYER_VISIBLE_RADIUS",
    "MapGenerationError",
    "InvalidInput",
    "NoWalkableCells",
    "ContradictionState",
    "WALL",
    "FLOOR",
    "HALL",
    "EMPTY",
]
