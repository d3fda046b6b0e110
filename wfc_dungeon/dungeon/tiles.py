# Tile constants centralized for modular imports
WALL = "#"
FLOOR = "."
HALL = "+"  # corridor carved between regions
EMPTY = " "  # transient: never emitted in a finished map

WALKABLE = frozenset({FLOOR, HALL})
OUTPUT_TILES = frozenset({WALL, FLOOR, HALL})

# Orthogonal offsets (row, col); nothing in the generator looks at diagonals
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))

__all__ = ["WALL", "FLOOR", "HALL", "EMPTY", "WALKABLE", "OUTPUT_TILES", "DIRECTIONS"]
