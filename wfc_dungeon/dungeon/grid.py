"""Grid state for the constraint solver.

The grid pairs the committed tile map with the per-cell possibility sets
(the "wave"). A cell is decided when its set has exactly one pattern and the
committed tile matches that pattern. Border cells are decided as WALL from
construction and stay that way.

Coordinates are ``(row, col)`` and storage is row-major: ``tiles[row][col]``.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Set, Tuple

from .errors import InvalidInput
from .patterns import DEFAULT_CATALOGUE, PatternCatalogue
from .tiles import DIRECTIONS, EMPTY, WALL

Coord = Tuple[int, int]


class Grid:
    def __init__(self, height: int, width: int, catalogue: PatternCatalogue = DEFAULT_CATALOGUE):
        for name, value in (("height", height), ("width", width)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidInput(f"{name} must be a positive integer, got {value!r}")
        self.height = height
        self.width = width
        self.catalogue = catalogue
        self.wall_id = catalogue.id_for(WALL)
        all_ids = catalogue.pattern_ids
        self.tiles: List[List[str]] = [[EMPTY for _ in range(width)] for _ in range(height)]
        self.possibilities: List[List[Set[int]]] = [[set(all_ids) for _ in range(width)] for _ in range(height)]
        for row in range(height):
            for col in range(width):
                if self.is_border(row, col):
                    self.tiles[row][col] = WALL
                    self.possibilities[row][col] = {self.wall_id}

    @classmethod
    def from_text(cls, text: str, catalogue: PatternCatalogue = DEFAULT_CATALOGUE) -> "Grid":
        """Build a fully decided grid from a finished character map.

        Border cells are forced to WALL like in a freshly constructed grid.
        """
        lines = text.split("\n")
        if not text or not lines[0]:
            raise InvalidInput("map text must not be empty")
        width = len(lines[0])
        if any(len(line) != width for line in lines):
            raise InvalidInput("map rows must all have the same width")
        grid = cls(len(lines), width, catalogue)
        for row, line in enumerate(lines):
            for col, ch in enumerate(line):
                if grid.is_border(row, col):
                    continue
                if ch == EMPTY:
                    continue
                try:
                    grid.fix(row, col, catalogue.id_for(ch))
                except KeyError:
                    raise InvalidInput(f"unknown tile {ch!r} at ({row}, {col})") from None
        return grid

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def is_border(self, row: int, col: int) -> bool:
        return row in (0, self.height - 1) or col in (0, self.width - 1)

    def neighbors(self, row: int, col: int) -> Iterator[Coord]:
        for dr, dc in DIRECTIONS:
            nr, nc = row + dr, col + dc
            if self.in_bounds(nr, nc):
                yield nr, nc

    def interior_cells(self) -> Iterator[Coord]:
        """Row-major scan of every non-border cell."""
        for row in range(1, self.height - 1):
            for col in range(1, self.width - 1):
                yield row, col

    # ------------------------------------------------------------------
    # Wave state
    # ------------------------------------------------------------------
    def entropy(self, row: int, col: int) -> int:
        return len(self.possibilities[row][col])

    def is_decided(self, row: int, col: int) -> bool:
        options = self.possibilities[row][col]
        if len(options) != 1:
            return False
        return self.catalogue.tile_for(next(iter(options))) == self.tiles[row][col]

    def fix(self, row: int, col: int, pattern_id: int) -> None:
        self.possibilities[row][col] = {pattern_id}
        self.tiles[row][col] = self.catalogue.tile_for(pattern_id)

    def narrow(self, row: int, col: int, allowed: Iterable[int]) -> None:
        """Replace the possibility set; a singleton result is committed to the map."""
        options = set(allowed)
        self.possibilities[row][col] = options
        if len(options) == 1:
            self.tiles[row][col] = self.catalogue.tile_for(next(iter(options)))

    def set_tile(self, row: int, col: int, tile: str) -> None:
        self.fix(row, col, self.catalogue.id_for(tile))

    def tile(self, row: int, col: int) -> str:
        return self.tiles[row][col]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def rows(self) -> List[str]:
        return ["".join(line) for line in self.tiles]

    def to_text(self) -> str:
        return "\n".join(self.rows())

    def count(self, tile: str) -> int:
        return sum(line.count(tile) for line in self.tiles)


__all__ = ["Grid", "Coord"]
