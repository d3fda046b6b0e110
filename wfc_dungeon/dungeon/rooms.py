import random
from dataclasses import dataclass
from typing import List, Tuple

from .config import GeneratorConfig
from .grid import Grid
from .tiles import EMPTY, FLOOR, WALL


@dataclass
class Room:
    row: int
    col: int
    height: int
    width: int

    def cells(self):
        for r in range(self.row, self.row + self.height):
            for c in range(self.col, self.col + self.width):
                yield r, c

    @property
    def center(self) -> Tuple[int, int]:
        return (self.row + self.height // 2, self.col + self.width // 2)


def _anchor(rng, extent: int, margin: int) -> int:
    span = extent - 2 * margin - 2
    if span > 0:
        return margin + rng.randrange(span)
    # Small maps: any interior coordinate
    return rng.randint(1, max(1, extent - 2))


def seed_rooms(grid: Grid, config: GeneratorConfig, rng=None) -> List[Room]:
    """Carve rectangular rooms and pre-fix their cells before the solver runs.

    Every attempt places a room: interior cells become FLOOR, and the one-cell
    ring around the requested rectangle becomes WALL wherever it is still
    EMPTY. Rooms may overlap and later rooms overwrite earlier floors/walls.
    Rectangles are clipped to stay inside the border.

    Returns the placed rooms (clipped).
    """
    if rng is None:
        rng = random
    floor_id = grid.catalogue.id_for(FLOOR)
    rooms: List[Room] = []
    if grid.height < 3 or grid.width < 3:
        return rooms
    for _ in range(config.room_attempts):
        row = _anchor(rng, grid.height, config.room_margin)
        col = _anchor(rng, grid.width, config.room_margin)
        h = rng.randint(config.min_room_size, config.max_room_size)
        w = rng.randint(config.min_room_size, config.max_room_size)
        bottom = min(row + h, grid.height - 1)
        right = min(col + w, grid.width - 1)
        if bottom <= row or right <= col:
            continue
        room = Room(row, col, bottom - row, right - col)
        for r, c in room.cells():
            grid.fix(r, c, floor_id)
        # wall ring around the requested (unclipped) rectangle
        for r in range(row - 1, row + h + 1):
            for c in range(col - 1, col + w + 1):
                if grid.in_bounds(r, c) and grid.tiles[r][c] == EMPTY:
                    grid.set_tile(r, c, WALL)
        rooms.append(room)
    return rooms


__all__ = ["Room", "seed_rooms"]
