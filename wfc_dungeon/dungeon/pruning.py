"""Dead-end pruning for the connected grid."""
from __future__ import annotations

from typing import Tuple

from .grid import Grid
from .tiles import WALKABLE, WALL, DIRECTIONS


def blocked_sides(grid: Grid, row: int, col: int) -> int:
    """Count orthogonal neighbours that are WALL or off the map."""
    blocked = 0
    for dr, dc in DIRECTIONS:
        nr, nc = row + dr, col + dc
        if not grid.in_bounds(nr, nc) or grid.tiles[nr][nc] == WALL:
            blocked += 1
    return blocked


def remove_dead_ends(grid: Grid) -> Tuple[int, int]:
    """Fill walkable cells with at most one open side back into walls.

    Sweeps rewrite in place (row-major) and repeat until a sweep changes
    nothing, since filling one stub can expose the cell behind it.
    Returns (cells_removed, sweeps).
    """
    removed = 0
    sweeps = 0
    changed = True
    while changed:
        changed = False
        sweeps += 1
        for row, col in grid.interior_cells():
            if grid.tiles[row][col] not in WALKABLE:
                continue
            if blocked_sides(grid, row, col) >= 3:
                grid.set_tile(row, col, WALL)
                removed += 1
                changed = True
    return removed, sweeps


__all__ = ["blocked_sides", "remove_dead_ends"]
