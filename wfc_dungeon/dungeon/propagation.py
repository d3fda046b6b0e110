"""Constraint propagation (arc consistency) over the possibility grid."""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional

from .grid import Grid


def propagate(grid: Grid, row: int, col: int, on_narrow: Optional[Callable[[int, int], None]] = None) -> int:
    """Breadth-first relaxation starting at a freshly decided cell.

    For each interior neighbour, keep only the patterns that every pattern
    still possible at the current cell accepts. A neighbour whose set shrank
    is queued again even if several options remain, so reductions cascade.
    Unchanged neighbours are never queued; since sets only shrink the walk
    always terminates.

    Border cells are skipped: they are fixed WALL and nothing an interior
    cell allows can reopen them.

    ``on_narrow(row, col)`` is called for every cell whose set shrank.

    Returns the number of narrowing steps performed (0 means the
    neighbourhood was already consistent).
    """
    catalogue = grid.catalogue
    queue = deque([(row, col)])
    steps = 0
    while queue:
        r, c = queue.popleft()
        source = grid.possibilities[r][c]
        for nr, nc in grid.neighbors(r, c):
            if grid.is_border(nr, nc):
                continue
            current = grid.possibilities[nr][nc]
            allowed = catalogue.compatible_with(source, current)
            if len(allowed) < len(current):
                grid.narrow(nr, nc, allowed)
                queue.append((nr, nc))
                steps += 1
                if on_narrow is not None:
                    on_narrow(nr, nc)
    return steps


__all__ = ["propagate"]
