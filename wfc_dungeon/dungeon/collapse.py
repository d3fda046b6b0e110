"""Collapse driver: minimum-entropy selection, observation and post-solve cleanup."""

from __future__ import annotations

import heapq
from typing import List, Optional, Tuple

from .errors import ContradictionState
from .grid import Coord, Grid
from .propagation import propagate
from .tiles import EMPTY, WALL


def select_next_cell(grid: Grid) -> Optional[Coord]:
    """Return the undecided interior cell with the fewest options.

    Only sets larger than one count: decided cells and contradictions (empty
    sets) are skipped. Ties go to the first cell in row-major order. ``None``
    means the solver is done.
    """
    best: Optional[Coord] = None
    best_entropy = 0
    for row, col in grid.interior_cells():
        entropy = grid.entropy(row, col)
        if entropy > 1 and (best is None or entropy < best_entropy):
            best = (row, col)
            best_entropy = entropy
    return best


class EntropyQueue:
    """Incremental form of ``select_next_cell``.

    Keeps a heap of ``(entropy, row, col)`` entries, so the smallest entry is
    the lowest entropy with row-major tie-breaking. Sets only shrink while the
    solver runs; an entry whose entropy no longer matches its cell is stale
    and dropped on pop. Call ``push`` whenever a cell's set shrinks.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self._heap: List[Tuple[int, int, int]] = [
            (grid.entropy(row, col), row, col)
            for row, col in grid.interior_cells()
            if grid.entropy(row, col) > 1
        ]
        heapq.heapify(self._heap)

    def push(self, row: int, col: int) -> None:
        entropy = self.grid.entropy(row, col)
        if entropy > 1:
            heapq.heappush(self._heap, (entropy, row, col))

    def pop(self) -> Optional[Coord]:
        while self._heap:
            entropy, row, col = heapq.heappop(self._heap)
            if self.grid.entropy(row, col) == entropy:
                return row, col
        return None


def collapse(grid: Grid, row: int, col: int, rng, on_narrow=None) -> int:
    """Fix the cell to one of its remaining patterns, chosen uniformly, and propagate.

    Returns the number of propagation steps triggered.
    """
    options = sorted(grid.possibilities[row][col])
    if not options:
        raise ContradictionState(row, col)
    grid.fix(row, col, rng.choice(options))
    return propagate(grid, row, col, on_narrow)


def run_collapse_loop(grid: Grid, rng) -> Tuple[int, int]:
    """Alternate select/collapse until no undecided cell remains.

    Returns (cells_collapsed, propagation_steps).
    """
    queue = EntropyQueue(grid)
    collapsed = 0
    steps = 0
    while True:
        pos = queue.pop()
        if pos is None:
            break
        steps += collapse(grid, pos[0], pos[1], rng, on_narrow=queue.push)
        collapsed += 1
    return collapsed, steps


def open_contradictions(grid: Grid) -> List[Coord]:
    """Cells whose set is empty while no tile was ever committed there."""
    return [
        (row, col)
        for row in range(grid.height)
        for col in range(grid.width)
        if not grid.possibilities[row][col] and grid.tiles[row][col] == EMPTY
    ]


def fill_unresolved(grid: Grid) -> Tuple[int, int]:
    """Make the map total once the solver has finished.

    A cell whose possibility set ended up empty is a contradiction: if no
    tile was ever committed there it becomes WALL, otherwise the committed
    tile stays and its singleton is restored. Any cell still EMPTY becomes
    WALL.

    Returns (empties_filled, contradictions).
    """
    filled = 0
    contradictions = 0
    for row in range(grid.height):
        for col in range(grid.width):
            if not grid.possibilities[row][col]:
                contradictions += 1
            if grid.tiles[row][col] == EMPTY:
                grid.set_tile(row, col, WALL)
                filled += 1
            elif not grid.possibilities[row][col]:
                grid.set_tile(row, col, grid.tiles[row][col])
    return filled, contradictions


__all__ = [
    "select_next_cell",
    "EntropyQueue",
    "collapse",
    "run_collapse_loop",
    "open_contradictions",
    "fill_unresolved",
]
