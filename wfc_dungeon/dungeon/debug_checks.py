"""Structural checks for a finished map, used by diagnostics and tests.

``analyze(text)`` returns a dict of issue lists/counts; ``ok`` is True when
the map satisfies every output invariant.
"""
from __future__ import annotations

from typing import Any, Dict

from .connectivity import label_regions
from .grid import Grid
from .postprocess import parse_rows
from .pruning import blocked_sides
from .tiles import EMPTY, OUTPUT_TILES, WALKABLE, WALL


def analyze(text: str) -> Dict[str, Any]:
    rows = parse_rows(text)
    height = len(rows)
    width = len(rows[0])
    border_breaches = []
    empty_cells = []
    foreign_chars = []
    for r, line in enumerate(rows):
        for c, ch in enumerate(line):
            if ch == EMPTY:
                empty_cells.append((r, c))
            elif ch not in OUTPUT_TILES:
                foreign_chars.append((r, c, ch))
            if (r in (0, height - 1) or c in (0, width - 1)) and ch != WALL:
                border_breaches.append((r, c))

    ragged = any(len(line) != width for line in rows)
    dead_ends = []
    region_count = 0
    if not ragged and not foreign_chars:
        # Grid.from_text forces the border to WALL; breaches were recorded above
        grid = Grid.from_text(text)
        for r, c in grid.interior_cells():
            if grid.tiles[r][c] in WALKABLE and blocked_sides(grid, r, c) >= 3:
                dead_ends.append((r, c))
        region_count = label_regions(grid)[1]

    ok = not (border_breaches or empty_cells or foreign_chars or dead_ends or ragged) and region_count <= 1
    return {
        "height": height,
        "width": width,
        "ragged": ragged,
        "border_breaches": border_breaches,
        "empty_cells": empty_cells,
        "foreign_chars": foreign_chars,
        "dead_ends": dead_ends,
        "region_count": region_count,
        "ok": ok,
    }


__all__ = ["analyze"]
