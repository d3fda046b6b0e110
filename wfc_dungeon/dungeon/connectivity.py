"""Connectivity repair for the solved grid.

Flood fill labels walkable regions; while more than one region exists, a
wall cell is converted into a HALL tile. Walls that directly bridge two
regions (primary connectors) always win. When none exist, a corridor is
grown from a random sample of walls that are not already crowded by halls
(secondary connectors), which extends hall territory instead of punching
arbitrary openings.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Dict, List, NamedTuple, Tuple

from .grid import Coord, Grid
from .tiles import HALL, WALKABLE, WALL

UNASSIGNED = -1


class ConnectivityReport(NamedTuple):
    regions_initial: int
    regions_final: int
    primary: int
    secondary: int

    @property
    def halls_carved(self) -> int:
        return self.primary + self.secondary


def label_regions(grid: Grid) -> Tuple[List[List[int]], int]:
    """Assign a region id to every maximal 4-connected walkable component.

    Returns (regions, count); non-walkable cells stay UNASSIGNED.
    """
    regions = [[UNASSIGNED for _ in range(grid.width)] for _ in range(grid.height)]
    count = 0
    for row, col in grid.interior_cells():
        if grid.tiles[row][col] not in WALKABLE or regions[row][col] != UNASSIGNED:
            continue
        regions[row][col] = count
        q = deque([(row, col)])
        while q:
            cr, cc = q.popleft()
            for nr, nc in grid.neighbors(cr, cc):
                if regions[nr][nc] == UNASSIGNED and grid.tiles[nr][nc] in WALKABLE:
                    regions[nr][nc] = count
                    q.append((nr, nc))
        count += 1
    return regions, count


def find_connectors(
    grid: Grid, regions: List[List[int]], max_hall_neighbors: int = 3
) -> Tuple[List[Coord], List[Coord]]:
    """Classify interior walls as primary (touch 2+ regions) or secondary connectors."""
    primary: List[Coord] = []
    secondary: List[Coord] = []
    for row, col in grid.interior_cells():
        if grid.tiles[row][col] != WALL:
            continue
        adjacent = set()
        halls = 0
        for nr, nc in grid.neighbors(row, col):
            rid = regions[nr][nc]
            if rid != UNASSIGNED:
                adjacent.add(rid)
                if grid.tiles[nr][nc] == HALL:
                    halls += 1
        if len(adjacent) > 1:
            primary.append((row, col))
        elif halls < max_hall_neighbors:
            secondary.append((row, col))
    return primary, secondary


def _absorb(grid: Grid, regions: List[List[int]], sizes: Dict[int, int], row: int, col: int, new_id: int) -> int:
    """Label a freshly carved cell, merging every region it touches.

    The largest touching region keeps its id and the others are flooded
    into it, so only the smaller side is relabelled. Returns the change in
    region count.
    """
    touching = {regions[nr][nc] for nr, nc in grid.neighbors(row, col) if regions[nr][nc] != UNASSIGNED}
    if not touching:
        regions[row][col] = new_id
        sizes[new_id] = 1
        return 1
    label = max(touching, key=lambda rid: (sizes[rid], -rid))
    regions[row][col] = label
    q = deque([(row, col)])
    while q:
        cr, cc = q.popleft()
        for nr, nc in grid.neighbors(cr, cc):
            rid = regions[nr][nc]
            if rid != UNASSIGNED and rid != label:
                regions[nr][nc] = label
                q.append((nr, nc))
    merged = 1
    for rid in touching:
        merged += sizes.pop(rid)
    sizes[label] = merged
    return 1 - len(touching)


def connect_regions(grid: Grid, rng=None, sample_size: int = 9, max_hall_neighbors: int = 3) -> ConnectivityReport:
    """Carve HALL tiles until every walkable cell shares one region.

    Each conversion consumes an interior wall and this phase never creates
    walls, so the loop is bounded by the wall count. Labels are updated
    around each carved cell instead of re-flooding the whole grid.
    """
    if rng is None:
        rng = random
    regions, count = label_regions(grid)
    initial = count
    sizes: Dict[int, int] = {}
    for line in regions:
        for rid in line:
            if rid != UNASSIGNED:
                sizes[rid] = sizes.get(rid, 0) + 1
    next_id = count
    primary_used = 0
    secondary_used = 0
    while count > 1:
        primary, secondary = find_connectors(grid, regions, max_hall_neighbors)
        if primary:
            row, col = rng.choice(primary)
            primary_used += 1
        elif secondary:
            batch = rng.sample(secondary, min(sample_size, len(secondary)))
            row, col = rng.choice(batch)
            secondary_used += 1
        else:
            break
        grid.set_tile(row, col, HALL)
        delta = _absorb(grid, regions, sizes, row, col, next_id)
        if delta == 1:
            next_id += 1
        count += delta
    return ConnectivityReport(initial, count, primary_used, secondary_used)


__all__ = ["UNASSIGNED", "ConnectivityReport", "label_regions", "find_connectors", "connect_regions"]
