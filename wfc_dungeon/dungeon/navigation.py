"""Grid navigation helpers for finished maps.

``rows`` is the list of map lines (``text.split("\\n")``). Movement is
orthogonal only and every step costs 1.
"""
from __future__ import annotations

import heapq
from collections import deque
from typing import Dict, List, Sequence

from .grid import Coord
from .postprocess import manhattan
from .tiles import DIRECTIONS, WALKABLE

PLAYER_VISIBLE_RADIUS = 5


def is_walkable(rows: Sequence[str], row: int, col: int) -> bool:
    if row < 0 or row >= len(rows):
        return False
    line = rows[row]
    if col < 0 or col >= len(line):
        return False
    return line[col] in WALKABLE


def find_path(rows: Sequence[str], start: Coord, goal: Coord) -> List[Coord]:
    """A* search from ``start`` to ``goal``.

    Returns the steps after ``start`` up to and including ``goal``, or ``[]``
    when the goal is not walkable, cannot be reached, or equals ``start``.
    """
    start = tuple(start)
    goal = tuple(goal)
    if start == goal or not is_walkable(rows, *goal):
        return []

    # (f_score, counter, cell); counter breaks ties in insertion order
    counter = 0
    open_set = [(manhattan(start, goal), counter, start)]
    came_from: Dict[Coord, Coord] = {}
    g_score: Dict[Coord, int] = {start: 0}

    while open_set:
        _, _, current = heapq.heappop(open_set)
        if current == goal:
            path = []
            while current != start:
                path.append(current)
                current = came_from[current]
            path.reverse()
            return path
        for dr, dc in DIRECTIONS:
            neighbor = (current[0] + dr, current[1] + dc)
            if not is_walkable(rows, *neighbor):
                continue
            tentative = g_score[current] + 1
            if neighbor not in g_score or tentative < g_score[neighbor]:
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                counter += 1
                heapq.heappush(open_set, (tentative + manhattan(neighbor, goal), counter, neighbor))
    return []


def reachable_tiles(rows: Sequence[str], origin: Coord, radius: int = PLAYER_VISIBLE_RADIUS) -> List[Coord]:
    """Walkable cells within ``radius`` steps of ``origin`` (origin included), in BFS order."""
    origin = tuple(origin)
    seen = {origin}
    order = [origin]
    q = deque([(origin, 0)])
    while q:
        (row, col), dist = q.popleft()
        if dist >= radius:
            continue
        for dr, dc in DIRECTIONS:
            nxt = (row + dr, col + dc)
            if nxt in seen or not is_walkable(rows, *nxt):
                continue
            seen.add(nxt)
            order.append(nxt)
            q.append((nxt, dist + 1))
    return order


__all__ = ["PLAYER_VISIBLE_RADIUS", "is_walkable", "find_path", "reachable_tiles"]
