"""Transforms applied to a finished map before gameplay consumes it.

Both helpers work on the serialized text form (rows joined by ``"\\n"``), so
they accept maps from any source, not only fresh ``Grid`` objects.
"""
from __future__ import annotations

import random
from typing import Dict, List, NamedTuple

from .errors import InvalidInput, NoWalkableCells
from .grid import Coord
from .tiles import WALKABLE


class SpawnPositions(NamedTuple):
    player: Coord
    enemies: List[Coord]

    def to_dict(self) -> Dict[str, list]:
        return {
            "player": [self.player[0], self.player[1]],
            "enemies": [[r, c] for r, c in self.enemies],
        }


def parse_rows(grid: str) -> List[str]:
    if not isinstance(grid, str) or not grid.strip():
        raise InvalidInput("map text must not be empty")
    return grid.split("\n")


def _check_int(name: str, value, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidInput(f"{name} must be an integer >= {minimum}, got {value!r}")


def upscale(grid: str, factor: int) -> str:
    """Enlarge every tile into a ``factor`` x ``factor`` block.

    >>> upscale(".#\\n#.", 2)
    '..##\\n..##\\n##..\\n##..'
    """
    rows = parse_rows(grid)
    _check_int("factor", factor, 1)
    if factor == 1:
        return grid
    out: List[str] = []
    for line in rows:
        wide = "".join(ch * factor for ch in line)
        out.extend([wide] * factor)
    return "\n".join(out)


def walkable_cells(rows: List[str]) -> List[Coord]:
    return [
        (r, c)
        for r, line in enumerate(rows)
        for c, ch in enumerate(line)
        if ch in WALKABLE
    ]


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def choose_positions(grid: str, enemy_count: int, min_distance: int = 5, rng=None) -> SpawnPositions:
    """Pick a player start and up to ``enemy_count`` distinct enemy spawns.

    Enemies prefer cells at least ``min_distance`` (Manhattan) from the
    player. When too few such cells exist the whole remaining walkable pool
    is used instead, so the distance is a preference rather than a
    guarantee. Never places more enemies than there are free cells.
    """
    rows = parse_rows(grid)
    _check_int("enemy_count", enemy_count, 0)
    _check_int("min_distance", min_distance, 0)
    if rng is None:
        rng = random
    candidates = walkable_cells(rows)
    if not candidates:
        raise NoWalkableCells("map has no floor or hall tiles")
    player = rng.choice(candidates)
    pool = [cell for cell in candidates if cell != player]
    wanted = min(enemy_count, len(pool))
    far = [cell for cell in pool if manhattan(cell, player) >= min_distance]
    source = far if len(far) >= wanted else pool
    enemies = rng.sample(source, wanted)
    return SpawnPositions(player, enemies)


__all__ = ["SpawnPositions", "parse_rows", "upscale", "walkable_cells", "manhattan", "choose_positions"]
