"""Pattern catalogue for the constraint solver.

A pattern is a small integer id standing for one tile kind. Each pattern
lists the patterns it accepts as an orthogonal neighbour. The relation is
directed (WALL accepts HALL, but FLOOR does not accept WALL), so the
propagator always reads it from the point of view of the cell that is
already constrained.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Set

from .tiles import FLOOR, HALL, WALL

WALL_ID = 0
FLOOR_ID = 1
HALL_ID = 2


@dataclass(frozen=True)
class PatternCatalogue:
    tiles: Dict[int, str]
    valid_neighbors: Dict[int, FrozenSet[int]]

    def __post_init__(self):
        missing = set(self.tiles) - set(self.valid_neighbors)
        if missing:
            raise ValueError(f"patterns without neighbour rules: {sorted(missing)}")
        if len(set(self.tiles.values())) != len(self.tiles):
            raise ValueError("pattern ids must map to distinct tiles")

    @property
    def pattern_ids(self) -> FrozenSet[int]:
        return frozenset(self.tiles)

    def tile_for(self, pattern_id: int) -> str:
        return self.tiles[pattern_id]

    def id_for(self, tile: str) -> int:
        for pid, t in self.tiles.items():
            if t == tile:
                return pid
        raise KeyError(tile)

    def allows(self, pattern_id: int, neighbor_id: int) -> bool:
        return neighbor_id in self.valid_neighbors.get(pattern_id, frozenset())

    def compatible_with(self, source: Iterable[int], candidates: Iterable[int]) -> Set[int]:
        """Return the candidates every pattern in ``source`` accepts as a neighbour.

        An empty source (a contradiction) constrains nothing.
        """
        source = tuple(source)
        return {p for p in candidates if all(self.allows(q, p) for q in source)}


DEFAULT_CATALOGUE = PatternCatalogue(
    tiles={WALL_ID: WALL, FLOOR_ID: FLOOR, HALL_ID: HALL},
    valid_neighbors={
        WALL_ID: frozenset({WALL_ID, HALL_ID}),
        FLOOR_ID: frozenset({FLOOR_ID}),
        HALL_ID: frozenset({WALL_ID, FLOOR_ID, HALL_ID}),
    },
)

__all__ = ["PatternCatalogue", "DEFAULT_CATALOGUE", "WALL_ID", "FLOOR_ID", "HALL_ID"]
