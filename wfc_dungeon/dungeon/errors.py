"""Exceptions raised by map generation and the map utilities."""

from __future__ import annotations


class MapGenerationError(Exception):
    """Base class for every error raised by the dungeon package."""


class InvalidInput(MapGenerationError, ValueError):
    """Rejected argument (size, scale factor, map text, counts). Nothing was mutated."""


class NoWalkableCells(MapGenerationError):
    """The map has no floor or hall tile to place anything on."""


class ContradictionState(MapGenerationError):
    def __init__(self, row: int, col: int):
        super().__init__(f"cell ({row}, {col}) has no remaining possibilities")
        self.row = row
        self.col = col


__all__ = ["MapGenerationError", "InvalidInput", "NoWalkableCells", "ContradictionState"]
