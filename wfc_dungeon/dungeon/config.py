from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInput


@dataclass
class GeneratorConfig:
    width: int = 40
    height: int = 25
    seed: Optional[int] = None
    room_attempts: int = 10
    min_room_size: int = 3
    max_room_size: int = 6
    room_margin: int = 5  # keeps anchors away from the outer wall on larger maps
    connector_sample_size: int = 9
    max_hall_neighbors: int = 3
    verify_connectivity_after_pruning: bool = False
    enable_metrics: bool = True

    def validate(self) -> None:
        for name in ("width", "height", "min_room_size", "max_room_size", "connector_sample_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidInput(f"{name} must be a positive integer, got {value!r}")
        for name in ("room_attempts", "room_margin", "max_hall_neighbors"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidInput(f"{name} must be a non-negative integer, got {value!r}")
        if self.min_room_size > self.max_room_size:
            raise InvalidInput("min_room_size must not exceed max_room_size")


__all__ = ["GeneratorConfig"]
