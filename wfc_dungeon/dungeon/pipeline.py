"""Pipeline orchestration for map generation.

``MapGenerator`` owns one grid for one run and executes the phases in order:

    seed_rooms -> collapse loop -> fill_unresolved -> connect_regions
    -> remove_dead_ends [-> reconnect check] -> serialize

Instances are single-use. Randomness comes only from the injected ``rng``
(a ``random.Random`` seeded from ``config.seed`` by default).
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context

from ..logging_utils import get_logger
from .collapse import fill_unresolved, open_contradictions, run_collapse_loop
from .config import GeneratorConfig
from .connectivity import connect_regions, label_regions
from .grid import Grid
from .metrics import init_metrics
from .patterns import DEFAULT_CATALOGUE, PatternCatalogue
from .pruning import remove_dead_ends
from .rooms import Room, seed_rooms

_log = get_logger("dungeon")

# env var / app config key -> GeneratorConfig attribute
_FLAG_KEYS = {
    'DUNGEON_ENABLE_GENERATION_METRICS': 'enable_metrics',
    'DUNGEON_VERIFY_CONNECTIVITY': 'verify_connectivity_after_pruning',
}

# Bound on prune/reconnect alternation when connectivity verification is on
_MAX_RECONNECT_PASSES = 4


def _apply_flag_overrides(config: GeneratorConfig) -> None:
    for env_key, attr in _FLAG_KEYS.items():
        if env_key in os.environ:
            val = os.environ.get(env_key, '').lower()
            setattr(config, attr, val not in {'0', 'false', 'no', ''})
    # Flask app config (highest precedence) when generating inside a request
    if has_app_context():
        cfg = current_app.config
        for key, attr in _FLAG_KEYS.items():
            if key in cfg:
                setattr(config, attr, bool(cfg.get(key)))


def default_config() -> GeneratorConfig:
    """GeneratorConfig defaults with env / app config flags applied."""
    config = GeneratorConfig()
    _apply_flag_overrides(config)
    return config


class MapGenerator:
    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
        rng=None,
        catalogue: PatternCatalogue = DEFAULT_CATALOGUE,
    ):
        if config is None:
            # Defaults pick up env / app config flags; an explicit config is used as given
            config = default_config()
        else:
            config = replace(config)
        if width is not None:
            config.width = width
        if height is not None:
            config.height = height
        if seed is not None:
            config.seed = seed
        config.validate()
        self.config = config
        if rng is None:
            if self.config.seed is None:
                self.config.seed = random.randint(0, 2**31 - 1)
            rng = random.Random(self.config.seed)
        self._rng = rng
        self.seed = self.config.seed
        self.catalogue = catalogue
        self.enable_metrics = self.config.enable_metrics
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self.grid: Optional[Grid] = None
        self.rooms: List[Room] = []
        self._used = False

    def generate(self) -> str:
        """Run every phase on a fresh grid and return the map text."""
        grid = Grid(self.config.height, self.config.width, self.catalogue)
        self._claim(grid)
        self.rooms = self._phase('seed_rooms', seed_rooms, grid, self.config, self._rng)
        if self.enable_metrics:
            self.metrics['rooms_seeded'] = len(self.rooms)
        return self._solve()

    def solve(self, grid: Grid) -> str:
        """Run the solver and repair phases on a caller-prepared grid (rooms already carved)."""
        self._claim(grid)
        return self._solve()

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def _claim(self, grid: Grid) -> None:
        if self._used:
            raise RuntimeError("MapGenerator instances are single-use; create a new one per map")
        self._used = True
        self.grid = grid
        self._start = time.perf_counter()

    def _phase(self, label, fn, *a, **k):
        if not self.enable_metrics:
            return fn(*a, **k)
        ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
        self.metrics['phase_ms'][label] = int((pe - ps) * 1000)
        return r

    def _solve(self) -> str:
        grid = self.grid
        collapsed, steps = self._phase('collapse', run_collapse_loop, grid, self._rng)
        open_cells = open_contradictions(grid)
        filled, contradictions = self._phase('fill_unresolved', fill_unresolved, grid)
        if open_cells:
            # an undecided cell ran out of options and was walled off
            _log.warn(event="contradiction_coerced", seed=self.seed, cells=len(open_cells), total=contradictions)
        elif contradictions:
            # emptied sets on already committed tiles; the tiles stand
            _log.debug(event="contradiction_coerced", seed=self.seed, cells=contradictions)
        report = self._phase(
            'connect_regions', connect_regions, grid, self._rng,
            sample_size=self.config.connector_sample_size,
            max_hall_neighbors=self.config.max_hall_neighbors,
        )
        if report.regions_final > 1:
            _log.warn(event="connectivity_stalled", seed=self.seed, regions=report.regions_final)
        removed, sweeps = self._phase('remove_dead_ends', remove_dead_ends, grid)
        reconnects = extra_halls = 0
        if self.config.verify_connectivity_after_pruning:
            reconnects, extra_removed, extra_halls = self._phase('verify_connectivity', self._reconnect_after_pruning)
            removed += extra_removed
        if self.enable_metrics:
            m = self.metrics
            m['cells_collapsed'] = collapsed
            m['propagation_steps'] = steps
            m['empties_filled'] = filled
            m['contradictions'] = contradictions
            m['regions_initial'] = report.regions_initial
            m['primary_connections'] = report.primary
            m['secondary_connections'] = report.secondary
            m['halls_carved'] = report.halls_carved + extra_halls
            m['dead_ends_removed'] = removed
            m['prune_sweeps'] = sweeps
            m['reconnect_passes'] = reconnects
            m['runtime_ms'] = int((time.perf_counter() - self._start) * 1000)
        _log.info(
            event="map_generated",
            seed=self.seed,
            width=grid.width,
            height=grid.height,
            rooms=len(self.rooms),
            regions_initial=report.regions_initial,
            runtime_ms=self.metrics.get('runtime_ms'),
        )
        return grid.to_text()

    def _reconnect_after_pruning(self):
        """Re-run the repairer (and pruning) while pruning left the map split.

        Returns (passes, cells_removed, halls_carved).
        """
        passes = removed = halls = 0
        while passes < _MAX_RECONNECT_PASSES:
            _, count = label_regions(self.grid)
            if count <= 1:
                break
            passes += 1
            report = connect_regions(
                self.grid, self._rng,
                sample_size=self.config.connector_sample_size,
                max_hall_neighbors=self.config.max_hall_neighbors,
            )
            halls += report.halls_carved
            removed += remove_dead_ends(self.grid)[0]
        return passes, removed, halls


def generate(width: int, height: int, *, seed: int | None = None, rng=None, config: GeneratorConfig | None = None) -> str:
    """Generate one map and return it as newline separated rows of ``#``, ``.`` and ``+``."""
    return MapGenerator(config, width=width, height=height, seed=seed, rng=rng).generate()


__all__ = ["MapGenerator", "default_config", "generate"]
