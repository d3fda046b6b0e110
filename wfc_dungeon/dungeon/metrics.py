from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_seeded': 0,
        'cells_collapsed': 0,
        'propagation_steps': 0,
        'contradictions': 0,
        'empties_filled': 0,
        'regions_initial': 0,
        'halls_carved': 0,
        'primary_connections': 0,
        'secondary_connections': 0,
        'dead_ends_removed': 0,
        'prune_sweeps': 0,
        'reconnect_passes': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
