"""Stochastic ray tracing in shoebox rooms."""

from .api import simulate_ray_traced
from .deposit import deposit_binaural, orientation_factor
from .emission import choose_directions
from .infinite_wall import simulate_infinite_wall, wall_arrival_window
from .intersect import classify_walls, intersect_room
from .tracer import TraceContext, trace_batch, trace_worker
from .workers import run_workers, spawn_seeds, split_rays

__all__ = [
    "TraceContext",
    "choose_directions",
    "classify_walls",
    "deposit_binaural",
    "intersect_room",
    "orientation_factor",
    "run_workers",
    "simulate_infinite_wall",
    "simulate_ray_traced",
    "spawn_seeds",
    "split_rays",
    "trace_batch",
    "trace_worker",
    "wall_arrival_window",
]
