"""Simulation engines for impulse response estimation.

Includes the stochastic ray tracer (``kineticrir.sim.raytrace``), the
image-source solver (``kineticrir.sim.image_source``), speaker directivity
helpers, and simulator strategy classes wrapping both.
"""

from .directivity import emission_gain, speaker_deposit_scale
from .image_source import ReflectionNotConvergedError, find_reflection, simulate_image_source
from .raytrace import simulate_infinite_wall, simulate_ray_traced
from .simulators import ImageSourceSimulator, RayTracingSimulator, ReverbSimulator

__all__ = [
    "ImageSourceSimulator",
    "RayTracingSimulator",
    "ReflectionNotConvergedError",
    "ReverbSimulator",
    "emission_gain",
    "find_reflection",
    "simulate_image_source",
    "simulate_infinite_wall",
    "simulate_ray_traced",
    "speaker_deposit_scale",
]
