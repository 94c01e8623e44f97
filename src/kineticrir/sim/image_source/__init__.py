"""Deterministic specular reflections via reflected-path minimization."""

from .api import PlaneSpec, resolve_planes, simulate_image_source
from .deposit import add_direct, add_reflection, ear_orientation_factor
from .solver import ReflectionNotConvergedError, find_reflection, path_length

__all__ = [
    "PlaneSpec",
    "ReflectionNotConvergedError",
    "add_direct",
    "add_reflection",
    "ear_orientation_factor",
    "find_reflection",
    "path_length",
    "resolve_planes",
    "simulate_image_source",
]
