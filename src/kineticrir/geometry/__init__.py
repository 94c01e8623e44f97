"""Vector algebra, direction sampling, and reflecting planes."""

from .planes import Plane, infinite_wall_plane, room_planes
from .sampling import sample_unit_vectors
from .vector import Vector3

__all__ = [
    "Plane",
    "Vector3",
    "infinite_wall_plane",
    "room_planes",
    "sample_unit_vectors",
]
