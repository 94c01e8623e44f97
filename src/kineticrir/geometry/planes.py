"""Reflecting planes used by the image-source solver."""

from __future__ import annotations

from dataclasses import dataclass

from .vector import Vector3

_ORIGIN = Vector3(0.0, 0.0, 0.0)
_X = Vector3(1.0, 0.0, 0.0)
_Y = Vector3(0.0, 1.0, 0.0)
_Z = Vector3(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Plane:
    """Plane parameterized as ``point + x * basis_x + y * basis_y``."""

    point: Vector3
    basis_x: Vector3
    basis_y: Vector3
    name: str = ""

    def __post_init__(self) -> None:
        if self.basis_x.cross(self.basis_y).length() == 0.0:
            raise ValueError("plane basis vectors must not be parallel")

    def at(self, x: float, y: float) -> Vector3:
        """Return the point with in-plane coordinates (x, y)."""
        return self.point.add(self.basis_x.mul(x)).add(self.basis_y.mul(y))

    def normal(self) -> Vector3:
        return self.basis_x.cross(self.basis_y).normalize()


def room_planes(size: Vector3) -> tuple[Plane, ...]:
    """Return the six walls of the box ``[0, size.x] x [0, size.y] x [0, size.z]``."""
    return (
        Plane(_ORIGIN, _Y, _Z, name="x=0"),
        Plane(_ORIGIN, _X, _Z, name="y=0"),
        Plane(_ORIGIN, _Y, _X, name="z=0"),
        Plane(size, _Y, _Z, name="x=max"),
        Plane(size, _X, _Z, name="y=max"),
        Plane(size, _Y, _X, name="z=max"),
    )


def infinite_wall_plane() -> Plane:
    """Return the single infinite wall ``x = 0``."""
    return Plane(_ORIGIN, _Y, _Z, name="infinite x=0")
