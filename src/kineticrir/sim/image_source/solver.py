"""Specular reflection point search by numerical gradient descent."""

from __future__ import annotations

from ...geometry.planes import Plane
from ...geometry.vector import Vector3


class ReflectionNotConvergedError(RuntimeError):
    """Raised when the reflection point search exhausts its iteration budget."""

    def __init__(self, plane: Plane, iterations: int, gradient: tuple[float, float]):
        self.plane = plane
        self.iterations = iterations
        self.gradient = gradient
        super().__init__(
            f"reflection search on plane {plane.name or plane} did not converge "
            f"after {iterations} iterations (gradient {gradient[0]:.3g}, {gradient[1]:.3g})"
        )


def path_length(
    speaker: Vector3, listener: Vector3, plane: Plane, x: float, y: float
) -> float:
    """Length of the path speaker -> plane(x, y) -> listener."""
    point = plane.at(x, y)
    return speaker.sub(point).length() + listener.sub(point).length()


def find_reflection(
    speaker: Vector3,
    listener: Vector3,
    plane: Plane,
    *,
    step: float = 1e-3,
    rate: float = 0.5,
    tolerance: float = 1e-3,
    max_iterations: int = 10_000,
) -> Vector3:
    """Point on ``plane`` minimizing the speaker -> plane -> listener distance.

    The minimizer is the specular reflection point: at it the angle of
    incidence equals the angle of reflection. Descent starts at the plane's
    anchor point and uses forward differences of size ``step``; it stops once
    both partial derivatives are below ``tolerance``.

    Raises:
        ReflectionNotConvergedError: if ``max_iterations`` updates are not
            enough, e.g. when the speaker or listener lies on the plane.
    """
    x = 0.0
    y = 0.0
    dx = dy = float("inf")
    for _ in range(max_iterations):
        d = path_length(speaker, listener, plane, x, y)
        dx = (path_length(speaker, listener, plane, x + step, y) - d) / step
        dy = (path_length(speaker, listener, plane, x, y + step) - d) / step
        x -= dx * rate
        y -= dy * rate
        if abs(dx) < tolerance and abs(dy) < tolerance:
            return plane.at(x, y)
    raise ReflectionNotConvergedError(plane, max_iterations, (dx, dy))
