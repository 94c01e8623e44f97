"""Immutable 3-D vector value type."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Optional

import torch
from torch import Tensor

_RNG = random.SystemRandom()


@dataclass(frozen=True)
class Vector3:
    """Three-component vector; every operation returns a new value.

    Examples:
        ```python
        up = Vector3(0.0, 1.0, 0.0)
        left = up.cross(Vector3(0.0, 0.0, -1.0)).normalize()
        ```
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_iterable(cls, values: Iterable[float] | Tensor) -> "Vector3":
        """Build a vector from any length-3 iterable or 1-D tensor."""
        if torch.is_tensor(values):
            values = values.detach().cpu().reshape(-1).tolist()
        coords = [float(v) for v in values]
        if len(coords) != 3:
            raise ValueError("Vector3 requires exactly three components")
        return cls(*coords)

    @classmethod
    def random(
        cls, rng: Optional[random.Random] = None, *, method: str = "marsaglia"
    ) -> "Vector3":
        """Return a direction drawn uniformly from the unit sphere."""
        rng = rng or _RNG
        if method == "marsaglia":
            return _random_marsaglia(rng)
        if method == "rejection":
            return _random_rejection(rng)
        raise ValueError(f"unknown sampling method: {method}")

    def add(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def mul(self, scale: float) -> "Vector3":
        return Vector3(self.x * scale, self.y * scale, self.z * scale)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> "Vector3":
        """Return the unit vector with the same direction.

        Raises:
            ValueError: if the vector has zero length.
        """
        length = self.length()
        if length == 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self.mul(1.0 / length)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_tensor(
        self,
        *,
        device: Optional[torch.device | str] = None,
        dtype: Optional[torch.dtype] = None,
    ) -> Tensor:
        return torch.tensor(self.as_tuple(), device=device, dtype=dtype)

    __add__ = add
    __sub__ = sub

    def __mul__(self, scale: float) -> "Vector3":
        return self.mul(scale)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return self.mul(-1.0)

    def __str__(self) -> str:
        return f"({self.x:f}, {self.y:f}, {self.z:f})"


def _random_rejection(rng: random.Random) -> Vector3:
    # uniform point in the unit ball, projected onto the sphere
    while True:
        candidate = Vector3(
            rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0)
        )
        length = candidate.length()
        if 0.0 < length < 1.0:
            return candidate.mul(1.0 / length)


def _random_marsaglia(rng: random.Random) -> Vector3:
    while True:
        x1 = rng.uniform(-1.0, 1.0)
        x2 = rng.uniform(-1.0, 1.0)
        r2 = x1 * x1 + x2 * x2
        if r2 > 1.0:
            continue
        s = math.sqrt(1.0 - r2)
        return Vector3(2.0 * x1 * s, 2.0 * x2 * s, 1.0 - 2.0 * r2)
