"""Room, speaker, and listener models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Union

from torch import Tensor

from ..geometry.vector import Vector3
from ..util.tensor import as_vector

UP = Vector3(0.0, 1.0, 0.0)

VectorLike = Union[Vector3, Tensor, Iterable[float]]


class SpeakerType(str, Enum):
    """How a speaker radiates energy into the room.

    ``DIRECTING`` radiates into the front hemisphere with a cosine roll-off,
    ``DIFFUSE`` radiates evenly into the front hemisphere, ``OMNI`` radiates
    into the full sphere.
    """

    DIRECTING = "directing"
    DIFFUSE = "diffuse"
    OMNI = "omni"

    @classmethod
    def parse(cls, value: "SpeakerType | str") -> "SpeakerType":
        if isinstance(value, SpeakerType):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise ValueError(f"unsupported speaker type: {value}") from exc


@dataclass(frozen=True)
class Room:
    """Rectangular room occupying ``[0, x] x [0, y] x [0, z]``.

    ``attenuation`` is the fraction of energy a wall keeps per reflection.

    Examples:
        ```python
        room = Room.shoebox([3.0, 2.4, 5.5], attenuation=0.9)
        ```
    """

    size: Vector3
    attenuation: float

    def __post_init__(self) -> None:
        size = as_vector(self.size, name="room size")
        if min(size.as_tuple()) <= 0:
            raise ValueError("room size must be strictly positive")
        object.__setattr__(self, "size", size)
        if not 0 < self.attenuation < 1:
            raise ValueError("attenuation must be in (0, 1)")

    def replace(self, **kwargs) -> "Room":
        """Return a new Room with updated fields."""
        return replace(self, **kwargs)

    @staticmethod
    def shoebox(size: VectorLike, *, attenuation: float) -> "Room":
        """Create a rectangular (shoebox) room."""
        return Room(size=as_vector(size, name="room size"), attenuation=attenuation)

    def contains(self, point: Vector3, *, strict: bool = False) -> bool:
        """Return True when ``point`` lies inside the room."""
        for value, extent in zip(point.as_tuple(), self.size.as_tuple()):
            if strict and not 0.0 < value < extent:
                return False
            if not strict and not 0.0 <= value <= extent:
                return False
        return True

    def diagonal(self) -> float:
        return self.size.length()


@dataclass(frozen=True)
class Speaker:
    """Sound source with a radiation pattern.

    ``axis`` is the radiation direction; when omitted the speaker is aimed at
    the listener of the scene it is placed in.
    """

    position: Vector3
    kind: SpeakerType = SpeakerType.DIRECTING
    axis: Optional[Vector3] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vector(self.position, name="speaker position"))
        object.__setattr__(self, "kind", SpeakerType.parse(self.kind))
        if self.axis is not None:
            axis = as_vector(self.axis, name="speaker axis")
            object.__setattr__(self, "axis", axis.normalize())

    def replace(self, **kwargs) -> "Speaker":
        """Return a new Speaker with updated fields."""
        return replace(self, **kwargs)

    def axis_towards(self, target: Vector3) -> Vector3:
        """Radiation axis, defaulting to the direction of ``target``."""
        if self.axis is not None:
            return self.axis
        return target.sub(self.position).normalize()


@dataclass(frozen=True)
class Listener:
    """Two-eared listener.

    The ears sit half a head width to either side of ``position`` along
    ``cross(up, orientation)``; each ear's outward normal points away from the
    head centre.
    """

    position: Vector3
    head_width: float
    orientation: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "position", as_vector(self.position, name="listener position")
        )
        if self.head_width <= 0:
            raise ValueError("head_width must be positive")
        orientation = as_vector(self.orientation, name="listener orientation")
        if orientation.length() == 0.0:
            raise ValueError("listener orientation must be non-zero")
        orientation = orientation.normalize()
        if UP.cross(orientation).length() < 1e-9:
            raise ValueError("listener orientation must not be parallel to the up axis")
        object.__setattr__(self, "orientation", orientation)

    def replace(self, **kwargs) -> "Listener":
        """Return a new Listener with updated fields."""
        return replace(self, **kwargs)

    def ear_offsets(self) -> tuple[Vector3, Vector3]:
        """Return (head-to-left-ear, head-to-right-ear) vectors."""
        left = UP.cross(self.orientation).normalize().mul(self.head_width * 0.5)
        return left, left.mul(-1.0)

    def ears(self) -> tuple[Vector3, Vector3]:
        """Return the (left, right) ear positions."""
        left, right = self.ear_offsets()
        return self.position.add(left), self.position.add(right)
