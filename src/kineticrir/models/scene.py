"""Scene container for simulation inputs."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..geometry.vector import Vector3
from ..util.acoustics import mean_free_path
from .room import Listener, Room, Speaker


@dataclass(frozen=True)
class Scene:
    """Room, speaker, and listener for one simulation run.

    Examples:
        ```python
        scene = Scene(room=room, speaker=speaker, listener=listener)
        ```
    """

    room: Room
    speaker: Speaker
    listener: Listener

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.room, Room):
            raise TypeError("room must be a Room instance")
        if not isinstance(self.speaker, Speaker):
            raise TypeError("speaker must be a Speaker instance")
        if not isinstance(self.listener, Listener):
            raise TypeError("listener must be a Listener instance")
        if self.speaker.position == self.listener.position:
            raise ValueError("speaker and listener must not coincide")
        if not self.room.contains(self.listener.position):
            raise ValueError("listener must be inside the room")

    def replace(self, **kwargs) -> "Scene":
        """Return a new Scene with updated fields."""
        return replace(self, **kwargs)

    def speaker_axis(self) -> Vector3:
        """Speaker radiation axis; aimed at the listener unless set explicitly."""
        return self.speaker.axis_towards(self.listener.position)

    def describe(self) -> str:
        left, right = self.listener.ear_offsets()
        return (
            f"room {self.room.size} attenuation {self.room.attenuation} "
            f"(mean free path {mean_free_path(self.room.size):.2f} m); "
            f"speaker at {self.speaker.position} ({self.speaker.kind.value}) "
            f"pointing towards {self.speaker_axis()}; "
            f"listener at {self.listener.position}, left ear relative {left}, "
            f"right ear relative {right}"
        )
