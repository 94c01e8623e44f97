"""Core data models for rooms, speakers, listeners, scenes, and results.

Example:
    >>> from kineticrir.models import Listener, Room, Scene, Speaker
    >>> room = Room.shoebox([3.0, 2.4, 5.5], attenuation=0.9)
    >>> scene = Scene(
    ...     room=room,
    ...     speaker=Speaker([1.0, 2.0, 1.0]),
    ...     listener=Listener([1.5, 1.8, 3.0], head_width=0.3, orientation=[0, 0, -1]),
    ... )
"""

from .results import ReverbResult, TraceStats
from .room import Listener, Room, Speaker, SpeakerType
from .scene import Scene

__all__ = [
    "Listener",
    "ReverbResult",
    "Room",
    "Scene",
    "Speaker",
    "SpeakerType",
    "TraceStats",
]
