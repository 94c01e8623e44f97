"""Setter-driven front end tying scene configuration to the simulators."""

from __future__ import annotations

from typing import Optional

from .config import SimulationConfig, default_config
from .geometry.vector import Vector3
from .logging_utils import get_logger
from .models import Listener, ReverbResult, Room, Scene, Speaker, SpeakerType
from .sim.image_source import PlaneSpec, simulate_image_source
from .sim.raytrace import simulate_ray_traced

logger = get_logger(__name__)


class ReverbEngine:
    """Collects a scene piece by piece and runs either simulator on it.

    The setters only record values; the immutable ``Scene`` is built and
    validated when a simulation starts, so a run never sees a half-updated
    configuration. The two estimates are returned separately and never
    blended.

    Examples:
        ```python
        engine = ReverbEngine()
        engine.set_room_dimensions(3, 2.4, 5.5)
        engine.set_attenuation(0.9)
        engine.set_speaker_position(1, 2, 1)
        engine.set_speaker_type("directing")
        engine.set_listener_position(1.5, 1.8, 3.0, head_width=0.3)
        engine.set_listener_orientation(0, 0, -1)
        traced = engine.trace(44100, 0.025)
        specular = engine.reflect(44100, 0.025)
        ```
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        self._config = config or default_config()
        self._room_size: Optional[Vector3] = None
        self._attenuation: Optional[float] = None
        self._speaker: Optional[Vector3] = None
        self._speaker_type = SpeakerType.DIRECTING
        self._listener: Optional[Vector3] = None
        self._head_width: Optional[float] = None
        self._orientation: Optional[Vector3] = None

    @property
    def config(self) -> SimulationConfig:
        return self._config

    def set_config(self, config: SimulationConfig) -> None:
        config.validate()
        self._config = config

    def set_room_dimensions(self, x: float, y: float, z: float) -> None:
        self._room_size = Vector3(float(x), float(y), float(z))

    def set_attenuation(self, attenuation: float) -> None:
        self._attenuation = float(attenuation)

    def set_speaker_position(self, x: float, y: float, z: float) -> None:
        self._speaker = Vector3(float(x), float(y), float(z))

    def set_speaker_type(self, speaker_type: SpeakerType | str) -> None:
        self._speaker_type = SpeakerType.parse(speaker_type)

    def set_listener_position(
        self, x: float, y: float, z: float, head_width: float
    ) -> None:
        self._listener = Vector3(float(x), float(y), float(z))
        self._head_width = float(head_width)

    def set_listener_orientation(self, x: float, y: float, z: float) -> None:
        self._orientation = Vector3(float(x), float(y), float(z))

    def scene(self) -> Scene:
        """Build and validate the scene from the current settings."""
        missing = [
            name
            for name, value in (
                ("room dimensions", self._room_size),
                ("attenuation", self._attenuation),
                ("speaker position", self._speaker),
                ("listener position", self._listener),
                ("listener orientation", self._orientation),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"engine is missing settings: {', '.join(missing)}")
        return Scene(
            room=Room(size=self._room_size, attenuation=self._attenuation),
            speaker=Speaker(position=self._speaker, kind=self._speaker_type),
            listener=Listener(
                position=self._listener,
                head_width=self._head_width,
                orientation=self._orientation,
            ),
        )

    def trace(
        self, sample_rate: float, duration: float, *, num_rays: Optional[int] = None
    ) -> ReverbResult:
        """Stochastic ray-traced response, normalized to a peak of 1."""
        scene = self.scene()
        logger.debug("engine trace at %s Hz for %s s", sample_rate, duration)
        return simulate_ray_traced(
            scene,
            sample_rate=sample_rate,
            duration=duration,
            config=self._config,
            num_rays=num_rays,
        )

    def reflect(
        self, sample_rate: float, duration: float, *, planes: PlaneSpec = "room"
    ) -> ReverbResult:
        """Image-source response (direct sound plus specular reflections), raw."""
        scene = self.scene()
        logger.debug("engine reflect at %s Hz for %s s", sample_rate, duration)
        return simulate_image_source(
            scene,
            sample_rate=sample_rate,
            duration=duration,
            config=self._config,
            planes=planes,
        )
