"""Simulation strategy interfaces and implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..config import SimulationConfig
from ..models import ReverbResult, Scene
from .image_source import PlaneSpec, simulate_image_source
from .raytrace import simulate_ray_traced


class ReverbSimulator(Protocol):
    """Strategy interface for impulse response backends."""

    def simulate(
        self, scene: Scene, config: SimulationConfig | None = None
    ) -> ReverbResult:
        """Run a simulation and return the result."""


@dataclass(frozen=True)
class _TimedSimulator:
    sample_rate: float
    duration: float

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if self.duration <= 0:
            raise ValueError("duration must be positive")


@dataclass(frozen=True)
class RayTracingSimulator(_TimedSimulator):
    """Stochastic ray tracer; returns a peak-normalized buffer.

    Examples:
        ```python
        result = RayTracingSimulator(sample_rate=44100, duration=0.025).simulate(scene)
        ```
    """

    num_rays: int | None = None

    def simulate(
        self, scene: Scene, config: SimulationConfig | None = None
    ) -> ReverbResult:
        return simulate_ray_traced(
            scene,
            sample_rate=self.sample_rate,
            duration=self.duration,
            config=config,
            num_rays=self.num_rays,
        )


@dataclass(frozen=True)
class ImageSourceSimulator(_TimedSimulator):
    """Direct sound plus first-order specular reflections; raw buffer.

    Examples:
        ```python
        result = ImageSourceSimulator(sample_rate=44100, duration=0.025).simulate(scene)
        ```
    """

    planes: PlaneSpec = "room"

    def simulate(
        self, scene: Scene, config: SimulationConfig | None = None
    ) -> ReverbResult:
        return simulate_image_source(
            scene,
            sample_rate=self.sample_rate,
            duration=self.duration,
            config=config,
            planes=self.planes,
        )
