"""Result containers for simulation outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from torch import Tensor

from ..util.buffer import LEFT, RIGHT, first_nonzero_index, interleave
from .scene import Scene

if TYPE_CHECKING:
    from ..config import SimulationConfig


@dataclass(frozen=True)
class TraceStats:
    """Bookkeeping counters gathered during a run."""

    rays: int = 0
    lost_rays: int = 0
    bounces: int = 0
    deposits: int = 0
    unconverged_planes: tuple[str, ...] = ()

    def merge(self, other: "TraceStats") -> "TraceStats":
        return TraceStats(
            rays=self.rays + other.rays,
            lost_rays=self.lost_rays + other.lost_rays,
            bounces=self.bounces + other.bounces,
            deposits=self.deposits + other.deposits,
            unconverged_planes=self.unconverged_planes + other.unconverged_planes,
        )


@dataclass(frozen=True)
class ReverbResult:
    """Container for a simulated impulse response with metadata.

    ``buffer`` has shape (nsample, 2) with (left, right) columns, or
    (nsample,) for mono runs.

    Examples:
        ```python
        result = RayTracingSimulator(sample_rate=44100, duration=0.025).simulate(scene)
        start = result.first_nonzero_index()
        ```
    """

    buffer: Tensor
    sample_rate: float
    scene: Optional[Scene]
    config: "SimulationConfig"
    method: str
    seed: Optional[int] = None
    stats: TraceStats = field(default_factory=TraceStats)

    @property
    def left(self) -> Tensor:
        # mono buffers feed both ears
        if self.buffer.ndim == 1:
            return self.buffer
        return self.buffer[:, LEFT]

    @property
    def right(self) -> Tensor:
        if self.buffer.ndim == 1:
            return self.buffer
        return self.buffer[:, RIGHT]

    @property
    def nsample(self) -> int:
        return int(self.buffer.shape[0])

    def interleaved(self) -> Tensor:
        return interleave(self.buffer)

    def first_nonzero_index(self) -> Optional[int]:
        return first_nonzero_index(self.buffer)
