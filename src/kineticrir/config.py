from __future__ import annotations

"""Simulation configuration for kineticrir."""

from dataclasses import dataclass, replace
from typing import Optional

import torch

_SAMPLERS = ("marsaglia", "rejection")


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration values for ray-traced and image-source simulation.

    Example:
        >>> cfg = SimulationConfig(num_rays=200_000, num_workers=4, seed=7)
        >>> cfg.validate()
    """

    speed_of_sound: float = 330.0
    num_rays: int = 1_000_000
    precision: float = 1e-6
    wall_tolerance: float = 1e-6
    ray_batch_size: int = 65536
    num_workers: int = 1
    seed: Optional[int] = None
    sampler: str = "marsaglia"
    device: Optional[torch.device | str] = None
    dtype: Optional[torch.dtype] = None
    descent_step: float = 1e-3
    descent_rate: float = 0.5
    descent_tolerance: float = 1e-3
    max_descent_iterations: int = 10_000
    reflection_gain: float = 0.08
    reflection_decay: float = 0.97
    strict_convergence: bool = False
    deadline: Optional[float] = None
    infinite_wall_rays: int = 10_000_000

    def validate(self) -> None:
        """Validate configuration values."""
        if self.speed_of_sound <= 0:
            raise ValueError("speed_of_sound must be positive")
        if self.num_rays <= 0:
            raise ValueError("num_rays must be positive")
        if self.infinite_wall_rays <= 0:
            raise ValueError("infinite_wall_rays must be positive")
        if not 0 < self.precision < 1:
            raise ValueError("precision must be in (0, 1)")
        if self.wall_tolerance <= 0:
            raise ValueError("wall_tolerance must be positive")
        if self.ray_batch_size <= 0:
            raise ValueError("ray_batch_size must be positive")
        if self.num_workers <= 0:
            raise ValueError("num_workers must be positive")
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be non-negative")
        if self.sampler not in _SAMPLERS:
            raise ValueError(f"sampler must be one of {_SAMPLERS}")
        if self.descent_step <= 0 or self.descent_rate <= 0:
            raise ValueError("descent_step and descent_rate must be positive")
        if self.descent_tolerance <= 0:
            raise ValueError("descent_tolerance must be positive")
        if self.max_descent_iterations <= 0:
            raise ValueError("max_descent_iterations must be positive")
        if self.reflection_gain < 0:
            raise ValueError("reflection_gain must be non-negative")
        if not 0 < self.reflection_decay < 1:
            raise ValueError("reflection_decay must be in (0, 1)")
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError("deadline must be positive")

    def replace(self, **kwargs) -> "SimulationConfig":
        """Return a new config with updated fields."""
        new_cfg = replace(self, **kwargs)
        new_cfg.validate()
        return new_cfg


def default_config() -> SimulationConfig:
    """Return the default simulation configuration.

    Example:
        >>> cfg = default_config()
    """
    cfg = SimulationConfig()
    cfg.validate()
    return cfg
