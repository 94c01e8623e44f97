"""kineticrir public API."""

from .config import SimulationConfig, default_config
from .engine import ReverbEngine
from .geometry import Plane, Vector3, infinite_wall_plane, room_planes, sample_unit_vectors
from .logging_utils import LoggingConfig, get_logger, setup_logging
from .models import (
    Listener,
    ReverbResult,
    Room,
    Scene,
    Speaker,
    SpeakerType,
    TraceStats,
)
from .sim import (
    ImageSourceSimulator,
    RayTracingSimulator,
    ReflectionNotConvergedError,
    ReverbSimulator,
    find_reflection,
    simulate_image_source,
    simulate_infinite_wall,
    simulate_ray_traced,
)
from .util import estimate_t60, max_bounce_count, normalize_buffer, sample_count

__all__ = [
    "ImageSourceSimulator",
    "Listener",
    "LoggingConfig",
    "Plane",
    "RayTracingSimulator",
    "ReflectionNotConvergedError",
    "ReverbEngine",
    "ReverbResult",
    "ReverbSimulator",
    "Room",
    "Scene",
    "SimulationConfig",
    "Speaker",
    "SpeakerType",
    "TraceStats",
    "Vector3",
    "default_config",
    "estimate_t60",
    "find_reflection",
    "get_logger",
    "infinite_wall_plane",
    "max_bounce_count",
    "normalize_buffer",
    "room_planes",
    "sample_count",
    "sample_unit_vectors",
    "setup_logging",
    "simulate_image_source",
    "simulate_infinite_wall",
    "simulate_ray_traced",
]
