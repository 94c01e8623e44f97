from __future__ import annotations

"""Image-source (specular reflection) impulse response simulation."""

from typing import Optional, Sequence, Union

from ...config import SimulationConfig, default_config
from ...geometry.planes import Plane, infinite_wall_plane, room_planes
from ...logging_utils import get_logger
from ...models import ReverbResult, Scene, TraceStats
from ...util.acoustics import sample_count
from ...util.buffer import LEFT, RIGHT, allocate_buffer
from ...util.device import resolve_device, resolve_trace_dtype
from .deposit import add_direct, add_reflection
from .solver import ReflectionNotConvergedError, find_reflection

logger = get_logger(__name__)

PlaneSpec = Union[str, Sequence[Plane]]


def resolve_planes(scene: Scene, planes: PlaneSpec) -> tuple[Plane, ...]:
    """Turn ``"room"``, ``"infinite"``, or explicit planes into a plane tuple."""
    if isinstance(planes, str):
        key = planes.lower()
        if key == "room":
            return room_planes(scene.room.size)
        if key == "infinite":
            return (infinite_wall_plane(),)
        raise ValueError(f"unknown plane set: {planes}")
    resolved = tuple(planes)
    if not all(isinstance(plane, Plane) for plane in resolved):
        raise TypeError("planes must be Plane instances")
    return resolved


def simulate_image_source(
    scene: Scene,
    *,
    sample_rate: float,
    duration: float,
    config: Optional[SimulationConfig] = None,
    planes: PlaneSpec = "room",
) -> ReverbResult:
    """Direct sound plus one decaying specular reflection per plane.

    The buffer is returned as computed (not normalized). Direct arrivals are
    added; reflection tails are subtracted.

    Args:
        scene: Room, speaker, and listener.
        sample_rate: Output sampling rate in Hz.
        duration: Output length in seconds.
        config: Simulation configuration (defaults if None).
        planes: ``"room"`` for the six walls, ``"infinite"`` for the single
            wall ``x = 0``, or a sequence of ``Plane``.

    Returns:
        ReverbResult with a (nsample, 2) buffer.
    """
    cfg = config or default_config()
    cfg.validate()
    if not isinstance(scene, Scene):
        raise TypeError("scene must be a Scene instance")
    scene.validate()
    nsample = sample_count(sample_rate, duration)
    device = resolve_device(cfg.device)
    dtype = resolve_trace_dtype(cfg.dtype, device)
    buffer = allocate_buffer(nsample, device=device, dtype=dtype)

    speaker = scene.speaker.position
    axis = scene.speaker_axis()
    ears = scene.listener.ears()
    offsets = scene.listener.ear_offsets()
    logger.info("image source: %s", scene.describe())

    deposits = 0
    for channel in (LEFT, RIGHT):
        deposits += add_direct(
            buffer,
            speaker,
            ears[channel],
            offsets[channel],
            channel,
            sample_rate=sample_rate,
            speed_of_sound=cfg.speed_of_sound,
        )

    unconverged: list[str] = []
    for plane in resolve_planes(scene, planes):
        try:
            points = [
                find_reflection(
                    speaker,
                    ear,
                    plane,
                    step=cfg.descent_step,
                    rate=cfg.descent_rate,
                    tolerance=cfg.descent_tolerance,
                    max_iterations=cfg.max_descent_iterations,
                )
                for ear in ears
            ]
        except ReflectionNotConvergedError as exc:
            if cfg.strict_convergence:
                raise
            logger.warning("skipping plane: %s", exc)
            unconverged.append(plane.name or repr(plane))
            continue
        for channel, point in zip((LEFT, RIGHT), points):
            deposits += add_reflection(
                buffer,
                speaker,
                axis,
                ears[channel],
                offsets[channel],
                point,
                channel,
                sample_rate=sample_rate,
                speed_of_sound=cfg.speed_of_sound,
                gain=cfg.reflection_gain,
                decay=cfg.reflection_decay,
                precision=cfg.precision,
            )

    return ReverbResult(
        buffer=buffer,
        sample_rate=float(sample_rate),
        scene=scene,
        config=cfg,
        method="image_source",
        stats=TraceStats(deposits=deposits, unconverged_planes=tuple(unconverged)),
    )
