from __future__ import annotations

"""Stochastic ray-traced impulse response simulation."""

import time
from functools import partial
from typing import Optional

import torch

from ...config import SimulationConfig, default_config
from ...logging_utils import get_logger
from ...models import ReverbResult, Scene, TraceStats
from ...util.acoustics import sample_count
from ...util.buffer import normalize_buffer
from ...util.device import resolve_device, resolve_trace_dtype
from .tracer import TraceContext, trace_worker
from .workers import run_workers, spawn_seeds, split_rays

logger = get_logger(__name__)


def simulate_ray_traced(
    scene: Scene,
    *,
    sample_rate: float,
    duration: float,
    config: Optional[SimulationConfig] = None,
    num_rays: Optional[int] = None,
) -> ReverbResult:
    """Estimate the binaural impulse response by stochastic ray tracing.

    Rays leave the speaker according to its radiation pattern, bounce between
    the six walls, and deposit energy into both ears after every bounce. The
    summed buffer is normalized to a peak magnitude of 1.

    Args:
        scene: Room, speaker, and listener.
        sample_rate: Output sampling rate in Hz.
        duration: Output length in seconds; rays stop once they exceed it.
        config: Simulation configuration (defaults if None).
        num_rays: Overrides ``config.num_rays``.

    Returns:
        ReverbResult with a (nsample, 2) buffer.

    Example:
        >>> result = simulate_ray_traced(scene, sample_rate=44100, duration=0.025)
        >>> result.buffer.shape
        torch.Size([1102, 2])
    """
    cfg = config or default_config()
    cfg.validate()
    if not isinstance(scene, Scene):
        raise TypeError("scene must be a Scene instance")
    scene.validate()
    if not scene.room.contains(scene.speaker.position, strict=True):
        raise ValueError("speaker must be strictly inside the room for ray tracing")
    rays = cfg.num_rays if num_rays is None else num_rays
    if rays <= 0:
        raise ValueError("num_rays must be positive")
    nsample = sample_count(sample_rate, duration)

    device = resolve_device(cfg.device)
    dtype = resolve_trace_dtype(cfg.dtype, device)
    ctx = TraceContext.from_scene(
        scene,
        sample_rate=sample_rate,
        duration=duration,
        nsample=nsample,
        config=cfg,
        device=device,
        dtype=dtype,
    )
    logger.info("ray tracing %d rays: %s", rays, scene.describe())

    shares = split_rays(rays, cfg.num_workers)
    root_seed, seeds = spawn_seeds(cfg.seed, len(shares))
    deadline_at = None
    if cfg.deadline is not None:
        deadline_at = time.monotonic() + cfg.deadline
    outputs = run_workers(
        partial(trace_worker, ctx, batch_size=cfg.ray_batch_size, deadline_at=deadline_at),
        shares,
        seeds,
    )

    buffer = torch.zeros_like(outputs[0][0])
    stats = TraceStats()
    for worker_buffer, worker_stats in outputs:
        buffer += worker_buffer
        stats = stats.merge(worker_stats)
    if stats.lost_rays:
        logger.info("%d of %d rays got lost", stats.lost_rays, stats.rays)

    return ReverbResult(
        buffer=normalize_buffer(buffer),
        sample_rate=float(sample_rate),
        scene=scene,
        config=cfg,
        method="raytrace",
        seed=root_seed,
        stats=stats,
    )
