"""Single-reflection ray tracing against one infinite wall."""

from __future__ import annotations

import time
from functools import partial
from typing import Iterable, Optional

import torch
from torch import Tensor

from ...config import SimulationConfig, default_config
from ...geometry.sampling import sample_unit_vectors
from ...geometry.vector import Vector3
from ...logging_utils import get_logger
from ...models import ReverbResult, TraceStats
from ...util.acoustics import sample_count
from ...util.buffer import allocate_buffer, normalize_buffer, sample_index, sample_indices
from ...util.device import resolve_device, resolve_trace_dtype
from ...util.tensor import as_vector
from .workers import run_workers, spawn_seeds, split_rays

logger = get_logger(__name__)


def simulate_infinite_wall(
    speaker: Vector3 | Tensor | Iterable[float],
    listener: Vector3 | Tensor | Iterable[float],
    *,
    sample_rate: float,
    duration: float,
    config: Optional[SimulationConfig] = None,
    num_rays: Optional[int] = None,
) -> ReverbResult:
    """Mono response of a speaker next to the infinite wall ``x = 0``.

    Each ray contributes the direct sound plus, when it heads towards the
    wall, one specular bounce. Contributions fall off as ``1 / t**2`` with
    ``t`` the arrival time. Rays pointing away from the wall are discarded.
    Once ``config.deadline`` has passed, workers stop between batches.
    """
    cfg = config or default_config()
    cfg.validate()
    src = as_vector(speaker, name="speaker position")
    dst = as_vector(listener, name="listener position")
    if src.x <= 0 or dst.x < 0:
        raise ValueError("speaker and listener must be on the x > 0 side of the wall")
    if src == dst:
        raise ValueError("speaker and listener must not coincide")
    rays = cfg.infinite_wall_rays if num_rays is None else num_rays
    if rays <= 0:
        raise ValueError("num_rays must be positive")
    nsample = sample_count(sample_rate, duration)
    device = resolve_device(cfg.device)
    dtype = resolve_trace_dtype(cfg.dtype, device)
    logger.info("infinite wall: %d rays, speaker at %s, listener at %s", rays, src, dst)

    shares = split_rays(rays, cfg.num_workers)
    root_seed, seeds = spawn_seeds(cfg.seed, len(shares))
    deadline_at = None
    if cfg.deadline is not None:
        deadline_at = time.monotonic() + cfg.deadline
    outputs = run_workers(
        partial(
            _wall_worker,
            src,
            dst,
            sample_rate=float(sample_rate),
            nsample=nsample,
            speed_of_sound=cfg.speed_of_sound,
            batch_size=cfg.ray_batch_size,
            sampler=cfg.sampler,
            device=device,
            dtype=dtype,
            deadline_at=deadline_at,
        ),
        shares,
        seeds,
    )
    buffer = torch.zeros_like(outputs[0][0])
    stats = TraceStats()
    for worker_buffer, worker_stats in outputs:
        buffer += worker_buffer
        stats = stats.merge(worker_stats)

    return ReverbResult(
        buffer=normalize_buffer(buffer),
        sample_rate=float(sample_rate),
        scene=None,
        config=cfg,
        method="infinite_wall",
        seed=root_seed,
        stats=stats,
    )


def _wall_worker(
    src: Vector3,
    dst: Vector3,
    num_rays: int,
    seed: int,
    *,
    sample_rate: float,
    nsample: int,
    speed_of_sound: float,
    batch_size: int,
    sampler: str,
    device: torch.device,
    dtype: torch.dtype,
    deadline_at: Optional[float] = None,
) -> tuple[Tensor, TraceStats]:
    generator = torch.Generator(device=device)
    generator.manual_seed(seed)
    buffer = allocate_buffer(nsample, channels=1, device=device, dtype=dtype)

    speaker = src.to_tensor(device=device, dtype=dtype)
    listener = dst.to_tensor(device=device, dtype=dtype)
    traced = reflected = 0
    while traced < num_rays:
        if deadline_at is not None and time.monotonic() >= deadline_at:
            logger.warning(
                "deadline reached; worker traced %d of %d rays", traced, num_rays
            )
            break
        count = min(batch_size, num_rays - traced)
        traced += count
        directions = sample_unit_vectors(
            count, generator=generator, method=sampler, device=device, dtype=dtype
        )
        directions = directions[directions[:, 0] < 0]
        if directions.shape[0] == 0:
            continue
        length = speaker[0] / -directions[:, 0]
        hits = speaker + directions * length[:, None]
        arrival = (length + torch.linalg.norm(listener - hits, dim=-1)) / speed_of_sound
        idx = sample_indices(arrival, sample_rate)
        valid = idx < nsample
        buffer.index_add_(0, idx[valid], 1.0 / (arrival[valid] * arrival[valid]))
        reflected += int(directions.shape[0])

    # every traced ray also carries the direct sound
    direct_time = dst.sub(src).length() / speed_of_sound
    direct_idx = sample_index(direct_time, sample_rate)
    if direct_idx < nsample:
        buffer[direct_idx] += traced / (direct_time * direct_time)

    deposits = reflected + (traced if direct_idx < nsample else 0)
    return buffer, TraceStats(rays=traced, bounces=reflected, deposits=deposits)


def wall_arrival_window(
    speaker: Vector3, listener: Vector3, *, speed_of_sound: float = 330.0
) -> tuple[float, float]:
    """Earliest direct and earliest reflected arrival times (seconds)."""
    direct = listener.sub(speaker).length() / speed_of_sound
    image = Vector3(-speaker.x, speaker.y, speaker.z)
    reflected = listener.sub(image).length() / speed_of_sound
    return direct, reflected
