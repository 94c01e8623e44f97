"""Batched stochastic ray propagation."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import torch
from torch import Tensor

from ...config import SimulationConfig
from ...logging_utils import get_logger
from ...models import Scene, SpeakerType, TraceStats
from ...util.buffer import allocate_buffer
from ..directivity import speaker_deposit_scale
from .deposit import deposit_binaural
from .emission import choose_directions
from .intersect import classify_walls, intersect_room

logger = get_logger(__name__)


@dataclass(frozen=True)
class TraceContext:
    """Scene geometry and run parameters, pre-converted to tensors."""

    room_size: Tensor
    speaker: Tensor
    speaker_axis: Tensor
    ears: Tensor
    ear_normals: Tensor
    kind: SpeakerType
    attenuation: float
    sample_rate: float
    duration: float
    nsample: int
    speed_of_sound: float
    precision: float
    wall_tolerance: float
    sampler: str
    device: torch.device
    dtype: torch.dtype

    @classmethod
    def from_scene(
        cls,
        scene: Scene,
        *,
        sample_rate: float,
        duration: float,
        nsample: int,
        config: SimulationConfig,
        device: torch.device,
        dtype: torch.dtype,
    ) -> "TraceContext":
        def tensor(vec) -> Tensor:
            return vec.to_tensor(device=device, dtype=dtype)

        left, right = scene.listener.ears()
        left_off, right_off = scene.listener.ear_offsets()
        return cls(
            room_size=tensor(scene.room.size),
            speaker=tensor(scene.speaker.position),
            speaker_axis=tensor(scene.speaker_axis()),
            ears=torch.stack([tensor(left), tensor(right)]),
            ear_normals=torch.stack(
                [tensor(left_off.normalize()), tensor(right_off.normalize())]
            ),
            kind=scene.speaker.kind,
            attenuation=scene.room.attenuation,
            sample_rate=float(sample_rate),
            duration=float(duration),
            nsample=nsample,
            speed_of_sound=config.speed_of_sound,
            precision=config.precision,
            wall_tolerance=config.wall_tolerance,
            sampler=config.sampler,
            device=device,
            dtype=dtype,
        )


def trace_batch(
    ctx: TraceContext,
    num_rays: int,
    buffer: Tensor,
    *,
    generator: Optional[torch.Generator] = None,
) -> TraceStats:
    """Trace ``num_rays`` rays from the speaker until each one dies out.

    A ray stays alive while ``|energy| > precision`` and its travel time is
    below the run duration. Every pass deposits the live rays into ``buffer``,
    picks new directions, and moves each ray to its next wall, flipping the
    sign of its energy and scaling it by the wall attenuation. Rays that miss
    every wall are dropped and counted as lost.
    """
    positions = ctx.speaker.expand(num_rays, 3).clone()
    orientations = ctx.speaker_axis.expand(num_rays, 3).clone()
    energy = torch.ones(num_rays, device=ctx.device, dtype=ctx.dtype)
    elapsed = torch.zeros(num_rays, device=ctx.device, dtype=ctx.dtype)
    active = torch.ones(num_rays, device=ctx.device, dtype=torch.bool)

    at_speaker = True
    bounces = lost = deposits = 0
    while True:
        idx = torch.nonzero(active, as_tuple=False).squeeze(-1)
        if idx.numel() == 0:
            break
        pos = positions[idx]
        level = energy[idx]
        t = elapsed[idx]

        scale = speaker_deposit_scale(ctx.kind) if at_speaker else 1.0
        deposits += deposit_binaural(
            buffer,
            pos,
            level * scale,
            t,
            ears=ctx.ears,
            ear_normals=ctx.ear_normals,
            sample_rate=ctx.sample_rate,
            speed_of_sound=ctx.speed_of_sound,
        )

        directions, gain = choose_directions(
            orientations[idx],
            kind=ctx.kind if at_speaker else None,
            generator=generator,
            method=ctx.sampler,
        )
        level = level * gain
        dist = intersect_room(pos, directions, ctx.room_size)
        behind = ~(dist >= 0)

        pos = pos + directions * dist[:, None]
        level = level * -ctx.attenuation
        t = t + dist / ctx.speed_of_sound
        normals, on_wall = classify_walls(pos, ctx.room_size, ctx.wall_tolerance)
        gone = behind | ~on_wall
        if bool(gone.any()):
            n_gone = int(gone.sum().item())
            lost += n_gone
            logger.debug("lost %d rays (negative length or off-wall landing)", n_gone)

        bounces += int((~gone).sum().item())
        positions[idx] = pos
        energy[idx] = level
        elapsed[idx] = t
        orientations[idx] = normals
        active[idx] = ~gone & (torch.abs(level) > ctx.precision) & (t < ctx.duration)
        at_speaker = False

    return TraceStats(rays=num_rays, lost_rays=lost, bounces=bounces, deposits=deposits)


def trace_worker(
    ctx: TraceContext,
    num_rays: int,
    seed: int,
    *,
    batch_size: int,
    deadline_at: Optional[float] = None,
) -> tuple[Tensor, TraceStats]:
    """Trace one worker's share of rays into a private buffer."""
    generator = torch.Generator(device=ctx.device)
    generator.manual_seed(seed)
    buffer = allocate_buffer(ctx.nsample, device=ctx.device, dtype=ctx.dtype)
    stats = TraceStats()
    done = 0
    while done < num_rays:
        if deadline_at is not None and time.monotonic() >= deadline_at:
            logger.warning(
                "deadline reached; worker traced %d of %d rays", done, num_rays
            )
            break
        count = min(batch_size, num_rays - done)
        stats = stats.merge(trace_batch(ctx, count, buffer, generator=generator))
        done += count
    logger.debug(
        "worker finished: %d rays, %d bounces, %d lost",
        stats.rays,
        stats.bounces,
        stats.lost_rays,
    )
    return buffer, stats
