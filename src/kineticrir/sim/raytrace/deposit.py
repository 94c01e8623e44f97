"""Binaural energy deposition into the output buffer."""

from __future__ import annotations

import torch
from torch import Tensor

from ...util.buffer import sample_indices


def orientation_factor(directions: Tensor, ear_normal: Tensor) -> Tensor:
    """Head shadowing gain for unit arrival directions.

    1.0 when the sound travels straight into the ear (against its outward
    normal), 0.1 (-20 dB) when it arrives from the far side of the head.
    """
    dot = torch.sum(directions * ear_normal, dim=-1)
    return 1.0 - (dot + 1.0) / 2.0 * 0.9


def deposit_binaural(
    buffer: Tensor,
    positions: Tensor,
    energy: Tensor,
    times: Tensor,
    *,
    ears: Tensor,
    ear_normals: Tensor,
    sample_rate: float,
    speed_of_sound: float,
) -> int:
    """Project each ray's wavefront from its position into both ears.

    Args:
        buffer: Stereo accumulator of shape (nsample, 2), updated in place.
        positions: Current ray positions (n, 3).
        energy: Signed ray energy (n,).
        times: Time already travelled by each ray (n,).
        ears: Ear positions (2, 3), left then right.
        ear_normals: Unit outward ear normals (2, 3).

    Returns:
        Number of contributions that landed inside the buffer.
    """
    nsample = buffer.shape[0]
    landed = 0
    for channel in range(2):
        vec = ears[channel] - positions
        dist = torch.clamp(torch.linalg.norm(vec, dim=-1), min=1e-9)
        idx = sample_indices(times + dist / speed_of_sound, sample_rate)
        valid = idx < nsample
        if not bool(valid.any()):
            continue
        gain = orientation_factor(vec / dist[:, None], ear_normals[channel])
        value = energy * gain / (dist * dist)
        buffer[:, channel].index_add_(0, idx[valid], value[valid])
        landed += int(valid.sum().item())
    return landed
