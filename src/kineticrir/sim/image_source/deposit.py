"""Direct and reflected contributions for the image-source solver."""

from __future__ import annotations

import math

import torch
from torch import Tensor

from ...geometry.vector import Vector3
from ...util.buffer import sample_index


def ear_orientation_factor(direction: Vector3, ear_normal: Vector3) -> float:
    """Scalar head shadowing gain, 1.0 facing the ear down to 0.1 behind it."""
    dot = direction.normalize().dot(ear_normal.normalize())
    return 1.0 - (dot + 1.0) / 2.0 * 0.9


def add_direct(
    buffer: Tensor,
    speaker: Vector3,
    ear: Vector3,
    ear_normal: Vector3,
    channel: int,
    *,
    sample_rate: float,
    speed_of_sound: float,
) -> bool:
    """Mark the direct sound arrival at one ear; returns False if out of range.

    The arrival is shaded by the orientation factor of this ear's own outward
    normal, so the two ears generally get different direct levels.
    """
    path = ear.sub(speaker)
    idx = sample_index(path.length() / speed_of_sound, sample_rate)
    if idx >= buffer.shape[0]:
        return False
    buffer[idx, channel] += ear_orientation_factor(path, ear_normal)
    return True


def add_reflection(
    buffer: Tensor,
    speaker: Vector3,
    speaker_axis: Vector3,
    ear: Vector3,
    ear_normal: Vector3,
    point: Vector3,
    channel: int,
    *,
    sample_rate: float,
    speed_of_sound: float,
    gain: float = 0.08,
    decay: float = 0.97,
    precision: float = 1e-6,
) -> int:
    """Subtract a decaying reflection tail starting at the arrival of ``point``.

    The first slot receives the full reflection energy, every following slot
    ``decay`` times the previous one, until the energy falls below
    ``precision`` or the buffer ends. Returns the number of slots written.
    """
    length = speaker.sub(point).length() + point.sub(ear).length()
    start = sample_index(length / speed_of_sound, sample_rate)
    nsample = buffer.shape[0]
    if start >= nsample:
        return 0

    energy = max(speaker_axis.dot(point.sub(speaker).normalize()), 0.0)
    energy *= 1.0 / (length * length)
    energy *= gain
    energy *= ear_orientation_factor(ear.sub(point), ear_normal)

    tail = nsample - start
    if energy >= precision:
        # slots k >= 1 are written while energy * decay**k stays >= precision
        tail = min(tail, int(math.floor(math.log(precision / energy) / math.log(decay))) + 2)
    else:
        tail = 1
    k = torch.arange(tail, device=buffer.device, dtype=buffer.dtype)
    values = energy * decay**k
    keep = (k == 0) | (values >= precision)
    values = values[keep]
    buffer[start : start + values.numel(), channel] -= values
    return int(values.numel())
