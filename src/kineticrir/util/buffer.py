"""Stereo output buffer helpers.

Buffers are ``(nsample, 2)`` tensors with columns (left, right); flattening a
buffer row-major yields the interleaved ``L0 R0 L1 R1 ...`` layout.
"""

from __future__ import annotations

import math
from typing import Optional

import torch
from torch import Tensor

from ..logging_utils import get_logger

LEFT = 0
RIGHT = 1

logger = get_logger(__name__)


def allocate_buffer(
    nsample: int,
    *,
    channels: int = 2,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float64,
) -> Tensor:
    if channels == 1:
        return torch.zeros((nsample,), device=device, dtype=dtype)
    return torch.zeros((nsample, channels), device=device, dtype=dtype)


def sample_index(seconds: float, sample_rate: float) -> int:
    """Round a time to the nearest sample, halves rounding up."""
    return int(math.floor(seconds * sample_rate + 0.5))


def sample_indices(seconds: Tensor, sample_rate: float) -> Tensor:
    """Tensor counterpart of ``sample_index``."""
    return torch.floor(seconds * sample_rate + 0.5).to(torch.int64)


def normalize_buffer(buffer: Tensor) -> Tensor:
    """Scale a buffer so its largest magnitude becomes 1.

    A silent buffer is returned unchanged (and a warning logged) instead of
    dividing by zero.
    """
    peak = torch.max(torch.abs(buffer)) if buffer.numel() else buffer.new_zeros(())
    if peak.item() == 0.0:
        logger.warning("output buffer is silent; skipping normalization")
        return buffer
    return buffer / peak


def interleave(buffer: Tensor) -> Tensor:
    """Return the interleaved 1-D view of a stereo buffer."""
    if buffer.ndim == 1:
        return buffer
    return buffer.reshape(-1)


def first_nonzero_index(buffer: Tensor) -> Optional[int]:
    """Index of the first frame holding a nonzero sample, or None."""
    frames = buffer if buffer.ndim == 1 else torch.any(buffer != 0, dim=-1)
    hits = torch.nonzero(frames != 0, as_tuple=False)
    if hits.numel() == 0:
        return None
    return int(hits[0, 0].item())
