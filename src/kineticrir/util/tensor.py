"""Tensor helpers."""

from __future__ import annotations

import math
from typing import Iterable, Optional

import torch
from torch import Tensor

from ..geometry.vector import Vector3
from .device import resolve_device


def as_tensor(
    value: Tensor | Vector3 | Iterable[float] | float | int,
    *,
    device: Optional[torch.device | str] = None,
    dtype: Optional[torch.dtype] = None,
) -> Tensor:
    """Convert a value to a tensor while preserving device/dtype when possible."""
    if isinstance(device, str):
        device = resolve_device(device)
    if isinstance(value, Vector3):
        return value.to_tensor(device=device, dtype=dtype or torch.float64)
    if torch.is_tensor(value):
        out = value
        if device is not None:
            out = out.to(device)
        if dtype is not None:
            out = out.to(dtype)
        return out
    return torch.as_tensor(value, device=device, dtype=dtype)


def as_vector(value: Tensor | Vector3 | Iterable[float], *, name: str) -> Vector3:
    """Coerce a position/direction to ``Vector3`` and check it is finite."""
    if isinstance(value, Vector3):
        vec = value
    else:
        try:
            vec = Vector3.from_iterable(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must have exactly three components") from exc
    if not all(map(math.isfinite, vec.as_tuple())):
        raise ValueError(f"{name} must contain finite values")
    return vec

