"""Batched uniform direction sampling on the unit sphere."""

from __future__ import annotations

from typing import Optional

import torch
from torch import Tensor


def sample_unit_vectors(
    num: int,
    *,
    generator: Optional[torch.Generator] = None,
    method: str = "marsaglia",
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float64,
) -> Tensor:
    """Draw ``num`` directions uniformly distributed on the unit sphere.

    Both methods keep the rejection loop of their scalar counterparts in
    ``Vector3.random``: rejected rows are redrawn until every row is accepted.

    Returns:
        Tensor of shape (num, 3).
    """
    if num < 0:
        raise ValueError("num must be non-negative")
    if method == "marsaglia":
        return _marsaglia(num, generator, device, dtype)
    if method == "rejection":
        return _rejection(num, generator, device, dtype)
    raise ValueError(f"unknown sampling method: {method}")


def _uniform(
    shape: tuple[int, ...],
    generator: Optional[torch.Generator],
    device: Optional[torch.device],
    dtype: torch.dtype,
) -> Tensor:
    return torch.rand(shape, generator=generator, device=device, dtype=dtype) * 2.0 - 1.0


def _marsaglia(
    num: int,
    generator: Optional[torch.Generator],
    device: Optional[torch.device],
    dtype: torch.dtype,
) -> Tensor:
    out = torch.empty((num, 3), device=device, dtype=dtype)
    pending = torch.arange(num, device=device)
    while pending.numel() > 0:
        xy = _uniform((pending.numel(), 2), generator, device, dtype)
        r2 = torch.sum(xy * xy, dim=-1)
        ok = r2 <= 1.0
        xy = xy[ok]
        r2 = r2[ok]
        s = torch.sqrt(1.0 - r2)
        rows = pending[ok]
        out[rows, 0] = 2.0 * xy[:, 0] * s
        out[rows, 1] = 2.0 * xy[:, 1] * s
        out[rows, 2] = 1.0 - 2.0 * r2
        pending = pending[~ok]
    return out


def _rejection(
    num: int,
    generator: Optional[torch.Generator],
    device: Optional[torch.device],
    dtype: torch.dtype,
) -> Tensor:
    out = torch.empty((num, 3), device=device, dtype=dtype)
    pending = torch.arange(num, device=device)
    while pending.numel() > 0:
        cand = _uniform((pending.numel(), 3), generator, device, dtype)
        length = torch.linalg.norm(cand, dim=-1)
        ok = (length < 1.0) & (length > 0.0)
        out[pending[ok]] = cand[ok] / length[ok, None]
        pending = pending[~ok]
    return out
