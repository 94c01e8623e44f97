"""Device and dtype helpers."""

from __future__ import annotations

import warnings
from typing import Optional, Tuple

import torch


def resolve_device(
    device: Optional[torch.device | str],
    *,
    prefer: Tuple[str, ...] = ("cuda", "mps", "cpu"),
) -> torch.device:
    """Resolve a device string (including 'auto') into a torch.device.

    Falls back to CPU when the requested backend is unavailable.

    Examples:
        ```python
        device = resolve_device("auto")
        ```
    """
    if device is None:
        return torch.device("cpu")
    if isinstance(device, torch.device):
        return device

    dev = str(device).lower()
    if dev == "auto":
        for backend in prefer:
            if backend == "cuda" and torch.cuda.is_available():
                return torch.device("cuda")
            if backend == "mps" and torch.backends.mps.is_available():
                return torch.device("mps")
        return torch.device("cpu")
    if dev.startswith("cuda") and not torch.cuda.is_available():
        warnings.warn("CUDA not available; falling back to CPU.", RuntimeWarning)
        return torch.device("cpu")
    if dev == "mps" and not torch.backends.mps.is_available():
        warnings.warn("MPS not available; falling back to CPU.", RuntimeWarning)
        return torch.device("cpu")
    return torch.device(device)


def resolve_trace_dtype(
    dtype: Optional[torch.dtype], device: torch.device
) -> torch.dtype:
    """Pick the accumulation dtype for ray tracing.

    Wall classification compares coordinates against a tolerance of about
    1e-6, so float64 is used unless the caller asks otherwise. MPS has no
    float64 support and gets float32.
    """
    if dtype is not None:
        return dtype
    if device.type == "mps":
        return torch.float32
    return torch.float64
