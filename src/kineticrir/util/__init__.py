"""General-purpose acoustic, buffer, device, and tensor utilities."""

from .acoustics import estimate_t60, max_bounce_count, mean_free_path, sample_count
from .buffer import (
    LEFT,
    RIGHT,
    allocate_buffer,
    first_nonzero_index,
    interleave,
    normalize_buffer,
    sample_index,
    sample_indices,
)
from .device import resolve_device, resolve_trace_dtype
from .tensor import as_tensor, as_vector

__all__ = [
    "LEFT",
    "RIGHT",
    "allocate_buffer",
    "as_tensor",
    "as_vector",
    "estimate_t60",
    "first_nonzero_index",
    "interleave",
    "max_bounce_count",
    "mean_free_path",
    "normalize_buffer",
    "resolve_device",
    "resolve_trace_dtype",
    "sample_count",
    "sample_index",
    "sample_indices",
]
