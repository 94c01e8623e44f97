"""Ray partitioning, per-worker seeding, and pooled execution."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

import numpy as np

T = TypeVar("T")


def split_rays(num_rays: int, num_workers: int) -> list[int]:
    """Split ``num_rays`` into near-equal non-empty shares.

    Example:
        >>> split_rays(10, 4)
        [3, 3, 2, 2]
    """
    if num_rays <= 0 or num_workers <= 0:
        raise ValueError("num_rays and num_workers must be positive")
    base, extra = divmod(num_rays, num_workers)
    shares = [base + (1 if i < extra else 0) for i in range(num_workers)]
    return [share for share in shares if share > 0]


def spawn_seeds(seed: Optional[int], count: int) -> tuple[int, list[int]]:
    """Derive independent generator seeds for ``count`` workers.

    Returns the root entropy (equal to ``seed`` when one is given, so a run can
    be reproduced) and one 32-bit seed per worker.
    """
    root = np.random.SeedSequence(seed)
    seeds = [int(child.generate_state(1)[0]) for child in root.spawn(count)]
    return int(root.entropy), seeds


def run_workers(
    fn: Callable[[int, int], T], shares: list[int], seeds: list[int]
) -> list[T]:
    """Run ``fn(share, seed)`` for each worker and return results in order."""
    if len(shares) != len(seeds):
        raise ValueError("shares and seeds must have the same length")
    if len(shares) == 1:
        return [fn(shares[0], seeds[0])]
    with ThreadPoolExecutor(max_workers=len(shares)) as pool:
        futures = [pool.submit(fn, share, seed) for share, seed in zip(shares, seeds)]
        return [future.result() for future in futures]
