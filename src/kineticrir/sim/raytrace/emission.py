"""Direction selection for rays leaving the speaker or a wall."""

from __future__ import annotations

from typing import Optional

import torch
from torch import Tensor

from ...geometry.sampling import sample_unit_vectors
from ...models.room import SpeakerType
from ..directivity import emission_gain


def choose_directions(
    orientations: Tensor,
    *,
    kind: Optional[SpeakerType],
    generator: Optional[torch.Generator],
    method: str = "marsaglia",
) -> tuple[Tensor, Tensor]:
    """Draw one accepted propagation direction per ray.

    Candidates are drawn uniformly from the sphere and redrawn until the
    surface accepts them: ``kind`` selects the speaker pattern for the first
    emission, ``None`` means a wall with inward normal ``orientations``.

    Returns:
        (directions, gain): directions of shape (n, 3) and per-ray energy
        gain of shape (n,).
    """
    n = orientations.shape[0]
    device, dtype = orientations.device, orientations.dtype
    directions = torch.empty_like(orientations)
    gain = torch.ones(n, device=device, dtype=dtype)
    pending = torch.arange(n, device=device)
    while pending.numel() > 0:
        cand = sample_unit_vectors(
            pending.numel(), generator=generator, method=method, device=device, dtype=dtype
        )
        cos_theta = torch.sum(cand * orientations[pending], dim=-1)
        accepted, weight = emission_gain(kind, cos_theta)
        rows = pending[accepted]
        directions[rows] = cand[accepted]
        gain[rows] = weight[accepted]
        pending = pending[~accepted]
    return directions, gain
