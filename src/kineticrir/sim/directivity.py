from __future__ import annotations

from typing import Optional

import torch
from torch import Tensor

from ..models.room import SpeakerType


def emission_gain(kind: Optional[SpeakerType], cos_theta: Tensor) -> tuple[Tensor, Tensor]:
    """Return (accepted, gain) for candidate directions leaving a surface.

    ``cos_theta`` is the cosine between each candidate direction and the
    speaker axis (``kind`` set) or the inward wall normal (``kind`` is None).
    Walls and non-omni speakers only radiate into the front hemisphere;
    directing speakers additionally scale energy by the cosine.
    """
    if kind is None or kind is SpeakerType.DIFFUSE:
        return cos_theta > 0, torch.ones_like(cos_theta)
    if kind is SpeakerType.DIRECTING:
        accepted = cos_theta > 0
        return accepted, torch.where(accepted, cos_theta, torch.zeros_like(cos_theta))
    if kind is SpeakerType.OMNI:
        return torch.ones_like(cos_theta, dtype=torch.bool), torch.ones_like(cos_theta)
    raise ValueError(f"unsupported speaker type: {kind}")


def speaker_deposit_scale(kind: SpeakerType) -> float:
    # an omni speaker spreads over twice the area of a hemispherical one
    return 0.5 if kind is SpeakerType.OMNI else 1.0
