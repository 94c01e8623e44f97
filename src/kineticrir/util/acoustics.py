from __future__ import annotations

"""Acoustic utility formulas."""

import math

from ..geometry.vector import Vector3

_DEF_SPEED_OF_SOUND = 330.0


def sample_count(sample_rate: float, duration: float) -> int:
    """Number of stereo frames covering ``duration`` seconds.

    Example:
        >>> sample_count(44100, 0.025)
        1102
    """
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")
    if duration <= 0:
        raise ValueError("duration must be positive")
    nsample = int(round(sample_rate * duration))
    if nsample <= 0:
        raise ValueError("sample_rate * duration must cover at least one sample")
    return nsample


def max_bounce_count(attenuation: float, precision: float) -> int:
    """Upper bound on reflections before ``|energy|`` drops to ``precision``.

    Energy after ``k`` bounces is ``attenuation ** k``, so the loop ends once
    ``k >= log(precision) / log(attenuation)``.

    Example:
        >>> max_bounce_count(0.9, 1e-6)
        132
    """
    if not 0 < attenuation < 1:
        raise ValueError("attenuation must be in (0, 1)")
    if not 0 < precision < 1:
        raise ValueError("precision must be in (0, 1)")
    return int(math.ceil(math.log(precision) / math.log(attenuation)))


def mean_free_path(size: Vector3) -> float:
    """Mean free path ``4V/S`` of a rectangular room."""
    volume = size.x * size.y * size.z
    surface = 2.0 * (size.x * size.y + size.y * size.z + size.x * size.z)
    return 4.0 * volume / surface


def estimate_t60(
    size: Vector3, attenuation: float, *, c: float = _DEF_SPEED_OF_SOUND
) -> float:
    """Estimate T60 from the per-bounce energy retention using Sabine's formula.

    The absorbed fraction per bounce is ``1 - attenuation``; a perfectly
    reflecting room (``attenuation == 1``) returns ``inf``.

    Example:
        >>> t60 = estimate_t60(Vector3(3.0, 2.4, 5.5), 0.9)
    """
    if not 0 < attenuation <= 1:
        raise ValueError("attenuation must be in (0, 1]")
    alpha = 1.0 - attenuation
    if alpha <= 0.0:
        return float("inf")
    volume = size.x * size.y * size.z
    surface = 2.0 * (size.x * size.y + size.y * size.z + size.x * size.z)
    return (24.0 * math.log(10.0) / c) * volume / (surface * alpha)
