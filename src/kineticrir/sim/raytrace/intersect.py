"""Ray/box intersection and wall classification for shoebox rooms."""

from __future__ import annotations

import torch
from torch import Tensor


def intersect_room(positions: Tensor, directions: Tensor, room_size: Tensor) -> Tensor:
    """Distance along each ray to the first wall of ``[0, size]``.

    For every axis the ray can only reach the far plane (positive component)
    or the near plane (negative component); a zero component never reaches
    either. The nearest of the three candidates is the hit. Rays are assumed
    to start inside the box, so a negative result flags numerical trouble.

    Args:
        positions: Ray origins of shape (n, 3).
        directions: Unit directions of shape (n, 3).
        room_size: Room extents of shape (3,).

    Returns:
        Tensor of shape (n,).
    """
    inf = torch.full_like(directions, float("inf"))
    safe = torch.where(directions == 0, torch.ones_like(directions), directions)
    far = (room_size - positions) / safe
    near = positions / -safe
    dist = torch.where(directions > 0, far, inf)
    dist = torch.where(directions < 0, near, dist)
    return torch.min(dist, dim=-1).values


def classify_walls(
    positions: Tensor, room_size: Tensor, tolerance: float
) -> tuple[Tensor, Tensor]:
    """Inward normals of the walls the given points lie on.

    Walls are tested in the order x=0, y=0, z=0, x=max, y=max, z=max and the
    first match wins.

    Returns:
        (normals, on_wall): normals of shape (n, 3), zero where ``on_wall`` is
        False.
    """
    normals = torch.zeros_like(positions)
    on_wall = torch.zeros(positions.shape[0], dtype=torch.bool, device=positions.device)
    for axis in range(3):
        hit = ~on_wall & (positions[:, axis] < tolerance)
        normals[hit, axis] = 1.0
        on_wall |= hit
    for axis in range(3):
        hit = ~on_wall & (positions[:, axis] > room_size[axis] - tolerance)
        normals[hit, axis] = -1.0
        on_wall |= hit
    return normals, on_wall
