"""Squared distance from a point to a plane given by origin and unit normal."""

from __future__ import annotations

import numpy as np


def point_plane_distance(
    p: np.ndarray, origin: np.ndarray, normal: np.ndarray
) -> float:
    signed = float((p - origin) @ normal)
    return signed * signed


def point_plane_distance_gradient(
    p: np.ndarray, origin: np.ndarray, normal: np.ndarray
) -> np.ndarray:
    """Gradient w.r.t. ``p``."""
    return 2.0 * float((p - origin) @ normal) * normal


def point_plane_distance_hessian(
    p: np.ndarray, origin: np.ndarray, normal: np.ndarray
) -> np.ndarray:
    """Hessian w.r.t. ``p``."""
    return 2.0 * np.outer(normal, normal)


__all__ = [
    "point_plane_distance",
    "point_plane_distance_gradient",
    "point_plane_distance_hessian",
]
