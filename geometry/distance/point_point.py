"""Squared distance between two points, in any dimension."""

from __future__ import annotations

import numpy as np


def point_point_distance(p0: np.ndarray, p1: np.ndarray) -> float:
    diff = p1 - p0
    return float(diff @ diff)


def point_point_distance_gradient(p0: np.ndarray, p1: np.ndarray) -> np.ndarray:
    """Gradient w.r.t. ``[p0, p1]``."""
    diff = 2.0 * (p0 - p1)
    return np.concatenate([diff, -diff])


def point_point_distance_hessian(p0: np.ndarray, p1: np.ndarray) -> np.ndarray:
    """Hessian w.r.t. ``[p0, p1]``; constant ``2 [[I, -I], [-I, I]]``."""
    dim = p0.shape[0]
    eye = np.eye(dim)
    return 2.0 * np.block([[eye, -eye], [-eye, eye]])


__all__ = [
    "point_point_distance",
    "point_point_distance_gradient",
    "point_point_distance_hessian",
]
