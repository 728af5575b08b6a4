"""Squared distance between a point and an edge, in 2D or 3D.

Gradients and Hessians are taken w.r.t. the stencil ``[p, e0, e1]``.
"""

from __future__ import annotations

import numpy as np

from core.linalg import scatter_gradient, scatter_hessian, stencil_map
from geometry.distance.distance_type import (
    PointEdgeDistanceType,
    point_edge_distance_type,
)
from geometry.distance.point_point import (
    point_point_distance,
    point_point_distance_gradient,
    point_point_distance_hessian,
)
from geometry.distance_derivatives import point_line_terms

# r = p - e0, e = e1 - e0
_LINE_COEFFS = [[1.0, -1.0, 0.0], [0.0, -1.0, 1.0]]


def point_line_distance(p: np.ndarray, e0: np.ndarray, e1: np.ndarray) -> float:
    """Squared distance from ``p`` to the infinite line through ``e0`` and ``e1``."""
    value, _, _ = point_line_terms(p - e0, e1 - e0)
    return value


def point_line_distance_gradient(
    p: np.ndarray, e0: np.ndarray, e1: np.ndarray
) -> np.ndarray:
    J = stencil_map(_LINE_COEFFS, p.shape[0])
    _, grad, _ = point_line_terms(p - e0, e1 - e0)
    return J.T @ grad


def point_line_distance_hessian(
    p: np.ndarray, e0: np.ndarray, e1: np.ndarray
) -> np.ndarray:
    J = stencil_map(_LINE_COEFFS, p.shape[0])
    _, _, hess = point_line_terms(p - e0, e1 - e0)
    return J.T @ hess @ J


def point_edge_distance(
    p: np.ndarray,
    e0: np.ndarray,
    e1: np.ndarray,
    dtype: PointEdgeDistanceType | None = None,
) -> float:
    if dtype is None:
        dtype = point_edge_distance_type(p, e0, e1)
    if dtype is PointEdgeDistanceType.P_E0:
        return point_point_distance(p, e0)
    if dtype is PointEdgeDistanceType.P_E1:
        return point_point_distance(p, e1)
    if dtype is PointEdgeDistanceType.P_E:
        return point_line_distance(p, e0, e1)
    raise ValueError(f"Invalid point-edge distance type: {dtype!r}")


def point_edge_distance_gradient(
    p: np.ndarray,
    e0: np.ndarray,
    e1: np.ndarray,
    dtype: PointEdgeDistanceType | None = None,
) -> np.ndarray:
    if dtype is None:
        dtype = point_edge_distance_type(p, e0, e1)
    dim = p.shape[0]
    if dtype is PointEdgeDistanceType.P_E0:
        return scatter_gradient(point_point_distance_gradient(p, e0), (0, 1), 3, dim)
    if dtype is PointEdgeDistanceType.P_E1:
        return scatter_gradient(point_point_distance_gradient(p, e1), (0, 2), 3, dim)
    if dtype is PointEdgeDistanceType.P_E:
        return point_line_distance_gradient(p, e0, e1)
    raise ValueError(f"Invalid point-edge distance type: {dtype!r}")


def point_edge_distance_hessian(
    p: np.ndarray,
    e0: np.ndarray,
    e1: np.ndarray,
    dtype: PointEdgeDistanceType | None = None,
) -> np.ndarray:
    if dtype is None:
        dtype = point_edge_distance_type(p, e0, e1)
    dim = p.shape[0]
    if dtype is PointEdgeDistanceType.P_E0:
        return scatter_hessian(point_point_distance_hessian(p, e0), (0, 1), 3, dim)
    if dtype is PointEdgeDistanceType.P_E1:
        return scatter_hessian(point_point_distance_hessian(p, e1), (0, 2), 3, dim)
    if dtype is PointEdgeDistanceType.P_E:
        return point_line_distance_hessian(p, e0, e1)
    raise ValueError(f"Invalid point-edge distance type: {dtype!r}")


__all__ = [
    "point_line_distance",
    "point_line_distance_gradient",
    "point_line_distance_hessian",
    "point_edge_distance",
    "point_edge_distance_gradient",
    "point_edge_distance_hessian",
]
