"""Squared distance between a point and a triangle (3D only).

Gradients and Hessians are taken w.r.t. the stencil ``[p, t0, t1, t2]``.
"""

from __future__ import annotations

import numpy as np

from core.exceptions import UnsupportedDimensionError
from core.linalg import scatter_gradient, scatter_hessian, stencil_map
from geometry.distance.distance_type import (
    PointTriangleDistanceType,
    point_triangle_distance_type,
)
from geometry.distance.point_edge import (
    point_line_distance,
    point_line_distance_gradient,
    point_line_distance_hessian,
)
from geometry.distance.point_point import (
    point_point_distance,
    point_point_distance_gradient,
    point_point_distance_hessian,
)
from geometry.distance_derivatives import point_plane_terms

# r = p - t0, u = t1 - t0, v = t2 - t0
_PLANE_COEFFS = [
    [1.0, -1.0, 0.0, 0.0],
    [0.0, -1.0, 1.0, 0.0],
    [0.0, -1.0, 0.0, 1.0],
]

# Stencil slots used by each sub-case, in the argument order of the
# underlying point-point / point-line routine.
_SUB_CASES = {
    PointTriangleDistanceType.P_T0: (0, 1),
    PointTriangleDistanceType.P_T1: (0, 2),
    PointTriangleDistanceType.P_T2: (0, 3),
    PointTriangleDistanceType.P_E0: (0, 1, 2),
    PointTriangleDistanceType.P_E1: (0, 2, 3),
    PointTriangleDistanceType.P_E2: (0, 3, 1),
}


def _check_dim(p: np.ndarray) -> None:
    if p.shape[0] != 3:
        raise UnsupportedDimensionError("point_triangle_distance", p.shape[0], (3,))


def point_triangle_plane_distance(
    p: np.ndarray, t0: np.ndarray, t1: np.ndarray, t2: np.ndarray
) -> float:
    """Squared distance from ``p`` to the plane spanned by the triangle."""
    value, _, _ = point_plane_terms(p - t0, t1 - t0, t2 - t0)
    return value


def point_triangle_plane_distance_gradient(
    p: np.ndarray, t0: np.ndarray, t1: np.ndarray, t2: np.ndarray
) -> np.ndarray:
    _, grad, _ = point_plane_terms(p - t0, t1 - t0, t2 - t0)
    return stencil_map(_PLANE_COEFFS, 3).T @ grad


def point_triangle_plane_distance_hessian(
    p: np.ndarray, t0: np.ndarray, t1: np.ndarray, t2: np.ndarray
) -> np.ndarray:
    J = stencil_map(_PLANE_COEFFS, 3)
    _, _, hess = point_plane_terms(p - t0, t1 - t0, t2 - t0)
    return J.T @ hess @ J


def point_triangle_distance(
    p: np.ndarray,
    t0: np.ndarray,
    t1: np.ndarray,
    t2: np.ndarray,
    dtype: PointTriangleDistanceType | None = None,
) -> float:
    _check_dim(p)
    if dtype is None:
        dtype = point_triangle_distance_type(p, t0, t1, t2)
    if dtype is PointTriangleDistanceType.P_T:
        return point_triangle_plane_distance(p, t0, t1, t2)
    pts = (p, t0, t1, t2)
    slots = _SUB_CASES[dtype]
    if len(slots) == 2:
        return point_point_distance(*(pts[s] for s in slots))
    return point_line_distance(*(pts[s] for s in slots))


def point_triangle_distance_gradient(
    p: np.ndarray,
    t0: np.ndarray,
    t1: np.ndarray,
    t2: np.ndarray,
    dtype: PointTriangleDistanceType | None = None,
) -> np.ndarray:
    _check_dim(p)
    if dtype is None:
        dtype = point_triangle_distance_type(p, t0, t1, t2)
    if dtype is PointTriangleDistanceType.P_T:
        return point_triangle_plane_distance_gradient(p, t0, t1, t2)
    pts = (p, t0, t1, t2)
    slots = _SUB_CASES[dtype]
    if len(slots) == 2:
        local = point_point_distance_gradient(*(pts[s] for s in slots))
    else:
        local = point_line_distance_gradient(*(pts[s] for s in slots))
    return scatter_gradient(local, slots, 4, 3)


def point_triangle_distance_hessian(
    p: np.ndarray,
    t0: np.ndarray,
    t1: np.ndarray,
    t2: np.ndarray,
    dtype: PointTriangleDistanceType | None = None,
) -> np.ndarray:
    _check_dim(p)
    if dtype is None:
        dtype = point_triangle_distance_type(p, t0, t1, t2)
    if dtype is PointTriangleDistanceType.P_T:
        return point_triangle_plane_distance_hessian(p, t0, t1, t2)
    pts = (p, t0, t1, t2)
    slots = _SUB_CASES[dtype]
    if len(slots) == 2:
        local = point_point_distance_hessian(*(pts[s] for s in slots))
    else:
        local = point_line_distance_hessian(*(pts[s] for s in slots))
    return scatter_hessian(local, slots, 4, 3)


__all__ = [
    "point_triangle_distance",
    "point_triangle_distance_gradient",
    "point_triangle_distance_hessian",
    "point_triangle_plane_distance",
]
