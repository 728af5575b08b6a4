"""Squared distance between two edges (3D only).

Gradients and Hessians are taken w.r.t. the stencil ``[ea0, ea1, eb0, eb1]``.
"""

from __future__ import annotations

import numpy as np

from core.exceptions import UnsupportedDimensionError
from core.linalg import scatter_gradient, scatter_hessian, stencil_map
from geometry.distance.distance_type import (
    EdgeEdgeDistanceType,
    edge_edge_distance_type,
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

# r = ea0 - eb0, u = ea1 - ea0, v = eb1 - eb0
_LINE_LINE_COEFFS = [
    [1.0, 0.0, -1.0, 0.0],
    [-1.0, 1.0, 0.0, 0.0],
    [0.0, 0.0, -1.0, 1.0],
]

# Stencil slots of each sub-case: two slots for point-point, three for
# point-line (point first, then the line endpoints).
_SUB_CASES = {
    EdgeEdgeDistanceType.EA0_EB0: (0, 2),
    EdgeEdgeDistanceType.EA0_EB1: (0, 3),
    EdgeEdgeDistanceType.EA1_EB0: (1, 2),
    EdgeEdgeDistanceType.EA1_EB1: (1, 3),
    EdgeEdgeDistanceType.EA_EB0: (2, 0, 1),
    EdgeEdgeDistanceType.EA_EB1: (3, 0, 1),
    EdgeEdgeDistanceType.EA0_EB: (0, 2, 3),
    EdgeEdgeDistanceType.EA1_EB: (1, 2, 3),
}


def _check_dim(ea0: np.ndarray) -> None:
    if ea0.shape[0] != 3:
        raise UnsupportedDimensionError("edge_edge_distance", ea0.shape[0], (3,))


def line_line_distance(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> float:
    """Squared distance between the infinite lines through the two edges."""
    value, _, _ = point_plane_terms(ea0 - eb0, ea1 - ea0, eb1 - eb0)
    return value


def line_line_distance_gradient(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> np.ndarray:
    _, grad, _ = point_plane_terms(ea0 - eb0, ea1 - ea0, eb1 - eb0)
    return stencil_map(_LINE_LINE_COEFFS, 3).T @ grad


def line_line_distance_hessian(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> np.ndarray:
    J = stencil_map(_LINE_LINE_COEFFS, 3)
    _, _, hess = point_plane_terms(ea0 - eb0, ea1 - ea0, eb1 - eb0)
    return J.T @ hess @ J


def edge_edge_distance(
    ea0: np.ndarray,
    ea1: np.ndarray,
    eb0: np.ndarray,
    eb1: np.ndarray,
    dtype: EdgeEdgeDistanceType | None = None,
) -> float:
    _check_dim(ea0)
    if dtype is None:
        dtype = edge_edge_distance_type(ea0, ea1, eb0, eb1)
    if dtype is EdgeEdgeDistanceType.EA_EB:
        return line_line_distance(ea0, ea1, eb0, eb1)
    pts = (ea0, ea1, eb0, eb1)
    slots = _SUB_CASES[dtype]
    if len(slots) == 2:
        return point_point_distance(*(pts[s] for s in slots))
    return point_line_distance(*(pts[s] for s in slots))


def edge_edge_distance_gradient(
    ea0: np.ndarray,
    ea1: np.ndarray,
    eb0: np.ndarray,
    eb1: np.ndarray,
    dtype: EdgeEdgeDistanceType | None = None,
) -> np.ndarray:
    _check_dim(ea0)
    if dtype is None:
        dtype = edge_edge_distance_type(ea0, ea1, eb0, eb1)
    if dtype is EdgeEdgeDistanceType.EA_EB:
        return line_line_distance_gradient(ea0, ea1, eb0, eb1)
    pts = (ea0, ea1, eb0, eb1)
    slots = _SUB_CASES[dtype]
    if len(slots) == 2:
        local = point_point_distance_gradient(*(pts[s] for s in slots))
    else:
        local = point_line_distance_gradient(*(pts[s] for s in slots))
    return scatter_gradient(local, slots, 4, 3)


def edge_edge_distance_hessian(
    ea0: np.ndarray,
    ea1: np.ndarray,
    eb0: np.ndarray,
    eb1: np.ndarray,
    dtype: EdgeEdgeDistanceType | None = None,
) -> np.ndarray:
    _check_dim(ea0)
    if dtype is None:
        dtype = edge_edge_distance_type(ea0, ea1, eb0, eb1)
    if dtype is EdgeEdgeDistanceType.EA_EB:
        return line_line_distance_hessian(ea0, ea1, eb0, eb1)
    pts = (ea0, ea1, eb0, eb1)
    slots = _SUB_CASES[dtype]
    if len(slots) == 2:
        local = point_point_distance_hessian(*(pts[s] for s in slots))
    else:
        local = point_line_distance_hessian(*(pts[s] for s in slots))
    return scatter_hessian(local, slots, 4, 3)


__all__ = [
    "line_line_distance",
    "edge_edge_distance",
    "edge_edge_distance_gradient",
    "edge_edge_distance_hessian",
]
