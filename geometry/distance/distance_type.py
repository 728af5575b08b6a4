"""Closest-feature classification for primitive pairs.

The analytic distance derivatives differ depending on which sub-features
(vertex, edge interior, face interior) realise the closest points. The
classifiers below pick that sub-case from the current positions.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from core.exceptions import UnsupportedDimensionError

# Threshold on |u x v|^2 / (|u|^2 |v|^2) below which two edges count as parallel.
PARALLEL_THRESHOLD = 1e-20


class PointEdgeDistanceType(Enum):
    P_E0 = "P_E0"  # point to the first edge vertex
    P_E1 = "P_E1"  # point to the second edge vertex
    P_E = "P_E"  # point to the edge interior


class PointTriangleDistanceType(Enum):
    P_T0 = "P_T0"
    P_T1 = "P_T1"
    P_T2 = "P_T2"
    P_E0 = "P_E0"  # edge t0-t1
    P_E1 = "P_E1"  # edge t1-t2
    P_E2 = "P_E2"  # edge t2-t0
    P_T = "P_T"  # point to the face interior


class EdgeEdgeDistanceType(Enum):
    EA0_EB0 = "EA0_EB0"
    EA0_EB1 = "EA0_EB1"
    EA1_EB0 = "EA1_EB0"
    EA1_EB1 = "EA1_EB1"
    EA_EB0 = "EA_EB0"  # eb0 to the interior of edge a
    EA_EB1 = "EA_EB1"
    EA0_EB = "EA0_EB"  # ea0 to the interior of edge b
    EA1_EB = "EA1_EB"
    EA_EB = "EA_EB"  # interior to interior


def point_edge_distance_type(
    p: np.ndarray, e0: np.ndarray, e1: np.ndarray
) -> PointEdgeDistanceType:
    """Classify the closest feature of edge ``(e0, e1)`` to point ``p``."""
    e = e1 - e0
    length_sq = float(e @ e)
    if length_sq == 0.0:
        return PointEdgeDistanceType.P_E0
    ratio = float(e @ (p - e0)) / length_sq
    if ratio < 0.0:
        return PointEdgeDistanceType.P_E0
    if ratio > 1.0:
        return PointEdgeDistanceType.P_E1
    return PointEdgeDistanceType.P_E


def _edge_side_params(
    p: np.ndarray, origin: np.ndarray, edge: np.ndarray, normal: np.ndarray
) -> np.ndarray:
    """Coordinates of ``p - origin`` along ``edge`` and its in-plane outward normal."""
    basis = np.vstack([edge, np.cross(edge, normal)])
    return np.linalg.solve(basis @ basis.T, basis @ (p - origin))


def point_triangle_distance_type(
    p: np.ndarray, t0: np.ndarray, t1: np.ndarray, t2: np.ndarray
) -> PointTriangleDistanceType:
    """Classify the closest feature of triangle ``(t0, t1, t2)`` to ``p``."""
    if p.shape[0] != 3:
        raise UnsupportedDimensionError("point_triangle_distance_type", p.shape[0], (3,))

    normal = np.cross(t1 - t0, t2 - t0)

    param0 = _edge_side_params(p, t0, t1 - t0, normal)
    if 0.0 < param0[0] < 1.0 and param0[1] >= 0.0:
        return PointTriangleDistanceType.P_E0

    param1 = _edge_side_params(p, t1, t2 - t1, normal)
    if 0.0 < param1[0] < 1.0 and param1[1] >= 0.0:
        return PointTriangleDistanceType.P_E1

    param2 = _edge_side_params(p, t2, t0 - t2, normal)
    if 0.0 < param2[0] < 1.0 and param2[1] >= 0.0:
        return PointTriangleDistanceType.P_E2

    if param0[0] <= 0.0 and param2[0] >= 1.0:
        return PointTriangleDistanceType.P_T0
    if param1[0] <= 0.0 and param0[0] >= 1.0:
        return PointTriangleDistanceType.P_T1
    if param2[0] <= 0.0 and param1[0] >= 1.0:
        return PointTriangleDistanceType.P_T2
    return PointTriangleDistanceType.P_T


def _point_segment_sqdist(p: np.ndarray, e0: np.ndarray, e1: np.ndarray) -> float:
    e = e1 - e0
    length_sq = float(e @ e)
    t = 0.0 if length_sq == 0.0 else float(e @ (p - e0)) / length_sq
    t = min(max(t, 0.0), 1.0)
    diff = p - (e0 + t * e)
    return float(diff @ diff)


_PARALLEL_CASES = (
    # (endpoint, closest feature on the other edge -> edge-edge type)
    (
        "ea0",
        {
            PointEdgeDistanceType.P_E0: EdgeEdgeDistanceType.EA0_EB0,
            PointEdgeDistanceType.P_E1: EdgeEdgeDistanceType.EA0_EB1,
            PointEdgeDistanceType.P_E: EdgeEdgeDistanceType.EA0_EB,
        },
    ),
    (
        "ea1",
        {
            PointEdgeDistanceType.P_E0: EdgeEdgeDistanceType.EA1_EB0,
            PointEdgeDistanceType.P_E1: EdgeEdgeDistanceType.EA1_EB1,
            PointEdgeDistanceType.P_E: EdgeEdgeDistanceType.EA1_EB,
        },
    ),
    (
        "eb0",
        {
            PointEdgeDistanceType.P_E0: EdgeEdgeDistanceType.EA0_EB0,
            PointEdgeDistanceType.P_E1: EdgeEdgeDistanceType.EA1_EB0,
            PointEdgeDistanceType.P_E: EdgeEdgeDistanceType.EA_EB0,
        },
    ),
    (
        "eb1",
        {
            PointEdgeDistanceType.P_E0: EdgeEdgeDistanceType.EA0_EB1,
            PointEdgeDistanceType.P_E1: EdgeEdgeDistanceType.EA1_EB1,
            PointEdgeDistanceType.P_E: EdgeEdgeDistanceType.EA_EB1,
        },
    ),
)


def edge_edge_parallel_distance_type(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> EdgeEdgeDistanceType:
    """Classify a (near) parallel edge pair by its closest endpoint-edge pair."""
    points = {"ea0": ea0, "ea1": ea1, "eb0": eb0, "eb1": eb1}
    best_type = EdgeEdgeDistanceType.EA0_EB0
    best_dist = np.inf
    for point_name, mapping in _PARALLEL_CASES:
        p = points[point_name]
        e0, e1 = (eb0, eb1) if point_name.startswith("ea") else (ea0, ea1)
        dist = _point_segment_sqdist(p, e0, e1)
        if dist < best_dist:
            best_dist = dist
            best_type = mapping[point_edge_distance_type(p, e0, e1)]
    return best_type


def edge_edge_distance_type(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> EdgeEdgeDistanceType:
    """Classify the closest features of edges ``(ea0, ea1)`` and ``(eb0, eb1)``."""
    if ea0.shape[0] != 3:
        raise UnsupportedDimensionError("edge_edge_distance_type", ea0.shape[0], (3,))

    u = ea1 - ea0
    v = eb1 - eb0
    w = ea0 - eb0

    a = float(u @ u)
    b = float(u @ v)
    c = float(v @ v)
    d = float(u @ w)
    e = float(v @ w)
    D = a * c - b * b

    # Degenerate edges
    if a == 0.0 and c == 0.0:
        return EdgeEdgeDistanceType.EA0_EB0
    if a == 0.0:
        return EdgeEdgeDistanceType.EA0_EB
    if c == 0.0:
        return EdgeEdgeDistanceType.EA_EB0

    cross = np.cross(u, v)
    if float(cross @ cross) < PARALLEL_THRESHOLD * a * c:
        return edge_edge_parallel_distance_type(ea0, ea1, eb0, eb1)

    default_case = EdgeEdgeDistanceType.EA_EB
    sN = b * e - c * d
    if sN <= 0.0:
        tN, tD = e, c
        default_case = EdgeEdgeDistanceType.EA0_EB
    elif sN >= D:
        tN, tD = e + b, c
        default_case = EdgeEdgeDistanceType.EA1_EB
    else:
        tN, tD = a * e - b * d, D

    if tN <= 0.0:
        if -d <= 0.0:
            return EdgeEdgeDistanceType.EA0_EB0
        if -d >= a:
            return EdgeEdgeDistanceType.EA1_EB0
        return EdgeEdgeDistanceType.EA_EB0
    if tN >= tD:
        if b - d <= 0.0:
            return EdgeEdgeDistanceType.EA0_EB1
        if b - d >= a:
            return EdgeEdgeDistanceType.EA1_EB1
        return EdgeEdgeDistanceType.EA_EB1
    return default_case


__all__ = [
    "PointEdgeDistanceType",
    "PointTriangleDistanceType",
    "EdgeEdgeDistanceType",
    "point_edge_distance_type",
    "point_triangle_distance_type",
    "edge_edge_distance_type",
    "edge_edge_parallel_distance_type",
]
