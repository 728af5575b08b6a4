"""Point-edge collision constraint."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from geometry.distance.distance_type import PointEdgeDistanceType
from geometry.distance.point_edge import (
    point_edge_distance,
    point_edge_distance_gradient,
    point_edge_distance_hessian,
)
from modules.constraints.base import (
    CollisionConstraint,
    ConstraintKind,
    check_multiplicity,
)


@dataclass(frozen=True)
class EdgeVertexConstraint(CollisionConstraint):
    """A vertex closest to the interior of an edge.

    The pair only becomes a constraint once the closest point is known to lie
    inside the edge, so the point-edge distance is always evaluated as
    ``P_E``. Stencil order is ``[vertex, edge start, edge end]``.
    """

    kind = ConstraintKind.EDGE_VERTEX
    num_vertices = 3

    edge_index: int
    vertex_index: int
    multiplicity: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "multiplicity", check_multiplicity(self.multiplicity))

    def vertex_indices(self, E, F=None) -> np.ndarray:
        edge = E[self.edge_index]
        return np.array([self.vertex_index, edge[0], edge[1]], dtype=int)

    def compute_distance(self, V, E, F=None) -> float:
        return point_edge_distance(
            *self.stencil_positions(V, E, F), PointEdgeDistanceType.P_E
        )

    def compute_distance_gradient(self, V, E, F=None) -> np.ndarray:
        return point_edge_distance_gradient(
            *self.stencil_positions(V, E, F), PointEdgeDistanceType.P_E
        )

    def compute_distance_hessian(self, V, E, F=None) -> np.ndarray:
        return point_edge_distance_hessian(
            *self.stencil_positions(V, E, F), PointEdgeDistanceType.P_E
        )


__all__ = ["EdgeVertexConstraint"]
