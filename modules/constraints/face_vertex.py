"""Point-triangle collision constraint."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from geometry.distance.distance_type import PointTriangleDistanceType
from geometry.distance.point_triangle import (
    point_triangle_distance,
    point_triangle_distance_gradient,
    point_triangle_distance_hessian,
)
from modules.constraints.base import CollisionConstraint, ConstraintKind


@dataclass(frozen=True)
class FaceVertexConstraint(CollisionConstraint):
    """A vertex whose closest point lies inside a triangle (``P_T``)."""

    kind = ConstraintKind.FACE_VERTEX
    num_vertices = 4

    face_index: int
    vertex_index: int

    def vertex_indices(self, E, F) -> np.ndarray:
        face = F[self.face_index]
        return np.array([self.vertex_index, face[0], face[1], face[2]], dtype=int)

    def compute_distance(self, V, E, F) -> float:
        return point_triangle_distance(
            *self.stencil_positions(V, E, F), PointTriangleDistanceType.P_T
        )

    def compute_distance_gradient(self, V, E, F) -> np.ndarray:
        return point_triangle_distance_gradient(
            *self.stencil_positions(V, E, F), PointTriangleDistanceType.P_T
        )

    def compute_distance_hessian(self, V, E, F) -> np.ndarray:
        return point_triangle_distance_hessian(
            *self.stencil_positions(V, E, F), PointTriangleDistanceType.P_T
        )


__all__ = ["FaceVertexConstraint"]
