"""Point-plane collision constraint (2D lines or 3D planes)."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from geometry.distance.point_plane import (
    point_plane_distance,
    point_plane_distance_gradient,
    point_plane_distance_hessian,
)
from modules.constraints.base import CollisionConstraint, ConstraintKind


@dataclass(frozen=True, eq=False)
class PlaneVertexConstraint(CollisionConstraint):
    """A vertex approaching a fixed analytic plane.

    The plane is not part of the mesh, so the stencil is the single vertex
    and derivatives have ``dim`` entries. The normal is normalised on
    construction; origin and normal are stored as read-only arrays.
    """

    kind = ConstraintKind.PLANE_VERTEX
    num_vertices = 1

    plane_origin: np.ndarray
    plane_normal: np.ndarray
    vertex_index: int

    def __post_init__(self) -> None:
        origin = np.array(self.plane_origin, dtype=float).reshape(-1)
        normal = np.array(self.plane_normal, dtype=float).reshape(-1)
        if origin.shape != normal.shape or origin.shape[0] not in (2, 3):
            raise ValueError(
                "plane origin and normal must both have dimension 2 or 3; "
                f"got {origin.shape[0]} and {normal.shape[0]}"
            )
        norm = float(np.linalg.norm(normal))
        if norm < 1e-15:
            raise ValueError("plane normal must be non-zero")
        normal /= norm
        origin.setflags(write=False)
        normal.setflags(write=False)
        object.__setattr__(self, "plane_origin", origin)
        object.__setattr__(self, "plane_normal", normal)

    @property
    def dim(self) -> int:
        return self.plane_origin.shape[0]

    def vertex_indices(self, E=None, F=None) -> np.ndarray:
        return np.array([self.vertex_index], dtype=int)

    def compute_distance(self, V, E=None, F=None) -> float:
        (p,) = self.stencil_positions(V, E, F)
        return point_plane_distance(p, self.plane_origin, self.plane_normal)

    def compute_distance_gradient(self, V, E=None, F=None) -> np.ndarray:
        (p,) = self.stencil_positions(V, E, F)
        return point_plane_distance_gradient(p, self.plane_origin, self.plane_normal)

    def compute_distance_hessian(self, V, E=None, F=None) -> np.ndarray:
        (p,) = self.stencil_positions(V, E, F)
        return point_plane_distance_hessian(p, self.plane_origin, self.plane_normal)


__all__ = ["PlaneVertexConstraint"]
