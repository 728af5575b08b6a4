"""Point-point collision constraint."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from geometry.distance.point_point import (
    point_point_distance,
    point_point_distance_gradient,
    point_point_distance_hessian,
)
from modules.constraints.base import (
    CollisionConstraint,
    ConstraintKind,
    check_multiplicity,
)


@dataclass(frozen=True)
class VertexVertexConstraint(CollisionConstraint):
    """Two vertices closer than ``dhat``.

    ``multiplicity`` counts coincident geometric constraints collapsed onto
    this pair (e.g. a vertex touching several edges at a shared endpoint).
    """

    kind = ConstraintKind.VERTEX_VERTEX
    num_vertices = 2

    vertex0_index: int
    vertex1_index: int
    multiplicity: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "multiplicity", check_multiplicity(self.multiplicity))

    def vertex_indices(self, E=None, F=None) -> np.ndarray:
        return np.array([self.vertex0_index, self.vertex1_index], dtype=int)

    def compute_distance(self, V, E=None, F=None) -> float:
        return point_point_distance(*self.stencil_positions(V, E, F))

    def compute_distance_gradient(self, V, E=None, F=None) -> np.ndarray:
        return point_point_distance_gradient(*self.stencil_positions(V, E, F))

    def compute_distance_hessian(self, V, E=None, F=None) -> np.ndarray:
        return point_point_distance_hessian(*self.stencil_positions(V, E, F))


__all__ = ["VertexVertexConstraint"]
