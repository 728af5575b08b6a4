"""Mollified edge-edge collision constraint (3D only).

The potential of an edge pair is ``m(x) * B(d(x))`` where ``m`` is the
edge-edge mollifier and ``B`` the barrier composition from
:mod:`modules.constraints.base`. The mollifier removes the singular distance
gradient of nearly parallel edges; because a mollified pair may actually be
closest at an endpoint, the distance type is re-classified on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from core.linalg import project_to_psd
from geometry.distance.distance_type import edge_edge_distance_type
from geometry.distance.edge_edge import (
    edge_edge_distance,
    edge_edge_distance_gradient,
    edge_edge_distance_hessian,
)
from geometry.distance.edge_edge_mollifier import (
    DEFAULT_THRESHOLD_SCALE,
    edge_edge_mollifier,
    edge_edge_mollifier_gradient,
    edge_edge_mollifier_hessian,
    edge_edge_mollifier_threshold,
)
from modules.barrier import barrier, barrier_gradient, barrier_hessian
from modules.constraints.base import (
    CollisionConstraint,
    ConstraintKind,
    compute_potential_common,
    compute_potential_gradient_common,
)

logger = logging.getLogger("ipc_potentials")


@dataclass(frozen=True)
class EdgeEdgeConstraint(CollisionConstraint):
    """Two edges closer than ``dhat``.

    ``eps_x`` is the mollifier threshold, fixed from the rest shape (see
    :meth:`from_rest_positions`). Stencil order is ``[ea0, ea1, eb0, eb1]``.
    """

    kind = ConstraintKind.EDGE_EDGE
    num_vertices = 4

    edge0_index: int
    edge1_index: int
    eps_x: float

    def __post_init__(self) -> None:
        if not float(self.eps_x) > 0.0:
            raise ValueError(f"eps_x must be positive; got {self.eps_x}")

    @classmethod
    def from_rest_positions(
        cls,
        edge0_index: int,
        edge1_index: int,
        V_rest: np.ndarray,
        E: np.ndarray,
        scale: float = DEFAULT_THRESHOLD_SCALE,
    ) -> "EdgeEdgeConstraint":
        """Build a constraint with ``eps_x`` derived from rest edge lengths."""
        ea = E[edge0_index]
        eb = E[edge1_index]
        eps_x = edge_edge_mollifier_threshold(
            np.asarray(V_rest[ea[0]], dtype=float),
            np.asarray(V_rest[ea[1]], dtype=float),
            np.asarray(V_rest[eb[0]], dtype=float),
            np.asarray(V_rest[eb[1]], dtype=float),
            scale,
        )
        logger.debug(
            "Edge-edge mollifier threshold for edges (%d, %d): %.3e",
            edge0_index,
            edge1_index,
            eps_x,
        )
        return cls(edge0_index, edge1_index, eps_x)

    def vertex_indices(self, E, F=None) -> np.ndarray:
        ea = E[self.edge0_index]
        eb = E[self.edge1_index]
        return np.array([ea[0], ea[1], eb[0], eb[1]], dtype=int)

    def compute_distance(self, V, E, F=None) -> float:
        return edge_edge_distance(*self.stencil_positions(V, E, F))

    def compute_distance_gradient(self, V, E, F=None) -> np.ndarray:
        return edge_edge_distance_gradient(*self.stencil_positions(V, E, F))

    def compute_distance_hessian(self, V, E, F=None) -> np.ndarray:
        return edge_edge_distance_hessian(*self.stencil_positions(V, E, F))

    def compute_potential(
        self,
        V: np.ndarray,
        E: np.ndarray,
        F: np.ndarray,
        dhat: float,
        *,
        minimum_distance: float = 0.0,
    ) -> float:
        ea0, ea1, eb0, eb1 = self.stencil_positions(V, E, F)
        mollifier = edge_edge_mollifier(ea0, ea1, eb0, eb1, self.eps_x)
        if mollifier == 0.0:
            return 0.0
        distance = edge_edge_distance(ea0, ea1, eb0, eb1)
        return mollifier * compute_potential_common(distance, dhat, minimum_distance)

    def compute_potential_gradient(
        self,
        V: np.ndarray,
        E: np.ndarray,
        F: np.ndarray,
        dhat: float,
        *,
        minimum_distance: float = 0.0,
    ) -> np.ndarray:
        # ∇[m(x) * b(d(x))] = ∇m(x) * b(d(x)) + m(x) * b'(d(x)) * ∇d(x)
        ea0, ea1, eb0, eb1 = self.stencil_positions(V, E, F)

        dtype = edge_edge_distance_type(ea0, ea1, eb0, eb1)
        distance = edge_edge_distance(ea0, ea1, eb0, eb1, dtype)
        distance_grad = edge_edge_distance_gradient(ea0, ea1, eb0, eb1, dtype)

        mollifier = edge_edge_mollifier(ea0, ea1, eb0, eb1, self.eps_x)
        mollifier_grad = edge_edge_mollifier_gradient(ea0, ea1, eb0, eb1, self.eps_x)

        b = compute_potential_common(distance, dhat, minimum_distance)
        barrier_distance_grad = compute_potential_gradient_common(
            distance, distance_grad, dhat, minimum_distance
        )
        return mollifier_grad * b + mollifier * barrier_distance_grad

    def compute_potential_hessian(
        self,
        V: np.ndarray,
        E: np.ndarray,
        F: np.ndarray,
        dhat: float,
        project_hessian_to_psd: bool = False,
        *,
        minimum_distance: float = 0.0,
    ) -> np.ndarray:
        # ∇²[m(x) * b(d(x))] = ∇²m(x) * b(d(x))
        #                      + b'(d(x)) * [∇d(x) * ∇m(x)ᵀ + ∇m(x) * ∇d(x)ᵀ]
        #                      + m(x) * [b"(d(x)) * ∇d(x) * ∇d(x)ᵀ + b'(d(x)) * ∇²d(x)]
        ea0, ea1, eb0, eb1 = self.stencil_positions(V, E, F)

        dtype = edge_edge_distance_type(ea0, ea1, eb0, eb1)
        distance = edge_edge_distance(ea0, ea1, eb0, eb1, dtype)
        distance_grad = edge_edge_distance_gradient(ea0, ea1, eb0, eb1, dtype)
        distance_hess = edge_edge_distance_hessian(ea0, ea1, eb0, eb1, dtype)

        mollifier = edge_edge_mollifier(ea0, ea1, eb0, eb1, self.eps_x)
        mollifier_grad = edge_edge_mollifier_gradient(ea0, ea1, eb0, eb1, self.eps_x)
        mollifier_hess = edge_edge_mollifier_hessian(ea0, ea1, eb0, eb1, self.eps_x)

        arg = distance - minimum_distance * minimum_distance
        threshold = 2.0 * minimum_distance * dhat + dhat * dhat
        b = barrier(arg, threshold)
        grad_b = barrier_gradient(arg, threshold)
        hess_b = barrier_hessian(arg, threshold)

        cross = np.outer(distance_grad, mollifier_grad)
        hess = (
            mollifier_hess * b
            + grad_b * (cross + cross.T)
            + mollifier
            * (hess_b * np.outer(distance_grad, distance_grad) + grad_b * distance_hess)
        )

        # Cross terms are not sign-definite, so project the whole sum.
        if project_hessian_to_psd:
            hess = project_to_psd(hess)
        return hess


__all__ = ["EdgeEdgeConstraint"]
