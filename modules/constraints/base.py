# modules/constraints/base.py
"""Barrier composition shared by all collision constraints.

A collision constraint identifies a pair of mesh primitives and turns their
squared distance ``d`` into the barrier potential

    B(d) = b(d - dmin^2, 2 * dmin * dhat + dhat^2)

where ``b`` is :func:`modules.barrier.barrier` and ``dmin`` the minimum
distance. Nothing numeric is cached on a constraint: every call pulls the
current positions out of ``V`` through the stored indices.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from numbers import Integral
from typing import ClassVar

import numpy as np

from core.linalg import project_to_psd
from modules.barrier import barrier, barrier_gradient, barrier_hessian


class ConstraintKind(Enum):
    VERTEX_VERTEX = "vertex_vertex"
    EDGE_VERTEX = "edge_vertex"
    EDGE_EDGE = "edge_edge"
    FACE_VERTEX = "face_vertex"
    PLANE_VERTEX = "plane_vertex"


def check_multiplicity(multiplicity) -> int:
    """Return ``multiplicity`` as an ``int``; it must be an integer of at least 1."""
    if isinstance(multiplicity, bool) or not isinstance(multiplicity, Integral):
        raise ValueError(f"multiplicity must be an integer; got {multiplicity!r}")
    if multiplicity < 1:
        raise ValueError(f"multiplicity must be at least 1; got {multiplicity}")
    return int(multiplicity)


def _barrier_arguments(
    distance: float, dhat: float, minimum_distance: float
) -> tuple[float, float]:
    return (
        distance - minimum_distance * minimum_distance,
        2.0 * minimum_distance * dhat + dhat * dhat,
    )


def compute_potential_common(
    distance: float, dhat: float, minimum_distance: float = 0.0
) -> float:
    """Barrier value for a squared ``distance``."""
    return barrier(*_barrier_arguments(distance, dhat, minimum_distance))


def compute_potential_gradient_common(
    distance: float,
    distance_grad: np.ndarray,
    dhat: float,
    minimum_distance: float = 0.0,
) -> np.ndarray:
    # ∇b(d(x)) = b'(d(x)) * ∇d(x)
    grad_b = barrier_gradient(*_barrier_arguments(distance, dhat, minimum_distance))
    return grad_b * distance_grad


def compute_potential_hessian_common(
    distance: float,
    distance_grad: np.ndarray,
    distance_hess: np.ndarray,
    dhat: float,
    project_hessian_to_psd: bool = False,
    minimum_distance: float = 0.0,
) -> np.ndarray:
    # ∇²b(d(x)) = b"(d(x)) * ∇d(x) * ∇d(x)ᵀ + b'(d(x)) * ∇²d(x)
    args = _barrier_arguments(distance, dhat, minimum_distance)
    grad_b = barrier_gradient(*args)
    hess_b = barrier_hessian(*args)

    # b" ≥ 0 keeps the outer-product term PSD; only the second term needs projecting.
    assert hess_b >= 0, f"barrier Hessian must be non-negative, got {hess_b}"

    curvature = grad_b * distance_hess
    if project_hessian_to_psd:
        curvature = project_to_psd(curvature)
    return hess_b * np.outer(distance_grad, distance_grad) + curvature


class CollisionConstraint(ABC):
    """Interface shared by the five collision constraint variants.

    Subclasses provide the stencil (:meth:`vertex_indices`) and the squared
    distance with its derivatives; the potential operations compose those
    with the barrier and scale by :attr:`multiplicity`.
    """

    kind: ClassVar[ConstraintKind]
    num_vertices: ClassVar[int]

    @property
    def multiplicity(self) -> int:
        return 1

    @abstractmethod
    def vertex_indices(self, E: np.ndarray, F: np.ndarray) -> np.ndarray:
        """Mesh vertex ids of the local stencil, in derivative order."""

    def stencil_positions(
        self, V: np.ndarray, E: np.ndarray, F: np.ndarray
    ) -> list[np.ndarray]:
        return [np.asarray(V[i], dtype=float) for i in self.vertex_indices(E, F)]

    @abstractmethod
    def compute_distance(self, V: np.ndarray, E: np.ndarray, F: np.ndarray) -> float:
        """Squared distance between the two primitives."""

    @abstractmethod
    def compute_distance_gradient(
        self, V: np.ndarray, E: np.ndarray, F: np.ndarray
    ) -> np.ndarray:
        """Gradient of :meth:`compute_distance` w.r.t. the stencil."""

    @abstractmethod
    def compute_distance_hessian(
        self, V: np.ndarray, E: np.ndarray, F: np.ndarray
    ) -> np.ndarray:
        """Hessian of :meth:`compute_distance` w.r.t. the stencil."""

    def compute_potential(
        self,
        V: np.ndarray,
        E: np.ndarray,
        F: np.ndarray,
        dhat: float,
        *,
        minimum_distance: float = 0.0,
    ) -> float:
        distance = self.compute_distance(V, E, F)
        return self.multiplicity * compute_potential_common(
            distance, dhat, minimum_distance
        )

    def compute_potential_gradient(
        self,
        V: np.ndarray,
        E: np.ndarray,
        F: np.ndarray,
        dhat: float,
        *,
        minimum_distance: float = 0.0,
    ) -> np.ndarray:
        # ∇[m * b(d(x))] = m * b'(d(x)) * ∇d(x)
        distance = self.compute_distance(V, E, F)
        distance_grad = self.compute_distance_gradient(V, E, F)
        return self.multiplicity * compute_potential_gradient_common(
            distance, distance_grad, dhat, minimum_distance
        )

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
        # ∇²[m * b(d(x))] = m * [b"(d(x)) * ∇d(x) * ∇d(x)ᵀ + b'(d(x)) * ∇²d(x)]
        distance = self.compute_distance(V, E, F)
        distance_grad = self.compute_distance_gradient(V, E, F)
        distance_hess = self.compute_distance_hessian(V, E, F)
        return self.multiplicity * compute_potential_hessian_common(
            distance,
            distance_grad,
            distance_hess,
            dhat,
            project_hessian_to_psd,
            minimum_distance,
        )


__all__ = [
    "CollisionConstraint",
    "ConstraintKind",
    "check_multiplicity",
    "compute_potential_common",
    "compute_potential_gradient_common",
    "compute_potential_hessian_common",
]
