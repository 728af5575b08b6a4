"""Barrier potential summed over a constraint set.

The sums here stop at per-constraint blocks: the potential is a scalar sum,
the gradient is scattered into a dense array shaped like ``V``, and Hessians
are returned as local ``(vertex_ids, block)`` pairs for the caller's own
sparse assembly.
"""

from __future__ import annotations

import logging

import numpy as np

from runtime.constraint_set import Constraints

logger = logging.getLogger("ipc_potentials")


def compute_barrier_potential(
    constraints: Constraints,
    V: np.ndarray,
    E: np.ndarray,
    F: np.ndarray,
    dhat: float,
    *,
    minimum_distance: float = 0.0,
) -> float:
    energy = 0.0
    for constraint in constraints:
        energy += constraint.compute_potential(
            V, E, F, dhat, minimum_distance=minimum_distance
        )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Barrier potential over %d constraints: %.6e", constraints.size(), energy
        )
    return float(energy)


def compute_barrier_potential_gradient(
    constraints: Constraints,
    V: np.ndarray,
    E: np.ndarray,
    F: np.ndarray,
    dhat: float,
    *,
    minimum_distance: float = 0.0,
) -> np.ndarray:
    """Gradient of :func:`compute_barrier_potential`, shaped like ``V``."""
    V = np.asarray(V, dtype=float)
    dim = V.shape[1]
    grad = np.zeros_like(V)
    for constraint in constraints:
        local = constraint.compute_potential_gradient(
            V, E, F, dhat, minimum_distance=minimum_distance
        )
        ids = constraint.vertex_indices(E, F)
        np.add.at(grad, ids, local.reshape(len(ids), dim))
    return grad


def compute_local_hessians(
    constraints: Constraints,
    V: np.ndarray,
    E: np.ndarray,
    F: np.ndarray,
    dhat: float,
    project_hessian_to_psd: bool = False,
    *,
    minimum_distance: float = 0.0,
) -> list[tuple[np.ndarray, np.ndarray]]:
    """Per-constraint Hessian blocks paired with their stencil vertex ids."""
    blocks = []
    for constraint in constraints:
        hess = constraint.compute_potential_hessian(
            V,
            E,
            F,
            dhat,
            project_hessian_to_psd,
            minimum_distance=minimum_distance,
        )
        blocks.append((constraint.vertex_indices(E, F), hess))
    return blocks


def compute_energy_and_gradient(
    constraints: Constraints,
    V: np.ndarray,
    E: np.ndarray,
    F: np.ndarray,
    global_params,
    *,
    compute_gradient: bool = True,
) -> tuple[float, np.ndarray | None]:
    """Barrier energy (and gradient) using ``dhat``/``minimum_distance`` from ``global_params``."""
    dhat = float(global_params.get("dhat"))
    minimum_distance = float(global_params.get("minimum_distance", 0.0) or 0.0)

    energy = compute_barrier_potential(
        constraints, V, E, F, dhat, minimum_distance=minimum_distance
    )
    if not compute_gradient:
        return energy, None

    grad = compute_barrier_potential_gradient(
        constraints, V, E, F, dhat, minimum_distance=minimum_distance
    )
    return energy, grad


def compute_hessian_blocks(
    constraints: Constraints,
    V: np.ndarray,
    E: np.ndarray,
    F: np.ndarray,
    global_params,
) -> list[tuple[np.ndarray, np.ndarray]]:
    """Local Hessian blocks configured by ``global_params``.

    Reads ``dhat``, ``minimum_distance`` and ``project_hessian_to_psd``.
    """
    dhat = float(global_params.get("dhat"))
    minimum_distance = float(global_params.get("minimum_distance", 0.0) or 0.0)
    project = bool(global_params.get("project_hessian_to_psd", False))

    return compute_local_hessians(
        constraints,
        V,
        E,
        F,
        dhat,
        project,
        minimum_distance=minimum_distance,
    )


__all__ = [
    "compute_barrier_potential",
    "compute_barrier_potential_gradient",
    "compute_local_hessians",
    "compute_energy_and_gradient",
    "compute_hessian_blocks",
]
