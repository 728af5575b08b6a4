"""Mollifier for nearly parallel edge-edge pairs (3D only).

The edge-edge distance gradient degenerates as the two edges become
parallel. The potential of such a pair is multiplied by a C1 weight

    m(x) = (2 - x / eps_x) * x / eps_x   for x < eps_x,   1 otherwise,

of the squared norm ``x = |(ea1 - ea0) x (eb1 - eb0)|^2``, which drives the
contribution smoothly to zero at exact parallelism. Gradients and Hessians
are w.r.t. ``[ea0, ea1, eb0, eb1]``.
"""

from __future__ import annotations

import numpy as np

from core.exceptions import UnsupportedDimensionError
from core.linalg import stencil_map
from geometry.distance_derivatives import cross_squarednorm_terms

# u = ea1 - ea0, v = eb1 - eb0
_CROSS_COEFFS = [[-1.0, 1.0, 0.0, 0.0], [0.0, 0.0, -1.0, 1.0]]

DEFAULT_THRESHOLD_SCALE = 1e-3


def _check_dim(ea0: np.ndarray) -> None:
    if ea0.shape[0] != 3:
        raise UnsupportedDimensionError("edge_edge_mollifier", ea0.shape[0], (3,))


def mollifier(x: float, eps_x: float) -> float:
    if x < eps_x:
        x_div = x / eps_x
        return (2.0 - x_div) * x_div
    return 1.0


def mollifier_gradient(x: float, eps_x: float) -> float:
    if x < eps_x:
        return 2.0 * (1.0 - x / eps_x) / eps_x
    return 0.0


def mollifier_hessian(x: float, eps_x: float) -> float:
    if x < eps_x:
        return -2.0 / (eps_x * eps_x)
    return 0.0


def edge_edge_cross_squarednorm(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> float:
    cross = np.cross(ea1 - ea0, eb1 - eb0)
    return float(cross @ cross)


def edge_edge_cross_squarednorm_gradient(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> np.ndarray:
    _, grad, _ = cross_squarednorm_terms(ea1 - ea0, eb1 - eb0)
    return stencil_map(_CROSS_COEFFS, 3).T @ grad


def edge_edge_cross_squarednorm_hessian(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray
) -> np.ndarray:
    J = stencil_map(_CROSS_COEFFS, 3)
    _, _, hess = cross_squarednorm_terms(ea1 - ea0, eb1 - eb0)
    return J.T @ hess @ J


def edge_edge_mollifier(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray, eps_x: float
) -> float:
    _check_dim(ea0)
    return mollifier(edge_edge_cross_squarednorm(ea0, ea1, eb0, eb1), eps_x)


def edge_edge_mollifier_gradient(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray, eps_x: float
) -> np.ndarray:
    _check_dim(ea0)
    x = edge_edge_cross_squarednorm(ea0, ea1, eb0, eb1)
    if x >= eps_x:
        return np.zeros(12, dtype=float)
    return mollifier_gradient(x, eps_x) * edge_edge_cross_squarednorm_gradient(
        ea0, ea1, eb0, eb1
    )


def edge_edge_mollifier_hessian(
    ea0: np.ndarray, ea1: np.ndarray, eb0: np.ndarray, eb1: np.ndarray, eps_x: float
) -> np.ndarray:
    _check_dim(ea0)
    x = edge_edge_cross_squarednorm(ea0, ea1, eb0, eb1)
    if x >= eps_x:
        return np.zeros((12, 12), dtype=float)
    grad_x = edge_edge_cross_squarednorm_gradient(ea0, ea1, eb0, eb1)
    hess_x = edge_edge_cross_squarednorm_hessian(ea0, ea1, eb0, eb1)
    return mollifier_hessian(x, eps_x) * np.outer(
        grad_x, grad_x
    ) + mollifier_gradient(x, eps_x) * hess_x


def edge_edge_mollifier_threshold(
    ea0_rest: np.ndarray,
    ea1_rest: np.ndarray,
    eb0_rest: np.ndarray,
    eb1_rest: np.ndarray,
    scale: float = DEFAULT_THRESHOLD_SCALE,
) -> float:
    """Return ``eps_x`` from the rest lengths of the two edges."""
    len_a = ea1_rest - ea0_rest
    len_b = eb1_rest - eb0_rest
    return scale * float(len_a @ len_a) * float(len_b @ len_b)


__all__ = [
    "edge_edge_cross_squarednorm",
    "edge_edge_mollifier",
    "edge_edge_mollifier_gradient",
    "edge_edge_mollifier_hessian",
    "edge_edge_mollifier_threshold",
]
