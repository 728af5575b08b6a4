"""Closed-form derivatives of the squared-distance building blocks.

Every primitive-pair distance reduces to one of two scalar fields of a few
difference vectors:

    point to line:   D(r, e) = r.r - (r.e)^2 / (e.e)
    point to plane:  G(r, u, v) = (r.n)^2 / (n.n),   n = u x v

The helpers below return value, gradient and Hessian with respect to the
stacked difference vectors. Callers pull them back onto point coordinates
with the constant linear map from ``core.linalg.stencil_map``.
"""

from __future__ import annotations

import numpy as np

from core.linalg import skew


def point_line_terms(
    r: np.ndarray, e: np.ndarray
) -> tuple[float, np.ndarray, np.ndarray]:
    """Value, gradient and Hessian of ``D(r, e)`` w.r.t. ``(r, e)``.

    ``r`` is the point relative to the line origin, ``e`` the line direction.
    Works in any dimension.
    """
    dim = r.shape[0]
    eye = np.eye(dim)
    a = float(r @ e)
    b = float(e @ e)
    a_b = a / b

    value = float(r @ r) - a * a_b

    grad = np.empty(2 * dim, dtype=float)
    grad[:dim] = 2.0 * r - 2.0 * a_b * e
    grad[dim:] = -2.0 * a_b * r + 2.0 * a_b * a_b * e

    ee = np.outer(e, e)
    er = np.outer(e, r)
    hess = np.empty((2 * dim, 2 * dim), dtype=float)
    hess[:dim, :dim] = 2.0 * eye - (2.0 / b) * ee
    h_re = -(2.0 / b) * (er + a * eye) + (4.0 * a / (b * b)) * ee
    hess[:dim, dim:] = h_re
    hess[dim:, :dim] = h_re.T
    hess[dim:, dim:] = (
        -(2.0 / b) * np.outer(r, r)
        + (4.0 * a / (b * b)) * (er + er.T)
        - (8.0 * a * a / (b * b * b)) * ee
        + 2.0 * a_b * a_b * eye
    )
    return value, grad, hess


def cross_jacobian(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Jacobian of ``u x v`` w.r.t. the stacked ``(u, v)`` (3x6)."""
    return np.hstack([-skew(v), skew(u)])


def cross_second_order(w: np.ndarray) -> np.ndarray:
    """Hessian of ``w . (u x v)`` w.r.t. ``(u, v)`` for a fixed ``w`` (6x6)."""
    out = np.zeros((6, 6), dtype=float)
    out[:3, 3:] = -skew(w)
    out[3:, :3] = skew(w)
    return out


def point_plane_terms(
    r: np.ndarray, u: np.ndarray, v: np.ndarray
) -> tuple[float, np.ndarray, np.ndarray]:
    """Value, gradient and Hessian of ``G(r, u, v)`` w.r.t. ``(r, u, v)``.

    3D only; ``u`` and ``v`` span the plane and ``r`` is the point relative
    to a point on it.
    """
    n = np.cross(u, v)
    s = float(r @ n)
    q = float(n @ n)
    s_q = s / q

    value = s * s_q

    g_r = 2.0 * s_q * n
    g_n = 2.0 * s_q * r - 2.0 * s_q * s_q * n

    jac_n = cross_jacobian(u, v)

    grad = np.empty(9, dtype=float)
    grad[:3] = g_r
    grad[3:] = jac_n.T @ g_n

    eye = np.eye(3)
    nn = np.outer(n, n)
    nr = np.outer(n, r)
    h_rr = (2.0 / q) * nn
    h_rn = (2.0 / q) * (nr + s * eye) - (4.0 * s / (q * q)) * nn
    h_nn = (
        (2.0 / q) * np.outer(r, r)
        - (4.0 * s / (q * q)) * (nr + nr.T)
        + (8.0 * s * s / (q * q * q)) * nn
        - 2.0 * s_q * s_q * eye
    )

    hess = np.empty((9, 9), dtype=float)
    hess[:3, :3] = h_rr
    h_ruv = h_rn @ jac_n
    hess[:3, 3:] = h_ruv
    hess[3:, :3] = h_ruv.T
    hess[3:, 3:] = jac_n.T @ h_nn @ jac_n + cross_second_order(g_n)
    return value, grad, hess


def cross_squarednorm_terms(
    u: np.ndarray, v: np.ndarray
) -> tuple[float, np.ndarray, np.ndarray]:
    """Value, gradient and Hessian of ``|u x v|^2`` w.r.t. ``(u, v)``."""
    n = np.cross(u, v)
    jac_n = cross_jacobian(u, v)
    value = float(n @ n)
    grad = 2.0 * (jac_n.T @ n)
    hess = 2.0 * (jac_n.T @ jac_n) + cross_second_order(2.0 * n)
    return value, grad, hess


__all__ = [
    "point_line_terms",
    "point_plane_terms",
    "cross_squarednorm_terms",
    "cross_jacobian",
    "cross_second_order",
]
