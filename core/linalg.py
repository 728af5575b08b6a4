"""Small dense linear-algebra helpers for local constraint blocks."""

from __future__ import annotations

import numpy as np


def project_to_psd(A: np.ndarray) -> np.ndarray:
    """Project a symmetric matrix onto the positive semi-definite cone.

    Negative eigenvalues are clamped to zero and the matrix is rebuilt from
    the same eigenvectors. Matrices that are already PSD are returned
    unchanged.
    """
    A = np.asarray(A, dtype=float)
    if A.size == 0:
        return A.copy()
    # eigh only reads the lower triangle.
    eigvals, eigvecs = np.linalg.eigh(A)
    if eigvals[0] >= 0.0:
        return A.copy()
    eigvals = np.maximum(eigvals, 0.0)
    return (eigvecs * eigvals) @ eigvecs.T


def skew(w: np.ndarray) -> np.ndarray:
    """Return the cross-product matrix ``[w]x`` with ``[w]x @ a == w x a``."""
    return np.array(
        [
            [0.0, -w[2], w[1]],
            [w[2], 0.0, -w[0]],
            [-w[1], w[0], 0.0],
        ],
        dtype=float,
    )


def stencil_map(coeffs, dim: int) -> np.ndarray:
    """Expand per-point linear combination coefficients to coordinates.

    ``coeffs`` has one row per derived vector and one column per stencil
    point; the result maps the flat stencil ``[x_0, x_1, ...]`` onto the
    stacked derived vectors.
    """
    return np.kron(np.asarray(coeffs, dtype=float), np.eye(dim))


def _slot_rows(slots, dim: int) -> np.ndarray:
    return np.concatenate([np.arange(s * dim, (s + 1) * dim) for s in slots])


def scatter_gradient(local: np.ndarray, slots, n_points: int, dim: int) -> np.ndarray:
    """Place a gradient over a subset of stencil points into the full stencil."""
    out = np.zeros(n_points * dim, dtype=float)
    out[_slot_rows(slots, dim)] = local
    return out


def scatter_hessian(local: np.ndarray, slots, n_points: int, dim: int) -> np.ndarray:
    """Place a Hessian over a subset of stencil points into the full stencil."""
    out = np.zeros((n_points * dim, n_points * dim), dtype=float)
    rows = _slot_rows(slots, dim)
    out[np.ix_(rows, rows)] = local
    return out


__all__ = [
    "project_to_psd",
    "skew",
    "stencil_map",
    "scatter_gradient",
    "scatter_hessian",
]
