import os
import sys

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.linalg import (
    project_to_psd,
    scatter_gradient,
    scatter_hessian,
    skew,
    stencil_map,
)


def test_psd_matrix_is_returned_unchanged():
    A = np.array([[2.0, 1.0], [1.0, 2.0]])
    out = project_to_psd(A)
    assert np.array_equal(out, A)
    assert out is not A


def test_negative_eigenvalues_are_clamped():
    A = np.diag([3.0, -1.0, 0.5])
    assert np.allclose(project_to_psd(A), np.diag([3.0, 0.0, 0.5]))


def test_projection_of_random_symmetric_matrices():
    rng = np.random.default_rng(5)
    for n in (1, 3, 6, 12):
        M = rng.normal(size=(n, n))
        A = 0.5 * (M + M.T)
        P = project_to_psd(A)
        assert np.allclose(P, P.T)
        assert np.linalg.eigvalsh(P).min() >= -1e-12 * max(1.0, np.abs(A).max())
        # Idempotent.
        assert np.allclose(project_to_psd(P), P, atol=1e-10)


def test_negative_definite_projects_to_zero():
    assert np.allclose(project_to_psd(-np.eye(4)), np.zeros((4, 4)))


def test_skew_matches_cross_product():
    w = np.array([0.3, -1.2, 2.0])
    a = np.array([1.0, 0.5, -0.7])
    assert np.allclose(skew(w) @ a, np.cross(w, a))


def test_stencil_map_and_scatter():
    J = stencil_map([[1.0, -1.0]], 2)
    assert np.array_equal(J, np.array([[1.0, 0.0, -1.0, 0.0], [0.0, 1.0, 0.0, -1.0]]))

    g = scatter_gradient(np.array([1.0, 2.0, 3.0, 4.0]), (0, 2), 3, 2)
    assert g.tolist() == [1.0, 2.0, 0.0, 0.0, 3.0, 4.0]

    H = scatter_hessian(np.ones((2, 2)), (1,), 3, 2)
    assert H.shape == (6, 6)
    assert H[2:4, 2:4].sum() == 4.0
    assert H.sum() == 4.0
