import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from modules.barrier import barrier
from modules.constraints.base import (
    ConstraintKind,
    compute_potential_common,
    compute_potential_gradient_common,
    compute_potential_hessian_common,
)
from modules.constraints.edge_vertex import EdgeVertexConstraint
from modules.constraints.plane_vertex import PlaneVertexConstraint
from modules.constraints.vertex_vertex import VertexVertexConstraint
from sample_meshes import (
    DHAT,
    EMPTY_EDGES,
    EMPTY_FACES,
    all_cases,
    central_diff_gradient,
    central_diff_jacobian,
    face_vertex_case,
    max_rel_error,
    stencil_function,
)

CASES = all_cases()
CASE_IDS = [case[0] for case in CASES]


@pytest.mark.parametrize("name, constraint, V, E, F", CASES, ids=CASE_IDS)
@pytest.mark.parametrize("minimum_distance", [0.0, 0.005])
def test_potential_gradient_matches_finite_differences(
    name, constraint, V, E, F, minimum_distance
):
    f, x0 = stencil_function(
        constraint, V, E, F, "compute_potential", DHAT, minimum_distance=minimum_distance
    )
    g, _ = stencil_function(
        constraint,
        V,
        E,
        F,
        "compute_potential_gradient",
        DHAT,
        minimum_distance=minimum_distance,
    )
    assert f(x0) > 0.0
    grad = g(x0)
    assert grad.shape == x0.shape
    assert max_rel_error(grad, central_diff_gradient(f, x0)) < 1e-5


@pytest.mark.parametrize("name, constraint, V, E, F", CASES, ids=CASE_IDS)
@pytest.mark.parametrize("minimum_distance", [0.0, 0.005])
def test_potential_hessian_matches_finite_differences(
    name, constraint, V, E, F, minimum_distance
):
    g, x0 = stencil_function(
        constraint,
        V,
        E,
        F,
        "compute_potential_gradient",
        DHAT,
        minimum_distance=minimum_distance,
    )
    hess = constraint.compute_potential_hessian(
        V, E, F, DHAT, minimum_distance=minimum_distance
    )
    assert hess.shape == (x0.size, x0.size)
    assert np.allclose(hess, hess.T, rtol=1e-10, atol=1e-10 * np.abs(hess).max())
    assert max_rel_error(hess, central_diff_jacobian(g, x0)) < 1e-5


@pytest.mark.parametrize("name, constraint, V, E, F", CASES, ids=CASE_IDS)
def test_projected_hessian_is_positive_semidefinite(name, constraint, V, E, F):
    hess = constraint.compute_potential_hessian(V, E, F, DHAT, True)
    eigvals = np.linalg.eigvalsh(hess)
    assert eigvals.min() >= -1e-10 * max(1.0, np.abs(eigvals).max())


@pytest.mark.parametrize("name, constraint, V, E, F", CASES, ids=CASE_IDS)
def test_everything_vanishes_outside_activation_distance(name, constraint, V, E, F):
    # Every sample pair is more than 1e-3 apart.
    far = 1e-3
    ids = constraint.vertex_indices(E, F)
    n = len(ids) * V.shape[1]
    assert constraint.compute_potential(V, E, F, far) == 0.0
    assert np.array_equal(
        constraint.compute_potential_gradient(V, E, F, far), np.zeros(n)
    )
    assert np.array_equal(
        constraint.compute_potential_hessian(V, E, F, far), np.zeros((n, n))
    )


def test_minimum_distance_shifts_barrier_argument():
    constraint = VertexVertexConstraint(0, 1)
    V = np.array([[0.0, 0.0, 0.0], [0.06, 0.0, 0.0]])
    md = 0.02
    expected = barrier(0.06**2 - md**2, 2.0 * md * DHAT + DHAT**2)
    value = constraint.compute_potential(
        V, EMPTY_EDGES, EMPTY_FACES, DHAT, minimum_distance=md
    )
    assert value == pytest.approx(expected)
    assert value > constraint.compute_potential(V, EMPTY_EDGES, EMPTY_FACES, DHAT)


def test_multiplicity_scales_vertex_vertex_potential():
    md = 0.5
    dhat = 0.25
    V = np.array([[0.0, 0.0, 0.0], [0.75, 0.0, 0.0]])
    constraint = VertexVertexConstraint(0, 1, multiplicity=3)

    # (0.75^2 - 0.5^2) equals the shifted activation distance exactly.
    assert (
        constraint.compute_potential(
            V, EMPTY_EDGES, EMPTY_FACES, dhat, minimum_distance=md
        )
        == 0.0
    )

    V[1, 0] = 0.625
    single = barrier(0.140625, 0.3125)
    assert single > 0.0
    assert constraint.compute_potential(
        V, EMPTY_EDGES, EMPTY_FACES, dhat, minimum_distance=md
    ) == pytest.approx(3.0 * single)
    grad1 = VertexVertexConstraint(0, 1).compute_potential_gradient(
        V, EMPTY_EDGES, EMPTY_FACES, dhat, minimum_distance=md
    )
    grad3 = constraint.compute_potential_gradient(
        V, EMPTY_EDGES, EMPTY_FACES, dhat, minimum_distance=md
    )
    assert np.allclose(grad3, 3.0 * grad1)


def test_edge_vertex_multiplicity_scales_hessian():
    V = np.array([[-1.0, 0.0], [1.0, 0.0], [0.2, 0.05]])
    E = np.array([[0, 1]])
    single = EdgeVertexConstraint(0, 2)
    double = EdgeVertexConstraint(0, 2, multiplicity=2)
    assert np.allclose(
        double.compute_potential_hessian(V, E, EMPTY_FACES, DHAT, True),
        2.0 * single.compute_potential_hessian(V, E, EMPTY_FACES, DHAT, True),
    )


def test_multiplicity_must_be_positive():
    with pytest.raises(ValueError):
        VertexVertexConstraint(0, 1, multiplicity=0)
    with pytest.raises(ValueError):
        EdgeVertexConstraint(0, 1, multiplicity=-2)


def test_multiplicity_must_be_an_integer():
    for bad in (2.5, 1.0, True, "2"):
        with pytest.raises(ValueError, match="integer"):
            VertexVertexConstraint(0, 1, bad)
        with pytest.raises(ValueError, match="integer"):
            EdgeVertexConstraint(0, 1, bad)

    constraint = VertexVertexConstraint(0, 1, np.int64(3))
    assert constraint.multiplicity == 3
    assert type(constraint.multiplicity) is int


def test_stencil_orders():
    constraint, V, E, F = face_vertex_case()
    assert constraint.vertex_indices(E, F).tolist() == [3, 0, 1, 2]
    assert EdgeVertexConstraint(0, 2).vertex_indices(np.array([[4, 7]])).tolist() == [
        2,
        4,
        7,
    ]
    assert VertexVertexConstraint(5, 1).vertex_indices(None, None).tolist() == [5, 1]


def test_constraint_kinds():
    assert VertexVertexConstraint(0, 1).kind is ConstraintKind.VERTEX_VERTEX
    assert EdgeVertexConstraint(0, 1).kind is ConstraintKind.EDGE_VERTEX
    assert PlaneVertexConstraint([0, 0], [0, 1], 0).kind is ConstraintKind.PLANE_VERTEX


def test_plane_vertex_normalizes_normal_and_validates_input():
    constraint = PlaneVertexConstraint([0.0, 0.0, 1.0], [0.0, 0.0, 4.0], 0)
    assert np.allclose(constraint.plane_normal, [0.0, 0.0, 1.0])
    assert constraint.dim == 3
    assert not constraint.plane_normal.flags.writeable

    V = np.array([[3.0, -2.0, 1.05]])
    assert constraint.compute_distance(V, None, None) == pytest.approx(0.0025)

    with pytest.raises(ValueError):
        PlaneVertexConstraint([0.0, 0.0, 0.0], [0.0, 0.0, 0.0], 0)
    with pytest.raises(ValueError):
        PlaneVertexConstraint([0.0, 0.0], [0.0, 0.0, 1.0], 0)


def test_common_helpers_compose_barrier_and_distance():
    distance = 0.004
    distance_grad = np.array([0.1, -0.2, 0.3])
    distance_hess = np.diag([1.0, -2.0, 0.5])

    value = compute_potential_common(distance, DHAT)
    assert value == pytest.approx(barrier(distance, DHAT**2))

    grad = compute_potential_gradient_common(distance, distance_grad, DHAT)
    assert grad.shape == (3,)
    assert np.all(np.sign(grad) == -np.sign(distance_grad))

    raw = compute_potential_hessian_common(distance, distance_grad, distance_hess, DHAT)
    projected = compute_potential_hessian_common(
        distance, distance_grad, distance_hess, DHAT, True
    )
    # b' < 0 turns the positive curvature entries negative.
    assert np.linalg.eigvalsh(raw).min() < 0.0
    assert np.linalg.eigvalsh(projected).min() >= -1e-12


def test_random_configurations_project_to_psd():
    rng = np.random.default_rng(7)
    for _ in range(20):
        constraint, V, E, F = face_vertex_case()
        V = V + rng.normal(scale=0.01, size=V.shape)
        if constraint.compute_distance(V, E, F) >= DHAT**2:
            continue
        hess = constraint.compute_potential_hessian(V, E, F, DHAT, True)
        eigvals = np.linalg.eigvalsh(hess)
        assert eigvals.min() >= -1e-10 * max(1.0, np.abs(eigvals).max())
