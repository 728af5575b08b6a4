import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.exceptions import UnsupportedDimensionError
from geometry.distance.distance_type import (
    EdgeEdgeDistanceType,
    PointEdgeDistanceType,
    PointTriangleDistanceType,
)
from geometry.distance.edge_edge import (
    edge_edge_distance,
    edge_edge_distance_gradient,
    edge_edge_distance_hessian,
)
from geometry.distance.point_edge import (
    point_edge_distance,
    point_edge_distance_gradient,
    point_edge_distance_hessian,
)
from geometry.distance.point_plane import (
    point_plane_distance,
    point_plane_distance_gradient,
    point_plane_distance_hessian,
)
from geometry.distance.point_point import (
    point_point_distance,
    point_point_distance_gradient,
    point_point_distance_hessian,
)
from geometry.distance.point_triangle import (
    point_triangle_distance,
    point_triangle_distance_gradient,
    point_triangle_distance_hessian,
)
from sample_meshes import central_diff_gradient, central_diff_jacobian, max_rel_error


def _split(x: np.ndarray, n_points: int) -> list[np.ndarray]:
    return list(x.reshape(n_points, -1))


def _check_derivatives(value_fn, grad_fn, hess_fn, x: np.ndarray, n_points: int):
    def f(y):
        return value_fn(*_split(y, n_points))

    def g(y):
        return grad_fn(*_split(y, n_points))

    grad = g(x)
    hess = hess_fn(*_split(x, n_points))
    assert grad.shape == (x.size,)
    assert hess.shape == (x.size, x.size)
    assert np.allclose(hess, hess.T, atol=1e-12)
    assert max_rel_error(grad, central_diff_gradient(f, x)) < 1e-6
    assert max_rel_error(hess, central_diff_jacobian(g, x)) < 1e-6


@pytest.mark.parametrize("dim", [2, 3])
def test_point_point_distance_derivatives(dim):
    rng = np.random.default_rng(0)
    x = rng.normal(size=2 * dim)
    _check_derivatives(
        point_point_distance,
        point_point_distance_gradient,
        point_point_distance_hessian,
        x,
        2,
    )


@pytest.mark.parametrize("dim", [2, 3])
@pytest.mark.parametrize("dtype", list(PointEdgeDistanceType))
def test_point_edge_distance_derivatives(dim, dtype):
    rng = np.random.default_rng(1)
    x = rng.normal(size=3 * dim)
    _check_derivatives(
        lambda p, e0, e1: point_edge_distance(p, e0, e1, dtype),
        lambda p, e0, e1: point_edge_distance_gradient(p, e0, e1, dtype),
        lambda p, e0, e1: point_edge_distance_hessian(p, e0, e1, dtype),
        x,
        3,
    )


@pytest.mark.parametrize("dtype", list(PointTriangleDistanceType))
def test_point_triangle_distance_derivatives(dtype):
    rng = np.random.default_rng(2)
    x = rng.normal(size=12)
    _check_derivatives(
        lambda p, t0, t1, t2: point_triangle_distance(p, t0, t1, t2, dtype),
        lambda p, t0, t1, t2: point_triangle_distance_gradient(p, t0, t1, t2, dtype),
        lambda p, t0, t1, t2: point_triangle_distance_hessian(p, t0, t1, t2, dtype),
        x,
        4,
    )


@pytest.mark.parametrize("dtype", list(EdgeEdgeDistanceType))
def test_edge_edge_distance_derivatives(dtype):
    rng = np.random.default_rng(3)
    x = rng.normal(size=12)
    _check_derivatives(
        lambda a0, a1, b0, b1: edge_edge_distance(a0, a1, b0, b1, dtype),
        lambda a0, a1, b0, b1: edge_edge_distance_gradient(a0, a1, b0, b1, dtype),
        lambda a0, a1, b0, b1: edge_edge_distance_hessian(a0, a1, b0, b1, dtype),
        x,
        4,
    )


@pytest.mark.parametrize("dim", [2, 3])
def test_point_plane_distance_derivatives(dim):
    rng = np.random.default_rng(4)
    origin = rng.normal(size=dim)
    normal = rng.normal(size=dim)
    normal /= np.linalg.norm(normal)
    x = rng.normal(size=dim)
    _check_derivatives(
        lambda p: point_plane_distance(p, origin, normal),
        lambda p: point_plane_distance_gradient(p, origin, normal),
        lambda p: point_plane_distance_hessian(p, origin, normal),
        x,
        1,
    )


def test_point_triangle_distance_matches_plane_height():
    p = np.array([0.2, 0.3, 0.5])
    t0 = np.array([0.0, 0.0, 0.0])
    t1 = np.array([1.0, 0.0, 0.0])
    t2 = np.array([0.0, 1.0, 0.0])
    assert point_triangle_distance(p, t0, t1, t2) == pytest.approx(0.25)


def test_edge_edge_distance_of_skew_lines():
    ea0, ea1 = np.array([0.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0])
    eb0, eb1 = np.array([0.5, -0.5, 0.2]), np.array([0.5, 0.5, 0.2])
    assert edge_edge_distance(ea0, ea1, eb0, eb1) == pytest.approx(0.04)


def test_point_edge_distance_in_2d_clamps_to_endpoints():
    e0, e1 = np.array([0.0, 0.0]), np.array([1.0, 0.0])
    assert point_edge_distance(np.array([0.5, 0.3]), e0, e1) == pytest.approx(0.09)
    assert point_edge_distance(np.array([-0.3, 0.4]), e0, e1) == pytest.approx(0.25)
    assert point_edge_distance(np.array([1.3, 0.4]), e0, e1) == pytest.approx(0.25)


def test_triangle_and_edge_edge_distances_reject_2d_points():
    p = np.zeros(2)
    with pytest.raises(UnsupportedDimensionError):
        point_triangle_distance(p, p, p, p)
    with pytest.raises(UnsupportedDimensionError):
        edge_edge_distance(p, p, p, p)
