"""Package utilities for ipc-potentials.

The library itself lives in top-level packages like `geometry/`, `modules/`,
and `runtime/`. This package exists to provide the installed version and a
single import point for the public constraint API.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from modules.constraints.edge_edge import EdgeEdgeConstraint
from modules.constraints.edge_vertex import EdgeVertexConstraint
from modules.constraints.face_vertex import FaceVertexConstraint
from modules.constraints.plane_vertex import PlaneVertexConstraint
from modules.constraints.vertex_vertex import VertexVertexConstraint
from runtime.constraint_set import Constraints

try:
    __version__ = version("ipc-potentials")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "Constraints",
    "EdgeEdgeConstraint",
    "EdgeVertexConstraint",
    "FaceVertexConstraint",
    "PlaneVertexConstraint",
    "VertexVertexConstraint",
    "__version__",
]
