# geom_io.py
import json
import logging

import numpy as np
import yaml

from modules.constraints.edge_edge import EdgeEdgeConstraint
from modules.constraints.edge_vertex import EdgeVertexConstraint
from modules.constraints.face_vertex import FaceVertexConstraint
from modules.constraints.plane_vertex import PlaneVertexConstraint
from modules.constraints.vertex_vertex import VertexVertexConstraint
from parameters.global_parameters import GlobalParameters
from runtime.constraint_set import Constraints

logger = logging.getLogger("ipc_potentials")


def load_data(filename):
    """Load a contact problem from a JSON or YAML file.

    Expected JSON or YAML format:
    {
        "vertices": [[x, y, z], ...],
        "edges": [[i, j], ...],
        "faces": [[i, j, k], ...],
        "global_parameters": {"dhat": 0.01, "minimum_distance": 0.0},
        "constraints": {
            "vertex_vertex": [[v0, v1] or [v0, v1, {"multiplicity": 2}], ...],
            "edge_vertex": [[e, v] or [e, v, {"multiplicity": 2}], ...],
            "edge_edge": [[e0, e1] or [e0, e1, {"eps_x": 1e-6}], ...],
            "face_vertex": [[f, v], ...],
            "plane_vertex": [{"origin": [...], "normal": [...], "vertex": v}, ...]
        }
    }"""
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise ValueError(f"Unsupported file format for: {filename_str}")

    return data


def _index_array(rows, width: int, name: str) -> np.ndarray:
    arr = np.asarray(rows if rows is not None else [], dtype=int)
    if arr.size == 0:
        return np.zeros((0, width), dtype=int)
    if arr.ndim != 2 or arr.shape[1] != width:
        logger.error(f"'{name}' entries must each list {width} vertex indices.")
        raise ValueError(f"'{name}' entries must each list {width} vertex indices.")
    return arr


def _split_options(entry, n_indices: int, name: str) -> tuple[list[int], dict]:
    """Split ``[i, j, {options}]`` into its indices and option dict."""
    entry = list(entry)
    options = {}
    if entry and isinstance(entry[-1], dict):
        options = entry.pop()
    if len(entry) != n_indices:
        logger.error(f"Malformed {name} constraint entry: {entry}")
        raise ValueError(
            f"{name} constraints take {n_indices} indices; got {len(entry)}."
        )
    return [int(i) for i in entry], options


def parse_contact_problem(data: dict):
    """Build ``(V, E, F, constraints, global_parameters)`` from loaded data."""
    global_parameters = GlobalParameters()
    global_parameters.update(data.get("global_parameters", {}) or {})

    # Numbers written like 1e-3 parse as strings under YAML 1.1.
    for key in ("dhat", "minimum_distance", "mollifier_threshold_scale"):
        val = global_parameters.get(key)
        if isinstance(val, str):
            try:
                global_parameters.set(key, float(val))
            except ValueError:
                logger.warning("global_parameters.%s should be numeric; got %r", key, val)

    V = np.asarray(data.get("vertices", []), dtype=float)
    if V.ndim != 2 or V.shape[1] not in (2, 3):
        logger.error("'vertices' must be a list of 2D or 3D points.")
        raise ValueError("'vertices' must be a list of 2D or 3D points.")
    E = _index_array(data.get("edges"), 2, "edges")
    F = _index_array(data.get("faces"), 3, "faces")

    constraint_data = data.get("constraints", {}) or {}
    unknown = set(constraint_data) - {
        "vertex_vertex",
        "edge_vertex",
        "edge_edge",
        "face_vertex",
        "plane_vertex",
    }
    if unknown:
        logger.error(f"Unknown constraint kinds: {sorted(unknown)}")
        raise ValueError(f"Unknown constraint kinds: {sorted(unknown)}")

    constraints = Constraints()

    for entry in constraint_data.get("vertex_vertex", []) or []:
        (v0, v1), opts = _split_options(entry, 2, "vertex_vertex")
        constraints.append(
            VertexVertexConstraint(v0, v1, opts.get("multiplicity", 1))
        )

    for entry in constraint_data.get("edge_vertex", []) or []:
        (e, v), opts = _split_options(entry, 2, "edge_vertex")
        constraints.append(
            EdgeVertexConstraint(e, v, opts.get("multiplicity", 1))
        )

    scale = float(global_parameters.get("mollifier_threshold_scale"))
    for entry in constraint_data.get("edge_edge", []) or []:
        (e0, e1), opts = _split_options(entry, 2, "edge_edge")
        if "eps_x" in opts:
            constraints.append(EdgeEdgeConstraint(e0, e1, float(opts["eps_x"])))
        else:
            # The loaded positions double as the rest shape.
            constraints.append(
                EdgeEdgeConstraint.from_rest_positions(e0, e1, V, E, scale)
            )

    for entry in constraint_data.get("face_vertex", []) or []:
        (f, v), _ = _split_options(entry, 2, "face_vertex")
        constraints.append(FaceVertexConstraint(f, v))

    for entry in constraint_data.get("plane_vertex", []) or []:
        try:
            constraints.append(
                PlaneVertexConstraint(
                    entry["origin"], entry["normal"], int(entry["vertex"])
                )
            )
        except KeyError as exc:
            logger.error(f"plane_vertex constraint is missing {exc}")
            raise ValueError(f"plane_vertex constraint is missing {exc}") from exc

    logger.info(
        "Loaded contact problem: %d vertices, %d edges, %d faces, %d constraints.",
        len(V),
        len(E),
        len(F),
        constraints.size(),
    )
    return V, E, F, constraints, global_parameters
