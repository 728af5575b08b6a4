# runtime/constraint_set.py
"""Container for the active collision constraints of a contact problem."""

from __future__ import annotations

import logging
import operator
from collections.abc import Iterable, Iterator

from core.exceptions import ConstraintIndexError
from modules.constraints.base import CollisionConstraint, ConstraintKind
from modules.constraints.edge_edge import EdgeEdgeConstraint
from modules.constraints.edge_vertex import EdgeVertexConstraint
from modules.constraints.face_vertex import FaceVertexConstraint
from modules.constraints.plane_vertex import PlaneVertexConstraint
from modules.constraints.vertex_vertex import VertexVertexConstraint

logger = logging.getLogger("ipc_potentials")

# Attribute holding each kind, in flat-index order.
_SEQUENCES = (
    (ConstraintKind.VERTEX_VERTEX, "vv_constraints"),
    (ConstraintKind.EDGE_VERTEX, "ev_constraints"),
    (ConstraintKind.EDGE_EDGE, "ee_constraints"),
    (ConstraintKind.FACE_VERTEX, "fv_constraints"),
    (ConstraintKind.PLANE_VERTEX, "pv_constraints"),
)
_ATTRIBUTE_BY_KIND = dict(_SEQUENCES)


class Constraints:
    """Five ordered constraint lists addressed through one flat index.

    The set is rebuilt whenever the active contacts change (typically once
    per time step or line-search trial). Mutation is not synchronised; do not
    clear or extend it while another thread is reading.
    """

    def __init__(
        self,
        vv_constraints: Iterable[VertexVertexConstraint] | None = None,
        ev_constraints: Iterable[EdgeVertexConstraint] | None = None,
        ee_constraints: Iterable[EdgeEdgeConstraint] | None = None,
        fv_constraints: Iterable[FaceVertexConstraint] | None = None,
        pv_constraints: Iterable[PlaneVertexConstraint] | None = None,
    ) -> None:
        self.vv_constraints: list[VertexVertexConstraint] = list(vv_constraints or [])
        self.ev_constraints: list[EdgeVertexConstraint] = list(ev_constraints or [])
        self.ee_constraints: list[EdgeEdgeConstraint] = list(ee_constraints or [])
        self.fv_constraints: list[FaceVertexConstraint] = list(fv_constraints or [])
        self.pv_constraints: list[PlaneVertexConstraint] = list(pv_constraints or [])

    def _sequences(self) -> list[list[CollisionConstraint]]:
        return [getattr(self, attr) for _, attr in _SEQUENCES]

    def size(self) -> int:
        """Number of stored constraint instances."""
        return sum(len(seq) for seq in self._sequences())

    def __len__(self) -> int:
        return self.size()

    def num_constraints(self) -> int:
        """Number of geometric constraints, counting multiplicities."""
        total = sum(c.multiplicity for c in self.vv_constraints)
        total += sum(c.multiplicity for c in self.ev_constraints)
        total += (
            len(self.ee_constraints)
            + len(self.fv_constraints)
            + len(self.pv_constraints)
        )
        return total

    def empty(self) -> bool:
        return all(not seq for seq in self._sequences())

    def clear(self) -> None:
        logger.debug("Clearing %d collision constraints.", self.size())
        for seq in self._sequences():
            seq.clear()

    def append(self, constraint: CollisionConstraint) -> None:
        """Add ``constraint`` to the list matching its kind."""
        try:
            attr = _ATTRIBUTE_BY_KIND[constraint.kind]
        except (AttributeError, KeyError) as exc:
            raise TypeError(
                f"Expected a collision constraint; got {type(constraint).__name__}"
            ) from exc
        getattr(self, attr).append(constraint)

    def extend(self, constraints: Iterable[CollisionConstraint]) -> None:
        for constraint in constraints:
            self.append(constraint)

    def __getitem__(self, idx: int) -> CollisionConstraint:
        index = operator.index(idx)
        if index < 0:
            raise ConstraintIndexError(index, self.size())
        offset = index
        for seq in self._sequences():
            if offset < len(seq):
                return seq[offset]
            offset -= len(seq)
        raise ConstraintIndexError(index, self.size())

    def __iter__(self) -> Iterator[CollisionConstraint]:
        for seq in self._sequences():
            yield from seq

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{attr}={len(getattr(self, attr))}" for _, attr in _SEQUENCES
        )
        return f"Constraints({counts})"


__all__ = ["Constraints"]
