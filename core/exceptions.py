"""Custom exception types for the contact potential library."""

from __future__ import annotations


class IpcPotentialsError(Exception):
    """Base class for domain-specific errors."""


class ConstraintIndexError(IpcPotentialsError, IndexError):
    """Raised when a flat constraint index falls outside a constraint set."""

    def __init__(self, index: int, size: int, message: str | None = None) -> None:
        if message is None:
            message = (
                f"Constraint index {index} is out of range for a set of "
                f"{size} constraints."
            )
        super().__init__(message)
        self.index = index
        self.size = size


class UnsupportedDimensionError(IpcPotentialsError, ValueError):
    """Raised when a primitive pair is evaluated in a dimension it has no meaning in."""

    def __init__(self, name: str, dim: int, expected: tuple[int, ...]) -> None:
        allowed = ", ".join(str(d) for d in expected)
        super().__init__(
            f"{name} requires points of dimension {allowed}; got {dim}."
        )
        self.name = name
        self.dim = dim
        self.expected = expected


__all__ = ["IpcPotentialsError", "ConstraintIndexError", "UnsupportedDimensionError"]
