"""Log barrier used by the contact potentials.

    b(d, dhat) = -(d - dhat)^2 * ln(d / dhat)   for 0 < d < dhat
               = 0                              for d >= dhat

``d`` is whatever distance-like quantity the caller composes with the
barrier (the contact potentials pass squared distances). The barrier is C2
on ``(0, inf)``, decreasing, convex below ``dhat`` and diverges as ``d -> 0+``.
"""

from __future__ import annotations

import math


def barrier(d: float, dhat: float) -> float:
    if d <= 0.0:
        return math.inf
    if d >= dhat:
        return 0.0
    return -((d - dhat) ** 2) * math.log(d / dhat)


def barrier_gradient(d: float, dhat: float) -> float:
    """First derivative of :func:`barrier` w.r.t. ``d``."""
    if d <= 0.0:
        return -math.inf
    if d >= dhat:
        return 0.0
    return (dhat - d) * (2.0 * math.log(d / dhat) - dhat / d + 1.0)


def barrier_hessian(d: float, dhat: float) -> float:
    """Second derivative of :func:`barrier` w.r.t. ``d``."""
    if d <= 0.0:
        return math.inf
    if d >= dhat:
        return 0.0
    dhat_d = dhat / d
    return (dhat_d + 2.0) * dhat_d - 2.0 * math.log(d / dhat) - 3.0


__all__ = ["barrier", "barrier_gradient", "barrier_hessian"]
