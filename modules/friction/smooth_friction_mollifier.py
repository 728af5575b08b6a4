"""Smoothed Coulomb friction mollifier.

The friction potential replaces the tangential speed ``s = |u|`` by a C1
mollified version ``f0(s)`` that is cubic for ``|s| < epsv`` and equal to
``s`` beyond it. The friction-force assembly consumes ``f0`` together with
the two derivative ratios below, which stay finite as ``s -> 0``:

    f1(s) = f0'(s) = -s^2 / epsv^2 + 2 s / epsv    for |s| < epsv
                   = 1                             otherwise

``s`` is a speed magnitude; the sliding direction is carried by the
tangential velocity vector the caller multiplies these scalars with.
"""

from __future__ import annotations


def _check_epsv(epsv: float) -> None:
    if not epsv > 0.0:
        raise ValueError(f"epsv must be positive; got {epsv}")


def smooth_friction_f0(s: float, epsv: float) -> float:
    r"""Mollified speed.

    .. math::

        f_0(s) = -\frac{s^3}{3\epsilon_v^2} + \frac{s^2}{\epsilon_v}
                 + \frac{\epsilon_v}{3} \quad |s| < \epsilon_v, \qquad
        f_0(s) = s \quad |s| \geq \epsilon_v
    """
    _check_epsv(epsv)
    if abs(s) >= epsv:
        return s
    return s * s * (-s / (3.0 * epsv) + 1.0) / epsv + epsv / 3.0


def smooth_friction_f1_over_x(s: float, epsv: float) -> float:
    """``f1(s) / s``: ``-s / epsv^2 + 2 / epsv`` inside, ``1 / s`` outside."""
    _check_epsv(epsv)
    if abs(s) >= epsv:
        return 1.0 / s
    return (-s / epsv + 2.0) / epsv


def smooth_friction_f2_x_minus_f1_over_x3(s: float, epsv: float) -> float:
    """``(f1'(s) s - f1(s)) / s^3``.

    ``-1 / (s epsv^2)`` inside and ``-1 / s^3`` outside. At ``s == 0`` this
    returns ``0.0``: the value only ever scales ``u u^T`` with ``|u| = s``,
    whose product vanishes there.
    """
    _check_epsv(epsv)
    if abs(s) >= epsv:
        return -1.0 / (s * s * s)
    if s == 0.0:
        return 0.0
    return -1.0 / (s * epsv * epsv)


__all__ = [
    "smooth_friction_f0",
    "smooth_friction_f1_over_x",
    "smooth_friction_f2_x_minus_f1_over_x3",
]
