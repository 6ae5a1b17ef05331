"""Nearest point on a curve to a query position.

Lines and circles are projected in closed form.  Ellipses, parabolas,
hyperbolas and function graphs are sampled densely over the parameter window
that can hold points within ``window`` of the query, then the best sample is
refined with a bounded scalar minimisation of the squared distance.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import minimize_scalar

from ..conics import EllipseParams, HyperbolaParams, ParabolaParams
from ..expressions import ScalarFunction

Point = Tuple[float, float]
PointsAt = Callable[[np.ndarray], np.ndarray]

_EPS_LEN2 = 1e-10
_PENALTY = 1e18


def nearest_on_line(
    q: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
    subtype: str = "line",
    margin: float = 0.01,
) -> Optional[Point]:
    """Orthogonal projection of ``q`` on the line ``p1p2``.

    Segments (and vectors) only accept ``margin < t < 1 - margin`` so the
    endpoints are left to point snapping; rays accept ``t > margin``.
    """

    x1, y1 = float(p1[0]), float(p1[1])
    dx = float(p2[0]) - x1
    dy = float(p2[1]) - y1
    len2 = dx * dx + dy * dy
    if len2 < _EPS_LEN2:
        return None
    t = ((float(q[0]) - x1) * dx + (float(q[1]) - y1) * dy) / len2
    if subtype in ("segment", "vector"):
        if not (margin < t < 1.0 - margin):
            return None
    elif subtype == "ray":
        if t <= margin:
            return None
    return (x1 + t * dx, y1 + t * dy)


def nearest_on_circle(
    q: Sequence[float], center: Sequence[float], radius: float, min_center_distance: float = 0.1
) -> Optional[Point]:
    """Radial projection; undefined when ``q`` sits on the centre."""

    dx = float(q[0]) - float(center[0])
    dy = float(q[1]) - float(center[1])
    d = math.hypot(dx, dy)
    if d < min_center_distance or radius <= 0.0:
        return None
    return (float(center[0]) + dx / d * radius, float(center[1]) + dy / d * radius)


def _sample_and_refine(
    points_at: PointsAt, q: Sequence[float], lo: float, hi: float, samples: int
) -> Optional[Point]:
    if not (math.isfinite(lo) and math.isfinite(hi)) or hi <= lo:
        return None
    qx, qy = float(q[0]), float(q[1])
    ts = np.linspace(lo, hi, max(3, int(samples)))
    pts = points_at(ts)
    d2 = (pts[:, 0] - qx) ** 2 + (pts[:, 1] - qy) ** 2
    d2 = np.where(np.isfinite(d2), d2, np.inf)
    i = int(np.argmin(d2))
    if not math.isfinite(d2[i]):
        return None

    best_t, best_d2 = float(ts[i]), float(d2[i])
    left, right = float(ts[max(0, i - 1)]), float(ts[min(len(ts) - 1, i + 1)])

    def objective(t: float) -> float:
        p = points_at(np.array([t]))[0]
        value = (p[0] - qx) ** 2 + (p[1] - qy) ** 2
        return float(value) if math.isfinite(value) else _PENALTY

    if right > left:
        res = minimize_scalar(objective, bounds=(left, right), method="bounded", options={"xatol": 1e-10})
        if res.success and float(res.fun) < best_d2:
            best_t = float(res.x)
    p = points_at(np.array([best_t]))[0]
    if not (math.isfinite(p[0]) and math.isfinite(p[1])):
        return None
    return (float(p[0]), float(p[1]))


def nearest_on_ellipse(q: Sequence[float], params: EllipseParams, samples: int = 720) -> Optional[Point]:
    if params.a <= 0.0 or params.b <= 0.0:
        return None
    cos_r, sin_r = math.cos(params.rotation), math.sin(params.rotation)

    def points_at(theta: np.ndarray) -> np.ndarray:
        u = params.a * np.cos(theta)
        v = params.b * np.sin(theta)
        return np.column_stack(
            (params.center_x + u * cos_r - v * sin_r, params.center_y + u * sin_r + v * cos_r)
        )

    # one extra step past 2π so the minimum at θ = 0 can be bracketed from both sides
    step = 2.0 * math.pi / max(8, int(samples))
    return _sample_and_refine(points_at, q, -step, 2.0 * math.pi, int(samples) + 2)


def nearest_on_parabola(
    q: Sequence[float], params: ParabolaParams, window: float, samples: int = 64
) -> Optional[Point]:
    """Search ``t`` (the across-axis coordinate) within ``window`` of the query's own."""

    if params.p <= 0.0 or window <= 0.0:
        return None
    ux, uy = params.axis
    vx, vy = -uy, ux
    qv = (float(q[0]) - params.vertex_x) * vx + (float(q[1]) - params.vertex_y) * vy

    def points_at(t: np.ndarray) -> np.ndarray:
        along = t * t / (4.0 * params.p)
        return np.column_stack(
            (params.vertex_x + ux * along + vx * t, params.vertex_y + uy * along + vy * t)
        )

    return _sample_and_refine(points_at, q, qv - window, qv + window, samples)


def nearest_on_hyperbola(
    q: Sequence[float], params: HyperbolaParams, window: float, samples: int = 64
) -> Optional[Point]:
    """Closest point over both branches.

    The conjugate coordinate ``b·sinh t`` of any point within ``window`` of
    the query lies within ``window`` of the query's own, which bounds ``t``.
    """

    if params.a <= 0.0 or params.b <= 0.0 or window <= 0.0:
        return None
    cx, cy = params.center_x, params.center_y
    qx, qy = float(q[0]), float(q[1])
    q_conj = qy - cy if params.orientation == "horizontal" else qx - cx
    lo = math.asinh((q_conj - window) / params.b)
    hi = math.asinh((q_conj + window) / params.b)

    best: Optional[Point] = None
    best_d = math.inf
    for sign in (1.0, -1.0):
        def points_at(t: np.ndarray, sign: float = sign) -> np.ndarray:
            trans = sign * params.a * np.cosh(t)
            conj = params.b * np.sinh(t)
            if params.orientation == "horizontal":
                return np.column_stack((cx + trans, cy + conj))
            return np.column_stack((cx + conj, cy + trans))

        candidate = _sample_and_refine(points_at, q, lo, hi, samples)
        if candidate is None:
            continue
        d = math.hypot(candidate[0] - qx, candidate[1] - qy)
        if d < best_d:
            best, best_d = candidate, d
    return best


def nearest_on_function(
    q: Sequence[float], func: ScalarFunction, window: float, samples: int = 64
) -> Optional[Point]:
    """Closest graph point with ``x`` in ``[qx - window, qx + window]``; undefined samples are skipped."""

    if window <= 0.0:
        return None

    def points_at(xs: np.ndarray) -> np.ndarray:
        values = [func(float(x)) for x in xs]
        ys = np.array([np.nan if v is None else v for v in values], dtype=float)
        return np.column_stack((xs, ys))

    qx = float(q[0])
    return _sample_and_refine(points_at, q, qx - window, qx + window, samples)


__all__ = [
    "nearest_on_line",
    "nearest_on_circle",
    "nearest_on_ellipse",
    "nearest_on_parabola",
    "nearest_on_hyperbola",
    "nearest_on_function",
]
