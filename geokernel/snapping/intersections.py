"""Pairwise curve intersection solvers.

Every solver returns a list with zero, one or two points.  Parallel lines,
disjoint circles, zero-length segments and similar degeneracies produce an
empty list.  Lines are parametrised as ``p1 + t·(p2 − p1)``; a bounded line
(segment) only accepts ``t`` in ``[-margin, 1 + margin]``.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..conics import EllipseParams, HyperbolaParams, ParabolaParams
from ..expressions import ScalarFunction
from .types import CircleCurve, Curve, EllipseCurve, FunctionCurve, HyperbolaCurve, LineCurve, ParabolaCurve

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

SEGMENT_MARGIN = 0.01
_EPS_DET = 1e-10
_EPS_LEN2 = 1e-10
_ROOT_MERGE = 1e-6
_EPS_REL = 1e-12


def _within(t: float, clamp: bool, margin: float) -> bool:
    return not clamp or (-margin <= t <= 1.0 + margin)


def _at(p1: Sequence[float], p2: Sequence[float], t: float) -> Point:
    return (
        float(p1[0]) + t * (float(p2[0]) - float(p1[0])),
        float(p1[1]) + t * (float(p2[1]) - float(p1[1])),
    )


def _quadratic_roots(a: float, b: float, c: float, scale: float) -> List[float]:
    """Real roots of ``a t² + b t + c``; falls back to the linear case when ``a`` vanishes."""

    if abs(a) <= _EPS_REL * max(scale, _EPS_REL):
        if abs(b) <= _EPS_REL * max(scale, _EPS_REL):
            return []
        return [-c / b]
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return []
    sqrt_disc = math.sqrt(disc)
    t1 = (-b - sqrt_disc) / (2.0 * a)
    t2 = (-b + sqrt_disc) / (2.0 * a)
    if abs(t1 - t2) <= _ROOT_MERGE:
        return [t1]
    return [t1, t2]


def _points_on_line(
    roots: Sequence[float], p1: Sequence[float], p2: Sequence[float], clamp: bool, margin: float
) -> List[Point]:
    return [_at(p1, p2, t) for t in roots if math.isfinite(t) and _within(t, clamp, margin)]


def intersect_line_line(
    a1: Sequence[float],
    a2: Sequence[float],
    b1: Sequence[float],
    b2: Sequence[float],
    clamp_a: bool = False,
    clamp_b: bool = False,
    margin: float = SEGMENT_MARGIN,
) -> List[Point]:
    """Intersection of line ``a1a2`` with line ``b1b2`` from the 2×2 determinant."""

    x1, y1 = float(a1[0]), float(a1[1])
    x2, y2 = float(a2[0]), float(a2[1])
    x3, y3 = float(b1[0]), float(b1[1])
    x4, y4 = float(b2[0]), float(b2[1])

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < _EPS_DET:
        return []

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom
    if not (_within(t, clamp_a, margin) and _within(u, clamp_b, margin)):
        return []
    return [(x1 + t * (x2 - x1), y1 + t * (y2 - y1))]


def intersect_circle_line(
    center: Sequence[float],
    radius: float,
    p1: Sequence[float],
    p2: Sequence[float],
    clamp: bool = False,
    margin: float = SEGMENT_MARGIN,
) -> List[Point]:
    dx = float(p2[0]) - float(p1[0])
    dy = float(p2[1]) - float(p1[1])
    fx = float(p1[0]) - float(center[0])
    fy = float(p1[1]) - float(center[1])

    a = dx * dx + dy * dy
    if a < _EPS_LEN2:
        return []
    b = 2.0 * (fx * dx + fy * dy)
    c = fx * fx + fy * fy - radius * radius
    return _points_on_line(_quadratic_roots(a, b, c, a), p1, p2, clamp, margin)


def intersect_circle_circle(
    c1: Sequence[float], r1: float, c2: Sequence[float], r2: float
) -> List[Point]:
    """Radical-line construction; tangent circles give a single point."""

    dx = float(c2[0]) - float(c1[0])
    dy = float(c2[1]) - float(c1[1])
    d = math.hypot(dx, dy)
    if d < _EPS_DET or d > r1 + r2 or d < abs(r1 - r2):
        return []

    a = (r1 * r1 - r2 * r2 + d * d) / (2.0 * d)
    h2 = r1 * r1 - a * a
    if h2 < 0.0:
        return []
    h = math.sqrt(h2)
    px = float(c1[0]) + a * dx / d
    py = float(c1[1]) + a * dy / d
    perp_x, perp_y = -dy / d, dx / d

    points = [(px + h * perp_x, py + h * perp_y)]
    if h > _ROOT_MERGE:
        points.append((px - h * perp_x, py - h * perp_y))
    return points


def intersect_ellipse_line(
    params: EllipseParams,
    p1: Sequence[float],
    p2: Sequence[float],
    clamp: bool = False,
    margin: float = SEGMENT_MARGIN,
) -> List[Point]:
    """Solve ``u²/a² + v²/b² = 1`` with the line expressed in the ellipse's own frame."""

    if params.a <= 0.0 or params.b <= 0.0:
        return []
    cos_r, sin_r = math.cos(params.rotation), math.sin(params.rotation)

    def to_frame(p: Sequence[float]) -> Point:
        x = float(p[0]) - params.center_x
        y = float(p[1]) - params.center_y
        return (x * cos_r + y * sin_r, -x * sin_r + y * cos_r)

    u0, v0 = to_frame(p1)
    u1, v1 = to_frame(p2)
    du, dv = u1 - u0, v1 - v0
    if du * du + dv * dv < _EPS_LEN2:
        return []

    inv_a2 = 1.0 / (params.a * params.a)
    inv_b2 = 1.0 / (params.b * params.b)
    qa = du * du * inv_a2 + dv * dv * inv_b2
    qb = 2.0 * (u0 * du * inv_a2 + v0 * dv * inv_b2)
    qc = u0 * u0 * inv_a2 + v0 * v0 * inv_b2 - 1.0
    return _points_on_line(_quadratic_roots(qa, qb, qc, qa), p1, p2, clamp, margin)


def intersect_parabola_line(
    params: ParabolaParams,
    p1: Sequence[float],
    p2: Sequence[float],
    clamp: bool = False,
    margin: float = SEGMENT_MARGIN,
) -> List[Point]:
    """Solve ``across² = 4p·along`` in the vertex frame; a line parallel to the axis is linear."""

    if params.p <= 0.0:
        return []
    ux, uy = params.axis
    vx, vy = -uy, ux

    w0 = (float(p1[0]) - params.vertex_x, float(p1[1]) - params.vertex_y)
    w1 = (float(p2[0]) - params.vertex_x, float(p2[1]) - params.vertex_y)
    along0 = w0[0] * ux + w0[1] * uy
    across0 = w0[0] * vx + w0[1] * vy
    d_along = (w1[0] * ux + w1[1] * uy) - along0
    d_across = (w1[0] * vx + w1[1] * vy) - across0
    length2 = d_along * d_along + d_across * d_across
    if length2 < _EPS_LEN2:
        return []

    four_p = 4.0 * params.p
    qa = d_across * d_across
    qb = 2.0 * across0 * d_across - four_p * d_along
    qc = across0 * across0 - four_p * along0
    return _points_on_line(_quadratic_roots(qa, qb, qc, length2), p1, p2, clamp, margin)


def intersect_hyperbola_line(
    params: HyperbolaParams,
    p1: Sequence[float],
    p2: Sequence[float],
    clamp: bool = False,
    margin: float = SEGMENT_MARGIN,
) -> List[Point]:
    """Solve ``s²/a² − r²/b² = 1`` where ``s`` is the transverse coordinate.

    A line parallel to an asymptote makes the quadratic term vanish and meets
    the curve at most once.
    """

    if params.a <= 0.0 or params.b <= 0.0:
        return []
    x0 = float(p1[0]) - params.center_x
    y0 = float(p1[1]) - params.center_y
    dx = float(p2[0]) - float(p1[0])
    dy = float(p2[1]) - float(p1[1])
    if dx * dx + dy * dy < _EPS_LEN2:
        return []

    if params.orientation == "horizontal":
        s0, ds, r0, dr = x0, dx, y0, dy
    else:
        s0, ds, r0, dr = y0, dy, x0, dx

    inv_a2 = 1.0 / (params.a * params.a)
    inv_b2 = 1.0 / (params.b * params.b)
    qa = ds * ds * inv_a2 - dr * dr * inv_b2
    qb = 2.0 * (s0 * ds * inv_a2 - r0 * dr * inv_b2)
    qc = s0 * s0 * inv_a2 - r0 * r0 * inv_b2 - 1.0
    scale = ds * ds * inv_a2 + dr * dr * inv_b2
    return _points_on_line(_quadratic_roots(qa, qb, qc, scale), p1, p2, clamp, margin)


def intersect_function_line(
    func: ScalarFunction,
    p1: Sequence[float],
    p2: Sequence[float],
    t_range: Tuple[float, float] = (0.0, 1.0),
    samples: int = 40,
    iterations: int = 10,
) -> List[Point]:
    """Roots of ``g(t) = f(x(t)) − y(t)`` over ``t_range`` by sign change and bisection.

    Sample points where ``func`` is undefined are skipped.  A bracket whose
    midpoint residual grows instead of shrinking straddles a pole and is
    discarded.
    """

    x1, y1 = float(p1[0]), float(p1[1])
    dx = float(p2[0]) - x1
    dy = float(p2[1]) - y1
    if dx * dx + dy * dy < _EPS_LEN2:
        return []
    lo, hi = float(t_range[0]), float(t_range[1])
    if not (math.isfinite(lo) and math.isfinite(hi)) or hi <= lo:
        return []

    def g(t: float) -> Optional[float]:
        fx = func(x1 + t * dx)
        if fx is None:
            return None
        return fx - (y1 + t * dy)

    ts = np.linspace(lo, hi, max(2, int(samples)) + 1)
    values = [g(float(t)) for t in ts]
    roots: List[float] = []

    for i in range(len(ts) - 1):
        t_a, t_b = float(ts[i]), float(ts[i + 1])
        g_a, g_b = values[i], values[i + 1]
        if g_a is None:
            continue
        if g_a == 0.0:
            roots.append(t_a)
            continue
        if g_b is None:
            continue
        if g_a * g_b > 0.0:
            continue
        if g_b == 0.0:
            # picked up as the left end of the next bracket
            continue
        bound = max(abs(g_a), abs(g_b))
        for _ in range(iterations):
            t_mid = 0.5 * (t_a + t_b)
            g_mid = g(t_mid)
            if g_mid is None:
                break
            if (g_mid < 0.0) == (g_a < 0.0):
                t_a, g_a = t_mid, g_mid
            else:
                t_b = t_mid
        else:
            t_root = 0.5 * (t_a + t_b)
            g_root = g(t_root)
            if g_root is not None and abs(g_root) <= bound:
                roots.append(t_root)
    if values[-1] == 0.0:
        roots.append(float(ts[-1]))

    return [(x1 + t * dx, y1 + t * dy) for t in roots]


def _line_window(line: LineCurve, window: Optional[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
    lo, hi = window if window is not None else (0.0, 1.0)
    if line.bounded:
        lo, hi = max(lo, 0.0), min(hi, 1.0)
    if hi <= lo:
        return None
    return (lo, hi)


def intersect_curve_line(
    curve: Curve,
    line: LineCurve,
    *,
    margin: float = SEGMENT_MARGIN,
    function_window: Optional[Tuple[float, float]] = None,
    function_samples: int = 40,
    bisection_iterations: int = 10,
) -> List[Point]:
    """Intersect any supported curve with a line-like curve."""

    clamp = line.bounded
    if isinstance(curve, LineCurve):
        both = curve.bounded and line.bounded
        return intersect_line_line(curve.p1, curve.p2, line.p1, line.p2, both, both, margin)
    if isinstance(curve, CircleCurve):
        return intersect_circle_line(curve.center, curve.radius, line.p1, line.p2, clamp, margin)
    if isinstance(curve, EllipseCurve):
        return intersect_ellipse_line(curve.params, line.p1, line.p2, clamp, margin)
    if isinstance(curve, ParabolaCurve):
        return intersect_parabola_line(curve.params, line.p1, line.p2, clamp, margin)
    if isinstance(curve, HyperbolaCurve):
        return intersect_hyperbola_line(curve.params, line.p1, line.p2, clamp, margin)
    if isinstance(curve, FunctionCurve):
        t_range = _line_window(line, function_window)
        if t_range is None:
            return []
        return intersect_function_line(
            curve.func, line.p1, line.p2, t_range, function_samples, bisection_iterations
        )
    return []


def intersect_curves(a: Curve, b: Curve, *, margin: float = SEGMENT_MARGIN) -> List[Point]:
    """Dispatch on the curve pair; unsupported pairs (e.g. ellipse × circle) give no points."""

    if isinstance(a, CircleCurve) and isinstance(b, CircleCurve):
        return intersect_circle_circle(a.center, a.radius, b.center, b.radius)
    if isinstance(b, LineCurve):
        return intersect_curve_line(a, b, margin=margin)
    if isinstance(a, LineCurve):
        return intersect_curve_line(b, a, margin=margin)
    logger.debug("no intersection solver for %s x %s", type(a).__name__, type(b).__name__)
    return []


__all__ = [
    "SEGMENT_MARGIN",
    "intersect_line_line",
    "intersect_circle_line",
    "intersect_circle_circle",
    "intersect_ellipse_line",
    "intersect_parabola_line",
    "intersect_hyperbola_line",
    "intersect_function_line",
    "intersect_curve_line",
    "intersect_curves",
]
