"""Conic parameter derivation and parametric sampling.

Parabolas are handled in a canonical frame: vertex ``V``, focal length ``p``
and axis unit vector ``u = (cos θ, sin θ)`` pointing from the vertex towards
the focus.  With ``v = (-sin θ, cos θ)`` every curve point is
``V + u·t²/(4p) + v·t``, so a sample satisfies ``|P − F| = dist(P, directrix)``
by construction.  Hyperbolas are sampled with ``cosh``/``sinh``, which keeps
``x²/a² − y²/b² = 1`` exact up to rounding.

Sample arrays have shape ``(n, 2)``.  Degenerate input produces an empty
``(0, 2)`` array instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]
HyperbolaOrientation = Literal["horizontal", "vertical"]
ParabolaDirection = Literal["up", "down", "left", "right"]

_EPS_FOCAL = 1e-6
_EPS_LINE = 1e-9
_EPS_AXIS = 1e-9

_DIRECTION_ANGLES = {
    "right": 0.0,
    "up": math.pi / 2.0,
    "left": math.pi,
    "down": -math.pi / 2.0,
}


@dataclass(frozen=True)
class EllipseParams:
    center_x: float
    center_y: float
    a: float
    b: float
    rotation: float = 0.0


@dataclass(frozen=True)
class ParabolaParams:
    vertex_x: float
    vertex_y: float
    p: float
    axis_angle: float

    @property
    def axis(self) -> Point:
        return (math.cos(self.axis_angle), math.sin(self.axis_angle))

    @property
    def focus(self) -> Point:
        ux, uy = self.axis
        return (self.vertex_x + ux * self.p, self.vertex_y + uy * self.p)


@dataclass(frozen=True)
class HyperbolaParams:
    center_x: float
    center_y: float
    a: float
    b: float
    orientation: HyperbolaOrientation = "horizontal"


@dataclass(frozen=True)
class HyperbolaSamples:
    branch1: np.ndarray
    branch2: np.ndarray

    @property
    def is_empty(self) -> bool:
        return self.branch1.size == 0 and self.branch2.size == 0


def _empty() -> np.ndarray:
    return np.empty((0, 2), dtype=float)


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _symmetric_parameters(t_max: float, samples: int, minimum: int) -> np.ndarray:
    n = max(minimum, int(math.floor(samples)))
    return np.arange(-n, n + 1, dtype=float) / n * t_max


def signed_distance_point_to_line(
    p: Sequence[float], a: Sequence[float], b: Sequence[float]
) -> Optional[float]:
    """Signed distance of ``p`` from line ``a→b``; positive on the left-hand side."""

    dx = float(b[0]) - float(a[0])
    dy = float(b[1]) - float(a[1])
    length = math.hypot(dx, dy)
    if length < _EPS_LINE:
        return None
    nx, ny = -dy / length, dx / length
    return (float(p[0]) - float(a[0])) * nx + (float(p[1]) - float(a[1])) * ny


# ---------------------------------------------------------------------------
# Parabola


def parabola_from_vertex_focus(vertex: Sequence[float], focus: Sequence[float]) -> Optional[ParabolaParams]:
    dx = float(focus[0]) - float(vertex[0])
    dy = float(focus[1]) - float(vertex[1])
    p = math.hypot(dx, dy)
    if p < _EPS_FOCAL:
        return None
    return ParabolaParams(float(vertex[0]), float(vertex[1]), p, math.atan2(dy, dx))


def parabola_from_focus_directrix(
    focus: Sequence[float], directrix_p1: Sequence[float], directrix_p2: Sequence[float]
) -> Optional[ParabolaParams]:
    """Canonical parameters of the parabola with ``focus`` and the directrix through two points."""

    d_signed = signed_distance_point_to_line(focus, directrix_p1, directrix_p2)
    if d_signed is None:
        return None
    d = abs(d_signed)
    if d < _EPS_FOCAL:
        return None

    dx = float(directrix_p2[0]) - float(directrix_p1[0])
    dy = float(directrix_p2[1]) - float(directrix_p1[1])
    length = math.hypot(dx, dy)
    sign = 1.0 if d_signed >= 0.0 else -1.0
    ux = -dy / length * sign
    uy = dx / length * sign
    vertex_x = float(focus[0]) - (d / 2.0) * ux
    vertex_y = float(focus[1]) - (d / 2.0) * uy
    return ParabolaParams(vertex_x, vertex_y, d / 2.0, math.atan2(uy, ux))


def parabola_from_equation(
    p: float, direction: ParabolaDirection, vertex: Sequence[float] = (0.0, 0.0)
) -> Optional[ParabolaParams]:
    if not _finite(p) or p < _EPS_FOCAL or direction not in _DIRECTION_ANGLES:
        return None
    return ParabolaParams(float(vertex[0]), float(vertex[1]), float(p), _DIRECTION_ANGLES[direction])


def parabola_from_general(a: float, b: float, c: float, axis: str = "y") -> Optional[ParabolaParams]:
    """Canonical form of ``y = a x² + b x + c`` (``axis="y"``) or ``x = a y² + b y + c``."""

    if not _finite(a, b, c) or abs(a) < _EPS_AXIS:
        return None
    s = -b / (2.0 * a)
    value = c - b * b / (4.0 * a)
    p = 1.0 / (4.0 * abs(a))
    if axis == "y":
        return ParabolaParams(s, value, p, math.pi / 2.0 if a > 0 else -math.pi / 2.0)
    return ParabolaParams(value, s, p, 0.0 if a > 0 else math.pi)


def parabola_points(params: ParabolaParams, t_max: float, samples: int) -> np.ndarray:
    """Sample ``V + u·t²/(4p) + v·t`` for ``t`` in ``[-t_max, t_max]``."""

    if not _finite(params.vertex_x, params.vertex_y, params.p, params.axis_angle, t_max):
        return _empty()
    if params.p < _EPS_FOCAL:
        return _empty()
    ux, uy = params.axis
    vx, vy = -uy, ux
    t = _symmetric_parameters(t_max, samples, 4)
    x0 = t * t / (4.0 * params.p)
    xs = params.vertex_x + ux * x0 + vx * t
    ys = params.vertex_y + uy * x0 + vy * t
    return np.column_stack((xs, ys))


def parabola_points_by_vertex_focus(
    vertex: Sequence[float], focus: Sequence[float], t_max: float, samples: int
) -> np.ndarray:
    params = parabola_from_vertex_focus(vertex, focus)
    if params is None:
        return _empty()
    return parabola_points(params, t_max, samples)


def parabola_points_by_focus_directrix(
    focus: Sequence[float],
    directrix_p1: Sequence[float],
    directrix_p2: Sequence[float],
    t_max: float,
    samples: int,
) -> np.ndarray:
    params = parabola_from_focus_directrix(focus, directrix_p1, directrix_p2)
    if params is None:
        return _empty()
    return parabola_points(params, t_max, samples)


# ---------------------------------------------------------------------------
# Hyperbola


def hyperbola_points(params: HyperbolaParams, t_max: float, samples: int) -> HyperbolaSamples:
    """Sample both branches of a hyperbola over ``t`` in ``[-t_max, t_max]``.

    Horizontal: ``(cx ± a·cosh t, cy + b·sinh t)``.
    Vertical: ``(cx + b·sinh t, cy ± a·cosh t)``.
    """

    empty = HyperbolaSamples(_empty(), _empty())
    if not _finite(params.center_x, params.center_y, params.a, params.b):
        return empty
    if params.a <= 0.0 or params.b <= 0.0:
        return empty
    if not _finite(t_max) or t_max <= 0.0:
        return empty

    t = _symmetric_parameters(t_max, samples, 16)
    along = params.a * np.cosh(t)
    across = params.b * np.sinh(t)
    cx, cy = params.center_x, params.center_y

    if params.orientation == "horizontal":
        branch1 = np.column_stack((cx + along, cy + across))
        branch2 = np.column_stack((cx - along, cy + across))
    else:
        branch1 = np.column_stack((cx + across, cy + along))
        branch2 = np.column_stack((cx + across, cy - along))
    return HyperbolaSamples(branch1, branch2)


def solve_t_max_for_viewport(
    a: float, b: float, x_range: float, y_range: float, orientation: HyperbolaOrientation
) -> float:
    """Smallest ``t_max`` whose samples reach the edge of a ``±x_range × ±y_range`` viewport."""

    if not _finite(a, b) or a <= 0.0 or b <= 0.0:
        return 0.0
    if not _finite(x_range, y_range) or x_range <= 0.0 or y_range <= 0.0:
        return 0.0

    if orientation == "horizontal":
        t_x = max(0.0, math.acosh(max(1.0, x_range / a)))
        t_y = max(0.0, math.asinh(y_range / b))
    else:
        t_x = max(0.0, math.asinh(x_range / b))
        t_y = max(0.0, math.acosh(max(1.0, y_range / a)))
    return min(t_x, t_y)


# ---------------------------------------------------------------------------
# Ellipse


def ellipse_from_foci(
    f1: Sequence[float], f2: Sequence[float], point_on: Sequence[float]
) -> Optional[EllipseParams]:
    """Ellipse with foci ``f1``, ``f2`` passing through ``point_on``."""

    cx = (float(f1[0]) + float(f2[0])) / 2.0
    cy = (float(f1[1]) + float(f2[1])) / 2.0
    dx = float(f2[0]) - float(f1[0])
    dy = float(f2[1]) - float(f1[1])
    c = math.hypot(dx, dy) / 2.0
    a = (
        math.hypot(float(point_on[0]) - float(f1[0]), float(point_on[1]) - float(f1[1]))
        + math.hypot(float(point_on[0]) - float(f2[0]), float(point_on[1]) - float(f2[1]))
    ) / 2.0
    b_sq = a * a - c * c
    if a < _EPS_AXIS or b_sq < _EPS_AXIS * _EPS_AXIS:
        return None
    rotation = math.atan2(dy, dx) if c > _EPS_AXIS else 0.0
    return EllipseParams(cx, cy, a, math.sqrt(b_sq), rotation)


def ellipse_from_center_axes(
    center: Sequence[float], major_end: Sequence[float], minor_end: Sequence[float]
) -> Optional[EllipseParams]:
    """Ellipse centred at ``center``; ``b`` is the distance of ``minor_end`` from the major axis."""

    dx = float(major_end[0]) - float(center[0])
    dy = float(major_end[1]) - float(center[1])
    a = math.hypot(dx, dy)
    if a < _EPS_AXIS:
        return None
    b = signed_distance_point_to_line(minor_end, center, major_end)
    if b is None or abs(b) < _EPS_AXIS:
        return None
    return EllipseParams(float(center[0]), float(center[1]), a, abs(b), math.atan2(dy, dx))


def ellipse_points(params: EllipseParams, samples: int) -> np.ndarray:
    if not _finite(params.center_x, params.center_y, params.a, params.b, params.rotation):
        return _empty()
    if params.a <= 0.0 or params.b <= 0.0:
        return _empty()
    theta = np.linspace(0.0, 2.0 * math.pi, max(8, int(samples)), endpoint=False)
    cos_r, sin_r = math.cos(params.rotation), math.sin(params.rotation)
    u = params.a * np.cos(theta)
    v = params.b * np.sin(theta)
    xs = params.center_x + u * cos_r - v * sin_r
    ys = params.center_y + u * sin_r + v * cos_r
    return np.column_stack((xs, ys))


__all__ = [
    "EllipseParams",
    "ParabolaParams",
    "HyperbolaParams",
    "HyperbolaSamples",
    "signed_distance_point_to_line",
    "parabola_from_vertex_focus",
    "parabola_from_focus_directrix",
    "parabola_from_equation",
    "parabola_from_general",
    "parabola_points",
    "parabola_points_by_vertex_focus",
    "parabola_points_by_focus_directrix",
    "hyperbola_points",
    "solve_t_max_for_viewport",
    "ellipse_from_foci",
    "ellipse_from_center_axes",
    "ellipse_points",
]
