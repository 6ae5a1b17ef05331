"""Analytic ruler-and-compass constructions.

Every routine takes plain ``(x, y)`` pairs and is free of side effects.
Degenerate input never raises: routines either fall back to a documented
sentinel (the first input point, a zero radius) or return ``None``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import get_kernel_config

Point = Tuple[float, float]
Vector = Tuple[float, float]

_EPS_LEN2 = 1e-10
_EPS_LEN = 1e-6
_EPS_DET = 1e-10
_TANGENT_EPS = 1e-6


@dataclass(frozen=True)
class Incircle:
    x: float
    y: float
    inradius: float

    @property
    def center(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class Circumcircle:
    x: float
    y: float
    circumradius: float

    @property
    def center(self) -> Point:
        return (self.x, self.y)


def _as_point(pt: Sequence[float]) -> Point:
    return (float(pt[0]), float(pt[1]))


def _sub(a: Sequence[float], b: Sequence[float]) -> Vector:
    return (float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return float(a[0]) * float(b[0]) + float(a[1]) * float(b[1])


def _cross(a: Sequence[float], b: Sequence[float]) -> float:
    return float(a[0]) * float(b[1]) - float(a[1]) * float(b[0])


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def midpoint(a: Sequence[float], b: Sequence[float]) -> Point:
    """Return the arithmetic mean of ``a`` and ``b``."""

    ax, ay = _as_point(a)
    bx, by = _as_point(b)
    return ((ax + bx) / 2.0, (ay + by) / 2.0)


def perpendicular_foot(point: Sequence[float], line_p1: Sequence[float], line_p2: Sequence[float]) -> Point:
    """Return the orthogonal projection of ``point`` onto the infinite line ``line_p1``-``line_p2``.

    A collapsed line yields ``line_p1``.
    """

    d = _sub(line_p2, line_p1)
    len2 = _dot(d, d)
    if len2 < _EPS_LEN2:
        return _as_point(line_p1)
    t = _dot(_sub(point, line_p1), d) / len2
    return (float(line_p1[0]) + t * d[0], float(line_p1[1]) + t * d[1])


def point_line_distance(point: Sequence[float], line_p1: Sequence[float], line_p2: Sequence[float]) -> float:
    """Distance from ``point`` to the infinite line through the two points."""

    return distance(point, perpendicular_foot(point, line_p1, line_p2))


def parallel_point(
    point: Sequence[float],
    line_p1: Sequence[float],
    line_p2: Sequence[float],
    distance: float = 50.0,
) -> Point:
    """Return the point ``distance`` away from ``point`` along the direction of the line.

    Together with ``point`` it defines the parallel through ``point``.  A
    collapsed reference line falls back to the +x direction.
    """

    px, py = _as_point(point)
    d = _sub(line_p2, line_p1)
    length = math.hypot(*d)
    if length < _EPS_LEN:
        return (px + distance, py)
    return (px + d[0] / length * distance, py + d[1] / length * distance)


def perpendicular_point(
    point: Sequence[float],
    line_p1: Sequence[float],
    line_p2: Sequence[float],
    distance: float = 50.0,
) -> Optional[Point]:
    """Return the point ``distance`` away from ``point`` along the normal ``(-dy, dx)`` of the line."""

    px, py = _as_point(point)
    d = _sub(line_p2, line_p1)
    length = math.hypot(*d)
    if length <= _EPS_LEN:
        return None
    return (px - d[1] / length * distance, py + d[0] / length * distance)


def angle_degrees(p1: Sequence[float], vertex: Sequence[float], p2: Sequence[float]) -> float:
    """Counter-clockwise sweep from ray ``vertex→p1`` to ray ``vertex→p2`` in ``[0, 360)``."""

    a1 = math.atan2(float(p1[1]) - float(vertex[1]), float(p1[0]) - float(vertex[0]))
    a2 = math.atan2(float(p2[1]) - float(vertex[1]), float(p2[0]) - float(vertex[0]))
    diff = math.degrees(a2 - a1)
    if diff < 0.0:
        diff += 360.0
    return diff


def is_right_angle(angle_degrees: float, tolerance: Optional[float] = None) -> bool:
    """Return ``True`` when the angle is within ``tolerance`` degrees of 90° or 270°.

    ``tolerance`` defaults to ``KernelConfig.right_angle_tolerance``.
    """

    if tolerance is None:
        tolerance = get_kernel_config().right_angle_tolerance
    normalized = abs(math.fmod(angle_degrees, 360.0))
    return abs(normalized - 90.0) < tolerance or abs(normalized - 270.0) < tolerance


def incenter(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> Incircle:
    """Return the incenter and inradius of triangle ``p1 p2 p3``.

    The incenter is the average of the vertices weighted by the lengths of
    the opposite sides; the inradius is ``2·area / perimeter``.  A triangle
    with (near) zero perimeter yields ``p1`` and radius 0.
    """

    a = distance(p2, p3)
    b = distance(p1, p3)
    c = distance(p1, p2)
    perimeter = a + b + c
    if perimeter < _EPS_LEN:
        x, y = _as_point(p1)
        return Incircle(x, y, 0.0)

    x = (a * float(p1[0]) + b * float(p2[0]) + c * float(p3[0])) / perimeter
    y = (a * float(p1[1]) + b * float(p2[1]) + c * float(p3[1])) / perimeter
    area = abs(_cross(_sub(p2, p1), _sub(p3, p1))) / 2.0
    return Incircle(x, y, 2.0 * area / perimeter)


def circumcenter(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> Circumcircle:
    """Return the circumcenter and circumradius of triangle ``p1 p2 p3``.

    Collinear input has no circumcircle; the centroid is returned with radius 0.
    """

    ax, ay = _as_point(p1)
    bx, by = _as_point(p2)
    cx, cy = _as_point(p3)

    d = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < _EPS_DET:
        return Circumcircle((ax + bx + cx) / 3.0, (ay + by + cy) / 3.0, 0.0)

    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
    return Circumcircle(ux, uy, math.hypot(ux - ax, uy - ay))


def tangent_points(
    center: Sequence[float], radius: float, external: Sequence[float]
) -> Optional[Tuple[Point, Point]]:
    """Return the two points where tangents from ``external`` touch the circle.

    ``None`` unless ``external`` lies strictly outside the circle.
    """

    cx, cy = _as_point(center)
    dx = float(external[0]) - cx
    dy = float(external[1]) - cy
    d = math.hypot(dx, dy)
    if d <= radius + _TANGENT_EPS:
        return None

    a = radius * radius / d
    h = math.sqrt(max(radius * radius - a * a, 0.0))
    ux, uy = dx / d, dy / d
    px, py = cx + a * ux, cy + a * uy
    return (
        (px - h * uy, py + h * ux),
        (px + h * uy, py - h * ux),
    )


__all__ = [
    "Point",
    "Incircle",
    "Circumcircle",
    "distance",
    "midpoint",
    "perpendicular_foot",
    "point_line_distance",
    "parallel_point",
    "perpendicular_point",
    "angle_degrees",
    "is_right_angle",
    "incenter",
    "circumcenter",
    "tangent_points",
]
