"""Rigid and similarity transforms for points and triangles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Sequence, Tuple

Point = Tuple[float, float]
Triangle = Tuple[Point, Point, Point]
FlipType = Literal["none", "horizontal", "vertical"]

_EPS = 1e-12


@dataclass(frozen=True)
class TriangleBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def triangle_centroid(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> Point:
    return (
        (float(p1[0]) + float(p2[0]) + float(p3[0])) / 3.0,
        (float(p1[1]) + float(p2[1]) + float(p3[1])) / 3.0,
    )


def triangle_bounds(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> TriangleBounds:
    xs = (float(p1[0]), float(p2[0]), float(p3[0]))
    ys = (float(p1[1]), float(p2[1]), float(p3[1]))
    return TriangleBounds(min(xs), max(xs), min(ys), max(ys))


def transform_triangle(
    points: Sequence[Sequence[float]],
    scale: float,
    rotation_deg: float,
    flip: FlipType,
    target_center: Sequence[float],
) -> Triangle:
    """Map a triangle about its centroid and place the result at ``target_center``.

    Each vertex is taken relative to the centroid, flipped (``horizontal``
    negates x, ``vertical`` negates y), scaled uniformly, rotated by
    ``rotation_deg`` counter-clockwise and finally translated so the centroid
    lands on ``target_center``.
    """

    if len(points) != 3:
        raise ValueError(f"a triangle needs exactly 3 vertices, got {len(points)}")
    cx, cy = triangle_centroid(*points)
    theta = math.radians(rotation_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    tx, ty = float(target_center[0]), float(target_center[1])

    def _map(p: Sequence[float]) -> Point:
        x = float(p[0]) - cx
        y = float(p[1]) - cy
        if flip == "horizontal":
            x = -x
        elif flip == "vertical":
            y = -y
        x *= scale
        y *= scale
        return (x * cos_t - y * sin_t + tx, x * sin_t + y * cos_t + ty)

    return (_map(points[0]), _map(points[1]), _map(points[2]))


def congruent_triangle(
    points: Sequence[Sequence[float]],
    rotation_deg: float,
    flip: FlipType,
    target_center: Sequence[float],
) -> Triangle:
    return transform_triangle(points, 1.0, rotation_deg, flip, target_center)


def rotate_around(p: Sequence[float], center: Sequence[float], rad: float) -> Point:
    x = float(p[0]) - float(center[0])
    y = float(p[1]) - float(center[1])
    c, s = math.cos(rad), math.sin(rad)
    return (float(center[0]) + x * c - y * s, float(center[1]) + x * s + y * c)


def scale_around(p: Sequence[float], center: Sequence[float], k: float) -> Point:
    return (
        float(center[0]) + (float(p[0]) - float(center[0])) * k,
        float(center[1]) + (float(p[1]) - float(center[1])) * k,
    )


def translate(p: Sequence[float], d: Sequence[float]) -> Point:
    return (float(p[0]) + float(d[0]), float(p[1]) + float(d[1]))


def reflect_across_line(p: Sequence[float], a: Sequence[float], b: Sequence[float]) -> Point:
    """Mirror ``p`` in the line through ``a`` and ``b``; a collapsed line leaves ``p`` unchanged."""

    dx = float(b[0]) - float(a[0])
    dy = float(b[1]) - float(a[1])
    len2 = dx * dx + dy * dy
    if len2 < _EPS:
        return (float(p[0]), float(p[1]))
    t = ((float(p[0]) - float(a[0])) * dx + (float(p[1]) - float(a[1])) * dy) / len2
    proj_x = float(a[0]) + t * dx
    proj_y = float(a[1]) + t * dy
    return (2.0 * proj_x - float(p[0]), 2.0 * proj_y - float(p[1]))


def to_math_from_pixels(p: Sequence[float], pixels_per_unit: float = 50.0) -> Point:
    """Canvas pixels (y down) to math units (y up)."""

    return (float(p[0]) / pixels_per_unit, -float(p[1]) / pixels_per_unit)


def to_pixels_from_math(p: Sequence[float], pixels_per_unit: float = 50.0) -> Point:
    return (float(p[0]) * pixels_per_unit, -float(p[1]) * pixels_per_unit)


__all__ = [
    "FlipType",
    "TriangleBounds",
    "triangle_centroid",
    "triangle_bounds",
    "transform_triangle",
    "congruent_triangle",
    "rotate_around",
    "scale_around",
    "translate",
    "reflect_across_line",
    "to_math_from_pixels",
    "to_pixels_from_math",
]
