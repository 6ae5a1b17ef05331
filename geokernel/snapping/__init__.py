"""Snapping and curve intersection."""

from .curves import resolve_curve
from .engine import get_snap_position
from .intersections import (
    intersect_circle_circle,
    intersect_circle_line,
    intersect_curve_line,
    intersect_curves,
    intersect_ellipse_line,
    intersect_function_line,
    intersect_hyperbola_line,
    intersect_line_line,
    intersect_parabola_line,
)
from .types import (
    X_AXIS_ID,
    Y_AXIS_ID,
    CircleCurve,
    EllipseCurve,
    FunctionCurve,
    HyperbolaCurve,
    LineCurve,
    ParabolaCurve,
    SnapResult,
    SnapType,
)

__all__ = [
    "get_snap_position",
    "resolve_curve",
    "intersect_circle_circle",
    "intersect_circle_line",
    "intersect_curve_line",
    "intersect_curves",
    "intersect_ellipse_line",
    "intersect_function_line",
    "intersect_hyperbola_line",
    "intersect_line_line",
    "intersect_parabola_line",
    "SnapResult",
    "SnapType",
    "LineCurve",
    "CircleCurve",
    "EllipseCurve",
    "ParabolaCurve",
    "HyperbolaCurve",
    "FunctionCurve",
    "X_AXIS_ID",
    "Y_AXIS_ID",
]
