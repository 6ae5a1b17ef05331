from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from ..conics import EllipseParams, HyperbolaParams, ParabolaParams
from ..expressions import ScalarFunction

Point = Tuple[float, float]

SnapType = Literal[
    "point",
    "midpoint",
    "intersection",
    "on_line",
    "on_circle",
    "on_ellipse",
    "on_parabola",
    "on_hyperbola",
    "on_function",
]

X_AXIS_ID = "x-axis"
Y_AXIS_ID = "y-axis"


@dataclass(frozen=True)
class SnapResult:
    """Resolved cursor target.

    Without a snap only ``x`` and ``y`` are set and they equal the query.
    """

    x: float
    y: float
    snapped_to: Optional[str] = None
    snap_type: Optional[SnapType] = None
    label: Optional[str] = None
    intersection_elements: Optional[Tuple[str, str]] = None

    @property
    def snapped(self) -> bool:
        return self.snap_type is not None

    @property
    def position(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class LineCurve:
    element_id: str
    p1: Point
    p2: Point
    subtype: str = "line"

    @property
    def bounded(self) -> bool:
        return self.subtype in ("segment", "vector")

    @property
    def direction(self) -> Point:
        return (self.p2[0] - self.p1[0], self.p2[1] - self.p1[1])


@dataclass(frozen=True)
class CircleCurve:
    element_id: str
    center: Point
    radius: float


@dataclass(frozen=True)
class EllipseCurve:
    element_id: str
    params: EllipseParams


@dataclass(frozen=True)
class ParabolaCurve:
    element_id: str
    params: ParabolaParams


@dataclass(frozen=True)
class HyperbolaCurve:
    element_id: str
    params: HyperbolaParams


@dataclass(frozen=True)
class FunctionCurve:
    element_id: str
    func: ScalarFunction


Curve = Union[LineCurve, CircleCurve, EllipseCurve, ParabolaCurve, HyperbolaCurve, FunctionCurve]

X_AXIS = LineCurve(X_AXIS_ID, (0.0, 0.0), (1.0, 0.0), "line")
Y_AXIS = LineCurve(Y_AXIS_ID, (0.0, 0.0), (0.0, 1.0), "line")


__all__ = [
    "Point",
    "SnapType",
    "SnapResult",
    "LineCurve",
    "CircleCurve",
    "EllipseCurve",
    "ParabolaCurve",
    "HyperbolaCurve",
    "FunctionCurve",
    "Curve",
    "X_AXIS",
    "Y_AXIS",
    "X_AXIS_ID",
    "Y_AXIS_ID",
]
