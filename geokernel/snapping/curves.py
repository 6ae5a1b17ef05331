"""Turn stored elements into evaluated curve records."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from ..conics import EllipseParams, HyperbolaParams, ParabolaParams
from ..elements import (
    CircleElement,
    Element,
    EllipseElement,
    FunctionGraphElement,
    HyperbolaElement,
    LineElement,
    ParabolaElement,
    Point,
    PointElement,
)
from ..errors import ExpressionError
from ..expressions import ScalarFunction, compile_expression
from .types import CircleCurve, Curve, EllipseCurve, FunctionCurve, HyperbolaCurve, LineCurve, ParabolaCurve

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Optional[Element]]
Evaluator = Callable[[str], ScalarFunction]

_EPS = 1e-9


def resolve_point(resolve: Resolver, element_id: str) -> Optional[Point]:
    """Coordinates of point ``element_id``, or ``None`` if missing or not a point."""

    element = resolve(element_id)
    if not isinstance(element, PointElement):
        return None
    return (element.x, element.y)


def line_curve(element: LineElement, resolve: Resolver) -> Optional[LineCurve]:
    p1 = resolve_point(resolve, element.p1)
    p2 = resolve_point(resolve, element.p2)
    if p1 is None or p2 is None:
        return None
    return LineCurve(element.id, p1, p2, element.subtype)


def circle_curve(element: CircleElement, resolve: Resolver) -> Optional[CircleCurve]:
    center = resolve_point(resolve, element.center)
    edge = resolve_point(resolve, element.edge)
    if center is None or edge is None:
        return None
    return CircleCurve(element.id, center, math.hypot(edge[0] - center[0], edge[1] - center[1]))


def _usable(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def resolve_curve(
    element: Element,
    resolve: Resolver,
    evaluator: Optional[Evaluator] = None,
) -> Optional[Curve]:
    """Return the curve described by ``element`` or ``None`` when it is not a usable curve."""

    if isinstance(element, LineElement):
        return line_curve(element, resolve)
    if isinstance(element, CircleElement):
        return circle_curve(element, resolve)
    if isinstance(element, EllipseElement):
        if not _usable(element.center_x, element.center_y, element.a, element.b, element.rotation):
            return None
        if element.a <= _EPS or element.b <= _EPS:
            return None
        return EllipseCurve(
            element.id,
            EllipseParams(element.center_x, element.center_y, element.a, element.b, element.rotation),
        )
    if isinstance(element, ParabolaElement):
        if not _usable(element.vertex_x, element.vertex_y, element.p, element.axis_angle):
            return None
        if element.p <= _EPS:
            return None
        return ParabolaCurve(
            element.id,
            ParabolaParams(element.vertex_x, element.vertex_y, element.p, element.axis_angle),
        )
    if isinstance(element, HyperbolaElement):
        if not _usable(element.center_x, element.center_y, element.a, element.b):
            return None
        if element.a <= 0.0 or element.b <= 0.0:
            return None
        return HyperbolaCurve(
            element.id,
            HyperbolaParams(element.center_x, element.center_y, element.a, element.b, element.orientation),
        )
    if isinstance(element, FunctionGraphElement):
        compile_fn = evaluator or compile_expression
        try:
            func = compile_fn(element.expression)
        except ExpressionError as exc:
            logger.debug("skipping function graph %s: %s", element.id, exc)
            return None
        return FunctionCurve(element.id, func)
    return None


__all__ = ["Resolver", "Evaluator", "resolve_point", "line_curve", "circle_curve", "resolve_curve"]
