"""Cursor snapping.

:func:`get_snap_position` runs a single "closest so far" scan over snap
candidates, starting from the threshold and replacing the current best only
on a strictly smaller distance.  Categories are visited in a fixed order
(origin, points, intersections, segment midpoints, then nearest points on
lines, circles, function graphs and conics), so on an exact tie the earlier
category wins.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import KernelConfig, resolve_config
from ..elements import Element, PointElement
from ..logging_utils import apply_debug_logging
from .curves import Evaluator, Resolver, resolve_curve
from .intersections import intersect_circle_circle, intersect_curve_line, intersect_line_line
from .nearest import (
    nearest_on_circle,
    nearest_on_ellipse,
    nearest_on_function,
    nearest_on_hyperbola,
    nearest_on_line,
    nearest_on_parabola,
)
from .types import (
    X_AXIS,
    X_AXIS_ID,
    Y_AXIS,
    Y_AXIS_ID,
    CircleCurve,
    Curve,
    EllipseCurve,
    FunctionCurve,
    HyperbolaCurve,
    LineCurve,
    ParabolaCurve,
    Point,
    SnapResult,
    SnapType,
)

logger = logging.getLogger(__name__)

ElementsArg = Union[Mapping[str, Element], Iterable[Element]]

_AXIS_LABELS = {X_AXIS_ID: "x-axis intersection", Y_AXIS_ID: "y-axis intersection"}


class _Closest:
    """Running best candidate."""

    def __init__(self, x: float, y: float, threshold: float):
        self.x = x
        self.y = y
        self.distance = threshold
        self.result = SnapResult(x, y)

    def offer(
        self,
        point: Optional[Sequence[float]],
        snap_type: SnapType,
        label: Optional[str] = None,
        snapped_to: Optional[str] = None,
        intersection_elements: Optional[Tuple[str, str]] = None,
    ) -> None:
        if point is None:
            return
        px, py = float(point[0]), float(point[1])
        d = math.hypot(px - self.x, py - self.y)
        if not d < self.distance:
            return
        self.distance = d
        self.result = SnapResult(px, py, snapped_to, snap_type, label, intersection_elements)


def _as_mapping(elements: ElementsArg) -> Mapping[str, Element]:
    if isinstance(elements, Mapping):
        return elements
    return {element.id: element for element in elements}


def _function_window(
    line: LineCurve, q: Point, threshold: float, factor: float
) -> Optional[Tuple[float, float]]:
    """Parameter window on ``line`` around the projection of ``q``."""

    dx, dy = line.direction
    length2 = dx * dx + dy * dy
    if length2 <= 0.0:
        return None
    t_q = ((q[0] - line.p1[0]) * dx + (q[1] - line.p1[1]) * dy) / length2
    half = factor * threshold / math.sqrt(length2)
    return (t_q - half, t_q + half)


def _axis_points(curve: Curve, axis: LineCurve, q: Point, threshold: float, cfg: KernelConfig) -> List[Point]:
    margin = cfg.segment_clamp_margin
    if isinstance(curve, LineCurve):
        return intersect_line_line(curve.p1, curve.p2, axis.p1, axis.p2, curve.bounded, False, margin)
    return intersect_curve_line(
        curve,
        axis,
        margin=margin,
        function_window=_function_window(axis, q, threshold, cfg.function_window_factor),
        function_samples=cfg.function_line_samples,
        bisection_iterations=cfg.bisection_iterations,
    )


def get_snap_position(
    x: float,
    y: float,
    elements: ElementsArg,
    threshold: Optional[float] = None,
    exclude_ids: Iterable[str] = (),
    resolver: Optional[Resolver] = None,
    *,
    evaluator: Optional[Evaluator] = None,
    config: Optional[KernelConfig] = None,
) -> SnapResult:
    """Return the best snap target for the cursor at ``(x, y)``.

    Only visible elements whose id is not in ``exclude_ids`` are candidates.
    ``resolver`` looks up referenced points (defaults to ``elements``) and
    ``evaluator`` compiles function-graph expressions.  When no candidate is
    strictly closer than ``threshold`` the raw position is returned with no
    snap fields set.
    """

    cfg = resolve_config(config)
    threshold = cfg.snap_threshold if threshold is None else float(threshold)
    store = _as_mapping(elements)
    resolve: Resolver = resolver if resolver is not None else store.get
    excluded = set(exclude_ids)
    q: Point = (float(x), float(y))
    best = _Closest(q[0], q[1], threshold)
    margin = cfg.segment_clamp_margin

    candidates = [el for el in store.values() if el.visible and el.id not in excluded]
    points = [el for el in candidates if isinstance(el, PointElement)]

    lines: List[LineCurve] = []
    circles: List[CircleCurve] = []
    others: List[Curve] = []
    for element in candidates:
        if isinstance(element, PointElement):
            continue
        curve = resolve_curve(element, resolve, evaluator)
        if curve is None:
            continue
        if isinstance(curve, LineCurve):
            lines.append(curve)
        elif isinstance(curve, CircleCurve):
            circles.append(curve)
        else:
            others.append(curve)

    # 0: world origin
    best.offer((0.0, 0.0), "intersection", "origin", intersection_elements=(X_AXIS_ID, Y_AXIS_ID))

    # 1: existing points
    for point in points:
        best.offer(point.xy, "point", point.name or "point", snapped_to=point.id)

    # 1.5: intersections
    for circle in circles:
        for line in lines:
            for p in intersect_curve_line(circle, line, margin=margin):
                best.offer(p, "intersection", "intersection", intersection_elements=(circle.element_id, line.element_id))

    for i, first in enumerate(lines):
        for second in lines[i + 1:]:
            for p in intersect_curve_line(first, second, margin=margin):
                best.offer(p, "intersection", "intersection", intersection_elements=(first.element_id, second.element_id))

    for i, first in enumerate(circles):
        for second in circles[i + 1:]:
            for p in intersect_circle_circle(first.center, first.radius, second.center, second.radius):
                best.offer(p, "intersection", "intersection", intersection_elements=(first.element_id, second.element_id))

    for curve in others:
        for line in lines:
            window = None
            if isinstance(curve, FunctionCurve):
                window = _function_window(line, q, threshold, cfg.function_window_factor)
                if window is None:
                    continue
            found = intersect_curve_line(
                curve,
                line,
                margin=margin,
                function_window=window,
                function_samples=cfg.function_line_samples,
                bisection_iterations=cfg.bisection_iterations,
            )
            for p in found:
                best.offer(p, "intersection", "intersection", intersection_elements=(curve.element_id, line.element_id))

    for curve in [*lines, *circles, *others]:
        for axis in (X_AXIS, Y_AXIS):
            for p in _axis_points(curve, axis, q, threshold, cfg):
                best.offer(
                    p,
                    "intersection",
                    _AXIS_LABELS[axis.element_id],
                    intersection_elements=(curve.element_id, axis.element_id),
                )

    # 2: segment midpoints
    for line in lines:
        if line.subtype != "segment":
            continue
        mid = ((line.p1[0] + line.p2[0]) / 2.0, (line.p1[1] + line.p2[1]) / 2.0)
        best.offer(mid, "midpoint", "midpoint", snapped_to=line.element_id)

    # 3-4: on line, on circle
    for line in lines:
        best.offer(nearest_on_line(q, line.p1, line.p2, line.subtype, margin), "on_line", "on line", line.element_id)

    for circle in circles:
        best.offer(
            nearest_on_circle(q, circle.center, circle.radius, cfg.min_center_distance),
            "on_circle",
            "on circle",
            circle.element_id,
        )

    # 4.5-4.8: function graphs and conics
    for curve in others:
        if isinstance(curve, FunctionCurve):
            best.offer(
                nearest_on_function(q, curve.func, best.distance, cfg.curve_samples),
                "on_function",
                "on function",
                curve.element_id,
            )
    for curve in others:
        if isinstance(curve, EllipseCurve):
            best.offer(nearest_on_ellipse(q, curve.params, cfg.ellipse_samples), "on_ellipse", "on ellipse", curve.element_id)
    for curve in others:
        if isinstance(curve, ParabolaCurve):
            best.offer(
                nearest_on_parabola(q, curve.params, best.distance, cfg.curve_samples),
                "on_parabola",
                "on parabola",
                curve.element_id,
            )
    for curve in others:
        if isinstance(curve, HyperbolaCurve):
            best.offer(
                nearest_on_hyperbola(q, curve.params, best.distance, cfg.curve_samples),
                "on_hyperbola",
                "on hyperbola",
                curve.element_id,
            )

    result = best.result
    if result.snapped:
        logger.debug(
            "snap (%.4g, %.4g) -> %s at (%.4g, %.4g) d=%.4g", q[0], q[1], result.snap_type, result.x, result.y, best.distance
        )
    return result


apply_debug_logging(globals(), logger=logger)

__all__ = ["get_snap_position"]
