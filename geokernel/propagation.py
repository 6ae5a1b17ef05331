"""Recompute derived elements after a mutation.

:func:`compute` evaluates one element from its definition.  :func:`propagate`
pushes a change through the dependency graph: every transitive dependent of
the changed element is collected through a reverse-dependency index and then
recomputed in topological order, so each element is evaluated once, after all
of its affected inputs.  Elements that sit on a dependency cycle are never
released by the topological worklist; they keep their previous values and a
warning is logged (``strict=True`` raises :class:`DependencyCycleError`).

The lifecycle helpers (:func:`add_element`, :func:`update_element`,
:func:`remove_element`) return new mappings and never mutate their input.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional, Set, Type

from . import constructions as cons
from . import conics
from .config import KernelConfig, resolve_config
from .elements import (
    DEFINITION_TYPES,
    Angle3Points,
    AngleElement,
    CircleByPoints,
    CircleElement,
    Circumcenter,
    Definition,
    Distance,
    Element,
    ElementId,
    EllipseByCenter,
    EllipseByCenterAxes,
    EllipseByEquation,
    EllipseByFoci,
    EllipseElement,
    Free,
    FunctionExpression,
    HyperbolaByEquation,
    HyperbolaElement,
    Incenter,
    IncircleEdge,
    Intersection,
    LabelElement,
    LineElement,
    LineFromPoints,
    Midpoint,
    ParabolaByEquation,
    ParabolaByFocusDirectrix,
    ParabolaByVertexFocus,
    ParabolaElement,
    ParabolaGeneral,
    ParallelPoint,
    PerpendicularFootPoint,
    PerpendicularPoint,
    Point,
    PointElement,
    SegmentMark,
    SegmentMarkElement,
    TangentPoint,
    check_dependencies,
    dependency_ids,
)
from .errors import DependencyCycleError, UnknownElementError
from .logging_utils import apply_debug_logging
from .snapping.curves import Evaluator, Resolver, resolve_curve, resolve_point
from .snapping.intersections import intersect_curves

logger = logging.getLogger(__name__)

Updates = Dict[str, Any]


@dataclass(frozen=True)
class _Env:
    resolve: Resolver
    config: KernelConfig
    evaluator: Optional[Evaluator] = None

    def point(self, element_id: ElementId) -> Optional[Point]:
        return resolve_point(self.resolve, element_id)

    def line_points(self, element_id: ElementId) -> Optional[tuple]:
        line = self.resolve(element_id)
        if not isinstance(line, LineElement):
            return None
        p1 = self.point(line.p1)
        p2 = self.point(line.p2)
        if p1 is None or p2 is None:
            return None
        return (p1, p2)


def _xy(point: Optional[Point]) -> Optional[Updates]:
    if point is None:
        return None
    return {"x": float(point[0]), "y": float(point[1])}


# ---------------------------------------------------------------------------
# Point constructions


def _compute_midpoint(element: Element, d: Midpoint, env: _Env) -> Optional[Updates]:
    if not isinstance(element, PointElement):
        return None
    p1, p2 = env.point(d.p1), env.point(d.p2)
    if p1 is None or p2 is None:
        return None
    return _xy(cons.midpoint(p1, p2))


def _compute_intersection(element: Element, d: Intersection, env: _Env) -> Optional[Updates]:
    if not isinstance(element, PointElement):
        return None
    first, second = env.resolve(d.el1), env.resolve(d.el2)
    if first is None or second is None:
        return None
    curve_a = resolve_curve(first, env.resolve, env.evaluator)
    curve_b = resolve_curve(second, env.resolve, env.evaluator)
    if curve_a is None or curve_b is None:
        return None
    found = intersect_curves(curve_a, curve_b, margin=env.config.segment_clamp_margin)
    if not 0 <= d.index < len(found):
        return None
    return _xy(found[d.index])


def _line_offset(element: Element, line_id: ElementId, point_id: ElementId, env: _Env) -> Optional[tuple]:
    if not isinstance(element, PointElement):
        return None
    line = env.line_points(line_id)
    point = env.point(point_id)
    if line is None or point is None:
        return None
    return (point, line[0], line[1])


def _compute_perpendicular_point(element: Element, d: PerpendicularPoint, env: _Env) -> Optional[Updates]:
    args = _line_offset(element, d.line_id, d.point_id, env)
    if args is None:
        return None
    return _xy(cons.perpendicular_point(*args, distance=env.config.construction_offset))


def _compute_parallel_point(element: Element, d: ParallelPoint, env: _Env) -> Optional[Updates]:
    args = _line_offset(element, d.line_id, d.point_id, env)
    if args is None:
        return None
    return _xy(cons.parallel_point(*args, distance=env.config.construction_offset))


def _compute_perpendicular_foot(element: Element, d: PerpendicularFootPoint, env: _Env) -> Optional[Updates]:
    args = _line_offset(element, d.line_id, d.point_id, env)
    if args is None:
        return None
    return _xy(cons.perpendicular_foot(*args))


def _triangle(d: Any, env: _Env) -> Optional[tuple]:
    pts = (env.point(d.p1), env.point(d.p2), env.point(d.p3))
    if any(p is None for p in pts):
        return None
    return pts


def _compute_incenter(element: Element, d: Incenter, env: _Env) -> Optional[Updates]:
    pts = _triangle(d, env) if isinstance(element, PointElement) else None
    if pts is None:
        return None
    return _xy(cons.incenter(*pts).center)


def _compute_incircle_edge(element: Element, d: IncircleEdge, env: _Env) -> Optional[Updates]:
    pts = _triangle(d, env) if isinstance(element, PointElement) else None
    if pts is None:
        return None
    circle = cons.incenter(*pts)
    return {"x": circle.x + circle.inradius, "y": circle.y}


def _compute_circumcenter(element: Element, d: Circumcenter, env: _Env) -> Optional[Updates]:
    pts = _triangle(d, env) if isinstance(element, PointElement) else None
    if pts is None:
        return None
    return _xy(cons.circumcenter(*pts).center)


def _compute_tangent_point(element: Element, d: TangentPoint, env: _Env) -> Optional[Updates]:
    if not isinstance(element, PointElement):
        return None
    circle = env.resolve(d.circle)
    external = env.point(d.external)
    if not isinstance(circle, CircleElement) or external is None:
        return None
    center, edge = env.point(circle.center), env.point(circle.edge)
    if center is None or edge is None:
        return None
    touching = cons.tangent_points(center, cons.distance(center, edge), external)
    if touching is None or d.index not in (0, 1):
        return None
    return _xy(touching[d.index])


# ---------------------------------------------------------------------------
# Lines, circles and measurements


def _compute_nothing(element: Element, d: Definition, env: _Env) -> Optional[Updates]:
    return None


def _compute_line(element: Element, d: LineFromPoints, env: _Env) -> Optional[Updates]:
    if not isinstance(element, LineElement):
        return None
    return {"p1": d.p1, "p2": d.p2}


def _compute_segment_mark(element: Element, d: SegmentMark, env: _Env) -> Optional[Updates]:
    if not isinstance(element, SegmentMarkElement):
        return None
    return {"line_id": d.line_id, "mark_type": d.mark_type}


def _compute_circle(element: Element, d: CircleByPoints, env: _Env) -> Optional[Updates]:
    if not isinstance(element, CircleElement):
        return None
    updates: Updates = {"center": d.center, "edge": d.edge}
    center, edge = env.point(d.center), env.point(d.edge)
    if center is not None and edge is not None:
        updates["radius"] = cons.distance(center, edge)
    return updates


def _compute_distance(element: Element, d: Distance, env: _Env) -> Optional[Updates]:
    if not isinstance(element, LabelElement):
        return None
    cfg = env.config
    p1 = env.point(d.el1)
    if p1 is None:
        return None
    if d.target == "line":
        line = env.line_points(d.el2)
        if line is None:
            return None
        p2 = cons.perpendicular_foot(p1, *line)
    else:
        p2 = env.point(d.el2)
        if p2 is None:
            return None
    value = cons.distance(p1, p2) / cfg.pixels_per_unit
    mx, my = cons.midpoint(p1, p2)
    return {
        "text": f"{value:.{cfg.measurement_precision}f}",
        "x": mx,
        "y": my + cfg.label_offset_y,
    }


def _compute_angle(element: Element, d: Angle3Points, env: _Env) -> Optional[Updates]:
    if not isinstance(element, AngleElement):
        return None
    updates: Updates = {"p1": d.p1, "vertex": d.vertex, "p2": d.p2}
    p1, vertex, p2 = env.point(d.p1), env.point(d.vertex), env.point(d.p2)
    if p1 is not None and vertex is not None and p2 is not None:
        value = cons.angle_degrees(p1, vertex, p2)
        updates["angle_value"] = value
        updates["is_right"] = cons.is_right_angle(value, env.config.right_angle_tolerance)
    return updates


# ---------------------------------------------------------------------------
# Conics


def _ellipse_updates(params: Optional[conics.EllipseParams]) -> Optional[Updates]:
    if params is None:
        return None
    return {
        "center_x": params.center_x,
        "center_y": params.center_y,
        "a": params.a,
        "b": params.b,
        "rotation": params.rotation,
    }


def _compute_ellipse_by_foci(element: Element, d: EllipseByFoci, env: _Env) -> Optional[Updates]:
    if not isinstance(element, EllipseElement):
        return None
    f1, f2, on = env.point(d.f1), env.point(d.f2), env.point(d.point_on)
    if f1 is None or f2 is None or on is None:
        return None
    return _ellipse_updates(conics.ellipse_from_foci(f1, f2, on))


def _compute_ellipse_by_center_axes(element: Element, d: EllipseByCenterAxes, env: _Env) -> Optional[Updates]:
    if not isinstance(element, EllipseElement):
        return None
    center, major, minor = env.point(d.center), env.point(d.major_end), env.point(d.minor_end)
    if center is None or major is None or minor is None:
        return None
    return _ellipse_updates(conics.ellipse_from_center_axes(center, major, minor))


def _valid_axes(a: float, b: float) -> bool:
    return math.isfinite(a) and math.isfinite(b) and a > 0.0 and b > 0.0


def _compute_ellipse_by_center(element: Element, d: EllipseByCenter, env: _Env) -> Optional[Updates]:
    if not isinstance(element, EllipseElement) or not _valid_axes(d.a, d.b):
        return None
    center = env.point(d.center)
    if center is None:
        return None
    return {"center_x": center[0], "center_y": center[1], "a": float(d.a), "b": float(d.b)}


def _compute_ellipse_by_equation(element: Element, d: EllipseByEquation, env: _Env) -> Optional[Updates]:
    if not isinstance(element, EllipseElement) or not _valid_axes(d.a, d.b):
        return None
    return _ellipse_updates(conics.EllipseParams(d.center_x, d.center_y, d.a, d.b, d.rotation))


def _parabola_updates(params: Optional[conics.ParabolaParams], **extra: Any) -> Optional[Updates]:
    if params is None:
        return None
    updates: Updates = {
        "vertex_x": params.vertex_x,
        "vertex_y": params.vertex_y,
        "p": params.p,
        "axis_angle": params.axis_angle,
    }
    updates.update(extra)
    return updates


def _compute_parabola_focus_directrix(element: Element, d: ParabolaByFocusDirectrix, env: _Env) -> Optional[Updates]:
    if not isinstance(element, ParabolaElement):
        return None
    focus = env.point(d.focus)
    directrix = env.line_points(d.directrix)
    if focus is None or directrix is None:
        return None
    return _parabola_updates(conics.parabola_from_focus_directrix(focus, *directrix))


def _compute_parabola_vertex_focus(element: Element, d: ParabolaByVertexFocus, env: _Env) -> Optional[Updates]:
    if not isinstance(element, ParabolaElement):
        return None
    vertex, focus = env.point(d.vertex), env.point(d.focus)
    if vertex is None or focus is None:
        return None
    return _parabola_updates(conics.parabola_from_vertex_focus(vertex, focus))


def _compute_parabola_equation(element: Element, d: ParabolaByEquation, env: _Env) -> Optional[Updates]:
    if not isinstance(element, ParabolaElement):
        return None
    params = conics.parabola_from_equation(d.p, d.direction, (element.vertex_x, element.vertex_y))
    return _parabola_updates(params, direction=d.direction)


def _compute_parabola_general(element: Element, d: ParabolaGeneral, env: _Env) -> Optional[Updates]:
    if not isinstance(element, ParabolaElement):
        return None
    params = conics.parabola_from_general(d.a, d.b, d.c, d.axis)
    return _parabola_updates(params, a=d.a, b=d.b, c=d.c, axis=d.axis)


def _compute_hyperbola(element: Element, d: HyperbolaByEquation, env: _Env) -> Optional[Updates]:
    if not isinstance(element, HyperbolaElement) or not _valid_axes(d.a, d.b):
        return None
    return {
        "center_x": float(d.center_x),
        "center_y": float(d.center_y),
        "a": float(d.a),
        "b": float(d.b),
        "orientation": d.orientation,
    }


_Computer = Callable[[Element, Any, _Env], Optional[Updates]]

_COMPUTERS: Dict[Type[Definition], _Computer] = {
    Free: _compute_nothing,
    Midpoint: _compute_midpoint,
    Intersection: _compute_intersection,
    LineFromPoints: _compute_line,
    PerpendicularPoint: _compute_perpendicular_point,
    ParallelPoint: _compute_parallel_point,
    PerpendicularFootPoint: _compute_perpendicular_foot,
    CircleByPoints: _compute_circle,
    Distance: _compute_distance,
    Angle3Points: _compute_angle,
    FunctionExpression: _compute_nothing,
    SegmentMark: _compute_segment_mark,
    EllipseByFoci: _compute_ellipse_by_foci,
    EllipseByCenterAxes: _compute_ellipse_by_center_axes,
    EllipseByCenter: _compute_ellipse_by_center,
    EllipseByEquation: _compute_ellipse_by_equation,
    ParabolaByFocusDirectrix: _compute_parabola_focus_directrix,
    ParabolaByVertexFocus: _compute_parabola_vertex_focus,
    ParabolaByEquation: _compute_parabola_equation,
    ParabolaGeneral: _compute_parabola_general,
    HyperbolaByEquation: _compute_hyperbola,
    Incenter: _compute_incenter,
    IncircleEdge: _compute_incircle_edge,
    Circumcenter: _compute_circumcenter,
    TangentPoint: _compute_tangent_point,
}


def _check_exhaustive() -> None:
    missing = [cls.__name__ for cls in DEFINITION_TYPES if cls not in _COMPUTERS]
    extra = [cls.__name__ for cls in _COMPUTERS if cls not in DEFINITION_TYPES]
    if missing or extra:
        raise TypeError(f"definition handlers out of sync: missing={missing} unexpected={extra}")


_check_exhaustive()


def compute(
    element: Element,
    resolve: Resolver,
    *,
    config: Optional[KernelConfig] = None,
    evaluator: Optional[Evaluator] = None,
) -> Optional[Updates]:
    """Return the field updates implied by ``element.definition``.

    ``None`` means there is nothing to update: a free element, a definition
    without derived fields, a missing dependency, a dependency of the wrong
    kind or a degenerate configuration.
    Lines, circles, angles and segment marks always get their id fields
    (``p1``, ``center``, ``vertex`` and so on) copied from the definition,
    even when the referenced points cannot be resolved.
    """

    handler = _COMPUTERS.get(type(element.definition))
    if handler is None:
        logger.debug("no handler for definition %s of %s", type(element.definition).__name__, element.id)
        return None
    return handler(element, element.definition, _Env(resolve, resolve_config(config), evaluator))


# ---------------------------------------------------------------------------
# Dependency graph


def build_dependents_index(elements: Mapping[ElementId, Element]) -> Dict[ElementId, List[ElementId]]:
    """Map every element id to the ids of the elements that depend on it directly."""

    index: Dict[ElementId, List[ElementId]] = {}
    for element in elements.values():
        for dep in element.dependencies:
            index.setdefault(dep, []).append(element.id)
    return index


def _descendants(
    start: ElementId, index: Mapping[ElementId, List[ElementId]]
) -> List[ElementId]:
    order: List[ElementId] = []
    seen: Set[ElementId] = {start}
    queue: Deque[ElementId] = deque([start])
    while queue:
        current = queue.popleft()
        for child in index.get(current, ()):
            if child in seen:
                continue
            seen.add(child)
            order.append(child)
            queue.append(child)
    return order


def dependents_of(element_id: ElementId, elements: Mapping[ElementId, Element]) -> List[ElementId]:
    """Transitive dependents of ``element_id`` in breadth-first order."""

    return _descendants(element_id, build_dependents_index(elements))


def _cycle_from(start: ElementId, elements: Mapping[ElementId, Element]) -> Optional[List[ElementId]]:
    """Follow dependencies from ``start``; return a path back to ``start`` if one exists."""

    stack: List[tuple] = [(start, iter(elements[start].dependencies))]
    path: List[ElementId] = [start]
    visited: Set[ElementId] = {start}
    while stack:
        node, deps = stack[-1]
        advanced = False
        for dep in deps:
            if dep == start:
                return path + [start]
            if dep in visited or dep not in elements:
                continue
            visited.add(dep)
            path.append(dep)
            stack.append((dep, iter(elements[dep].dependencies)))
            advanced = True
            break
        if not advanced:
            stack.pop()
            path.pop()
    return None


def find_cycle(elements: Mapping[ElementId, Element]) -> Optional[List[ElementId]]:
    """Return one dependency cycle as ``[a, b, ..., a]``, or ``None`` for an acyclic graph."""

    white, grey, black = 0, 1, 2
    colour: Dict[ElementId, int] = {element_id: white for element_id in elements}

    for root in elements:
        if colour[root] != white:
            continue
        colour[root] = grey
        path: List[ElementId] = [root]
        stack = [iter(elements[root].dependencies)]
        while stack:
            advanced = False
            for dep in stack[-1]:
                state = colour.get(dep)
                if state is None or state == black:
                    continue
                if state == grey:
                    return path[path.index(dep):] + [dep]
                colour[dep] = grey
                path.append(dep)
                stack.append(iter(elements[dep].dependencies))
                advanced = True
                break
            if not advanced:
                colour[path.pop()] = black
                stack.pop()
    return None


def propagate(
    changed_id: ElementId,
    elements: Mapping[ElementId, Element],
    *,
    config: Optional[KernelConfig] = None,
    evaluator: Optional[Evaluator] = None,
    strict: bool = False,
) -> Dict[ElementId, Element]:
    """Recompute every transitive dependent of ``changed_id`` and return the new mapping.

    Elements whose ``compute`` returns ``None`` keep their fields, but their
    own dependents are still recomputed.
    """

    cfg = resolve_config(config)
    store: Dict[ElementId, Element] = dict(elements)
    if changed_id not in store:
        logger.debug("propagate: %s is not stored", changed_id)
        return store

    index = build_dependents_index(store)
    affected = _descendants(changed_id, index)
    if not affected:
        return store
    affected_set = set(affected)

    pending: Dict[ElementId, int] = {}
    for element_id in affected:
        deps = set(store[element_id].dependencies)
        pending[element_id] = sum(1 for dep in deps if dep in affected_set)

    ready: Deque[ElementId] = deque(eid for eid in affected if pending[eid] == 0)
    steps = 0
    done: Set[ElementId] = set()
    while ready:
        if steps >= cfg.max_propagation_steps:
            logger.warning("propagation from %s stopped after %d steps", changed_id, steps)
            return store
        steps += 1
        element_id = ready.popleft()
        done.add(element_id)
        element = store[element_id]
        updates = compute(element, store.get, config=cfg, evaluator=evaluator)
        if updates:
            store[element_id] = element.updated(updates)
        for child in index.get(element_id, ()):
            if child in pending and child not in done:
                pending[child] -= 1
                if pending[child] == 0:
                    ready.append(child)

    stuck = [eid for eid in pending if eid not in done and pending[eid] > 0]
    if stuck:
        cycle = find_cycle({eid: store[eid] for eid in stuck}) or stuck
        if strict:
            raise DependencyCycleError(cycle)
        logger.warning("skipped %d element(s) on a dependency cycle: %s", len(stuck), " -> ".join(cycle))

    logger.debug("propagated %s to %d element(s)", changed_id, steps)
    return store


# ---------------------------------------------------------------------------
# Lifecycle


def add_element(
    elements: Mapping[ElementId, Element],
    element: Element,
    *,
    config: Optional[KernelConfig] = None,
    evaluator: Optional[Evaluator] = None,
) -> Dict[ElementId, Element]:
    """Insert ``element``, computing its derived fields immediately.

    The resolver used for the first computation already sees ``element``
    itself.  An element that would close a dependency cycle is rejected.
    """

    check_dependencies(element)
    store: Dict[ElementId, Element] = dict(elements)
    if element.id in store:
        logger.debug("replacing element %s", element.id)
    store[element.id] = element

    cycle = _cycle_from(element.id, store)
    if cycle is not None:
        raise DependencyCycleError(cycle)

    updates = compute(element, store.get, config=config, evaluator=evaluator)
    if updates:
        store[element.id] = element.updated(updates)
    logger.debug("added %s %s", element.kind, element.id)
    return propagate(element.id, store, config=config, evaluator=evaluator)


def update_element(
    elements: Mapping[ElementId, Element],
    element_id: ElementId,
    updates: Mapping[str, Any],
    *,
    config: Optional[KernelConfig] = None,
    evaluator: Optional[Evaluator] = None,
) -> Dict[ElementId, Element]:
    """Apply ``updates`` to one element and propagate the change to its dependents.

    A new ``definition`` re-derives the dependency list (unless ``dependencies``
    is given too) and the element is recomputed from it.  Either key is
    checked against the other; a mismatch raises
    :class:`DependencyMismatchError` and nothing is stored.
    """

    if element_id not in elements:
        raise UnknownElementError(element_id)
    store: Dict[ElementId, Element] = dict(elements)
    element = store[element_id].updated(updates)

    if "definition" in updates and "dependencies" not in updates:
        element = replace(element, dependencies=dependency_ids(element.definition))
    if "definition" in updates or "dependencies" in updates:
        check_dependencies(element)
        store[element_id] = element
        cycle = _cycle_from(element_id, store)
        if cycle is not None:
            raise DependencyCycleError(cycle)
        derived = compute(element, store.get, config=config, evaluator=evaluator)
        if derived:
            element = element.updated(derived)
    store[element_id] = element
    return propagate(element_id, store, config=config, evaluator=evaluator)


def remove_element(
    elements: Mapping[ElementId, Element], element_id: ElementId
) -> Dict[ElementId, Element]:
    """Remove ``element_id`` together with everything that depends on it, transitively."""

    if element_id not in elements:
        raise UnknownElementError(element_id)
    doomed = {element_id, *dependents_of(element_id, elements)}
    store = {eid: el for eid, el in elements.items() if eid not in doomed}
    logger.debug("removed %s and %d dependent(s)", element_id, len(doomed) - 1)
    return store


def remove_elements(
    elements: Mapping[ElementId, Element], element_ids: Iterable[ElementId]
) -> Dict[ElementId, Element]:
    """Remove several elements (and their dependents); unknown ids are ignored."""

    store: Dict[ElementId, Element] = dict(elements)
    for element_id in element_ids:
        if element_id in store:
            store = remove_element(store, element_id)
    return store


apply_debug_logging(globals(), logger=logger)

__all__ = [
    "Updates",
    "compute",
    "build_dependents_index",
    "dependents_of",
    "find_cycle",
    "propagate",
    "add_element",
    "update_element",
    "remove_element",
    "remove_elements",
]
