"""Element and definition data model.

Elements are immutable dataclasses, one class per kind.  How a derived element
obtains its numbers is described by its ``definition``, a variant of the
:class:`Definition` sum type.  Fields of a definition that hold element ids
are declared with :func:`ref`, which lets :func:`dependency_ids` derive the
dependency list without a per-variant table.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, ClassVar, Dict, Literal, Mapping, Optional, Tuple, Type

from .errors import DependencyMismatchError

Point = Tuple[float, float]
ElementId = str

LineSubtype = Literal["segment", "ray", "line", "vector"]
SegmentMarkType = Literal["equal_1", "equal_2", "equal_3", "parallel_1", "parallel_2"]
ParabolaDirection = Literal["up", "down", "left", "right"]
ParabolaAxis = Literal["x", "y"]
HyperbolaOrientation = Literal["horizontal", "vertical"]
DistanceTarget = Literal["point", "line"]


def ref() -> Any:
    """Declare a definition field holding the id of another element."""

    return field(metadata={"ref": True})


# ---------------------------------------------------------------------------
# Definitions


@dataclass(frozen=True)
class Definition:
    tag: ClassVar[str] = ""


@dataclass(frozen=True)
class Free(Definition):
    tag: ClassVar[str] = "free"


@dataclass(frozen=True)
class Midpoint(Definition):
    tag: ClassVar[str] = "midpoint"
    p1: ElementId = ref()
    p2: ElementId = ref()


@dataclass(frozen=True)
class Intersection(Definition):
    """The ``index``-th intersection point of two curves."""

    tag: ClassVar[str] = "intersection"
    el1: ElementId = ref()
    el2: ElementId = ref()
    index: int = 0


@dataclass(frozen=True)
class LineFromPoints(Definition):
    tag: ClassVar[str] = "line_from_points"
    p1: ElementId = ref()
    p2: ElementId = ref()


@dataclass(frozen=True)
class PerpendicularPoint(Definition):
    """Helper point offset from ``point_id`` along the normal of ``line_id``."""

    tag: ClassVar[str] = "perpendicular_point"
    line_id: ElementId = ref()
    point_id: ElementId = ref()


@dataclass(frozen=True)
class ParallelPoint(Definition):
    """Helper point offset from ``point_id`` along the direction of ``line_id``."""

    tag: ClassVar[str] = "parallel_point"
    line_id: ElementId = ref()
    point_id: ElementId = ref()


@dataclass(frozen=True)
class PerpendicularFootPoint(Definition):
    tag: ClassVar[str] = "perpendicular_foot"
    point_id: ElementId = ref()
    line_id: ElementId = ref()


@dataclass(frozen=True)
class CircleByPoints(Definition):
    tag: ClassVar[str] = "circle_by_points"
    center: ElementId = ref()
    edge: ElementId = ref()


@dataclass(frozen=True)
class Distance(Definition):
    tag: ClassVar[str] = "distance"
    el1: ElementId = ref()
    el2: ElementId = ref()
    target: DistanceTarget = "point"


@dataclass(frozen=True)
class Angle3Points(Definition):
    tag: ClassVar[str] = "angle_3points"
    p1: ElementId = ref()
    vertex: ElementId = ref()
    p2: ElementId = ref()


@dataclass(frozen=True)
class FunctionExpression(Definition):
    tag: ClassVar[str] = "function_expression"
    expression: str = ""


@dataclass(frozen=True)
class SegmentMark(Definition):
    tag: ClassVar[str] = "segment_mark"
    line_id: ElementId = ref()
    mark_type: SegmentMarkType = "equal_1"


@dataclass(frozen=True)
class EllipseByFoci(Definition):
    tag: ClassVar[str] = "ellipse_by_foci"
    f1: ElementId = ref()
    f2: ElementId = ref()
    point_on: ElementId = ref()


@dataclass(frozen=True)
class EllipseByCenterAxes(Definition):
    tag: ClassVar[str] = "ellipse_by_center_axes"
    center: ElementId = ref()
    major_end: ElementId = ref()
    minor_end: ElementId = ref()


@dataclass(frozen=True)
class EllipseByCenter(Definition):
    tag: ClassVar[str] = "ellipse_by_center"
    center: ElementId = ref()
    a: float = 1.0
    b: float = 1.0


@dataclass(frozen=True)
class EllipseByEquation(Definition):
    tag: ClassVar[str] = "ellipse_by_equation"
    a: float = 1.0
    b: float = 1.0
    center_x: float = 0.0
    center_y: float = 0.0
    rotation: float = 0.0


@dataclass(frozen=True)
class ParabolaByFocusDirectrix(Definition):
    tag: ClassVar[str] = "parabola_by_focus_directrix"
    focus: ElementId = ref()
    directrix: ElementId = ref()


@dataclass(frozen=True)
class ParabolaByVertexFocus(Definition):
    tag: ClassVar[str] = "parabola_by_vertex_focus"
    vertex: ElementId = ref()
    focus: ElementId = ref()


@dataclass(frozen=True)
class ParabolaByEquation(Definition):
    """Parabola with focal length ``p`` opening towards ``direction``.

    The vertex is taken from the element's current ``vertex_x``/``vertex_y``.
    """

    tag: ClassVar[str] = "parabola_by_equation"
    p: float = 1.0
    direction: ParabolaDirection = "up"


@dataclass(frozen=True)
class ParabolaGeneral(Definition):
    """``y = a x² + b x + c`` when ``axis == "y"``, ``x = a y² + b y + c`` otherwise."""

    tag: ClassVar[str] = "parabola_general"
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    axis: ParabolaAxis = "y"


@dataclass(frozen=True)
class HyperbolaByEquation(Definition):
    tag: ClassVar[str] = "hyperbola_by_equation"
    a: float = 1.0
    b: float = 1.0
    center_x: float = 0.0
    center_y: float = 0.0
    orientation: HyperbolaOrientation = "horizontal"


@dataclass(frozen=True)
class Incenter(Definition):
    tag: ClassVar[str] = "incenter"
    p1: ElementId = ref()
    p2: ElementId = ref()
    p3: ElementId = ref()


@dataclass(frozen=True)
class IncircleEdge(Definition):
    """Point on the incircle, to the right of the incenter."""

    tag: ClassVar[str] = "incircle_edge"
    p1: ElementId = ref()
    p2: ElementId = ref()
    p3: ElementId = ref()


@dataclass(frozen=True)
class Circumcenter(Definition):
    tag: ClassVar[str] = "circumcenter"
    p1: ElementId = ref()
    p2: ElementId = ref()
    p3: ElementId = ref()


@dataclass(frozen=True)
class TangentPoint(Definition):
    tag: ClassVar[str] = "tangent_point"
    circle: ElementId = ref()
    external: ElementId = ref()
    index: int = 0


DEFINITION_TYPES: Tuple[Type[Definition], ...] = (
    Free,
    Midpoint,
    Intersection,
    LineFromPoints,
    PerpendicularPoint,
    ParallelPoint,
    PerpendicularFootPoint,
    CircleByPoints,
    Distance,
    Angle3Points,
    FunctionExpression,
    SegmentMark,
    EllipseByFoci,
    EllipseByCenterAxes,
    EllipseByCenter,
    EllipseByEquation,
    ParabolaByFocusDirectrix,
    ParabolaByVertexFocus,
    ParabolaByEquation,
    ParabolaGeneral,
    HyperbolaByEquation,
    Incenter,
    IncircleEdge,
    Circumcenter,
    TangentPoint,
)


def dependency_ids(definition: Definition) -> Tuple[ElementId, ...]:
    """Return the ids referenced by ``definition`` in declaration order, without repeats."""

    seen: Dict[ElementId, None] = {}
    for f in fields(definition):
        if f.metadata.get("ref"):
            seen.setdefault(getattr(definition, f.name), None)
    return tuple(seen)


# ---------------------------------------------------------------------------
# Elements


@dataclass(frozen=True)
class GeoStyle:
    stroke: str = "#000"
    stroke_width: float = 2.0
    fill: Optional[str] = None
    opacity: Optional[float] = None
    dash: Optional[Tuple[float, ...]] = None
    point_radius: Optional[float] = None


@dataclass(frozen=True)
class Element:
    """Fields shared by every element kind."""

    kind: ClassVar[str] = ""

    id: ElementId
    name: str = ""
    visible: bool = True
    style: GeoStyle = field(default_factory=GeoStyle)
    dependencies: Tuple[ElementId, ...] = ()
    definition: Definition = field(default_factory=Free)

    @classmethod
    def build(cls, id: ElementId, definition: Optional[Definition] = None, **attrs: Any) -> "Element":
        """Create an element whose dependency list is derived from ``definition``."""

        definition = definition if definition is not None else Free()
        return cls(id=id, definition=definition, dependencies=dependency_ids(definition), **attrs)

    def updated(self, updates: Mapping[str, Any]) -> "Element":
        return replace(self, **dict(updates)) if updates else self


@dataclass(frozen=True)
class PointElement(Element):
    kind: ClassVar[str] = "point"
    x: float = 0.0
    y: float = 0.0

    @property
    def xy(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class LineElement(Element):
    kind: ClassVar[str] = "line"
    subtype: LineSubtype = "segment"
    p1: ElementId = ""
    p2: ElementId = ""


@dataclass(frozen=True)
class CircleElement(Element):
    kind: ClassVar[str] = "circle"
    center: ElementId = ""
    edge: ElementId = ""
    radius: float = 0.0


@dataclass(frozen=True)
class EllipseElement(Element):
    kind: ClassVar[str] = "ellipse"
    center_x: float = 0.0
    center_y: float = 0.0
    a: float = 0.0
    b: float = 0.0
    rotation: float = 0.0


@dataclass(frozen=True)
class ParabolaElement(Element):
    kind: ClassVar[str] = "parabola"
    vertex_x: float = 0.0
    vertex_y: float = 0.0
    p: float = 0.0
    axis_angle: float = 0.0
    direction: Optional[ParabolaDirection] = None
    a: Optional[float] = None
    b: Optional[float] = None
    c: Optional[float] = None
    axis: Optional[ParabolaAxis] = None


@dataclass(frozen=True)
class HyperbolaElement(Element):
    kind: ClassVar[str] = "hyperbola"
    center_x: float = 0.0
    center_y: float = 0.0
    a: float = 0.0
    b: float = 0.0
    orientation: HyperbolaOrientation = "horizontal"


@dataclass(frozen=True)
class AngleElement(Element):
    kind: ClassVar[str] = "angle"
    p1: ElementId = ""
    vertex: ElementId = ""
    p2: ElementId = ""
    angle_value: float = 0.0
    is_right: bool = False


@dataclass(frozen=True)
class LabelElement(Element):
    kind: ClassVar[str] = "label"
    text: str = ""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class FunctionGraphElement(Element):
    kind: ClassVar[str] = "function_graph"
    expression: str = ""


@dataclass(frozen=True)
class SegmentMarkElement(Element):
    kind: ClassVar[str] = "segment_mark"
    line_id: ElementId = ""
    mark_type: SegmentMarkType = "equal_1"


@dataclass(frozen=True)
class ArcElement(Element):
    kind: ClassVar[str] = "arc"
    center: ElementId = ""
    start_point: ElementId = ""
    end_point: ElementId = ""
    is_sector: bool = False


@dataclass(frozen=True)
class TextElement(Element):
    kind: ClassVar[str] = "text"
    x: float = 0.0
    y: float = 0.0
    content: str = ""
    font_size: float = 16.0


ELEMENT_TYPES: Dict[str, Type[Element]] = {
    cls.kind: cls
    for cls in (
        PointElement,
        LineElement,
        CircleElement,
        EllipseElement,
        ParabolaElement,
        HyperbolaElement,
        AngleElement,
        LabelElement,
        FunctionGraphElement,
        SegmentMarkElement,
        ArcElement,
        TextElement,
    )
}


def check_dependencies(element: Element) -> None:
    """Raise :class:`DependencyMismatchError` unless dependencies match the definition."""

    referenced = dependency_ids(element.definition)
    if set(element.dependencies) != set(referenced):
        raise DependencyMismatchError(element.id, element.dependencies, referenced)


__all__ = [
    "Point",
    "ElementId",
    "LineSubtype",
    "SegmentMarkType",
    "ParabolaDirection",
    "ParabolaAxis",
    "HyperbolaOrientation",
    "DistanceTarget",
    "ref",
    "Definition",
    "Free",
    "Midpoint",
    "Intersection",
    "LineFromPoints",
    "PerpendicularPoint",
    "ParallelPoint",
    "PerpendicularFootPoint",
    "CircleByPoints",
    "Distance",
    "Angle3Points",
    "FunctionExpression",
    "SegmentMark",
    "EllipseByFoci",
    "EllipseByCenterAxes",
    "EllipseByCenter",
    "EllipseByEquation",
    "ParabolaByFocusDirectrix",
    "ParabolaByVertexFocus",
    "ParabolaByEquation",
    "ParabolaGeneral",
    "HyperbolaByEquation",
    "Incenter",
    "IncircleEdge",
    "Circumcenter",
    "TangentPoint",
    "DEFINITION_TYPES",
    "dependency_ids",
    "GeoStyle",
    "Element",
    "PointElement",
    "LineElement",
    "CircleElement",
    "EllipseElement",
    "ParabolaElement",
    "HyperbolaElement",
    "AngleElement",
    "LabelElement",
    "FunctionGraphElement",
    "SegmentMarkElement",
    "ArcElement",
    "TextElement",
    "ELEMENT_TYPES",
    "check_dependencies",
]
