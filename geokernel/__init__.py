from .config import KernelConfig, get_kernel_config, set_kernel_config
from .errors import (
    GeoKernelError,
    DependencyMismatchError,
    DependencyCycleError,
    UnknownElementError,
    ExpressionError,
)
from .elements import (
    Definition,
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
    GeoStyle,
    Element,
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
    dependency_ids,
    check_dependencies,
)
from .constructions import (
    Incircle,
    Circumcircle,
    midpoint,
    perpendicular_foot,
    parallel_point,
    perpendicular_point,
    angle_degrees,
    is_right_angle,
    incenter,
    circumcenter,
    tangent_points,
)
from .conics import (
    EllipseParams,
    ParabolaParams,
    HyperbolaParams,
    HyperbolaSamples,
    hyperbola_points,
    solve_t_max_for_viewport,
    parabola_points_by_vertex_focus,
    parabola_points_by_focus_directrix,
    ellipse_points,
)
from .transform import transform_triangle, congruent_triangle, triangle_centroid, triangle_bounds, TriangleBounds
from .expressions import compile_expression
from .propagation import (
    compute,
    propagate,
    add_element,
    update_element,
    remove_element,
    remove_elements,
    dependents_of,
    find_cycle,
)
from .snapping import SnapResult, get_snap_position, intersect_curves

__all__ = [
    'KernelConfig',
    'get_kernel_config',
    'set_kernel_config',
    'GeoKernelError',
    'DependencyMismatchError',
    'DependencyCycleError',
    'UnknownElementError',
    'ExpressionError',
    'Definition',
    'Free',
    'Midpoint',
    'Intersection',
    'LineFromPoints',
    'PerpendicularPoint',
    'ParallelPoint',
    'PerpendicularFootPoint',
    'CircleByPoints',
    'Distance',
    'Angle3Points',
    'FunctionExpression',
    'SegmentMark',
    'EllipseByFoci',
    'EllipseByCenterAxes',
    'EllipseByCenter',
    'EllipseByEquation',
    'ParabolaByFocusDirectrix',
    'ParabolaByVertexFocus',
    'ParabolaByEquation',
    'ParabolaGeneral',
    'HyperbolaByEquation',
    'Incenter',
    'IncircleEdge',
    'Circumcenter',
    'TangentPoint',
    'GeoStyle',
    'Element',
    'PointElement',
    'LineElement',
    'CircleElement',
    'EllipseElement',
    'ParabolaElement',
    'HyperbolaElement',
    'AngleElement',
    'LabelElement',
    'FunctionGraphElement',
    'SegmentMarkElement',
    'ArcElement',
    'TextElement',
    'dependency_ids',
    'check_dependencies',
    'Incircle',
    'Circumcircle',
    'midpoint',
    'perpendicular_foot',
    'parallel_point',
    'perpendicular_point',
    'angle_degrees',
    'is_right_angle',
    'incenter',
    'circumcenter',
    'tangent_points',
    'EllipseParams',
    'ParabolaParams',
    'HyperbolaParams',
    'HyperbolaSamples',
    'hyperbola_points',
    'solve_t_max_for_viewport',
    'parabola_points_by_vertex_focus',
    'parabola_points_by_focus_directrix',
    'ellipse_points',
    'transform_triangle',
    'congruent_triangle',
    'triangle_centroid',
    'triangle_bounds',
    'TriangleBounds',
    'compile_expression',
    'compute',
    'propagate',
    'add_element',
    'update_element',
    'remove_element',
    'remove_elements',
    'dependents_of',
    'find_cycle',
    'SnapResult',
    'get_snap_position',
    'intersect_curves',
]
