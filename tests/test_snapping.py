import math

import pytest

from geokernel.config import KernelConfig
from geokernel.elements import (
    CircleElement,
    EllipseElement,
    FunctionGraphElement,
    HyperbolaElement,
    LineElement,
    ParabolaElement,
    PointElement,
)
from geokernel.snapping import get_snap_position


def _scene(*elements):
    return {element.id: element for element in elements}


def _point(pid, x, y, **kwargs):
    return PointElement(id=pid, name=kwargs.pop("name", pid), x=x, y=y, **kwargs)


def _segment(lid, p1, p2, subtype="segment"):
    return LineElement(id=lid, subtype=subtype, p1=p1, p2=p2)


def test_no_candidate_returns_raw_position():
    result = get_snap_position(500.0, 500.0, {})
    assert result.position == (500.0, 500.0)
    assert not result.snapped
    assert result.snapped_to is None
    assert result.label is None
    assert result.intersection_elements is None


def test_origin_is_always_a_candidate():
    result = get_snap_position(1.0, 1.0, {})
    assert result.position == (0.0, 0.0)
    assert result.snap_type == "intersection"
    assert result.label == "origin"
    assert result.intersection_elements == ("x-axis", "y-axis")


def test_snaps_to_nearest_point():
    scene = _scene(_point("A", 100.0, 100.0, name="A"), _point("B", 110.0, 100.0, name=""))
    result = get_snap_position(103.0, 104.0, scene)
    assert result.position == (100.0, 100.0)
    assert result.snap_type == "point"
    assert result.snapped_to == "A"
    assert result.label == "A"

    unnamed = get_snap_position(109.0, 101.0, scene)
    assert unnamed.snapped_to == "B"
    assert unnamed.label == "point"


def test_hidden_and_excluded_points_are_ignored():
    scene = _scene(_point("A", 100.0, 100.0, visible=False), _point("B", 100.0, 105.0))
    assert get_snap_position(100.0, 100.0, scene).snapped_to == "B"
    result = get_snap_position(100.0, 100.0, scene, exclude_ids=["B"])
    assert not result.snapped


def test_equal_distances_keep_the_first_candidate():
    scene = _scene(_point("A", 95.0, 100.0), _point("B", 105.0, 100.0))
    assert get_snap_position(100.0, 100.0, scene).snapped_to == "A"


@pytest.mark.parametrize(
    "query",
    [(100.0, 100.0), (104.0, 96.0), (150.0, 150.0), (130.0, 108.0), (0.5, -0.5), (300.0, 356.0)],
)
def test_snapped_position_is_within_threshold(query):
    scene = _scene(
        _point("A", 100.0, 100.0),
        _point("B", 200.0, 100.0),
        _point("C", 300.0, 300.0),
        _point("D", 350.0, 300.0),
        _segment("AB", "A", "B"),
        CircleElement(id="circ", center="C", edge="D"),
    )
    threshold = 10.0
    result = get_snap_position(query[0], query[1], scene, threshold=threshold)
    distance = math.hypot(result.x - query[0], result.y - query[1])
    if result.snapped:
        assert distance < threshold
    else:
        assert distance == 0.0


def test_segment_intersection_beats_midpoint_on_tie():
    scene = _scene(
        _point("P1", 100.0, 100.0),
        _point("P2", 200.0, 200.0),
        _point("P3", 100.0, 200.0),
        _point("P4", 200.0, 100.0),
        _segment("s1", "P1", "P2"),
        _segment("s2", "P3", "P4"),
    )
    result = get_snap_position(150.0, 150.0, scene)
    assert result.snap_type == "intersection"
    assert result.position == pytest.approx((150.0, 150.0))
    assert result.intersection_elements == ("s1", "s2")
    assert result.label == "intersection"


def test_midpoint_and_on_line():
    scene = _scene(_point("A", 100.0, 100.0), _point("B", 200.0, 100.0), _segment("AB", "A", "B"))

    mid = get_snap_position(150.0, 104.0, scene)
    assert mid.snap_type == "midpoint"
    assert mid.snapped_to == "AB"
    assert mid.position == (150.0, 100.0)

    on_line = get_snap_position(130.0, 104.0, scene)
    assert on_line.snap_type == "on_line"
    assert on_line.snapped_to == "AB"
    assert on_line.position == pytest.approx((130.0, 100.0))


def test_segment_projection_excludes_the_ends():
    scene = _scene(
        _point("A", 100.0, 100.0, visible=False),
        _point("B", 200.0, 100.0, visible=False),
        _segment("AB", "A", "B"),
    )
    assert not get_snap_position(99.5, 103.0, scene).snapped
    assert not get_snap_position(210.0, 103.0, scene).snapped


def test_infinite_line_projects_beyond_its_points():
    scene = _scene(
        _point("A", 100.0, 100.0, visible=False),
        _point("B", 200.0, 100.0, visible=False),
        _segment("AB", "A", "B", subtype="line"),
    )
    result = get_snap_position(400.0, 103.0, scene)
    assert result.snap_type == "on_line"
    assert result.position == pytest.approx((400.0, 100.0))


def test_axis_intersection_of_segment():
    scene = _scene(
        _point("A", 10.0, -20.0),
        _point("B", 10.0, 20.0),
        _segment("seg", "A", "B"),
    )
    result = get_snap_position(10.5, 0.0, scene, threshold=3.0)
    assert result.snap_type == "intersection"
    assert result.position == pytest.approx((10.0, 0.0))
    assert result.intersection_elements == ("seg", "x-axis")
    assert result.label == "x-axis intersection"


def test_on_circle():
    scene = _scene(_point("C", 300.0, 300.0), _point("D", 350.0, 300.0), CircleElement(id="circ", center="C", edge="D"))
    result = get_snap_position(300.0, 353.0, scene)
    assert result.snap_type == "on_circle"
    assert result.snapped_to == "circ"
    assert result.position == pytest.approx((300.0, 350.0))


def test_on_circle_is_skipped_at_the_centre():
    scene = _scene(
        _point("C", 300.0, 300.0, visible=False),
        _point("D", 305.0, 300.0, visible=False),
        CircleElement(id="circ", center="C", edge="D"),
    )
    result = get_snap_position(300.05, 300.0, scene)
    assert result.snap_type != "on_circle"


def test_circle_circle_intersection():
    scene = _scene(
        _point("C1", 100.0, 100.0, visible=False),
        _point("E1", 150.0, 100.0, visible=False),
        _point("C2", 180.0, 100.0, visible=False),
        _point("E2", 130.0, 100.0, visible=False),
        CircleElement(id="k1", center="C1", edge="E1"),
        CircleElement(id="k2", center="C2", edge="E2"),
    )
    result = get_snap_position(140.0, 130.0, scene)
    assert result.snap_type == "intersection"
    assert result.intersection_elements == ("k1", "k2")
    assert result.position == pytest.approx((140.0, 130.0))


def test_on_function_graph():
    scene = _scene(FunctionGraphElement(id="f", expression="x^2 + 100"))
    result = get_snap_position(3.0, 109.2, scene, threshold=1.0)
    assert result.snap_type == "on_function"
    assert result.snapped_to == "f"
    assert result.y == pytest.approx(result.x ** 2 + 100.0, abs=1e-6)
    assert math.hypot(result.x - 3.0, result.y - 109.2) <= 0.2


def test_broken_function_graph_is_skipped():
    scene = _scene(FunctionGraphElement(id="f", expression="x + z"), _point("A", 500.0, 500.0))
    assert get_snap_position(502.0, 500.0, scene).snapped_to == "A"


def test_on_ellipse():
    scene = _scene(EllipseElement(id="e", center_x=500.0, center_y=500.0, a=100.0, b=50.0))
    result = get_snap_position(603.0, 500.0, scene)
    assert result.snap_type == "on_ellipse"
    assert result.position == pytest.approx((600.0, 500.0), abs=1e-4)


def test_on_parabola():
    scene = _scene(ParabolaElement(id="p", vertex_x=500.0, vertex_y=500.0, p=25.0, axis_angle=math.pi / 2.0))
    result = get_snap_position(500.0, 497.0, scene)
    assert result.snap_type == "on_parabola"
    assert result.position == pytest.approx((500.0, 500.0), abs=1e-4)


def test_on_hyperbola():
    scene = _scene(HyperbolaElement(id="h", center_x=500.0, center_y=500.0, a=30.0, b=20.0))
    result = get_snap_position(533.0, 500.0, scene)
    assert result.snap_type == "on_hyperbola"
    assert result.position == pytest.approx((530.0, 500.0), abs=1e-4)

    other = get_snap_position(467.0, 500.0, scene)
    assert other.position == pytest.approx((470.0, 500.0), abs=1e-4)


def test_threshold_and_config_defaults():
    scene = _scene(_point("A", 100.0, 100.0))
    assert not get_snap_position(100.0, 108.0, scene, threshold=5.0).snapped
    assert get_snap_position(100.0, 108.0, scene).snapped_to == "A"
    assert not get_snap_position(100.0, 108.0, scene, config=KernelConfig(snap_threshold=5.0)).snapped


def test_accepts_an_element_sequence_and_resolver():
    a = _point("A", 100.0, 100.0, visible=False)
    b = _point("B", 200.0, 100.0, visible=False)
    line = _segment("AB", "A", "B")
    lookup = {"A": a, "B": b}
    result = get_snap_position(130.0, 104.0, [line], resolver=lookup.get)
    assert result.snap_type == "on_line"
