import math

import pytest

from geokernel.conics import EllipseParams, HyperbolaParams, ParabolaParams
from geokernel.snapping.intersections import (
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
from geokernel.snapping.types import CircleCurve, EllipseCurve, FunctionCurve, LineCurve


def _sorted(points):
    return sorted((round(x, 9), round(y, 9)) for x, y in points)


def test_crossing_segments():
    result = intersect_line_line((0.0, 0.0), (10.0, 10.0), (0.0, 10.0), (10.0, 0.0), True, True)
    assert len(result) == 1
    assert result[0] == pytest.approx((5.0, 5.0))


def test_parallel_lines_do_not_intersect():
    assert intersect_line_line((0.0, 0.0), (1.0, 1.0), (0.0, 1.0), (1.0, 2.0)) == []


def test_clamp_rejects_hits_outside_the_segment():
    a1, a2, b1, b2 = (0.0, 0.0), (1.0, 0.0), (5.0, -1.0), (5.0, 1.0)
    assert intersect_line_line(a1, a2, b1, b2, clamp_a=True) == []
    assert intersect_line_line(a1, a2, b1, b2, clamp_b=True) == [pytest.approx((5.0, 0.0))]
    assert intersect_line_line(a1, a2, b1, b2) == [pytest.approx((5.0, 0.0))]


def test_circle_line_secant_and_tangent():
    secant = intersect_circle_line((0.0, 0.0), 5.0, (-10.0, 0.0), (10.0, 0.0))
    assert _sorted(secant) == [(-5.0, 0.0), (5.0, 0.0)]

    tangent = intersect_circle_line((0.0, 0.0), 5.0, (-10.0, 5.0), (10.0, 5.0))
    assert tangent == [pytest.approx((0.0, 5.0))]


def test_circle_line_respects_segment_clamp():
    assert intersect_circle_line((0.0, 0.0), 5.0, (6.0, 0.0), (10.0, 0.0), clamp=True) == []
    assert intersect_circle_line((0.0, 0.0), 5.0, (6.0, 0.0), (10.0, 0.0)) != []


def test_circle_line_misses():
    assert intersect_circle_line((0.0, 0.0), 1.0, (-5.0, 3.0), (5.0, 3.0)) == []
    assert intersect_circle_line((0.0, 0.0), 1.0, (2.0, 2.0), (2.0, 2.0)) == []


def test_circle_circle():
    result = intersect_circle_circle((0.0, 0.0), 5.0, (8.0, 0.0), 5.0)
    assert _sorted(result) == [(4.0, -3.0), (4.0, 3.0)]


def test_touching_circles_meet_once():
    result = intersect_circle_circle((0.0, 0.0), 2.0, (5.0, 0.0), 3.0)
    assert result == [pytest.approx((2.0, 0.0))]


@pytest.mark.parametrize(
    "c2,r2",
    [
        ((20.0, 0.0), 5.0),
        ((1.0, 0.0), 1.0),
        ((0.0, 0.0), 5.0),
    ],
)
def test_circle_circle_without_intersection(c2, r2):
    assert intersect_circle_circle((0.0, 0.0), 5.0, c2, r2) == []


def test_ellipse_line():
    params = EllipseParams(0.0, 0.0, 5.0, 3.0)
    assert _sorted(intersect_ellipse_line(params, (-10.0, 0.0), (10.0, 0.0))) == [(-5.0, 0.0), (5.0, 0.0)]

    rotated = EllipseParams(1.0, 1.0, 5.0, 3.0, math.pi / 2.0)
    result = intersect_ellipse_line(rotated, (1.0, -10.0), (1.0, 10.0))
    assert _sorted(result) == [(1.0, -4.0), (1.0, 6.0)]


def test_parabola_line():
    params = ParabolaParams(0.0, 0.0, 1.0, math.pi / 2.0)
    result = intersect_parabola_line(params, (-10.0, 1.0), (10.0, 1.0))
    assert _sorted(result) == [(-2.0, 1.0), (2.0, 1.0)]


def test_parabola_line_parallel_to_axis_meets_once():
    params = ParabolaParams(0.0, 0.0, 1.0, math.pi / 2.0)
    result = intersect_parabola_line(params, (2.0, -10.0), (2.0, 10.0))
    assert len(result) == 1
    assert result[0] == pytest.approx((2.0, 1.0))


def test_hyperbola_line():
    params = HyperbolaParams(0.0, 0.0, 3.0, 2.0, "horizontal")
    assert _sorted(intersect_hyperbola_line(params, (-10.0, 0.0), (10.0, 0.0))) == [(-3.0, 0.0), (3.0, 0.0)]
    assert intersect_hyperbola_line(params, (0.0, -10.0), (0.0, 10.0)) == []

    vertical = HyperbolaParams(0.0, 0.0, 3.0, 2.0, "vertical")
    assert _sorted(intersect_hyperbola_line(vertical, (0.0, -10.0), (0.0, 10.0))) == [(0.0, -3.0), (0.0, 3.0)]


def test_hyperbola_line_parallel_to_asymptote_meets_once():
    params = HyperbolaParams(0.0, 0.0, 3.0, 2.0, "horizontal")
    result = intersect_hyperbola_line(params, (0.0, 1.0), (3.0, 3.0))
    assert len(result) == 1
    assert result[0] == pytest.approx((-3.75, -1.5))


def test_function_line_roots():
    result = intersect_function_line(lambda x: x * x - 1.0, (-5.0, 0.0), (5.0, 0.0))
    assert len(result) == 2
    xs = sorted(p[0] for p in result)
    assert xs == pytest.approx([-1.0, 1.0], abs=1e-3)


def test_function_line_bisection_refines_root():
    result = intersect_function_line(lambda x: x - 0.3, (0.0, 0.0), (1.0, 0.0), samples=7, iterations=20)
    assert len(result) == 1
    assert result[0][0] == pytest.approx(0.3, abs=1e-6)


def test_function_line_skips_poles_and_undefined_values():
    def reciprocal(x):
        return None if x == 0 else 1.0 / x

    assert intersect_function_line(reciprocal, (-1.0, 0.0), (1.3, 0.0)) == []

    def half_defined(x):
        return math.sqrt(x) - 1.0 if x >= 0 else None

    result = intersect_function_line(half_defined, (-4.0, 0.0), (4.0, 0.0))
    assert [p[0] for p in result] == pytest.approx([1.0], abs=1e-3)


def test_function_line_window():
    result = intersect_function_line(lambda x: x * x - 1.0, (-5.0, 0.0), (5.0, 0.0), t_range=(0.5, 1.0))
    assert [p[0] for p in result] == pytest.approx([1.0], abs=1e-3)


def test_intersect_curves_dispatch():
    circle = CircleCurve("c", (0.0, 0.0), 5.0)
    line = LineCurve("l", (-10.0, 0.0), (10.0, 0.0), "line")
    assert _sorted(intersect_curves(circle, line)) == [(-5.0, 0.0), (5.0, 0.0)]
    assert _sorted(intersect_curves(line, circle)) == [(-5.0, 0.0), (5.0, 0.0)]

    other = CircleCurve("d", (8.0, 0.0), 5.0)
    assert _sorted(intersect_curves(circle, other)) == [(4.0, -3.0), (4.0, 3.0)]

    ellipse = EllipseCurve("e", EllipseParams(0.0, 0.0, 2.0, 1.0))
    assert intersect_curves(ellipse, circle) == []


def test_segment_pair_is_clamped_but_mixed_pair_is_not():
    seg = LineCurve("s", (0.0, 0.0), (1.0, 0.0), "segment")
    other_seg = LineCurve("t", (5.0, -1.0), (5.0, 1.0), "segment")
    infinite = LineCurve("u", (5.0, -1.0), (5.0, 1.0), "line")
    assert intersect_curves(seg, other_seg) == []
    assert intersect_curves(seg, infinite) == [pytest.approx((5.0, 0.0))]


def test_function_curve_against_bounded_line_uses_clipped_window():
    graph = FunctionCurve("f", lambda x: x * x + 1.0)
    segment = LineCurve("s", (-5.0, 50.0), (15.0, 50.0), "segment")
    result = intersect_curve_line(graph, segment, function_window=(0.5, 2.0))
    assert [p[0] for p in result] == pytest.approx([7.0], abs=1e-3)

    assert intersect_curve_line(graph, segment, function_window=(1.5, 2.0)) == []


def test_function_line_keeps_a_sampled_root_next_to_an_undefined_value():
    def left_root(x):
        return math.sqrt(-x) if x <= 0 else None

    result = intersect_function_line(left_root, (-1.0, 0.0), (1.0, 0.0), samples=40)
    assert [p[0] for p in result] == pytest.approx([0.0], abs=1e-9)
