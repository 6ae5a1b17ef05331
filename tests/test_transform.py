import math

import pytest

from geokernel.transform import (
    congruent_triangle,
    reflect_across_line,
    rotate_around,
    scale_around,
    to_math_from_pixels,
    to_pixels_from_math,
    transform_triangle,
    translate,
    triangle_bounds,
    triangle_centroid,
)

TRIANGLE = ((0.0, 0.0), (6.0, 0.0), (0.0, 3.0))


def _side_lengths(tri):
    a, b, c = tri
    return sorted([math.dist(a, b), math.dist(b, c), math.dist(c, a)])


def test_identity_transform_returns_same_triangle():
    centroid = triangle_centroid(*TRIANGLE)
    result = transform_triangle(TRIANGLE, 1.0, 0.0, "none", centroid)
    for got, expected in zip(result, TRIANGLE):
        assert got == pytest.approx(expected)


@pytest.mark.parametrize("rotation", [0.0, 30.0, 90.0, 215.0])
@pytest.mark.parametrize("flip", ["none", "horizontal", "vertical"])
def test_transform_places_centroid_on_target(rotation, flip):
    result = transform_triangle(TRIANGLE, 2.0, rotation, flip, (10.0, -5.0))
    assert triangle_centroid(*result) == pytest.approx((10.0, -5.0))
    assert _side_lengths(result) == pytest.approx([2.0 * s for s in _side_lengths(TRIANGLE)])


def test_rotation_by_ninety_degrees():
    result = transform_triangle(TRIANGLE, 1.0, 90.0, "none", (0.0, 0.0))
    # (6, 0) is (4, -1) from the centroid (2, 1); rotated it becomes (1, 4)
    assert result[1] == pytest.approx((1.0, 4.0))


def test_horizontal_flip_mirrors_x():
    result = transform_triangle(TRIANGLE, 1.0, 0.0, "horizontal", (2.0, 1.0))
    assert result[1] == pytest.approx((-2.0, 0.0))
    assert result[2] == pytest.approx((4.0, 3.0))


def test_congruent_triangle_keeps_side_lengths():
    result = congruent_triangle(TRIANGLE, 47.0, "vertical", (3.0, 3.0))
    assert _side_lengths(result) == pytest.approx(_side_lengths(TRIANGLE))


def test_transform_requires_three_points():
    with pytest.raises(ValueError):
        transform_triangle(TRIANGLE[:2], 1.0, 0.0, "none", (0.0, 0.0))


def test_triangle_bounds():
    bounds = triangle_bounds((1.0, 5.0), (-2.0, 3.0), (4.0, -1.0))
    assert (bounds.min_x, bounds.max_x, bounds.min_y, bounds.max_y) == (-2.0, 4.0, -1.0, 5.0)
    assert bounds.width == 6.0
    assert bounds.height == 6.0


def test_point_transforms():
    assert rotate_around((2.0, 0.0), (1.0, 0.0), math.pi / 2.0) == pytest.approx((1.0, 1.0))
    assert scale_around((3.0, 3.0), (1.0, 1.0), 0.5) == pytest.approx((2.0, 2.0))
    assert translate((1.0, 2.0), (0.5, -2.0)) == (1.5, 0.0)
    assert reflect_across_line((1.0, 2.0), (0.0, 0.0), (1.0, 1.0)) == pytest.approx((2.0, 1.0))
    assert reflect_across_line((1.0, 2.0), (3.0, 3.0), (3.0, 3.0)) == (1.0, 2.0)


def test_pixel_conversion_flips_y():
    assert to_math_from_pixels((100.0, 50.0)) == (2.0, -1.0)
    assert to_pixels_from_math((2.0, -1.0)) == (100.0, 50.0)
