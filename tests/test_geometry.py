"""Tests for geometry primitives."""

import math

import pytest

from blueprint_core.geometry.primitives import (
    XY,
    distance,
    fits_clear_circle,
    is_simple_polygon,
    offset_segment_polygon,
    point_along,
    point_segment_distance,
    points_match,
    polygon_area,
    polygon_contains,
    segment_angle,
    unit_perpendicular,
)


def test_points_match_is_axis_wise_and_strict():
    """Test coincidence uses |dx| and |dy| strictly below tolerance."""
    assert points_match(XY(0, 0), XY(0.04, 0.04), 0.05)
    assert not points_match(XY(0, 0), XY(0.05, 0), 0.05)
    # Diagonal distance above tolerance still matches axis-wise
    assert points_match(XY(0, 0), XY(0.049, 0.049), 0.05)


def test_segment_angle_and_perpendicular():
    """Test direction and left-hand normal of a segment."""
    assert segment_angle(XY(0, 0), XY(0, 5)) == pytest.approx(math.pi / 2)
    normal = unit_perpendicular(XY(0, 0), XY(4, 0))
    assert normal == pytest.approx((0.0, 1.0))


def test_unit_perpendicular_rejects_zero_length():
    """Test a degenerate segment has no direction."""
    with pytest.raises(ValueError):
        unit_perpendicular(XY(1, 1), XY(1, 1))


def test_point_along():
    """Test interpolation along a segment."""
    assert point_along(XY(0, 0), XY(10, 0), 0.25) == pytest.approx((2.5, 0.0))
    assert distance(XY(0, 0), XY(3, 4)) == pytest.approx(5.0)


def test_point_segment_distance():
    """Test distance to a segment clamps to its endpoints."""
    assert point_segment_distance(XY(5, 3), XY(0, 0), XY(10, 0)) == pytest.approx(3.0)
    assert point_segment_distance(XY(13, 4), XY(0, 0), XY(10, 0)) == pytest.approx(5.0)


def test_offset_segment_polygon_corner_order():
    """Test wall rectangle corners are [s+p, e+p, e-p, s-p]."""
    corners = offset_segment_polygon(XY(0, 0), XY(10, 0), 0.4)
    assert [tuple(c) for c in corners] == [
        pytest.approx((0.0, 0.2)),
        pytest.approx((10.0, 0.2)),
        pytest.approx((10.0, -0.2)),
        pytest.approx((0.0, -0.2)),
    ]
    assert polygon_area(corners) == pytest.approx(4.0)


def test_simple_polygon_checks():
    """Test self-intersection and containment checks."""
    square = [XY(0, 0), XY(4, 0), XY(4, 4), XY(0, 4)]
    bowtie = [XY(0, 0), XY(4, 4), XY(4, 0), XY(0, 4)]
    assert is_simple_polygon(square)
    assert not is_simple_polygon(bowtie)
    assert not is_simple_polygon(square[:2])
    assert polygon_contains(square, XY(2, 2))
    assert polygon_contains(square, XY(4, 2))  # boundary counts
    assert not polygon_contains(square, XY(5, 2))
    assert polygon_contains(square, XY(4.3, 2), tolerance=0.4)


def test_fits_clear_circle():
    """Test turning-circle fit inside room outlines."""
    assert fits_clear_circle([XY(0, 0), XY(2, 0), XY(2, 2), XY(0, 2)], 1.5)
    assert fits_clear_circle([XY(0, 0), XY(1.6, 0), XY(1.6, 1.6), XY(0, 1.6)], 1.5)
    # Long and narrow: 3m² but only 1m wide
    assert not fits_clear_circle([XY(0, 0), XY(3, 0), XY(3, 1), XY(0, 1)], 1.5)
