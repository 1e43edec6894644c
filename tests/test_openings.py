"""Tests for opening placement on host walls."""

import math

import pytest

from blueprint_core.exceptions import OpeningPlacementError
from blueprint_core.model.schema import Opening, Point, WallSegment
from blueprint_core.reconstruct.openings import resolve_opening, resolve_openings, swing_side


def make_wall(wall_id="w", start=(0, 0), end=(10, 0), thickness=0.4):
    return WallSegment(
        id=wall_id,
        start=Point(x=start[0], y=start[1]),
        end=Point(x=end[0], y=end[1]),
        thickness=thickness,
        type="EXTERIOR_INSULATED",
        material="brick",
        isExternal=True,
    )


def make_opening(**overrides):
    data = {"id": "o1", "wallId": "w", "type": "door", "width": 1.0, "distFromStart": 2.0}
    data.update(overrides)
    return Opening.model_validate(data)


def test_near_edge_placement():
    """Test distFromStart positions the near edge, not the center."""
    resolved = resolve_opening(make_opening(), make_wall())
    assert resolved.t == pytest.approx(0.2)
    assert resolved.position == pytest.approx((2.0, 0.0))
    assert resolved.span_start == pytest.approx((2.0, 0.0))
    assert resolved.span_end == pytest.approx((3.0, 0.0))
    assert resolved.center == pytest.approx((2.5, 0.0))
    assert not resolved.clamped


def test_reversed_wall_direction():
    """Test placement follows the wall's own start-to-end direction."""
    wall = make_wall(start=(10, 8), end=(0, 8))
    resolved = resolve_opening(make_opening(distFromStart=6.5), wall)
    assert resolved.center == pytest.approx((3.0, 8.0))
    assert resolved.angle == pytest.approx(math.pi)
    assert resolved.angle_deg == pytest.approx(180.0)


def test_overflow_is_clamped_to_wall_end():
    """Test an opening running past the wall end is pulled back."""
    resolved = resolve_opening(make_opening(width=2.0, distFromStart=9.5), make_wall())
    assert resolved.clamped
    assert resolved.t == pytest.approx(0.8)
    assert resolved.span_end == pytest.approx((10.0, 0.0))


def test_overflow_rejected_in_strict_mode():
    """Test strict placement refuses an overflowing opening."""
    with pytest.raises(OpeningPlacementError):
        resolve_opening(make_opening(width=2.0, distFromStart=9.5), make_wall(), strict=True)


def test_opening_flush_with_wall_end_is_not_clamped():
    """Test an opening ending exactly at the wall end fits."""
    resolved = resolve_opening(make_opening(width=2.0, distFromStart=8.0), make_wall(), strict=True)
    assert not resolved.clamped
    assert resolved.t == pytest.approx(0.8)


def test_wrong_host_wall_rejected():
    """Test resolving against a wall the opening does not belong to."""
    with pytest.raises(OpeningPlacementError):
        resolve_opening(make_opening(wallId="other"), make_wall())


def test_swing_side():
    """Test left/right sides and the outward mirror."""
    assert swing_side("right", None) == 1
    assert swing_side("left", "inward") == -1
    assert swing_side("right", "outward") == -1
    assert swing_side("left", "outward") == 1


def test_single_door_leaf():
    """Test one leaf hinged at the near edge with radius equal to the width."""
    resolved = resolve_opening(make_opening(swing="right"), make_wall())
    assert len(resolved.swings) == 1
    leaf = resolved.swings[0]
    assert leaf.hinge == pytest.approx((2.0, 0.0))
    assert leaf.closed_latch == pytest.approx((3.0, 0.0))
    assert leaf.radius == pytest.approx(1.0)
    # Right swing opens towards the left-hand normal (+y for an eastward wall)
    assert leaf.open_latch == pytest.approx((2.0, 1.0))


def test_outward_swing_mirrors_leaf():
    """Test outward swing flips the leaf to the other face."""
    resolved = resolve_opening(make_opening(swing="right", swingDirection="outward"), make_wall())
    assert resolved.swings[0].open_latch == pytest.approx((2.0, -1.0))


def test_double_door_has_two_half_leaves():
    """Test double doors hinge at both edges and meet at the center."""
    resolved = resolve_opening(make_opening(type="double-door", width=1.6, swing="left"), make_wall())
    assert len(resolved.swings) == 2
    first, second = resolved.swings
    assert first.hinge == pytest.approx((2.0, 0.0))
    assert second.hinge == pytest.approx((3.6, 0.0))
    assert first.closed_latch == pytest.approx((2.8, 0.0))
    assert first.radius == pytest.approx(0.8)


def test_unhinged_door_has_no_leaves():
    """Test swing "none" draws no arcs."""
    assert resolve_opening(make_opening(), make_wall()).swings == []


def test_sliding_door_panels_overlap():
    """Test two panels of 55% width meeting past the midpoint."""
    resolved = resolve_opening(make_opening(type="sliding-door", width=2.0), make_wall())
    assert resolved.swings == []
    first, second = resolved.panels
    assert first.start == pytest.approx((2.0, 0.0))
    assert first.end == pytest.approx((3.1, 0.0))
    assert second.start == pytest.approx((2.9, 0.0))
    assert second.end == pytest.approx((4.0, 0.0))


def test_window_panes_span_wall_thickness():
    """Test outer pane, glass line and inner pane offsets."""
    resolved = resolve_opening(make_opening(type="window", width=1.2), make_wall(thickness=0.4))
    outer, glass, inner = resolved.panes
    assert outer.start == pytest.approx((2.0, 0.2))
    assert glass.start == pytest.approx((2.0, 0.0))
    assert inner.end == pytest.approx((3.2, -0.2))


def test_missing_wall_is_dangling(sheet):
    """Test openings on unknown walls are excluded, not raised."""
    openings = list(sheet.elements.openings) + [make_opening(id="ghost", wallId="nope")]
    resolved, dangling = resolve_openings(openings, sheet.elements.walls)
    assert dangling == ["ghost"]
    assert [item.opening.id for item in resolved] == ["d1", "d2", "d3", "w1", "w2", "w3"]
