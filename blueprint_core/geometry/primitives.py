"""Plan-view 2D primitives in meters, with shapely for polygon predicates."""

from __future__ import annotations

import math
from typing import Iterable, NamedTuple, Protocol, Sequence

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

from .contract import DEGENERATE_EPS


class PointLike(Protocol):
    x: float
    y: float


class XY(NamedTuple):
    """Immutable plan-view coordinate pair in meters."""
    x: float
    y: float


def as_xy(point: PointLike) -> XY:
    return XY(float(point.x), float(point.y))


def distance(a: PointLike, b: PointLike) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def points_match(a: PointLike, b: PointLike, tolerance: float) -> bool:
    """Axis-wise coincidence test: both |dx| and |dy| strictly below tolerance."""
    return abs(a.x - b.x) < tolerance and abs(a.y - b.y) < tolerance


def segment_length(start: PointLike, end: PointLike) -> float:
    return distance(start, end)


def segment_angle(start: PointLike, end: PointLike) -> float:
    """Direction of the segment in radians, measured from +x."""
    return math.atan2(end.y - start.y, end.x - start.x)


def midpoint(start: PointLike, end: PointLike) -> XY:
    return XY((start.x + end.x) / 2.0, (start.y + end.y) / 2.0)


def point_along(start: PointLike, end: PointLike, t: float) -> XY:
    """Point at parameter t on the segment (t=0 start, t=1 end, not clamped)."""
    return XY(start.x + t * (end.x - start.x), start.y + t * (end.y - start.y))


def point_segment_distance(point: PointLike, start: PointLike, end: PointLike) -> float:
    """Shortest distance from a point to a closed segment."""
    dx, dy = end.x - start.x, end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq < DEGENERATE_EPS:
        return distance(point, start)
    t = clamp(((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq)
    return distance(point, XY(start.x + t * dx, start.y + t * dy))


def unit_direction(start: PointLike, end: PointLike) -> XY:
    length = segment_length(start, end)
    if length < DEGENERATE_EPS:
        raise ValueError("Segment has zero length; direction is undefined")
    return XY((end.x - start.x) / length, (end.y - start.y) / length)


def unit_perpendicular(start: PointLike, end: PointLike) -> XY:
    """Left-hand normal (-dy, dx) / length of the segment."""
    direction = unit_direction(start, end)
    return XY(-direction.y, direction.x)


def offset_point(point: PointLike, vector: PointLike, scale: float = 1.0) -> XY:
    return XY(point.x + vector.x * scale, point.y + vector.y * scale)


def offset_segment_polygon(start: PointLike, end: PointLike, thickness: float) -> list[XY]:
    """Four-corner rectangle around a centerline.

    The centerline is offset by half the thickness on both sides along the
    unit perpendicular. Corner order is [start+p, end+p, end-p, start-p].
    Both the wall outline and its hatch boundary are built from this.
    """
    perp = unit_perpendicular(start, end)
    half = thickness / 2.0
    px, py = perp.x * half, perp.y * half
    return [
        XY(start.x + px, start.y + py),
        XY(end.x + px, end.y + py),
        XY(end.x - px, end.y - py),
        XY(start.x - px, start.y - py),
    ]


def polygon_area(points: Sequence[PointLike]) -> float:
    """Unsigned shoelace area of an implicitly closed polygon."""
    if len(points) < 3:
        return 0.0
    acc = 0.0
    for i, p in enumerate(points):
        q = points[(i + 1) % len(points)]
        acc += p.x * q.y - q.x * p.y
    return abs(acc) / 2.0


def to_polygon(points: Iterable[PointLike]) -> Polygon:
    return Polygon([(p.x, p.y) for p in points])


def is_simple_polygon(points: Sequence[PointLike]) -> bool:
    """True for a valid, non-self-intersecting polygon with positive area."""
    if len(points) < 3:
        return False
    poly = to_polygon(points)
    return poly.is_valid and poly.area > 0.0


def polygon_contains(points: Sequence[PointLike], point: PointLike, *, tolerance: float = 1e-9) -> bool:
    """Point-in-polygon test that also accepts points on the boundary."""
    poly = to_polygon(points)
    target = ShapelyPoint(point.x, point.y)
    return poly.covers(target) or poly.distance(target) <= tolerance


def fits_clear_circle(points: Sequence[PointLike], diameter: float) -> bool:
    """Whether a circle of the given diameter fits entirely inside the polygon."""
    poly = to_polygon(points)
    if not poly.is_valid or poly.is_empty:
        return False
    # A center exists iff the inward buffer by the radius is non-empty.
    # The epsilon lets a circle touching the walls count as fitting.
    return not poly.buffer(-(diameter / 2.0 - 1e-6)).is_empty


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


__all__ = [
    "PointLike",
    "XY",
    "as_xy",
    "distance",
    "points_match",
    "segment_length",
    "segment_angle",
    "midpoint",
    "point_along",
    "point_segment_distance",
    "unit_direction",
    "unit_perpendicular",
    "offset_point",
    "offset_segment_polygon",
    "polygon_area",
    "to_polygon",
    "is_simple_polygon",
    "polygon_contains",
    "fits_clear_circle",
    "clamp",
]
