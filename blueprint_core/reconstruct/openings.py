"""Resolve openings to absolute placement on their host walls."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from loguru import logger

from ..exceptions import OpeningPlacementError
from ..geometry.contract import DEGENERATE_EPS, SLIDING_PANEL_RATIO
from ..geometry.primitives import XY, clamp, offset_point, point_along, segment_angle, unit_perpendicular
from ..model.schema import Opening, OpeningKind, OpeningType, Swing, SwingDirection, WallSegment


@dataclass(frozen=True)
class Segment2D:
    start: XY
    end: XY


@dataclass(frozen=True)
class SwingGeometry:
    """One hinged leaf: hinge point, latch when closed, latch when fully open."""
    hinge: XY
    closed_latch: XY
    open_latch: XY
    radius: float
    side: int  # +1 towards the wall's left-hand normal, -1 away from it


@dataclass
class ResolvedOpening:
    opening: Opening
    wall: WallSegment
    wall_length: float
    t: float
    position: XY
    center: XY
    span_start: XY
    span_end: XY
    angle: float
    clamped: bool = False
    swings: List[SwingGeometry] = field(default_factory=list)
    panels: List[Segment2D] = field(default_factory=list)
    panes: List[Segment2D] = field(default_factory=list)

    @property
    def angle_deg(self) -> float:
        return math.degrees(self.angle)

    @property
    def kind(self) -> OpeningKind:
        return self.opening.kind


def swing_side(swing: Swing, direction: SwingDirection | None) -> int:
    """Side of the wall a hinged leaf opens into, relative to wall direction.

    In wall-local space a left swing opens towards -y and a right swing towards
    +y. An outward swing mirrors the leaf to the other face.
    """
    side = 1 if swing == Swing.RIGHT else -1
    if direction == SwingDirection.OUTWARD:
        side = -side
    return side


def _leaf(hinge: XY, latch: XY, normal: XY, side: int, radius: float) -> SwingGeometry:
    return SwingGeometry(
        hinge=hinge,
        closed_latch=latch,
        open_latch=offset_point(hinge, normal, side * radius),
        radius=radius,
        side=side,
    )


def _hinged_leaves(opening: Opening, span_start: XY, span_end: XY, center: XY, normal: XY, width: float) -> List[SwingGeometry]:
    if opening.swing == Swing.NONE:
        return []
    side = swing_side(opening.swing, opening.swingDirection)
    if opening.type == OpeningType.DOUBLE_DOOR:
        half = width / 2.0
        return [
            _leaf(span_start, center, normal, side, half),
            _leaf(span_end, center, normal, side, half),
        ]
    return [_leaf(span_start, span_end, normal, side, width)]


def _sliding_panels(wall: WallSegment, span_start_d: float, width: float) -> List[Segment2D]:
    """Two overlapping panels sharing the opening midpoint, each width * 0.55 long."""
    length = wall.length
    panel = width * SLIDING_PANEL_RATIO
    span_end_d = span_start_d + width
    return [
        Segment2D(
            point_along(wall.start, wall.end, span_start_d / length),
            point_along(wall.start, wall.end, (span_start_d + panel) / length),
        ),
        Segment2D(
            point_along(wall.start, wall.end, (span_end_d - panel) / length),
            point_along(wall.start, wall.end, span_end_d / length),
        ),
    ]


def _window_panes(span_start: XY, span_end: XY, normal: XY, thickness: float) -> List[Segment2D]:
    """Outer pane, glass line and inner pane, offset across the wall thickness."""
    panes = []
    for offset in (thickness / 2.0, 0.0, -thickness / 2.0):
        panes.append(Segment2D(offset_point(span_start, normal, offset), offset_point(span_end, normal, offset)))
    return panes


def resolve_opening(opening: Opening, wall: WallSegment, *, strict: bool = False) -> ResolvedOpening:
    """Place an opening on its host wall.

    ``distFromStart`` is the distance from the wall start to the opening's near
    edge. An opening that runs past the wall end is pulled back so it ends at
    the wall end (and flagged ``clamped``), or rejected when ``strict``.
    """
    if opening.wallId != wall.id:
        raise OpeningPlacementError(
            f"Opening {opening.id} belongs to wall {opening.wallId}, not {wall.id}",
            {"opening_id": opening.id, "wall_id": wall.id},
        )

    length = wall.length
    width = opening.width
    near = opening.distFromStart
    clamped = near + width > length + DEGENERATE_EPS
    if clamped:
        if strict:
            raise OpeningPlacementError(
                f"Opening {opening.id} extends beyond wall {wall.id} ({near + width:.3f}m > {length:.3f}m)",
                {"opening_id": opening.id, "wall_id": wall.id},
            )
        logger.warning(
            "Opening {opening} extends beyond wall {wall}; clamped to wall end",
            opening=opening.id,
            wall=wall.id,
        )
        width = min(width, length)
        near = length - width

    t = clamp(near / length)
    far = min(near + width, length)
    span_start = point_along(wall.start, wall.end, near / length)
    span_end = point_along(wall.start, wall.end, far / length)
    center = point_along(wall.start, wall.end, (near + far) / 2.0 / length)
    normal = unit_perpendicular(wall.start, wall.end)

    resolved = ResolvedOpening(
        opening=opening,
        wall=wall,
        wall_length=length,
        t=t,
        position=point_along(wall.start, wall.end, t),
        center=center,
        span_start=span_start,
        span_end=span_end,
        angle=segment_angle(wall.start, wall.end),
        clamped=clamped,
    )

    kind = opening.kind
    if kind == OpeningKind.HINGED:
        resolved.swings = _hinged_leaves(opening, span_start, span_end, center, normal, far - near)
    elif kind == OpeningKind.SLIDING:
        resolved.panels = _sliding_panels(wall, near, far - near)
    elif kind == OpeningKind.WINDOW:
        resolved.panes = _window_panes(span_start, span_end, normal, wall.thickness)
    return resolved


def resolve_openings(
    openings: Sequence[Opening],
    walls: Sequence[WallSegment],
    *,
    strict: bool = False,
) -> Tuple[List[ResolvedOpening], List[str]]:
    """Resolve every opening whose host wall exists.

    Returns the resolved openings in input order and the ids of openings whose
    wall is missing. Those stay in the data model but are left out of any
    geometry-dependent output.
    """
    wall_map: Dict[str, WallSegment] = {w.id: w for w in walls}
    resolved: List[ResolvedOpening] = []
    dangling: List[str] = []
    for opening in openings:
        wall = wall_map.get(opening.wallId)
        if wall is None:
            logger.warning(
                "Opening {opening} references missing wall {wall}; excluded from geometry",
                opening=opening.id,
                wall=opening.wallId,
            )
            dangling.append(opening.id)
            continue
        resolved.append(resolve_opening(opening, wall, strict=strict))
    return resolved, dangling


__all__ = [
    "Segment2D",
    "SwingGeometry",
    "ResolvedOpening",
    "swing_side",
    "resolve_opening",
    "resolve_openings",
]
