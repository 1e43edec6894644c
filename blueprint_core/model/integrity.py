"""
Plan data-integrity validator

Reports geometry problems that the engine recovers from (open exterior loop,
dangling endpoints, openings with a missing or too short host wall, very short
walls). Every finding is a minor ``GEO-*`` issue; nothing here raises.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from ..compliance.report import ComplianceIssue, ElementType, LocalizedText, Severity
from ..formatting import js_number, to_fixed
from ..geometry.contract import (
    CONNECTION_TOLERANCE,
    DEGENERATE_EPS,
    ENDPOINT_KEY_DECIMALS,
    LOOP_MATCH_TOLERANCE,
    MIN_WALL_LENGTH,
    PLACEHOLDER_SIZE,
)
from ..geometry.primitives import distance, point_segment_distance
from ..reconstruct.topology import Topology, reconstruct
from .schema import Point, Sheet, WallSegment


def _issue(
    code: str,
    en: str,
    da: str,
    element_id: str | None = None,
    element_type: ElementType = ElementType.GENERAL,
) -> ComplianceIssue:
    return ComplianceIssue(
        code=code,
        message=LocalizedText(en=en, da=da),
        severity=Severity.MINOR,
        elementId=element_id,
        elementType=element_type,
    )


def _point_key(point: Point) -> Tuple[float, float]:
    return (round(point.x, ENDPOINT_KEY_DECIMALS), round(point.y, ENDPOINT_KEY_DECIMALS))


def check_exterior_loop(topology: Topology) -> List[ComplianceIssue]:
    """GEO-002: exterior walls must chain into a closed loop."""
    if topology.is_placeholder:
        size = js_number(PLACEHOLDER_SIZE)
        return [
            _issue(
                "GEO-002",
                f"No exterior walls marked; using a {size}m × {size}m placeholder boundary",
                f"Ingen ydervægge markeret; bruger en pladsholder på {size}m × {size}m",
            )
        ]
    if topology.closed:
        return []

    issues: List[ComplianceIssue] = []
    first, last = topology.loop[0], topology.loop[-1]
    gap = to_fixed(distance(last.end, first.start), 3)
    issues.append(
        _issue(
            "GEO-002",
            f"Exterior loop not closed: {gap}m gap between last wall {last.id} and first wall {first.id}",
            f"Ydervæggene danner ikke en lukket kreds: {gap}m mellemrum mellem sidste væg {last.id} "
            f"og første væg {first.id}",
            last.id,
            ElementType.WALL,
        )
    )
    for wall_id in topology.unplaced:
        issues.append(
            _issue(
                "GEO-002",
                f"Exterior wall {wall_id} does not connect to the exterior loop",
                f"Ydervæg {wall_id} hænger ikke sammen med ydervæggenes kreds",
                wall_id,
                ElementType.WALL,
            )
        )
    return issues


def check_dangling_endpoints(
    walls: List[WallSegment],
    tolerance: float = CONNECTION_TOLERANCE,
) -> List[ComplianceIssue]:
    """GEO-003: wall endpoints used by exactly one wall.

    Endpoints are bucketed by rounded coordinates. An endpoint resting on
    another wall's centerline (a T-junction) is connected.
    """
    buckets: Dict[Tuple[float, float], List[Tuple[WallSegment, Point]]] = defaultdict(list)
    for wall in walls:
        buckets[_point_key(wall.start)].append((wall, wall.start))
        buckets[_point_key(wall.end)].append((wall, wall.end))

    issues: List[ComplianceIssue] = []
    for entries in buckets.values():
        if len(entries) != 1:
            continue
        wall, point = entries[0]
        touches = any(
            other.id != wall.id and point_segment_distance(point, other.start, other.end) < tolerance
            for other in walls
        )
        if touches:
            continue
        x, y = js_number(point.x), js_number(point.y)
        issues.append(
            _issue(
                "GEO-003",
                f"Wall {wall.id} has dangling endpoint at ({x}, {y}) with only 1 connection",
                f"Væg {wall.id} har et frit endepunkt ved ({x}, {y}) med kun 1 forbindelse",
                wall.id,
                ElementType.WALL,
            )
        )
    return issues


def check_opening_references(sheet: Sheet) -> List[ComplianceIssue]:
    """GEO-004: openings need an existing host wall long enough to hold them."""
    wall_map = sheet.elements.wall_map()
    issues: List[ComplianceIssue] = []
    for opening in sheet.elements.openings:
        wall = wall_map.get(opening.wallId)
        if wall is None:
            issues.append(
                _issue(
                    "GEO-004",
                    f"Opening {opening.id} references non-existent wall {opening.wallId}",
                    f"Åbning {opening.id} henviser til en væg, der ikke findes: {opening.wallId}",
                    opening.id,
                    ElementType.OPENING,
                )
            )
            continue
        length = wall.length
        far = opening.distFromStart + opening.width
        if far > length + DEGENERATE_EPS:
            issues.append(
                _issue(
                    "GEO-004",
                    f"Opening {opening.id} extends beyond wall {wall.id} "
                    f"({js_number(far)}m > {to_fixed(length, 2)}m)",
                    f"Åbning {opening.id} går ud over væg {wall.id} ({js_number(far)}m > {to_fixed(length, 2)}m)",
                    opening.id,
                    ElementType.OPENING,
                )
            )
    return issues


def check_wall_lengths(walls: List[WallSegment], minimum: float = MIN_WALL_LENGTH) -> List[ComplianceIssue]:
    """GEO-005: walls shorter than the minimum length."""
    issues: List[ComplianceIssue] = []
    for wall in walls:
        length = wall.length
        if length < minimum:
            issues.append(
                _issue(
                    "GEO-005",
                    f"Wall {wall.id} is too short: {to_fixed(length, 3)}m (minimum {js_number(minimum)}m)",
                    f"Væg {wall.id} er for kort: {to_fixed(length, 3)}m (minimum {js_number(minimum)}m)",
                    wall.id,
                    ElementType.WALL,
                )
            )
    return issues


def check_integrity(
    sheet: Sheet,
    *,
    topology: Optional[Topology] = None,
    loop_tolerance: float = LOOP_MATCH_TOLERANCE,
    connection_tolerance: float = CONNECTION_TOLERANCE,
) -> List[ComplianceIssue]:
    """Run every integrity check on one sheet.

    Args:
        sheet: Sheet to inspect.
        topology: Reconstructed topology, if the caller already has one.
        loop_tolerance: Endpoint tolerance for the exterior loop.
        connection_tolerance: Tolerance for T-junction detection.

    Returns:
        Minor ``GEO-*`` issues in check order.
    """
    walls = sheet.elements.walls
    if topology is None:
        topology = reconstruct(walls, loop_tolerance=loop_tolerance, connection_tolerance=connection_tolerance)

    issues: List[ComplianceIssue] = []
    issues.extend(check_exterior_loop(topology))
    issues.extend(check_dangling_endpoints(walls, connection_tolerance))
    issues.extend(check_opening_references(sheet))
    issues.extend(check_wall_lengths(walls))
    return issues


__all__ = [
    "check_exterior_loop",
    "check_dangling_endpoints",
    "check_opening_references",
    "check_wall_lengths",
    "check_integrity",
]
