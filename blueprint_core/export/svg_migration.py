"""
Coordinate blueprint to SVG blueprint conversion

Builds the path-based ``SVGBlueprint`` view of one sheet. The exterior path
comes from the reconstructed wall loop, interior divisions carry their
connectivity, and openings are re-expressed as a position along their path.
The conversion is pure and always regenerable from the source blueprint.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import List, Optional, Sequence

from loguru import logger

from ..compliance.rooms import classify_room
from ..formatting import js_number
from ..geometry.contract import CONNECTION_TOLERANCE, DEFAULT_PARTITION_THICKNESS, LOOP_MATCH_TOLERANCE
from ..geometry.primitives import PointLike, clamp, distance
from ..model.schema import BlueprintData, RoomZone, Swing, SwingDirection, WallSegment, WallType
from ..model.svg import ExteriorBoundary, InteriorDivision, SVGBlueprint, SVGMetadata, SVGOpening, SVGRoom
from ..reconstruct.openings import ResolvedOpening, resolve_openings
from ..reconstruct.topology import EXTERIOR_LABEL, Topology, reconstruct

EXTERIOR_MATERIALS = ("brick", "concrete", "CLT", "gasbeton", "timber")
DIVISION_MATERIALS = ("gypsum-board", "brick", "concrete", "timber", "CLT")

MIN_EXTERIOR_THICKNESS = 0.3
MAX_EXTERIOR_THICKNESS = 0.6


def _coord(point: PointLike) -> str:
    return f"{js_number(point.x)},{js_number(point.y)}"


def path_from_points(points: Sequence[PointLike], closed: bool = True) -> str:
    """``M x,y L x,y ...`` with a trailing ``Z`` when closed."""
    if not points:
        return "M 0,0 Z"
    commands = [f"M {_coord(points[0])}"]
    commands.extend(f"L {_coord(p)}" for p in points[1:])
    if closed:
        commands.append("Z")
    return " ".join(commands)


def exterior_path(topology: Topology) -> str:
    """One ``L`` per loop wall; the placeholder square when there is no exterior."""
    return path_from_points(topology.loop_vertices())


def building_type(text: Optional[str]) -> str:
    if not text:
        return "house"
    lower = text.lower()
    if "apartment" in lower or "lejlighed" in lower:
        return "apartment"
    if "townhouse" in lower or "rækkehus" in lower:
        return "townhouse"
    if "villa" in lower:
        return "villa"
    return "house"


def _exterior_boundary(walls: List[WallSegment], topology: Topology) -> ExteriorBoundary:
    exterior = [w for w in walls if w.isExternal]
    thickness = MIN_EXTERIOR_THICKNESS
    material = "brick"
    if exterior:
        mean = sum(w.thickness for w in exterior) / len(exterior)
        thickness = clamp(mean, MIN_EXTERIOR_THICKNESS, MAX_EXTERIOR_THICKNESS)
        counts = Counter(w.material.value for w in exterior if w.material.value in EXTERIOR_MATERIALS)
        if counts:
            material = counts.most_common(1)[0][0]
    return ExteriorBoundary(
        path=exterior_path(topology),
        thickness=thickness,
        material=material,
        insulated=True,
        closed=topology.closed,
    )


def _division(wall: WallSegment, topology: Topology) -> InteriorDivision:
    material = wall.material.value if wall.material.value in DIVISION_MATERIALS else "gypsum-board"
    return InteriorDivision(
        id=wall.id,
        path=path_from_points([wall.start, wall.end], closed=False),
        thickness=wall.thickness or DEFAULT_PARTITION_THICKNESS,
        connects=list(topology.connections.get(wall.id, [])),
        material=material,
        structural=wall.type == WallType.LOAD_BEARING,
    )


def room_boundary(room: RoomZone) -> str:
    """Room polygon as a path, else a square of the room's area around its center."""
    if room.polygon:
        return path_from_points(room.polygon)
    side = math.sqrt(room.area.value)
    x = room.center.x - side / 2.0
    y = room.center.y - side / 2.0
    return (
        f"M {js_number(x)},{js_number(y)} L {js_number(x + side)},{js_number(y)} "
        f"L {js_number(x + side)},{js_number(y + side)} L {js_number(x)},{js_number(y + side)} Z"
    )


def _room(room: RoomZone) -> SVGRoom:
    return SVGRoom(
        id=room.id,
        name=room.label,
        type=classify_room(room).value,
        boundary=room_boundary(room),
        area=room.area.value,
        ceilingHeight=room.ceilingHeight,
        flooring=room.flooring.value,
    )


def at_position(resolved: ResolvedOpening, topology: Topology) -> float:
    """Position of an opening's center along its path, as a 0-1 fraction.

    Interior walls measure along the wall. Exterior walls measure along the
    loop perimeter in traversal order, so the value does not depend on the
    direction a wall was drawn; exterior walls left out of a partial loop
    measure along the wall.
    """
    wall = resolved.wall
    along = distance(wall.start, resolved.center)
    if not wall.isExternal:
        return clamp(along / resolved.wall_length)
    entry = topology.loop_entry(wall.id)
    perimeter = topology.loop_perimeter()
    if entry is None or perimeter <= 0:
        return clamp(along / resolved.wall_length)
    if entry.reversed:
        along = resolved.wall_length - along
    offset = topology.loop_offset(wall.id) or 0.0
    return clamp((offset + along) / perimeter)


def _opening(resolved: ResolvedOpening, topology: Topology) -> SVGOpening:
    opening = resolved.opening
    return SVGOpening(
        id=opening.id,
        type=opening.type,
        onPath=EXTERIOR_LABEL if resolved.wall.isExternal else resolved.wall.id,
        atPosition=at_position(resolved, topology),
        width=opening.width,
        height=opening.height,
        swing=Swing.LEFT if opening.swingDirection == SwingDirection.INWARD else Swing.RIGHT,
        sillHeight=opening.sillHeight,
    )


def convert_to_svg_blueprint(
    blueprint: BlueprintData,
    sheet_index: int = 0,
    *,
    tolerance: float = LOOP_MATCH_TOLERANCE,
    connection_tolerance: float = CONNECTION_TOLERANCE,
) -> SVGBlueprint:
    """Convert one sheet of a coordinate blueprint to the SVG blueprint view.

    Args:
        blueprint: Source blueprint (not modified).
        sheet_index: Sheet to convert.
        tolerance: Endpoint tolerance for the exterior loop.
        connection_tolerance: Endpoint tolerance for interior connectivity.

    Returns:
        SVGBlueprint for the sheet.

    Raises:
        SheetNotFoundError: If the sheet does not exist.
    """
    sheet = blueprint.sheet(sheet_index)
    walls = sheet.elements.walls
    topology = reconstruct(walls, loop_tolerance=tolerance, connection_tolerance=connection_tolerance)
    resolved, dangling = resolve_openings(sheet.elements.openings, walls)

    rooms = [_room(room) for room in sheet.elements.rooms]
    total_area = sheet.metadata.totalArea or sum(room.area for room in rooms)

    result = SVGBlueprint(
        metadata=SVGMetadata(
            projectName=blueprint.projectName,
            projectNumber=blueprint.projectNumber,
            architect=blueprint.architect,
            client=blueprint.client,
            location=blueprint.location or "Denmark",
            totalArea=total_area,
            buildingType=building_type(blueprint.buildingType),
            createdAt=blueprint.createdAt,
            updatedAt=blueprint.updatedAt,
        ),
        exterior=_exterior_boundary(walls, topology),
        divisions=[_division(wall, topology) for wall in walls if not wall.isExternal],
        rooms=rooms,
        openings=[_opening(item, topology) for item in resolved],
    )
    logger.info(
        "Converted sheet {number} to SVG blueprint: loop closed={closed}, {divisions} divisions, "
        "{openings} openings ({skipped} skipped)",
        number=sheet.number,
        closed=topology.closed,
        divisions=len(result.divisions),
        openings=len(result.openings),
        skipped=len(dangling),
    )
    return result


__all__ = [
    "path_from_points",
    "exterior_path",
    "building_type",
    "room_boundary",
    "at_position",
    "convert_to_svg_blueprint",
]
