"""
BR18/BR23 plan rules

Each ``check_*`` function inspects one concern of a resolved sheet and routes
its findings into an ``IssueCollector``. Rules never raise on a non-compliant
plan and never mutate their input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..formatting import js_number, to_fixed
from ..geometry.primitives import distance, fits_clear_circle, midpoint, polygon_contains
from ..model.schema import OpeningKind, RoomZone, Sheet, SwingDirection, WallSegment
from ..reconstruct.openings import ResolvedOpening
from .report import EgressAnalysis, ElementType, IssueCollector, Severity
from .rooms import (
    CORRIDOR_KINDS,
    HABITABLE_KINDS,
    WET_ROOM_KINDS,
    RoomKind,
    classify_room,
    is_stair_room,
    is_tech_room,
)
from .standards import STANDARDS

_RESCUE_TAG_WORDS = ("rescue", "redning")

# Minimum floor area per room kind and the regulation code it is reported under
_ROOM_AREA_RULES: Dict[RoomKind, tuple[str, float]] = {
    RoomKind.BEDROOM: ("BR18-5.2.3", STANDARDS["ROOM_AREA_BEDROOM"]),
    RoomKind.LIVING_ROOM: ("BR18-5.2.1", STANDARDS["ROOM_AREA_LIVING"]),
    RoomKind.DINING_ROOM: ("BR18-5.2.1", STANDARDS["ROOM_AREA_LIVING"]),
    RoomKind.KITCHEN: ("BR18-5.2.2", STANDARDS["ROOM_AREA_KITCHEN"]),
}


@dataclass
class PlanContext:
    """A sheet with its openings already placed on their walls."""
    sheet: Sheet
    resolved: List[ResolvedOpening]
    dangling: List[str] = field(default_factory=list)
    kinds: Dict[str, RoomKind] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.kinds:
            self.kinds = {room.id: classify_room(room) for room in self.rooms}

    @property
    def rooms(self) -> List[RoomZone]:
        return self.sheet.elements.rooms

    @property
    def walls(self) -> List[WallSegment]:
        return self.sheet.elements.walls

    def kind(self, room: RoomZone) -> RoomKind:
        return self.kinds[room.id]

    def rooms_of(self, *kinds: RoomKind) -> List[RoomZone]:
        return [room for room in self.rooms if self.kinds[room.id] in kinds]

    def doors(self) -> List[ResolvedOpening]:
        return [r for r in self.resolved if r.opening.is_door]

    def exterior_windows(self) -> List[ResolvedOpening]:
        return [r for r in self.resolved if r.kind == OpeningKind.WINDOW and r.wall.isExternal]


def _tag(resolved: ResolvedOpening) -> str:
    return resolved.opening.tag or resolved.opening.id


def _window_area(resolved: ResolvedOpening) -> float:
    return resolved.opening.width * resolved.opening.effective_height


def windows_for_room(room: RoomZone, ctx: PlanContext) -> List[ResolvedOpening]:
    """Exterior windows that serve a room.

    With a polygon, a window belongs to the room when its center lies inside
    the polygon grown by the host wall thickness. Without one, windows within
    ``sqrt(area) * 0.7 + 2`` m of the room center are taken.
    """
    windows = ctx.exterior_windows()
    if room.polygon:
        return [
            w for w in windows
            if polygon_contains(room.polygon, w.center, tolerance=w.wall.thickness)
        ]
    radius = math.sqrt(room.area.value) * STANDARDS["DAYLIGHT_SEARCH_FACTOR"] + STANDARDS["DAYLIGHT_SEARCH_SLACK"]
    return [w for w in windows if distance(room.center, w.center) <= radius]


def check_room_areas(ctx: PlanContext, out: IssueCollector) -> None:
    for room in ctx.rooms:
        rule = _ROOM_AREA_RULES.get(ctx.kind(room))
        if rule is None:
            continue
        code, minimum = rule
        area = js_number(room.area.value)
        limit = js_number(minimum)
        if room.area.value < minimum:
            out.issue(
                code,
                Severity.MAJOR,
                f"{room.label}: {area}m² < {limit}m² minimum",
                f"{room.label}: {area}m² < {limit}m² minimum",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )
        else:
            out.check(
                code,
                f"{room.label}: {area}m² ≥ {limit}m² ✓",
                f"{room.label}: {area}m² ≥ {limit}m² ✓",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )


def check_ceiling_heights(ctx: PlanContext, out: IssueCollector) -> None:
    for room in ctx.rooms:
        height = room.ceilingHeight
        if height is None:
            continue
        minimum = (
            STANDARDS["CEILING_HEIGHT_HABITABLE"]
            if ctx.kind(room) in HABITABLE_KINDS
            else STANDARDS["CEILING_HEIGHT_OTHER"]
        )
        if height < minimum:
            out.issue(
                "BR18-5.1.1",
                Severity.CRITICAL,
                f"{room.label}: Ceiling height {js_number(height)}m < {js_number(minimum)}m minimum",
                f"{room.label}: Loftshøjde {js_number(height)}m < {js_number(minimum)}m minimum",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )
        else:
            out.check(
                "BR18-5.1.1",
                f"{room.label}: Ceiling height {js_number(height)}m ✓",
                f"{room.label}: Loftshøjde {js_number(height)}m ✓",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )


def check_door_widths(ctx: PlanContext, out: IssueCollector) -> None:
    minimum = STANDARDS["DOOR_WIDTH_MIN"]
    recommended = STANDARDS["DOOR_WIDTH_RECOMMENDED"]
    for door in ctx.doors():
        tag = _tag(door)
        width = js_number(door.opening.width)
        if door.opening.width < minimum:
            out.issue(
                "BR18-3.1.1",
                Severity.CRITICAL,
                f"Door {tag}: Width {width}m < {js_number(minimum)}m (accessibility minimum)",
                f"Dør {tag}: Bredde {width}m < {js_number(minimum)}m (minimum for tilgængelighed)",
                element_id=door.opening.id,
                element_type=ElementType.OPENING,
            )
        elif door.opening.width < recommended:
            out.issue(
                "BR18-3.1.1",
                Severity.MINOR,
                f"Door {tag}: Width {width}m meets minimum but {js_number(recommended)}m recommended",
                f"Dør {tag}: Bredde {width}m opfylder minimum, men {js_number(recommended)}m anbefales",
                element_id=door.opening.id,
                element_type=ElementType.OPENING,
            )
        else:
            out.check(
                "BR18-3.1.1",
                f"Door {tag}: Width {width}m ✓",
                f"Dør {tag}: Bredde {width}m ✓",
                element_id=door.opening.id,
                element_type=ElementType.OPENING,
            )


def check_daylight(ctx: PlanContext, out: IssueCollector) -> None:
    """BR23 §374: window area of at least 10% of the floor area per habitable room."""
    ratio_required = STANDARDS["DAYLIGHT_RATIO"]
    for room in ctx.rooms_of(*HABITABLE_KINDS):
        area = room.area.value
        if room.naturalLightArea is not None:
            window_area = room.naturalLightArea
        else:
            window_area = sum(_window_area(w) for w in windows_for_room(room, ctx))
        ratio = window_area / area
        percent = to_fixed(ratio * 100, 1)
        if ratio < ratio_required:
            required = to_fixed(area * ratio_required, 2)
            out.issue(
                "BR23-374",
                Severity.MAJOR,
                f"{room.label}: Natural light {percent}% < 10% required "
                f"({to_fixed(window_area, 2)}m² windows / {to_fixed(area, 1)}m² room, need {required}m²)",
                f"{room.label}: Dagslys {percent}% < 10% påkrævet "
                f"({to_fixed(window_area, 2)}m² vinduer / {to_fixed(area, 1)}m² rum, kræver {required}m²)",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )
        else:
            out.check(
                "BR23-374",
                f"{room.label}: Natural light {percent}% ≥ 10% ✓",
                f"{room.label}: Dagslys {percent}% ≥ 10% ✓",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )


def rescue_window(room: RoomZone, ctx: PlanContext) -> Optional[ResolvedOpening]:
    """The window a bedroom would be evacuated through.

    A window tagged "rescue"/"redning" wins; otherwise the largest window
    serving the room.
    """
    windows = windows_for_room(room, ctx)
    if not windows:
        return None
    for window in windows:
        tag = window.opening.tag.lower()
        if any(word in tag for word in _RESCUE_TAG_WORDS):
            return window
    return max(windows, key=_window_area)


def check_rescue_windows(ctx: PlanContext, out: IssueCollector) -> None:
    min_sum = STANDARDS["RESCUE_MIN_SUM_HW"]
    max_sill = STANDARDS["RESCUE_MAX_SILL"]
    for bedroom in ctx.rooms_of(RoomKind.BEDROOM):
        window = rescue_window(bedroom, ctx)
        if window is None:
            out.issue(
                "BR18-rescue",
                Severity.MAJOR,
                f"{bedroom.label}: No rescue window found (requires H+W ≥ 1.50m)",
                f"{bedroom.label}: Intet redningsvindue fundet (kræver H+B ≥ 1,50m)",
                element_id=bedroom.id,
                element_type=ElementType.ROOM,
            )
            continue

        opening = window.opening
        tag = _tag(window)
        compliant = True
        hw_sum = opening.width + opening.effective_height
        if hw_sum < min_sum:
            compliant = False
            out.issue(
                "BR18-rescue-size",
                Severity.CRITICAL,
                f"Window {tag}: H+W = {to_fixed(hw_sum, 2)}m < 1.50m required for rescue",
                f"Vindue {tag}: H+B = {to_fixed(hw_sum, 2)}m < 1,50m krævet til redning",
                element_id=opening.id,
                element_type=ElementType.OPENING,
            )
        if opening.sillHeight is not None and opening.sillHeight > max_sill:
            compliant = False
            out.issue(
                "BR18-rescue-sill",
                Severity.CRITICAL,
                f"Window {tag}: Sill height {to_fixed(opening.sillHeight, 2)}m > 1.20m maximum for rescue",
                f"Vindue {tag}: Brystningshøjde {to_fixed(opening.sillHeight, 2)}m > 1,20m maksimum til redning",
                element_id=opening.id,
                element_type=ElementType.OPENING,
            )
        if compliant:
            out.check(
                "BR18-rescue",
                f"{bedroom.label}: Rescue window available ✓",
                f"{bedroom.label}: Redningsvindue til stede ✓",
                element_id=bedroom.id,
                element_type=ElementType.ROOM,
            )


def check_bathroom_turning(ctx: PlanContext, out: IssueCollector) -> None:
    diameter = STANDARDS["TURNING_CIRCLE_DIAMETER"]
    for bathroom in ctx.rooms_of(*WET_ROOM_KINDS):
        area = bathroom.area.value
        if area < STANDARDS["TURNING_CIRCLE_MIN_AREA"]:
            out.issue(
                "BR18-bathroom-turning",
                Severity.MAJOR,
                f"{bathroom.label}: Area {to_fixed(area, 1)}m² may not accommodate 1.50m turning circle",
                f"{bathroom.label}: Arealet {to_fixed(area, 1)}m² giver muligvis ikke plads til en vendecirkel på 1,50m",
                element_id=bathroom.id,
                element_type=ElementType.ROOM,
            )
        elif bathroom.polygon and not fits_clear_circle(bathroom.polygon, diameter):
            out.issue(
                "BR18-bathroom-turning",
                Severity.MAJOR,
                f"{bathroom.label}: Room shape cannot fit a 1.50m turning circle",
                f"{bathroom.label}: Rummets form giver ikke plads til en vendecirkel på 1,50m",
                element_id=bathroom.id,
                element_type=ElementType.ROOM,
            )
        else:
            out.check(
                "BR18-bathroom-turning",
                f"{bathroom.label}: Adequate space for turning circle ✓",
                f"{bathroom.label}: Tilstrækkelig plads til vendecirkel ✓",
                element_id=bathroom.id,
                element_type=ElementType.ROOM,
            )


def check_corridors(ctx: PlanContext, out: IssueCollector) -> None:
    for corridor in ctx.rooms_of(*CORRIDOR_KINDS):
        area = corridor.area.value
        if area < STANDARDS["CORRIDOR_MIN_AREA"]:
            out.issue(
                "BR18-corridor-width",
                Severity.MINOR,
                f"{corridor.label}: Small corridor area ({to_fixed(area, 1)}m²) - verify width ≥ 1.00m",
                f"{corridor.label}: Lille gangareal ({to_fixed(area, 1)}m²) - kontroller bredde ≥ 1,00m",
                element_id=corridor.id,
                element_type=ElementType.ROOM,
            )


def check_tech_room(ctx: PlanContext, out: IssueCollector) -> None:
    tech_rooms = [room for room in ctx.rooms if is_tech_room(room)]
    if not tech_rooms:
        out.issue(
            "BR18-tech-room",
            Severity.MINOR,
            "No technical room/utility space identified (recommend 2-3m² for utilities)",
            "Intet teknikrum/bryggers fundet (anbefaler 2-3m² til installationer)",
            element_type=ElementType.GENERAL,
        )
        return
    minimum = STANDARDS["ROOM_AREA_TECH"]
    for room in tech_rooms:
        area = to_fixed(room.area.value, 1)
        if room.area.value < minimum:
            out.issue(
                "BR18-tech-room-size",
                Severity.MINOR,
                f"{room.label}: {area}m² < {js_number(minimum)}m² recommended",
                f"{room.label}: {area}m² < {js_number(minimum)}m² anbefalet",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )
        else:
            out.check(
                "BR18-tech-room-size",
                f"{room.label}: {area}m² ✓",
                f"{room.label}: {area}m² ✓",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )


def bathroom_doors(room: RoomZone, ctx: PlanContext) -> List[ResolvedOpening]:
    """Doors on walls whose midpoint lies near the room center."""
    reach = math.sqrt(room.area.value) * STANDARDS["BATHROOM_DOOR_SEARCH_FACTOR"] + 1.0
    nearby = {
        wall.id for wall in ctx.walls
        if distance(midpoint(wall.start, wall.end), room.center) < reach
    }
    return [door for door in ctx.doors() if door.wall.id in nearby]


def check_bathroom_door_swing(ctx: PlanContext, out: IssueCollector) -> None:
    """BR18 §6.4: bathroom doors must open outward for rescue access."""
    for bathroom in ctx.rooms_of(*WET_ROOM_KINDS):
        doors = bathroom_doors(bathroom, ctx)
        if not doors:
            out.issue(
                "BR18-6.4",
                Severity.MINOR,
                f"{bathroom.label}: No door found - verify bathroom access",
                f"{bathroom.label}: Ingen dør fundet - kontroller adgangen til badeværelset",
                element_id=bathroom.id,
                element_type=ElementType.ROOM,
            )
            continue
        for door in doors:
            tag = _tag(door)
            opening = door.opening
            if door.kind == OpeningKind.SLIDING:
                out.check(
                    "BR18-6.4",
                    f"{bathroom.label}: Door {tag} is sliding/pocket type (no swing obstruction) ✓",
                    f"{bathroom.label}: Dør {tag} er en skydedør (ingen slagrum) ✓",
                    element_id=opening.id,
                    element_type=ElementType.OPENING,
                )
            elif opening.swingDirection == SwingDirection.OUTWARD:
                out.check(
                    "BR18-6.4",
                    f"{bathroom.label}: Door {tag} swings outward ✓",
                    f"{bathroom.label}: Dør {tag} åbner udad ✓",
                    element_id=opening.id,
                    element_type=ElementType.OPENING,
                )
            elif opening.swingDirection == SwingDirection.INWARD:
                out.issue(
                    "BR18-6.4",
                    Severity.CRITICAL,
                    f"{bathroom.label}: Door {tag} swings INWARD - must swing outward for emergency rescue access",
                    f"{bathroom.label}: Dør {tag} åbner INDAD - skal åbne udad af hensyn til redning",
                    element_id=opening.id,
                    element_type=ElementType.OPENING,
                )
            else:
                out.issue(
                    "BR18-6.4",
                    Severity.MAJOR,
                    f"{bathroom.label}: Verify door {tag} swings OUTWARD from bathroom for emergency rescue access",
                    f"{bathroom.label}: Kontroller at dør {tag} åbner UDAD fra badeværelset af hensyn til redning",
                    element_id=opening.id,
                    element_type=ElementType.OPENING,
                )


def check_thresholds(ctx: PlanContext, out: IssueCollector) -> None:
    """BR18 §373: door thresholds at most 25 mm."""
    maximum = STANDARDS["THRESHOLD_MAX"]
    missing = 0
    for door in ctx.doors():
        threshold = door.opening.thresholdHeight
        if threshold is None:
            missing += 1
            continue
        tag = _tag(door)
        mm = to_fixed(threshold * 1000, 0)
        if threshold > maximum:
            out.issue(
                "BR18-373-threshold",
                Severity.MAJOR,
                f"Door {tag}: Threshold height {mm}mm exceeds 25mm maximum (BR18 §373)",
                f"Dør {tag}: Tærskelhøjde {mm}mm overstiger 25mm maksimum (BR18 §373)",
                element_id=door.opening.id,
                element_type=ElementType.OPENING,
            )
        else:
            out.check(
                "BR18-373-threshold",
                f"Door {tag}: Threshold height {mm}mm ≤ 25mm ✓",
                f"Dør {tag}: Tærskelhøjde {mm}mm ≤ 25mm ✓",
                element_id=door.opening.id,
                element_type=ElementType.OPENING,
            )
    if missing:
        out.issue(
            "BR18-373-threshold",
            Severity.MINOR,
            f"{missing} door(s) missing threshold height - verify ≤25mm for wheelchair accessibility (BR18 §373)",
            f"{missing} dør(e) mangler tærskelhøjde - kontroller ≤25mm for kørestolsbrugere (BR18 §373)",
            element_type=ElementType.GENERAL,
        )


def check_stairs(ctx: PlanContext, out: IssueCollector) -> None:
    for stair in (room for room in ctx.rooms if is_stair_room(room)):
        area = to_fixed(stair.area.value, 1)
        if stair.area.value < STANDARDS["STAIRS_MIN_AREA"]:
            out.issue(
                "BR18-stairs",
                Severity.MAJOR,
                f"{stair.label}: Area {area}m² may be insufficient for BR18-compliant staircase (min ~2.4m² per floor)",
                f"{stair.label}: Arealet {area}m² er muligvis for lille til en BR18-trappe (min. ca. 2,4m² pr. etage)",
                element_id=stair.id,
                element_type=ElementType.ROOM,
            )
        else:
            out.check(
                "BR18-stairs",
                f"{stair.label}: Area {area}m² appears adequate for staircase ✓",
                f"{stair.label}: Arealet {area}m² ser tilstrækkeligt ud til en trappe ✓",
                element_id=stair.id,
                element_type=ElementType.ROOM,
            )
        out.issue(
            "BR18-stairs-geometry",
            Severity.MINOR,
            f"{stair.label}: Verify stair geometry: 2×Rise + Tread = 61-63cm, Rise ≤21cm, Headroom ≥2.0m",
            f"{stair.label}: Kontroller trappens geometri: 2×stigning + grund = 61-63cm, stigning ≤21cm, "
            f"frihøjde ≥2,0m",
            element_id=stair.id,
            element_type=ElementType.ROOM,
        )


def check_egress(ctx: PlanContext, out: IssueCollector) -> EgressAnalysis:
    """BR18 §5.4.1: straight-line distance from each room center to the nearest exit door.

    Exits are doors of any kind hosted by exterior walls.
    """
    exits = [door.center for door in ctx.doors() if door.wall.isExternal]
    rooms = ctx.rooms

    if not exits:
        out.issue(
            "BR18-5.4.1",
            Severity.CRITICAL,
            "No exit door found in the exterior walls",
            "Ingen udgangsdør fundet i ydervæggene",
            element_type=ElementType.GENERAL,
        )
        return EgressAnalysis(passed=False, maxDistanceToExit=None, criticalRooms=[room.id for room in rooms])

    max_distance = 0.0
    critical: List[str] = []
    for room in rooms:
        nearest = min(distance(room.center, point) for point in exits)
        max_distance = max(max_distance, nearest)
        limit = (
            STANDARDS["EGRESS_MAX_DISTANCE_BEDROOM"]
            if ctx.kind(room) == RoomKind.BEDROOM
            else STANDARDS["EGRESS_MAX_DISTANCE"]
        )
        if nearest > limit:
            critical.append(room.id)
            out.issue(
                "BR18-5.4.1",
                Severity.CRITICAL,
                f"{room.label}: Egress distance {to_fixed(nearest, 1)}m exceeds maximum {js_number(limit)}m",
                f"{room.label}: Flugtvejsafstand {to_fixed(nearest, 1)}m overstiger maksimum {js_number(limit)}m",
                element_id=room.id,
                element_type=ElementType.ROOM,
            )

    if not critical:
        out.check(
            "BR18-5.4.1",
            f"Egress distance {to_fixed(max_distance, 1)}m ✓",
            f"Flugtvejsafstand {to_fixed(max_distance, 1)}m ✓",
            element_type=ElementType.GENERAL,
        )
    return EgressAnalysis(passed=not critical, maxDistanceToExit=max_distance, criticalRooms=critical)


# Evaluation order of the plan rules; egress runs separately because it
# produces the egress analysis.
PLAN_RULES = (
    check_room_areas,
    check_ceiling_heights,
    check_door_widths,
    check_daylight,
    check_rescue_windows,
    check_bathroom_turning,
    check_corridors,
    check_tech_room,
    check_bathroom_door_swing,
    check_thresholds,
    check_stairs,
)


__all__ = [
    "PlanContext",
    "PLAN_RULES",
    "windows_for_room",
    "rescue_window",
    "bathroom_doors",
    "check_room_areas",
    "check_ceiling_heights",
    "check_door_widths",
    "check_daylight",
    "check_rescue_windows",
    "check_bathroom_turning",
    "check_corridors",
    "check_tech_room",
    "check_bathroom_door_swing",
    "check_thresholds",
    "check_stairs",
    "check_egress",
]
