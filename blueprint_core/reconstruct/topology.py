"""Reconstruct the exterior wall loop and interior connectivity from wall segments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..geometry.contract import CONNECTION_TOLERANCE, LOOP_MATCH_TOLERANCE, PLACEHOLDER_SIZE
from ..geometry.primitives import points_match
from ..model.schema import Point, WallSegment

EXTERIOR_LABEL = "exterior"

PLACEHOLDER_VERTICES: tuple[Point, ...] = (
    Point(x=0.0, y=0.0),
    Point(x=PLACEHOLDER_SIZE, y=0.0),
    Point(x=PLACEHOLDER_SIZE, y=PLACEHOLDER_SIZE),
    Point(x=0.0, y=PLACEHOLDER_SIZE),
)


@dataclass(frozen=True)
class OrientedWall:
    """A wall as traversed by the loop; reversed walls swap start and end logically."""
    wall: WallSegment
    reversed: bool = False

    @property
    def id(self) -> str:
        return self.wall.id

    @property
    def start(self) -> Point:
        return self.wall.end if self.reversed else self.wall.start

    @property
    def end(self) -> Point:
        return self.wall.start if self.reversed else self.wall.end

    @property
    def length(self) -> float:
        return self.wall.length


@dataclass
class Topology:
    """Result of topology reconstruction for one sheet."""
    loop: List[OrientedWall]
    closed: bool
    is_placeholder: bool = False
    unplaced: List[str] = field(default_factory=list)
    connections: Dict[str, List[str]] = field(default_factory=dict)

    def loop_vertices(self) -> List[Point]:
        """Vertex sequence of the loop: first start, then every traversed end."""
        if self.is_placeholder:
            return list(PLACEHOLDER_VERTICES)
        if not self.loop:
            return []
        return [self.loop[0].start] + [w.end for w in self.loop]

    def loop_perimeter(self) -> float:
        return sum(w.length for w in self.loop)

    def loop_entry(self, wall_id: str) -> Optional[OrientedWall]:
        for entry in self.loop:
            if entry.id == wall_id:
                return entry
        return None

    def loop_offset(self, wall_id: str) -> Optional[float]:
        """Path length from the loop start to the traversal start of a wall."""
        offset = 0.0
        for entry in self.loop:
            if entry.id == wall_id:
                return offset
            offset += entry.length
        return None


def sort_walls_into_loop(
    walls: Sequence[WallSegment],
    tolerance: float = LOOP_MATCH_TOLERANCE,
) -> List[OrientedWall]:
    """Chain walls head-to-tail starting from the first one.

    For each step the first remaining wall (input order) whose start matches the
    current tail is taken; failing that, the first whose end matches is taken
    reversed. Stops at the first step with no candidate.
    """
    if not walls:
        return []

    ordered = [OrientedWall(walls[0])]
    remaining = list(walls[1:])

    while remaining:
        tail = ordered[-1].end
        next_index = next(
            (i for i, w in enumerate(remaining) if points_match(w.start, tail, tolerance)),
            None,
        )
        if next_index is not None:
            ordered.append(OrientedWall(remaining.pop(next_index)))
            continue

        reversed_index = next(
            (i for i, w in enumerate(remaining) if points_match(w.end, tail, tolerance)),
            None,
        )
        if reversed_index is None:
            break
        ordered.append(OrientedWall(remaining.pop(reversed_index), reversed=True))

    return ordered


def find_wall_connections(
    wall: WallSegment,
    candidates: Sequence[WallSegment],
    tolerance: float = CONNECTION_TOLERANCE,
) -> List[str]:
    """Labels of walls touching this wall's endpoints.

    Start-point matches are collected before end-point matches. Exterior walls
    collapse to the single label "exterior".
    """
    connections: List[str] = []
    for endpoint in (wall.start, wall.end):
        for other in candidates:
            if other.id == wall.id:
                continue
            if points_match(endpoint, other.start, tolerance) or points_match(endpoint, other.end, tolerance):
                label = EXTERIOR_LABEL if other.isExternal else other.id
                if label not in connections:
                    connections.append(label)
    return connections


def reconstruct(
    walls: Sequence[WallSegment],
    *,
    loop_tolerance: float = LOOP_MATCH_TOLERANCE,
    connection_tolerance: float = CONNECTION_TOLERANCE,
) -> Topology:
    """Build the exterior loop and the interior connectivity map.

    A loop that cannot be closed is returned as the assembled prefix with
    ``closed=False``. With no exterior walls the placeholder square is used.
    """
    exterior = [w for w in walls if w.isExternal]
    interior = [w for w in walls if not w.isExternal]

    if not exterior:
        logger.warning("No exterior walls on sheet; using {size}m placeholder boundary", size=PLACEHOLDER_SIZE)
        topology = Topology(loop=[], closed=True, is_placeholder=True)
    else:
        loop = sort_walls_into_loop(exterior, loop_tolerance)
        placed = {entry.id for entry in loop}
        unplaced = [w.id for w in exterior if w.id not in placed]
        closed = not unplaced and points_match(loop[-1].end, loop[0].start, loop_tolerance)
        if not closed:
            logger.warning(
                "Exterior loop not closed: placed {placed}/{total} walls, unplaced={unplaced}",
                placed=len(loop),
                total=len(exterior),
                unplaced=unplaced,
            )
        topology = Topology(loop=loop, closed=closed, unplaced=unplaced)

    candidates = exterior + interior
    for wall in interior:
        topology.connections[wall.id] = find_wall_connections(wall, candidates, connection_tolerance)

    return topology


__all__ = [
    "EXTERIOR_LABEL",
    "PLACEHOLDER_VERTICES",
    "OrientedWall",
    "Topology",
    "sort_walls_into_loop",
    "find_wall_connections",
    "reconstruct",
]
