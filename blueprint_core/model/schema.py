"""Canonical JSON schema for blueprint plan data."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..exceptions import MalformedPolygonError, SheetNotFoundError
from ..geometry.contract import DEFAULT_DOOR_HEIGHT, DEFAULT_WINDOW_HEIGHT
from ..geometry.primitives import is_simple_polygon, polygon_contains, segment_length


class WallType(str, Enum):
    EXTERIOR_INSULATED = "EXTERIOR_INSULATED"
    LOAD_BEARING = "LOAD_BEARING"
    INTERIOR_PARTITION = "INTERIOR_PARTITION"
    FIRE_RATED = "FIRE_RATED"


class WallMaterial(str, Enum):
    BRICK = "brick"
    CONCRETE = "concrete"
    INSULATION = "insulation"
    GASBETON = "gasbeton"
    TIMBER = "timber"
    GYPSUM_BOARD = "gypsum-board"
    CLT = "CLT"
    STEEL_STUD = "steel-stud"
    VAPOR_BARRIER = "vapor-barrier"


class OpeningType(str, Enum):
    DOOR = "door"
    DOUBLE_DOOR = "double-door"
    SLIDING_DOOR = "sliding-door"
    FRENCH_DOOR = "french-door"
    WINDOW = "window"


class OpeningKind(str, Enum):
    """Geometric family an opening type is drawn and checked as."""
    HINGED = "hinged"
    SLIDING = "sliding"
    WINDOW = "window"


OPENING_KINDS: dict[OpeningType, OpeningKind] = {
    OpeningType.DOOR: OpeningKind.HINGED,
    OpeningType.DOUBLE_DOOR: OpeningKind.HINGED,
    OpeningType.SLIDING_DOOR: OpeningKind.SLIDING,
    OpeningType.FRENCH_DOOR: OpeningKind.SLIDING,
    OpeningType.WINDOW: OpeningKind.WINDOW,
}


class Swing(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


class SwingDirection(str, Enum):
    INWARD = "inward"
    OUTWARD = "outward"


class FlooringType(str, Enum):
    OAK_PARQUET = "oak-parquet"
    TILES = "tiles"
    CARPET = "carpet"
    CONCRETE = "concrete"
    VINYL = "vinyl"
    LAMINATE = "laminate"
    STONE = "stone"


class SheetType(str, Enum):
    FLOOR_PLAN = "FLOOR_PLAN"
    ELEVATION = "ELEVATION"
    SECTION = "SECTION"
    DETAIL = "DETAIL"
    DOOR_SCHEDULE = "DOOR_SCHEDULE"
    WINDOW_SCHEDULE = "WINDOW_SCHEDULE"
    AREA_SCHEDULE = "AREA_SCHEDULE"


class Point(BaseModel):
    """2D point in meters (plan view, y grows downward)."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class WallSegment(BaseModel):
    """Straight wall between two centerline endpoints."""
    id: str
    start: Point
    end: Point
    thickness: float = Field(..., gt=0.0, description="Wall thickness in meters")
    type: WallType
    material: WallMaterial
    isExternal: bool = Field(..., description="True if part of the building envelope")
    layer: str = "A-WALL"
    materials: Optional[List[WallMaterial]] = Field(None, description="Multi-layer stack, outside to inside")
    fireRating: Optional[float] = Field(None, description="Fire resistance in minutes")

    @model_validator(mode="after")
    def _non_degenerate(self) -> "WallSegment":
        if self.start == self.end:
            raise ValueError(f"Wall {self.id} has identical start and end points")
        return self

    @property
    def length(self) -> float:
        return segment_length(self.start, self.end)


class Opening(BaseModel):
    """Door or window positioned along its host wall."""
    id: str
    wallId: str = Field(..., description="ID of the host wall")
    type: OpeningType
    width: float = Field(..., gt=0.0, description="Clear width in meters")
    height: Optional[float] = Field(None, gt=0.0, description="Height in meters; defaults by type")
    distFromStart: float = Field(..., ge=0.0, description="Distance from wall start to the near edge")
    tag: str = ""
    layer: Optional[str] = None
    swing: Swing = Swing.NONE
    swingDirection: Optional[SwingDirection] = None
    sillHeight: Optional[float] = Field(None, ge=0.0, description="Window sill height above floor")
    thresholdHeight: Optional[float] = Field(None, ge=0.0, description="Door threshold height")
    glazingType: Optional[str] = None

    @model_validator(mode="after")
    def _default_layer(self) -> "Opening":
        if self.layer is None:
            self.layer = "A-WIND" if self.type == OpeningType.WINDOW else "A-DOOR"
        return self

    @property
    def kind(self) -> OpeningKind:
        return OPENING_KINDS[self.type]

    @property
    def is_door(self) -> bool:
        return self.kind != OpeningKind.WINDOW

    @property
    def effective_height(self) -> float:
        if self.height is not None:
            return self.height
        return DEFAULT_WINDOW_HEIGHT if self.kind == OpeningKind.WINDOW else DEFAULT_DOOR_HEIGHT


class Area(BaseModel):
    value: float = Field(..., gt=0.0)
    unit: str = "m²"


class RoomZone(BaseModel):
    """Room label zone with optional boundary polygon."""
    id: str
    label: str
    type: Optional[str] = Field(None, description="Free-form room category")
    area: Area
    flooring: FlooringType
    center: Point
    polygon: Optional[List[Point]] = Field(None, description="Boundary vertices, implicitly closed")
    ceilingHeight: Optional[float] = Field(None, gt=0.0)
    naturalLightArea: Optional[float] = Field(None, ge=0.0, description="Window area serving the room (m²)")
    compliant: bool = True

    @model_validator(mode="after")
    def _polygon_encloses_center(self) -> "RoomZone":
        if self.polygon is None:
            return self
        if len(self.polygon) < 3:
            raise MalformedPolygonError(
                f"Room {self.id} polygon has {len(self.polygon)} vertices (minimum 3)",
                {"room_id": self.id},
            )
        if not is_simple_polygon(self.polygon):
            raise MalformedPolygonError(
                f"Room {self.id} polygon is self-intersecting or degenerate",
                {"room_id": self.id},
            )
        if not polygon_contains(self.polygon, self.center):
            raise MalformedPolygonError(
                f"Room {self.id} polygon does not enclose its center ({self.center.x}, {self.center.y})",
                {"room_id": self.id},
            )
        return self


class Dimension(BaseModel):
    id: str
    start: Point
    end: Point
    value: float
    offset: float = 0.0
    label: Optional[str] = None
    layer: str = "A-ANNO"


class FurnitureItem(BaseModel):
    id: str
    type: str
    roomId: str
    position: Point
    rotation: float = Field(0.0, ge=0.0, le=360.0)
    scale: Optional[float] = Field(None, ge=0.5, le=2.0)
    layer: str = "A-FURN"


def _ensure_unique_ids(items: List[Any], label: str) -> None:
    # Rules and edits look elements up by id.
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate {label} id '{item.id}'")
        seen.add(item.id)


class SheetElements(BaseModel):
    walls: List[WallSegment] = Field(default_factory=list)
    openings: List[Opening] = Field(default_factory=list)
    rooms: List[RoomZone] = Field(default_factory=list)
    furniture: List[FurnitureItem] = Field(default_factory=list)
    dimensions: Optional[List[Dimension]] = None

    @field_validator("walls")
    @classmethod
    def _unique_wall_ids(cls, walls: List[WallSegment]) -> List[WallSegment]:
        _ensure_unique_ids(walls, "wall")
        return walls

    @field_validator("openings")
    @classmethod
    def _unique_opening_ids(cls, openings: List[Opening]) -> List[Opening]:
        _ensure_unique_ids(openings, "opening")
        return openings

    @field_validator("rooms")
    @classmethod
    def _unique_room_ids(cls, rooms: List[RoomZone]) -> List[RoomZone]:
        _ensure_unique_ids(rooms, "room")
        return rooms

    def wall_map(self) -> dict[str, WallSegment]:
        return {w.id: w for w in self.walls}


class SheetMetadata(BaseModel):
    totalArea: Optional[float] = None
    buildingHeight: Optional[float] = None
    floorLevel: Optional[str] = None
    compliance: List[str] = Field(default_factory=list)


class Sheet(BaseModel):
    """One drawing page."""
    title: str
    number: str
    type: SheetType = SheetType.FLOOR_PLAN
    scale: str = "1:50"
    elements: SheetElements = Field(default_factory=SheetElements)
    metadata: SheetMetadata = Field(default_factory=SheetMetadata)


class BlueprintData(BaseModel):
    """Top-level project: owns its sheets exclusively."""
    projectName: str = "Untitled Project"
    projectNumber: Optional[str] = None
    architect: Optional[str] = None
    client: Optional[str] = None
    location: str = "Hvidovre, Denmark"
    buildingCode: str = "BR18/BR23"
    buildingType: Optional[str] = None
    sheets: List[Sheet] = Field(..., min_length=1)
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    def sheet(self, index: int = 0) -> Sheet:
        """Return a sheet by index; negative or out-of-range indices are a caller error."""
        if index < 0 or index >= len(self.sheets):
            raise SheetNotFoundError(
                f"Sheet {index} not found in blueprint",
                {"sheet_index": str(index), "sheet_count": str(len(self.sheets))},
            )
        return self.sheets[index]


__all__ = [
    "WallType",
    "WallMaterial",
    "OpeningType",
    "OpeningKind",
    "OPENING_KINDS",
    "Swing",
    "SwingDirection",
    "FlooringType",
    "SheetType",
    "Point",
    "WallSegment",
    "Opening",
    "Area",
    "RoomZone",
    "Dimension",
    "FurnitureItem",
    "SheetElements",
    "SheetMetadata",
    "Sheet",
    "BlueprintData",
]
