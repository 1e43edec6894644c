"""Path-based SVG blueprint view derived from BlueprintData.

This is a regenerable export format. Nothing in the engine reads it back.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .schema import OpeningType, Swing


class SVGMetadata(BaseModel):
    projectName: str = "Untitled Project"
    projectNumber: Optional[str] = None
    architect: Optional[str] = None
    client: Optional[str] = None
    location: str = "Denmark"
    buildingCode: Literal["BR18/BR23"] = "BR18/BR23"
    totalArea: float = Field(..., ge=0.0, description="Total floor area in square meters")
    buildingType: Literal["house", "apartment", "townhouse", "villa"] = "house"
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class ExteriorBoundary(BaseModel):
    path: str = Field(..., description="Closed path: M x,y L ... Z")
    thickness: float = Field(..., ge=0.3, le=0.6)
    material: Literal["brick", "concrete", "CLT", "gasbeton", "timber"]
    insulated: bool = True
    closed: bool = Field(True, description="False when the wall loop could not be closed")


class InteriorDivision(BaseModel):
    id: str
    path: str = Field(..., description="Open path: M x,y L x,y")
    thickness: float
    connects: List[str] = Field(default_factory=list)
    material: Literal["gypsum-board", "brick", "concrete", "timber", "CLT"] = "gypsum-board"
    structural: bool = False


class SVGRoom(BaseModel):
    id: str
    name: str
    type: str = "Other"
    boundary: str
    area: float
    ceilingHeight: Optional[float] = None
    features: List[str] = Field(default_factory=list)
    flooring: Optional[str] = None


class SVGOpening(BaseModel):
    id: str
    type: OpeningType
    onPath: str = Field(..., description="'exterior' or an interior division id")
    atPosition: float = Field(..., ge=0.0, le=1.0)
    width: float
    height: Optional[float] = None
    swing: Swing
    sillHeight: Optional[float] = None


class SVGBlueprint(BaseModel):
    format: Literal["svg-enhanced"] = "svg-enhanced"
    metadata: SVGMetadata
    exterior: ExteriorBoundary
    divisions: List[InteriorDivision] = Field(default_factory=list)
    rooms: List[SVGRoom] = Field(default_factory=list)
    openings: List[SVGOpening] = Field(default_factory=list)


__all__ = [
    "SVGMetadata",
    "ExteriorBoundary",
    "InteriorDivision",
    "SVGRoom",
    "SVGOpening",
    "SVGBlueprint",
]
