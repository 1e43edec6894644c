"""AIA layer and wall hatch tables for CAD export."""

from __future__ import annotations

from typing import Dict, NamedTuple, Optional

from ..model.schema import OpeningKind, WallMaterial


class LayerStyle(NamedTuple):
    name: str
    color: int  # ACI color index
    lineweight: int  # 1/100 mm
    linetype: str = "CONTINUOUS"


class HatchStyle(NamedTuple):
    pattern: str
    scale: float
    angle: float  # degrees


WALL_LAYER = LayerStyle("A-WALL", 7, 70)
DOOR_LAYER = LayerStyle("A-DOOR", 4, 35)
WINDOW_LAYER = LayerStyle("A-WIND", 5, 35)
ANNOTATION_LAYER = LayerStyle("A-ANNO", 2, 13)
FURNITURE_LAYER = LayerStyle("A-FURN", 6, 25)
GRID_LAYER = LayerStyle("A-GRID", 1, 13, "CENTER2")

# Table order is the LAYER table order in the output
LAYERS = (
    WALL_LAYER,
    DOOR_LAYER,
    WINDOW_LAYER,
    ANNOTATION_LAYER,
    FURNITURE_LAYER,
    GRID_LAYER,
)

DOOR_BLOCK = "DOOR_90"
WINDOW_BLOCK = "WINDOW_STD"

OPENING_SYMBOLS: Dict[OpeningKind, tuple[str, LayerStyle]] = {
    OpeningKind.HINGED: (DOOR_BLOCK, DOOR_LAYER),
    # The block set has no panel symbol; sliding doors reuse the swing block at their width.
    OpeningKind.SLIDING: (DOOR_BLOCK, DOOR_LAYER),
    OpeningKind.WINDOW: (WINDOW_BLOCK, WINDOW_LAYER),
}

WALL_HATCHES: Dict[WallMaterial, HatchStyle] = {
    WallMaterial.BRICK: HatchStyle("ANSI31", 0.5, 45.0),
    WallMaterial.CONCRETE: HatchStyle("AR-CONC", 1.0, 0.0),
    WallMaterial.INSULATION: HatchStyle("INSUL", 0.3, 0.0),
    WallMaterial.GASBETON: HatchStyle("ANSI37", 0.4, 0.0),
    WallMaterial.TIMBER: HatchStyle("WOOD", 0.6, 0.0),
    WallMaterial.VAPOR_BARRIER: HatchStyle("ANSI31", 0.2, 0.0),
    WallMaterial.GYPSUM_BOARD: HatchStyle("SOLID", 1.0, 0.0),
    WallMaterial.CLT: HatchStyle("WOOD", 0.5, 90.0),
    WallMaterial.STEEL_STUD: HatchStyle("ANSI32", 0.3, 0.0),
}


def hatch_for(material: WallMaterial | str) -> Optional[HatchStyle]:
    """Hatch for a wall material; None when the material has no pattern."""
    try:
        return WALL_HATCHES.get(WallMaterial(material))
    except ValueError:
        return None


__all__ = [
    "LayerStyle",
    "HatchStyle",
    "WALL_LAYER",
    "DOOR_LAYER",
    "WINDOW_LAYER",
    "ANNOTATION_LAYER",
    "FURNITURE_LAYER",
    "GRID_LAYER",
    "LAYERS",
    "DOOR_BLOCK",
    "WINDOW_BLOCK",
    "OPENING_SYMBOLS",
    "WALL_HATCHES",
    "hatch_for",
]
