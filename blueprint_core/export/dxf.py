"""
DXF R12 export

Serializes one sheet of a blueprint as AutoCAD R12 text: header, layer and
style tables, the door and window blocks, then the drawing entities (sheet
border, title block, walls with hatching, opening symbols, room labels and
dimensions). Output depends only on the blueprint and the options, so the
same input always yields the same bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from loguru import logger

from ..exceptions import DXFExportError, OpeningPlacementError
from ..formatting import to_fixed
from ..geometry.contract import DOOR_BLOCK_WIDTH, WINDOW_BLOCK_WIDTH
from ..geometry.primitives import midpoint, offset_segment_polygon
from ..model.schema import BlueprintData, Dimension, RoomZone, Sheet, WallSegment
from ..reconstruct.openings import ResolvedOpening, resolve_openings
from .layers import (
    ANNOTATION_LAYER,
    DOOR_BLOCK,
    DOOR_LAYER,
    LAYERS,
    OPENING_SYMBOLS,
    WALL_LAYER,
    WINDOW_BLOCK,
    WINDOW_LAYER,
    hatch_for,
)

# A3 sheet in drawing units
SHEET_WIDTH = 420.0
SHEET_HEIGHT = 297.0
SHEET_MARGIN = 10.0

TITLE_BLOCK_X = 280.0
TITLE_BLOCK_Y = 10.0
TITLE_BLOCK_WIDTH = 120.0
TITLE_BLOCK_HEIGHT = 40.0

TAG_OFFSET = 0.3


@dataclass(frozen=True)
class DXFOptions:
    """Export options.

    Attributes:
        issue_date: Date printed in the title block. Falls back to the date part
            of ``updatedAt`` or ``createdAt``, else left blank.
        strict: Reject openings that run past their wall instead of clamping.
    """
    issue_date: Optional[date] = None
    strict: bool = False


def _xy(value: float) -> str:
    return to_fixed(value, 6)


class _DXFBuffer:
    """Accumulates group code / value line pairs."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def tag(self, code: int | str, value: str) -> None:
        self.lines.append(str(code))
        self.lines.append(value)

    def point(self, x: float, y: float, x_code: int = 10, y_code: int = 20) -> None:
        self.tag(x_code, _xy(x))
        self.tag(y_code, _xy(y))

    def begin_section(self, name: str) -> None:
        self.tag(0, "SECTION")
        self.tag(2, name)

    def end_section(self) -> None:
        self.tag(0, "ENDSEC")

    def text(self, layer: str, x: str, y: str, height: str, value: str) -> None:
        self.tag(0, "TEXT")
        self.tag(8, layer)
        self.tag(10, x)
        self.tag(20, y)
        self.tag(40, height)
        self.tag(1, value)

    def render(self) -> str:
        return "\n".join(self.lines)


def issue_date_text(blueprint: BlueprintData, options: DXFOptions) -> str:
    if options.issue_date is not None:
        return options.issue_date.isoformat()
    stamp = blueprint.updatedAt or blueprint.createdAt
    if not stamp:
        return ""
    return stamp.split("T")[0]


def _header(out: _DXFBuffer, sheet: Sheet) -> None:
    out.begin_section("HEADER")
    out.tag(9, "$ACADVER")
    out.tag(1, "AC1009")
    out.tag(9, "$INSUNITS")
    out.tag(70, "6")  # meters
    out.tag(9, "$LIMMIN")
    out.tag(10, "0.0")
    out.tag(20, "0.0")
    out.tag(9, "$LIMMAX")
    out.tag(10, "420.0")
    out.tag(20, "297.0")
    out.tag(9, "$TITLE")
    out.tag(1, f"{sheet.number} {sheet.title}")
    out.end_section()


def _tables(out: _DXFBuffer) -> None:
    out.begin_section("TABLES")

    out.tag(0, "TABLE")
    out.tag(2, "LTYPE")
    out.tag(70, "2")
    out.tag(0, "LTYPE")
    out.tag(2, "CONTINUOUS")
    out.tag(70, "0")
    out.tag(3, "Solid line")
    out.tag(72, "65")
    out.tag(73, "0")
    out.tag(40, "0.0")
    out.tag(0, "LTYPE")
    out.tag(2, "CENTER2")
    out.tag(70, "0")
    out.tag(3, "Center ____ _ ____ _ ____ _ ____ _ ____")
    out.tag(72, "65")
    out.tag(73, "4")
    out.tag(40, "3.0")
    for dash in ("1.25", "-0.25", "0.25", "-0.25"):
        out.tag(49, dash)
    out.tag(0, "ENDTAB")

    out.tag(0, "TABLE")
    out.tag(2, "LAYER")
    out.tag(70, str(len(LAYERS)))
    for layer in LAYERS:
        out.tag(0, "LAYER")
        out.tag(2, layer.name)
        out.tag(70, "0")
        out.tag(62, str(layer.color))
        out.tag(6, layer.linetype)
        out.tag(370, str(layer.lineweight))
    out.tag(0, "ENDTAB")

    out.tag(0, "TABLE")
    out.tag(2, "STYLE")
    out.tag(70, "1")
    out.tag(0, "STYLE")
    out.tag(2, "STANDARD")
    out.tag(70, "0")
    out.tag(40, "0.0")  # variable height
    out.tag(41, "1.0")  # width factor
    out.tag(50, "0.0")  # oblique angle
    out.tag(71, "0")
    out.tag(42, "0.2")  # last height used
    out.tag(3, "txt")
    out.tag(4, "")
    out.tag(0, "ENDTAB")

    out.end_section()


def _block_header(out: _DXFBuffer, name: str) -> None:
    out.tag(0, "BLOCK")
    out.tag(8, "0")
    out.tag(2, name)
    out.tag(70, "0")
    out.tag(10, "0.0")
    out.tag(20, "0.0")
    out.tag(30, "0.0")


def _block_line(out: _DXFBuffer, layer: str, x1: str, y1: str, x2: str, y2: str) -> None:
    out.tag(0, "LINE")
    out.tag(8, layer)
    out.tag(10, x1)
    out.tag(20, y1)
    out.tag(11, x2)
    out.tag(21, y2)


def _blocks(out: _DXFBuffer) -> None:
    out.begin_section("BLOCKS")

    # Door: leaf plus 90° swing arc, drawn at DOOR_BLOCK_WIDTH
    _block_header(out, DOOR_BLOCK)
    _block_line(out, DOOR_LAYER.name, "0.0", "0.0", "0.9", "0.0")
    out.tag(0, "ARC")
    out.tag(8, DOOR_LAYER.name)
    out.tag(10, "0.0")
    out.tag(20, "0.0")
    out.tag(40, "0.9")
    out.tag(50, "0.0")
    out.tag(51, "90.0")
    out.tag(0, "ENDBLK")

    # Window: two frame lines and the glass line, drawn at WINDOW_BLOCK_WIDTH
    _block_header(out, WINDOW_BLOCK)
    _block_line(out, WINDOW_LAYER.name, "0.0", "0.0", "1.2", "0.0")
    _block_line(out, WINDOW_LAYER.name, "0.0", "0.15", "1.2", "0.15")
    _block_line(out, WINDOW_LAYER.name, "0.0", "0.075", "1.2", "0.075")
    out.tag(0, "ENDBLK")

    out.end_section()


def _closed_polyline(out: _DXFBuffer, layer: str, points: List[tuple[str, str]]) -> None:
    out.tag(0, "LWPOLYLINE")
    out.tag(8, layer)
    out.tag(90, str(len(points)))
    out.tag(70, "1")
    for x, y in points:
        out.tag(10, x)
        out.tag(20, y)


def _sheet_border(out: _DXFBuffer, sheet: Sheet) -> None:
    anno = ANNOTATION_LAYER.name
    w, h, m = SHEET_WIDTH, SHEET_HEIGHT, SHEET_MARGIN
    for x0, y0, x1, y1 in ((0.0, 0.0, w, h), (m, m, w - m, h - m)):
        corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
        _closed_polyline(out, anno, [(to_fixed(x, 1), to_fixed(y, 1)) for x, y in corners])

    out.text(anno, "15.0", "15.0", "3.0", f"SCALE {sheet.scale}")

    out.text(anno, "380.0", "280.0", "4.0", sheet.number)
    out.tag(72, "2")  # right aligned
    out.tag(11, "380.0")
    out.tag(21, "280.0")


def _title_block(out: _DXFBuffer, blueprint: BlueprintData, sheet: Sheet, options: DXFOptions) -> None:
    anno = ANNOTATION_LAYER.name
    x, y = TITLE_BLOCK_X, TITLE_BLOCK_Y
    corners = [
        (x, y),
        (x + TITLE_BLOCK_WIDTH, y),
        (x + TITLE_BLOCK_WIDTH, y + TITLE_BLOCK_HEIGHT),
        (x, y + TITLE_BLOCK_HEIGHT),
    ]
    _closed_polyline(out, anno, [(to_fixed(cx, 1), to_fixed(cy, 1)) for cx, cy in corners])

    fields = (
        ("PROJECT:", blueprint.projectName, y + 35),
        ("SHEET:", f"{sheet.number} {sheet.title}", y + 29),
        ("SCALE:", sheet.scale, y + 23),
        ("DATE:", issue_date_text(blueprint, options), y + 17),
        ("CODE:", blueprint.buildingCode, y + 11),
    )
    for label, value, field_y in fields:
        out.text(anno, to_fixed(x + 2, 1), to_fixed(field_y, 1), "2.0", label)
        out.text(anno, to_fixed(x + 25, 1), to_fixed(field_y, 1), "2.0", value)


def _wall(out: _DXFBuffer, wall: WallSegment) -> None:
    polygon = offset_segment_polygon(wall.start, wall.end, wall.thickness)
    _closed_polyline(out, WALL_LAYER.name, [(_xy(p.x), _xy(p.y)) for p in polygon])

    hatch = hatch_for(wall.material)
    if hatch is None:
        logger.debug("No hatch pattern for material {material}; wall {wall} left unhatched", material=wall.material, wall=wall.id)
        return
    out.tag(0, "HATCH")
    out.tag(8, WALL_LAYER.name)
    out.tag(2, hatch.pattern)
    out.tag(70, "0")
    out.tag(71, "0")  # non-associative
    out.tag(41, to_fixed(hatch.scale, 3))
    out.tag(52, to_fixed(hatch.angle, 3))
    out.tag(91, "1")  # boundary paths
    out.tag(92, "1")
    out.tag(72, "0")
    out.tag(73, "1")  # closed
    out.tag(93, str(len(polygon)))
    for p in polygon:
        out.point(p.x, p.y)
    out.tag(75, "0")
    out.tag(76, "1")  # predefined pattern
    out.tag(98, "0")


def _opening(out: _DXFBuffer, resolved: ResolvedOpening) -> None:
    opening = resolved.opening
    block, layer = OPENING_SYMBOLS[resolved.kind]
    native = WINDOW_BLOCK_WIDTH if block == WINDOW_BLOCK else DOOR_BLOCK_WIDTH
    rotation = to_fixed(resolved.angle_deg, 3)
    x, y = resolved.position

    out.tag(0, "INSERT")
    out.tag(8, layer.name)
    out.tag(2, block)
    out.point(x, y)
    out.tag(41, to_fixed(opening.width / native, 6))
    out.tag(42, "1.0")
    out.tag(50, rotation)

    # Door tags sit above the insertion point, window tags below
    tag_y = y - TAG_OFFSET if block == WINDOW_BLOCK else y + TAG_OFFSET
    out.text(ANNOTATION_LAYER.name, _xy(x), _xy(tag_y), "0.15", opening.tag)
    out.tag(50, rotation)


def _centered_text(out: _DXFBuffer, x: float, y: float, height: str, value: str) -> None:
    out.text(ANNOTATION_LAYER.name, _xy(x), _xy(y), height, value)
    out.tag(72, "1")
    out.point(x, y, 11, 21)


def _room_label(out: _DXFBuffer, room: RoomZone) -> None:
    cx, cy = room.center.x, room.center.y
    _centered_text(out, cx, cy + 0.6, "0.35", room.label.upper())
    _centered_text(out, cx, cy, "0.25", f"{to_fixed(room.area.value, 1)} {room.area.unit}")
    _centered_text(out, cx, cy - 0.5, "0.20", room.flooring.value.replace("-", " ", 1))


def _dimension(out: _DXFBuffer, dim: Dimension) -> None:
    out.tag(0, "LINE")
    out.tag(8, ANNOTATION_LAYER.name)
    out.point(dim.start.x, dim.start.y)
    out.point(dim.end.x, dim.end.y, 11, 21)
    mid = midpoint(dim.start, dim.end)
    _centered_text(out, mid.x, mid.y, "0.20", f"{to_fixed(dim.value, 2)}m")


def generate_dxf(
    blueprint: BlueprintData,
    sheet_index: int = 0,
    options: Optional[DXFOptions] = None,
) -> str:
    """Render one sheet as DXF R12 text.

    Args:
        blueprint: Source blueprint.
        sheet_index: Sheet to export.
        options: Export options; defaults to ``DXFOptions()``.

    Returns:
        DXF text, lines joined with ``\\n``.

    Raises:
        SheetNotFoundError: If the sheet does not exist.
        DXFExportError: If an opening cannot be placed in strict mode.
    """
    options = options or DXFOptions()
    sheet = blueprint.sheet(sheet_index)
    elements = sheet.elements

    try:
        resolved, dangling = resolve_openings(elements.openings, elements.walls, strict=options.strict)
    except OpeningPlacementError as exc:
        raise DXFExportError(f"Cannot place openings on sheet {sheet.number}: {exc}", {"sheet": sheet.number}) from exc

    out = _DXFBuffer()
    _header(out, sheet)
    _tables(out)
    _blocks(out)

    out.begin_section("ENTITIES")
    _sheet_border(out, sheet)
    _title_block(out, blueprint, sheet, options)
    for wall in elements.walls:
        _wall(out, wall)
    for item in resolved:
        _opening(out, item)
    for room in elements.rooms:
        _room_label(out, room)
    for dim in elements.dimensions or []:
        _dimension(out, dim)
    out.end_section()
    out.tag(0, "EOF")

    logger.info(
        "Exported sheet {number} to DXF: {walls} walls, {openings} openings ({skipped} skipped), {rooms} rooms",
        number=sheet.number,
        walls=len(elements.walls),
        openings=len(resolved),
        skipped=len(dangling),
        rooms=len(elements.rooms),
    )
    return out.render()


def serialize(
    blueprint: BlueprintData,
    sheet_index: int = 0,
    options: Optional[DXFOptions] = None,
    *,
    encoding: str = "utf-8",
) -> bytes:
    return generate_dxf(blueprint, sheet_index, options).encode(encoding)


def default_filename(blueprint: BlueprintData, sheet_index: int = 0) -> str:
    """Download name: ``A-101 / My House`` becomes ``A_101_My_House.dxf``."""
    sheet = blueprint.sheet(sheet_index)
    number = sheet.number.replace("-", "_", 1)
    project = re.sub(r"\s+", "_", blueprint.projectName)
    return f"{number}_{project}.dxf"


__all__ = [
    "DXFOptions",
    "issue_date_text",
    "generate_dxf",
    "serialize",
    "default_filename",
]
