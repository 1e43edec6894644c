"""
Pending edits

Property changes to walls, openings and rooms are described as edit objects,
validated against the whole blueprint and applied atomically: either the
returned blueprint holds the change or an ``EditError`` is raised and the
input is untouched.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

import pydantic
from loguru import logger
from pydantic import BaseModel, Field

from ..compliance.report import ComplianceIssue
from ..compliance.rooms import HABITABLE_KINDS, classify_room
from ..compliance.standards import STANDARDS
from ..exceptions import EditRejectedError, ElementNotFoundError, PlanContractError
from ..geometry.contract import DEGENERATE_EPS
from .schema import (
    BlueprintData,
    FlooringType,
    Sheet,
    Swing,
    SwingDirection,
    WallMaterial,
    WallType,
)


class WallEdit(BaseModel):
    """Change wall build-up. Wall geometry is fixed once placed."""
    id: str
    thickness: Optional[float] = Field(None, gt=0.0)
    material: Optional[WallMaterial] = None
    type: Optional[WallType] = None
    fireRating: Optional[float] = Field(None, ge=0.0)


class OpeningEdit(BaseModel):
    id: str
    width: Optional[float] = Field(None, gt=0.0)
    height: Optional[float] = Field(None, gt=0.0)
    swing: Optional[Swing] = None
    swingDirection: Optional[SwingDirection] = None
    sillHeight: Optional[float] = Field(None, ge=0.0)
    thresholdHeight: Optional[float] = Field(None, ge=0.0)
    tag: Optional[str] = None


class RoomEdit(BaseModel):
    id: str
    label: Optional[str] = None
    type: Optional[str] = None
    ceilingHeight: Optional[float] = Field(None, gt=0.0)
    naturalLightArea: Optional[float] = Field(None, ge=0.0)
    flooring: Optional[FlooringType] = None


Edit = Union[WallEdit, OpeningEdit, RoomEdit]

_COLLECTIONS = {
    WallEdit: ("walls", "wall"),
    OpeningEdit: ("openings", "opening"),
    RoomEdit: ("rooms", "room"),
}


def _find(elements: list[dict[str, Any]], element_id: str) -> Optional[dict[str, Any]]:
    for element in elements:
        if element["id"] == element_id:
            return element
    return None


def _check_opening_fits(sheet: Sheet, opening_id: str) -> None:
    wall_map = sheet.elements.wall_map()
    for opening in sheet.elements.openings:
        if opening.id != opening_id:
            continue
        wall = wall_map.get(opening.wallId)
        if wall is None:
            return
        far = opening.distFromStart + opening.width
        if far > wall.length + DEGENERATE_EPS:
            raise EditRejectedError(
                f"Opening {opening.id} would extend beyond wall {wall.id} ({far:.3f}m > {wall.length:.3f}m)",
                {"opening_id": opening.id, "wall_id": wall.id},
            )


def apply_edit(blueprint: BlueprintData, edit: Edit, sheet_index: int = 0) -> BlueprintData:
    """Return a new blueprint with one edit applied.

    Raises:
        SheetNotFoundError: If the sheet index does not exist.
        ElementNotFoundError: If no element of the edited kind has the id.
        EditRejectedError: If the edited blueprint fails validation, or an
            edited opening would no longer fit on its wall.
    """
    blueprint.sheet(sheet_index)
    collection, label = _COLLECTIONS[type(edit)]

    data = blueprint.model_dump(mode="json")
    elements = data["sheets"][sheet_index]["elements"][collection]
    target = _find(elements, edit.id)
    if target is None:
        raise ElementNotFoundError(
            f"No {label} with id '{edit.id}' on sheet {sheet_index}",
            {"element_id": edit.id, "sheet_index": str(sheet_index)},
        )

    changes = edit.model_dump(mode="json", exclude={"id"}, exclude_none=True)
    if not changes:
        return blueprint.model_copy(deep=True)
    target.update(changes)

    try:
        updated = BlueprintData.model_validate(data)
    except (pydantic.ValidationError, PlanContractError) as exc:
        raise EditRejectedError(
            f"Edit to {label} '{edit.id}' rejected: {exc}",
            {"element_id": edit.id},
        ) from exc

    if isinstance(edit, OpeningEdit):
        _check_opening_fits(updated.sheet(sheet_index), edit.id)

    logger.debug("Applied {label} edit {id}: {changes}", label=label, id=edit.id, changes=changes)
    return updated


def apply_edits(blueprint: BlueprintData, edits: Iterable[Edit], sheet_index: int = 0) -> BlueprintData:
    """Apply edits in order; the first rejected edit aborts the batch."""
    for edit in edits:
        blueprint = apply_edit(blueprint, edit, sheet_index)
    return blueprint


def auto_fix(issue: ComplianceIssue, sheet: Sheet) -> Optional[Edit]:
    """Propose the edit that resolves a compliance issue, if one exists.

    Returns None for issues without a mechanical fix, for elements already
    compliant, and when the fix could not be placed (a widened door that would
    overrun its wall).
    """
    element_id = issue.elementId
    if element_id is None:
        return None

    openings = {o.id: o for o in sheet.elements.openings}
    rooms = {r.id: r for r in sheet.elements.rooms}
    code = issue.code

    if code == "BR18-3.1.1" and element_id in openings:
        opening = openings[element_id]
        target = STANDARDS["DOOR_WIDTH_RECOMMENDED"]
        if opening.width >= target:
            return None
        wall = sheet.elements.wall_map().get(opening.wallId)
        if wall is not None and opening.distFromStart + target > wall.length + DEGENERATE_EPS:
            return None
        return OpeningEdit(id=element_id, width=target)

    if code == "BR18-5.1.1" and element_id in rooms:
        room = rooms[element_id]
        minimum = (
            STANDARDS["CEILING_HEIGHT_HABITABLE"]
            if classify_room(room) in HABITABLE_KINDS
            else STANDARDS["CEILING_HEIGHT_OTHER"]
        )
        if room.ceilingHeight is not None and room.ceilingHeight >= minimum:
            return None
        return RoomEdit(id=element_id, ceilingHeight=minimum)

    if code == "BR18-6.4" and element_id in openings:
        if openings[element_id].swingDirection == SwingDirection.OUTWARD:
            return None
        return OpeningEdit(id=element_id, swingDirection=SwingDirection.OUTWARD)

    if code == "BR18-373-threshold" and element_id in openings:
        threshold = openings[element_id].thresholdHeight
        maximum = STANDARDS["THRESHOLD_MAX"]
        if threshold is not None and threshold <= maximum:
            return None
        return OpeningEdit(id=element_id, thresholdHeight=maximum)

    if code == "BR18-rescue-sill" and element_id in openings:
        sill = openings[element_id].sillHeight
        maximum = STANDARDS["RESCUE_MAX_SILL"]
        if sill is not None and sill <= maximum:
            return None
        return OpeningEdit(id=element_id, sillHeight=maximum)

    return None


__all__ = [
    "WallEdit",
    "OpeningEdit",
    "RoomEdit",
    "Edit",
    "apply_edit",
    "apply_edits",
    "auto_fix",
]
