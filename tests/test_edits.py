"""Tests for pending edits and compliance auto-fixes."""

import pytest

from blueprint_core.compliance.engine import evaluate
from blueprint_core.exceptions import EditRejectedError, ElementNotFoundError, SheetNotFoundError
from blueprint_core.model.edits import OpeningEdit, RoomEdit, WallEdit, apply_edit, apply_edits, auto_fix
from blueprint_core.model.schema import BlueprintData, SwingDirection


def _opening(blueprint, opening_id):
    return next(o for o in blueprint.sheets[0].elements.openings if o.id == opening_id)


def test_apply_opening_edit(house):
    """Test an edit returns a new blueprint and leaves the input alone."""
    updated = apply_edit(house, OpeningEdit(id="d2", width=1.0, swingDirection="inward"))
    assert _opening(updated, "d2").width == pytest.approx(1.0)
    assert _opening(updated, "d2").swingDirection == SwingDirection.INWARD
    assert _opening(house, "d2").width == pytest.approx(0.9)
    assert _opening(house, "d2").swingDirection == SwingDirection.OUTWARD


def test_apply_wall_and_room_edits(house):
    """Test edits to walls and rooms in one batch."""
    updated = apply_edits(house, [
        WallEdit(id="int-1", thickness=0.15, material="timber"),
        RoomEdit(id="r-bath", label="Badeværelse", ceilingHeight=2.5),
    ])
    wall = updated.sheets[0].elements.wall_map()["int-1"]
    room = updated.sheets[0].elements.rooms[2]
    assert wall.thickness == pytest.approx(0.15)
    assert wall.material.value == "timber"
    assert room.label == "Badeværelse"
    assert room.ceilingHeight == pytest.approx(2.5)


def test_empty_edit_returns_copy(house):
    """Test an edit without changes yields an equal, separate blueprint."""
    updated = apply_edit(house, RoomEdit(id="r-bed"))
    assert updated == house
    assert updated is not house


def test_unknown_element(house):
    """Test edits must target an existing element of their kind."""
    with pytest.raises(ElementNotFoundError):
        apply_edit(house, OpeningEdit(id="int-1", width=1.0))
    with pytest.raises(ElementNotFoundError):
        apply_edit(house, WallEdit(id="missing", thickness=0.2))


def test_unknown_sheet(house):
    """Test edits on a missing sheet fail before any change."""
    with pytest.raises(SheetNotFoundError):
        apply_edit(house, RoomEdit(id="r-bed", label="x"), sheet_index=2)


def test_overflowing_opening_rejected(house):
    """Test widening an opening past its wall end is refused."""
    with pytest.raises(EditRejectedError):
        apply_edit(house, OpeningEdit(id="d2", width=3.0))


def test_batch_aborts_on_first_rejection(house):
    """Test a rejected edit leaves the caller's blueprint as it was."""
    before = house.model_dump()
    with pytest.raises(EditRejectedError):
        apply_edits(house, [OpeningEdit(id="d1", width=0.95), OpeningEdit(id="d2", width=3.0)])
    assert house.model_dump() == before


def test_edit_fields_are_constrained():
    """Test edit payloads reject impossible values."""
    with pytest.raises(ValueError):
        OpeningEdit(id="d1", width=0)
    with pytest.raises(ValueError):
        WallEdit(id="w", thickness=-0.1)


@pytest.mark.parametrize(
    "mutate,code,expected",
    [
        (lambda d: d["openings"][1].update(width=0.7), "BR18-3.1.1", OpeningEdit(id="d2", width=0.9)),
        (lambda d: d["openings"][1].update(swingDirection="inward"), "BR18-6.4",
         OpeningEdit(id="d2", swingDirection="outward")),
        (lambda d: d["openings"][0].update(thresholdHeight=0.04), "BR18-373-threshold",
         OpeningEdit(id="d1", thresholdHeight=0.025)),
        (lambda d: d["openings"][5].update(sillHeight=1.4), "BR18-rescue-sill",
         OpeningEdit(id="w3", sillHeight=1.2)),
        (lambda d: d["rooms"][0].update(ceilingHeight=2.2), "BR18-5.1.1", RoomEdit(id="r-living", ceilingHeight=2.3)),
        (lambda d: d["rooms"][2].update(ceilingHeight=2.0), "BR18-5.1.1", RoomEdit(id="r-bath", ceilingHeight=2.1)),
    ],
)
def test_auto_fix_resolves_violation(house_data, settings, mutate, code, expected):
    """Test each proposed fix clears the violation it was made for."""
    mutate(house_data["sheets"][0]["elements"])
    blueprint = BlueprintData.model_validate(house_data)
    report = evaluate(blueprint, settings=settings)
    issue = next(v for v in report.violations if v.code == code)

    fix = auto_fix(issue, blueprint.sheets[0])
    assert fix == expected

    fixed = evaluate(apply_edit(blueprint, fix), settings=settings)
    assert fixed.passing


def test_auto_fix_skips_compliant_and_unfixable(house, settings):
    """Test no fix is proposed for advisories or compliant elements."""
    report = evaluate(house, settings=settings)
    sheet = house.sheets[0]
    assert auto_fix(report.warnings[0], sheet) is None
    for check in report.checks:
        assert auto_fix(check, sheet) is None


def test_auto_fix_skips_door_that_cannot_widen(house_data, settings):
    """Test a narrow door at the wall end gets no widening fix."""
    door = house_data["sheets"][0]["elements"]["openings"][1]
    door.update(width=0.7, distFromStart=7.3)
    blueprint = BlueprintData.model_validate(house_data)
    issue = next(v for v in evaluate(blueprint, settings=settings).violations if v.code == "BR18-3.1.1")
    assert auto_fix(issue, blueprint.sheets[0]) is None
