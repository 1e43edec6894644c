"""Tests for conversion to the SVG blueprint view."""

import pytest

from blueprint_core.export.svg_migration import (
    building_type,
    convert_to_svg_blueprint,
    path_from_points,
    room_boundary,
)
from blueprint_core.geometry.primitives import XY
from blueprint_core.model.schema import BlueprintData, Swing


def _walls(data):
    return data["sheets"][0]["elements"]["walls"]


def _convert(data):
    return convert_to_svg_blueprint(BlueprintData.model_validate(data))


def test_exterior_path_follows_loop(house):
    """Test one line command per exterior wall in loop order."""
    result = convert_to_svg_blueprint(house)
    assert result.format == "svg-enhanced"
    assert result.exterior.path == "M 0,0 L 10,0 L 10,8 L 0,8 L 0,0 Z"
    assert result.exterior.path.count(" L ") == 4
    assert result.exterior.closed
    assert result.exterior.thickness == pytest.approx(0.4)
    assert result.exterior.material == "brick"


def test_exterior_thickness_is_clamped(house_data):
    """Test exterior thickness stays within 0.3-0.6m."""
    for wall in _walls(house_data)[:4]:
        wall["thickness"] = 0.2
    assert _convert(house_data).exterior.thickness == pytest.approx(0.3)


def test_open_loop_is_flagged(house_data):
    """Test a loop that cannot close is marked, not faked."""
    house_data["sheets"][0]["elements"]["walls"] = [w for w in _walls(house_data) if w["id"] != "ext-w"]
    result = _convert(house_data)
    assert not result.exterior.closed
    assert result.exterior.path == "M 0,0 L 10,0 L 10,8 L 0,8 Z"


def test_placeholder_without_exterior(house_data):
    """Test the 10m placeholder square with no exterior walls."""
    for wall in _walls(house_data):
        wall["isExternal"] = False
    result = _convert(house_data)
    assert result.exterior.path == "M 0,0 L 10,0 L 10,10 L 0,10 Z"
    assert result.exterior.thickness == pytest.approx(0.3)
    assert [d.id for d in result.divisions] == ["ext-n", "ext-e", "ext-s", "ext-w", "int-1", "int-2"]


def test_divisions(house):
    """Test interior walls become open paths with their connectivity."""
    divisions = {d.id: d for d in convert_to_svg_blueprint(house).divisions}
    assert divisions["int-1"].path == "M 6,0 L 6,8"
    assert divisions["int-1"].material == "gypsum-board"
    assert divisions["int-1"].thickness == pytest.approx(0.12)
    assert not divisions["int-1"].structural


def test_division_connections(house_data):
    """Test partitions meeting end to end list each other."""
    _walls(house_data).append({
        "id": "int-3", "start": {"x": 10, "y": 8}, "end": {"x": 10, "y": 4}, "thickness": 0.1,
        "type": "LOAD_BEARING", "material": "steel-stud", "isExternal": False,
    })
    divisions = {d.id: d for d in _convert(house_data).divisions}
    assert divisions["int-2"].connects == ["int-3"]
    assert divisions["int-3"].connects == ["exterior", "int-2"]
    assert divisions["int-3"].material == "gypsum-board"
    assert divisions["int-3"].structural


def test_rooms(house):
    """Test rooms keep their outline and classified type."""
    rooms = convert_to_svg_blueprint(house).rooms
    assert [r.type for r in rooms] == ["Living Room", "Bedroom", "Bathroom"]
    assert rooms[0].boundary == "M 0,0 L 6,0 L 6,8 L 0,8 Z"
    assert rooms[0].name == "Living Room"
    assert rooms[0].flooring == "oak-parquet"
    assert rooms[0].ceilingHeight == pytest.approx(2.5)


def test_room_without_polygon_uses_area_square(sheet):
    """Test a square of the room's area around its center."""
    room = sheet.elements.rooms[1].model_copy(update={"polygon": None})
    assert room_boundary(room) == "M 6,0 L 10,0 L 10,4 L 6,4 Z"


def test_opening_positions(house):
    """Test exterior openings measure along the loop, interior ones along their wall."""
    openings = {o.id: o for o in convert_to_svg_blueprint(house).openings}

    assert openings["d1"].onPath == "exterior"
    assert openings["d1"].atPosition == pytest.approx((18 + 7) / 36)
    assert openings["w1"].atPosition == pytest.approx(31 / 36)
    assert openings["w2"].atPosition == pytest.approx(2 / 36)

    assert openings["d2"].onPath == "int-1"
    assert openings["d2"].atPosition == pytest.approx(5.95 / 8)


def test_reversed_exterior_wall_position(house_data):
    """Test positions on a wall drawn against the loop direction."""
    south = next(w for w in _walls(house_data) if w["id"] == "ext-s")
    south["start"], south["end"] = south["end"], south["start"]
    openings = {o.id: o for o in _convert(house_data).openings}
    assert openings["d1"].atPosition == pytest.approx((18 + 3) / 36)


def test_position_independent_of_wall_direction(house_data):
    """Test the same physical opening keeps its position when its wall is redrawn backwards."""
    forward = {o.id: o for o in _convert(house_data).openings}

    south = next(w for w in _walls(house_data) if w["id"] == "ext-s")
    south["start"], south["end"] = south["end"], south["start"]
    door = house_data["sheets"][0]["elements"]["openings"][0]
    door["distFromStart"] = 10 - door["distFromStart"] - door["width"]
    flipped = {o.id: o for o in _convert(house_data).openings}

    assert flipped["d1"].atPosition == pytest.approx(forward["d1"].atPosition)


def test_opening_swing_mapping(house_data):
    """Test inward doors map to a left swing, everything else to right."""
    house_data["sheets"][0]["elements"]["openings"][1]["swingDirection"] = "inward"
    openings = {o.id: o for o in _convert(house_data).openings}
    assert openings["d2"].swing == Swing.LEFT
    assert openings["d1"].swing == Swing.RIGHT
    assert openings["w1"].swing == Swing.RIGHT
    assert openings["w1"].sillHeight == pytest.approx(0.9)


def test_dangling_openings_skipped(house_data):
    """Test openings without a host wall are left out."""
    house_data["sheets"][0]["elements"]["openings"].append(
        {"id": "ghost", "wallId": "gone", "type": "window", "width": 1.0, "distFromStart": 0}
    )
    assert "ghost" not in [o.id for o in _convert(house_data).openings]


def test_metadata(house, house_data):
    """Test project metadata and the total area fallback."""
    metadata = convert_to_svg_blueprint(house).metadata
    assert metadata.totalArea == pytest.approx(80.0)
    assert metadata.buildingType == "house"
    assert metadata.createdAt == "2024-04-01T09:00:00Z"
    assert metadata.updatedAt == "2024-05-01T10:30:00Z"

    house_data["sheets"][0]["metadata"]["totalArea"] = None
    assert _convert(house_data).metadata.totalArea == pytest.approx(80.0)


def test_conversion_is_pure(house):
    """Test the source blueprint is not modified."""
    before = house.model_dump()
    assert convert_to_svg_blueprint(house) == convert_to_svg_blueprint(house)
    assert house.model_dump() == before


@pytest.mark.parametrize(
    "text,expected",
    [(None, "house"), ("Lejlighed", "apartment"), ("Townhouse", "townhouse"), ("Villa Nordlys", "villa"), ("Cabin", "house")],
)
def test_building_type(text, expected):
    """Test building type normalization."""
    assert building_type(text) == expected


def test_path_formatting():
    """Test path numbers print without trailing zeros."""
    assert path_from_points([XY(0.5, 1.0), XY(2.25, 3)], closed=False) == "M 0.5,1 L 2.25,3"
    assert path_from_points([]) == "M 0,0 Z"
