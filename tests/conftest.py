"""Shared fixtures: a compliant single-storey house on a 10m x 8m footprint.

Layout (y grows downward):

    (0,0) ---------- ext-n ---------- (10,0)
      |   living    | int-1 |  bedroom   |
    ext-w  48m²      |       +-- int-2 --+ ext-e
      |             |       |  bathroom  |
    (0,8) ---------- ext-s ---------- (10,8)
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from blueprint_core.model.schema import BlueprintData
from blueprint_core.settings import Settings, get_settings


def _wall(wall_id, start, end, *, external, thickness=0.4, material="brick", wall_type=None):
    return {
        "id": wall_id,
        "start": {"x": start[0], "y": start[1]},
        "end": {"x": end[0], "y": end[1]},
        "thickness": thickness,
        "type": wall_type or ("EXTERIOR_INSULATED" if external else "INTERIOR_PARTITION"),
        "material": material,
        "isExternal": external,
    }


def _room(room_id, label, center, polygon, area, flooring, ceiling):
    return {
        "id": room_id,
        "label": label,
        "area": {"value": area, "unit": "m²"},
        "flooring": flooring,
        "center": {"x": center[0], "y": center[1]},
        "polygon": [{"x": x, "y": y} for x, y in polygon],
        "ceilingHeight": ceiling,
    }


HOUSE: dict[str, Any] = {
    "projectName": "Test House",
    "projectNumber": "P-001",
    "location": "Hvidovre, Denmark",
    "buildingCode": "BR18/BR23",
    "createdAt": "2024-04-01T09:00:00Z",
    "updatedAt": "2024-05-01T10:30:00Z",
    "sheets": [
        {
            "title": "Ground Floor",
            "number": "A-101",
            "type": "FLOOR_PLAN",
            "scale": "1:50",
            "elements": {
                "walls": [
                    _wall("ext-n", (0, 0), (10, 0), external=True),
                    _wall("ext-e", (10, 0), (10, 8), external=True),
                    _wall("ext-s", (10, 8), (0, 8), external=True),
                    _wall("ext-w", (0, 8), (0, 0), external=True),
                    _wall("int-1", (6, 0), (6, 8), external=False, thickness=0.12, material="gypsum-board"),
                    _wall("int-2", (6, 4), (10, 4), external=False, thickness=0.12, material="gypsum-board"),
                ],
                "openings": [
                    {
                        "id": "d1", "wallId": "ext-s", "type": "door", "width": 1.0, "distFromStart": 6.5,
                        "tag": "D1", "swing": "right", "swingDirection": "outward", "thresholdHeight": 0.02,
                    },
                    {
                        "id": "d2", "wallId": "int-1", "type": "door", "width": 0.9, "distFromStart": 5.5,
                        "tag": "D2", "swing": "left", "swingDirection": "outward", "thresholdHeight": 0.02,
                    },
                    {
                        "id": "d3", "wallId": "int-1", "type": "door", "width": 0.9, "distFromStart": 1.5,
                        "tag": "D3", "swing": "right", "swingDirection": "outward", "thresholdHeight": 0.02,
                    },
                    {
                        "id": "w1", "wallId": "ext-w", "type": "window", "width": 2.0, "height": 1.5,
                        "distFromStart": 2.0, "tag": "W1", "sillHeight": 0.9,
                    },
                    {
                        "id": "w2", "wallId": "ext-n", "type": "window", "width": 2.0,
                        "distFromStart": 1.0, "tag": "W2", "sillHeight": 0.9,
                    },
                    {
                        "id": "w3", "wallId": "ext-e", "type": "window", "width": 1.4, "height": 1.2,
                        "distFromStart": 1.0, "tag": "W3", "sillHeight": 0.9,
                    },
                ],
                "rooms": [
                    _room("r-living", "Living Room", (3, 4), [(0, 0), (6, 0), (6, 8), (0, 8)], 48.0, "oak-parquet", 2.5),
                    _room("r-bed", "Bedroom", (8, 2), [(6, 0), (10, 0), (10, 4), (6, 4)], 16.0, "carpet", 2.5),
                    _room("r-bath", "Bathroom", (8, 6), [(6, 4), (10, 4), (10, 8), (6, 8)], 16.0, "tiles", 2.4),
                ],
                "furniture": [],
                "dimensions": [
                    {"id": "dim-1", "start": {"x": 0, "y": -1}, "end": {"x": 10, "y": -1}, "value": 10.0},
                ],
            },
            "metadata": {"totalArea": 80.0, "compliance": []},
        }
    ],
}


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Keep tests independent of the developer's environment."""
    monkeypatch.delenv("BLUEPRINT_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def house_data() -> dict[str, Any]:
    """Mutable wire-format copy of the reference house."""
    return copy.deepcopy(HOUSE)


@pytest.fixture
def house(house_data) -> BlueprintData:
    return BlueprintData.model_validate(house_data)


@pytest.fixture
def sheet(house):
    return house.sheets[0]


@pytest.fixture
def settings() -> Settings:
    return Settings()
