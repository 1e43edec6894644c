"""Room classification from free-form room types and labels (English/Danish)."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..model.schema import RoomZone


class RoomKind(str, Enum):
    BEDROOM = "Bedroom"
    LIVING_ROOM = "Living Room"
    KITCHEN = "Kitchen"
    BATHROOM = "Bathroom"
    TOILET = "Toilet"
    HALLWAY = "Hallway"
    ENTRANCE = "Entrance"
    OFFICE = "Office"
    DINING_ROOM = "Dining Room"
    STORAGE = "Storage"
    GARAGE = "Garage"
    TECHNICAL = "Technical"
    TERRACE = "Terrace"
    BASEMENT = "Basement"
    OTHER = "Other"


HABITABLE_KINDS = frozenset({
    RoomKind.BEDROOM,
    RoomKind.LIVING_ROOM,
    RoomKind.KITCHEN,
    RoomKind.DINING_ROOM,
    RoomKind.OFFICE,
})

WET_ROOM_KINDS = frozenset({RoomKind.BATHROOM, RoomKind.TOILET})

CORRIDOR_KINDS = frozenset({RoomKind.HALLWAY, RoomKind.ENTRANCE})

# Category names used by upstream layouts that differ from RoomKind values
_TYPE_ALIASES = {
    "corridor": RoomKind.HALLWAY,
    "entry": RoomKind.ENTRANCE,
    "utility": RoomKind.TECHNICAL,
    "balcony": RoomKind.TERRACE,
    "wc": RoomKind.TOILET,
}

# Checked in order; first hit wins
_KEYWORDS: tuple[tuple[RoomKind, tuple[str, ...]], ...] = (
    (RoomKind.BEDROOM, ("bedroom", "soveværelse")),
    (RoomKind.LIVING_ROOM, ("living", "stue")),
    (RoomKind.KITCHEN, ("kitchen", "køkken")),
    (RoomKind.BATHROOM, ("bathroom", "badeværelse", "bad")),
    (RoomKind.TOILET, ("toilet", "wc")),
    (RoomKind.HALLWAY, ("hallway", "gang", "corridor")),
    (RoomKind.ENTRANCE, ("entrance", "entre", "entré")),
    (RoomKind.OFFICE, ("office", "kontor")),
    (RoomKind.DINING_ROOM, ("dining", "spisestue")),
    (RoomKind.STORAGE, ("storage", "opbevaring", "depot")),
    (RoomKind.GARAGE, ("garage", "carport")),
    (RoomKind.TECHNICAL, ("tech", "teknik", "utility", "bryggers")),
    (RoomKind.TERRACE, ("terrace", "terrasse", "balcon", "altan")),
    (RoomKind.BASEMENT, ("basement", "kælder")),
)

_TECH_LABEL_WORDS = ("tech", "teknik", "utility", "bryggers")
_STAIR_LABEL_WORDS = ("stair", "trappe")

_KIND_BY_VALUE = {kind.value.lower(): kind for kind in RoomKind}


def detect_room_kind(text: str) -> RoomKind:
    lower = text.lower()
    for kind, words in _KEYWORDS:
        if any(word in lower for word in words):
            return kind
    return RoomKind.OTHER


def _kind_from_type(room_type: Optional[str]) -> Optional[RoomKind]:
    if not room_type:
        return None
    key = room_type.strip().lower()
    if key in _KIND_BY_VALUE:
        return _KIND_BY_VALUE[key]
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    return detect_room_kind(room_type)


def classify_room(room: RoomZone) -> RoomKind:
    """Room kind from the explicit type when present, otherwise from the label."""
    kind = _kind_from_type(room.type)
    if kind is not None:
        return kind
    return detect_room_kind(room.label)


def is_habitable(room: RoomZone) -> bool:
    return classify_room(room) in HABITABLE_KINDS


def is_tech_room(room: RoomZone) -> bool:
    if classify_room(room) == RoomKind.TECHNICAL:
        return True
    label = room.label.lower()
    return any(word in label for word in _TECH_LABEL_WORDS)


def is_stair_room(room: RoomZone) -> bool:
    label = room.label.lower()
    return any(word in label for word in _STAIR_LABEL_WORDS)


__all__ = [
    "RoomKind",
    "HABITABLE_KINDS",
    "WET_ROOM_KINDS",
    "CORRIDOR_KINDS",
    "detect_room_kind",
    "classify_room",
    "is_habitable",
    "is_tech_room",
    "is_stair_room",
]
