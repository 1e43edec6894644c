"""BR18/BR23 Standard Values

Regulatory thresholds used by the compliance rules.
All values are in meters (or m²) unless otherwise specified.
"""

STANDARDS = {
    # --- CEILING HEIGHT ---
    "CEILING_HEIGHT_HABITABLE": 2.3,  # bedrooms, living, kitchen, dining, office
    "CEILING_HEIGHT_OTHER": 2.1,  # bathrooms, storage and the rest

    # --- ROOM AREA ---
    "ROOM_AREA_BEDROOM": 6.0,  # m², BR18-5.2.3
    "ROOM_AREA_LIVING": 10.0,  # m², BR18-5.2.1 (also dining)
    "ROOM_AREA_KITCHEN": 4.0,  # m², BR18-5.2.2
    "ROOM_AREA_TECH": 2.0,  # m², or a 120x60cm cabinet
    "CORRIDOR_MIN_AREA": 2.0,  # m², below this the width is suspect
    "CORRIDOR_WIDTH": 1.0,  # reported in the corridor message
    "STAIRS_MIN_AREA": 2.4,  # m², 0.8m wide x 3m run per floor

    # --- DOORS ---
    "DOOR_WIDTH_MIN": 0.77,  # BR18-3.1.1 accessibility minimum
    "DOOR_WIDTH_RECOMMENDED": 0.9,  # M9
    "THRESHOLD_MAX": 0.025,  # 25mm, BR18 §373

    # --- DAYLIGHT ---
    "DAYLIGHT_RATIO": 0.10,  # window area / floor area, BR23 §374
    "DAYLIGHT_SEARCH_FACTOR": 0.7,  # proximity radius = sqrt(area) * factor + slack
    "DAYLIGHT_SEARCH_SLACK": 2.0,

    # --- RESCUE WINDOW ---
    "RESCUE_MIN_SUM_HW": 1.5,  # height + width
    "RESCUE_MAX_SILL": 1.2,  # floor to sill

    # --- BATHROOM ---
    "TURNING_CIRCLE_DIAMETER": 1.5,
    "TURNING_CIRCLE_MIN_AREA": 2.25,  # 1.5 x 1.5 footprint
    "BATHROOM_DOOR_SEARCH_FACTOR": 0.8,  # walls within sqrt(area) * factor + 1m of the center

    # --- EGRESS ---
    "EGRESS_MAX_DISTANCE": 25.0,  # BR18-5.4.1
    "EGRESS_MAX_DISTANCE_BEDROOM": 15.0,

    # --- WIZARD AREA HEURISTIC ---
    "AREA_PER_BEDROOM": 12.0,
    "AREA_PER_BATHROOM": 5.0,
    "AREA_LIVING_KITCHEN": 25.0,
    "CIRCULATION_FACTOR": 1.15,  # 15% hallway/circulation
    "NET_TO_GROSS": 0.87,  # 13% lost to walls
    "MAX_AREA_PER_BEDROOM": 50.0,
    "MAX_AREA_PER_BATHROOM": 15.0,
    "MAX_AREA_BASE": 80.0,
    "CONFIRM_AREA_FACTOR": 0.9,  # stricter recheck at confirmation
    "BEDROOM_COUNT_NOTICE": 6,
    "BEDROOM_COUNT_UNUSUAL": 8,
}
