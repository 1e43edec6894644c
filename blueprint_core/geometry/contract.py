"""
Geometry Contract

Single source of truth for tolerances and geometric defaults used by the
topology, opening and export modules. Import from here instead of hardcoding.
"""

from __future__ import annotations

# Lengths in meters unless noted

# Endpoint matching
LOOP_MATCH_TOLERANCE = 0.05  # m, exterior loop head-to-tail matching
CONNECTION_TOLERANCE = 0.1  # m, interior wall connectivity
ENDPOINT_KEY_DECIMALS = 3  # rounding used to bucket endpoints for dangling checks
DEGENERATE_EPS = 1e-9  # m, below this a segment has no direction

# Walls
MIN_WALL_LENGTH = 0.3  # m, shorter walls are reported
DEFAULT_PARTITION_THICKNESS = 0.12  # m

# Placeholder boundary emitted when a sheet has no exterior walls
PLACEHOLDER_SIZE = 10.0  # m

# Openings
DOOR_BLOCK_WIDTH = 0.9  # m, native width of the DOOR_90 symbol
WINDOW_BLOCK_WIDTH = 1.2  # m, native width of the WINDOW_STD symbol
SLIDING_PANEL_RATIO = 0.55  # each sliding panel covers this share of the opening
DEFAULT_DOOR_HEIGHT = 2.1  # m
DEFAULT_WINDOW_HEIGHT = 1.5  # m


def mm(value_m: float) -> float:
    """Convert meters to millimeters."""
    return float(value_m * 1000.0)


def m(value_mm: float) -> float:
    """Convert millimeters to meters."""
    return float(value_mm / 1000.0)
