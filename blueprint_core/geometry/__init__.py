"""Plan-view geometry helpers (meters, y grows downward)."""
