"""Blueprint geometry, compliance and CAD export engine."""

__version__ = "0.1.0"
