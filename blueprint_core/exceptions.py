"""Custom exception hierarchy for the blueprint engine."""

from __future__ import annotations


class BlueprintError(Exception):
    """Base exception for all blueprint engine errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(BlueprintError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(BlueprintError):
    """Base class for validation errors."""
    pass


class PlanContractError(ValidationError):
    """Raised when the caller hands the engine a plan it cannot operate on."""
    pass


class SheetNotFoundError(PlanContractError):
    """Raised when a requested sheet index does not exist in the blueprint."""
    pass


class MalformedPolygonError(PlanContractError):
    """Raised when a room polygon is self-intersecting or does not enclose its center."""
    pass


class GeometryError(BlueprintError):
    """Raised when geometry operations fail."""
    pass


class OpeningPlacementError(GeometryError):
    """Raised when an opening cannot be placed on its host wall."""
    pass


class ExportError(BlueprintError):
    """Base class for export-related errors."""
    pass


class DXFExportError(ExportError):
    """Raised when DXF serialization fails."""
    pass


class EditError(BlueprintError):
    """Base class for pending edit errors."""
    pass


class ElementNotFoundError(EditError):
    """Raised when an edit targets an element id that does not exist."""
    pass


class EditRejectedError(EditError):
    """Raised when an edit would leave the element in an invalid state."""
    pass


__all__ = [
    "BlueprintError",
    "ConfigurationError",
    "ValidationError",
    "PlanContractError",
    "SheetNotFoundError",
    "MalformedPolygonError",
    "GeometryError",
    "OpeningPlacementError",
    "ExportError",
    "DXFExportError",
    "EditError",
    "ElementNotFoundError",
    "EditRejectedError",
]
