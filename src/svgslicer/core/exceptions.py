"""
Custom exceptions for svgslicer.

All fatal svgslicer exceptions inherit from SlicerError for easy catching.
Degenerate geometry is reported through DegenerateGeometryWarning and never
aborts a generation run.
"""

from typing import Any


class SlicerError(Exception):
    """Base exception for all svgslicer errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(SlicerError):
    """Raised when printer or model settings are invalid or missing."""

    pass


class InputError(SlicerError):
    """Raised when the input holds no drawable geometry."""

    pass


class DecodeError(SlicerError):
    """Raised when a source file cannot be decoded into geometry or pixels."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source


class GeometryError(SlicerError):
    """Raised when a core operation receives malformed geometry or parameters."""

    pass


class DegenerateGeometryWarning(UserWarning):
    """Issued for odd intersection counts and self-intersecting loops."""

    pass
