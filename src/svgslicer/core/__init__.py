"""
Core module - Settings, errors, logging, geometry primitives and loaders.
"""

from svgslicer.core.config import (
    HatchStyle,
    JobSettings,
    ModelSettings,
    PrinterSettings,
    load_settings,
)
from svgslicer.core.exceptions import (
    SlicerError,
    ConfigurationError,
    InputError,
    DecodeError,
    GeometryError,
    DegenerateGeometryWarning,
)
from svgslicer.core.geometry import Bounds, Point, RasterBuffer, Segment, Shape
from svgslicer.core.loaders import RasterLoader, VectorLoader, load_source

__all__ = [
    # Config
    "HatchStyle",
    "JobSettings",
    "ModelSettings",
    "PrinterSettings",
    "load_settings",
    # Exceptions
    "SlicerError",
    "ConfigurationError",
    "InputError",
    "DecodeError",
    "GeometryError",
    "DegenerateGeometryWarning",
    # Geometry
    "Bounds",
    "Point",
    "RasterBuffer",
    "Segment",
    "Shape",
    # Loaders
    "RasterLoader",
    "VectorLoader",
    "load_source",
]
