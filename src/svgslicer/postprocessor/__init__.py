"""G-code emission for assembled toolpaths."""

from svgslicer.postprocessor.gcode import (
    GCodePostProcessor,
    GCodeProgram,
    PositioningMode,
    ToolheadState,
    calculate_extrusion,
)

__all__ = [
    "GCodePostProcessor",
    "GCodeProgram",
    "PositioningMode",
    "ToolheadState",
    "calculate_extrusion",
]
