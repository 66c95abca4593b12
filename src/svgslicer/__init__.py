"""
svgslicer - SVG artwork and raster images to G-code

Generates toolpaths for pen plotters (pen up/down hatching and outlines) and
for material-extrusion 3D printers (extruded walls, perimeters and scanline
infill).
"""

__version__ = "0.1.0"
__author__ = "svgslicer Contributors"

from svgslicer.core.config import JobSettings, ModelSettings, PrinterSettings
from svgslicer.pipeline import build_job, generate_gcode

__all__ = [
    "__version__",
    "JobSettings",
    "ModelSettings",
    "PrinterSettings",
    "build_job",
    "generate_gcode",
]
