"""
Slicing module - Geometry extraction, scanline fill and toolpath assembly.

- Raster extraction: directional hatching and contour tracing
- Vector extraction: shapes to closed segment loops
- Scanline fill of polygons with holes
- Source to bed coordinate transform
- Job variants and per-layer toolpath assembly
"""

from svgslicer.slicing.contour import trace_contours
from svgslicer.slicing.hatching import HatchPass, generate_hatch, generate_hatching, hatch_passes
from svgslicer.slicing.jobs import JobKind, PlotterJob, RasterContourJob, VectorInfillJob
from svgslicer.slicing.scanline import FillSpan, fill_spacing, fill_spans, scanline_intersections
from svgslicer.slicing.toolpath import (
    Layer,
    Toolpath,
    ToolpathAssembler,
    ToolpathSegment,
    ToolpathType,
)
from svgslicer.slicing.transform import BedTransform
from svgslicer.slicing.vector import check_shapes, shape_to_segments, shapes_to_segments

__all__ = [
    # Raster
    "trace_contours",
    "HatchPass",
    "generate_hatch",
    "generate_hatching",
    "hatch_passes",
    # Vector
    "check_shapes",
    "shape_to_segments",
    "shapes_to_segments",
    # Fill
    "FillSpan",
    "fill_spacing",
    "fill_spans",
    "scanline_intersections",
    # Assembly
    "BedTransform",
    "JobKind",
    "PlotterJob",
    "RasterContourJob",
    "VectorInfillJob",
    "Layer",
    "Toolpath",
    "ToolpathAssembler",
    "ToolpathSegment",
    "ToolpathType",
]
