"""
Generation job variants.

The machine regime is chosen once per run and captured in one of three job
types, each carrying only the data its regime needs:

- PlotterJob: bed-space segments drawn with pen up/down, one layer, no heat.
- RasterContourJob: bed-space wall segments extruded on every layer.
- VectorInfillJob: source-space shapes walked as perimeters and, optionally,
  scanline filled on every layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from svgslicer.core.geometry import Segment, Shape
from svgslicer.slicing.transform import BedTransform


class JobKind(Enum):
    """Machine regime of a generation run."""

    PLOTTER = "plotter"
    RASTER_CONTOUR = "raster_contour"
    VECTOR_INFILL = "vector_infill"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def extrudes(self) -> bool:
        return self is not JobKind.PLOTTER


_LABELS = {
    JobKind.PLOTTER: "Plotter Mode",
    JobKind.RASTER_CONTOUR: "Standard Mode",
    JobKind.VECTOR_INFILL: "Standard SVG",
}


def standard_layer_count(target_height: float, layer_height: float) -> int:
    """
    ``floor(target_height / layer_height)``.

    A tiny tolerance keeps quotients like ``0.6 / 0.2 = 2.9999999999999996``
    from losing a layer.
    """
    return max(0, math.floor(target_height / layer_height + 1e-9))


@dataclass(frozen=True)
class PlotterJob:
    """Pen plotting of bed-space segments."""

    kind: ClassVar[JobKind] = JobKind.PLOTTER
    layer_count: ClassVar[int] = 1

    segments: Tuple[Segment, ...]


@dataclass(frozen=True)
class RasterContourJob:
    """Extruded walls traced from a raster image."""

    kind: ClassVar[JobKind] = JobKind.RASTER_CONTOUR

    segments: Tuple[Segment, ...]
    layer_count: int


@dataclass(frozen=True)
class VectorInfillJob:
    """
    Extruded perimeters plus optional scanline infill of vector shapes.

    Attributes:
        shapes: Shapes in source space
        transform: Source to bed transform
        layer_count: Number of layers to print
        infill_spacing: Scanline spacing in mm, or None to skip infill
    """

    kind: ClassVar[JobKind] = JobKind.VECTOR_INFILL

    shapes: Tuple[Shape, ...]
    transform: BedTransform
    layer_count: int
    infill_spacing: Optional[float] = None


Job = Union[PlotterJob, RasterContourJob, VectorInfillJob]
