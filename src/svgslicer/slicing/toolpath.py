"""
Toolpath data structures and per-layer toolpath assembly.

A Toolpath is the bed-space plan of a run: an ordered list of layers, each
holding the ordered drawable segments for that layer. It carries no
machine state; the G-code post processor turns it into instructions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from svgslicer.core.config import PrinterSettings
from svgslicer.core.geometry import Bounds, Point, Segment, bounds_of
from svgslicer.core.logging import get_logger
from svgslicer.slicing.jobs import (
    Job,
    JobKind,
    PlotterJob,
    RasterContourJob,
    VectorInfillJob,
)
from svgslicer.slicing.scanline import fill_spans
from svgslicer.slicing.vector import loop_segments

logger = get_logger(__name__)


class ToolpathType(Enum):
    """Type of toolpath segment."""

    PLOT = "plot"  # Pen down drawing
    WALL = "wall"  # Traced raster boundary
    PERIMETER = "perimeter"  # Outer loop of a vector shape
    INFILL = "infill"  # Scanline fill span


@dataclass
class ToolpathSegment:
    """
    Represents one drawn stroke of a toolpath.

    Attributes:
        points: Bed-space points; the head travels to the first one and
            draws through the rest
        type: Type of toolpath segment
        layer_index: Index of the layer this segment belongs to
    """

    points: List[Point]
    type: ToolpathType
    layer_index: int

    def get_length(self) -> float:
        """Calculate total drawn length of the segment."""
        return sum(a.distance_to(b) for a, b in zip(self.points, self.points[1:]))

    def get_start_point(self) -> Point:
        """Get the starting point of the segment."""
        if not self.points:
            raise ValueError("Segment has no points")
        return self.points[0]

    def get_end_point(self) -> Point:
        """Get the ending point of the segment."""
        if not self.points:
            raise ValueError("Segment has no points")
        return self.points[-1]


@dataclass
class Layer:
    """One layer of the toolpath at machine height ``z`` (mm)."""

    index: int
    z: float
    segments: List[ToolpathSegment] = field(default_factory=list)


@dataclass
class Toolpath:
    """
    Complete toolpath for a generation run.

    Attributes:
        kind: Machine regime the toolpath was assembled for
        layers: Layers in print order
    """

    kind: JobKind
    layers: List[Layer] = field(default_factory=list)

    def add_layer(self, layer: Layer) -> None:
        self.layers.append(layer)

    @property
    def total_layers(self) -> int:
        return len(self.layers)

    @property
    def segments(self) -> List[ToolpathSegment]:
        """All segments in print order."""
        return [seg for layer in self.layers for seg in layer.segments]

    def segment_count(self) -> int:
        return sum(len(layer.segments) for layer in self.layers)

    def get_segments_by_type(self, seg_type: ToolpathType) -> List[ToolpathSegment]:
        """Get all segments of a specific type."""
        return [seg for seg in self.segments if seg.type == seg_type]

    def get_total_length(self) -> float:
        """Calculate total drawn length."""
        return sum(seg.get_length() for seg in self.segments)

    def count_by_type(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for seg in self.segments:
            counts[seg.type.value] = counts.get(seg.type.value, 0) + 1
        return counts

    def get_bounds(self) -> Bounds:
        """
        Get the XY bounding box of all drawn points.

        Raises:
            ValueError: If the toolpath has no points
        """
        points = [p for seg in self.segments for p in seg.points]
        if not points:
            raise ValueError("Toolpath has no points")
        return bounds_of(points)


class ToolpathAssembler:
    """
    Lays a job out layer by layer.

    Layer ``i`` sits at ``initial_layer_height + i * layer_height + z_offset``.
    Geometry is identical on every layer, so per-shape perimeters and fill
    spans are computed once and repeated.
    """

    def __init__(self, printer: PrinterSettings):
        self.printer = printer

    def layer_z(self, layer_index: int) -> float:
        p = self.printer
        return p.initial_layer_height + layer_index * p.layer_height + p.z_offset

    def assemble(self, job: Job) -> Toolpath:
        """Build the toolpath for ``job``."""
        if isinstance(job, PlotterJob):
            strokes = self._segment_strokes(job.segments, ToolpathType.PLOT)
        elif isinstance(job, RasterContourJob):
            strokes = self._segment_strokes(job.segments, ToolpathType.WALL)
        elif isinstance(job, VectorInfillJob):
            strokes = self._shape_strokes(job)
        else:
            raise TypeError(f"Unsupported job: {type(job).__name__}")

        toolpath = Toolpath(kind=job.kind)
        for layer_index in range(job.layer_count):
            layer = Layer(index=layer_index, z=self.layer_z(layer_index))
            for points, seg_type in strokes:
                layer.segments.append(
                    ToolpathSegment(points=list(points), type=seg_type, layer_index=layer_index)
                )
            toolpath.add_layer(layer)

        logger.info(
            "toolpath_assembled",
            kind=job.kind.value,
            layers=toolpath.total_layers,
            segments=toolpath.segment_count(),
        )
        return toolpath

    @staticmethod
    def _segment_strokes(
        segments: Tuple[Segment, ...], seg_type: ToolpathType
    ) -> List[Tuple[Tuple[Point, ...], ToolpathType]]:
        return [((seg.p1, seg.p2), seg_type) for seg in segments]

    def _shape_strokes(
        self, job: VectorInfillJob
    ) -> List[Tuple[Tuple[Point, ...], ToolpathType]]:
        strokes: List[Tuple[Tuple[Point, ...], ToolpathType]] = []
        for shape in job.shapes:
            outer = job.transform.points_to_bed(shape.outer)
            if len(outer) < 2:
                continue
            strokes.append(((*outer, outer[0]), ToolpathType.PERIMETER))

            # Open strokes have no interior
            if job.infill_spacing is None or len(outer) < 3:
                continue
            outline: List[Segment] = loop_segments(outer)
            for hole in shape.holes:
                outline.extend(loop_segments(job.transform.points_to_bed(hole)))
            for span in fill_spans(outline, job.infill_spacing):
                strokes.append(
                    (
                        (Point(span.x_start, span.y), Point(span.x_end, span.y)),
                        ToolpathType.INFILL,
                    )
                )
        return strokes
