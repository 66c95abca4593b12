"""
Source space to machine-bed space.

Sources (SVG paths, image pixels) put the origin top-left with Y growing
down; the bed puts it bottom-left with Y growing up. The transform centres
the source on the bed, applies a uniform XY scale and flips Y. Layer
heights are never scaled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from svgslicer.core.config import ModelSettings, PrinterSettings
from svgslicer.core.exceptions import GeometryError
from svgslicer.core.geometry import Bounds, Point, Segment


@dataclass(frozen=True)
class BedTransform:
    """
    Attributes:
        center_x, center_y: Bed point the source centre lands on (mm)
        scale: Source units to mm
        source_width, source_height: Logical size of the source
        origin_x, origin_y: Source coordinate treated as (0, 0), e.g. the
            minimum corner of SVG content bounds
    """

    center_x: float
    center_y: float
    scale: float
    source_width: float
    source_height: float
    origin_x: float = 0.0
    origin_y: float = 0.0

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise GeometryError("Transform scale must be positive", details={"scale": self.scale})

    @classmethod
    def for_source(
        cls,
        width: float,
        height: float,
        printer: PrinterSettings,
        model: ModelSettings,
    ) -> "BedTransform":
        """Transform for a source of ``width x height`` starting at (0, 0)."""
        cx, cy = printer.bed_center
        return cls(cx, cy, model.scale, width, height)

    @classmethod
    def for_bounds(
        cls,
        bounds: Bounds,
        printer: PrinterSettings,
        model: ModelSettings,
    ) -> "BedTransform":
        """Transform that centres the content inside ``bounds``."""
        cx, cy = printer.bed_center
        return cls(
            cx,
            cy,
            model.scale,
            bounds.width,
            bounds.height,
            origin_x=bounds.min_x,
            origin_y=bounds.min_y,
        )

    def to_bed(self, point: Point) -> Point:
        dx = (point.x - self.origin_x - self.source_width / 2) * self.scale
        dy = (point.y - self.origin_y - self.source_height / 2) * self.scale
        return Point(self.center_x + dx, self.center_y - dy)

    def to_source(self, point: Point) -> Point:
        """Inverse of :meth:`to_bed`."""
        dx = (point.x - self.center_x) / self.scale
        dy = (self.center_y - point.y) / self.scale
        return Point(
            dx + self.source_width / 2 + self.origin_x,
            dy + self.source_height / 2 + self.origin_y,
        )

    def segment_to_bed(self, segment: Segment) -> Segment:
        return Segment(self.to_bed(segment.p1), self.to_bed(segment.p2))

    def segments_to_bed(self, segments: Iterable[Segment]) -> List[Segment]:
        return [self.segment_to_bed(seg) for seg in segments]

    def points_to_bed(self, points: Iterable[Point]) -> List[Point]:
        return [self.to_bed(p) for p in points]
