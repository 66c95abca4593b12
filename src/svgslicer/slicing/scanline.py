"""
Scanline fill for polygons with holes.

A horizontal line at height ``y`` crosses the polygon boundary an even
number of times; sorting the crossings and pairing them ``(0, 1), (2, 3),
...`` gives the interior spans. Holes need no special treatment because
their edges add crossings of their own.
"""

from __future__ import annotations

import warnings
from typing import List, NamedTuple, Sequence, Tuple

from svgslicer.core.exceptions import DegenerateGeometryWarning, GeometryError
from svgslicer.core.geometry import Segment


class FillSpan(NamedTuple):
    """Interior span of one scanline, from ``x_start`` to ``x_end``."""

    y: float
    x_start: float
    x_end: float

    @property
    def length(self) -> float:
        return abs(self.x_end - self.x_start)


def fill_spacing(nozzle_diameter: float, fill_density: float) -> float:
    """
    Scanline spacing for a fill density in percent.

    Densities strictly between 0 and 100 widen the spacing to
    ``nozzle * 100 / density``; anything else keeps it at one nozzle width.
    """
    if 0 < fill_density < 100:
        return nozzle_diameter * (100 / fill_density)
    return nozzle_diameter


def scanline_intersections(y: float, segments: Sequence[Segment]) -> List[float]:
    """
    Sorted x coordinates where the line at height ``y`` crosses ``segments``.

    A segment counts when ``min_y < y <= max_y``. The half-open range
    keeps a scanline through a shared vertex from being counted twice and
    skips horizontal segments entirely.
    """
    intersections: List[float] = []
    for (x1, y1), (x2, y2) in segments:
        if min(y1, y2) < y <= max(y1, y2):
            intersections.append(x1 + (y - y1) * (x2 - x1) / (y2 - y1))
    intersections.sort()
    return intersections


def pair_intersections(intersections: Sequence[float]) -> List[Tuple[float, float]]:
    """
    Pair sorted crossings into ``(start, end)`` spans.

    An odd trailing crossing comes from degenerate or self-intersecting
    input; it is dropped with a DegenerateGeometryWarning.
    """
    if len(intersections) % 2:
        warnings.warn(
            f"Odd scanline intersection count ({len(intersections)}); "
            "dropping the trailing intersection",
            DegenerateGeometryWarning,
            stacklevel=2,
        )
    return [
        (intersections[k], intersections[k + 1])
        for k in range(0, len(intersections) - 1, 2)
    ]


def fill_spans(segments: Sequence[Segment], spacing: float) -> List[FillSpan]:
    """
    Sweep scanlines over a polygon and collect its interior spans.

    The sweep starts one spacing above the lowest vertex and stops before
    the highest one.

    Raises:
        GeometryError: If ``spacing`` is not positive
    """
    if spacing <= 0:
        raise GeometryError("Fill spacing must be positive", details={"spacing": spacing})
    if not segments:
        return []

    ys = [p.y for seg in segments for p in seg]
    min_y, max_y = min(ys), max(ys)

    spans: List[FillSpan] = []
    step = 1
    y = min_y + spacing
    while y < max_y:
        for x_start, x_end in pair_intersections(scanline_intersections(y, segments)):
            spans.append(FillSpan(y, x_start, x_end))
        step += 1
        y = min_y + step * spacing
    return spans
