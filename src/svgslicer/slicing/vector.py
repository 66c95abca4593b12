"""
Vector geometry extraction: shapes to closed segment loops.

Each loop (outer or hole) becomes one segment per consecutive point pair
plus the closing segment from the last point back to the first, whether
or not the source loop was already closed. Holes are flattened into the
same segment list as the outer loop without any tag; the scanline fill
relies on their geometry alone, which is only correct while hole loops lie
inside the outer loop.
"""

from __future__ import annotations

import warnings
from typing import Iterable, List, Sequence

from shapely.geometry import LinearRing

from svgslicer.core.exceptions import DegenerateGeometryWarning
from svgslicer.core.geometry import Point, Segment, Shape
from svgslicer.core.logging import get_logger

logger = get_logger(__name__)


def loop_segments(points: Sequence[Point]) -> List[Segment]:
    """Close ``points`` into a loop of segments."""
    n = len(points)
    return [Segment(points[i], points[(i + 1) % n]) for i in range(n)]


def shape_to_segments(shape: Shape) -> List[Segment]:
    """Outer loop segments followed by every hole's segments."""
    segments: List[Segment] = []
    for loop in shape.loops():
        segments.extend(loop_segments(loop))
    return segments


def shapes_to_segments(shapes: Iterable[Shape]) -> List[Segment]:
    """Flatten a shape set into one outline segment list."""
    segments: List[Segment] = []
    for shape in shapes:
        segments.extend(shape_to_segments(shape))
    return segments


def is_simple_loop(points: Sequence[Point]) -> bool:
    """
    True unless the closed loop through ``points`` crosses itself.

    Loops with fewer than three distinct points cannot cross themselves.
    """
    if len(set(points)) < 3:
        return True
    return bool(LinearRing([(p.x, p.y) for p in points]).is_simple)


def check_shapes(shapes: Sequence[Shape]) -> int:
    """
    Warn about self-intersecting loops.

    Self-intersection is never fatal: such loops are still drawn and filled,
    the fill just follows whatever spans the crossing edges produce.

    Returns:
        Number of self-intersecting loops found
    """
    bad = 0
    for shape_index, shape in enumerate(shapes):
        for loop_index, loop in enumerate(shape.loops()):
            if is_simple_loop(loop):
                continue
            bad += 1
            warnings.warn(
                f"Shape {shape_index} loop {loop_index} intersects itself",
                DegenerateGeometryWarning,
                stacklevel=2,
            )
    if bad:
        logger.warning("self_intersecting_loops", count=bad)
    return bad
