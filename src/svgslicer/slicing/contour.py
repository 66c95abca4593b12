"""
Contour tracing: solid/void boundary edges of a thresholded raster.

Every pair of neighbouring pixels where one is solid and the other void
contributes one unit-length wall on the shared pixel border. The walls are
returned as an unordered multiset; they are not chained into loops, so
consumers draw each one as an independent wall.
"""

from __future__ import annotations

from typing import List

import numpy as np

from svgslicer.core.geometry import Point, RasterBuffer, Segment

# Luminance below this is solid
SOLID_THRESHOLD = 128.0


def solid_grid(raster: RasterBuffer, threshold: float = SOLID_THRESHOLD) -> np.ndarray:
    """Boolean ``(height, width)`` grid, True where the pixel is solid."""
    return raster.luminance() < threshold


def trace_contours(raster: RasterBuffer) -> List[Segment]:
    """
    Emit the boundary edges between solid and void pixels.

    Horizontal edges come first, row by row; vertical edges follow, column
    by column. The buffer border itself never produces an edge.
    """
    grid = solid_grid(raster)
    segments: List[Segment] = []

    # Between row y and row y+1
    rows, cols = np.nonzero(grid[:-1, :] != grid[1:, :])
    for y, x in zip(rows.tolist(), cols.tolist()):
        segments.append(
            Segment(Point(float(x), float(y + 1)), Point(float(x + 1), float(y + 1)))
        )

    # Between column x and column x+1, walked column-major
    cols, rows = np.nonzero((grid[:, :-1] != grid[:, 1:]).T)
    for x, y in zip(cols.tolist(), rows.tolist()):
        segments.append(
            Segment(Point(float(x + 1), float(y)), Point(float(x + 1), float(y + 1)))
        )

    return segments
