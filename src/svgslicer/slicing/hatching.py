"""
Directional hatching of raster images for pen plotting.

Parallel scan lines are laid over the image at a given angle and spacing.
Wherever a scan line crosses pixels darker than a threshold it draws. Running
several passes with different thresholds, angles and spacings builds up
density-layered cross-hatching: dark regions are covered by every pass,
mid-tones by fewer. Overlap between passes is intended.

The scan frame is rotated about the buffer centre. For scan offset ``r`` and
position ``t`` along the scan line the sample point is::

    x = r*cos(a) - t*sin(a) + w/2
    y = r*sin(a) + t*cos(a) + h/2

with ``r`` and ``t`` both running over ``[-diag, diag)``. ``r`` steps by the
spacing and ``t`` by one pixel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from svgslicer.core.config import HatchStyle
from svgslicer.core.exceptions import GeometryError
from svgslicer.core.geometry import Point, RasterBuffer, Segment
from svgslicer.core.logging import get_logger

logger = get_logger(__name__)

# Scan line spacing of the presets, in source pixels
DEFAULT_PIXEL_SPACING = 4.0


@dataclass(frozen=True)
class HatchPass:
    """One hatching pass: draw where luminance is below ``threshold``."""

    threshold: float
    angle_deg: float
    spacing: float


# (threshold, angle, spacing factor) per preset
_HATCH_PRESETS = {
    HatchStyle.CROSS: ((100.0, 45.0, 1.0), (80.0, -45.0, 1.0), (180.0, 45.0, 1.5)),
    HatchStyle.DIAGONAL: ((100.0, 45.0, 1.0), (180.0, 45.0, 1.5)),
    HatchStyle.LINES: ((100.0, 90.0, 1.0), (180.0, 90.0, 1.5)),
}


def hatch_passes(
    style: HatchStyle, spacing: float = DEFAULT_PIXEL_SPACING
) -> List[HatchPass]:
    """Expand a hatch style preset into concrete passes."""
    return [
        HatchPass(threshold=threshold, angle_deg=angle, spacing=spacing * factor)
        for threshold, angle, factor in _HATCH_PRESETS[HatchStyle(style)]
    ]


def generate_hatch(
    raster: RasterBuffer,
    threshold: float,
    angle_deg: float,
    spacing: float,
) -> List[Segment]:
    """
    Hatch one pass over ``raster``.

    Args:
        raster: Source pixels
        threshold: Luminance (0-255) below which a sample is dark
        angle_deg: Rotation of the scan frame in degrees
        spacing: Distance between scan lines in pixels

    Returns:
        One segment per contiguous dark run, from its first to its last
        dark sample. Samples outside the buffer are never dark. The
        segments are unordered; no continuity between scan lines.

    Raises:
        GeometryError: If ``spacing`` is not positive
    """
    if spacing <= 0:
        raise GeometryError("Hatch spacing must be positive", details={"spacing": spacing})

    width, height = raster.width, raster.height
    luminance = raster.luminance()

    rad = math.radians(angle_deg)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    diag = math.sqrt(width * width + height * height)

    ts = np.arange(-diag, diag, 1.0)
    segments: List[Segment] = []

    for r in np.arange(-diag, diag, spacing):
        xs = r * cos_a - ts * sin_a + width / 2
        ys = r * sin_a + ts * cos_a + height / 2

        inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
        if not inside.any():
            continue

        dark = np.zeros(ts.shape, dtype=bool)
        ix = np.floor(xs[inside]).astype(np.intp)
        iy = np.floor(ys[inside]).astype(np.intp)
        dark[inside] = luminance[iy, ix] < threshold

        # +1 marks the first sample of a run, -1 the sample after its last
        edges = np.diff(np.concatenate(([0], dark.astype(np.int8), [0])))
        starts = np.flatnonzero(edges == 1)
        ends = np.flatnonzero(edges == -1) - 1
        for s, e in zip(starts, ends):
            segments.append(
                Segment(
                    Point(float(xs[s]), float(ys[s])),
                    Point(float(xs[e]), float(ys[e])),
                )
            )

    logger.debug(
        "hatch_pass_complete",
        threshold=threshold,
        angle=angle_deg,
        spacing=spacing,
        segments=len(segments),
    )
    return segments


def generate_hatching(raster: RasterBuffer, passes: Iterable[HatchPass]) -> List[Segment]:
    """Concatenate the segments of several hatch passes, in pass order."""
    segments: List[Segment] = []
    for hatch in passes:
        segments.extend(
            generate_hatch(raster, hatch.threshold, hatch.angle_deg, hatch.spacing)
        )
    return segments
