"""
Input loaders: source files to core geometry.

Decoding lives here, outside the generation core. ``VectorLoader`` turns an
SVG document into a shape set, ``RasterLoader`` turns an image file into a
white-composited RasterBuffer at processing resolution.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import List, Sequence, Tuple, Union
from xml.parsers.expat import ExpatError

import numpy as np
from PIL import Image, UnidentifiedImageError
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon
from svgpathtools import Line, svg2paths
from svgpathtools import Path as SVGPath

from svgslicer.core.exceptions import DecodeError
from svgslicer.core.geometry import Point, RasterBuffer, Shape
from svgslicer.core.logging import get_logger

logger = get_logger(__name__)

# Image width used for all raster processing, in pixels
PROCESSING_WIDTH = 512

VECTOR_SUFFIXES = frozenset({".svg"})

Source = Union[RasterBuffer, Tuple[Shape, ...]]


def sample_subpath(path: SVGPath, tolerance: float = 0.5) -> List[Point]:
    """
    Flatten one continuous sub-path into an open point loop.

    Straight lines contribute their end points; curves are sampled at
    roughly ``tolerance`` source units along their length. A trailing point
    equal to the first is dropped, the loop is closed implicitly.
    """
    if len(path) == 0:
        return []

    points: List[Point] = [Point(float(path.start.real), float(path.start.imag))]
    for segment in path:
        if isinstance(segment, Line):
            steps = 1
        else:
            length = max(segment.length(), tolerance)
            steps = max(int(length / max(tolerance, 1e-3)), 1)
        for i in range(1, steps + 1):
            c = segment.point(i / steps)
            p = Point(float(c.real), float(c.imag))
            if p != points[-1]:
                points.append(p)

    if len(points) > 1 and points[-1] == points[0]:
        points.pop()
    return points


def group_loops(loops: Sequence[Sequence[Point]]) -> List[Shape]:
    """
    Group the sub-path loops of one SVG path into shapes.

    A loop nested inside an even number of its siblings is an outer loop; a
    loop nested inside an odd number is a hole of its innermost container.
    Two-point loops (single strokes such as `<line>` elements) enclose
    nothing: they are always outer loops and never contain other loops.
    Single points are dropped.
    """
    rings = [loop for loop in loops if len(loop) >= 2]
    polygons = {
        i: Polygon([(p.x, p.y) for p in loop]) for i, loop in enumerate(rings) if len(loop) >= 3
    }

    containers: List[List[int]] = []
    for i, loop in enumerate(rings):
        if i not in polygons:
            containers.append([])
            continue
        start = ShapelyPoint(loop[0].x, loop[0].y)
        containers.append(
            [j for j, poly in polygons.items() if j != i and poly.contains(start)]
        )
    depth = [len(c) for c in containers]

    outers = [i for i in range(len(rings)) if depth[i] % 2 == 0]
    holes: dict[int, List[Tuple[Point, ...]]] = {i: [] for i in outers}
    for i in range(len(rings)):
        if depth[i] % 2 == 0:
            continue
        parent = max(containers[i], key=lambda j: depth[j])
        if parent in holes:
            holes[parent].append(tuple(rings[i]))

    return [Shape(outer=tuple(rings[i]), holes=tuple(holes[i])) for i in outers]


class VectorLoader:
    """Loads SVG documents as shape sets."""

    def __init__(self, tolerance: float = 0.5):
        self.tolerance = tolerance

    def load(self, path: Union[str, Path]) -> Tuple[Shape, ...]:
        """
        Parse ``path`` into shapes, one or more per SVG path element.

        Raises:
            DecodeError: If the file cannot be read or parsed
        """
        try:
            paths, _ = svg2paths(str(path))
        except (ExpatError, OSError, ValueError) as e:
            raise DecodeError(
                f"Failed to parse SVG file: {path}",
                source=str(path),
                details={"error": str(e)},
            ) from e

        shapes: List[Shape] = []
        for svg_path in paths:
            loops = [
                sample_subpath(sub, self.tolerance)
                for sub in svg_path.continuous_subpaths()
            ]
            shapes.extend(group_loops(loops))

        logger.info(
            "svg_loaded",
            path=str(path),
            paths=len(paths),
            shapes=len(shapes),
            holes=sum(len(s.holes) for s in shapes),
        )
        return tuple(shapes)


class RasterLoader:
    """Loads image files as processing-resolution raster buffers."""

    def __init__(self, width: int = PROCESSING_WIDTH):
        self.width = width

    def load(self, path: Union[str, Path]) -> RasterBuffer:
        """
        Decode ``path``, composite transparency onto white and resample to
        ``width`` pixels wide, keeping the aspect ratio.

        Raises:
            DecodeError: If the image cannot be decoded
        """
        try:
            with Image.open(path) as img:
                rgba = img.convert("RGBA")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise DecodeError(
                f"Failed to decode image: {path}",
                source=str(path),
                details={"error": str(e)},
            ) from e

        return self.from_image(rgba, source=str(path))

    def from_image(self, img: Image.Image, source: str = "<image>") -> RasterBuffer:
        """Convert an already decoded Pillow image."""
        rgba = img.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        composited = Image.alpha_composite(background, rgba)

        w, h = composited.size
        height = max(1, math.floor(self.width * h / w))
        resized = composited.resize((self.width, height), Image.Resampling.BILINEAR)

        logger.info(
            "image_loaded",
            source=source,
            original_size=(w, h),
            processing_size=(self.width, height),
        )
        return RasterBuffer(np.asarray(resized, dtype=np.uint8))


def is_vector_path(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in VECTOR_SUFFIXES


def load_source(path: Union[str, Path]) -> Source:
    """Load ``path`` as vector shapes (``.svg``) or as a raster image."""
    if is_vector_path(path):
        return VectorLoader().load(path)
    return RasterLoader().load(path)
