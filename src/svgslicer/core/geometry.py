"""
Geometry primitives shared by the extractors, the fill engine and the emitter.

Every value here is immutable: a generation run creates fresh geometry,
transforms it into new geometry and throws it away when the instruction
stream has been written.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Sequence

import numpy as np

from svgslicer.core.exceptions import GeometryError


class Point(NamedTuple):
    """(x, y) pair in source pixel, source path or machine-bed space."""

    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


class Segment(NamedTuple):
    """Straight move from ``p1`` to ``p2``; both ends live in the same space."""

    p1: Point
    p2: Point

    @property
    def length(self) -> float:
        return self.p1.distance_to(self.p2)

    def is_degenerate(self) -> bool:
        """True for a zero-length segment."""
        return self.p1 == self.p2


class Bounds(NamedTuple):
    """Axis aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def bounds_of(points: Iterable[Point]) -> Bounds:
    """
    Bounding box of a point cloud.

    Raises:
        GeometryError: If ``points`` is empty
    """
    xs: list[float] = []
    ys: list[float] = []
    for p in points:
        xs.append(p.x)
        ys.append(p.y)
    if not xs:
        raise GeometryError("Cannot compute bounds of an empty point set")
    return Bounds(min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True)
class Shape:
    """
    One filled region: an outer closed loop plus zero or more hole loops.

    Loops are stored open (the closing edge back to the first point is
    implied). Holes are assumed to lie inside the outer loop with opposite
    winding; this is not validated.
    """

    outer: tuple[Point, ...]
    holes: tuple[tuple[Point, ...], ...] = field(default_factory=tuple)

    @classmethod
    def from_coords(
        cls,
        outer: Iterable[Sequence[float]],
        holes: Iterable[Iterable[Sequence[float]]] = (),
    ) -> "Shape":
        """Build a shape from plain ``(x, y)`` sequences."""
        return cls(
            outer=tuple(Point(float(x), float(y)) for x, y in outer),
            holes=tuple(
                tuple(Point(float(x), float(y)) for x, y in hole) for hole in holes
            ),
        )

    def loops(self) -> tuple[tuple[Point, ...], ...]:
        """Outer loop first, then the holes in order."""
        return (self.outer, *self.holes)


def shapes_bounds(shapes: Sequence[Shape]) -> Bounds:
    """
    Bounds over the outer loops of ``shapes``.

    Holes lie inside their outer loop, so they never widen the box.
    """
    return bounds_of(p for shape in shapes for p in shape.outer)


@dataclass(frozen=True)
class RasterBuffer:
    """
    Read-only ``height x width`` grid of RGBA samples.

    ``pixels`` is a ``uint8`` array of shape ``(height, width, 4)``.
    Luminance is derived on demand and never stored.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise GeometryError(
                "Raster buffer must have shape (height, width, 3|4)",
                details={"shape": tuple(pixels.shape)},
            )
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise GeometryError("Raster buffer is empty", details={"shape": tuple(pixels.shape)})
        if not pixels.flags.owndata or pixels.flags.writeable:
            pixels = pixels.copy()
            pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def filled(cls, width: int, height: int, rgba: Sequence[int]) -> "RasterBuffer":
        """Buffer of one constant colour."""
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = tuple(rgba) if len(rgba) == 4 else (*rgba, 255)
        return cls(pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def luminance(self) -> np.ndarray:
        """Per-pixel ``0.299 R + 0.587 G + 0.114 B`` as a float array."""
        rgb = self.pixels[:, :, :3].astype(np.float64)
        return 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
