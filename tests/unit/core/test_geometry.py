"""
Tests for geometry primitives.
"""

import numpy as np
import pytest

from svgslicer.core.exceptions import GeometryError
from svgslicer.core.geometry import (
    Bounds,
    Point,
    RasterBuffer,
    Segment,
    Shape,
    bounds_of,
    shapes_bounds,
)


@pytest.mark.unit
class TestPointSegment:
    """Tests for Point and Segment."""

    def test_distance(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == pytest.approx(5.0)

    def test_segment_length(self):
        assert Segment(Point(1, 1), Point(1, 4)).length == pytest.approx(3.0)

    def test_degenerate(self):
        assert Segment(Point(2, 2), Point(2, 2)).is_degenerate()
        assert not Segment(Point(2, 2), Point(2, 3)).is_degenerate()

    def test_immutable(self):
        p = Point(1, 2)
        with pytest.raises(AttributeError):
            p.x = 5


@pytest.mark.unit
class TestBounds:
    """Tests for bounds helpers."""

    def test_bounds_of(self):
        b = bounds_of([Point(1, 5), Point(-2, 3), Point(4, -1)])
        assert b == Bounds(-2, -1, 4, 5)
        assert b.width == 6
        assert b.height == 6

    def test_bounds_of_empty(self):
        with pytest.raises(GeometryError):
            bounds_of([])

    def test_shapes_bounds_ignores_holes(self, square_with_hole):
        wild_hole = Shape(outer=square_with_hole.outer, holes=((Point(-50, -50), Point(90, 90), Point(0, 90)),))
        assert shapes_bounds([wild_hole]) == Bounds(0, 0, 20, 20)


@pytest.mark.unit
class TestShape:
    """Tests for Shape."""

    def test_from_coords(self, square_with_hole):
        assert len(square_with_hole.outer) == 4
        assert len(square_with_hole.holes) == 1
        assert square_with_hole.outer[1] == Point(20.0, 0.0)

    def test_loops_outer_first(self, square_with_hole):
        loops = square_with_hole.loops()
        assert loops[0] == square_with_hole.outer
        assert loops[1] == square_with_hole.holes[0]


@pytest.mark.unit
class TestRasterBuffer:
    """Tests for RasterBuffer."""

    def test_filled_dimensions(self):
        raster = RasterBuffer.filled(7, 3, (10, 20, 30))
        assert raster.width == 7
        assert raster.height == 3
        assert raster.pixels.shape == (3, 7, 4)
        assert tuple(raster.pixels[0, 0]) == (10, 20, 30, 255)

    def test_read_only(self, white_raster):
        with pytest.raises(ValueError):
            white_raster.pixels[0, 0, 0] = 0

    def test_copies_input(self):
        source = np.zeros((2, 2, 4), dtype=np.uint8)
        raster = RasterBuffer(source)
        source[0, 0, 0] = 255
        assert raster.pixels[0, 0, 0] == 0

    def test_luminance_weights(self):
        pixels = np.zeros((1, 3, 4), dtype=np.uint8)
        pixels[0, 0, 0] = 255
        pixels[0, 1, 1] = 255
        pixels[0, 2, 2] = 255
        lum = RasterBuffer(pixels).luminance()
        assert lum[0, 0] == pytest.approx(0.299 * 255)
        assert lum[0, 1] == pytest.approx(0.587 * 255)
        assert lum[0, 2] == pytest.approx(0.114 * 255)

    def test_white_luminance(self, white_raster):
        assert np.allclose(white_raster.luminance(), 255.0)

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 2), (0, 4, 4)])
    def test_bad_shape(self, shape):
        with pytest.raises(GeometryError):
            RasterBuffer(np.zeros(shape, dtype=np.uint8))
