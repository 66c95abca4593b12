"""
Tests for contour tracing.
"""

import numpy as np
import pytest

from svgslicer.core.geometry import Point, RasterBuffer, Segment
from svgslicer.slicing.contour import solid_grid, trace_contours


def _raster_from_mask(mask):
    """Black where ``mask`` is True, white elsewhere."""
    mask = np.asarray(mask, dtype=bool)
    pixels = np.full((*mask.shape, 4), 255, dtype=np.uint8)
    pixels[mask, :3] = 0
    return RasterBuffer(pixels)


@pytest.mark.unit
@pytest.mark.slicing
class TestSolidGrid:
    """Tests for thresholding."""

    def test_threshold_midpoint(self):
        raster = RasterBuffer(
            np.array([[[127, 127, 127, 255], [129, 129, 129, 255]]], dtype=np.uint8)
        )
        assert solid_grid(raster).tolist() == [[True, False]]


@pytest.mark.unit
@pytest.mark.slicing
class TestTraceContours:
    """Tests for trace_contours."""

    def test_all_solid_has_no_edges(self, black_raster):
        assert trace_contours(black_raster) == []

    def test_all_void_has_no_edges(self, white_raster):
        assert trace_contours(white_raster) == []

    def test_single_pixel_cell_perimeter(self, single_pixel_raster):
        segments = trace_contours(single_pixel_raster)
        assert len(segments) == 4
        assert set(segments) == {
            Segment(Point(2, 2), Point(3, 2)),
            Segment(Point(2, 3), Point(3, 3)),
            Segment(Point(2, 2), Point(2, 3)),
            Segment(Point(3, 2), Point(3, 3)),
        }

    def test_edges_are_unit_length(self):
        rng = np.random.default_rng(7)
        raster = _raster_from_mask(rng.random((12, 9)) < 0.4)
        for seg in trace_contours(raster):
            assert seg.length == pytest.approx(1.0)

    def test_full_height_column(self):
        mask = np.zeros((4, 5), dtype=bool)
        mask[:, 2] = True
        segments = trace_contours(_raster_from_mask(mask))
        # Two vertical walls per row; the buffer border adds nothing
        assert len(segments) == 8
        assert all(seg.p1.x == seg.p2.x for seg in segments)
        assert {seg.p1.x for seg in segments} == {2.0, 3.0}

    def test_horizontal_edges_first(self):
        mask = np.zeros((3, 3), dtype=bool)
        mask[1, 1] = True
        segments = trace_contours(_raster_from_mask(mask))
        kinds = ["h" if seg.p1.y == seg.p2.y else "v" for seg in segments]
        assert kinds == ["h", "h", "v", "v"]

    def test_edges_not_chained(self):
        mask = np.zeros((4, 4), dtype=bool)
        mask[1:3, 1:3] = True
        segments = trace_contours(_raster_from_mask(mask))
        # 2x2 block: eight independent unit walls, not one loop of four
        assert len(segments) == 8
