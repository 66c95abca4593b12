"""
Tests for the scanline fill engine.
"""

import math
import warnings

import pytest

from svgslicer.core.exceptions import DegenerateGeometryWarning, GeometryError
from svgslicer.core.geometry import Point, Segment
from svgslicer.slicing.scanline import (
    FillSpan,
    fill_spacing,
    fill_spans,
    pair_intersections,
    scanline_intersections,
)
from svgslicer.slicing.vector import loop_segments, shape_to_segments


def _regular_polygon(n, radius=10.0, cx=0.0, cy=0.0):
    return [
        Point(cx + radius * math.cos(2 * math.pi * k / n), cy + radius * math.sin(2 * math.pi * k / n))
        for k in range(n)
    ]


@pytest.mark.unit
@pytest.mark.slicing
class TestFillSpacing:
    """Tests for spacing from density."""

    def test_full_density(self):
        assert fill_spacing(0.4, 100) == 0.4

    def test_half_density(self):
        assert fill_spacing(0.4, 50) == pytest.approx(0.8)

    def test_zero_density_keeps_nozzle_width(self):
        assert fill_spacing(0.4, 0) == 0.4


@pytest.mark.unit
@pytest.mark.slicing
class TestScanlineIntersections:
    """Tests for scanline_intersections."""

    def test_square(self, square_shape):
        xs = scanline_intersections(5.0, shape_to_segments(square_shape))
        assert xs == [0.0, 10.0]

    def test_sorted_with_hole(self, square_with_hole):
        xs = scanline_intersections(10.0, shape_to_segments(square_with_hole))
        assert xs == [0.0, 5.0, 15.0, 20.0]

    def test_vertex_counted_once(self):
        diamond = loop_segments([Point(5, 0), Point(10, 5), Point(5, 10), Point(0, 5)])
        assert scanline_intersections(5.0, diamond) == [0.0, 10.0]

    def test_horizontal_edges_ignored(self, square_shape):
        assert scanline_intersections(0.0, shape_to_segments(square_shape)) == []

    def test_interpolation(self):
        seg = [Segment(Point(0, 0), Point(10, 20))]
        assert scanline_intersections(5.0, seg) == [pytest.approx(2.5)]

    @pytest.mark.parametrize("n", [3, 4, 5, 7, 12, 33])
    def test_even_count_inside_polygon(self, n):
        segments = loop_segments(_regular_polygon(n))
        ys = [p.y for seg in segments for p in seg]
        lo, hi = min(ys), max(ys)
        for k in range(1, 40):
            y = lo + (hi - lo) * k / 40
            assert len(scanline_intersections(y, segments)) % 2 == 0


@pytest.mark.unit
@pytest.mark.slicing
class TestPairIntersections:
    """Tests for pairing crossings into spans."""

    def test_pairs(self):
        assert pair_intersections([0.0, 1.0, 2.0, 3.0]) == [(0.0, 1.0), (2.0, 3.0)]

    def test_odd_drops_trailing_with_warning(self):
        with pytest.warns(DegenerateGeometryWarning):
            assert pair_intersections([0.0, 1.0, 2.0]) == [(0.0, 1.0)]

    def test_even_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            pair_intersections([0.0, 1.0])


@pytest.mark.unit
@pytest.mark.slicing
class TestFillSpans:
    """Tests for fill_spans."""

    def test_square_spans(self, square_shape):
        spans = fill_spans(shape_to_segments(square_shape), spacing=1.0)
        assert [s.y for s in spans] == [float(y) for y in range(1, 10)]
        assert all((s.x_start, s.x_end) == (0.0, 10.0) for s in spans)

    def test_hole_splits_spans(self, square_with_hole):
        spans = fill_spans(shape_to_segments(square_with_hole), spacing=2.5)
        by_y = {}
        for span in spans:
            by_y.setdefault(span.y, []).append((span.x_start, span.x_end))
        assert by_y[2.5] == [(0.0, 20.0)]
        assert by_y[10.0] == [(0.0, 5.0), (15.0, 20.0)]
        assert by_y[17.5] == [(0.0, 20.0)]
        assert max(by_y) < 20.0

    def test_no_span_on_extremes(self, square_shape):
        spans = fill_spans(shape_to_segments(square_shape), spacing=3.0)
        assert [s.y for s in spans] == [3.0, 6.0, 9.0]

    def test_scanline_positions_do_not_drift(self):
        segments = loop_segments([Point(0, 0), Point(1, 0), Point(1, 100), Point(0, 100)])
        spans = fill_spans(segments, spacing=0.1)
        assert spans[-1].y == pytest.approx(99.9)
        assert len(spans) == 999

    def test_empty(self):
        assert fill_spans([], spacing=1.0) == []

    def test_non_positive_spacing(self, square_shape):
        with pytest.raises(GeometryError):
            fill_spans(shape_to_segments(square_shape), spacing=0)

    def test_span_length(self):
        assert FillSpan(1.0, 2.0, 5.5).length == 3.5
