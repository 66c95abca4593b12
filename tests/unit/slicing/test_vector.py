"""
Tests for vector geometry extraction.
"""

import warnings

import pytest

from svgslicer.core.exceptions import DegenerateGeometryWarning
from svgslicer.core.geometry import Point, Segment, Shape
from svgslicer.slicing.vector import (
    check_shapes,
    is_simple_loop,
    loop_segments,
    shape_to_segments,
    shapes_to_segments,
)


@pytest.mark.unit
@pytest.mark.slicing
class TestLoopSegments:
    """Tests for loop closing."""

    def test_closes_open_loop(self):
        pts = [Point(0, 0), Point(1, 0), Point(1, 1)]
        assert loop_segments(pts) == [
            Segment(Point(0, 0), Point(1, 0)),
            Segment(Point(1, 0), Point(1, 1)),
            Segment(Point(1, 1), Point(0, 0)),
        ]

    def test_already_closed_loop_gets_zero_length_closure(self):
        pts = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 0)]
        segments = loop_segments(pts)
        assert len(segments) == 4
        assert segments[-1].is_degenerate()

    def test_empty(self):
        assert loop_segments([]) == []


@pytest.mark.unit
@pytest.mark.slicing
class TestShapeSegments:
    """Tests for shape flattening."""

    def test_outer_then_holes(self, square_with_hole):
        segments = shape_to_segments(square_with_hole)
        assert len(segments) == 8
        assert segments[0].p1 == square_with_hole.outer[0]
        assert segments[4].p1 == square_with_hole.holes[0][0]

    def test_many_shapes(self, square_shape, square_with_hole):
        assert len(shapes_to_segments([square_shape, square_with_hole])) == 12


@pytest.mark.unit
@pytest.mark.slicing
class TestSelfIntersection:
    """Tests for degenerate loop detection."""

    def test_square_is_simple(self, square_shape):
        assert is_simple_loop(square_shape.outer)

    def test_bow_tie_is_not_simple(self):
        bow_tie = [Point(0, 0), Point(10, 10), Point(10, 0), Point(0, 10)]
        assert not is_simple_loop(bow_tie)

    def test_short_loop_is_simple(self):
        assert is_simple_loop([Point(0, 0), Point(1, 1)])

    def test_check_shapes_warns(self):
        bow_tie = Shape.from_coords([(0, 0), (10, 10), (10, 0), (0, 10)])
        with pytest.warns(DegenerateGeometryWarning, match="intersects itself"):
            assert check_shapes([bow_tie]) == 1

    def test_check_shapes_clean(self, square_with_hole):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert check_shapes([square_with_hole]) == 0
