"""Tests for plane geometry helpers."""

from __future__ import annotations

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from canopy.growth.geometry import (direction, distance, normalized, offset,
                                    quantize, segments_intersect)

COORDINATES = st.floats(min_value=-1e4, max_value=1e4, allow_nan=False)


class TestQuantize:
    """Group grid snapping checks so growth map cells stay stable."""

    def test_snaps_to_nearest_multiple(self) -> None:
        """Verify points round to the closest grid node on each axis."""
        assert quantize((12.4, -7.6), 5.0) == (10.0, -10.0)

    @given(x=COORDINATES, y=COORDINATES)
    def test_quantize_is_idempotent(self, x: float, y: float) -> None:
        """Confirm snapping an already-snapped point is a no-op."""
        cell = quantize((x, y), 5.0)

        assert quantize(cell, 5.0) == cell

    @given(x=COORDINATES, y=COORDINATES)
    def test_cell_is_within_half_step(self, x: float, y: float) -> None:
        """Ensure a point never lands more than half a step from its cell."""
        cx, cy = quantize((x, y), 5.0)

        assert abs(cx - x) <= 2.5 + 1e-9
        assert abs(cy - y) <= 2.5 + 1e-9


class TestVectors:
    """Group vector helpers so child geometry stays well defined."""

    def test_distance(self) -> None:
        """Check the Euclidean distance of a 3-4-5 triangle."""
        assert distance((0.0, 0.0), (3.0, 4.0)) == 5.0

    def test_normalized_zero_vector(self) -> None:
        """Verify the zero vector normalises to zero instead of dividing by zero."""
        assert normalized((0.0, 0.0)) == (0.0, 0.0)

    @given(angle=st.floats(min_value=-10, max_value=10, allow_nan=False))
    def test_direction_is_unit_length(self, angle: float) -> None:
        """Confirm headings built from angles have unit length."""
        dx, dy = direction(angle)

        assert math.hypot(dx, dy) == pytest.approx(1.0)

    def test_offset(self) -> None:
        """Ensure offset moves a point along a vector by the given length."""
        assert offset((1.0, 1.0), (0.0, 1.0), 4.0) == (1.0, 5.0)


class TestSegmentsIntersect:
    """Group intersection checks so overlap rejection behaves predictably."""

    def test_crossing_segments(self) -> None:
        """Verify an X shape counts as an intersection."""
        assert segments_intersect((0, 0), (10, 10), (0, 10), (10, 0))

    def test_disjoint_segments(self) -> None:
        """Confirm far-apart segments are rejected by the bounding box test."""
        assert not segments_intersect((0, 0), (1, 1), (5, 5), (6, 7))

    def test_parallel_segments_never_intersect(self) -> None:
        """Ensure parallel and collinear pairs are not treated as crossings."""
        assert not segments_intersect((0, 0), (10, 0), (0, 1), (10, 1))
        assert not segments_intersect((0, 0), (10, 0), (5, 0), (15, 0))

    def test_shared_endpoint_counts_as_touching(self) -> None:
        """Check endpoints that meet are reported, leaving it to callers to ignore joints."""
        assert segments_intersect((0, 0), (5, 5), (5, 5), (10, 0))

    def test_near_miss(self) -> None:
        """Verify a T that stops short of the bar does not intersect."""
        assert not segments_intersect((0, 0), (10, 0), (5, 1), (5, 10))
