"""Unit tests for geometry module."""

import pytest
import math
import random
from dataclasses import FrozenInstanceError

from geometry import (
    LineSegment,
    RibbonError,
    InvalidInputError,
    DegenerateGeometryError,
    intersect_2d,
    remove_collinear,
)
from conftest import assert_point_close


class TestLineSegment:
    """Tests for LineSegment class."""

    def test_create(self):
        """Test direction and length are derived."""
        seg = LineSegment((1, 2, 0), (4, 6, 0))
        assert seg.length == 5
        assert_point_close(seg.direction, (0.6, 0.8, 0.0))

    def test_midpoint(self):
        """Test midpoint property."""
        seg = LineSegment((0, 0, 0), (10, 4, 2))
        assert seg.midpoint == (5, 2, 1)

    def test_zero_length(self):
        """Test a zero-length segment is rejected."""
        with pytest.raises(InvalidInputError):
            LineSegment((3, 3, 0), (3, 3, 0))

    def test_immutable(self):
        """Test segments are read-only."""
        seg = LineSegment((0, 0, 0), (1, 0, 0))
        with pytest.raises(FrozenInstanceError):
            seg.start = (5, 5, 0)


class TestIntersect2D:
    """Tests for intersect_2d function."""

    def test_perpendicular(self):
        """Test crossing horizontal and vertical lines."""
        p = intersect_2d(((0, 1, 0), (10, 1, 0)), ((9, 0, 0), (9, 10, 0)))
        assert_point_close(p, (9, 1, 0))

    def test_intersection_outside_segments(self):
        """Test the lines are treated as infinite."""
        p = intersect_2d(((0, 0, 0), (1, 1, 0)), ((10, 0, 0), (9, 1, 0)))
        assert_point_close(p, (5, 5, 0))

    def test_z_forced_to_zero(self):
        """Test Z of the inputs is ignored."""
        p = intersect_2d(((0, 0, 7), (2, 2, 7)), ((0, 2, -3), (2, 0, -3)))
        assert_point_close(p, (1, 1, 0))
        assert p[2] == 0.0

    def test_accepts_2d_points(self):
        """Test 2-component points work."""
        p = intersect_2d(((0, 0), (1, 0)), ((3, -1), (3, 1)))
        assert_point_close(p, (3, 0, 0))

    def test_parallel(self):
        """Test parallel lines raise DegenerateGeometryError."""
        with pytest.raises(DegenerateGeometryError):
            intersect_2d(((0, 0, 0), (1, 0, 0)), ((0, 1, 0), (5, 1, 0)))

    def test_coincident(self):
        """Test coincident lines raise DegenerateGeometryError."""
        with pytest.raises(DegenerateGeometryError):
            intersect_2d(((0, 0, 0), (1, 1, 0)), ((2, 2, 0), (3, 3, 0)))

    def test_degenerate_is_ribbon_error(self):
        """Test the error is part of the ribbon error taxonomy."""
        with pytest.raises(RibbonError):
            intersect_2d(((0, 0, 0), (1, 0, 0)), ((0, 0, 0), (-1, 0, 0)))


class TestRemoveCollinear:
    """Tests for remove_collinear function."""

    def test_straight_line(self):
        """Test interior points on a line are removed."""
        result = remove_collinear([(0, 0, 0), (1, 0, 0), (2, 0, 0), (5, 0, 0)])
        assert result == [(0, 0, 0), (5, 0, 0)]

    def test_keeps_corners(self):
        """Test real corners survive."""
        path = [(0, 0, 0), (10, 0, 0), (10, 10, 0)]
        assert remove_collinear(path) == path

    def test_endpoints_never_removed(self):
        """Test endpoints stay even when coincident."""
        assert remove_collinear([(0, 0, 0), (0, 0, 0)]) == [(0, 0, 0), (0, 0, 0)]

    def test_duplicate_points(self):
        """Test repeated points are dropped."""
        result = remove_collinear([(0, 0, 0), (1, 0, 0), (1, 0, 0), (2, 1, 0)])
        assert result == [(0, 0, 0), (1, 0, 0), (2, 1, 0)]

    def test_reversal_is_collinear(self):
        """Test a point where the path doubles back is removed."""
        result = remove_collinear([(0, 0, 0), (2, 0, 0), (1, 0, 0)])
        assert result == [(0, 0, 0), (1, 0, 0)]

    def test_uses_xy_projection(self):
        """Test Z is ignored when checking collinearity."""
        result = remove_collinear([(0, 0, 0), (1, 0, 5), (2, 0, 0)])
        assert result == [(0, 0, 0), (2, 0, 0)]

    def test_2d_points_promoted(self):
        """Test 2D input comes back as 3D points."""
        assert remove_collinear([(0, 0), (1, 1)]) == [(0.0, 0.0, 0.0), (1.0, 1.0, 0.0)]

    def test_tolerance(self):
        """Test a tiny kink is treated as straight."""
        path = [(0, 0, 0), (1, 1e-12, 0), (2, 0, 0)]
        assert len(remove_collinear(path)) == 2
        assert len(remove_collinear(path, tolerance=1e-15)) == 3

    def test_backtrack_reaches_fixed_point(self):
        """Test a removal that exposes a new collinear point is handled."""
        path = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (1, 0, 0)]
        once = remove_collinear(path)
        assert remove_collinear(once) == once

    def test_idempotent(self):
        """Test filtering twice equals filtering once."""
        rng = random.Random(42)
        for _ in range(50):
            path = []
            x, y = 0.0, 0.0
            for _ in range(rng.randint(2, 12)):
                # Axis-aligned steps on a coarse grid produce many collinear runs
                step = rng.choice([(1, 0), (0, 1), (-1, 0), (0, -1), (1, 1), (0, 0)])
                x += step[0] * rng.randint(0, 3)
                y += step[1] * rng.randint(0, 3)
                path.append((x, y, 0.0))
            if len(path) < 2:
                continue
            once = remove_collinear(path)
            assert remove_collinear(once) == once
            assert once[0] == path[0]
            assert once[-1] == path[-1]

    def test_input_not_modified(self):
        """Test a new list is returned."""
        path = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
        remove_collinear(path)
        assert len(path) == 3
