"""Pytest fixtures for ribbon tests."""

import pytest
import sys
from pathlib import Path

# Modules live at the repository root
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture
def straight_path() -> list[tuple[float, float, float]]:
    """Return a single horizontal segment."""
    return [(0, 0, 0), (10, 0, 0)]


@pytest.fixture
def l_path() -> list[tuple[float, float, float]]:
    """Return an L-shaped path turning left by 90 degrees."""
    return [(0, 0, 0), (10, 0, 0), (10, 10, 0)]


@pytest.fixture
def right_l_path() -> list[tuple[float, float, float]]:
    """Return the L-shaped path mirrored, turning right by 90 degrees."""
    return [(0, 0, 0), (10, 0, 0), (10, -10, 0)]


@pytest.fixture
def zigzag_path() -> list[tuple[float, float, float]]:
    """Return a path alternating left and right turns."""
    return [(0, 0, 0), (8, 6, 0), (16, 0, 0), (24, 6, 0), (32, 0, 0)]


def assert_point_close(actual, expected, tol: float = 1e-9):
    """Assert two points match component-wise within tol."""
    assert len(actual) == len(expected), f"{actual} vs {expected}"
    for a, e in zip(actual, expected):
        assert abs(a - e) < tol, f"{actual} != {expected}"


def signed_area_2d(triangle) -> float:
    """Signed XY area of a triangle; positive = CCW."""
    (ax, ay), (bx, by), (cx, cy) = (p[:2] for p in triangle)
    return ((bx - ax) * (cy - ay) - (by - ay) * (cx - ax)) / 2
