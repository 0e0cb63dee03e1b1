"""
Planar geometry primitives for ribbon generation.

Provides the line segment value type, 2D line intersection, the
collinear-point filter and the error types raised for bad input.
"""

from dataclasses import dataclass, field
import math

from vector import Vec3, sub, norm, length


Point = tuple[float, float, float]

# Interior points whose unit turn (|sin| of the turn angle) is below this
# are treated as collinear with their neighbours
COLLINEAR_TOLERANCE = 1e-9

# Relative determinant below which two lines count as parallel
PARALLEL_TOLERANCE = 1e-12

# Shortest segment length considered non-degenerate
MIN_SEGMENT_LENGTH = 1e-12


class RibbonError(ValueError):
    """Base class for ribbon generation failures."""


class InvalidInputError(RibbonError):
    """Bad arguments: short path, malformed point, non-positive width, etc."""


class DegenerateGeometryError(RibbonError):
    """Numerical edge case, e.g. intersecting two parallel lines."""


@dataclass(frozen=True)
class LineSegment:
    """
    A directed segment between two points.

    Attributes:
        start: First endpoint
        end: Second endpoint
        direction: Unit vector from start to end
        length: Distance from start to end (always > 0)
    """
    start: Point
    end: Point
    direction: Vec3 = field(init=False)
    length: float = field(init=False)

    def __post_init__(self):
        delta = sub(self.end, self.start)
        seg_length = length(delta)
        if seg_length < MIN_SEGMENT_LENGTH:
            raise InvalidInputError(
                f"Zero-length segment from {self.start} to {self.end}"
            )
        object.__setattr__(self, 'direction', norm(delta))
        object.__setattr__(self, 'length', seg_length)

    @property
    def midpoint(self) -> Point:
        return (
            (self.start[0] + self.end[0]) / 2,
            (self.start[1] + self.end[1]) / 2,
            (self.start[2] + self.end[2]) / 2
        )


def intersect_2d(
    line_a: tuple[Point, Point],
    line_b: tuple[Point, Point]
) -> Point:
    """
    Intersect two infinite lines in the XY plane.

    Each line is given by two points on it; Z values are ignored and the
    result has z = 0.

    Args:
        line_a: Two points on the first line
        line_b: Two points on the second line

    Returns:
        Intersection point (x, y, 0.0)

    Raises:
        DegenerateGeometryError: if the lines are parallel or coincident
    """
    (ax1, ay1), (ax2, ay2) = line_a[0][:2], line_a[1][:2]
    (bx1, by1), (bx2, by2) = line_b[0][:2], line_b[1][:2]

    dax, day = ax2 - ax1, ay2 - ay1
    dbx, dby = bx2 - bx1, by2 - by1

    det = dax * dby - day * dbx
    scale = math.hypot(dax, day) * math.hypot(dbx, dby)
    if scale == 0 or abs(det) <= PARALLEL_TOLERANCE * scale:
        raise DegenerateGeometryError(
            f"Lines {line_a} and {line_b} are parallel, no unique intersection"
        )

    # Parameter along line_a: ((b1 - a1) x db) / (da x db)
    t = ((bx1 - ax1) * dby - (by1 - ay1) * dbx) / det
    return (ax1 + t * dax, ay1 + t * day, 0.0)


def _is_collinear(prev_p: Point, curr_p: Point, next_p: Point, tolerance: float) -> bool:
    """Check whether curr_p lies on the line through its neighbours (XY only)."""
    e1 = (curr_p[0] - prev_p[0], curr_p[1] - prev_p[1])
    e2 = (next_p[0] - curr_p[0], next_p[1] - curr_p[1])
    len1 = math.hypot(*e1)
    len2 = math.hypot(*e2)

    # Coincident points collapse a segment to nothing
    if len1 < MIN_SEGMENT_LENGTH or len2 < MIN_SEGMENT_LENGTH:
        return True

    sin_turn = (e1[0] * e2[1] - e1[1] * e2[0]) / (len1 * len2)
    return abs(sin_turn) <= tolerance


def remove_collinear(points, tolerance: float = COLLINEAR_TOLERANCE) -> list[Point]:
    """
    Remove interior points that are collinear with their neighbours.

    Each interior point is tested against the last kept point and the next
    input point. Endpoints are never removed. The pass repeats until nothing
    changes, so filtering an already filtered path returns it unchanged.

    Args:
        points: Sequence of (x, y) or (x, y, z) points
        tolerance: Largest |sin(turn angle)| still treated as straight

    Returns:
        New list of (x, y, z) points
    """
    result = [_as_point(p) for p in points]

    changed = True
    while changed and len(result) > 2:
        changed = False
        kept = [result[0]]
        for i in range(1, len(result) - 1):
            if _is_collinear(kept[-1], result[i], result[i + 1], tolerance):
                changed = True
            else:
                kept.append(result[i])
        kept.append(result[-1])
        result = kept

    return result


def _as_point(p) -> Point:
    if len(p) == 2:
        return (float(p[0]), float(p[1]), 0.0)
    return (float(p[0]), float(p[1]), float(p[2]))
