"""
Ribbon mesh generation.

Turns a polyline into a flat band of constant width that follows the path,
with mitered inside corners and rounded outside corners.

================================================================================
OVERVIEW
================================================================================

Work happens in the XY plane. Every input point must share one z value
(the elevation); the band is computed at z = 0 and lifted back afterwards.

  1. Filter collinear points so every segment has a real direction.
  2. Offset each center segment to the left and right by `width`.
     left/right are relative to the +Z up vector:
       offset_dir = norm(cross(+Z, direction))
       left  = segment + width * offset_dir
       right = segment - width * offset_dir
  3. At each interior joint intersect the two left offset lines and the two
     right offset lines.
  4. The side whose intersection is closer to that side's current start
     point is the INSIDE corner. Both rectangles snap to the inside
     intersection there. On the OUTSIDE the rectangle edge is the inside
     intersection pushed 2 * width along the segment's outward direction.
  5. The outside gap is closed by two stub quads (one per segment) and a
     cap fan: a circular arc of radius `width` around the path vertex,
     swept from one segment's outward point to the other's.

================================================================================
OUTLINE
================================================================================

The outline is emitted two points per edge, in this order:
  - each rectangle: right side (r1, r2), left side (r3, r0)
  - open paths only: start edge (r0, r1) of the first rectangle and end
    edge (r2, r3) of the last
  - each stub: its outer edge (c2, c3)
  - each fan: every arc chord (r_i, r_i+1)
It is neither deduplicated nor closed into a loop.
"""

from dataclasses import dataclass
from typing import Optional, Union
from collections.abc import Mapping
import math
import numbers

from vector import Z_AXIS, add, cross, multiply, neg, norm, distance
from geometry import (
    Point, LineSegment, InvalidInputError, intersect_2d, remove_collinear
)


Triangle = tuple[Point, Point, Point]

# Nominal fan slice in degrees
DEFAULT_SLICE_ANGLE = 10.0

# Largest z spread still accepted as a planar path
PLANE_TOLERANCE = 1e-9

LEFT = "left"
RIGHT = "right"


@dataclass(frozen=True)
class RibbonOptions:
    """
    Ribbon settings.

    Attributes:
        width: Perpendicular offset on each side of the centerline (> 0)
        closed: Skip capping the start/end edges of the outline
        slice_angle: Nominal angular step of cap fans in degrees
    """
    width: float
    closed: bool = False
    slice_angle: float = DEFAULT_SLICE_ANGLE

    def validate(self) -> list[str]:
        """
        Validate option values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not _is_real(self.width) or not math.isfinite(self.width):
            errors.append(f"width must be a finite number, got {self.width!r}")
        elif self.width <= 0:
            errors.append(f"width must be positive, got {self.width}")

        if not isinstance(self.closed, bool):
            errors.append(f"closed must be a boolean, got {self.closed!r}")

        if not _is_real(self.slice_angle) or not math.isfinite(self.slice_angle):
            errors.append(f"slice_angle must be a finite number, got {self.slice_angle!r}")
        elif not 0 < self.slice_angle <= 180:
            errors.append(f"slice_angle must be in (0, 180], got {self.slice_angle}")

        return errors

    @classmethod
    def from_mapping(cls, data: Mapping) -> 'RibbonOptions':
        """Create from a plain dict such as {"width": 1, "closed": True}."""
        unknown = set(data) - {"width", "closed", "slice_angle"}
        if unknown:
            raise InvalidInputError(f"Unknown ribbon option(s): {', '.join(sorted(unknown))}")
        if "width" not in data:
            raise InvalidInputError("Ribbon option 'width' is required")
        return cls(
            width=data["width"],
            closed=data.get("closed", False),
            slice_angle=data.get("slice_angle", DEFAULT_SLICE_ANGLE),
        )


@dataclass(frozen=True)
class Joint:
    """
    Resolution of the shared vertex between two consecutive segments.

    `inside` names the side ("left" or "right") whose offset lines meet
    first; that side gets the sharp miter, the other one the rounded cap.
    """
    index: int
    vertex: Point
    left_intersection: Point
    right_intersection: Point
    inside: str

    @property
    def inside_intersection(self) -> Point:
        if self.inside == LEFT:
            return self.left_intersection
        return self.right_intersection

    @property
    def outside(self) -> str:
        return RIGHT if self.inside == LEFT else LEFT


@dataclass(frozen=True)
class Rectangle:
    """Main quad body of one path segment."""
    left_start: Point
    right_start: Point
    right_end: Point
    left_end: Point

    @property
    def corners(self) -> tuple[Point, Point, Point, Point]:
        return (self.left_start, self.right_start, self.right_end, self.left_end)

    def __iter__(self):
        return iter(self.corners)

    def __getitem__(self, index):
        return self.corners[index]


@dataclass(frozen=True)
class Stub:
    """Quad filling part of the gap at an outside corner."""
    corners: tuple[Point, Point, Point, Point]

    def __iter__(self):
        return iter(self.corners)

    def __getitem__(self, index):
        return self.corners[index]


@dataclass(frozen=True)
class CapSupport:
    """
    Arc to be fanned at an outside corner.

    The arc is swept counter-clockwise around `pivot` from `arc_start` to
    `arc_end`; both lie `width` away from the pivot.
    """
    arc_end: Point
    pivot: Point
    arc_start: Point

    @property
    def points(self) -> tuple[Point, Point, Point]:
        return (self.arc_end, self.pivot, self.arc_start)


@dataclass(frozen=True)
class CapFan:
    """A tessellated cap: its support and the points along the arc."""
    support: CapSupport
    radial_points: tuple[Point, ...]

    @property
    def num_slices(self) -> int:
        return len(self.radial_points) - 1

    @property
    def triangles(self) -> list[Triangle]:
        pivot = self.support.pivot
        return [
            (self.radial_points[i], self.radial_points[i + 1], pivot)
            for i in range(len(self.radial_points) - 1)
        ]


@dataclass(frozen=True)
class RibbonMesh:
    """
    Result of build_ribbon().

    `triangles` and `outline` are the output proper; the remaining fields
    keep the intermediate shapes for inspection and plotting. All of them
    are tuples, so a built ribbon cannot be altered.
    """
    triangles: tuple[Triangle, ...] = ()
    outline: tuple[Point, ...] = ()
    rectangles: tuple[Rectangle, ...] = ()
    stubs: tuple[Stub, ...] = ()
    cap_supports: tuple[CapSupport, ...] = ()
    fans: tuple[CapFan, ...] = ()
    joints: tuple[Joint, ...] = ()
    width: float = 0.0
    closed: bool = False

    def outline_edges(self) -> list[tuple[Point, Point]]:
        """Pair up outline points into the edges they describe."""
        return [
            (self.outline[i], self.outline[i + 1])
            for i in range(0, len(self.outline) - 1, 2)
        ]


# =============================================================================
# Input validation
# =============================================================================

def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_list(value) -> Optional[list]:
    """List of the items of an ordered container, None for anything else."""
    if isinstance(value, (str, bytes, Mapping)) or not hasattr(value, '__len__'):
        return None
    try:
        return list(value)
    except TypeError:
        return None


def _validate_point(p, index: int) -> Point:
    coords = _as_list(p)
    if coords is None or len(coords) not in (2, 3):
        raise InvalidInputError(f"Point {index} must have 2 or 3 coordinates, got {p!r}")
    for c in coords:
        if not _is_real(c) or not math.isfinite(c):
            raise InvalidInputError(f"Point {index} has a non-numeric or non-finite coordinate: {p!r}")
    z = float(coords[2]) if len(coords) == 3 else 0.0
    return (float(coords[0]), float(coords[1]), z)


def _validate_path(path) -> list[Point]:
    points = _as_list(path)
    if points is None:
        raise InvalidInputError(f"Path must be a sequence of points, got {type(path).__name__}")
    if len(points) < 2:
        raise InvalidInputError(f"Path needs at least 2 points, got {len(points)}")
    return [_validate_point(p, i) for i, p in enumerate(points)]


def _resolve_options(options) -> RibbonOptions:
    if isinstance(options, RibbonOptions):
        resolved = options
    elif isinstance(options, Mapping):
        resolved = RibbonOptions.from_mapping(options)
    else:
        raise InvalidInputError(f"Options must be RibbonOptions or a mapping, got {options!r}")

    errors = resolved.validate()
    if errors:
        raise InvalidInputError("; ".join(errors))
    return resolved


def _working_plane_elevation(points: list[Point]) -> float:
    """Return the shared z of a planar path; non-planar paths are rejected."""
    zs = [p[2] for p in points]
    if max(zs) - min(zs) > PLANE_TOLERANCE:
        raise InvalidInputError(
            f"Path is not planar in XY (z ranges from {min(zs)} to {max(zs)}); "
            "only flat ribbons are supported"
        )
    return zs[0]


# =============================================================================
# Offsetting and joint resolution
# =============================================================================

def _offset_dir(segment: LineSegment) -> Point:
    """Unit vector to the left of the segment, seen from +Z."""
    return norm(cross(Z_AXIS, segment.direction))


def _offset_segments(center_segments: list[LineSegment], width: float):
    left_segments = []
    right_segments = []
    for segment in center_segments:
        offset = _offset_dir(segment)
        left_segments.append(LineSegment(
            add(segment.start, multiply(offset, width)),
            add(segment.end, multiply(offset, width))))
        right_segments.append(LineSegment(
            add(segment.start, multiply(offset, -width)),
            add(segment.end, multiply(offset, -width))))
    return left_segments, right_segments


def _offset_intersections(left_segments, right_segments):
    """Intersections of consecutive left lines and consecutive right lines."""
    result = []
    for i in range(len(left_segments) - 1):
        left_a, left_b = left_segments[i], left_segments[i + 1]
        right_a, right_b = right_segments[i], right_segments[i + 1]
        result.append((
            intersect_2d((left_a.start, left_a.end), (left_b.start, left_b.end)),
            intersect_2d((right_a.start, right_a.end), (right_b.start, right_b.end)),
        ))
    return result


@dataclass(frozen=True)
class _JointResult:
    joint: Joint
    left_end: Point
    right_end: Point
    next_left_start: Point
    next_right_start: Point
    stubs: tuple[Stub, Stub]
    cap: CapSupport


def _resolve_joint(
    index: int,
    segment: LineSegment,
    next_segment: LineSegment,
    left_start: Point,
    right_start: Point,
    left_intersection: Point,
    right_intersection: Point,
    width: float
) -> _JointResult:
    """
    Decide the inside corner of one joint and build its filler geometry.

    out_this / out_next are the outward (outside-corner) offset directions of
    this segment and the next one.
    """
    left_is_shorter = (
        distance(left_intersection, left_start) <
        distance(right_intersection, right_start)
    )

    if left_is_shorter:
        out_this = neg(_offset_dir(segment))
        out_next = neg(_offset_dir(next_segment))
        inside = left_intersection

        left_end = inside
        right_end = add(inside, multiply(out_this, width * 2))
        next_left_start = inside
        next_right_start = add(inside, multiply(out_next, width * 2))

        # Counter-clockwise sweep runs from this segment to the next
        arc_dir, fan_dir = out_next, out_this
    else:
        out_this = _offset_dir(segment)
        out_next = _offset_dir(next_segment)
        inside = right_intersection

        left_end = add(inside, multiply(out_this, width * 2))
        right_end = inside
        next_left_start = add(inside, multiply(out_next, width * 2))
        next_right_start = inside

        arc_dir, fan_dir = out_this, out_next

    vertex = segment.end
    stubs = (
        Stub((
            inside,
            vertex,
            add(vertex, multiply(arc_dir, width)),
            add(inside, multiply(arc_dir, width * 2)),
        )),
        Stub((
            vertex,
            inside,
            add(inside, multiply(fan_dir, width * 2)),
            add(vertex, multiply(fan_dir, width)),
        )),
    )
    cap = CapSupport(
        arc_end=add(vertex, multiply(arc_dir, width)),
        pivot=vertex,
        arc_start=add(vertex, multiply(fan_dir, width)),
    )
    joint = Joint(
        index=index,
        vertex=vertex,
        left_intersection=left_intersection,
        right_intersection=right_intersection,
        inside=LEFT if left_is_shorter else RIGHT,
    )
    return _JointResult(joint, left_end, right_end, next_left_start, next_right_start, stubs, cap)


# =============================================================================
# Cap fan tessellation
# =============================================================================

def _angle_degrees(vx: float, vy: float) -> float:
    """Angle of (vx, vy) in degrees, normalized into [0, 360)."""
    angle = math.atan2(vy, vx) / math.pi * 180
    return angle + 360 if angle < 0 else angle


def tessellate_cap(support: CapSupport, slice_angle: float = DEFAULT_SLICE_ANGLE) -> CapFan:
    """
    Sweep a cap support into a fan of radial points.

    The slice count is floor(sweep / slice_angle) and the sweep is divided
    evenly by that count, so slices are only exactly `slice_angle` wide when
    the sweep is a multiple of it. A sweep narrower than one slice yields a
    single triangle. An end angle below the start angle wraps past 0 degrees;
    equal angles mean an empty sweep, not a full circle, and give a single
    degenerate triangle.

    Args:
        support: Cap to tessellate
        slice_angle: Nominal slice width in degrees

    Returns:
        CapFan whose radial points run from arc_start to arc_end
    """
    pivot = support.pivot
    start_angle = _angle_degrees(support.arc_start[0] - pivot[0], support.arc_start[1] - pivot[1])
    end_angle = _angle_degrees(support.arc_end[0] - pivot[0], support.arc_end[1] - pivot[1])
    if end_angle < start_angle:
        end_angle += 360

    sweep = end_angle - start_angle
    num_slices = math.floor(sweep / slice_angle)

    radial_points = [support.arc_start]
    if num_slices > 1:
        rotation = math.radians(sweep / num_slices)
        px, py = support.arc_start[0] - pivot[0], support.arc_start[1] - pivot[1]
        for i in range(num_slices - 1):
            theta = rotation * (i + 1)
            cos_t = math.cos(theta)
            sin_t = math.sin(theta)
            radial_points.append((
                px * cos_t - py * sin_t + pivot[0],
                py * cos_t + px * sin_t + pivot[1],
                pivot[2]
            ))
    radial_points.append(support.arc_end)

    return CapFan(support=support, radial_points=tuple(radial_points))


# =============================================================================
# Assembly
# =============================================================================

def _lift(p: Point, elevation: float) -> Point:
    return (p[0], p[1], p[2] + elevation)


def _lift_all(points, elevation: float) -> tuple:
    return tuple(_lift(p, elevation) for p in points)


def build_ribbon(path, options: Union[RibbonOptions, Mapping]) -> RibbonMesh:
    """
    Build a ribbon mesh along a polyline.

    Args:
        path: Sequence of at least 2 points, (x, y) or (x, y, z), all with
            the same z
        options: RibbonOptions or a mapping with `width` (required),
            `closed` and `slice_angle`

    Returns:
        RibbonMesh with triangles, outline and the intermediate shapes

    Raises:
        InvalidInputError: bad path, bad point, non-planar path or bad options
        DegenerateGeometryError: offset lines at a joint are parallel
    """
    points = _validate_path(path)
    opts = _resolve_options(options)
    elevation = _working_plane_elevation(points)
    width = opts.width

    # Step 1: flatten to z = 0, drop collinear points, build center segments
    flat = [(p[0], p[1], 0.0) for p in points]
    flat = remove_collinear(flat)
    if len(flat) < 2:
        raise InvalidInputError("Path has fewer than 2 points after filtering")
    center_segments = [LineSegment(flat[i], flat[i + 1]) for i in range(len(flat) - 1)]

    # Step 2: offsets and their intersections at each interior joint
    left_segments, right_segments = _offset_segments(center_segments, width)
    intersections = _offset_intersections(left_segments, right_segments)

    # Step 3: fold over the joints carrying the current rectangle start
    rectangles = []
    stubs = []
    cap_supports = []
    joints = []
    left_start = left_segments[0].start
    right_start = right_segments[0].start
    for i, (left_int, right_int) in enumerate(intersections):
        result = _resolve_joint(
            i, center_segments[i], center_segments[i + 1],
            left_start, right_start, left_int, right_int, width
        )
        rectangles.append(Rectangle(left_start, right_start, result.right_end, result.left_end))
        stubs.extend(result.stubs)
        cap_supports.append(result.cap)
        joints.append(result.joint)
        left_start = result.next_left_start
        right_start = result.next_right_start

    rectangles.append(Rectangle(
        left_start, right_start, right_segments[-1].end, left_segments[-1].end
    ))

    fans = [tessellate_cap(cs, opts.slice_angle) for cs in cap_supports]

    # Step 4: back to the path elevation
    if elevation != 0.0:
        rectangles = [Rectangle(*_lift_all(r.corners, elevation)) for r in rectangles]
        stubs = [Stub(_lift_all(s.corners, elevation)) for s in stubs]
        cap_supports = [CapSupport(*_lift_all(cs.points, elevation)) for cs in cap_supports]
        fans = [
            CapFan(support=cs, radial_points=_lift_all(fan.radial_points, elevation))
            for cs, fan in zip(cap_supports, fans)
        ]
        joints = [
            Joint(
                index=j.index,
                vertex=_lift(j.vertex, elevation),
                left_intersection=_lift(j.left_intersection, elevation),
                right_intersection=_lift(j.right_intersection, elevation),
                inside=j.inside,
            )
            for j in joints
        ]

    return _assemble(rectangles, stubs, cap_supports, fans, joints, width, opts.closed)


def _assemble(rectangles, stubs, cap_supports, fans, joints, width, closed) -> RibbonMesh:
    """Generate triangles and outline from the resolved shapes."""
    triangles = []
    outline = []

    for r in rectangles:
        triangles.append((r[0], r[1], r[2]))
        triangles.append((r[0], r[2], r[3]))
        outline.extend((r[1], r[2], r[3], r[0]))

    if not closed:
        outline.extend((rectangles[0][0], rectangles[0][1]))
        outline.extend((rectangles[-1][2], rectangles[-1][3]))

    # Stubs are convex quads
    for c in stubs:
        triangles.append((c[0], c[1], c[2]))
        triangles.append((c[0], c[2], c[3]))
        outline.extend((c[2], c[3]))

    for fan in fans:
        triangles.extend(fan.triangles)
        for a, b in zip(fan.radial_points, fan.radial_points[1:]):
            outline.extend((a, b))

    return RibbonMesh(
        triangles=tuple(triangles),
        outline=tuple(outline),
        rectangles=tuple(rectangles),
        stubs=tuple(stubs),
        cap_supports=tuple(cap_supports),
        fans=tuple(fans),
        joints=tuple(joints),
        width=width,
        closed=closed,
    )
