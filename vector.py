"""
3D vector helpers.

Vectors are plain (x, y, z) tuples. Euclidean semantics throughout;
normalizing a zero vector raises ValueError.
"""

import math


Vec3 = tuple[float, float, float]

# Up vector of the working plane
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def multiply(v: Vec3, s: float) -> Vec3:
    """Scale a vector by a scalar."""
    return (v[0] * s, v[1] * s, v[2] * s)


def neg(v: Vec3) -> Vec3:
    return (-v[0], -v[1], -v[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0]
    )


def length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def distance(a: Vec3, b: Vec3) -> float:
    """Euclidean distance between two points."""
    return length(sub(a, b))


def norm(v: Vec3) -> Vec3:
    """
    Return the unit vector pointing along v.

    Raises:
        ValueError: if v has zero length
    """
    l = length(v)
    if l < 1e-12:
        raise ValueError("Cannot normalize a zero-length vector")
    return (v[0] / l, v[1] / l, v[2] / l)
