from __future__ import annotations

import math

from pygame.math import Vector2

TAU = math.pi * 2.0


def map_range(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    """Rescale ``value`` from [in_min, in_max] onto [out_min, out_max], clamping outside the input range.

    ``out_min`` may be greater than ``out_max``; the map then decreases with ``value``.
    """
    if value < in_min:
        return out_min
    if value > in_max:
        return out_max
    rel = (value - in_min) / (in_max - in_min)
    return out_min + rel * (out_max - out_min)


def heading(vector: Vector2) -> float:
    return math.atan2(vector.y, vector.x)


def from_angle(angle: float, length: float = 1.0) -> Vector2:
    return Vector2(math.cos(angle) * length, math.sin(angle) * length)


def rotated(vector: Vector2, angle: float) -> Vector2:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Vector2(vector.x * cos_a - vector.y * sin_a, vector.x * sin_a + vector.y * cos_a)


def angle_between(a: Vector2, b: Vector2) -> float:
    """Signed angle in [-pi, pi] that turns ``a`` onto ``b``."""
    cross = a.x * b.y - a.y * b.x
    dot = a.x * b.x + a.y * b.y
    return math.atan2(cross, dot)


def wrap_angle(angle: float) -> float:
    wrapped = angle % TAU
    # tiny negative inputs round up to exactly TAU
    if wrapped >= TAU:
        return 0.0
    return wrapped


def scale_to(vector: Vector2, length: float) -> Vector2:
    magnitude_sq = vector.length_squared()
    if magnitude_sq == 0.0:
        return Vector2()
    return vector * (length / math.sqrt(magnitude_sq))
