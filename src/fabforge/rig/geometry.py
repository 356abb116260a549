"""2D vector and angle helpers used by the rig engine."""

from __future__ import annotations

import math
from typing import NamedTuple

TAU = math.pi * 2


class Vec2(NamedTuple):
    """Immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: object) -> Vec2:  # type: ignore[override]
        if not isinstance(other, tuple):
            return NotImplemented
        return Vec2(self.x + other[0], self.y + other[1])

    def __sub__(self, other: tuple[float, float]) -> Vec2:
        return Vec2(self.x - other[0], self.y - other[1])

    def scaled(self, factor: float) -> Vec2:
        return Vec2(self.x * factor, self.y * factor)

    def length(self) -> float:
        return math.hypot(self.x, self.y)


def to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def from_polar(magnitude: float, angle: float) -> Vec2:
    """Vector of length *magnitude* pointing along *angle* (radians)."""
    return Vec2(magnitude * math.cos(angle), magnitude * math.sin(angle))


def rotate(vec: tuple[float, float], angle: float) -> Vec2:
    """Rotate *vec* counter-clockwise by *angle* radians around the origin."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Vec2(vec[0] * cos_a - vec[1] * sin_a, vec[0] * sin_a + vec[1] * cos_a)


def distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_vec(a: tuple[float, float], b: tuple[float, float], t: float) -> Vec2:
    return Vec2(lerp(a[0], b[0], t), lerp(a[1], b[1], t))


def angle_difference_rad(from_angle: float, to_angle: float) -> float:
    """Signed shortest turn from *from_angle* to *to_angle*, in ``[-pi, pi)``.

    Uses truncated modulo (``math.fmod``), the same as Godot's
    ``lerp_angle``; Python's ``%`` floors and would give a different sign.
    """
    difference = math.fmod(to_angle - from_angle, TAU)
    return math.fmod(2.0 * difference, TAU) - difference


def lerp_angle_rad(t: float, from_angle: float, to_angle: float) -> float:
    """Interpolate between two angles along the shorter arc."""
    return from_angle + angle_difference_rad(from_angle, to_angle) * t
