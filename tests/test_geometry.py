"""Tests for rig.geometry vector and angle helpers."""

import math

import pytest

from fabforge.rig.geometry import (
    Vec2,
    angle_difference_rad,
    distance,
    from_polar,
    lerp,
    lerp_angle_rad,
    lerp_vec,
    rotate,
    to_degrees,
    to_radians,
)


def test_degree_radian_conversion():
    assert to_radians(180) == pytest.approx(math.pi)
    assert to_degrees(math.pi / 2) == pytest.approx(90)
    assert to_degrees(to_radians(-45)) == pytest.approx(-45)


def test_vec2_arithmetic():
    a = Vec2(1, 2)
    b = Vec2(3, -1)
    assert a + b == Vec2(4, 1)
    assert b - a == Vec2(2, -3)
    assert a.scaled(2) == Vec2(2, 4)
    assert Vec2(3, 4).length() == 5


def test_from_polar_and_rotate():
    v = from_polar(2, math.pi / 2)
    assert v.x == pytest.approx(0, abs=1e-12)
    assert v.y == pytest.approx(2)

    r = rotate((1, 0), math.pi / 2)
    assert r.x == pytest.approx(0, abs=1e-12)
    assert r.y == pytest.approx(1)


def test_distance_and_lerp():
    assert distance((0, 0), (3, 4)) == 5
    assert lerp(2, 4, 0.25) == 2.5
    assert lerp_vec((0, 0), (10, -10), 0.5) == Vec2(5, -5)


def test_angle_difference_takes_short_way():
    assert angle_difference_rad(to_radians(350), to_radians(10)) == pytest.approx(to_radians(20))
    assert angle_difference_rad(to_radians(10), to_radians(350)) == pytest.approx(to_radians(-20))


def test_lerp_angle_wraps_across_zero():
    mid = lerp_angle_rad(0.5, to_radians(350), to_radians(10))
    assert math.cos(mid) == pytest.approx(1)
    assert math.sin(mid) == pytest.approx(0, abs=1e-12)


def test_lerp_angle_half_turn_is_a_quarter_turn():
    mid = lerp_angle_rad(0.5, 0, math.pi)
    assert abs(to_degrees(mid)) == pytest.approx(90)


@pytest.mark.parametrize("t", [0.0, 0.25, 1.0])
def test_lerp_angle_without_wrap_is_linear(t: float):
    assert lerp_angle_rad(t, 0.2, 1.2) == pytest.approx(0.2 + t)
