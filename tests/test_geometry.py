import math

import pytest

from gooddog.geometry import Camera, Vec2


def test_lerp_endpoints_and_midpoint():
    a, b = Vec2(-3.0, 7.0), Vec2(11.0, 2.0)
    assert a.lerp(b, 0.0) == a
    assert a.lerp(b, 1.0) == b
    mid = a.lerp(b, 0.5)
    expected = (a + b) / 2
    assert mid.x == pytest.approx(expected.x)
    assert mid.y == pytest.approx(expected.y)


def test_normalized_has_unit_length_and_same_direction():
    v = Vec2(3.0, -8.0)
    n = v.normalized()
    assert n.length() == pytest.approx(1.0)
    assert v.x * n.y - v.y * n.x == pytest.approx(0.0)
    assert n.dot(v) > 0


def test_normalized_zero_vector_stays_zero():
    assert Vec2(0.0, 0.0).normalized() == Vec2(0.0, 0.0)


def test_dot_products():
    v = Vec2(2.0, 5.0)
    assert v.dot(Vec2(-5.0, 2.0)) == 0.0
    assert v.dot(v) == pytest.approx(v.length() ** 2)


def test_distance_is_symmetric_and_matches_difference():
    a, b = Vec2(1.0, 2.0), Vec2(-4.0, 9.0)
    assert a.distance(b) == pytest.approx(b.distance(a))
    assert a.distance(b) == pytest.approx((a - b).length())
    assert a.distance(a) == 0.0


def test_operators():
    a = Vec2(1.0, 2.0)
    assert a * 3 == 3 * a
    assert -a + a == Vec2()
    assert tuple(a) == (1.0, 2.0)


def test_identity_camera_maps_points_unchanged():
    cam = Camera()
    p = Vec2(123.0, -45.0)
    assert cam.world_to_screen(p) == p
    assert cam.screen_to_world(p) == p


def test_zoom_scales_around_target():
    cam = Camera(zoom=2.0)
    p = Vec2(3.0, 4.0)
    assert cam.world_to_screen(p) == p * 2.0


def test_target_lands_on_offset():
    cam = Camera(offset=Vec2(640.0, 360.0), target=Vec2(10.0, 20.0), rotation=30.0, zoom=0.5)
    screen = cam.world_to_screen(cam.target)
    assert screen.x == pytest.approx(cam.offset.x)
    assert screen.y == pytest.approx(cam.offset.y)


@pytest.mark.parametrize("point", [Vec2(0.0, 0.0), Vec2(100.0, -50.0), Vec2(-7.5, 300.25)])
def test_screen_world_round_trip(point):
    cam = Camera(offset=Vec2(20.0, 30.0), target=Vec2(-5.0, 8.0), rotation=37.0, zoom=1.75)
    back = cam.screen_to_world(cam.world_to_screen(point))
    assert back.x == pytest.approx(point.x)
    assert back.y == pytest.approx(point.y)


def test_rotation_preserves_distance_from_target():
    cam = Camera(target=Vec2(1.0, 1.0), rotation=73.0)
    p = Vec2(5.0, -2.0)
    screen = cam.world_to_screen(p)
    assert math.hypot(screen.x, screen.y) == pytest.approx(p.distance(cam.target))