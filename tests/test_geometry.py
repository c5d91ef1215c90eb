import pytest

from roicanvas.geometry import CORNERS, Point, Rect, line_angle


def assert_point(actual, expected):
    assert actual.x == pytest.approx(expected.x, abs=1e-9)
    assert actual.y == pytest.approx(expected.y, abs=1e-9)


def test_point_add_and_sub_are_inverse():
    a = Point(3.5, -2.0)
    b = Point(1.25, 7.0)
    assert (a + b) - b == a


def test_point_add_rejects_other_types():
    with pytest.raises(TypeError):
        Point(1, 2) + (1, 2)


def test_rotate_full_turn_is_identity():
    p = Point(12.0, -4.0)
    origin = Point(3.0, 5.0)
    assert_point(p.rotated(360, origin), p)


def test_rotate_and_back():
    p = Point(7.0, 2.0)
    origin = Point(-1.0, 4.0)
    assert_point(p.rotated(37, origin).rotated(-37, origin), p)


def test_rotate_half_turn_reflects_through_origin():
    p = Point(7.0, 2.0)
    origin = Point(1.0, 1.0)
    r = p.rotated(180, origin)
    assert_point(r + p, origin + origin)


def test_rotation_keeps_distance():
    p = Point(6.0, 8.0)
    origin = Point()
    r = p.rotated(53, origin)
    assert r.x ** 2 + r.y ** 2 == pytest.approx(p.x ** 2 + p.y ** 2)


@pytest.mark.parametrize("degrees", [10, 45, 90, 200])
def test_positive_rotation_decreases_line_angle(degrees):
    origin = Point(2.0, 3.0)
    p = Point(9.0, 1.0)
    before = line_angle(origin, p)
    after = line_angle(origin, p.rotated(degrees, origin))
    assert after == pytest.approx((before - degrees) % 360)


def test_line_angle_values():
    o = Point()
    assert line_angle(o, Point(5, 0)) == pytest.approx(0)
    assert line_angle(o, Point(0, -5)) == pytest.approx(90)
    assert line_angle(o, Point(0, 5)) == pytest.approx(270)


def test_line_angle_of_degenerate_line():
    p = Point(4, 4)
    assert line_angle(p, p) == 0.0


def test_from_points_keeps_corners():
    a, b = Point(1, 2), Point(11, 22)
    r = Rect.from_points(a, b)
    assert r.corner("top_left") == a
    assert r.corner("bottom_right") == b


def test_normalized_makes_sizes_non_negative_and_is_idempotent():
    r = Rect.from_points(Point(10, 20), Point(2, 5)).normalized()
    assert r.width >= 0 and r.height >= 0
    assert r.normalized() == r
    assert r.corner("top_left") == Point(2, 5)
    assert r.corner("bottom_right") == Point(10, 20)


def test_center_is_midpoint_of_corners():
    r = Rect(4, 6, 10, 30)
    c = r.center()
    tl, br = r.corner("top_left"), r.corner("bottom_right")
    assert_point(c + c, tl + br)


def test_unknown_corner_raises():
    with pytest.raises(ValueError):
        Rect(0, 0, 1, 1).corner("middle")
    with pytest.raises(ValueError):
        Rect(0, 0, 1, 1).with_corner("middle", Point())


@pytest.mark.parametrize("name", CORNERS)
def test_with_corner_moves_only_that_corner(name):
    r = Rect(0, 0, 100, 50)
    target = Point(-7, 80)
    moved = r.with_corner(name, target)
    assert moved.corner(name) == target
    opposite = {
        "top_left": "bottom_right",
        "bottom_right": "top_left",
        "top_right": "bottom_left",
        "bottom_left": "top_right",
    }[name]
    assert moved.corner(opposite) == r.corner(opposite)


def test_united_holds_both():
    a = Rect(0, 0, 10, 10)
    b = Rect(20, -5, 3, 4)
    u = a.united(b)
    for rect in (a, b):
        for name in CORNERS:
            assert u.contains(rect.corner(name))


def test_united_ignores_null_rect():
    a = Rect(3, 4, 5, 6)
    assert a.united(Rect()) == a
    assert Rect().united(a) == a


def test_adjusted_round_trip():
    r = Rect(1, 2, 30, 40)
    assert r.adjusted(-1, -2, 3, 4).adjusted(1, 2, -3, -4) == r


def test_adjusted_moves_edges():
    r = Rect(1, 2, 30, 40)
    a = r.adjusted(-1, -1, 1, 1)
    assert a.left == r.left - 1 and a.top == r.top - 1
    assert a.right == r.right + 1 and a.bottom == r.bottom + 1


def test_contains_edges_and_outside():
    r = Rect(0, 0, 10, 10)
    assert r.contains(Point(10, 10))
    assert r.contains(Point(0, 5))
    assert not r.contains(Point(10.5, 5))


def test_contains_negative_size():
    r = Rect(10, 10, -10, -10)
    assert r.contains(Point(5, 5))


def test_empty_rect_contains_nothing():
    assert not Rect(0, 0, 0, 10).contains(Point(0, 5))