"""Plane geometry for scene items: points, rectangles and line angles.

Coordinates follow screen convention: x grows to the right, y grows downward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

CORNERS = ("top_left", "top_right", "bottom_left", "bottom_right")


@dataclass(frozen=True)
class Point:
    """An immutable 2D point."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y)

    def rotated(self, degrees: float, origin: Point | None = None) -> Point:
        """Rotate around ``origin`` by ``degrees``, clockwise on screen."""
        origin = origin if origin is not None else Point()
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        dx, dy = self.x - origin.x, self.y - origin.y
        return Point(origin.x + dx * cos - dy * sin, origin.y + dx * sin + dy * cos)


@dataclass(frozen=True)
class Rect:
    """An immutable rectangle given by its top-left corner and size.

    Width and height may be negative until the rectangle is normalized.
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_points(cls, a: Point, b: Point) -> Rect:
        """Rectangle with ``a`` as top-left and ``b`` as bottom-right corner."""
        return cls(a.x, a.y, b.x - a.x, b.y - a.y)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_null(self) -> bool:
        return self.width == 0 and self.height == 0

    def normalized(self) -> Rect:
        """Equivalent rectangle with non-negative width and height."""
        x, w = (self.x + self.width, -self.width) if self.width < 0 else (self.x, self.width)
        y, h = (self.y + self.height, -self.height) if self.height < 0 else (self.y, self.height)
        return Rect(x, y, w, h)

    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def corner(self, name: str) -> Point:
        """Return the corner called ``top_left``, ``top_right``, ``bottom_left`` or ``bottom_right``."""
        corners = {
            "top_left": Point(self.left, self.top),
            "top_right": Point(self.right, self.top),
            "bottom_left": Point(self.left, self.bottom),
            "bottom_right": Point(self.right, self.bottom),
        }
        try:
            return corners[name]
        except KeyError:
            raise ValueError(f"unknown corner: {name!r}") from None

    def with_corner(self, name: str, point: Point) -> Rect:
        """Move one corner to ``point``, keeping the opposite edges fixed."""
        left, top, right, bottom = self.left, self.top, self.right, self.bottom
        if name == "top_left":
            left, top = point.x, point.y
        elif name == "top_right":
            right, top = point.x, point.y
        elif name == "bottom_left":
            left, bottom = point.x, point.y
        elif name == "bottom_right":
            right, bottom = point.x, point.y
        else:
            raise ValueError(f"unknown corner: {name!r}")
        return Rect(left, top, right - left, bottom - top)

    def united(self, other: Rect) -> Rect:
        """Smallest normalized rectangle holding both; a null rectangle is ignored."""
        if self.is_null:
            return other
        if other.is_null:
            return self
        a, b = self.normalized(), other.normalized()
        left = min(a.left, b.left)
        top = min(a.top, b.top)
        right = max(a.right, b.right)
        bottom = max(a.bottom, b.bottom)
        return Rect(left, top, right - left, bottom - top)

    def adjusted(self, dx1: float, dy1: float, dx2: float, dy2: float) -> Rect:
        """Shift the top-left edges by ``dx1, dy1`` and the bottom-right edges by ``dx2, dy2``."""
        return Rect(
            self.x + dx1,
            self.y + dy1,
            self.width + dx2 - dx1,
            self.height + dy2 - dy1,
        )

    def contains(self, point: Point) -> bool:
        """True if ``point`` lies inside or on the edge; a zero-width or zero-height rectangle holds nothing."""
        r = self.normalized()
        if r.width == 0 or r.height == 0:
            return False
        return r.left <= point.x <= r.right and r.top <= point.y <= r.bottom


def line_angle(p1: Point, p2: Point) -> float:
    """Angle of the line from ``p1`` to ``p2`` in degrees, counter-clockwise on screen, in [0, 360)."""
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    if dx == 0 and dy == 0:
        return 0.0
    theta = math.degrees(math.atan2(-dy, dx))
    if theta < 0:
        theta += 360.0
    if math.isclose(theta, 360.0):
        return 0.0
    return theta