"""An editable region of interest: a rectangle that can be moved, resized and rotated."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from .geometry import Point, Rect, line_angle


class HandlePosition(Enum):
    """Which part of an ROI a pointer is over."""

    NONE = 0
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_LEFT = 3
    BOTTOM_RIGHT = 4
    ROTATE = 5


_CORNER_NAMES = {
    HandlePosition.TOP_LEFT: "top_left",
    HandlePosition.TOP_RIGHT: "top_right",
    HandlePosition.BOTTOM_LEFT: "bottom_left",
    HandlePosition.BOTTOM_RIGHT: "bottom_right",
}


class RoiItem:
    """A rectangular ROI living in scene coordinates.

    The item has its own local coordinates (``rect`` is given in them), a
    position ``pos`` and a ``rotation`` in degrees about ``transform_origin``.
    Pointer methods take the pointer position in local and scene coordinates
    and return False when the interaction is blocked, True when handled.
    """

    TYPE = 65536 + 1

    def __init__(self, rect: Rect, is_blocked: Callable[[], bool] | None = None):
        self.rect = rect
        self.pos = Point()
        self.rotation = 0.0
        self.transform_origin = rect.center()
        self.selected = False
        self.handle_size = 20.0
        self.rotation_handle_offset = 2.0
        self.current_handle = HandlePosition.NONE
        self._is_blocked = is_blocked

        self._original_rect = rect
        self._press_pos = Point()
        self._original_rotation = 0.0
        self._rotation_origin = Point()
        self._press_angle = 0.0
        self._drag_scene_start: Point | None = None
        self._drag_pos_start = Point()

    @property
    def blocked(self) -> bool:
        return bool(self._is_blocked and self._is_blocked())

    def _square_at(self, center: Point) -> Rect:
        half = self.handle_size / 2
        return Rect(center.x - half, center.y - half, self.handle_size, self.handle_size)

    def handle_rect(self, position: HandlePosition) -> Rect:
        """Square resize handle centred on the given corner."""
        name = _CORNER_NAMES.get(position)
        center = self.rect.corner(name) if name else Point()
        return self._square_at(center)

    def rotate_handle_rect(self) -> Rect:
        """Bounds of the rotation handle just above the top edge's middle."""
        top_center = Point(self.rect.center().x, self.rect.top)
        return self._square_at(top_center - Point(0, self.rotation_handle_offset))

    def bounding_rect(self) -> Rect:
        """Area covering the rectangle and every handle, with a one-unit margin."""
        result = self.rect
        for position in _CORNER_NAMES:
            result = result.united(self.handle_rect(position))
        result = result.united(self.rotate_handle_rect())
        return result.adjusted(-1, -1, 1, 1)

    def hit_rects(self) -> list[Rect]:
        """Areas that react to the pointer; handles count only while selected."""
        rects = [self.rect]
        if self.selected:
            rects.extend(self.handle_rect(position) for position in _CORNER_NAMES)
            rects.append(self.rotate_handle_rect())
        return rects

    def handle_at(self, point: Point) -> HandlePosition:
        """Handle under ``point`` in local coordinates; corners win over the rotation handle."""
        for position in _CORNER_NAMES:
            if self.handle_rect(position).contains(point):
                return position
        if self.rotate_handle_rect().contains(point):
            return HandlePosition.ROTATE
        return HandlePosition.NONE

    def map_to_scene(self, point: Point) -> Point:
        """Local coordinates to scene coordinates."""
        return point.rotated(self.rotation, self.transform_origin) + self.pos

    def press(self, pos: Point, scene_pos: Point) -> bool:
        if self.blocked:
            return False
        self.current_handle = self.handle_at(pos)
        if self.current_handle is HandlePosition.ROTATE:
            self._original_rotation = self.rotation
            self._rotation_origin = self.map_to_scene(self.transform_origin)
            self._press_angle = line_angle(self._rotation_origin, scene_pos)
            self.transform_origin = self.rect.center()
        elif self.current_handle is not HandlePosition.NONE:
            self._original_rect = self.rect
            self._press_pos = pos
        else:
            self.selected = True
            self._drag_scene_start = scene_pos
            self._drag_pos_start = self.pos
        return True

    def move(self, pos: Point, scene_pos: Point) -> bool:
        if self.blocked:
            return False
        handle = self.current_handle
        if handle is HandlePosition.ROTATE:
            angle = line_angle(self._rotation_origin, scene_pos)
            self.rotation = self._original_rotation - (angle - self._press_angle)
        elif handle is not HandlePosition.NONE:
            name = _CORNER_NAMES[handle]
            delta = pos - self._press_pos
            candidate = self._original_rect.with_corner(
                name, self._original_rect.corner(name) + delta
            )
            minimum = self.handle_size * 2
            if candidate.width >= minimum and candidate.height >= minimum:
                self.rect = candidate
        elif self._drag_scene_start is not None:
            self.pos = self._drag_pos_start + (scene_pos - self._drag_scene_start)
        return True

    def release(self) -> bool:
        if self.blocked:
            return False
        if self.current_handle is not HandlePosition.ROTATE:
            center = self.rect.center()
            old_scene = self.map_to_scene(center)
            self.transform_origin = center
            new_scene = self.map_to_scene(center)
            self.pos = self.pos + old_scene - new_scene
        self.current_handle = HandlePosition.NONE
        self._drag_scene_start = None
        return True