"""Interaction model of an image view on which ROIs are drawn, selected and edited.

The editor keeps the scene (an image area and a list of ROIs), the view
transform (scale and scroll offset) and the current interaction mode. It is
driven by plain pointer, wheel and key calls so any toolkit can host it.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from .geometry import Point, Rect
from .roi import RoiItem

ZOOM_IN_FACTOR = 1.15
ZOOM_OUT_FACTOR = 0.85
MIN_ROI_SIZE = 10.0
_FIT_MARGIN = 2.0


class NoImageError(RuntimeError):
    """Raised when an operation needs an image and none is loaded."""


class InteractMode(Enum):
    """What the pointer currently does in the view."""

    NONE = "None"
    ZOOM = "Zoom"
    PAN = "Pan"
    DRAW_ROI = "Draw ROI"

    def __str__(self) -> str:
        return self.value


class MouseButton(Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class Key(Enum):
    ESCAPE = "escape"
    DELETE = "delete"
    A = "a"
    CONTROL = "control"
    OTHER = "other"


class Cursor(Enum):
    ARROW = "arrow"
    CLOSED_HAND = "closed_hand"
    CROSS = "cross"


class MenuAction(Enum):
    """Entries of the context menu, valued by their labels."""

    ADD_ROI = "Add ROI"
    DELETE_ROI = "Delete selected ROIs"
    SAVE_ROI = "Save ROIs"
    LOAD_IMAGE = "Load Image"
    REMOVE_IMAGE = "Remove Image"
    RESET_TRANSFORM = "Reset transform"

    @property
    def label(self) -> str:
        return self.value


class RoiEditor:
    """Scene, view transform and interaction state of an ROI-editing view.

    View coordinates map to scene coordinates as ``(view + scroll) / scale``.
    """

    def __init__(self) -> None:
        self.image_rect: Rect | None = None
        self._bounding = Rect()
        self.rois: list[RoiItem] = []

        self.view_width = 0.0
        self.view_height = 0.0
        self.scale = 1.0
        self.scroll = Point()

        self.mode = InteractMode.NONE
        self.previous_mode = InteractMode.NONE
        self.cursor = Cursor.ARROW
        self.scene_interacting = False

        self._has_panned = False
        self._last_pan: Point | None = None

        self.draft: Rect | None = None
        self._draft_start: Point | None = None

        self._grabber: RoiItem | None = None
        self.context_menu: tuple[MenuAction, ...] = ()
        self.on_load_image: Callable[[], None] | None = None

    # image and view -------------------------------------------------------

    def load_image(self, width: float, height: float) -> None:
        """Show an image of the given size and fit it into the view."""
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid image size: {width}x{height}")
        self.image_rect = Rect(0, 0, width, height)
        self._bounding = self.image_rect
        self._fit()

    def remove_image(self) -> None:
        if not self.has_image():
            raise NoImageError("no image to remove")
        self.image_rect = None
        self._fit()

    def has_image(self) -> bool:
        return self.image_rect is not None

    def fit_in_view(self, view_width: float, view_height: float) -> None:
        """Set the view size and scale the last image area to fit, keeping its aspect ratio."""
        self.view_width = float(view_width)
        self.view_height = float(view_height)
        self._fit()

    def _view_center(self) -> Point:
        return Point(self.view_width / 2, self.view_height / 2)

    def _fit(self) -> None:
        rect = self._bounding.normalized()
        if rect.width <= 0 or rect.height <= 0:
            return
        avail_w = self.view_width - 2 * _FIT_MARGIN
        avail_h = self.view_height - 2 * _FIT_MARGIN
        if avail_w <= 0 or avail_h <= 0:
            return
        self.scale = min(avail_w / rect.width, avail_h / rect.height)
        self._center_on(rect.center())

    def _center_on(self, scene_point: Point) -> None:
        center = self._view_center()
        self.scroll = Point(
            scene_point.x * self.scale - center.x,
            scene_point.y * self.scale - center.y,
        )

    def map_to_scene(self, pos: Point) -> Point:
        """View coordinates to scene coordinates."""
        return Point((pos.x + self.scroll.x) / self.scale, (pos.y + self.scroll.y) / self.scale)

    # ROIs -----------------------------------------------------------------

    def start_draw_roi(self) -> None:
        """Enter drawing mode; only possible while idle."""
        if self.mode is InteractMode.NONE:
            for roi in self.rois:
                roi.selected = False
            self.change_mode(InteractMode.DRAW_ROI)

    def delete_selected(self) -> int:
        """Remove every selected ROI and return how many were removed."""
        kept = [roi for roi in self.rois if not roi.selected]
        removed = len(self.rois) - len(kept)
        if self._grabber is not None and self._grabber.selected:
            self._grabber = None
        self.rois = kept
        return removed

    def _is_interacting(self) -> bool:
        return self.scene_interacting

    @staticmethod
    def _to_local(roi: RoiItem, scene_point: Point) -> Point:
        return (scene_point - roi.pos).rotated(-roi.rotation, roi.transform_origin)

    def _item_at(self, scene_point: Point) -> RoiItem | None:
        for roi in reversed(self.rois):
            local = self._to_local(roi, scene_point)
            if any(area.contains(local) for area in roi.hit_rects()):
                return roi
        return None

    # modes ----------------------------------------------------------------

    def change_mode(self, mode: InteractMode) -> None:
        if mode is self.mode:
            return
        self.previous_mode = self.mode
        self.mode = mode
        self._update_mode_state()

    def back_to_previous_mode(self) -> None:
        if self.previous_mode is self.mode:
            return
        self.mode, self.previous_mode = self.previous_mode, self.mode
        self._update_mode_state()

    def _update_mode_state(self) -> None:
        cursors = {
            InteractMode.NONE: Cursor.ARROW,
            InteractMode.PAN: Cursor.CLOSED_HAND,
            InteractMode.DRAW_ROI: Cursor.CROSS,
        }
        self.cursor = cursors.get(self.mode, self.cursor)
        self.scene_interacting = self.mode is not InteractMode.NONE

    # pointer ---------------------------------------------------------------

    def mouse_press(self, button: MouseButton, pos: Point, ctrl: bool = False) -> bool:
        """Handle a button press at view position ``pos``; True if consumed."""
        if button is not MouseButton.LEFT:
            return False
        if ctrl:
            self._has_panned = False
            self._last_pan = pos
            self.change_mode(InteractMode.PAN)
        elif self.mode is InteractMode.DRAW_ROI:
            start = self.map_to_scene(pos)
            self._draft_start = start
            self.draft = Rect(start.x, start.y, 0, 0)
            return True
        return self._forward_press(pos, ctrl)

    def _forward_press(self, pos: Point, ctrl: bool) -> bool:
        scene = self.map_to_scene(pos)
        roi = self._item_at(scene)
        if roi is None:
            if not ctrl:
                for other in self.rois:
                    other.selected = False
            return False
        if not roi.press(self._to_local(roi, scene), scene):
            return False
        self._grabber = roi
        if roi.selected and not ctrl:
            for other in self.rois:
                if other is not roi:
                    other.selected = False
        return True

    def mouse_move(self, pos: Point) -> bool:
        """Handle pointer motion to view position ``pos``; True if consumed."""
        if self.mode is InteractMode.PAN:
            self._has_panned = True
            if self._last_pan is not None:
                delta = pos - self._last_pan
                if delta != Point():
                    self.scroll = self.scroll - delta
                    self._last_pan = pos
            self._forward_move(pos)
            return True
        if self.mode is InteractMode.DRAW_ROI:
            if self._draft_start is not None:
                current = self.map_to_scene(pos)
                self.draft = Rect.from_points(self._draft_start, current).normalized()
            return True
        return self._forward_move(pos)

    def _forward_move(self, pos: Point) -> bool:
        if self._grabber is None:
            return False
        scene = self.map_to_scene(pos)
        return self._grabber.move(self._to_local(self._grabber, scene), scene)

    def mouse_release(self, button: MouseButton, pos: Point) -> bool:
        """Handle a button release; a right release prepares ``context_menu``."""
        if button is MouseButton.RIGHT:
            self.context_menu = self.menu_actions()
            return False
        if button is MouseButton.LEFT and self._left_released(pos):
            return True
        if self._grabber is None:
            return False
        grabber, self._grabber = self._grabber, None
        return grabber.release()

    def _left_released(self, pos: Point) -> bool:
        if self.mode is InteractMode.PAN:
            self._last_pan = None
            self.back_to_previous_mode()
            return self._has_panned
        if self.mode is InteractMode.DRAW_ROI:
            if self._draft_start is None or self.draft is None:
                return True
            if self.map_to_scene(pos) == self._draft_start:
                self._clear_draft()
                return True
            roi = RoiItem(self.draft, is_blocked=self._is_interacting)
            self._clear_draft()
            if roi.rect.width >= MIN_ROI_SIZE and roi.rect.height >= MIN_ROI_SIZE:
                self.rois.append(roi)
            self.change_mode(InteractMode.NONE)
            return True
        return False

    def _clear_draft(self) -> None:
        self.draft = None
        self._draft_start = None

    def wheel(self, delta: float, ctrl: bool = False) -> bool:
        """Zoom about the view centre when Ctrl is held; otherwise leave it to the view."""
        if not ctrl:
            return False
        self.change_mode(InteractMode.ZOOM)
        factor = ZOOM_IN_FACTOR if delta > 0 else ZOOM_OUT_FACTOR
        anchor = self.map_to_scene(self._view_center())
        self.scale *= factor
        self._center_on(anchor)
        self.back_to_previous_mode()
        return True

    # keys ------------------------------------------------------------------

    def key_press(self, key: Key) -> bool:
        accepted = False
        if key is Key.ESCAPE:
            self._clear_draft()
            self.change_mode(InteractMode.NONE)
            accepted = True
        if self.mode is InteractMode.NONE:
            if key is Key.DELETE:
                self.delete_selected()
                accepted = True
            elif key is Key.A:
                self.start_draw_roi()
                accepted = True
        return accepted

    def key_release(self, key: Key) -> bool:
        if key is Key.CONTROL and self.mode is InteractMode.PAN:
            self._last_pan = None
            self.change_mode(InteractMode.NONE)
            return True
        return False

    # context menu -----------------------------------------------------------

    def menu_actions(self) -> tuple[MenuAction, ...]:
        """Context menu entries for the current state."""
        if any(roi.selected for roi in self.rois):
            return (MenuAction.SAVE_ROI, MenuAction.DELETE_ROI)
        if self.has_image():
            return (
                MenuAction.ADD_ROI,
                MenuAction.LOAD_IMAGE,
                MenuAction.REMOVE_IMAGE,
                MenuAction.RESET_TRANSFORM,
            )
        return (MenuAction.LOAD_IMAGE,)

    def apply_menu_action(self, action: MenuAction) -> bool:
        """Carry out a context menu entry; False if it did nothing."""
        if action is MenuAction.ADD_ROI:
            self.start_draw_roi()
            return True
        if action is MenuAction.DELETE_ROI:
            self.delete_selected()
            return True
        if action is MenuAction.LOAD_IMAGE:
            if self.on_load_image is None:
                return False
            self.on_load_image()
            return True
        if action is MenuAction.REMOVE_IMAGE:
            self.remove_image()
            return True
        if action is MenuAction.RESET_TRANSFORM:
            if not self.has_image():
                raise NoImageError("no image to reset")
            self._fit()
            return True
        return False