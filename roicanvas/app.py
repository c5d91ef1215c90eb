"""Desktop application: a window with a load button and an ROI-editing image view."""

from __future__ import annotations

import argparse
import json
import logging
import math
import os
from functools import partial
from pathlib import Path
from typing import Any, Callable

from PIL import Image
from platformdirs import user_config_path

from .editor import Cursor, InteractMode, Key, MouseButton, NoImageError, RoiEditor
from .geometry import CORNERS, Point
from .roi import HandlePosition, RoiItem

logger = logging.getLogger(__name__)

LAST_DIRECTORY_KEY = "lastDirectory"
IMAGE_FILE_TYPES = [("Image Files", "*.png *.jpg *.jpeg *.bmp")]

_CTRL_MASK = 0x0004
_BUTTONS = {1: MouseButton.LEFT, 2: MouseButton.MIDDLE, 3: MouseButton.RIGHT}
_KEYS = {
    "Escape": Key.ESCAPE,
    "Delete": Key.DELETE,
    "a": Key.A,
    "A": Key.A,
    "Control_L": Key.CONTROL,
    "Control_R": Key.CONTROL,
}
_TK_CURSORS = {
    Cursor.ARROW: "arrow",
    Cursor.CLOSED_HAND: "fleur",
    Cursor.CROSS: "crosshair",
}
_OUTLINE_ORDER = ("top_left", "top_right", "bottom_right", "bottom_left")


class ImageLoadError(OSError):
    """Raised when a file cannot be read as an image."""


class Settings:
    """Small persistent key/value store kept as a JSON file."""

    def __init__(self, path: str | os.PathLike[str] | None = None):
        if path is None:
            path = user_config_path("roicanvas") / "settings.json"
        self.path = Path(path)
        self._values: dict[str, Any] = {}
        try:
            with self.path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return
        if isinstance(data, dict):
            self._values = data
        else:
            logger.warning("Ignoring settings file %s: not a mapping", self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and write the file at once."""
        self._values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(self._values, fh, indent=2, ensure_ascii=False)


def remember_directory(settings: Settings, file_path: str) -> str | None:
    """Store the absolute directory of ``file_path`` as the last used one.

    Returns the stored directory, or None when ``file_path`` is empty.
    """
    if not file_path:
        return None
    directory = os.path.dirname(os.path.abspath(file_path))
    settings.set(LAST_DIRECTORY_KEY, directory)
    return directory


def _ask_open_filename_tk(**options: Any) -> str:
    from tkinter import filedialog

    return filedialog.askopenfilename(**options)


class ImageRoiApp:
    """Main window: a load button over an image view on which ROIs are edited.

    With ``root`` set to None no widgets are built, which keeps the loading and
    file-choosing logic usable without a display.
    """

    def __init__(self, root: Any = None, settings: Settings | None = None):
        self.root = root
        self.settings = settings if settings is not None else Settings()
        self.editor = RoiEditor()
        self.editor.on_load_image = self.choose_image
        self.image: Image.Image | None = None
        self.ask_open_filename: Callable[..., Any] = _ask_open_filename_tk
        self._canvas: Any = None
        self._photo: Any = None
        if root is not None:
            self._build_ui()

    # files ------------------------------------------------------------------

    def choose_image(self) -> str:
        """Ask the user for an image file and load it; return its path or "" if cancelled."""
        last_directory = self.settings.get(LAST_DIRECTORY_KEY, "")
        chosen = self.ask_open_filename(
            parent=self.root,
            title="Choose image",
            initialdir=last_directory,
            filetypes=IMAGE_FILE_TYPES,
        )
        file_path = chosen if isinstance(chosen, str) else ""
        if not file_path:
            return ""
        remember_directory(self.settings, file_path)
        logger.debug("Chosen image: %s", file_path)
        self.load_image(file_path)
        return file_path

    def load_image(self, path: str | os.PathLike[str]) -> tuple[int, int]:
        """Read an image file, show it fitted in the view and return its size."""
        try:
            with Image.open(path) as img:
                img.load()
                image = img if img.mode in ("RGB", "RGBA", "L") else img.convert("RGBA")
                image = image.copy()
        except OSError as exc:
            raise ImageLoadError(f"failed to load image: {path}") from exc
        self.image = image
        self.editor.load_image(image.width, image.height)
        self._redraw()
        return image.size

    # widgets -----------------------------------------------------------------

    def _build_ui(self) -> None:
        import tkinter as tk

        self.root.title("Image ROI")
        button = tk.Button(self.root, text="Load image", command=self._on_load_clicked)
        button.pack(side=tk.TOP, anchor="w")
        canvas = tk.Canvas(self.root, background="#222222", highlightthickness=0, width=800, height=600)
        canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self._canvas = canvas

        canvas.bind("<ButtonPress>", self._on_press)
        canvas.bind("<ButtonRelease>", self._on_release)
        canvas.bind("<Motion>", self._on_motion)
        canvas.bind("<MouseWheel>", self._on_wheel)
        canvas.bind("<Button-4>", partial(self._on_wheel_linux, 120))
        canvas.bind("<Button-5>", partial(self._on_wheel_linux, -120))
        canvas.bind("<KeyPress>", self._on_key_press)
        canvas.bind("<KeyRelease>", self._on_key_release)
        canvas.bind("<Configure>", self._on_configure)
        canvas.focus_set()

    def _on_load_clicked(self) -> None:
        try:
            self.choose_image()
        except ImageLoadError as exc:
            logger.debug("%s", exc)

    def _on_configure(self, event: Any) -> None:
        first = self.editor.view_width == 0 or self.editor.view_height == 0
        if first:
            self.editor.fit_in_view(event.width, event.height)
        else:
            self.editor.view_width = float(event.width)
            self.editor.view_height = float(event.height)
        self._redraw()

    def _on_press(self, event: Any) -> None:
        button = _BUTTONS.get(event.num)
        if button is None:
            return
        self._canvas.focus_set()
        self.editor.mouse_press(button, Point(event.x, event.y), ctrl=bool(event.state & _CTRL_MASK))
        self._redraw()

    def _on_motion(self, event: Any) -> None:
        if self.editor.mouse_move(Point(event.x, event.y)):
            self._redraw()

    def _on_release(self, event: Any) -> None:
        button = _BUTTONS.get(event.num)
        if button is None:
            return
        self.editor.mouse_release(button, Point(event.x, event.y))
        self._redraw()
        if button is MouseButton.RIGHT:
            self._show_menu(event.x_root, event.y_root)

    def _on_wheel(self, event: Any) -> None:
        if self.editor.wheel(event.delta, ctrl=bool(event.state & _CTRL_MASK)):
            self._redraw()

    def _on_wheel_linux(self, delta: int, event: Any) -> None:
        if self.editor.wheel(delta, ctrl=bool(event.state & _CTRL_MASK)):
            self._redraw()

    def _on_key_press(self, event: Any) -> None:
        key = _KEYS.get(event.keysym, Key.OTHER)
        if self.editor.key_press(key):
            self._redraw()

    def _on_key_release(self, event: Any) -> None:
        key = _KEYS.get(event.keysym, Key.OTHER)
        if self.editor.key_release(key):
            self._redraw()

    def _show_menu(self, x: int, y: int) -> None:
        import tkinter as tk

        menu = tk.Menu(self.root, tearoff=0)
        for action in self.editor.context_menu:
            menu.add_command(label=action.label, command=partial(self._run_menu_action, action))
        try:
            menu.tk_popup(x, y)
        finally:
            menu.grab_release()

    def _run_menu_action(self, action: Any) -> None:
        logger.debug("Menu action chosen: %s", action.label)
        try:
            self.editor.apply_menu_action(action)
        except (NoImageError, ImageLoadError) as exc:
            logger.debug("%s", exc)
        self._redraw()

    # drawing -----------------------------------------------------------------

    def _to_view(self, point: Point) -> tuple[float, float]:
        ed = self.editor
        return point.x * ed.scale - ed.scroll.x, point.y * ed.scale - ed.scroll.y

    def _redraw(self) -> None:
        canvas = self._canvas
        if canvas is None:
            return
        canvas.delete("all")
        if self.image is not None and self.editor.has_image():
            self._draw_image()
        for roi in self.editor.rois:
            self._draw_roi(roi)
        draft = self.editor.draft
        if draft is not None:
            x0, y0 = self._to_view(Point(draft.left, draft.top))
            x1, y1 = self._to_view(Point(draft.right, draft.bottom))
            canvas.create_rectangle(x0, y0, x1, y1, outline="red", width=2, dash=(4, 2))
        canvas.configure(cursor=_TK_CURSORS[self.editor.cursor])

    def _draw_image(self) -> None:
        from PIL import ImageTk

        ed = self.editor
        image = self.image
        scale = ed.scale
        x0 = max(0.0, ed.scroll.x / scale)
        y0 = max(0.0, ed.scroll.y / scale)
        x1 = min(float(image.width), (ed.scroll.x + ed.view_width) / scale)
        y1 = min(float(image.height), (ed.scroll.y + ed.view_height) / scale)
        if x1 <= x0 or y1 <= y0:
            return
        box = (math.floor(x0), math.floor(y0), math.ceil(x1), math.ceil(y1))
        region = image.crop(box)
        size = (
            max(1, round((box[2] - box[0]) * scale)),
            max(1, round((box[3] - box[1]) * scale)),
        )
        shown = region.resize(size, Image.Resampling.NEAREST)
        self._photo = ImageTk.PhotoImage(shown)
        vx, vy = self._to_view(Point(box[0], box[1]))
        self._canvas.create_image(vx, vy, image=self._photo, anchor="nw")

    def _polygon(self, roi: RoiItem, corners: list[Point]) -> list[float]:
        coords: list[float] = []
        for corner in corners:
            coords.extend(self._to_view(roi.map_to_scene(corner)))
        return coords

    def _draw_roi(self, roi: RoiItem) -> None:
        canvas = self._canvas
        outline = self._polygon(roi, [roi.rect.corner(name) for name in _OUTLINE_ORDER])
        if not roi.selected:
            canvas.create_polygon(outline, outline="#C68EFD", fill="", dash=(4, 2))
            return
        canvas.create_polygon(outline, outline="#EC5228", fill="", width=2, dash=(4, 2))
        cx, cy = self._to_view(roi.map_to_scene(roi.rect.center()))
        canvas.create_oval(cx - 5, cy - 5, cx + 5, cy + 5, outline="red", width=2)
        for position in (
            HandlePosition.TOP_LEFT,
            HandlePosition.TOP_RIGHT,
            HandlePosition.BOTTOM_LEFT,
            HandlePosition.BOTTOM_RIGHT,
        ):
            handle = roi.handle_rect(position)
            coords = self._polygon(roi, [handle.corner(name) for name in _OUTLINE_ORDER])
            canvas.create_polygon(coords, outline="black", fill="#8F87F1", stipple="gray50")
        rotate = roi.rotate_handle_rect()
        hx, hy = self._to_view(roi.map_to_scene(rotate.center()))
        radius = rotate.width / 2 * self.editor.scale
        canvas.create_oval(hx - radius, hy - radius, hx + radius, hy + radius, outline="black")
        tx, ty = self._to_view(roi.map_to_scene(Point(roi.rect.center().x, roi.rect.top)))
        canvas.create_line(tx, ty, hx, hy, fill="blue", dash=(4, 2))


def main(argv: list[str] | None = None) -> int:
    """Open the application window, optionally with an image already loaded."""
    parser = argparse.ArgumentParser(prog="roicanvas", description="Draw and edit ROIs on an image.")
    parser.add_argument("image", nargs="?", help="image file to open")
    parser.add_argument("--settings", help="settings file to use")
    args = parser.parse_args(argv)

    import tkinter as tk

    root = tk.Tk()
    app = ImageRoiApp(root, Settings(args.settings))
    if args.image:
        try:
            app.load_image(args.image)
        except ImageLoadError as exc:
            logger.error("%s", exc)
    root.mainloop()
    return 0


__all__ = [
    "CORNERS",
    "ImageLoadError",
    "ImageRoiApp",
    "InteractMode",
    "Settings",
    "main",
    "remember_directory",
]