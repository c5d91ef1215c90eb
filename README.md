# roicanvas

A small desktop image viewer for marking rectangular regions of interest
(ROIs) on a picture. Open an image, drag out rectangles on it, then move,
resize and rotate them with the mouse.

The window is built with tkinter, which must be available in your Python
installation. Images are read with Pillow.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running

```
roicanvas [IMAGE] [--settings FILE]
```

This opens a window with a "Load image" button above the image view.

* `IMAGE` is an image file to show at start-up. If it cannot be read, an
  error is logged and the window opens empty.
* `--settings FILE` uses the given JSON file for settings. Without it the
  settings live in `settings.json` in the user configuration directory for
  `roicanvas`.

The file dialog shows PNG, JPEG and BMP files. It opens in the directory of
the last image you chose, which is kept in the settings file under
`lastDirectory` and so remembered between sessions.

## Working with the canvas

| Input | Effect |
| --- | --- |
| `A` | Start drawing a new ROI (only when no other mode is active) |
| Left press, drag and release while drawing | Span the new ROI from the first point to the pointer |
| `Delete` | Remove the selected ROIs |
| `Escape` | Leave the current mode and drop an unfinished ROI |
| Ctrl + left drag | Pan the view |
| Ctrl + mouse wheel | Zoom in (×1.15) or out (×0.85) about the view centre |
| Right click | Context menu |

When drawing, a rectangle narrower or shorter than 10 image pixels is thrown
away when you let go of the mouse. Releasing on the very point where you
pressed cancels that rectangle and leaves you in drawing mode.

Clicking inside an ROI selects it; clicking on empty canvas clears the
selection. A selected ROI shows a square handle on each corner and a round
rotation handle just above the middle of its top edge:

* drag a corner handle to resize. A resize that would make the ROI narrower
  or shorter than two handle widths (40 units) is refused;
* drag the rotation handle to turn the ROI about its centre;
* drag inside the ROI to move it.

The right-click menu depends on what is on the canvas:

* with ROIs selected: "Save ROIs" and "Delete selected ROIs";
* with an image loaded: "Add ROI", "Load Image", "Remove Image" and
  "Reset transform" (fit the whole image into the view again);
* with an empty canvas: "Load Image".

## What it does not do

ROIs exist only while the window is open. The "Save ROIs" menu entry is
shown but does nothing: there is no way to write ROIs to a file or read
them back.

## Using the pieces in code

The editing logic does not depend on any window toolkit, so it can be
driven directly, for example from tests or a different front end.

* `roicanvas.geometry` provides `Point`, `Rect` and `line_angle`.
* `roicanvas.roi` provides `RoiItem` and `HandlePosition`: one editable
  rectangle with its handles, hit testing, and the `press`, `move` and
  `release` steps of resizing, rotating and moving it.
* `roicanvas.editor` provides `RoiEditor`, which holds the image size, the
  view transform, the interaction mode and the list of ROIs, and reacts to
  `mouse_press`, `mouse_move`, `mouse_release`, `wheel`, `key_press`,
  `key_release` and `apply_menu_action`. It raises `NoImageError` when an
  action needs an image and none is loaded.
* `roicanvas.app` provides `ImageRoiApp`, the window; `Settings`, a small
  persistent key/value store kept as JSON; `remember_directory`; and `main`,
  which starts the program.

```python
from roicanvas.editor import Key, MouseButton, RoiEditor
from roicanvas.geometry import Point

editor = RoiEditor()
editor.fit_in_view(800, 600)
editor.load_image(640, 480)

editor.key_press(Key.A)
editor.mouse_press(MouseButton.LEFT, Point(100, 100))
editor.mouse_move(Point(300, 250))
editor.mouse_release(MouseButton.LEFT, Point(300, 250))

print(len(editor.rois), editor.rois[0].rect)
```