import os
from pathlib import Path

import pytest
from PIL import Image

from roicanvas.app import (
    LAST_DIRECTORY_KEY,
    ImageLoadError,
    ImageRoiApp,
    Settings,
    main,
    remember_directory,
)
from roicanvas.editor import MenuAction
from roicanvas.geometry import Rect


@pytest.fixture
def settings(tmp_path):
    return Settings(tmp_path / "conf" / "settings.json")


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "images" / "sample.png"
    path.parent.mkdir()
    Image.new("RGB", (40, 30), (10, 20, 30)).save(path)
    return path


class _Dialog:
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def __call__(self, **options):
        self.calls.append(options)
        return self.answer


def test_settings_default_when_missing(settings):
    assert settings.get(LAST_DIRECTORY_KEY, "") == ""
    assert settings.get("unknown") is None


def test_settings_persist_across_instances(tmp_path):
    path = tmp_path / "conf" / "settings.json"
    first = Settings(path)
    first.set("lastDirectory", "/some/dir")
    second = Settings(path)
    assert second.get("lastDirectory") == "/some/dir"
    assert path.exists()


def test_settings_ignores_corrupt_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    store = Settings(path)
    assert store.get("lastDirectory", "fallback") == "fallback"
    store.set("lastDirectory", "/x")
    assert Settings(path).get("lastDirectory") == "/x"


def test_remember_directory_stores_parent(settings, tmp_path):
    file_path = str(tmp_path / "imgs" / "a.png")
    result = remember_directory(settings, file_path)
    assert result == str(tmp_path / "imgs")
    assert settings.get(LAST_DIRECTORY_KEY) == result


def test_remember_directory_makes_relative_path_absolute(settings, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = remember_directory(settings, os.path.join("sub", "x.png"))
    assert Path(result) == Path(os.getcwd()) / "sub"
    assert os.path.isabs(settings.get(LAST_DIRECTORY_KEY))


def test_remember_directory_empty_path_keeps_previous(settings):
    settings.set(LAST_DIRECTORY_KEY, "/before")
    assert remember_directory(settings, "") is None
    assert settings.get(LAST_DIRECTORY_KEY) == "/before"


def test_load_image_fits_editor(settings, png_file):
    app = ImageRoiApp(None, settings)
    assert app.load_image(png_file) == (40, 30)
    assert app.editor.image_rect == Rect(0, 0, 40, 30)
    assert app.editor.has_image()


def test_load_image_rejects_non_image(settings, tmp_path):
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"not an image at all")
    app = ImageRoiApp(None, settings)
    with pytest.raises(ImageLoadError):
        app.load_image(bogus)
    assert not app.editor.has_image()


def test_load_image_missing_file(settings, tmp_path):
    app = ImageRoiApp(None, settings)
    with pytest.raises(ImageLoadError):
        app.load_image(tmp_path / "absent.png")


def test_choose_image_loads_and_remembers(settings, png_file):
    settings.set(LAST_DIRECTORY_KEY, "/start/here")
    app = ImageRoiApp(None, settings)
    dialog = _Dialog(str(png_file))
    app.ask_open_filename = dialog
    assert app.choose_image() == str(png_file)
    assert dialog.calls[0]["initialdir"] == "/start/here"
    assert dialog.calls[0]["title"] == "Choose image"
    assert settings.get(LAST_DIRECTORY_KEY) == str(png_file.parent)
    assert app.editor.image_rect == Rect(0, 0, 40, 30)


def test_choose_image_cancelled(settings):
    settings.set(LAST_DIRECTORY_KEY, "/before")
    app = ImageRoiApp(None, settings)
    app.ask_open_filename = _Dialog("")
    assert app.choose_image() == ""
    assert settings.get(LAST_DIRECTORY_KEY) == "/before"
    assert not app.editor.has_image()


def test_choose_image_cancelled_with_empty_tuple(settings):
    app = ImageRoiApp(None, settings)
    app.ask_open_filename = _Dialog(())
    assert app.choose_image() == ""
    assert settings.get(LAST_DIRECTORY_KEY) is None


def test_menu_load_image_uses_dialog(settings, png_file):
    app = ImageRoiApp(None, settings)
    dialog = _Dialog(str(png_file))
    app.ask_open_filename = dialog
    assert app.editor.apply_menu_action(MenuAction.LOAD_IMAGE) is True
    assert len(dialog.calls) == 1
    assert app.editor.has_image()


def test_main_help_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0
    assert "roicanvas" in capsys.readouterr().out