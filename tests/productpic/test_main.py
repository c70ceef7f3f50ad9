import logging

import pytest
from PIL import Image

from productpic.__main__ import main, parse_patch

from .utils import rgba

logger = logging.getLogger(__name__)


@pytest.mark.parametrize("argv", [["-h"], ["--version"], ["export", "--help"], []])
def test_main_exit(argv):
    with pytest.raises(SystemExit):
        main(argv)


def test_main_export(tmp_path):
    output = tmp_path / "out.png"
    argv = ["export", str(output), "--set", "canvas_width=64", "--set", "canvas_height=32"]
    assert main(argv) == 0
    with Image.open(output) as image:
        assert image.size == (64, 32)


def test_main_export_image(tmp_path):
    photo = tmp_path / "photo.png"
    Image.new("RGB", (40, 40), (255, 0, 0)).save(photo)
    output = tmp_path / "out.png"
    argv = [
        "-v",
        "export",
        str(output),
        "-i",
        str(photo),
        "-s",
        "2",
        "--set",
        "canvas_width=100",
        "--set",
        "canvas_height=100",
        "--set",
        "product_shadow=no",
    ]
    assert main(argv) == 0
    with Image.open(output) as image:
        assert image.size == (200, 200)
        assert rgba(image.convert("RGBA"), 100, 110)[:3] == (255, 0, 0)


@pytest.mark.parametrize(
    "argv",
    [
        ["export", "out.png", "--set", "no-equals-sign"],
        ["export", "out.png", "--set", "background_kind=plaid"],
        ["export", "out.png", "--scale", "0"],
        ["export", "out.png", "-i", "missing-photo.png"],
    ],
)
def test_main_export_error(argv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(argv) == 1
    assert not (tmp_path / "out.png").exists()


def test_main_show(capsys):
    assert main(["show", "--set", "overlay_text=Hello"]) is None
    out = capsys.readouterr().out
    assert "'overlay_text': 'Hello'" in out


def test_parse_patch():
    assert parse_patch(None) == {}
    assert parse_patch(["a=1", " b =x=y"]) == {"a": "1", "b": "x=y"}
