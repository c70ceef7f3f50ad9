import numpy as np
import pytest

from productpic.api.state import CompositionParameters
from productpic.composite.paint import (
    PAINTERS,
    draw_background,
    draw_checker_fill,
    draw_gradient_fill,
    get_color,
)
from productpic.constants import BackgroundKind


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#ffffff", (1.0, 1.0, 1.0, 1.0)),
        ("#000", (0.0, 0.0, 0.0, 1.0)),
        ("#ff000080", (1.0, 0.0, 0.0, 128 / 255.0)),
        ("rgb(0, 255, 0)", (0.0, 1.0, 0.0, 1.0)),
        ("blue", (0.0, 0.0, 1.0, 1.0)),
    ],
)
def test_get_color(value, expected):
    assert get_color(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "#12", "not-a-color"])
def test_get_color_invalid(value, caplog):
    assert get_color(value) == (0.0, 0.0, 0.0, 1.0)
    assert "Invalid color" in caplog.text


def test_painters_registered():
    assert set(PAINTERS) == set(BackgroundKind)
    assert PAINTERS[BackgroundKind.TRANSPARENT] is draw_checker_fill


def test_draw_solid_translucent():
    parameters = CompositionParameters(background_color="#00000080")
    color, alpha = draw_background(parameters, 5, 4)
    assert color.shape == (4, 5, 3)
    assert alpha is not None
    assert alpha.shape == (4, 5, 1)
    assert np.allclose(alpha, 128 / 255.0)


def test_draw_checker_partial_tiles():
    color, alpha = draw_checker_fill(CompositionParameters(), 40, 33)
    assert alpha is None
    assert color.shape == (33, 40, 3)
    assert color.dtype == np.float32
    light = np.array(get_color("#f3f4f6")[:3], dtype=np.float32)
    dark = np.array(get_color("#e5e7eb")[:3], dtype=np.float32)
    assert np.allclose(color[0, 0], light)
    assert np.allclose(color[0, 39], dark)
    assert np.allclose(color[32, 0], dark)
    assert np.allclose(color[32, 39], light)


def test_draw_gradient_fill():
    parameters = CompositionParameters(
        background_kind="gradient", gradient_from="#000000", gradient_to="#ffffff"
    )
    color, alpha = draw_gradient_fill(parameters, 64, 64)
    assert alpha is None
    assert color.shape == (64, 64, 3)
    diagonal = color[np.arange(64), np.arange(64), 0]
    assert np.all(np.diff(diagonal) > 0)
    assert np.allclose(color[:, :, 0], color[:, :, 1])


def test_draw_gradient_fill_alpha():
    parameters = CompositionParameters(
        background_kind="gradient", gradient_from="#ff000000", gradient_to="#ff0000"
    )
    color, alpha = draw_gradient_fill(parameters, 16, 8)
    assert alpha is not None
    assert alpha[0, 0, 0] < alpha[-1, -1, 0]
    assert np.allclose(color[:, :, 0], 1.0)
