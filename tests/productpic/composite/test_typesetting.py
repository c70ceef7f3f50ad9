import numpy as np
import pytest

from productpic.composite.typesetting import draw_text, font_stack, load_font
from productpic.constants import SANS_SERIF_BOLD_FONTS, SANS_SERIF_FONTS


@pytest.mark.parametrize(
    "weight, expected",
    [(400, SANS_SERIF_FONTS), (599, SANS_SERIF_FONTS), (600, SANS_SERIF_BOLD_FONTS), (700, SANS_SERIF_BOLD_FONTS)],
)
def test_font_stack(weight, expected):
    assert font_stack(weight) == expected


def test_load_font_fallback():
    font = load_font(24, ("no-such-font.ttf",))
    assert font is not None
    assert load_font(24, ("no-such-font.ttf",)) is font


def test_draw_text():
    mask = draw_text("Hi", 200, 100, (100, 50), 40, 700)
    assert mask.shape == (100, 200, 1)
    assert mask.dtype == np.float32
    assert mask.max() > 0.5
    ys, xs = np.nonzero(mask[:, :, 0] > 0.5)
    assert abs((xs.min() + xs.max()) / 2.0 - 100) < 10
    assert abs((ys.min() + ys.max()) / 2.0 - 50) < 10


def test_draw_text_missing_font_paths():
    mask = draw_text("Hi", 100, 60, (50, 30), 20, 400, ["missing.ttf"])
    assert mask.max() > 0
