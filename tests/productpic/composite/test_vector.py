import math

import numpy as np
import pytest
from PIL import Image

from productpic.composite.vector import draw_bitmap, draw_ellipse


def test_draw_ellipse():
    mask = draw_ellipse(40, 30, (20, 15), (10, 5))
    assert mask.shape == (30, 40, 1)
    assert mask[15, 20, 0] == 1.0
    assert mask[15, 12, 0] == 1.0
    assert mask[15, 35, 0] == 0.0
    assert mask[5, 20, 0] == 0.0
    assert np.all((mask >= 0) & (mask <= 1))


def test_draw_ellipse_rotated():
    mask = draw_ellipse(40, 40, (20, 20), (15, 3), math.pi / 2)
    assert mask[8, 20, 0] == 1.0
    assert mask[20, 8, 0] == 0.0


@pytest.mark.parametrize("radii", [(0, 5), (5, 0), (-1, 3)])
def test_draw_ellipse_degenerate(radii):
    assert not np.any(draw_ellipse(10, 10, (5, 5), radii))


def test_draw_ellipse_outside():
    assert not np.any(draw_ellipse(10, 10, (100, 100), (5, 5)))


def test_draw_bitmap():
    bitmap = Image.new("RGBA", (10, 10), (0, 0, 255, 255))
    placed = draw_bitmap(bitmap, 50, 50, (25, 25), (20, 20))
    assert placed.size == (50, 50)
    assert placed.mode == "RGBA"
    assert placed.getpixel((25, 25)) == (0, 0, 255, 255)
    assert placed.getpixel((5, 5))[3] == 0


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, -5)])
def test_draw_bitmap_degenerate(size):
    bitmap = Image.new("RGBA", (10, 10), (0, 0, 255, 255))
    assert draw_bitmap(bitmap, 50, 50, (25, 25), size) is None
