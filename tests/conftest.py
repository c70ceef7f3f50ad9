"""Pytest configuration for productpic tests."""

import pytest
from PIL import Image


@pytest.fixture
def bitmap() -> Image.Image:
    """An opaque red 800x600 product photo."""
    return Image.new("RGBA", (800, 600), (255, 0, 0, 255))


@pytest.fixture
def square_bitmap() -> Image.Image:
    return Image.new("RGBA", (100, 100), (255, 0, 0, 255))


@pytest.fixture
def clear_bitmap() -> Image.Image:
    """A fully transparent bitmap, so only its shadow shows."""
    return Image.new("RGBA", (100, 100), (0, 0, 0, 0))
