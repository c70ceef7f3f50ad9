"""
Caption rendering.

Text is rasterized with Pillow's FreeType bindings. Fonts are resolved from a
sans-serif fallback stack (see :py:data:`productpic.constants.SANS_SERIF_FONTS`)
and, when none of those is installed, Pillow's bundled scalable default font.
"""

import functools
import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from productpic.constants import (
    BOLD_WEIGHT,
    SANS_SERIF_BOLD_FONTS,
    SANS_SERIF_FONTS,
)

logger = logging.getLogger(__name__)

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


def font_stack(weight: int) -> Tuple[str, ...]:
    return SANS_SERIF_BOLD_FONTS if weight >= BOLD_WEIGHT else SANS_SERIF_FONTS


@functools.lru_cache(maxsize=32)
def load_font(size: int, candidates: Tuple[str, ...]) -> Font:
    """
    Return the first font in `candidates` that FreeType can open.
    """
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug("No font found in %s, using the default font" % (candidates,))
    return ImageFont.load_default(size=size)


def draw_text(
    text: str,
    width: int,
    height: int,
    position: Tuple[float, float],
    size: int,
    weight: int,
    font_paths: Optional[Sequence[str]] = None,
) -> np.ndarray:
    """
    Rasterize `text` centered on `position`.

    :param font_paths: Fonts to try before the built-in sans-serif stack.
    :return: float32 coverage mask of shape (height, width, 1).
    """
    candidates = tuple(font_paths or ()) + font_stack(weight)
    font = load_font(max(1, int(size)), candidates)
    mask = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(mask)
    draw.text(position, text, fill=255, font=font, anchor="mm")
    return np.expand_dims(np.asarray(mask, dtype=np.float32) / 255.0, 2)
