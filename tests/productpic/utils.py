import io
import logging
from typing import Tuple

import numpy as np
from PIL import Image

logging.basicConfig(level=logging.DEBUG)


def png_bytes(image: Image.Image) -> bytes:
    with io.BytesIO() as f:
        image.save(f, format="PNG")
        return f.getvalue()


def rgba(surface: Image.Image, x: int, y: int) -> Tuple[int, int, int, int]:
    return tuple(int(c) for c in np.asarray(surface)[y, x])  # type: ignore[return-value]


def hex_color(surface: Image.Image, x: int, y: int) -> str:
    return "#%02x%02x%02x" % rgba(surface, x, y)[:3]


def is_uniform(surface: Image.Image, color: Tuple[int, int, int, int]) -> bool:
    pixels = np.asarray(surface)
    return bool(np.all(pixels == np.array(color, dtype=np.uint8)))
