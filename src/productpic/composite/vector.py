"""Shape rasterization and bitmap placement for compositing."""

import logging
import math
from typing import Optional, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def draw_ellipse(
    width: int,
    height: int,
    center: Tuple[float, float],
    radii: Tuple[float, float],
    rotation: float = 0.0,
) -> np.ndarray:
    """
    Rasterize a filled, rotated ellipse into a coverage mask.

    :param width: Mask width.
    :param height: Mask height.
    :param center: Ellipse center in device coordinates.
    :param radii: Semi-axes along the local x and y axes.
    :param rotation: Clockwise rotation of the local axes in radians.
    :return: float32 array of shape (height, width, 1) in [0, 1]. Edges are
        antialiased over roughly one pixel.
    """
    mask = np.zeros((height, width, 1), dtype=np.float32)
    rx, ry = radii
    if rx <= 0 or ry <= 0:
        logger.debug("Degenerate ellipse: %r" % (radii,))
        return mask

    cos, sin = math.cos(rotation), math.sin(rotation)
    extent_x = math.hypot(rx * cos, ry * sin) + 1
    extent_y = math.hypot(rx * sin, ry * cos) + 1
    left = max(0, int(math.floor(center[0] - extent_x)))
    top = max(0, int(math.floor(center[1] - extent_y)))
    right = min(width, int(math.ceil(center[0] + extent_x)))
    bottom = min(height, int(math.ceil(center[1] + extent_y)))
    if left >= right or top >= bottom:
        return mask

    X, Y = np.meshgrid(
        np.arange(left, right, dtype=np.float64) + 0.5 - center[0],
        np.arange(top, bottom, dtype=np.float64) + 0.5 - center[1],
    )
    U = X * cos + Y * sin
    V = -X * sin + Y * cos
    R = np.sqrt(np.power(U / rx, 2) + np.power(V / ry, 2))
    coverage = np.clip((1.0 - R) * min(rx, ry) + 0.5, 0.0, 1.0)
    mask[top:bottom, left:right, 0] = coverage.astype(np.float32)
    return mask


def draw_bitmap(
    bitmap: Image.Image,
    width: int,
    height: int,
    anchor: Tuple[float, float],
    size: Tuple[float, float],
    rotation: float = 0.0,
) -> Optional[Image.Image]:
    """
    Place `bitmap` on a transparent surface.

    The bitmap is scaled to `size`, rotated clockwise by `rotation` radians
    about `anchor` and centered there.

    :return: RGBA image of ``(width, height)``, or None when `size` has no
        area.
    """
    draw_width, draw_height = size
    if not (draw_width > 0 and draw_height > 0):
        logger.debug("Degenerate bitmap size: %r" % (size,))
        return None

    resampled = (max(1, int(round(draw_width))), max(1, int(round(draw_height))))
    source = bitmap.convert("RGBa")
    if source.size != resampled:
        source = source.resize(resampled, Image.Resampling.LANCZOS)
    kx = resampled[0] / draw_width
    ky = resampled[1] / draw_height

    # Inverse mapping from device to source coordinates.
    cx, cy = anchor
    cos, sin = math.cos(rotation), math.sin(rotation)
    data = (
        cos * kx,
        sin * kx,
        (-cx * cos - cy * sin + draw_width / 2.0) * kx,
        -sin * ky,
        cos * ky,
        (cx * sin - cy * cos + draw_height / 2.0) * ky,
    )
    placed = source.transform(
        (width, height),
        Image.Transform.AFFINE,
        data,
        resample=Image.Resampling.BICUBIC,
    )
    return placed.convert("RGBA")
