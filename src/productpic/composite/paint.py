"""Background fills for compositing."""

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import ImageColor

from productpic.api.state import CompositionParameters
from productpic.constants import (
    CHECKER_EVEN_COLOR,
    CHECKER_ODD_COLOR,
    CHECKER_TILE_SIZE,
    INVALID_COLOR,
    BackgroundKind,
)
from productpic.registry import new_registry

logger = logging.getLogger(__name__)

PAINTERS, register = new_registry(attribute="kind")


def get_color(value: str) -> Tuple[float, float, float, float]:
    """
    Parse a CSS-style color into an RGBA tuple in [0, 1].

    Accepts anything :py:func:`PIL.ImageColor.getrgb` understands: ``#rgb``,
    ``#rrggbb``, ``#rrggbbaa``, ``rgb()``, ``hsl()`` and color names. An
    unparseable value is logged and drawn as opaque black.
    """
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        logger.warning("Invalid color %r, using %s" % (value, INVALID_COLOR))
        rgb = ImageColor.getrgb(INVALID_COLOR)
    if len(rgb) == 3:
        rgb = rgb + (255,)
    return tuple(float(c) / 255.0 for c in rgb)  # type: ignore[return-value]


def draw_background(
    parameters: CompositionParameters, width: int, height: int
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Create the background fill.

    :return: Tuple of (color, alpha). ``alpha`` is None when the fill is
        fully opaque.
    """
    logger.debug("Painting %s background" % parameters.background_kind.value)
    painter = PAINTERS[parameters.background_kind]
    return painter(parameters, width, height)


def _split(
    rgba: Tuple[float, ...], width: int, height: int
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    color = np.full((height, width, 3), rgba[:3], dtype=np.float32)
    if rgba[3] >= 1.0:
        return color, None
    return color, np.full((height, width, 1), rgba[3], dtype=np.float32)


@register(BackgroundKind.SOLID)
def draw_solid_color_fill(
    parameters: CompositionParameters, width: int, height: int
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Create a solid color fill.
    """
    return _split(get_color(parameters.background_color), width, height)


@register(BackgroundKind.CHECKER)
def draw_checker_fill(
    parameters: CompositionParameters, width: int, height: int
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Create the two-tone checker pattern.

    Tile (i, j) covers ``[32 i, 32 (i + 1)) x [32 j, 32 (j + 1))``; odd
    ``i + j`` tiles take the darker color, so tile (0, 0) is the lighter one.
    """
    columns = np.arange(width) // CHECKER_TILE_SIZE
    rows = np.arange(height) // CHECKER_TILE_SIZE
    odd = ((rows[:, np.newaxis] + columns[np.newaxis, :]) % 2) == 1
    odd_color = np.array(get_color(CHECKER_ODD_COLOR)[:3], dtype=np.float32)
    even_color = np.array(get_color(CHECKER_EVEN_COLOR)[:3], dtype=np.float32)
    color = np.where(odd[:, :, np.newaxis], odd_color, even_color)
    return color.astype(np.float32), None


# A transparent background is previewed with the checker pattern.
PAINTERS[BackgroundKind.TRANSPARENT] = draw_checker_fill


@register(BackgroundKind.GRADIENT)
def draw_gradient_fill(
    parameters: CompositionParameters, width: int, height: int
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Create a diagonal linear gradient fill.

    The gradient runs from ``gradient_from`` at the top-left corner to
    ``gradient_to`` at the bottom-right corner. Each pixel center is projected
    onto the diagonal to find its position along the gradient.

    Requires scipy for gradient color interpolation.
    """
    from scipy import interpolate  # type: ignore[import-untyped]

    X, Y = np.meshgrid(
        np.arange(width, dtype=np.float32) + 0.5,
        np.arange(height, dtype=np.float32) + 0.5,
    )
    Z = _make_linear_gradient(X, Y, float(width), float(height))

    stops = np.array(
        [get_color(parameters.gradient_from), get_color(parameters.gradient_to)],
        dtype=np.float32,
    )
    G = interpolate.interp1d(
        [0.0, 1.0],
        stops,
        axis=0,
        bounds_error=False,
        fill_value=(stops[0], stops[-1]),
    )
    pixels = G(Z).astype(np.float32)
    color = pixels[:, :, :3]
    if np.all(stops[:, 3] >= 1.0):
        return color, None
    return color, pixels[:, :, 3:]


def _make_linear_gradient(X, Y, dx, dy):
    """Generates index map for a gradient along the vector (dx, dy)."""
    length = dx * dx + dy * dy
    Z = (X * dx + Y * dy) / length
    return np.maximum(0.0, np.minimum(1.0, Z))
