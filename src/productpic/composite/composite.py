"""Composite implementation for the product picture layers."""

import logging
import math
from typing import Optional, Sequence, Tuple, Union, cast

import numpy as np
from attrs import define
from PIL import Image

from productpic.api.state import CompositionParameters
from productpic.composite import paint, typesetting, utils, vector
from productpic.constants import (
    PRODUCT_ANCHOR_X,
    PRODUCT_ANCHOR_Y,
    PRODUCT_BOX_HEIGHT,
    PRODUCT_BOX_WIDTH,
    SHADOW_OPACITY_RANGE,
    SHADOW_RADIUS_X,
    SHADOW_RADIUS_Y,
    SHADOW_SQUASH,
    TEXT_POSITION_RANGE,
)

logger = logging.getLogger(__name__)


@define(frozen=True)
class ProductPlacement:
    """
    Where and how large the product bitmap is drawn.

    .. py:attribute:: box

        Bounding box (width, height) the bitmap is fitted into.

    .. py:attribute:: scale

        Uniform scale from bitmap pixels to surface pixels.

    .. py:attribute:: draw_size

        Bitmap size multiplied by :py:attr:`scale`. May be zero or negative
        for degenerate inputs; such placements draw nothing.

    .. py:attribute:: anchor

        Center of the product on the surface.

    .. py:attribute:: rotation

        Clockwise rotation in radians.
    """

    box: Tuple[float, float]
    scale: float
    draw_size: Tuple[float, float]
    anchor: Tuple[float, float]
    rotation: float

    @property
    def draw_width(self) -> float:
        return self.draw_size[0]

    @property
    def draw_height(self) -> float:
        return self.draw_size[1]

    @property
    def shadow_center(self) -> Tuple[float, float]:
        """Shadow ellipse center, below the anchor in the rotated frame."""
        offset = SHADOW_SQUASH * self.draw_height / 2.0
        return (
            self.anchor[0] - offset * math.sin(self.rotation),
            self.anchor[1] + offset * math.cos(self.rotation),
        )

    @property
    def shadow_radii(self) -> Tuple[float, float]:
        return (
            SHADOW_RADIUS_X * self.draw_width,
            SHADOW_RADIUS_Y * self.draw_height * SHADOW_SQUASH,
        )


def place_product(
    bitmap_size: Tuple[int, int],
    surface_size: Tuple[int, int],
    product_scale: float = 1.0,
    rotation: float = 0.0,
) -> ProductPlacement:
    """
    Compute the product placement.

    Example: an 800x600 bitmap on a 1080x1080 surface fits into a 864x756
    box with scale ``min(1.08, 1.26) = 1.08`` and draws at 864x648.

    :param bitmap_size: Intrinsic (width, height) of the bitmap.
    :param surface_size: (width, height) of the target surface.
    :param product_scale: User scale factor, passed through verbatim.
    :param rotation: Rotation in degrees.
    """
    width, height = surface_size
    box = (width * PRODUCT_BOX_WIDTH, height * PRODUCT_BOX_HEIGHT)
    bitmap_width, bitmap_height = bitmap_size
    if bitmap_width <= 0 or bitmap_height <= 0:
        scale = 0.0
    else:
        scale = min(box[0] / bitmap_width, box[1] / bitmap_height) * product_scale
    return ProductPlacement(
        box=box,
        scale=scale,
        draw_size=(bitmap_width * scale, bitmap_height * scale),
        anchor=(width * PRODUCT_ANCHOR_X, height * PRODUCT_ANCHOR_Y),
        rotation=math.radians(rotation),
    )


def render(
    parameters: CompositionParameters,
    bitmap: Optional[Image.Image] = None,
    size: Optional[Tuple[int, int]] = None,
    font_paths: Optional[Sequence[str]] = None,
) -> Image.Image:
    """
    Composite the product picture and return an RGBA surface.

    Layers are drawn in a fixed order: background, product shadow, product
    bitmap, then the caption. The function has no side effects; the same
    inputs always produce the same pixels.

    :param parameters: :py:class:`~productpic.api.state.CompositionParameters`.
    :param bitmap: Decoded product photo, or None to skip the product layer.
    :param size: Surface (width, height). Defaults to the canvas size in
        `parameters`; exports pass a scaled size here.
    :param font_paths: Extra fonts tried before the sans-serif stack.
    :return: :py:class:`PIL.Image.Image` in ``RGBA`` mode of exactly `size`.
    """
    width, height = size if size is not None else parameters.size
    if width <= 0 or height <= 0:
        logger.warning("Invalid surface size %dx%d, using 1x1" % (width, height))
        width, height = max(1, width), max(1, height)

    compositor = Compositor((width, height))
    compositor.apply_background(parameters)
    if bitmap is not None:
        compositor.apply_product(parameters, bitmap)
    if parameters.has_text:
        compositor.apply_text(parameters, font_paths)
    return compositor.finish()


class Compositor(object):
    """Composite context.

    Each ``apply_*`` call blends one layer source-over the result so far.

    Example::

        compositor = Compositor((1080, 1080))
        compositor.apply_background(parameters)
        compositor.apply_product(parameters, bitmap)
        surface = compositor.finish()
    """

    def __init__(self, size: Tuple[int, int]):
        self._size = size
        self._color = np.ones((self.height, self.width, 3), dtype=np.float32)
        self._alpha = np.zeros((self.height, self.width, 1), dtype=np.float32)

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    @property
    def color(self) -> np.ndarray:
        return self._color

    @property
    def alpha(self) -> np.ndarray:
        return self._alpha

    def apply(
        self,
        color: Union[np.ndarray, Tuple[float, ...]],
        alpha: Union[float, np.ndarray] = 1.0,
    ) -> None:
        """Blend a source layer over the backdrop with normal blending."""
        if not isinstance(color, np.ndarray):
            color = np.full((self.height, self.width, 3), color, dtype=np.float32)
        shape = alpha
        alpha_previous = self._alpha
        self._alpha = cast(np.ndarray, utils.union(self._alpha, alpha))
        color_t = alpha * color
        self._color = utils.clip(
            utils.divide(
                (1.0 - shape) * alpha_previous * self._color + color_t, self._alpha
            )
        )

    def apply_background(self, parameters: CompositionParameters) -> None:
        color, alpha = paint.draw_background(parameters, self.width, self.height)
        self.apply(color, 1.0 if alpha is None else alpha)

    def apply_product(
        self, parameters: CompositionParameters, bitmap: Image.Image
    ) -> None:
        placement = place_product(
            bitmap.size,
            self._size,
            parameters.product_scale,
            parameters.product_rotation,
        )
        logger.debug(
            "Placing %dx%d bitmap at %.1fx%.1f"
            % (bitmap.width, bitmap.height, placement.draw_width, placement.draw_height)
        )
        if parameters.product_shadow:
            self._apply_shadow(parameters, placement)

        placed = vector.draw_bitmap(
            bitmap,
            self.width,
            self.height,
            placement.anchor,
            placement.draw_size,
            placement.rotation,
        )
        if placed is None:
            return
        color, alpha = utils.to_array(placed)
        self.apply(color, alpha)

    def _apply_shadow(
        self, parameters: CompositionParameters, placement: ProductPlacement
    ) -> None:
        opacity = utils.clamp(
            parameters.product_shadow_opacity, *SHADOW_OPACITY_RANGE
        )
        if opacity <= 0:
            return
        shape = vector.draw_ellipse(
            self.width,
            self.height,
            placement.shadow_center,
            placement.shadow_radii,
            placement.rotation,
        )
        self.apply((0.0, 0.0, 0.0), shape * opacity)

    def apply_text(
        self,
        parameters: CompositionParameters,
        font_paths: Optional[Sequence[str]] = None,
    ) -> None:
        fraction = utils.clamp(parameters.overlay_text_y, *TEXT_POSITION_RANGE)
        rgba = paint.get_color(parameters.overlay_text_color)
        shape = typesetting.draw_text(
            parameters.overlay_text,
            self.width,
            self.height,
            (self.width / 2.0, self.height * fraction),
            parameters.overlay_text_size,
            parameters.overlay_text_weight,
            font_paths,
        )
        self.apply(rgba[:3], shape * rgba[3])

    def finish(self) -> Image.Image:
        pixels = np.concatenate((self._color, self._alpha), 2)
        # A (height, width, 4) uint8 array decodes as RGBA.
        return Image.fromarray(np.round(255 * utils.clip(pixels)).astype(np.uint8))
