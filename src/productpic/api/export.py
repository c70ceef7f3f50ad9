"""
Export at arbitrary resolution.

The exporter renders the current composition into a fresh off-screen surface
of the requested size. The live display surface and the live parameters are
never touched, so an export can run at any time without a visible resize.
"""

import logging
import math
import os
from typing import Optional, Tuple, Union

from attrs import define, field

from productpic.api import pil_io
from productpic.api.state import CompositionParameters
from productpic.api.view import LiveView
from productpic.composite import render
from productpic.constants import EXPORT_FILENAME, PNG_MIME_TYPE, ExportStatus

logger = logging.getLogger(__name__)


@define(frozen=True)
class EncodedImage:
    """
    Encoded raster image.

    .. py:attribute:: data

        Encoded bytes.

    .. py:attribute:: width
    .. py:attribute:: height

        Pixel size of the encoded image.

    .. py:attribute:: mime_type

        Media type of :py:attr:`data`, ``image/png`` for exports.

    .. py:attribute:: filename

        Suggested file name for downloads.
    """

    data: bytes = field(repr=False)
    width: int
    height: int
    mime_type: str = PNG_MIME_TYPE
    filename: str = EXPORT_FILENAME

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def data_url(self) -> str:
        return pil_io.to_data_url(self.data, self.mime_type)

    def save(self, path: Union[str, "os.PathLike[str]"]) -> None:
        with open(path, "wb") as f:
            f.write(self.data)


@define(frozen=True)
class ExportResult:
    """
    Outcome of an export request.

    ``image`` is set only when ``status`` is ``EXPORTED``.
    """

    status: ExportStatus
    image: Optional[EncodedImage] = None

    @property
    def ok(self) -> bool:
        return self.status == ExportStatus.EXPORTED


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def target_size(parameters: CompositionParameters, scale: float) -> Tuple[int, int]:
    """
    Return the export size for `scale`.

    :raise ValueError: If `scale` is not positive or the result has no area.
    """
    if not (scale > 0 and math.isfinite(scale)):
        raise ValueError("Export scale must be positive: %r" % scale)
    width = round_half_up(parameters.canvas_width * scale)
    height = round_half_up(parameters.canvas_height * scale)
    if width <= 0 or height <= 0:
        raise ValueError(
            "Export size %dx%d is empty for scale %r" % (width, height, scale)
        )
    return width, height


class Exporter(object):
    """
    Export the composition shown by a :py:class:`~productpic.api.view.LiveView`.

    Example::

        result = Exporter(view).export(2)
        if result.ok:
            result.image.save('product@2x.png')
    """

    def __init__(self, view: LiveView):
        self._view = view

    def export(self, scale: float = 1.0) -> ExportResult:
        """
        Render the current state at ``scale`` times the canvas size.

        :return: :py:class:`ExportResult`; ``UNAVAILABLE`` when the view has
            not painted yet.
        """
        if self._view.surface is None:
            logger.warning("Nothing to export: the view has not been painted")
            return ExportResult(ExportStatus.UNAVAILABLE)

        parameters = self._view.store.snapshot()
        size = target_size(parameters, scale)
        logger.debug("Exporting %dx%d at scale %g" % (size[0], size[1], scale))
        surface = render(
            parameters,
            self._view.loader.bitmap,
            size=size,
            font_paths=self._view.font_paths,
        )
        assert surface.size == size
        data = pil_io.encode_png(surface)
        return ExportResult(
            ExportStatus.EXPORTED, EncodedImage(data, size[0], size[1])
        )
