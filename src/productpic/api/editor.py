"""
Editor module.

This module provides :py:class:`Editor`, the entry point that wires the
pieces of productpic together: one :py:class:`~productpic.api.state.StateStore`,
one :py:class:`~productpic.api.loader.BitmapLoader`, the
:py:class:`~productpic.api.view.LiveView` that follows both, an
:py:class:`~productpic.api.export.Exporter` and a
:py:class:`~productpic.api.delivery.DeliveryChain`.

An editor is an ordinary object. Create one and pass it to whatever drives
it (a control panel, a script, a test); there is no global instance.

Example usage::

    import asyncio
    from productpic import Editor

    async def main():
        editor = Editor(download_dir='out')
        editor.show()
        await editor.load('shoe.jpg')
        editor.patch(background_kind='gradient', overlay_text='New in')
        outcome = await editor.export_and_deliver(2)
        print(outcome.status, outcome.location)

    asyncio.run(main())
"""

import logging
from typing import Any, Awaitable, Mapping, Optional, Sequence

from PIL import Image

from productpic.api import pil_io
from productpic.api.delivery import (
    ClipboardChannel,
    DeliveryChain,
    DeliveryOutcome,
    DownloadChannel,
    ShareChannel,
    ShareHandler,
)
from productpic.api.export import Exporter, ExportResult
from productpic.api.loader import BitmapLoader, Decoder, LoadResult
from productpic.api.state import CompositionParameters, StateStore
from productpic.api.view import LiveView
from productpic.constants import DeliveryStatus

logger = logging.getLogger(__name__)


class Editor(object):
    """
    Product picture editor.

    :param parameters: Initial parameters; defaults when None.
    :param share_handler: Host share capability, see
        :py:class:`~productpic.api.delivery.ShareChannel`.
    :param download_dir: Directory for the download fallback.
    :param font_paths: Extra fonts tried before the sans-serif stack.
    :param decoder: Bitmap decoder, :py:func:`~productpic.api.pil_io.open_bitmap`
        by default.
    :param chain: Delivery chain replacing the default share, clipboard and
        download order.
    """

    def __init__(
        self,
        parameters: Optional[CompositionParameters] = None,
        share_handler: Optional[ShareHandler] = None,
        download_dir: Optional[str] = None,
        font_paths: Optional[Sequence[str]] = None,
        decoder: Decoder = pil_io.open_bitmap,
        chain: Optional[DeliveryChain] = None,
    ):
        self.store = StateStore(parameters)
        self.loader = BitmapLoader(decoder)
        self.view = LiveView(self.store, self.loader, font_paths)
        self.exporter = Exporter(self.view)
        self.clipboard = ClipboardChannel()
        self.chain = chain or DeliveryChain(
            [
                ShareChannel(share_handler),
                self.clipboard,
                DownloadChannel(download_dir),
            ]
        )

    def __repr__(self) -> str:
        return "%s(size=%dx%d, bitmap=%s)" % (
            self.__class__.__name__,
            self.parameters.canvas_width,
            self.parameters.canvas_height,
            self.bitmap is not None,
        )

    @property
    def parameters(self) -> CompositionParameters:
        return self.store.parameters

    @property
    def bitmap(self) -> Optional[Image.Image]:
        return self.loader.bitmap

    @property
    def surface(self) -> Optional[Image.Image]:
        return self.view.surface

    def show(self) -> Image.Image:
        """Paint the live surface, making the editor exportable."""
        return self.view.paint()

    def patch(
        self, patch: Optional[Mapping[str, Any]] = None, **fields: Any
    ) -> CompositionParameters:
        return self.store.patch(patch, **fields)

    def load(self, source: Any) -> Awaitable[LoadResult]:
        return self.loader.load(source)

    def export(self, scale: float = 1.0) -> ExportResult:
        return self.exporter.export(scale)

    async def export_and_deliver(self, scale: float = 1.0) -> Optional[DeliveryOutcome]:
        """
        Export at `scale` and hand the image to the delivery chain.

        :return: The :py:class:`~productpic.api.delivery.DeliveryOutcome`, or
            None when there is nothing to export.
        """
        result = self.export(scale)
        if result.image is None:
            return None
        outcome = await self.chain.deliver(result.image)
        logger.info("Delivery finished: %s" % outcome.status.value)
        return outcome

    async def copy_to_clipboard(self) -> Optional[DeliveryOutcome]:
        """Export at 1x and copy to the clipboard only."""
        result = self.export(1.0)
        if result.image is None:
            return None
        outcome = await DeliveryChain([self.clipboard]).deliver(result.image)
        if outcome.status != DeliveryStatus.COPIED:
            logger.warning(outcome.notice)
        return outcome

    def close(self) -> None:
        self.view.close()
