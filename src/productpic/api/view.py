"""
Live display surface.

:py:class:`LiveView` subscribes to a :py:class:`~productpic.api.state.StateStore`
and a :py:class:`~productpic.api.loader.BitmapLoader` and repaints its surface
when either of them invalidates it. Inside a running event loop repaints are
coalesced: any number of invalidations before the loop gets back to the view
produce one paint that reads the latest state. Outside a loop the view
repaints immediately.
"""

import asyncio
import logging
from typing import Callable, FrozenSet, List, Optional, Sequence

from PIL import Image

from productpic.api.loader import BitmapLoader
from productpic.api.state import CompositionParameters, StateStore, redraw_required
from productpic.composite import render

logger = logging.getLogger(__name__)


class LiveView(object):
    """
    Owner of the live display surface.

    :param store: State store to follow.
    :param loader: Bitmap loader to follow.
    :param font_paths: Extra fonts for captions.
    """

    def __init__(
        self,
        store: StateStore,
        loader: BitmapLoader,
        font_paths: Optional[Sequence[str]] = None,
    ):
        self._store = store
        self._loader = loader
        self._font_paths = tuple(font_paths or ())
        self._surface: Optional[Image.Image] = None
        self._painted: Optional[CompositionParameters] = None
        self._scheduled: Optional[asyncio.Handle] = None
        self._waiters: List[asyncio.Future] = []
        self.paint_count = 0
        self._unsubscribe: List[Callable[[], None]] = [
            store.subscribe(self._on_parameters),
            loader.subscribe(self._on_bitmap),
        ]

    @property
    def surface(self) -> Optional[Image.Image]:
        """The last painted surface, or None before the first paint."""
        return self._surface

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def loader(self) -> BitmapLoader:
        return self._loader

    @property
    def font_paths(self) -> tuple:
        return self._font_paths

    @property
    def pending(self) -> bool:
        return self._scheduled is not None

    def paint(self) -> Image.Image:
        """Render the current state synchronously."""
        if self._scheduled is not None:
            self._scheduled.cancel()
            self._scheduled = None
        parameters = self._store.parameters
        self._surface = render(parameters, self._loader.bitmap, font_paths=self._font_paths)
        self._painted = parameters
        self.paint_count += 1
        logger.debug("Painted %dx%d surface" % self._surface.size)
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(self._surface)
        return self._surface

    def invalidate(self) -> None:
        """Schedule a repaint, or paint now when no loop is running."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.paint()
            return
        if self._scheduled is None:
            self._scheduled = loop.call_soon(self._run_scheduled)

    async def next_paint(self) -> Image.Image:
        """Wait for the next paint and return its surface."""
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return await waiter

    def close(self) -> None:
        """Stop following the store and the loader."""
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
        if self._scheduled is not None:
            self._scheduled.cancel()
            self._scheduled = None

    def _run_scheduled(self) -> None:
        self._scheduled = None
        self.paint()

    def _on_parameters(
        self, parameters: CompositionParameters, changed: FrozenSet[str]
    ) -> None:
        if self._painted is not None and not redraw_required(
            self._painted, parameters, self._loader.bitmap is not None
        ):
            logger.debug("Ignoring change of %s" % ", ".join(sorted(changed)))
            return
        self.invalidate()

    def _on_bitmap(self, bitmap: Optional[Image.Image]) -> None:
        self.invalidate()
