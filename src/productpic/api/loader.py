"""
Asynchronous product photo loading.

Every :py:meth:`BitmapLoader.load` call takes the next request generation.
Decoding happens in an executor so the event loop keeps running, and a
finished decode is applied only if no newer request was issued in the
meantime::

    loader = BitmapLoader()
    first = loader.load('old.png')
    second = loader.load('new.png')
    await first   # LoadResult(status=STALE) if it finishes after `second` was issued
    await second  # LoadResult(status=LOADED)
"""

import asyncio
import logging
from concurrent.futures import Executor
from typing import Any, Awaitable, Callable, List, Optional

from attrs import define, field
from PIL import Image

from productpic.api import pil_io
from productpic.constants import LoadStatus

logger = logging.getLogger(__name__)

Decoder = Callable[[Any], Image.Image]
BitmapSubscriber = Callable[[Optional[Image.Image]], None]


@define(frozen=True)
class LoadResult:
    """
    Outcome of one load request.

    .. py:attribute:: status

        :py:class:`~productpic.constants.LoadStatus`.

    .. py:attribute:: generation

        Generation the request was tagged with.

    .. py:attribute:: bitmap

        The decoded bitmap for ``LOADED`` results.

    .. py:attribute:: error

        The decode exception for ``FAILED`` results.
    """

    status: LoadStatus
    generation: int
    bitmap: Optional[Image.Image] = field(default=None, repr=False)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status in (LoadStatus.LOADED, LoadStatus.CLEARED)


class BitmapLoader(object):
    """
    Holder of the current product bitmap.

    :param decoder: Callable turning a source reference into an image. The
        loader never looks at the source itself.
    :param executor: Executor for decoding; None uses the loop default.
    """

    def __init__(
        self,
        decoder: Decoder = pil_io.open_bitmap,
        executor: Optional[Executor] = None,
    ):
        self._decoder = decoder
        self._executor = executor
        self._bitmap: Optional[Image.Image] = None
        self._generation = 0
        self._subscribers: List[BitmapSubscriber] = []

    @property
    def bitmap(self) -> Optional[Image.Image]:
        return self._bitmap

    @property
    def generation(self) -> int:
        """Generation of the most recent request."""
        return self._generation

    def subscribe(self, callback: BitmapSubscriber) -> Callable[[], None]:
        """
        Call `callback` with the new bitmap whenever it is replaced.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def load(self, source: Any) -> Awaitable[LoadResult]:
        """
        Request `source` as the new product bitmap.

        A None `source` clears the bitmap before this method returns. Must be
        called while an event loop is running.

        :return: Awaitable resolving to a :py:class:`LoadResult`.
        """
        loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation
        if source is None:
            self._set(None)
            future = loop.create_future()
            future.set_result(LoadResult(LoadStatus.CLEARED, generation))
            return future
        return loop.create_task(self._decode(loop, generation, source))

    async def _decode(
        self, loop: asyncio.AbstractEventLoop, generation: int, source: Any
    ) -> LoadResult:
        try:
            bitmap = await loop.run_in_executor(self._executor, self._decoder, source)
        except Exception as e:
            logger.warning("Failed to decode bitmap (generation %d): %s" % (generation, e))
            if generation != self._generation:
                return LoadResult(LoadStatus.STALE, generation, error=e)
            return LoadResult(LoadStatus.FAILED, generation, error=e)

        if generation != self._generation:
            logger.debug(
                "Discarding stale bitmap: generation %d, latest %d"
                % (generation, self._generation)
            )
            return LoadResult(LoadStatus.STALE, generation)
        self._set(bitmap)
        return LoadResult(LoadStatus.LOADED, generation, bitmap)

    def _set(self, bitmap: Optional[Image.Image]) -> None:
        if bitmap is self._bitmap:
            return
        self._bitmap = bitmap
        for callback in list(self._subscribers):
            callback(bitmap)
