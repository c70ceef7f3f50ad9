"""
Delivery of exported images.

A :py:class:`DeliveryChain` hands an :py:class:`~productpic.api.export.EncodedImage`
to the first channel that takes it:

1. ``share``: a host-provided share handler, if one is installed and accepts
   the image type.
2. ``clipboard``: the system clipboard, if a clipboard tool is found on
   ``PATH``.
3. ``download``: a file written to the downloads directory.

Capabilities are probed at delivery time. Every attempt is recorded in the
returned :py:class:`DeliveryOutcome`, so a failure never disappears silently.
"""

import asyncio
import inspect
import logging
import os
import shutil
import time
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Union

from attrs import define, field

from productpic.api.export import EncodedImage
from productpic.constants import (
    CLIPBOARD_COPIED_NOTICE,
    CLIPBOARD_UNSUPPORTED_NOTICE,
    DOWNLOAD_DIR_ENV,
    PNG_MIME_TYPE,
    SHARE_FILENAME,
    SHARE_TEXT,
    SHARE_TITLE,
    AttemptStatus,
    DeliveryStatus,
)
from productpic.registry import new_registry

logger = logging.getLogger(__name__)

CHANNELS, register = new_registry(attribute="name")

#: ``handler(data, filename, mime_type, title, text)``; may be a coroutine function.
ShareHandler = Callable[..., Union[None, Awaitable[None]]]

# Commands that read image data from stdin into the clipboard.
CLIPBOARD_COMMANDS = (
    ("wl-copy", "--type", PNG_MIME_TYPE),
    ("xclip", "-selection", "clipboard", "-t", PNG_MIME_TYPE, "-i"),
)


class DeliveryError(RuntimeError):
    """A delivery channel failed to hand over the image."""


@define(frozen=True)
class DeliveryAttempt:
    """One channel's try at delivering an image."""

    channel: str
    status: AttemptStatus
    error: Optional[str] = None


@define
class DeliveryOutcome:
    """
    Result of a delivery chain.

    .. py:attribute:: status

        :py:class:`~productpic.constants.DeliveryStatus`.

    .. py:attribute:: channel

        Name of the channel that succeeded, if any.

    .. py:attribute:: attempts

        Every :py:class:`DeliveryAttempt` in chain order.

    .. py:attribute:: notice

        Message to show to the user, if any.

    .. py:attribute:: location

        Path of the written file for downloads.
    """

    status: DeliveryStatus
    channel: Optional[str] = None
    attempts: List[DeliveryAttempt] = field(factory=list)
    notice: Optional[str] = None
    location: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != DeliveryStatus.FAILED


class DeliveryChannel(object):
    """
    Base class of delivery channels.

    Subclasses implement :py:meth:`supports` and :py:meth:`send`. ``send``
    raises :py:class:`DeliveryError` (or any ``OSError``) on failure.
    """

    name: str = ""
    success_status = DeliveryStatus.FAILED
    success_notice: Optional[str] = None
    failure_notice: Optional[str] = None

    def supports(self, image: EncodedImage) -> bool:
        raise NotImplementedError()

    async def send(self, image: EncodedImage) -> Optional[str]:
        """Deliver `image`; may return a location string."""
        raise NotImplementedError()


@register("share")
class ShareChannel(DeliveryChannel):
    """
    Native share through a host-provided handler.

    :param handler: Called as ``handler(data, filename, mime_type, title,
        text)``. None means sharing is unavailable.
    :param mime_types: Media types the handler can share.
    """

    success_status = DeliveryStatus.SHARED

    def __init__(
        self,
        handler: Optional[ShareHandler] = None,
        mime_types: Sequence[str] = (PNG_MIME_TYPE,),
        **kwargs: Any,
    ):
        self._handler = handler
        self._mime_types = tuple(mime_types)

    def supports(self, image: EncodedImage) -> bool:
        return self._handler is not None and image.mime_type in self._mime_types

    async def send(self, image: EncodedImage) -> Optional[str]:
        assert self._handler is not None
        filename = SHARE_FILENAME % int(time.time() * 1000)
        try:
            result = self._handler(
                image.data, filename, image.mime_type, SHARE_TITLE, SHARE_TEXT
            )
            if inspect.isawaitable(result):
                await result
        except DeliveryError:
            raise
        except Exception as e:
            raise DeliveryError("Share handler failed: %s" % e) from e
        return filename


@register("clipboard")
class ClipboardChannel(DeliveryChannel):
    """
    System clipboard through ``wl-copy`` or ``xclip``.

    :param commands: Candidate commands, the first one found on ``PATH`` is
        used. Each reads the image from stdin.
    """

    success_status = DeliveryStatus.COPIED
    success_notice = CLIPBOARD_COPIED_NOTICE
    failure_notice = CLIPBOARD_UNSUPPORTED_NOTICE

    def __init__(
        self, commands: Iterable[Sequence[str]] = CLIPBOARD_COMMANDS, **kwargs: Any
    ):
        self._commands = [tuple(c) for c in commands]

    def find_command(self) -> Optional[tuple]:
        for command in self._commands:
            if shutil.which(command[0]):
                return command
        return None

    def supports(self, image: EncodedImage) -> bool:
        return self.find_command() is not None

    async def send(self, image: EncodedImage) -> Optional[str]:
        command = self.find_command()
        if command is None:
            raise DeliveryError("No clipboard command available")
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await process.communicate(image.data)
        if process.returncode != 0:
            raise DeliveryError(
                "%s exited with %d: %s"
                % (command[0], process.returncode, stderr.decode(errors="replace").strip())
            )
        return None


def default_download_dir() -> str:
    """``$PRODUCTPIC_DOWNLOAD_DIR``, else ``~/Downloads``, else the cwd."""
    directory = os.environ.get(DOWNLOAD_DIR_ENV)
    if directory:
        return directory
    downloads = os.path.join(os.path.expanduser("~"), "Downloads")
    if os.path.isdir(downloads):
        return downloads
    return os.getcwd()


@register("download")
class DownloadChannel(DeliveryChannel):
    """
    Plain file download.

    :param download_dir: Target directory, see :py:func:`default_download_dir`.
    """

    success_status = DeliveryStatus.DOWNLOADED

    def __init__(self, download_dir: Optional[str] = None, **kwargs: Any):
        self._download_dir = download_dir

    @property
    def download_dir(self) -> str:
        return self._download_dir or default_download_dir()

    def supports(self, image: EncodedImage) -> bool:
        return True

    async def send(self, image: EncodedImage) -> Optional[str]:
        directory = self.download_dir
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, image.filename)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, image.save, path)
        logger.info("Saved %s" % path)
        return path


class DeliveryChain(object):
    """
    Ordered fallback over delivery channels.

    Example::

        chain = DeliveryChain.from_names(['share', 'clipboard', 'download'])
        outcome = await chain.deliver(image)
        if outcome.notice:
            print(outcome.notice)
    """

    DEFAULT_ORDER = ("share", "clipboard", "download")

    def __init__(self, channels: Sequence[DeliveryChannel]):
        self._channels = list(channels)

    @classmethod
    def from_names(
        cls, names: Sequence[str] = DEFAULT_ORDER, **options: Any
    ) -> "DeliveryChain":
        """
        Build a chain from registered channel names.

        :param options: Keyword arguments passed to every channel, e.g.
            ``handler`` for share or ``download_dir`` for download.
        :raise KeyError: For an unregistered name.
        """
        return cls([CHANNELS[name](**options) for name in names])

    @property
    def channels(self) -> List[DeliveryChannel]:
        return list(self._channels)

    async def deliver(self, image: EncodedImage) -> DeliveryOutcome:
        """Try each channel in order and stop at the first success."""
        outcome = DeliveryOutcome(DeliveryStatus.FAILED)
        for channel in self._channels:
            if not channel.supports(image):
                logger.debug("Channel %s is not supported" % channel.name)
                outcome.attempts.append(
                    DeliveryAttempt(channel.name, AttemptStatus.UNSUPPORTED)
                )
                continue
            try:
                location = await channel.send(image)
            except (DeliveryError, OSError) as e:
                logger.warning("Channel %s failed: %s" % (channel.name, e))
                outcome.attempts.append(
                    DeliveryAttempt(channel.name, AttemptStatus.FAILED, str(e))
                )
                if channel.failure_notice:
                    outcome.notice = channel.failure_notice
                continue
            outcome.attempts.append(
                DeliveryAttempt(channel.name, AttemptStatus.SUCCEEDED)
            )
            outcome.status = channel.success_status
            outcome.channel = channel.name
            outcome.location = location
            outcome.notice = channel.success_notice or outcome.notice
            return outcome

        logger.warning("No delivery channel accepted the image")
        if outcome.notice is None:
            for channel in reversed(self._channels):
                if channel.failure_notice:
                    outcome.notice = channel.failure_notice
                    break
        return outcome
