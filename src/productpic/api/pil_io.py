"""
PIL IO module.
"""
import base64
import binascii
import io
import logging
import os
from typing import IO, Any, Union

from PIL import Image, ImageOps

from productpic.constants import PNG_MIME_TYPE

logger = logging.getLogger(__name__)

BitmapSource = Union[str, "os.PathLike[str]", bytes, IO[bytes], Image.Image]

#: Errors Pillow raises for unreadable or hostile input.
DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


def open_bitmap(source: BitmapSource) -> Image.Image:
    """
    Decode a product photo into an RGBA image.

    :param source: A file path, raw bytes, a binary file object, a
        ``data:`` URL or an already decoded :py:class:`PIL.Image.Image`.
    :return: A fully loaded RGBA image detached from `source`.
    """
    if isinstance(source, Image.Image):
        image = source.copy()
    elif isinstance(source, bytes):
        image = Image.open(io.BytesIO(source))
    elif isinstance(source, str) and source.startswith("data:"):
        image = Image.open(io.BytesIO(parse_data_url(source)))
    else:
        image = Image.open(source)
    image.load()
    image = ImageOps.exif_transpose(image)
    if image.mode != "RGBA":
        logger.debug("%s converted to RGBA" % image.mode)
        image = image.convert("RGBA")
    return image


def parse_data_url(url: str) -> bytes:
    """Return the payload of a base64 ``data:`` URL."""
    header, sep, payload = url.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("Unsupported data URL: %s" % header[:64])
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError("Invalid base64 payload: %s" % e)


def to_data_url(data: bytes, mime_type: str = PNG_MIME_TYPE) -> str:
    return "data:%s;base64,%s" % (mime_type, base64.b64encode(data).decode("ascii"))


def encode_png(surface: Image.Image, **kwargs: Any) -> bytes:
    """Losslessly encode a surface as PNG bytes."""
    with io.BytesIO() as f:
        surface.save(f, format="PNG", **kwargs)
        return f.getvalue()


def decode_png(data: bytes) -> Image.Image:
    with io.BytesIO(data) as f:
        image = Image.open(f)
        image.load()
    return image
