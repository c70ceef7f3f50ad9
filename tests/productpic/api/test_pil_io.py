import io

import pytest
from PIL import Image

from productpic.api import pil_io

from ..utils import png_bytes


@pytest.fixture
def photo():
    return Image.new("RGB", (32, 16), (10, 20, 30))


def test_open_bitmap_bytes(photo):
    image = pil_io.open_bitmap(png_bytes(photo))
    assert image.mode == "RGBA"
    assert image.size == (32, 16)
    assert image.getpixel((0, 0)) == (10, 20, 30, 255)


def test_open_bitmap_path(photo, tmp_path):
    path = tmp_path / "photo.png"
    photo.save(path)
    assert pil_io.open_bitmap(str(path)).size == (32, 16)
    assert pil_io.open_bitmap(path).size == (32, 16)


def test_open_bitmap_file(photo):
    with io.BytesIO(png_bytes(photo)) as f:
        assert pil_io.open_bitmap(f).size == (32, 16)


def test_open_bitmap_image(photo):
    image = pil_io.open_bitmap(photo)
    assert image is not photo
    assert image.mode == "RGBA"
    assert photo.mode == "RGB"


def test_open_bitmap_data_url(photo):
    url = pil_io.to_data_url(png_bytes(photo))
    assert url.startswith("data:image/png;base64,")
    assert pil_io.open_bitmap(url).size == (32, 16)


def test_open_bitmap_exif_orientation(photo):
    exif = Image.Exif()
    exif[0x0112] = 6
    with io.BytesIO() as f:
        photo.save(f, format="JPEG", exif=exif)
        data = f.getvalue()
    assert pil_io.open_bitmap(data).size == (16, 32)


@pytest.mark.parametrize(
    "source",
    [b"", b"not an image", "data:image/png;base64,!!!", "data:text/plain,hello"],
)
def test_open_bitmap_invalid(source):
    with pytest.raises(pil_io.DECODE_ERRORS):
        pil_io.open_bitmap(source)


def test_open_bitmap_missing(tmp_path):
    with pytest.raises(OSError):
        pil_io.open_bitmap(str(tmp_path / "missing.png"))


def test_encode_decode_png():
    surface = Image.new("RGBA", (3, 2), (1, 2, 3, 4))
    data = pil_io.encode_png(surface)
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    decoded = pil_io.decode_png(data)
    assert decoded.mode == "RGBA"
    assert decoded.tobytes() == surface.tobytes()
