import sys

import pytest

from productpic import Editor
from productpic.api import pil_io
from productpic.api.delivery import ClipboardChannel, DeliveryChain, DownloadChannel
from productpic.api.state import CompositionParameters
from productpic.constants import (
    CLIPBOARD_COPIED_NOTICE,
    CLIPBOARD_UNSUPPORTED_NOTICE,
    EXPORT_FILENAME,
    DeliveryStatus,
    LoadStatus,
)

from ..utils import png_bytes, rgba


def test_editor_defaults():
    editor = Editor()
    assert editor.parameters.size == (1080, 1080)
    assert editor.bitmap is None
    assert editor.surface is None
    assert repr(editor) == "Editor(size=1080x1080, bitmap=False)"
    assert [c.name for c in editor.chain.channels] == ["share", "clipboard", "download"]


def test_editor_export_before_show():
    editor = Editor()
    assert editor.export().image is None


@pytest.mark.asyncio
async def test_editor_export_and_deliver_before_show(tmp_path):
    editor = Editor(download_dir=str(tmp_path))
    assert await editor.export_and_deliver() is None
    assert await editor.copy_to_clipboard() is None


@pytest.mark.asyncio
async def test_editor_flow(bitmap, tmp_path):
    editor = Editor(chain=DeliveryChain([DownloadChannel(str(tmp_path))]))
    editor.show()
    result = await editor.load(png_bytes(bitmap))
    assert result.status == LoadStatus.LOADED
    editor.patch(
        background_kind="gradient",
        product_rotation=-10,
        overlay_text="Summer sale",
    )
    await editor.view.next_paint()
    assert editor.surface.size == (1080, 1080)

    outcome = await editor.export_and_deliver(2)
    assert outcome.status == DeliveryStatus.DOWNLOADED
    exported = pil_io.open_bitmap(str(tmp_path / EXPORT_FILENAME))
    assert exported.size == (2160, 2160)
    red, green, _, _ = rgba(exported, 1080, 1188)
    assert red > 250 and green < 5
    assert editor.surface.size == (1080, 1080)
    editor.close()


@pytest.mark.asyncio
async def test_editor_share(tmp_path):
    shared = []
    editor = Editor(
        share_handler=lambda data, *args: shared.append(data),
        download_dir=str(tmp_path),
    )
    editor.show()
    outcome = await editor.export_and_deliver()
    assert outcome.status == DeliveryStatus.SHARED
    assert pil_io.decode_png(shared[0]).size == (1080, 1080)


@pytest.mark.asyncio
async def test_editor_copy_to_clipboard():
    editor = Editor()
    editor.clipboard = ClipboardChannel(
        [(sys.executable, "-c", "import sys; sys.stdin.buffer.read()")]
    )
    editor.show()
    outcome = await editor.copy_to_clipboard()
    assert outcome.status == DeliveryStatus.COPIED
    assert outcome.notice == CLIPBOARD_COPIED_NOTICE


@pytest.mark.asyncio
async def test_editor_copy_to_clipboard_unsupported(caplog):
    editor = Editor()
    editor.clipboard = ClipboardChannel([("productpic-no-such-clipboard",)])
    editor.show()
    outcome = await editor.copy_to_clipboard()
    assert outcome.status == DeliveryStatus.FAILED
    assert outcome.notice == CLIPBOARD_UNSUPPORTED_NOTICE
    assert CLIPBOARD_UNSUPPORTED_NOTICE in caplog.text


def test_editor_invalid_color_reaches_subscribers():
    editor = Editor(CompositionParameters(canvas_width=40, canvas_height=30))
    editor.show()
    seen = []
    editor.store.subscribe(lambda parameters, changed: seen.append(changed))
    editor.patch(background_color="not-a-color")
    assert seen == [{"background_color"}]
    assert editor.parameters.background_color == "not-a-color"
    assert rgba(editor.surface, 5, 5) == (0, 0, 0, 255)
