"""
productpic: Python package for composing and exporting product pictures.

A product photo is placed on a solid, gradient or checker background, with an
optional drop shadow and a caption, and exported as PNG at any resolution.

Basic usage::

    import asyncio
    from productpic import Editor

    async def main():
        editor = Editor()
        editor.show()
        await editor.load('product.jpg')
        editor.patch(background_kind='gradient', overlay_text='Summer sale')
        editor.export(2).image.save('product@2x.png')

    asyncio.run(main())

Architecture:

- :py:mod:`productpic.api`: State store, bitmap loader, live view, export
  and delivery (primary interface)
- :py:mod:`productpic.composite`: Layer rendering engine

For rendering without any state, call :py:func:`productpic.composite.render`
directly with a :py:class:`~productpic.api.state.CompositionParameters`.
"""

from productpic.api.editor import Editor
from productpic.api.state import CompositionParameters
from productpic.version import __version__

__all__ = ["CompositionParameters", "Editor", "__version__"]
