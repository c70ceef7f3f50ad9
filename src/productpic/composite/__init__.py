"""
Composite module for product picture rendering.

This subpackage is the rendering engine. It draws a composition into a
raster surface in a fixed layer order:

1. Background: solid color, diagonal gradient, or the checker pattern used
   for transparent and checker backgrounds.
2. Product: the decoded bitmap fitted into 80% x 70% of the surface, scaled,
   rotated about a point at 55% of the height, with an optional flattened
   elliptical drop shadow underneath.
3. Caption: centered text at a configurable height.

Key modules:

- :py:mod:`productpic.composite.composite`: Main compositing functions
- :py:mod:`productpic.composite.paint`: Background fills (solid, gradient, checker)
- :py:mod:`productpic.composite.vector`: Shadow ellipse and bitmap placement
- :py:mod:`productpic.composite.typesetting`: Caption rasterization

Example usage::

    from productpic.api.state import initialize, apply_patch
    from productpic.composite import render

    parameters = apply_patch(initialize(), {'background_kind': 'gradient'})
    surface = render(parameters, bitmap)
    surface.save('output.png')

The engine keeps color and alpha as float32 NumPy planes and blends each
layer source-over, so rendering is deterministic for identical inputs.
"""

from productpic.composite.composite import (
    Compositor,
    ProductPlacement,
    place_product,
    render,
)

__all__ = [
    "Compositor",
    "ProductPlacement",
    "place_product",
    "render",
]
