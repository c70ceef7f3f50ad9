"""
High-level API for composing product pictures.

This subpackage holds the stateful parts of productpic around the pure
rendering engine in :py:mod:`productpic.composite`.

Key modules:

- :py:mod:`productpic.api.editor`: Editor facade wiring everything together
- :py:mod:`productpic.api.state`: Composition parameters and the state store
- :py:mod:`productpic.api.loader`: Asynchronous bitmap loading with stale-result discard
- :py:mod:`productpic.api.view`: Live display surface with coalesced repaints
- :py:mod:`productpic.api.export`: Off-screen export at arbitrary resolution
- :py:mod:`productpic.api.delivery`: Share, clipboard and download fallback chain
- :py:mod:`productpic.api.pil_io`: PIL/Pillow decode and encode utilities

Example usage::

    from productpic.api.state import StateStore

    store = StateStore()
    store.subscribe(lambda parameters, changed: print(sorted(changed)))
    store.patch(product_scale=1.2, product_rotation=-10)
"""
