"""
Composition parameters and the state store.

:py:class:`CompositionParameters` is an immutable value: every edit produces a
new instance through :py:func:`apply_patch`, a shallow merge where fields
present in the patch override and all other fields persist unchanged.
Numeric fields are stored verbatim (no range checks) so that whatever the
control surface sends is what the compositor sees; the compositor clamps at
the point of use.

:py:class:`StateStore` owns the current value and publishes every change to
its subscribers, in the order the patches were issued::

    store = StateStore()
    unsubscribe = store.subscribe(lambda params, changed: print(changed))
    store.patch(background_kind='gradient', gradient_to='#111827')
"""

import logging
from typing import Any, Callable, FrozenSet, List, Mapping, Optional

import attrs
from attrs import define, field
from attrs.converters import to_bool
from attrs.validators import in_

from productpic.constants import BackgroundKind

logger = logging.getLogger(__name__)

Subscriber = Callable[["CompositionParameters", FrozenSet[str]], None]


@define(frozen=True)
class CompositionParameters:
    """
    Parameters of one composition.

    .. py:attribute:: canvas_width
    .. py:attribute:: canvas_height

        Surface size in pixels.

    .. py:attribute:: background_kind

        One of :py:class:`~productpic.constants.BackgroundKind`.

    .. py:attribute:: background_color

        Fill color of a solid background.

    .. py:attribute:: gradient_from
    .. py:attribute:: gradient_to

        Colors at the top-left and bottom-right corners of a gradient
        background.

    .. py:attribute:: product_scale

        Multiplier applied on top of the fit-to-box scale.

    .. py:attribute:: product_rotation

        Rotation in degrees, clockwise.

    .. py:attribute:: product_shadow
    .. py:attribute:: product_shadow_opacity

        Drop shadow switch and strength, the latter used within [0, 0.6].

    .. py:attribute:: overlay_text

        Caption. Empty or whitespace-only text draws nothing.

    .. py:attribute:: overlay_text_color
    .. py:attribute:: overlay_text_size
    .. py:attribute:: overlay_text_weight

        Caption style: color, pixel size and CSS-like weight.

    .. py:attribute:: overlay_text_y

        Vertical center of the caption as a fraction of the canvas height.
    """

    canvas_width: int = field(default=1080, converter=int)
    canvas_height: int = field(default=1080, converter=int)
    background_kind: BackgroundKind = field(
        default=BackgroundKind.SOLID,
        converter=BackgroundKind,
        validator=in_(BackgroundKind),
    )
    background_color: str = field(default="#ffffff", converter=str)
    gradient_from: str = field(default="#f3f4f6", converter=str)
    gradient_to: str = field(default="#ffffff", converter=str)
    product_scale: float = field(default=1.0, converter=float)
    product_rotation: float = field(default=0.0, converter=float)
    product_shadow: bool = field(default=True, converter=to_bool)
    product_shadow_opacity: float = field(default=0.2, converter=float)
    overlay_text: str = field(default="", converter=str)
    overlay_text_color: str = field(default="#111827", converter=str)
    overlay_text_size: int = field(default=64, converter=int)
    overlay_text_weight: int = field(default=700, converter=int)
    overlay_text_y: float = field(default=0.85, converter=float)

    @property
    def size(self) -> tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def has_text(self) -> bool:
        return len(self.overlay_text.strip()) > 0

    def asdict(self) -> dict[str, Any]:
        return attrs.asdict(self)


FIELD_NAMES = frozenset(a.name for a in attrs.fields(CompositionParameters))


def initialize() -> CompositionParameters:
    """Return the documented default parameters."""
    return CompositionParameters()


def apply_patch(
    current: CompositionParameters, patch: Optional[Mapping[str, Any]] = None
) -> CompositionParameters:
    """
    Shallow-merge `patch` over `current`.

    Unknown keys are ignored. Values are coerced to the field type but never
    range checked.

    :param current: Parameters to start from.
    :param patch: Mapping of field names to new values.
    :return: New :py:class:`CompositionParameters`.
    """
    if not patch:
        return current
    known = {}
    for key, value in patch.items():
        if key not in FIELD_NAMES:
            logger.warning("Ignoring unknown parameter: %s" % key)
            continue
        known[key] = value
    if not known:
        return current
    return attrs.evolve(current, **known)


def changed_fields(
    old: CompositionParameters, new: CompositionParameters
) -> FrozenSet[str]:
    """Return the names of fields whose values differ."""
    return frozenset(
        name for name in FIELD_NAMES if getattr(old, name) != getattr(new, name)
    )


def redraw_required(
    old: CompositionParameters, new: CompositionParameters, has_bitmap: bool
) -> bool:
    """
    Return True if the pixels of ``new`` may differ from those of ``old``.

    A field only invalidates the surface while the stage that reads it is
    active, e.g. gradient colors do not matter on a solid background.
    """
    for name in changed_fields(old, new):
        if name in ("canvas_width", "canvas_height", "background_kind"):
            return True
        if name == "background_color":
            if new.background_kind == BackgroundKind.SOLID:
                return True
        elif name in ("gradient_from", "gradient_to"):
            if new.background_kind == BackgroundKind.GRADIENT:
                return True
        elif name == "product_shadow_opacity":
            if has_bitmap and new.product_shadow:
                return True
        elif name.startswith("product_"):
            if has_bitmap:
                return True
        elif name == "overlay_text":
            if old.has_text or new.has_text:
                return True
        elif name.startswith("overlay_text_"):
            if new.has_text:
                return True
    return False


class StateStore(object):
    """
    Owner of the current :py:class:`CompositionParameters`.

    The store is created once and handed by reference to both the view and
    the control surface. Subscribers receive ``(parameters, changed)`` after
    every patch that changes at least one field.
    """

    def __init__(self, parameters: Optional[CompositionParameters] = None):
        self._parameters = parameters if parameters is not None else initialize()
        self._subscribers: List[Subscriber] = []

    @property
    def parameters(self) -> CompositionParameters:
        return self._parameters

    def snapshot(self) -> CompositionParameters:
        """Current parameters; the value is immutable so no copy is needed."""
        return self._parameters

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register `callback` and return a function that unregisters it.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def patch(
        self, patch: Optional[Mapping[str, Any]] = None, **fields: Any
    ) -> CompositionParameters:
        """
        Apply a partial update and publish it.

        Example::

            store.patch({'product_scale': 1.2})
            store.patch(overlay_text='Summer sale')
        """
        merged = dict(patch or {})
        merged.update(fields)
        return self.replace(apply_patch(self._parameters, merged))

    def replace(self, parameters: CompositionParameters) -> CompositionParameters:
        """Swap in a whole new value and publish the difference."""
        previous = self._parameters
        self._parameters = parameters
        changed = changed_fields(previous, parameters)
        if changed:
            logger.debug("Parameters changed: %s" % ", ".join(sorted(changed)))
            for callback in list(self._subscribers):
                callback(parameters, changed)
        return parameters

    def reset(self) -> CompositionParameters:
        return self.replace(initialize())
