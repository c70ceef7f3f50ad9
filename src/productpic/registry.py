"""
Registry pattern utility for creating type registries.

This module provides the ``new_registry`` function which creates a registry
dictionary and a decorator for registering types/handlers. Background painters
are keyed by :py:class:`~productpic.constants.BackgroundKind` and delivery
channels by name, so both can be picked from plain data (a parameter value, a
list of channel names) without an if-chain. A key can be registered only once.

Usage example::

    from productpic.registry import new_registry

    PAINTERS, register = new_registry(attribute='kind')

    @register(BackgroundKind.SOLID)
    def paint_solid(parameters, width, height):
        ...

    painter = PAINTERS[BackgroundKind.SOLID]
"""

from typing import Any, Callable, Tuple, TypeVar, Union

T = TypeVar("T")


def new_registry(attribute: Union[str, None] = None) -> Tuple[dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name to set on registered objects.
                     The key will be stored as this attribute on the object.
    :return: Tuple of (registry_dict, register_decorator)
    :raise KeyError: From ``register`` when the key is taken.

    Example::

        CHANNELS, register = new_registry(attribute='name')

        @register('download')
        class DownloadChannel:
            ...

        # CHANNELS now contains: {'download': DownloadChannel}
        # DownloadChannel.name == 'download'
    """
    registry: dict = {}

    def register(key: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        if key in registry:
            raise KeyError("%r is already registered" % (key,))

        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            registry[key] = func
            if attribute:
                setattr(func, attribute, key)
            return func

        return decorator

    return registry, register
