"""
Argbind shared helpers.

- Unset / UnsetType: the "argument omitted" marker. It lets None be an ordinary
  default value for parameters.
- coalesce(): swap Unset for a fallback, leaving every other value alone.
- rename(): decorator fixing __name__/__qualname__ of generated methods.
- mirror(): read-only metadata property over a "_name" slot, handing out container copies.

    >>> coalesce(Unset, 3)
    3
    >>> coalesce(None, 3) is None
    True
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; one instance per process, always falsy.

    It takes part in PEP 604 unions, so `isinstance(x, str | Unset)` reads the
    same as a check against `str | UnsetType`.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, object otherwise (None, 0 and "" included).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator giving a generated function a fixed __name__ and __qualname__.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not builtins.callable(function):
            raise TypeError("rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _detach(object):
    # strings are sequences too, but immutable ones
    if isinstance(object, str | bytes | bytearray):
        return object
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Sequence):
        return [_detach(item) for item in object]
    if isinstance(object, Set):
        return {_detach(item) for item in object}
    return object


def mirror(name, /):
    """
    Build a read-only property returning `self._<name>`.

    Lists, mappings and sets come back as fresh copies, so callers cannot
    edit sanitized metadata in place.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
