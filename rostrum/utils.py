"""
Rostrum utilities (internal helpers shared by the declaration and dispatch layers)

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “not declared”, distinct from None, 0, "" or False.
  • An action description of "" or a display order of 0 is legitimate, so the
    declaration layer needs a marker that no user value can collide with.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; every other value passes through.

- @rename("name")
  • Give generated callables (the built-in help handler, wrappers) a stable
    __name__/__qualname__ for tracebacks and reprs.

- mirror("attr")
  • Read-only property over a private backing field (self._attr). Containers are
    served as read-only views, so an action or parameter cannot be mutated after
    the registry is built.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(0, "fallback")
    0
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not declared.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - A per-process singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values such as None, 0, "" or False are preserved as-is; only Unset
    is replaced.

    Examples
    - coalesce("help", "h")  -> "help"
    - coalesce(Unset, "h")   -> "h"
    - coalesce(False, True)  -> False
    """
    return object if object is not Unset else default


def rename(name, /):
    """
    Decorator giving a generated callable a stable __name__/__qualname__.
    """
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")

    def wrapper(callable, /):
        if not builtins.callable(callable):
            raise TypeError("@rename() must be applied to a callable")
        callable.__qualname__ = callable.__name__ = name
        return callable

    return wrapper


def _seal(object):
    """
    Return a read-only view of a container (shallow).

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType
    - Set                   → frozenset
    - anything else         → unchanged
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(object)
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property over the backing attribute "_{name}".

    Example
    - Given self._triggers = ["h", "help"], declaring triggers = mirror("triggers")
      exposes ("h", "help").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _seal(getattr(self, "_" + name))

    return property(getter)


class Introspectable(type):
    """
    Metaclass for declaration objects (parameters, actions).

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used as the subject of validation messages.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field.
    - Provide stable __repr__/__rich_repr__ implementations built from those names.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",
    "Introspectable",

    # Constants
    "Unset",
)
