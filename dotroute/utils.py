import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    intent
    - used by the internal API to distinguish "not provided" from a user‑supplied
      value (including None, False, 0 or other falsy values). flag defaults in
      particular may legitimately be None.
    - although this class is importable, it is intended for internal use only.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process‑wide singleton (see __new__).
    - display: repr(Unset) -> "Unset" (human‑friendly).
    - final: subclassing is forbidden to preserve semantics (see __init_subclass__).

    typing helpers
    - union: UnsetType participates in PEP 604 unions via | so isinstance checks
      such as isinstance(x, str | Unset) read naturally in sanitizers.
    """

    def __or__(self, other, /):
        """
        support UnsetType | T in annotations and isinstance checks.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        support T | UnsetType in annotations and isinstance checks.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        return the singleton instance (process‑wide).
        """
        return super().__new__(cls)

    def __bool__(self):
        """
        make the sentinel falsy to ease guard checks.
        """
        return False

    def __repr__(self):
        """
        stable, concise representation in logs and diagnostics.
        """
        return "Unset"

    def __init_subclass__(cls):
        """
        disallow subclassing to keep sentinel semantics stable.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
internal singleton instance of UnsetType.

note
- exposed for completeness, but intended for internal API use only.
"""


def coalesce(object, default=None, /):
    """
    internal helper: return `default` when `object` is Unset; otherwise return `object`.

    intent
    - normalize sentinel values at the API boundary so downstream code can treat
      parameters uniformly without branching on Unset.

    notes
    - this function does not copy; it simply passes through the object.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    set a stable __name__/__qualname__ on a callable, or return a curried renamer.

    parameters
    - x: callable | str
      • callable → rename in place.
      • str      → desired name; returns a callable that will rename a future function.
    - name: str | None
      target name to assign.

    errors
    - TypeError if a callable is given and the name is not a string.
    """
    if isinstance(x, str):
        return functools.partial(rename, name=x)
    if not isinstance(name, str):
        raise TypeError("callable name must be a string")
    x.__qualname__ = name
    x.__name__ = name
    return x


def view(name):
    """
    internal: build a read-only view over a private backing field.

    storage convention
    - the value is stored on the instance under "_" + name by the constructor.

    behavior
    - exposes a property that returns an immutable view of the underlying value:
      • Sequence (non-str) → tuple
      • Mapping           → MappingProxyType
      • Set               → frozenset
      • other types       → returned as-is
    """

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


class SpecType(type):
    """
    Metaclass that turns declaration classes into introspectable, read-only specs.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the "_" + name attribute set at construction time.
    - Derive __typename__ from the class name (camel-case split with hyphens) so
      sanitizer messages read "union-group 'names' must ...".
    - Provide stable __repr__/__rich_repr__ implementations driven by
      __displayable__ (falls back to __introspectable__).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(type='number', alias=None, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers (e.g., rich).
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def kebab(name, /):
    """
    convert an internal camelCase flag name to its CLI spelling ("searchTerm" → "search-term").
    """
    return re.sub(r"(?<=[^\W_])(?=[A-Z])", "-", name).lower()


def camel(name, /):
    """
    convert a CLI kebab-case name to the internal camelCase spelling ("search-term" → "searchTerm").

    notes
    - names already in camelCase are returned unchanged, so "--searchTerm" and
      "--search-term" address the same flag.
    """
    head, *tail = name.split("-")
    return head + "".join(segment[:1].upper() + segment[1:] for segment in tail)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "view",
    "SpecType",
    "kebab",
    "camel",
)
