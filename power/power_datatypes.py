"""
Shared data types for the power wrappers.

Provides the `Ref` variable cell used by the aliasing factories and the
closed set of source shapes accepted by Map.merge / Map.set.
"""

from enum import Enum, auto
from typing import Any, Iterator, Tuple
import collections.abc

from power.power_errors import UnsupportedSourceError


class Ref:
    """A mutable cell standing in for a caller-held variable.

    `PowerString.on(ref)` reads and writes through `ref.value`, and
    `PowerString.cast(ref)` replaces `ref.value` with the new box.
    """
    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


class SourceKind(Enum):
    RAW_MAPPING = auto()
    SAME_TYPE = auto()
    ITERABLE_SOURCE = auto()
    FIELDED_OBJECT = auto()


# Values that are never accepted as a merge source, even though some of
# them are iterable or carry attributes.
_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))


def classify_source(source: Any, same_type: type) -> SourceKind:
    """Decide which accepted shape `source` has, or raise UnsupportedSourceError."""
    if isinstance(source, same_type):
        return SourceKind.SAME_TYPE
    if isinstance(source, collections.abc.Mapping):
        return SourceKind.RAW_MAPPING
    if isinstance(source, _SCALARS):
        raise UnsupportedSourceError(source)
    if callable(getattr(source, "get_iterator", None)):
        return SourceKind.ITERABLE_SOURCE
    if isinstance(source, collections.abc.Iterable):
        return SourceKind.ITERABLE_SOURCE
    if hasattr(source, "__dict__") and not isinstance(source, type):
        return SourceKind.FIELDED_OBJECT
    raise UnsupportedSourceError(source)


def iter_pairs(source: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield (key, value) pairs from an ITERABLE_SOURCE."""
    getter = getattr(source, "get_iterator", None)
    it = getter() if callable(getter) else source
    if isinstance(it, collections.abc.Mapping):
        yield from it.items()
        return
    for item in it:
        if isinstance(item, _SCALARS) or not isinstance(item, collections.abc.Sequence) or len(item) != 2:
            raise UnsupportedSourceError(item)
        yield item[0], item[1]


def public_fields(source: Any) -> dict:
    """The public instance fields of a FIELDED_OBJECT, in definition order."""
    return {k: v for k, v in vars(source).items() if not k.startswith("_")}
