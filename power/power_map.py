"""
Map: an ordered string-keyed mapping with array-style access, left-biased
merge and byte serialization.
"""

from typing import Any, Dict, List, Optional
import collections.abc

from power.power_config import dbg, serial_format
from power.power_datatypes import SourceKind, classify_source, iter_pairs, public_fields
from power.power_errors import DecodeError
from power.power_serialize import deserialize, serialize

# toml and xml cannot carry every mapping unchanged (no null, no typed
# scalars in xml), so Map restricts itself to these.
MAP_FORMATS = ("json", "yaml")


def _map_format(fmt: Optional[str]) -> str:
    f = (fmt or serial_format()).strip().lower()
    if f not in MAP_FORMATS:
        raise ValueError(f"Map serialization supports {', '.join(MAP_FORMATS)}, not {f!r}")
    return f


class MapEntries(collections.abc.Sequence):
    """A restartable view of a Map's (key, value) pairs taken at creation time."""
    __slots__ = ("_items",)

    def __init__(self, data: Dict[str, Any]):
        self._items = list(data.items())

    def __len__(self):
        return len(self._items)

    def __getitem__(self, idx):
        return self._items[idx]

    def __iter__(self):
        return iter(self._items)

    def __repr__(self):
        return f"MapEntries({self._items!r})"


class Map:
    """An ordered mapping from string keys to arbitrary values.

    Assigning `None` to a key removes it. `merge` never overwrites keys that
    are already present; `set` replaces the whole content.
    """

    def __init__(self, source: Any = None):
        self._data: Dict[str, Any] = {}
        if source is not None:
            self.merge(source)

    # --- Entry access ---

    def get(self, key: str) -> Any:
        """Returns the stored value, or None when the key is absent."""
        return self._data.get(key)

    def set_entry(self, key: str, value: Any):
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value

    def has(self, key: str) -> bool:
        return self._data.get(key) is not None

    def remove(self, key: str):
        self._data.pop(key, None)

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set_entry(key, value)

    def __delitem__(self, key):
        self.remove(key)

    def __contains__(self, key) -> bool:
        return self.has(key)

    # --- Whole-map operations ---

    def as_mapping(self) -> Dict[str, Any]:
        """The live backing dict. Changes made through it bypass `set_entry`."""
        return self._data

    def clear(self) -> "Map":
        self._data = {}
        return self

    def count(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def iterate(self) -> MapEntries:
        return MapEntries(self._data)

    items = iterate

    def __iter__(self):
        return iter(list(self._data))

    def keys(self) -> List[str]:
        return list(self._data)

    def merge(self, source: Any) -> "Map":
        """Adds the entries of `source` whose keys are not present yet.

        `source` may be a mapping, another Map, an iterable of (key, value)
        pairs (or an object with `get_iterator()`), or an object with public
        fields. Anything else raises UnsupportedSourceError.
        """
        kind = classify_source(source, Map)
        dbg("Map.merge", "kind", kind.name, "type", type(source).__name__)
        if kind is SourceKind.SAME_TYPE:
            pairs = source._data.items()
        elif kind is SourceKind.RAW_MAPPING:
            pairs = source.items()
        elif kind is SourceKind.ITERABLE_SOURCE:
            # Folded into a dict first: the last pair for a key wins within the
            # source, and a malformed source leaves the map untouched.
            pairs = dict(iter_pairs(source)).items()
        else:
            pairs = public_fields(source).items()

        data = self._data
        for key, value in pairs:
            if value is not None and key not in data:
                data[key] = value
        return self

    def set(self, source: Any) -> "Map":
        """Replaces the content with `source`.

        A plain mapping is copied as-is; other shapes go through `merge`
        on an emptied map.
        """
        if source is self:
            return self
        if isinstance(source, collections.abc.Mapping) and not isinstance(source, Map):
            self._data = dict(source)
            return self
        previous = self._data
        self._data = {}
        try:
            self.merge(source)
        except Exception:
            self._data = previous
            raise
        return self

    # --- Serialization ---

    def serialize(self, fmt: Optional[str] = None) -> bytes:
        """Encodes the content as UTF-8 json or yaml.

        `fmt` defaults to the POWER_SERIAL_FORMAT setting. Only formats that
        reproduce the mapping exactly are accepted.
        """
        f = _map_format(fmt)
        return serialize(self._data, fmt=f, pretty=False).encode("utf-8")

    def deserialize(self, data, fmt: Optional[str] = None):
        """Replaces the content with decoded `data`; same `fmt` default as `serialize`."""
        f = _map_format(fmt)
        decoded = deserialize(data, fmt=f, strict=True)
        if not isinstance(decoded, collections.abc.Mapping):
            raise DecodeError(f"Serialized data holds a {type(decoded).__name__}, not a mapping")
        self._data = dict(decoded)

    def __getstate__(self):
        return {"data": self._data}

    def __setstate__(self, state):
        self._data = dict(state["data"])

    # --- Comparison & display ---

    def __eq__(self, other):
        if isinstance(other, Map):
            return self._data == other._data
        if isinstance(other, collections.abc.Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        from power.power_printer import Printer
        return Printer().pformat(self)
