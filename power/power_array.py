"""
PowerArray: the sequence companion of PowerString.

Only what PowerString needs is provided: the three construction modes,
list-style access, and `join`.
"""

from typing import Any, Iterable, List, Optional
import collections.abc

from power.power_datatypes import Ref


class PowerArray(collections.abc.MutableSequence):
    """A box around a Python list, held in the `A` attribute."""

    _shared: Optional["PowerArray"] = None

    def __init__(self, items: Iterable[Any] = ()):
        self._ref = Ref(list(items))

    @property
    def A(self) -> List[Any]:
        return self._ref.value

    @A.setter
    def A(self, value: List[Any]):
        self._ref.value = value

    @classmethod
    def of(cls, src: Iterable[Any] = ()) -> "PowerArray":
        if isinstance(src, PowerArray):
            src = src.A
        return cls(src)

    @classmethod
    def on(cls, src: Any) -> "PowerArray":
        """Rebinds the shared instance to `src` (a Ref holding a list) and returns it."""
        x = cls.__dict__.get("_shared")
        if x is None:
            x = cls()
            cls._shared = x
        if isinstance(src, Ref):
            if not isinstance(src.value, list):
                src.value = list(src.value or ())
            x._ref = src
        else:
            x._ref = Ref(list(src))
        return x

    @classmethod
    def cast(cls, src: Any) -> "PowerArray":
        if isinstance(src, Ref):
            x = cls(src.value or ())
            src.value = x
            return x
        return cls(src)

    def __getitem__(self, index):
        return self.A[index]

    def __setitem__(self, index, value):
        self.A[index] = value

    def __delitem__(self, index):
        del self.A[index]

    def __len__(self) -> int:
        return len(self.A)

    def insert(self, index, value):
        self.A.insert(index, value)

    def length(self) -> int:
        return len(self.A)

    def join(self, separator: str = ""):
        from power.power_string import PowerString
        return PowerString.of(str(separator).join(str(x) for x in self.A))

    def __eq__(self, other):
        if isinstance(other, PowerArray):
            return self.A == other.A
        if isinstance(other, (list, tuple)):
            return self.A == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        from power.power_printer import Printer
        return Printer().pformat(self)
