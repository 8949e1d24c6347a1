"""
PowerString: a mutable, chainable, Unicode-aware string box.

A subset of the API mirrors the JavaScript ES6 String object; camelCase
aliases are provided for those methods. All positions and lengths count
code points. Reads never raise on out-of-range positions: they return ''
or 0 instead.

Read the wrapped value from the `S` attribute, or with `str(box)`.
"""

import re
import unicodedata
from typing import Any, List, Optional, Tuple

from power import power_regex
from power.power_datatypes import Ref
from power.power_regex import PatternLike, to_unicode_regex

_TRIM = re.compile(r"^\s+|\s+$")
_TRIM_LEFT = re.compile(r"^\s+")
_TRIM_RIGHT = re.compile(r"\s+$")


def _substr(s: str, start: int, length: Optional[int] = None) -> str:
    """Substring by start and length; negative values count from the end."""
    n = len(s)
    if start < 0:
        start = max(n + start, 0)
    if start > n:
        return ""
    if length is None:
        end = n
    elif length < 0:
        end = n + length
    else:
        end = min(start + length, n)
    if end <= start:
        return ""
    return s[start:end]


def _offset(s: str, offset: int) -> Optional[int]:
    """A search start position, or None when it lies past the end."""
    n = len(s)
    if offset < 0:
        offset = max(n + offset, 0)
    if offset > n:
        return None
    return offset


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, PowerString):
        return value.S
    if isinstance(value, Ref):
        return _text(value.value)
    return str(value)


def _explode(sep: str, s: str, limit: Optional[int]) -> List[str]:
    pieces = s.split(sep) if sep else list(s)
    if limit is None:
        return pieces
    if limit >= 0:
        limit = max(limit, 1)
        if len(pieces) <= limit:
            return pieces
        return pieces[:limit - 1] + [sep.join(pieces[limit - 1:])]
    return pieces[:limit]


class PowerString:
    """A box around one Unicode string.

    Create instances with `of`, `on` or `cast`:

    - `PowerString.of(text)` wraps an independent copy.
    - `PowerString.on(ref)` returns a shared singleton that reads and writes
      `ref.value`. Every call rebinds the same instance, so do not keep it
      around; use `of` when you need to hold on to a box.
    - `PowerString.cast(ref)` makes a new box from `ref.value` and stores the
      box back into `ref.value`.

    Mutating methods return the box itself so calls can be chained.
    """

    _shared: Optional["PowerString"] = None

    def __init__(self, value: str = ""):
        self._ref = Ref(_text(value))

    @property
    def S(self) -> str:
        return self._ref.value

    @S.setter
    def S(self, value: str):
        self._ref.value = value

    # --- Construction ---

    @classmethod
    def of(cls, src: Any = "") -> "PowerString":
        return cls(_text(src))

    @classmethod
    def on(cls, src: Any) -> "PowerString":
        x = cls.__dict__.get("_shared")
        if x is None:
            x = cls()
            cls._shared = x
        if isinstance(src, Ref):
            if not isinstance(src.value, str):
                src.value = _text(src.value)
            x._ref = src
        else:
            x._ref = Ref(_text(src))
        return x

    @classmethod
    def cast(cls, src: Any) -> "PowerString":
        if isinstance(src, Ref):
            x = cls(_text(src.value))
            src.value = x
            return x
        return cls(_text(src))

    @staticmethod
    def from_char_code(code: int) -> str:
        return chr(code)

    # --- Conversion ---

    def to_string(self) -> str:
        return self.S

    def __str__(self):
        return self.S

    def __repr__(self):
        from power.power_printer import Printer
        return Printer().pformat(self)

    def __eq__(self, other):
        if isinstance(other, PowerString):
            return self.S == other.S
        if isinstance(other, str):
            return self.S == other
        return NotImplemented

    __hash__ = None

    # --- Queries ---

    def char_at(self, index: int) -> str:
        return _substr(self.S, index, 1)

    def char_code_at(self, index: int) -> int:
        c = _substr(self.S, index, 1)
        return ord(c) if c else 0

    def length(self) -> int:
        return len(self.S)

    def count(self) -> int:
        """Alias of `length()`."""
        return len(self.S)

    def __len__(self):
        return len(self.S)

    def index_of(self, search: str, from_: int = 0) -> int:
        """Position of the first occurrence of `search` at or after `from_`, or -1."""
        s = self.S
        start = _offset(s, from_)
        if start is None:
            return -1
        return s.find(_text(search), start)

    def last_index_of(self, search: str, from_: int = 0) -> int:
        """Position of the last occurrence of `search`, or -1.

        A positive `from_` skips matches starting before it; a negative one
        ignores matches starting after `length + from_`.
        """
        s = self.S
        search = _text(search)
        n = len(s)
        if from_ >= 0:
            if from_ > n:
                return -1
            return s.rfind(search, from_)
        limit = n + from_
        if limit < 0:
            return -1
        return s.rfind(search, 0, min(n, limit + len(search)))

    def includes(self, search: str, from_: int = 0) -> bool:
        return self.index_of(search, from_) != -1

    def __contains__(self, item) -> bool:
        return _text(item) in self.S

    def starts_with(self, search: str, pos: int = 0) -> bool:
        search = _text(search)
        return _substr(self.S, pos, len(search)) == search

    def ends_with(self, search: str, pos: int = 0) -> bool:
        # pos=0 compares against the tail of the string.
        search = _text(search)
        return _substr(self.S, pos - len(search)) == search

    def match(self, pattern: PatternLike, flags: int = 0, offset: int = 0) -> Optional[list]:
        """Matches `pattern` against the string.

        Without the `a` pseudo-flag, returns `[whole, group1, ...]` for the
        first match. With it, returns every match, grouped per capture group
        (or per match when `flags` includes `SET_ORDER`). None when nothing
        matches.
        """
        regex, is_global = to_unicode_regex(pattern)
        if is_global:
            return power_regex.match_all(regex, self.S, flags, offset)
        return power_regex.match_first(regex, self.S, flags, offset)

    def search(self, pattern: PatternLike, from_: int = 0) -> Tuple[int, Optional[str]]:
        """Finds the first match of `pattern` at or after `from_`.

        Returns `(index, matched_text)`, or `(-1, None)` if there is no match.
        This is an extended version of `index_of_pattern`.
        """
        regex, _ = to_unicode_regex(pattern)
        s = self.S
        start = _offset(s, from_)
        if start is None:
            return -1, None
        m = regex.search(s, start)
        if m is None:
            return -1, None
        return m.start(), m.group(0)

    def index_of_pattern(self, pattern: PatternLike) -> int:
        regex, _ = to_unicode_regex(pattern)
        m = regex.search(self.S)
        return m.start() if m else -1

    def has_index(self, index: int) -> bool:
        return 0 <= index < len(self.S)

    def __getitem__(self, index: int) -> str:
        return self.char_at(index)

    def __iter__(self):
        return iter(self.S)

    # --- Mutators ---

    def __setitem__(self, index: int, value: str):
        s = self.S
        self.S = _substr(s, 0, index) + _text(value) + _substr(s, index + 1)

    def __delitem__(self, index: int):
        s = self.S
        self.S = _substr(s, 0, index) + _substr(s, index + 1)

    def append(self, s: str) -> "PowerString":
        self.S = self.S + _text(s)
        return self

    def prepend(self, s: str) -> "PowerString":
        self.S = _text(s) + self.S
        return self

    def concat(self, *parts):
        """Appends all arguments. Unlike `append`, this does not return the box."""
        self.S = self.S + "".join(_text(p) for p in parts)

    def repeat(self, count: int) -> "PowerString":
        self.S = self.S * count
        return self

    def trim(self) -> "PowerString":
        self.S = _TRIM.sub("", self.S)
        return self

    def trim_left(self) -> "PowerString":
        self.S = _TRIM_LEFT.sub("", self.S)
        return self

    def trim_right(self) -> "PowerString":
        self.S = _TRIM_RIGHT.sub("", self.S)
        return self

    def to_lower_case(self) -> "PowerString":
        self.S = self.S.lower()
        return self

    def to_upper_case(self) -> "PowerString":
        self.S = self.S.upper()
        return self

    def normalize(self, form: str = "NFC") -> "PowerString":
        self.S = unicodedata.normalize(form, self.S)
        return self

    def slice(self, begin: int, end: Optional[int] = None) -> "PowerString":
        s = self.S
        if end is None:
            end = len(s)
        self.S = _substr(s, begin, end if end < 0 else end - begin)
        return self

    def substr(self, start: int, length: Optional[int] = None) -> "PowerString":
        self.S = _substr(self.S, start, length)
        return self

    def substring(self, index_a: int, index_b: Optional[int] = None) -> "PowerString":
        """Like `slice`, but negative indexes clamp to 0 and reversed bounds are swapped."""
        s = self.S
        n = len(s)
        if index_b is None:
            index_b = n
        if index_a > index_b:
            index_a, index_b = index_b, index_a
        index_a = min(max(index_a, 0), n)
        index_b = min(max(index_b, 0), n)
        self.S = s[index_a:index_b]
        return self

    def replace(self, pattern: PatternLike, replacement: Any) -> "PowerString":
        """Replaces the first match of `pattern`, or every match with the `a` flag.

        `replacement` is either a callable receiving each `re.Match`, or a
        template that may use `$1`, `${1}` or `\\1` back-references.
        """
        regex, is_global = to_unicode_regex(pattern)
        self.S = power_regex.replace(regex, self.S, replacement, 0 if is_global else 1)
        return self

    # --- Splitting ---

    def split(self, separator: str, limit: Optional[int] = None):
        """Splits on a literal separator.

        A positive `limit` caps the number of pieces (the last one keeps the
        rest), a negative one drops that many pieces from the end. An empty
        separator splits into code points.
        """
        from power.power_array import PowerArray
        return PowerArray.of(_explode(_text(separator), self.S, limit))

    def split_by_pattern(self, pattern: PatternLike, limit: int = -1, no_empty: bool = False):
        from power.power_array import PowerArray
        regex, _ = to_unicode_regex(pattern)
        return PowerArray.of(power_regex.split(regex, self.S, limit, no_empty))

    # --- JavaScript-style aliases ---

    charAt = char_at
    charCodeAt = char_code_at
    indexOf = index_of
    lastIndexOf = last_index_of
    startsWith = starts_with
    endsWith = ends_with
    indexOfPattern = index_of_pattern
    splitByPattern = split_by_pattern
    toLowerCase = to_lower_case
    toUpperCase = to_upper_case
    trimLeft = trim_left
    trimRight = trim_right
    fromCharCode = from_char_code
