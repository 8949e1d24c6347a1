"""
Delimiter-bounded regular expressions for PowerString.

Patterns are written as `<delim>expression<delim>flags`, for example
`/a+b/i`. Before use every pattern is promoted to Unicode mode and the
`a` pseudo-flag ("apply to all matches") is stripped off and reported to
the caller as an `is_global` boolean.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Callable, List, Optional, Tuple, Union

from power.power_config import dbg, regex_cache_size
from power.power_errors import PatternSyntaxError

# Match flags, numerically compatible with the PCRE constants they mirror.
PATTERN_ORDER = 1
SET_ORDER = 2
OFFSET_CAPTURE = 256
UNMATCHED_AS_NULL = 512

GLOBAL_FLAG = "a"
UNICODE_FLAG = "u"

_BRACKETS = {"(": ")", "[": "]", "{": "}", "<": ">"}

_FLAG_BITS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
    "D": 0,  # accepted, no Python equivalent
    "S": 0,
}

PatternLike = Union[str, "re.Pattern[str]"]


def split_pattern(pattern: str) -> Tuple[str, str, str]:
    """Split a delimited pattern into (delimiter, expression, flags)."""
    if not isinstance(pattern, str) or not pattern:
        raise PatternSyntaxError(str(pattern), "empty pattern")
    delim = pattern[0]
    if delim.isalnum() or delim == "\\" or delim.isspace():
        raise PatternSyntaxError(pattern, "delimiter must not be alphanumeric, backslash or whitespace")
    closing = _BRACKETS.get(delim, delim)

    depth = 0
    i = 1
    end = -1
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if closing != delim and ch == delim:
            depth += 1
        elif ch == closing:
            if depth == 0:
                end = i
                break
            depth -= 1
        i += 1
    if end < 0:
        raise PatternSyntaxError(pattern, f"no ending delimiter {closing!r} found")
    return delim, pattern[1:end], pattern[end + 1:]


def normalize_pattern(pattern: str) -> Tuple[str, bool]:
    """Force Unicode mode on `pattern` and strip the `a` pseudo-flag.

    Returns the rewritten pattern literal and whether `a` was present.
    """
    delim, expression, flags = split_pattern(pattern)
    is_global = GLOBAL_FLAG in flags
    flags = flags.replace(GLOBAL_FLAG, "").replace(UNICODE_FLAG, "") + UNICODE_FLAG
    closing = _BRACKETS.get(delim, delim)
    return f"{delim}{expression}{closing}{flags}", is_global


@lru_cache(maxsize=regex_cache_size())
def _compile(pattern: str) -> Tuple["re.Pattern[str]", bool]:
    normalized, is_global = normalize_pattern(pattern)
    _, expression, flags = split_pattern(normalized)
    bits = 0
    for f in flags:
        if f not in _FLAG_BITS:
            raise PatternSyntaxError(pattern, f"unknown modifier {f!r}")
        bits |= _FLAG_BITS[f]
    try:
        compiled = re.compile(expression, bits)
    except re.error as e:
        raise PatternSyntaxError(pattern, str(e)) from e
    dbg("regex compile", repr(pattern), "->", repr(normalized), "global", is_global)
    return compiled, is_global


def to_unicode_regex(pattern: PatternLike) -> Tuple["re.Pattern[str]", bool]:
    """Compile a delimited pattern; returns (compiled, is_global).

    A precompiled `re.Pattern` is used as-is and is never global.
    """
    if isinstance(pattern, re.Pattern):
        return pattern, False
    if not isinstance(pattern, str):
        # PowerString and other text-like values
        pattern = str(pattern)
    return _compile(pattern)


def clear_cache():
    _compile.cache_clear()


# --------------------------
# Matching
# --------------------------

def _clamp_offset(text: str, offset: int) -> Optional[int]:
    n = len(text)
    if offset < 0:
        offset = max(n + offset, 0)
    if offset > n:
        return None
    return offset


def _groups(m: "re.Match[str]", flags: int, trim: bool = False) -> list:
    last = m.re.groups
    if trim and not flags & UNMATCHED_AS_NULL:
        # Trailing groups that did not participate are left out.
        while last > 0 and m.group(last) is None:
            last -= 1
    out = []
    for i in range(last + 1):
        text = m.group(i)
        if text is None and not flags & UNMATCHED_AS_NULL:
            text = ""
        out.append((text, m.start(i)) if flags & OFFSET_CAPTURE else text)
    return out


def match_first(regex: "re.Pattern[str]", text: str, flags: int = 0, offset: int = 0) -> Optional[list]:
    start = _clamp_offset(text, offset)
    if start is None:
        return None
    m = regex.search(text, start)
    return _groups(m, flags, trim=True) if m else None


def match_all(regex: "re.Pattern[str]", text: str, flags: int = 0, offset: int = 0) -> Optional[list]:
    start = _clamp_offset(text, offset)
    if start is None:
        return None
    found = [_groups(m, flags) for m in regex.finditer(text, start)]
    if not found:
        return None
    if flags & SET_ORDER:
        return found
    return [[groups[i] for groups in found] for i in range(regex.groups + 1)]


def split(regex: "re.Pattern[str]", text: str, limit: int = -1, no_empty: bool = False) -> List[str]:
    """Split `text` around matches of `regex`; captured groups are not kept.

    A positive `limit` caps the number of pieces, the last piece holding
    the unsplit remainder. Zero or negative means no limit.
    """
    pieces: List[str] = []
    prev = 0
    for m in regex.finditer(text):
        if limit > 0 and len(pieces) >= limit - 1:
            break
        piece = text[prev:m.start()]
        if m.end() == m.start() and m.start() == prev and prev > 0 and not piece:
            # An empty match right after the previous one yields no new piece.
            continue
        if piece or not no_empty:
            pieces.append(piece)
        prev = m.end()
    tail = text[prev:]
    if tail or not no_empty:
        pieces.append(tail)
    return pieces


# --------------------------
# Replacement
# --------------------------

def parse_replacement(template: str) -> List[Union[str, int]]:
    """Break a replacement template into literal text and group numbers.

    Recognizes `$n`, `${n}` and `\\n` back-references (n up to two digits);
    `\\\\` is a literal backslash.
    """
    parts: List[Union[str, int]] = []
    buf = []
    i = 0
    n = len(template)
    while i < n:
        ch = template[i]
        ref = None
        if ch == "\\" and i + 1 < n:
            nxt = template[i + 1]
            if nxt == "\\":
                buf.append("\\")
                i += 2
                continue
            if nxt.isdigit():
                j = i + 1
                while j < n and j < i + 3 and template[j].isdigit():
                    j += 1
                ref, i = int(template[i + 1:j]), j
        elif ch == "$" and i + 1 < n:
            nxt = template[i + 1]
            if nxt.isdigit():
                j = i + 1
                while j < n and j < i + 3 and template[j].isdigit():
                    j += 1
                ref, i = int(template[i + 1:j]), j
            elif nxt == "{":
                close = template.find("}", i + 2)
                inner = template[i + 2:close] if close > 0 else ""
                if inner.isdigit() and len(inner) <= 2:
                    ref, i = int(inner), close + 1
        if ref is None:
            buf.append(ch)
            i += 1
            continue
        if buf:
            parts.append("".join(buf))
            buf = []
        parts.append(ref)
    if buf:
        parts.append("".join(buf))
    return parts


def _expand(m: "re.Match[str]", parts: List[Union[str, int]]) -> str:
    out = []
    for part in parts:
        if isinstance(part, int):
            if part <= m.re.groups:
                out.append(m.group(part) or "")
        else:
            out.append(part)
    return "".join(out)


def replace(regex: "re.Pattern[str]", text: str, replacement: Any, count: int = 0) -> str:
    """Replace matches of `regex`; `count=0` replaces all of them.

    A callable replacement receives each `re.Match` and its result is
    converted with `str()`.
    """
    if callable(replacement):
        fn: Callable[["re.Match[str]"], str] = lambda m: str(replacement(m))
    else:
        parts = parse_replacement(str(replacement))
        fn = lambda m: _expand(m, parts)
    return regex.sub(fn, text, count=count)


__all__ = [
    "PATTERN_ORDER",
    "SET_ORDER",
    "OFFSET_CAPTURE",
    "UNMATCHED_AS_NULL",
    "split_pattern",
    "normalize_pattern",
    "to_unicode_regex",
    "match_first",
    "match_all",
    "split",
    "replace",
    "parse_replacement",
    "clear_cache",
]
