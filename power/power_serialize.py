from __future__ import annotations

import json
from typing import Any, Optional
import collections.abc

import yaml
import xmltodict

# TOML: prefer stdlib tomllib (3.11+) for reading; writing always needs 'toml'
try:
    import tomllib as _toml_loader  # type: ignore[attr-defined]
    _HAS_TOMLLIB = True
except Exception:
    _HAS_TOMLLIB = False
try:
    import toml as _toml  # type: ignore[no-redef]
except Exception:
    _toml = None  # type: ignore[assignment]

from power.power_config import dbg
from power.power_errors import DecodeError

FORMATS = ("json", "yaml", "toml", "xml")


# --------------------------
# Helpers
# --------------------------

def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None, strict: bool = False) -> str:
    if isinstance(data, (bytes, bytearray)):
        enc = encoding or 'utf-8'
        try:
            return data.decode(enc, errors='strict' if strict else 'replace')
        except UnicodeDecodeError as e:
            if strict:
                raise DecodeError(f"Input is not valid {enc}: {e}") from e
            return data.decode('utf-8', errors='replace')
    if isinstance(data, str):
        return data
    if strict:
        raise DecodeError(f"Cannot decode a value of type {type(data).__name__}")
    return str(data)


def _to_builtin(obj: Any) -> Any:
    """Recursively convert wrappers and mapping-likes to plain builtins."""
    # Local imports: the wrapper modules import this one.
    from power.power_map import Map
    from power.power_string import PowerString
    from power.power_array import PowerArray

    if isinstance(obj, Map):
        return {k: _to_builtin(v) for k, v in obj.as_mapping().items()}
    if isinstance(obj, PowerString):
        return obj.S
    if isinstance(obj, PowerArray):
        return [_to_builtin(x) for x in obj.A]
    if isinstance(obj, (list, tuple)):
        return [_to_builtin(x) for x in obj]
    # xmltodict returns dict subclasses (Mapping)
    if isinstance(obj, collections.abc.Mapping):
        return {k: _to_builtin(v) for k, v in obj.items()}
    return obj


def detect_format(data_hint: Optional[str] = None) -> Optional[str]:
    """
    Returns a canonical format name among: 'json', 'yaml', 'xml', sniffed
    from the leading characters of the data. TOML cannot be sniffed
    reliably; callers pass fmt='toml' explicitly.
    """
    if data_hint is None:
        return None
    s = data_hint.lstrip()
    if s.startswith('{') or s.startswith('['):
        return 'json'
    if s.startswith('<'):
        return 'xml'
    if s:
        return 'yaml'
    return None


# --------------------------
# Public API
# --------------------------

def deserialize(data: bytes | bytearray | str,
                *,
                fmt: Optional[str] = None,
                strict: bool = False) -> Any:
    """
    Convert serialized data (bytes/string) to native Python structures.
    Supported fmt: 'json', 'yaml', 'toml', 'xml'. If fmt is None the
    format is sniffed from the data.

    With strict=False, undecodable input is returned as raw text.
    With strict=True, it raises DecodeError instead.
    """
    text = _norm_text(data, strict=strict)
    f = (fmt or detect_format(text) or '').lower()
    dbg("deserialize", "fmt", f, "strict", strict, "len", len(text))
    try:
        if f == 'json':
            if strict:
                return json.loads(text)
            try:
                return json.loads(text)
            except ValueError:
                # YAML is a superset of JSON; retry leniently
                return yaml.safe_load(text)
        if f == 'yaml':
            return yaml.safe_load(text)
        if f == 'toml':
            if _HAS_TOMLLIB:
                return _toml_loader.loads(text)  # type: ignore[name-defined]
            if _toml is None:
                raise RuntimeError("TOML support requires Python 3.11+ (tomllib) or the 'toml' package")
            return _toml.loads(text)  # type: ignore[union-attr]
        if f == 'xml':
            return _to_builtin(xmltodict.parse(text))
    except RuntimeError:
        raise
    except Exception as e:
        if strict:
            raise DecodeError(f"Malformed {f} data: {e}") from e
        return text

    if strict:
        raise DecodeError(f"Unsupported serialization format: {fmt!r}")
    # Unknown/unsupported → return text
    return text


def serialize(value: Any,
              *,
              fmt: str,
              pretty: bool = True,
              xml_root: str = "root") -> str:
    """
    Convert a native or wrapped value into a textual representation.
    - fmt: 'json' | 'yaml' | 'toml' | 'xml'
    - For XML, if value is not a single-key dict, it is wrapped under {xml_root: value}
    """
    f = (fmt or '').lower()
    built = _to_builtin(value)
    dbg("serialize", "fmt", f, "type", type(value).__name__)
    if f == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2 if pretty else None)
    if f == 'yaml':
        return yaml.safe_dump(built, sort_keys=False, allow_unicode=True)
    if f == 'toml':
        if _toml is None:
            raise RuntimeError("TOML serialization requires the 'toml' package")
        return _toml.dumps(built)  # type: ignore[union-attr]
    if f == 'xml':
        root: dict
        if isinstance(built, dict) and len(built) == 1:
            root = built
        else:
            root = {xml_root: built}
        return xmltodict.unparse(root, pretty=pretty)
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = [
    "FORMATS",
    "deserialize",
    "serialize",
    "detect_format",
]
