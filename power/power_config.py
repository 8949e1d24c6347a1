"""
Environment-driven settings and debug tracing.

Settings are read from the environment when they are needed, so tests and
host programs can flip them with a plain environment update.
"""
import os
import sys

DEFAULT_SERIAL_FORMAT = "json"
DEFAULT_REGEX_CACHE = 256


def debug_enabled() -> bool:
    return bool(os.environ.get("POWER_DEBUG"))


def dbg(*parts):
    """Print a trace line to stderr when POWER_DEBUG is set."""
    if debug_enabled():
        try:
            print("[DBG]", *parts, file=sys.stderr)
        except Exception:
            pass


def serial_format() -> str:
    """Default format used by Map.serialize."""
    return (os.environ.get("POWER_SERIAL_FORMAT") or DEFAULT_SERIAL_FORMAT).strip().lower()


def regex_cache_size() -> int:
    raw = os.environ.get("POWER_REGEX_CACHE")
    if not raw:
        return DEFAULT_REGEX_CACHE
    try:
        return max(0, int(raw))
    except ValueError:
        return DEFAULT_REGEX_CACHE
