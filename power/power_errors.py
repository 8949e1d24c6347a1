"""
Exception types raised by the power wrappers.

Reads never raise on out-of-range positions; only the cases below fail.
"""


class PowerError(Exception):
    """Base class for all errors raised by this package."""
    pass


class UnsupportedSourceError(PowerError, TypeError):
    """Raised when Map.merge/Map.set receive a value of an unsupported shape."""
    def __init__(self, source):
        super().__init__(f"Unsupported type {type(source).__name__}")
        self.source = source


class DecodeError(PowerError, ValueError):
    """Raised when serialized Map data cannot be decoded into a mapping."""
    pass


class PatternSyntaxError(PowerError, ValueError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
