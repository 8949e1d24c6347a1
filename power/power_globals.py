"""
Short constructor helpers for PowerString and PowerArray.

    ps(text)    -> PowerString.of(text)     independent copy
    as_ps(ref)  -> PowerString.on(ref)      shared instance bound to ref
    to_ps(ref)  -> PowerString.cast(ref)    new box, stored back into ref

and the same trio for PowerArray (`pa`, `as_pa`, `to_pa`).
"""

from power.power_array import PowerArray
from power.power_string import PowerString


def ps(s=""):
    return PowerString.of(s)


def as_ps(ref):
    """Reuses the shared PowerString instance; faster, but do not keep the result."""
    return PowerString.on(ref)


def to_ps(ref):
    return PowerString.cast(ref)


def pa(items=()):
    return PowerArray.of(items)


def as_pa(ref):
    """Reuses the shared PowerArray instance; faster, but do not keep the result."""
    return PowerArray.on(ref)


def to_pa(ref):
    return PowerArray.cast(ref)


__all__ = ["ps", "as_ps", "to_ps", "pa", "as_pa", "to_pa"]
