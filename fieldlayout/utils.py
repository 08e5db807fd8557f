"""Small helpers shared by the layout code."""

from __future__ import annotations

import copy
from typing import TypeVar

T = TypeVar("T")

USIZE_MAX = 2**64 - 1
"""Largest value a 64-bit ``usize`` can hold."""


def moved(val: T) -> T:
    """Return a shallow copy of ``val``, detached from the place it was read from.

    Immutable values such as ints and strings come back as the same object.
    """
    return copy.copy(val)


def _check_usize(value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"expected an int, got {type(value).__name__}")
    if not 0 <= value <= USIZE_MAX:
        raise ValueError(f"{value} is outside the usize range")


def min_usize(l: int, r: int) -> int:
    """Return the smaller of two ``usize`` values."""
    _check_usize(l)
    _check_usize(r)
    return l if l < r else r


def round_up(value: int, alignment: int) -> int:
    """Round ``value`` up to the next multiple of ``alignment`` (a power of two)."""
    if not isinstance(value, int) or value < 0:
        raise ValueError(f"value must be a non-negative int, got {value!r}")
    if not isinstance(alignment, int) or alignment <= 0 or alignment & (alignment - 1):
        raise ValueError(f"alignment must be a power of two, got {alignment!r}")
    mask = alignment - 1
    return (value + mask) & ~mask