"""Method-style field access on a struct held in a byte buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fieldlayout.access import FieldAccess, _Pointer, _to_pointer


def _check_offset(offset: Any) -> FieldAccess:
    if not isinstance(offset, FieldAccess):
        raise TypeError(f"expected a FieldOffset, got {type(offset).__name__}")
    return offset


def _unwrap(other: Any) -> Any:
    return other.target if isinstance(other, StructRef) else other


@dataclass(frozen=True)
class StructRef:
    """A struct located in a byte buffer or at a pointer into one.

    Each ``f_*`` method takes the offset of a field first, mirroring the
    corresponding operation on the offset itself.
    """

    target: Any

    def __post_init__(self) -> None:
        _to_pointer(self.target)

    @property
    def pointer(self) -> _Pointer:
        """Pointer to the start of the struct."""
        return _to_pointer(self.target)

    # Access through a reference

    def f_get(self, offset: FieldAccess) -> Any:
        """Value of an aligned field."""
        return _check_offset(offset).get(self.target)

    def f_get_copy(self, offset: FieldAccess) -> Any:
        """Copy of the field's value; works for aligned and unaligned fields."""
        return _check_offset(offset).get_copy(self.target)

    def f_get_ptr(self, offset: FieldAccess) -> _Pointer:
        """Pointer to the field."""
        return _check_offset(offset).get_ptr(self.target)

    def f_raw_get(self, offset: FieldAccess) -> _Pointer:
        """Pointer to the field, taken from the struct pointer."""
        return _check_offset(offset).raw_get(self.target)

    def f_replace(self, offset: FieldAccess, value: Any) -> Any:
        """Store ``value`` into the field and return the previous value."""
        return _check_offset(offset).replace_mut(self.target, value)

    def f_swap(self, offset: FieldAccess, right: Any) -> None:
        """Exchange the field's value with the same field of another struct."""
        _check_offset(offset).swap_mut(self.target, _unwrap(right))

    # Access through a raw pointer

    def f_read(self, offset: FieldAccess) -> Any:
        """Value of the field, leaving the buffer untouched."""
        return _check_offset(offset).read(self.target)

    def f_read_copy(self, offset: FieldAccess) -> Any:
        """Copy of the field's value, read through the struct pointer."""
        return _check_offset(offset).read_copy(self.target)

    def f_write(self, offset: FieldAccess, value: Any) -> None:
        """Store ``value`` into the field."""
        _check_offset(offset).write(self.target, value)

    def f_copy_from(self, offset: FieldAccess, source: Any) -> None:
        """Copy the field from ``source`` into this struct; overlap is allowed."""
        _check_offset(offset).copy(_unwrap(source), self.target)

    def f_copy_from_nonoverlapping(self, offset: FieldAccess, source: Any) -> None:
        """Copy the field from a non-overlapping ``source`` into this struct."""
        _check_offset(offset).copy_nonoverlapping(_unwrap(source), self.target)

    def f_replace_raw(self, offset: FieldAccess, value: Any) -> Any:
        """Store ``value`` into the field through the pointer, returning the old value."""
        return _check_offset(offset).replace(self.target, value)

    def f_swap_raw(self, offset: FieldAccess, right: Any) -> None:
        """Exchange the field's value with ``right``; both may be the same struct."""
        _check_offset(offset).swap(self.target, _unwrap(right))

    def f_swap_nonoverlapping(self, offset: FieldAccess, right: Any) -> None:
        """Exchange the field's value with a non-overlapping ``right``."""
        _check_offset(offset).swap_nonoverlapping(self.target, _unwrap(right))