"""Typed byte offsets of (possibly nested) fields inside C-layout structs."""

from __future__ import annotations

from dataclasses import dataclass, replace

from fieldlayout.access import FieldAccess
from fieldlayout.ctype import Alignment, CType
from fieldlayout.utils import min_usize, round_up


def _check_power_of_two(value: int, what: str) -> None:
    if (
        not isinstance(value, int)
        or isinstance(value, bool)
        or value <= 0
        or value & (value - 1)
    ):
        raise ValueError(f"{what} must be a power of two, got {value!r}")


@dataclass(frozen=True)
class FieldOffset(FieldAccess):
    """The offset of a field of type ``field`` inside a struct.

    ``container_align`` is the alignment of the containing struct: its own
    alignment for ``repr(C)`` and ``repr(C, align(N))`` structs, and the
    packing for ``repr(C, packed(N))`` ones. It decides where the next field
    starts when offsets are built with :meth:`next_field_offset`.

    ``alignment`` is ``Alignment.UNALIGNED`` when the field may sit at an
    address that is not a multiple of its type's alignment.
    """

    container_align: int = 1

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_power_of_two(self.container_align, "container alignment")

    @staticmethod
    def identity(ctype: CType) -> "FieldOffset":
        """Offset of a value inside itself: offset zero, aligned."""
        if not isinstance(ctype, CType):
            raise TypeError(f"expected a CType, got {type(ctype).__name__}")
        return FieldOffset(0, ctype, Alignment.ALIGNED, ctype.align)

    def next_field_offset(
        self, next_field: CType, next_alignment: Alignment
    ) -> "FieldOffset":
        """Offset of the field of type ``next_field`` that follows this one."""
        if not isinstance(next_field, CType):
            raise TypeError(f"expected a CType, got {type(next_field).__name__}")
        if not isinstance(next_alignment, Alignment):
            raise TypeError("next_alignment must be an Alignment")
        previous_end = self.offset + self.field.size
        effective_align = min_usize(self.container_align, next_field.align)
        return FieldOffset(
            round_up(previous_end, effective_align),
            next_field,
            next_alignment,
            self.container_align,
        )

    def _combined(self, other: "FieldOffset") -> "FieldOffset":
        return FieldOffset(
            self.offset + other.offset,
            other.field,
            self.alignment.combine(other.alignment),
            self.container_align,
        )

    def add(self, other: "FieldOffset") -> "FieldOffset":
        """Offset of a field of this field: the two offsets summed.

        The result is unaligned if either offset is unaligned.
        """
        if not isinstance(other, FieldOffset):
            raise TypeError(f"expected a FieldOffset, got {type(other).__name__}")
        return self._combined(other)

    def __add__(self, other: object) -> "FieldOffset":
        if not isinstance(other, FieldOffset):
            return NotImplemented
        return self._combined(other)

    def to_unaligned(self) -> "FieldOffset":
        """The same offset, usable on fields at any address."""
        return replace(self, alignment=Alignment.UNALIGNED)

    def to_aligned(self) -> "FieldOffset":
        """The same offset, declared to be for an aligned field."""
        return replace(self, alignment=Alignment.ALIGNED)

    def cast_field(self, field: CType) -> "FieldOffset":
        """The same offset for a field reinterpreted as ``field``.

        The new type must have the same size as the old one.
        """
        if not isinstance(field, CType):
            raise TypeError(f"expected a CType, got {type(field).__name__}")
        if field.size != self.field.size:
            raise ValueError(
                f"cannot reinterpret {self.field.name} ({self.field.size} bytes) "
                f"as {field.name} ({field.size} bytes)"
            )
        return replace(self, field=field)

    def cast_struct(self, container_align: int) -> "FieldOffset":
        """The same offset inside another struct with alignment ``container_align``."""
        _check_power_of_two(container_align, "container alignment")
        return replace(self, container_align=container_align)