"""Reading and writing a single field inside a byte buffer laid out as a C struct."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from fieldlayout.ctype import Alignment, CType

_Buffer = Union[bytearray, bytes, memoryview]


@dataclass(frozen=True, eq=False)
class _Pointer:
    """A position inside a byte buffer; the buffer's start counts as address 0."""

    buffer: Any
    address: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Pointer):
            return NotImplemented
        return self.buffer is other.buffer and self.address == other.address

    def __hash__(self) -> int:
        return hash((id(self.buffer), self.address))

    def offset(self, count: int) -> "_Pointer":
        """Pointer ``count`` bytes further into the same buffer."""
        return _Pointer(self.buffer, self.address + count)

    def in_bounds(self, size: int) -> bool:
        return 0 <= self.address and self.address + size <= len(self.buffer)

    def is_aligned_for(self, align: int) -> bool:
        return self.address % align == 0

    def _check(self, size: int) -> None:
        if not self.in_bounds(size):
            raise IndexError(
                f"{size} bytes at address {self.address} lie outside a buffer "
                f"of {len(self.buffer)} bytes"
            )

    def read_bytes(self, size: int) -> bytes:
        self._check(size)
        return bytes(self.buffer[self.address:self.address + size])

    def write_bytes(self, data: bytes) -> None:
        self._check(len(data))
        self.buffer[self.address:self.address + len(data)] = data

    def read(self, ctype: CType) -> Any:
        """Decode a value of ``ctype`` stored at this position."""
        return ctype.unpack(self.read_bytes(ctype.size))

    def write(self, ctype: CType, value: Any) -> None:
        """Encode ``value`` as ``ctype`` at this position."""
        self.write_bytes(ctype.pack(value))


def _to_pointer(base: Any) -> _Pointer:
    if isinstance(base, _Pointer):
        return base
    if isinstance(base, (bytes, bytearray, memoryview)):
        return _Pointer(base, 0)
    raise TypeError(f"expected a byte buffer or pointer, got {type(base).__name__}")


def _overlaps(left: _Pointer, right: _Pointer, size: int) -> bool:
    return (
        size > 0
        and left.buffer is right.buffer
        and left.address < right.address + size
        and right.address < left.address + size
    )


@dataclass(frozen=True)
class FieldAccess:
    """Access to a field of type ``field`` at byte ``offset`` inside a struct buffer.

    Fields marked ``Alignment.ALIGNED`` must sit at an address that is a multiple
    of the field type's alignment; operations on them raise ``ValueError``
    otherwise. ``Alignment.UNALIGNED`` fields may sit anywhere.
    """

    offset: int
    field: CType
    alignment: Alignment = Alignment.ALIGNED

    def __post_init__(self) -> None:
        if not isinstance(self.offset, int) or isinstance(self.offset, bool):
            raise TypeError(f"offset must be an int, got {type(self.offset).__name__}")
        if self.offset < 0:
            raise ValueError(f"offset must not be negative, got {self.offset}")
        if not isinstance(self.field, CType):
            raise TypeError(f"field must be a CType, got {type(self.field).__name__}")
        if not isinstance(self.alignment, Alignment):
            raise TypeError("alignment must be an Alignment")

    # Pointers

    def get_ptr(self, base: Any) -> _Pointer:
        """Pointer to the field; the field must lie within the buffer."""
        ptr = _to_pointer(base).offset(self.offset)
        if not ptr.in_bounds(self.field.size):
            raise IndexError(
                f"field of {self.field.size} bytes at address {ptr.address} "
                f"lies outside a buffer of {len(ptr.buffer)} bytes"
            )
        return ptr

    def raw_get(self, base: Any) -> _Pointer:
        """Pointer to the field from a pointer to the struct."""
        return self.get_ptr(base)

    def wrapping_raw_get(self, base: Any) -> _Pointer:
        """Pointer to the field without checking that it lies within the buffer."""
        return _to_pointer(base).offset(self.offset)

    def _checked(self, base: Any, operation: str) -> _Pointer:
        ptr = self.get_ptr(base)
        if self.alignment is Alignment.ALIGNED and not ptr.is_aligned_for(self.field.align):
            raise ValueError(
                f"{operation}: field at address {ptr.address} is not aligned "
                f"to {self.field.align} bytes"
            )
        return ptr

    # Reading

    def get(self, base: Any) -> Any:
        """Value of an aligned field."""
        if self.alignment is not Alignment.ALIGNED:
            raise TypeError("get requires an aligned field; use get_copy instead")
        return self._checked(base, "get").read(self.field)

    def get_copy(self, base: Any) -> Any:
        """Copy of the field's value."""
        return self._checked(base, "get_copy").read(self.field)

    def read_copy(self, base: Any) -> Any:
        """Copy of the field's value, read through a pointer to the struct."""
        return self._checked(base, "read_copy").read(self.field)

    def read(self, source: Any) -> Any:
        """Value of the field in ``source``, leaving the buffer untouched."""
        return self._checked(source, "read").read(self.field)

    # Writing

    def write(self, destination: Any, value: Any) -> None:
        """Store ``value`` into the field of ``destination``."""
        self._checked(destination, "write").write(self.field, value)

    def copy(self, source: Any, destination: Any) -> None:
        """Copy the field's bytes from ``source`` to ``destination``; overlap is allowed."""
        src = self._checked(source, "copy")
        dst = self._checked(destination, "copy")
        dst.write_bytes(src.read_bytes(self.field.size))

    def copy_nonoverlapping(self, source: Any, destination: Any) -> None:
        """Copy the field's bytes between two non-overlapping locations."""
        src = self._checked(source, "copy_nonoverlapping")
        dst = self._checked(destination, "copy_nonoverlapping")
        if _overlaps(src, dst, self.field.size):
            raise ValueError("copy_nonoverlapping: source and destination overlap")
        dst.write_bytes(src.read_bytes(self.field.size))

    def replace(self, destination: Any, value: Any) -> Any:
        """Store ``value`` into the field and return the previous value."""
        return self._replace(destination, value, "replace")

    def replace_mut(self, destination: Any, value: Any) -> Any:
        """Store ``value`` into the field and return the previous value."""
        return self._replace(destination, value, "replace_mut")

    def _replace(self, destination: Any, value: Any, operation: str) -> Any:
        ptr = self._checked(destination, operation)
        data = self.field.pack(value)
        old = ptr.read(self.field)
        ptr.write_bytes(data)
        return old

    # Swapping

    def _swap(self, left: _Pointer, right: _Pointer) -> None:
        size = self.field.size
        saved = left.read_bytes(size)
        left.write_bytes(right.read_bytes(size))
        right.write_bytes(saved)

    def swap(self, left: Any, right: Any) -> None:
        """Exchange the field's value between ``left`` and ``right``."""
        self._swap(self._checked(left, "swap"), self._checked(right, "swap"))

    def swap_nonoverlapping(self, left: Any, right: Any) -> None:
        """Exchange the field's value between two non-overlapping locations."""
        lptr = self._checked(left, "swap_nonoverlapping")
        rptr = self._checked(right, "swap_nonoverlapping")
        if _overlaps(lptr, rptr, self.field.size):
            raise ValueError("swap_nonoverlapping: left and right overlap")
        self._swap(lptr, rptr)

    def swap_mut(self, left: Any, right: Any) -> None:
        """Exchange the field's value between two distinct structs."""
        lptr = self._checked(left, "swap_mut")
        rptr = self._checked(right, "swap_mut")
        if _overlaps(lptr, rptr, self.field.size):
            raise ValueError("swap_mut: left and right overlap")
        self._swap(lptr, rptr)