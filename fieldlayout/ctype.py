"""Descriptions of fixed-size C types: size, alignment and byte encoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence


class Alignment(Enum):
    """Whether a field is guaranteed to sit at an address aligned for its type."""

    ALIGNED = "aligned"
    UNALIGNED = "unaligned"

    def combine(self, other: "Alignment") -> "Alignment":
        """Alignment of a nested access: unaligned if either step is unaligned."""
        if not isinstance(other, Alignment):
            raise TypeError(f"cannot combine Alignment with {type(other).__name__}")
        if self is Alignment.ALIGNED and other is Alignment.ALIGNED:
            return Alignment.ALIGNED
        return Alignment.UNALIGNED


@dataclass(frozen=True)
class CType:
    """A fixed-size type with its layout and a little-endian byte codec."""

    name: str
    size: int
    align: int
    encoder: Callable[[Any], bytes] = field(repr=False, compare=False)
    decoder: Callable[[bytes], Any] = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"size of {self.name} must not be negative")
        if self.align <= 0 or self.align & (self.align - 1):
            raise ValueError(f"alignment of {self.name} must be a power of two")

    def pack(self, value: Any) -> bytes:
        """Encode ``value`` into exactly ``size`` bytes."""
        data = bytes(self.encoder(value))
        if len(data) != self.size:
            raise ValueError(
                f"{self.name} encoded to {len(data)} bytes, expected {self.size}"
            )
        return data

    def unpack(self, data: bytes | bytearray | memoryview) -> Any:
        """Decode a value from exactly ``size`` bytes."""
        raw = bytes(data)
        if len(raw) != self.size:
            raise ValueError(
                f"{self.name} needs {self.size} bytes, got {len(raw)}"
            )
        return self.decoder(raw)


def _integer(name: str, size: int, signed: bool, align: int | None = None) -> CType:
    def encode(value: int) -> bytes:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{name} expects an int, got {type(value).__name__}")
        return value.to_bytes(size, "little", signed=signed)

    def decode(data: bytes) -> int:
        return int.from_bytes(data, "little", signed=signed)

    return CType(name, size, align if align is not None else size, encode, decode)


def _float(name: str, fmt: str) -> CType:
    codec = struct.Struct("<" + fmt)

    def encode(value: float) -> bytes:
        return codec.pack(value)

    def decode(data: bytes) -> float:
        return codec.unpack(data)[0]

    return CType(name, codec.size, codec.size, encode, decode)


def _encode_bool(value: bool) -> bytes:
    if not isinstance(value, bool):
        raise TypeError(f"bool expects a bool, got {type(value).__name__}")
    return b"\x01" if value else b"\x00"


def _decode_bool(data: bytes) -> bool:
    if data == b"\x00":
        return False
    if data == b"\x01":
        return True
    raise ValueError(f"invalid bool byte {data!r}")


def _valid_scalar(code: int) -> bool:
    return 0 <= code <= 0x10FFFF and not 0xD800 <= code <= 0xDFFF


def _encode_char(value: str) -> bytes:
    if not isinstance(value, str) or len(value) != 1:
        raise TypeError("char expects a single-character str")
    code = ord(value)
    if not _valid_scalar(code):
        raise ValueError(f"{code:#x} is not a unicode scalar value")
    return code.to_bytes(4, "little")


def _decode_char(data: bytes) -> str:
    code = int.from_bytes(data, "little")
    if not _valid_scalar(code):
        raise ValueError(f"{code:#x} is not a unicode scalar value")
    return chr(code)


def _encode_unit(value: None) -> bytes:
    if value is not None:
        raise TypeError("unit expects None")
    return b""


def _decode_unit(data: bytes) -> None:
    return None


U8 = _integer("u8", 1, False)
U16 = _integer("u16", 2, False)
U32 = _integer("u32", 4, False)
U64 = _integer("u64", 8, False)
U128 = _integer("u128", 16, False)
USIZE = _integer("usize", 8, False)
I8 = _integer("i8", 1, True)
I16 = _integer("i16", 2, True)
I32 = _integer("i32", 4, True)
I64 = _integer("i64", 8, True)
I128 = _integer("i128", 16, True)
ISIZE = _integer("isize", 8, True)
F32 = _float("f32", "f")
F64 = _float("f64", "d")
BOOL = CType("bool", 1, 1, _encode_bool, _decode_bool)
CHAR = CType("char", 4, 4, _encode_char, _decode_char)
UNIT = CType("()", 0, 1, _encode_unit, _decode_unit)


def array_of(ctype: CType, length: int) -> CType:
    """Type of a fixed-length array of ``length`` elements of ``ctype``."""
    if not isinstance(length, int) or length < 0:
        raise ValueError(f"array length must be a non-negative int, got {length!r}")
    step = ctype.size

    def encode(values: Sequence[Any]) -> bytes:
        items = list(values)
        if len(items) != length:
            raise ValueError(f"expected {length} elements, got {len(items)}")
        return b"".join(ctype.pack(item) for item in items)

    def decode(data: bytes) -> list[Any]:
        return [ctype.unpack(data[k * step:(k + 1) * step]) for k in range(length)]

    return CType(f"[{ctype.name}; {length}]", step * length, ctype.align, encode, decode)


def packed(ctype: CType) -> CType:
    """Wrap ``ctype`` in a packed struct: same bytes, alignment of one."""
    return CType(f"Packed1<{ctype.name}>", ctype.size, 1, ctype.encoder, ctype.decoder)