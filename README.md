# fieldlayout

Compute the byte offsets of fields in C-style structs and read, write, copy,
replace and swap individual fields inside `bytearray` (or writable
`memoryview`) buffers.

Offsets follow the C layout rules: each field starts at the end of the
previous one, rounded up to the smaller of the field type's alignment and the
containing struct's alignment (its packing, for packed structs).

## Installation

```
pip install fieldlayout
```

## Modules

- `fieldlayout.ctype` — `CType`, a fixed-size type with `name`, `size`,
  `align` and a little-endian codec (`pack(value)`, `unpack(data)`).
  Ready-made types: `U8`, `U16`, `U32`, `U64`, `U128`, `USIZE`, `I8` … `I128`,
  `ISIZE`, `F32`, `F64`, `BOOL`, `CHAR` and `UNIT`. `array_of(ctype, length)`
  builds a fixed-length array type and `packed(ctype)` the same type with an
  alignment of one. `Alignment.ALIGNED` / `Alignment.UNALIGNED` mark whether a
  field is known to sit at an aligned address; `Alignment.combine` gives the
  alignment of a nested access (unaligned if either step is).
- `fieldlayout.access` — `FieldAccess(offset, field, alignment)`, the
  operations on one field of a struct held in a buffer: `get`, `get_copy`,
  `read`, `read_copy`, `write`, `copy`, `copy_nonoverlapping`, `replace`,
  `replace_mut`, `swap`, `swap_nonoverlapping`, `swap_mut`, and `get_ptr`,
  `raw_get`, `wrapping_raw_get`, which return a pointer object into the
  buffer. Aligned fields at a misaligned address raise `ValueError`; `get`
  on an unaligned field raises `TypeError`; fields outside the buffer raise
  `IndexError`; the non-overlapping variants raise `ValueError` on overlap.
- `fieldlayout.field_offset` — `FieldOffset`, a `FieldAccess` that also knows
  its struct's alignment (`container_align`). `FieldOffset.identity(ctype)`,
  `next_field_offset(next_field, next_alignment)`, `add(other)` or `+` for
  nested fields, `to_unaligned()`, `to_aligned()`, `cast_field(field)` (same
  size only) and `cast_struct(container_align)`.
- `fieldlayout.ext` — `StructRef(buffer_or_pointer)`, with `f_get`,
  `f_get_copy`, `f_get_ptr`, `f_raw_get`, `f_read`, `f_read_copy`, `f_write`,
  `f_replace`, `f_replace_raw`, `f_swap`, `f_swap_raw`,
  `f_swap_nonoverlapping`, `f_copy_from` and `f_copy_from_nonoverlapping`,
  each taking a field offset first.
- `fieldlayout.utils` — `moved(val)`, `min_usize(l, r)` and
  `round_up(value, alignment)`.

## Example

A packed struct of `u8, u16, u32, u64`:

```python
from fieldlayout.ctype import Alignment, U8, U16, U32, U64
from fieldlayout.field_offset import FieldOffset
from fieldlayout.ext import StructRef

off_a = FieldOffset(0, U8, Alignment.ALIGNED, container_align=1)
off_b = off_a.next_field_offset(U16, Alignment.UNALIGNED)
off_c = off_b.next_field_offset(U32, Alignment.UNALIGNED)
off_d = off_c.next_field_offset(U64, Alignment.UNALIGNED)
assert [o.offset for o in (off_a, off_b, off_c, off_d)] == [0, 1, 3, 7]

buf = bytearray(15)
this = StructRef(buf)
this.f_write(off_b, 5)
assert this.f_get_copy(off_b) == 5
assert this.f_replace(off_b, 8) == 5
```

## What it does not do

There is no way to describe a whole struct at once and have all its offsets
generated: offsets are built field by field with `next_field_offset`, and the
struct's alignment is given by hand. There is no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```