import pytest

from fieldlayout.access import FieldAccess
from fieldlayout.ctype import (
    BOOL,
    CHAR,
    U8,
    U16,
    U32,
    U64,
    Alignment,
    array_of,
)
from fieldlayout.ext import StructRef
from fieldlayout.field_offset import FieldOffset
from fieldlayout.utils import round_up


def _layout(types, packed_struct=False):
    if packed_struct:
        container = 1
        alignment = Alignment.UNALIGNED
    else:
        container = max(t.align for t in types)
        alignment = Alignment.ALIGNED
    offsets = [FieldOffset(0, types[0], alignment, container)]
    for ctype in types[1:]:
        offsets.append(offsets[-1].next_field_offset(ctype, alignment))
    last = offsets[-1]
    size = round_up(last.offset + last.field.size, container)
    return offsets, size


def test_packed_offsets_match_documented_values():
    offsets, size = _layout([U8, U16, U32, U64], packed_struct=True)
    buf = bytearray(size)
    ref = StructRef(buf)
    assert [ref.f_get_ptr(o).address for o in offsets] == [0, 1, 3, 7]


def test_f_get_reads_written_values():
    (off_a, off_b), size = _layout([CHAR, U8])
    ref = StructRef(bytearray(size))
    ref.f_write(off_a, "@")
    ref.f_write(off_b, 21)
    assert ref.f_get(off_a) == "@"
    assert ref.f_get(off_b) == 21


def test_f_get_rejects_unaligned_offset():
    (off_a, off_b), size = _layout([U8, U16], packed_struct=True)
    ref = StructRef(bytearray(size))
    with pytest.raises(TypeError):
        ref.f_get(off_b)


def test_f_get_copy_on_packed_struct():
    (off_a, off_b), size = _layout([U8, U16], packed_struct=True)
    ref = StructRef(bytearray(size))
    ref.f_write(off_a, 3)
    ref.f_write(off_b, 5)
    assert ref.f_get_copy(off_a) == 3
    assert ref.f_get_copy(off_b) == 5


def test_f_get_ptr_and_raw_get_point_into_same_buffer():
    offsets, size = _layout([U8, U32, U16])
    buf = bytearray(size)
    ref = StructRef(buf)
    for off in offsets:
        ptr = ref.f_get_ptr(off)
        assert ptr.buffer is buf
        assert ptr.address == off.offset
        assert ref.f_raw_get(off) == ptr


def test_f_replace_returns_old_value():
    (off_a, off_b), size = _layout([array_of(U8, 2), BOOL])
    ref = StructRef(bytearray(size))
    ref.f_write(off_a, [0, 1])
    ref.f_write(off_b, False)
    assert ref.f_replace(off_a, [2, 3]) == [0, 1]
    assert ref.f_replace(off_b, True) is False
    assert ref.f_get(off_a) == [2, 3]
    assert ref.f_get(off_b) is True


def test_f_replace_raw_on_packed_struct():
    (off_a, off_b), size = _layout([array_of(U8, 2), U32], packed_struct=True)
    ref = StructRef(bytearray(size))
    ref.f_write(off_a, [0, 1])
    ref.f_write(off_b, 7)
    assert ref.f_replace_raw(off_a, [2, 3]) == [0, 1]
    assert ref.f_replace_raw(off_b, 9) == 7
    assert ref.f_read(off_a) == [2, 3]
    assert ref.f_read(off_b) == 9


@pytest.mark.parametrize("packed_struct", [False, True])
def test_f_swap_exchanges_fields(packed_struct):
    (off_a, off_b), size = _layout([CHAR, U16], packed_struct=packed_struct)
    this = StructRef(bytearray(size))
    other = StructRef(bytearray(size))
    this.f_write(off_a, "=")
    this.f_write(off_b, 64)
    other.f_write(off_a, "!")
    other.f_write(off_b, 255)
    this.f_swap(off_a, other)
    this.f_swap(off_b, other)
    assert this.f_get_copy(off_a) == "!"
    assert this.f_get_copy(off_b) == 255
    assert other.f_get_copy(off_a) == "="
    assert other.f_get_copy(off_b) == 64


def test_f_swap_rejects_same_struct():
    (off_a,), size = _layout([U32])
    buf = bytearray(size)
    with pytest.raises(ValueError):
        StructRef(buf).f_swap(off_a, buf)


def test_f_swap_raw_identity_and_exchange():
    (off_a, off_b), size = _layout([U8, U64])
    left = bytearray(size)
    right = bytearray(size)
    ref = StructRef(left)
    ref.f_write(off_b, 27)
    StructRef(right).f_write(off_b, 81)
    ref.f_swap_raw(off_b, left)
    assert ref.f_read(off_b) == 27
    ref.f_swap_raw(off_b, right)
    assert ref.f_read(off_b) == 81
    assert StructRef(right).f_read(off_b) == 27


def test_f_swap_nonoverlapping():
    (off_a, off_b), size = _layout([array_of(BOOL, 2), U32])
    this = StructRef(bytearray(size))
    other = StructRef(bytearray(size))
    this.f_write(off_a, [False, True])
    other.f_write(off_a, [True, False])
    this.f_swap_nonoverlapping(off_a, other)
    assert this.f_read(off_a) == [True, False]
    assert other.f_read(off_a) == [False, True]
    with pytest.raises(ValueError):
        this.f_swap_nonoverlapping(off_a, this)


def test_f_read_copy_matches_written():
    (off_a, off_b), size = _layout([U8, U32], packed_struct=True)
    ref = StructRef(bytearray(size))
    ref.f_write(off_a, 10)
    ref.f_write(off_b, 20)
    assert ref.f_read_copy(off_a) == 10
    assert ref.f_read_copy(off_b) == 20


def test_f_copy_from_copies_only_that_field():
    (off_a, off_b), size = _layout([U8, U32])
    source = StructRef(bytearray(size))
    dest = StructRef(bytearray(size))
    source.f_write(off_a, 10)
    source.f_write(off_b, 20)
    dest.f_copy_from(off_a, source)
    assert dest.f_get(off_a) == 10
    assert dest.f_get(off_b) == 0
    dest.f_copy_from(off_b, source.target)
    assert dest.f_get(off_b) == 20
    dest.f_copy_from(off_b, dest)
    assert dest.f_get(off_b) == 20


def test_f_copy_from_nonoverlapping():
    (off_a, off_b), size = _layout([CHAR, U16], packed_struct=True)
    source = StructRef(bytearray(size))
    dest = StructRef(bytearray(size))
    source.f_write(off_a, "#")
    source.f_write(off_b, 81)
    dest.f_copy_from_nonoverlapping(off_a, source)
    dest.f_copy_from_nonoverlapping(off_b, source)
    assert dest.f_read(off_a) == "#"
    assert dest.f_read(off_b) == 81
    with pytest.raises(ValueError):
        dest.f_copy_from_nonoverlapping(off_a, dest)


def test_aligned_field_at_misaligned_pointer_raises():
    buf = bytearray(8)
    ptr = FieldAccess(1, U8).get_ptr(buf)
    ref = StructRef(ptr)
    aligned = FieldOffset(0, U16, Alignment.ALIGNED, 2)
    with pytest.raises(ValueError):
        ref.f_get(aligned)
    ref.f_write(aligned.to_unaligned(), 0x1234)
    assert ref.f_read(aligned.to_unaligned()) == 0x1234
    assert bytes(buf[1:3]) == (0x1234).to_bytes(2, "little")


def test_out_of_bounds_field_raises():
    ref = StructRef(bytearray(2))
    with pytest.raises(IndexError):
        ref.f_get_copy(FieldOffset(0, U32, Alignment.ALIGNED, 4))


def test_invalid_target_and_offset_rejected():
    with pytest.raises(TypeError):
        StructRef("not a buffer")
    with pytest.raises(TypeError):
        StructRef(bytearray(4)).f_get(0)