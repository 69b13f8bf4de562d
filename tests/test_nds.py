import struct

import pytest

from sinjoh.nds import (
    DS_FIXED_32_SIZE,
    DS_VEC_FIXED_32_SIZE,
    DsFixed16,
    DsFixed32,
    DsRgb,
    NarcByteOrder,
    NarcByteOrderError,
    NarcFileAllocationTableBlock,
    NarcFileAllocationTableEntry,
    NarcHeader,
    Vec3,
)


def test_rgb_defaults_to_black():
    assert DsRgb() == DsRgb(red=0, green=0, blue=0)


def test_rgb_fields():
    color = DsRgb(red=31, green=7, blue=12)
    assert (color.red, color.green, color.blue) == (31, 7, 12)


def test_fixed16_one_and_neg_one():
    assert DsFixed16.ONE.to_float() == 1.0
    assert DsFixed16.NEG_ONE.to_float() == -1.0
    assert DsFixed16.NEG_ONE.bits == -DsFixed16.ONE.bits


@pytest.mark.parametrize("bits", [-32768, -1, 0, 1, 2048, 32767])
def test_fixed16_from_bits_round_trip(bits):
    assert DsFixed16.from_bits(bits).bits == bits


@pytest.mark.parametrize("bits", [-32769, 32768, 100000])
def test_fixed16_out_of_range(bits):
    with pytest.raises(ValueError):
        DsFixed16.from_bits(bits)


def test_fixed16_float_sign_and_order():
    assert DsFixed16.from_bits(-10).to_float() < 0 < DsFixed16.from_bits(10).to_float()
    assert DsFixed16.from_bits(-10) < DsFixed16.from_bits(10)
    assert float(DsFixed16.from_bits(300)) == DsFixed16.from_bits(300).to_float()


def test_fixed16_float_is_linear():
    a = DsFixed16.from_bits(100).to_float()
    b = DsFixed16.from_bits(200).to_float()
    assert b == pytest.approx(2 * a)


def test_fixed16_clamp_above():
    big = DsFixed16.from_bits(20000)
    assert big.clamp(DsFixed16.NEG_ONE, DsFixed16.ONE) == DsFixed16.ONE


def test_fixed16_clamp_below():
    small = DsFixed16.from_bits(-20000)
    assert small.clamp(DsFixed16.NEG_ONE, DsFixed16.ONE) == DsFixed16.NEG_ONE


def test_fixed16_clamp_inside_is_unchanged():
    value = DsFixed16.from_bits(123)
    assert value.clamp(DsFixed16.NEG_ONE, DsFixed16.ONE) == value


def test_fixed16_clamp_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        DsFixed16.from_bits(0).clamp(DsFixed16.ONE, DsFixed16.NEG_ONE)


@pytest.mark.parametrize("bits", [-(2**31), -5, 0, 4096, 2**31 - 1])
def test_fixed32_from_le_bytes_round_trip(bits):
    assert DsFixed32.from_le_bytes(struct.pack("<i", bits)).bits == bits


def test_fixed32_from_le_bytes_matches_from_bits():
    raw = struct.pack("<i", -12345)
    assert DsFixed32.from_le_bytes(raw) == DsFixed32.from_bits(-12345)


def test_fixed32_from_le_bytes_wrong_length():
    with pytest.raises(ValueError):
        DsFixed32.from_le_bytes(b"\x00\x01\x02")


def test_fixed32_out_of_range():
    with pytest.raises(ValueError):
        DsFixed32.from_bits(2**31)


def test_fixed32_and_fixed16_scale_agree():
    assert DsFixed32.from_bits(777).to_float() == DsFixed16.from_bits(777).to_float()


def test_sizes_match_fixed32_encoding():
    assert DS_VEC_FIXED_32_SIZE == DS_FIXED_32_SIZE * 3
    assert DsFixed32.from_le_bytes(b"\xff" * DS_FIXED_32_SIZE).bits == -1
    with pytest.raises(ValueError):
        DsFixed32.from_le_bytes(bytes(DS_FIXED_32_SIZE + 1))


def test_vec3_iteration_and_equality():
    vec = Vec3(DsFixed32.from_bits(1), DsFixed32.from_bits(2), DsFixed32.from_bits(3))
    assert [v.bits for v in vec] == [1, 2, 3]
    assert vec == Vec3(DsFixed32(1), DsFixed32(2), DsFixed32(3))


def test_byte_order_from_bom():
    assert NarcByteOrder.from_bom(b"\xfe\xff") is NarcByteOrder.BIG_ENDIAN
    assert NarcByteOrder.from_bom(b"\xff\xfe") is NarcByteOrder.LITTLE_ENDIAN


@pytest.mark.parametrize("bom", [b"\x00\x00", b"\xfe\xfe", b"\xff"])
def test_byte_order_invalid_bom(bom):
    with pytest.raises(NarcByteOrderError) as info:
        NarcByteOrder.from_bom(bom)
    assert info.value.bom == bom


def test_header_defaults_have_no_chunks():
    header = NarcHeader(
        byte_order=NarcByteOrder.LITTLE_ENDIAN,
        version=1,
        file_size=16,
        narc_header_size=16,
        number_of_chunks=0,
    )
    assert (header.fat, header.fnt, header.files) == (None, None, None)


def test_fat_block_holds_entries():
    entries = [NarcFileAllocationTableEntry(0, 4), NarcFileAllocationTableEntry(4, 10)]
    block = NarcFileAllocationTableBlock(chunk_size=28, number_of_files=2, files=entries)
    assert [e.end_address - e.start_address for e in block.files] == [4, 6]