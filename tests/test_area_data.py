import pytest

from sinjoh.area_data import AreaData


def test_fields_are_decoded_little_endian_in_file_order():
    data = bytes([0x01, 0x00, 0x02, 0x00, 0x03, 0x00, 0x04, 0x00])
    area = AreaData.from_bytes(data)
    assert area.map_prop_archives_id == 1
    assert area.map_texture_archive_id == 2
    assert area.dummy == 3
    assert area.area_light_archive_id == 4


def test_high_byte_is_significant():
    area = AreaData.from_bytes(bytes([0x34, 0x12, 0, 0, 0, 0, 0xFF, 0xFF]))
    assert area.map_prop_archives_id == 0x1234
    assert area.area_light_archive_id == 0xFFFF


def test_accepts_bytearray():
    area = AreaData.from_bytes(bytearray(8))
    assert area == AreaData(0, 0, 0, 0)


@pytest.mark.parametrize("size", [0, 7, 9])
def test_wrong_length_is_rejected(size):
    with pytest.raises(ValueError):
        AreaData.from_bytes(bytes(size))