import io
import struct

import pytest

from sinjoh.nds import NarcByteOrder
from sinjoh.narc import (
    FATB_MAGIC,
    FIMG_MAGIC,
    FNTB_MAGIC,
    NARC_MAGIC,
    NarcReader,
    NarcReaderError,
    NarcReaderFlags,
)


def _chunk(magic: int, body: bytes) -> bytes:
    return struct.pack("<II", magic, 8 + len(body)) + body


def build_narc(
    files,
    *,
    bom=b"\xff\xfe",
    version=0x0100,
    include_magic=True,
    include_fat=True,
    include_fnt=True,
    include_fimg=True,
    extra_chunks=(),
    fat_entries=None,
):
    image = b"".join(files)
    if fat_entries is None:
        fat_entries = []
        offset = 0
        for data in files:
            fat_entries.append((offset, offset + len(data)))
            offset += len(data)

    chunks = list(extra_chunks)
    if include_fat:
        body = struct.pack("<HH", len(fat_entries), 0)
        body += b"".join(struct.pack("<II", s, e) for s, e in fat_entries)
        chunks.append(_chunk(FATB_MAGIC, body))
    if include_fnt:
        chunks.append(_chunk(FNTB_MAGIC, struct.pack("<IHH", 4, 0, 1)))
    if include_fimg:
        chunks.append(_chunk(FIMG_MAGIC, image))

    version_fmt = "<H" if bom == b"\xff\xfe" else ">H"
    body = b"".join(chunks)
    total = 16 + len(body)
    head = struct.pack("<I", NARC_MAGIC) if include_magic else b""
    head += bom + struct.pack(version_fmt, version)
    head += struct.pack("<IHH", total, 16, len(chunks))
    return head + body


FILES = [b"first", b"", b"\x01\x02\x03\x04\x05\x06", b"z"]


def test_literal_narc_magic_is_accepted():
    data = b"NARC" + build_narc([])[4:]
    reader = NarcReader(io.BytesIO(data))
    assert reader.number_of_files() == 0
    assert list(reader.files_iter()) == []


def test_reads_all_files_in_order():
    reader = NarcReader(io.BytesIO(build_narc(FILES)))
    assert reader.number_of_files() == len(FILES)
    assert list(reader.files_iter()) == FILES


def test_get_file_random_access():
    reader = NarcReader(io.BytesIO(build_narc(FILES)))
    assert reader.get_file(2) == FILES[2]
    assert reader.get_file(0) == FILES[0]
    assert reader.get_file(3) == FILES[3]


def test_header_fields():
    data = build_narc(FILES, version=0x0100)
    reader = NarcReader(io.BytesIO(data))
    header = reader.header
    assert header.byte_order is NarcByteOrder.LITTLE_ENDIAN
    assert header.version == 0x0100
    assert header.file_size == len(data)
    assert header.narc_header_size == 16
    assert header.number_of_chunks == 3
    assert header.fat.number_of_files == len(FILES)
    assert header.fnt is not None and header.fnt.chunk_size == 16
    assert header.files.chunk_size == 8 + sum(len(f) for f in FILES)


def test_big_endian_version():
    reader = NarcReader(io.BytesIO(build_narc(FILES, bom=b"\xfe\xff", version=0x0102)))
    assert reader.header.byte_order is NarcByteOrder.BIG_ENDIAN
    assert reader.header.version == 0x0102


def test_wrong_magic():
    data = b"XXXX" + build_narc(FILES)[4:]
    with pytest.raises(NarcReaderError, match="wrong NARC magic"):
        NarcReader(io.BytesIO(data))


def test_skip_magic_check():
    data = build_narc(FILES, include_magic=False)
    flags = NarcReaderFlags(skip_narc_magic_number_check=True)
    reader = NarcReader(io.BytesIO(data), flags)
    assert list(reader.files_iter()) == FILES


def test_unknown_bom():
    with pytest.raises(NarcReaderError, match="byte order"):
        NarcReader(io.BytesIO(build_narc(FILES, bom=b"\x12\x34")))


def test_skip_bom_check_reads_version_big_endian():
    data = build_narc(FILES, bom=b"\x12\x34", version=0x0203)
    reader = NarcReader(io.BytesIO(data), NarcReaderFlags(skip_bom_check=True))
    assert reader.header.byte_order is None
    assert reader.header.version == 0x0203
    assert reader.get_file(0) == FILES[0]


def test_unknown_chunk_is_skipped():
    extra = _chunk(0x11223344, b"\xaa" * 12)
    reader = NarcReader(io.BytesIO(build_narc(FILES, extra_chunks=[extra])))
    assert reader.header.number_of_chunks == 4
    assert list(reader.files_iter()) == FILES


def test_missing_fat():
    reader = NarcReader(io.BytesIO(build_narc(FILES, include_fat=False)))
    assert reader.number_of_files() == 0
    assert list(reader.files_iter()) == []
    with pytest.raises(NarcReaderError, match="File Allocation Table"):
        reader.get_file(0)


def test_missing_fimg():
    reader = NarcReader(io.BytesIO(build_narc(FILES, include_fimg=False)))
    with pytest.raises(NarcReaderError, match="File Image Block"):
        reader.get_file(0)


@pytest.mark.parametrize("index", [len(FILES), -1])
def test_file_not_found(index):
    reader = NarcReader(io.BytesIO(build_narc(FILES)))
    with pytest.raises(NarcReaderError, match=f"index {index} could not be found"):
        reader.get_file(index)


def test_file_past_end_of_image():
    data = build_narc([b"abc"], fat_entries=[(0, 50)])
    reader = NarcReader(io.BytesIO(data))
    with pytest.raises(NarcReaderError, match="failed to read"):
        reader.get_file(0)


def test_truncated_header():
    with pytest.raises(NarcReaderError, match="failed to read"):
        NarcReader(io.BytesIO(build_narc(FILES)[:10]))


def test_read_from_file_and_context_manager(tmp_path):
    path = tmp_path / "archive.narc"
    path.write_bytes(build_narc(FILES))
    with NarcReader.read_from_file(path) as reader:
        assert list(reader.files_iter()) == FILES


def test_close_closes_stream():
    stream = io.BytesIO(build_narc(FILES))
    reader = NarcReader(stream)
    reader.close()
    assert stream.closed


def test_read_from_missing_file(tmp_path):
    with pytest.raises(NarcReaderError, match="unable to open"):
        NarcReader.read_from_file(tmp_path / "missing.narc")