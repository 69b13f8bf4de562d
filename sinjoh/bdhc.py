"""BDHC data, as embedded in the files of the ``land_data.narc`` archive."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Optional

from .nds import DS_FIXED_32_SIZE, DS_VEC_FIXED_32_SIZE, DsFixed32, Vec3

BDHC_MAGIC = 0x43484442
"""Magic number at the start of BDHC data ("BDHC" read as little-endian)."""

BDHC_HEADER_SIZE = 12
"""The size of the BDHC header, which holds the section counts."""

BDHC_POINT_SIZE = 8
"""The size of a BDHC point."""

BDHC_PLATE_SIZE = 8
"""The size of a BDHC plate."""

BDHC_STRIP_SIZE = 8
"""The size of a BDHC strip."""


class BdhcError(Exception):
    """Raised when BDHC data cannot be read or has a wrong magic number."""

    def __init__(self, message: str, magic: Optional[int] = None) -> None:
        self.magic = magic
        super().__init__(message)


def _expect_size(data: bytes, size: int, what: str) -> bytes:
    raw = bytes(data)
    if len(raw) != size:
        raise ValueError(f"a BDHC {what} must be {size} bytes long, got {len(raw)}")
    return raw


@dataclass(frozen=True)
class BdhcHeader:
    """The counts of the different sections of BDHC data."""

    points_count: int
    normals_count: int
    constants_count: int
    plates_count: int
    strips_count: int
    access_list_count: int

    @classmethod
    def from_bytes(cls, data: bytes) -> BdhcHeader:
        """Decode a header from exactly 12 bytes."""
        raw = _expect_size(data, BDHC_HEADER_SIZE, "header")
        return cls(*struct.unpack("<6H", raw))


@dataclass(frozen=True)
class BdhcPoint:
    """A point used to define plate boundaries."""

    x: DsFixed32
    z: DsFixed32

    @classmethod
    def from_bytes(cls, data: bytes) -> BdhcPoint:
        """Decode a point from exactly 8 bytes."""
        raw = _expect_size(data, BDHC_POINT_SIZE, "point")
        x, z = struct.unpack("<2i", raw)
        return cls(x=DsFixed32.from_bits(x), z=DsFixed32.from_bits(z))


@dataclass(frozen=True)
class BdhcPlate:
    """A plate: two boundary points and the plane it lies on."""

    first_point_index: int
    second_point_index: int
    normal_index: int
    constant_index: int

    @classmethod
    def from_bytes(cls, data: bytes) -> BdhcPlate:
        """Decode a plate from exactly 8 bytes."""
        raw = _expect_size(data, BDHC_PLATE_SIZE, "plate")
        return cls(*struct.unpack("<4H", raw))


@dataclass(frozen=True)
class BdhcStrip:
    """A strip: the plates crossing one scanline, as a slice of the access list."""

    scanline: DsFixed32
    access_list_element_count: int
    access_list_start_index: int

    @classmethod
    def from_bytes(cls, data: bytes) -> BdhcStrip:
        """Decode a strip from exactly 8 bytes."""
        raw = _expect_size(data, BDHC_STRIP_SIZE, "strip")
        scanline, count, start = struct.unpack("<i2H", raw)
        return cls(
            scanline=DsFixed32.from_bits(scanline),
            access_list_element_count=count,
            access_list_start_index=start,
        )


class _Reader:
    """Sequential reads over a byte buffer, failing on truncated data."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise BdhcError("an error has occurred while reading the buffer")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_u16(self) -> int:
        (value,) = struct.unpack("<H", self.read(2))
        return value

    def read_u32(self) -> int:
        (value,) = struct.unpack("<I", self.read(4))
        return value


@dataclass
class Bdhc:
    """Collision height data of a map."""

    points: list[BdhcPoint] = field(default_factory=list)
    normals: list[Vec3[DsFixed32]] = field(default_factory=list)
    constants: list[DsFixed32] = field(default_factory=list)
    plates: list[BdhcPlate] = field(default_factory=list)
    strips: list[BdhcStrip] = field(default_factory=list)
    access_list: list[int] = field(default_factory=list)

    @classmethod
    def parse_bytes(cls, data: bytes) -> Bdhc:
        """Parse BDHC data, starting with its magic number."""
        reader = _Reader(data)

        magic = reader.read_u32()
        if magic != BDHC_MAGIC:
            raise BdhcError(
                f"wrong BDHC magic number (expected 0x{BDHC_MAGIC:X}, found 0x{magic:X})",
                magic=magic,
            )

        header = BdhcHeader.from_bytes(reader.read(BDHC_HEADER_SIZE))

        points = [
            BdhcPoint.from_bytes(reader.read(BDHC_POINT_SIZE))
            for _ in range(header.points_count)
        ]
        normals = [
            Vec3(*(DsFixed32.from_bits(c) for c in struct.unpack("<3i", reader.read(DS_VEC_FIXED_32_SIZE))))
            for _ in range(header.normals_count)
        ]
        constants = [
            DsFixed32.from_le_bytes(reader.read(DS_FIXED_32_SIZE))
            for _ in range(header.constants_count)
        ]
        plates = [
            BdhcPlate.from_bytes(reader.read(BDHC_PLATE_SIZE))
            for _ in range(header.plates_count)
        ]
        strips = [
            BdhcStrip.from_bytes(reader.read(BDHC_STRIP_SIZE))
            for _ in range(header.strips_count)
        ]
        access_list = [reader.read_u16() for _ in range(header.access_list_count)]

        return cls(
            points=points,
            normals=normals,
            constants=constants,
            plates=plates,
            strips=strips,
            access_list=access_list,
        )