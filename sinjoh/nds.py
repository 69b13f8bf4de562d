"""Nintendo DS primitive types and NARC archive header structures."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

DS_FIXED_32_SIZE = 4
"""The size of a 32-bit fixed-point number."""

DS_VEC_FIXED_32_SIZE = DS_FIXED_32_SIZE * 3
"""The size of a 3D vector of 32-bit fixed-point elements."""

_FRACTIONAL_BITS = 12
_SCALE = 1 << _FRACTIONAL_BITS


def _check_bits(bits: int, width: int) -> None:
    low = -(1 << (width - 1))
    high = (1 << (width - 1)) - 1
    if not isinstance(bits, int) or isinstance(bits, bool):
        raise TypeError(f"fixed-point bits must be an int, got {type(bits).__name__}")
    if not low <= bits <= high:
        raise ValueError(f"{bits} does not fit in a signed {width}-bit value")


@dataclass
class DsRgb:
    """An RGB color; each component is expected to be 5-bit as on the DS."""

    red: int = 0
    green: int = 0
    blue: int = 0


@dataclass(frozen=True, order=True)
class DsFixed16:
    """A signed 16-bit fixed-point number with 12 fractional bits."""

    bits: int = 0

    def __post_init__(self) -> None:
        _check_bits(self.bits, 16)

    @classmethod
    def from_bits(cls, bits: int) -> DsFixed16:
        """Build a number from its raw two's complement representation."""
        return cls(bits)

    def to_float(self) -> float:
        """Return the value as a float."""
        return self.bits / _SCALE

    def __float__(self) -> float:
        return self.to_float()

    def clamp(self, low: DsFixed16, high: DsFixed16) -> DsFixed16:
        """Restrict the value to the inclusive range [low, high]."""
        if low > high:
            raise ValueError("clamp lower bound is greater than the upper bound")
        return max(low, min(self, high))


DsFixed16.ONE = DsFixed16(_SCALE)
DsFixed16.NEG_ONE = DsFixed16(-_SCALE)


@dataclass(frozen=True, order=True)
class DsFixed32:
    """A signed 32-bit fixed-point number with 12 fractional bits."""

    bits: int = 0

    def __post_init__(self) -> None:
        _check_bits(self.bits, 32)

    @classmethod
    def from_bits(cls, bits: int) -> DsFixed32:
        """Build a number from its raw two's complement representation."""
        return cls(bits)

    @classmethod
    def from_le_bytes(cls, data: bytes) -> DsFixed32:
        """Decode a number from 4 little-endian bytes."""
        if len(data) != DS_FIXED_32_SIZE:
            raise ValueError(
                f"expected {DS_FIXED_32_SIZE} bytes, got {len(data)}"
            )
        (bits,) = struct.unpack("<i", bytes(data))
        return cls(bits)

    def to_float(self) -> float:
        """Return the value as a float."""
        return self.bits / _SCALE

    def __float__(self) -> float:
        return self.to_float()


T = TypeVar("T")


@dataclass
class Vec3(Generic[T]):
    """A 3-dimensional vector."""

    x: T
    y: T
    z: T

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z


class NarcByteOrderError(ValueError):
    """Raised when a byte order mark is not recognised."""

    def __init__(self, bom: bytes) -> None:
        self.bom = bytes(bom)
        super().__init__(
            f"the provided byte order mark is invalid (provided value is {self.bom!r})"
        )


class NarcByteOrder(enum.Enum):
    """Byte order of a NARC archive, as given by its byte order mark."""

    BIG_ENDIAN = 0xFEFF
    LITTLE_ENDIAN = 0xFFFE

    @classmethod
    def from_bom(cls, bom: bytes) -> NarcByteOrder:
        """Determine the byte order from a 2-byte byte order mark."""
        raw = bytes(bom)
        if raw == b"\xfe\xff":
            return cls.BIG_ENDIAN
        if raw == b"\xff\xfe":
            return cls.LITTLE_ENDIAN
        raise NarcByteOrderError(raw)


@dataclass
class NarcFileAllocationTableEntry:
    """Location of one file relative to the start of the file image."""

    start_address: int
    end_address: int


@dataclass
class NarcFileAllocationTableBlock:
    """The FATB chunk of a NARC archive."""

    chunk_size: int
    number_of_files: int
    files: list[NarcFileAllocationTableEntry] = field(default_factory=list)


@dataclass
class NarcFileNameTableBlock:
    """The FNTB chunk of a NARC archive."""

    chunk_size: int


@dataclass
class NarcFileImageBlock:
    """The FIMG chunk of a NARC archive; files are loaded from it lazily."""

    chunk_size: int
    img_position: int


@dataclass
class NarcHeader:
    """The parsed header of a NARC archive."""

    byte_order: Optional[NarcByteOrder]
    version: int
    file_size: int
    narc_header_size: int
    number_of_chunks: int
    fat: Optional[NarcFileAllocationTableBlock] = None
    fnt: Optional[NarcFileNameTableBlock] = None
    files: Optional[NarcFileImageBlock] = None