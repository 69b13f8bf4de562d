"""Reader for NARC (Nitro ARChive) files."""

from __future__ import annotations

import io
import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Union

from .nds import (
    NarcByteOrder,
    NarcByteOrderError,
    NarcFileAllocationTableBlock,
    NarcFileAllocationTableEntry,
    NarcFileImageBlock,
    NarcFileNameTableBlock,
    NarcHeader,
)

logger = logging.getLogger(__name__)

NARC_MAGIC = 0x4352414E
"""Magic number at the start of a NARC file ("NARC")."""

FATB_MAGIC = 0x46415442
"""Magic number of a File Allocation Table Block chunk ("BTAF")."""

FNTB_MAGIC = 0x464E5442
"""Magic number of a File Name Table Block chunk ("BTNF")."""

FIMG_MAGIC = 0x46494D47
"""Magic number of a File Image Block chunk ("GMIF")."""


class NarcReaderError(Exception):
    """Raised when a NARC file cannot be read or parsed."""


@dataclass
class NarcReaderFlags:
    """Options that relax the checks done while reading a NARC header."""

    skip_narc_magic_number_check: bool = False
    skip_bom_check: bool = False


class NarcReader:
    """Reads a NARC header eagerly and the files it contains on demand."""

    def __init__(self, stream: BinaryIO, flags: Optional[NarcReaderFlags] = None) -> None:
        self._stream = stream
        self.header: NarcHeader = self._read_header(flags or NarcReaderFlags())

    @classmethod
    def read_from_file(
        cls,
        path: Union[str, os.PathLike],
        flags: Optional[NarcReaderFlags] = None,
    ) -> NarcReader:
        """Open a NARC file; it stays open until the reader is closed."""
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise NarcReaderError(f"unable to open the NARC file ({exc})") from exc
        try:
            return cls(io.BufferedReader(handle) if not isinstance(handle, io.BufferedReader) else handle, flags)
        except BaseException:
            handle.close()
            raise

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()

    def __enter__(self) -> NarcReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Low-level stream helpers

    def _read_exact(self, size: int) -> bytes:
        try:
            data = self._stream.read(size)
        except OSError as exc:
            raise NarcReaderError(f"failed to read the NARC file ({exc})") from exc
        if len(data) < size:
            raise NarcReaderError(
                f"failed to read the NARC file (expected {size} bytes, got {len(data)})"
            )
        return data

    def _read_int(self, fmt: str) -> int:
        (value,) = struct.unpack(fmt, self._read_exact(struct.calcsize(fmt)))
        return value

    def _tell(self) -> int:
        try:
            return self._stream.tell()
        except OSError as exc:
            raise NarcReaderError(
                f"failed to get the stream position of the NARC file ({exc})"
            ) from exc

    def _seek(self, offset: int, whence: int = io.SEEK_SET) -> None:
        try:
            self._stream.seek(offset, whence)
        except (OSError, ValueError) as exc:
            raise NarcReaderError(f"failed to seek the NARC file ({exc})") from exc

    # Header parsing

    def _read_header(self, flags: NarcReaderFlags) -> NarcHeader:
        if not flags.skip_narc_magic_number_check:
            magic = self._read_int("<I")
            if magic != NARC_MAGIC:
                raise NarcReaderError(
                    f"wrong NARC magic number (expected 0x{NARC_MAGIC:X}, found 0x{magic:X})"
                )

        try:
            bom = self._stream.read(2)
        except OSError as exc:
            raise NarcReaderError(f"failed to read the NARC file ({exc})") from exc
        bom = bom.ljust(2, b"\x00")

        try:
            byte_order: Optional[NarcByteOrder] = NarcByteOrder.from_bom(bom)
        except NarcByteOrderError as exc:
            if not flags.skip_bom_check:
                raise NarcReaderError(
                    f"unable to determine byte order from the BOM (found {bom!r})"
                ) from exc
            byte_order = None

        version_fmt = "<H" if byte_order is NarcByteOrder.LITTLE_ENDIAN else ">H"
        version = self._read_int(version_fmt)
        file_size = self._read_int("<I")
        narc_header_size = self._read_int("<H")
        number_of_chunks = self._read_int("<H")

        header = NarcHeader(
            byte_order=byte_order,
            version=version,
            file_size=file_size,
            narc_header_size=narc_header_size,
            number_of_chunks=number_of_chunks,
        )
        self._read_chunks(header)
        return header

    def _read_chunks(self, header: NarcHeader) -> None:
        for _ in range(header.number_of_chunks):
            start_pos = self._tell()
            chunk_magic = self._read_int("<I")
            chunk_size = self._read_int("<I")

            if chunk_magic == FATB_MAGIC:
                header.fat = self._read_fatb_chunk(chunk_size)
            elif chunk_magic == FNTB_MAGIC:
                header.fnt = NarcFileNameTableBlock(chunk_size=chunk_size)
            elif chunk_magic == FIMG_MAGIC:
                header.files = NarcFileImageBlock(
                    chunk_size=chunk_size, img_position=self._tell()
                )
            else:
                logger.warning(
                    "Encountered unknown chunk in NARC: magic = 0x%X, size = %d",
                    chunk_magic,
                    chunk_size,
                )

            self._seek(start_pos + chunk_size)

    def _read_fatb_chunk(self, chunk_size: int) -> NarcFileAllocationTableBlock:
        number_of_files = self._read_int("<H")
        self._seek(2, io.SEEK_CUR)  # reserved field
        entries = [
            NarcFileAllocationTableEntry(*struct.unpack("<II", self._read_exact(8)))
            for _ in range(number_of_files)
        ]
        return NarcFileAllocationTableBlock(
            chunk_size=chunk_size, number_of_files=number_of_files, files=entries
        )

    # File access

    def number_of_files(self) -> int:
        """Return the number of files listed in the allocation table."""
        return self.header.fat.number_of_files if self.header.fat is not None else 0

    def get_file(self, index: int) -> bytes:
        """Read and return the file at the given index."""
        fat = self.header.fat
        if fat is None:
            raise NarcReaderError("this NARC does not have a File Allocation Table Block")
        if not 0 <= index < len(fat.files):
            raise NarcReaderError(f"the file at index {index} could not be found")
        entry = fat.files[index]

        image = self.header.files
        if image is None:
            raise NarcReaderError("this NARC does not have a File Image Block")

        size = entry.end_address - entry.start_address
        if size < 0:
            raise NarcReaderError(
                f"the file at index {index} has an invalid size (size is {size})"
            )

        self._seek(image.img_position + entry.start_address)
        return self._read_exact(size)

    def files_iter(self) -> Iterator[bytes]:
        """Yield every file of the archive in order, loading each as needed."""
        for index in range(self.number_of_files()):
            yield self.get_file(index)