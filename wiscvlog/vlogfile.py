"""A value-log file that is appended to and read from at the same time."""

from __future__ import annotations

import struct
from typing import Iterator, Union

from .errors import CorruptionError
from .files import PathLike, new_sequential_file, new_writable_file
from .reader import RecordReader
from .writer import HEADER_SIZE, RecordWriter, crc32c, unmask_crc

_Data = Union[bytes, bytearray, memoryview, str]
_HEADER = struct.Struct("<IQ")


def _as_bytes(data: _Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class VlogFile:
    """A freshly created log file with a record writer and a record reader."""

    def __init__(self, pathname: PathLike) -> None:
        self._writer = RecordWriter(new_writable_file(pathname))
        try:
            self._reader = RecordReader(new_sequential_file(pathname), checksum=True)
        except BaseException:
            self._writer.close()
            raise

    def write_record(self, data: _Data) -> None:
        """Append one framed record."""
        self._writer.add_record(data)

    def read_record(self) -> bytes:
        """Return the next record in sequence."""
        record = self._reader.read_record()
        if record is None:
            raise CorruptionError("Read Record failed")
        return record

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._reader)

    def read(self, offset: int, length: int) -> bytes:
        """Return length raw bytes starting at offset."""
        data = self._reader.read(length, offset)
        if data is None:
            raise CorruptionError("Can not read from disk")
        return data

    def check_crc(self, src: _Data) -> bytes:
        """Verify a raw framed record and return its payload."""
        raw = _as_bytes(src)
        if len(raw) < HEADER_SIZE:
            raise CorruptionError("string is too short")
        masked_crc, length = _HEADER.unpack_from(raw)
        payload = raw[HEADER_SIZE:HEADER_SIZE + length]
        if len(payload) != length or crc32c(payload) != unmask_crc(masked_crc):
            raise CorruptionError("Check crc failed!")
        return payload

    def sync(self) -> None:
        """Force written records onto stable storage."""
        self._writer.sync()

    def close(self) -> None:
        """Close both the writer and the reader."""
        try:
            self._writer.close()
        finally:
            self._reader.close()

    def __enter__(self) -> "VlogFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()