"""Record framing: a CRC32C checksum and a length before every payload."""

from __future__ import annotations

import struct
from typing import List, Union

from .files import WritableFile

_Data = Union[bytes, bytearray, memoryview, str]

HEADER_SIZE = 4 + 8
BLOCK_SIZE = 32768

_MASK_DELTA = 0xA282EAD8
_U32 = 0xFFFFFFFF
_HEADER = struct.Struct("<IQ")


def _make_table() -> List[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0x82F63B78 if crc & 1 else crc >> 1
        table.append(crc)
    return table


_TABLE = _make_table()


def _as_bytes(data: _Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def crc32c(data: _Data, crc: int = 0) -> int:
    """Extend the CRC32C value crc with data; crc 0 starts a fresh checksum."""
    value = (crc & _U32) ^ _U32
    for byte in _as_bytes(data):
        value = _TABLE[(value ^ byte) & 0xFF] ^ (value >> 8)
    return value ^ _U32


def mask_crc(crc: int) -> int:
    """Return a masked form of a CRC, safe to store next to checksummed data."""
    crc &= _U32
    return (((crc >> 15) | (crc << 17)) + _MASK_DELTA) & _U32


def unmask_crc(masked: int) -> int:
    """Undo mask_crc."""
    rot = (masked - _MASK_DELTA) & _U32
    return ((rot >> 17) | (rot << 15)) & _U32


def encode_header(data: _Data) -> bytes:
    """Header for a payload: masked CRC32C (4 bytes LE) then length (8 bytes LE)."""
    payload = _as_bytes(data)
    return _HEADER.pack(mask_crc(crc32c(payload)), len(payload))


class RecordWriter:
    """Appends framed records to a writable file."""

    def __init__(self, dest: WritableFile) -> None:
        self._dest = dest

    def add_record(self, data: _Data) -> None:
        """Write the header and the payload, then flush."""
        payload = _as_bytes(data)
        self._dest.append(encode_header(payload))
        self._dest.append(payload)
        self._dest.flush()

    def sync(self) -> None:
        """Force written records onto stable storage."""
        self._dest.sync()

    def close(self) -> None:
        """Close the underlying file."""
        self._dest.close()

    def __enter__(self) -> "RecordWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()