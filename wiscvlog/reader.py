"""Sequential and positioned reading of framed records from a value log."""

from __future__ import annotations

import abc
import struct
import threading
from typing import Iterator, Optional

from .errors import CorruptionError, VlogError
from .files import SequentialFile
from .writer import BLOCK_SIZE, HEADER_SIZE, crc32c, unmask_crc

_HEADER = struct.Struct("<IQ")


class Reporter(abc.ABC):
    """Told about data that had to be dropped while reading."""

    @abc.abstractmethod
    def corruption(self, nbytes: int, error: VlogError) -> None:
        """Handle the loss of about nbytes bytes for the given reason."""


class RecordReader:
    """Reads records written by RecordWriter, checking their checksums."""

    def __init__(
        self,
        file: SequentialFile,
        reporter: Optional[Reporter] = None,
        checksum: bool = True,
        initial_offset: int = 0,
    ) -> None:
        self._file = file
        self._reporter = reporter
        self._checksum = checksum
        self._buffer = memoryview(b"")
        self._eof = False
        self._lock = threading.Lock()
        if initial_offset > 0:
            self.jump_to_pos(initial_offset)

    def _report_drop(self, nbytes: int, error: VlogError) -> None:
        if self._reporter is not None:
            self._reporter.corruption(nbytes, error)

    def _report_corruption(self, nbytes: int, reason: str) -> None:
        self._report_drop(nbytes, CorruptionError(reason))

    def _fill_buffer(self) -> bool:
        """Top the buffer up to a whole block; return False when no header fits."""
        if self._eof:
            self._buffer = memoryview(b"")
            return False
        leftover = bytes(self._buffer)
        try:
            chunk = self._file.read(BLOCK_SIZE - len(leftover))
        except VlogError as exc:
            self._buffer = memoryview(b"")
            self._report_drop(BLOCK_SIZE, exc)
            self._eof = True
            return False
        self._buffer = memoryview(leftover + chunk)
        if len(self._buffer) < BLOCK_SIZE:
            self._eof = True
            if len(self._buffer) < HEADER_SIZE:
                return False
        return True

    def _verified(self, payload: bytes, expected_crc: int) -> bool:
        if self._checksum and crc32c(payload) != expected_crc:
            self._report_corruption(HEADER_SIZE + len(payload), "checksum mismatch")
            return False
        return True

    def read_record(self) -> Optional[bytes]:
        """Return the next record, or None at the end of the log or on damage."""
        if len(self._buffer) < HEADER_SIZE and not self._fill_buffer():
            return None

        masked_crc, length = _HEADER.unpack(self._buffer[:HEADER_SIZE])
        expected_crc = unmask_crc(masked_crc)
        self._buffer = self._buffer[HEADER_SIZE:]

        if length <= len(self._buffer):
            payload = bytes(self._buffer[:length])
            self._buffer = self._buffer[length:]
            return payload if self._verified(payload, expected_crc) else None

        if self._eof:
            return None

        head = bytes(self._buffer)
        self._buffer = memoryview(b"")
        left_length = length - len(head)

        if left_length > BLOCK_SIZE // 2:
            try:
                tail = self._file.read(left_length)
            except VlogError as exc:
                self._report_drop(left_length, exc)
                return None
            if len(tail) < left_length:
                self._eof = True
                return None
        else:
            try:
                block = self._file.read(BLOCK_SIZE)
            except VlogError as exc:
                self._report_drop(BLOCK_SIZE, exc)
                return None
            if len(block) < BLOCK_SIZE:
                self._eof = True
                if len(block) < left_length:
                    self._report_corruption(left_length, "last record not full")
                    return None
            view = memoryview(block)
            tail = bytes(view[:left_length])
            self._buffer = view[left_length:]

        payload = head + tail
        return payload if self._verified(payload, expected_crc) else None

    def __iter__(self) -> Iterator[bytes]:
        while True:
            record = self.read_record()
            if record is None:
                return
            yield record

    def read(self, size: int, pos: int) -> Optional[bytes]:
        """Return exactly size bytes starting at offset pos, or None if unavailable."""
        with self._lock:
            if not self.jump_to_pos(pos):
                return None
            try:
                data = self._file.read(size)
            except VlogError as exc:
                self._report_drop(size, exc)
                return None
            if len(data) != size:
                self._report_corruption(size, "short read")
                return None
            return data

    def jump_to_pos(self, pos: int) -> bool:
        """Move the file to the absolute offset pos; report and return False on failure."""
        try:
            self._file.jump(pos)
        except VlogError as exc:
            self._report_drop(pos, exc)
            return False
        return True

    def deallocate_disk_space(self, offset: int, length: int) -> bool:
        """Try to release disk space of a range; return whether it worked."""
        try:
            self._file.deallocate_disk_space(offset, length)
        except VlogError:
            return False
        return True

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> "RecordReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()