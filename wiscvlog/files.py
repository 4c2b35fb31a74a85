"""Sequential readers and append-only writers over files on disk."""

from __future__ import annotations

import os
from typing import BinaryIO, Optional, Union

from .errors import NotFoundError, NotSupportedError, VlogIOError

_Data = Union[bytes, bytearray, memoryview, str]
PathLike = Union[str, "os.PathLike[str]"]


def _as_bytes(data: _Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _io_error(path: str, exc: OSError) -> VlogIOError:
    return VlogIOError(path, exc.strerror or str(exc))


class SequentialFile:
    """Reads a file front to back, with absolute and relative repositioning."""

    def __init__(self, path: PathLike) -> None:
        self.path = os.fspath(path)
        try:
            self._file: Optional[BinaryIO] = open(self.path, "rb", buffering=0)
        except FileNotFoundError as exc:
            raise NotFoundError(self.path, exc.strerror or "no such file") from exc
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def _handle(self) -> BinaryIO:
        if self._file is None:
            raise VlogIOError(self.path, "file is closed")
        return self._file

    @property
    def closed(self) -> bool:
        """Whether the file has been closed."""
        return self._file is None

    def read(self, n: int) -> bytes:
        """Read up to n bytes; fewer are returned only at the end of the file."""
        if n < 0:
            raise VlogIOError(self.path, "negative read size")
        handle = self._handle()
        chunks = []
        remaining = n
        try:
            while remaining > 0:
                chunk = handle.read(remaining)
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as exc:
            raise _io_error(self.path, exc) from exc
        return b"".join(chunks)

    def skip(self, n: int) -> None:
        """Move n bytes forward, stopping at the end of the file."""
        handle = self._handle()
        try:
            current = handle.tell()
            end = os.fstat(handle.fileno()).st_size
            handle.seek(min(current + n, max(end, current)))
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def jump(self, n: int) -> None:
        """Move to the absolute offset n from the start of the file."""
        if n < 0:
            raise VlogIOError(self.path, "negative offset")
        try:
            self._handle().seek(n)
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def deallocate_disk_space(self, offset: int, length: int) -> None:
        """Release disk space of a range; plain files do not support this."""
        raise NotSupportedError("DeallocateDiskSpace")

    def close(self) -> None:
        """Close the file; closing twice is harmless."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "SequentialFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class WritableFile:
    """Appends to a freshly created file."""

    def __init__(self, path: PathLike) -> None:
        self.path = os.fspath(path)
        try:
            self._file: Optional[BinaryIO] = open(self.path, "wb")
        except FileNotFoundError as exc:
            raise NotFoundError(self.path, exc.strerror or "no such directory") from exc
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def _handle(self) -> BinaryIO:
        if self._file is None:
            raise VlogIOError(self.path, "file is closed")
        return self._file

    @property
    def closed(self) -> bool:
        """Whether the file has been closed."""
        return self._file is None

    def append(self, data: _Data) -> None:
        """Append data at the end of the file."""
        try:
            self._handle().write(_as_bytes(data))
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def flush(self) -> None:
        """Push buffered data to the operating system."""
        try:
            self._handle().flush()
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def sync(self) -> None:
        """Flush and force the data onto stable storage."""
        handle = self._handle()
        try:
            handle.flush()
            os.fsync(handle.fileno())
        except OSError as exc:
            raise _io_error(self.path, exc) from exc

    def close(self) -> None:
        """Flush and close the file; closing twice is harmless."""
        if self._file is not None:
            try:
                self._file.close()
            except OSError as exc:
                raise _io_error(self.path, exc) from exc
            finally:
                self._file = None

    def __enter__(self) -> "WritableFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new_sequential_file(path: PathLike) -> SequentialFile:
    """Open an existing file for sequential reading."""
    return SequentialFile(path)


def new_writable_file(path: PathLike) -> WritableFile:
    """Create a file for writing, replacing any file of the same name."""
    return WritableFile(path)