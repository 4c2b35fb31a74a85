"""Key/value separation: values go to a value log, keys keep pointers to them."""

from __future__ import annotations

from typing import Optional, Union

from .batch import BatchHandler, WriteBatch
from .errors import CorruptionError, NotFoundError
from .files import PathLike
from .format import Meta, Value, ValueType, VlogValueType, get_kv, get_meta, put_kv
from .handler import VlogHandler
from .vlogfile import VlogFile
from .writer import HEADER_SIZE

_Data = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: _Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class _LogAppender(BatchHandler):
    """Writes the puts of a batch to the value log and indexes their location."""

    def __init__(self, store: "VlogWisckey") -> None:
        self._store = store

    def put(self, key: bytes, value: bytes) -> None:
        encoded = put_kv(ValueType.VALUE, key, Value(VlogValueType.VLOG_VALUE, value))
        self._store._append(key, encoded)

    def delete(self, key: bytes) -> None:
        # Deletions are not recorded in the value log.
        return None


class VlogWisckey:
    """A value log whose live data is garbage-collected past a size threshold."""

    def __init__(self, pathname: PathLike, gc_threshold: int, handler: VlogHandler) -> None:
        self._handler = handler
        self._gc_threshold = gc_threshold
        self._head = 0
        self._tail = 0
        self._file = VlogFile(pathname)

    @property
    def head(self) -> int:
        """Offset at which the next record will be written."""
        return self._head

    @property
    def tail(self) -> int:
        """Offset up to which the log has been garbage-collected."""
        return self._tail

    @property
    def size(self) -> int:
        """Amount of log data not yet garbage-collected."""
        return self._head - self._tail

    def _append(self, key: bytes, encoded: bytes) -> None:
        offset = self._head
        self._file.write_record(encoded)
        write_size = len(encoded) + HEADER_SIZE
        self._head += write_size
        self._handler.update(key, Meta(offset, write_size))

    def add_batch(self, batch: WriteBatch) -> None:
        """Write every put of the batch to the log, collecting garbage if due."""
        batch.iterate(_LogAppender(self))
        if self.size >= self._gc_threshold:
            self._start_gc()

    def _start_gc(self) -> None:
        stop_at = self._head
        for record in self._file:
            kv = get_kv(record)
            if kv.type is not ValueType.VALUE or not self._handler.is_key_valid(kv.key):
                continue
            offset = self._head
            self._file.write_record(record)
            write_size = len(record) + HEADER_SIZE
            self._tail += write_size
            self._head += write_size
            self._handler.update(kv.key, Meta(offset, write_size))
            if self._tail >= stop_at:
                break
        self._file.sync()

    def read(self, key: _Data, meta_val: Optional[_Data]) -> bytes:
        """Return the value stored for key at the location encoded in meta_val."""
        if meta_val is None:
            raise NotFoundError("no location for key", _as_bytes(key))
        meta = get_meta(meta_val)
        raw = self._file.read(meta.offset, meta.size)
        kv = get_kv(self._file.check_crc(raw))
        if kv.type is not ValueType.VALUE:
            raise CorruptionError("kv is not kTypeValue")
        if kv.key != _as_bytes(key):
            raise CorruptionError("key is not matched")
        if kv.value.type is not VlogValueType.VLOG_VALUE:
            raise CorruptionError("value is not vLog value")
        return kv.value.data

    def close(self) -> None:
        """Close the value log."""
        self._file.close()

    def __enter__(self) -> "VlogWisckey":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()