"""Ordered collections of puts and deletes."""

from __future__ import annotations

import abc
from typing import Iterator, List, Tuple, Union

from .format import ValueType

_Data = Union[bytes, bytearray, memoryview, str]
_Op = Tuple[ValueType, bytes, bytes]


def _as_bytes(data: _Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class BatchHandler(abc.ABC):
    """Receives the operations of a batch, in order."""

    @abc.abstractmethod
    def put(self, key: bytes, value: bytes) -> None:
        """Handle a mapping from key to value."""

    @abc.abstractmethod
    def delete(self, key: bytes) -> None:
        """Handle the removal of a key."""


class WriteBatch:
    """Updates to apply together, kept in the order they were added."""

    def __init__(self) -> None:
        self._ops: List[_Op] = []

    def put(self, key: _Data, value: _Data) -> None:
        """Add a mapping from key to value."""
        self._ops.append((ValueType.VALUE, _as_bytes(key), _as_bytes(value)))

    def delete(self, key: _Data) -> None:
        """Add the removal of a key."""
        self._ops.append((ValueType.DELETION, _as_bytes(key), b""))

    def clear(self) -> None:
        """Drop every buffered update."""
        self._ops.clear()

    def append(self, source: "WriteBatch") -> None:
        """Copy the updates of another batch after this batch's own."""
        self._ops.extend(source._ops)

    def iterate(self, handler: BatchHandler) -> None:
        """Hand every update to the handler in order."""
        for op_type, key, value in self._ops:
            if op_type is ValueType.VALUE:
                handler.put(key, value)
            else:
                handler.delete(key)

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[_Op]:
        return iter(list(self._ops))