"""In-memory index from keys to their encoded value-log pointers."""

from __future__ import annotations

from typing import Dict, Optional, Union

from .format import Meta, put_meta

_Key = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: _Key) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class VlogHandler:
    """Maps keys to the encoded location of their value in the value log."""

    def __init__(self) -> None:
        self._index: Dict[bytes, bytes] = {}

    def is_key_valid(self, key: _Key) -> bool:
        """Return whether the key is present in the index."""
        return _as_bytes(key) in self._index

    def update(self, key: _Key, meta: Meta) -> None:
        """Record where the key's value now lives."""
        self._index[_as_bytes(key)] = put_meta(meta.offset, meta.size)

    def put(self, key: _Key, value: _Key) -> None:
        """Store a raw value for the key."""
        self._index[_as_bytes(key)] = _as_bytes(value)

    def get(self, key: _Key) -> Optional[bytes]:
        """Return the stored value for the key, or None when it is absent."""
        return self._index.get(_as_bytes(key))