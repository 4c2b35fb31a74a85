"""Encoding of values, key/value entries and value-log pointers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple, Type, TypeVar, Union

from .errors import CorruptionError, InvalidArgumentError

BytesLike = Union[bytes, bytearray, memoryview, str]

_E = TypeVar("_E", bound=enum.IntEnum)


class ValueType(enum.IntEnum):
    """Kind of a key/value entry."""

    DELETION = 0
    VALUE = 1


class VlogValueType(enum.IntEnum):
    """Kind of the payload held in a value."""

    VLOG_VALUE = 0
    VLOG_META = 1


@dataclass(frozen=True)
class Value:
    """A typed payload."""

    type: VlogValueType
    data: bytes


@dataclass(frozen=True)
class KV:
    """A key with its entry type and value."""

    type: ValueType
    key: bytes
    value: Value


@dataclass(frozen=True)
class Meta:
    """Position and size of a record in the value log."""

    offset: int
    size: int


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _encode_varint(number: int, bits: int) -> bytes:
    if number < 0 or number >= 1 << bits:
        raise InvalidArgumentError(f"value does not fit in {bits} bits", str(number))
    out = bytearray()
    while number >= 0x80:
        out.append((number & 0x7F) | 0x80)
        number >>= 7
    out.append(number)
    return bytes(out)


def _decode_varint(buf: bytes, pos: int, bits: int) -> Tuple[int, int]:
    result = 0
    shift = 0
    while shift < bits:
        if pos >= len(buf):
            raise CorruptionError("truncated varint")
        byte = buf[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
    raise CorruptionError("malformed varint")


def _length_prefixed(data: bytes) -> bytes:
    return _encode_varint(len(data), 32) + data


def _read_length_prefixed(buf: bytes, pos: int) -> Tuple[bytes, int]:
    length, pos = _decode_varint(buf, pos, 32)
    end = pos + length
    if end > len(buf):
        raise CorruptionError("length-prefixed field is truncated")
    return buf[pos:end], end


def _coerce_type(enum_cls: Type[_E], value: int) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidArgumentError(f"not a {enum_cls.__name__}", str(value)) from None


def _read_type(enum_cls: Type[_E], buf: bytes) -> _E:
    if not buf:
        raise CorruptionError("input is empty")
    try:
        return enum_cls(buf[0])
    except ValueError:
        raise CorruptionError(f"unknown {enum_cls.__name__}", str(buf[0])) from None


def put_value(value_type: VlogValueType, data: BytesLike) -> bytes:
    """Encode a typed payload: a type byte then the length-prefixed data."""
    tag = _coerce_type(VlogValueType, value_type)
    return bytes([tag]) + _length_prefixed(_as_bytes(data))


def get_value(src: BytesLike) -> Value:
    """Decode what put_value produced."""
    buf = _as_bytes(src)
    value_type = _read_type(VlogValueType, buf)
    data, _ = _read_length_prefixed(buf, 1)
    return Value(value_type, data)


def put_kv(value_type: ValueType, key: BytesLike, value: Value) -> bytes:
    """Encode an entry: type byte, length-prefixed key, length-prefixed value."""
    tag = _coerce_type(ValueType, value_type)
    encoded_value = put_value(value.type, value.data)
    return bytes([tag]) + _length_prefixed(_as_bytes(key)) + _length_prefixed(encoded_value)


def get_kv(src: BytesLike) -> KV:
    """Decode what put_kv produced."""
    buf = _as_bytes(src)
    value_type = _read_type(ValueType, buf)
    key, pos = _read_length_prefixed(buf, 1)
    encoded_value, _ = _read_length_prefixed(buf, pos)
    return KV(value_type, key, get_value(encoded_value))


def put_meta(offset: int, size: int) -> bytes:
    """Encode a record position as two 64-bit varints."""
    return _encode_varint(offset, 64) + _encode_varint(size, 64)


def get_meta(src: BytesLike) -> Meta:
    """Decode what put_meta produced."""
    buf = _as_bytes(src)
    offset, pos = _decode_varint(buf, 0, 64)
    size, _ = _decode_varint(buf, pos, 64)
    return Meta(offset, size)