"""Exceptions raised by the value-log store."""

from __future__ import annotations

from typing import Optional, Union

_Text = Union[str, bytes, bytearray, memoryview]


def _as_text(value: _Text) -> str:
    if isinstance(value, str):
        return value
    return bytes(value).decode("utf-8", errors="replace")


class VlogError(Exception):
    """Base class of every error the store reports.

    An error carries a message and an optional detail; when the detail is
    present and not empty it is shown after the message, separated by ": ".
    """

    def __init__(self, message: _Text, detail: Optional[_Text] = None) -> None:
        self.message = _as_text(message)
        self.detail = _as_text(detail) if detail else ""
        text = f"{self.message}: {self.detail}" if self.detail else self.message
        super().__init__(text)


class NotFoundError(VlogError):
    """Something that was looked up does not exist."""


class CorruptionError(VlogError):
    """Stored or encoded data failed a consistency check."""


class NotSupportedError(VlogError):
    """The operation is not available for this object."""


class InvalidArgumentError(VlogError):
    """An argument is outside what the operation accepts."""


class VlogIOError(VlogError):
    """Reading or writing the underlying storage failed."""