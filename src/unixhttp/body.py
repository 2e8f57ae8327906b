"""Request body."""

from __future__ import annotations

from typing import Union

BodyLike = Union["Body", bytes, bytearray, memoryview, str]


class Body:
    """An immutable request body.

    ``bytes`` are kept by reference; mutable buffers are copied once and
    strings are encoded as UTF-8.
    """

    __slots__ = ("_data",)

    def __init__(self, data: BodyLike = b""):
        if isinstance(data, Body):
            data = data._data
        elif isinstance(data, str):
            data = data.encode("utf-8")
        elif isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(
                f"body must be bytes, str or a buffer, not {type(data).__name__}"
            )
        self._data = data

    @property
    def bytes(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Body):
            return self._data == other._data
        if isinstance(other, bytes):
            return self._data == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"Body({self._data!r})"
