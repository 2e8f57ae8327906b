# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Ordered, case-insensitive header multimap with sensitive values.

Each entry carries a ``sensitive`` flag. Sensitive values are sent on the
wire like any other header but are rendered as ``Sensitive`` by ``repr()``,
so they never end up in logs or debug output.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Union

import httpx

from .exceptions import InvalidHeader

# RFC 7230 token and field-value (HTAB, SP, VCHAR, obs-text)
_TOKEN = re.compile(r"[-!#$%&'*+.^_`|~0-9a-zA-Z]+")
_FIELD_VALUE = re.compile(rb"[\t\x20-\x7e\x80-\xff]*")

HeaderValue = Union[str, bytes]
HeaderSource = Union[
    "HeaderMap",
    httpx.Headers,
    Mapping[str, HeaderValue],
    Iterable[tuple[str, HeaderValue]],
]


@dataclass(frozen=True)
class HeaderEntry:
    """A single header line."""

    name: str
    value: bytes
    sensitive: bool = False

    @property
    def key(self) -> str:
        return self.name.lower()

    def text(self) -> str:
        return self.value.decode("latin-1")

    def __repr__(self) -> str:
        value = "Sensitive" if self.sensitive else repr(self.text())
        return f"{self.name}: {value}"


def _validate(name: str | bytes, value: HeaderValue) -> tuple[str, bytes]:
    if isinstance(name, bytes):
        try:
            name = name.decode("ascii")
        except UnicodeDecodeError:
            raise InvalidHeader(f"invalid header name: {name!r}", name) from None
    if not isinstance(name, str) or not _TOKEN.fullmatch(name):
        raise InvalidHeader(f"invalid header name: {name!r}", name)

    if isinstance(value, str):
        try:
            value = value.encode("latin-1")
        except UnicodeEncodeError:
            raise InvalidHeader(
                f"invalid value for header {name!r}: not latin-1 encodable", name
            ) from None
    elif not isinstance(value, bytes):
        raise InvalidHeader(
            f"invalid value for header {name!r}: {type(value).__name__}", name
        )
    if not _FIELD_VALUE.fullmatch(value):
        raise InvalidHeader(f"invalid value for header {name!r}", name)
    return name, value


def _iter_source(source: HeaderSource) -> Iterator[HeaderEntry]:
    if isinstance(source, HeaderMap):
        yield from source.entries()
    elif isinstance(source, httpx.Headers):
        for name, value in source.raw:
            yield HeaderEntry(*_validate(name, value))
    elif isinstance(source, Mapping):
        for name, value in source.items():
            yield HeaderEntry(*_validate(name, value))
    else:
        for name, value in source:
            yield HeaderEntry(*_validate(name, value))


class HeaderMap:
    """Ordered multimap of headers keyed case-insensitively."""

    def __init__(self, headers: HeaderSource | None = None):
        self._entries: list[HeaderEntry] = []
        if headers is not None:
            self._entries.extend(_iter_source(headers))

    def append(self, name: str, value: HeaderValue, *, sensitive: bool = False) -> None:
        """Add a value, keeping any existing values for ``name``.

        Raises:
            InvalidHeader: The name or value is not valid on the wire.
        """
        self._entries.append(HeaderEntry(*_validate(name, value), sensitive))

    def insert(self, name: str, value: HeaderValue, *, sensitive: bool = False) -> None:
        """Replace every value of ``name`` with a single one.

        The new entry takes the position of the first replaced entry.
        """
        self._insert_entry(HeaderEntry(*_validate(name, value), sensitive))

    def _insert_entry(self, entry: HeaderEntry) -> None:
        key = entry.key
        index = next(
            (i for i, e in enumerate(self._entries) if e.key == key),
            len(self._entries),
        )
        self._entries = [e for e in self._entries if e.key != key]
        self._entries.insert(index, entry)

    def merge(self, headers: HeaderSource) -> None:
        """Merge another header collection into this one.

        The first occurrence of a name replaces what is already set, later
        occurrences of the same name in ``headers`` are appended.
        """
        incoming = list(_iter_source(headers))
        seen: set[str] = set()
        for entry in incoming:
            if entry.key in seen:
                self._entries.append(entry)
            else:
                seen.add(entry.key)
                self._insert_entry(entry)

    def remove(self, name: str) -> None:
        key = name.lower()
        self._entries = [e for e in self._entries if e.key != key]

    def get(self, name: str, default: str | None = None) -> str | None:
        """First value for ``name`` (latin-1 decoded)."""
        key = name.lower()
        for entry in self._entries:
            if entry.key == key:
                return entry.text()
        return default

    def get_all(self, name: str) -> list[str]:
        key = name.lower()
        return [e.text() for e in self._entries if e.key == key]

    def get_entries(self, name: str) -> list[HeaderEntry]:
        key = name.lower()
        return [e for e in self._entries if e.key == key]

    def is_sensitive(self, name: str) -> bool:
        """True if any value of ``name`` is marked sensitive."""
        return any(e.sensitive for e in self.get_entries(name))

    def entries(self) -> list[HeaderEntry]:
        return list(self._entries)

    def keys(self) -> list[str]:
        seen: dict[str, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.key)
        return list(seen)

    def items(self) -> list[tuple[str, str]]:
        return [(e.name, e.text()) for e in self._entries]

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Header lines in wire form, in insertion order."""
        return [(e.name.encode("ascii"), e.value) for e in self._entries]

    def copy(self) -> HeaderMap:
        clone = HeaderMap()
        clone._entries = list(self._entries)
        return clone

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and any(
            e.key == name.lower() for e in self._entries
        )

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return [(e.key, e.value) for e in self._entries] == [
            (e.key, e.value) for e in other._entries
        ]

    def __repr__(self) -> str:
        return f"HeaderMap({self._entries!r})"
