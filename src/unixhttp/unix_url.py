# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""URLs that address an HTTP server listening on a Unix socket.

A URL authority cannot hold a filesystem path, so the socket path is
hex-encoded into the host slot of a ``unix://`` URL:

    >>> str(UnixUrl.new("/tmp/my.socket", "/api/v1/status"))
    'unix://2f746d702f6d792e736f636b6574/api/v1/status'

The encoding only exists to give the request a well-formed URL. The socket
path used to connect travels next to the request (see
:mod:`unixhttp.transport`) rather than being decoded back out of the URL.
"""

from __future__ import annotations

import os
import re
from typing import Iterable, Union
from urllib.parse import quote

import httpx

from .exceptions import AddressParseError

SCHEME = "unix"

SocketPath = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

_HEX_AUTHORITY = re.compile(r"(?:[0-9a-f]{2})+")


def encode_socket_path(socket: SocketPath) -> str:
    """Hex-encode the raw bytes of a socket path (lowercase)."""
    raw = os.fsencode(socket)
    if not raw:
        raise AddressParseError("socket path must not be empty")
    return raw.hex()


def decode_socket_path(authority: str) -> bytes:
    """Recover the raw socket path bytes from a hex authority."""
    if not _HEX_AUTHORITY.fullmatch(authority):
        raise AddressParseError(
            f"authority is not a hex-encoded socket path: {authority!r}"
        )
    return bytes.fromhex(authority)


def _parse(url: str) -> httpx.URL:
    try:
        return httpx.URL(url)
    except httpx.InvalidURL as e:
        raise AddressParseError(str(e)) from e


class UnixUrl:
    """A ``unix://`` URL carrying a hex-encoded socket path as its host.

    Mutators edit the parsed URL in place; the string form is always
    re-derived from the current components. Two ``UnixUrl`` objects are
    equal when their string forms are equal.
    """

    __slots__ = ("_url",)

    def __init__(self, url: httpx.URL):
        self._url = url

    @classmethod
    def new(cls, socket: SocketPath, path: str) -> UnixUrl:
        """Build a URL from a socket path and a relative URL path.

        ``path`` may carry a query and fragment (``"v1/items?x=1#top"``).
        A leading ``/`` is added when missing; repeated separators are kept.

        Raises:
            AddressParseError: The composed URL is not valid.
        """
        authority = encode_socket_path(socket)
        if not path.startswith("/"):
            path = "/" + path
        return cls.parse(f"{SCHEME}://{authority}{path}")

    @classmethod
    def parse(cls, url: str) -> UnixUrl:
        """Parse the string form produced by :meth:`as_str`."""
        parsed = _parse(url)
        if parsed.scheme != SCHEME:
            raise AddressParseError(f"expected a {SCHEME}:// URL, got {url!r}")
        if parsed.port is not None or parsed.userinfo:
            raise AddressParseError(f"unexpected port or userinfo in {url!r}")
        decode_socket_path(parsed.host)
        return cls(parsed)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def as_str(self) -> str:
        return str(self._url)

    def as_url(self) -> httpx.URL:
        """The underlying ``httpx.URL``."""
        return self._url

    @property
    def scheme(self) -> str:
        return self._url.scheme

    @property
    def host(self) -> str:
        """The hex-encoded socket path."""
        return self._url.host

    @property
    def origin(self) -> tuple[str, str, int | None]:
        return (self.scheme, self.host, self._url.port)

    @property
    def socket_path_bytes(self) -> bytes:
        return decode_socket_path(self.host)

    @property
    def socket_path(self) -> str:
        return os.fsdecode(self.socket_path_bytes)

    @property
    def path(self) -> str:
        """The percent-encoded path, always starting with ``/``."""
        return self._url.raw_path.decode("ascii").partition("?")[0]

    @property
    def query(self) -> str | None:
        """The encoded query string, or None when the URL has no ``?``."""
        _, sep, query = self._url.raw_path.decode("ascii").partition("?")
        return query if sep else None

    @property
    def fragment(self) -> str | None:
        _, sep, fragment = str(self._url).partition("#")
        return fragment if sep else None

    def path_segments(self) -> list[str]:
        """The encoded path split on ``/``, without the leading empty item."""
        return self.path[1:].split("/")

    def query_pairs(self) -> list[tuple[str, str]]:
        """Decoded query pairs in order, duplicates kept."""
        return list(httpx.QueryParams(self.query or "").multi_items())

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def _replace(self, *, path: str, query: str | None, fragment: str | None) -> None:
        url = f"{SCHEME}://{self.host}{path}"
        if query is not None:
            url += "?" + query
        if fragment is not None:
            url += "#" + fragment
        self._url = _parse(url)

    def set_path(self, path: str) -> None:
        if not path.startswith("/"):
            path = "/" + path
        path = path.replace("?", "%3F").replace("#", "%23")
        self._replace(path=path, query=self.query, fragment=self.fragment)

    def set_query(self, query: str | None) -> None:
        if query is not None:
            query = query.replace("#", "%23")
        self._replace(path=self.path, query=query, fragment=self.fragment)

    def set_fragment(self, fragment: str | None) -> None:
        self._replace(path=self.path, query=self.query, fragment=fragment)

    def push_path_segment(self, segment: str) -> None:
        """Append one segment, escaping any ``/`` it contains.

        A trailing empty segment (``/api/``) is replaced rather than kept.
        """
        segments = self.path_segments()
        if segments[-1] == "":
            segments.pop()
        segments.append(quote(segment, safe=""))
        self.set_path("/" + "/".join(segments))

    def pop_path_segment(self) -> str | None:
        segments = self.path_segments()
        if segments == [""]:
            return None
        last = segments.pop()
        self.set_path("/" + "/".join(segments))
        return last

    def extend_query_pairs(self, pairs: Iterable[tuple[str, object]]) -> None:
        """Append encoded pairs to the existing query."""
        encoded = str(httpx.QueryParams(list(pairs)))
        current = self.query
        if current and encoded:
            self.set_query(f"{current}&{encoded}")
        elif encoded:
            self.set_query(encoded)

    def append_query_pair(self, key: str, value: object) -> None:
        self.extend_query_pairs([(key, value)])

    def clear_query(self) -> None:
        self.set_query(None)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def to_wire_url(self) -> httpx.URL:
        """The ``http://`` URL handed to the transport.

        The hex authority is kept so the ``Host`` header names the socket;
        the fragment is dropped.
        """
        url = f"http://{self.host}{self.path}"
        query = self.query
        if query is not None:
            url += "?" + query
        return _parse(url)

    def copy(self) -> UnixUrl:
        return UnixUrl(self._url)

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f"UnixUrl({self.as_str()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnixUrl):
            return NotImplemented
        return self.as_str() == other.as_str()

    def __hash__(self) -> int:
        return hash(self.as_str())
