# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Responses returned by ``Client.execute``.

Metadata (status, headers, extensions) is available as soon as the
response arrives. The body is read on demand, either whole with
:meth:`Response.bytes`, :meth:`Response.text` and :meth:`Response.json`,
or one chunk at a time with :meth:`Response.chunk`.
"""

from __future__ import annotations

import codecs
import json
import logging
from contextlib import contextmanager
from http.cookies import CookieError, Morsel, SimpleCookie
from typing import Any, AsyncIterator, Iterator

import httpx
from pydantic import TypeAdapter

from .exceptions import DecodeError, StatusError, TransportError
from .unix_url import UnixUrl

logger = logging.getLogger(__name__)

_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def decode_text(content: bytes, encoding: str) -> str:
    """Decode ``content``, letting a byte order mark override ``encoding``.

    The BOM is stripped, malformed sequences become U+FFFD and an unknown
    encoding label falls back to UTF-8.
    """
    for bom, name in _BOMS:
        if content.startswith(bom):
            return content[len(bom):].decode(name, errors="replace")
    try:
        codecs.lookup(encoding)
    except LookupError:
        logger.debug("Unknown charset %r, decoding as utf-8", encoding)
        encoding = "utf-8"
    return content.decode(encoding, errors="replace")


@contextmanager
def _reading() -> Iterator[None]:
    try:
        yield
    except httpx.TransportError as e:
        raise TransportError(e) from e
    except httpx.DecodingError as e:
        raise DecodeError(f"cannot decode response body: {e}") from e


class Response:
    """A response to a submitted :class:`~unixhttp.request.Request`."""

    def __init__(
        self,
        response: httpx.Response,
        url: UnixUrl,
        *,
        default_encoding: str = "utf-8",
    ):
        self._response = response
        self._url = url
        self._default_encoding = default_encoding
        self._chunks: AsyncIterator[bytes] | None = None
        try:
            self._head = response.request.method == "HEAD"
        except RuntimeError:
            self._head = False
        self._content_length = self._framed_length()

    def _framed_length(self) -> int | None:
        if self._head or "transfer-encoding" in self._response.headers:
            return None
        try:
            return int(self._response.headers["content-length"])
        except (KeyError, ValueError):
            return None

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def reason_phrase(self) -> str:
        return self._response.reason_phrase

    @property
    def version(self) -> str:
        return self._response.http_version

    @property
    def headers(self) -> httpx.Headers:
        """Response headers; changes are kept on this response."""
        return self._response.headers

    @property
    def extensions(self) -> dict[str, Any]:
        return self._response.extensions

    @property
    def url(self) -> UnixUrl:
        """The URL the request was sent to."""
        return self._url

    def content_length(self) -> int | None:
        """Size of the response body, if it is known.

        This is the length the body was framed with on the wire, not the
        current value of the ``Content-Length`` header. It is unknown for
        replies to ``HEAD`` and for chunked or close-delimited bodies
        until the body has been read.
        """
        if self._head:
            return None
        if self._content_length is None and self._chunks is None:
            try:
                return len(self._response.content)
            except httpx.ResponseNotRead:
                return None
        return self._content_length

    def cookies(self) -> list[Morsel]:
        """Cookies from every ``Set-Cookie`` header.

        Headers that do not parse as cookies are skipped.
        """
        cookies: list[Morsel] = []
        for value in self._response.headers.get_list("set-cookie"):
            jar: SimpleCookie = SimpleCookie()
            try:
                jar.load(value)
            except CookieError:
                logger.debug("Skipping malformed Set-Cookie header %r", value)
                continue
            cookies.extend(jar.values())
        return cookies

    # -------------------------------------------------------------------------
    # Body
    # -------------------------------------------------------------------------

    async def bytes(self) -> bytes:
        """Read the whole body.

        If :meth:`chunk` was already used, only the unread rest is returned.
        """
        with _reading():
            if self._chunks is None:
                return await self._response.aread()
            return b"".join([chunk async for chunk in self._chunks])

    async def text(self) -> str:
        """Read the whole body as text.

        The charset comes from ``Content-Type``, falling back to the
        client's default encoding (UTF-8 unless configured otherwise).
        """
        return await self.text_with_charset(self._default_encoding)

    async def text_with_charset(self, default_encoding: str) -> str:
        """Read the whole body as text, using ``default_encoding`` when the
        ``Content-Type`` header names no charset.
        """
        encoding = self._response.charset_encoding or default_encoding
        return decode_text(await self.bytes(), encoding)

    async def json(self, type_: Any = None) -> Any:
        """Read the whole body as JSON.

        Args:
            type_: Optional type (pydantic model, dataclass, ``list[int]``...)
                to validate the document against.

        Raises:
            DecodeError: The body is not valid JSON or does not match ``type_``.
        """
        content = await self.bytes()
        try:
            if type_ is None:
                return json.loads(content)
            return TypeAdapter(type_).validate_json(content)
        except ValueError as e:
            raise DecodeError(f"error decoding response body: {e}") from e

    async def chunk(self) -> bytes | None:
        """Read the next chunk of the body, or None once it is exhausted."""
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()
        with _reading():
            return await anext(self._chunks, None)

    async def aclose(self) -> None:
        """Release the connection without reading the rest of the body."""
        await self._response.aclose()

    async def __aenter__(self) -> Response:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    # -------------------------------------------------------------------------
    # Status classification
    # -------------------------------------------------------------------------

    def error_for_status_ref(self) -> Response:
        """Raise :class:`StatusError` for a 4xx or 5xx status.

        Returns the response unchanged otherwise.
        """
        status = self.status
        if 400 <= status < 600:
            raise StatusError(status, self._reason())
        return self

    def error_for_status(self) -> Response:
        """Same check as :meth:`error_for_status_ref`, for chaining::

            response = (await builder.send()).error_for_status()
        """
        return self.error_for_status_ref()

    def _reason(self) -> str | None:
        reason = self._response.extensions.get("reason_phrase")
        if not reason:
            return None
        return reason.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"<Response [{self.status} {self.reason_phrase}] {self._url}>"
