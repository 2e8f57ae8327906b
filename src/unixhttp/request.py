# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Requests and the fluent request builder.

A :class:`RequestBuilder` never raises while a chain is being built. The
first failing step latches its error, every later step becomes a no-op,
and the error is raised by :meth:`RequestBuilder.build` or
:meth:`RequestBuilder.send`:

    builder = client.post("/run/app.sock", "/items").header("X-Id", "1")
    response = await builder.json({"name": "widget"}).send()
"""

from __future__ import annotations

import base64
import logging
import numbers
import re
from copy import deepcopy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from .body import Body, BodyLike
from .exceptions import (
    BuilderError,
    InvalidTimeout,
    InvalidVersion,
    SerializationError,
    UnixHttpError,
)
from .headers import HeaderMap, HeaderSource, HeaderValue
from .serialize import to_json, to_pairs, urlencode
from .unix_url import UnixUrl

if TYPE_CHECKING:
    from .client import Client
    from .response import Response

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "HTTP/1.1"

_VERSIONS = {
    "HTTP/0.9": "HTTP/0.9",
    "HTTP/1.0": "HTTP/1.0",
    "HTTP/1.1": "HTTP/1.1",
    "HTTP/2": "HTTP/2",
    "HTTP/2.0": "HTTP/2",
    "HTTP/3": "HTTP/3",
    "HTTP/3.0": "HTTP/3",
}

_METHOD = re.compile(r"[-!#$%&'*+.^_`|~0-9a-zA-Z]+")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def normalize_version(version: str) -> str:
    """Canonical spelling of an HTTP version string."""
    try:
        return _VERSIONS[version.upper()]
    except (KeyError, AttributeError):
        raise InvalidVersion(version) from None


def normalize_method(method: str) -> str:
    if not isinstance(method, str) or not _METHOD.fullmatch(method):
        raise BuilderError(f"invalid HTTP method: {method!r}")
    return method.upper()


@dataclass
class Request:
    """A request which can be executed with ``Client.execute()``.

    Every field may be changed until the request is executed.
    """

    method: str
    url: UnixUrl
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: Body | None = None
    version: str = DEFAULT_VERSION
    extensions: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> Request:
        """Deep copy; the immutable body is shared."""
        return Request(
            method=self.method,
            url=self.url.copy(),
            headers=self.headers.copy(),
            body=self.body,
            version=self.version,
            extensions=deepcopy(self.extensions),
        )


class RequestBuilder:
    """Accumulates the properties of a :class:`Request`.

    Obtain one from :meth:`Client.request` or the per-method shortcuts.
    """

    def __init__(self, client: Client, request: Request | UnixHttpError):
        self._client = client
        self._pending = request

    @classmethod
    def from_parts(cls, client: Client, request: Request) -> RequestBuilder:
        """Reassemble a builder from a client and an existing request."""
        return cls(client, request)

    @property
    def client(self) -> Client:
        return self._client

    @property
    def error(self) -> UnixHttpError | None:
        """The latched error, if a step has failed."""
        if isinstance(self._pending, UnixHttpError):
            return self._pending
        return None

    def _request(self) -> Request | None:
        if isinstance(self._pending, Request):
            return self._pending
        return None

    def _latch(self, error: UnixHttpError) -> None:
        logger.debug("Request builder failed: %s", error)
        self._pending = error

    # -------------------------------------------------------------------------
    # Headers
    # -------------------------------------------------------------------------

    def header(
        self, key: str, value: HeaderValue, *, sensitive: bool = False
    ) -> RequestBuilder:
        """Append a header; existing values for ``key`` are kept."""
        req = self._request()
        if req is not None:
            try:
                req.headers.append(key, value, sensitive=sensitive)
            except BuilderError as e:
                self._latch(e)
        return self

    def sensitive_header(self, key: str, value: HeaderValue) -> RequestBuilder:
        """Append a header whose value is hidden from debug output."""
        return self.header(key, value, sensitive=True)

    def headers(self, headers: HeaderSource) -> RequestBuilder:
        """Merge a header collection into the request.

        The first occurrence of a name replaces what is already set, later
        occurrences of that name are appended.
        """
        req = self._request()
        if req is not None:
            try:
                req.headers.merge(headers)
            except BuilderError as e:
                self._latch(e)
        return self

    def _set_header(self, key: str, value: str, *, sensitive: bool = False) -> None:
        req = self._request()
        if req is not None:
            try:
                req.headers.insert(key, value, sensitive=sensitive)
            except BuilderError as e:
                self._latch(e)

    def basic_auth(self, username: object, password: object | None = None) -> RequestBuilder:
        """Enable HTTP basic authentication."""
        if password is None:
            credentials = f"{username}"
        else:
            credentials = f"{username}:{password}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        self._set_header("Authorization", f"Basic {encoded}", sensitive=True)
        return self

    def bearer_auth(self, token: object) -> RequestBuilder:
        """Enable HTTP bearer authentication."""
        self._set_header("Authorization", f"Bearer {token}", sensitive=True)
        return self

    # -------------------------------------------------------------------------
    # Body, query and protocol
    # -------------------------------------------------------------------------

    def body(self, body: BodyLike) -> RequestBuilder:
        """Replace the request body."""
        req = self._request()
        if req is not None:
            try:
                req.body = Body(body)
            except TypeError as e:
                self._latch(SerializationError(str(e), "body"))
        return self

    def query(self, params: Any) -> RequestBuilder:
        """Serialize ``params`` and append them to the URL query.

        Repeated calls accumulate. Accepts mappings, sequences of pairs,
        dataclasses and pydantic models.
        """
        req = self._request()
        if req is None:
            return self
        try:
            req.url.extend_query_pairs(to_pairs(params, "query"))
            if req.url.query == "":
                req.url.set_query(None)
        except UnixHttpError as e:
            self._latch(e)
        return self

    def version(self, version: str) -> RequestBuilder:
        """Set the HTTP version (``"HTTP/1.1"`` by default)."""
        req = self._request()
        if req is not None:
            try:
                req.version = normalize_version(version)
            except InvalidVersion as e:
                self._latch(e)
        return self

    def timeout(self, seconds: float | None) -> RequestBuilder:
        """Give up on the request after ``seconds`` (connect, read and write).

        There is no timeout unless one is set here; ``None`` disables it.
        Anything but a non-negative number latches :class:`InvalidTimeout`.
        """
        req = self._request()
        if req is None:
            return self
        if seconds is not None and (
            isinstance(seconds, bool)
            or not isinstance(seconds, numbers.Real)
            or not seconds >= 0
        ):
            self._latch(InvalidTimeout(seconds))
            return self
        if seconds is not None:
            seconds = float(seconds)
        req.extensions["timeout"] = httpx.Timeout(seconds).as_dict()
        return self

    def form(self, form: Any) -> RequestBuilder:
        """Send ``form`` as an url-encoded body."""
        req = self._request()
        if req is not None:
            try:
                encoded = urlencode(form, "form")
            except SerializationError as e:
                self._latch(e)
                return self
            req.headers.insert("Content-Type", FORM_CONTENT_TYPE)
            req.body = Body(encoded.encode("ascii"))
        return self

    def json(self, json: Any) -> RequestBuilder:
        """Send ``json`` as a JSON body.

        Anything pydantic can serialize is accepted: models, dataclasses,
        plain containers, datetimes, UUIDs.
        """
        req = self._request()
        if req is not None:
            try:
                encoded = to_json(json)
            except SerializationError as e:
                self._latch(e)
                return self
            req.headers.insert("Content-Type", JSON_CONTENT_TYPE)
            req.body = Body(encoded)
        return self

    # -------------------------------------------------------------------------
    # Terminal operations
    # -------------------------------------------------------------------------

    def build(self) -> Request:
        """Return the finished request.

        Raises:
            UnixHttpError: The first error latched while building.
        """
        if isinstance(self._pending, UnixHttpError):
            raise self._pending
        return self._pending

    def build_split(self) -> tuple[Client, Request | UnixHttpError]:
        """Return the client and the request (or latched error) without raising."""
        return self._client, self._pending

    async def send(self) -> Response:
        """Build the request and execute it."""
        return await self._client.execute(self.build())

    def try_clone(self) -> RequestBuilder | None:
        """Copy the builder, or None if it has already failed."""
        req = self._request()
        if req is None:
            return None
        return RequestBuilder(self._client, req.copy())

    def __repr__(self) -> str:
        return f"RequestBuilder({self._pending!r})"
