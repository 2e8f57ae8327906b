# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""unixhttp exceptions.

Every error raised by the library is a :class:`UnixHttpError`. The
predicate methods let callers branch on the kind of failure without
importing the concrete classes.
"""

from __future__ import annotations

import httpx


class UnixHttpError(Exception):
    """Base exception for unixhttp errors."""

    def is_builder(self) -> bool:
        """True if the request could not be built."""
        return isinstance(self, BuilderError)

    def is_status(self) -> bool:
        """True if raised by ``Response.error_for_status``."""
        return isinstance(self, StatusError)

    def is_transport(self) -> bool:
        """True if the socket transport failed."""
        return isinstance(self, TransportError)

    def is_connect(self) -> bool:
        """True if connecting to the socket failed."""
        return False

    def is_timeout(self) -> bool:
        """True if a caller-imposed deadline expired."""
        return False

    def is_decode(self) -> bool:
        """True if the response body could not be decoded."""
        return isinstance(self, DecodeError)

    @property
    def status(self) -> int | None:
        """The status code, if the error was generated from a response."""
        return None


class AddressParseError(UnixHttpError):
    """The socket path and relative path do not form a valid URL."""


class BuilderError(UnixHttpError):
    """A request builder step failed."""


class InvalidHeader(BuilderError):
    """A header name or value is not valid on the wire."""

    def __init__(self, message: str, name: str | bytes | None = None):
        super().__init__(message)
        self.name = name


class InvalidVersion(BuilderError):
    """The protocol version is not one we know about."""

    def __init__(self, version: object):
        self.version = version
        super().__init__(f"unsupported HTTP version: {version!r}")


class InvalidTimeout(BuilderError):
    """The timeout is not a non-negative number of seconds."""

    def __init__(self, timeout: object):
        self.timeout = timeout
        super().__init__(f"invalid timeout: {timeout!r}")


class SerializationError(BuilderError):
    """A query, form or JSON value could not be serialized."""

    def __init__(self, message: str, target: str):
        super().__init__(f"cannot serialize {target}: {message}")
        self.target = target


class RequestError(UnixHttpError):
    """The wire request could not be assembled."""


class TransportError(UnixHttpError):
    """The Unix socket transport failed to complete the exchange."""

    def __init__(self, error: httpx.TransportError):
        super().__init__(str(error) or type(error).__name__)
        self.error = error

    def is_connect(self) -> bool:
        return isinstance(self.error, httpx.ConnectError)

    def is_timeout(self) -> bool:
        return isinstance(self.error, httpx.TimeoutException)


class DecodeError(UnixHttpError):
    """The response body could not be decoded."""


class StatusError(UnixHttpError):
    """The server answered with a 4xx or 5xx status."""

    def __init__(self, code: int, reason: str | None = None):
        self.code = code
        self.reason = reason
        prefix = (
            "HTTP status client error"
            if 400 <= code < 500
            else "HTTP status server error"
        )
        phrase = reason or httpx.codes.get_reason_phrase(code)
        if phrase:
            super().__init__(f"{prefix} ({code} {phrase})")
        else:
            super().__init__(f"{prefix} ({code})")

    @property
    def status(self) -> int | None:
        return self.code
