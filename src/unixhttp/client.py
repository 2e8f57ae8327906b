# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Async HTTP client for servers listening on Unix sockets.

Usage:
    async with Client() as client:
        response = await client.get("/var/run/app.sock", "/health").send()
        print(await response.text())

A client keeps a connection pool per socket, so create one and reuse it
for many requests. It is safe to share between concurrent tasks.
"""

from __future__ import annotations

import logging

import httpx

from .config import ClientConfig, load_config
from .exceptions import RequestError, TransportError, UnixHttpError
from .request import Request, RequestBuilder, normalize_method, normalize_version
from .response import Response
from .transport import SOCKET_PATH_EXTENSION, UnixSocketTransport
from .unix_url import SocketPath, UnixUrl

logger = logging.getLogger(__name__)

# Request extension carrying the protocol version requested by the caller.
VERSION_EXTENSION = "http_version"


class Client:
    """Builds and executes requests over Unix sockets."""

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        config: ClientConfig | None = None,
    ):
        self._config = config or ClientConfig()
        self._transport = transport or UnixSocketTransport(limits=self._config.limits())

    @classmethod
    def from_config(cls, home_dir: str | None = None) -> Client:
        """Create a client using the layered configuration files."""
        return cls(config=load_config(home_dir=home_dir))

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def aclose(self) -> None:
        """Close every pooled connection."""
        await self._transport.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    # -------------------------------------------------------------------------
    # Request builders
    # -------------------------------------------------------------------------

    def request(self, method: str, socket: SocketPath, path: str) -> RequestBuilder:
        """Start building a request for ``path`` on the server at ``socket``.

        Invalid input does not raise here: the builder starts out failed
        and the error is raised by ``build()`` or ``send()``.
        """
        try:
            request: Request | UnixHttpError = Request(
                normalize_method(method), UnixUrl.new(socket, path)
            )
        except UnixHttpError as e:
            logger.debug("Cannot address %r on %r: %s", path, socket, e)
            request = e
        return RequestBuilder(self, request)

    def get(self, socket: SocketPath, path: str) -> RequestBuilder:
        return self.request("GET", socket, path)

    def post(self, socket: SocketPath, path: str) -> RequestBuilder:
        return self.request("POST", socket, path)

    def put(self, socket: SocketPath, path: str) -> RequestBuilder:
        return self.request("PUT", socket, path)

    def patch(self, socket: SocketPath, path: str) -> RequestBuilder:
        return self.request("PATCH", socket, path)

    def delete(self, socket: SocketPath, path: str) -> RequestBuilder:
        return self.request("DELETE", socket, path)

    def head(self, socket: SocketPath, path: str) -> RequestBuilder:
        return self.request("HEAD", socket, path)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _wire_request(self, request: Request) -> httpx.Request:
        # Requests built by hand never went through the builder's checks.
        try:
            method = normalize_method(request.method)
            version = normalize_version(request.version)

            headers = request.headers.copy()
            if self._config.user_agent and "user-agent" not in headers:
                headers.append("User-Agent", self._config.user_agent)

            extensions = dict(request.extensions)
            extensions[SOCKET_PATH_EXTENSION] = request.url.socket_path
            extensions[VERSION_EXTENSION] = version

            body = request.body.bytes if request.body is not None else b""
            return httpx.Request(
                method,
                request.url.to_wire_url(),
                headers=headers.raw(),
                content=body,
                extensions=extensions,
            )
        except (
            UnixHttpError,
            TypeError,
            ValueError,
            AttributeError,
            httpx.InvalidURL,
        ) as e:
            raise RequestError(f"cannot assemble request: {e}") from e

    async def execute(self, request: Request) -> Response:
        """Send a request and return the response once its headers arrive.

        The body is not read; use the ``Response`` helpers for that. Error
        statuses are returned like any other response, see
        ``Response.error_for_status``.

        Raises:
            RequestError: The request could not be turned into a wire message.
            TransportError: Connecting, sending or receiving failed.
        """
        wire = self._wire_request(request)
        logger.debug(
            "Sending %s %s via %s headers=%r",
            wire.method,
            request.url,
            request.url.socket_path,
            request.headers,
        )
        try:
            response = await self._transport.handle_async_request(wire)
        except httpx.TransportError as e:
            logger.debug("Request to %s failed: %s", request.url.socket_path, e)
            raise TransportError(e) from e

        response.request = wire
        logger.debug("Received %s for %s %s", response.status_code, request.method, request.url)
        return Response(response, request.url, default_encoding=self._config.default_encoding)


async def get(socket: SocketPath, path: str) -> Response:
    """Send a single GET request with a throwaway client.

    The body is read before the client is closed, so the body helpers on
    the returned response work as usual. Create a :class:`Client` when
    sending more than one request.
    """
    async with Client() as client:
        response = await client.get(socket, path).send()
        await response.bytes()
        return response
