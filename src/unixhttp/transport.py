# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""httpx transport that talks HTTP/1.1 over Unix domain sockets.

httpx's own ``AsyncHTTPTransport(uds=...)`` is bound to a single socket.
:class:`UnixSocketTransport` keeps one of those per socket path and picks
the right one from a request extension, so a single client can talk to
any number of sockets while each socket keeps its own connection pool.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

# Request extension carrying the filesystem path of the socket to dial.
SOCKET_PATH_EXTENSION = "unix_socket_path"

DEFAULT_LIMITS = httpx.Limits(max_connections=100, max_keepalive_connections=20)


class UnixSocketTransport(httpx.AsyncBaseTransport):
    """Dispatch requests to a pooled connection for their socket path."""

    def __init__(self, *, limits: httpx.Limits = DEFAULT_LIMITS):
        self._limits = limits
        self._pools: dict[str, httpx.AsyncHTTPTransport] = {}

    def _pool_for(self, socket_path: str) -> httpx.AsyncHTTPTransport:
        pool = self._pools.get(socket_path)
        if pool is None:
            logger.info("Opening connection pool for %s", socket_path)
            pool = httpx.AsyncHTTPTransport(uds=socket_path, limits=self._limits)
            self._pools[socket_path] = pool
        return pool

    @property
    def socket_paths(self) -> list[str]:
        """Sockets with an open connection pool."""
        return list(self._pools)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        socket_path = request.extensions.get(SOCKET_PATH_EXTENSION)
        if not socket_path:
            raise httpx.UnsupportedProtocol(
                "request does not name a Unix socket to connect to",
                request=request,
            )
        return await self._pool_for(socket_path).handle_async_request(request)

    async def aclose(self) -> None:
        pools, self._pools = self._pools, {}
        for socket_path, pool in pools.items():
            logger.info("Closing connection pool for %s", socket_path)
            await pool.aclose()
