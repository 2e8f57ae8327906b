# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest configuration for unixhttp integration tests.

The ``server`` fixture runs a small HTTP/1.1 server on a real Unix socket
inside the test's event loop.
"""

from __future__ import annotations

import asyncio
import json
import shutil
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from unixhttp import Client


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ---------------------------------------------------------------------------
# Test server
# ---------------------------------------------------------------------------

REASONS = {200: "OK", 404: "Not Found", 500: "Internal Server Error"}


def http_response(
    status: int,
    body: bytes = b"",
    headers: list[tuple[str, str]] | None = None,
) -> bytes:
    lines = [f"HTTP/1.1 {status} {REASONS[status]}"]
    for name, value in headers or []:
        lines.append(f"{name}: {value}")
    lines.append(f"Content-Length: {len(body)}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1") + body


def chunked_response(chunks: list[bytes]) -> bytes:
    head = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nTransfer-Encoding: chunked\r\n\r\n"
    body = b"".join(b"%x\r\n%s\r\n" % (len(chunk), chunk) for chunk in chunks)
    return head + body + b"0\r\n\r\n"


async def route(method: str, target: str, headers: list[tuple[str, str]], body: bytes) -> bytes:
    path, _, query = target.partition("?")

    if path == "/text":
        return http_response(
            200, b"Hello, World!", [("Content-Type", "text/plain; charset=utf-8")]
        )
    if path == "/latin1":
        return http_response(
            200, "café".encode("latin-1"), [("Content-Type", "text/plain; charset=iso-8859-1")]
        )
    if path == "/echo":
        document = {
            "method": method,
            "path": path,
            "query": query,
            "headers": headers,
            "body": body.decode("utf-8", errors="replace"),
        }
        return http_response(
            200, json.dumps(document).encode(), [("Content-Type", "application/json")]
        )
    if path == "/cookies":
        return http_response(
            200,
            headers=[
                ("Set-Cookie", "session=abc123; Path=/; HttpOnly"),
                ("Set-Cookie", "theme=dark"),
            ],
        )
    if path == "/error":
        return http_response(500, b"boom")
    if path == "/chunked":
        return chunked_response([b"first,", b"second,", b"third"])
    if path == "/slow":
        await asyncio.sleep(1)
        return http_response(200, b"late")
    return http_response(404, b"not found")


async def handle_connection(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    try:
        while True:
            request_line = await reader.readline()
            if not request_line:
                break
            method, target, _version = request_line.decode("latin-1").split()

            headers: list[tuple[str, str]] = []
            while True:
                line = await reader.readline()
                if line in (b"\r\n", b"\n", b""):
                    break
                name, _, value = line.decode("latin-1").partition(":")
                headers.append((name.strip(), value.strip()))

            length = next(
                (int(value) for name, value in headers if name.lower() == "content-length"), 0
            )
            body = await reader.readexactly(length) if length else b""

            response = await route(method, target, headers, body)
            if method == "HEAD":
                response = response.partition(b"\r\n\r\n")[0] + b"\r\n\r\n"
            writer.write(response)
            await writer.drain()
    except (ConnectionError, asyncio.IncompleteReadError):
        pass
    finally:
        writer.close()


@pytest.fixture
def socket_path():
    """A socket path short enough for sun_path."""
    directory = Path(tempfile.mkdtemp(prefix="unixhttp-"))
    yield directory / "server.sock"
    shutil.rmtree(directory, ignore_errors=True)


@pytest_asyncio.fixture
async def server(socket_path):
    srv = await asyncio.start_unix_server(handle_connection, path=str(socket_path))
    yield socket_path
    srv.close()
    await srv.wait_closed()


@pytest_asyncio.fixture
async def client(server):
    async with Client() as c:
        yield c
