"""Tests for request execution."""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

import unixhttp
from unixhttp import (
    Body,
    Client,
    ClientConfig,
    InvalidHeader,
    Request,
    RequestError,
    TransportError,
    UnixUrl,
)
from unixhttp.transport import SOCKET_PATH_EXTENSION


SOCKET = "/tmp/my.socket"
SOCKET_HEX = "2f746d702f6d792e736f636b6574"


def make_client(handler, **kwargs) -> Client:
    return Client(transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_execute_builds_wire_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, text="ok")

    client = make_client(handler)
    response = await (
        client.post(SOCKET, "/items?x=1#frag")
        .header("X-Trace", "abc")
        .body("payload")
        .send()
    )

    request = seen["request"]
    assert request.method == "POST"
    assert str(request.url) == f"http://{SOCKET_HEX}/items?x=1"
    assert request.headers["host"] == SOCKET_HEX
    assert request.headers["x-trace"] == "abc"
    assert request.headers["content-length"] == "7"
    assert request.content == b"payload"
    assert request.extensions[SOCKET_PATH_EXTENSION] == SOCKET
    assert request.extensions["http_version"] == "HTTP/1.1"

    assert response.status == 200
    assert response.url == UnixUrl.new(SOCKET, "/items?x=1#frag")
    assert await response.text() == "ok"


@pytest.mark.asyncio
async def test_execute_without_body_sends_empty_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(204)

    await make_client(handler).get(SOCKET, "/").send()
    assert seen["request"].content == b""
    assert "content-length" not in seen["request"].headers


@pytest.mark.asyncio
async def test_execute_keeps_repeated_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200)

    await (
        make_client(handler)
        .get(SOCKET, "/")
        .header("Accept", "text/plain")
        .header("Accept", "application/json")
        .send()
    )
    assert seen["request"].headers.get_list("accept") == ["text/plain", "application/json"]


@pytest.mark.asyncio
async def test_default_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200)

    await make_client(handler).get(SOCKET, "/").send()
    assert seen["request"].headers["user-agent"] == f"unixhttp/{unixhttp.__version__}"

    await make_client(handler).get(SOCKET, "/").header("User-Agent", "custom").send()
    assert seen["request"].headers.get_list("user-agent") == ["custom"]

    config = ClientConfig(user_agent=None)
    await make_client(handler, config=config).get(SOCKET, "/").send()
    assert "user-agent" not in seen["request"].headers


@pytest.mark.asyncio
async def test_execute_does_not_mutate_request():
    client = make_client(lambda request: httpx.Response(200))
    request = client.get(SOCKET, "/").build()
    await client.execute(request)
    assert "user-agent" not in request.headers
    assert request.extensions == {}


@pytest.mark.asyncio
async def test_execute_manual_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(201)

    request = Request("PUT", UnixUrl.new(SOCKET, "/manual"), body=Body(b"{}"))
    response = await make_client(handler).execute(request)
    assert response.status == 201
    assert seen["request"].method == "PUT"
    assert seen["request"].content == b"{}"


@pytest.mark.asyncio
async def test_error_status_is_not_raised_by_execute():
    client = make_client(lambda request: httpx.Response(500))
    response = await client.get(SOCKET, "/").send()
    assert response.status == 500


@pytest.mark.asyncio
async def test_send_raises_builder_error_without_dispatch():
    handler = AsyncMock()
    client = make_client(handler)
    with pytest.raises(InvalidHeader):
        await client.get(SOCKET, "/").header("bad name", "x").send()
    handler.assert_not_called()


@pytest.mark.asyncio
async def test_connect_error_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno 2] No such file or directory", request=request)

    with pytest.raises(TransportError) as exc_info:
        await make_client(handler).get(SOCKET, "/").send()

    err = exc_info.value
    assert err.is_transport()
    assert err.is_connect()
    assert not err.is_timeout()
    assert not err.is_builder()
    assert err.status is None
    assert isinstance(err.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_timeout_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError) as exc_info:
        await make_client(handler).get(SOCKET, "/").timeout(0.1).send()
    assert exc_info.value.is_timeout()
    assert not exc_info.value.is_connect()


@pytest.mark.asyncio
async def test_protocol_error_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.RemoteProtocolError("peer closed connection", request=request)

    with pytest.raises(TransportError):
        await make_client(handler).get(SOCKET, "/").send()


@pytest.mark.asyncio
async def test_client_context_manager_closes_transport():
    transport = AsyncMock(spec=httpx.AsyncBaseTransport)
    async with Client(transport=transport):
        pass
    transport.aclose.assert_awaited_once()


def test_per_method_shortcuts():
    client = Client()
    for name in ("get", "post", "put", "patch", "delete", "head"):
        request = getattr(client, name)(SOCKET, "/").build()
        assert request.method == name.upper()


def test_from_config(tmp_path):
    config_dir = tmp_path / ".config" / "unixhttp"
    config_dir.mkdir(parents=True)
    (config_dir / "unixhttp.conf").write_text(
        "[unixhttp]\ndefault_encoding = latin-1\nuser_agent = probe/1\n"
    )
    with patch("unixhttp.config.Path.exists", autospec=True) as exists:
        exists.side_effect = lambda path: str(path).startswith(str(tmp_path))
        client = Client.from_config(home_dir=str(tmp_path))
    assert client.config.default_encoding == "latin-1"
    assert client.config.user_agent == "probe/1"


@pytest.mark.asyncio
async def test_get_shortcut_reads_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="Hello"))
    real_client = Client

    with patch("unixhttp.client.Client", side_effect=lambda: real_client(transport=transport)):
        response = await unixhttp.get(SOCKET, "/health")

    assert await response.text() == "Hello"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, version",
    [
        ("GÉT", "HTTP/1.1"),
        ("BAD METHOD", "HTTP/1.1"),
        ("", "HTTP/1.1"),
        ("GET", "HTTP/9"),
    ],
)
async def test_execute_rejects_malformed_request(method, version):
    handler = AsyncMock()
    client = make_client(handler)
    request = Request(method, UnixUrl.new(SOCKET, "/"), version=version)

    with pytest.raises(RequestError) as exc_info:
        await client.execute(request)

    assert not exc_info.value.is_builder()
    assert not exc_info.value.is_transport()
    handler.assert_not_called()


@pytest.mark.asyncio
async def test_execute_rejects_wrong_body_type():
    handler = AsyncMock()
    request = Request("POST", UnixUrl.new(SOCKET, "/"), body=b"not a Body")
    with pytest.raises(RequestError):
        await make_client(handler).execute(request)
    handler.assert_not_called()


@pytest.mark.asyncio
async def test_execute_normalizes_manual_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200)

    request = Request("patch", UnixUrl.new(SOCKET, "/"), version="http/1.0")
    await make_client(handler).execute(request)
    assert seen["request"].method == "PATCH"
    assert seen["request"].extensions["http_version"] == "HTTP/1.0"
