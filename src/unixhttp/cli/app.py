"""unixhttp CLI application.

Usage:
    unixhttp /var/run/app.sock /health
    unixhttp /var/run/app.sock /items -X POST --json '{"name": "widget"}'
"""

from __future__ import annotations

import asyncio
import functools
import json
import logging

import typer

from unixhttp import __version__
from unixhttp.cli.output import print_body, print_error, print_head
from unixhttp.client import Client
from unixhttp.config import load_config
from unixhttp.exceptions import UnixHttpError

app = typer.Typer(
    name="unixhttp",
    help="Send an HTTP request to a server listening on a Unix socket.",
    no_args_is_help=True,
)


def run_async(coro):
    """Run an async coroutine from sync typer commands."""
    return asyncio.run(coro)


def handle_errors(func):
    """Decorator to report client errors and exit non-zero."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except UnixHttpError as e:
            print_error(str(e))
            raise typer.Exit(1) from None
    return wrapper


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"unixhttp version {__version__}")
        raise typer.Exit()


def _split_pairs(values: list[str], sep: str, what: str) -> list[tuple[str, str]]:
    pairs = []
    for value in values:
        key, found, rest = value.partition(sep)
        if not found:
            raise typer.BadParameter(f"expected KEY{sep}VALUE, got {value!r}", param_hint=what)
        pairs.append((key.strip(), rest.strip() if sep == ":" else rest))
    return pairs


@app.command()
@handle_errors
def main(
    socket: str = typer.Argument(..., help="Path of the Unix socket"),
    path: str = typer.Argument("/", help="Request path, may include a query"),
    method: str | None = typer.Option(
        None, "--request", "-X", help="HTTP method (GET, or POST when a body is given)"
    ),
    header: list[str] = typer.Option([], "--header", "-H", help="Header as 'Name: value'"),
    query: list[str] = typer.Option([], "--query", "-q", help="Query parameter as key=value"),
    data: str | None = typer.Option(None, "--data", "-d", help="Raw request body"),
    json_data: str | None = typer.Option(None, "--json", help="JSON request body"),
    user: str | None = typer.Option(None, "--user", "-u", help="Basic auth as user[:password]"),
    bearer: str | None = typer.Option(None, "--bearer", help="Bearer token"),
    http_version: str | None = typer.Option(None, "--http-version", help="HTTP version to request"),
    max_time: float | None = typer.Option(None, "--max-time", "-m", help="Timeout in seconds"),
    include: bool = typer.Option(False, "--include", "-i", help="Show status line and headers"),
    fail: bool = typer.Option(False, "--fail", "-f", help="Exit non-zero on 4xx/5xx"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log request details"),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Send one request and print the response body."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    headers = _split_pairs(header, ":", "--header")
    params = _split_pairs(query, "=", "--query")
    if json_data is not None:
        try:
            json_value = json.loads(json_data)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--json") from None

    if method is None:
        method = "POST" if data is not None or json_data is not None else "GET"

    async def _send():
        async with Client(config=load_config()) as client:
            builder = client.request(method, socket, path).headers(headers).query(params)
            if user is not None:
                username, has_password, password = user.partition(":")
                builder = builder.basic_auth(username, password if has_password else None)
            if bearer is not None:
                builder = builder.bearer_auth(bearer)
            if json_data is not None:
                builder = builder.json(json_value)
            if data is not None:
                builder = builder.body(data)
            if http_version is not None:
                builder = builder.version(http_version)
            if max_time is not None:
                builder = builder.timeout(max_time)

            async with await builder.send() as response:
                if include:
                    print_head(response)
                if fail:
                    response.error_for_status()
                print_body(await response.text())

    run_async(_send())
