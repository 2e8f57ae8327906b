# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Async HTTP client for servers listening on Unix domain sockets.

The socket path is hex-encoded into the host of a ``unix://`` URL, so
requests get a well-formed URL while the connection is made to the socket.
"""

__version__ = "0.1.0"

from .body import Body
from .client import Client, get
from .config import ClientConfig, load_config
from .exceptions import (
    AddressParseError,
    BuilderError,
    DecodeError,
    InvalidHeader,
    InvalidTimeout,
    InvalidVersion,
    RequestError,
    SerializationError,
    StatusError,
    TransportError,
    UnixHttpError,
)
from .headers import HeaderEntry, HeaderMap
from .request import Request, RequestBuilder
from .response import Response
from .transport import UnixSocketTransport
from .unix_url import UnixUrl, decode_socket_path, encode_socket_path

__all__ = [
    "AddressParseError",
    "Body",
    "BuilderError",
    "Client",
    "ClientConfig",
    "DecodeError",
    "HeaderEntry",
    "HeaderMap",
    "InvalidHeader",
    "InvalidTimeout",
    "InvalidVersion",
    "Request",
    "RequestBuilder",
    "RequestError",
    "Response",
    "SerializationError",
    "StatusError",
    "TransportError",
    "UnixHttpError",
    "UnixSocketTransport",
    "UnixUrl",
    "__version__",
    "decode_socket_path",
    "encode_socket_path",
    "get",
    "load_config",
]
