# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""unixhttp client configuration.

Configuration is opt-in (``Client.from_config()`` and the CLI) and uses
systemd-style layered precedence:

1. ~/.config/unixhttp/unixhttp.conf  (user overrides - highest priority)
2. /etc/unixhttp/unixhttp.conf       (admin/system overrides)
3. /usr/lib/unixhttp/unixhttp.conf   (package defaults - lowest priority)

Configuration options, all in the ``[unixhttp]`` section:
- default_encoding: Charset for response text when Content-Type has none
- user_agent: User-Agent sent when a request does not set one (empty to disable)
- max_connections: Connection limit per socket
- max_keepalive_connections: Idle connections kept per socket
- keepalive_expiry: Seconds an idle connection is kept
"""

from __future__ import annotations

import configparser
import logging
import os
from pathlib import Path
from typing import NamedTuple

import httpx

from . import __version__

logger = logging.getLogger(__name__)

SECTION = "unixhttp"

# Default values (used if no config files exist)
DEFAULT_ENCODING = "utf-8"
DEFAULT_USER_AGENT = f"unixhttp/{__version__}"
DEFAULT_MAX_CONNECTIONS = 100
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 20
DEFAULT_KEEPALIVE_EXPIRY = 5.0


class ClientConfig(NamedTuple):
    """Settings shared by every request of a client."""

    default_encoding: str = DEFAULT_ENCODING
    user_agent: str | None = DEFAULT_USER_AGENT
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE_CONNECTIONS
    keepalive_expiry: float = DEFAULT_KEEPALIVE_EXPIRY

    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
            keepalive_expiry=self.keepalive_expiry,
        )


def get_config_paths(home_dir: str | None = None) -> list[Path]:
    """Get all config file paths in priority order (highest first).

    Args:
        home_dir: Home directory to use for user config. If None, uses current user's.

    Returns:
        List of paths to check, highest priority first.
    """
    paths: list[Path] = []

    if home_dir:
        paths.append(Path(home_dir) / ".config" / "unixhttp" / "unixhttp.conf")
    else:
        config_home = os.environ.get("XDG_CONFIG_HOME", "")
        if not config_home:
            config_home = os.path.expanduser("~/.config")
        paths.append(Path(config_home) / "unixhttp" / "unixhttp.conf")

    paths.append(Path("/etc/unixhttp/unixhttp.conf"))
    paths.append(Path("/usr/lib/unixhttp/unixhttp.conf"))

    return paths


def load_config(home_dir: str | None = None) -> ClientConfig:
    """Load configuration from all config paths, merging with precedence.

    Reads config files from lowest to highest priority, with higher
    priority values overriding lower ones. Malformed files are skipped, as
    are individual values that fail to parse.
    """
    values = ClientConfig()._asdict()
    getters = {
        "default_encoding": configparser.ConfigParser.get,
        "user_agent": configparser.ConfigParser.get,
        "max_connections": configparser.ConfigParser.getint,
        "max_keepalive_connections": configparser.ConfigParser.getint,
        "keepalive_expiry": configparser.ConfigParser.getfloat,
    }

    for config_path in reversed(get_config_paths(home_dir=home_dir)):
        if not config_path.exists():
            continue

        parser = configparser.ConfigParser()
        try:
            parser.read(config_path)
        except configparser.Error:
            logger.warning("Ignoring malformed config file %s", config_path)
            continue

        if not parser.has_section(SECTION):
            continue
        for key, getter in getters.items():
            if not parser.has_option(SECTION, key):
                continue
            try:
                values[key] = getter(parser, SECTION, key)
            except ValueError:
                logger.warning("Ignoring invalid %s in %s", key, config_path)

    if values["user_agent"] == "":
        values["user_agent"] = None
    return ClientConfig(**values)
