r"""Configuration of the Core client."""

from __future__ import annotations

__all__ = [
    "BASE_PATH",
    "CORE_VERSION",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_HOST",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_WAIT_TIME",
    "DEFAULT_PORT",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_WRITE_TIMEOUT",
    "ClientConfig",
]

from coreclient.core.config import (
    BASE_PATH,
    CORE_VERSION,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_WAIT_TIME,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    ClientConfig,
)
