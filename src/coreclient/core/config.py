r"""Configuration dataclass and defaults for the Core client.

The configuration is passed explicitly at construction time. The only
place environment variables are read is ``ClientConfig.from_env``.
"""

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

import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import httpx

from coreclient.backoff.exponential import ExponentialBackoff
from coreclient.retry.config import RetryPolicy
from coreclient.retry.kinds import DEFAULT_RETRY_ON, ErrorKind
from coreclient.utils.validation import validate_port, validate_retry_params, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from coreclient.backoff.base import BaseBackoffStrategy
    from coreclient.callbacks import FailureInfo, RetryInfo

# Every endpoint lives under BASE_PATH/<core version>
BASE_PATH = "/api/core"
CORE_VERSION = "v1"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3000

DEFAULT_MAX_ATTEMPTS = 10
# Cap on a single backoff delay, in seconds
DEFAULT_MAX_WAIT_TIME = 40.0

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 300.0
DEFAULT_WRITE_TIMEOUT = 60.0

# Fields resolved from ``uri`` in __post_init__
_ADDRESS_FIELDS = frozenset({"host", "port", "scheme"})


@dataclass
class ClientConfig:
    """Configuration of a Core client.

    Args:
        uri: Optional base URI of Core (e.g. ``"http://core:3000"``). Its
            scheme, host and port take precedence over ``scheme``,
            ``host`` and ``port``. A URI without port uses ``port``.
        host: The Core host name.
        port: The Core port.
        scheme: ``"http"`` or ``"https"``.
        request_id: Optional correlation token attached to every request.
            A random one is generated per request if ``None``.
        core_version: The API version segment of the base path.
        max_attempts: Maximum number of attempts per request. Must be >= 1.
        max_wait_time: Optional cap on a single backoff delay in seconds.
        backoff_strategy: The strategy computing backoff delays.
        jitter_factor: Factor for adding random jitter to backoff delays.
        retry_on: The error kinds that are retried.
        connect_timeout: Seconds to wait for a connection.
        read_timeout: Seconds to wait for response data.
        write_timeout: Seconds to wait while sending request data.
        on_retry: Optional callback invoked after each retried failure.
        on_failure: Optional callback invoked when an error is surfaced.

    Example:
        ```pycon
        >>> from coreclient import ClientConfig
        >>> config = ClientConfig(host="core.local", port=8080)
        >>> config.base_url
        'http://core.local:8080'
        >>> ClientConfig(uri="https://core.example.com").base_url
        'https://core.example.com:3000'
        >>> config.merge(max_attempts=3).max_attempts
        3

        ```
    """

    uri: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    scheme: str = "http"
    request_id: str | None = None
    core_version: str = CORE_VERSION
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_wait_time: float | None = DEFAULT_MAX_WAIT_TIME
    backoff_strategy: BaseBackoffStrategy = field(
        default_factory=lambda: ExponentialBackoff(base_delay=1.0, multiplier=1.5)
    )
    jitter_factor: float = 0.0
    retry_on: frozenset[ErrorKind] = DEFAULT_RETRY_ON
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    on_retry: Callable[[RetryInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        """Resolve the URI and validate the parameters.

        Raises:
            ValueError: If any parameter fails validation.
        """
        if self.uri is not None:
            url = urlsplit(self.uri)
            if url.scheme:
                self.scheme = url.scheme
            if url.hostname:
                self.host = url.hostname
            if url.port is not None:
                self.port = url.port
        if self.scheme not in {"http", "https"}:
            msg = f"scheme must be 'http' or 'https', got {self.scheme!r}"
            raise ValueError(msg)
        self.retry_on = frozenset(self.retry_on)
        validate_port(self.port)
        validate_retry_params(
            max_attempts=self.max_attempts,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )
        validate_timeout("connect_timeout", self.connect_timeout)
        validate_timeout("read_timeout", self.read_timeout)
        validate_timeout("write_timeout", self.write_timeout)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> ClientConfig:
        """Create a configuration from ``CORE_URI``, ``CORE_HOST`` and
        ``CORE_PORT``.

        Args:
            environ: The environment to read. Defaults to ``os.environ``.
            **overrides: Keyword arguments taking precedence over the
                environment. ``None`` values are ignored.

        Returns:
            The configuration.

        Example:
            ```pycon
            >>> from coreclient import ClientConfig
            >>> config = ClientConfig.from_env({"CORE_HOST": "core", "CORE_PORT": "4000"})
            >>> config.host, config.port
            ('core', 4000)

            ```
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if environ.get("CORE_URI"):
            values["uri"] = environ["CORE_URI"]
        if environ.get("CORE_HOST"):
            values["host"] = environ["CORE_HOST"]
        if environ.get("CORE_PORT"):
            values["port"] = int(environ["CORE_PORT"])
        return cls(**values).merge(**overrides)

    @property
    def base_url(self) -> str:
        r"""The scheme, host and port of Core."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def api_prefix(self) -> str:
        r"""The versioned path every endpoint is relative to."""
        return f"{BASE_PATH}/{self.core_version}"

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied. The instance is left
        unchanged. Overriding ``host``, ``port`` or ``scheme`` without a
        new ``uri`` drops the URI, so the override is not replaced by the
        URI values again.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        if "uri" not in filtered_overrides and filtered_overrides.keys() & _ADDRESS_FIELDS:
            filtered_overrides["uri"] = None
        return replace(self, **filtered_overrides)

    def retry_policy(self) -> RetryPolicy:
        r"""Return the retry policy described by this configuration."""
        return RetryPolicy(
            max_attempts=self.max_attempts,
            retry_on=self.retry_on,
            backoff_strategy=self.backoff_strategy,
            max_wait_time=self.max_wait_time,
            jitter_factor=self.jitter_factor,
            on_retry=self.on_retry,
            on_failure=self.on_failure,
        )

    def timeout(self) -> httpx.Timeout:
        r"""Return the ``httpx.Timeout`` of the connection."""
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
            pool=self.connect_timeout,
        )
