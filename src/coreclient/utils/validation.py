r"""Parameter validation utilities for the client configuration."""

from __future__ import annotations

__all__ = ["validate_port", "validate_retry_params", "validate_timeout"]


def validate_timeout(name: str, timeout: float) -> None:
    """Validate a timeout parameter.

    Args:
        name: The parameter name, used in the error message.
        timeout: The timeout in seconds. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from coreclient.utils.validation import validate_timeout
        >>> validate_timeout("read_timeout", 300.0)
        >>> validate_timeout("read_timeout", 0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: read_timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_port(port: int) -> None:
    """Validate a TCP port number.

    Args:
        port: The port. Must be in ``[1, 65535]``.

    Raises:
        ValueError: If the port is out of range.
    """
    if not 1 <= port <= 65535:
        msg = f"port must be in [1, 65535], got {port}"
        raise ValueError(msg)


def validate_retry_params(
    max_attempts: int,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        max_attempts: Maximum number of attempts, including the first one.
            Must be >= 1.
        jitter_factor: Factor for adding random jitter to backoff delays.
            Must be >= 0.
        max_wait_time: Maximum backoff delay cap in seconds. Must be > 0
            if provided.

    Raises:
        ValueError: If a parameter is out of range.

    Example:
        ```pycon
        >>> from coreclient.utils.validation import validate_retry_params
        >>> validate_retry_params(max_attempts=10)
        >>> validate_retry_params(max_attempts=3, jitter_factor=0.1, max_wait_time=40.0)
        >>> validate_retry_params(max_attempts=0)  # doctest: +SKIP

        ```
    """
    if max_attempts < 1:
        msg = f"max_attempts must be >= 1, got {max_attempts}"
        raise ValueError(msg)
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise ValueError(msg)
    if max_wait_time is not None and max_wait_time <= 0:
        msg = f"max_wait_time must be > 0, got {max_wait_time}"
        raise ValueError(msg)
