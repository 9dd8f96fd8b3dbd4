r"""Callback payloads for observing the retry lifecycle.

Two hooks are available on ``ClientConfig``:
- on_retry: Called after a failed attempt, before the backoff delay
- on_failure: Called once when an error is surfaced to the caller

Example:
    ```pycon
    >>> from coreclient import ClientConfig
    >>> from coreclient.callbacks import RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"attempt {info.attempt} failed, waiting {info.wait_time}s")
    ...
    >>> config = ClientConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RetryInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coreclient.retry.kinds import ErrorKind


@dataclass
class RetryInfo:
    """Information passed to the on_retry callback.

    Attributes:
        method: The HTTP method (e.g., "GET", "POST").
        path: The request path.
        error: The error raised by the failed attempt.
        attempt: The failed attempt number (1-indexed).
        elapsed: The seconds elapsed since the first attempt started.
        wait_time: The seconds to wait before the next attempt.
    """

    method: str
    path: str
    error: BaseException
    attempt: int
    elapsed: float
    wait_time: float


@dataclass
class FailureInfo:
    """Information passed to the on_failure callback.

    Attributes:
        method: The HTTP method (e.g., "GET", "POST").
        path: The request path.
        error: The error surfaced to the caller.
        kind: The kind of the error.
        attempts: The number of attempts made.
        total_time: Total time spent on all attempts including backoff (seconds).
    """

    method: str
    path: str
    error: BaseException
    kind: ErrorKind
    attempts: int
    total_time: float
