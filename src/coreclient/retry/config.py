r"""Configuration dataclass for retry behavior."""

from __future__ import annotations

__all__ = ["RetryPolicy"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from coreclient.backoff.exponential import ExponentialBackoff
from coreclient.retry.kinds import DEFAULT_RETRY_ON, ErrorKind
from coreclient.utils.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Callable

    from coreclient.backoff.base import BaseBackoffStrategy
    from coreclient.callbacks import FailureInfo, RetryInfo


@dataclass(frozen=True)
class RetryPolicy:
    """Read-only retry configuration shared by all the requests of a
    session.

    Attributes:
        max_attempts: Maximum number of attempts, including the first one.
        retry_on: The error kinds that are retried.
        backoff_strategy: The strategy computing the delay between attempts.
        max_wait_time: Optional cap on a single delay in seconds.
        jitter_factor: Factor for adding random jitter to delays.
        on_retry: Optional callback invoked after each retried failure.
        on_failure: Optional callback invoked when an error is surfaced.
    """

    max_attempts: int = 10
    retry_on: frozenset[ErrorKind] = DEFAULT_RETRY_ON
    backoff_strategy: BaseBackoffStrategy = field(
        default_factory=lambda: ExponentialBackoff(base_delay=1.0, multiplier=1.5)
    )
    max_wait_time: float | None = 40.0
    jitter_factor: float = 0.0
    on_retry: Callable[[RetryInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            max_attempts=self.max_attempts,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )
