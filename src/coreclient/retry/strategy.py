r"""Retry strategy for calculating backoff delays."""

from __future__ import annotations

__all__ = ["RetryStrategy"]

from typing import TYPE_CHECKING

from coreclient.backoff.exponential import ExponentialBackoff
from coreclient.utils.sleep import calculate_sleep_time

if TYPE_CHECKING:
    from coreclient.backoff.base import BaseBackoffStrategy


class RetryStrategy:
    """Strategy for calculating retry delays with backoff, cap and jitter.

    Args:
        backoff_strategy: Backoff strategy instance. Defaults to
            ``ExponentialBackoff()``.
        max_wait_time: Optional maximum delay in seconds.
        jitter_factor: Factor for adding random jitter to delays.
    """

    def __init__(
        self,
        backoff_strategy: BaseBackoffStrategy | None = None,
        max_wait_time: float | None = None,
        jitter_factor: float = 0.0,
    ) -> None:
        self.backoff_strategy: BaseBackoffStrategy = (
            backoff_strategy if backoff_strategy is not None else ExponentialBackoff()
        )
        self.max_wait_time = max_wait_time
        self.jitter_factor = jitter_factor

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay before next retry.

        Args:
            attempt: The index of the failed attempt (0-indexed).

        Returns:
            Sleep time in seconds.
        """
        return calculate_sleep_time(
            attempt=attempt,
            backoff_strategy=self.backoff_strategy,
            max_wait_time=self.max_wait_time,
            jitter_factor=self.jitter_factor,
        )
