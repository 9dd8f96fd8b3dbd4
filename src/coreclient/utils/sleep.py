r"""Backoff delay calculation utilities.

This module provides the function computing how long to wait between
two attempts of a request.
"""

from __future__ import annotations

__all__ = ["calculate_sleep_time"]

import logging
import random
from typing import TYPE_CHECKING

from coreclient.backoff.exponential import ExponentialBackoff

if TYPE_CHECKING:
    from coreclient.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    backoff_strategy: BaseBackoffStrategy | None = None,
    max_wait_time: float | None = None,
    jitter_factor: float = 0.0,
) -> float:
    """Calculate the delay before the next attempt.

    The sleep time is calculated as follows:
    1. ``backoff_strategy.calculate(attempt)``
    2. Capped at ``max_wait_time`` if set
    3. Increased by ``random.uniform(0, jitter_factor) * sleep_time`` if
       ``jitter_factor > 0``

    Args:
        attempt: The index of the failed attempt (0-indexed).
        backoff_strategy: The backoff strategy. Defaults to
            ``ExponentialBackoff()``.
        max_wait_time: Optional maximum delay in seconds, applied before
            the jitter.
        jitter_factor: Factor for adding random jitter. Set to 0 to
            disable jitter.

    Returns:
        The delay in seconds.

    Example:
        ```pycon
        >>> from coreclient.backoff import ExponentialBackoff
        >>> from coreclient.utils.sleep import calculate_sleep_time
        >>> calculate_sleep_time(attempt=0)
        1.0
        >>> calculate_sleep_time(attempt=3, backoff_strategy=ExponentialBackoff(base_delay=0.3))
        2.4
        >>> calculate_sleep_time(attempt=10, max_wait_time=40.0)
        40.0

        ```
    """
    if backoff_strategy is None:
        backoff_strategy = ExponentialBackoff()
    sleep_time = backoff_strategy.calculate(attempt)

    if max_wait_time is not None and sleep_time > max_wait_time:
        logger.debug(f"Capping sleep time from {sleep_time:.2f}s to {max_wait_time:.2f}s")
        sleep_time = max_wait_time

    if jitter_factor > 0:
        jitter = random.uniform(0, jitter_factor) * sleep_time  # noqa: S311
        logger.debug(
            f"Waiting {sleep_time + jitter:.2f}s before retry "
            f"(base={sleep_time:.2f}s, jitter={jitter:.2f}s)"
        )
        return sleep_time + jitter

    logger.debug(f"Waiting {sleep_time:.2f}s before retry")
    return sleep_time
