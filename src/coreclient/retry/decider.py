r"""Retry decision logic.

This module provides the RetryDecider class that decides whether a
failed attempt should be retried. The decision only depends on the
kind of the error and on the number of attempts left.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

from coreclient.retry.kinds import DEFAULT_RETRY_ON, ErrorKind

if TYPE_CHECKING:
    from collections.abc import Iterable

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Args:
        max_attempts: The maximum number of attempts, including the
            first one.
        retry_on: The error kinds that are worth retrying.

    Example:
        ```pycon
        >>> from coreclient.retry import ErrorKind, RetryDecider
        >>> decider = RetryDecider(max_attempts=3)
        >>> decider.should_retry(ErrorKind.TRANSPORT, attempt=0)
        (True, 'transport')
        >>> decider.should_retry(ErrorKind.TRANSPORT, attempt=2)
        (False, 'max attempts exhausted')
        >>> decider.should_retry(ErrorKind.DRIVER_RAISED, attempt=0)
        (False, 'driver_raised is not retryable')

        ```
    """

    def __init__(
        self,
        max_attempts: int,
        retry_on: Iterable[ErrorKind] = DEFAULT_RETRY_ON,
    ) -> None:
        self.max_attempts = max_attempts
        self.retry_on = frozenset(retry_on)

    def is_retryable(self, kind: ErrorKind) -> bool:
        r"""Indicate if an error kind is retryable at all.

        Args:
            kind: The error kind.

        Returns:
            ``True`` if errors of this kind are retried.
        """
        return kind in self.retry_on

    def should_retry(self, kind: ErrorKind, attempt: int) -> tuple[bool, str]:
        """Determine if a failed attempt should be retried.

        Args:
            kind: The kind of the error raised by the attempt.
            attempt: The index of the failed attempt (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.is_retryable(kind):
            return (False, f"{kind.value} is not retryable")
        if attempt + 1 >= self.max_attempts:
            return (False, "max attempts exhausted")
        return (True, kind.value)
