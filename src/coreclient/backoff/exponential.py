r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from coreclient.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: ``base_delay * (multiplier ** attempt)``, with
    an optional ``max_delay`` cap.

    Args:
        base_delay: The delay in seconds before the first retry.
        multiplier: The growth factor applied after every failed attempt.
            Must be >= 1.
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from coreclient.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> backoff.calculate(0)
        0.5
        >>> backoff.calculate(2)
        2.0
        >>> backoff = ExponentialBackoff(base_delay=1.0, multiplier=1.5)
        >>> backoff.calculate(2)
        2.25
        >>> ExponentialBackoff(base_delay=1.0, max_delay=5.0).calculate(10)
        5.0

        ```
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        multiplier: float = 2.0,
        max_delay: float | None = None,
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.multiplier = multiplier
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"multiplier={self.multiplier}, max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The index of the failed attempt (0-indexed).

        Returns:
            ``base_delay * (multiplier ** attempt)``, capped at
            ``max_delay`` if set.
        """
        delay = self.base_delay * (self.multiplier**attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
