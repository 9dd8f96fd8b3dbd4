r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps the index of a failed attempt to the number
    of seconds to wait before the next one.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay after a failed attempt.

        Args:
            attempt: The index of the failed attempt (0-indexed). For
                example, ``attempt=0`` is the delay before the first retry.

        Returns:
            The delay in seconds.
        """
