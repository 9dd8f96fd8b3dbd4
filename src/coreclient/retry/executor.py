r"""Synchronous retry executor.

The executor repeatedly runs one request attempt until it succeeds, the
error is not retryable, or the attempt budget is spent. Whatever error
ends the loop is raised as-is; no synthetic "retries exhausted" error
is created.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING, TypeVar

from coreclient.callbacks import FailureInfo, RetryInfo
from coreclient.retry.config import RetryPolicy
from coreclient.retry.decider import RetryDecider
from coreclient.retry.kinds import ErrorKind, classify_error
from coreclient.retry.strategy import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Runs request attempts under a retry policy.

    Args:
        policy: The retry policy. Defaults to ``RetryPolicy()``.

    Attributes:
        policy: The retry policy.
        decider: Decides whether a failed attempt is retried.
        strategy: Computes the delay between attempts.

    Example:
        ```pycon
        >>> from coreclient.retry import RetryExecutor, RetryPolicy
        >>> executor = RetryExecutor(RetryPolicy(max_attempts=3))
        >>> executor.execute(lambda: "ok", method="GET", path="/api/core/v1/status")
        'ok'

        ```
    """

    def __init__(self, policy: RetryPolicy | None = None) -> None:
        self.policy = policy or RetryPolicy()
        self.decider = RetryDecider(
            max_attempts=self.policy.max_attempts,
            retry_on=self.policy.retry_on,
        )
        self.strategy = RetryStrategy(
            backoff_strategy=self.policy.backoff_strategy,
            max_wait_time=self.policy.max_wait_time,
            jitter_factor=self.policy.jitter_factor,
        )

    def execute(
        self,
        attempt_func: Callable[[], T],
        *,
        method: str,
        path: str,
        rewind: Callable[[], None] | None = None,
    ) -> T:
        """Run ``attempt_func`` until it succeeds or must give up.

        Args:
            attempt_func: The function performing one attempt.
            method: The HTTP method, for logs and callbacks.
            path: The request path, for logs and callbacks.
            rewind: Optional function resetting the request body before a
                retry, so every attempt sends the same bytes.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            Exception: The error of the last attempt, if it is not
                retryable or no attempt is left.
        """
        start_time = time.monotonic()
        attempt = 0
        while True:
            try:
                result = attempt_func()
            except Exception as exc:
                kind = classify_error(exc)
                should_retry, reason = self.decider.should_retry(kind, attempt)
                if not should_retry:
                    logger.debug(
                        f"{method} request to {path} failed on attempt "
                        f"{attempt + 1}/{self.policy.max_attempts}, not retrying ({reason})"
                    )
                    self._on_failure(exc, kind, method, path, attempt, start_time)
                    raise
                self._on_retry(exc, method, path, attempt, start_time, rewind)
                attempt += 1
                continue

            if attempt > 0:
                logger.debug(f"{method} request to {path} succeeded on attempt {attempt + 1}")
            return result

    def _on_retry(
        self,
        error: Exception,
        method: str,
        path: str,
        attempt: int,
        start_time: float,
        rewind: Callable[[], None] | None,
    ) -> None:
        wait_time = self.strategy.calculate_delay(attempt)
        logger.error(
            f"failed to request core: {method} {path} "
            f"(attempt {attempt + 1}/{self.policy.max_attempts})",
            exc_info=error,
            extra={"method": method, "path": path},
        )
        if rewind is not None:
            rewind()
        if self.policy.on_retry is not None:
            self.policy.on_retry(
                RetryInfo(
                    method=method,
                    path=path,
                    error=error,
                    attempt=attempt + 1,
                    elapsed=time.monotonic() - start_time,
                    wait_time=wait_time,
                )
            )
        time.sleep(wait_time)

    def _on_failure(
        self,
        error: Exception,
        kind: ErrorKind,
        method: str,
        path: str,
        attempt: int,
        start_time: float,
    ) -> None:
        if self.policy.on_failure is not None:
            self.policy.on_failure(
                FailureInfo(
                    method=method,
                    path=path,
                    error=error,
                    kind=kind,
                    attempts=attempt + 1,
                    total_time=time.monotonic() - start_time,
                )
            )
