r"""Retry package: error classification, policy and executor.

Public API:
    - ErrorKind: The kinds of failure a request can end with
    - classify_error: Maps an exception to its ErrorKind
    - RetryPolicy: Configuration for retry behavior
    - RetryDecider: Logic for deciding whether to retry
    - RetryStrategy: Strategy for calculating retry delays
    - RetryExecutor: Synchronous retry executor
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_RETRY_ON",
    "ErrorKind",
    "RetryDecider",
    "RetryExecutor",
    "RetryPolicy",
    "RetryStrategy",
    "classify_error",
]

from coreclient.retry.config import RetryPolicy
from coreclient.retry.decider import RetryDecider
from coreclient.retry.executor import RetryExecutor
from coreclient.retry.kinds import DEFAULT_RETRY_ON, ErrorKind, classify_error
from coreclient.retry.strategy import RetryStrategy
