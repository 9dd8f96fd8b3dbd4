r"""Backoff strategies used to space out retried requests."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from coreclient.backoff.base import BaseBackoffStrategy
from coreclient.backoff.exponential import ExponentialBackoff
