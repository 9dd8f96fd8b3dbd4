r"""Implement the guard serializing the use of the Core connection.

The underlying ``httpx.Client`` is not shared between concurrent logical
requests: every request/response cycle runs while holding the guard's
lock, so two callers never interleave on the same connection.
"""

from __future__ import annotations

__all__ = ["ConnectionGuard"]

import logging
import threading
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class ConnectionGuard:
    r"""Own a transport connection and serialize its use.

    Args:
        transport: The HTTP client to guard.
        owns_transport: If ``True``, ``close`` closes the transport.

    Example:
        ```pycon
        >>> import httpx
        >>> from coreclient.connection import ConnectionGuard
        >>> guard = ConnectionGuard(httpx.Client())
        >>> guard.with_connection(lambda client: client.is_closed)
        False
        >>> guard.close()
        >>> guard.is_closed
        True

        ```
    """

    def __init__(self, transport: httpx.Client, owns_transport: bool = True) -> None:
        self._transport = transport
        self._owns_transport = owns_transport
        self._lock = threading.Lock()
        self._closed = False

    @property
    def lock(self) -> threading.Lock:
        r"""The lock held during every request/response cycle."""
        return self._lock

    @property
    def is_closed(self) -> bool:
        r"""``True`` once ``close`` has been called."""
        return self._closed

    def with_connection(self, func: Callable[[httpx.Client], T]) -> T:
        r"""Call ``func`` with the transport while holding the lock.

        The lock is released on every exit path, including when ``func``
        raises.

        Args:
            func: The function to call with the transport.

        Returns:
            The value returned by ``func``.

        Raises:
            RuntimeError: If the guard is closed.
        """
        with self._lock:
            if self._closed:
                msg = "the Core connection is closed"
                raise RuntimeError(msg)
            return func(self._transport)

    def close(self) -> None:
        r"""Close the transport once the in-flight request, if any, is
        done.

        Calling ``close`` more than once is a no-op.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._owns_transport:
                logger.debug("closing Core connection")
                self._transport.close()
