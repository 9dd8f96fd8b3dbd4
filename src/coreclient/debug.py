r"""Implement the debug stream of a module.

The debug stream is a websocket forwarding the output of a running
module. It uses its own connection: it is not serialized against the
session lock and is never retried.
"""

from __future__ import annotations

__all__ = ["DebugStream", "StreamEnd"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from websockets.exceptions import ConnectionClosed, ConnectionClosedOK
from websockets.sync.client import connect

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from websockets.sync.client import ClientConnection

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamEnd:
    r"""Describe how a debug stream ended.

    Attributes:
        code: The websocket close code, if a close frame was received.
        reason: The close reason, if any.
        error: The error that broke the stream, or ``None`` if it was
            closed cleanly.
        lines: The number of lines received.
    """

    code: int | None = None
    reason: str = ""
    error: BaseException | None = None
    lines: int = 0

    @property
    def clean(self) -> bool:
        r"""``True`` if the stream was closed without error."""
        return self.error is None


class DebugStream:
    r"""Receive the output of one module line by line.

    Args:
        url: The websocket URL of the module debugger.
        headers: Headers sent with the opening handshake.
        open_timeout: Seconds to wait for the handshake.

    Example:
        ```pycon
        >>> from coreclient.debug import DebugStream
        >>> stream = DebugStream("ws://localhost:3000/api/core/v1/command/mod-1/debugger")
        >>> stream.on_message(print)
        >>> end = stream.run()  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        open_timeout: float | None = 10.0,
    ) -> None:
        self.url = url
        self.headers = dict(headers or {})
        self.open_timeout = open_timeout
        self._callback: Callable[[str], None] | None = None
        self._connection: ClientConnection | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(url={self.url!r})"

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def on_message(self, callback: Callable[[str], None]) -> None:
        r"""Register the function called with every received line.

        A later registration replaces the previous one.

        Args:
            callback: The function to call.
        """
        self._callback = callback

    def open(self) -> None:
        r"""Open the websocket if it is not open yet.

        Raises:
            OSError: If the connection cannot be established.
            websockets.exceptions.InvalidHandshake: If Core rejects the
                handshake.
        """
        if self._connection is not None:
            return
        logger.debug(f"opening debug stream {self.url}")
        self._connection = connect(
            self.url,
            additional_headers=self.headers,
            open_timeout=self.open_timeout,
        )

    def close(self) -> None:
        r"""Close the websocket. ``run`` returns once the close completes."""
        if self._connection is not None:
            self._connection.close()

    def run(self) -> StreamEnd:
        r"""Forward incoming lines to the callback until the stream ends.

        The stream is opened first if needed. A remote close, a local
        close or a transport error all end the loop.

        Returns:
            How the stream ended.
        """
        self.open()
        connection = self._connection
        lines = 0
        while True:
            try:
                message = connection.recv()
            except ConnectionClosed as exc:
                frame = exc.rcvd or exc.sent
                end = StreamEnd(
                    code=frame.code if frame is not None else None,
                    reason=frame.reason if frame is not None else "",
                    error=None if isinstance(exc, ConnectionClosedOK) else exc,
                    lines=lines,
                )
                break
            except OSError as exc:
                end = StreamEnd(error=exc, lines=lines)
                break

            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            lines += 1
            if self._callback is not None:
                self._callback(message)

        logger.debug(f"debug stream {self.url} ended after {lines} lines (clean={end.clean})")
        return end
