r"""Structured logging utilities for machine-readable log output.

The library only emits records through ``logging``. This module offers
an opt-in JSON formatter that adds the request-id of the request being
processed, so log lines can be joined with Core's own logs.

Example:
    ```python
    import logging
    from coreclient.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("coreclient")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "get_request_id",
    "request_id_context",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "coreclient_request_id", default=None
)

# Attributes every LogRecord has, which are not copied as extra fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


def get_request_id() -> str | None:
    """Get the request-id of the request being processed in this context.

    Returns:
        The request-id, or None outside of a request.

    Example:
        ```pycon
        >>> from coreclient.utils.structured_logging import get_request_id, request_id_context
        >>> get_request_id()
        >>> with request_id_context("req-123"):
        ...     get_request_id()
        ...
        'req-123'

        ```
    """
    return _request_id.get()


@contextmanager
def request_id_context(request_id: str) -> Generator[None, None, None]:
    """Bind a request-id to the current context.

    The previous value is restored on exit. The value is stored in a
    context variable, so concurrent threads do not see each other's ids.

    Args:
        request_id: The request-id to bind.
    """
    token = _request_id.set(request_id)
    try:
        yield
    finally:
        _request_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Standard fields in the JSON output:
        - timestamp: ISO 8601 timestamp
        - level: Log level name
        - logger: Logger name
        - message: Log message
        - request_id: The bound request-id, when set
        - exception: The formatted exception, when attached

    Fields added via the ``extra`` parameter of logging calls are
    included too. An explicit ``request_id`` extra wins over the bound
    one.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from coreclient.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("request sent", extra={"path": "/api/core/v1/status"})
        >>> '"path": "/api/core/v1/status"' in stream.getvalue()
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id is not None:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format the record timestamp as ISO 8601 with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )
