r"""Classification of errors into the kinds the retry policy reasons
about."""

from __future__ import annotations

__all__ = ["DEFAULT_RETRY_ON", "ErrorKind", "classify_error"]

from enum import Enum

import httpx

from coreclient.exceptions import (
    APIResponseError,
    ClientError,
    DecodeError,
    DriverRaisedError,
    UnexpectedFailureError,
)


class ErrorKind(str, Enum):
    r"""Implement the kinds of failure a request can end with."""

    TRANSPORT = "transport"
    API_RESPONSE = "api_response"
    DRIVER_RAISED = "driver_raised"
    UNEXPECTED_STATUS = "unexpected_status"
    CLIENT = "client"
    DECODE = "decode"
    OTHER = "other"


# Only transient I/O failures and generic non-success responses are retried
DEFAULT_RETRY_ON = frozenset({ErrorKind.TRANSPORT, ErrorKind.API_RESPONSE})


def classify_error(error: BaseException) -> ErrorKind:
    r"""Return the kind of an error.

    Args:
        error: The error raised by a request attempt.

    Returns:
        The kind of the error.

    Example:
        ```pycon
        >>> import httpx
        >>> from coreclient.exceptions import APIResponseError
        >>> from coreclient.retry.kinds import classify_error
        >>> classify_error(httpx.ConnectError("refused"))
        <ErrorKind.TRANSPORT: 'transport'>
        >>> classify_error(APIResponseError(503, "unavailable"))
        <ErrorKind.API_RESPONSE: 'api_response'>
        >>> classify_error(ValueError("bad"))
        <ErrorKind.OTHER: 'other'>

        ```
    """
    # Subclasses are checked before ClientError
    if isinstance(error, APIResponseError):
        return ErrorKind.API_RESPONSE
    if isinstance(error, DriverRaisedError):
        return ErrorKind.DRIVER_RAISED
    if isinstance(error, UnexpectedFailureError):
        return ErrorKind.UNEXPECTED_STATUS
    if isinstance(error, ClientError):
        return ErrorKind.CLIENT
    if isinstance(error, DecodeError):
        return ErrorKind.DECODE
    if isinstance(error, (httpx.TransportError, OSError)):
        return ErrorKind.TRANSPORT
    return ErrorKind.OTHER
