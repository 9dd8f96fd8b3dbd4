r"""Implement the outcomes of the command execute channel.

Core answers an execute request with one of three outcomes, multiplexed
over the HTTP status code and the ``Response-Code`` header:

- ``200``: the method ran, the body is its JSON result
- ``203``: the driver raised, the body is ``{"error": ..., "backtrace": [...]}``
- anything else: an unexpected failure

``interpret_execute_response`` turns a response into one of the
``ExecuteSuccess``, ``RemoteException`` or ``UnexpectedStatus`` values,
and ``ExecuteOutcome.unwrap`` converts the failure variants into errors.
"""

from __future__ import annotations

__all__ = [
    "DRIVER_RAISED_STATUS",
    "ExecuteOutcome",
    "ExecuteSuccess",
    "RemoteException",
    "UnexpectedStatus",
    "build_execute_payload",
    "interpret_execute_response",
]

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel

from coreclient.decoder import decode_body
from coreclient.exceptions import (
    DecodeError,
    DriverRaisedError,
    UnexpectedFailureError,
    parse_response_code,
)

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)

EXECUTE_KEY = "__exec__"
# Status used by Core to report an exception raised by driver code
DRIVER_RAISED_STATUS = 203


class _RaisedPayload(BaseModel):
    error: str
    backtrace: list[str] | None = None


@dataclass(frozen=True)
class ExecuteSuccess:
    r"""The method ran and returned ``payload``.

    Attributes:
        payload: The raw JSON text returned by the method.
        response_code: The service declared response code.
    """

    payload: str
    response_code: int = 200

    def unwrap(self) -> tuple[str, int]:
        return self.payload, self.response_code


@dataclass(frozen=True)
class RemoteException:
    r"""The driver code raised while running the method.

    Attributes:
        message: The error reported by the driver.
        backtrace: The remote backtrace, if reported.
        response_code: The service declared response code.
        status_code: The HTTP status code.
    """

    message: str
    backtrace: list[str] | None = field(default=None)
    response_code: int = 500
    status_code: int = DRIVER_RAISED_STATUS

    def unwrap(self) -> tuple[str, int]:
        raise DriverRaisedError(
            self.status_code,
            f"module raised: {self.message}",
            response_code=self.response_code,
            remote_backtrace=self.backtrace,
        )


@dataclass(frozen=True)
class UnexpectedStatus:
    r"""Core answered with a status code the execute channel does not
    define.

    Attributes:
        status_code: The HTTP status code.
        body: The response body.
    """

    status_code: int
    body: str = ""

    def unwrap(self) -> tuple[str, int]:
        raise UnexpectedFailureError(
            self.status_code,
            f"unexpected response code {self.status_code}",
            response_code=self.status_code,
        )


ExecuteOutcome = Union[ExecuteSuccess, RemoteException, UnexpectedStatus]


def build_execute_payload(method: str, arguments: Any = None) -> str:
    r"""Build the JSON envelope of an execute request.

    Args:
        method: The name of the method to run on the module.
        arguments: The method arguments. Defaults to no arguments.

    Returns:
        The JSON document.

    Example:
        ```pycon
        >>> from coreclient.command import build_execute_payload
        >>> build_execute_payload("power", [True])
        '{"__exec__": "power", "power": [true]}'

        ```
    """
    if arguments is None:
        arguments = []
    return json.dumps({EXECUTE_KEY: method, method: arguments})


def interpret_execute_response(response: httpx.Response) -> ExecuteOutcome:
    r"""Map an execute response to its outcome.

    Args:
        response: The response of an execute request. Its body must have
            been read.

    Returns:
        The outcome.

    Raises:
        DecodeError: If a ``203`` body is not a valid exception report.

    Example:
        ```pycon
        >>> import httpx
        >>> from coreclient.command import interpret_execute_response
        >>> interpret_execute_response(httpx.Response(200, text="42"))
        ExecuteSuccess(payload='42', response_code=200)
        >>> interpret_execute_response(httpx.Response(502))
        UnexpectedStatus(status_code=502, body='')

        ```
    """
    if response.status_code == 200:
        return ExecuteSuccess(response.text, parse_response_code(response, 200))
    if response.status_code == DRIVER_RAISED_STATUS:
        response_code = parse_response_code(response, 500)
        try:
            info = decode_body(response.content, _RaisedPayload)
        except DecodeError as exc:
            message = (
                f"failed to parse exception response, response code {response_code}\n"
                f"{response.text}"
            )
            logger.error(message, exc_info=exc)
            raise DecodeError(message, body=response.text) from exc
        return RemoteException(
            message=info.error,
            backtrace=info.backtrace,
            response_code=response_code,
            status_code=response.status_code,
        )
    return UnexpectedStatus(response.status_code, response.text)
