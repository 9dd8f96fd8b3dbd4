r"""Define the exceptions raised when talking to Core.

The hierarchy separates remote failures (``ClientError`` and its
subclasses), which carry the transport status code and the service
declared response code, from ``DecodeError``, which is raised locally
when an otherwise successful payload has an unexpected shape.
"""

from __future__ import annotations

__all__ = [
    "RESPONSE_CODE_HEADER",
    "APIResponseError",
    "ClientError",
    "CoreError",
    "DecodeError",
    "DriverRaisedError",
    "UnexpectedFailureError",
    "parse_response_code",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

# Header carrying the service declared outcome of a request
RESPONSE_CODE_HEADER = "Response-Code"


def parse_response_code(response: httpx.Response, default: int) -> int:
    r"""Read the secondary status code of a response.

    Args:
        response: The response to inspect.
        default: The value to return if the header is missing or is not
            an integer.

    Returns:
        The integer value of the ``Response-Code`` header, or ``default``.

    Example:
        ```pycon
        >>> import httpx
        >>> from coreclient.exceptions import parse_response_code
        >>> parse_response_code(httpx.Response(200, headers={"Response-Code": "208"}), 200)
        208
        >>> parse_response_code(httpx.Response(200), 200)
        200

        ```
    """
    value = response.headers.get(RESPONSE_CODE_HEADER)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


class CoreError(Exception):
    r"""Base class of every error raised by ``coreclient``.

    Args:
        message: The human readable error message.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ClientError(CoreError):
    r"""Raised when Core answers a request with a failure.

    Args:
        status_code: The HTTP status code of the response.
        message: The error message.
        response_code: The service declared response code. Defaults to
            ``500``.
        remote_backtrace: The backtrace reported by the remote side, only
            present for errors raised by driver code.

    Example:
        ```pycon
        >>> from coreclient.exceptions import ClientError
        >>> error = ClientError(404, "not found", response_code=404)
        >>> error.status_code, error.response_code
        (404, 404)

        ```
    """

    def __init__(
        self,
        status_code: int,
        message: str = "",
        *,
        response_code: int = 500,
        remote_backtrace: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_code = response_code
        self.remote_backtrace = remote_backtrace

    @classmethod
    def from_response(cls, path: str, response: httpx.Response) -> ClientError:
        r"""Build an error from a response returned for ``path``.

        The response code is read from the ``Response-Code`` header. If
        the header is missing or not an integer, it is ``200`` for a
        successful response and the transport status code otherwise.

        Args:
            path: The request path, used in the message.
            response: The response. Its body must have been read.

        Returns:
            An instance of the class this method is called on.

        Example:
            ```pycon
            >>> import httpx
            >>> from coreclient.exceptions import ClientError
            >>> error = ClientError.from_response("/testing2", httpx.Response(500, text="error"))
            >>> error.message
            'request to /testing2 failed with error'
            >>> error.status_code, error.response_code
            (500, 500)

            ```
        """
        default = 200 if response.is_success else response.status_code
        body = response.text
        message = f"request to {path} failed with {body}" if body else f"request to {path} failed"
        return cls(
            response.status_code,
            message,
            response_code=parse_response_code(response, default),
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(status_code={self.status_code}, "
            f"response_code={self.response_code}, message={self.message!r})"
        )


class APIResponseError(ClientError):
    r"""Raised by the request layer for a non-success response when the
    caller asked for strict status checking."""


class DriverRaisedError(ClientError):
    r"""Raised when the driver code of a module raised an exception while
    executing a command."""


class UnexpectedFailureError(ClientError):
    r"""Raised when Core answers with a status code the calling operation
    does not understand."""


class DecodeError(CoreError):
    r"""Raised when a response body cannot be parsed into the expected
    shape.

    Args:
        message: The error message.
        body: The raw body that failed to parse.
    """

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body
