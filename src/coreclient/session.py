r"""Implement the Core session and its generic request primitive.

A ``CoreSession`` owns exactly one ``httpx.Client`` guarded by a lock,
the retry policy, and the request-id attached to outgoing requests.
Every typed endpoint goes through ``CoreSession.request``.
"""

from __future__ import annotations

__all__ = ["CONTENT_TYPE", "REQUEST_ID_HEADER", "CoreSession"]

import logging
import uuid
from typing import TYPE_CHECKING, Any

import httpx

from coreclient.connection import ConnectionGuard
from coreclient.core.config import ClientConfig
from coreclient.exceptions import APIResponseError
from coreclient.retry.executor import RetryExecutor
from coreclient.utils.structured_logging import request_id_context

if TYPE_CHECKING:
    from collections.abc import Callable, Collection
    from types import TracebackType
    from typing import Self

REQUEST_ID_HEADER = "X-Request-ID"
CONTENT_TYPE = "application/json"

logger: logging.Logger = logging.getLogger(__name__)


class CoreSession:
    r"""Own the connection to Core and run requests through the retry
    pipeline.

    Requests are serialized: a logical request, including all its retry
    attempts, holds the connection lock until it completes.

    Args:
        config: The client configuration. Defaults to ``ClientConfig()``.
        client: Optional ``httpx.Client`` to use instead of creating one.
            A client passed in is not closed by ``close``.

    Example:
        ```pycon
        >>> from coreclient import ClientConfig, CoreSession
        >>> with CoreSession(ClientConfig(host="core", port=3000)) as session:  # doctest: +SKIP
        ...     response = session.get("/status")
        ...

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        transport = client or httpx.Client(timeout=self._config.timeout())
        self._guard = ConnectionGuard(transport, owns_transport=client is None)
        self._executor = RetryExecutor(self._config.retry_policy())
        self.request_id: str | None = self._config.request_id

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_url={self.base_url!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        r"""The client configuration."""
        return self._config

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def core_version(self) -> str:
        return self._config.core_version

    @property
    def is_closed(self) -> bool:
        return self._guard.is_closed

    def close(self) -> None:
        r"""Close the connection.

        Safe to call while another thread is in a request: it waits for
        that request to complete.
        """
        self._guard.close()

    def build_path(self, path: str) -> str:
        r"""Prefix ``path`` with the versioned API base path.

        Args:
            path: The endpoint path, e.g. ``"/status"``.

        Returns:
            The full request path.

        Example:
            ```pycon
            >>> from coreclient import CoreSession
            >>> CoreSession().build_path("/status/load")
            '/api/core/v1/status/load'

            ```
        """
        return f"{self._config.api_prefix}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        content: Any = None,
        json: Any = None,
        raises: bool = True,
        allow_status: Collection[int] = (),
        stream: bool = False,
    ) -> httpx.Response:
        r"""Send a request to Core with retries.

        Transport errors are retried. With ``raises=True``, a non-success
        response raises ``APIResponseError``, which is retried too, unless
        its status is in ``allow_status``.

        Args:
            method: The HTTP method.
            path: The endpoint path, relative to the versioned base path.
            params: Optional query parameters.
            headers: Optional extra headers. An ``X-Request-ID`` given here
                wins over the session request-id.
            content: Optional request body: ``str``, ``bytes`` or a binary
                file object. Seekable bodies are rewound before a retry.
            json: Optional value sent as the JSON body instead of ``content``.
            raises: If ``True``, non-success responses raise.
            allow_status: Non-success statuses returned to the caller
                instead of raising.
            stream: If ``True``, the response body is left unread for the
                caller to stream. The caller must close the response.

        Returns:
            The response.

        Raises:
            APIResponseError: If the response is not a success, ``raises``
                is ``True`` and the status is not allowed.
            httpx.TransportError: If the last attempt failed at the
                transport level.
        """
        method = method.upper()
        full_path = self.build_path(path)
        url = f"{self.base_url}{full_path}"
        error_path = f"{self.host}:{self.port}{full_path}"

        request_headers = httpx.Headers(headers)
        request_headers["Content-Type"] = CONTENT_TYPE
        if REQUEST_ID_HEADER not in request_headers:
            request_headers[REQUEST_ID_HEADER] = self.request_id or str(uuid.uuid4())
        request_id = request_headers[REQUEST_ID_HEADER]

        def attempt(transport: httpx.Client) -> httpx.Response:
            logger.debug(f"{method} {full_path}")
            request = transport.build_request(
                method,
                url,
                params=params,
                headers=request_headers,
                content=content,
                json=json,
            )
            response = transport.send(request, stream=stream)
            if response.is_success or not raises or response.status_code in allow_status:
                return response
            try:
                response.read()
            finally:
                response.close()
            raise APIResponseError.from_response(error_path, response)

        with request_id_context(request_id):
            return self._guard.with_connection(
                lambda transport: self._executor.execute(
                    lambda: attempt(transport),
                    method=method,
                    path=full_path,
                    rewind=_make_rewind(content),
                )
            )

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        r"""Send a GET request. See ``request`` for the arguments."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        r"""Send a POST request. See ``request`` for the arguments."""
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        r"""Send a PATCH request. See ``request`` for the arguments."""
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        r"""Send a DELETE request. See ``request`` for the arguments."""
        return self.request("DELETE", path, **kwargs)


def _make_rewind(content: Any) -> Callable[[], None] | None:
    seek = getattr(content, "seek", None)
    if seek is None:
        return None
    return lambda: seek(0)
