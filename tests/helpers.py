r"""Shared test helpers for the Core client tests.

The helpers build clients whose connection is an ``httpx.MockTransport``
so the full request pipeline runs without network access.
"""

from __future__ import annotations

__all__ = [
    "BASE_URL",
    "RecordingHandler",
    "json_response",
    "make_client",
]

import json
from typing import TYPE_CHECKING, Any

import httpx

from coreclient import ClientConfig, CoreClient
from coreclient.backoff import ExponentialBackoff

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

BASE_URL = "http://localhost:3000"


def json_response(data: Any, status_code: int = 200, **kwargs: Any) -> httpx.Response:
    r"""Create a response with a JSON body."""
    return httpx.Response(status_code, content=json.dumps(data), **kwargs)


class RecordingHandler:
    r"""MockTransport handler replaying responses and recording requests.

    Args:
        responses: The responses or exceptions to return in sequence. The
            last one is repeated once the sequence is exhausted.
    """

    def __init__(self, responses: Iterable[httpx.Response | Exception]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.read())
        index = min(len(self.requests), len(self.responses)) - 1
        result = self.responses[index]
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def call_count(self) -> int:
        return len(self.requests)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    **config: Any,
) -> CoreClient:
    r"""Create a CoreClient sending its requests to ``handler``.

    Backoff delays are zero unless ``backoff_strategy`` is given.
    """
    config.setdefault("backoff_strategy", ExponentialBackoff(base_delay=0.0))
    transport = httpx.Client(transport=httpx.MockTransport(handler))
    return CoreClient(ClientConfig(**config), client=transport)
