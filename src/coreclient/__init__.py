r"""coreclient - Client library for the Core orchestration service.

This package talks to Core, the service managing drivers, running
modules and edge nodes. Requests go through one shared, lock-protected
``httpx`` connection, transient failures are retried with capped
exponential backoff, and failures are reported through a typed error
hierarchy.

Key Features:
    - One in-flight request per client, safe to share between threads
    - Retries of transport errors and non-success responses only;
      driver exceptions and unexpected statuses are never retried
    - ``Response-Code`` secondary status and remote backtraces on errors
    - Typed pydantic models for every resource endpoint
    - Command execution with a tagged outcome type
    - Module debug output over a websocket

Example:
    ```pycon
    >>> from coreclient import ClientConfig, CoreClient
    >>> with CoreClient(ClientConfig(host="core", port=3000)) as client:  # doctest: +SKIP
    ...     status = client.core_status()
    ...     payload, code = client.execute("mod-1234", "power", [True])
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "APIResponseError",
    "ClientConfig",
    "ClientError",
    "CoreClient",
    "CoreError",
    "CoreSession",
    "DebugStream",
    "DecodeError",
    "DriverRaisedError",
    "ErrorKind",
    "ExecuteSuccess",
    "RemoteException",
    "RetryPolicy",
    "StreamEnd",
    "UnexpectedFailureError",
    "UnexpectedStatus",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from coreclient.client import CoreClient
from coreclient.command import ExecuteSuccess, RemoteException, UnexpectedStatus
from coreclient.core.config import ClientConfig
from coreclient.debug import DebugStream, StreamEnd
from coreclient.exceptions import (
    APIResponseError,
    ClientError,
    CoreError,
    DecodeError,
    DriverRaisedError,
    UnexpectedFailureError,
)
from coreclient.retry import ErrorKind, RetryPolicy
from coreclient.session import CoreSession

try:
    __version__ = version("placeos-core-client")
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
