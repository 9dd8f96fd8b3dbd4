r"""Implement the typed Core client.

``CoreClient`` adds the Core resource endpoints, the command execute
channel and the module debug stream on top of ``CoreSession``.
"""

from __future__ import annotations

__all__ = ["CoreClient"]

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from coreclient.command import (
    ExecuteOutcome,
    build_execute_payload,
    interpret_execute_response,
)
from coreclient.core.config import ClientConfig
from coreclient.debug import DebugStream, StreamEnd
from coreclient.decoder import decode_response
from coreclient.models import (
    ConnectionMetrics,
    CoreStatus,
    DriverCommit,
    DriverStatus,
    EdgeError,
    EdgeHealth,
    EdgeModuleStatus,
    EdgeStatistics,
    JobState,
    Load,
    Loaded,
    Version,
)
from coreclient.session import REQUEST_ID_HEADER, CoreSession

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

logger: logging.Logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(value, safe="")


class CoreClient(CoreSession):
    r"""Client of the Core orchestration service.

    Args:
        config: The client configuration. Defaults to ``ClientConfig()``.
        client: Optional ``httpx.Client`` to use instead of creating one.

    Example:
        ```pycon
        >>> from coreclient import ClientConfig, CoreClient
        >>> with CoreClient(ClientConfig(uri="http://core:3000")) as client:  # doctest: +SKIP
        ...     status = client.core_status()
        ...     result, code = client.execute("mod-1234", "power", [True])
        ...

        ```
    """

    @classmethod
    @contextmanager
    def client(
        cls, config: ClientConfig | None = None, **overrides: Any
    ) -> Generator[CoreClient, None, None]:
        r"""Create a one-shot client, closed when the block exits.

        Args:
            config: The client configuration. Defaults to ``ClientConfig()``.
            **overrides: Configuration values to override.

        Example:
            ```pycon
            >>> from coreclient import CoreClient
            >>> with CoreClient.client(host="core", request_id="req-1") as client:  # doctest: +SKIP
            ...     loaded = client.loaded()
            ...

            ```
        """
        client = cls((config or ClientConfig()).merge(**overrides))
        try:
            yield client
        finally:
            client.close()

    def _fetch(self, method: str, path: str, shape: Any, **kwargs: Any) -> Any:
        response = self.request(method, path, **kwargs)
        return decode_response(response, shape, path=self.build_path(path))

    def _status_and_body(self, method: str, path: str, **kwargs: Any) -> tuple[int, str]:
        response = self.request(method, path, **kwargs)
        return response.status_code, response.text

    # Drivers
    ###########################################################################

    def drivers(self, repository: str) -> list[str]:
        r"""Return the drivers available in a repository."""
        return self._fetch("GET", "/drivers", list[str], params={"repository": repository})

    def driver(
        self, driver_id: str, repository: str, branch: str, count: int | None = None
    ) -> list[DriverCommit]:
        r"""Return the commits of a driver.

        Args:
            driver_id: The driver file name.
            repository: The repository folder.
            branch: The branch to list commits from.
            count: Optional maximum number of commits.

        Returns:
            The commits, most recent first.
        """
        params: dict[str, Any] = {"repository": repository, "branch": branch}
        if count is not None:
            params["count"] = str(count)
        return self._fetch(
            "GET", f"/drivers/{_segment(driver_id)}", list[DriverCommit], params=params
        )

    def driver_details(
        self, file_name: str, commit: str, repository: str, branch: str = "master"
    ) -> str:
        r"""Return the metadata of a driver as the raw JSON text."""
        params = {"commit": commit, "repository": repository, "branch": branch}
        return self.get(f"/drivers/{_segment(file_name)}/details", params=params).text

    def driver_compiled(self, file_name: str, commit: str, repository: str, tag: str) -> bool:
        r"""Indicate if a driver is compiled at a commit."""
        params = {"commit": commit, "repository": repository, "tag": tag}
        return self._fetch("GET", f"/drivers/{_segment(file_name)}/compiled", bool, params=params)

    def driver_recompile(
        self, file_name: str, commit: str, repository: str, tag: str
    ) -> tuple[int, str]:
        r"""Ask Core to recompile a driver.

        Returns:
            The response status code and body.

        Raises:
            APIResponseError: If Core still answers with a non-success
                status after the last attempt.
        """
        params = {"commit": commit, "repository": repository, "tag": tag}
        return self._status_and_body(
            "POST", f"/drivers/{_segment(file_name)}/recompile", params=params
        )

    def driver_reload(self, driver_id: str) -> tuple[int, str]:
        r"""Ask Core to reload a driver.

        Returns:
            The response status code and body.
        """
        return self._status_and_body("POST", f"/drivers/{_segment(driver_id)}/reload")

    def branches(self, repository: str) -> list[str] | None:
        r"""Return the branches of a repository, or ``None`` if Core does
        not know the repository."""
        path = f"/drivers/{_segment(repository)}/branches"
        response = self.get(path, allow_status=(404,))
        if response.status_code == 404:
            return None
        return decode_response(response, list[str], path=self.build_path(path))

    # Build monitor
    ###########################################################################

    def monitor_jobs(self, state: JobState = JobState.PENDING) -> tuple[int, str]:
        r"""Return the build jobs in ``state`` as status code and raw body."""
        return self._status_and_body("GET", "/build/monitor", params={"state": str(state)})

    def cancel_job(self, job: str) -> tuple[int, str]:
        r"""Cancel a build job.

        Returns:
            The response status code and body.
        """
        return self._status_and_body("DELETE", f"/build/cancel/{_segment(job)}")

    # Command
    ###########################################################################

    def execute_outcome(
        self,
        module_id: str,
        method: str,
        arguments: Any = None,
        user_id: str | None = None,
    ) -> ExecuteOutcome:
        r"""Run a method on a module and return its outcome without
        raising for driver errors.

        Only transport errors are retried. Every status code is a
        meaningful answer of the execute channel.

        Args:
            module_id: The module id.
            method: The method name.
            arguments: The method arguments.
            user_id: Optional id of the user on whose behalf the method runs.

        Returns:
            ``ExecuteSuccess``, ``RemoteException`` or ``UnexpectedStatus``.

        Raises:
            DecodeError: If Core reports a driver error in a malformed body.
        """
        params = {"user_id": user_id} if user_id else None
        response = self.post(
            f"/command/{_segment(module_id)}/execute",
            params=params,
            content=build_execute_payload(method, arguments),
            raises=False,
        )
        return interpret_execute_response(response)

    def execute(
        self,
        module_id: str,
        method: str,
        arguments: Any = None,
        user_id: str | None = None,
    ) -> tuple[str, int]:
        r"""Run a method on a module.

        Args:
            module_id: The module id.
            method: The method name.
            arguments: The method arguments.
            user_id: Optional id of the user on whose behalf the method runs.

        Returns:
            The raw JSON result and the response code.

        Raises:
            DriverRaisedError: If the driver code raised.
            UnexpectedFailureError: If Core answered with an unexpected
                status code.
            DecodeError: If Core reports a driver error in a malformed body.
        """
        return self.execute_outcome(module_id, method, arguments, user_id).unwrap()

    def debug(self, module_id: str) -> DebugStream:
        r"""Return the debug stream of a module, not opened yet."""
        scheme = "wss" if self.config.scheme == "https" else "ws"
        path = self.build_path(f"/command/{_segment(module_id)}/debugger")
        headers = {REQUEST_ID_HEADER: self.request_id} if self.request_id else {}
        return DebugStream(
            f"{scheme}://{self.host}:{self.port}{path}",
            headers=headers,
            open_timeout=self.config.connect_timeout,
        )

    def debug_lines(self, module_id: str, callback: Callable[[str], None]) -> StreamEnd:
        r"""Forward the output of a module to ``callback`` until the debug
        stream ends.

        Returns:
            How the stream ended.
        """
        stream = self.debug(module_id)
        stream.on_message(callback)
        try:
            return stream.run()
        finally:
            stream.close()

    def load(self, module_id: str) -> bool:
        r"""Ask Core to load a module. Return ``True`` on success.

        A non-success status is retried, then raised as
        ``APIResponseError``.
        """
        response = self.post(f"/command/{_segment(module_id)}/load")
        return response.is_success

    def loaded(self) -> Loaded:
        r"""Return the modules loaded on the node."""
        return self._fetch("GET", "/status/loaded", Loaded)

    # Status
    ###########################################################################

    def core_status(self) -> CoreStatus:
        return self._fetch("GET", "/status", CoreStatus)

    def version(self) -> Version:
        return self._fetch("GET", "/version", Version)

    def core_load(self) -> Load:
        r"""Return the machine load of the node and its edges."""
        return self._fetch("GET", "/status/load", Load)

    def driver_status(self, path: str) -> DriverStatus:
        r"""Return the status of a driver process.

        A driver Core does not know (404) yields an empty
        ``DriverStatus``. Every other error is raised.

        Args:
            path: The path of the driver executable.
        """
        response = self.get("/status/driver", params={"path": path}, allow_status=(404,))
        if response.status_code == 404:
            logger.debug(f"driver {path} is unknown to core")
            return DriverStatus()
        return decode_response(response, DriverStatus, path=self.build_path("/status/driver"))

    # Chaos
    ###########################################################################

    def terminate(self, path: str) -> bool:
        r"""Kill the process of a driver. Return ``True`` on success."""
        response = self.post("/chaos/terminate", params={"path": path})
        return response.is_success

    # Edge monitoring
    ###########################################################################

    def edge_errors(
        self, edge_id: str, limit: int | None = None, type: str | None = None  # noqa: A002
    ) -> list[EdgeError]:
        r"""Return the errors reported by an edge."""
        return self._fetch(
            "GET",
            f"/status/edge/{_segment(edge_id)}/errors",
            list[EdgeError],
            params=_limit_params(limit, type),
        )

    def edge_module_status(self, edge_id: str) -> EdgeModuleStatus:
        return self._fetch(
            "GET", f"/status/edge/{_segment(edge_id)}/modules/status", EdgeModuleStatus
        )

    def edges_health(self) -> dict[str, EdgeHealth]:
        return self._fetch("GET", "/status/edges/health", dict[str, EdgeHealth])

    def edges_connections(self) -> dict[str, ConnectionMetrics]:
        return self._fetch("GET", "/status/edges/connections", dict[str, ConnectionMetrics])

    def edges_errors(
        self, limit: int | None = None, type: str | None = None  # noqa: A002
    ) -> dict[str, list[EdgeError]]:
        r"""Return the errors reported by every edge."""
        return self._fetch(
            "GET",
            "/status/edges/errors",
            dict[str, list[EdgeError]],
            params=_limit_params(limit, type),
        )

    def edges_module_failures(self) -> dict[str, list[dict[str, Any]]]:
        return self._fetch(
            "GET", "/status/edges/modules/failures", dict[str, list[dict[str, Any]]]
        )

    def edges_statistics(self) -> EdgeStatistics:
        return self._fetch("GET", "/status/edges/statistics", EdgeStatistics)

    def cleanup_edge_errors(self, hours: int = 24) -> dict[str, Any]:
        r"""Ask Core to drop edge errors older than ``hours``."""
        return self._fetch(
            "POST", "/monitoring/cleanup", dict[str, Any], params={"hours": str(hours)}
        )

    def edge_monitoring_summary(self) -> dict[str, Any]:
        return self._fetch("GET", "/monitoring/summary", dict[str, Any])


def _limit_params(limit: int | None, type_: str | None) -> dict[str, str]:
    params = {}
    if limit is not None:
        params["limit"] = str(limit)
    if type_ is not None:
        params["type"] = type_
    return params
