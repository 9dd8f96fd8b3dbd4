r"""Define the shapes of the Core responses.

Fields Core adds in the future are ignored, so the client keeps working
against newer servers.
"""

from __future__ import annotations

__all__ = [
    "ConnectionMetrics",
    "CoreStatus",
    "DriverCommit",
    "DriverStatus",
    "EdgeError",
    "EdgeHealth",
    "EdgeModuleStatus",
    "EdgeStatistics",
    "JobState",
    "Load",
    "Loaded",
    "SystemLoad",
    "Version",
]

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BaseResponse(BaseModel):
    r"""Base class of the Core response models."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class JobState(str, Enum):
    r"""Implement the states of a build job."""

    PENDING = "pending"
    RUNNING = "running"
    CANCELLED = "cancelled"
    ERROR = "error"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


# Drivers


class DriverCommit(BaseResponse):
    commit: str
    date: str
    author: str
    subject: str


# Command

Processes = dict[str, list[str]]


class Loaded(BaseResponse):
    r"""The modules loaded by each driver, locally and on every edge."""

    edge: dict[str, Processes] = Field(default_factory=dict)
    local: Processes = Field(default_factory=dict)


# Status


class CoreStatus(BaseResponse):
    r"""The repositories and drivers known to Core."""

    class Error(BaseResponse):
        name: str
        reason: str

    class Count(BaseResponse):
        modules: int
        drivers: int

    class RunCount(BaseResponse):
        local: Count
        edge: dict[str, Count]

    available_repositories: list[str]
    unavailable_repositories: list[Error]
    compiled_drivers: list[str]
    unavailable_drivers: list[Error]
    run_count: RunCount


class Version(BaseResponse):
    service: str
    commit: str
    version: str
    build_time: str
    platform_version: str = "DEV"


class SystemLoad(BaseResponse):
    hostname: str
    cpu_count: int
    core_cpu: float
    total_cpu: float
    memory_total: int
    memory_usage: int
    core_memory: int


class Load(BaseResponse):
    local: SystemLoad
    edge: dict[str, SystemLoad]


class DriverStatus(BaseResponse):
    r"""The state of a driver process, locally and on every edge.

    An instance built without arguments stands for a driver Core does
    not know.
    """

    class Metadata(BaseResponse):
        running: bool = False
        module_instances: int = -1
        last_exit_code: int = -1
        launch_count: int = -1
        launch_time: int = -1

        percentage_cpu: float | None = None
        memory_total: int | None = None
        memory_usage: int | None = None

    local: Metadata | None = None
    edge: dict[str, Metadata | None] = Field(default_factory=dict)


# Edge monitoring


class EdgeError(BaseResponse):
    timestamp: int
    edge_id: str
    error_type: str
    message: str
    context: dict[str, str]
    severity: str


class EdgeHealth(BaseResponse):
    edge_id: str
    connected: bool
    last_seen: int
    connection_uptime: int
    error_count_24h: int
    module_count: int
    failed_modules: list[str]


class ConnectionMetrics(BaseResponse):
    edge_id: str
    total_connections: int
    failed_connections: int
    average_uptime: int
    last_connection_attempt: int
    last_successful_connection: int


class EdgeModuleStatus(BaseResponse):
    edge_id: str
    total_modules: int
    running_modules: int
    failed_modules: list[str]
    initialization_errors: list[dict[str, Any]]


class EdgeStatistics(BaseResponse):
    total_edges: int
    connected_edges: int
    edges_with_errors: int
    total_errors_24h: int
    total_modules: int
    failed_modules: int
    timestamp: str

