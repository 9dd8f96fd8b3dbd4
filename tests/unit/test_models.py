from __future__ import annotations

import pytest
from pydantic import ValidationError

from coreclient.decoder import decode_body
from coreclient.models import (
    CoreStatus,
    DriverStatus,
    EdgeStatistics,
    JobState,
    Load,
    Loaded,
    Version,
)

##############################
#     Tests for JobState     #
##############################


@pytest.mark.parametrize("state", list(JobState))
def test_job_state_str(state: JobState) -> None:
    assert str(state) == state.value
    assert str(state).islower()


def test_job_state_from_value() -> None:
    assert JobState("cancelled") is JobState.CANCELLED


############################
#     Tests for models     #
############################


def test_loaded() -> None:
    loaded = Loaded.model_validate(
        {"edge": {"edge-1": {"drivers/a": ["mod-1"]}}, "local": {"drivers/b": ["mod-2", "mod-3"]}}
    )
    assert loaded.edge == {"edge-1": {"drivers/a": ["mod-1"]}}
    assert loaded.local == {"drivers/b": ["mod-2", "mod-3"]}


def test_loaded_empty() -> None:
    assert Loaded.model_validate({}) == Loaded(edge={}, local={})


def test_core_status() -> None:
    status = decode_body(
        """{
            "available_repositories": ["drivers"],
            "unavailable_repositories": [{"name": "private", "reason": "auth failed"}],
            "compiled_drivers": ["drivers/a"],
            "unavailable_drivers": [],
            "run_count": {
                "local": {"modules": 3, "drivers": 2},
                "edge": {"edge-1": {"modules": 1, "drivers": 1}}
            }
        }""",
        CoreStatus,
    )
    assert status.unavailable_repositories == [
        CoreStatus.Error(name="private", reason="auth failed")
    ]
    assert status.run_count.local == CoreStatus.Count(modules=3, drivers=2)
    assert status.run_count.edge["edge-1"].modules == 1


def test_version_defaults() -> None:
    version = Version(service="core", commit="abc", version="1.0.0", build_time="now")
    assert version.platform_version == "DEV"


def test_models_ignore_unknown_fields() -> None:
    version = Version.model_validate(
        {
            "service": "core",
            "commit": "abc",
            "version": "1.0.0",
            "build_time": "now",
            "platform_version": "2.0",
            "added_later": True,
        }
    )
    assert version.platform_version == "2.0"
    assert not hasattr(version, "added_later")


def test_models_are_frozen() -> None:
    version = Version(service="core", commit="abc", version="1.0.0", build_time="now")
    with pytest.raises(ValidationError):
        version.commit = "def"


def test_models_missing_field() -> None:
    with pytest.raises(ValidationError):
        Version.model_validate({"service": "core"})


def test_load() -> None:
    system = {
        "hostname": "node",
        "cpu_count": 4,
        "core_cpu": 1.5,
        "total_cpu": 20.0,
        "memory_total": 1024,
        "memory_usage": 512,
        "core_memory": 64,
    }
    load = Load.model_validate({"local": system, "edge": {"edge-1": system}})
    assert load.local.cpu_count == 4
    assert load.edge["edge-1"].hostname == "node"


def test_driver_status_empty() -> None:
    status = DriverStatus()
    assert status.local is None
    assert status.edge == {}


def test_driver_status_metadata_defaults() -> None:
    metadata = DriverStatus.Metadata()
    assert not metadata.running
    assert metadata.module_instances == -1
    assert metadata.last_exit_code == -1
    assert metadata.launch_count == -1
    assert metadata.launch_time == -1
    assert metadata.percentage_cpu is None
    assert metadata.memory_total is None
    assert metadata.memory_usage is None


def test_driver_status() -> None:
    status = DriverStatus.model_validate(
        {
            "local": {
                "running": True,
                "module_instances": 2,
                "last_exit_code": 0,
                "launch_count": 1,
                "launch_time": 1700000000,
                "percentage_cpu": 0.5,
            },
            "edge": {"edge-1": None},
        }
    )
    assert status.local.running
    assert status.local.percentage_cpu == 0.5
    assert status.edge == {"edge-1": None}


def test_edge_statistics() -> None:
    statistics = EdgeStatistics.model_validate(
        {
            "total_edges": 2,
            "connected_edges": 1,
            "edges_with_errors": 1,
            "total_errors_24h": 5,
            "total_modules": 10,
            "failed_modules": 1,
            "timestamp": "2024-01-01T00:00:00Z",
        }
    )
    assert statistics.connected_edges == 1
