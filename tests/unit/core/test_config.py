r"""Unit tests for ClientConfig dataclass.

This file contains tests for the ClientConfig dataclass in
core/config.py.
"""

from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest
from coola.equality import objects_are_equal

from coreclient.backoff import ExponentialBackoff
from coreclient.core import (
    BASE_PATH,
    CORE_VERSION,
    DEFAULT_HOST,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_WAIT_TIME,
    DEFAULT_PORT,
    ClientConfig,
)
from coreclient.retry import DEFAULT_RETRY_ON, ErrorKind, RetryPolicy

##################################
#     Tests for ClientConfig     #
##################################


def test_client_config_defaults() -> None:
    config = ClientConfig()
    assert config.uri is None
    assert config.host == DEFAULT_HOST == "localhost"
    assert config.port == DEFAULT_PORT == 3000
    assert config.scheme == "http"
    assert config.request_id is None
    assert config.core_version == CORE_VERSION == "v1"
    assert config.max_attempts == DEFAULT_MAX_ATTEMPTS == 10
    assert config.max_wait_time == DEFAULT_MAX_WAIT_TIME == 40.0
    assert isinstance(config.backoff_strategy, ExponentialBackoff)
    assert config.backoff_strategy.base_delay == 1.0
    assert config.backoff_strategy.multiplier == 1.5
    assert config.retry_on == DEFAULT_RETRY_ON
    assert config.on_retry is None
    assert config.on_failure is None


def test_client_config_base_url() -> None:
    assert ClientConfig(host="core.local", port=8080).base_url == "http://core.local:8080"


def test_client_config_api_prefix() -> None:
    assert BASE_PATH == "/api/core"
    assert ClientConfig().api_prefix == "/api/core/v1"
    assert ClientConfig(core_version="v2").api_prefix == "/api/core/v2"


def test_client_config_uri() -> None:
    config = ClientConfig(uri="https://core.example.com:8443", host="ignored", port=1)
    assert config.scheme == "https"
    assert config.host == "core.example.com"
    assert config.port == 8443
    assert config.base_url == "https://core.example.com:8443"


def test_client_config_uri_without_port() -> None:
    config = ClientConfig(uri="http://core", port=4000)
    assert config.host == "core"
    assert config.port == 4000


def test_client_config_invalid_scheme() -> None:
    with pytest.raises(ValueError, match=r"scheme must be 'http' or 'https'"):
        ClientConfig(scheme="ftp")


def test_client_config_invalid_uri_scheme() -> None:
    with pytest.raises(ValueError, match=r"scheme must be 'http' or 'https'"):
        ClientConfig(uri="ws://core:3000")


@pytest.mark.parametrize("port", [0, 70000])
def test_client_config_invalid_port(port: int) -> None:
    with pytest.raises(ValueError, match=r"port must be in \[1, 65535\]"):
        ClientConfig(port=port)


def test_client_config_invalid_max_attempts() -> None:
    with pytest.raises(ValueError, match=r"max_attempts must be >= 1, got 0"):
        ClientConfig(max_attempts=0)


def test_client_config_invalid_jitter_factor() -> None:
    with pytest.raises(ValueError, match=r"jitter_factor must be >= 0"):
        ClientConfig(jitter_factor=-0.5)


def test_client_config_invalid_max_wait_time() -> None:
    with pytest.raises(ValueError, match=r"max_wait_time must be > 0"):
        ClientConfig(max_wait_time=-1.0)


@pytest.mark.parametrize("name", ["connect_timeout", "read_timeout", "write_timeout"])
def test_client_config_invalid_timeout(name: str) -> None:
    with pytest.raises(ValueError, match=rf"{name} must be > 0"):
        ClientConfig(**{name: 0})


def test_client_config_retry_on_frozenset() -> None:
    config = ClientConfig(retry_on=[ErrorKind.TRANSPORT])  # type: ignore[arg-type]
    assert config.retry_on == frozenset({ErrorKind.TRANSPORT})


def test_client_config_timeout() -> None:
    timeout = ClientConfig(connect_timeout=5.0, read_timeout=30.0, write_timeout=15.0).timeout()
    assert isinstance(timeout, httpx.Timeout)
    assert objects_are_equal(
        timeout.as_dict(), {"connect": 5.0, "read": 30.0, "write": 15.0, "pool": 5.0}
    )


def test_client_config_retry_policy() -> None:
    on_retry, on_failure = Mock(), Mock()
    backoff = ExponentialBackoff(base_delay=0.5)
    policy = ClientConfig(
        max_attempts=3,
        max_wait_time=10.0,
        backoff_strategy=backoff,
        jitter_factor=0.2,
        retry_on=frozenset({ErrorKind.TRANSPORT}),
        on_retry=on_retry,
        on_failure=on_failure,
    ).retry_policy()
    assert isinstance(policy, RetryPolicy)
    assert objects_are_equal(
        {
            "max_attempts": policy.max_attempts,
            "max_wait_time": policy.max_wait_time,
            "jitter_factor": policy.jitter_factor,
            "retry_on": policy.retry_on,
        },
        {
            "max_attempts": 3,
            "max_wait_time": 10.0,
            "jitter_factor": 0.2,
            "retry_on": frozenset({ErrorKind.TRANSPORT}),
        },
    )
    assert policy.backoff_strategy is backoff
    assert policy.on_retry is on_retry
    assert policy.on_failure is on_failure


###########################
#     Tests for merge     #
###########################


def test_client_config_merge() -> None:
    config = ClientConfig(host="core", max_attempts=5)
    merged = config.merge(port=4000, request_id="req-1")
    assert merged is not config
    assert merged.host == "core"
    assert merged.port == 4000
    assert merged.max_attempts == 5
    assert merged.request_id == "req-1"
    assert config.port == 3000
    assert config.request_id is None


def test_client_config_merge_ignores_none() -> None:
    config = ClientConfig(host="core", request_id="req-1")
    assert config.merge(host=None, request_id=None).request_id == "req-1"


def test_client_config_merge_host_overrides_uri() -> None:
    config = ClientConfig(uri="https://a:1").merge(host="b")
    assert config.uri is None
    assert config.base_url == "https://b:1"


def test_client_config_merge_port_overrides_uri() -> None:
    assert ClientConfig(uri="http://a:1").merge(port=2).base_url == "http://a:2"


def test_client_config_merge_keeps_uri() -> None:
    config = ClientConfig(uri="http://a:1").merge(max_attempts=3)
    assert config.uri == "http://a:1"
    assert config.base_url == "http://a:1"


def test_client_config_merge_new_uri() -> None:
    config = ClientConfig(uri="http://a:1").merge(uri="http://c:3", host="ignored")
    assert config.base_url == "http://c:3"


def test_client_config_merge_validates() -> None:
    with pytest.raises(ValueError, match=r"max_attempts must be >= 1"):
        ClientConfig().merge(max_attempts=0)


##############################
#     Tests for from_env     #
##############################


def test_client_config_from_env_empty() -> None:
    config = ClientConfig.from_env({})
    assert config.host == "localhost"
    assert config.port == 3000


def test_client_config_from_env_host_port() -> None:
    config = ClientConfig.from_env({"CORE_HOST": "core", "CORE_PORT": "4000"})
    assert config.base_url == "http://core:4000"


def test_client_config_from_env_uri() -> None:
    config = ClientConfig.from_env({"CORE_URI": "https://core.example.com:443"})
    assert config.base_url == "https://core.example.com:443"


def test_client_config_from_env_overrides() -> None:
    config = ClientConfig.from_env(
        {"CORE_HOST": "core", "CORE_PORT": "4000"}, port=5000, request_id=None
    )
    assert config.host == "core"
    assert config.port == 5000
    assert config.request_id is None


def test_client_config_from_env_ignores_empty_values() -> None:
    config = ClientConfig.from_env({"CORE_HOST": "", "CORE_PORT": ""})
    assert config.host == "localhost"
    assert config.port == 3000


def test_client_config_from_env_host_override_wins_over_uri() -> None:
    config = ClientConfig.from_env({"CORE_URI": "http://core:4000"}, host="other")
    assert config.base_url == "http://other:4000"


def test_client_config_from_env_invalid_port() -> None:
    with pytest.raises(ValueError):
        ClientConfig.from_env({"CORE_PORT": "not-a-port"})


def test_client_config_from_env_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CORE_URI", raising=False)
    monkeypatch.setenv("CORE_HOST", "core.env")
    monkeypatch.setenv("CORE_PORT", "3100")
    assert ClientConfig.from_env().base_url == "http://core.env:3100"
