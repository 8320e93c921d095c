from __future__ import annotations

import pytest

from graphform.config import MissingConfigurationError, get_platform_config
from graphform.config.http_resilience import RateLimit
from graphform.config.platform import (
    PLATFORM_API_URL,
    PLATFORM_RATE_LIMIT_ENV,
    PLATFORM_TIMEOUT_SECONDS,
)


def test_platform_config_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("COSMO_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError, match="COSMO_API_KEY"):
        get_platform_config()


def test_platform_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COSMO_API_KEY", "key-123")
    monkeypatch.delenv("COSMO_API_URL", raising=False)
    monkeypatch.delenv("GRAPHFORM_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv(PLATFORM_RATE_LIMIT_ENV, raising=False)

    config = get_platform_config()

    assert config.api_url == PLATFORM_API_URL
    assert config.resilience.base_url == PLATFORM_API_URL
    assert config.resilience.timeout_seconds == PLATFORM_TIMEOUT_SECONDS
    assert config.resilience.ratelimit is None
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Authorization"] == "Bearer key-123"
    assert "key-123" not in repr(config)


def test_platform_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COSMO_API_KEY", "key-123")
    monkeypatch.setenv("COSMO_API_URL", "http://localhost:3001/")
    monkeypatch.setenv("GRAPHFORM_TIMEOUT_SECONDS", "5")

    config = get_platform_config()

    assert config.resilience.base_url == "http://localhost:3001"
    assert config.resilience.timeout_seconds == 5.0


def test_platform_config_reads_rate_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COSMO_API_KEY", "key-123")
    monkeypatch.setenv(PLATFORM_RATE_LIMIT_ENV, "2")

    config = get_platform_config()

    assert config.resilience.ratelimit == RateLimit(max_calls=2.0)
