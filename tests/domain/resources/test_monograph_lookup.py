from __future__ import annotations

import asyncio

import pytest

from graphform.domain.diagnostics import Failure, Success
from graphform.domain.errors import ResourceNotConfiguredError, ValidationError
from graphform.domain.resources import MonographLookup
from graphform.domain.resources.base import PlatformClientMixin
from graphform.domain.resources.monograph_lookup import (
    ERR_INVALID_MONOGRAPH_NAME,
    ERR_READING_MONOGRAPH,
)
from tests.support.platform import FakePlatformClient


def test_lookup_returns_snapshot(platform: FakePlatformClient) -> None:
    snapshot = platform.seed_graph("users", namespace="team")

    outcome = asyncio.run(MonographLookup(platform).read("users", "team"))

    assert outcome == Success(snapshot)


def test_lookup_defaults_namespace(platform: FakePlatformClient) -> None:
    platform.seed_graph("users")

    outcome = asyncio.run(MonographLookup(platform).read("users"))

    assert isinstance(outcome, Success)


def test_lookup_requires_name(platform: FakePlatformClient) -> None:
    outcome = asyncio.run(MonographLookup(platform).read("  ", "team"))

    assert isinstance(outcome, Failure)
    assert outcome.error.summary == ERR_INVALID_MONOGRAPH_NAME
    assert isinstance(outcome.error.cause, ValidationError)
    assert outcome.error.detail.endswith("namespace: team")
    assert platform.calls == []


def test_lookup_missing_monograph_is_an_error(platform: FakePlatformClient) -> None:
    outcome = asyncio.run(MonographLookup(platform).read("ghost"))

    assert isinstance(outcome, Failure)
    assert outcome.error.summary == ERR_READING_MONOGRAPH
    assert outcome.error.detail.startswith("Could not read monograph:")


def test_unconfigured_lookup_raises() -> None:
    with pytest.raises(ResourceNotConfiguredError):
        asyncio.run(MonographLookup().read("users"))


def test_lookup_shares_client_configuration(platform: FakePlatformClient) -> None:
    lookup = MonographLookup()
    lookup.configure(platform)

    assert isinstance(lookup, PlatformClientMixin)
    assert lookup.client is platform
    with pytest.raises(TypeError, match="Expected a PlatformPort"):
        MonographLookup().configure(object())
