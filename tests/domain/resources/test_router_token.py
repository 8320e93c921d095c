from __future__ import annotations

import asyncio

from graphform.domain.diagnostics import Failure, Success
from graphform.domain.errors import CallerContractError
from graphform.domain.model import RouterToken
from graphform.domain.resources import ROUTER_TOKEN_SCHEMA, RouterTokenResource
from graphform.domain.resources.router_token import ERR_CREATING_TOKEN, ERR_DELETING_TOKEN
from tests.support.platform import FakePlatformClient, generic_error


def _token(**overrides: object) -> RouterToken:
    values: dict[str, object] = {"name": "orders-router", "graph_name": "orders"}
    values.update(overrides)
    return RouterToken(**values)  # type: ignore[arg-type]


def test_create_stores_token_and_uses_name_as_id(platform: FakePlatformClient) -> None:
    platform.seed_graph("orders")
    resource = RouterTokenResource(platform)

    outcome = asyncio.run(resource.create(_token(namespace="")))

    assert isinstance(outcome, Success)
    assert outcome.state is not None
    assert outcome.state.id == "orders-router"
    assert outcome.state.namespace == "default"
    assert outcome.state.token == platform.tokens[("default", "orders-router")]


def test_token_secret_is_hidden_from_repr(platform: FakePlatformClient) -> None:
    platform.seed_graph("orders")
    outcome = asyncio.run(RouterTokenResource(platform).create(_token()))

    assert outcome.state is not None
    assert outcome.state.token is not None
    assert outcome.state.token not in repr(outcome.state)


def test_create_failure(platform: FakePlatformClient) -> None:
    platform.errors["create_token"] = generic_error("CreateFederatedGraphToken")

    outcome = asyncio.run(RouterTokenResource(platform).create(_token()))

    assert isinstance(outcome, Failure)
    assert outcome.error.summary == ERR_CREATING_TOKEN


def test_read_is_local(platform: FakePlatformClient) -> None:
    current = _token(id="orders-router", token="t0k3n")

    outcome = asyncio.run(RouterTokenResource(platform).read(current))

    assert outcome == Success(current)
    assert platform.calls == []


def test_update_keeps_identity_and_secret(platform: FakePlatformClient) -> None:
    prior = _token(id="orders-router", token="t0k3n")

    outcome = asyncio.run(RouterTokenResource(platform).update(prior, _token()))

    assert outcome.state is not None
    assert outcome.state.id == "orders-router"
    assert outcome.state.token == "t0k3n"
    assert platform.calls == []


def test_read_without_id_fails() -> None:
    outcome = asyncio.run(RouterTokenResource(FakePlatformClient()).read(_token()))

    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error.cause, CallerContractError)


def test_delete(platform: FakePlatformClient) -> None:
    platform.tokens[("default", "orders-router")] = "t0k3n"

    outcome = asyncio.run(RouterTokenResource(platform).delete(_token(id="orders-router")))

    assert outcome == Success(None)
    assert platform.tokens == {}


def test_blank_namespace_defaults_for_read_and_delete(platform: FakePlatformClient) -> None:
    platform.tokens[("default", "orders-router")] = "t0k3n"
    resource = RouterTokenResource(platform)
    current = _token(id="orders-router", namespace="", token="t0k3n")

    read = asyncio.run(resource.read(current))
    deleted = asyncio.run(resource.delete(current))

    assert read.state is not None
    assert read.state.namespace == "default"
    assert deleted == Success(None)
    assert platform.tokens == {}


def test_delete_failure(platform: FakePlatformClient) -> None:
    outcome = asyncio.run(RouterTokenResource(platform).delete(_token(id="orders-router")))

    assert isinstance(outcome, Failure)
    assert outcome.error.summary == ERR_DELETING_TOKEN


def test_schema_replaces_on_every_declared_change() -> None:
    assert ROUTER_TOKEN_SCHEMA.replace_names() == ("name", "graph_name", "namespace")
    assert ROUTER_TOKEN_SCHEMA.computed_names() == ("id", "token")
