from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graphform.adapters.manifest import ManifestError, load_manifest, parse_manifest
from graphform.domain.errors import ValidationError
from graphform.domain.model import (
    FederatedGraph,
    Monograph,
    ResourceKind,
    RouterToken,
    SubscriptionProtocol,
)

if TYPE_CHECKING:
    from pathlib import Path

MANIFEST = """
[federated_graph.orders]
name = "orders"
routing_url = "http://router/orders"
label_matchers = ["team=payments,team=billing", "env=prod"]
admission_webhook_url = "http://hooks/admit"
admission_webhook_secret = "s3cret"

[monograph.users]
name = "users"
namespace = "staging"
routing_url = "http://router/users"
graph_url = "http://users/graphql"
subscription_protocol = "sse"

[router_token.orders-router]
name = "orders-router"
graph_name = "orders"
"""


def test_parse_manifest_declares_every_table() -> None:
    declared = {entry.address: entry for entry in parse_manifest(MANIFEST)}

    assert set(declared) == {
        "federated_graph.orders",
        "monograph.users",
        "router_token.orders-router",
    }

    graph = declared["federated_graph.orders"]
    assert graph.kind is ResourceKind.FEDERATED_GRAPH
    assert graph.state == FederatedGraph(
        name="orders",
        routing_url="http://router/orders",
        label_matchers=("team=payments,team=billing", "env=prod"),
        admission_webhook_url="http://hooks/admit",
        admission_webhook_secret="s3cret",
    )

    monograph = declared["monograph.users"].state
    assert isinstance(monograph, Monograph)
    assert monograph.namespace == "staging"
    assert monograph.subscription_protocol is SubscriptionProtocol.SSE
    assert monograph.id is None

    token = declared["router_token.orders-router"].state
    assert token == RouterToken(name="orders-router", graph_name="orders", namespace="default")


def test_blank_namespace_becomes_default() -> None:
    declared = parse_manifest(
        """
        [router_token.t]
        name = "t"
        graph_name = "orders"
        namespace = "  "
        """
    )

    assert declared[0].state.namespace == "default"


def test_empty_manifest_declares_nothing() -> None:
    assert parse_manifest("") == []


@pytest.mark.parametrize(
    "text",
    [
        "[federated_graph.orders\nname = 1",
        '[federated_graph.orders]\nname = "orders"',
        '[federated_graph.orders]\nname = "orders"\nrouting_url = "u"\nunknown = 1',
        '[subgraph.inventory]\nname = "inventory"',
        '[monograph."bad key"]\nname = "m"\nrouting_url = "u"\ngraph_url = "g"',
        '[monograph.m]\nname = "m"\nrouting_url = "u"\ngraph_url = "g"\n'
        'subscription_protocol = "carrier-pigeon"',
    ],
    ids=["bad-toml", "missing-field", "unknown-field", "unknown-kind", "bad-key", "bad-enum"],
)
def test_invalid_manifest_raises(text: str) -> None:
    with pytest.raises(ManifestError):
        parse_manifest(text)


def test_manifest_error_is_a_validation_error() -> None:
    with pytest.raises(ValidationError):
        parse_manifest("not = [valid")


def test_load_manifest_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "graphs.toml"
    path.write_text(MANIFEST, encoding="utf-8")

    declared = load_manifest(path)

    assert len(declared) == 3


def test_load_manifest_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="Cannot read manifest"):
        load_manifest(tmp_path / "missing.toml")
