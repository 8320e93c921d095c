"""Desired/tracked state of the graph resources and the remote views of them.

States are frozen: reconcilers derive new states with ``dataclasses.replace`` and
never mutate what the caller handed in. Optional scalars use ``None`` for
"absent"; an empty string is a value.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import ResourceKind, SubscriptionProtocol, WebsocketSubprotocol

DEFAULT_NAMESPACE = "default"


def default_namespace(namespace: str | None) -> str:
    """Return ``namespace`` or the default namespace when it is absent or empty."""

    if namespace is None or not namespace.strip():
        return DEFAULT_NAMESPACE
    return namespace


def has_identifier(identifier: str | None) -> bool:
    return identifier is not None and identifier != ""


@dataclass(frozen=True, slots=True, kw_only=True)
class FederatedGraph:
    """A composed API surface built from the subgraphs selected by label matchers."""

    id: str | None = None
    name: str = ""
    namespace: str = DEFAULT_NAMESPACE
    routing_url: str = ""
    readme: str | None = None
    admission_webhook_url: str | None = None
    admission_webhook_secret: str | None = field(default=None, repr=False)
    label_matchers: tuple[str, ...] = ()

    KIND = ResourceKind.FEDERATED_GRAPH


@dataclass(frozen=True, slots=True, kw_only=True)
class Monograph:
    """A graph backed by exactly one subgraph; no composition takes place."""

    id: str | None = None
    name: str = ""
    namespace: str = DEFAULT_NAMESPACE
    routing_url: str = ""
    graph_url: str = ""
    subscription_url: str | None = None
    subscription_protocol: SubscriptionProtocol | None = None
    websocket_subprotocol: WebsocketSubprotocol | None = None
    readme: str | None = None
    admission_webhook_url: str | None = None
    admission_webhook_secret: str | None = field(default=None, repr=False)

    KIND = ResourceKind.MONOGRAPH


@dataclass(frozen=True, slots=True, kw_only=True)
class RouterToken:
    """A router token issued for one federated graph."""

    id: str | None = None
    name: str = ""
    graph_name: str = ""
    namespace: str = DEFAULT_NAMESPACE
    token: str | None = field(default=None, repr=False)

    KIND = ResourceKind.ROUTER_TOKEN


type ResourceState = FederatedGraph | Monograph | RouterToken


@dataclass(frozen=True, slots=True, kw_only=True)
class GraphSnapshot:
    """Authoritative remote view of a graph as returned by a read call."""

    id: str
    name: str
    namespace: str
    routing_url: str
    readme: str | None = None
    admission_webhook_url: str | None = None
    label_matchers: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class MutationSummary:
    """Side information returned by create/update calls."""

    composition_errors: tuple[str, ...] = ()
    deployment_errors: tuple[str, ...] = ()
