"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    FEDERATED_GRAPH = "federated_graph"
    MONOGRAPH = "monograph"
    ROUTER_TOKEN = "router_token"


# creation order; deletion runs in reverse
KIND_ORDER: tuple[ResourceKind, ...] = (
    ResourceKind.FEDERATED_GRAPH,
    ResourceKind.MONOGRAPH,
    ResourceKind.ROUTER_TOKEN,
)


class ResourceStatus(StrEnum):
    """Lifecycle position of one resource instance."""

    UNMANAGED = "unmanaged"
    CREATING = "creating"
    MANAGED = "managed"
    UPDATING = "updating"
    DELETING = "deleting"


class SubscriptionProtocol(StrEnum):
    WS = "ws"
    SSE = "sse"
    SSE_POST = "sse_post"


class WebsocketSubprotocol(StrEnum):
    AUTO = "auto"
    GRAPHQL_WS = "graphql-ws"
    GRAPHQL_TRANSPORT_WS = "graphql-transport-ws"
