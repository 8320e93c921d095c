"""Domain model exports."""

from __future__ import annotations

from .enums import (
    KIND_ORDER,
    ResourceKind,
    ResourceStatus,
    SubscriptionProtocol,
    WebsocketSubprotocol,
)
from .graph import (
    DEFAULT_NAMESPACE,
    FederatedGraph,
    GraphSnapshot,
    Monograph,
    MutationSummary,
    ResourceState,
    RouterToken,
    default_namespace,
    has_identifier,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "KIND_ORDER",
    "FederatedGraph",
    "GraphSnapshot",
    "Monograph",
    "MutationSummary",
    "ResourceKind",
    "ResourceState",
    "ResourceStatus",
    "RouterToken",
    "SubscriptionProtocol",
    "WebsocketSubprotocol",
    "default_namespace",
    "has_identifier",
]
