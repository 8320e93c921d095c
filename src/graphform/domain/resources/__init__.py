"""Per-kind reconcilers and the registry the convergence driver works with."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphform.domain.model import ResourceKind

from .base import INVALID_RESOURCE_ID, Resource
from .federated_graph import FEDERATED_GRAPH_SCHEMA, FederatedGraphResource
from .monograph import MONOGRAPH_SCHEMA, MonographResource
from .monograph_lookup import MONOGRAPH_LOOKUP_SCHEMA, MonographLookup
from .router_token import ROUTER_TOKEN_SCHEMA, RouterTokenResource
from .schema import Attribute, AttributeType, ResourceSchema

if TYPE_CHECKING:
    from graphform.domain.ports.platform import PlatformPort

type ResourceRegistry = dict[ResourceKind, Resource[Any]]

SCHEMA_BY_KIND: dict[ResourceKind, ResourceSchema] = {
    ResourceKind.FEDERATED_GRAPH: FEDERATED_GRAPH_SCHEMA,
    ResourceKind.MONOGRAPH: MONOGRAPH_SCHEMA,
    ResourceKind.ROUTER_TOKEN: ROUTER_TOKEN_SCHEMA,
}


def build_resources(client: PlatformPort) -> ResourceRegistry:
    """Return one configured reconciler per resource kind."""

    resources: list[Resource[Any]] = [
        FederatedGraphResource(client),
        MonographResource(client),
        RouterTokenResource(client),
    ]
    return {resource.KIND: resource for resource in resources}


__all__ = [
    "FEDERATED_GRAPH_SCHEMA",
    "INVALID_RESOURCE_ID",
    "MONOGRAPH_LOOKUP_SCHEMA",
    "MONOGRAPH_SCHEMA",
    "ROUTER_TOKEN_SCHEMA",
    "SCHEMA_BY_KIND",
    "Attribute",
    "AttributeType",
    "FederatedGraphResource",
    "MonographLookup",
    "MonographResource",
    "Resource",
    "ResourceRegistry",
    "ResourceSchema",
    "RouterTokenResource",
    "build_resources",
]
