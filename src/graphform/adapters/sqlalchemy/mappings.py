"""SQLAlchemy metadata for tracked resource state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from pydantic import TypeAdapter
from sqlalchemy import JSON, Column, DateTime, Enum, MetaData, String, Table

from graphform.domain.model import FederatedGraph, Monograph, ResourceKind, RouterToken

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()

resource_state_table = Table(
    "resource_state",
    metadata,
    Column("address", String, primary_key=True),
    Column("kind", Enum(ResourceKind, native_enum=False), nullable=False),
    Column("identifier", String, nullable=True),
    Column("attributes", JSON, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

STATE_TYPE_BY_KIND: Final[dict[ResourceKind, type[Any]]] = {
    ResourceKind.FEDERATED_GRAPH: FederatedGraph,
    ResourceKind.MONOGRAPH: Monograph,
    ResourceKind.ROUTER_TOKEN: RouterToken,
}

STATE_ADAPTER_BY_KIND: Final[dict[ResourceKind, TypeAdapter[Any]]] = {
    kind: TypeAdapter(state_type) for kind, state_type in STATE_TYPE_BY_KIND.items()
}


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
