"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update

from graphform.adapters.sqlalchemy.mappings import STATE_ADAPTER_BY_KIND, resource_state_table
from graphform.domain.model import ResourceKind
from graphform.domain.ports.persistence import ResourceStateRepository, TrackedResource

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.orm import Session


class SqlAlchemyResourceStateRepository(ResourceStateRepository):
    """Stores one row per address; attributes are the JSON form of the state dataclass."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, address: str) -> TrackedResource | None:
        stmt = select(resource_state_table).where(resource_state_table.c.address == address)
        row = self.session.execute(stmt).one_or_none()
        return self._to_tracked(row) if row is not None else None

    def list_all(self) -> list[TrackedResource]:
        stmt = select(resource_state_table).order_by(resource_state_table.c.address)
        return [self._to_tracked(row) for row in self.session.execute(stmt)]

    def save(self, resource: TrackedResource) -> None:
        adapter = STATE_ADAPTER_BY_KIND[resource.kind]
        values = {
            "kind": resource.kind,
            "identifier": resource.state.id,
            "attributes": adapter.dump_python(resource.state, mode="json"),
            "updated_at": datetime.now(UTC),
        }
        exists = self.session.execute(
            select(resource_state_table.c.address).where(
                resource_state_table.c.address == resource.address
            )
        ).scalar_one_or_none()
        if exists is None:
            stmt = insert(resource_state_table).values(address=resource.address, **values)
        else:
            stmt = (
                update(resource_state_table)
                .where(resource_state_table.c.address == resource.address)
                .values(**values)
            )
        self.session.execute(stmt)

    def remove(self, address: str) -> None:
        self.session.execute(
            delete(resource_state_table).where(resource_state_table.c.address == address)
        )

    @staticmethod
    def _to_tracked(row: Row[tuple[object, ...]]) -> TrackedResource:
        kind = ResourceKind(row.kind)
        state = STATE_ADAPTER_BY_KIND[kind].validate_python(row.attributes)
        return TrackedResource(address=row.address, kind=kind, state=state)
