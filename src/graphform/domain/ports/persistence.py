"""Repository port for tracked resource state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from graphform.domain.model import ResourceKind, ResourceState


@dataclass(frozen=True, slots=True)
class TrackedResource:
    """State the orchestrator keeps between invocations for one address."""

    address: str
    kind: ResourceKind
    state: ResourceState


@runtime_checkable
class ResourceStateRepository(Protocol):
    def get(self, address: str) -> TrackedResource | None: ...

    def list_all(self) -> list[TrackedResource]: ...

    def save(self, resource: TrackedResource) -> None: ...

    def remove(self, address: str) -> None: ...


__all__ = ["ResourceStateRepository", "TrackedResource"]
