"""Port for the control-plane API consumed by the reconcilers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from graphform.domain.errors import CompositionFailedError, NotFoundError

if TYPE_CHECKING:
    from graphform.domain.errors import ApiError
    from graphform.domain.model import FederatedGraph, GraphSnapshot, Monograph, MutationSummary


@dataclass(frozen=True)
class CallResult[T]:
    """Classified outcome of exactly one remote call.

    ``value`` can be present together with a soft ``error`` (composition failed):
    the remote system accepted the mutation and still answered with a payload.
    """

    value: T | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_found(self) -> bool:
        return isinstance(self.error, NotFoundError)

    @property
    def composition_failed(self) -> bool:
        return isinstance(self.error, CompositionFailedError)


@runtime_checkable
class PlatformPort(Protocol):
    """One coroutine per remote capability; no retries, batching or caching."""

    async def create_federated_graph(
        self, graph: FederatedGraph
    ) -> CallResult[MutationSummary]: ...

    async def read_federated_graph(
        self, name: str, namespace: str
    ) -> CallResult[GraphSnapshot]: ...

    async def update_federated_graph(
        self, graph: FederatedGraph
    ) -> CallResult[MutationSummary]: ...

    async def delete_federated_graph(self, name: str, namespace: str) -> CallResult[None]: ...

    async def create_monograph(self, monograph: Monograph) -> CallResult[MutationSummary]: ...

    async def read_monograph(self, name: str, namespace: str) -> CallResult[GraphSnapshot]: ...

    async def update_monograph(self, monograph: Monograph) -> CallResult[MutationSummary]: ...

    async def delete_monograph(self, name: str, namespace: str) -> CallResult[None]: ...

    async def create_token(
        self, name: str, graph_name: str, namespace: str
    ) -> CallResult[str]: ...

    async def delete_token(self, name: str, namespace: str) -> CallResult[None]: ...


__all__ = ["CallResult", "PlatformPort"]
