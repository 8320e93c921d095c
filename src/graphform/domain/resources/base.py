"""Lifecycle contract shared by every resource kind.

The convergence driver (or any other host) calls these hooks; a reconciler never
starts a lifecycle on its own. Each reconciler owns nothing but the platform
client injected through ``configure``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from graphform.domain.errors import CallerContractError, ResourceNotConfiguredError
from graphform.domain.ports.platform import PlatformPort

if TYPE_CHECKING:
    from graphform.domain.diagnostics import Diagnostics, Failure, ReconcileOutcome
    from graphform.domain.model import ResourceKind

    from .schema import ResourceSchema

INVALID_RESOURCE_ID = "Invalid Resource ID"


class PlatformClientMixin:
    """Holds the platform client injected through ``configure``."""

    def __init__(self, client: PlatformPort | None = None) -> None:
        self._client: PlatformPort | None = None
        if client is not None:
            self.configure(client)

    def configure(self, client: object) -> None:
        """Inject the platform client used by every subsequent lifecycle call."""

        if not isinstance(client, PlatformPort):
            raise TypeError(
                f"Expected a PlatformPort, got: {type(client).__name__}. "
                "Please report this issue to the graphform developers."
            )
        self._client = client

    @property
    def client(self) -> PlatformPort:
        if self._client is None:
            raise ResourceNotConfiguredError(
                f"{type(self).__name__} used before configure() was called"
            )
        return self._client


class Resource[StateT](PlatformClientMixin, ABC):
    """Create/read/update/delete/import for one resource kind."""

    KIND: ClassVar[ResourceKind]

    @abstractmethod
    def describe_schema(self) -> ResourceSchema: ...

    @abstractmethod
    async def create(self, planned: StateT) -> ReconcileOutcome[StateT]: ...

    @abstractmethod
    async def read(self, current: StateT) -> ReconcileOutcome[StateT]: ...

    @abstractmethod
    async def update(self, prior: StateT, planned: StateT) -> ReconcileOutcome[StateT]: ...

    @abstractmethod
    async def delete(self, current: StateT) -> ReconcileOutcome[StateT]: ...

    @abstractmethod
    def import_state(self, identifier: str) -> StateT:
        """Build a state carrying only ``identifier``; the next read fills in the rest."""


def missing_identifier(diagnostics: Diagnostics, detail: str) -> Failure:
    error = CallerContractError(detail)
    return diagnostics.fail(INVALID_RESOURCE_ID, detail, cause=error)
