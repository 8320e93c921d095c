"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from graphform.adapters.manifest import ManifestError, load_manifest
from graphform.adapters.platform import PlatformClient
from graphform.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    is_started,
    startup,
)
from graphform.config import get_platform_config
from graphform.domain.convergence import adopt, converge
from graphform.domain.ports.unit_of_work import StateUnitOfWork
from graphform.domain.resources import MonographLookup, build_resources

if TYPE_CHECKING:
    from pathlib import Path

    from graphform.domain.convergence import ConvergenceReport, OperationResult
    from graphform.domain.diagnostics import ReconcileOutcome
    from graphform.domain.model import GraphSnapshot
    from graphform.domain.ports.persistence import TrackedResource
    from graphform.domain.ports.platform import PlatformPort

UnitOfWorkFactory = Callable[[], StateUnitOfWork]


log = getLogger(__name__)


def build_platform_client() -> PlatformClient:
    """Create a platform client from the environment (``COSMO_API_KEY`` and friends)."""

    return PlatformClient(config=get_platform_config())


def _state_unit_of_work(
    unit_of_work_factory: UnitOfWorkFactory | None, state_uri: str | None
) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup(database_uri=state_uri)
    return SqlAlchemyStateUnitOfWork


def plan_manifest(
    manifest_path: Path,
    *,
    client: PlatformPort | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    state_uri: str | None = None,
) -> ConvergenceReport:
    """Refresh tracked state and report the changes ``apply`` would make."""

    return _converge(
        manifest_path,
        client=client,
        unit_of_work_factory=unit_of_work_factory,
        state_uri=state_uri,
        dry_run=True,
    )


def apply_manifest(
    manifest_path: Path,
    *,
    client: PlatformPort | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    state_uri: str | None = None,
) -> ConvergenceReport:
    """Converge the remote graphs and tokens to the manifest."""

    return _converge(
        manifest_path,
        client=client,
        unit_of_work_factory=unit_of_work_factory,
        state_uri=state_uri,
        dry_run=False,
    )


def _converge(
    manifest_path: Path,
    *,
    client: PlatformPort | None,
    unit_of_work_factory: UnitOfWorkFactory | None,
    state_uri: str | None,
    dry_run: bool,
) -> ConvergenceReport:
    declared = load_manifest(manifest_path)
    effective_uow = _state_unit_of_work(unit_of_work_factory, state_uri)
    resources = build_resources(client or build_platform_client())
    log.info(
        "Starting %s: manifest=%s, declared=%s",
        "plan" if dry_run else "apply",
        manifest_path,
        len(declared),
    )

    report = asyncio.run(
        converge(
            declared,
            resources=resources,
            unit_of_work_factory=effective_uow,
            dry_run=dry_run,
        )
    )

    log.info(
        "Finished %s: changes=%s, warnings=%s, errors=%s",
        "plan" if dry_run else "apply",
        len(report.pending_changes),
        len(report.warnings),
        len(report.errors),
    )
    return report


def import_resource(
    manifest_path: Path,
    address: str,
    identifier: str,
    *,
    client: PlatformPort | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    state_uri: str | None = None,
) -> OperationResult:
    """Start tracking an existing remote resource under a declared address."""

    declared = {entry.address: entry for entry in load_manifest(manifest_path)}
    declaration = declared.get(address)
    if declaration is None:
        raise ManifestError(f"Address {address!r} is not declared in {manifest_path}")

    effective_uow = _state_unit_of_work(unit_of_work_factory, state_uri)
    resources = build_resources(client or build_platform_client())
    return asyncio.run(
        adopt(
            declaration,
            identifier,
            resources=resources,
            unit_of_work_factory=effective_uow,
        )
    )


def list_state(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    state_uri: str | None = None,
) -> list[TrackedResource]:
    effective_uow = _state_unit_of_work(unit_of_work_factory, state_uri)
    with effective_uow() as uow:
        return uow.repositories.resources.list_all()


def lookup_monograph(
    name: str,
    namespace: str | None = None,
    *,
    client: PlatformPort | None = None,
) -> ReconcileOutcome[GraphSnapshot]:
    """Read a monograph that is not managed by this tool."""

    lookup = MonographLookup(client or build_platform_client())
    return asyncio.run(lookup.read(name, namespace))
