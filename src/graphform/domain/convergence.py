"""Convergence driver: refresh tracked state, plan changes and apply them.

This is the host side of the resource lifecycle. It decides which hook to call
for each address, in which order, and persists whatever a successful hook
returns. Failed hooks never touch the stored state of their address.

Flow of ``converge``:
1) load tracked state through a unit of work
2) refresh: read every tracked resource; not-found drops it from state
3) plan: diff declared against refreshed state using each kind's schema
4) apply: deletes first (dependents before their graphs), then creates,
   replacements and updates (graphs before their dependents)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from graphform.domain.diagnostics import Failure, Severity, outcome_diagnostics
from graphform.domain.model import KIND_ORDER, ResourceStatus
from graphform.domain.ports.persistence import TrackedResource

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from graphform.domain.diagnostics import Diagnostic, ReconcileOutcome
    from graphform.domain.model import ResourceKind, ResourceState
    from graphform.domain.ports.unit_of_work import StateUnitOfWork
    from graphform.domain.resources import ResourceRegistry
    from graphform.domain.resources.schema import ResourceSchema

    UnitOfWorkFactory = Callable[[], StateUnitOfWork]

log = getLogger(__name__)


class ChangeAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "noop"


class Operation(StrEnum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    IMPORT = "import"


@dataclass(frozen=True, slots=True)
class DeclaredResource:
    """Desired state of one manifest address."""

    address: str
    kind: ResourceKind
    state: ResourceState


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceChange:
    address: str
    kind: ResourceKind
    action: ChangeAction
    prior: ResourceState | None = None
    planned: ResourceState | None = None
    changed: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class OperationResult:
    address: str
    kind: ResourceKind
    operation: Operation
    outcome: ReconcileOutcome[Any]
    status: ResourceStatus

    @property
    def failed(self) -> bool:
        return isinstance(self.outcome, Failure)


@dataclass(slots=True)
class ConvergenceReport:
    dry_run: bool = False
    changes: list[ResourceChange] = field(default_factory=list)
    results: list[OperationResult] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(result.failed for result in self.results)

    @property
    def pending_changes(self) -> list[ResourceChange]:
        return [change for change in self.changes if change.action is not ChangeAction.NOOP]

    def diagnostics(self) -> list[tuple[str, Diagnostic]]:
        return [
            (result.address, diagnostic)
            for result in self.results
            for diagnostic in outcome_diagnostics(result.outcome)
        ]

    @property
    def warnings(self) -> list[tuple[str, Diagnostic]]:
        return [
            (address, diagnostic)
            for address, diagnostic in self.diagnostics()
            if diagnostic.severity is Severity.WARNING
        ]

    @property
    def errors(self) -> list[tuple[str, Diagnostic]]:
        return [
            (address, diagnostic)
            for address, diagnostic in self.diagnostics()
            if diagnostic.severity is Severity.ERROR
        ]


def carry_computed(
    schema: ResourceSchema, prior: ResourceState, planned: ResourceState
) -> ResourceState:
    """Copy remote-owned attributes (id, token, ...) from ``prior`` into ``planned``."""

    carried = {name: getattr(prior, name) for name in schema.computed_names()}
    return replace(planned, **carried)


def changed_attributes(
    schema: ResourceSchema, prior: ResourceState, planned: ResourceState
) -> tuple[str, ...]:
    return tuple(
        name
        for name in schema.declared_names()
        if getattr(prior, name) != getattr(planned, name)
    )


def plan_changes(
    declared: Sequence[DeclaredResource],
    tracked: Sequence[TrackedResource],
    resources: ResourceRegistry,
) -> list[ResourceChange]:
    """Return the ordered list of changes that moves ``tracked`` to ``declared``."""

    declared_by_address = {entry.address: entry for entry in declared}
    tracked_by_address = {entry.address: entry for entry in tracked}

    deletions: list[ResourceChange] = []
    for address, current in tracked_by_address.items():
        if address not in declared_by_address:
            deletions.append(
                ResourceChange(
                    address=address,
                    kind=current.kind,
                    action=ChangeAction.DELETE,
                    prior=current.state,
                )
            )

    others: list[ResourceChange] = []
    for address, entry in declared_by_address.items():
        current = tracked_by_address.get(address)
        if current is None:
            others.append(
                ResourceChange(
                    address=address,
                    kind=entry.kind,
                    action=ChangeAction.CREATE,
                    planned=entry.state,
                )
            )
            continue
        if current.kind is not entry.kind:
            raise ValueError(
                f"Address {address!r} is tracked as {current.kind} but declared as {entry.kind}"
            )

        schema = resources[entry.kind].describe_schema()
        planned = carry_computed(schema, current.state, entry.state)
        changed = changed_attributes(schema, current.state, planned)
        if not changed:
            action = ChangeAction.NOOP
        elif set(changed) & set(schema.replace_names()):
            action = ChangeAction.REPLACE
        else:
            action = ChangeAction.UPDATE
        others.append(
            ResourceChange(
                address=address,
                kind=entry.kind,
                action=action,
                prior=current.state,
                planned=planned,
                changed=changed,
            )
        )

    deletions.sort(key=lambda change: (-KIND_ORDER.index(change.kind), change.address))
    others.sort(key=lambda change: (KIND_ORDER.index(change.kind), change.address))
    return deletions + others


async def refresh(
    tracked: Sequence[TrackedResource],
    resources: ResourceRegistry,
) -> tuple[list[TrackedResource], list[OperationResult]]:
    """Read every tracked resource, returning the refreshed state and the read results."""

    refreshed: list[TrackedResource] = []
    results: list[OperationResult] = []
    for entry in tracked:
        outcome = await resources[entry.kind].read(entry.state)
        if isinstance(outcome, Failure):
            refreshed.append(entry)
            status = ResourceStatus.MANAGED
        elif outcome.state is None:
            status = ResourceStatus.UNMANAGED
        else:
            refreshed.append(TrackedResource(entry.address, entry.kind, outcome.state))
            status = ResourceStatus.MANAGED
        results.append(
            OperationResult(
                address=entry.address,
                kind=entry.kind,
                operation=Operation.READ,
                outcome=outcome,
                status=status,
            )
        )
    return refreshed, results


async def converge(
    declared: Sequence[DeclaredResource],
    *,
    resources: ResourceRegistry,
    unit_of_work_factory: UnitOfWorkFactory,
    dry_run: bool = False,
) -> ConvergenceReport:
    """Refresh, plan and (unless ``dry_run``) apply; see the module docstring."""

    report = ConvergenceReport(dry_run=dry_run)
    with unit_of_work_factory() as uow:
        tracked = uow.repositories.resources.list_all()

    refreshed, read_results = await refresh(tracked, resources)
    report.results.extend(read_results)
    if report.has_errors:
        log.error("Refresh failed for at least one resource; no changes applied")
        return report

    if not dry_run:
        _persist_refresh(tracked, refreshed, unit_of_work_factory)

    report.changes = plan_changes(declared, refreshed, resources)
    log.info(
        "Planned %s change(s) for %s declared resource(s)",
        len(report.pending_changes),
        len(declared),
    )
    if dry_run:
        return report

    for change in report.pending_changes:
        report.results.extend(await _apply_change(change, resources, unit_of_work_factory))
    return report


async def adopt(
    declared: DeclaredResource,
    identifier: str,
    *,
    resources: ResourceRegistry,
    unit_of_work_factory: UnitOfWorkFactory,
) -> OperationResult:
    """Import an existing remote resource by identifier and start tracking it.

    The identifier alone cannot address a graph remotely, so the identity
    attributes (those that force replacement) are taken from the declaration
    before the first read.
    """

    resource = resources[declared.kind]
    schema = resource.describe_schema()
    imported = resource.import_state(identifier)
    identity = {name: getattr(declared.state, name) for name in schema.replace_names()}
    outcome = await resource.read(replace(imported, **identity))

    status = ResourceStatus.UNMANAGED
    if not isinstance(outcome, Failure) and outcome.state is not None:
        _store(unit_of_work_factory, declared.address, declared.kind, outcome.state)
        status = ResourceStatus.MANAGED
        log.info("Imported %s as %s", declared.address, identifier)
    return OperationResult(
        address=declared.address,
        kind=declared.kind,
        operation=Operation.IMPORT,
        outcome=outcome,
        status=status,
    )


def _persist_refresh(
    tracked: Sequence[TrackedResource],
    refreshed: Sequence[TrackedResource],
    unit_of_work_factory: UnitOfWorkFactory,
) -> None:
    remaining = {entry.address for entry in refreshed}
    with unit_of_work_factory() as uow:
        repository = uow.repositories.resources
        for entry in tracked:
            if entry.address not in remaining:
                repository.remove(entry.address)
        for entry in refreshed:
            repository.save(entry)
        uow.commit()


async def _apply_change(
    change: ResourceChange,
    resources: ResourceRegistry,
    unit_of_work_factory: UnitOfWorkFactory,
) -> list[OperationResult]:
    resource = resources[change.kind]
    results: list[OperationResult] = []

    if change.action in {ChangeAction.DELETE, ChangeAction.REPLACE}:
        log.info("%s: %s", change.address, ResourceStatus.DELETING)
        outcome = await resource.delete(change.prior)
        results.append(_record(change, Operation.DELETE, outcome, unit_of_work_factory))
        if isinstance(outcome, Failure) or change.action is ChangeAction.DELETE:
            return results

    if change.action in {ChangeAction.CREATE, ChangeAction.REPLACE}:
        log.info("%s: %s", change.address, ResourceStatus.CREATING)
        outcome = await resource.create(change.planned)
        results.append(_record(change, Operation.CREATE, outcome, unit_of_work_factory))
    elif change.action is ChangeAction.UPDATE:
        log.info("%s: %s (%s)", change.address, ResourceStatus.UPDATING, ", ".join(change.changed))
        outcome = await resource.update(change.prior, change.planned)
        results.append(_record(change, Operation.UPDATE, outcome, unit_of_work_factory))
    return results


def _record(
    change: ResourceChange,
    operation: Operation,
    outcome: ReconcileOutcome[Any],
    unit_of_work_factory: UnitOfWorkFactory,
) -> OperationResult:
    if isinstance(outcome, Failure):
        log.error("%s: %s failed: %s", change.address, operation, outcome.error)
        # a failed delete of a replacement leaves the old resource in place
        managed = change.prior is not None and operation is not Operation.CREATE
        status = ResourceStatus.MANAGED if managed else ResourceStatus.UNMANAGED
    else:
        _store(unit_of_work_factory, change.address, change.kind, outcome.state)
        status = ResourceStatus.MANAGED if outcome.state is not None else ResourceStatus.UNMANAGED
        for warning in outcome.warnings:
            log.warning("%s: %s", change.address, warning)
    return OperationResult(
        address=change.address,
        kind=change.kind,
        operation=operation,
        outcome=outcome,
        status=status,
    )


def _store(
    unit_of_work_factory: UnitOfWorkFactory,
    address: str,
    kind: ResourceKind,
    state: ResourceState | None,
) -> None:
    with unit_of_work_factory() as uow:
        repository = uow.repositories.resources
        if state is None:
            repository.remove(address)
        else:
            repository.save(TrackedResource(address, kind, state))
        uow.commit()
