# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from graphform.app import (
    apply_manifest,
    import_resource,
    list_state,
    lookup_monograph,
    plan_manifest,
)
from graphform.config import ConfigurationError, configure_logging
from graphform.domain.convergence import ChangeAction
from graphform.domain.diagnostics import Failure, outcome_diagnostics
from graphform.domain.errors import ValidationError
from graphform.domain.resources import SCHEMA_BY_KIND

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from graphform.domain.convergence import ConvergenceReport, OperationResult, ResourceChange
    from graphform.domain.diagnostics import ReconcileOutcome
    from graphform.domain.model import GraphSnapshot

log = logging.getLogger(__name__)

_ACTION_SYMBOLS = {
    ChangeAction.CREATE: "+",
    ChangeAction.UPDATE: "~",
    ChangeAction.REPLACE: "-/+",
    ChangeAction.DELETE: "-",
}

SENSITIVE_PLACEHOLDER = "(sensitive value)"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="graphform",
        description="Reconcile federated graphs, monographs and router tokens",
    )
    parser.add_argument(
        "--state-uri",
        type=str,
        default=None,
        help="SQLAlchemy URI of the state database (defaults to GRAPHFORM_STATE_URI)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log request details and show old and new values of changed attributes",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("plan", help="Show the changes apply would make")
    plan.add_argument("manifest", type=Path, help="Path to the TOML manifest")

    apply = subparsers.add_parser("apply", help="Converge the remote state to the manifest")
    apply.add_argument("manifest", type=Path, help="Path to the TOML manifest")

    adopt = subparsers.add_parser("import", help="Track an existing remote resource")
    adopt.add_argument("manifest", type=Path, help="Path to the TOML manifest")
    adopt.add_argument("address", type=str, help="Manifest address, e.g. federated_graph.orders")
    adopt.add_argument("identifier", type=str, help="Remote identifier of the resource")

    state = subparsers.add_parser("state", help="Inspect tracked state")
    state_sub = state.add_subparsers(dest="state_command", required=True)
    state_sub.add_parser("list", help="List tracked addresses")

    lookup = subparsers.add_parser("lookup-monograph", help="Read an existing monograph")
    lookup.add_argument("name", type=str, help="Name of the monograph")
    lookup.add_argument("--namespace", type=str, default=None, help="Namespace (default: default)")

    return parser.parse_args(list(argv))


def _format_value(change: ResourceChange, name: str, state: object) -> str:
    if name in SCHEMA_BY_KIND[change.kind].sensitive_names():
        return SENSITIVE_PLACEHOLDER
    return repr(getattr(state, name, None))


def _print_report(report: ConvergenceReport, *, show_values: bool = False) -> None:
    pending = report.pending_changes
    if not pending and not report.has_errors:
        print("No changes. Remote state matches the manifest.")
    for change in pending:
        symbol = _ACTION_SYMBOLS[change.action]
        changed = f" ({', '.join(change.changed)})" if change.changed else ""
        print(f"{symbol} {change.address}: {change.action}{changed}")
        if not show_values:
            continue
        for name in change.changed:
            before = _format_value(change, name, change.prior)
            after = _format_value(change, name, change.planned)
            print(f"    {name}: {before} -> {after}")
    for address, diagnostic in report.diagnostics():
        print(f"{address}: {diagnostic}")
    if report.dry_run and pending:
        print(f"Plan: {len(pending)} change(s).")


def _print_operation(result: OperationResult) -> None:
    for diagnostic in outcome_diagnostics(result.outcome):
        print(f"{result.address}: {diagnostic}")
    print(f"{result.address}: {result.status}")


def _print_lookup(outcome: ReconcileOutcome[GraphSnapshot]) -> None:
    for diagnostic in outcome_diagnostics(outcome):
        print(str(diagnostic))
    if isinstance(outcome, Failure) or outcome.state is None:
        return
    snapshot = outcome.state
    print(f"id: {snapshot.id}")
    print(f"name: {snapshot.name}")
    print(f"namespace: {snapshot.namespace}")
    print(f"routing_url: {snapshot.routing_url}")
    if snapshot.label_matchers:
        print(f"label_matchers: {', '.join(snapshot.label_matchers)}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    state_uri: str | None = parsed_args.state_uri

    failed = False
    try:
        if parsed_args.command == "plan":
            report = plan_manifest(parsed_args.manifest, state_uri=state_uri)
            _print_report(report, show_values=parsed_args.verbose)
            failed = report.has_errors
        elif parsed_args.command == "apply":
            report = apply_manifest(parsed_args.manifest, state_uri=state_uri)
            _print_report(report, show_values=parsed_args.verbose)
            failed = report.has_errors
        elif parsed_args.command == "import":
            result = import_resource(
                parsed_args.manifest,
                parsed_args.address,
                parsed_args.identifier,
                state_uri=state_uri,
            )
            _print_operation(result)
            failed = result.failed
        elif parsed_args.command == "state" and parsed_args.state_command == "list":
            for tracked in list_state(state_uri=state_uri):
                print(f"{tracked.address}\t{tracked.kind}\t{tracked.state.id}")
        elif parsed_args.command == "lookup-monograph":
            outcome = lookup_monograph(parsed_args.name, parsed_args.namespace)
            _print_lookup(outcome)
            failed = isinstance(outcome, Failure)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValidationError, ConfigurationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    if failed:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
