"""Outcome types produced by every lifecycle call, and the collector that builds them.

A lifecycle call ends in exactly one of:

- ``Success(state)``: nothing to report
- ``SuccessWithWarnings(state, warnings)``: the call went through, but the operator
  should know about degraded remote conditions (composition failures, drift)
- ``Failure(error, warnings)``: the call stopped; no state may be written

On the success variants ``state is None`` means the resource is no longer managed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import CompositionFailedError

if TYPE_CHECKING:
    from .errors import ApiError


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    summary: str
    detail: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.severity}: {self.summary}: {self.detail}"


@dataclass(frozen=True)
class Success[StateT]:
    state: StateT | None

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return ()

    @property
    def is_failure(self) -> bool:
        return False


@dataclass(frozen=True)
class SuccessWithWarnings[StateT]:
    state: StateT | None
    warnings: tuple[Diagnostic, ...]

    def __post_init__(self) -> None:
        if not self.warnings:
            raise ValueError("SuccessWithWarnings requires at least one warning")

    @property
    def is_failure(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Failure:
    error: Diagnostic
    warnings: tuple[Diagnostic, ...] = ()

    def __post_init__(self) -> None:
        if self.error.severity is not Severity.ERROR:
            raise ValueError("Failure requires an error diagnostic")

    @property
    def is_failure(self) -> bool:
        return True


type ReconcileOutcome[StateT] = Success[StateT] | SuccessWithWarnings[StateT] | Failure


def outcome_diagnostics(outcome: ReconcileOutcome[object]) -> tuple[Diagnostic, ...]:
    """Return every diagnostic attached to ``outcome``, error last."""

    if isinstance(outcome, Failure):
        return (*outcome.warnings, outcome.error)
    return outcome.warnings


@dataclass(slots=True)
class Diagnostics:
    """Collects diagnostics during one lifecycle call and seals them into an outcome."""

    _warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(self._warnings)

    def warn(self, summary: str, detail: str) -> None:
        self._warnings.append(Diagnostic(Severity.WARNING, summary, detail))

    def soften(self, error: ApiError, summary: str) -> bool:
        """Record ``error`` as a warning if it is recoverable; report whether it was."""

        if isinstance(error, CompositionFailedError):
            self._warnings.append(Diagnostic(Severity.WARNING, summary, str(error), error))
            return True
        return False

    def fail(
        self, summary: str, detail: str, *, cause: BaseException | None = None
    ) -> Failure:
        error = Diagnostic(Severity.ERROR, summary, detail, cause)
        return Failure(error, tuple(self._warnings))

    def complete[StateT](self, state: StateT | None) -> ReconcileOutcome[StateT]:
        if self._warnings:
            return SuccessWithWarnings(state, tuple(self._warnings))
        return Success(state)


__all__ = [
    "Diagnostic",
    "Diagnostics",
    "Failure",
    "ReconcileOutcome",
    "Severity",
    "Success",
    "SuccessWithWarnings",
    "outcome_diagnostics",
]
