"""Error taxonomy shared by the reconcilers and the platform adapter.

Local errors (``ValidationError``, ``CallerContractError``) are raised before any
remote call. ``ApiError`` kinds describe classified remote outcomes; the adapter
hands them back as values so that soft failures can travel next to a payload.
"""

from __future__ import annotations


class ReconcileError(Exception):
    """Base class for everything a lifecycle call can report as an error."""


class ValidationError(ReconcileError, ValueError):
    """Declared input is malformed; never sent to the remote system."""


class LabelMatcherError(ValidationError):
    """A label matcher is not of the form ``key=value``."""

    def __init__(self, matcher: str, message: str) -> None:
        super().__init__(f"Invalid label matcher {matcher!r}: {message}")
        self.matcher = matcher


class CallerContractError(ReconcileError):
    """The caller invoked a lifecycle method with an unusable state (e.g. no id)."""


class ResourceNotConfiguredError(ReconcileError, RuntimeError):
    """A reconciler was used before a platform client was configured."""


class ApiError(ReconcileError):
    """Classified failure of one remote call."""

    def __init__(
        self,
        cause: BaseException | str,
        *,
        reason: str,
        status: str,
    ) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.reason = reason
        self.status = status
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.reason} failed ({self.status}): {self.cause}"


class NotFoundError(ApiError):
    """The remote resource does not exist."""


class CompositionFailedError(ApiError):
    """The mutation was accepted but composing the graph failed."""


class GenericApiError(ApiError):
    """Any other non-OK status, transport failure or malformed response."""


__all__ = [
    "ApiError",
    "CallerContractError",
    "CompositionFailedError",
    "GenericApiError",
    "LabelMatcherError",
    "NotFoundError",
    "ReconcileError",
    "ResourceNotConfiguredError",
    "ValidationError",
]
