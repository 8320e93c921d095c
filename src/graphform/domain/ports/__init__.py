"""Ports (interfaces) the domain depends on."""

from __future__ import annotations

from .persistence import ResourceStateRepository, TrackedResource
from .platform import CallResult, PlatformPort
from .unit_of_work import RepositoryCollection, StateRepositories, StateUnitOfWork, UnitOfWork

__all__ = [
    "CallResult",
    "PlatformPort",
    "RepositoryCollection",
    "ResourceStateRepository",
    "StateRepositories",
    "StateUnitOfWork",
    "TrackedResource",
    "UnitOfWork",
]
