"""Public interface for the control-plane adapter."""

from __future__ import annotations

from .client import PlatformClient
from .schema import StatusCode

__all__ = ["PlatformClient", "StatusCode"]
