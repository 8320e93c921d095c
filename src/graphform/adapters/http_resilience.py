"""Rate-limited async HTTP client for the control-plane RPC calls.

Each request is sent exactly once: no retries and no response caching, so a
mutation can never be replayed behind the caller's back. The limiter lives
longer than the client: ``PlatformClient`` opens one client per call and hands
every one of them the same limiter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import httpx
from aiolimiter import AsyncLimiter

if TYPE_CHECKING:
    from types import TracebackType

    from graphform.config.http_resilience import ResilienceConfig


def build_limiter(config: ResilienceConfig) -> AsyncLimiter | None:
    if config.ratelimit is None:
        return None
    return AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)


class ClientFactory(Protocol):
    def __call__(
        self, config: ResilienceConfig, *, limiter: AsyncLimiter | None = None
    ) -> ResilientClient: ...


class ResilientClient:
    def __init__(self, config: ResilienceConfig, *, limiter: AsyncLimiter | None = None) -> None:
        self.config = config
        self.limiter = limiter
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            timeout=config.timeout_seconds,
            headers=dict(config.default_headers or {}),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(self, path: str, *, json: object) -> httpx.Response:
        if self.limiter is None:
            return await self._client.post(path, json=json)
        async with self.limiter:
            return await self._client.post(path, json=json)
