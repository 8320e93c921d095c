"""Control-plane API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import float_env_var, optional_env_var, optional_float_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

PLATFORM_API_URL = "https://cosmo-cp.wundergraph.com"
PLATFORM_TIMEOUT_SECONDS = 30.0
PLATFORM_RATE_LIMIT_ENV = "GRAPHFORM_MAX_CALLS_PER_SECOND"


@dataclass(frozen=True)
class PlatformConfig:
    """Holds control-plane API configuration values."""

    api_key: str = field(repr=False)
    api_url: str
    resilience: ResilienceConfig


def build_platform_resilience(
    *,
    api_key: str,
    api_url: str,
    timeout_seconds: float = PLATFORM_TIMEOUT_SECONDS,
    ratelimit: RateLimit | None = None,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="platform",
        base_url=api_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        ratelimit=ratelimit,
        default_headers={
            "Authorization": f"Bearer {api_key}",
            "Connect-Protocol-Version": "1",
            "Content-Type": "application/json",
        },
    )


def get_platform_config(*, resilience: ResilienceConfig | None = None) -> PlatformConfig:
    values = require_env_vars(("COSMO_API_KEY",))
    api_key = values["COSMO_API_KEY"]
    api_url = optional_env_var("COSMO_API_URL", PLATFORM_API_URL)
    max_calls = optional_float_env_var(PLATFORM_RATE_LIMIT_ENV)
    return PlatformConfig(
        api_key=api_key,
        api_url=api_url,
        resilience=resilience
        or build_platform_resilience(
            api_key=api_key,
            api_url=api_url,
            timeout_seconds=float_env_var(
                "GRAPHFORM_TIMEOUT_SECONDS", PLATFORM_TIMEOUT_SECONDS
            ),
            ratelimit=RateLimit(max_calls=max_calls) if max_calls is not None else None,
        ),
    )
