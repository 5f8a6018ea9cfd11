"""Back-office API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SEARCH_LIMIT = 50
BACKOFFICE_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class BackofficeConfig:
    """Holds the product/purchase API settings."""

    base_url: str
    resilience: ResilienceConfig
    search_limit: int = DEFAULT_SEARCH_LIMIT


def get_search_limit() -> int:
    return env_int("INVOICEMATCH_SEARCH_LIMIT", DEFAULT_SEARCH_LIMIT)


def get_backoffice_config(*, resilience: ResilienceConfig | None = None) -> BackofficeConfig:
    values = require_env_vars(("INVOICEMATCH_API_URL",))
    base_url = values["INVOICEMATCH_API_URL"].rstrip("/")
    return BackofficeConfig(
        base_url=base_url,
        search_limit=get_search_limit(),
        resilience=resilience
        or ResilienceConfig(
            name="backoffice",
            base_url=base_url,
            timeout_seconds=BACKOFFICE_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers={"Accept": "application/json"},
        ),
    )
