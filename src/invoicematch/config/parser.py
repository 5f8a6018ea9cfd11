"""Invoice-parsing service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import ResilienceConfig

PARSER_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class InvoiceParserConfig:
    base_url: str
    resilience: ResilienceConfig


def get_parser_config(*, resilience: ResilienceConfig | None = None) -> InvoiceParserConfig:
    values = require_env_vars(("INVOICEMATCH_PARSER_URL",))
    base_url = values["INVOICEMATCH_PARSER_URL"].rstrip("/")
    return InvoiceParserConfig(
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="invoice-parser",
            base_url=base_url,
            timeout_seconds=PARSER_TIMEOUT_SECONDS,
            default_headers={"Accept": "application/json"},
        ),
    )
