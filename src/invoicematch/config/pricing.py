"""Pricing defaults applied to product creation seeds."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float

DEFAULT_MARGIN_RATE = 40.0
DEFAULT_TAX_RATE = 0.0


@dataclass(frozen=True, slots=True)
class PricingConfig:
    default_margin_rate: float = DEFAULT_MARGIN_RATE
    default_tax_rate: float = DEFAULT_TAX_RATE


def get_pricing_config() -> PricingConfig:
    return PricingConfig(
        default_margin_rate=env_float("INVOICEMATCH_DEFAULT_MARGIN_RATE", DEFAULT_MARGIN_RATE),
        default_tax_rate=env_float("INVOICEMATCH_DEFAULT_TAX_RATE", DEFAULT_TAX_RATE),
    )
