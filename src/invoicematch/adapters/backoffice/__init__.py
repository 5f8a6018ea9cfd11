"""Back-office catalog and purchase API adapter."""

from __future__ import annotations

from .client import BackofficeClient
from .translator import build_create_request, parse_product

__all__ = [
    "BackofficeClient",
    "build_create_request",
    "parse_product",
]
