"""Parsed supplier invoice structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True, slots=True, kw_only=True)
class RawInvoiceLine:
    """One row of the source document, immutable once received from the parser."""

    key: str
    description: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0
    tax_rate: float = 0.0


@dataclass(frozen=True, slots=True, kw_only=True)
class ParsedInvoice:
    lines: tuple[RawInvoiceLine, ...] = ()
    order_date: date | None = None
    expected_date: date | None = None
    invoice_reference: str | None = None
    order_number: str | None = None
