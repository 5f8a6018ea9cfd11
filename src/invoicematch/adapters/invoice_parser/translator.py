"""Translate parser-service payloads into parsed invoices."""

from __future__ import annotations

from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.domain.errors import ParseError
from invoicematch.domain.model import ParsedInvoice, RawInvoiceLine

if TYPE_CHECKING:
    from .schema import InvoiceItemPayload, ParseResponse

log = getLogger(__name__)


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        log.warning("Ignoring unparseable invoice date %r", value)
        return None


def parse_line(item: InvoiceItemPayload, *, tax_rate: float) -> RawInvoiceLine | None:
    """Return ``None`` for rows that carry neither a reference nor a description."""

    product = item.product
    ref = product.manufacturer_ref if product else None
    description = product.description if product else None
    if ref is None and description is None:
        return None
    return RawInvoiceLine(
        key=ref or "",
        description=description or "",
        quantity=item.quantity or 1.0,
        unit_price=item.unit_price or 0.0,
        tax_rate=tax_rate,
    )


def parse_invoice(response: ParseResponse) -> ParsedInvoice:
    if not response.success or response.invoice is None:
        detail = response.error or response.message or "no invoice in response"
        raise ParseError(f"Invoice could not be parsed: {detail}")

    invoice = response.invoice
    tax_rate = invoice.tax_rate or 0.0
    lines: list[RawInvoiceLine] = []
    for position, item in enumerate(invoice.items, start=1):
        line = parse_line(item, tax_rate=tax_rate)
        if line is None:
            log.warning("Dropping invoice row %d: no reference and no description", position)
            continue
        lines.append(line)

    return ParsedInvoice(
        lines=tuple(lines),
        order_date=_parse_date(invoice.order_date),
        expected_date=_parse_date(invoice.expected_date),
        invoice_reference=invoice.invoice_number or invoice.invoice_reference,
        order_number=invoice.order_number,
    )
