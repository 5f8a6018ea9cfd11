"""Order line items and the submittable order payload.

A line item is a tagged union over three states. Each state only carries the fields that
are meaningful for it, so a bound line can never hold a pending key and a line awaiting
selection always has candidates.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .enums import LineState

if TYPE_CHECKING:
    from datetime import date

    from .catalog import Product, ProductId
    from .invoice import ParsedInvoice


@dataclass(frozen=True, slots=True, kw_only=True)
class _LineItem:
    index: int
    quantity: float
    unit_price: float
    tax_rate: float = 0.0

    STATE: ClassVar[LineState]

    @property
    def state(self) -> LineState:
        return self.STATE


@dataclass(frozen=True, slots=True, kw_only=True)
class BoundLine(_LineItem):
    """Line associated with a concrete catalog product."""

    product_id: ProductId

    STATE: ClassVar[LineState] = LineState.BOUND


@dataclass(frozen=True, slots=True, kw_only=True)
class SelectionLine(_LineItem):
    """Line with catalog matches waiting for operator confirmation."""

    key: str
    description: str
    candidates: tuple[Product, ...]

    STATE: ClassVar[LineState] = LineState.NEEDS_SELECTION

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError("Selection line must include at least one candidate")


@dataclass(frozen=True, slots=True, kw_only=True)
class CreationLine(_LineItem):
    """Line without catalog match; a product has to be created for it."""

    key: str
    description: str

    STATE: ClassVar[LineState] = LineState.NEEDS_CREATION


type OrderLineItem = BoundLine | SelectionLine | CreationLine
type PendingLine = SelectionLine | CreationLine


def bind_line(line: PendingLine, product_id: ProductId) -> BoundLine:
    """Return the bound counterpart of ``line``; index and amounts are preserved."""

    return BoundLine(
        index=line.index,
        quantity=line.quantity,
        unit_price=line.unit_price,
        tax_rate=line.tax_rate,
        product_id=product_id,
    )


def creation_line_for(line: SelectionLine) -> CreationLine:
    """Drop the candidates of ``line``; used when the operator asks for a new product."""

    return CreationLine(
        index=line.index,
        quantity=line.quantity,
        unit_price=line.unit_price,
        tax_rate=line.tax_rate,
        key=line.key,
        description=line.description,
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderHeader:
    """Document-level fields captured on import."""

    order_date: date | None = None
    expected_date: date | None = None
    invoice_reference: str | None = None
    notes: str | None = None

    def merged_with(self, invoice: ParsedInvoice) -> OrderHeader:
        reference = invoice.invoice_reference or invoice.order_number or self.invoice_reference
        notes = self.notes
        if invoice.order_number and not invoice.invoice_reference:
            order_note = f"Order number: {invoice.order_number}"
            notes = f"{notes}\n{order_note}" if notes else order_note
        return OrderHeader(
            order_date=invoice.order_date or self.order_date,
            expected_date=invoice.expected_date or self.expected_date,
            invoice_reference=reference,
            notes=notes,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderLinePayload:
    product_id: ProductId
    quantity: float
    unit_price: float
    tax_rate: float

    def to_dict(self) -> dict[str, object]:
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "taxRate": self.tax_rate,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderPayload:
    lines: tuple[OrderLinePayload, ...]
    supplier_id: str | None = None
    order_date: date | None = None
    expected_date: date | None = None
    notes: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"items": [line.to_dict() for line in self.lines]}
        if self.supplier_id is not None:
            payload["supplierId"] = self.supplier_id
        if self.order_date is not None:
            payload["orderDate"] = self.order_date.isoformat()
        if self.expected_date is not None:
            payload["expectedDate"] = self.expected_date.isoformat()
        if self.notes:
            payload["notes"] = self.notes
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
