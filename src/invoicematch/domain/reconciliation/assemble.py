"""Order assembly from the reconciled line items.

Pure function: no side effects, safe to call repeatedly (live line counts, previews).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from invoicematch.domain.errors import ValidationError
from invoicematch.domain.model import BoundLine, OrderLinePayload, OrderPayload

if TYPE_CHECKING:
    from collections.abc import Sequence

    from invoicematch.domain.model import OrderHeader, OrderLineItem


def assemble_order(
    items: Sequence[OrderLineItem],
    *,
    header: OrderHeader | None = None,
    supplier_id: str | None = None,
) -> OrderPayload:
    """Project bound lines into a submittable payload.

    Raises ``ValidationError`` when no line is bound, or when a bound line has a
    non-positive quantity or a negative unit price. ``indices`` lists the offending lines
    (every unresolved line in the empty case).
    """

    bound = sorted(
        (item for item in items if isinstance(item, BoundLine)),
        key=lambda item: item.index,
    )
    if not bound:
        unresolved = tuple(sorted(item.index for item in items))
        raise ValidationError("Order has no resolved lines", indices=unresolved)

    invalid = tuple(item.index for item in bound if item.quantity <= 0 or item.unit_price < 0)
    if invalid:
        listed = ", ".join(str(index + 1) for index in invalid)
        raise ValidationError(
            f"Invalid quantity or unit price on line(s) {listed}",
            indices=invalid,
        )

    lines = tuple(
        OrderLinePayload(
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
        )
        for item in bound
    )
    if header is None:
        return OrderPayload(lines=lines, supplier_id=supplier_id)
    return OrderPayload(
        lines=lines,
        supplier_id=supplier_id,
        order_date=header.order_date,
        expected_date=header.expected_date,
        notes=_notes(header),
    )


def _notes(header: OrderHeader) -> str | None:
    notes = (header.notes or "").strip()
    if header.invoice_reference:
        reference_note = f"Invoice reference: {header.invoice_reference}"
        return f"{reference_note}\n{notes}" if notes else reference_note
    return notes or None
