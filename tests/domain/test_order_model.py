from __future__ import annotations

import json
from datetime import date

import pytest

from invoicematch.domain.model import (
    BoundLine,
    CreationLine,
    LineState,
    OrderHeader,
    OrderLinePayload,
    OrderPayload,
    ParsedInvoice,
    SelectionLine,
    bind_line,
    creation_line_for,
)
from tests.support.catalog import make_product


def test_selection_line_requires_candidates() -> None:
    with pytest.raises(ValueError, match="candidate"):
        SelectionLine(index=0, quantity=1, unit_price=1, key="A", description="", candidates=())


def test_line_states_follow_the_variant() -> None:
    selection = SelectionLine(
        index=0,
        quantity=1,
        unit_price=1,
        key="A",
        description="",
        candidates=(make_product("p", "A"),),
    )
    creation = CreationLine(index=1, quantity=1, unit_price=1, key="B", description="")

    assert selection.state is LineState.NEEDS_SELECTION
    assert creation.state is LineState.NEEDS_CREATION
    assert bind_line(creation, "p").state is LineState.BOUND


def test_bind_line_preserves_index_and_amounts() -> None:
    creation = CreationLine(
        index=4,
        quantity=3,
        unit_price=2.5,
        tax_rate=10,
        key="B",
        description="Bolt",
    )

    bound = bind_line(creation, "p-1")

    assert bound == BoundLine(index=4, quantity=3, unit_price=2.5, tax_rate=10, product_id="p-1")


def test_creation_line_for_drops_candidates() -> None:
    selection = SelectionLine(
        index=2,
        quantity=5,
        unit_price=1.5,
        tax_rate=20,
        key="A",
        description="Washer",
        candidates=(make_product("p", "A"),),
    )

    creation = creation_line_for(selection)

    assert creation == CreationLine(
        index=2,
        quantity=5,
        unit_price=1.5,
        tax_rate=20,
        key="A",
        description="Washer",
    )
    assert creation.state is LineState.NEEDS_CREATION


def test_header_merge_keeps_existing_values_when_document_is_silent() -> None:
    header = OrderHeader(order_date=date(2024, 1, 1), invoice_reference="INV-1")

    merged = header.merged_with(ParsedInvoice(expected_date=date(2024, 1, 9)))

    assert merged.order_date == date(2024, 1, 1)
    assert merged.expected_date == date(2024, 1, 9)
    assert merged.invoice_reference == "INV-1"
    assert merged.notes is None


def test_header_merge_falls_back_to_order_number() -> None:
    merged = OrderHeader().merged_with(ParsedInvoice(order_number="PO-88"))

    assert merged.invoice_reference == "PO-88"
    assert merged.notes == "Order number: PO-88"


def test_header_merge_prefers_invoice_reference() -> None:
    merged = OrderHeader(notes="Fragile").merged_with(
        ParsedInvoice(invoice_reference="INV-2", order_number="PO-1")
    )

    assert merged.invoice_reference == "INV-2"
    assert merged.notes == "Fragile"


def test_payload_omits_empty_optional_fields() -> None:
    payload = OrderPayload(
        lines=(OrderLinePayload(product_id="a", quantity=1, unit_price=2, tax_rate=0),),
    )

    assert payload.to_dict() == {
        "items": [{"productId": "a", "quantity": 1, "unitPrice": 2, "taxRate": 0}],
    }


def test_payload_json_is_stable() -> None:
    payload = OrderPayload(
        lines=(OrderLinePayload(product_id="a", quantity=1, unit_price=2, tax_rate=0),),
        supplier_id="s",
        order_date=date(2024, 2, 29),
        notes="n",
    )

    text = payload.to_json()

    assert json.loads(text)["orderDate"] == "2024-02-29"
    assert text.index('"items"') < text.index('"notes"') < text.index('"supplierId"')
    assert " " not in text
