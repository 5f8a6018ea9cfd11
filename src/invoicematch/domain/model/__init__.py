"""Public domain model surface."""

from __future__ import annotations

from invoicematch.domain.model.catalog import Product, ProductId, ProductSeed
from invoicematch.domain.model.enums import (
    DecisionStatus,
    LineState,
    MatchOutcome,
    WorkflowState,
)
from invoicematch.domain.model.invoice import ParsedInvoice, RawInvoiceLine
from invoicematch.domain.model.order import (
    BoundLine,
    CreationLine,
    OrderHeader,
    OrderLineItem,
    OrderLinePayload,
    OrderPayload,
    PendingLine,
    SelectionLine,
    bind_line,
    creation_line_for,
)

__all__ = [
    "BoundLine",
    "CreationLine",
    "DecisionStatus",
    "LineState",
    "MatchOutcome",
    "OrderHeader",
    "OrderLineItem",
    "OrderLinePayload",
    "OrderPayload",
    "ParsedInvoice",
    "PendingLine",
    "Product",
    "ProductId",
    "ProductSeed",
    "RawInvoiceLine",
    "SelectionLine",
    "WorkflowState",
    "bind_line",
    "creation_line_for",
]
