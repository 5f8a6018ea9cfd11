"""Turn parsed invoice lines into order line items."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.domain.model import CreationLine, MatchOutcome, SelectionLine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from invoicematch.domain.model import OrderLineItem, RawInvoiceLine

    from .classify import MatchClassifier
    from .contracts import MatchResult

log = getLogger(__name__)


@dataclass(slots=True)
class LineItemBuilder:
    classifier: MatchClassifier

    async def build(
        self,
        lines: Sequence[RawInvoiceLine],
        *,
        start_index: int = 0,
    ) -> list[OrderLineItem]:
        """Classify ``lines`` in document order and return one line item per line.

        Indices continue from ``start_index`` so that lines appended to an existing
        order keep the positions already handed out.
        """

        items: list[OrderLineItem] = []
        for offset, line in enumerate(lines):
            index = start_index + offset
            if not line.key.strip():
                log.info("Line %d has no reference, queued for creation", index)
                items.append(_creation_line(line, index=index))
                continue
            result = await self.classifier.classify(line.key)
            items.append(line_item_for(line, result, index=index))
        return items


def line_item_for(line: RawInvoiceLine, result: MatchResult, *, index: int) -> OrderLineItem:
    # single matches also go through operator confirmation
    if result.outcome is MatchOutcome.NO_MATCH:
        return _creation_line(line, index=index)
    return SelectionLine(
        index=index,
        quantity=line.quantity,
        unit_price=line.unit_price,
        tax_rate=line.tax_rate,
        key=result.key,
        description=line.description,
        candidates=result.products,
    )


def _creation_line(line: RawInvoiceLine, *, index: int) -> CreationLine:
    return CreationLine(
        index=index,
        quantity=line.quantity,
        unit_price=line.unit_price,
        tax_rate=line.tax_rate,
        key=line.key.strip(),
        description=line.description,
    )
