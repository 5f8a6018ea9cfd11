"""Reconciliation session: one order form being filled from supplier documents.

The session owns the line-item list and wires the builder, controller and creation
coordinator together. UI layers talk to the session only.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.config.backoffice import DEFAULT_SEARCH_LIMIT
from invoicematch.config.pricing import PricingConfig
from invoicematch.domain.errors import ValidationError, WorkflowBusyError
from invoicematch.domain.model import BoundLine, LineState, OrderHeader
from invoicematch.domain.pricing import order_totals

from .assemble import assemble_order
from .build import LineItemBuilder
from .classify import MatchClassifier
from .contracts import CreationTask
from .controller import ResolutionController
from .creation import ProductCreationCoordinator
from .queue import build_reconciliation_queue

if TYPE_CHECKING:
    from invoicematch.domain.model import (
        OrderLineItem,
        OrderPayload,
        ProductId,
        ProductSeed,
        WorkflowState,
    )
    from invoicematch.domain.ports import (
        CatalogSearcher,
        DocumentParser,
        DocumentSource,
        OrderSubmitter,
        ProductCreator,
    )
    from invoicematch.domain.pricing import OrderTotals

    from .contracts import DecisionResult, Task
    from .controller import TaskListener

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportReport:
    """What a single document import added to the order form."""

    indices: tuple[int, ...]
    selection_count: int
    creation_count: int
    header: OrderHeader
    first_task: Task | None

    @property
    def line_count(self) -> int:
        return len(self.indices)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionSummary:
    line_count: int
    bound_count: int
    selection_count: int
    creation_count: int
    totals: OrderTotals

    @property
    def unresolved_count(self) -> int:
        return self.line_count - self.bound_count


class ReconciliationSession:
    def __init__(
        self,
        *,
        parser: DocumentParser,
        searcher: CatalogSearcher,
        creator: ProductCreator,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        pricing: PricingConfig | None = None,
        on_task: TaskListener | None = None,
    ) -> None:
        self.parser = parser
        self.items: list[OrderLineItem] = []
        self.header = OrderHeader()
        self._importing = False
        self._builder = LineItemBuilder(MatchClassifier(searcher, search_limit))
        self._controller = ResolutionController(self.items, on_task=on_task)
        self._creation = ProductCreationCoordinator(
            self._controller,
            creator,
            pricing or PricingConfig(),
        )

    @property
    def workflow_state(self) -> WorkflowState:
        return self._controller.workflow_state

    @property
    def skipped_indices(self) -> tuple[int, ...]:
        return tuple(sorted(self._controller.skipped))

    @property
    def pending_indices(self) -> tuple[int, ...]:
        """Lines still waiting for a decision, active task first."""

        return self._controller.state.pending_indices()

    async def import_document(self, source: DocumentSource) -> ImportReport:
        """Parse ``source``, append its lines and start resolving them.

        A ``ParseError`` propagates before anything is appended. Importing while a
        previous workflow still has pending tasks raises ``WorkflowBusyError``.
        """

        if self._importing or not self._controller.state.is_drained:
            raise WorkflowBusyError("A reconciliation workflow is already running")

        self._importing = True
        try:
            invoice = await self.parser.parse(source)
            log.info("Parsed %s: %d line(s)", source, len(invoice.lines))
            new_items = await self._builder.build(invoice.lines, start_index=len(self.items))
            state = build_reconciliation_queue(new_items)
            self.items.extend(new_items)
            self.header = self.header.merged_with(invoice)
            self._controller.load(state)
        finally:
            self._importing = False

        report = ImportReport(
            indices=tuple(item.index for item in new_items),
            selection_count=len(state.selection_queue),
            creation_count=len(state.creation_queue),
            header=self.header,
            first_task=self._controller.advance(),
        )
        log.info(
            "Imported %d line(s): %d awaiting selection, %d awaiting creation",
            report.line_count,
            report.selection_count,
            report.creation_count,
        )
        return report

    def current_task(self) -> Task | None:
        return self._controller.current_task()

    def creation_seed(self) -> ProductSeed | None:
        """Pre-filled creation form for the active creation task, if any."""

        task = self._controller.current_task()
        if not isinstance(task, CreationTask):
            return None
        return self.seed_for(task)

    def seed_for(self, task: CreationTask) -> ProductSeed:
        return self._creation.seed_for(task)

    def resolve_selection(
        self,
        product_id: ProductId,
        *,
        expected_index: int,
    ) -> DecisionResult:
        """Bind the active selection to ``product_id``.

        ``expected_index`` names the line the operator decided on; a decision that
        reaches any other task is rejected as ``stale_task`` and binds nothing.
        """

        return self._controller.select(product_id, expected_index=expected_index)

    async def resolve_creation(
        self,
        seed: ProductSeed | None = None,
        *,
        expected_index: int,
    ) -> DecisionResult:
        return await self._creation.create(seed, expected_index=expected_index)

    def promote_active_selection_to_creation(
        self,
        *,
        expected_index: int,
    ) -> DecisionResult:
        return self._controller.promote_to_creation(expected_index=expected_index)

    def skip_active(self, *, expected_index: int) -> DecisionResult:
        if isinstance(self._controller.current_task(), CreationTask):
            return self._creation.cancel(expected_index=expected_index)
        return self._controller.skip(expected_index=expected_index)

    def bind_line(self, index: int, product_id: ProductId) -> DecisionResult:
        """Bind a skipped or cancelled line by hand."""

        return self._controller.bind_unresolved(index, product_id)

    def add_manual_line(
        self,
        product_id: ProductId,
        *,
        quantity: float = 1.0,
        unit_price: float = 0.0,
        tax_rate: float = 0.0,
    ) -> BoundLine:
        if self._importing:
            raise WorkflowBusyError("Cannot add lines while a document is being imported")
        line = BoundLine(
            index=len(self.items),
            quantity=quantity,
            unit_price=unit_price,
            tax_rate=tax_rate,
            product_id=product_id,
        )
        self.items.append(line)
        log.info("Manual line %d added for product %s", line.index, product_id)
        return line

    def unresolved_count(self) -> int:
        return self._controller.unresolved_count()

    def summary(self) -> SessionSummary:
        states = Counter(item.state for item in self.items)
        return SessionSummary(
            line_count=len(self.items),
            bound_count=states[LineState.BOUND],
            selection_count=states[LineState.NEEDS_SELECTION],
            creation_count=states[LineState.NEEDS_CREATION],
            totals=order_totals(self.items),
        )

    def assemble_order(self, *, supplier_id: str | None = None) -> OrderPayload:
        return assemble_order(self.items, header=self.header, supplier_id=supplier_id)

    async def submit(self, submitter: OrderSubmitter, *, supplier_id: str) -> str:
        """Assemble the order and hand it to ``submitter``; returns the stored order id."""

        supplier = supplier_id.strip()
        if not supplier:
            raise ValidationError("A supplier is required to submit the order")
        payload = self.assemble_order(supplier_id=supplier)
        order_id = await submitter.submit(payload)
        log.info(
            "Submitted order %s with %d line(s), %d unresolved line(s) left out",
            order_id,
            len(payload.lines),
            self.unresolved_count(),
        )
        return order_id
