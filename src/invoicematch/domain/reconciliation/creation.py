"""Product creation for lines without a catalog match."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.config.pricing import PricingConfig
from invoicematch.domain.errors import CreationError, DecisionRejected
from invoicematch.domain.model import ProductSeed
from invoicematch.domain.pricing import derive_sale_price

from .contracts import CreationTask, DecisionResult

if TYPE_CHECKING:
    from invoicematch.domain.ports import ProductCreator

    from .controller import ResolutionController

log = getLogger(__name__)


@dataclass(slots=True)
class ProductCreationCoordinator:
    controller: ResolutionController
    creator: ProductCreator
    pricing: PricingConfig = field(default_factory=PricingConfig)

    def seed_for(self, task: CreationTask) -> ProductSeed:
        """Pre-fill the creation form from the invoice line."""

        description = task.description.strip()
        tax_rate = task.tax_rate if task.tax_rate > 0 else self.pricing.default_tax_rate
        margin_rate = self.pricing.default_margin_rate
        return ProductSeed(
            manufacturer_ref=task.key,
            name=description or task.key,
            description=description,
            purchase_price=task.unit_price,
            tax_rate=tax_rate,
            margin_rate=margin_rate,
            sale_price=derive_sale_price(
                task.unit_price,
                margin_rate=margin_rate,
                tax_rate=tax_rate,
            ),
        )

    async def create(
        self,
        seed: ProductSeed | None = None,
        *,
        expected_index: int | None = None,
    ) -> DecisionResult:
        """Create a product for the active creation task and bind it.

        On failure the task stays active and the queue does not advance.
        """

        task: CreationTask | None = None
        try:
            with self.controller.applying(CreationTask, expected_index=expected_index) as task:
                effective_seed = self._prepare_seed(task, seed)
                product = await self.creator.create(effective_seed)
                self.controller.complete_creation(task, product.id)
        except DecisionRejected as exc:
            return self.controller.rejected(exc)
        except CreationError as exc:
            index = task.index if task is not None else None
            log.warning("Product creation failed for line %s: %s", index, exc)
            return DecisionResult.failed(type(exc).__name__, index=index, error=exc)
        except Exception as exc:
            index = task.index if task is not None else None
            log.exception("Unexpected error while creating product for line %s", index)
            return DecisionResult.failed("unexpected_error", index=index, error=exc)

        log.info("Line %d bound to new product %s (%s)", task.index, product.id, product.name)
        self.controller.advance()
        return DecisionResult.applied("created", index=task.index, product_id=product.id)

    def cancel(self, *, expected_index: int | None = None) -> DecisionResult:
        """Drop the active creation task; the line stays unresolved."""

        try:
            with self.controller.applying(CreationTask, expected_index=expected_index) as task:
                self.controller.drop_creation(task)
        except DecisionRejected as exc:
            return self.controller.rejected(exc)

        log.info("Creation cancelled for line %d, left for manual resolution", task.index)
        self.controller.advance()
        return DecisionResult.applied("cancelled", index=task.index)

    def _prepare_seed(self, task: CreationTask, seed: ProductSeed | None) -> ProductSeed:
        base = seed or self.seed_for(task)
        if task.key and base.manufacturer_ref != task.key:
            # keeps the new product findable by the same exact-key lookup
            return base.with_changes(manufacturer_ref=task.key)
        return base
