from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from invoicematch.domain.errors import ParseError
from invoicematch.domain.model import ParsedInvoice, Product, RawInvoiceLine

if TYPE_CHECKING:
    from pathlib import Path

    from invoicematch.domain.model import OrderPayload, ProductSeed


def make_product(
    product_id: str,
    ref: str | None,
    *,
    name: str | None = None,
    purchase_price: float = 10.0,
) -> Product:
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        manufacturer_ref=ref,
        sku=f"SKU-{product_id}",
        purchase_price=purchase_price,
    )


def make_line(
    key: str,
    *,
    description: str = "",
    quantity: float = 1.0,
    unit_price: float = 10.0,
    tax_rate: float = 0.0,
) -> RawInvoiceLine:
    return RawInvoiceLine(
        key=key,
        description=description,
        quantity=quantity,
        unit_price=unit_price,
        tax_rate=tax_rate,
    )


@dataclass
class FakeCatalog:
    """Substring search over an in-memory product list, like the back-office search box."""

    products: list[Product] = field(default_factory=list[Product])
    errors: dict[str, Exception] = field(default_factory=dict[str, Exception])
    queries: list[tuple[str, int]] = field(default_factory=list[tuple[str, int]])

    async def search(self, key: str, *, limit: int) -> list[Product]:
        self.queries.append((key, limit))
        if key in self.errors:
            raise self.errors[key]
        needle = key.lower()
        hits = [
            product
            for product in self.products
            if needle in (product.manufacturer_ref or "").lower()
            or needle in product.name.lower()
        ]
        return hits[:limit]


@dataclass
class FakeCreator:
    """Creates products in ``catalog``; ``failures`` are raised first, one per call."""

    catalog: FakeCatalog = field(default_factory=FakeCatalog)
    failures: list[Exception] = field(default_factory=list[Exception])
    gate: asyncio.Event | None = None
    seeds: list[ProductSeed] = field(default_factory=list["ProductSeed"])

    async def create(self, seed: ProductSeed) -> Product:
        self.seeds.append(seed)
        if self.gate is not None:
            await self.gate.wait()
        if self.failures:
            raise self.failures.pop(0)
        product = Product(
            id=f"new-{len(self.seeds)}",
            name=seed.name,
            manufacturer_ref=seed.manufacturer_ref,
            sku=seed.sku or seed.manufacturer_ref,
            purchase_price=seed.purchase_price,
            sale_price=seed.sale_price,
            tax_rate=seed.tax_rate,
            margin_rate=seed.margin_rate,
        )
        self.catalog.products.append(product)
        return product


@dataclass
class FakeParser:
    invoice: ParsedInvoice = field(default_factory=ParsedInvoice)
    error: ParseError | None = None
    sources: list[Path] = field(default_factory=list["Path"])

    async def parse(self, source: Path) -> ParsedInvoice:
        self.sources.append(source)
        if self.error is not None:
            raise self.error
        return self.invoice


@dataclass
class FakeSubmitter:
    order_id: str = "order-1"
    error: Exception | None = None
    payloads: list[OrderPayload] = field(default_factory=list["OrderPayload"])

    async def submit(self, payload: OrderPayload) -> str:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.order_id
