"""Ports for persisting catalog products and submitted orders."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from invoicematch.domain.model import OrderPayload, Product, ProductId


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ProductRepository(Repository["Product"], Protocol):
    """Persistence contract for catalog products."""

    def get(self, product_id: ProductId) -> Product | None: ...

    def find_by_manufacturer_ref(self, ref: str, *, limit: int) -> Sequence[Product]: ...

    def search(self, term: str, *, limit: int) -> Sequence[Product]: ...

    def sku_exists(self, sku: str) -> bool: ...


@runtime_checkable
class PurchaseOrderRepository(Protocol):
    """Persistence contract for submitted purchase orders."""

    def add(self, payload: OrderPayload) -> str: ...

    def get(self, order_id: str) -> OrderPayload | None: ...
