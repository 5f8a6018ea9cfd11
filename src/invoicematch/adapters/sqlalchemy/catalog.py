"""Local catalog: search, product creation and order storage on the SQLAlchemy store."""

from __future__ import annotations

import uuid
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from invoicematch.domain.errors import (
    CatalogLookupError,
    CreationError,
    CreationValidationError,
    SubmissionError,
)
from invoicematch.domain.model import Product

from .unit_of_work import SqlAlchemyCatalogUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable

    from invoicematch.domain.model import OrderPayload, ProductSeed
    from invoicematch.domain.ports import (
        CatalogSearcher,
        CatalogUnitOfWork,
        OrderSubmitter,
        ProductCreator,
    )

log = getLogger(__name__)


class LocalCatalog:
    def __init__(
        self,
        uow_factory: Callable[[], CatalogUnitOfWork] = SqlAlchemyCatalogUnitOfWork,
    ) -> None:
        self._uow_factory = uow_factory

    async def search(self, key: str, *, limit: int) -> list[Product]:
        try:
            with self._uow_factory() as uow:
                return list(uow.repositories.products.search(key, limit=limit))
        except SQLAlchemyError as exc:
            raise CatalogLookupError(f"Local product search for {key!r} failed") from exc

    def find_exact(self, ref: str, *, limit: int) -> list[Product]:
        with self._uow_factory() as uow:
            return list(uow.repositories.products.find_by_manufacturer_ref(ref, limit=limit))

    async def create(self, seed: ProductSeed) -> Product:
        product = product_from_seed(seed)
        sku = product.sku or ""
        try:
            with self._uow_factory() as uow:
                if uow.repositories.products.sku_exists(sku):
                    raise CreationValidationError(f"A product with SKU {sku!r} already exists")
                uow.repositories.products.add(product)
                uow.commit()
        except SQLAlchemyError as exc:
            raise CreationError(f"Storing product {sku!r} failed") from exc
        log.info("Created local product %s (%s)", product.id, product.display_name)
        return product

    async def submit(self, payload: OrderPayload) -> str:
        try:
            with self._uow_factory() as uow:
                order_id = uow.repositories.purchase_orders.add(payload)
                uow.commit()
        except SQLAlchemyError as exc:
            raise SubmissionError("Storing the purchase order failed") from exc
        log.info("Stored purchase order %s with %d line(s)", order_id, len(payload.lines))
        return order_id


def product_from_seed(seed: ProductSeed) -> Product:
    name = seed.name.strip()
    ref = seed.manufacturer_ref.strip()
    sku = (seed.sku or ref).strip()
    if not name:
        raise CreationValidationError("Product name is required")
    if not sku:
        raise CreationValidationError("Product SKU or manufacturer reference is required")
    if seed.purchase_price < 0 or seed.sale_price < 0:
        raise CreationValidationError("Prices must not be negative")
    return Product(
        id=uuid.uuid4().hex,
        name=name,
        sku=sku,
        manufacturer_ref=ref or None,
        description=seed.description.strip() or None,
        purchase_price=seed.purchase_price,
        sale_price=seed.sale_price,
        tax_rate=seed.tax_rate,
        margin_rate=seed.margin_rate,
    )


if TYPE_CHECKING:
    _searcher_check: type[CatalogSearcher] = LocalCatalog
    _creator_check: type[ProductCreator] = LocalCatalog
    _submitter_check: type[OrderSubmitter] = LocalCatalog
