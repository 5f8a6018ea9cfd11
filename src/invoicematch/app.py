"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.adapters.backoffice import BackofficeClient
from invoicematch.adapters.invoice_parser import InvoiceParserClient, JsonInvoiceParser
from invoicematch.adapters.sqlalchemy import LocalCatalog, is_started, startup
from invoicematch.config import (
    get_backoffice_config,
    get_parser_config,
    get_pricing_config,
    get_search_limit,
)
from invoicematch.domain.model import ProductSeed
from invoicematch.domain.pricing import derive_sale_price
from invoicematch.domain.reconciliation import ReconciliationSession

if TYPE_CHECKING:
    from pathlib import Path

    from invoicematch.domain.model import Product
    from invoicematch.domain.ports import (
        CatalogSearcher,
        DocumentParser,
        OrderSubmitter,
        ProductCreator,
    )
    from invoicematch.domain.reconciliation import TaskListener

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Collaborators:
    parser: DocumentParser
    searcher: CatalogSearcher
    creator: ProductCreator
    submitter: OrderSubmitter
    search_limit: int


def build_parser(source: Path) -> DocumentParser:
    """Saved parser responses (``.json``) are read offline; anything else is uploaded."""

    if source.suffix.lower() == ".json":
        return JsonInvoiceParser()
    return InvoiceParserClient(config=get_parser_config())


def ensure_local_store() -> None:
    if not is_started():
        startup()


def remote_collaborators(source: Path) -> Collaborators:
    config = get_backoffice_config()
    backoffice = BackofficeClient(config=config)
    return Collaborators(
        parser=build_parser(source),
        searcher=backoffice,
        creator=backoffice,
        submitter=backoffice,
        search_limit=config.search_limit,
    )


def local_collaborators(source: Path) -> Collaborators:
    ensure_local_store()
    catalog = LocalCatalog()
    return Collaborators(
        parser=build_parser(source),
        searcher=catalog,
        creator=catalog,
        submitter=catalog,
        search_limit=get_search_limit(),
    )


def create_session(
    collaborators: Collaborators,
    *,
    on_task: TaskListener | None = None,
) -> ReconciliationSession:
    return ReconciliationSession(
        parser=collaborators.parser,
        searcher=collaborators.searcher,
        creator=collaborators.creator,
        search_limit=collaborators.search_limit,
        pricing=get_pricing_config(),
        on_task=on_task,
    )


def add_local_product(
    *,
    sku: str,
    name: str,
    manufacturer_ref: str,
    purchase_price: float = 0.0,
    tax_rate: float | None = None,
    margin_rate: float | None = None,
) -> Product:
    """Add a product to the local catalog with a derived sale price."""

    ensure_local_store()
    pricing = get_pricing_config()
    effective_tax = pricing.default_tax_rate if tax_rate is None else tax_rate
    effective_margin = pricing.default_margin_rate if margin_rate is None else margin_rate
    seed = ProductSeed(
        manufacturer_ref=manufacturer_ref,
        name=name,
        sku=sku,
        purchase_price=purchase_price,
        tax_rate=effective_tax,
        margin_rate=effective_margin,
        sale_price=derive_sale_price(
            purchase_price,
            margin_rate=effective_margin,
            tax_rate=effective_tax,
        ),
    )
    return asyncio.run(LocalCatalog().create(seed))


def search_local_products(key: str, *, limit: int | None = None) -> list[Product]:
    """Exact manufacturer-reference lookup in the local catalog."""

    ensure_local_store()
    return LocalCatalog().find_exact(key.strip(), limit=limit or get_search_limit())
