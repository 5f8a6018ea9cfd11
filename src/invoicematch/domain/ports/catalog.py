"""Ports for the product catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from invoicematch.domain.model import Product, ProductSeed


@runtime_checkable
class CatalogSearcher(Protocol):
    """Catalog text search.

    Returns an empty sequence for "no match"; failures raise ``CatalogLookupError``.
    """

    async def search(self, key: str, *, limit: int) -> Sequence[Product]: ...


@runtime_checkable
class ProductCreator(Protocol):
    """Creates a catalog product.

    May raise ``CreationValidationError`` (rejected seed) or ``CreationNetworkError``.
    """

    async def create(self, seed: ProductSeed) -> Product: ...
