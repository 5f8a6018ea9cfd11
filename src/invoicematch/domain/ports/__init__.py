"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogSearcher, ProductCreator
from .ordering import OrderSubmitter
from .parsing import DocumentParser, DocumentSource
from .persistence import ProductRepository, PurchaseOrderRepository, Repository
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogSearcher",
    "CatalogUnitOfWork",
    "DocumentParser",
    "DocumentSource",
    "OrderSubmitter",
    "ProductCreator",
    "ProductRepository",
    "PurchaseOrderRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
