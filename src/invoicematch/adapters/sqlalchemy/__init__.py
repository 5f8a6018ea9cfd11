"""SQLAlchemy adapter package for the local catalog."""

from __future__ import annotations

from .catalog import LocalCatalog, product_from_seed
from .mappings import create_all_tables, metadata
from .repositories import SqlAlchemyProductRepository, SqlAlchemyPurchaseOrderRepository
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "LocalCatalog",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyProductRepository",
    "SqlAlchemyPurchaseOrderRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "metadata",
    "product_from_seed",
    "shutdown",
    "startup",
]
