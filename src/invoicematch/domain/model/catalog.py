"""Catalog records as seen by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, replace

type ProductId = str


@dataclass(frozen=True, slots=True, kw_only=True)
class Product:
    """Externally owned catalog record.

    The engine only reads identity and display fields; products are created through the
    catalog port, never mutated in place.
    """

    id: ProductId
    name: str
    manufacturer_ref: str | None = None
    sku: str | None = None
    description: str | None = None
    purchase_price: float = 0.0
    sale_price: float = 0.0
    tax_rate: float = 0.0
    margin_rate: float = 0.0

    @property
    def display_name(self) -> str:
        return f"{self.manufacturer_ref or 'N/A'} - {self.name or 'Unnamed'}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ProductSeed:
    """Pre-filled product creation form derived from an unmatched invoice line."""

    manufacturer_ref: str
    name: str
    description: str = ""
    purchase_price: float = 0.0
    tax_rate: float = 0.0
    margin_rate: float = 0.0
    sale_price: float = 0.0
    sku: str | None = None

    def with_changes(self, **changes: object) -> ProductSeed:
        return replace(self, **changes)  # pyright: ignore[reportArgumentType]
