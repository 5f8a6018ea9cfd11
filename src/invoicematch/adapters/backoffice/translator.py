"""Translate back-office payloads into catalog records and back."""

from __future__ import annotations

from typing import TYPE_CHECKING

from invoicematch.domain.model import Product

from .schema import ProductCreateRequest

if TYPE_CHECKING:
    from invoicematch.domain.model import ProductSeed

    from .schema import ProductPayload


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def parse_product(payload: ProductPayload) -> Product:
    return Product(
        id=payload.id,
        name=payload.name.strip(),
        manufacturer_ref=_clean(payload.manufacturer_ref),
        sku=_clean(payload.sku),
        description=_clean(payload.description),
        purchase_price=payload.purchase_price or 0.0,
        sale_price=payload.sale_price or 0.0,
        tax_rate=payload.tax_rate or 0.0,
        margin_rate=payload.margin_rate or 0.0,
    )


def build_create_request(seed: ProductSeed) -> ProductCreateRequest:
    """The back office requires a SKU; the manufacturer reference stands in when unset."""

    return ProductCreateRequest(
        sku=(seed.sku or seed.manufacturer_ref).strip(),
        name=seed.name.strip(),
        manufacturer_ref=seed.manufacturer_ref.strip(),
        description=seed.description.strip() or None,
        purchase_price=seed.purchase_price,
        sale_price=seed.sale_price,
        tax_rate=seed.tax_rate,
        margin_rate=seed.margin_rate,
    )
