"""SQLAlchemy table metadata for the local catalog and order store.

Domain records are frozen, so rows are translated explicitly instead of mapped
imperatively.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

from invoicematch.domain.model import OrderLinePayload, OrderPayload, Product

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

product_table = Table(
    "product",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("sku", String, nullable=False),
    Column("name", String, nullable=False),
    Column("manufacturer_ref", String, nullable=True, index=True),
    Column("description", Text, nullable=True),
    Column("purchase_price", Float, nullable=False, default=0.0),
    Column("sale_price", Float, nullable=False, default=0.0),
    Column("tax_rate", Float, nullable=False, default=0.0),
    Column("margin_rate", Float, nullable=False, default=0.0),
    Column("created_at", UTCDateTime, nullable=False, default=lambda: datetime.now(UTC)),
    UniqueConstraint("sku"),
)

purchase_order_table = Table(
    "purchase_order",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("supplier_id", String, nullable=True),
    Column("order_date", Date, nullable=True),
    Column("expected_date", Date, nullable=True),
    Column("notes", Text, nullable=True),
    Column("created_at", UTCDateTime, nullable=False, default=lambda: datetime.now(UTC)),
)

purchase_order_line_table = Table(
    "purchase_order_line",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "order_id",
        String(32),
        ForeignKey("purchase_order.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("position", Integer, nullable=False),
    Column("product_id", String(32), nullable=False),
    Column("quantity", Float, nullable=False),
    Column("unit_price", Float, nullable=False),
    Column("tax_rate", Float, nullable=False, default=0.0),
    UniqueConstraint("order_id", "position"),
)


def product_values(product: Product) -> dict[str, object]:
    return {
        "id": product.id,
        "sku": product.sku or product.manufacturer_ref or product.id,
        "name": product.name,
        "manufacturer_ref": product.manufacturer_ref,
        "description": product.description,
        "purchase_price": product.purchase_price,
        "sale_price": product.sale_price,
        "tax_rate": product.tax_rate,
        "margin_rate": product.margin_rate,
    }


def product_from_row(row: Mapping[str, object]) -> Product:
    return Product(
        id=str(row["id"]),
        name=str(row["name"]),
        sku=_optional_str(row["sku"]),
        manufacturer_ref=_optional_str(row["manufacturer_ref"]),
        description=_optional_str(row["description"]),
        purchase_price=_float(row["purchase_price"]),
        sale_price=_float(row["sale_price"]),
        tax_rate=_float(row["tax_rate"]),
        margin_rate=_float(row["margin_rate"]),
    )


def order_from_rows(
    order_row: Mapping[str, object],
    line_rows: Sequence[Mapping[str, object]],
) -> OrderPayload:
    lines = tuple(
        OrderLinePayload(
            product_id=str(row["product_id"]),
            quantity=_float(row["quantity"]),
            unit_price=_float(row["unit_price"]),
            tax_rate=_float(row["tax_rate"]),
        )
        for row in sorted(line_rows, key=lambda row: _int(row["position"]))
    )
    return OrderPayload(
        lines=lines,
        supplier_id=_optional_str(order_row["supplier_id"]),
        order_date=order_row["order_date"],  # type: ignore[arg-type]
        expected_date=order_row["expected_date"],  # type: ignore[arg-type]
        notes=_optional_str(order_row["notes"]),
    )


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


def _float(value: object) -> float:
    return float(value) if isinstance(value, int | float) else 0.0


def _int(value: object) -> int:
    return value if isinstance(value, int) else 0


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the catalog metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
