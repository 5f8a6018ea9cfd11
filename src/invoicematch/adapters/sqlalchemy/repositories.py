"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import exists, func, insert, or_, select

from invoicematch.adapters.sqlalchemy.mappings import (
    order_from_rows,
    product_from_row,
    product_table,
    product_values,
    purchase_order_line_table,
    purchase_order_table,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from invoicematch.domain.model import OrderPayload, Product, ProductId
    from invoicematch.domain.ports import ProductRepository, PurchaseOrderRepository


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"


class SqlAlchemyProductRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Product) -> None:
        self.session.execute(insert(product_table).values(**product_values(entity)))

    def get(self, product_id: ProductId) -> Product | None:
        stmt = select(product_table).where(product_table.c.id == product_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return product_from_row(row) if row is not None else None

    def find_by_manufacturer_ref(self, ref: str, *, limit: int) -> list[Product]:
        stmt = (
            select(product_table)
            .where(product_table.c.manufacturer_ref == ref)
            .order_by(product_table.c.name, product_table.c.id)
            .limit(limit)
        )
        return [product_from_row(row) for row in self.session.execute(stmt).mappings()]

    def search(self, term: str, *, limit: int) -> list[Product]:
        """Case-insensitive substring search over SKU, name and manufacturer reference."""

        pattern = _like_pattern(term)
        stmt = (
            select(product_table)
            .where(
                or_(
                    func.lower(product_table.c.sku).like(pattern, escape="\\"),
                    func.lower(product_table.c.name).like(pattern, escape="\\"),
                    func.lower(product_table.c.manufacturer_ref).like(pattern, escape="\\"),
                )
            )
            .order_by(product_table.c.name, product_table.c.id)
            .limit(limit)
        )
        return [product_from_row(row) for row in self.session.execute(stmt).mappings()]

    def sku_exists(self, sku: str) -> bool:
        stmt = select(exists().where(product_table.c.sku == sku))
        return bool(self.session.execute(stmt).scalar())


class SqlAlchemyPurchaseOrderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, payload: OrderPayload) -> str:
        order_id = uuid.uuid4().hex
        self.session.execute(
            insert(purchase_order_table).values(
                id=order_id,
                supplier_id=payload.supplier_id,
                order_date=payload.order_date,
                expected_date=payload.expected_date,
                notes=payload.notes,
            )
        )
        if payload.lines:
            self.session.execute(
                insert(purchase_order_line_table),
                [
                    {
                        "order_id": order_id,
                        "position": position,
                        "product_id": line.product_id,
                        "quantity": line.quantity,
                        "unit_price": line.unit_price,
                        "tax_rate": line.tax_rate,
                    }
                    for position, line in enumerate(payload.lines)
                ],
            )
        return order_id

    def get(self, order_id: str) -> OrderPayload | None:
        order_stmt = select(purchase_order_table).where(purchase_order_table.c.id == order_id)
        order_row = self.session.execute(order_stmt).mappings().one_or_none()
        if order_row is None:
            return None
        lines_stmt = select(purchase_order_line_table).where(
            purchase_order_line_table.c.order_id == order_id
        )
        line_rows = list(self.session.execute(lines_stmt).mappings())
        return order_from_rows(order_row, line_rows)


if TYPE_CHECKING:
    _product_repo_check: type[ProductRepository] = SqlAlchemyProductRepository
    _order_repo_check: type[PurchaseOrderRepository] = SqlAlchemyPurchaseOrderRepository
