from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from invoicematch.adapters.sqlalchemy import (
    SqlAlchemyProductRepository,
    SqlAlchemyPurchaseOrderRepository,
)
from invoicematch.domain.model import OrderLinePayload, OrderPayload
from tests.support.catalog import make_product

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def _seeded(session: Session) -> SqlAlchemyProductRepository:
    repo = SqlAlchemyProductRepository(session)
    repo.add(make_product("p1", "REF-100", name="Brake pad"))
    repo.add(make_product("p2", "REF-100", name="Anti-squeal pad"))
    repo.add(make_product("p3", "ref-100", name="Lowercase ref"))
    repo.add(make_product("p4", "X_9%", name="Odd characters"))
    session.commit()
    return repo


def test_get_round_trips_product(sqlite_session: Session) -> None:
    repo = _seeded(sqlite_session)

    product = repo.get("p1")

    assert product == make_product("p1", "REF-100", name="Brake pad")
    assert repo.get("missing") is None


def test_find_by_manufacturer_ref_is_exact_and_ordered(sqlite_session: Session) -> None:
    repo = _seeded(sqlite_session)

    found = repo.find_by_manufacturer_ref("REF-100", limit=10)

    assert [product.id for product in found] == ["p2", "p1"]
    assert [p.id for p in repo.find_by_manufacturer_ref("REF-100", limit=1)] == ["p2"]


def test_search_is_case_insensitive_substring(sqlite_session: Session) -> None:
    repo = _seeded(sqlite_session)

    assert {p.id for p in repo.search("ref-1", limit=10)} == {"p1", "p2", "p3"}
    assert [p.id for p in repo.search("SQUEAL", limit=10)] == ["p2"]
    assert [p.id for p in repo.search("sku-p4", limit=10)] == ["p4"]


def test_search_escapes_like_wildcards(sqlite_session: Session) -> None:
    repo = _seeded(sqlite_session)

    assert [p.id for p in repo.search("_9%", limit=10)] == ["p4"]
    assert repo.search("%", limit=10) == [repo.get("p4")]


def test_sku_exists(sqlite_session: Session) -> None:
    repo = _seeded(sqlite_session)

    assert repo.sku_exists("SKU-p1")
    assert not repo.sku_exists("SKU-none")


def test_purchase_order_round_trip(sqlite_session: Session) -> None:
    repo = SqlAlchemyPurchaseOrderRepository(sqlite_session)
    payload = OrderPayload(
        lines=(
            OrderLinePayload(product_id="p2", quantity=1, unit_price=4.5, tax_rate=20),
            OrderLinePayload(product_id="p1", quantity=3, unit_price=2.0, tax_rate=0),
        ),
        supplier_id="sup-1",
        order_date=date(2024, 3, 1),
        notes="Invoice reference: INV-7",
    )

    order_id = repo.add(payload)
    sqlite_session.commit()

    assert len(order_id) == 32
    assert repo.get(order_id) == payload
    assert repo.get("unknown") is None
