from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003
from datetime import date

import httpx
import pytest

from invoicematch.adapters.backoffice import BackofficeClient
from invoicematch.adapters.backoffice.client import PRODUCTS_PATH, PURCHASE_ORDERS_PATH
from invoicematch.config.backoffice import BackofficeConfig
from invoicematch.domain.errors import (
    CatalogLookupError,
    CreationError,
    CreationNetworkError,
    CreationValidationError,
    SubmissionError,
)
from invoicematch.domain.model import OrderLinePayload, OrderPayload, ProductSeed
from tests.support.http import BASE_URL, make_client_factory, make_resilience, raising_handler


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> BackofficeClient:
    config = BackofficeConfig(base_url=BASE_URL, resilience=make_resilience("backoffice"))
    return BackofficeClient(config=config, client_factory=make_client_factory(handler))


def _seed(**changes: object) -> ProductSeed:
    seed = ProductSeed(
        manufacturer_ref="REF3",
        name="Oil filter",
        purchase_price=10.0,
        tax_rate=20.0,
        margin_rate=40.0,
        sale_price=16.8,
    )
    return seed.with_changes(**changes)


def _product_json(product_id: str, ref: str) -> dict[str, object]:
    return {
        "_id": product_id,
        "name": f"Product {product_id}",
        "sku": f"SKU-{product_id}",
        "manufacturerRef": ref,
        "purchasePrice": 10,
        "salePrice": None,
    }


def test_search_sends_query_and_parses_products() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "products": [_product_json("p1", "REF1"), _product_json("p2", " REF1 ")],
                "pagination": {"page": 1, "limit": 5, "total": 2, "pages": 1},
            },
        )

    products = asyncio.run(_client(handler).search("REF1", limit=5))

    assert requests[0].method == "GET"
    assert requests[0].url.path == PRODUCTS_PATH
    assert dict(requests[0].url.params) == {"page": "1", "limit": "5", "search": "REF1"}
    assert [product.id for product in products] == ["p1", "p2"]
    assert products[1].manufacturer_ref == "REF1"
    assert products[0].sale_price == 0.0


def test_search_error_status_raises_lookup_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(503, json={"error": "maintenance"})

    with pytest.raises(CatalogLookupError):
        asyncio.run(_client(handler).search("REF1", limit=5))


def test_search_transport_error_raises_lookup_error() -> None:
    client = _client(raising_handler(httpx.ConnectError("connection refused")))

    with pytest.raises(CatalogLookupError, match="connection refused"):
        asyncio.run(client.search("REF1", limit=5))


def test_search_rejects_malformed_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, json={"products": [{"name": "no id"}]})

    with pytest.raises(CatalogLookupError, match="payload"):
        asyncio.run(_client(handler).search("REF1", limit=5))


def test_create_posts_camel_case_body() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == PRODUCTS_PATH
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"product": _product_json("new-1", "REF3")})

    product = asyncio.run(_client(handler).create(_seed()))

    assert product.id == "new-1"
    assert bodies == [
        {
            "sku": "REF3",
            "name": "Oil filter",
            "manufacturerRef": "REF3",
            "purchasePrice": 10.0,
            "salePrice": 16.8,
            "taxRate": 20.0,
            "marginRate": 40.0,
        }
    ]


def test_create_accepts_bare_product_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(201, json=_product_json("new-2", "REF3"))

    product = asyncio.run(_client(handler).create(_seed(sku="OWN-SKU")))

    assert product.id == "new-2"


def test_create_duplicate_sku_is_a_validation_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(409, json={"error": "SKU already exists"})

    with pytest.raises(CreationValidationError, match="SKU already exists"):
        asyncio.run(_client(handler).create(_seed()))


def test_create_server_error_is_a_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(CreationNetworkError, match="502"):
        asyncio.run(_client(handler).create(_seed()))


def test_create_transport_error_is_a_network_error() -> None:
    client = _client(raising_handler(httpx.ReadTimeout("timed out")))

    with pytest.raises(CreationNetworkError):
        asyncio.run(client.create(_seed()))


def test_create_rejects_incomplete_seed_without_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(201)

    with pytest.raises(CreationValidationError):
        asyncio.run(_client(handler).create(_seed(name="  ")))
    with pytest.raises(CreationValidationError):
        asyncio.run(_client(handler).create(_seed(purchase_price=-1.0)))

    assert calls == []


def test_create_unexpected_payload_is_a_creation_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(201, json={"ok": True})

    with pytest.raises(CreationError) as excinfo:
        asyncio.run(_client(handler).create(_seed()))

    assert not isinstance(excinfo.value, CreationValidationError | CreationNetworkError)


def test_submit_posts_order_and_returns_id() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == PURCHASE_ORDERS_PATH
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"purchaseOrder": {"_id": "po-1", "orderNumber": "PO-1"}})

    payload = OrderPayload(
        lines=(OrderLinePayload(product_id="a", quantity=2, unit_price=3.5, tax_rate=20),),
        supplier_id="sup-1",
        order_date=date(2024, 3, 1),
    )

    order_id = asyncio.run(_client(handler).submit(payload))

    assert order_id == "po-1"
    assert bodies == [payload.to_dict()]


def test_submit_refusal_raises_submission_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(400, json={"message": "supplierId is required"})

    payload = OrderPayload(
        lines=(OrderLinePayload(product_id="a", quantity=1, unit_price=1, tax_rate=0),),
    )

    with pytest.raises(SubmissionError, match="supplierId is required"):
        asyncio.run(_client(handler).submit(payload))
