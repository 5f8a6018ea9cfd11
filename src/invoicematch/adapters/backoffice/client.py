"""HTTP client for the back-office product and purchase API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from invoicematch.adapters.http_resilience import ResilientClient
from invoicematch.domain.errors import (
    CatalogLookupError,
    CreationError,
    CreationNetworkError,
    CreationValidationError,
    SubmissionError,
)

from .schema import (
    ErrorResponse,
    ProductCreateResponse,
    ProductSearchResponse,
    PurchaseOrderResponse,
)
from .translator import build_create_request, parse_product

if TYPE_CHECKING:
    from collections.abc import Callable

    from invoicematch.config.backoffice import BackofficeConfig
    from invoicematch.config.http_resilience import ResilienceConfig
    from invoicematch.domain.model import OrderPayload, Product, ProductSeed
    from invoicematch.domain.ports import CatalogSearcher, OrderSubmitter, ProductCreator

log = getLogger(__name__)

PRODUCTS_PATH = "/api/products"
PURCHASE_ORDERS_PATH = "/api/purchases/orders"

_REJECTED_STATUSES = frozenset({400, 409, 422})


def _error_detail(response: httpx.Response) -> str:
    try:
        return ErrorResponse.model_validate(response.json()).detail
    except (ValueError, PydanticValidationError):
        return response.text[:200] or response.reason_phrase


class BackofficeClient:
    """Catalog search, product creation and order submission against the back office."""

    def __init__(
        self,
        *,
        config: BackofficeConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    async def search(self, key: str, *, limit: int) -> list[Product]:
        params = {"page": "1", "limit": str(limit), "search": key}
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.get(PRODUCTS_PATH, params=params)
                response.raise_for_status()
                payload = ProductSearchResponse.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise CatalogLookupError(f"Product search for {key!r} failed: {exc}") from exc
        except (ValueError, PydanticValidationError) as exc:
            raise CatalogLookupError(f"Unexpected product search payload for {key!r}") from exc

        products = [parse_product(item) for item in payload.products]
        log.debug("Product search %r returned %d product(s)", key, len(products))
        return products

    async def create(self, seed: ProductSeed) -> Product:
        if not seed.name.strip() or not (seed.sku or seed.manufacturer_ref).strip():
            raise CreationValidationError("A product needs a name and a SKU or reference")
        if seed.sale_price < 0 or seed.purchase_price < 0:
            raise CreationValidationError("Prices must not be negative")

        request = build_create_request(seed)
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.post(
                    PRODUCTS_PATH,
                    json=request.model_dump(by_alias=True, exclude_none=True),
                )
        except httpx.HTTPError as exc:
            raise CreationNetworkError(f"Product creation request failed: {exc}") from exc

        if response.status_code in _REJECTED_STATUSES:
            raise CreationValidationError(_error_detail(response))
        if response.is_server_error:
            raise CreationNetworkError(
                f"Back office unavailable ({response.status_code}): {_error_detail(response)}"
            )
        if response.is_error:
            raise CreationValidationError(
                f"Product creation refused ({response.status_code}): {_error_detail(response)}"
            )

        try:
            created = ProductCreateResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise CreationError("Unexpected product creation payload") from exc

        product = parse_product(created.product)
        log.info("Created product %s (%s)", product.id, product.display_name)
        return product

    async def submit(self, payload: OrderPayload) -> str:
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.post(PURCHASE_ORDERS_PATH, json=payload.to_dict())
        except httpx.HTTPError as exc:
            raise SubmissionError(f"Order submission failed: {exc}") from exc

        if response.is_error:
            raise SubmissionError(
                f"Order submission refused ({response.status_code}): {_error_detail(response)}"
            )
        try:
            stored = PurchaseOrderResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise SubmissionError("Unexpected order submission payload") from exc
        return stored.purchase_order.id


if TYPE_CHECKING:
    _searcher_check: type[CatalogSearcher] = BackofficeClient
    _creator_check: type[ProductCreator] = BackofficeClient
    _submitter_check: type[OrderSubmitter] = BackofficeClient
