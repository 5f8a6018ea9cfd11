"""Pydantic models describing the back-office product and purchase API payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class BackofficeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProductPayload(BackofficeBaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    sku: str | None = None
    manufacturer_ref: str | None = Field(default=None, alias="manufacturerRef")
    description: str | None = None
    purchase_price: float | None = Field(default=None, alias="purchasePrice")
    sale_price: float | None = Field(default=None, alias="salePrice")
    tax_rate: float | None = Field(default=None, alias="taxRate")
    margin_rate: float | None = Field(default=None, alias="marginRate")


class Pagination(BackofficeBaseModel):
    page: int = 1
    limit: int = 0
    total: int = 0
    pages: int = 0


class ProductSearchResponse(BackofficeBaseModel):
    products: list[ProductPayload] = Field(default_factory=list[ProductPayload])
    pagination: Pagination | None = None


class ProductCreateResponse(BackofficeBaseModel):
    product: ProductPayload

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_product(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[str, object], value)
            if "product" not in mapping_value and ("_id" in mapping_value or "id" in mapping_value):
                return {"product": dict(mapping_value)}
        return value


class ProductCreateRequest(BackofficeBaseModel):
    sku: str
    name: str
    manufacturer_ref: str = Field(alias="manufacturerRef")
    description: str | None = None
    purchase_price: float = Field(alias="purchasePrice")
    sale_price: float = Field(alias="salePrice")
    tax_rate: float = Field(alias="taxRate")
    margin_rate: float = Field(alias="marginRate")


class PurchaseOrderPayload(BackofficeBaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    order_number: str | None = Field(default=None, alias="orderNumber")


class PurchaseOrderResponse(BackofficeBaseModel):
    purchase_order: PurchaseOrderPayload = Field(
        validation_alias=AliasChoices("purchaseOrder", "order")
    )


class ErrorResponse(BackofficeBaseModel):
    error: str | None = None
    message: str | None = None

    @property
    def detail(self) -> str:
        return self.error or self.message or "no error detail"
