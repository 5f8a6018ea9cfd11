"""Pydantic models describing the invoice-parsing service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _text_or_none(value: object) -> object:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return _blank_to_none(value)


class ParserBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class InvoiceProductPayload(ParserBaseModel):
    manufacturer_ref: str | None = None
    description: str | None = None

    _normalize_ref = field_validator("manufacturer_ref", mode="before")(_text_or_none)
    _normalize_description = field_validator("description", mode="before")(_blank_to_none)


class InvoiceItemPayload(ParserBaseModel):
    product: InvoiceProductPayload | None = None
    quantity: float | None = None
    unit_price: float | None = None

    _normalize_numbers = field_validator("quantity", "unit_price", mode="before")(_blank_to_none)


class InvoicePayload(ParserBaseModel):
    items: list[InvoiceItemPayload] = Field(default_factory=list[InvoiceItemPayload])
    tax_rate: float | None = None
    order_date: str | None = None
    expected_date: str | None = None
    invoice_number: str | None = None
    invoice_reference: str | None = None
    order_number: str | None = None

    _normalize_tax = field_validator("tax_rate", mode="before")(_blank_to_none)
    _normalize_text = field_validator(
        "order_date",
        "expected_date",
        "invoice_number",
        "invoice_reference",
        "order_number",
        mode="before",
    )(_text_or_none)


class ParseResponse(ParserBaseModel):
    success: bool = False
    invoice: InvoicePayload | None = None
    error: str | None = None
    message: str | None = None
