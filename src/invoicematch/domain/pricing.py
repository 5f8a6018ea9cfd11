"""Price derivation for purchase lines and creation seeds.

``sale_price = purchase_price * (1 + margin_rate / 100) * (1 + tax_rate / 100)``, with all
monetary results rounded half-up to three decimals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from invoicematch.domain.model import OrderLineItem

_MILLI = Decimal("0.001")
_HUNDRED = Decimal(100)


def _decimal(value: float) -> Decimal:
    return Decimal(str(value))


def _rounded(value: Decimal) -> float:
    return float(value.quantize(_MILLI, rounding=ROUND_HALF_UP))


def derive_sale_price(purchase_price: float, *, margin_rate: float, tax_rate: float) -> float:
    """Return the tax-inclusive sale price for a purchase price."""

    price = _decimal(purchase_price)
    if price <= 0:
        return 0.0
    margin = max(_decimal(margin_rate), Decimal(0))
    tax = max(_decimal(tax_rate), Decimal(0))
    price_ht = price * (1 + margin / _HUNDRED)
    return _rounded(price_ht * (1 + tax / _HUNDRED))


def line_total(quantity: float, unit_price: float, tax_rate: float) -> float:
    amount = _decimal(quantity) * _decimal(unit_price)
    return _rounded(amount * (1 + _decimal(tax_rate) / _HUNDRED))


@dataclass(frozen=True, slots=True)
class OrderTotals:
    subtotal: float
    tax: float
    total: float


def order_totals(items: Iterable[OrderLineItem]) -> OrderTotals:
    """Sum every line of the order form, resolved or not."""

    subtotal = Decimal(0)
    tax = Decimal(0)
    for item in items:
        amount = _decimal(item.quantity) * _decimal(item.unit_price)
        subtotal += amount
        tax += amount * _decimal(item.tax_rate) / _HUNDRED
    return OrderTotals(
        subtotal=_rounded(subtotal),
        tax=_rounded(tax),
        total=_rounded(subtotal + tax),
    )
