"""Invoice-parsing service adapter."""

from __future__ import annotations

from .client import InvoiceParserClient
from .json_file import JsonInvoiceParser
from .translator import parse_invoice

__all__ = [
    "InvoiceParserClient",
    "JsonInvoiceParser",
    "parse_invoice",
]
