"""Offline parser reading an already-parsed invoice saved as JSON."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from invoicematch.domain.errors import ParseError

from .schema import ParseResponse
from .translator import parse_invoice

if TYPE_CHECKING:
    from pathlib import Path

    from invoicematch.domain.model import ParsedInvoice
    from invoicematch.domain.ports import DocumentParser


class JsonInvoiceParser:
    """Reads a file holding a parser-service response body."""

    async def parse(self, source: Path) -> ParsedInvoice:
        try:
            raw = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ParseError(f"Cannot read {source}: {exc}") from exc
        try:
            payload = ParseResponse.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise ParseError(f"{source.name} is not a parsed invoice: {exc}") from exc
        return parse_invoice(payload)


if TYPE_CHECKING:
    _parser_check: type[DocumentParser] = JsonInvoiceParser
