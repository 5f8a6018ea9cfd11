"""HTTP client for the invoice-parsing service."""

from __future__ import annotations

import mimetypes
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from invoicematch.adapters.http_resilience import ResilientClient
from invoicematch.domain.errors import ParseError

from .schema import ParseResponse
from .translator import parse_invoice

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from invoicematch.config.http_resilience import ResilienceConfig
    from invoicematch.config.parser import InvoiceParserConfig
    from invoicematch.domain.model import ParsedInvoice
    from invoicematch.domain.ports import DocumentParser

log = getLogger(__name__)

PARSE_PATH = "/invoice/parse"


class InvoiceParserClient:
    """Uploads a supplier document and returns its parsed lines."""

    def __init__(
        self,
        *,
        config: InvoiceParserConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    async def parse(self, source: Path) -> ParsedInvoice:
        try:
            content = source.read_bytes()
        except OSError as exc:
            raise ParseError(f"Cannot read {source}: {exc}") from exc

        content_type = mimetypes.guess_type(source.name)[0] or "application/octet-stream"
        files = {"file": (source.name, content, content_type)}
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.post(PARSE_PATH, files=files)
        except httpx.HTTPError as exc:
            raise ParseError(f"Invoice parser request failed: {exc}") from exc

        try:
            payload = ParseResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            if response.is_error:
                raise ParseError(
                    f"Invoice parser failed ({response.status_code}): {response.reason_phrase}"
                ) from exc
            raise ParseError("Unexpected invoice parser payload") from exc

        if response.is_error:
            detail = payload.error or payload.message or response.reason_phrase
            raise ParseError(f"Invoice parser failed ({response.status_code}): {detail}")

        invoice = parse_invoice(payload)
        log.debug("Parser returned %d line(s) for %s", len(invoice.lines), source.name)
        return invoice


if TYPE_CHECKING:
    _parser_check: type[DocumentParser] = InvoiceParserClient
