"""Port for the external document-parsing service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from invoicematch.domain.model import ParsedInvoice

type DocumentSource = Path


@runtime_checkable
class DocumentParser(Protocol):
    """Turns a supplier document into parsed invoice lines; raises ``ParseError``."""

    async def parse(self, source: DocumentSource) -> ParsedInvoice: ...
