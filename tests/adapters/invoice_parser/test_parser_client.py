from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003
from pathlib import Path

import httpx
import pytest

from invoicematch.adapters.invoice_parser import InvoiceParserClient
from invoicematch.adapters.invoice_parser.client import PARSE_PATH
from invoicematch.config.parser import InvoiceParserConfig
from invoicematch.domain.errors import ParseError
from tests.support.http import make_client_factory, make_resilience, raising_handler

PARSER_URL = "http://parser.test"

SUCCESS = {
    "success": True,
    "invoice": {
        "items": [
            {"product": {"manufacturer_ref": "REF1"}, "quantity": 2, "unit_price": 5},
        ],
        "tax_rate": 20,
        "invoice_number": "INV-1",
    },
}


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> InvoiceParserClient:
    resilience = make_resilience("invoice-parser", base_url=PARSER_URL)
    return InvoiceParserClient(
        config=InvoiceParserConfig(base_url=PARSER_URL, resilience=resilience),
        client_factory=make_client_factory(handler),
    )


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "invoice.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    return path


def test_parse_uploads_document_as_multipart(document: Path) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=SUCCESS)

    invoice = asyncio.run(_client(handler).parse(document))

    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == PARSE_PATH
    assert request.headers["content-type"].startswith("multipart/form-data")
    body = request.read()
    assert b'filename="invoice.pdf"' in body
    assert b"application/pdf" in body
    assert b"%PDF-1.4 fake" in body
    assert [line.key for line in invoice.lines] == ["REF1"]
    assert invoice.invoice_reference == "INV-1"


def test_parse_reports_service_error_detail(document: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(400, json={"success": False, "error": "Unsupported file type"})

    with pytest.raises(ParseError, match="Unsupported file type"):
        asyncio.run(_client(handler).parse(document))


def test_parse_reports_non_json_failure(document: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(500, text="Internal Server Error")

    with pytest.raises(ParseError, match="500"):
        asyncio.run(_client(handler).parse(document))


def test_parse_wraps_transport_errors(document: Path) -> None:
    client = _client(raising_handler(httpx.ConnectError("connection refused")))

    with pytest.raises(ParseError, match="connection refused"):
        asyncio.run(client.parse(document))


def test_parse_rejects_unsuccessful_body(document: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, json={"success": False, "message": "No items found"})

    with pytest.raises(ParseError, match="No items found"):
        asyncio.run(_client(handler).parse(document))


def test_parse_missing_file_raises_parse_error(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request {request.url}")

    with pytest.raises(ParseError, match="Cannot read"):
        asyncio.run(_client(handler).parse(tmp_path / "missing.pdf"))
