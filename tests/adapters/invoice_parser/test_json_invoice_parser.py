from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import pytest

from invoicematch.adapters.invoice_parser import JsonInvoiceParser
from invoicematch.domain.errors import ParseError

if TYPE_CHECKING:
    from pathlib import Path


def test_reads_saved_parser_response(tmp_path: Path) -> None:
    path = tmp_path / "invoice.json"
    path.write_text(
        json.dumps(
            {
                "success": True,
                "invoice": {
                    "items": [
                        {
                            "product": {"manufacturer_ref": "REF1", "description": "Pad"},
                            "quantity": 4,
                            "unit_price": 2.5,
                        }
                    ],
                    "order_number": "PO-3",
                },
            }
        ),
        encoding="utf-8",
    )

    invoice = asyncio.run(JsonInvoiceParser().parse(path))

    assert len(invoice.lines) == 1
    assert invoice.lines[0].quantity == 4
    assert invoice.order_number == "PO-3"


def test_invalid_json_raises_parse_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ParseError, match="broken.json"):
        asyncio.run(JsonInvoiceParser().parse(path))


def test_missing_file_raises_parse_error(tmp_path: Path) -> None:
    with pytest.raises(ParseError, match="Cannot read"):
        asyncio.run(JsonInvoiceParser().parse(tmp_path / "absent.json"))
