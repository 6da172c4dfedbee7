# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/services/csv_parser.py

Parser de CSV de importación masiva (una factura por fila, una línea por factura).

Columnas (en orden):
    invoice_number, invoice_type, issue_date, due_date,
    buyer_name, buyer_tin, buyer_email, buyer_phone, buyer_registration_number,
    currency_code, notes,
    item_description, item_quantity, item_unit_price, item_tax_type, item_tax_rate

- La fila de encabezado es opcional (se detecta por "invoicenumber"/"invoice_number")
- Líneas vacías se ignoran
- Números de fila 1-based sobre las líneas no vacías, contando el encabezado
- Cada fila se valida con InvoiceCreateIn; los errores quedan por fila

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import List, Optional

from pydantic import ValidationError

from app.modules.invoices.schemas import InvoiceCreateIn

EXPECTED_COLUMNS = 16

CSV_COLUMNS = (
    "invoice_number",
    "invoice_type",
    "issue_date",
    "due_date",
    "buyer_name",
    "buyer_tin",
    "buyer_email",
    "buyer_phone",
    "buyer_registration_number",
    "currency_code",
    "notes",
    "item_description",
    "item_quantity",
    "item_unit_price",
    "item_tax_type",
    "item_tax_rate",
)

_HEADER_MARKERS = ("invoicenumber", "invoice_number")


@dataclass
class ParsedRow:
    row: int
    data: Optional[InvoiceCreateIn] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None and self.error is None


def _is_header(cols: List[str]) -> bool:
    first = ",".join(cols).lower()
    return any(marker in first for marker in _HEADER_MARKERS)


def _format_validation_error(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()))
        parts.append(f"{loc}: {e.get('msg', 'invalid')}" if loc else e.get("msg", "invalid"))
    return "; ".join(parts)


def _row_to_payload(cols: List[str]) -> dict:
    values = dict(zip(CSV_COLUMNS, cols))
    return {
        "invoice_number": values["invoice_number"] or None,
        "invoice_type": values["invoice_type"] or "01",
        "issue_date": values["issue_date"] or None,
        "due_date": values["due_date"] or None,
        "buyer_name": values["buyer_name"] or None,
        "buyer_tin": values["buyer_tin"] or None,
        "buyer_email": values["buyer_email"] or None,
        "buyer_phone": values["buyer_phone"] or None,
        "buyer_registration_number": values["buyer_registration_number"] or None,
        "currency_code": (values["currency_code"] or "MYR")[:3].upper(),
        "notes": values["notes"] or None,
        "items": [
            {
                "description": values["item_description"],
                "classification_code": "001",
                "quantity": values["item_quantity"] or "1",
                "unit_code": "UNT",
                "unit_price": values["item_unit_price"] or "0",
                "tax_type": values["item_tax_type"] or "NA",
                "tax_rate": values["item_tax_rate"] or "0",
            }
        ],
    }


def parse_csv_rows(csv_text: str) -> List[ParsedRow]:
    """
    Parsea el texto CSV completo.

    Returns:
        Una ParsedRow por fila de datos (válida o con error)
    """
    records = [
        [c.strip() for c in cols]
        for cols in csv.reader(io.StringIO(csv_text))
        if any(c.strip() for c in cols)
    ]
    if not records:
        return []

    offset = 1
    if _is_header(records[0]):
        records = records[1:]
        offset = 2

    parsed: List[ParsedRow] = []
    for idx, cols in enumerate(records):
        row = idx + offset
        if len(cols) < EXPECTED_COLUMNS:
            parsed.append(ParsedRow(row=row, error=f"Expected {EXPECTED_COLUMNS} columns, got {len(cols)}"))
            continue

        payload = _row_to_payload(cols)
        if not payload["items"][0]["description"]:
            parsed.append(ParsedRow(row=row, error="item_description is required"))
            continue

        try:
            parsed.append(ParsedRow(row=row, data=InvoiceCreateIn.model_validate(payload)))
        except ValidationError as e:
            parsed.append(ParsedRow(row=row, error=_format_validation_error(e)))
    return parsed


__all__ = ["EXPECTED_COLUMNS", "CSV_COLUMNS", "ParsedRow", "parse_csv_rows"]

# Fin del archivo backend/app/modules/bulk_import/services/csv_parser.py
