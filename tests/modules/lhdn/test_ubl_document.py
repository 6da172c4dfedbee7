# -*- coding: utf-8 -*-
# backend/tests/modules/lhdn/test_ubl_document.py
import base64
import hashlib
import json

from app.modules.invoices.facades import create_invoice
from app.modules.lhdn.services import (
    build_submission_payload,
    build_ubl_invoice,
    prepare_document,
    serialize_document,
)
from app.modules.lhdn.services.ubl_builder import UBL_NAMESPACES


async def test_ubl_document_mirrors_invoice(db_session, business, user_id, invoice_payload):
    invoice = await create_invoice(db_session, business.id, user_id, invoice_payload(buyer_email="ap@pembeli.my"))

    doc = build_ubl_invoice(invoice, invoice.items, business)

    for prefix, namespace in UBL_NAMESPACES.items():
        assert doc[prefix] == namespace
    ubl = doc["Invoice"][0]
    assert ubl["ID"] == [{"_": "INV-2025-0001"}]
    assert ubl["IssueDate"] == [{"_": "2025-11-01"}]
    assert ubl["InvoiceTypeCode"] == [{"_": "01", "listVersionID": "1.1"}]
    assert ubl["DocumentCurrencyCode"] == [{"_": "MYR"}]

    supplier = ubl["AccountingSupplierParty"][0]["Party"][0]
    assert supplier["PartyIdentification"][0]["ID"] == [{"_": "C12345678901", "schemeID": "TIN"}]
    assert supplier["PostalAddress"][0]["CityName"] == [{"_": "Kuala Lumpur"}]
    buyer = ubl["AccountingCustomerParty"][0]["Party"][0]
    assert buyer["PartyName"][0]["Name"] == [{"_": "Syarikat Pembeli Bhd"}]
    assert buyer["Contact"][0]["ElectronicMail"] == [{"_": "ap@pembeli.my"}]

    line = ubl["InvoiceLine"][0]
    assert line["ID"] == [{"_": "1"}]
    assert line["InvoicedQuantity"] == [{"_": 2.0, "unitCode": "UNT"}]
    assert line["LineExtensionAmount"] == [{"_": 100.0, "currencyID": "MYR"}]
    assert line["TaxTotal"][0]["TaxSubtotal"][0]["TaxCategory"][0]["ID"] == [{"_": "01"}]

    totals = ubl["LegalMonetaryTotal"][0]
    assert totals["TaxExclusiveAmount"] == [{"_": 100.0, "currencyID": "MYR"}]
    assert totals["PayableAmount"] == [{"_": 106.0, "currencyID": "MYR"}]


async def test_supplier_falls_back_to_business(db_session, business, user_id, invoice_payload):
    invoice = await create_invoice(
        db_session, business.id, user_id, invoice_payload(supplier_name=None, supplier_tin=None)
    )
    ubl = build_ubl_invoice(invoice, invoice.items, business)["Invoice"][0]
    supplier = ubl["AccountingSupplierParty"][0]["Party"][0]
    assert supplier["PartyName"][0]["Name"] == [{"_": business.name}]
    assert supplier["PartyTaxScheme"][0]["CompanyID"] == [{"_": business.tin}]


def test_prepared_document_hash_covers_encoded_bytes():
    ubl = {"Invoice": [{"ID": [{"_": "INV-1"}], "Note": [{"_": "Terima kasih, ñ"}]}]}

    prepared = prepare_document(ubl, "INV-1")

    raw = base64.b64decode(prepared.document)
    assert raw == serialize_document(ubl)
    assert json.loads(raw.decode("utf-8")) == ubl
    assert prepared.document_hash == base64.b64encode(hashlib.sha256(raw).digest()).decode("ascii")

    payload = build_submission_payload([prepared])
    assert payload == {
        "documents": [
            {
                "format": "JSON",
                "document": prepared.document,
                "documentHash": prepared.document_hash,
                "codeNumber": "INV-1",
            }
        ]
    }

# Fin del archivo backend/tests/modules/lhdn/test_ubl_document.py
