# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/services/ubl_builder.py

Construcción del documento UBL 2.1 (variante JSON) que espera MyInvois.

Convenciones de la variante JSON:
- cada elemento es una lista de un objeto
- el valor textual/numérico va en "_", los atributos como llaves hermanas
- _D / _A / _B declaran los namespaces de Invoice, CAC y CBC

Si los campos de proveedor de la factura están vacíos se usa el
perfil del negocio.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from app.modules.businesses.models import Business
from app.modules.invoices.models import Invoice, InvoiceItem

UBL_NAMESPACES = {
    "_D": "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2",
    "_A": "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2",
    "_B": "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2",
}
INVOICE_TYPE_LIST_VERSION = "1.1"
DEFAULT_ISSUE_TIME = "00:00:00Z"
TAX_SCHEME_ID = "OTH"


def _v(value: Any, **attrs: Any) -> List[Dict[str, Any]]:
    return [{"_": value, **attrs}]


def _amount(value: str, currency: str) -> List[Dict[str, Any]]:
    return _v(float(value), currencyID=currency)


def _tax_scheme() -> List[Dict[str, Any]]:
    return [{"ID": _v(TAX_SCHEME_ID)}]


def build_party(
    name: str,
    tin: str,
    registration: str,
    country_code: str,
    city_name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> Dict[str, Any]:
    """Bloque Party (proveedor o comprador)."""
    postal_address: Dict[str, Any] = {}
    if city_name:
        postal_address["CityName"] = _v(city_name)
    postal_address["Country"] = [{"IdentificationCode": _v(country_code)}]

    party: Dict[str, Any] = {
        "PartyIdentification": [{"ID": _v(tin, schemeID="TIN")}],
        "PartyName": [{"Name": _v(name)}],
        "PostalAddress": [postal_address],
        "PartyTaxScheme": [{"CompanyID": _v(tin), "TaxScheme": _tax_scheme()}],
        "PartyLegalEntity": [{"RegistrationName": _v(registration)}],
    }
    if email or phone:
        contact: Dict[str, Any] = {}
        if email:
            contact["ElectronicMail"] = _v(email)
        if phone:
            contact["Telephone"] = _v(phone)
        party["Contact"] = [contact]
    return {"Party": [party]}


def _invoice_line(idx: int, item: InvoiceItem, currency: str) -> Dict[str, Any]:
    return {
        "ID": _v(str(idx + 1)),
        "InvoicedQuantity": _v(float(item.quantity), unitCode=item.unit_code),
        "LineExtensionAmount": _amount(item.subtotal, currency),
        "Item": [
            {
                "Description": _v(item.description),
                "CommodityClassification": [
                    {"ItemClassificationCode": _v(item.classification_code, listID="CLASS")}
                ],
            }
        ],
        "Price": [{"PriceAmount": _amount(item.unit_price, currency)}],
        "TaxTotal": [
            {
                "TaxAmount": _amount(item.tax_amount, currency),
                "TaxSubtotal": [
                    {
                        "TaxableAmount": _amount(item.subtotal, currency),
                        "TaxAmount": _amount(item.tax_amount, currency),
                        "TaxCategory": [
                            {"ID": _v(str(item.tax_type.value)), "TaxScheme": _tax_scheme()}
                        ],
                    }
                ],
            }
        ],
    }


def build_ubl_invoice(
    invoice: Invoice,
    items: Sequence[InvoiceItem],
    business: Business,
) -> Dict[str, Any]:
    """
    Documento UBL completo para una factura.

    Args:
        invoice: Factura (totales ya conciliados)
        items: Líneas ordenadas por sort_order
        business: Negocio emisor (respaldo de los datos del proveedor)

    Returns:
        Dict serializable a JSON
    """
    currency = invoice.currency_code
    issue_date = invoice.issue_date or date.today().isoformat()

    supplier = build_party(
        invoice.supplier_name or business.name,
        invoice.supplier_tin or business.tin,
        invoice.supplier_registration or business.registration_number or "",
        business.country_code,
        business.city_name,
        business.email,
        business.phone,
    )
    buyer = build_party(
        invoice.buyer_name or "",
        invoice.buyer_tin or "",
        invoice.buyer_registration_number or "",
        invoice.buyer_country_code,
        invoice.buyer_city_name,
        invoice.buyer_email,
        invoice.buyer_phone,
    )

    ubl_invoice = {
        "ID": _v(invoice.invoice_number or ""),
        "IssueDate": _v(issue_date),
        "IssueTime": _v(DEFAULT_ISSUE_TIME),
        "InvoiceTypeCode": _v(str(invoice.invoice_type.value), listVersionID=INVOICE_TYPE_LIST_VERSION),
        "DocumentCurrencyCode": _v(currency),
        "AccountingSupplierParty": [supplier],
        "AccountingCustomerParty": [buyer],
        "InvoiceLine": [_invoice_line(idx, item, currency) for idx, item in enumerate(items)],
        "TaxTotal": [
            {
                "TaxAmount": _amount(invoice.tax_total, currency),
                "TaxSubtotal": [
                    {
                        "TaxableAmount": _amount(invoice.subtotal, currency),
                        "TaxAmount": _amount(invoice.tax_total, currency),
                        "TaxCategory": [{"ID": _v("NA"), "TaxScheme": _tax_scheme()}],
                    }
                ],
            }
        ],
        "LegalMonetaryTotal": [
            {
                "LineExtensionAmount": _amount(invoice.subtotal, currency),
                "TaxExclusiveAmount": _amount(invoice.subtotal, currency),
                "TaxInclusiveAmount": _amount(invoice.grand_total, currency),
                "PayableAmount": _amount(invoice.grand_total, currency),
            }
        ],
    }
    return {**UBL_NAMESPACES, "Invoice": [ubl_invoice]}


__all__ = ["UBL_NAMESPACES", "build_party", "build_ubl_invoice"]

# Fin del archivo backend/app/modules/lhdn/services/ubl_builder.py
