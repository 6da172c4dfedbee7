# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/services/totals_engine.py

Motor de montos y totales (funciones puras, sin efectos secundarios).

Convención de frontera:
- Todo valor monetario que entra o sale es un string decimal con 2 decimales
  fijos ("106.00"). Nunca floats.
- Internamente se usa decimal.Decimal y se redondea a 2 decimales
  (ROUND_HALF_UP) inmediatamente después de cada multiplicación o suma.

Operaciones:
- compute_line_totals: subtotal / impuesto / total de una línea
- compute_invoice_totals: agregados de factura a partir de líneas ya calculadas
- compute_totals_from_inputs: líneas crudas -> líneas calculadas + agregados
- reconcile: compara totales calculados vs. almacenados con tolerancia 0.01

Autor: EInvoiceMY
Fecha: 2025-10-30
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Tuple, Union

from app.modules.invoices.enums import NON_TAXABLE_TYPES, TaxType
from app.shared.errors import ValidationFailed

Numeric = Union[str, int, float, Decimal]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Tolerancia de conciliación (una unidad de centavo)
TOTALS_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class LineTotals:
    subtotal: str
    tax_amount: str
    total: str


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: str
    tax_total: str
    grand_total: str


@dataclass(frozen=True)
class ReconciliationResult:
    valid: bool
    computed: InvoiceTotals
    errors: List[str] = field(default_factory=list)


# ========== Helpers decimales ==========

def to_decimal(value: Numeric, field_name: str = "amount") -> Decimal:
    """
    Convierte un valor de frontera a Decimal.

    Raises:
        ValidationFailed: Si el valor no es un número finito.
    """
    if isinstance(value, bool):
        raise ValidationFailed(f"Invalid numeric value for {field_name}", field_errors={field_name: ["must be a number"]})
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationFailed(
            f"Invalid numeric value for {field_name}: {value!r}",
            field_errors={field_name: ["must be a number"]},
        )
    if not result.is_finite():
        raise ValidationFailed(
            f"Invalid numeric value for {field_name}: {value!r}",
            field_errors={field_name: ["must be a finite number"]},
        )
    return result


def round2(value: Numeric) -> Decimal:
    """Redondea a 2 decimales con ROUND_HALF_UP."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_money_str(value: Numeric) -> str:
    """Formatea como string de 2 decimales fijos."""
    return f"{round2(value):.2f}"


def _coerce_tax_type(tax_type: Union[TaxType, str]) -> TaxType:
    try:
        return TaxType(tax_type)
    except ValueError:
        raise ValidationFailed(
            f"Invalid tax type: {tax_type!r}",
            field_errors={"tax_type": [f"must be one of {', '.join(t.value for t in TaxType)}"]},
        )


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


# ========== Operaciones ==========

def compute_line_totals(
    quantity: Numeric,
    unit_price: Numeric,
    tax_type: Union[TaxType, str],
    tax_rate: Numeric,
) -> LineTotals:
    """
    Calcula los montos de una línea.

    subtotal   = round2(qty × price)
    tax_amount = 0 si tax_type ∈ {E, NA}; si no round2(subtotal × rate / 100)
    total      = round2(subtotal + tax_amount)

    Returns:
        LineTotals con strings de 2 decimales.
    """
    qty = to_decimal(quantity, "quantity")
    price = to_decimal(unit_price, "unit_price")
    rate = to_decimal(tax_rate, "tax_rate")
    ttype = _coerce_tax_type(tax_type)

    subtotal = round2(qty * price)
    if ttype in NON_TAXABLE_TYPES:
        tax_amount = ZERO
    else:
        tax_amount = round2(subtotal * rate / HUNDRED)
    total = round2(subtotal + tax_amount)

    return LineTotals(
        subtotal=to_money_str(subtotal),
        tax_amount=to_money_str(tax_amount),
        total=to_money_str(total),
    )


def compute_invoice_totals(items: Iterable[Any]) -> InvoiceTotals:
    """
    Agrega los montos ya calculados de cada línea.

    Acepta objetos ORM, dataclasses o dicts con `subtotal` y `tax_amount`.
    """
    subtotal = ZERO
    tax_total = ZERO
    for item in items:
        subtotal = round2(subtotal + to_decimal(_field(item, "subtotal") or "0", "subtotal"))
        tax_total = round2(tax_total + to_decimal(_field(item, "tax_amount") or "0", "tax_amount"))

    grand_total = round2(subtotal + tax_total)
    return InvoiceTotals(
        subtotal=to_money_str(subtotal),
        tax_total=to_money_str(tax_total),
        grand_total=to_money_str(grand_total),
    )


def compute_totals_from_inputs(items: Iterable[Any]) -> Tuple[List[LineTotals], InvoiceTotals]:
    """
    Calcula cada línea desde sus entradas crudas (quantity, unit_price,
    tax_type, tax_rate) y luego los agregados de la factura.

    Es la única autoridad aritmética: los montos calculados por terceros
    (IA, CSV) nunca se usan directamente.
    """
    lines = [
        compute_line_totals(
            _field(item, "quantity"),
            _field(item, "unit_price"),
            _field(item, "tax_type") or TaxType.NOT_APPLICABLE,
            _field(item, "tax_rate") or "0",
        )
        for item in items
    ]
    return lines, compute_invoice_totals(lines)


def reconcile(
    items: Iterable[Any],
    stored_subtotal: Numeric,
    stored_tax_total: Numeric,
    stored_grand_total: Numeric,
) -> ReconciliationResult:
    """
    Recalcula los totales desde las líneas y los compara con los almacenados.

    Cada campo que difiera en más de 0.01 genera un mensaje legible.
    Debe ejecutarse siempre en fresco: las líneas pueden cambiar
    independientemente de los totales guardados.
    """
    computed = compute_invoice_totals(items)
    checks = (
        ("Subtotal", computed.subtotal, stored_subtotal),
        ("Tax total", computed.tax_total, stored_tax_total),
        ("Grand total", computed.grand_total, stored_grand_total),
    )

    errors: List[str] = []
    for label, expected, stored in checks:
        stored_dec = to_decimal(stored, label.lower().replace(" ", "_"))
        if abs(to_decimal(expected) - stored_dec) > TOTALS_TOLERANCE:
            errors.append(f"{label} mismatch: expected {expected}, got {to_money_str(stored_dec)}")

    return ReconciliationResult(valid=not errors, computed=computed, errors=errors)


__all__ = [
    "LineTotals",
    "InvoiceTotals",
    "ReconciliationResult",
    "TOTALS_TOLERANCE",
    "to_decimal",
    "round2",
    "to_money_str",
    "compute_line_totals",
    "compute_invoice_totals",
    "compute_totals_from_inputs",
    "reconcile",
]

# Fin del archivo backend/app/modules/invoices/services/totals_engine.py
