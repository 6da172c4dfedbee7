# -*- coding: utf-8 -*-
# backend/tests/modules/invoices/test_totals_engine.py
import pytest

from app.modules.invoices.services import (
    compute_invoice_totals,
    compute_line_totals,
    compute_totals_from_inputs,
    reconcile,
    round2,
    to_money_str,
)
from app.shared.errors import ValidationFailed


def test_standard_rate_line():
    line = compute_line_totals("2", "50.00", "01", "6")
    assert (line.subtotal, line.tax_amount, line.total) == ("100.00", "6.00", "106.00")


@pytest.mark.parametrize("tax_type", ["E", "NA"])
def test_non_taxable_line_ignores_rate(tax_type):
    line = compute_line_totals(3, "10.00", tax_type, "6")
    assert (line.subtotal, line.tax_amount, line.total) == ("30.00", "0.00", "30.00")


def test_zero_rated_line_applies_given_rate():
    # AE no está en el conjunto exento: se usa la tasa que venga (normalmente 0)
    line = compute_line_totals("1", "10.00", "AE", "0")
    assert line.tax_amount == "0.00"


def test_rounding_is_half_up_after_each_step():
    # 3 x 0.335 = 1.005 -> 1.01 ; 1.01 x 6% = 0.0606 -> 0.06
    line = compute_line_totals("3", "0.335", "01", "6")
    assert line.subtotal == "1.01"
    assert line.tax_amount == "0.06"
    assert line.total == "1.07"
    assert to_money_str("2.675") == "2.68"
    assert str(round2("-1.005")) == "-1.01"


def test_invoice_totals_sum_precomputed_lines():
    lines = [
        {"subtotal": "100.00", "tax_amount": "6.00"},
        {"subtotal": "30.00", "tax_amount": "0.00"},
        {"subtotal": "0.10", "tax_amount": "0.01"},
    ]
    totals = compute_invoice_totals(lines)
    assert (totals.subtotal, totals.tax_total, totals.grand_total) == ("130.10", "6.01", "136.11")


def test_invoice_totals_empty():
    totals = compute_invoice_totals([])
    assert totals.grand_total == "0.00"


def test_totals_from_inputs_ignores_foreign_amounts():
    lines, totals = compute_totals_from_inputs(
        [{"quantity": "2", "unit_price": "50", "tax_type": "01", "tax_rate": "6", "total": "999.99"}]
    )
    assert lines[0].total == "106.00"
    assert totals.grand_total == "106.00"


@pytest.mark.parametrize("stored_grand_total", ["106.01", "105.99", "106.00"])
def test_reconcile_within_tolerance(stored_grand_total):
    items = [{"subtotal": "100.00", "tax_amount": "6.00"}]
    result = reconcile(items, "100.00", "6.00", stored_grand_total)
    assert result.valid
    assert result.errors == []


@pytest.mark.parametrize("stored_grand_total", ["106.02", "105.98"])
def test_reconcile_outside_tolerance_names_only_grand_total(stored_grand_total):
    items = [{"subtotal": "100.00", "tax_amount": "6.00"}]
    result = reconcile(items, "100.00", "6.00", stored_grand_total)
    assert not result.valid
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Grand total mismatch")
    assert result.computed.grand_total == "106.00"


def test_reconcile_reports_every_mismatching_field():
    items = [{"subtotal": "100.00", "tax_amount": "6.00"}]
    result = reconcile(items, "90.00", "5.00", "95.00")
    assert [e.split(" mismatch")[0] for e in result.errors] == ["Subtotal", "Tax total", "Grand total"]


def test_reconcile_message_formats_stored_value_to_cents():
    items = [{"subtotal": "100.00", "tax_amount": "6.00"}]
    result = reconcile(items, 100.0, 6.0, 107.5)
    assert result.errors == ["Grand total mismatch: expected 106.00, got 107.50"]


ROUND_TRIP_CASES = [
    pytest.param([], id="empty"),
    pytest.param([("2", "50.00", "01", "6")], id="single-standard"),
    pytest.param(
        [("3", "10.00", "E", "6"), ("1", "99.99", "02", "8"), ("4", "0.25", "NA", "0")],
        id="mixed-tax-types",
    ),
    pytest.param(
        [("3", "0.335", "01", "6"), ("1", "0.005", "02", "8"), ("7", "1.115", "01", "10")],
        id="half-cent-boundaries",
    ),
    pytest.param(
        [("100", "2.055", "NA", "0"), ("0.5", "19.99", "AE", "0"), ("12", "3.333", "01", "5")],
        id="fractional-quantities",
    ),
    pytest.param([("1", "0.01", "02", "6")] * 25, id="many-tiny-lines"),
]


@pytest.mark.parametrize("raw_lines", ROUND_TRIP_CASES)
def test_reconcile_accepts_its_own_totals(raw_lines):
    lines = [compute_line_totals(q, p, t, r) for q, p, t, r in raw_lines]
    totals = compute_invoice_totals(lines)

    result = reconcile(lines, totals.subtotal, totals.tax_total, totals.grand_total)

    assert result.valid
    assert result.errors == []
    assert result.computed == totals


@pytest.mark.parametrize("bad", ["abc", "NaN", "Infinity", True])
def test_invalid_numeric_input_is_validation_error(bad):
    with pytest.raises(ValidationFailed):
        compute_line_totals(bad, "1.00", "01", "6")


def test_unknown_tax_type_is_validation_error():
    with pytest.raises(ValidationFailed) as exc:
        compute_line_totals("1", "1.00", "XX", "6")
    assert "tax_type" in exc.value.field_errors

# Fin del archivo backend/tests/modules/invoices/test_totals_engine.py
