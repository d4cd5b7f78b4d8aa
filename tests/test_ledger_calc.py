from decimal import Decimal

import pytest

from utils.ledger_calc import (
    CGST_RATE,
    IGST_RATE,
    SGST_RATE,
    TaxType,
    charges_total,
    coerce_amount,
    compute_invoice_totals,
    line_total,
    recompute,
)


@pytest.mark.parametrize("raw, expected", [
    (None, Decimal(0)),
    ("", Decimal(0)),
    ("   ", Decimal(0)),
    ("abc", Decimal(0)),
    ("12.50", Decimal("12.50")),
    (7, Decimal(7)),
    (2.5, Decimal("2.5")),
    (True, Decimal(0)),
    (float("nan"), Decimal(0)),
    (float("inf"), Decimal(0)),
    ([1, 2], Decimal(0)),
])
def test_coerce_amount(raw, expected):
    assert coerce_amount(raw) == expected


def test_recompute_balances():
    result = recompute(10000, 4000, 500)
    assert result.balance == Decimal(6000)
    assert result.total_balance == Decimal(6500)


def test_recompute_treats_missing_inputs_as_zero():
    result = recompute(None, "", "not a number")
    assert result.balance == 0
    assert result.total_balance == 0


def test_recompute_allows_negative_balance():
    result = recompute(1000, 1500, 200)
    assert result.balance == Decimal(-500)
    assert result.total_balance == Decimal(-300)


def test_recompute_is_exact_for_decimal_fractions():
    result = recompute("0.3", "0.1", "0.2")
    assert result.balance == Decimal("0.2")
    assert result.total_balance == Decimal("0.4")


def test_tax_rates():
    assert CGST_RATE + SGST_RATE == IGST_RATE == Decimal("0.05")


def test_intra_state_invoice_splits_gst():
    totals = compute_invoice_totals([{"freight": 1000, "charges": {}}], "intra")
    assert totals.total_amount == Decimal(1000)
    assert totals.cgst == Decimal(25)
    assert totals.sgst == Decimal(25)
    assert totals.igst == 0
    assert totals.net_amount == Decimal(1050)


def test_inter_state_invoice_charges_igst():
    totals = compute_invoice_totals([{"freight": 1000, "charges": {}}], TaxType.INTER)
    assert totals.cgst == 0
    assert totals.sgst == 0
    assert totals.igst == Decimal(50)
    assert totals.net_amount == Decimal(1050)


def test_invoice_totals_include_every_charge():
    items = [
        {"freight": 1000, "charges": {"hamali": 100, "risk_charge": "50", "dd_charge": None}},
        {"freight": "500", "charges": {"other_charge": 25.5}},
    ]
    totals = compute_invoice_totals(items, "intra")
    assert totals.total_amount == Decimal("1675.5")
    assert totals.net_amount == totals.total_amount + totals.cgst + totals.sgst + totals.igst


def test_invoice_totals_are_not_rounded():
    totals = compute_invoice_totals([{"freight": "333.33", "charges": {}}], "intra")
    assert totals.cgst == Decimal("8.33325")
    assert totals.net_amount == Decimal("349.99650")


def test_empty_invoice_is_all_zero():
    totals = compute_invoice_totals([], "inter")
    assert totals == (0, 0, 0, 0, 0)


def test_unknown_tax_type_is_rejected():
    with pytest.raises(ValueError):
        compute_invoice_totals([{"freight": 100}], "export")


def test_charges_total_handles_missing_and_odd_charge_sets():
    assert charges_total(None) == 0
    assert charges_total("hamali") == 0
    assert charges_total({"hamali": "x", "sur_charge": 10}) == Decimal(10)


def test_line_total_reads_attributes():
    class Receipt:
        freight = Decimal("900")
        charges = {"hamali": 100}

    assert line_total(Receipt()) == Decimal(1000)
