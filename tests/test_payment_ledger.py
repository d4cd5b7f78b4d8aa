from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from utils.payment_ledger import (
    LEGACY_ADVANCE_NOTE,
    InvalidPaymentEntry,
    add_entry,
    aggregate,
    clean_ledger,
    normalize_ledger,
    reconcile_legacy,
    remove_entry,
)


def test_aggregate_sums_amounts():
    ledger = [{"amount": 1000}, {"amount": "250.50"}, {"amount": 0.5}]
    assert aggregate(ledger) == Decimal("1251.0")


def test_aggregate_of_empty_or_missing_ledger_is_zero():
    assert aggregate([]) == 0
    assert aggregate(None) == 0
    assert aggregate("garbage") == 0


def test_aggregate_skips_malformed_amounts():
    assert aggregate([{"amount": None}, {"amount": "abc"}, {}, {"amount": 300}]) == Decimal(300)


def test_add_entry_appends_without_touching_the_original():
    ledger = [{"amount": 100.0, "date": "2024-01-01", "notes": None}]
    updated = add_entry(ledger, {"amount": "200", "date": date(2024, 1, 5), "notes": "Cash"})
    assert len(ledger) == 1
    assert updated[0] == ledger[0]
    assert updated[1] == {"amount": 200.0, "date": "2024-01-05", "notes": "Cash"}
    assert aggregate(updated) == Decimal(300)


def test_add_entry_accepts_objects():
    entry = SimpleNamespace(amount=Decimal("50"), date=date(2024, 2, 1), notes="")
    assert add_entry([], entry) == [{"amount": 50.0, "date": "2024-02-01", "notes": None}]


@pytest.mark.parametrize("amount", [None, "", "abc", 0, "0", -10, "-5"])
def test_add_entry_rejects_invalid_amounts(amount):
    ledger = [{"amount": 100.0}]
    with pytest.raises(InvalidPaymentEntry, match="Enter a valid amount"):
        add_entry(ledger, {"amount": amount, "date": "2024-01-01"})
    assert ledger == [{"amount": 100.0}]


def test_remove_entry_by_position():
    ledger = [{"amount": 1}, {"amount": 2}, {"amount": 3}]
    assert remove_entry(ledger, 1) == [{"amount": 1}, {"amount": 3}]
    assert len(ledger) == 3


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_remove_entry_out_of_range_changes_nothing(index):
    ledger = [{"amount": 1}, {"amount": 2}, {"amount": 3}]
    assert remove_entry(ledger, index) == ledger


def test_normalize_ledger():
    assert normalize_ledger(None) == []
    assert normalize_ledger({"amount": 1}) == []
    assert normalize_ledger([{"amount": 1}]) == [{"amount": 1}]


def test_reconcile_legacy_upgrades_scalar_advance():
    record = SimpleNamespace(advances=None, advance=Decimal("500"), date=date(2023, 12, 31))
    assert reconcile_legacy(record) == [
        {"amount": 500.0, "date": "2023-12-31", "notes": LEGACY_ADVANCE_NOTE}
    ]


def test_reconcile_legacy_keeps_existing_ledger():
    ledger = [{"amount": 100.0, "date": "2024-01-01", "notes": None}]
    record = {"advances": ledger, "advance": 999, "date": "2024-01-01"}
    assert reconcile_legacy(record) is ledger


def test_reconcile_legacy_keeps_empty_ledger_empty():
    assert reconcile_legacy({"advances": [], "advance": 500}) == []


def test_reconcile_legacy_without_advance_gives_empty_ledger():
    assert reconcile_legacy({"advances": None, "advance": 0}) == []
    assert reconcile_legacy({"advances": None, "advance": None}) == []


def test_reconcile_legacy_without_record_date():
    ledger = reconcile_legacy({"advances": None, "advance": "250"})
    assert ledger == [{"amount": 250.0, "date": None, "notes": LEGACY_ADVANCE_NOTE}]


def test_clean_ledger_repairs_damaged_entries():
    stored = [
        {"amount": 100, "date": "2024-01-10", "notes": "Cash"},
        "junk",
        None,
        {"amount": "x", "date": "not-a-date", "notes": ""},
        {"amount": "25.5", "date": "2024-02-01T09:30:00"},
    ]
    assert clean_ledger(stored) == [
        {"amount": 100.0, "date": "2024-01-10", "notes": "Cash"},
        {"amount": 0.0, "date": None, "notes": None},
        {"amount": 25.5, "date": "2024-02-01", "notes": None},
    ]
    assert aggregate(clean_ledger(stored)) == aggregate(stored)
    assert clean_ledger(None) == []
