"""
Advance payment ledgers for hiring and booking records.

A ledger is a plain list of ``{"amount", "date", "notes"}`` dicts, stored
as-is in the record's JSON ``advances`` column. Entries keep insertion
order and are never edited in place: ``add_entry`` and ``remove_entry``
return a new list and leave the one passed in untouched.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Mapping

from utils.ledger_calc import ZERO, coerce_amount

logger = logging.getLogger(__name__)

LEGACY_ADVANCE_NOTE = "Legacy Advance"


class InvalidPaymentEntry(ValueError):
    """Raised when an advance payment has no usable positive amount."""


def _entry_value(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def _iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def normalize_ledger(value: Any) -> List[dict]:
    """Anything that is not a list of entries is read as an empty ledger."""
    if not isinstance(value, list):
        return []
    return value


def _entry_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10]).isoformat()
        except ValueError:
            return None
    return None


def clean_ledger(ledger: Any) -> List[dict]:
    """
    Rewrite a stored ledger into well-formed entries.

    Entries that are not mappings are dropped; an unusable amount reads as
    0 and an unparseable date as None, so a damaged row still loads.
    """
    cleaned = []
    for entry in normalize_ledger(ledger):
        if not isinstance(entry, Mapping):
            logger.warning("Dropping malformed ledger entry %r", entry)
            continue
        notes = entry.get("notes")
        cleaned.append({
            "amount": float(coerce_amount(entry.get("amount"))),
            "date": _entry_date(entry.get("date")),
            "notes": str(notes) if notes not in (None, "") else None,
        })
    return cleaned


def aggregate(ledger: Any) -> Decimal:
    return sum((coerce_amount(_entry_value(e, "amount")) for e in normalize_ledger(ledger)), ZERO)


def add_entry(ledger: Any, entry: Any) -> List[dict]:
    raw_amount = _entry_value(entry, "amount")
    amount = coerce_amount(raw_amount)
    if raw_amount is None or amount <= 0:
        raise InvalidPaymentEntry("Enter a valid amount")

    new_entry = {
        "amount": float(amount),
        "date": _iso(_entry_value(entry, "date")),
        "notes": _entry_value(entry, "notes") or None,
    }
    return [*normalize_ledger(ledger), new_entry]


def remove_entry(ledger: Any, index: int) -> List[dict]:
    return [e for i, e in enumerate(normalize_ledger(ledger)) if i != index]


def reconcile_legacy(record: Any) -> List[dict]:
    """
    Build the ledger for a record loaded from storage.

    Records saved before ledgers existed only carry a scalar ``advance``;
    that amount becomes a single entry dated on the record itself. Call this
    once on load, never on a record whose ledger is already established.
    """
    advances = _entry_value(record, "advances")
    if isinstance(advances, list):
        return advances

    legacy_amount = coerce_amount(_entry_value(record, "advance"))
    if legacy_amount != 0:
        logger.debug("Upgrading legacy scalar advance %s into a ledger entry", legacy_amount)
        return [{
            "amount": float(legacy_amount),
            "date": _iso(_entry_value(record, "date")),
            "notes": LEGACY_ADVANCE_NOTE,
        }]
    return []
