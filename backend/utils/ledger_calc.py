"""
Freight ledger calculations.

Pure functions that derive the monetary fields of freight records and tax
invoices. Nothing here touches the database or keeps state between calls:
the CRUD layer calls these on every write and on every read.

Input policy: any missing, empty or non-numeric amount counts as 0. A
negative balance is a valid result (the party has been overpaid).
"""

import enum
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, NamedTuple, Optional

# GST on goods transport: 5% split equally between centre and state for
# intra-state supply, 5% IGST for inter-state supply.
CGST_RATE = Decimal("0.025")
SGST_RATE = Decimal("0.025")
IGST_RATE = Decimal("0.05")

ZERO = Decimal(0)


class TaxType(str, enum.Enum):
    INTRA = "intra"
    INTER = "inter"


class Balances(NamedTuple):
    balance: Decimal
    total_balance: Decimal


class InvoiceTotals(NamedTuple):
    total_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    net_amount: Decimal


def coerce_amount(value: Any) -> Decimal:
    """Turn whatever the caller has into a Decimal, falling back to 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return ZERO
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return amount if amount.is_finite() else ZERO


def recompute(freight: Any, advance_total: Any, other_expenses: Any) -> Balances:
    balance = coerce_amount(freight) - coerce_amount(advance_total)
    return Balances(balance=balance, total_balance=balance + coerce_amount(other_expenses))


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def charges_total(charges: Optional[Any]) -> Decimal:
    """Sum every surcharge in a charge set (dict or pydantic model)."""
    if charges is None:
        return ZERO
    if hasattr(charges, "model_dump"):
        charges = charges.model_dump()
    if not isinstance(charges, Mapping):
        return ZERO
    return sum((coerce_amount(v) for v in charges.values()), ZERO)


def line_total(item: Any) -> Decimal:
    return coerce_amount(_field(item, "freight")) + charges_total(_field(item, "charges"))


def compute_invoice_totals(line_items: Iterable[Any], tax_type: Any) -> InvoiceTotals:
    """
    Totals for a tax invoice built from freight line items.

    Args:
        line_items: LR-shaped records (ORM objects or dicts) exposing
            ``freight`` and ``charges``.
        tax_type: ``TaxType`` or its value; anything else raises ValueError.

    Returns:
        InvoiceTotals with the unrounded tax split and net amount.
    """
    tax_type = TaxType(tax_type)
    total_amount = sum((line_total(item) for item in line_items), ZERO)

    if tax_type is TaxType.INTRA:
        cgst = total_amount * CGST_RATE
        sgst = total_amount * SGST_RATE
        igst = ZERO
    else:
        cgst = sgst = ZERO
        igst = total_amount * IGST_RATE

    return InvoiceTotals(
        total_amount=total_amount,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        net_amount=total_amount + cgst + sgst + igst,
    )
