from fastapi import APIRouter, Query
import logging

from schemas.calculations import (
    AmountInWords,
    FreightBalance,
    FreightBalanceRequest,
    InvoiceTotalsRequest,
)
from schemas.invoices import InvoiceTotalsOut
from utils.formatting import amount_to_words, format_indian_currency, round_rupees
from crud.invoices import totals_with_words
from utils.ledger_calc import recompute
from utils.payment_ledger import aggregate

router = APIRouter(prefix="/calculations", tags=["Calculations"])
logger = logging.getLogger("calculations")


@router.post("/freight-balance", response_model=FreightBalance)
def freight_balance(request: FreightBalanceRequest):
    """Derived advance, balance and total balance for a hiring or booking form."""
    advance = aggregate(request.advances)
    balances = recompute(request.freight, advance, request.other_expenses)
    return {
        "advance": advance,
        "balance": balances.balance,
        "total_balance": balances.total_balance,
        "balance_display": format_indian_currency(balances.balance),
        "total_balance_display": format_indian_currency(balances.total_balance),
    }


@router.post("/invoice-totals", response_model=InvoiceTotalsOut)
def invoice_totals(request: InvoiceTotalsRequest):
    return totals_with_words(request.line_items, request.tax_type)


@router.get("/amount-in-words", response_model=AmountInWords)
def amount_in_words(amount: float = Query(..., ge=0, allow_inf_nan=False)):
    rounded = round_rupees(amount)
    return {
        "amount": rounded,
        "words": amount_to_words(rounded),
        "display": format_indian_currency(rounded),
    }
