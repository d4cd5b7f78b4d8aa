from decimal import Decimal
from typing import Any, List
from pydantic import BaseModel, Field
from schemas.common import Amount, ChargeSet
from utils.ledger_calc import TaxType

class FreightBalanceRequest(BaseModel):
    freight: Amount = Decimal(0)
    other_expenses: Amount = Decimal(0)
    # Raw ledger as the form holds it; malformed entries count as 0
    advances: Any = Field(default_factory=list)

class FreightBalance(BaseModel):
    advance: Decimal
    balance: Decimal
    total_balance: Decimal
    balance_display: str
    total_balance_display: str

class InvoiceLineInput(BaseModel):
    freight: Amount = Decimal(0)
    charges: ChargeSet = Field(default_factory=ChargeSet)

class InvoiceTotalsRequest(BaseModel):
    line_items: List[InvoiceLineInput] = Field(default_factory=list)
    tax_type: TaxType = TaxType.INTRA

class AmountInWords(BaseModel):
    amount: int
    words: str
    display: str
