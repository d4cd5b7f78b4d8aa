import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.common import PartyDetails, today_ist
from utils.ledger_calc import TaxType


class InvoiceRequest(BaseModel):
    lorry_receipt_ids: List[int] = Field(default_factory=list)
    tax_type: TaxType = TaxType.INTRA


class InvoiceCreate(InvoiceRequest):
    bill_no: str = Field(..., min_length=1)
    bill_date: datetime.date = Field(default_factory=today_ist)


class InvoiceLine(BaseModel):
    lorry_receipt_id: int
    lr_no: str
    date: datetime.date
    truck_no: Optional[str] = None
    from_place: Optional[str] = None
    to_place: Optional[str] = None
    freight: Decimal
    other_charges: Decimal
    line_total: Decimal


class InvoiceTotalsOut(BaseModel):
    total_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    net_amount: Decimal
    amount_in_words: str


class InvoicePreview(InvoiceTotalsOut):
    tax_type: TaxType
    suggested_bill_no: str
    billed_to: PartyDetails
    lines: List[InvoiceLine]


class Invoice(InvoiceTotalsOut):
    id: int
    tenant_id: Optional[str] = None
    bill_no: str
    bill_date: datetime.date
    tax_type: TaxType
    billed_to: PartyDetails
    lines: List[InvoiceLine] = []
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True
