import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from models.lorry_receipts import LRStatus, LRType
from schemas.common import Amount, ChargeSet, Item, OptionalAmount, OptionalDate, PartyDetails


class LorryReceiptBase(BaseModel):
    lr_type: LRType = LRType.ORIGINAL
    lr_no: str
    truck_no: Optional[str] = None
    date: datetime.date
    from_place: Optional[str] = None
    to_place: Optional[str] = None

    invoice_no: Optional[str] = None
    invoice_amount: Amount = Decimal(0)
    invoice_date: OptionalDate = None
    po_no: Optional[str] = None
    po_date: OptionalDate = None
    eway_bill_no: Optional[str] = None
    eway_bill_date: OptionalDate = None
    eway_ex_date: OptionalDate = None

    address_of_delivery: Optional[str] = None
    charged_weight: Amount = Decimal(0)
    billing_to: PartyDetails = Field(default_factory=PartyDetails)
    gst_paid_by: Optional[str] = None
    consignor: PartyDetails = Field(default_factory=PartyDetails)
    consignee: PartyDetails = Field(default_factory=PartyDetails)
    items: List[Item] = Field(default_factory=list)
    weight: Amount = Decimal(0)
    actual_weight_mt: Amount = Decimal(0)

    freight: Amount = Decimal(0)
    charges: ChargeSet = Field(default_factory=ChargeSet)
    rate: Amount = Decimal(0)
    rate_on: Optional[str] = None
    remark: Optional[str] = None


class LorryReceiptCreate(LorryReceiptBase):
    pass


class LorryReceiptUpdate(BaseModel):
    lr_type: Optional[LRType] = None
    lr_no: Optional[str] = None
    truck_no: Optional[str] = None
    date: Optional[datetime.date] = None
    from_place: Optional[str] = None
    to_place: Optional[str] = None
    invoice_no: Optional[str] = None
    invoice_amount: OptionalAmount = None
    invoice_date: OptionalDate = None
    po_no: Optional[str] = None
    po_date: OptionalDate = None
    eway_bill_no: Optional[str] = None
    eway_bill_date: OptionalDate = None
    eway_ex_date: OptionalDate = None
    address_of_delivery: Optional[str] = None
    charged_weight: OptionalAmount = None
    billing_to: Optional[PartyDetails] = None
    gst_paid_by: Optional[str] = None
    consignor: Optional[PartyDetails] = None
    consignee: Optional[PartyDetails] = None
    items: Optional[List[Item]] = None
    weight: OptionalAmount = None
    actual_weight_mt: OptionalAmount = None
    freight: OptionalAmount = None
    charges: Optional[ChargeSet] = None
    rate: OptionalAmount = None
    rate_on: Optional[str] = None
    remark: Optional[str] = None
    status: Optional[LRStatus] = None


class LorryReceiptStatusUpdate(BaseModel):
    status: LRStatus


class LorryReceipt(LorryReceiptBase):
    id: int
    tenant_id: Optional[str] = None
    status: LRStatus
    status_updated_at: Optional[datetime.datetime] = None
    pod_path: Optional[str] = None
    invoice_id: Optional[int] = None
    total_charges: Decimal
    line_total: Decimal
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True
