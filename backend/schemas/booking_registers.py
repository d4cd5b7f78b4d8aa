from pydantic import BaseModel
from typing import Optional
from decimal import Decimal
from models.booking_registers import LorryType
from models.vehicle_hirings import SettlementStatus
from schemas.common import Amount, OptionalAmount
from schemas.freight_records import FreightFieldsUpdate, FreightLedgerCreate, FreightLedgerOut

class BookingRegisterBase(BaseModel):
    booking_id: Optional[str] = None
    party_name: str
    gr_no: Optional[str] = None
    bill_no: Optional[str] = None
    lorry_no: Optional[str] = None
    lorry_type: LorryType = LorryType.CLOSED
    weight: Amount = Decimal(0)
    from_place: Optional[str] = None
    to_place: Optional[str] = None
    payment_status: SettlementStatus = SettlementStatus.PENDING

class BookingRegisterCreate(BookingRegisterBase, FreightLedgerCreate):
    pass

class BookingRegisterUpdate(FreightFieldsUpdate):
    booking_id: Optional[str] = None
    party_name: Optional[str] = None
    gr_no: Optional[str] = None
    bill_no: Optional[str] = None
    lorry_no: Optional[str] = None
    lorry_type: Optional[LorryType] = None
    weight: OptionalAmount = None
    from_place: Optional[str] = None
    to_place: Optional[str] = None
    payment_status: Optional[SettlementStatus] = None

class BookingRegister(BookingRegisterBase, FreightLedgerOut):

    class Config:
        from_attributes = True
