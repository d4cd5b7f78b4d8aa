from pydantic import BaseModel
from typing import Optional
from models.vehicle_hirings import OwnerType, SettlementStatus
from schemas.freight_records import FreightFieldsUpdate, FreightLedgerCreate, FreightLedgerOut

class VehicleHiringBase(BaseModel):
    booking_id: Optional[str] = None
    gr_no: Optional[str] = None
    bill_no: Optional[str] = None
    lorry_no: str
    driver_no: Optional[str] = None
    owner_name: OwnerType = OwnerType.THIRD_PARTY
    from_place: Optional[str] = None
    to_place: Optional[str] = None
    pod_status: SettlementStatus = SettlementStatus.PENDING
    payment_status: SettlementStatus = SettlementStatus.PENDING

class VehicleHiringCreate(VehicleHiringBase, FreightLedgerCreate):
    pass

class VehicleHiringUpdate(FreightFieldsUpdate):
    booking_id: Optional[str] = None
    gr_no: Optional[str] = None
    bill_no: Optional[str] = None
    lorry_no: Optional[str] = None
    driver_no: Optional[str] = None
    owner_name: Optional[OwnerType] = None
    from_place: Optional[str] = None
    to_place: Optional[str] = None
    pod_status: Optional[SettlementStatus] = None
    payment_status: Optional[SettlementStatus] = None

class VehicleHiring(VehicleHiringBase, FreightLedgerOut):

    class Config:
        from_attributes = True
