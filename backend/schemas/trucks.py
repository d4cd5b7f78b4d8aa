from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


def normalize_truck_no(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return " ".join(value.split()).upper()


class TruckBase(BaseModel):
    truck_no: str
    owner_name: Optional[str] = None
    contact_number: Optional[str] = None

    @field_validator("truck_no")
    @classmethod
    def clean_truck_no(cls, value):
        value = normalize_truck_no(value)
        if not value:
            raise ValueError("Truck number is required")
        return value

class TruckCreate(TruckBase):
    pass

class TruckUpdate(BaseModel):
    truck_no: Optional[str] = None
    owner_name: Optional[str] = None
    contact_number: Optional[str] = None

    @field_validator("truck_no")
    @classmethod
    def clean_truck_no(cls, value):
        return normalize_truck_no(value)

class Truck(TruckBase):
    id: int
    tenant_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
