from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from models.parties import PartyType

class PartyBase(BaseModel):
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    contact: Optional[str] = None
    pan: Optional[str] = None
    gst: Optional[str] = None
    party_type: PartyType = PartyType.BOTH

class PartyCreate(PartyBase):
    pass

class PartyUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    contact: Optional[str] = None
    pan: Optional[str] = None
    gst: Optional[str] = None
    party_type: Optional[PartyType] = None

class Party(PartyBase):
    id: int
    tenant_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
