from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

class BankDetails(BaseModel):
    name: str = ""
    branch: str = ""
    account_no: str = ""
    ifsc_code: str = ""

class CompanyProfile(BaseModel):
    """Letterhead and bank details printed on LRs and tax invoices."""
    name: str = ""
    tagline: str = ""
    address: str = ""
    email: Optional[EmailStr] = None
    web: str = ""
    contact: List[str] = Field(default_factory=list)
    pan: str = ""
    gstn: str = ""
    sac_code: str = ""
    bank_details: BankDetails = Field(default_factory=BankDetails)
    jurisdiction_city: str = ""
    branch_locations: List[str] = Field(default_factory=list)
    logo_url: str = ""
    signature_image_url: str = ""

class CompanyProfileUpdate(BaseModel):
    name: Optional[str] = None
    tagline: Optional[str] = None
    address: Optional[str] = None
    email: Optional[EmailStr] = None
    web: Optional[str] = None
    contact: Optional[List[str]] = None
    pan: Optional[str] = None
    gstn: Optional[str] = None
    sac_code: Optional[str] = None
    bank_details: Optional[BankDetails] = None
    jurisdiction_city: Optional[str] = None
    branch_locations: Optional[List[str]] = None
    logo_url: Optional[str] = None
    signature_image_url: Optional[str] = None
