from pydantic import BaseModel, BeforeValidator, Field, field_validator
from typing import Annotated, Optional, Any
import datetime
from decimal import Decimal, InvalidOperation
from models.audit_mixin import now_ist
from utils.ledger_calc import coerce_amount


def today_ist() -> datetime.date:
    return now_ist().date()


def none_if_blank(value: Any) -> Any:
    """Empty date inputs arrive as '' from the form; store them as NULL."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Blank or non-numeric form input counts as 0
Amount = Annotated[Decimal, BeforeValidator(coerce_amount)]
# Same coercion for PATCH bodies: an explicit null clears the amount to 0
OptionalAmount = Annotated[Optional[Decimal], BeforeValidator(coerce_amount)]
OptionalDate = Annotated[Optional[datetime.date], BeforeValidator(none_if_blank)]


class PartyDetails(BaseModel):
    name: str = ""
    address: str = ""
    city: str = ""
    contact: str = ""
    pan: str = ""
    gst: str = ""


class Item(BaseModel):
    description: str = ""
    pcs: Amount = Decimal(0)
    weight: Amount = Decimal(0)


class ChargeSet(BaseModel):
    """Surcharges billed on top of freight; every one of them adds to 'other charges'."""
    hamali: Amount = Decimal(0)
    sur_charge: Amount = Decimal(0)
    st_charge: Amount = Decimal(0)
    collection_charge: Amount = Decimal(0)
    dd_charge: Amount = Decimal(0)
    other_charge: Amount = Decimal(0)
    risk_charge: Amount = Decimal(0)


class PaymentRecord(BaseModel):
    amount: Optional[Decimal] = None
    date: datetime.date = Field(default_factory=today_ist)
    notes: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def unparseable_amount_is_missing(cls, value):
        # Whether the amount is acceptable is the ledger's call, not the schema's
        if value is None or isinstance(value, bool):
            return None
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        return amount if amount.is_finite() else None


class PaymentEntryOut(BaseModel):
    amount: Decimal = Decimal(0)
    date: Optional[datetime.date] = None
    notes: Optional[str] = None
