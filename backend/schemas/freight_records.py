import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from models.vehicle_hirings import SettlementStatus
from schemas.common import Amount, OptionalAmount, PaymentEntryOut, PaymentRecord, today_ist


class FreightFields(BaseModel):
    """Inputs every ledger-backed register shares; derived amounts are never accepted."""
    date: datetime.date = Field(default_factory=today_ist)
    freight: Amount = Decimal(0)
    other_expenses: Amount = Decimal(0)


class FreightFieldsUpdate(BaseModel):
    date: Optional[datetime.date] = None
    freight: OptionalAmount = None
    other_expenses: OptionalAmount = None


class FreightLedgerCreate(FreightFields):
    advances: List[PaymentRecord] = Field(default_factory=list)


class FreightLedgerOut(BaseModel):
    id: int
    tenant_id: Optional[str] = None
    date: datetime.date
    freight: Decimal
    advance: Decimal
    advances: List[PaymentEntryOut] = []
    balance: Decimal
    other_expenses: Decimal
    total_balance: Decimal
    payment_status: SettlementStatus
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None


class FreightRegisterSummary(BaseModel):
    total_records: int
    pending_payments: int
    pending_pods: Optional[int] = None
    total_freight: Decimal
    outstanding_balance: Decimal
