import datetime
from decimal import Decimal
from typing import Dict, List
from pydantic import BaseModel
from schemas.lorry_receipts import LorryReceipt

class DailyFreight(BaseModel):
    date: datetime.date
    label: str
    freight: Decimal

class DashboardSummary(BaseModel):
    total_lrs: int
    total_freight: Decimal
    total_freight_display: str
    unique_consignors: int
    pods_pending: int
    status_counts: Dict[str, int]
    last_7_days: List[DailyFreight]
    recent_lrs: List[LorryReceipt]
