from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import timedelta
import logging

from database import get_db
from models.lorry_receipts import LorryReceipt as LorryReceiptModel, LRStatus
from schemas.common import today_ist
from schemas.dashboard import DashboardSummary
from utils.formatting import format_indian_currency
from utils.ledger_calc import ZERO, coerce_amount
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = logging.getLogger("dashboard")

RECENT_LR_COUNT = 5
CHART_DAYS = 7


@router.get("/summary", response_model=DashboardSummary)
def get_dashboard_summary(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Headline LR metrics and the freight booked per day over the last week."""
    lorry_receipts = db.query(LorryReceiptModel).filter(
        LorryReceiptModel.tenant_id == tenant_id
    ).order_by(LorryReceiptModel.date.desc(), LorryReceiptModel.id.desc()).all()

    total_freight = sum((coerce_amount(lr.freight) for lr in lorry_receipts), ZERO)
    consignors = {((lr.consignor or {}).get("name") or "").strip() for lr in lorry_receipts}
    consignors.discard("")

    status_counts = {s.value: 0 for s in LRStatus}
    for lr in lorry_receipts:
        status_counts[lr.status.value] += 1

    today = today_ist()
    days = [today - timedelta(days=offset) for offset in reversed(range(CHART_DAYS))]
    freight_by_day = {day: ZERO for day in days}
    for lr in lorry_receipts:
        if lr.date in freight_by_day:
            freight_by_day[lr.date] += coerce_amount(lr.freight)

    return {
        "total_lrs": len(lorry_receipts),
        "total_freight": total_freight,
        "total_freight_display": format_indian_currency(total_freight),
        "unique_consignors": len(consignors),
        "pods_pending": sum(1 for lr in lorry_receipts if lr.status == LRStatus.DELIVERED and not lr.pod_path),
        "status_counts": status_counts,
        "last_7_days": [
            {"date": day, "label": day.strftime("%a"), "freight": freight_by_day[day]}
            for day in days
        ],
        "recent_lrs": lorry_receipts[:RECENT_LR_COUNT],
    }
