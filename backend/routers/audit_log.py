from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from crud.audit_log import get_audit_trail
from schemas.audit_log import AuditLogOut
from utils.auth_utils import require_group
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/audit-log", tags=["Audit Log"])
logger = logging.getLogger("audit_log")

AUDITED_TABLES = {
    "parties", "trucks", "lorry_receipts", "invoices", "vehicle_hirings", "booking_registers", "app_config",
}


@router.get("/{table_name}/{record_id}", response_model=List[AuditLogOut])
def read_audit_trail(
    table_name: str,
    record_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    """Every recorded change to one row, oldest first."""
    if table_name not in AUDITED_TABLES:
        raise HTTPException(status_code=404, detail=f"No audit trail for table '{table_name}'")
    return get_audit_trail(db, tenant_id, table_name, record_id)
