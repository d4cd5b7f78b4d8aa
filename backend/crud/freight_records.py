"""
Shared persistence for ledger-backed freight registers.

Vehicle hirings and booking registers both store freight, an advance ledger
and other expenses, plus the derived advance / balance / total balance. The
derived columns are a display cache: they are rewritten on every mutation
here and recomputed again whenever a record is read, so a value edited
directly in the database never feeds into a later calculation.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Type

from sqlalchemy import or_
from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from models.audit_mixin import now_ist
from models.vehicle_hirings import SettlementStatus
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict, without_required_nulls
from utils.ledger_calc import ZERO, recompute
from utils.payment_ledger import add_entry, aggregate, clean_ledger, reconcile_legacy, remove_entry

logger = logging.getLogger(__name__)

DERIVED_FIELDS = ("advance", "advances", "balance", "total_balance")


def refresh_derived_fields(record):
    """Recompute advance, balance and total balance from the raw inputs and ledger."""
    record.advance = aggregate(record.advances)
    balances = recompute(record.freight, record.advance, record.other_expenses)
    record.balance = balances.balance
    record.total_balance = balances.total_balance
    return record


def normalize_on_read(record):
    """Upgrade a legacy scalar advance into a clean ledger, then recompute the derived fields."""
    if record is None:
        return None
    record.advances = clean_ledger(reconcile_legacy(record))
    return refresh_derived_fields(record)


def _audit(db: Session, record, tenant_id: str, user_id: str, action: str, old_values):
    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name=record.__tablename__,
        record_id=record.id,
        changed_by=user_id,
        action=action,
        old_values=old_values,
        new_values=sqlalchemy_to_dict(record),
    )
    create_audit_log(db=db, log_entry=log_entry)


def create_record(db: Session, model: Type, payload, tenant_id: str, user_id: str):
    """
    Insert a register row. Every advance in the payload goes through the
    ledger's validation, so one bad entry rejects the whole record with
    InvalidPaymentEntry before anything is written.
    """
    data = payload.model_dump(exclude={"advances"})
    ledger: List[dict] = []
    for entry in payload.advances:
        ledger = add_entry(ledger, entry)

    record = model(**data, advances=ledger, tenant_id=tenant_id, created_by=user_id)
    refresh_derived_fields(record)
    db.add(record)
    db.commit()
    db.refresh(record)
    return normalize_on_read(record)


def get_record(db: Session, model: Type, record_id: int, tenant_id: str):
    record = db.query(model).filter(model.id == record_id, model.tenant_id == tenant_id).first()
    return normalize_on_read(record)


def list_records(
    db: Session,
    model: Type,
    tenant_id: str,
    search_columns: Iterable = (),
    search: Optional[str] = None,
    payment_status: Optional[SettlementStatus] = None,
    skip: int = 0,
    limit: int = 100,
):
    query = db.query(model).filter(model.tenant_id == tenant_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(*[column.ilike(pattern) for column in search_columns]))
    if payment_status:
        query = query.filter(model.payment_status == payment_status)
    records = query.order_by(model.date.desc(), model.id.desc()).offset(skip).limit(limit).all()
    return [normalize_on_read(r) for r in records]


def update_record(db: Session, record, payload, tenant_id: str, user_id: str):
    old_values = sqlalchemy_to_dict(record)
    for key, value in without_required_nulls(type(record), payload.model_dump(exclude_unset=True)).items():
        if key in DERIVED_FIELDS:
            continue
        setattr(record, key, value)
    refresh_derived_fields(record)
    record.updated_at = now_ist()
    record.updated_by = user_id
    _audit(db, record, tenant_id, user_id, 'UPDATE', old_values)
    db.commit()
    db.refresh(record)
    return normalize_on_read(record)


def add_advance(db: Session, record, entry, tenant_id: str, user_id: str):
    """Append one advance payment; InvalidPaymentEntry leaves the record untouched."""
    old_values = sqlalchemy_to_dict(record)
    record.advances = add_entry(record.advances, entry)
    refresh_derived_fields(record)
    record.updated_at = now_ist()
    record.updated_by = user_id
    _audit(db, record, tenant_id, user_id, 'ADD_ADVANCE', old_values)
    db.commit()
    db.refresh(record)
    return normalize_on_read(record)


def remove_advance(db: Session, record, index: int, tenant_id: str, user_id: str):
    """Drop the advance at ``index``. An index past either end changes nothing."""
    if not 0 <= index < len(record.advances):
        logger.info(f"No advance at position {index} on {record.__tablename__} {record.id}; ledger unchanged")
        return record

    old_values = sqlalchemy_to_dict(record)
    record.advances = remove_entry(record.advances, index)
    refresh_derived_fields(record)
    record.updated_at = now_ist()
    record.updated_by = user_id
    _audit(db, record, tenant_id, user_id, 'REMOVE_ADVANCE', old_values)
    db.commit()
    db.refresh(record)
    return normalize_on_read(record)


def delete_record(db: Session, record, tenant_id: str, user_id: str):
    old_values = sqlalchemy_to_dict(record)
    # Soft-delete
    record.deleted_at = now_ist()
    record.deleted_by = user_id
    _audit(db, record, tenant_id, user_id, 'DELETE', old_values)
    db.commit()
    return record


def summarize(db: Session, model: Type, tenant_id: str) -> dict:
    """Register totals, computed from recomputed balances rather than the stored cache."""
    records = [normalize_on_read(r) for r in db.query(model).filter(model.tenant_id == tenant_id).all()]
    summary = {
        "total_records": len(records),
        "pending_payments": sum(1 for r in records if r.payment_status == SettlementStatus.PENDING),
        "pending_pods": None,
        "total_freight": sum((Decimal(r.freight or 0) for r in records), ZERO),
        "outstanding_balance": sum(
            (r.total_balance for r in records if r.payment_status == SettlementStatus.PENDING), ZERO
        ),
    }
    if hasattr(model, "pod_status"):
        summary["pending_pods"] = sum(1 for r in records if r.pod_status == SettlementStatus.PENDING)
    return summary
