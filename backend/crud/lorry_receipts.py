from typing import List, Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from models.audit_mixin import now_ist
from models.lorry_receipts import LorryReceipt, LRStatus
from schemas import lorry_receipts as schemas
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict, to_jsonable, without_required_nulls

JSON_FIELDS = ("billing_to", "consignor", "consignee", "items", "charges")


def _column_values(data: dict) -> dict:
    for field in JSON_FIELDS:
        if field in data and data[field] is not None:
            data[field] = to_jsonable(data[field])
    return data


def _log(db: Session, db_lr: LorryReceipt, tenant_id: str, user_id: str, action: str, old_values):
    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='lorry_receipts',
        record_id=db_lr.id,
        changed_by=user_id,
        action=action,
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_lr),
    )
    create_audit_log(db=db, log_entry=log_entry)


def get_lorry_receipt(db: Session, lr_id: int, tenant_id: str) -> Optional[LorryReceipt]:
    return db.query(LorryReceipt).filter(LorryReceipt.id == lr_id, LorryReceipt.tenant_id == tenant_id).first()


def get_lorry_receipt_by_number(db: Session, lr_no: str, tenant_id: str) -> Optional[LorryReceipt]:
    return db.query(LorryReceipt).filter(LorryReceipt.lr_no == lr_no, LorryReceipt.tenant_id == tenant_id).first()


def get_lorry_receipts_by_ids(db: Session, lr_ids: List[int], tenant_id: str) -> List[LorryReceipt]:
    """LRs in the order the ids were given; ids not found in the tenant are left out."""
    found = {
        lr.id: lr
        for lr in db.query(LorryReceipt).filter(LorryReceipt.id.in_(lr_ids), LorryReceipt.tenant_id == tenant_id).all()
    }
    return [found[lr_id] for lr_id in dict.fromkeys(lr_ids) if lr_id in found]


def list_lorry_receipts(db: Session, tenant_id: str, search: Optional[str] = None,
                        status: Optional[LRStatus] = None, skip: int = 0, limit: int = 100) -> List[LorryReceipt]:
    query = db.query(LorryReceipt).filter(LorryReceipt.tenant_id == tenant_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            LorryReceipt.lr_no.ilike(pattern),
            LorryReceipt.truck_no.ilike(pattern),
            cast(LorryReceipt.consignor, String).ilike(pattern),
        ))
    if status:
        query = query.filter(LorryReceipt.status == status)
    return query.order_by(LorryReceipt.date.desc(), LorryReceipt.id.desc()).offset(skip).limit(limit).all()


def create_lorry_receipt(db: Session, lr: schemas.LorryReceiptCreate, tenant_id: str, user_id: str) -> LorryReceipt:
    # New LRs always start their journey as Booked
    data = _column_values(lr.model_dump())
    db_lr = LorryReceipt(**data, status=LRStatus.BOOKED, status_updated_at=now_ist(),
                         tenant_id=tenant_id, created_by=user_id)
    db.add(db_lr)
    db.commit()
    db.refresh(db_lr)
    return db_lr


def update_lorry_receipt(db: Session, db_lr: LorryReceipt, lr: schemas.LorryReceiptUpdate,
                         tenant_id: str, user_id: str) -> LorryReceipt:
    old_values = sqlalchemy_to_dict(db_lr)
    data = _column_values(without_required_nulls(LorryReceipt, lr.model_dump(exclude_unset=True)))
    if "status" in data and data["status"] != db_lr.status:
        db_lr.status_updated_at = now_ist()
    for key, value in data.items():
        setattr(db_lr, key, value)
    db_lr.updated_at = now_ist()
    db_lr.updated_by = user_id
    _log(db, db_lr, tenant_id, user_id, 'UPDATE', old_values)
    db.commit()
    db.refresh(db_lr)
    return db_lr


def update_lorry_receipt_status(db: Session, db_lr: LorryReceipt, status: LRStatus,
                                tenant_id: str, user_id: str) -> LorryReceipt:
    old_values = sqlalchemy_to_dict(db_lr)
    db_lr.status = status
    db_lr.status_updated_at = now_ist()
    db_lr.updated_by = user_id
    _log(db, db_lr, tenant_id, user_id, 'STATUS', old_values)
    db.commit()
    db.refresh(db_lr)
    return db_lr


def set_pod_path(db: Session, db_lr: LorryReceipt, pod_path: str, tenant_id: str, user_id: str) -> LorryReceipt:
    old_values = sqlalchemy_to_dict(db_lr)
    db_lr.pod_path = pod_path
    db_lr.updated_at = now_ist()
    db_lr.updated_by = user_id
    _log(db, db_lr, tenant_id, user_id, 'POD_UPLOAD', old_values)
    db.commit()
    db.refresh(db_lr)
    return db_lr


def delete_lorry_receipt(db: Session, db_lr: LorryReceipt, tenant_id: str, user_id: str) -> LorryReceipt:
    old_values = sqlalchemy_to_dict(db_lr)
    # Soft-delete
    db_lr.deleted_at = now_ist()
    db_lr.deleted_by = user_id
    _log(db, db_lr, tenant_id, user_id, 'DELETE', old_values)
    db.commit()
    return db_lr
