from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from utils.auth_utils import get_current_user, get_user_identifier
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict

from database import get_db
from models.audit_mixin import now_ist
from models.trucks import Truck as TruckModel
from models.lorry_receipts import LorryReceipt as LorryReceiptModel
from models.vehicle_hirings import VehicleHiring as VehicleHiringModel
from schemas.trucks import Truck, TruckCreate, TruckUpdate
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/trucks", tags=["Trucks"])
logger = logging.getLogger("trucks")


def _truck_or_404(db: Session, truck_id: int, tenant_id: str) -> TruckModel:
    db_truck = db.query(TruckModel).filter(TruckModel.id == truck_id, TruckModel.tenant_id == tenant_id).first()
    if db_truck is None:
        raise HTTPException(status_code=404, detail="Truck not found")
    return db_truck


@router.post("/", response_model=Truck, status_code=status.HTTP_201_CREATED)
def create_truck(
    truck: TruckCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_truck = db.query(TruckModel).filter(TruckModel.truck_no == truck.truck_no, TruckModel.tenant_id == tenant_id).first()
    if db_truck:
        raise HTTPException(status_code=400, detail="Truck with this number already exists")

    db_truck = TruckModel(**truck.model_dump(), tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_truck)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Truck with this number already exists")
    db.refresh(db_truck)
    logger.info(f"Truck '{db_truck.truck_no}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_truck


@router.get("/", response_model=List[Truck])
def read_trucks(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(TruckModel).filter(TruckModel.tenant_id == tenant_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(TruckModel.truck_no.ilike(pattern), TruckModel.owner_name.ilike(pattern)))
    return query.order_by(TruckModel.truck_no).offset(skip).limit(limit).all()


@router.get("/{truck_id}", response_model=Truck)
def read_truck(truck_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return _truck_or_404(db, truck_id, tenant_id)


@router.patch("/{truck_id}", response_model=Truck)
def update_truck(
    truck_id: int,
    truck: TruckUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_truck = _truck_or_404(db, truck_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_truck)

    truck_data = truck.model_dump(exclude_unset=True)
    if "truck_no" in truck_data and not truck_data["truck_no"]:
        raise HTTPException(status_code=400, detail="Truck number is required")
    if truck_data.get("truck_no") and truck_data["truck_no"] != db_truck.truck_no:
        existing_truck = db.query(TruckModel).filter(TruckModel.truck_no == truck_data["truck_no"], TruckModel.tenant_id == tenant_id).first()
        if existing_truck:
            raise HTTPException(status_code=400, detail="Truck with this number already exists")

    for key, value in truck_data.items():
        setattr(db_truck, key, value)
    db_truck.updated_at = now_ist()
    db_truck.updated_by = get_user_identifier(user)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='trucks',
        record_id=truck_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_truck)
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_truck)
    logger.info(f"Truck '{db_truck.truck_no}' (ID: {truck_id}) updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_truck


@router.delete("/{truck_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_truck(
    truck_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_truck = _truck_or_404(db, truck_id, tenant_id)

    # LRs and hirings carry the truck number, not a foreign key
    used_by_lr = db.query(LorryReceiptModel).filter(
        LorryReceiptModel.tenant_id == tenant_id, LorryReceiptModel.truck_no == db_truck.truck_no
    ).first()
    used_by_hiring = db.query(VehicleHiringModel).filter(
        VehicleHiringModel.tenant_id == tenant_id, VehicleHiringModel.lorry_no == db_truck.truck_no
    ).first()
    if used_by_lr or used_by_hiring:
        logger.warning(f"Truck '{db_truck.truck_no}' (ID: {truck_id}) not deleted; still in use, tenant {tenant_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Truck '{db_truck.truck_no}' is used by lorry receipts or hirings and cannot be deleted."
        )

    old_values = sqlalchemy_to_dict(db_truck)
    # Soft-delete
    db_truck.deleted_at = now_ist()
    db_truck.deleted_by = get_user_identifier(user)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='trucks',
        record_id=truck_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_truck)
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Truck '{db_truck.truck_no}' (ID: {truck_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
