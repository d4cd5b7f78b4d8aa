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
from models.parties import Party as PartyModel, PartyType
from models.booking_registers import BookingRegister as BookingRegisterModel
from schemas.parties import Party, PartyCreate, PartyUpdate
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/parties", tags=["Parties"])
logger = logging.getLogger("parties")


def _party_or_404(db: Session, party_id: int, tenant_id: str) -> PartyModel:
    db_party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
    if db_party is None:
        raise HTTPException(status_code=404, detail="Party not found")
    return db_party


@router.post("/", response_model=Party, status_code=status.HTTP_201_CREATED)
def create_party(
    party: PartyCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    name = party.name.strip()
    db_party = db.query(PartyModel).filter(PartyModel.name == name, PartyModel.tenant_id == tenant_id).first()
    if db_party:
        raise HTTPException(status_code=400, detail="Party with this name already exists")

    db_party = PartyModel(**party.model_dump(exclude={"name"}), name=name, tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_party)
    try:
        db.commit()
    except IntegrityError:
        # A soft-deleted party still holds the name
        db.rollback()
        raise HTTPException(status_code=400, detail="Party with this name already exists")
    db.refresh(db_party)
    logger.info(f"Party '{db_party.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_party


@router.get("/", response_model=List[Party])
def read_parties(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    party_type: Optional[PartyType] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(PartyModel).filter(PartyModel.tenant_id == tenant_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(PartyModel.name.ilike(pattern), PartyModel.city.ilike(pattern)))
    if party_type:
        query = query.filter(PartyModel.party_type == party_type)
    return query.order_by(PartyModel.name).offset(skip).limit(limit).all()


@router.get("/{party_id}", response_model=Party)
def read_party(party_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return _party_or_404(db, party_id, tenant_id)


@router.patch("/{party_id}", response_model=Party)
def update_party(
    party_id: int,
    party: PartyUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_party = _party_or_404(db, party_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_party)

    party_data = party.model_dump(exclude_unset=True)
    if party_data.get("name"):
        party_data["name"] = party_data["name"].strip()
        if party_data["name"] != db_party.name:
            existing_party = db.query(PartyModel).filter(PartyModel.name == party_data["name"], PartyModel.tenant_id == tenant_id).first()
            if existing_party:
                raise HTTPException(status_code=400, detail="Party with this name already exists")

    for key, value in party_data.items():
        setattr(db_party, key, value)
    db_party.updated_at = now_ist()
    db_party.updated_by = get_user_identifier(user)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='parties',
        record_id=party_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_party)
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_party)
    logger.info(f"Party '{db_party.name}' (ID: {party_id}) updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_party


@router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_party(
    party_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_party = _party_or_404(db, party_id, tenant_id)

    # Booking registers refer to the party by name
    in_use = db.query(BookingRegisterModel).filter(
        BookingRegisterModel.tenant_id == tenant_id,
        BookingRegisterModel.party_name == db_party.name,
    ).first()
    if in_use:
        logger.warning(f"Party '{db_party.name}' (ID: {party_id}) not deleted; still used by booking registers, tenant {tenant_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Party '{db_party.name}' is used by booking registers and cannot be deleted."
        )

    old_values = sqlalchemy_to_dict(db_party)
    # Soft-delete
    db_party.deleted_at = now_ist()
    db_party.deleted_by = get_user_identifier(user)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='parties',
        record_id=party_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_party)
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Party '{db_party.name}' (ID: {party_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
