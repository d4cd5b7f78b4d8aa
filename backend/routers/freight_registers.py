"""
Router builder for the ledger-backed freight registers.

Vehicle hirings and booking registers expose the same endpoints over
``crud.freight_records``; only the model, the schemas and the searchable
columns differ.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional, Type
import logging

from database import get_db
from crud import freight_records as crud_freight
from models.vehicle_hirings import SettlementStatus
from schemas.common import PaymentRecord
from schemas.freight_records import FreightRegisterSummary
from utils.auth_utils import get_current_user, get_user_identifier
from utils.payment_ledger import InvalidPaymentEntry
from utils.tenancy import get_tenant_id


def build_register_router(
    prefix: str,
    tag: str,
    label: str,
    model: Type,
    read_schema: Type,
    create_schema: Type,
    update_schema: Type,
    search_columns: Iterable,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])
    logger = logging.getLogger(model.__tablename__)
    search_columns = tuple(search_columns)

    def _record_or_404(db: Session, record_id: int, tenant_id: str):
        db_record = crud_freight.get_record(db, model, record_id, tenant_id)
        if db_record is None:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return db_record

    @router.post("/", response_model=read_schema, status_code=status.HTTP_201_CREATED)
    def create_entry(
        record: create_schema,
        db: Session = Depends(get_db),
        user: dict = Depends(get_current_user),
        tenant_id: str = Depends(get_tenant_id)
    ):
        try:
            db_record = crud_freight.create_record(db, model, record, tenant_id, get_user_identifier(user))
        except InvalidPaymentEntry as e:
            logger.warning(f"{label} rejected for tenant {tenant_id}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        logger.info(f"{label} {db_record.id} created by user {get_user_identifier(user)} for tenant {tenant_id}")
        return db_record

    @router.get("/", response_model=List[read_schema])
    def read_entries(
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        payment_status: Optional[SettlementStatus] = None,
        db: Session = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id)
    ):
        return crud_freight.list_records(
            db, model, tenant_id,
            search_columns=search_columns, search=search, payment_status=payment_status,
            skip=skip, limit=limit,
        )

    @router.get("/summary", response_model=FreightRegisterSummary)
    def read_summary(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
        return crud_freight.summarize(db, model, tenant_id)

    @router.get("/{record_id}", response_model=read_schema)
    def read_entry(record_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
        return _record_or_404(db, record_id, tenant_id)

    @router.patch("/{record_id}", response_model=read_schema)
    def update_entry(
        record_id: int,
        record: update_schema,
        db: Session = Depends(get_db),
        user: dict = Depends(get_current_user),
        tenant_id: str = Depends(get_tenant_id)
    ):
        db_record = _record_or_404(db, record_id, tenant_id)
        db_record = crud_freight.update_record(db, db_record, record, tenant_id, get_user_identifier(user))
        logger.info(f"{label} {record_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
        return db_record

    @router.post("/{record_id}/advances", response_model=read_schema)
    def add_advance(
        record_id: int,
        entry: PaymentRecord,
        db: Session = Depends(get_db),
        user: dict = Depends(get_current_user),
        tenant_id: str = Depends(get_tenant_id)
    ):
        db_record = _record_or_404(db, record_id, tenant_id)
        try:
            db_record = crud_freight.add_advance(db, db_record, entry, tenant_id, get_user_identifier(user))
        except InvalidPaymentEntry as e:
            logger.warning(f"Advance of {entry.amount} rejected for {label.lower()} {record_id}, tenant {tenant_id}")
            raise HTTPException(status_code=400, detail=str(e))
        logger.info(f"Advance of {entry.amount} added to {label.lower()} {record_id} by user {get_user_identifier(user)} for tenant {tenant_id}")
        return db_record

    @router.delete("/{record_id}/advances/{index}", response_model=read_schema)
    def remove_advance(
        record_id: int,
        index: int,
        db: Session = Depends(get_db),
        user: dict = Depends(get_current_user),
        tenant_id: str = Depends(get_tenant_id)
    ):
        db_record = _record_or_404(db, record_id, tenant_id)
        db_record = crud_freight.remove_advance(db, db_record, index, tenant_id, get_user_identifier(user))
        logger.info(f"Advance {index} removed from {label.lower()} {record_id} by user {get_user_identifier(user)} for tenant {tenant_id}")
        return db_record

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_entry(
        record_id: int,
        db: Session = Depends(get_db),
        user: dict = Depends(get_current_user),
        tenant_id: str = Depends(get_tenant_id)
    ):
        db_record = _record_or_404(db, record_id, tenant_id)
        crud_freight.delete_record(db, db_record, tenant_id, get_user_identifier(user))
        logger.info(f"{label} {record_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")

    return router
