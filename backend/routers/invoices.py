from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.background import BackgroundTask
from typing import List
import logging
import os

from database import get_db
from crud import invoices as crud_invoices
from crud.lorry_receipts import get_lorry_receipts_by_ids
from schemas.invoices import Invoice, InvoiceCreate, InvoicePreview, InvoiceRequest
from utils.auth_utils import get_current_user, get_user_identifier
from utils.invoice_pdf import build_invoice_pdf, invoice_filename
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/invoices", tags=["Invoices"])
logger = logging.getLogger("invoices")


def _load_lorry_receipts(db: Session, request: InvoiceRequest, tenant_id: str):
    if not request.lorry_receipt_ids:
        raise HTTPException(status_code=400, detail="Select at least one lorry receipt")
    lorry_receipts = get_lorry_receipts_by_ids(db, request.lorry_receipt_ids, tenant_id)
    found = {lr.id for lr in lorry_receipts}
    missing = [lr_id for lr_id in request.lorry_receipt_ids if lr_id not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Lorry receipts not found: {', '.join(map(str, missing))}")
    return lorry_receipts


def _invoice_or_404(db: Session, invoice_id: int, tenant_id: str):
    db_invoice = crud_invoices.get_invoice(db, invoice_id, tenant_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return db_invoice


@router.post("/preview", response_model=InvoicePreview)
def preview_invoice(
    request: InvoiceRequest,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Totals, words and suggested bill number for a selection of LRs. Nothing is saved."""
    lorry_receipts = _load_lorry_receipts(db, request, tenant_id)
    return crud_invoices.preview_invoice(lorry_receipts, request.tax_type)


@router.post("/", response_model=Invoice, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice: InvoiceCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    bill_no = invoice.bill_no.strip()
    if not bill_no:
        raise HTTPException(status_code=400, detail="Bill number is required")
    invoice.bill_no = bill_no
    if crud_invoices.get_invoice_by_bill_no(db, bill_no, tenant_id):
        raise HTTPException(status_code=400, detail="Invoice with this bill number already exists")

    lorry_receipts = _load_lorry_receipts(db, invoice, tenant_id)
    already_billed = [lr.lr_no for lr in lorry_receipts if lr.invoice_id]
    if already_billed:
        raise HTTPException(status_code=400, detail=f"Lorry receipts already invoiced: {', '.join(already_billed)}")

    try:
        db_invoice = crud_invoices.create_invoice(db, invoice, lorry_receipts, tenant_id, get_user_identifier(user))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Invoice with this bill number already exists")
    logger.info(f"Invoice '{db_invoice.bill_no}' for {len(lorry_receipts)} LRs (net {db_invoice.net_amount}) created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return crud_invoices.invoice_to_dict(db_invoice)


@router.get("/", response_model=List[Invoice])
def read_invoices(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return [crud_invoices.invoice_to_dict(i) for i in crud_invoices.list_invoices(db, tenant_id, skip=skip, limit=limit)]


@router.get("/{invoice_id}", response_model=Invoice)
def read_invoice(invoice_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud_invoices.invoice_to_dict(_invoice_or_404(db, invoice_id, tenant_id))


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(invoice_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    db_invoice = _invoice_or_404(db, invoice_id, tenant_id)
    try:
        filepath = build_invoice_pdf(db, db_invoice, tenant_id)
    except Exception as e:
        logger.exception(f"Failed to render PDF for invoice {invoice_id}")
        raise HTTPException(status_code=500, detail=f"Failed to generate invoice PDF: {str(e)}")
    return FileResponse(
        filepath,
        media_type="application/pdf",
        filename=invoice_filename(db_invoice),
        background=BackgroundTask(os.remove, filepath),
    )


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_invoice = _invoice_or_404(db, invoice_id, tenant_id)
    crud_invoices.delete_invoice(db, db_invoice, tenant_id, get_user_identifier(user))
    logger.info(f"Invoice '{db_invoice.bill_no}' (ID: {invoice_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
