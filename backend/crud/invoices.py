from typing import List, Optional

from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from models.audit_mixin import now_ist
from models.invoices import Invoice
from models.lorry_receipts import LorryReceipt
from schemas import invoices as schemas
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict
from utils.formatting import amount_to_words, round_rupees
from utils.ledger_calc import compute_invoice_totals


def billed_to_for(lorry_receipts: List[LorryReceipt]) -> dict:
    """The billing party of the first LR, or its consignor when no billing party was entered."""
    if not lorry_receipts:
        return {"name": "N/A", "address": "N/A", "gst": "N/A"}
    first = lorry_receipts[0]
    if (first.billing_to or {}).get("name"):
        return first.billing_to
    return first.consignor or {}


def suggest_bill_no(lorry_receipts: List[LorryReceipt], year: int) -> str:
    if lorry_receipts and lorry_receipts[0].invoice_no:
        return lorry_receipts[0].invoice_no
    return f"INV-{year}-{len(lorry_receipts):04d}"


def invoice_lines(lorry_receipts: List[LorryReceipt]) -> List[dict]:
    return [
        {
            "lorry_receipt_id": lr.id,
            "lr_no": lr.lr_no,
            "date": lr.date,
            "truck_no": lr.truck_no,
            "from_place": lr.from_place,
            "to_place": lr.to_place,
            "freight": lr.freight,
            "other_charges": lr.total_charges,
            "line_total": lr.line_total,
        }
        for lr in lorry_receipts
    ]


def totals_with_words(lorry_receipts: List[LorryReceipt], tax_type) -> dict:
    totals = compute_invoice_totals(lorry_receipts, tax_type)._asdict()
    totals["amount_in_words"] = amount_to_words(round_rupees(totals["net_amount"]))
    return totals


def preview_invoice(lorry_receipts: List[LorryReceipt], tax_type) -> dict:
    return {
        **totals_with_words(lorry_receipts, tax_type),
        "tax_type": tax_type,
        "suggested_bill_no": suggest_bill_no(lorry_receipts, now_ist().year),
        "billed_to": billed_to_for(lorry_receipts),
        "lines": invoice_lines(lorry_receipts),
    }


def invoice_to_dict(invoice: Invoice) -> dict:
    data = {column.key: getattr(invoice, column.key) for column in Invoice.__table__.columns}
    data["billed_to"] = invoice.billed_to or {}
    data["lines"] = invoice_lines(invoice.lorry_receipts)
    return data


def get_invoice(db: Session, invoice_id: int, tenant_id: str) -> Optional[Invoice]:
    return db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.tenant_id == tenant_id).first()


def get_invoice_by_bill_no(db: Session, bill_no: str, tenant_id: str) -> Optional[Invoice]:
    return db.query(Invoice).filter(Invoice.bill_no == bill_no, Invoice.tenant_id == tenant_id).first()


def list_invoices(db: Session, tenant_id: str, skip: int = 0, limit: int = 100) -> List[Invoice]:
    return db.query(Invoice).filter(Invoice.tenant_id == tenant_id).order_by(
        Invoice.bill_date.desc(), Invoice.id.desc()
    ).offset(skip).limit(limit).all()


def create_invoice(db: Session, invoice: schemas.InvoiceCreate, lorry_receipts: List[LorryReceipt],
                   tenant_id: str, user_id: str) -> Invoice:
    """
    Persist a tax invoice over the given LRs.

    Totals and words are stored as computed now. Each LR is linked to the
    invoice and stamped with the bill number and date.
    """
    db_invoice = Invoice(
        bill_no=invoice.bill_no,
        bill_date=invoice.bill_date,
        tax_type=invoice.tax_type,
        billed_to=billed_to_for(lorry_receipts),
        tenant_id=tenant_id,
        created_by=user_id,
        **totals_with_words(lorry_receipts, invoice.tax_type),
    )
    db.add(db_invoice)
    db.flush()

    for lr in lorry_receipts:
        lr.invoice_id = db_invoice.id
        lr.invoice_no = invoice.bill_no
        lr.invoice_date = invoice.bill_date
        lr.updated_at = now_ist()
        lr.updated_by = user_id

    db.commit()
    db.refresh(db_invoice)
    return db_invoice


def delete_invoice(db: Session, db_invoice: Invoice, tenant_id: str, user_id: str) -> Invoice:
    old_values = sqlalchemy_to_dict(db_invoice)
    for lr in list(db_invoice.lorry_receipts):
        lr.invoice_id = None
    # Soft-delete
    db_invoice.deleted_at = now_ist()
    db_invoice.deleted_by = user_id
    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='invoices',
        record_id=db_invoice.id,
        changed_by=user_id,
        action='DELETE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_invoice),
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    return db_invoice
