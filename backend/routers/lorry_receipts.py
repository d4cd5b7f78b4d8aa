from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import lorry_receipts as crud_lr
from models.lorry_receipts import LRStatus
from schemas.lorry_receipts import LorryReceipt, LorryReceiptCreate, LorryReceiptUpdate, LorryReceiptStatusUpdate
from utils.auth_utils import get_current_user, get_user_identifier
from utils.s3_utils import is_storage_configured, upload_pod_to_s3, generate_presigned_download_url
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/lorry-receipts", tags=["Lorry Receipts"])
logger = logging.getLogger("lorry_receipts")

ALLOWED_POD_EXTENSIONS = {"pdf", "jpg", "jpeg", "png"}


def _lr_or_404(db: Session, lr_id: int, tenant_id: str):
    db_lr = crud_lr.get_lorry_receipt(db, lr_id, tenant_id)
    if db_lr is None:
        raise HTTPException(status_code=404, detail="Lorry receipt not found")
    return db_lr


@router.post("/", response_model=LorryReceipt, status_code=status.HTTP_201_CREATED)
def create_lorry_receipt(
    lr: LorryReceiptCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    if crud_lr.get_lorry_receipt_by_number(db, lr.lr_no, tenant_id):
        raise HTTPException(status_code=400, detail="Lorry receipt with this number already exists")
    try:
        db_lr = crud_lr.create_lorry_receipt(db, lr, tenant_id, get_user_identifier(user))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Lorry receipt with this number already exists")
    logger.info(f"Lorry receipt '{db_lr.lr_no}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_lr


@router.get("/", response_model=List[LorryReceipt])
def read_lorry_receipts(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    status: Optional[LRStatus] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_lr.list_lorry_receipts(db, tenant_id, search=search, status=status, skip=skip, limit=limit)


@router.get("/{lr_id}", response_model=LorryReceipt)
def read_lorry_receipt(lr_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return _lr_or_404(db, lr_id, tenant_id)


@router.patch("/{lr_id}", response_model=LorryReceipt)
def update_lorry_receipt(
    lr_id: int,
    lr: LorryReceiptUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_lr = _lr_or_404(db, lr_id, tenant_id)
    if lr.lr_no is not None and lr.lr_no != db_lr.lr_no:
        if crud_lr.get_lorry_receipt_by_number(db, lr.lr_no, tenant_id):
            raise HTTPException(status_code=400, detail="Lorry receipt with this number already exists")
    db_lr = crud_lr.update_lorry_receipt(db, db_lr, lr, tenant_id, get_user_identifier(user))
    logger.info(f"Lorry receipt '{db_lr.lr_no}' (ID: {lr_id}) updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_lr


@router.patch("/{lr_id}/status", response_model=LorryReceipt)
def update_lorry_receipt_status(
    lr_id: int,
    status_update: LorryReceiptStatusUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_lr = _lr_or_404(db, lr_id, tenant_id)
    previous = db_lr.status
    db_lr = crud_lr.update_lorry_receipt_status(db, db_lr, status_update.status, tenant_id, get_user_identifier(user))
    logger.info(f"Lorry receipt '{db_lr.lr_no}' moved from {previous.value} to {db_lr.status.value} by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_lr


@router.post("/{lr_id}/pod", response_model=LorryReceipt)
def upload_pod(
    lr_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Upload a proof-of-delivery scan for an LR and keep its S3 path."""
    if not is_storage_configured():
        logger.warning(f"POD upload for LR {lr_id} refused; S3 storage is not configured")
        raise HTTPException(status_code=501, detail="S3 upload functionality is not configured.")

    db_lr = _lr_or_404(db, lr_id, tenant_id)

    filename = file.filename or ""
    extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if extension not in ALLOWED_POD_EXTENSIONS:
        raise HTTPException(status_code=400, detail=f"Unsupported file type. Allowed: {', '.join(sorted(ALLOWED_POD_EXTENSIONS))}")

    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        s3_path = upload_pod_to_s3(tenant_id, lr_id, filename, content)
    except Exception as e:
        logger.exception(f"Failed to upload POD for LR {lr_id}")
        raise HTTPException(status_code=500, detail=f"Failed to upload POD: {str(e)}")

    db_lr = crud_lr.set_pod_path(db, db_lr, s3_path, tenant_id, get_user_identifier(user))
    logger.info(f"POD for lorry receipt '{db_lr.lr_no}' uploaded to {s3_path} by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_lr


@router.get("/{lr_id}/pod-download-url")
def get_pod_download_url(
    lr_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Get a pre-signed URL for downloading the LR's proof of delivery."""
    if not is_storage_configured():
        raise HTTPException(status_code=501, detail="S3 download functionality is not configured.")

    db_lr = _lr_or_404(db, lr_id, tenant_id)
    if not db_lr.pod_path:
        raise HTTPException(status_code=404, detail="POD not found")

    if not db_lr.pod_path.startswith('s3://'):
        raise HTTPException(status_code=400, detail="POD is not stored in S3.")

    try:
        download_url = generate_presigned_download_url(s3_path=db_lr.pod_path)
        return {"download_url": download_url}
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception(f"Failed to generate download URL for LR {lr_id}")
        raise HTTPException(status_code=500, detail=f"Failed to generate download URL: {str(e)}")


@router.delete("/{lr_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lorry_receipt(
    lr_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_lr = _lr_or_404(db, lr_id, tenant_id)
    if db_lr.invoice_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Lorry receipt is billed on an invoice; delete the invoice first.")
    crud_lr.delete_lorry_receipt(db, db_lr, tenant_id, get_user_identifier(user))
    logger.info(f"Lorry receipt '{db_lr.lr_no}' (ID: {lr_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
