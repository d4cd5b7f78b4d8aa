from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from database import get_db
from schemas.app_config import CompanyProfile, CompanyProfileUpdate
from crud import app_config as crud_app_config
from utils.auth_utils import get_user_identifier, require_group
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/company-profile", tags=["Company Profile"])
logger = logging.getLogger("app_config")


@router.get("/", response_model=CompanyProfile)
def get_company_profile(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Letterhead, tax ids and bank details; unset keys come back empty."""
    return crud_app_config.get_company_profile(db, tenant_id)


@router.put("/", response_model=CompanyProfile)
def update_company_profile(
    profile: CompanyProfileUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    updated = crud_app_config.update_company_profile(db, profile, tenant_id, get_user_identifier(user))
    logger.info(f"Company profile for tenant {tenant_id} saved by user {get_user_identifier(user)}")
    return updated
