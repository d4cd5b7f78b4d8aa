import json
import logging
from sqlalchemy.orm import Session
from models.app_config import AppConfig
from models.audit_mixin import now_ist
from schemas.app_config import CompanyProfile, CompanyProfileUpdate

# Audit imports
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict

logger = logging.getLogger(__name__)

COMPANY_PREFIX = "company."
# Profile fields kept as JSON text in the value column
JSON_FIELDS = {"contact", "branch_locations", "bank_details"}


def get_config(db: Session, tenant_id: str, name: str = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name, AppConfig.tenant_id == tenant_id).first()
    return db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id).all()


def _decode(value: str):
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return value


def _encode(value) -> str:
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return "" if value is None else str(value)


def get_company_profile(db: Session, tenant_id: str) -> CompanyProfile:
    configs = db.query(AppConfig).filter(
        AppConfig.tenant_id == tenant_id,
        AppConfig.name.startswith(COMPANY_PREFIX),
    ).all()
    stored = {c.name[len(COMPANY_PREFIX):]: c.value for c in configs}

    profile = {}
    for field in CompanyProfile.model_fields:
        if field not in stored:
            continue
        if field in JSON_FIELDS:
            value = _decode(stored[field])
            # A cleared list or block falls back to its default
            if isinstance(value, (list, dict)):
                profile[field] = value
        else:
            profile[field] = stored[field]
    if profile.get("email") == "":
        profile["email"] = None
    return CompanyProfile(**profile)


def update_company_profile(db: Session, updates: CompanyProfileUpdate, tenant_id: str, user_id: str) -> CompanyProfile:
    for field, value in updates.model_dump(exclude_unset=True).items():
        name = f"{COMPANY_PREFIX}{field}"
        db_config = get_config(db, tenant_id, name)
        if db_config:
            old_values = sqlalchemy_to_dict(db_config)
            db_config.value = _encode(value)
            db_config.updated_at = now_ist()
            db_config.updated_by = user_id
            action = 'UPDATE'
        else:
            db_config = AppConfig(name=name, value=_encode(value), tenant_id=tenant_id, created_by=user_id)
            db.add(db_config)
            old_values = {}
            action = 'CREATE'

        db.commit()
        db.refresh(db_config)

        log_entry = AuditLogCreate(
            tenant_id=tenant_id,
            table_name='app_config',
            record_id=db_config.id,
            changed_by=user_id,
            action=action,
            old_values=old_values,
            new_values=sqlalchemy_to_dict(db_config)
        )
        create_audit_log(db, log_entry)

    logger.info(f"Company profile updated for tenant {tenant_id} by {user_id}")
    return get_company_profile(db, tenant_id)
