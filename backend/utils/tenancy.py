from typing import Optional
from fastapi import Header, HTTPException

def get_tenant_id(x_tenant_id: Optional[str] = Header(None)) -> str:
    """Every register and master table is partitioned by the X-Tenant-ID header."""
    if not x_tenant_id or not x_tenant_id.strip():
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is missing")
    return x_tenant_id.strip()
