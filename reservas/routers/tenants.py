from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from reservas.crud import tenant as crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.schemas.tenant import TenantResponse, TenantUpdate
from reservas.services.tenancy import get_staff_tenant, get_tenant

router = APIRouter()


@router.get("/{slug}", response_model=TenantResponse)
def read_tenant(tenant: Tenant = Depends(get_tenant)):
    return tenant


@router.put("/{slug}", response_model=TenantResponse)
def update_tenant(
    tenant_update: TenantUpdate,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    try:
        return crud.update_tenant(db, tenant, tenant_update)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
