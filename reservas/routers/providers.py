from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from reservas.crud import provider as crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.schemas.availability import AvailabilityRuleCreate
from reservas.schemas.provider import ProviderCreate, ProviderResponse, ProviderUpdate
from reservas.services.tenancy import get_staff_tenant, get_tenant

router = APIRouter()


@router.get("/{slug}/providers", response_model=List[ProviderResponse])
def read_providers(
    service_id: Optional[int] = None,
    tenant: Tenant = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    return crud.get_providers(db, tenant.id, service_id=service_id)


@router.get("/{slug}/providers/{provider_id}", response_model=ProviderResponse)
def read_provider(
    provider_id: int, tenant: Tenant = Depends(get_tenant), db: Session = Depends(get_db)
):
    db_provider = crud.get_provider(db, tenant.id, provider_id)
    if db_provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return db_provider


@router.post("/{slug}/providers", response_model=ProviderResponse, status_code=201)
def create_provider(
    provider: ProviderCreate,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    try:
        return crud.create_provider(db, tenant.id, provider)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{slug}/providers/{provider_id}", response_model=ProviderResponse)
def update_provider(
    provider_id: int,
    provider: ProviderUpdate,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    try:
        db_provider = crud.update_provider(db, tenant.id, provider_id, provider)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    if db_provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return db_provider


@router.put(
    "/{slug}/providers/{provider_id}/availability", response_model=ProviderResponse
)
def replace_provider_availability(
    provider_id: int,
    rules: List[AvailabilityRuleCreate],
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    """Reemplaza el horario semanal del barbero. Una lista vacía vuelve al horario de la barbería."""
    db_provider = crud.replace_availability(db, tenant.id, provider_id, rules)
    if db_provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return db_provider


@router.delete("/{slug}/providers/{provider_id}", status_code=204)
def delete_provider(
    provider_id: int,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    if not crud.deactivate_provider(db, tenant.id, provider_id):
        raise HTTPException(status_code=404, detail="Provider not found")
    return Response(status_code=204)
