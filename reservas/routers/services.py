from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from reservas.crud import service as crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from reservas.services.tenancy import get_staff_tenant, get_tenant
from reservas.utils.errors import is_conflict_error

router = APIRouter()


@router.get("/{slug}/services", response_model=List[ServiceResponse])
def read_services(
    skip: int = 0,
    limit: int = 100,
    tenant: Tenant = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    return crud.get_services(db, tenant.id, skip=skip, limit=limit)


@router.get("/{slug}/services/all", response_model=List[ServiceResponse])
def read_all_services(
    tenant: Tenant = Depends(get_staff_tenant), db: Session = Depends(get_db)
):
    """Incluye los servicios desactivados (solo gestión)."""
    return crud.get_services(db, tenant.id, include_inactive=True)


@router.get("/{slug}/services/{service_id}", response_model=ServiceResponse)
def read_service(
    service_id: int, tenant: Tenant = Depends(get_tenant), db: Session = Depends(get_db)
):
    db_service = crud.get_service(db, tenant.id, service_id)
    if db_service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return db_service


@router.post("/{slug}/services", response_model=ServiceResponse, status_code=201)
def create_service(
    service: ServiceCreate,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    try:
        return crud.create_service(db, tenant.id, service)
    except IntegrityError as e:
        db.rollback()
        if not is_conflict_error(e):
            raise
        raise HTTPException(status_code=409, detail="Service name already exists")


@router.put("/{slug}/services/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    service: ServiceUpdate,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    try:
        db_service = crud.update_service(db, tenant.id, service_id, service)
    except IntegrityError as e:
        db.rollback()
        if not is_conflict_error(e):
            raise
        raise HTTPException(status_code=409, detail="Service name already exists")
    if db_service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return db_service


@router.delete("/{slug}/services/{service_id}", status_code=204)
def delete_service(
    service_id: int,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    if not crud.deactivate_service(db, tenant.id, service_id):
        raise HTTPException(status_code=404, detail="Service not found")
    return Response(status_code=204)
