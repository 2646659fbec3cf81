from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from reservas.crud import client as crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.schemas.booking import Booking
from reservas.schemas.client import ClientWithStats
from reservas.services.tenancy import get_staff_tenant

router = APIRouter()


@router.get("/{slug}/clients", response_model=List[ClientWithStats])
def read_clients(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    return crud.get_clients(db, tenant.id, search=search, skip=skip, limit=limit)


@router.get("/{slug}/clients/{client_id}/bookings", response_model=List[Booking])
def read_client_bookings(
    client_id: int,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    """Historial de reservas de un cliente."""
    if crud.get_client(db, tenant.id, client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return crud.get_client_bookings(db, tenant.id, client_id)
