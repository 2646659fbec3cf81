from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from reservas.crud import block as crud
from reservas.crud import provider as provider_crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.schemas.availability import ScheduleBlockCreate, ScheduleBlockResponse
from reservas.services.tenancy import get_staff_tenant

router = APIRouter()


@router.get("/{slug}/blocks", response_model=List[ScheduleBlockResponse])
def read_blocks(
    provider_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    return crud.get_blocks(
        db, tenant.id, provider_id=provider_id, date_from=date_from, date_to=date_to
    )


@router.post("/{slug}/blocks", response_model=ScheduleBlockResponse, status_code=201)
def create_block(
    block: ScheduleBlockCreate,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    if block.provider_id is not None and not provider_crud.get_provider(
        db, tenant.id, block.provider_id
    ):
        raise HTTPException(status_code=404, detail="Provider not found")
    return crud.create_block(db, tenant.id, block)


@router.delete("/{slug}/blocks/{block_id}", status_code=204)
def delete_block(
    block_id: int,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    if not crud.delete_block(db, tenant.id, block_id):
        raise HTTPException(status_code=404, detail="Block not found")
    return Response(status_code=204)
