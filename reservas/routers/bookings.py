from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from reservas.crud import booking as crud
from reservas.database import get_db
from reservas.models.booking import BookingStatus
from reservas.models.tenant import Tenant
from reservas.models.user import User
from reservas.schemas.booking import (
    Booking,
    BookingCreate,
    BookingReschedule,
    BookingStatusUpdate,
)
from reservas.services.auth import get_current_user
from reservas.services.tenancy import get_staff_tenant, get_tenant
from reservas.utils.errors import BookingError, ResourceNotFoundError, to_http_exception

router = APIRouter()


@router.post("/{slug}/bookings", response_model=Booking, status_code=201)
def create_booking(
    booking: BookingCreate,
    tenant: Tenant = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    """Reserva pública: no requiere autenticación."""
    if not tenant.is_active:
        raise HTTPException(status_code=403, detail="Tenant is not accepting bookings")

    try:
        return crud.create_booking(db=db, tenant=tenant, booking=booking)
    except (BookingError, ResourceNotFoundError) as e:
        raise to_http_exception(e)


@router.get("/{slug}/bookings", response_model=List[Booking])
def read_bookings(
    skip: int = 0,
    limit: int = 100,
    scheduled_date: Optional[date] = None,
    provider_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    return crud.get_bookings(
        db=db,
        tenant_id=tenant.id,
        skip=skip,
        limit=limit,
        scheduled_date=scheduled_date,
        provider_id=provider_id,
        status=status,
    )


@router.get("/{slug}/bookings/{booking_id}", response_model=Booking)
def read_booking(
    booking_id: int,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    db_booking = crud.get_booking(db=db, tenant_id=tenant.id, booking_id=booking_id)
    if db_booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return db_booking


@router.patch("/{slug}/bookings/{booking_id}", response_model=Booking)
def reschedule_booking(
    booking_id: int,
    changes: BookingReschedule,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    try:
        db_booking = crud.reschedule_booking(
            db=db, tenant=tenant, booking_id=booking_id, changes=changes
        )
    except (BookingError, ResourceNotFoundError) as e:
        raise to_http_exception(e)
    if db_booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return db_booking


@router.patch("/{slug}/bookings/{booking_id}/status", response_model=Booking)
def update_booking_status(
    booking_id: int,
    status_update: BookingStatusUpdate,
    tenant: Tenant = Depends(get_staff_tenant),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        db_booking = crud.update_booking_status(
            db=db,
            tenant=tenant,
            booking_id=booking_id,
            new_status=status_update.status,
            user_id=current_user.id,
        )
    except BookingError as e:
        raise to_http_exception(e)
    if db_booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return db_booking


@router.delete("/{slug}/bookings/{booking_id}", status_code=204)
def delete_booking(
    booking_id: int,
    tenant: Tenant = Depends(get_staff_tenant),
    db: Session = Depends(get_db),
):
    if not crud.delete_booking(db=db, tenant_id=tenant.id, booking_id=booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")
    return Response(status_code=204)
