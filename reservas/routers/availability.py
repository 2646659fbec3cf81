from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from datetime import date

from reservas.crud import provider as provider_crud
from reservas.crud import service as service_crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.schemas.availability import DayAvailability, MonthAvailability, SlotCheck
from reservas.services import availability as availability_service
from reservas.services.tenancy import get_tenant
from reservas.utils.errors import SlotConflictError, to_http_exception
from reservas.utils.time_slots import minutes_to_time_string, parse_time_to_minutes

router = APIRouter()


def _resolve(db: Session, tenant: Tenant, provider_id: int, service_id: int):
    service = service_crud.get_active_service(db, tenant.id, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found or inactive")
    provider = provider_crud.get_active_provider(db, tenant.id, provider_id)
    if not provider:
        raise HTTPException(status_code=404, detail="Provider not found or inactive")
    if not provider.offers_service(service.id):
        raise HTTPException(status_code=400, detail="Provider does not offer this service")
    return provider, service


@router.get("/{slug}/availability", response_model=DayAvailability)
def get_availability(
    provider_id: int,
    service_id: int,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    tenant: Tenant = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    """
    Devuelve todos los horarios del día con su disponibilidad y la lista de
    horarios libres para el servicio elegido.
    """
    provider, service = _resolve(db, tenant, provider_id, service_id)
    slots = availability_service.get_day_slots(
        db, tenant, provider, service.duration_minutes, target_date
    )
    return {
        "date": target_date,
        "provider_id": provider.id,
        "service_id": service.id,
        "duration_minutes": service.duration_minutes,
        "available_slots": [slot["time"] for slot in slots if slot["available"]],
        "all_slots": slots,
    }


@router.get("/{slug}/availability/check", response_model=SlotCheck)
def check_availability(
    provider_id: int,
    service_id: int,
    start_time: str,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    tenant: Tenant = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    provider, service = _resolve(db, tenant, provider_id, service_id)
    start_minutes = parse_time_to_minutes(start_time)
    if start_minutes == -1:
        raise HTTPException(status_code=400, detail="start_time must use the HH:MM format")

    try:
        availability_service.ensure_slot_available(
            db, tenant, provider, target_date, start_minutes, service.duration_minutes
        )
    except SlotConflictError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "available": True,
        "message": "Slot available",
        "date": target_date,
        "provider_id": provider.id,
        "start_time": minutes_to_time_string(start_minutes),
        "end_time": minutes_to_time_string(start_minutes + service.duration_minutes),
        "duration_minutes": service.duration_minutes,
    }


@router.get("/{slug}/availability/month", response_model=MonthAvailability)
def get_month_availability(
    provider_id: int,
    service_id: int,
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    tenant: Tenant = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    provider, service = _resolve(db, tenant, provider_id, service_id)
    result = availability_service.get_month_availability(
        db, tenant, provider, service.duration_minutes, year, month
    )
    result["service_id"] = service.id
    return result
