from pydantic import BaseModel, EmailStr, validator
from typing import Optional
from datetime import datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import re

from reservas.models.tenant import TenantPlan, TenantStatus

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Columnas NOT NULL que un PUT parcial no puede dejar en null
REQUIRED_SETTINGS = (
    "name",
    "timezone",
    "opening_time",
    "closing_time",
    "monday_open",
    "tuesday_open",
    "wednesday_open",
    "thursday_open",
    "friday_open",
    "saturday_open",
    "sunday_open",
    "slot_interval_minutes",
    "min_lead_minutes",
    "status",
)


def _check_name(v):
    v = v.strip()
    if not v:
        raise ValueError("El nombre es obligatorio")
    return v


def _check_timezone(v):
    try:
        ZoneInfo(v)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone '{v}'")
    return v


def _check_interval(v):
    if v <= 0 or v > 240:
        raise ValueError("slot_interval_minutes must be between 1 and 240")
    return v


def _check_lead(v):
    if v < 0:
        raise ValueError("min_lead_minutes cannot be negative")
    return v


class TenantBase(BaseModel):
    name: str
    contact_email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    timezone: str = "America/Santiago"

    # Horario general (se usa cuando el barbero no tiene horario propio)
    opening_time: time = time(9, 0)
    closing_time: time = time(19, 0)
    monday_open: bool = True
    tuesday_open: bool = True
    wednesday_open: bool = True
    thursday_open: bool = True
    friday_open: bool = True
    saturday_open: bool = True
    sunday_open: bool = False

    slot_interval_minutes: int = 15
    min_lead_minutes: int = 120

    @validator("name")
    def validate_name(cls, v):
        return _check_name(v)

    @validator("timezone")
    def validate_timezone(cls, v):
        return _check_timezone(v)

    @validator("closing_time")
    def validate_hours(cls, v, values):
        opening = values.get("opening_time")
        if opening is not None and v <= opening:
            raise ValueError("closing_time must be after opening_time")
        return v

    @validator("slot_interval_minutes")
    def validate_interval(cls, v):
        return _check_interval(v)

    @validator("min_lead_minutes")
    def validate_lead(cls, v):
        return _check_lead(v)


class TenantCreate(TenantBase):
    slug: str

    @validator("slug")
    def validate_slug(cls, v):
        v = v.strip().lower()
        if not 3 <= len(v) <= 50 or not SLUG_RE.match(v):
            raise ValueError(
                "slug must be 3-50 characters of lowercase letters, digits and dashes"
            )
        return v


class TenantUpdate(BaseModel):
    """
    Actualización parcial de la barbería. Los campos omitidos no se tocan;
    enviar null solo está permitido en los datos de contacto.
    El cruce apertura/cierre se valida contra la fila ya guardada en crud.
    """

    name: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    timezone: Optional[str] = None
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None
    monday_open: Optional[bool] = None
    tuesday_open: Optional[bool] = None
    wednesday_open: Optional[bool] = None
    thursday_open: Optional[bool] = None
    friday_open: Optional[bool] = None
    saturday_open: Optional[bool] = None
    sunday_open: Optional[bool] = None
    slot_interval_minutes: Optional[int] = None
    min_lead_minutes: Optional[int] = None
    status: Optional[TenantStatus] = None

    @validator(*REQUIRED_SETTINGS, pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @validator("name")
    def validate_name(cls, v):
        return _check_name(v)

    @validator("timezone")
    def validate_timezone(cls, v):
        return _check_timezone(v)

    @validator("slot_interval_minutes")
    def validate_interval(cls, v):
        return _check_interval(v)

    @validator("min_lead_minutes")
    def validate_lead(cls, v):
        return _check_lead(v)


class TenantResponse(TenantBase):
    id: int
    slug: str
    plan: TenantPlan
    status: TenantStatus
    owner_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
