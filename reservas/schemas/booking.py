from pydantic import BaseModel, EmailStr, validator
from datetime import date, datetime
from typing import Optional

from reservas.models.booking import BookingStatus
from reservas.utils.time_slots import normalize_time_string


def _normalize_time(v):
    normalized = normalize_time_string(v)
    if normalized is None:
        raise ValueError("time must use the HH:MM format")
    return normalized


class BookingCreate(BaseModel):
    service_id: int
    provider_id: Optional[int] = None
    scheduled_date: date
    scheduled_time: str  # "HH:MM"
    client_name: str
    client_phone: str
    client_email: Optional[EmailStr] = None
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.CONFIRMED
    total_price: Optional[int] = None
    duration_minutes: Optional[int] = None

    @validator("scheduled_time")
    def validate_time(cls, v):
        return _normalize_time(v)

    @validator("client_name", "client_phone")
    def validate_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("field cannot be blank")
        return v

    @validator("status")
    def validate_initial_status(cls, v):
        if v not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise ValueError("a new booking must be pending or confirmed")
        return v

    @validator("duration_minutes")
    def validate_duration(cls, v):
        if v is not None and (v <= 0 or v > 600):
            raise ValueError("duration_minutes must be between 1 and 600")
        return v

    @validator("total_price")
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("total_price cannot be negative")
        return v


class BookingReschedule(BaseModel):
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    provider_id: Optional[int] = None
    notes: Optional[str] = None

    @validator("scheduled_time")
    def validate_time(cls, v):
        if v is None:
            return v
        return _normalize_time(v)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingInDB(BaseModel):
    id: int
    tenant_id: int
    service_id: int
    provider_id: int
    client_id: Optional[int] = None
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    scheduled_date: date
    start_time: str
    end_time: str
    start_at: datetime
    end_at: datetime
    duration_minutes: int
    total_price: int
    status: BookingStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Booking(BookingInDB):
    pass
