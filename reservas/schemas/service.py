from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime


class ServiceBase(BaseModel):
    name: str
    description: Optional[str] = None
    duration_minutes: int = 30
    price: int

    @validator("name")
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("El nombre del servicio es obligatorio")
        return v

    @validator("duration_minutes")
    def validate_duration(cls, v):
        if v <= 0 or v > 600:
            raise ValueError("duration_minutes must be between 1 and 600")
        return v

    @validator("price")
    def validate_price(cls, v):
        if v <= 0:
            raise ValueError("price must be greater than 0")
        return v


class ServiceCreate(ServiceBase):
    is_active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Optional[int] = None
    is_active: Optional[bool] = None

    @validator("name", "duration_minutes", "price", "is_active", pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @validator("name")
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("El nombre del servicio es obligatorio")
        return v

    @validator("duration_minutes")
    def validate_duration(cls, v):
        if v <= 0 or v > 600:
            raise ValueError("duration_minutes must be between 1 and 600")
        return v

    @validator("price")
    def validate_price(cls, v):
        if v <= 0:
            raise ValueError("price must be greater than 0")
        return v


class ServiceResponse(ServiceBase):
    id: int
    tenant_id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
