from pydantic import BaseModel, EmailStr, validator
from typing import List, Optional
from datetime import datetime

from reservas.schemas.availability import (
    AvailabilityRuleCreate,
    AvailabilityRuleResponse,
)


class ProviderBase(BaseModel):
    name: str
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    bio: Optional[str] = None

    @validator("name")
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("El nombre del barbero es obligatorio")
        return v


class ProviderCreate(ProviderBase):
    user_id: Optional[int] = None
    is_active: bool = True
    service_ids: List[int] = []
    availability: List[AvailabilityRuleCreate] = []


class ProviderUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    bio: Optional[str] = None
    is_active: Optional[bool] = None
    service_ids: Optional[List[int]] = None

    @validator("name", "is_active", pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @validator("name")
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("El nombre del barbero es obligatorio")
        return v


class ProviderServiceRef(BaseModel):
    id: int
    name: str
    duration_minutes: int
    price: int

    class Config:
        from_attributes = True


class ProviderResponse(ProviderBase):
    id: int
    tenant_id: int
    user_id: Optional[int] = None
    is_active: bool
    created_at: datetime
    services: List[ProviderServiceRef] = []
    availability_rules: List[AvailabilityRuleResponse] = []

    class Config:
        from_attributes = True
