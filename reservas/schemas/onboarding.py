from pydantic import BaseModel, validator
from typing import List, Optional

from reservas.models.tenant import TenantPlan
from reservas.schemas.tenant import TenantCreate, TenantResponse


class OnboardingService(BaseModel):
    """Servicio inicial. Los que no tengan nombre o precio válido se descartan."""

    name: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Optional[int] = None


class OnboardingProvider(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None


class OnboardingRequest(BaseModel):
    tenant: TenantCreate
    services: List[OnboardingService] = []
    provider: Optional[OnboardingProvider] = None
    plan: TenantPlan = TenantPlan.BASIC

    @validator("services")
    def validate_services_count(cls, v):
        if len(v) > 50:
            raise ValueError("too many services")
        return v


class OnboardingResponse(BaseModel):
    tenant: TenantResponse
    services_created: int
    provider_id: int
