from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime


class ClientStats(BaseModel):
    total_visits: int = 0
    total_spent: int = 0
    average_spent: int = 0
    last_visit: Optional[date] = None
    visit_frequency: str = "low"  # low (<5) | medium (5-9) | high (10+)


class ClientResponse(BaseModel):
    id: int
    tenant_id: int
    name: str
    phone: str
    email: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClientWithStats(ClientResponse):
    stats: ClientStats
