from pydantic import BaseModel, validator
from typing import List, Optional
from datetime import date, time


class AvailabilityRuleBase(BaseModel):
    weekday: int  # 0 = lunes, 6 = domingo
    start_time: time
    end_time: time

    @validator("weekday")
    def validate_weekday(cls, v):
        if not 0 <= v <= 6:
            raise ValueError("weekday must be between 0 (Monday) and 6 (Sunday)")
        return v

    @validator("end_time")
    def validate_range(cls, v, values):
        start = values.get("start_time")
        if start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v


class AvailabilityRuleCreate(AvailabilityRuleBase):
    pass


class AvailabilityRuleResponse(AvailabilityRuleBase):
    id: int

    class Config:
        from_attributes = True


class ScheduleBlockBase(BaseModel):
    provider_id: Optional[int] = None
    start_date: date
    end_date: Optional[date] = None
    start_time: time = time(0, 0)
    end_time: time = time(23, 59)
    reason: Optional[str] = None

    @validator("end_date", always=True)
    def default_end_date(cls, v, values):
        start = values.get("start_date")
        if v is None:
            return start
        if start is not None and v < start:
            raise ValueError("end_date cannot be before start_date")
        return v

    @validator("end_time")
    def validate_time_range(cls, v, values):
        start = values.get("start_time")
        if start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v


class ScheduleBlockCreate(ScheduleBlockBase):
    pass


class ScheduleBlockResponse(ScheduleBlockBase):
    id: int
    tenant_id: int

    class Config:
        from_attributes = True


class Slot(BaseModel):
    time: str
    end_time: str
    available: bool


class DayAvailability(BaseModel):
    date: date
    provider_id: int
    service_id: int
    duration_minutes: int
    available_slots: List[str]
    all_slots: List[Slot]


class SlotCheck(BaseModel):
    available: bool
    message: str
    date: date
    provider_id: int
    start_time: str
    end_time: str
    duration_minutes: int


class AvailableDay(BaseModel):
    day: int
    date: date
    slots_count: int
    first_slot: str
    last_slot: str


class UnavailableDay(BaseModel):
    day: int
    date: date
    reason: str  # past | not_working_day | blocked | no_slots


class MonthAvailability(BaseModel):
    provider_id: int
    service_id: int
    year: int
    month: int
    total_days: int
    available_days: List[AvailableDay]
    unavailable_days: List[UnavailableDay]
