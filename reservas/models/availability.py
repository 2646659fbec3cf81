from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Time,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime, time

from reservas.database import Base


class AvailabilityRule(Base):
    """Horario semanal de trabajo de un barbero (0 = lunes, 6 = domingo)."""

    __tablename__ = "availability_rules"
    __table_args__ = (
        CheckConstraint("weekday >= 0 AND weekday <= 6", name="ck_rules_weekday"),
        CheckConstraint("start_time < end_time", name="ck_rules_time_range"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    provider_id = Column(
        Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False
    )
    weekday = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    provider = relationship("Provider", back_populates="availability_rules")


class ScheduleBlock(Base):
    """Bloqueo de agenda. Sin provider_id aplica a toda la barbería."""

    __tablename__ = "schedule_blocks"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    provider_id = Column(
        Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=True
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(Time, default=time(0, 0), nullable=False)
    end_time = Column(Time, default=time(23, 59), nullable=False)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    provider = relationship("Provider")

    @property
    def is_full_day(self) -> bool:
        return self.start_time <= time(0, 0) and self.end_time >= time(23, 59)
