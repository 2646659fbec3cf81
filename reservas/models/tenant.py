from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Time,
    Boolean,
    ForeignKey,
    Enum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime, time
import enum

from reservas.database import Base


class TenantPlan(enum.Enum):
    BASIC = "basic"
    GROWTH = "growth"
    PRO_MULTI = "pro-multi"
    ENTERPRISE = "enterprise"


class TenantStatus(enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class Tenant(Base):
    __tablename__ = "tenants"
    __table_args__ = (
        CheckConstraint("slot_interval_minutes > 0", name="ck_tenants_slot_interval"),
        CheckConstraint("min_lead_minutes >= 0", name="ck_tenants_min_lead"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    owner_id = Column(
        Integer, ForeignKey("users.id", use_alter=True), nullable=True
    )
    plan = Column(Enum(TenantPlan), default=TenantPlan.BASIC, nullable=False)
    status = Column(Enum(TenantStatus), default=TenantStatus.ACTIVE, nullable=False)
    contact_email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    timezone = Column(String, default="America/Santiago")

    # Horario general de la barbería
    opening_time = Column(Time, default=time(9, 0), nullable=False)
    closing_time = Column(Time, default=time(19, 0), nullable=False)
    monday_open = Column(Boolean, default=True)
    tuesday_open = Column(Boolean, default=True)
    wednesday_open = Column(Boolean, default=True)
    thursday_open = Column(Boolean, default=True)
    friday_open = Column(Boolean, default=True)
    saturday_open = Column(Boolean, default=True)
    sunday_open = Column(Boolean, default=False)

    slot_interval_minutes = Column(Integer, default=15, nullable=False)
    min_lead_minutes = Column(Integer, default=120, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", foreign_keys=[owner_id], post_update=True)
    members = relationship(
        "User", back_populates="tenant", foreign_keys="User.tenant_id"
    )
    services = relationship(
        "Service", back_populates="tenant", cascade="all, delete-orphan"
    )
    providers = relationship(
        "Provider", back_populates="tenant", cascade="all, delete-orphan"
    )
    bookings = relationship(
        "Booking", back_populates="tenant", cascade="all, delete-orphan"
    )

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE
