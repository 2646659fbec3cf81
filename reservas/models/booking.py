from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    ForeignKey,
    Enum,
    Index,
    text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from reservas.database import Base


class BookingStatus(enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Estados que ocupan la agenda del barbero
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

_ACTIVE_WHERE = text("status IN ('PENDING', 'CONFIRMED')")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # Dos reservas activas no pueden empezar a la misma hora con el mismo barbero.
        # En PostgreSQL además existe una exclusion constraint por rango (ver alembic).
        Index(
            "uq_active_booking_provider_start",
            "provider_id",
            "start_at",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
        Index("ix_bookings_tenant_date", "tenant_id", "scheduled_date"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)

    client_name = Column(String, nullable=False)
    client_phone = Column(String, nullable=False)
    client_email = Column(String, nullable=True)

    scheduled_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)  # "HH:MM"
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    total_price = Column(Integer, nullable=False)

    status = Column(Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="bookings")
    service = relationship("Service")
    provider = relationship("Provider", back_populates="bookings")
    client = relationship("Client", back_populates="bookings")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATUSES
