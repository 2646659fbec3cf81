from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Table,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from reservas.database import Base

# Servicios que ofrece cada barbero
provider_services = Table(
    "provider_services",
    Base.metadata,
    Column(
        "provider_id",
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "service_id",
        Integer,
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    extend_existing=True,
)


class Provider(Base):
    __tablename__ = "providers"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="providers")
    user = relationship("User")
    services = relationship(
        "Service", secondary=provider_services, back_populates="providers"
    )
    availability_rules = relationship(
        "AvailabilityRule",
        back_populates="provider",
        cascade="all, delete-orphan",
        order_by="AvailabilityRule.weekday",
    )
    bookings = relationship("Booking", back_populates="provider")

    def offers_service(self, service_id: int) -> bool:
        # Sin servicios asignados el barbero atiende todo el catálogo
        if not self.services:
            return True
        return any(service.id == service_id for service in self.services)
