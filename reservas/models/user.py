from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Enum,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from reservas.database import Base


class UserRole(enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"
    CLIENT = "client"


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True)
    email = Column(String, unique=True, index=True)
    phone = Column(String)
    hashed_password = Column(String)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True)
    role = Column(Enum(UserRole), default=UserRole.CLIENT, nullable=False)
    is_active = Column(Boolean, default=True)
    is_super_admin = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="members", foreign_keys=[tenant_id])

    @property
    def is_tenant_admin(self) -> bool:
        return self.role in (UserRole.OWNER, UserRole.ADMIN)
