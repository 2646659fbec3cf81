from pydantic import BaseModel, EmailStr, validator
from typing import Optional
from datetime import datetime

from reservas.models.user import UserRole


class UserBase(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None


class UserCreate(UserBase):
    password: str

    @validator("password")
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("La contraseña debe tener al menos 8 caracteres")
        return v


class UserInDB(UserBase):
    id: int
    tenant_id: Optional[int] = None
    role: UserRole
    created_at: datetime
    is_active: bool = True
    is_super_admin: bool = False

    class Config:
        from_attributes = True


class UserResponse(UserInDB):
    pass


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
