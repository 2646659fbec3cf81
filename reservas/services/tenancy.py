"""
Dependencias de FastAPI para aislar los datos de cada barbería.
Toda ruta bajo /tenants/{slug} resuelve el tenant por slug y, para las
rutas de gestión, exige que el usuario pertenezca a ese tenant.
"""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from reservas.crud import tenant as tenant_crud
from reservas.database import get_db
from reservas.models.tenant import Tenant
from reservas.models.user import User
from reservas.services.auth import get_current_user


def get_tenant(slug: str, db: Session = Depends(get_db)) -> Tenant:
    tenant = tenant_crud.get_tenant_by_slug(db, slug)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant


def user_can_manage(user: User, tenant: Tenant) -> bool:
    if user.is_super_admin:
        return True
    return user.tenant_id == tenant.id and user.is_tenant_admin


def get_staff_tenant(
    tenant: Tenant = Depends(get_tenant),
    current_user: User = Depends(get_current_user),
) -> Tenant:
    if not user_can_manage(current_user, tenant):
        raise HTTPException(
            status_code=403, detail="You do not have access to this tenant"
        )
    return tenant
