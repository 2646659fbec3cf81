from sqlalchemy.orm import Session
from typing import Optional

from reservas.models.tenant import Tenant
from reservas.schemas.tenant import TenantUpdate


def get_tenant_by_slug(db: Session, slug: str) -> Optional[Tenant]:
    return db.query(Tenant).filter(Tenant.slug == slug.lower()).first()


def update_tenant(db: Session, tenant: Tenant, tenant_update: TenantUpdate) -> Tenant:
    update_data = tenant_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(tenant, field, value)

    if tenant.closing_time <= tenant.opening_time:
        db.rollback()
        raise ValueError("closing_time must be after opening_time")

    db.commit()
    db.refresh(tenant)
    return tenant


def is_tenant_open_on_day(tenant: Tenant, day_of_week: int) -> bool:
    """
    Verifica si la barbería abre en un día específico de la semana.

    Args:
        tenant: Objeto Tenant
        day_of_week: Día de la semana (0 = lunes, 6 = domingo)

    Returns:
        True si abre, False en caso contrario
    """
    day_fields = [
        tenant.monday_open,
        tenant.tuesday_open,
        tenant.wednesday_open,
        tenant.thursday_open,
        tenant.friday_open,
        tenant.saturday_open,
        tenant.sunday_open,
    ]

    return bool(day_fields[day_of_week])
