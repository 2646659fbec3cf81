from sqlalchemy.orm import Session
from typing import List, Optional

from reservas.models.service import Service
from reservas.schemas.service import ServiceCreate, ServiceUpdate


def get_service(db: Session, tenant_id: int, service_id: int) -> Optional[Service]:
    return (
        db.query(Service)
        .filter(Service.tenant_id == tenant_id, Service.id == service_id)
        .first()
    )


def get_active_service(db: Session, tenant_id: int, service_id: int) -> Optional[Service]:
    return (
        db.query(Service)
        .filter(
            Service.tenant_id == tenant_id,
            Service.id == service_id,
            Service.is_active == True,
        )
        .first()
    )


def get_services(
    db: Session,
    tenant_id: int,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> List[Service]:
    query = db.query(Service).filter(Service.tenant_id == tenant_id)
    if not include_inactive:
        query = query.filter(Service.is_active == True)
    return query.order_by(Service.name).offset(skip).limit(limit).all()


def create_service(db: Session, tenant_id: int, service: ServiceCreate) -> Service:
    db_service = Service(tenant_id=tenant_id, **service.model_dump())
    db.add(db_service)
    db.commit()
    db.refresh(db_service)
    return db_service


def update_service(
    db: Session, tenant_id: int, service_id: int, service: ServiceUpdate
) -> Optional[Service]:
    db_service = get_service(db, tenant_id, service_id)
    if not db_service:
        return None

    update_data = service.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_service, field, value)

    db.commit()
    db.refresh(db_service)
    return db_service


def deactivate_service(db: Session, tenant_id: int, service_id: int) -> bool:
    # Las reservas históricas referencian el servicio, por eso no se borra
    db_service = get_service(db, tenant_id, service_id)
    if not db_service:
        return False

    db_service.is_active = False
    db.commit()
    return True
