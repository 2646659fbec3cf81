from sqlalchemy.orm import Session
from typing import List, Optional

from reservas.models.availability import AvailabilityRule
from reservas.models.provider import Provider
from reservas.models.service import Service
from reservas.schemas.availability import AvailabilityRuleCreate
from reservas.schemas.provider import ProviderCreate, ProviderUpdate


def get_provider(db: Session, tenant_id: int, provider_id: int) -> Optional[Provider]:
    return (
        db.query(Provider)
        .filter(Provider.tenant_id == tenant_id, Provider.id == provider_id)
        .first()
    )


def get_active_provider(
    db: Session, tenant_id: int, provider_id: int
) -> Optional[Provider]:
    return (
        db.query(Provider)
        .filter(
            Provider.tenant_id == tenant_id,
            Provider.id == provider_id,
            Provider.is_active == True,
        )
        .first()
    )


def get_providers(
    db: Session,
    tenant_id: int,
    include_inactive: bool = False,
    service_id: Optional[int] = None,
) -> List[Provider]:
    query = db.query(Provider).filter(Provider.tenant_id == tenant_id)
    if not include_inactive:
        query = query.filter(Provider.is_active == True)
    providers = query.order_by(Provider.id).all()

    if service_id is not None:
        providers = [p for p in providers if p.offers_service(service_id)]
    return providers


def _resolve_services(db: Session, tenant_id: int, service_ids: List[int]) -> List[Service]:
    if not service_ids:
        return []
    services = (
        db.query(Service)
        .filter(Service.tenant_id == tenant_id, Service.id.in_(service_ids))
        .all()
    )
    missing = set(service_ids) - {s.id for s in services}
    if missing:
        raise ValueError(f"Unknown service ids: {sorted(missing)}")
    return services


def create_provider(db: Session, tenant_id: int, provider: ProviderCreate) -> Provider:
    data = provider.model_dump(exclude={"service_ids", "availability"})
    db_provider = Provider(tenant_id=tenant_id, **data)
    db_provider.services = _resolve_services(db, tenant_id, provider.service_ids)
    db_provider.availability_rules = [
        AvailabilityRule(tenant_id=tenant_id, **rule.model_dump())
        for rule in provider.availability
    ]
    db.add(db_provider)
    db.commit()
    db.refresh(db_provider)
    return db_provider


def update_provider(
    db: Session, tenant_id: int, provider_id: int, provider: ProviderUpdate
) -> Optional[Provider]:
    db_provider = get_provider(db, tenant_id, provider_id)
    if not db_provider:
        return None

    update_data = provider.model_dump(exclude_unset=True)
    service_ids = update_data.pop("service_ids", None)
    for field, value in update_data.items():
        setattr(db_provider, field, value)
    if service_ids is not None:
        db_provider.services = _resolve_services(db, tenant_id, service_ids)

    db.commit()
    db.refresh(db_provider)
    return db_provider


def replace_availability(
    db: Session,
    tenant_id: int,
    provider_id: int,
    rules: List[AvailabilityRuleCreate],
) -> Optional[Provider]:
    """Reemplaza el horario semanal completo del barbero."""
    db_provider = get_provider(db, tenant_id, provider_id)
    if not db_provider:
        return None

    db_provider.availability_rules = [
        AvailabilityRule(tenant_id=tenant_id, **rule.model_dump()) for rule in rules
    ]
    db.commit()
    db.refresh(db_provider)
    return db_provider


def deactivate_provider(db: Session, tenant_id: int, provider_id: int) -> bool:
    db_provider = get_provider(db, tenant_id, provider_id)
    if not db_provider:
        return False

    db_provider.is_active = False
    db.commit()
    return True
