from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from reservas.crud import audit as audit_crud
from reservas.models.provider import Provider
from reservas.models.service import Service
from reservas.models.tenant import Tenant, TenantStatus
from reservas.models.user import User, UserRole
from reservas.schemas.onboarding import OnboardingRequest
from reservas.utils.errors import is_conflict_error

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_DURATION = 30


class TenantSlugTakenError(ValueError):
    pass


def onboard_tenant(db: Session, user: User, request: OnboardingRequest) -> dict:
    """
    Da de alta una barbería nueva para el usuario autenticado.

    1. Crea el tenant (activo, con el plan pedido y el usuario como dueño)
    2. Crea los servicios iniciales válidos (con nombre y precio > 0)
    3. Marca al usuario como owner del tenant
    4. Crea el barbero principal asociado al dueño
    5. Registra la operación en el audit log

    Todo ocurre en una sola transacción.

    Args:
        db: Sesión de base de datos
        user: Usuario que completa el onboarding
        request: Datos del onboarding

    Returns:
        dict con el tenant, la cantidad de servicios creados y el id del barbero
    """
    if user.tenant_id is not None:
        raise ValueError("User already belongs to a tenant")

    if db.query(Tenant).filter(Tenant.slug == request.tenant.slug).first():
        raise TenantSlugTakenError(f"Slug '{request.tenant.slug}' is already taken")

    tenant = Tenant(
        **request.tenant.model_dump(),
        plan=request.plan,
        status=TenantStatus.ACTIVE,
        owner_id=user.id,
    )
    db.add(tenant)
    db.flush()

    services_created = 0
    seen_names = set()
    for item in request.services:
        name = (item.name or "").strip()
        if not name or not item.price or item.price <= 0:
            logger.warning(f"Skipping invalid onboarding service: {item}")
            continue
        if name.lower() in seen_names:
            continue
        seen_names.add(name.lower())
        db.add(
            Service(
                tenant_id=tenant.id,
                name=name,
                description=item.description,
                duration_minutes=item.duration_minutes or DEFAULT_SERVICE_DURATION,
                price=item.price,
                is_active=True,
            )
        )
        services_created += 1

    user.tenant_id = tenant.id
    user.role = UserRole.OWNER

    provider_data = request.provider
    provider = Provider(
        tenant_id=tenant.id,
        user_id=user.id,
        name=(provider_data.name if provider_data and provider_data.name else user.name),
        phone=(provider_data.phone if provider_data else None) or user.phone,
        email=user.email,
        bio=provider_data.bio if provider_data else None,
        is_active=True,
    )
    db.add(provider)
    db.flush()

    audit_crud.log_action(
        db,
        entity_type="tenant",
        action="onboarding_completed",
        tenant_id=tenant.id,
        user_id=user.id,
        entity_id=tenant.id,
        new_values={
            "slug": tenant.slug,
            "name": tenant.name,
            "plan": tenant.plan.value,
            "services": services_created,
        },
    )

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_conflict_error(e):
            raise TenantSlugTakenError(f"Slug '{request.tenant.slug}' is already taken")
        raise

    db.refresh(tenant)
    logger.info(
        f"Tenant {tenant.slug} onboarded by user {user.id} "
        f"with {services_created} services"
    )
    return {
        "tenant": tenant,
        "services_created": services_created,
        "provider_id": provider.id,
    }
