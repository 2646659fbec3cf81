from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import date, datetime, timedelta
from typing import List, Optional
import logging

from reservas.crud import audit as audit_crud
from reservas.crud import client as client_crud
from reservas.crud import provider as provider_crud
from reservas.crud import service as service_crud
from reservas.models.booking import Booking, BookingStatus
from reservas.models.provider import Provider
from reservas.models.tenant import Tenant
from reservas.schemas.booking import BookingCreate, BookingReschedule
from reservas.services.availability import ensure_slot_available
from reservas.utils.errors import (
    InvalidBookingError,
    ResourceNotFoundError,
    SlotConflictError,
    is_conflict_error,
)
from reservas.utils.time_slots import (
    combine,
    local_now,
    minutes_to_time_string,
    parse_time_to_minutes,
)

logger = logging.getLogger(__name__)

# Transiciones de estado permitidas
STATUS_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {
        BookingStatus.CANCELLED,
        BookingStatus.COMPLETED,
        BookingStatus.NO_SHOW,
    },
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
    BookingStatus.NO_SHOW: set(),
}


def get_booking(db: Session, tenant_id: int, booking_id: int) -> Optional[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.tenant_id == tenant_id, Booking.id == booking_id)
        .first()
    )


def get_bookings(
    db: Session,
    tenant_id: int,
    skip: int = 0,
    limit: int = 100,
    scheduled_date: Optional[date] = None,
    provider_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
) -> List[Booking]:
    query = db.query(Booking).filter(Booking.tenant_id == tenant_id)

    if scheduled_date:
        query = query.filter(Booking.scheduled_date == scheduled_date)
    if provider_id:
        query = query.filter(Booking.provider_id == provider_id)
    if status:
        query = query.filter(Booking.status == status)

    return query.order_by(Booking.start_at).offset(skip).limit(limit).all()


def _lock_provider(db: Session, provider: Provider) -> None:
    # Serializa las reservas concurrentes del mismo barbero (no-op en SQLite)
    db.query(Provider).filter(Provider.id == provider.id).with_for_update().first()


def _pick_provider(
    db: Session,
    tenant: Tenant,
    service_id: int,
    target_date: date,
    start_minutes: int,
    duration: int,
) -> Provider:
    """
    Elige el primer barbero activo que ofrezca el servicio y esté libre.

    Raises:
        ResourceNotFoundError: si no hay barberos activos para el servicio
        SlotConflictError: si todos están ocupados en ese horario
    """
    candidates = provider_crud.get_providers(db, tenant.id, service_id=service_id)
    if not candidates:
        raise ResourceNotFoundError("No active provider available for this service")

    last_error = None
    for candidate in candidates:
        try:
            ensure_slot_available(db, tenant, candidate, target_date, start_minutes, duration)
            return candidate
        except SlotConflictError as e:
            last_error = e
    raise last_error


def _commit_booking(db: Session, booking: Booking) -> Booking:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_conflict_error(e):
            logger.warning(
                f"Database rejected overlapping booking for provider {booking.provider_id}"
            )
            raise SlotConflictError()
        raise
    db.refresh(booking)
    return booking


def create_booking(
    db: Session,
    tenant: Tenant,
    booking: BookingCreate,
    now: Optional[datetime] = None,
) -> Booking:
    """
    Crea una reserva validando servicio, barbero y disponibilidad.

    Args:
        db: Sesión de base de datos
        tenant: Barbería donde se reserva
        booking: Datos de la reserva
        now: Hora actual (inyectable para tests)

    Returns:
        La reserva creada
    """
    now = now or local_now(tenant.timezone)

    service = service_crud.get_active_service(db, tenant.id, booking.service_id)
    if not service:
        raise ResourceNotFoundError("Service not found or inactive")

    duration = booking.duration_minutes or service.duration_minutes
    total_price = booking.total_price if booking.total_price is not None else service.price

    start_minutes = parse_time_to_minutes(booking.scheduled_time)
    start_at = combine(booking.scheduled_date, start_minutes)
    end_at = start_at + timedelta(minutes=duration)
    if start_at < now:
        raise InvalidBookingError("Cannot create a booking in the past")

    if booking.provider_id is not None:
        provider = provider_crud.get_active_provider(db, tenant.id, booking.provider_id)
        if not provider:
            raise ResourceNotFoundError("Provider not found or inactive")
        if not provider.offers_service(service.id):
            raise InvalidBookingError("Provider does not offer this service")
        _lock_provider(db, provider)
        ensure_slot_available(
            db, tenant, provider, booking.scheduled_date, start_minutes, duration
        )
    else:
        provider = _pick_provider(
            db, tenant, service.id, booking.scheduled_date, start_minutes, duration
        )
        _lock_provider(db, provider)

    client = client_crud.upsert_client(
        db,
        tenant.id,
        name=booking.client_name,
        phone=booking.client_phone,
        email=booking.client_email,
    )

    db_booking = Booking(
        tenant_id=tenant.id,
        service_id=service.id,
        provider_id=provider.id,
        client_id=client.id,
        client_name=booking.client_name,
        client_phone=booking.client_phone,
        client_email=booking.client_email,
        scheduled_date=booking.scheduled_date,
        start_time=booking.scheduled_time,
        end_time=minutes_to_time_string(start_minutes + duration),
        start_at=start_at,
        end_at=end_at,
        duration_minutes=duration,
        total_price=total_price,
        status=booking.status,
        notes=booking.notes,
    )
    db.add(db_booking)
    db_booking = _commit_booking(db, db_booking)

    logger.info(
        f"Booking {db_booking.id} created for tenant {tenant.slug} "
        f"(provider {provider.id}, {db_booking.scheduled_date} {db_booking.start_time})"
    )
    return db_booking


def reschedule_booking(
    db: Session,
    tenant: Tenant,
    booking_id: int,
    changes: BookingReschedule,
    now: Optional[datetime] = None,
) -> Optional[Booking]:
    """
    Cambia fecha, hora o barbero de una reserva activa manteniendo su duración.
    Si no cambia ninguno de los tres, solo actualiza las notas.
    """
    now = now or local_now(tenant.timezone)
    db_booking = get_booking(db, tenant.id, booking_id)
    if not db_booking:
        return None

    if not db_booking.is_active:
        raise InvalidBookingError(
            f"Cannot reschedule a booking with status {db_booking.status.value}"
        )

    new_date = changes.scheduled_date or db_booking.scheduled_date
    new_time = changes.scheduled_time or db_booking.start_time
    provider = db_booking.provider
    if changes.provider_id is not None and changes.provider_id != db_booking.provider_id:
        provider = provider_crud.get_active_provider(db, tenant.id, changes.provider_id)
        if not provider:
            raise ResourceNotFoundError("Provider not found or inactive")
        if not provider.offers_service(db_booking.service_id):
            raise InvalidBookingError("Provider does not offer this service")

    moved = (
        new_date != db_booking.scheduled_date
        or new_time != db_booking.start_time
        or provider.id != db_booking.provider_id
    )
    if not moved:
        # Solo notas: no se revalida horario ni fecha pasada
        if changes.notes is not None:
            db_booking.notes = changes.notes
            db.commit()
            db.refresh(db_booking)
        return db_booking

    start_minutes = parse_time_to_minutes(new_time)
    start_at = combine(new_date, start_minutes)
    if start_at < now:
        raise InvalidBookingError("Cannot move a booking to the past")

    _lock_provider(db, provider)
    ensure_slot_available(
        db,
        tenant,
        provider,
        new_date,
        start_minutes,
        db_booking.duration_minutes,
        exclude_booking_id=db_booking.id,
    )

    db_booking.provider_id = provider.id
    db_booking.scheduled_date = new_date
    db_booking.start_time = new_time
    db_booking.end_time = minutes_to_time_string(start_minutes + db_booking.duration_minutes)
    db_booking.start_at = start_at
    db_booking.end_at = start_at + timedelta(minutes=db_booking.duration_minutes)
    if changes.notes is not None:
        db_booking.notes = changes.notes

    db_booking = _commit_booking(db, db_booking)
    logger.info(f"Booking {db_booking.id} rescheduled to {new_date} {new_time}")
    return db_booking


def update_booking_status(
    db: Session,
    tenant: Tenant,
    booking_id: int,
    new_status: BookingStatus,
    user_id: Optional[int] = None,
) -> Optional[Booking]:
    db_booking = get_booking(db, tenant.id, booking_id)
    if not db_booking:
        return None

    if new_status == db_booking.status:
        return db_booking

    if new_status not in STATUS_TRANSITIONS[db_booking.status]:
        raise InvalidBookingError(
            f"Cannot change status from {db_booking.status.value} to {new_status.value}"
        )

    previous = db_booking.status
    db_booking.status = new_status
    audit_crud.log_action(
        db,
        entity_type="booking",
        action="status_changed",
        tenant_id=tenant.id,
        user_id=user_id,
        entity_id=db_booking.id,
        new_values={"from": previous.value, "to": new_status.value},
    )
    db.commit()
    db.refresh(db_booking)
    logger.info(f"Booking {db_booking.id} status {previous.value} -> {new_status.value}")
    return db_booking


def delete_booking(db: Session, tenant_id: int, booking_id: int) -> bool:
    db_booking = get_booking(db, tenant_id, booking_id)
    if not db_booking:
        return False

    db.delete(db_booking)
    db.commit()
    return True
