"""
Cálculo de disponibilidad de la agenda.

La ventana de trabajo de un día sale del horario semanal del barbero o, si no
tiene uno cargado, del horario general de la barbería. Sobre esa ventana se
generan inicios cada `slot_interval_minutes`; un slot [inicio, inicio+duración)
está disponible si cabe en la ventana y no se solapa con reservas activas ni
con bloqueos.
"""

import calendar
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from reservas.crud import block as block_crud
from reservas.crud.tenant import is_tenant_open_on_day
from reservas.models.availability import ScheduleBlock
from reservas.models.booking import Booking, ACTIVE_BOOKING_STATUSES
from reservas.models.provider import Provider
from reservas.models.tenant import Tenant
from reservas.utils.errors import (
    InvalidBookingError,
    OutsideWorkingHoursError,
    SlotConflictError,
)
from reservas.utils.time_slots import (
    MINUTES_PER_DAY,
    block_end_minutes,
    local_now,
    merge_ranges,
    minutes_to_time_string,
    overlaps_any,
    ranges_overlap,
    time_to_minutes,
)

logger = logging.getLogger(__name__)

Range = Tuple[int, int]


def get_working_windows(tenant: Tenant, provider: Provider, target_date: date) -> List[Range]:
    """
    Devuelve los rangos de trabajo (en minutos) del barbero para una fecha.

    Args:
        tenant: Barbería
        provider: Barbero
        target_date: Fecha

    Returns:
        Lista de tuplas (inicio, fin); vacía si no trabaja ese día
    """
    weekday = target_date.weekday()

    if provider.availability_rules:
        return sorted(
            (time_to_minutes(rule.start_time), time_to_minutes(rule.end_time))
            for rule in provider.availability_rules
            if rule.weekday == weekday
        )

    if not is_tenant_open_on_day(tenant, weekday):
        return []
    return [(time_to_minutes(tenant.opening_time), time_to_minutes(tenant.closing_time))]


def block_ranges_for_date(blocks: Sequence[ScheduleBlock], target_date: date) -> List[Range]:
    ranges = []
    for block in blocks:
        if block.start_date <= target_date <= block.end_date:
            ranges.append(
                (time_to_minutes(block.start_time), block_end_minutes(block.end_time))
            )
    return ranges


def booking_ranges(bookings: Sequence[Booking]) -> List[Range]:
    ranges = []
    for booking in bookings:
        start = booking.start_at.hour * 60 + booking.start_at.minute
        end = start + booking.duration_minutes
        ranges.append((start, min(end, MINUTES_PER_DAY)))
    return ranges


def get_active_bookings(
    db: Session,
    provider_id: int,
    date_from: date,
    date_to: Optional[date] = None,
    exclude_booking_id: Optional[int] = None,
) -> List[Booking]:
    query = db.query(Booking).filter(
        Booking.provider_id == provider_id,
        Booking.scheduled_date >= date_from,
        Booking.scheduled_date <= (date_to or date_from),
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.order_by(Booking.start_at).all()


def build_slots(
    windows: Sequence[Range],
    duration: int,
    step: int,
    busy_ranges: Sequence[Range],
    earliest_start: int = 0,
) -> List[dict]:
    """
    Genera los slots candidatos de un día.

    Args:
        windows: Rangos de trabajo
        duration: Duración del servicio en minutos
        step: Separación entre inicios de slot
        busy_ranges: Rangos ocupados por reservas y bloqueos
        earliest_start: Primer minuto reservable (hoy: ahora + anticipación mínima)

    Returns:
        Lista de dicts {"time", "end_time", "available"} ordenada por hora
    """
    slots = []
    for window_start, window_end in windows:
        current = window_start
        while current + duration <= window_end:
            end = current + duration
            available = current >= earliest_start and not overlaps_any(
                current, end, busy_ranges
            )
            slots.append(
                {
                    "time": minutes_to_time_string(current),
                    "end_time": minutes_to_time_string(end),
                    "available": available,
                }
            )
            current += step
    return slots


def _earliest_start(tenant: Tenant, target_date: date, now: datetime) -> Optional[int]:
    """Minuto mínimo reservable para la fecha; None si la fecha ya pasó."""
    today = now.date()
    if target_date < today:
        return None
    if target_date > today:
        return 0
    return now.hour * 60 + now.minute + (tenant.min_lead_minutes or 0)


def get_day_slots(
    db: Session,
    tenant: Tenant,
    provider: Provider,
    duration: int,
    target_date: date,
    now: Optional[datetime] = None,
) -> List[dict]:
    now = now or local_now(tenant.timezone)
    earliest = _earliest_start(tenant, target_date, now)
    windows = get_working_windows(tenant, provider, target_date)
    if earliest is None or not windows:
        return []

    blocks = block_crud.get_blocks(
        db, tenant.id, provider_id=provider.id, date_from=target_date, date_to=target_date
    )
    busy = booking_ranges(get_active_bookings(db, provider.id, target_date))
    busy += block_ranges_for_date(blocks, target_date)

    return build_slots(
        windows, duration, tenant.slot_interval_minutes, merge_ranges(busy), earliest
    )


def ensure_slot_available(
    db: Session,
    tenant: Tenant,
    provider: Provider,
    target_date: date,
    start_minutes: int,
    duration: int,
    exclude_booking_id: Optional[int] = None,
) -> None:
    """
    Verifica que un horario concreto se pueda reservar.

    Raises:
        InvalidBookingError: si el servicio termina después de medianoche
        OutsideWorkingHoursError: si cae fuera del horario o en un bloqueo
        SlotConflictError: si se solapa con una reserva activa del barbero
    """
    end_minutes = start_minutes + duration
    if end_minutes > MINUTES_PER_DAY:
        raise InvalidBookingError("Booking cannot end after midnight")

    windows = get_working_windows(tenant, provider, target_date)
    if not any(
        w_start <= start_minutes and end_minutes <= w_end for w_start, w_end in windows
    ):
        raise OutsideWorkingHoursError(
            "Requested time is outside the provider's working hours"
        )

    blocks = block_crud.get_blocks(
        db, tenant.id, provider_id=provider.id, date_from=target_date, date_to=target_date
    )
    if overlaps_any(start_minutes, end_minutes, block_ranges_for_date(blocks, target_date)):
        raise OutsideWorkingHoursError("Requested time is blocked in the schedule")

    bookings = get_active_bookings(
        db, provider.id, target_date, exclude_booking_id=exclude_booking_id
    )
    conflicts = [
        booking
        for booking, (b_start, b_end) in zip(bookings, booking_ranges(bookings))
        if ranges_overlap(start_minutes, end_minutes, b_start, b_end)
    ]
    if conflicts:
        logger.warning(
            f"Slot conflict for provider {provider.id} on {target_date} at "
            f"{minutes_to_time_string(start_minutes)}"
        )
        raise SlotConflictError(
            conflicts=[
                {"booking_id": b.id, "start_time": b.start_time, "end_time": b.end_time}
                for b in conflicts
            ]
        )


def get_month_availability(
    db: Session,
    tenant: Tenant,
    provider: Provider,
    duration: int,
    year: int,
    month: int,
    now: Optional[datetime] = None,
) -> dict:
    """
    Resume la disponibilidad de todos los días de un mes para el calendario.
    Hace una sola consulta de reservas y otra de bloqueos para todo el mes.
    """
    now = now or local_now(tenant.timezone)
    days_in_month = calendar.monthrange(year, month)[1]
    first_day = date(year, month, 1)
    last_day = date(year, month, days_in_month)

    bookings_by_date: Dict[date, List[Booking]] = defaultdict(list)
    for booking in get_active_bookings(db, provider.id, first_day, last_day):
        bookings_by_date[booking.scheduled_date].append(booking)

    blocks = block_crud.get_blocks(
        db, tenant.id, provider_id=provider.id, date_from=first_day, date_to=last_day
    )

    available_days = []
    unavailable_days = []
    for day in range(1, days_in_month + 1):
        current = first_day + timedelta(days=day - 1)
        earliest = _earliest_start(tenant, current, now)
        windows = get_working_windows(tenant, provider, current)

        if earliest is None:
            unavailable_days.append({"day": day, "date": current, "reason": "past"})
            continue
        if not windows:
            unavailable_days.append(
                {"day": day, "date": current, "reason": "not_working_day"}
            )
            continue

        day_blocks = [
            b for b in blocks if b.start_date <= current <= b.end_date
        ]
        if any(b.is_full_day for b in day_blocks):
            unavailable_days.append({"day": day, "date": current, "reason": "blocked"})
            continue

        busy = booking_ranges(bookings_by_date.get(current, []))
        busy += block_ranges_for_date(day_blocks, current)
        free = [
            slot["time"]
            for slot in build_slots(
                windows, duration, tenant.slot_interval_minutes, merge_ranges(busy), earliest
            )
            if slot["available"]
        ]

        if free:
            available_days.append(
                {
                    "day": day,
                    "date": current,
                    "slots_count": len(free),
                    "first_slot": free[0],
                    "last_slot": free[-1],
                }
            )
        else:
            unavailable_days.append({"day": day, "date": current, "reason": "no_slots"})

    return {
        "provider_id": provider.id,
        "year": year,
        "month": month,
        "total_days": days_in_month,
        "available_days": available_days,
        "unavailable_days": unavailable_days,
    }
