"""
Tests del cálculo de disponibilidad (slots del día, chequeo puntual y mes)
"""
from datetime import date, datetime, time, timedelta

import pytest

from reservas.models.availability import AvailabilityRule, ScheduleBlock
from reservas.models.booking import Booking, BookingStatus
from reservas.services.availability import (
    build_slots,
    ensure_slot_available,
    get_day_slots,
    get_month_availability,
    get_working_windows,
)
from reservas.utils.errors import OutsideWorkingHoursError, SlotConflictError


def add_booking(db, tenant, service, provider, day, start, minutes=30, status=BookingStatus.CONFIRMED):
    hours, mins = map(int, start.split(":"))
    start_at = datetime.combine(day, time(hours, mins))
    end_at = start_at + timedelta(minutes=minutes)
    booking = Booking(
        tenant_id=tenant.id,
        service_id=service.id,
        provider_id=provider.id,
        client_name="Cliente",
        client_phone="+56911111111",
        scheduled_date=day,
        start_time=start,
        end_time=end_at.strftime("%H:%M"),
        start_at=start_at,
        end_at=end_at,
        duration_minutes=minutes,
        total_price=service.price,
        status=status,
    )
    db.add(booking)
    db.commit()
    return booking


def slot_map(slots):
    return {slot["time"]: slot["available"] for slot in slots}


def test_build_slots_respects_window_end_and_busy_ranges():
    slots = build_slots(
        windows=[(540, 660)],  # 09:00 - 11:00
        duration=45,
        step=15,
        busy_ranges=[(600, 630)],  # 10:00 - 10:30
    )
    times = slot_map(slots)

    # El último inicio posible es 10:15 (termina 11:00)
    assert list(times) == ["09:00", "09:15", "09:30", "09:45", "10:00", "10:15"]
    assert times["09:00"] is True
    assert times["09:15"] is True  # 09:15-10:00 toca pero no se solapa
    assert times["09:30"] is False
    assert times["10:15"] is False


def test_build_slots_marks_slots_before_earliest_start():
    slots = build_slots([(540, 720)], 30, 30, [], earliest_start=600)
    times = slot_map(slots)
    assert times["09:00"] is False
    assert times["09:30"] is False
    assert times["10:00"] is True


def test_working_windows_use_tenant_hours_without_rules(tenant, provider, booking_date):
    assert get_working_windows(tenant, provider, booking_date) == [(540, 1140)]
    sunday = booking_date + timedelta(days=6)
    assert get_working_windows(tenant, provider, sunday) == []


def test_working_windows_use_provider_rules(db, tenant, provider, booking_date):
    """
    Test: Con horario propio el barbero solo trabaja en sus turnos (puede tener turno partido)
    """
    provider.availability_rules = [
        AvailabilityRule(tenant_id=tenant.id, weekday=0, start_time=time(10, 0), end_time=time(13, 0)),
        AvailabilityRule(tenant_id=tenant.id, weekday=0, start_time=time(15, 0), end_time=time(18, 0)),
        AvailabilityRule(tenant_id=tenant.id, weekday=2, start_time=time(9, 0), end_time=time(12, 0)),
    ]
    db.commit()
    db.refresh(provider)

    assert get_working_windows(tenant, provider, booking_date) == [(600, 780), (900, 1080)]
    # Martes no tiene reglas: no trabaja aunque la barbería abra
    assert get_working_windows(tenant, provider, booking_date + timedelta(days=1)) == []


def test_day_slots_exclude_bookings_and_blocks(db, tenant, service, provider, booking_date):
    add_booking(db, tenant, service, provider, booking_date, "10:00")
    add_booking(db, tenant, service, provider, booking_date, "12:00", status=BookingStatus.CANCELLED)
    db.add(
        ScheduleBlock(
            tenant_id=tenant.id,
            provider_id=provider.id,
            start_date=booking_date,
            end_date=booking_date,
            start_time=time(15, 0),
            end_time=time(16, 0),
            reason="Almuerzo",
        )
    )
    db.commit()

    times = slot_map(get_day_slots(db, tenant, provider, 30, booking_date))

    assert times["09:30"] is True
    assert times["09:45"] is False
    assert times["10:00"] is False
    assert times["10:15"] is False
    assert times["10:30"] is True
    # Las reservas canceladas no ocupan agenda
    assert times["12:00"] is True
    assert times["14:30"] is True
    assert times["14:45"] is False
    assert times["15:30"] is False
    assert times["16:00"] is True
    assert "18:45" not in times  # 18:45 + 30 pasa el cierre


def test_day_slots_for_today_apply_lead_time(db, tenant, provider):
    today = date(2030, 1, 15)  # martes
    now = datetime(2030, 1, 15, 10, 0)

    slots = get_day_slots(db, tenant, provider, 30, today, now=now)
    available = [slot["time"] for slot in slots if slot["available"]]

    # 10:00 + 120 minutos de anticipación
    assert available[0] == "12:00"
    assert get_day_slots(db, tenant, provider, 30, date(2030, 1, 14), now=now) == []


def test_shop_wide_block_applies_to_every_provider(db, tenant, service, provider, booking_date):
    db.add(
        ScheduleBlock(
            tenant_id=tenant.id,
            provider_id=None,
            start_date=booking_date,
            end_date=booking_date,
            start_time=time(9, 0),
            end_time=time(11, 0),
        )
    )
    db.commit()

    with pytest.raises(OutsideWorkingHoursError):
        ensure_slot_available(db, tenant, provider, booking_date, 600, 30)


def test_ensure_slot_available_reports_conflicts(db, tenant, service, provider, booking_date):
    existing = add_booking(db, tenant, service, provider, booking_date, "11:00", minutes=60)

    with pytest.raises(SlotConflictError) as exc_info:
        ensure_slot_available(db, tenant, provider, booking_date, 11 * 60 + 30, 30)

    assert exc_info.value.conflicts == [
        {"booking_id": existing.id, "start_time": "11:00", "end_time": "12:00"}
    ]
    # Excluyendo la propia reserva (reprogramación) no hay conflicto
    ensure_slot_available(
        db, tenant, provider, booking_date, 11 * 60 + 30, 30, exclude_booking_id=existing.id
    )


def test_ensure_slot_available_rejects_outside_hours(db, tenant, provider, booking_date):
    with pytest.raises(OutsideWorkingHoursError):
        ensure_slot_available(db, tenant, provider, booking_date, 18 * 60 + 45, 30)
    with pytest.raises(OutsideWorkingHoursError):
        ensure_slot_available(db, tenant, provider, booking_date, 8 * 60 + 30, 30)


def test_month_availability_reasons(db, tenant, service, provider):
    """
    Test: El calendario mensual clasifica cada día (pasado, no laboral, bloqueado, sin horarios)
    """
    now = datetime(2030, 1, 15, 10, 0)  # martes
    db.add(
        ScheduleBlock(
            tenant_id=tenant.id,
            provider_id=provider.id,
            start_date=date(2030, 1, 16),
            end_date=date(2030, 1, 16),
        )
    )
    db.commit()
    # Ocupar todo el jueves 17
    for hour in range(9, 19):
        add_booking(db, tenant, service, provider, date(2030, 1, 17), f"{hour:02d}:00", minutes=60)

    result = get_month_availability(db, tenant, provider, 30, 2030, 1, now=now)

    assert result["total_days"] == 31
    reasons = {d["day"]: d["reason"] for d in result["unavailable_days"]}
    available = {d["day"]: d for d in result["available_days"]}

    assert reasons[1] == "past"
    assert reasons[14] == "past"
    assert reasons[16] == "blocked"
    assert reasons[17] == "no_slots"
    assert reasons[20] == "not_working_day"  # domingo
    assert available[15]["first_slot"] == "12:00"
    assert available[18]["first_slot"] == "09:00"
    assert available[18]["last_slot"] == "18:30"
    assert len(result["available_days"]) + len(result["unavailable_days"]) == 31
