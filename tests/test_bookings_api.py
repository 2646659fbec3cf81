"""
Tests del contrato HTTP de reservas: crear -> 201, duplicado -> 409,
campos faltantes -> 400, y la gestión de reservas por el staff
"""
from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from reservas.crud import booking as booking_crud
from reservas.models.audit_log import AuditLog
from reservas.models.availability import ScheduleBlock
from reservas.models.booking import Booking, BookingStatus
from reservas.models.client import Client
from reservas.models.provider import Provider
from reservas.models.tenant import TenantStatus
from reservas.schemas.booking import BookingReschedule
from reservas.utils.errors import InvalidBookingError, is_conflict_error

URL = "/tenants/barberia-test/bookings"


def booking_payload(service, provider, day, time_str="10:00", **overrides):
    payload = {
        "service_id": service.id,
        "provider_id": provider.id,
        "scheduled_date": day.isoformat(),
        "scheduled_time": time_str,
        "client_name": "Juan Pérez",
        "client_phone": "+56912345678",
        "client_email": "juan@example.com",
    }
    payload.update(overrides)
    return payload


def test_create_booking_returns_201(client, db, service, provider, booking_date):
    response = client.post(URL, json=booking_payload(service, provider, booking_date, "9:30"))

    assert response.status_code == 201
    data = response.json()
    assert data["start_time"] == "09:30"
    assert data["end_time"] == "10:00"
    assert data["duration_minutes"] == 30
    assert data["total_price"] == 10000
    assert data["status"] == "confirmed"
    assert data["provider_id"] == provider.id

    # El cliente queda registrado en la barbería
    stored_client = db.query(Client).filter(Client.phone == "+56912345678").first()
    assert stored_client is not None
    assert data["client_id"] == stored_client.id


def test_duplicate_booking_returns_409(client, service, provider, booking_date):
    payload = booking_payload(service, provider, booking_date)
    assert client.post(URL, json=payload).status_code == 201

    response = client.post(URL, json=payload)

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["message"] == "Time slot already booked or overlapping"
    assert detail["conflicts"][0]["start_time"] == "10:00"


def test_overlapping_booking_returns_409_but_adjacent_is_allowed(
    client, service, provider, booking_date
):
    assert client.post(URL, json=booking_payload(service, provider, booking_date, "10:00")).status_code == 201

    overlapping = booking_payload(service, provider, booking_date, "10:15", client_phone="+56900000001")
    assert client.post(URL, json=overlapping).status_code == 409

    adjacent = booking_payload(service, provider, booking_date, "10:30", client_phone="+56900000002")
    assert client.post(URL, json=adjacent).status_code == 201


def test_same_slot_with_other_provider_is_allowed(client, db, tenant, service, provider, booking_date):
    other = Provider(tenant_id=tenant.id, name="Matías", is_active=True)
    db.add(other)
    db.commit()

    assert client.post(URL, json=booking_payload(service, provider, booking_date)).status_code == 201
    response = client.post(URL, json=booking_payload(service, other, booking_date))
    assert response.status_code == 201


@pytest.mark.parametrize("missing", ["client_phone", "client_name", "scheduled_date", "service_id"])
def test_missing_required_field_returns_400(client, service, provider, booking_date, missing):
    payload = booking_payload(service, provider, booking_date)
    payload.pop(missing)

    response = client.post(URL, json=payload)

    assert response.status_code == 400
    assert missing in response.json()["detail"]


def test_invalid_time_returns_400(client, service, provider, booking_date):
    response = client.post(URL, json=booking_payload(service, provider, booking_date, "25:00"))
    assert response.status_code == 400


def test_booking_in_the_past_returns_400(client, service, provider):
    yesterday = date.today() - timedelta(days=1)
    response = client.post(URL, json=booking_payload(service, provider, yesterday))
    assert response.status_code == 400


def test_unknown_tenant_service_or_provider_returns_404(client, service, provider, booking_date):
    payload = booking_payload(service, provider, booking_date)
    assert client.post("/tenants/no-existe/bookings", json=payload).status_code == 404
    assert client.post(URL, json={**payload, "service_id": 999}).status_code == 404
    assert client.post(URL, json={**payload, "provider_id": 999}).status_code == 404


def test_booking_outside_working_hours_returns_409(client, service, provider, booking_date):
    sunday = booking_date + timedelta(days=6)
    assert client.post(URL, json=booking_payload(service, provider, sunday)).status_code == 409

    late = booking_payload(service, provider, booking_date, "18:45")
    assert client.post(URL, json=late).status_code == 409


def test_booking_inside_block_returns_409(client, db, tenant, service, provider, booking_date):
    db.add(
        ScheduleBlock(
            tenant_id=tenant.id,
            provider_id=provider.id,
            start_date=booking_date,
            end_date=booking_date,
            reason="Vacaciones",
        )
    )
    db.commit()

    response = client.post(URL, json=booking_payload(service, provider, booking_date))
    assert response.status_code == 409


def test_suspended_tenant_rejects_bookings(client, db, tenant, service, provider, booking_date):
    tenant.status = TenantStatus.SUSPENDED
    db.commit()

    response = client.post(URL, json=booking_payload(service, provider, booking_date))
    assert response.status_code == 403


def test_provider_is_assigned_when_omitted(client, db, tenant, service, provider, booking_date):
    """
    Test: Sin provider_id se asigna el primer barbero libre que ofrezca el servicio
    """
    second = Provider(tenant_id=tenant.id, name="Matías", is_active=True)
    db.add(second)
    db.commit()

    assert client.post(URL, json=booking_payload(service, provider, booking_date)).status_code == 201

    payload = booking_payload(service, provider, booking_date, client_phone="+56900000003")
    payload.pop("provider_id")
    response = client.post(URL, json=payload)
    assert response.status_code == 201
    assert response.json()["provider_id"] == second.id

    # Ambos ocupados
    payload["client_phone"] = "+56900000004"
    assert client.post(URL, json=payload).status_code == 409


def test_provider_must_offer_service(client, db, tenant, service, provider, booking_date):
    from reservas.models.service import Service

    beard = Service(tenant_id=tenant.id, name="Barba", duration_minutes=20, price=6000)
    db.add(beard)
    db.commit()
    provider.services = [beard]
    db.commit()

    response = client.post(URL, json=booking_payload(service, provider, booking_date))
    assert response.status_code == 400


def test_cancelled_booking_frees_the_slot(client, db, auth_headers, service, provider, booking_date):
    payload = booking_payload(service, provider, booking_date)
    booking_id = client.post(URL, json=payload).json()["id"]

    response = client.patch(
        f"{URL}/{booking_id}/status", json={"status": "cancelled"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    assert client.post(URL, json=payload).status_code == 201

    audit = db.query(AuditLog).filter(AuditLog.entity_id == booking_id).first()
    assert audit.action == "status_changed"
    assert audit.new_values == {"from": "confirmed", "to": "cancelled"}


def test_invalid_status_transition_returns_400(client, auth_headers, service, provider, booking_date):
    booking_id = client.post(URL, json=booking_payload(service, provider, booking_date)).json()["id"]
    client.patch(f"{URL}/{booking_id}/status", json={"status": "cancelled"}, headers=auth_headers)

    response = client.patch(
        f"{URL}/{booking_id}/status", json={"status": "confirmed"}, headers=auth_headers
    )
    assert response.status_code == 400


def test_reschedule_booking(client, auth_headers, service, provider, booking_date):
    first = client.post(URL, json=booking_payload(service, provider, booking_date, "10:00")).json()
    client.post(URL, json=booking_payload(service, provider, booking_date, "11:00", client_phone="+56900000005"))

    conflict = client.patch(
        f"{URL}/{first['id']}", json={"scheduled_time": "10:45"}, headers=auth_headers
    )
    assert conflict.status_code == 409

    # Moverla 15 minutos se solapa solo consigo misma
    moved = client.patch(
        f"{URL}/{first['id']}", json={"scheduled_time": "10:15"}, headers=auth_headers
    )
    assert moved.status_code == 200
    assert moved.json()["start_time"] == "10:15"
    assert moved.json()["end_time"] == "10:45"


def test_notes_only_update_skips_schedule_checks(
    client, auth_headers, service, provider, booking_date
):
    created = client.post(URL, json=booking_payload(service, provider, booking_date, "10:00")).json()

    # El barbero pasa a trabajar solo los martes después de tomada la reserva
    client.put(
        f"/tenants/barberia-test/providers/{provider.id}/availability",
        json=[{"weekday": 1, "start_time": "09:00", "end_time": "18:00"}],
        headers=auth_headers,
    )

    response = client.patch(
        f"{URL}/{created['id']}", json={"notes": "Trae su propia navaja"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["notes"] == "Trae su propia navaja"
    assert response.json()["start_time"] == "10:00"

    moved = client.patch(
        f"{URL}/{created['id']}", json={"scheduled_time": "11:00"}, headers=auth_headers
    )
    assert moved.status_code == 409


def test_notes_can_be_added_to_a_booking_in_progress(
    client, db, tenant, service, provider, booking_date
):
    created = client.post(URL, json=booking_payload(service, provider, booking_date, "10:00")).json()
    in_progress = datetime.combine(booking_date, time(10, 10))

    updated = booking_crud.reschedule_booking(
        db, tenant, created["id"], BookingReschedule(notes="Llegó 5 min tarde"), now=in_progress
    )
    assert updated.notes == "Llegó 5 min tarde"

    with pytest.raises(InvalidBookingError):
        booking_crud.reschedule_booking(
            db, tenant, created["id"], BookingReschedule(scheduled_time="09:00"), now=in_progress
        )


def test_list_get_and_delete_bookings(client, auth_headers, service, provider, booking_date):
    client.post(URL, json=booking_payload(service, provider, booking_date, "12:00"))
    created = client.post(
        URL, json=booking_payload(service, provider, booking_date, "10:00", client_phone="+56900000006")
    ).json()

    listing = client.get(URL, params={"scheduled_date": booking_date.isoformat()}, headers=auth_headers)
    assert listing.status_code == 200
    assert [b["start_time"] for b in listing.json()] == ["10:00", "12:00"]

    assert client.get(f"{URL}/{created['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"{URL}/{created['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"{URL}/{created['id']}", headers=auth_headers).status_code == 404
    assert client.delete(f"{URL}/{created['id']}", headers=auth_headers).status_code == 404


def test_staff_endpoints_require_auth(client, tenant, other_tenant):
    from reservas.services.auth import create_access_token

    assert client.get(URL).status_code == 401

    _, other_owner = other_tenant
    headers = {"Authorization": f"Bearer {create_access_token({'sub': other_owner.email})}"}
    response = client.get("/tenants/otra-barberia/bookings", headers=headers)
    assert response.status_code == 200
    assert response.json() == []


def test_cross_tenant_access_is_forbidden(client, tenant, other_tenant):
    from reservas.services.auth import create_access_token

    _, other_owner = other_tenant
    headers = {"Authorization": f"Bearer {create_access_token({'sub': other_owner.email})}"}

    assert client.get(URL, headers=headers).status_code == 403


def test_database_rejects_two_active_bookings_at_same_start(db, tenant, service, provider, booking_date):
    """
    Test: Aunque se saltee la validación de la aplicación, la base de datos
    rechaza dos reservas activas del mismo barbero con el mismo inicio
    """
    from datetime import datetime, time

    start_at = datetime.combine(booking_date, time(10, 0))
    end_at = datetime.combine(booking_date, time(10, 30))

    def make(status):
        return Booking(
            tenant_id=tenant.id,
            service_id=service.id,
            provider_id=provider.id,
            client_name="A",
            client_phone="1",
            scheduled_date=booking_date,
            start_time="10:00",
            end_time="10:30",
            start_at=start_at,
            end_at=end_at,
            duration_minutes=30,
            total_price=1,
            status=status,
        )

    # Una cancelada en el mismo horario no cuenta
    db.add(make(BookingStatus.CANCELLED))
    db.add(make(BookingStatus.CONFIRMED))
    db.commit()

    db.add(make(BookingStatus.PENDING))
    with pytest.raises(IntegrityError) as exc_info:
        db.commit()
    db.rollback()

    assert is_conflict_error(exc_info.value)
