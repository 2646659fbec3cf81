from sqlalchemy import and_, func
from sqlalchemy.orm import Session
from typing import List, Optional

from reservas.models.booking import Booking, BookingStatus
from reservas.models.client import Client

# Las reservas canceladas o no asistidas no cuentan como visita
NON_VISIT_STATUSES = (BookingStatus.CANCELLED, BookingStatus.NO_SHOW)


def get_client(db: Session, tenant_id: int, client_id: int) -> Optional[Client]:
    return (
        db.query(Client)
        .filter(Client.tenant_id == tenant_id, Client.id == client_id)
        .first()
    )


def visit_frequency(total_visits: int) -> str:
    if total_visits >= 10:
        return "high"
    if total_visits >= 5:
        return "medium"
    return "low"


def get_clients(
    db: Session,
    tenant_id: int,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[dict]:
    """
    Lista los clientes de la barbería con sus estadísticas de visitas.

    Args:
        db: Sesión de base de datos
        tenant_id: ID de la barbería
        search: Filtro por nombre o teléfono
        skip: Offset
        limit: Máximo de resultados

    Returns:
        Lista de dicts con los datos del cliente y la clave "stats"
    """
    visits = func.count(Booking.id)
    spent = func.coalesce(func.sum(Booking.total_price), 0)
    last_visit = func.max(Booking.scheduled_date)

    query = (
        db.query(Client, visits, spent, last_visit)
        .outerjoin(
            Booking,
            and_(
                Booking.client_id == Client.id,
                Booking.status.notin_(NON_VISIT_STATUSES),
            ),
        )
        .filter(Client.tenant_id == tenant_id)
    )
    if search:
        pattern = f"%{search}%"
        query = query.filter(Client.name.ilike(pattern) | Client.phone.ilike(pattern))

    rows = (
        query.group_by(Client.id)
        .order_by(Client.name)
        .offset(skip)
        .limit(limit)
        .all()
    )

    result = []
    for client, total_visits, total_spent, last in rows:
        result.append(
            {
                "id": client.id,
                "tenant_id": client.tenant_id,
                "name": client.name,
                "phone": client.phone,
                "email": client.email,
                "created_at": client.created_at,
                "stats": {
                    "total_visits": total_visits,
                    "total_spent": int(total_spent),
                    "average_spent": round(total_spent / total_visits) if total_visits else 0,
                    "last_visit": last,
                    "visit_frequency": visit_frequency(total_visits),
                },
            }
        )
    return result


def upsert_client(
    db: Session, tenant_id: int, name: str, phone: str, email: Optional[str] = None
) -> Client:
    """
    Busca el cliente por teléfono dentro del tenant y actualiza sus datos,
    o lo crea. No hace commit: forma parte de la transacción de la reserva.
    """
    client = (
        db.query(Client)
        .filter(Client.tenant_id == tenant_id, Client.phone == phone)
        .first()
    )
    if client is None:
        client = Client(tenant_id=tenant_id, name=name, phone=phone, email=email)
        db.add(client)
    else:
        client.name = name
        if email:
            client.email = email
    db.flush()
    return client


def get_client_bookings(db: Session, tenant_id: int, client_id: int) -> List[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.tenant_id == tenant_id, Booking.client_id == client_id)
        .order_by(Booking.start_at.desc())
        .all()
    )
