"""
Configuración compartida para tests pytest
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date, time, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from reservas.database import Base, get_db

# Importar todos los modelos para que SQLAlchemy pueda resolver las relaciones
from reservas.models.tenant import Tenant
from reservas.models.user import User, UserRole
from reservas.models.service import Service
from reservas.models.provider import Provider
from reservas.main import app
from reservas.services.auth import create_access_token


# Base de datos en memoria para tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def next_weekday(start: date, weekday: int) -> date:
    """Primera fecha >= start que cae en el día de semana indicado (0 = lunes)."""
    return start + timedelta(days=(weekday - start.weekday()) % 7)


@pytest.fixture
def db():
    """Crear base de datos de test y limpiarla después"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Cliente HTTP con get_db apuntando a la base de test"""

    def _get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def booking_date():
    """Un lunes con al menos una semana de margen"""
    return next_weekday(date.today() + timedelta(days=7), 0)


@pytest.fixture
def tenant(db):
    """Barbería de prueba: lunes a sábado de 09:00 a 19:00"""
    tenant = Tenant(
        slug="barberia-test",
        name="Barbería Test",
        opening_time=time(9, 0),
        closing_time=time(19, 0),
        sunday_open=False,
        slot_interval_minutes=15,
        min_lead_minutes=120,
    )
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


@pytest.fixture
def owner(db, tenant):
    """Dueño de la barbería de prueba"""
    user = User(
        name="Owner",
        email="owner@barberia.cl",
        hashed_password="hashed",
        tenant_id=tenant.id,
        role=UserRole.OWNER,
        is_active=True,
    )
    db.add(user)
    db.commit()
    tenant.owner_id = user.id
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def auth_headers(owner):
    token = create_access_token({"sub": owner.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def service(db, tenant):
    """Corte de pelo de 30 minutos"""
    service = Service(
        tenant_id=tenant.id,
        name="Corte",
        duration_minutes=30,
        price=10000,
        is_active=True,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def provider(db, tenant):
    """Barbero sin horario propio (usa el de la barbería)"""
    provider = Provider(tenant_id=tenant.id, name="Yerko", is_active=True)
    db.add(provider)
    db.commit()
    db.refresh(provider)
    return provider


@pytest.fixture
def other_tenant(db):
    """Segunda barbería con su propio dueño, para probar el aislamiento"""
    tenant = Tenant(slug="otra-barberia", name="Otra Barbería")
    db.add(tenant)
    db.commit()
    user = User(
        name="Other Owner",
        email="owner@otra.cl",
        hashed_password="hashed",
        tenant_id=tenant.id,
        role=UserRole.OWNER,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(tenant)
    db.refresh(user)
    return tenant, user
