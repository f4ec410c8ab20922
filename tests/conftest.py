"""Shared fixtures: in-memory database, API client, a seeded barbershop and a fake API."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from trimflow.client.api import ApiError
from trimflow.database import create_db_and_tables, get_session
from trimflow.main import app
from trimflow.models.appointment import AppointmentRead, AppointmentStatus
from trimflow.models.barber import BarberRead
from trimflow.models.barbershop import BarbershopRead
from trimflow.models.common import Page
from trimflow.models.service import ServiceRead
from trimflow.routers.appointments import get_now

OWNER_EMAIL = "dono@example.com"
OWNER_PASSWORD = "segredo123"
WEEKDAYS = ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY"]
# relógio fixo do backend nos testes: sábado antes da semana usada nos cenários
NOW = datetime(2025, 3, 1, 8, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_shop(client, email=OWNER_EMAIL, password=OWNER_PASSWORD, name="Barbearia Central"):
    response = client.post(
        "/barbershops/register",
        json={
            "barbershop_name": name,
            "email": email,
            "password": password,
            "first_name": "Ana",
            "last_name": "Souza",
        },
    )
    assert response.status_code == 201, response.text
    shop_id = response.json()["barbershop_id"]

    login = client.post("/auth/login", data={"username": email, "password": password})
    assert login.status_code == 200, login.text
    token = login.json()["access_token"]

    return shop_id, token


@pytest.fixture
def shop(client):
    """Barbershop open MONDAY-SATURDAY 09:00-18:00, closed SUNDAY, one barber and one 30 min service."""
    shop_id, token = register_shop(client)
    headers = {"X-Barbershop-Id": shop_id, "Authorization": f"Bearer {token}"}

    barber = client.post("/barbers/", json={"first_name": "Marco", "last_name": "Silva"}, headers=headers)
    assert barber.status_code == 201, barber.text
    service = client.post(
        "/services/",
        json={"name": "Corte", "price": 40.0, "duration_minutes": 30},
        headers=headers,
    )
    assert service.status_code == 201, service.text

    for day in WEEKDAYS:
        r = client.put(
            f"/business-hours/{day}",
            json={"is_open": True, "open_time": "09:00:00", "close_time": "18:00:00"},
            headers=headers,
        )
        assert r.status_code == 200, r.text
    client.put("/business-hours/SUNDAY", json={"is_open": False}, headers=headers)

    return SimpleNamespace(
        id=shop_id,
        token=token,
        headers=headers,
        public_headers={"X-Barbershop-Id": shop_id},
        barber=barber.json(),
        service=service.json(),
    )


@pytest.fixture
def register(client):
    """``register(email)`` -> (barbershop_id, owner headers) for a fresh shop with no setup."""
    def factory(email, name="Barbearia Nova"):
        shop_id, token = register_shop(client, email=email, name=name)
        return shop_id, {"X-Barbershop-Id": shop_id, "Authorization": f"Bearer {token}"}

    return factory


@pytest.fixture
def other_shop(client, shop):
    """A second barbershop with its own owner."""
    shop_id, token = register_shop(client, email="outro@example.com", name="Barbearia Norte")
    return SimpleNamespace(
        id=shop_id,
        token=token,
        headers={"X-Barbershop-Id": shop_id, "Authorization": f"Bearer {token}"},
    )


def _book(client, shop, when: datetime, customer="Carlos", barber_id=None, service_id=None):
    return client.post(
        "/appointments/",
        json={
            "barber_id": barber_id or shop.barber["id"],
            "service_id": service_id or shop.service["id"],
            "appointment_date_time": when.isoformat(),
            "customer_name": customer,
            "customer_email": f"{customer.lower()}@example.com",
        },
        headers=shop.public_headers,
    )


@pytest.fixture
def book(client, shop):
    """Public booking helper: ``book(when, customer=...)``."""
    def factory(when, **kwargs):
        return _book(client, shop, when, **kwargs)

    return factory


@pytest.fixture
def make_appointment():
    def factory(appointment_id, when, status=AppointmentStatus.PENDING, barber_id="B1", updated_at=None, **extra):
        return AppointmentRead(
            id=appointment_id,
            barbershop_id="S1",
            barber_id=barber_id,
            service_id="SV1",
            appointment_date_time=when,
            customer_name=extra.pop("customer_name", "Cliente"),
            customer_email="cliente@example.com",
            status=status,
            updated_at=updated_at,
            **extra,
        )

    return factory


class FakeApi:
    """In-memory stand-in for TrimflowApi; ``fail`` holds method names that raise ApiError."""

    def __init__(self):
        self.barbershop = BarbershopRead(id="S1", name="Barbearia Central", email="shop@example.com")
        self.services = [
            ServiceRead(id="SV1", barbershop_id="S1", name="Corte", price=40.0, duration_minutes=30),
            ServiceRead(id="SV2", barbershop_id="S1", name="Barba", price=30.0, duration_minutes=20),
        ]
        self.barbers = [
            BarberRead(id="B1", barbershop_id="S1", first_name="Marco", last_name="Silva"),
            BarberRead(id="B2", barbershop_id="S1", first_name="Alex", last_name="Costa"),
        ]
        self.business_hours = []
        self.appointments = []
        self.slots = {}
        self.slot_requests = []
        self.created = []
        self.updates = []
        self.cancelled = []
        self.filters = []
        self.fail = set()
        self.errors = {}

    def _call(self, name):
        if name in self.fail:
            raise self.errors.get(name, ApiError(500, "Request failed with status 500"))

    def get_barbershop(self, barbershop_id):
        self._call("get_barbershop")
        return self.barbershop

    def list_services(self, barbershop_id, active_only=False):
        self._call("list_services")
        return list(self.services)

    def list_barbers(self, barbershop_id, active_only=False):
        self._call("list_barbers")
        return list(self.barbers)

    def list_business_hours(self, barbershop_id):
        self._call("list_business_hours")
        return list(self.business_hours)

    def list_appointments(self, barbershop_id, filters=None):
        self._call("list_appointments")
        self.filters.append(filters)
        return Page.build(list(self.appointments), 0, filters.size if filters else 20, len(self.appointments))

    def get_available_slots(self, barber_id, day, service_duration):
        self.slot_requests.append((barber_id, day, service_duration))
        self._call("get_available_slots")
        return list(self.slots.get((barber_id, day), []))

    def create_appointment(self, barbershop_id, payload):
        self._call("create_appointment")
        self.created.append(payload)
        return AppointmentRead(id=f"A{len(self.created)}", barbershop_id=barbershop_id, **payload.model_dump())

    def update_appointment(self, barbershop_id, appointment_id, payload):
        self._call("update_appointment")
        self.updates.append((appointment_id, payload))
        changes = payload.model_dump(exclude_unset=True)
        for i, appt in enumerate(self.appointments):
            if appt.id == appointment_id:
                self.appointments[i] = appt.model_copy(update=changes)
                return self.appointments[i]
        raise ApiError(404, "Agendamento não encontrado", detail="Agendamento não encontrado")

    def cancel_appointment(self, barbershop_id, appointment_id):
        self._call("cancel_appointment")
        self.cancelled.append(appointment_id)
        for i, appt in enumerate(self.appointments):
            if appt.id == appointment_id:
                self.appointments[i] = appt.model_copy(update={"status": AppointmentStatus.CANCELLED})


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def monday():
    return date(2025, 3, 10)
