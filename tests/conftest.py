# tests/conftest.py
import os

# settings are read at import time; point them at throwaway values first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ticketpro.db.session import Base, enable_sqlite_foreign_keys, get_db
from ticketpro.main import app
from ticketpro.models.user import User
from ticketpro.models.country import Country  # noqa: F401
from ticketpro.models.airline import Airline  # noqa: F401
from ticketpro.models.ticket_batch import TicketBatch  # noqa: F401
from ticketpro.models.ticket import Ticket  # noqa: F401
from ticketpro.models.booking import Booking  # noqa: F401
from ticketpro.models.system_setting import SystemSetting  # noqa: F401
from ticketpro.models.activity_log import ActivityLog  # noqa: F401
from ticketpro.models.umrah_with_transport import UmrahWithTransport  # noqa: F401
from ticketpro.models.umrah_without_transport import UmrahWithoutTransport  # noqa: F401
from ticketpro.models.umrah_group_ticket import UmrahGroupTicket  # noqa: F401
from ticketpro.models.umrah_group_booking import UmrahGroupBooking  # noqa: F401
from ticketpro import seed

PASSWORDS = {"admin": "admin123", "manager": "manager123", "staff": "staff123"}


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    seed.run(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def users(db):
    return {u.username: u for u in db.query(User).all()}


def login(client, username: str) -> dict:
    r = client.post("/api/auth/login", json={"username": username, "password": PASSWORDS[username]})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['data']['token']}"}


@pytest.fixture()
def admin_headers(client):
    return login(client, "admin")


@pytest.fixture()
def manager_headers(client):
    return login(client, "manager")


@pytest.fixture()
def staff_headers(client):
    return login(client, "staff")


BATCH = {
    "country": "KSA",
    "airline": "Emirates",
    "flightDate": "2026-12-01",
    "flightTime": "10:30",
    "buyingPrice": 15000,
    "quantity": 3,
    "agentName": "Acme",
}


@pytest.fixture()
def batch_data():
    return dict(BATCH)


def booking_body(ticket_id: str, selling_price: int, payment_type: str = "full", **extra) -> dict:
    body = {
        "ticketId": ticket_id,
        "agentInfo": {"name": "Desk Agent", "phone": "01700000000"},
        "passengerInfo": {"name": "Rahim Uddin", "passportNo": "BX0123456", "phone": "01800000000"},
        "sellingPrice": selling_price,
        "paymentType": payment_type,
    }
    body.update(extra)
    return body
