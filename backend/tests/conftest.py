"""
Shared fixtures for the API tests.

The app runs against a throwaway SQLite file. Firebase token verification
and Stripe are replaced with in-memory fakes through dependency overrides:
a bearer token ``token:<email>`` authenticates as ``<email>``.
"""
import itertools
import os
import tempfile
from datetime import datetime, timedelta

_tmpdir = tempfile.mkdtemp(prefix="ticketpoint-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["ENV"] = "test"
os.environ["FIREBASE_PROJECT_ID"] = "ticketpoint-test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ticketpoint.core.errors import NotFound, Unauthorized  # noqa: E402
from ticketpoint.core.security import get_token_verifier  # noqa: E402
from ticketpoint.db.init_db import create_tables  # noqa: E402
from ticketpoint.db.session import SessionLocal, engine  # noqa: E402
from ticketpoint.main import app  # noqa: E402
from ticketpoint.models.base import Base, utcnow  # noqa: E402
from ticketpoint.models.ticket import Ticket  # noqa: E402
from ticketpoint.models.user import User  # noqa: E402
from ticketpoint.services.payment_gateway import get_payment_gateway  # noqa: E402


class FakeVerifier:
    def verify(self, token: str) -> str:
        if not token.startswith("token:"):
            raise Unauthorized("Unauthorized access")
        return token[len("token:"):].lower()


class FakeGateway:
    def __init__(self):
        self.sessions: dict[str, dict] = {}
        self._ids = itertools.count(1)

    def create_checkout_session(self, *, title, image, unit_amount, quantity, customer_email, metadata):
        session_id = f"cs_test_{next(self._ids)}"
        self.sessions[session_id] = {
            "id": session_id,
            "title": title,
            "unit_amount": unit_amount,
            "quantity": quantity,
            "payment_status": "unpaid",
            "amount_total": unit_amount * quantity,
            "payment_intent": f"pi_{session_id}",
            "customer_email": customer_email,
            "metadata": dict(metadata),
        }
        return {"id": session_id, "url": f"https://checkout.example.com/{session_id}"}

    def retrieve_session(self, session_id):
        if session_id not in self.sessions:
            raise NotFound("Payment session not found")
        return dict(self.sessions[session_id])

    def mark_paid(self, session_id):
        self.sessions[session_id]["payment_status"] = "paid"


@pytest.fixture(scope="session", autouse=True)
def _schema():
    create_tables()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_token_verifier] = lambda: FakeVerifier()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


def auth(email: str) -> dict:
    return {"Authorization": f"Bearer token:{email}"}


def make_user(email: str, role: str = "user", name: str | None = None, is_fraud: bool = False) -> None:
    session = SessionLocal()
    now = utcnow()
    session.add(User(email=email, name=name or email.split("@")[0], role=role, is_fraud=is_fraud, created_at=now, last_logged_in=now))
    session.commit()
    session.close()


def make_ticket(vendor_email: str = "vendor@example.com", quantity: int = 10, price: float = 25.0, status: str = "approved", **extra) -> int:
    session = SessionLocal()
    ticket = Ticket(
        title=extra.pop("title", "Dhaka to Sylhet"),
        origin=extra.pop("origin", "Dhaka"),
        destination=extra.pop("destination", "Sylhet"),
        transport_type=extra.pop("transport_type", "bus"),
        departure_at=extra.pop("departure_at", datetime(2099, 1, 1, 10, 0) + timedelta(days=1)),
        perks=extra.pop("perks", ["AC"]),
        price=price,
        quantity=quantity,
        vendor_email=vendor_email,
        vendor_name="Vendor",
        status=status,
        created_at=extra.pop("created_at", utcnow()),
        **extra,
    )
    session.add(ticket)
    session.commit()
    ticket_id = ticket.id
    session.close()
    return ticket_id


def ticket_quantity(ticket_id: int) -> int:
    session = SessionLocal()
    try:
        return session.get(Ticket, ticket_id).quantity
    finally:
        session.close()
