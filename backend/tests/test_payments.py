import pytest
import stripe

from ticketpoint.core.errors import NotFound
from ticketpoint.models.booking import Booking
from ticketpoint.models.transaction import Transaction
from ticketpoint.services.payment_gateway import StripeGateway

from conftest import auth, make_ticket, make_user

VENDOR = "vendor@example.com"
BUYER = "buyer@example.com"


def _booking(client, quantity=2, price=12.5):
    make_user(VENDOR, role="vendor")
    make_user(BUYER)
    tid = make_ticket(VENDOR, quantity=10, price=price)
    r = client.post("/booked-tickets", json={"ticket_id": tid, "quantity": quantity}, headers=auth(BUYER))
    assert r.status_code == 201, r.text
    return r.json()


def _checkout(client, booking_id, email=BUYER):
    return client.post("/create-checkout-session", json={"booking_id": booking_id}, headers=auth(email))


def test_checkout_session_line_item(client, gateway):
    booking = _booking(client, quantity=3, price=12.5)
    r = _checkout(client, booking["id"])
    assert r.status_code == 200, r.text
    url = r.json()["url"]
    session_id = url.rsplit("/", 1)[1]
    session = gateway.sessions[session_id]
    assert session["unit_amount"] == 1250
    assert session["quantity"] == 3
    assert session["metadata"] == {
        "booking_id": str(booking["id"]),
        "customer_email": BUYER,
        "vendor_email": VENDOR,
        "title": "Dhaka to Sylhet",
    }


def test_checkout_only_for_own_booking(client):
    booking = _booking(client)
    make_user("other@example.com")
    assert _checkout(client, booking["id"], email="other@example.com").status_code == 403
    assert _checkout(client, 4242).status_code == 404
    assert client.post("/create-checkout-session", json={"booking_id": booking["id"]}).status_code == 401


def test_unpaid_session_is_not_recorded(client, gateway, db):
    booking = _booking(client)
    session_id = _checkout(client, booking["id"]).json()["url"].rsplit("/", 1)[1]
    r = client.post("/payment-success", json={"session_id": session_id})
    assert r.status_code == 400
    assert db.query(Transaction).count() == 0
    assert db.get(Booking, booking["id"]).payment_status == "unpaid"


def test_payment_confirmation_is_idempotent(client, gateway, db):
    booking = _booking(client, quantity=2, price=12.5)
    session_id = _checkout(client, booking["id"]).json()["url"].rsplit("/", 1)[1]
    gateway.mark_paid(session_id)

    r = client.post("/payment-success", json={"session_id": session_id})
    assert r.status_code == 200, r.text
    first = r.json()
    assert first["already_processed"] is False
    assert first["transaction"]["amount"] == 25.0
    assert first["transaction"]["transaction_id"] == f"pi_{session_id}"
    assert first["transaction"]["booking_id"] == booking["id"]

    paid = db.get(Booking, booking["id"])
    assert paid.payment_status == "paid"
    paid_at = paid.paid_at
    assert paid_at is not None

    r = client.post("/payment-success", json={"session_id": session_id})
    assert r.status_code == 200
    assert r.json()["already_processed"] is True
    assert r.json()["transaction"]["id"] == first["transaction"]["id"]

    db.expire_all()
    assert db.query(Transaction).filter(Transaction.session_id == session_id).count() == 1
    assert db.get(Booking, booking["id"]).paid_at == paid_at

    # Paid bookings cannot start another checkout
    assert _checkout(client, booking["id"]).status_code == 400


def test_transaction_history(client, gateway):
    booking = _booking(client)
    session_id = _checkout(client, booking["id"]).json()["url"].rsplit("/", 1)[1]
    gateway.mark_paid(session_id)
    client.post("/payment-success", json={"session_id": session_id})

    r = client.get(f"/transactions/{BUYER}", headers=auth(BUYER))
    assert r.status_code == 200
    [tx] = r.json()
    assert tx["session_id"] == session_id
    assert tx["vendor_email"] == VENDOR
    assert tx["status"] == "paid"

    assert client.get(f"/transactions/{BUYER}", headers=auth(VENDOR)).status_code == 403

    overview = client.get("/vendor/overview", headers=auth(VENDOR)).json()
    assert overview["tickets_sold"] == 2
    assert overview["total_revenue"] == 25.0


def test_unknown_session_is_not_found(client, db):
    r = client.post("/payment-success", json={"session_id": "cs_does_not_exist"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Payment session not found"
    assert db.query(Transaction).count() == 0


def test_stripe_lookup_error_maps_to_not_found(monkeypatch):
    def retrieve(session_id, **kwargs):
        raise stripe.InvalidRequestError(f"No such checkout.session: '{session_id}'", "id")

    monkeypatch.setattr(stripe.checkout.Session, "retrieve", retrieve)
    with pytest.raises(NotFound):
        StripeGateway("sk_test_x").retrieve_session("cs_garbage")
