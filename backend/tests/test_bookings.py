from sqlalchemy import event, update

from ticketpoint.db.session import SessionLocal, engine
from ticketpoint.models.booking import Booking
from ticketpoint.models.ticket import Ticket

from conftest import auth, make_ticket, make_user, ticket_quantity

VENDOR = "vendor@example.com"
BUYER = "buyer@example.com"


def _setup(quantity=10):
    make_user(VENDOR, role="vendor")
    make_user(BUYER, name="Buyer")
    return make_ticket(VENDOR, quantity=quantity, price=20)


def _book(client, ticket_id, quantity, email=BUYER):
    return client.post("/booked-tickets", json={"ticket_id": ticket_id, "quantity": quantity}, headers=auth(email))


def test_book_then_reject_restores_inventory(client):
    tid = _setup(quantity=10)

    r = _book(client, tid, 3)
    assert r.status_code == 201, r.text
    booking = r.json()
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "unpaid"
    assert booking["user_name"] == "Buyer"
    assert booking["vendor_email"] == VENDOR
    assert booking["unit_price"] == 20
    assert ticket_quantity(tid) == 7

    r = client.patch(f"/bookings/reject/{booking['id']}", headers=auth(VENDOR))
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "rejected"
    assert ticket_quantity(tid) == 10


def test_overbooking_is_rejected_without_side_effects(client, db):
    tid = _setup(quantity=2)
    r = _book(client, tid, 5)
    assert r.status_code == 400
    assert "Not enough tickets" in r.text
    assert ticket_quantity(tid) == 2
    assert db.query(Booking).count() == 0


def test_inventory_drained_after_precheck(client, db):
    tid = _setup(quantity=3)
    drained = []

    def sold_out_meanwhile(orm_execute_state):
        # A concurrent booking takes the last tickets before the decrement runs
        if drained or not orm_execute_state.is_update:
            return
        drained.append(True)
        with engine.begin() as conn:
            conn.execute(update(Ticket).where(Ticket.id == tid).values(quantity=0))

    event.listen(SessionLocal, "do_orm_execute", sold_out_meanwhile)
    try:
        r = _book(client, tid, 2)
    finally:
        event.remove(SessionLocal, "do_orm_execute", sold_out_meanwhile)

    assert drained
    assert r.status_code == 400
    assert "Not enough tickets" in r.text
    assert ticket_quantity(tid) == 0
    assert db.query(Booking).count() == 0


def test_partial_then_exhaust(client):
    tid = _setup(quantity=4)
    assert _book(client, tid, 3).status_code == 201
    assert _book(client, tid, 2).status_code == 400
    assert _book(client, tid, 1).status_code == 201
    assert ticket_quantity(tid) == 0
    assert _book(client, tid, 1).status_code == 400
    assert ticket_quantity(tid) == 0


def test_zero_quantity_is_invalid(client):
    tid = _setup()
    assert _book(client, tid, 0).status_code == 400


def test_booking_unknown_or_unapproved_ticket(client):
    _setup()
    assert _book(client, 9999, 1).status_code == 404
    pending = make_ticket(VENDOR, status="pending")
    assert _book(client, pending, 1).status_code == 404


def test_only_users_can_book(client):
    tid = _setup()
    assert _book(client, tid, 1, email=VENDOR).status_code == 403
    assert client.post("/booked-tickets", json={"ticket_id": tid, "quantity": 1}).status_code == 401


def test_booking_keeps_snapshot_after_ticket_changes(client):
    tid = _setup()
    booking = _book(client, tid, 1).json()
    client.put(f"/tickets/{tid}", json={"title": "New title", "price": 99}, headers=auth(VENDOR))
    r = client.get(f"/booked-tickets/{BUYER}", headers=auth(BUYER))
    assert r.status_code == 200
    [row] = r.json()
    assert row["id"] == booking["id"]
    assert row["title"] == "Dhaka to Sylhet"
    assert row["unit_price"] == 20


def test_accept_booking(client):
    tid = _setup()
    booking = _book(client, tid, 2).json()
    r = client.patch(f"/bookings/accept/{booking['id']}", headers=auth(VENDOR))
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"
    assert r.json()["decided_at"] is not None
    assert ticket_quantity(tid) == 8


def test_only_owning_vendor_decides(client):
    tid = _setup()
    make_user("other@example.com", role="vendor")
    booking = _book(client, tid, 2).json()
    assert client.patch(f"/bookings/accept/{booking['id']}", headers=auth("other@example.com")).status_code == 403
    assert client.patch(f"/bookings/reject/{booking['id']}", headers=auth(BUYER)).status_code == 403
    assert ticket_quantity(tid) == 8


def test_reject_missing_booking(client):
    _setup()
    assert client.patch("/bookings/reject/12345", headers=auth(VENDOR)).status_code == 404
    assert client.patch("/bookings/accept/12345", headers=auth(VENDOR)).status_code == 404


def test_double_reject_restores_twice(client):
    # Known behavior: rejection has no idempotency guard.
    tid = _setup(quantity=10)
    booking = _book(client, tid, 3).json()
    assert client.patch(f"/bookings/reject/{booking['id']}", headers=auth(VENDOR)).status_code == 200
    assert ticket_quantity(tid) == 10
    assert client.patch(f"/bookings/reject/{booking['id']}", headers=auth(VENDOR)).status_code == 200
    assert ticket_quantity(tid) == 13


def test_quantity_never_negative_across_sequences(client):
    tid = _setup(quantity=5)
    ids = []
    for qty in (2, 2, 2, 1, 3):
        r = _book(client, tid, qty)
        if r.status_code == 201:
            ids.append(r.json()["id"])
        assert ticket_quantity(tid) >= 0
    assert ticket_quantity(tid) == 0
    for booking_id in ids:
        client.patch(f"/bookings/reject/{booking_id}", headers=auth(VENDOR))
        assert ticket_quantity(tid) >= 0
    assert ticket_quantity(tid) == 5


def test_booking_lists_are_scoped_to_caller(client):
    tid = _setup()
    make_user("second@example.com")
    _book(client, tid, 1)
    _book(client, tid, 2, email="second@example.com")

    r = client.get(f"/vendor/bookings/{VENDOR}", headers=auth(VENDOR))
    assert r.status_code == 200
    assert [b["quantity"] for b in r.json()] == [2, 1]

    assert client.get(f"/booked-tickets/{BUYER}", headers=auth("second@example.com")).status_code == 403
    assert client.get(f"/vendor/bookings/{VENDOR}", headers=auth(BUYER)).status_code == 403
