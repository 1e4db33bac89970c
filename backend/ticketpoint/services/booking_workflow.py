"""Booking lifecycle: reserve inventory, vendor decisions, inventory restore.

Each operation commits once, so the booking row and the listing quantity
change together or not at all.
"""
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from ticketpoint.core.errors import InsufficientInventory, NotFound
from ticketpoint.models.base import utcnow
from ticketpoint.models.booking import Booking, BOOKING_ACCEPTED, BOOKING_PENDING, BOOKING_REJECTED, PAYMENT_UNPAID
from ticketpoint.models.ticket import Ticket, STATUS_APPROVED

logger = logging.getLogger(__name__)


def create_booking(db: Session, requester_email: str, requester_name: str | None, ticket_id: int, quantity: int) -> Booking:
    ticket = db.get(Ticket, ticket_id)
    if not ticket or ticket.hidden or ticket.status != STATUS_APPROVED:
        raise NotFound("Ticket not found")
    if quantity > ticket.quantity:
        raise InsufficientInventory(quantity, ticket.quantity)

    # Re-check availability at write time: the conditional decrement only
    # matches while enough inventory is left.
    result = db.execute(
        update(Ticket)
        .where(Ticket.id == ticket_id, Ticket.quantity >= quantity)
        .values(quantity=Ticket.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        db.refresh(ticket)
        raise InsufficientInventory(quantity, ticket.quantity)

    booking = Booking(
        ticket_id=ticket.id,
        title=ticket.title,
        image=ticket.image,
        origin=ticket.origin,
        destination=ticket.destination,
        departure_at=ticket.departure_at,
        unit_price=ticket.price,
        vendor_email=ticket.vendor_email,
        vendor_name=ticket.vendor_name,
        user_email=requester_email,
        user_name=requester_name,
        quantity=quantity,
        status=BOOKING_PENDING,
        payment_status=PAYMENT_UNPAID,
        created_at=utcnow(),
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s created: %s x%d of ticket %s", booking.id, requester_email, quantity, ticket_id)
    return booking


def accept_booking(db: Session, booking: Booking) -> Booking:
    booking.status = BOOKING_ACCEPTED
    booking.decided_at = utcnow()
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s accepted by %s", booking.id, booking.vendor_email)
    return booking


def reject_booking(db: Session, booking: Booking) -> Booking:
    """Reject a booking and put its quantity back on the source listing.

    There is no guard against rejecting the same booking twice: every call
    restores the booked quantity again.
    """
    if booking.status == BOOKING_REJECTED:
        logger.warning("Booking %s rejected again; inventory is restored a second time", booking.id)
    booking.status = BOOKING_REJECTED
    booking.decided_at = utcnow()
    restored = 0
    if booking.ticket_id is not None:
        result = db.execute(
            update(Ticket)
            .where(Ticket.id == booking.ticket_id)
            .values(quantity=Ticket.quantity + booking.quantity)
            .execution_options(synchronize_session=False)
        )
        restored = result.rowcount
    if not restored:
        logger.warning("Booking %s: source ticket %s is gone, nothing restored", booking.id, booking.ticket_id)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s rejected by %s, %d ticket(s) restored", booking.id, booking.vendor_email, booking.quantity if restored else 0)
    return booking


def bookings_for_user(db: Session, email: str) -> list[Booking]:
    return db.query(Booking).filter(Booking.user_email == email).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def bookings_for_vendor(db: Session, vendor_email: str) -> list[Booking]:
    return db.query(Booking).filter(Booking.vendor_email == vendor_email).order_by(Booking.created_at.desc(), Booking.id.desc()).all()

