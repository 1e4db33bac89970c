"""Checkout-session creation and payment reconciliation."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketpoint.core.errors import InvalidOperation, NotFound, PaymentIncomplete
from ticketpoint.core.security import ensure_owner
from ticketpoint.models.base import utcnow
from ticketpoint.models.booking import Booking, BOOKING_REJECTED, PAYMENT_PAID
from ticketpoint.models.transaction import Transaction
from ticketpoint.services.payment_gateway import StripeGateway

logger = logging.getLogger(__name__)


def start_checkout(db: Session, gateway: StripeGateway, booking_id: int, requester_email: str) -> str:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFound("Booking not found")
    ensure_owner(booking.user_email, requester_email, "booking")
    if booking.payment_status == PAYMENT_PAID:
        raise InvalidOperation("Booking is already paid")
    if booking.status == BOOKING_REJECTED:
        raise InvalidOperation("Booking was rejected")
    session = gateway.create_checkout_session(
        title=booking.title,
        image=booking.image,
        unit_amount=int(round(float(booking.unit_price) * 100)),
        quantity=booking.quantity,
        customer_email=requester_email,
        metadata={
            "booking_id": str(booking.id),
            "customer_email": requester_email,
            "vendor_email": booking.vendor_email,
            "title": booking.title,
        },
    )
    logger.info("Checkout session %s started for booking %s", session["id"], booking.id)
    return session["url"]


def confirm_payment(db: Session, gateway: StripeGateway, session_id: str) -> tuple[Transaction, bool]:
    """Record a paid checkout session exactly once.

    Returns ``(transaction, already_processed)``.
    """
    session = gateway.retrieve_session(session_id)
    if session.get("payment_status") != "paid":
        raise PaymentIncomplete()

    existing = db.query(Transaction).filter(Transaction.session_id == session_id).first()
    if existing:
        return existing, True

    metadata = session.get("metadata") or {}
    booking_id = int(metadata["booking_id"]) if metadata.get("booking_id") else None
    booking = db.get(Booking, booking_id) if booking_id is not None else None
    now = utcnow()
    transaction = Transaction(
        booking_id=booking.id if booking else None,
        user_email=metadata.get("customer_email") or session.get("customer_email") or "",
        vendor_email=metadata.get("vendor_email"),
        ticket_title=metadata.get("title"),
        amount=(session.get("amount_total") or 0) / 100,
        session_id=session_id,
        transaction_id=session.get("payment_intent"),
        status=session["payment_status"],
        paid_at=now,
    )
    db.add(transaction)
    if booking and booking.payment_status != PAYMENT_PAID:
        booking.payment_status = PAYMENT_PAID
        booking.paid_at = now
    elif booking is None:
        logger.warning("Session %s references unknown booking %s", session_id, booking_id)
    try:
        db.commit()
    except IntegrityError:
        # Another request recorded the same session first
        db.rollback()
        existing = db.query(Transaction).filter(Transaction.session_id == session_id).one()
        return existing, True
    db.refresh(transaction)
    logger.info("Payment %s recorded for booking %s (%.2f)", session_id, booking_id, float(transaction.amount))
    return transaction, False


def transactions_for_user(db: Session, email: str) -> list[Transaction]:
    return db.query(Transaction).filter(Transaction.user_email == email).order_by(Transaction.paid_at.desc(), Transaction.id.desc()).all()
