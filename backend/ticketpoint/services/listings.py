"""Listing moderation and vendor-facing listing operations."""
import logging

from sqlalchemy import func, text, update
from sqlalchemy.orm import Session

from ticketpoint.core.config import settings
from ticketpoint.core.errors import InvalidOperation, LimitExceeded, NotFound
from ticketpoint.models.base import utcnow
from ticketpoint.models.booking import Booking, PAYMENT_PAID
from ticketpoint.models.ticket import Ticket, STATUS_APPROVED, STATUS_HIDDEN, STATUS_PENDING, STATUS_REJECTED
from ticketpoint.models.transaction import Transaction
from ticketpoint.models.user import User, ROLE_VENDOR
from ticketpoint.schemas.ticket import TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)

# Key for the transaction-scoped advisory lock taken while enabling an advert
ADVERTISE_LOCK_KEY = 7_310_221


def get_ticket(db: Session, ticket_id: int) -> Ticket:
    ticket = db.get(Ticket, ticket_id)
    if not ticket:
        raise NotFound("Ticket not found")
    return ticket


def create_ticket(db: Session, vendor: User, payload: TicketCreate) -> Ticket:
    # Vendor identity comes from the account, never from the request body
    ticket = Ticket(
        **payload.model_dump(),
        vendor_email=vendor.email,
        vendor_name=vendor.name,
        status=STATUS_PENDING,
        advertised=False,
        hidden=bool(vendor.is_fraud),
        created_at=utcnow(),
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s created by %s (hidden=%s)", ticket.id, vendor.email, ticket.hidden)
    return ticket


def update_ticket(db: Session, ticket: Ticket, payload: TicketUpdate) -> Ticket:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key not in ("image", "transport_type"):
            continue
        setattr(ticket, key, value)
    ticket.updated_at = utcnow()
    db.commit()
    db.refresh(ticket)
    return ticket


def delete_ticket(db: Session, ticket: Ticket) -> None:
    ticket_id, vendor_email = ticket.id, ticket.vendor_email
    db.delete(ticket)
    db.commit()
    logger.info("Ticket %s deleted by %s", ticket_id, vendor_email)


def set_status(db: Session, ticket_id: int, status: str) -> Ticket:
    ticket = get_ticket(db, ticket_id)
    now = utcnow()
    ticket.status = status
    if status == STATUS_APPROVED:
        ticket.approved_at = now
    elif status == STATUS_REJECTED:
        ticket.rejected_at = now
        # A rejected listing cannot stay featured
        ticket.advertised = False
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s -> %s", ticket_id, status)
    return ticket


def _lock_advertise_slots(db: Session) -> None:
    """Serialize advert enables until the transaction ends (Postgres only).

    Under READ COMMITTED two enables on different rows could both count a
    free slot; holding the lock first makes the second count see the first
    commit. SQLite already serializes writers.
    """
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": ADVERTISE_LOCK_KEY})


def toggle_advertise(db: Session, ticket_id: int) -> Ticket:
    ticket = get_ticket(db, ticket_id)
    if ticket.advertised:
        ticket.advertised = False
        db.commit()
        db.refresh(ticket)
        return ticket
    if ticket.status != STATUS_APPROVED or ticket.hidden:
        raise InvalidOperation("Only approved, visible tickets can be advertised")

    _lock_advertise_slots(db)
    # Count and flip in one statement, under the lock above
    result = db.execute(
        text(
            """
            UPDATE tickets
            SET advertised = :on
            WHERE id = :tid
              AND advertised = :off
              AND (SELECT COUNT(*) FROM tickets WHERE advertised = :on) < :cap
            """
        ),
        {"on": True, "off": False, "tid": ticket_id, "cap": settings.advertise_limit},
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Advertise limit reached, ticket %s not advertised", ticket_id)
        raise LimitExceeded(f"You can advertise at most {settings.advertise_limit} tickets")
    db.commit()
    db.refresh(ticket)
    return ticket


def mark_vendor_fraud(db: Session, email: str) -> int:
    """Flag a vendor as fraudulent and hide all of their listings.

    Returns the number of listings hidden.
    """
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFound("User not found")
    if user.role != ROLE_VENDOR:
        raise InvalidOperation("Only vendors can be marked as fraud")
    user.is_fraud = True
    result = db.execute(
        update(Ticket)
        .where(Ticket.vendor_email == user.email)
        .values(status=STATUS_HIDDEN, hidden=True, advertised=False)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.warning("Vendor %s marked as fraud, %d ticket(s) hidden", user.email, result.rowcount)
    return result.rowcount


def _public(q):
    return q.filter(Ticket.status == STATUS_APPROVED, Ticket.hidden == False)  # noqa: E712


def latest_tickets(db: Session, limit: int | None = None) -> list[Ticket]:
    limit = limit or settings.latest_tickets_limit
    return _public(db.query(Ticket)).order_by(Ticket.created_at.desc(), Ticket.id.desc()).limit(limit).all()


def advertised_tickets(db: Session) -> list[Ticket]:
    return _public(db.query(Ticket)).filter(Ticket.advertised == True).order_by(Ticket.created_at.desc()).all()  # noqa: E712


def browse_tickets(
    db: Session,
    origin: str | None = None,
    destination: str | None = None,
    transport_type: str | None = None,
    sort: str = "newest",
) -> list[Ticket]:
    q = _public(db.query(Ticket))
    if origin:
        q = q.filter(Ticket.origin == origin)
    if destination:
        q = q.filter(Ticket.destination == destination)
    if transport_type:
        q = q.filter(Ticket.transport_type == transport_type)
    if sort == "price_asc":
        q = q.order_by(Ticket.price.asc(), Ticket.id.asc())
    elif sort == "price_desc":
        q = q.order_by(Ticket.price.desc(), Ticket.id.asc())
    else:
        q = q.order_by(Ticket.created_at.desc(), Ticket.id.desc())
    return q.all()


def vendor_tickets(db: Session, vendor_email: str) -> list[Ticket]:
    return db.query(Ticket).filter(Ticket.vendor_email == vendor_email).order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


def vendor_overview(db: Session, vendor_email: str) -> dict:
    tickets_added = db.query(func.count(Ticket.id)).filter(Ticket.vendor_email == vendor_email).scalar() or 0
    tickets_sold = (
        db.query(func.coalesce(func.sum(Booking.quantity), 0))
        .filter(Booking.vendor_email == vendor_email, Booking.payment_status == PAYMENT_PAID)
        .scalar()
    )
    revenue = (
        db.query(func.coalesce(func.sum(Transaction.amount), 0))
        .filter(Transaction.vendor_email == vendor_email)
        .scalar()
    )
    return {
        "tickets_added": int(tickets_added),
        "tickets_sold": int(tickets_sold or 0),
        "total_revenue": float(revenue or 0),
    }
