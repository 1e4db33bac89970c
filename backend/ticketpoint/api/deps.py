from fastapi import Depends, Header
from sqlalchemy.orm import Session

from ticketpoint.core.errors import Forbidden, NotFound
from ticketpoint.core.security import FirebaseTokenVerifier, ensure_owner, extract_bearer, get_token_verifier
from ticketpoint.db.session import get_db
from ticketpoint.models.booking import Booking
from ticketpoint.models.ticket import Ticket
from ticketpoint.models.user import User

def get_current_email(
    authorization: str | None = Header(default=None),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> str:
    """Verified email of the caller (401 when the bearer token is missing or invalid)."""
    token = extract_bearer(authorization)
    return verifier.verify(token)

def require_role(role: str):
    def checker(email: str = Depends(get_current_email), db: Session = Depends(get_db)) -> User:
        user = db.query(User).filter(User.email == email).first()
        if not user:
            raise Forbidden("Forbidden: user not found")
        if user.role != role:
            raise Forbidden(f"Forbidden: {role} only")
        return user
    return checker

require_user = require_role("user")
require_admin = require_role("admin")
require_vendor = require_role("vendor")

def require_path_owner(email: str, caller: str = Depends(get_current_email)) -> str:
    """Caller's email; 403 unless it is the ``{email}`` in the path."""
    ensure_owner(email, caller, "records")
    return caller

def require_vendor_path_owner(email: str, vendor: User = Depends(require_vendor)) -> User:
    ensure_owner(email, vendor.email, "tickets")
    return vendor

def owned_ticket(ticket_id: int, vendor: User = Depends(require_vendor), db: Session = Depends(get_db)) -> Ticket:
    """The listing at ``{ticket_id}``, only for the vendor who created it."""
    ticket = db.get(Ticket, ticket_id)
    if not ticket:
        raise NotFound("Ticket not found")
    ensure_owner(ticket.vendor_email, vendor.email, "ticket")
    return ticket

def booking_for_decision(booking_id: int, email: str = Depends(get_current_email), db: Session = Depends(get_db)) -> Booking:
    """The booking at ``{booking_id}``, only for the vendor it was placed with."""
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFound("Booking not found")
    ensure_owner(booking.vendor_email, email, "booking")
    return booking
