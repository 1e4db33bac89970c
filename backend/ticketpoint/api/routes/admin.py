from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketpoint.api.deps import require_admin
from ticketpoint.core.errors import NotFound
from ticketpoint.db.session import get_db
from ticketpoint.models.ticket import Ticket, STATUS_APPROVED, STATUS_REJECTED
from ticketpoint.models.user import User, ROLE_ADMIN, ROLE_VENDOR
from ticketpoint.schemas.ticket import TicketOut
from ticketpoint.schemas.user import UserOut
from ticketpoint.services import listings

router = APIRouter(dependencies=[Depends(require_admin)])


def _set_role(db: Session, email: str, role: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user:
        raise NotFound("User not found")
    user.role = role
    db.commit()
    db.refresh(user)
    return user


@router.get("/tickets", response_model=List[TicketOut])
def all_tickets(db: Session = Depends(get_db)):
    return db.query(Ticket).order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


@router.get("/approved-tickets", response_model=List[TicketOut])
def approved_tickets(db: Session = Depends(get_db)):
    """Approved listings, used to pick what gets advertised."""
    return db.query(Ticket).filter(Ticket.status == STATUS_APPROVED).order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


@router.patch("/tickets/{ticket_id}/approve", response_model=TicketOut)
def approve_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return listings.set_status(db, ticket_id, STATUS_APPROVED)


@router.patch("/tickets/{ticket_id}/reject", response_model=TicketOut)
def reject_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return listings.set_status(db, ticket_id, STATUS_REJECTED)


@router.patch("/tickets/{ticket_id}/advertise", response_model=TicketOut)
def toggle_advertise(ticket_id: int, db: Session = Depends(get_db)):
    return listings.toggle_advertise(db, ticket_id)


@router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.id.asc()).all()


@router.patch("/users/{email}/make-admin", response_model=UserOut)
def make_admin(email: str, db: Session = Depends(get_db)):
    return _set_role(db, email, ROLE_ADMIN)


@router.patch("/users/{email}/make-vendor", response_model=UserOut)
def make_vendor(email: str, db: Session = Depends(get_db)):
    return _set_role(db, email, ROLE_VENDOR)


@router.patch("/users/{email}/mark-fraud", response_model=dict)
def mark_fraud(email: str, db: Session = Depends(get_db)):
    hidden = listings.mark_vendor_fraud(db, email.lower())
    return {"status": "ok", "hidden_tickets": hidden}
