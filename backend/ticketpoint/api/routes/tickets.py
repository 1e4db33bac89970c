from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ticketpoint.api.deps import get_current_email, owned_ticket, require_vendor, require_vendor_path_owner
from ticketpoint.db.session import get_db
from ticketpoint.models.ticket import Ticket
from ticketpoint.models.user import User
from ticketpoint.schemas.ticket import TicketCreate, TicketOut, TicketUpdate
from ticketpoint.services import listings

router = APIRouter()

@router.post("/tickets", response_model=TicketOut, status_code=201)
def create_ticket(payload: TicketCreate, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    return listings.create_ticket(db, vendor, payload)

@router.get("/tickets", response_model=list[TicketOut])
def browse_tickets(
    db: Session = Depends(get_db),
    origin: str | None = None,
    destination: str | None = None,
    transport_type: str | None = None,
    sort: str = Query("newest", pattern="^(newest|price_asc|price_desc)$"),
):
    """Approved, visible tickets with optional exact-match filters."""
    return listings.browse_tickets(db, origin, destination, transport_type, sort)

@router.get("/tickets/vendor/{email}", response_model=list[TicketOut])
def vendor_tickets(db: Session = Depends(get_db), vendor: User = Depends(require_vendor_path_owner)):
    return listings.vendor_tickets(db, vendor.email)

@router.get("/tickets/{ticket_id}", response_model=TicketOut)
def get_ticket(ticket_id: int, db: Session = Depends(get_db), _email: str = Depends(get_current_email)):
    return listings.get_ticket(db, ticket_id)

@router.put("/tickets/{ticket_id}", response_model=TicketOut)
def update_ticket(payload: TicketUpdate, db: Session = Depends(get_db), ticket: Ticket = Depends(owned_ticket)):
    return listings.update_ticket(db, ticket, payload)

@router.delete("/tickets/{ticket_id}")
def delete_ticket(db: Session = Depends(get_db), ticket: Ticket = Depends(owned_ticket)):
    listings.delete_ticket(db, ticket)
    return {"deleted": 1}

@router.get("/latest-ticket", response_model=list[TicketOut])
def latest_tickets(db: Session = Depends(get_db)):
    return listings.latest_tickets(db)

@router.get("/advertised-tickets", response_model=list[TicketOut])
def advertised_tickets(db: Session = Depends(get_db)):
    return listings.advertised_tickets(db)
