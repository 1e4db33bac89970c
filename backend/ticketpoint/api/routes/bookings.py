from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketpoint.api.deps import booking_for_decision, require_path_owner, require_user, require_vendor
from ticketpoint.db.session import get_db
from ticketpoint.models.booking import Booking
from ticketpoint.models.user import User
from ticketpoint.schemas.booking import BookingCreate, BookingOut
from ticketpoint.schemas.ticket import VendorOverview
from ticketpoint.services import booking_workflow, listings

router = APIRouter()

@router.post("/booked-tickets", response_model=BookingOut, status_code=201)
def book_ticket(payload: BookingCreate, db: Session = Depends(get_db), user: User = Depends(require_user)):
    """Reserve ``quantity`` tickets of a listing for the caller.

    400 when the listing does not have enough tickets left; nothing is
    written in that case.
    """
    return booking_workflow.create_booking(db, user.email, user.name, payload.ticket_id, payload.quantity)

@router.get("/booked-tickets/{email}", response_model=list[BookingOut])
def my_bookings(db: Session = Depends(get_db), caller: str = Depends(require_path_owner)):
    return booking_workflow.bookings_for_user(db, caller)

@router.get("/vendor/bookings/{email}", response_model=list[BookingOut])
def vendor_bookings(db: Session = Depends(get_db), caller: str = Depends(require_path_owner)):
    return booking_workflow.bookings_for_vendor(db, caller)

@router.get("/vendor/overview", response_model=VendorOverview)
def vendor_overview(db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    return listings.vendor_overview(db, vendor.email)

@router.patch("/bookings/accept/{booking_id}", response_model=BookingOut)
def accept_booking(db: Session = Depends(get_db), booking: Booking = Depends(booking_for_decision)):
    return booking_workflow.accept_booking(db, booking)

@router.patch("/bookings/reject/{booking_id}", response_model=BookingOut)
def reject_booking(db: Session = Depends(get_db), booking: Booking = Depends(booking_for_decision)):
    return booking_workflow.reject_booking(db, booking)
