from datetime import datetime
from pydantic import BaseModel, Field

class BookingCreate(BaseModel):
    ticket_id: int
    quantity: int = Field(..., ge=1, description="Number of tickets to reserve")

class BookingOut(BaseModel):
    id: int
    ticket_id: int | None
    title: str
    image: str | None
    origin: str
    destination: str
    departure_at: datetime
    unit_price: float
    vendor_email: str
    vendor_name: str | None
    user_email: str
    user_name: str | None
    quantity: int
    status: str
    payment_status: str
    created_at: datetime
    decided_at: datetime | None
    paid_at: datetime | None

    class Config:
        from_attributes = True
