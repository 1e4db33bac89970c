from datetime import datetime
from pydantic import BaseModel, Field

class TicketCreate(BaseModel):
    """Vendor-supplied listing fields.

    Vendor identity, status and moderation flags are never taken from the client.
    """
    title: str = Field(..., min_length=1, max_length=255)
    image: str | None = None
    origin: str = Field(..., min_length=1, max_length=128)
    destination: str = Field(..., min_length=1, max_length=128)
    transport_type: str | None = Field(None, max_length=32)
    departure_at: datetime
    perks: list[str] = Field(default_factory=list)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0)

class TicketUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    image: str | None = None
    origin: str | None = Field(None, min_length=1, max_length=128)
    destination: str | None = Field(None, min_length=1, max_length=128)
    transport_type: str | None = Field(None, max_length=32)
    departure_at: datetime | None = None
    perks: list[str] | None = None
    price: float | None = Field(None, ge=0)

class TicketOut(BaseModel):
    id: int
    title: str
    image: str | None
    origin: str
    destination: str
    transport_type: str | None
    departure_at: datetime
    perks: list[str]
    price: float
    quantity: int
    vendor_email: str
    vendor_name: str | None
    status: str
    advertised: bool
    hidden: bool
    created_at: datetime
    updated_at: datetime | None
    approved_at: datetime | None
    rejected_at: datetime | None

    class Config:
        from_attributes = True

class VendorOverview(BaseModel):
    tickets_added: int
    tickets_sold: int
    total_revenue: float
