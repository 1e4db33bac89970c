from datetime import datetime
from pydantic import BaseModel, Field

class CheckoutRequest(BaseModel):
    booking_id: int

class CheckoutSessionOut(BaseModel):
    url: str

class PaymentConfirm(BaseModel):
    session_id: str = Field(..., min_length=1)

class TransactionOut(BaseModel):
    id: int
    booking_id: int | None
    user_email: str
    vendor_email: str | None
    ticket_title: str | None
    amount: float
    session_id: str
    transaction_id: str | None
    status: str
    paid_at: datetime

    class Config:
        from_attributes = True

class PaymentConfirmOut(BaseModel):
    already_processed: bool
    transaction: TransactionOut
