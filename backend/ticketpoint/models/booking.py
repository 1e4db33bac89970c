from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from ticketpoint.models.base import Base, utcnow

BOOKING_PENDING = "pending"
BOOKING_ACCEPTED = "accepted"
BOOKING_REJECTED = "rejected"

PAYMENT_UNPAID = "unpaid"
PAYMENT_PAID = "paid"

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Source listing; the snapshot below stays readable if the listing is deleted
    ticket_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    origin: Mapped[str] = mapped_column(String(128))
    destination: Mapped[str] = mapped_column(String(128))
    departure_at: Mapped[datetime] = mapped_column(DateTime)
    unit_price: Mapped[float] = mapped_column(Numeric(10, 2))
    vendor_email: Mapped[str] = mapped_column(String(255), index=True)
    vendor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_email: Mapped[str] = mapped_column(String(255), index=True)
    user_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(16), default=BOOKING_PENDING)  # pending | accepted | rejected
    payment_status: Mapped[str] = mapped_column(String(16), default=PAYMENT_UNPAID)  # unpaid | paid
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
