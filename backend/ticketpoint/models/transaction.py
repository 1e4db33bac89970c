from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from ticketpoint.models.base import Base, utcnow

class Transaction(Base):
    """Proof of a completed checkout session. Written once, never updated."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    booking_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True, index=True)
    user_email: Mapped[str] = mapped_column(String(255), index=True)
    vendor_email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    ticket_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount: Mapped[float] = mapped_column(Numeric(10, 2))
    session_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(32))
    paid_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
