from sqlalchemy import String, Integer, DateTime, Boolean, Numeric, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from ticketpoint.models.base import Base, utcnow

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUS_HIDDEN = "hidden"

class Ticket(Base):
    """A vendor's listing: route, price and remaining inventory."""

    __tablename__ = "tickets"
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_tickets_quantity_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    origin: Mapped[str] = mapped_column(String(128), index=True)
    destination: Mapped[str] = mapped_column(String(128), index=True)
    transport_type: Mapped[str | None] = mapped_column(String(32), nullable=True)  # bus | train | launch | plane
    departure_at: Mapped[datetime] = mapped_column(DateTime)
    perks: Mapped[list] = mapped_column(JSON, default=list)
    price: Mapped[float] = mapped_column(Numeric(10, 2))
    quantity: Mapped[int] = mapped_column(Integer)
    vendor_email: Mapped[str] = mapped_column(String(255), index=True)
    vendor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default=STATUS_PENDING, index=True)  # pending | approved | rejected | hidden
    advertised: Mapped[bool] = mapped_column(Boolean, default=False)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
