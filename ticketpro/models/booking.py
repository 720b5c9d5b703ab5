from sqlalchemy import String, Integer, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "expired")

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("payment_type IN ('full','partial')", name="ck_bookings_payment_type"),
        CheckConstraint("status IN ('pending','confirmed','cancelled','expired')", name="ck_bookings_status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(String(36), ForeignKey("tickets.id"), index=True)

    agent_name: Mapped[str] = mapped_column(String(200))
    agent_phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    agent_email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    passenger_name: Mapped[str] = mapped_column(String(200))
    passenger_passport: Mapped[str] = mapped_column(String(40))
    passenger_phone: Mapped[str] = mapped_column(String(40))
    passenger_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    pax_count: Mapped[int] = mapped_column(Integer, default=1)

    selling_price: Mapped[int] = mapped_column(Integer)
    payment_type: Mapped[str] = mapped_column(String(10))  # full, partial
    partial_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payment_method: Mapped[str] = mapped_column(String(40), default="cash")
    payment_details: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(12), default="pending", index=True)
    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)  # partial only

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
