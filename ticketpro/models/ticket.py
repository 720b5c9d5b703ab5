from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

TICKET_STATUSES = ("available", "booked", "locked", "sold")

class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint("status IN ('available','booked','locked','sold')", name="ck_tickets_status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    batch_id: Mapped[str] = mapped_column(String(36), ForeignKey("ticket_batches.id"), index=True)
    flight_number: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(12), default="available", index=True)
    selling_price: Mapped[int] = mapped_column(Integer)

    aircraft: Mapped[str | None] = mapped_column(String(60), nullable=True)
    terminal: Mapped[str | None] = mapped_column(String(30), nullable=True)
    arrival_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(20), nullable=True)
    available_seats: Mapped[int] = mapped_column(Integer, default=1)
    total_seats: Mapped[int] = mapped_column(Integer, default=1)

    # only meaningful while status == locked
    locked_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sold_by: Mapped[str | None] = mapped_column(String(36), ForeignKey("users.id"), nullable=True)
    sold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
