from sqlalchemy import String, Integer, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

PACKAGE_TYPES = ("with-transport", "without-transport")

class UmrahGroupTicket(Base):
    __tablename__ = "umrah_group_tickets"
    __table_args__ = (
        CheckConstraint("package_type IN ('with-transport','without-transport')", name="ck_group_tickets_package_type"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    group_name: Mapped[str] = mapped_column(String(200), index=True)
    package_type: Mapped[str] = mapped_column(String(20), default="with-transport", index=True)
    departure_date: Mapped[str] = mapped_column(String(10), index=True)
    return_date: Mapped[str] = mapped_column(String(10))
    ticket_count: Mapped[int] = mapped_column(Integer, default=0)
    total_cost: Mapped[int] = mapped_column(Integer, default=0)
    average_cost_per_ticket: Mapped[int] = mapped_column(Integer, default=0)
    agent_name: Mapped[str] = mapped_column(String(200))
    agent_contact: Mapped[str | None] = mapped_column(String(120), nullable=True)
    purchase_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    departure_airline: Mapped[str | None] = mapped_column(String(120), nullable=True)
    departure_flight_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    departure_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    departure_route: Mapped[str | None] = mapped_column(String(120), nullable=True)
    return_airline: Mapped[str | None] = mapped_column(String(120), nullable=True)
    return_flight_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    return_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    return_route: Mapped[str | None] = mapped_column(String(120), nullable=True)

    # denormalized: ticket_count - count(umrah_group_bookings); rewritten in the same transaction as every assignment change
    remaining_tickets: Mapped[int] = mapped_column(Integer, default=0)

    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
