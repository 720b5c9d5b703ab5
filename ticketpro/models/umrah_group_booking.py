from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

class UmrahGroupBooking(Base):
    __tablename__ = "umrah_group_bookings"
    __table_args__ = (
        UniqueConstraint("passenger_id", "passenger_type", name="uq_group_booking_passenger"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    group_ticket_id: Mapped[str] = mapped_column(String(36), ForeignKey("umrah_group_tickets.id"), index=True)
    passenger_id: Mapped[str] = mapped_column(String(36))  # umrah_with_transport.id or umrah_without_transport.id
    passenger_type: Mapped[str] = mapped_column(String(20))  # with-transport, without-transport
    assigned_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
