from sqlalchemy import String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

class UmrahWithoutTransport(Base):
    """remaining_amount is always total_amount - amount_paid."""
    __tablename__ = "umrah_without_transport"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    flight_departure_date: Mapped[str] = mapped_column(String(10), index=True)
    return_date: Mapped[str] = mapped_column(String(10))
    passenger_name: Mapped[str] = mapped_column(String(200), index=True)
    passport_number: Mapped[str] = mapped_column(String(40), index=True)
    entry_recorded_by: Mapped[str] = mapped_column(String(200))

    total_amount: Mapped[int] = mapped_column(Integer)
    amount_paid: Mapped[int] = mapped_column(Integer, default=0)
    remaining_amount: Mapped[int] = mapped_column(Integer, default=0, index=True)
    last_payment_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
