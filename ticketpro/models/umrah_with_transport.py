from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

class UmrahWithTransport(Base):
    __tablename__ = "umrah_with_transport"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    passenger_name: Mapped[str] = mapped_column(String(200), index=True)
    pnr: Mapped[str] = mapped_column(String(20))
    passport_number: Mapped[str] = mapped_column(String(40), index=True)
    flight_airline_name: Mapped[str] = mapped_column(String(120))
    departure_date: Mapped[str] = mapped_column(String(10), index=True)  # YYYY-MM-DD
    return_date: Mapped[str] = mapped_column(String(10))
    approved_by: Mapped[str] = mapped_column(String(200))
    reference_agency: Mapped[str] = mapped_column(String(200))
    emergency_flight_contact: Mapped[str] = mapped_column(String(120))
    passenger_mobile: Mapped[str] = mapped_column(String(40))

    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
