from sqlalchemy import String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ticketpro.db.session import Base

class TicketBatch(Base):
    """One wholesale purchase. quantity == number of tickets created from it."""
    __tablename__ = "ticket_batches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    country_code: Mapped[str] = mapped_column(String(3), ForeignKey("countries.code"), index=True)
    airline_name: Mapped[str] = mapped_column(String(120))
    flight_date: Mapped[str] = mapped_column(String(10), index=True)  # YYYY-MM-DD
    flight_time: Mapped[str] = mapped_column(String(5))  # HH:MM
    buying_price: Mapped[int] = mapped_column(Integer)
    quantity: Mapped[int] = mapped_column(Integer)

    agent_name: Mapped[str] = mapped_column(String(200))
    agent_contact: Mapped[str | None] = mapped_column(String(120), nullable=True)
    agent_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    document_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
