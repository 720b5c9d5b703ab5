import uuid
from sqlalchemy import func, case
from sqlalchemy.orm import Session

from ticketpro.models.booking import Booking
from ticketpro.models.ticket import Ticket
from ticketpro.models.ticket_batch import TicketBatch
from ticketpro.models.country import Country


class TicketBatchRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, batch_id: str) -> TicketBatch | None:
        return self.db.get(TicketBatch, batch_id)

    def create(self, **fields) -> TicketBatch:
        b = TicketBatch(id=str(uuid.uuid4()), **fields)
        self.db.add(b)
        self.db.flush()
        return b

    def list_with_stats(self, country: str | None = None, airline: str | None = None,
                        date_from: str | None = None, date_to: str | None = None):
        """Batches with per-status ticket counts and sold revenue.

        Yields ``(batch, country, sold, locked, available, sold_revenue)``.
        """
        q = (
            self.db.query(
                TicketBatch, Country,
                func.coalesce(func.sum(case((Ticket.status == "sold", 1), else_=0)), 0),
                func.coalesce(func.sum(case((Ticket.status == "locked", 1), else_=0)), 0),
                func.coalesce(func.sum(case((Ticket.status == "available", 1), else_=0)), 0),
                func.coalesce(func.sum(case((Ticket.status == "sold", Ticket.selling_price), else_=0)), 0),
            )
            .join(Country, TicketBatch.country_code == Country.code)
            .outerjoin(Ticket, Ticket.batch_id == TicketBatch.id)
        )
        if country:
            q = q.filter(TicketBatch.country_code == country)
        if airline:
            q = q.filter(func.lower(TicketBatch.airline_name).like(f"%{airline.lower()}%"))
        if date_from:
            q = q.filter(TicketBatch.flight_date >= date_from)
        if date_to:
            q = q.filter(TicketBatch.flight_date <= date_to)
        return q.group_by(TicketBatch.id, Country.code).order_by(TicketBatch.created_at.desc()).all()

    def ticket_status_counts(self, batch_id: str) -> dict[str, int]:
        rows = (
            self.db.query(Ticket.status, func.count(Ticket.id))
            .filter(Ticket.batch_id == batch_id)
            .group_by(Ticket.status)
            .all()
        )
        return {s: int(c) for s, c in rows}

    def delete(self, batch: TicketBatch) -> None:
        self.db.query(Ticket).filter(Ticket.batch_id == batch.id).delete(synchronize_session=False)
        self.db.delete(batch)
        self.db.flush()

    def booking_count(self, batch_id: str) -> int:
        return (
            self.db.query(func.count(Booking.id))
            .join(Ticket, Booking.ticket_id == Ticket.id)
            .filter(Ticket.batch_id == batch_id)
            .scalar()
        ) or 0
