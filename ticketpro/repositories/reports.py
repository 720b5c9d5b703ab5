from sqlalchemy import func, case
from sqlalchemy.orm import Session

from ticketpro.models.booking import Booking
from ticketpro.models.ticket import Ticket
from ticketpro.models.ticket_batch import TicketBatch


class ReportRepository:
    """Read-only aggregates behind the financial reports."""

    def __init__(self, db: Session):
        self.db = db

    def _confirmed_sales(self):
        return (
            self.db.query(Booking)
            .join(Ticket, Booking.ticket_id == Ticket.id)
            .join(TicketBatch, Ticket.batch_id == TicketBatch.id)
            .filter(Booking.status == "confirmed")
        )

    def purchase_totals(self) -> tuple[int, int]:
        """(investment, tickets bought) over every batch."""
        investment, bought = self.db.query(
            func.coalesce(func.sum(TicketBatch.buying_price * TicketBatch.quantity), 0),
            func.coalesce(func.sum(TicketBatch.quantity), 0),
        ).one()
        return int(investment), int(bought)

    def sales_totals(self) -> tuple[int, int]:
        """(revenue, profit) over confirmed bookings."""
        revenue, profit = self._confirmed_sales().with_entities(
            func.coalesce(func.sum(Booking.selling_price), 0),
            func.coalesce(func.sum(Booking.selling_price - TicketBatch.buying_price), 0),
        ).one()
        return int(revenue), int(profit)

    def ticket_status_counts(self) -> dict[str, int]:
        rows = self.db.query(Ticket.status, func.count(Ticket.id)).group_by(Ticket.status).all()
        return {s: int(c) for s, c in rows}

    def purchases_by_country(self):
        return (
            self.db.query(
                TicketBatch.country_code,
                func.sum(TicketBatch.buying_price * TicketBatch.quantity),
                func.sum(TicketBatch.quantity),
                func.avg(TicketBatch.buying_price),
            )
            .group_by(TicketBatch.country_code)
            .all()
        )

    def sales_by_country(self):
        return (
            self._confirmed_sales()
            .with_entities(
                TicketBatch.country_code,
                func.count(Booking.id),
                func.sum(Booking.selling_price),
                func.sum(Booking.selling_price - TicketBatch.buying_price),
                func.avg(Booking.selling_price),
            )
            .group_by(TicketBatch.country_code)
            .all()
        )

    def availability_by_country(self):
        """(country_code, available, total) per country with at least one ticket."""
        return (
            self.db.query(
                TicketBatch.country_code,
                func.sum(case((Ticket.status == "available", 1), else_=0)),
                func.count(Ticket.id),
            )
            .join(Ticket, Ticket.batch_id == TicketBatch.id)
            .group_by(TicketBatch.country_code)
            .all()
        )

    def confirmed_on(self, day_iso: str) -> tuple[int, int]:
        count, amount = (
            self.db.query(func.count(Booking.id), func.coalesce(func.sum(Booking.selling_price), 0))
            .filter(Booking.status == "confirmed", func.date(Booking.confirmed_at) == day_iso)
            .one()
        )
        return int(count), int(amount)

    def profit_by_country(self, limit: int):
        profit = func.sum(Booking.selling_price - TicketBatch.buying_price)
        return (
            self._confirmed_sales()
            .with_entities(
                TicketBatch.country_code,
                profit,
                func.count(Booking.id),
                func.avg(Booking.selling_price - TicketBatch.buying_price),
            )
            .group_by(TicketBatch.country_code)
            .order_by(profit.desc())
            .limit(limit)
            .all()
        )

    def buying_price_for_ticket(self, ticket_id: str) -> int | None:
        return (
            self.db.query(TicketBatch.buying_price)
            .join(Ticket, Ticket.batch_id == TicketBatch.id)
            .filter(Ticket.id == ticket_id)
            .scalar()
        )
