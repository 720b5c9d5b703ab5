from __future__ import annotations

import uuid
from datetime import timedelta
from sqlalchemy import func, case
from sqlalchemy.orm import Session

from ticketpro.core.config import settings
from ticketpro.core.errors import ValidationError
from ticketpro.core.timeutil import utcnow
from ticketpro.models.ticket import Ticket, TICKET_STATUSES
from ticketpro.models.ticket_batch import TicketBatch
from ticketpro.models.booking import Booking
from ticketpro.models.country import Country


class TicketRepository:
    """Tickets joined with their batch and country.

    Rows come back as ``(Ticket, TicketBatch, Country)`` tuples so callers can
    shape responses without extra lookups.
    """

    def __init__(self, db: Session):
        self.db = db

    def _joined(self):
        return (
            self.db.query(Ticket, TicketBatch, Country)
            .join(TicketBatch, Ticket.batch_id == TicketBatch.id)
            .join(Country, TicketBatch.country_code == Country.code)
        )

    def get(self, ticket_id: str) -> Ticket | None:
        return self.db.get(Ticket, ticket_id)

    def get_for_update(self, ticket_id: str) -> Ticket | None:
        # SQLite ignores FOR UPDATE; the write lock is taken on flush
        return self.db.query(Ticket).filter(Ticket.id == ticket_id).with_for_update().first()

    def get_with_batch(self, ticket_id: str):
        return self._joined().filter(Ticket.id == ticket_id).first()

    def list(self, country: str | None = None, status: str | None = None, airline: str | None = None,
             limit: int | None = 50, offset: int = 0):
        q = self._joined()
        if country:
            q = q.filter(TicketBatch.country_code == country)
        if status:
            q = q.filter(Ticket.status == status)
        if airline:
            q = q.filter(func.lower(TicketBatch.airline_name).like(f"%{airline.lower()}%"))
        total = q.count()
        q = q.order_by(Ticket.created_at.desc())
        if limit is not None:
            q = q.limit(limit).offset(offset)
        rows = q.all()
        return rows, total

    def list_by_batch(self, batch_id: str) -> list[Ticket]:
        return self.db.query(Ticket).filter(Ticket.batch_id == batch_id).order_by(Ticket.flight_number).all()

    def create(self, batch_id: str, flight_number: str, selling_price: int, aircraft: str | None = None,
               terminal: str | None = None, arrival_time: str | None = None, duration: str | None = None) -> Ticket:
        t = Ticket(
            id=str(uuid.uuid4()),
            batch_id=batch_id,
            flight_number=flight_number,
            status="available",
            selling_price=selling_price,
            aircraft=aircraft,
            terminal=terminal,
            arrival_time=arrival_time,
            duration=duration,
            available_seats=1,
            total_seats=1,
        )
        self.db.add(t)
        return t

    def update_status(self, ticket_id: str, new_status: str, sold_by: str | None = None) -> bool:
        """Move a ticket to ``new_status``.

        Does not judge whether the move is legal; callers decide that. A lock
        always gets a fresh window, the first move to sold stamps who and
        when, and every other status clears the lock window. Returns False
        when the ticket does not exist.
        """
        if new_status not in TICKET_STATUSES:
            raise ValidationError(f"Invalid ticket status: {new_status}",
                                  errors=[{"field": "status", "message": f"must be one of {', '.join(TICKET_STATUSES)}"}])
        t = self.db.get(Ticket, ticket_id)
        if not t:
            return False
        now = utcnow()
        already_sold = t.status == "sold"
        t.status = new_status
        t.updated_at = now
        if new_status == "locked":
            t.locked_until = now + timedelta(hours=settings.LOCK_HOURS)
        else:
            t.locked_until = None
        # an already sold ticket keeps its first seller and sale time
        if new_status == "sold" and not already_sold:
            t.sold_by = sold_by
            t.sold_at = now
        self.db.flush()
        return True

    def lapsed_locks(self, now) -> list[Ticket]:
        """Locked tickets whose window has passed and which no live booking still holds."""
        held = self.db.query(Booking.ticket_id).filter(Booking.status.in_(("pending", "confirmed")))
        return (
            self.db.query(Ticket)
            .filter(Ticket.status == "locked", Ticket.locked_until.is_not(None), Ticket.locked_until < now)
            .filter(Ticket.id.not_in(held))
            .all()
        )

    def average_selling_price(self, country_code: str) -> float | None:
        """Average selling price of confirmed sales for a country."""
        return (
            self.db.query(func.avg(Booking.selling_price))
            .join(Ticket, Booking.ticket_id == Ticket.id)
            .join(TicketBatch, Ticket.batch_id == TicketBatch.id)
            .filter(TicketBatch.country_code == country_code, Booking.status == "confirmed")
            .scalar()
        )

    def status_counts(self) -> dict[str, int]:
        rows = self.db.query(Ticket.status, func.count(Ticket.id)).group_by(Ticket.status).all()
        counts = {s: 0 for s in TICKET_STATUSES}
        counts.update({s: int(c) for s, c in rows})
        return counts

    def dashboard_stats(self) -> dict:
        today = utcnow().date().isoformat()
        sales_count, sales_amount = (
            self.db.query(func.count(Ticket.id), func.coalesce(func.sum(Ticket.selling_price), 0))
            .filter(Ticket.status == "sold", func.date(Ticket.sold_at) == today)
            .one()
        )
        total_bookings = self.db.query(Booking).filter(Booking.status == "confirmed").count()
        counts = self.status_counts()
        investment = self.db.query(func.coalesce(func.sum(TicketBatch.buying_price * TicketBatch.quantity), 0)).scalar()
        profit = (
            self.db.query(func.coalesce(func.sum(Ticket.selling_price - TicketBatch.buying_price), 0))
            .join(TicketBatch, Ticket.batch_id == TicketBatch.id)
            .filter(Ticket.status == "sold")
            .scalar()
        )
        return {
            "todaysSales": {"count": int(sales_count), "amount": int(sales_amount)},
            "totalBookings": total_bookings,
            "totalTickets": sum(counts.values()),
            "availableTickets": counts["available"],
            "lockedTickets": counts["locked"],
            "soldTickets": counts["sold"],
            "totalInventory": counts["available"] + counts["locked"],
            "totalInvestment": int(investment),
            "estimatedProfit": int(profit),
        }

    def country_stats(self) -> list[dict]:
        """Per-country ticket counts; countries with no stock report zeros."""
        rows = (
            self.db.query(
                Country.code, Country.name, Country.flag,
                func.count(Ticket.id),
                func.sum(case((Ticket.status == "available", 1), else_=0)),
                func.sum(case((Ticket.status == "locked", 1), else_=0)),
                func.sum(case((Ticket.status == "sold", 1), else_=0)),
            )
            .outerjoin(TicketBatch, TicketBatch.country_code == Country.code)
            .outerjoin(Ticket, Ticket.batch_id == TicketBatch.id)
            .group_by(Country.code, Country.name, Country.flag)
            .order_by(Country.name)
            .all()
        )
        return [
            {
                "code": code, "name": name, "flag": flag,
                "totalTickets": int(total or 0),
                "availableTickets": int(avail or 0),
                "lockedTickets": int(locked or 0),
                "soldTickets": int(sold or 0),
            }
            for code, name, flag, total, avail, locked, sold in rows
        ]
