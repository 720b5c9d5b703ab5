from __future__ import annotations

import json
import uuid
from datetime import timedelta
from sqlalchemy.orm import Session

from ticketpro.core.config import settings
from ticketpro.core.errors import ValidationError
from ticketpro.core.timeutil import utcnow
from ticketpro.models.booking import Booking, BOOKING_STATUSES

ACTIVE_BOOKING_STATUSES = ("pending", "confirmed")


class BookingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, booking_id: str) -> Booking | None:
        return self.db.get(Booking, booking_id)

    def list(self, created_by: str | None = None, status: str | None = None,
             limit: int = 50, offset: int = 0) -> tuple[list[Booking], int]:
        q = self.db.query(Booking)
        if created_by:
            q = q.filter(Booking.created_by == created_by)
        if status:
            q = q.filter(Booking.status == status)
        total = q.count()
        items = q.order_by(Booking.created_at.desc()).limit(limit).offset(offset).all()
        return items, total

    def active_for_ticket(self, ticket_id: str) -> Booking | None:
        return (
            self.db.query(Booking)
            .filter(Booking.ticket_id == ticket_id, Booking.status.in_(ACTIVE_BOOKING_STATUSES))
            .order_by(Booking.created_at.desc())
            .first()
        )

    def create(self, ticket_id: str, agent: dict, passenger: dict, selling_price: int, payment_type: str,
               created_by: str, partial_amount: int | None = None, payment_method: str = "cash",
               payment_details: dict | None = None, comments: str | None = None) -> Booking:
        now = utcnow()
        b = Booking(
            id=str(uuid.uuid4()),
            ticket_id=ticket_id,
            agent_name=agent.get("name", ""),
            agent_phone=agent.get("phone"),
            agent_email=agent.get("email"),
            passenger_name=passenger.get("name", ""),
            passenger_passport=passenger.get("passportNo", ""),
            passenger_phone=passenger.get("phone", ""),
            passenger_email=passenger.get("email"),
            pax_count=passenger.get("paxCount") or 1,
            selling_price=selling_price,
            payment_type=payment_type,
            partial_amount=partial_amount if payment_type == "partial" else None,
            payment_method=payment_method or "cash",
            payment_details=json.dumps(payment_details) if payment_details else None,
            comments=comments,
            status="pending",
            created_by=created_by,
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(hours=settings.BOOKING_HOLD_HOURS) if payment_type == "partial" else None,
        )
        self.db.add(b)
        self.db.flush()
        return b

    def update_status(self, booking_id: str, new_status: str) -> bool:
        """Set a booking status. Repeating the current status changes nothing."""
        if new_status not in BOOKING_STATUSES:
            raise ValidationError(f"Invalid booking status: {new_status}",
                                  errors=[{"field": "status", "message": f"must be one of {', '.join(BOOKING_STATUSES)}"}])
        b = self.db.get(Booking, booking_id)
        if not b:
            return False
        if b.status == new_status:
            return True
        b.status = new_status
        b.updated_at = utcnow()
        if new_status == "confirmed" and b.confirmed_at is None:
            b.confirmed_at = b.updated_at
        self.db.flush()
        return True

    def overdue_partials(self, now) -> list[Booking]:
        return (
            self.db.query(Booking)
            .filter(Booking.status == "pending", Booking.expires_at.is_not(None), Booking.expires_at < now)
            .all()
        )
