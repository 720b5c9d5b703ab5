from __future__ import annotations

import uuid
from sqlalchemy import func, or_, case
from sqlalchemy.orm import Session

from ticketpro.models.umrah_with_transport import UmrahWithTransport
from ticketpro.models.umrah_without_transport import UmrahWithoutTransport
from ticketpro.models.umrah_group_ticket import UmrahGroupTicket
from ticketpro.models.umrah_group_booking import UmrahGroupBooking


class _RecordRepository:
    model = None
    search_columns: tuple = ()

    def __init__(self, db: Session):
        self.db = db

    def get(self, record_id: str):
        return self.db.get(self.model, record_id)

    def list(self, search: str | None = None):
        q = self.db.query(self.model)
        if search:
            like = f"%{search}%"
            q = q.filter(or_(*[getattr(self.model, c).like(like) for c in self.search_columns]))
        return q.order_by(self.model.created_at.desc()).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, **fields):
        row = self.model(id=str(uuid.uuid4()), **fields)
        self.db.add(row)
        self.db.flush()
        return row

    def update(self, row, fields: dict):
        for k, v in fields.items():
            setattr(row, k, v)
        self.db.flush()
        return row

    def delete(self, row) -> None:
        self.db.delete(row)
        self.db.flush()


class UmrahWithTransportRepository(_RecordRepository):
    model = UmrahWithTransport
    search_columns = ("passenger_name", "pnr", "passport_number")


class UmrahWithoutTransportRepository(_RecordRepository):
    model = UmrahWithoutTransport
    search_columns = ("passenger_name", "passport_number")

    def list_pending(self) -> list[UmrahWithoutTransport]:
        return (
            self.db.query(UmrahWithoutTransport)
            .filter(UmrahWithoutTransport.remaining_amount > 0)
            .order_by(UmrahWithoutTransport.created_at.desc())
            .all()
        )

    def payment_summary(self) -> dict:
        total, amount, paid, remaining, pending = self.db.query(
            func.count(UmrahWithoutTransport.id),
            func.coalesce(func.sum(UmrahWithoutTransport.total_amount), 0),
            func.coalesce(func.sum(UmrahWithoutTransport.amount_paid), 0),
            func.coalesce(func.sum(UmrahWithoutTransport.remaining_amount), 0),
            func.coalesce(func.sum(case((UmrahWithoutTransport.remaining_amount > 0, 1), else_=0)), 0),
        ).one()
        return {
            "totalPackages": int(total),
            "totalAmount": int(amount),
            "totalPaid": int(paid),
            "totalRemaining": int(remaining),
            "pendingPackages": int(pending),
        }


class UmrahGroupTicketRepository(_RecordRepository):
    model = UmrahGroupTicket
    search_columns = ("group_name", "agent_name")

    def list(self, search: str | None = None, package_type: str | None = None):
        q = self.db.query(UmrahGroupTicket)
        if search:
            like = f"%{search}%"
            q = q.filter(or_(UmrahGroupTicket.group_name.like(like), UmrahGroupTicket.agent_name.like(like)))
        elif package_type:
            q = q.filter(UmrahGroupTicket.package_type == package_type)
        return q.order_by(UmrahGroupTicket.departure_date.desc(), UmrahGroupTicket.created_at.desc()).all()

    def find_available(self, package_type: str, departure_date: str, return_date: str) -> list[UmrahGroupTicket]:
        """Groups with seats left for the exact travel dates, oldest purchase first."""
        return (
            self.db.query(UmrahGroupTicket)
            .filter(
                UmrahGroupTicket.package_type == package_type,
                UmrahGroupTicket.departure_date == departure_date,
                UmrahGroupTicket.return_date == return_date,
                UmrahGroupTicket.remaining_tickets > 0,
            )
            .order_by(UmrahGroupTicket.created_at.asc())
            .all()
        )

    def recompute_remaining(self, group: UmrahGroupTicket) -> int:
        self.db.flush()
        assigned = (
            self.db.query(func.count(UmrahGroupBooking.id))
            .filter(UmrahGroupBooking.group_ticket_id == group.id)
            .scalar()
        )
        group.remaining_tickets = max(group.ticket_count - int(assigned or 0), 0)
        self.db.flush()
        return group.remaining_tickets


class UmrahGroupBookingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, booking_id: str) -> UmrahGroupBooking | None:
        return self.db.get(UmrahGroupBooking, booking_id)

    def list_for_group(self, group_ticket_id: str) -> list[UmrahGroupBooking]:
        return (
            self.db.query(UmrahGroupBooking)
            .filter(UmrahGroupBooking.group_ticket_id == group_ticket_id)
            .order_by(UmrahGroupBooking.assigned_at.asc())
            .all()
        )

    def find_for_passenger(self, passenger_id: str, passenger_type: str) -> UmrahGroupBooking | None:
        return (
            self.db.query(UmrahGroupBooking)
            .filter(UmrahGroupBooking.passenger_id == passenger_id, UmrahGroupBooking.passenger_type == passenger_type)
            .first()
        )

    def create(self, group_ticket_id: str, passenger_id: str, passenger_type: str, assigned_by: str) -> UmrahGroupBooking:
        row = UmrahGroupBooking(
            id=str(uuid.uuid4()),
            group_ticket_id=group_ticket_id,
            passenger_id=passenger_id,
            passenger_type=passenger_type,
            assigned_by=assigned_by,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def delete(self, row: UmrahGroupBooking) -> None:
        self.db.delete(row)
        self.db.flush()
