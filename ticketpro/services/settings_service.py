import csv
import io
import platform
import sys
from fastapi import Request
from sqlalchemy.orm import Session

from ticketpro.core.config import settings
from ticketpro.core.errors import ValidationError
from ticketpro.core.timeutil import iso, utcnow
from ticketpro.models.user import User
from ticketpro.models.booking import Booking
from ticketpro.models.ticket_batch import TicketBatch
from ticketpro.repositories.reference import AirlineRepository, CountryRepository
from ticketpro.repositories.settings import SettingsRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services.audit_service import log_activity

DEFAULT_SETTINGS = {
    "company_name": "BD TicketPro",
    "company_email": "info@bdticketpro.com",
    "company_phone": "+880-123-456-7890",
    "company_address": "Dhaka, Bangladesh",
    "default_currency": "BDT",
    "timezone": "Asia/Dhaka",
    "language": "en",
    "auto_backup": "true",
    "email_notifications": "true",
    "sms_notifications": "false",
    "booking_timeout": "24",
}

EXPORT_FORMATS = ("json", "csv")


def get_settings(db: Session) -> dict[str, str]:
    return {**DEFAULT_SETTINGS, **SettingsRepository(db).all()}


def update_settings(db: Session, user: User, values: dict, request: Request | None = None) -> dict[str, str]:
    """Write every key in one transaction. Values are stored as strings."""
    if not values:
        raise ValidationError("No settings provided")
    bad = [key for key, value in values.items() if not isinstance(value, (str, int, float, bool))]
    if bad:
        raise ValidationError("Invalid settings values",
                              errors=[{"field": key, "message": "must be a string, number or boolean"} for key in bad])
    repo = SettingsRepository(db)
    try:
        for key, value in values.items():
            if isinstance(value, bool):
                value = "true" if value else "false"
            repo.set(key, str(value))
        log_activity(db, user.id, "update_settings", "system_settings", None, {"keys": sorted(values)}, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_settings(db)


def _ticket_rows(db: Session) -> list[dict]:
    rows, _total = TicketRepository(db).list(limit=None)
    return [
        {
            "ticket_id": t.id,
            "flight_number": t.flight_number,
            "status": t.status,
            "selling_price": t.selling_price,
            "buying_price": b.buying_price,
            "country_code": c.code,
            "country_name": c.name,
            "airline_name": b.airline_name,
            "flight_date": b.flight_date,
            "flight_time": b.flight_time,
            "sold_at": iso(t.sold_at) or "",
        }
        for t, b, c in rows
    ]


def export_data(db: Session, fmt: str = "json"):
    """Snapshot of the business data.

    json returns a dict; csv returns the ticket inventory as text.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValidationError(f"Unsupported export format: {fmt}")
    tickets = _ticket_rows(db)
    if fmt == "csv":
        buf = io.StringIO()
        fieldnames = list(tickets[0].keys()) if tickets else ["ticket_id"]
        w = csv.DictWriter(buf, fieldnames=fieldnames)
        w.writeheader()
        for row in tickets:
            w.writerow(row)
        return buf.getvalue()

    return {
        "exportedAt": iso(utcnow()),
        "settings": get_settings(db),
        "countries": [{"code": c.code, "name": c.name, "flag": c.flag} for c in CountryRepository(db).list()],
        "airlines": [{"id": a.id, "name": a.name, "code": a.code} for a in AirlineRepository(db).list()],
        "ticketBatches": [
            {
                "id": b.id, "country_code": b.country_code, "airline_name": b.airline_name,
                "flight_date": b.flight_date, "flight_time": b.flight_time,
                "buying_price": b.buying_price, "quantity": b.quantity, "agent_name": b.agent_name,
                "created_at": iso(b.created_at),
            }
            for b in db.query(TicketBatch).order_by(TicketBatch.created_at.desc()).all()
        ],
        "tickets": tickets,
        "bookings": [
            {
                "id": bk.id, "ticket_id": bk.ticket_id, "passenger_name": bk.passenger_name,
                "selling_price": bk.selling_price, "payment_type": bk.payment_type,
                "status": bk.status, "created_at": iso(bk.created_at), "confirmed_at": iso(bk.confirmed_at),
            }
            for bk in db.query(Booking).order_by(Booking.created_at.desc()).all()
        ],
    }


def system_info(db: Session) -> dict:
    counts = TicketRepository(db).status_counts()
    return {
        "appName": settings.APP_NAME,
        "environment": settings.ENV,
        "database": db.get_bind().dialect.name,
        "pythonVersion": sys.version.split()[0],
        "platform": platform.platform(),
        "totalTickets": sum(counts.values()),
        "serverTime": iso(utcnow()),
    }
