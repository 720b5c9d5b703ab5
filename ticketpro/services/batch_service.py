import random
from sqlalchemy.orm import Session
from fastapi import Request

from ticketpro.core.app_logger import get_logger
from ticketpro.core.errors import NotFoundError, ValidationError
from ticketpro.models.user import User
from ticketpro.models.ticket_batch import TicketBatch
from ticketpro.repositories.reference import AirlineRepository, CountryRepository
from ticketpro.repositories.ticket_batches import TicketBatchRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services.audit_service import log_activity
from ticketpro.services.financial_service import calculate_optimal_selling_price

log = get_logger("batches")

AIRCRAFT_BY_AIRLINE = {
    "Air Arabia": "A320",
    "Emirates": "Boeing 777",
    "Qatar Airways": "Boeing 787",
}
DEFAULT_AIRCRAFT = "Airbus A321"
DEFAULT_ARRIVAL_TIME = "18:45"
DEFAULT_DURATION = "4h 15m"


def make_flight_number(airline_code: str | None) -> str:
    return f"{airline_code or 'XX'} {random.randint(100, 999)}"


def aircraft_for(airline_name: str) -> str:
    for key, aircraft in AIRCRAFT_BY_AIRLINE.items():
        if key in airline_name:
            return aircraft
    return DEFAULT_AIRCRAFT


def create_batch(db: Session, user: User, data: dict, request: Request | None = None) -> tuple[TicketBatch, int]:
    """Record one purchase and expand it into ``quantity`` available tickets.

    Batch, tickets and the activity row commit together or not at all.
    """
    country = (data.get("country") or "").strip()
    airline = (data.get("airline") or "").strip()
    errors = []
    if not country:
        errors.append({"field": "country", "message": "Country is required"})
    if not airline:
        errors.append({"field": "airline", "message": "Airline is required"})
    if (data.get("buyingPrice") or 0) <= 0:
        errors.append({"field": "buyingPrice", "message": "Buying price must be positive"})
    if (data.get("quantity") or 0) < 1:
        errors.append({"field": "quantity", "message": "Quantity must be at least 1"})
    if errors:
        raise ValidationError("Invalid input data", errors=errors)
    if not CountryRepository(db).get(country):
        raise ValidationError(f"Unknown country: {country}", errors=[{"field": "country", "message": "Unknown country code"}])

    buying_price = int(data["buyingPrice"])
    quantity = int(data["quantity"])
    try:
        batch = TicketBatchRepository(db).create(
            country_code=country,
            airline_name=airline,
            flight_date=data["flightDate"],
            flight_time=data["flightTime"],
            buying_price=buying_price,
            quantity=quantity,
            agent_name=data["agentName"],
            agent_contact=data.get("agentContact"),
            agent_address=data.get("agentAddress"),
            remarks=data.get("remarks"),
            document_url=data.get("documentUrl"),
            created_by=user.id,
        )

        airline_row = AirlineRepository(db).get_by_name(airline)
        selling_price = calculate_optimal_selling_price(db, buying_price, country)
        aircraft = aircraft_for(airline)
        tickets = TicketRepository(db)
        for _ in range(quantity):
            tickets.create(
                batch_id=batch.id,
                flight_number=make_flight_number(airline_row.code if airline_row else None),
                selling_price=selling_price,
                aircraft=aircraft,
                terminal=f"Terminal {random.randint(1, 3)}",
                arrival_time=DEFAULT_ARRIVAL_TIME,
                duration=DEFAULT_DURATION,
            )

        log_activity(db, user.id, "create_ticket_batch", "ticket_batch", batch.id, {
            "airline": airline,
            "country": country,
            "quantity": quantity,
            "buying_price": buying_price,
        }, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(batch)
    log.info("batch %s created: %s x%d %s @%d", batch.id, airline, quantity, country, buying_price)
    return batch, quantity


def update_batch(db: Session, user: User, batch_id: str, data: dict, request: Request | None = None) -> TicketBatch:
    """Only purchase metadata is editable; prices and quantity are fixed once tickets exist."""
    repo = TicketBatchRepository(db)
    batch = repo.get(batch_id)
    if not batch:
        raise NotFoundError("Ticket batch not found")
    changed = {}
    for key, attr in (("agentName", "agent_name"), ("agentContact", "agent_contact"),
                      ("agentAddress", "agent_address"), ("remarks", "remarks"), ("documentUrl", "document_url")):
        if data.get(key) is not None:
            setattr(batch, attr, data[key])
            changed[attr] = data[key]
    log_activity(db, user.id, "update_ticket_batch", "ticket_batch", batch.id, changed, request)
    db.commit()
    db.refresh(batch)
    return batch


def delete_batch(db: Session, user: User, batch_id: str, request: Request | None = None) -> None:
    repo = TicketBatchRepository(db)
    batch = repo.get(batch_id)
    if not batch:
        raise NotFoundError("Ticket batch not found")
    counts = repo.ticket_status_counts(batch_id)
    in_use = sum(c for s, c in counts.items() if s != "available")
    if in_use:
        raise ValidationError(f"Cannot delete batch: {in_use} ticket(s) are booked, locked or sold")
    if repo.booking_count(batch_id):
        raise ValidationError("Cannot delete batch: its tickets have booking history")
    details = {"airline": batch.airline_name, "country": batch.country_code, "quantity": batch.quantity}
    repo.delete(batch)
    log_activity(db, user.id, "delete_ticket_batch", "ticket_batch", batch_id, details, request)
    db.commit()
    log.info("batch %s deleted", batch_id)
