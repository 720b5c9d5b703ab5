"""Umrah package records and group-ticket inventory.

A passenger record and its seat assignment commit together, and every write
that adds or removes an assignment rewrites the group's remaining_tickets in
the same transaction.
"""
import re
from fastapi import Request
from sqlalchemy.orm import Session

from ticketpro.core.app_logger import get_logger
from ticketpro.core.errors import NotFoundError, ValidationError
from ticketpro.core.timeutil import utcnow
from ticketpro.models.user import User
from ticketpro.models.umrah_group_booking import UmrahGroupBooking
from ticketpro.models.umrah_group_ticket import UmrahGroupTicket
from ticketpro.models.umrah_without_transport import UmrahWithoutTransport
from ticketpro.repositories.umrah import (
    UmrahGroupBookingRepository,
    UmrahGroupTicketRepository,
    UmrahWithTransportRepository,
    UmrahWithoutTransportRepository,
)
from ticketpro.services.audit_service import log_activity
from ticketpro.services.financial_service import round_half_up

log = get_logger("umrah")

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
WITH_TRANSPORT = "with-transport"
WITHOUT_TRANSPORT = "without-transport"


def check_dates(departure: str, return_date: str) -> None:
    for field, value in (("departure_date", departure), ("return_date", return_date)):
        if not DATE_RE.match(value or ""):
            raise ValidationError("Invalid date format", errors=[{"field": field, "message": "Expected YYYY-MM-DD"}])
    if return_date <= departure:
        raise ValidationError("Return date must be after departure date")


def _repos(passenger_type: str):
    return UmrahWithTransportRepository if passenger_type == WITH_TRANSPORT else UmrahWithoutTransportRepository


def _assign(db: Session, user: User, passenger_id: str, passenger_type: str, departure: str, return_date: str,
            group_ticket_id: str | None) -> UmrahGroupBooking | None:
    groups = UmrahGroupTicketRepository(db)
    if group_ticket_id:
        group = groups.get(group_ticket_id)
        if not group:
            raise ValidationError("Selected group ticket not found")
        if group.remaining_tickets <= 0:
            raise ValidationError("Selected group ticket has no remaining tickets")
        if group.package_type != passenger_type:
            raise ValidationError("Passenger type must match group ticket package type")
    else:
        available = groups.find_available(passenger_type, departure, return_date)
        if not available:
            return None
        group = available[0]

    assignment = UmrahGroupBookingRepository(db).create(group.id, passenger_id, passenger_type, user.id)
    groups.recompute_remaining(group)
    return assignment


def _unassign(db: Session, passenger_id: str, passenger_type: str) -> None:
    bookings = UmrahGroupBookingRepository(db)
    existing = bookings.find_for_passenger(passenger_id, passenger_type)
    if existing is None:
        return
    group_repo = UmrahGroupTicketRepository(db)
    group = group_repo.get(existing.group_ticket_id)
    bookings.delete(existing)
    if group is not None:
        group_repo.recompute_remaining(group)


# with transport

def create_with_transport(db: Session, user: User, data: dict, request: Request | None = None):
    check_dates(data["departure_date"], data["return_date"])
    group_ticket_id = data.pop("group_ticket_id", None)
    try:
        record = UmrahWithTransportRepository(db).create(created_by=user.id, **data)
        assignment = _assign(db, user, record.id, WITH_TRANSPORT, record.departure_date, record.return_date,
                             group_ticket_id)
        log_activity(db, user.id, "CREATE", "umrah_with_transport", record.id, {
            "passenger_name": record.passenger_name,
            "pnr": record.pnr,
            "auto_assigned_to_group": assignment.group_ticket_id if assignment else None,
        }, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record, assignment


def update_with_transport(db: Session, user: User, record_id: str, data: dict, request: Request | None = None):
    repo = UmrahWithTransportRepository(db)
    record = repo.get(record_id)
    if not record:
        raise NotFoundError("Package not found")
    data.pop("group_ticket_id", None)
    if "departure_date" in data or "return_date" in data:
        check_dates(data.get("departure_date", record.departure_date), data.get("return_date", record.return_date))
    repo.update(record, data)
    log_activity(db, user.id, "UPDATE", "umrah_with_transport", record.id, data, request)
    db.commit()
    db.refresh(record)
    return record


# without transport

def create_without_transport(db: Session, user: User, data: dict, request: Request | None = None):
    check_dates(data["flight_departure_date"], data["return_date"])
    if data["amount_paid"] > data["total_amount"]:
        raise ValidationError("Amount paid cannot exceed total amount")
    group_ticket_id = data.pop("group_ticket_id", None)
    try:
        record = UmrahWithoutTransportRepository(db).create(
            created_by=user.id,
            remaining_amount=data["total_amount"] - data["amount_paid"],
            **data,
        )
        assignment = _assign(db, user, record.id, WITHOUT_TRANSPORT, record.flight_departure_date,
                             record.return_date, group_ticket_id)
        log_activity(db, user.id, "CREATE", "umrah_without_transport", record.id, {
            "passenger_name": record.passenger_name,
            "total_amount": record.total_amount,
            "amount_paid": record.amount_paid,
            "auto_assigned_to_group": assignment.group_ticket_id if assignment else None,
        }, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record, assignment


def update_without_transport(db: Session, user: User, record_id: str, data: dict, request: Request | None = None):
    repo = UmrahWithoutTransportRepository(db)
    record = repo.get(record_id)
    if not record:
        raise NotFoundError("Package not found")
    data.pop("group_ticket_id", None)
    if "flight_departure_date" in data or "return_date" in data:
        check_dates(data.get("flight_departure_date", record.flight_departure_date),
                    data.get("return_date", record.return_date))
    total = data.get("total_amount", record.total_amount)
    paid = data.get("amount_paid", record.amount_paid)
    if paid > total:
        raise ValidationError("Amount paid cannot exceed total amount")
    data["remaining_amount"] = total - paid
    repo.update(record, data)
    log_activity(db, user.id, "UPDATE", "umrah_without_transport", record.id, data, request)
    db.commit()
    db.refresh(record)
    return record


def record_payment(db: Session, user: User, record_id: str, amount: int, payment_date: str | None = None,
                   request: Request | None = None) -> UmrahWithoutTransport:
    repo = UmrahWithoutTransportRepository(db)
    record = repo.get(record_id)
    if not record:
        raise NotFoundError("Package not found")
    if amount <= 0:
        raise ValidationError("Payment amount must be positive")
    if payment_date is not None and not DATE_RE.match(payment_date):
        raise ValidationError("Invalid date format", errors=[{"field": "payment_date", "message": "Expected YYYY-MM-DD"}])
    new_paid = record.amount_paid + amount
    if new_paid > record.total_amount:
        raise ValidationError("Payment amount exceeds remaining balance")

    repo.update(record, {
        "amount_paid": new_paid,
        "remaining_amount": record.total_amount - new_paid,
        "last_payment_date": payment_date or utcnow().date().isoformat(),
    })
    log_activity(db, user.id, "PAYMENT", "umrah_without_transport", record.id, {
        "payment_amount": amount,
        "payment_date": payment_date,
        "new_amount_paid": new_paid,
        "remaining_amount": record.remaining_amount,
    }, request)
    db.commit()
    db.refresh(record)
    return record


def delete_record(db: Session, user: User, passenger_type: str, record_id: str, request: Request | None = None) -> None:
    repo = _repos(passenger_type)(db)
    record = repo.get(record_id)
    if not record:
        raise NotFoundError("Package not found")
    details = {"passenger_name": record.passenger_name}
    _unassign(db, record.id, passenger_type)
    repo.delete(record)
    log_activity(db, user.id, "DELETE", record.__tablename__, record_id, details, request)
    db.commit()


def payment_summary(db: Session) -> dict:
    return UmrahWithoutTransportRepository(db).payment_summary()


def umrah_stats(db: Session) -> dict:
    with_count = UmrahWithTransportRepository(db).count()
    without_count = UmrahWithoutTransportRepository(db).count()
    return {
        "total_with_transport": with_count,
        "total_without_transport": without_count,
        "total_packages": with_count + without_count,
        "payment_summary": payment_summary(db),
    }


# group tickets

def create_group_ticket(db: Session, user: User, data: dict, request: Request | None = None) -> UmrahGroupTicket:
    check_dates(data["departure_date"], data["return_date"])
    count = data["ticket_count"]
    group = UmrahGroupTicketRepository(db).create(
        created_by=user.id,
        average_cost_per_ticket=round_half_up(data["total_cost"] / count),
        remaining_tickets=count,
        **data,
    )
    log_activity(db, user.id, "CREATE", "umrah_group_ticket", group.id, {
        "group_name": group.group_name,
        "package_type": group.package_type,
        "ticket_count": group.ticket_count,
        "total_cost": group.total_cost,
    }, request)
    db.commit()
    db.refresh(group)
    log.info("group ticket %s created: %d seats %s..%s", group.id, count, group.departure_date, group.return_date)
    return group


def update_group_ticket(db: Session, user: User, group_id: str, data: dict, request: Request | None = None) -> UmrahGroupTicket:
    repo = UmrahGroupTicketRepository(db)
    group = repo.get(group_id)
    if not group:
        raise NotFoundError("Group ticket not found")
    if "departure_date" in data or "return_date" in data:
        check_dates(data.get("departure_date", group.departure_date), data.get("return_date", group.return_date))
    count = data.get("ticket_count", group.ticket_count)
    assigned = len(UmrahGroupBookingRepository(db).list_for_group(group_id))
    if count < assigned:
        raise ValidationError(f"Ticket count cannot be below the {assigned} passenger(s) already assigned")
    if "ticket_count" in data or "total_cost" in data:
        data["average_cost_per_ticket"] = round_half_up(data.get("total_cost", group.total_cost) / count)
    repo.update(group, data)
    repo.recompute_remaining(group)
    log_activity(db, user.id, "UPDATE", "umrah_group_ticket", group.id, data, request)
    db.commit()
    db.refresh(group)
    return group


def group_ticket_detail(db: Session, group_id: str) -> dict:
    group = UmrahGroupTicketRepository(db).get(group_id)
    if not group:
        raise NotFoundError("Group ticket not found")
    assignments = UmrahGroupBookingRepository(db).list_for_group(group_id)
    return {
        "groupTicket": group,
        "assignments": assignments,
        "assignedCount": len(assignments),
        "remainingTickets": group.ticket_count - len(assignments),
    }


def _passenger_summary(db: Session, assignment: UmrahGroupBooking) -> dict:
    record = _repos(assignment.passenger_type)(db).get(assignment.passenger_id)
    out = {"type": assignment.passenger_type, "name": record.passenger_name if record else "Unknown"}
    if assignment.passenger_type == WITH_TRANSPORT:
        out["pnr"] = record.pnr if record else "N/A"
    else:
        out["passport"] = record.passport_number if record else "N/A"
    return out


def delete_group_ticket(db: Session, user: User, group_id: str, force: bool = False,
                        request: Request | None = None) -> None:
    repo = UmrahGroupTicketRepository(db)
    group = repo.get(group_id)
    if not group:
        raise NotFoundError("Group ticket not found")
    bookings = UmrahGroupBookingRepository(db)
    assignments = bookings.list_for_group(group_id)
    if assignments and not force:
        raise ValidationError(
            "Cannot delete group ticket with assigned passengers",
            errors=[{
                "canForceDelete": True,
                "assignedCount": len(assignments),
                "passengers": [_passenger_summary(db, a) for a in assignments],
            }],
        )
    for a in assignments:
        bookings.delete(a)
    repo.delete(group)
    log_activity(db, user.id, "DELETE", "umrah_group_ticket", group_id,
                 {"deleted": True, "removed_assignments": len(assignments)}, request)
    db.commit()


def groups_by_dates(db: Session, package_type: str) -> list[dict]:
    buckets: dict[tuple[str, str], dict] = {}
    for g in UmrahGroupTicketRepository(db).list(package_type=package_type):
        key = (g.departure_date, g.return_date)
        b = buckets.setdefault(key, {
            "departure_date": g.departure_date,
            "return_date": g.return_date,
            "group_count": 0,
            "total_tickets": 0,
            "total_cost": 0,
            "groups": [],
        })
        b["group_count"] += 1
        b["total_tickets"] += g.ticket_count
        b["total_cost"] += g.total_cost
        b["groups"].append(g)
    return list(buckets.values())


def available_groups(db: Session, package_type: str, departure: str, return_date: str) -> list[UmrahGroupTicket]:
    if package_type != WITH_TRANSPORT:
        raise ValidationError("Group tickets are only available for with-transport packages")
    return UmrahGroupTicketRepository(db).find_available(package_type, departure, return_date)


def assign_passenger(db: Session, user: User, group_ticket_id: str, passenger_id: str, passenger_type: str,
                     request: Request | None = None) -> UmrahGroupBooking:
    groups = UmrahGroupTicketRepository(db)
    group = groups.get(group_ticket_id)
    if not group:
        raise NotFoundError("Group ticket not found")
    if not _repos(passenger_type)(db).get(passenger_id):
        raise NotFoundError("Passenger not found")
    bookings = UmrahGroupBookingRepository(db)
    if bookings.find_for_passenger(passenger_id, passenger_type):
        raise ValidationError("Passenger is already assigned to a group")
    if len(bookings.list_for_group(group_ticket_id)) >= group.ticket_count:
        raise ValidationError("No available slots in this group")
    if passenger_type != group.package_type:
        raise ValidationError("Passenger type must match group ticket package type")

    assignment = bookings.create(group_ticket_id, passenger_id, passenger_type, user.id)
    groups.recompute_remaining(group)
    log_activity(db, user.id, "CREATE", "umrah_group_booking", assignment.id, {
        "group_ticket_id": group_ticket_id,
        "passenger_id": passenger_id,
        "passenger_type": passenger_type,
    }, request)
    db.commit()
    db.refresh(assignment)
    return assignment


def remove_assignment(db: Session, user: User, assignment_id: str, request: Request | None = None) -> None:
    bookings = UmrahGroupBookingRepository(db)
    assignment = bookings.get(assignment_id)
    if not assignment:
        raise NotFoundError("Group booking not found")
    _unassign(db, assignment.passenger_id, assignment.passenger_type)
    log_activity(db, user.id, "DELETE", "umrah_group_booking", assignment_id, {"deleted": True}, request)
    db.commit()
