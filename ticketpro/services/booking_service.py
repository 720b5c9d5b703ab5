from fastapi import Request
from sqlalchemy.orm import Session

from ticketpro.core.app_logger import get_logger
from ticketpro.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ticketpro.core.permissions import Permission, has_permission
from ticketpro.models.booking import Booking
from ticketpro.models.user import User
from ticketpro.repositories.bookings import BookingRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services.audit_service import log_activity
from ticketpro.services.financial_service import validate_booking

log = get_logger("bookings")

# ticket status each booking status leaves behind
TICKET_STATUS_FOR = {
    "confirmed": "sold",
    "cancelled": "available",
    "expired": "available",
}


def can_see_booking(user: User, booking: Booking) -> bool:
    return booking.created_by == user.id or has_permission(user.role, Permission.VIEW_ALL_BOOKINGS)


def create_booking(db: Session, user: User, data: dict, request: Request | None = None) -> Booking:
    """Book an available ticket.

    The booking row and the ticket transition (locked for a partial payment,
    sold for a full one) commit together.
    """
    payment_type = data["paymentType"]
    if payment_type == "partial":
        if not has_permission(user.role, Permission.PARTIAL_PAYMENTS):
            raise AuthorizationError("Insufficient permissions for partial payments")
        if not data.get("partialAmount"):
            raise ValidationError("Partial amount is required for partial payments",
                                  errors=[{"field": "partialAmount", "message": "Required when paymentType is partial"}])

    ticket_id = data["ticketId"]
    tickets = TicketRepository(db)
    ticket = tickets.get_for_update(ticket_id)
    if not ticket:
        raise NotFoundError("Ticket not found")
    if ticket.status != "available":
        raise ConflictError(f"Ticket is {ticket.status}, not available for booking")

    check = validate_booking(db, ticket_id, data["sellingPrice"])
    if not check["valid"]:
        raise ValidationError(check["error"], errors=[{"field": "sellingPrice", "message": check["error"]}])

    try:
        booking = BookingRepository(db).create(
            ticket_id=ticket_id,
            agent=data["agentInfo"],
            passenger=data["passengerInfo"],
            selling_price=data["sellingPrice"],
            payment_type=payment_type,
            partial_amount=data.get("partialAmount"),
            payment_method=data.get("paymentMethod") or "cash",
            payment_details=data.get("paymentDetails"),
            comments=data.get("comments"),
            created_by=user.id,
        )
        if payment_type == "partial":
            tickets.update_status(ticket_id, "locked")
        else:
            tickets.update_status(ticket_id, "sold", sold_by=user.id)

        log_activity(db, user.id, "create_booking", "booking", booking.id, {
            "ticket_id": ticket_id,
            "passenger_name": booking.passenger_name,
            "selling_price": booking.selling_price,
            "payment_type": payment_type,
        }, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(booking)
    log.info("booking %s created for ticket %s (%s)", booking.id, ticket_id, payment_type)
    return booking


def get_booking(db: Session, user: User, booking_id: str) -> Booking:
    booking = BookingRepository(db).get(booking_id)
    if not booking or not can_see_booking(user, booking):
        raise NotFoundError("Booking not found")
    return booking


def apply_booking_status(db: Session, booking: Booking, new_status: str, actor_id: str | None = None) -> bool:
    """Move a pending booking and its ticket together, without committing.

    Returns False when the booking already has ``new_status``.
    """
    if booking.status == new_status:
        return False
    if booking.status != "pending":
        raise ValidationError(f"Booking is already {booking.status}")

    BookingRepository(db).update_status(booking.id, new_status)
    ticket_status = TICKET_STATUS_FOR.get(new_status)
    if ticket_status:
        TicketRepository(db).update_status(
            booking.ticket_id, ticket_status, sold_by=actor_id if ticket_status == "sold" else None,
        )
    return True


def update_booking_status(db: Session, user: User, booking_id: str, new_status: str,
                          request: Request | None = None) -> Booking:
    booking = get_booking(db, user, booking_id)
    if new_status == "confirmed" and not has_permission(user.role, Permission.CONFIRM_SALES):
        raise AuthorizationError("Insufficient permissions to confirm sales")

    old_status = booking.status
    try:
        if apply_booking_status(db, booking, new_status, actor_id=user.id):
            log_activity(db, user.id, "update_booking_status", "booking", booking.id,
                         {"old_status": old_status, "new_status": new_status}, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(booking)
    return booking


def cancel_booking(db: Session, user: User, booking_id: str, request: Request | None = None) -> Booking:
    booking = get_booking(db, user, booking_id)
    if booking.created_by != user.id and not has_permission(user.role, Permission.DELETE_BOOKINGS):
        raise AuthorizationError("Insufficient permissions to cancel this booking")
    return update_booking_status(db, user, booking_id, "cancelled", request)
