from fastapi import Request
from sqlalchemy.orm import Session

from ticketpro.core.app_logger import get_logger
from ticketpro.core.errors import AuthorizationError, ConflictError, NotFoundError
from ticketpro.core.permissions import Permission, has_permission
from ticketpro.models.user import User
from ticketpro.models.ticket import Ticket
from ticketpro.repositories.bookings import BookingRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services.audit_service import log_activity
from ticketpro.services.booking_service import apply_booking_status

log = get_logger("tickets")


def change_ticket_status(db: Session, user: User, ticket_id: str, new_status: str,
                         request: Request | None = None) -> Ticket:
    """Manual status change from the inventory screen.

    Selling needs confirm_sales. Releasing a lock, or releasing a ticket that
    a pending booking holds, needs override_locks. A pending booking follows
    the ticket: selling confirms it and releasing cancels it. A ticket whose
    sale is confirmed can only stay sold.
    """
    tickets = TicketRepository(db)
    ticket = tickets.get(ticket_id)
    if not ticket:
        raise NotFoundError("Ticket not found")

    if new_status == "sold" and not has_permission(user.role, Permission.CONFIRM_SALES):
        raise AuthorizationError("Insufficient permissions to confirm sales")

    active = BookingRepository(db).active_for_ticket(ticket_id)
    if active is not None and active.status == "confirmed" and new_status != "sold":
        raise ConflictError("Ticket has a confirmed sale and cannot be released")
    if new_status == "available":
        if (ticket.status == "locked" or active is not None) and \
                not has_permission(user.role, Permission.OVERRIDE_LOCKS):
            raise AuthorizationError("Insufficient permissions to override locks")

    old_status = ticket.status
    try:
        tickets.update_status(ticket_id, new_status, sold_by=user.id if new_status == "sold" else None)
        if active is not None and active.status == "pending":
            if new_status == "sold":
                apply_booking_status(db, active, "confirmed", actor_id=user.id)
            elif new_status == "available":
                apply_booking_status(db, active, "cancelled")
        log_activity(db, user.id, "update_ticket_status", "ticket", ticket_id,
                     {"old_status": old_status, "new_status": new_status}, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(ticket)
    log.info("ticket %s %s -> %s by %s", ticket_id, old_status, new_status, user.username)
    return ticket
