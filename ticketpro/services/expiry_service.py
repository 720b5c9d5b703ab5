from datetime import datetime
from sqlalchemy.orm import Session

from ticketpro.core.app_logger import get_logger
from ticketpro.core.timeutil import utcnow
from ticketpro.models.umrah_group_ticket import UmrahGroupTicket
from ticketpro.repositories.bookings import BookingRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.repositories.umrah import UmrahGroupTicketRepository
from ticketpro.services.booking_service import apply_booking_status

log = get_logger("expiry")


def expire_holds(db: Session, now: datetime | None = None) -> dict:
    """Expire overdue partial-payment bookings and release lapsed ticket locks."""
    now = now or utcnow()
    expired = 0
    for booking in BookingRepository(db).overdue_partials(now):
        if apply_booking_status(db, booking, "expired"):
            expired += 1

    tickets = TicketRepository(db)
    released = 0
    for ticket in tickets.lapsed_locks(now):
        tickets.update_status(ticket.id, "available")
        released += 1

    db.commit()
    if expired or released:
        log.info("expired %d booking(s), released %d lapsed lock(s)", expired, released)
    return {"expiredBookings": expired, "releasedTickets": released}


def reconcile_group_tickets(db: Session) -> int:
    """Rewrite every group's remaining_tickets from its assignment rows. Returns how many drifted."""
    repo = UmrahGroupTicketRepository(db)
    fixed = 0
    for group in db.query(UmrahGroupTicket).all():
        before = group.remaining_tickets
        if repo.recompute_remaining(group) != before:
            fixed += 1
            log.warning("group ticket %s remaining %d -> %d", group.id, before, group.remaining_tickets)
    db.commit()
    return fixed
