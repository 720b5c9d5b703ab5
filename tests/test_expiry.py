from datetime import timedelta

from ticketpro.core.timeutil import utcnow
from ticketpro.models.umrah_group_ticket import UmrahGroupTicket
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services import umrah_service
from ticketpro.services.batch_service import create_batch
from ticketpro.services.booking_service import create_booking
from ticketpro.services.expiry_service import expire_holds, reconcile_group_tickets
from conftest import booking_body


def _tickets(db, users, batch_data):
    batch, _ = create_batch(db, users["admin"], batch_data)
    return TicketRepository(db).list_by_batch(batch.id)


def test_nothing_to_do_before_the_hold_lapses(db, users, batch_data):
    ticket = _tickets(db, users, batch_data)[0]
    create_booking(db, users["staff"], booking_body(ticket.id, 19500, "partial", partialAmount=5000))
    assert expire_holds(db) == {"expiredBookings": 0, "releasedTickets": 0}


def test_overdue_partial_booking_expires_and_frees_ticket(db, users, batch_data):
    tickets = _tickets(db, users, batch_data)
    partial = create_booking(db, users["staff"], booking_body(tickets[0].id, 19500, "partial", partialAmount=5000))
    full = create_booking(db, users["staff"], booking_body(tickets[1].id, 19500))

    result = expire_holds(db, now=utcnow() + timedelta(hours=25))
    assert result == {"expiredBookings": 1, "releasedTickets": 0}

    db.refresh(partial)
    db.refresh(full)
    db.refresh(tickets[0])
    db.refresh(tickets[1])
    assert partial.status == "expired"
    assert tickets[0].status == "available"
    assert tickets[0].locked_until is None
    assert full.status == "pending"
    assert tickets[1].status == "sold"


def test_lapsed_manual_lock_is_released(db, users, batch_data):
    ticket = _tickets(db, users, batch_data)[0]
    TicketRepository(db).update_status(ticket.id, "locked")
    db.commit()

    assert expire_holds(db, now=utcnow() + timedelta(hours=25)) == {"expiredBookings": 0, "releasedTickets": 1}
    db.refresh(ticket)
    assert ticket.status == "available"


def test_reconcile_repairs_drifted_counter(db, users):
    group = umrah_service.create_group_ticket(db, users["admin"], {
        "group_name": "December",
        "package_type": "with-transport",
        "departure_date": "2026-12-01",
        "return_date": "2026-12-15",
        "ticket_count": 4,
        "total_cost": 400000,
        "agent_name": "Hajj Wholesale",
    })
    db.query(UmrahGroupTicket).filter(UmrahGroupTicket.id == group.id).update({"remaining_tickets": 1})
    db.commit()

    assert reconcile_group_tickets(db) == 1
    db.refresh(group)
    assert group.remaining_tickets == 4
    assert reconcile_group_tickets(db) == 0
