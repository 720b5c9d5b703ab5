from datetime import timedelta

import pytest

from ticketpro.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ticketpro.core.timeutil import as_utc, utcnow
from ticketpro.models.ticket import Ticket
from ticketpro.repositories.bookings import BookingRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services.batch_service import aircraft_for, create_batch, delete_batch, make_flight_number
from ticketpro.services.booking_service import create_booking, update_booking_status
from ticketpro.services.ticket_service import change_ticket_status
from conftest import booking_body


@pytest.fixture()
def tickets(db, users, batch_data):
    batch, _ = create_batch(db, users["admin"], batch_data)
    return TicketRepository(db).list_by_batch(batch.id)


def test_batch_expands_into_quantity_available_tickets(db, tickets):
    assert len(tickets) == 3
    assert {t.status for t in tickets} == {"available"}
    # no sales history yet: flat 30% over 15000
    assert {t.selling_price for t in tickets} == {19500}
    assert all(t.flight_number.startswith("EK ") for t in tickets)
    assert all(t.aircraft == "Boeing 777" for t in tickets)


def test_flight_number_and_aircraft_helpers():
    assert make_flight_number(None).startswith("XX ")
    assert aircraft_for("Qatar Airways") == "Boeing 787"
    assert aircraft_for("Gulf Air") == "Airbus A321"


def test_create_batch_rejects_unknown_country(db, users, batch_data):
    batch_data["country"] = "ZZZ"
    with pytest.raises(ValidationError):
        create_batch(db, users["admin"], batch_data)
    assert db.query(Ticket).count() == 0


def test_locked_until_set_only_while_locked(db, tickets):
    repo = TicketRepository(db)
    t = tickets[0]

    assert repo.update_status(t.id, "locked") is True
    db.refresh(t)
    window = as_utc(t.locked_until) - utcnow()
    assert timedelta(hours=23, minutes=59) < window <= timedelta(hours=24)

    for status in ("booked", "available", "sold"):
        repo.update_status(t.id, status)
        db.refresh(t)
        assert t.status == status
        assert t.locked_until is None


def test_sold_stamps_seller(db, users, tickets):
    repo = TicketRepository(db)
    repo.update_status(tickets[0].id, "sold", sold_by=users["manager"].id)
    db.refresh(tickets[0])
    assert tickets[0].sold_by == users["manager"].id
    assert tickets[0].sold_at is not None


def test_invalid_status_rejected(db, tickets):
    with pytest.raises(ValidationError):
        TicketRepository(db).update_status(tickets[0].id, "reserved")


def test_missing_ticket_returns_false(db):
    assert TicketRepository(db).update_status("nope", "sold") is False


def test_staff_cannot_mark_sold(db, users, tickets):
    with pytest.raises(AuthorizationError):
        change_ticket_status(db, users["staff"], tickets[0].id, "sold")
    db.refresh(tickets[0])
    assert tickets[0].status == "available"


def test_releasing_a_lock_needs_override(db, users, tickets):
    t = tickets[0]
    TicketRepository(db).update_status(t.id, "locked")
    db.commit()
    with pytest.raises(AuthorizationError):
        change_ticket_status(db, users["manager"], t.id, "available")
    assert change_ticket_status(db, users["admin"], t.id, "available").status == "available"


def test_release_cancels_the_live_booking(db, users, tickets):
    t = tickets[0]
    booking = create_booking(db, users["staff"], booking_body(t.id, 19500, "partial", partialAmount=5000))
    db.refresh(t)
    assert t.status == "locked"

    change_ticket_status(db, users["admin"], t.id, "available")
    db.refresh(booking)
    assert booking.status == "cancelled"
    assert BookingRepository(db).active_for_ticket(t.id) is None


def test_selling_confirms_the_pending_booking(db, users, tickets):
    t = tickets[0]
    booking = create_booking(db, users["staff"], booking_body(t.id, 19500, "partial", partialAmount=5000))
    change_ticket_status(db, users["manager"], t.id, "sold")
    db.refresh(booking)
    db.refresh(t)
    assert booking.status == "confirmed"
    assert booking.confirmed_at is not None
    assert t.sold_by == users["manager"].id


def test_staff_cannot_release_a_held_ticket(db, users, tickets):
    t = tickets[0]
    booking = create_booking(db, users["manager"], booking_body(t.id, 19500))
    with pytest.raises(AuthorizationError):
        change_ticket_status(db, users["staff"], t.id, "available")
    db.refresh(booking)
    db.refresh(t)
    assert booking.status == "pending"
    assert t.status == "sold"


def test_confirmed_sale_stays_sold(db, users, tickets):
    t = tickets[0]
    booking = create_booking(db, users["manager"], booking_body(t.id, 19500))
    update_booking_status(db, users["manager"], booking.id, "confirmed")

    for actor, status in ((users["staff"], "available"), (users["admin"], "available"), (users["staff"], "locked")):
        with pytest.raises(ConflictError):
            change_ticket_status(db, actor, t.id, status)
    db.refresh(booking)
    db.refresh(t)
    assert booking.status == "confirmed"
    assert t.status == "sold"


def test_confirming_keeps_the_original_sale_stamps(db, users, tickets):
    t = tickets[0]
    booking = create_booking(db, users["staff"], booking_body(t.id, 19500))
    db.refresh(t)
    sold_by, sold_at = t.sold_by, t.sold_at
    assert sold_by == users["staff"].id

    update_booking_status(db, users["manager"], booking.id, "confirmed")
    db.refresh(t)
    assert t.sold_by == sold_by
    assert t.sold_at == sold_at


def test_status_change_rolls_back_on_failure(db, users, tickets, monkeypatch):
    from ticketpro.services import ticket_service

    def _boom(*args, **kwargs):
        raise RuntimeError("activity log unavailable")

    monkeypatch.setattr(ticket_service, "log_activity", _boom)
    t = tickets[0]
    with pytest.raises(RuntimeError):
        change_ticket_status(db, users["manager"], t.id, "sold")
    db.refresh(t)
    assert t.status == "available"
    assert t.sold_by is None


def test_country_stats_include_countries_without_stock(db, tickets):
    stats = {row["code"]: row for row in TicketRepository(db).country_stats()}
    assert len(stats) == 8
    assert stats["KSA"]["totalTickets"] == 3
    assert stats["KSA"]["availableTickets"] == 3
    assert stats["UAE"] == {
        "code": "UAE", "name": "United Arab Emirates", "flag": "🇦🇪",
        "totalTickets": 0, "availableTickets": 0, "lockedTickets": 0, "soldTickets": 0,
    }


def test_change_status_unknown_ticket(db, users):
    with pytest.raises(NotFoundError):
        change_ticket_status(db, users["admin"], "missing", "sold")


def test_delete_batch_refuses_when_tickets_in_use(db, users, tickets):
    TicketRepository(db).update_status(tickets[0].id, "locked")
    db.commit()
    with pytest.raises(ValidationError):
        delete_batch(db, users["admin"], tickets[0].batch_id)


def test_delete_untouched_batch_removes_tickets(db, users, tickets):
    batch_id = tickets[0].batch_id
    delete_batch(db, users["admin"], batch_id)
    assert db.query(Ticket).filter(Ticket.batch_id == batch_id).count() == 0
