import pytest

from ticketpro.core.errors import NotFoundError, ValidationError
from ticketpro.models.umrah_group_booking import UmrahGroupBooking
from ticketpro.services import umrah_service as svc


def _with_transport(**overrides):
    data = {
        "passenger_name": "Karim Ahmed",
        "pnr": "ABC123",
        "passport_number": "EA1234567",
        "flight_airline_name": "Saudi Airlines",
        "departure_date": "2026-11-10",
        "return_date": "2026-11-24",
        "approved_by": "Office",
        "reference_agency": "Noor Travels",
        "emergency_flight_contact": "01711111111",
        "passenger_mobile": "01722222222",
        "group_ticket_id": None,
    }
    data.update(overrides)
    return data


def _without_transport(**overrides):
    data = {
        "flight_departure_date": "2026-11-10",
        "return_date": "2026-11-24",
        "passenger_name": "Salma Begum",
        "passport_number": "EB7654321",
        "entry_recorded_by": "Front desk",
        "total_amount": 150000,
        "amount_paid": 50000,
        "last_payment_date": None,
        "remarks": None,
        "group_ticket_id": None,
    }
    data.update(overrides)
    return data


def _group(**overrides):
    data = {
        "group_name": "November batch",
        "package_type": "with-transport",
        "departure_date": "2026-11-10",
        "return_date": "2026-11-24",
        "ticket_count": 2,
        "total_cost": 200001,
        "agent_name": "Hajj Wholesale",
    }
    data.update(overrides)
    return data


def test_remaining_amount_tracks_payments(db, users):
    record, assignment = svc.create_without_transport(db, users["admin"], _without_transport())
    assert assignment is None
    assert record.remaining_amount == 100000

    record = svc.record_payment(db, users["admin"], record.id, 25000, "2026-10-20")
    assert record.amount_paid == 75000
    assert record.remaining_amount == 75000
    assert record.last_payment_date == "2026-10-20"

    record = svc.update_without_transport(db, users["admin"], record.id, {"total_amount": 160000})
    assert record.remaining_amount == 85000


def test_payment_cannot_exceed_balance(db, users):
    record, _ = svc.create_without_transport(db, users["admin"], _without_transport())
    with pytest.raises(ValidationError):
        svc.record_payment(db, users["admin"], record.id, 100001)
    with pytest.raises(ValidationError):
        svc.record_payment(db, users["admin"], record.id, 0)
    db.refresh(record)
    assert record.amount_paid == 50000


def test_payment_defaults_to_today(db, users):
    record, _ = svc.create_without_transport(db, users["admin"], _without_transport())
    record = svc.record_payment(db, users["admin"], record.id, 1000)
    assert record.last_payment_date is not None
    assert len(record.last_payment_date) == 10


def test_paid_more_than_total_rejected(db, users):
    with pytest.raises(ValidationError):
        svc.create_without_transport(db, users["admin"], _without_transport(amount_paid=150001))


def test_return_must_follow_departure(db, users):
    with pytest.raises(ValidationError):
        svc.create_with_transport(db, users["admin"], _with_transport(return_date="2026-11-10"))


def test_payment_summary(db, users):
    svc.create_without_transport(db, users["admin"], _without_transport())
    svc.create_without_transport(db, users["admin"], _without_transport(amount_paid=150000, passenger_name="Paid Up"))
    summary = svc.payment_summary(db)
    assert summary == {
        "totalPackages": 2,
        "totalAmount": 300000,
        "totalPaid": 200000,
        "totalRemaining": 100000,
        "pendingPackages": 1,
    }
    assert svc.umrah_stats(db)["total_packages"] == 2


def test_group_average_cost_rounds_half_up(db, users):
    group = svc.create_group_ticket(db, users["admin"], _group())
    assert group.average_cost_per_ticket == 100001  # 100000.5
    assert group.remaining_tickets == 2


def test_passengers_auto_assigned_oldest_group_first(db, users):
    first = svc.create_group_ticket(db, users["admin"], _group(ticket_count=1))
    second = svc.create_group_ticket(db, users["admin"], _group(group_name="Overflow", ticket_count=1))

    _, a1 = svc.create_with_transport(db, users["staff"], _with_transport())
    _, a2 = svc.create_with_transport(db, users["staff"], _with_transport(passenger_name="Second"))
    _, a3 = svc.create_with_transport(db, users["staff"], _with_transport(passenger_name="Third"))

    assert a1.group_ticket_id == first.id
    assert a2.group_ticket_id == second.id
    assert a3 is None
    db.refresh(first)
    db.refresh(second)
    assert first.remaining_tickets == 0
    assert second.remaining_tickets == 0


def test_dates_must_match_for_auto_assignment(db, users):
    svc.create_group_ticket(db, users["admin"], _group())
    _, assignment = svc.create_with_transport(db, users["staff"], _with_transport(return_date="2026-11-25"))
    assert assignment is None


def test_deleting_passenger_frees_the_seat(db, users):
    group = svc.create_group_ticket(db, users["admin"], _group())
    record, _ = svc.create_with_transport(db, users["staff"], _with_transport())
    db.refresh(group)
    assert group.remaining_tickets == 1

    svc.delete_record(db, users["admin"], "with-transport", record.id)
    db.refresh(group)
    assert group.remaining_tickets == 2
    assert db.query(UmrahGroupBooking).count() == 0


def test_manual_assignment_checks(db, users):
    group = svc.create_group_ticket(db, users["admin"], _group(ticket_count=1))
    record, _ = svc.create_with_transport(db, users["staff"], _with_transport(departure_date="2026-12-01",
                                                                             return_date="2026-12-15"))
    assignment = svc.assign_passenger(db, users["admin"], group.id, record.id, "with-transport")
    db.refresh(group)
    assert group.remaining_tickets == 0

    with pytest.raises(ValidationError):
        svc.assign_passenger(db, users["admin"], group.id, record.id, "with-transport")

    svc.remove_assignment(db, users["admin"], assignment.id)
    db.refresh(group)
    assert group.remaining_tickets == 1

    with pytest.raises(NotFoundError):
        svc.assign_passenger(db, users["admin"], group.id, "missing", "with-transport")


def test_group_with_passengers_needs_force_to_delete(db, users):
    group = svc.create_group_ticket(db, users["admin"], _group())
    svc.create_with_transport(db, users["staff"], _with_transport())

    with pytest.raises(ValidationError) as exc:
        svc.delete_group_ticket(db, users["admin"], group.id)
    assert exc.value.errors[0]["assignedCount"] == 1
    assert exc.value.errors[0]["passengers"][0]["pnr"] == "ABC123"

    svc.delete_group_ticket(db, users["admin"], group.id, force=True)
    assert db.query(UmrahGroupBooking).count() == 0


def test_ticket_count_cannot_drop_below_assigned(db, users):
    group = svc.create_group_ticket(db, users["admin"], _group())
    svc.create_with_transport(db, users["staff"], _with_transport())
    svc.create_with_transport(db, users["staff"], _with_transport(passenger_name="Second"))
    with pytest.raises(ValidationError):
        svc.update_group_ticket(db, users["admin"], group.id, {"ticket_count": 1})

    group = svc.update_group_ticket(db, users["admin"], group.id, {"ticket_count": 3, "total_cost": 300000})
    assert group.remaining_tickets == 1
    assert group.average_cost_per_ticket == 100000


def test_groups_by_dates_and_availability(db, users):
    svc.create_group_ticket(db, users["admin"], _group())
    svc.create_group_ticket(db, users["admin"], _group(group_name="Second", ticket_count=3, total_cost=300000))
    buckets = svc.groups_by_dates(db, "with-transport")
    assert len(buckets) == 1
    assert buckets[0]["group_count"] == 2
    assert buckets[0]["total_tickets"] == 5

    assert len(svc.available_groups(db, "with-transport", "2026-11-10", "2026-11-24")) == 2
    with pytest.raises(ValidationError):
        svc.available_groups(db, "without-transport", "2026-11-10", "2026-11-24")
