import pytest

from ticketpro.repositories.tickets import TicketRepository
from ticketpro.services import financial_service as fin
from ticketpro.services.batch_service import create_batch
from ticketpro.services.booking_service import create_booking, update_booking_status
from conftest import booking_body


def _sell(db, users, ticket_id, price):
    booking = create_booking(db, users["staff"], booking_body(ticket_id, price, "partial", partialAmount=1000))
    return update_booking_status(db, users["admin"], booking.id, "confirmed")


@pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4999, 2), (19500.0, 19500), (0.5, 1), (-0.5, 0)])
def test_round_half_up(value, expected):
    assert fin.round_half_up(value) == expected


def test_empty_store_has_zero_ratios(db):
    summary = fin.calculate_financial_summary(db)
    assert summary["totalRevenue"] == 0
    assert summary["profitMargin"] == 0
    assert summary["roi"] == 0
    assert summary["inventoryUtilization"] == 0
    assert summary["averageSellingPrice"] == 0


def test_unsold_inventory_keeps_margin_at_zero(db, users, batch_data):
    create_batch(db, users["admin"], batch_data)
    summary = fin.calculate_financial_summary(db)
    assert summary["totalInvestment"] == 45000
    assert summary["totalTicketsBought"] == 3
    assert summary["totalTicketsAvailable"] == 3
    assert summary["profitMargin"] == 0
    assert summary["averageBuyingPrice"] == 15000


def test_summary_after_a_confirmed_sale(db, users, batch_data):
    batch, _ = create_batch(db, users["admin"], batch_data)
    ticket = TicketRepository(db).list_by_batch(batch.id)[0]
    _sell(db, users, ticket.id, 20000)

    summary = fin.calculate_financial_summary(db)
    assert summary["totalRevenue"] == 20000
    assert summary["totalProfit"] == 5000
    assert summary["totalTicketsSold"] == 1
    assert summary["profitMargin"] == 25
    assert summary["roi"] == 11.11
    assert summary["inventoryUtilization"] == 33.33

    countries = fin.calculate_country_financials(db)
    assert countries["KSA"]["ticketsSold"] == 1
    assert countries["KSA"]["ticketsAvailable"] == 2
    assert countries["KSA"]["totalProfit"] == 5000

    assert fin.calculate_todays_sales(db) == {"amount": 20000, "count": 1}
    top = fin.get_top_performing_countries(db)
    assert top[0]["country_code"] == "KSA"
    assert top[0]["profit_per_ticket"] == 5000


def test_country_with_purchases_but_no_sales(db, users, batch_data):
    batch_data["country"] = "UAE"
    create_batch(db, users["admin"], batch_data)
    uae = fin.calculate_country_financials(db)["UAE"]
    assert uae["ticketsSold"] == 0
    assert uae["totalRevenue"] == 0
    assert uae["ticketsAvailable"] == 3


def test_low_stock_countries(db, users, batch_data):
    batch_data["quantity"] = 1
    batch, _ = create_batch(db, users["admin"], batch_data)
    assert fin.get_low_stock_countries(db) == []
    ticket = TicketRepository(db).list_by_batch(batch.id)[0]
    _sell(db, users, ticket.id, 19500)
    assert fin.get_low_stock_countries(db) == ["KSA"]


def test_optimal_price_without_history_is_flat_markup(db):
    assert fin.calculate_optimal_selling_price(db, 15000, "KSA") == 19500


def test_optimal_price_follows_history_above_floor(db, users, batch_data):
    batch, _ = create_batch(db, users["admin"], batch_data)
    ticket = TicketRepository(db).list_by_batch(batch.id)[0]
    _sell(db, users, ticket.id, 25000)

    assert fin.calculate_optimal_selling_price(db, 10000, "KSA") == 25000
    # floor of 20% wins over a cheaper history
    assert fin.calculate_optimal_selling_price(db, 30000, "KSA") == 36000
    # history is per country
    assert fin.calculate_optimal_selling_price(db, 10000, "UAE") == 13000


def test_potential_profit(db, users, batch_data):
    batch, _ = create_batch(db, users["admin"], batch_data)
    ticket = TicketRepository(db).list_by_batch(batch.id)[0]
    assert fin.calculate_potential_profit(db, ticket.id, 18000) == 3000
    assert fin.calculate_potential_profit(db, "missing", 18000) == 0


def test_validate_booking(db, users, batch_data):
    batch, _ = create_batch(db, users["admin"], batch_data)
    ticket = TicketRepository(db).list_by_batch(batch.id)[0]
    assert fin.validate_booking(db, ticket.id, 15750) == {"valid": True}

    low = fin.validate_booking(db, ticket.id, 15000)
    assert low["valid"] is False
    assert "15750" in low["error"]

    assert fin.validate_booking(db, "missing", 20000)["error"] == "Ticket not found"
    assert fin.validate_booking(db, ticket.id, 0)["valid"] is False
