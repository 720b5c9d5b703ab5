"""Financial calculator: investment, revenue, profit and margins.

Everything here is derived from the store on demand. Nothing is written.
"""
import math
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketpro.core.app_logger import get_logger
from ticketpro.core.timeutil import utcnow
from ticketpro.repositories.reports import ReportRepository
from ticketpro.repositories.tickets import TicketRepository

log = get_logger("financial")

MIN_MARKUP = 1.05
FLOOR_MARKUP = 1.2
DEFAULT_MARKUP = 1.3
LOW_STOCK_RATIO = 0.2


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _pct(part: float, whole: float) -> float:
    if not whole:
        return 0
    return round_half_up(part / whole * 100 * 100) / 100


def calculate_financial_summary(db: Session) -> dict:
    repo = ReportRepository(db)
    investment, bought = repo.purchase_totals()
    revenue, profit = repo.sales_totals()
    counts = repo.ticket_status_counts()
    sold = counts.get("sold", 0)
    return {
        "totalInvestment": investment,
        "totalRevenue": revenue,
        "totalProfit": profit,
        "totalTicketsBought": bought,
        "totalTicketsSold": sold,
        "totalTicketsAvailable": counts.get("available", 0),
        "totalTicketsBooked": counts.get("booked", 0),
        "totalTicketsLocked": counts.get("locked", 0),
        "profitMargin": _pct(profit, revenue),
        "inventoryUtilization": _pct(sold, bought),
        "averageBuyingPrice": round_half_up(investment / bought) if bought else 0,
        "averageSellingPrice": round_half_up(revenue / sold) if sold else 0,
        "roi": _pct(profit, investment),
    }


def calculate_country_financials(db: Session) -> dict:
    """Per-country breakdown keyed by country code.

    Every country with purchases gets an entry; missing sales or stock read as 0.
    """
    repo = ReportRepository(db)
    sales = {row[0]: row[1:] for row in repo.sales_by_country()}
    available = {code: int(avail or 0) for code, avail, _total in repo.availability_by_country()}

    out = {}
    for code, invest, bought, avg_buy in repo.purchases_by_country():
        sold, rev, prof, avg_sell = sales.get(code, (0, 0, 0, 0))
        out[code] = {
            "totalInvestment": round_half_up(invest or 0),
            "totalRevenue": round_half_up(rev or 0),
            "totalProfit": round_half_up(prof or 0),
            "ticketsBought": int(bought or 0),
            "ticketsSold": int(sold or 0),
            "ticketsAvailable": available.get(code, 0),
            "averageBuyingPrice": round_half_up(avg_buy or 0),
            "averageSellingPrice": round_half_up(avg_sell or 0),
        }
    return out


def calculate_todays_sales(db: Session) -> dict:
    # compares the ISO date prefix only; the day boundary is UTC
    count, amount = ReportRepository(db).confirmed_on(utcnow().date().isoformat())
    return {"amount": amount, "count": count}


def get_low_stock_countries(db: Session) -> list[str]:
    return [
        code for code, avail, total in ReportRepository(db).availability_by_country()
        if total and (avail or 0) / total < LOW_STOCK_RATIO
    ]


def get_top_performing_countries(db: Session, limit: int = 5) -> list[dict]:
    return [
        {
            "country_code": code,
            "total_profit": round_half_up(profit or 0),
            "tickets_sold": int(sold),
            "profit_per_ticket": round_half_up(per_ticket or 0),
        }
        for code, profit, sold, per_ticket in ReportRepository(db).profit_by_country(limit)
    ]


def calculate_potential_profit(db: Session, ticket_id: str, selling_price: int) -> int:
    buying_price = ReportRepository(db).buying_price_for_ticket(ticket_id)
    if buying_price is None:
        return 0
    return round_half_up(selling_price - buying_price)


def calculate_optimal_selling_price(db: Session, buying_price: int, country_code: str) -> int:
    """Default selling price for a freshly bought ticket.

    The confirmed-sale average for the country, but never below a 20% markup.
    Without history, or if the lookup fails, a flat 30% markup.
    """
    try:
        avg = TicketRepository(db).average_selling_price(country_code)
    except SQLAlchemyError as e:
        log.warning("optimal price lookup failed for %s: %s", country_code, e)
        return round_half_up(buying_price * DEFAULT_MARKUP)
    if not avg:
        return round_half_up(buying_price * DEFAULT_MARKUP)
    return max(round_half_up(buying_price * FLOOR_MARKUP), round_half_up(avg))


def validate_booking(db: Session, ticket_id: str, selling_price: int) -> dict:
    row = TicketRepository(db).get_with_batch(ticket_id)
    if not row:
        return {"valid": False, "error": "Ticket not found"}
    ticket, batch, _country = row
    if ticket.status != "available":
        return {"valid": False, "error": f"Ticket is {ticket.status}, not available for booking"}
    if selling_price <= 0:
        return {"valid": False, "error": "Selling price must be positive"}
    min_price = batch.buying_price * MIN_MARKUP
    if selling_price < min_price:
        return {"valid": False, "error": f"Selling price too low. Minimum recommended: ৳{round_half_up(min_price)}"}
    return {"valid": True}
