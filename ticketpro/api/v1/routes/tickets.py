from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import require_permission
from ticketpro.api.responses import ok
from ticketpro.api.serializers import ticket_out
from ticketpro.core.errors import NotFoundError
from ticketpro.core.permissions import Permission, has_permission
from ticketpro.models.user import User
from ticketpro.repositories.reference import CountryRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.schemas.ticket import TicketStatusUpdate
from ticketpro.services.ticket_service import change_ticket_status

router = APIRouter(tags=["tickets"])

@router.get("/tickets")
def list_tickets(country: str | None = None, status: str | None = None, airline: str | None = None,
                 limit: int = Query(50, ge=1, le=500), offset: int = Query(0, ge=0),
                 db: Session = Depends(get_db),
                 me: User = Depends(require_permission(Permission.VIEW_TICKETS))):
    rows, total = TicketRepository(db).list(country=country, status=status, airline=airline, limit=limit, offset=offset)
    return ok({
        "tickets": [ticket_out(t, b, c, me.role) for t, b, c in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }, "Tickets retrieved successfully")

@router.get("/tickets/dashboard/stats")
def dashboard_stats(db: Session = Depends(get_db),
                    me: User = Depends(require_permission(Permission.VIEW_TICKETS))):
    stats = TicketRepository(db).dashboard_stats()
    if not has_permission(me.role, Permission.VIEW_PROFIT):
        stats.pop("estimatedProfit", None)
    return ok(stats, "Dashboard stats retrieved successfully")

@router.get("/tickets/countries/stats")
def country_stats(db: Session = Depends(get_db),
                  me: User = Depends(require_permission(Permission.VIEW_TICKETS))):
    return ok(TicketRepository(db).country_stats(), "Country stats retrieved successfully")

@router.get("/tickets/country/{country_code}")
def tickets_by_country(country_code: str, status: str | None = None,
                       db: Session = Depends(get_db),
                       me: User = Depends(require_permission(Permission.VIEW_TICKETS))):
    country = CountryRepository(db).get(country_code)
    if not country:
        raise NotFoundError("Country not found")
    rows, total = TicketRepository(db).list(country=country_code, status=status, limit=None)
    return ok({
        "country": {"code": country.code, "name": country.name, "flag": country.flag},
        "tickets": [ticket_out(t, b, c, me.role) for t, b, c in rows],
        "total": total,
    }, "Tickets retrieved successfully")

@router.get("/tickets/{ticket_id}")
def get_ticket(ticket_id: str, db: Session = Depends(get_db),
               me: User = Depends(require_permission(Permission.VIEW_TICKETS))):
    row = TicketRepository(db).get_with_batch(ticket_id)
    if not row:
        raise NotFoundError("Ticket not found")
    t, b, c = row
    return ok({"ticket": ticket_out(t, b, c, me.role)}, "Ticket retrieved successfully")

@router.patch("/tickets/{ticket_id}/status")
def update_ticket_status(ticket_id: str, body: TicketStatusUpdate, request: Request,
                         db: Session = Depends(get_db),
                         me: User = Depends(require_permission(Permission.VIEW_TICKETS))):
    ticket = change_ticket_status(db, me, ticket_id, body.status, request)
    return ok({"ticket": ticket_out(ticket)}, "Ticket status updated successfully")
