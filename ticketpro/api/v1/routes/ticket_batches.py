from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import require_permission
from ticketpro.api.responses import ok
from ticketpro.api.serializers import batch_out, country_out, ticket_out
from ticketpro.core.errors import NotFoundError
from ticketpro.core.permissions import Permission
from ticketpro.models.user import User
from ticketpro.repositories.ticket_batches import TicketBatchRepository
from ticketpro.repositories.tickets import TicketRepository
from ticketpro.schemas.ticket import TicketBatchCreate, TicketBatchUpdate
from ticketpro.services.batch_service import create_batch, delete_batch, update_batch

router = APIRouter(tags=["ticket-batches"])

@router.get("/ticket-batches")
def list_batches(country: str | None = None, airline: str | None = None,
                 dateFrom: str | None = None, dateTo: str | None = None,
                 db: Session = Depends(get_db),
                 me: User = Depends(require_permission(Permission.VIEW_PROFIT))):
    rows = TicketBatchRepository(db).list_with_stats(country=country, airline=airline,
                                                     date_from=dateFrom, date_to=dateTo)
    items = []
    for batch, country_row, sold, locked, available, sold_revenue in rows:
        out = batch_out(batch, me.role)
        out["country"] = country_out(country_row)
        out.update({
            "sold": int(sold),
            "locked": int(locked),
            "available": int(available),
            "totalCost": batch.buying_price * batch.quantity,
            "profit": int(sold_revenue) - int(sold) * batch.buying_price,
        })
        items.append(out)
    return ok({"batches": items}, "Ticket batches retrieved successfully")

@router.get("/ticket-batches/{batch_id}")
def get_batch(batch_id: str, db: Session = Depends(get_db),
              me: User = Depends(require_permission(Permission.VIEW_PROFIT))):
    batch = TicketBatchRepository(db).get(batch_id)
    if not batch:
        raise NotFoundError("Ticket batch not found")
    tickets = TicketRepository(db).list_by_batch(batch_id)
    return ok({"batch": batch_out(batch, me.role), "tickets": [ticket_out(t) for t in tickets]},
              "Ticket batch retrieved successfully")

@router.post("/ticket-batches", status_code=201)
def create_ticket_batch(body: TicketBatchCreate, request: Request, db: Session = Depends(get_db),
                        me: User = Depends(require_permission(Permission.CREATE_BATCHES))):
    batch, created = create_batch(db, me, body.model_dump(), request)
    return ok({"batch": batch_out(batch, me.role), "ticketsCreated": created},
              f"Ticket batch created successfully with {created} tickets")

@router.put("/ticket-batches/{batch_id}")
def update_ticket_batch(batch_id: str, body: TicketBatchUpdate, request: Request, db: Session = Depends(get_db),
                        me: User = Depends(require_permission(Permission.EDIT_BATCHES))):
    batch = update_batch(db, me, batch_id, body.model_dump(exclude_unset=True), request)
    return ok({"batch": batch_out(batch, me.role)}, "Ticket batch updated successfully")

@router.delete("/ticket-batches/{batch_id}")
def delete_ticket_batch(batch_id: str, request: Request, db: Session = Depends(get_db),
                        me: User = Depends(require_permission(Permission.DELETE_BATCHES))):
    delete_batch(db, me, batch_id, request)
    return ok(message="Ticket batch deleted successfully")
