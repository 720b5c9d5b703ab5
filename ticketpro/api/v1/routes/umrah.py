from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import get_current_user, require_permission
from ticketpro.api.responses import ok
from ticketpro.api.serializers import row_out
from ticketpro.core.errors import NotFoundError, ValidationError
from ticketpro.core.permissions import Permission
from ticketpro.models.user import User
from ticketpro.repositories.umrah import (
    UmrahGroupTicketRepository,
    UmrahWithTransportRepository,
    UmrahWithoutTransportRepository,
)
from ticketpro.schemas.umrah import (
    GroupBookingIn,
    GroupTicketIn,
    GroupTicketUpdate,
    PaymentIn,
    UmrahWithTransportIn,
    UmrahWithTransportUpdate,
    UmrahWithoutTransportIn,
    UmrahWithoutTransportUpdate,
)
from ticketpro.services import umrah_service as svc

router = APIRouter(tags=["umrah"])

PACKAGE_TYPES = ("with-transport", "without-transport")


def _created(record, assignment, label: str) -> dict:
    data = row_out(record)
    data["groupAssignment"] = row_out(assignment) if assignment else None
    msg = f"{label} package created and auto-assigned to group ticket" if assignment else f"{label} package created successfully"
    return ok(data, msg)

# with transport

@router.get("/umrah/with-transport")
def list_with_transport(search: str | None = None, db: Session = Depends(get_db),
                        me: User = Depends(get_current_user)):
    return ok([row_out(r) for r in UmrahWithTransportRepository(db).list(search)], "Packages retrieved successfully")

@router.get("/umrah/with-transport/{record_id}")
def get_with_transport(record_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    record = UmrahWithTransportRepository(db).get(record_id)
    if not record:
        raise NotFoundError("Package not found")
    return ok(row_out(record), "Package retrieved successfully")

@router.post("/umrah/with-transport", status_code=201)
def create_with_transport(body: UmrahWithTransportIn, request: Request, db: Session = Depends(get_db),
                          me: User = Depends(get_current_user)):
    record, assignment = svc.create_with_transport(db, me, body.model_dump(), request)
    return _created(record, assignment, "Umrah with transport")

@router.put("/umrah/with-transport/{record_id}")
def update_with_transport(record_id: str, body: UmrahWithTransportUpdate, request: Request,
                          db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    record = svc.update_with_transport(db, me, record_id, body.model_dump(exclude_unset=True), request)
    return ok(row_out(record), "Package updated successfully")

@router.delete("/umrah/with-transport/{record_id}")
def delete_with_transport(record_id: str, request: Request, db: Session = Depends(get_db),
                          me: User = Depends(require_permission(Permission.DELETE_BOOKINGS))):
    svc.delete_record(db, me, "with-transport", record_id, request)
    return ok(message="Package deleted successfully")

# without transport

@router.get("/umrah/without-transport")
def list_without_transport(search: str | None = None, pending_only: bool = False,
                           db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    repo = UmrahWithoutTransportRepository(db)
    rows = repo.list_pending() if pending_only else repo.list(search)
    return ok([row_out(r) for r in rows], "Packages retrieved successfully")

@router.get("/umrah/without-transport/{record_id}")
def get_without_transport(record_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    record = UmrahWithoutTransportRepository(db).get(record_id)
    if not record:
        raise NotFoundError("Package not found")
    return ok(row_out(record), "Package retrieved successfully")

@router.post("/umrah/without-transport", status_code=201)
def create_without_transport(body: UmrahWithoutTransportIn, request: Request, db: Session = Depends(get_db),
                             me: User = Depends(get_current_user)):
    record, assignment = svc.create_without_transport(db, me, body.model_dump(), request)
    return _created(record, assignment, "Umrah without transport")

@router.put("/umrah/without-transport/{record_id}")
def update_without_transport(record_id: str, body: UmrahWithoutTransportUpdate, request: Request,
                             db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    record = svc.update_without_transport(db, me, record_id, body.model_dump(exclude_unset=True), request)
    return ok(row_out(record), "Package updated successfully")

@router.post("/umrah/without-transport/{record_id}/payment")
def record_payment(record_id: str, body: PaymentIn, request: Request, db: Session = Depends(get_db),
                   me: User = Depends(get_current_user)):
    record = svc.record_payment(db, me, record_id, body.amount, body.payment_date, request)
    return ok(row_out(record), "Payment recorded successfully")

@router.delete("/umrah/without-transport/{record_id}")
def delete_without_transport(record_id: str, request: Request, db: Session = Depends(get_db),
                             me: User = Depends(require_permission(Permission.DELETE_BOOKINGS))):
    svc.delete_record(db, me, "without-transport", record_id, request)
    return ok(message="Package deleted successfully")

# summaries

@router.get("/umrah/payment-summary")
def payment_summary(db: Session = Depends(get_db),
                    me: User = Depends(require_permission(Permission.VIEW_PROFIT))):
    return ok(svc.payment_summary(db), "Payment summary retrieved successfully")

@router.get("/umrah/stats")
def stats(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok(svc.umrah_stats(db), "Statistics retrieved successfully")

# group tickets

@router.get("/umrah/group-tickets")
def list_group_tickets(package_type: str | None = None, search: str | None = None,
                       db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    if package_type not in PACKAGE_TYPES:
        package_type = None
    groups = UmrahGroupTicketRepository(db).list(search=search, package_type=package_type)
    return ok([row_out(g) for g in groups], "Group tickets retrieved successfully")

@router.get("/umrah/group-tickets/by-dates/{package_type}")
def group_tickets_by_dates(package_type: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    if package_type not in PACKAGE_TYPES:
        raise ValidationError("Invalid package type")
    buckets = svc.groups_by_dates(db, package_type)
    for b in buckets:
        b["groups"] = [row_out(g) for g in b["groups"]]
    return ok(buckets, "Grouped tickets retrieved successfully")

@router.get("/umrah/group-tickets/available/{package_type}/{departure_date}/{return_date}")
def available_group_tickets(package_type: str, departure_date: str, return_date: str,
                            db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    groups = svc.available_groups(db, package_type, departure_date, return_date)
    return ok({
        "groups": [row_out(g) for g in groups],
        "totalAvailableTickets": sum(g.remaining_tickets for g in groups),
    }, "Available group tickets retrieved successfully")

@router.get("/umrah/group-tickets/{group_id}")
def get_group_ticket(group_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    detail = svc.group_ticket_detail(db, group_id)
    detail["groupTicket"] = row_out(detail["groupTicket"])
    detail["assignments"] = [row_out(a) for a in detail["assignments"]]
    return ok(detail, "Group ticket retrieved successfully")

@router.post("/umrah/group-tickets", status_code=201)
def create_group_ticket(body: GroupTicketIn, request: Request, db: Session = Depends(get_db),
                        me: User = Depends(require_permission(Permission.MANAGE_UMRAH))):
    group = svc.create_group_ticket(db, me, body.model_dump(), request)
    return ok(row_out(group), "Group ticket purchase created successfully")

@router.put("/umrah/group-tickets/{group_id}")
def update_group_ticket(group_id: str, body: GroupTicketUpdate, request: Request, db: Session = Depends(get_db),
                        me: User = Depends(require_permission(Permission.MANAGE_UMRAH))):
    group = svc.update_group_ticket(db, me, group_id, body.model_dump(exclude_unset=True), request)
    return ok(row_out(group), "Group ticket updated successfully")

@router.delete("/umrah/group-tickets/{group_id}")
def delete_group_ticket(group_id: str, request: Request, force: bool = False, db: Session = Depends(get_db),
                        me: User = Depends(require_permission(Permission.MANAGE_UMRAH))):
    svc.delete_group_ticket(db, me, group_id, force, request)
    return ok(message="Group ticket deleted successfully")

# group assignments

@router.post("/umrah/group-bookings", status_code=201)
def assign_passenger(body: GroupBookingIn, request: Request, db: Session = Depends(get_db),
                     me: User = Depends(require_permission(Permission.MANAGE_UMRAH))):
    assignment = svc.assign_passenger(db, me, body.group_ticket_id, body.passenger_id, body.passenger_type, request)
    return ok(row_out(assignment), "Passenger assigned to group successfully")

@router.delete("/umrah/group-bookings/{assignment_id}")
def remove_assignment(assignment_id: str, request: Request, db: Session = Depends(get_db),
                      me: User = Depends(require_permission(Permission.MANAGE_UMRAH))):
    svc.remove_assignment(db, me, assignment_id, request)
    return ok(message="Passenger removed from group successfully")
