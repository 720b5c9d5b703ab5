from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import get_current_user, require_permission
from ticketpro.api.responses import ok
from ticketpro.api.serializers import booking_out
from ticketpro.core.permissions import Permission, has_permission
from ticketpro.models.user import User
from ticketpro.repositories.bookings import BookingRepository
from ticketpro.schemas.booking import BookingCreate, BookingStatusUpdate
from ticketpro.services import booking_service

router = APIRouter(tags=["bookings"])

@router.get("/bookings")
def list_bookings(status: str | None = None,
                  limit: int = Query(50, ge=1, le=500), offset: int = Query(0, ge=0),
                  db: Session = Depends(get_db),
                  me: User = Depends(get_current_user)):
    # without view_all_bookings a user only sees what they booked
    owner = None if has_permission(me.role, Permission.VIEW_ALL_BOOKINGS) else me.id
    items, total = BookingRepository(db).list(created_by=owner, status=status, limit=limit, offset=offset)
    return ok({"bookings": [booking_out(b) for b in items], "total": total, "limit": limit, "offset": offset},
              "Bookings retrieved successfully")

@router.get("/bookings/{booking_id}")
def get_booking(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok({"booking": booking_out(booking_service.get_booking(db, me, booking_id))},
              "Booking retrieved successfully")

@router.post("/bookings", status_code=201)
def create_booking(body: BookingCreate, request: Request, db: Session = Depends(get_db),
                   me: User = Depends(require_permission(Permission.CREATE_BOOKINGS))):
    booking = booking_service.create_booking(db, me, body.model_dump(), request)
    return ok({"booking": booking_out(booking)}, "Booking created successfully")

@router.patch("/bookings/{booking_id}/status")
def update_booking_status(booking_id: str, body: BookingStatusUpdate, request: Request,
                          db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    booking = booking_service.update_booking_status(db, me, booking_id, body.status, request)
    return ok({"booking": booking_out(booking)}, "Booking status updated successfully")

@router.delete("/bookings/{booking_id}")
def cancel_booking(booking_id: str, request: Request, db: Session = Depends(get_db),
                   me: User = Depends(get_current_user)):
    booking = booking_service.cancel_booking(db, me, booking_id, request)
    return ok({"booking": booking_out(booking)}, "Booking cancelled successfully")
