from fastapi import APIRouter
from ticketpro.core.config import settings
from ticketpro.api.v1.routes.auth import router as auth_router
from ticketpro.api.v1.routes.reference import router as reference_router
from ticketpro.api.v1.routes.tickets import router as tickets_router
from ticketpro.api.v1.routes.ticket_batches import router as ticket_batches_router
from ticketpro.api.v1.routes.bookings import router as bookings_router
from ticketpro.api.v1.routes.users import router as users_router
from ticketpro.api.v1.routes.settings import router as settings_router
from ticketpro.api.v1.routes.reports import router as reports_router
from ticketpro.api.v1.routes.umrah import router as umrah_router

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(auth_router)
api_router.include_router(reference_router)
api_router.include_router(tickets_router)
api_router.include_router(ticket_batches_router)
api_router.include_router(bookings_router)
api_router.include_router(users_router)
api_router.include_router(settings_router)
api_router.include_router(reports_router)
api_router.include_router(umrah_router)
