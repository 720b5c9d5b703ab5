from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import get_current_user
from ticketpro.api.responses import ok
from ticketpro.api.serializers import country_out
from ticketpro.models.user import User
from ticketpro.repositories.reference import AirlineRepository, CountryRepository

router = APIRouter(tags=["reference"])

@router.get("/countries")
def list_countries(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok([country_out(c) for c in CountryRepository(db).list()], "Countries retrieved successfully")

@router.get("/airlines")
def list_airlines(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok([{"id": a.id, "name": a.name, "code": a.code} for a in AirlineRepository(db).list()],
              "Airlines retrieved successfully")
