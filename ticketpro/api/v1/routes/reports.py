from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import require_permission
from ticketpro.api.responses import ok
from ticketpro.core.permissions import Permission
from ticketpro.models.user import User
from ticketpro.services import financial_service as fin

router = APIRouter(tags=["reports"])

view_profit = require_permission(Permission.VIEW_PROFIT)

@router.get("/reports/financial-summary")
def financial_summary(db: Session = Depends(get_db), me: User = Depends(view_profit)):
    return ok(fin.calculate_financial_summary(db), "Financial summary retrieved successfully")

@router.get("/reports/countries")
def country_financials(db: Session = Depends(get_db), me: User = Depends(view_profit)):
    return ok(fin.calculate_country_financials(db), "Country financials retrieved successfully")

@router.get("/reports/todays-sales")
def todays_sales(db: Session = Depends(get_db), me: User = Depends(view_profit)):
    return ok(fin.calculate_todays_sales(db), "Today's sales retrieved successfully")

@router.get("/reports/top-countries")
def top_countries(limit: int = Query(5, ge=1, le=50), db: Session = Depends(get_db), me: User = Depends(view_profit)):
    return ok(fin.get_top_performing_countries(db, limit), "Top countries retrieved successfully")

@router.get("/reports/low-stock")
def low_stock(db: Session = Depends(get_db), me: User = Depends(view_profit)):
    return ok(fin.get_low_stock_countries(db), "Low stock countries retrieved successfully")

@router.get("/reports/potential-profit")
def potential_profit(ticketId: str, sellingPrice: int = Query(..., gt=0),
                     db: Session = Depends(get_db), me: User = Depends(view_profit)):
    return ok({"ticketId": ticketId, "sellingPrice": sellingPrice,
               "profit": fin.calculate_potential_profit(db, ticketId, sellingPrice)},
              "Potential profit calculated")
