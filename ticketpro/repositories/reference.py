from __future__ import annotations

from sqlalchemy.orm import Session

from ticketpro.models.country import Country
from ticketpro.models.airline import Airline


class CountryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> list[Country]:
        return self.db.query(Country).order_by(Country.name).all()

    def get(self, code: str) -> Country | None:
        return self.db.get(Country, code)


class AirlineRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> list[Airline]:
        return self.db.query(Airline).order_by(Airline.name).all()

    def get_by_name(self, name: str) -> Airline | None:
        return self.db.query(Airline).filter(Airline.name == name).first()
