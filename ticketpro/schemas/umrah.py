from pydantic import BaseModel, Field
from typing import Literal, Optional

DATE = r"^\d{4}-\d{2}-\d{2}$"
PackageType = Literal["with-transport", "without-transport"]


class UmrahWithTransportIn(BaseModel):
    passenger_name: str = Field(min_length=1)
    pnr: str = Field(min_length=1)
    passport_number: str = Field(min_length=1)
    flight_airline_name: str = Field(min_length=1)
    departure_date: str = Field(pattern=DATE)
    return_date: str = Field(pattern=DATE)
    approved_by: str = Field(min_length=1)
    reference_agency: str = Field(min_length=1)
    emergency_flight_contact: str = Field(min_length=1)
    passenger_mobile: str = Field(min_length=1)
    group_ticket_id: Optional[str] = None


class UmrahWithTransportUpdate(BaseModel):
    passenger_name: Optional[str] = Field(default=None, min_length=1)
    pnr: Optional[str] = Field(default=None, min_length=1)
    passport_number: Optional[str] = Field(default=None, min_length=1)
    flight_airline_name: Optional[str] = Field(default=None, min_length=1)
    departure_date: Optional[str] = Field(default=None, pattern=DATE)
    return_date: Optional[str] = Field(default=None, pattern=DATE)
    approved_by: Optional[str] = Field(default=None, min_length=1)
    reference_agency: Optional[str] = Field(default=None, min_length=1)
    emergency_flight_contact: Optional[str] = Field(default=None, min_length=1)
    passenger_mobile: Optional[str] = Field(default=None, min_length=1)


class UmrahWithoutTransportIn(BaseModel):
    flight_departure_date: str = Field(pattern=DATE)
    return_date: str = Field(pattern=DATE)
    passenger_name: str = Field(min_length=1)
    passport_number: str = Field(min_length=1)
    entry_recorded_by: str = Field(min_length=1)
    total_amount: int = Field(gt=0)
    amount_paid: int = Field(default=0, ge=0)
    last_payment_date: Optional[str] = Field(default=None, pattern=DATE)
    remarks: Optional[str] = None
    group_ticket_id: Optional[str] = None


class UmrahWithoutTransportUpdate(BaseModel):
    flight_departure_date: Optional[str] = Field(default=None, pattern=DATE)
    return_date: Optional[str] = Field(default=None, pattern=DATE)
    passenger_name: Optional[str] = Field(default=None, min_length=1)
    passport_number: Optional[str] = Field(default=None, min_length=1)
    entry_recorded_by: Optional[str] = Field(default=None, min_length=1)
    total_amount: Optional[int] = Field(default=None, gt=0)
    amount_paid: Optional[int] = Field(default=None, ge=0)
    last_payment_date: Optional[str] = Field(default=None, pattern=DATE)
    remarks: Optional[str] = None


class PaymentIn(BaseModel):
    amount: int = Field(gt=0)
    payment_date: Optional[str] = Field(default=None, pattern=DATE)


class GroupTicketIn(BaseModel):
    group_name: str = Field(min_length=1)
    package_type: Literal["with-transport"] = "with-transport"  # only transport packages are bought in groups
    departure_date: str = Field(pattern=DATE)
    return_date: str = Field(pattern=DATE)
    ticket_count: int = Field(gt=0)
    total_cost: int = Field(ge=0)
    agent_name: str = Field(min_length=1)
    agent_contact: Optional[str] = None
    purchase_notes: Optional[str] = None
    departure_airline: Optional[str] = None
    departure_flight_number: Optional[str] = None
    departure_time: Optional[str] = None
    departure_route: Optional[str] = None
    return_airline: Optional[str] = None
    return_flight_number: Optional[str] = None
    return_time: Optional[str] = None
    return_route: Optional[str] = None


class GroupTicketUpdate(BaseModel):
    group_name: Optional[str] = Field(default=None, min_length=1)
    departure_date: Optional[str] = Field(default=None, pattern=DATE)
    return_date: Optional[str] = Field(default=None, pattern=DATE)
    ticket_count: Optional[int] = Field(default=None, gt=0)
    total_cost: Optional[int] = Field(default=None, ge=0)
    agent_name: Optional[str] = Field(default=None, min_length=1)
    agent_contact: Optional[str] = None
    purchase_notes: Optional[str] = None
    departure_airline: Optional[str] = None
    departure_flight_number: Optional[str] = None
    departure_time: Optional[str] = None
    departure_route: Optional[str] = None
    return_airline: Optional[str] = None
    return_flight_number: Optional[str] = None
    return_time: Optional[str] = None
    return_route: Optional[str] = None


class GroupBookingIn(BaseModel):
    group_ticket_id: str = Field(min_length=1)
    passenger_id: str = Field(min_length=1)
    passenger_type: PackageType
