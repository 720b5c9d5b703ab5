from pydantic import BaseModel, Field
from typing import Literal, Optional


class AgentInfo(BaseModel):
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None  # plain str, agents often have no real mailbox


class PassengerInfo(BaseModel):
    name: str = Field(min_length=1)
    passportNo: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    paxCount: int = Field(default=1, ge=1)
    email: Optional[str] = None


class BookingCreate(BaseModel):
    ticketId: str = Field(min_length=1)
    agentInfo: AgentInfo
    passengerInfo: PassengerInfo
    sellingPrice: int = Field(gt=0)
    paymentType: Literal["full", "partial"]
    partialAmount: Optional[int] = Field(default=None, gt=0)
    paymentMethod: str = "cash"
    paymentDetails: Optional[dict] = None
    comments: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: str
