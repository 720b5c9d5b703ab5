from pydantic import BaseModel, Field
from typing import Optional


class TicketStatusUpdate(BaseModel):
    status: str


class TicketBatchCreate(BaseModel):
    country: str = Field(min_length=1)
    airline: str = Field(min_length=1)
    flightDate: str = Field(min_length=1)
    flightTime: str = Field(min_length=1)
    buyingPrice: int = Field(gt=0)
    quantity: int = Field(ge=1)
    agentName: str = Field(min_length=1)
    agentContact: Optional[str] = None
    agentAddress: Optional[str] = None
    remarks: Optional[str] = None
    documentUrl: Optional[str] = None


class TicketBatchUpdate(BaseModel):
    agentName: Optional[str] = Field(default=None, min_length=1)
    agentContact: Optional[str] = None
    agentAddress: Optional[str] = None
    remarks: Optional[str] = None
    documentUrl: Optional[str] = None
