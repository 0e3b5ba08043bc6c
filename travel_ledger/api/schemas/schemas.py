from typing import Any, Literal

from pydantic import BaseModel, Field


class ProviderCreate(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    transport_mode: Literal["air", "land", "water"]
    extensions: dict[str, Any] = Field(default_factory=dict)


class CustomerCreate(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    visibility: Literal["public", "anonymous"] = "public"
    extensions: dict[str, Any] = Field(default_factory=dict)


class RatingRequest(BaseModel):
    rating: float


class VisibilityRequest(BaseModel):
    visibility: Literal["public", "anonymous"]


class TicketCreate(BaseModel):
    id: str
    origin: str
    destination: str
    departure_time: str
    arrival_time: str
    base_price: float
    total_seats: int
    provider_id: str
    transport_mode: Literal["air", "land", "water"]


class BookingRequest(BaseModel):
    id: str
    ticket_id: str
    customer_id: str
    seat_numbers: list[str] = Field(min_length=1)


class PaymentRequest(BaseModel):
    transaction_ref: str = Field(min_length=1)


class TravelRecordCreate(BaseModel):
    id: str
    destination: str
    date: str


class TravelRecordUpdate(BaseModel):
    destination: str
    date: str
    status: str

