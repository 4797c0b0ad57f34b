import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator


class StayFields(BaseModel):
    check_in: date
    check_out: date
    room_count: int = Field(1, ge=1)
    adults: int = Field(1, ge=1)
    children_ages: list[int] = Field(default_factory=list, max_length=6)
    with_breakfast: bool = False

    @model_validator(mode="after")
    def _check_ages(self):
        for age in self.children_ages:
            if age < 0 or age > 17:
                raise ValueError("Each child age must be between 0 and 17")
        return self


class QuoteRequest(StayFields):
    room_id: uuid.UUID
    promo_code: str | None = None
    customer_id: str | None = None
    device_id: str | None = None


class BookingCreate(QuoteRequest):
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=3)
    customer_phone: str | None = None
    special_requests: str | None = None
    payment_id: str | None = None
    payment_method: str | None = None


class AdminBookingCreate(BookingCreate):
    status: str = "confirmed"
    payment_status: str = "pending"


class BookingUpdate(BaseModel):
    room_id: uuid.UUID | None = None
    check_in: date | None = None
    check_out: date | None = None
    room_count: int | None = Field(None, ge=1)
    adults: int | None = Field(None, ge=1)
    children: int | None = Field(None, ge=0, le=6)  # resizes the ages list when no ages are given
    children_ages: list[int] | None = Field(None, max_length=6)
    with_breakfast: bool | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    special_requests: str | None = None
    status: str | None = None
    payment_status: str | None = None
    payment_id: str | None = None

    @model_validator(mode="after")
    def _check_ages(self):
        for age in self.children_ages or []:
            if age < 0 or age > 17:
                raise ValueError("Each child age must be between 0 and 17")
        return self


class BookingResponse(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    customer_name: str
    customer_email: str
    customer_phone: str | None
    check_in_date: date
    check_out_date: date
    nights: int
    room_count: int
    guests: int
    adults: int
    children: int
    children_ages: list[int] | None
    effective_adults: int
    with_breakfast: bool
    special_requests: str | None
    nightly_rate: float
    room_subtotal: float
    extra_guests: int | None
    extra_guest_charges: float | None
    breakfast_charge: float
    base_price: float
    discounted_base_price: float
    promo_code: str | None
    cgst: float
    sgst: float
    total_price: float
    original_total: float
    status: str
    payment_status: str
    booking_type: str
    payment_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
