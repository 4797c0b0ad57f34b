import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class RefundRequestCreate(BaseModel):
    booking_id: uuid.UUID
    customer_name: str = Field(min_length=2)
    customer_email: str = Field(min_length=3)
    customer_id: str | None = None
    amount: float | None = Field(None, gt=0)  # defaults to the booking total
    reason: str = Field(min_length=10)


class RefundReview(BaseModel):
    decision: Literal["approved_by_admin", "approved", "rejected"]
    notes: str | None = None
    super_admin: bool = False


class GatewayRefund(BaseModel):
    refund_id: str = Field(min_length=1)
    refund_status: str = Field(min_length=1)  # processed | pending | failed


class RefundRequestResponse(BaseModel):
    id: uuid.UUID
    ticket_id: str
    booking_id: uuid.UUID | None
    customer_name: str
    customer_email: str
    customer_id: str | None
    amount: float
    reason: str
    status: str
    admin_notes: str | None
    super_admin_notes: str | None
    refund_id: str | None
    refund_status: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
