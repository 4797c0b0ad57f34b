import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field


class PromoApplyRequest(BaseModel):
    code: str = Field(min_length=1)
    amount: float = Field(ge=0)   # undiscounted base price
    customer_id: str | None = None
    device_id: str | None = None


class PromoCodeCreate(BaseModel):
    code: str | None = None
    discount_amount: float = Field(gt=0)
    expiry_date: date | None = None
    max_uses: int | None = Field(None, ge=1)
    generate_random_code: bool = False
    created_by: str | None = None


class PromoCodeResponse(BaseModel):
    id: uuid.UUID
    code: str
    discount_amount: float
    expiry_date: date | None
    max_uses: int | None
    current_uses: int
    status: str
    created_by: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
