import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    name: str
    description: str | None = None
    category_type: str | None = None
    price: float = Field(gt=0)
    breakfast_price: float | None = Field(None, ge=0)
    capacity: int = Field(2, ge=1)
    beds: int = Field(1, ge=1)
    bathrooms: int = Field(1, ge=0)
    amenities: list[str] = []
    image_url: str | None = None
    available_rooms: int = Field(0, ge=0)
    is_available: bool = True


class RoomUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    category_type: str | None = None
    price: float | None = Field(None, gt=0)
    breakfast_price: float | None = Field(None, ge=0)
    capacity: int | None = Field(None, ge=1)
    beds: int | None = Field(None, ge=1)
    bathrooms: int | None = Field(None, ge=0)
    amenities: list[str] | None = None
    image_url: str | None = None
    available_rooms: int | None = Field(None, ge=0)
    is_available: bool | None = None
    status: str | None = None


class RoomResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    category_type: str | None
    price: float
    breakfast_price: float | None
    capacity: int
    beds: int
    bathrooms: int
    amenities: list[str] | None
    image_url: str | None
    available_rooms: int
    total_rooms: int | None
    is_available: bool
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryAvailabilityChange(BaseModel):
    change: int = Field(description="Rooms to add (positive) or remove (negative)")
