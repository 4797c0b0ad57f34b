import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from royalstay.database import Base


class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category_type: Mapped[str | None] = mapped_column(String(50))  # Royal Deluxe | Royal Executive | Royal Suite
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)  # nightly rate
    breakfast_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    capacity: Mapped[int] = mapped_column(Integer, default=2)
    beds: Mapped[int] = mapped_column(Integer, default=1)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1)
    amenities: Mapped[list | None] = mapped_column(JSONB, default=list)
    image_url: Mapped[str | None] = mapped_column(String(500))
    available_rooms: Mapped[int] = mapped_column(Integer, default=0)
    total_rooms: Mapped[int | None] = mapped_column(Integer)  # category inventory cap at last update
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    status: Mapped[str] = mapped_column(String(20), default="available")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
