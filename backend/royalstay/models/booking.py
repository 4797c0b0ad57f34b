import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from royalstay.database import Base


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("rooms.id"), nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(30))
    customer_id: Mapped[str | None] = mapped_column(String(100))
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    room_count: Mapped[int] = mapped_column(Integer, default=1)
    guests: Mapped[int] = mapped_column(Integer, nullable=False)  # adults + children
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    children: Mapped[int] = mapped_column(Integer, default=0)
    children_ages: Mapped[list | None] = mapped_column(JSONB, default=list)
    effective_adults: Mapped[int] = mapped_column(Integer, nullable=False)
    with_breakfast: Mapped[bool] = mapped_column(Boolean, default=False)
    special_requests: Mapped[str | None] = mapped_column(Text)
    # Price snapshot
    nightly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    room_subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    extra_guests: Mapped[int | None] = mapped_column(Integer)
    extra_guest_charges: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    breakfast_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    breakfast_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discounted_base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    promo_code: Mapped[str | None] = mapped_column(String(50))
    cgst: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sgst: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    original_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # Lifecycle
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending | confirmed | checked_in | checked_out | cancelled
    payment_status: Mapped[str] = mapped_column(String(20), default="pending")  # pending | paid | failed | refunded | cancelled
    booking_type: Mapped[str] = mapped_column(String(10), default="online")  # online | offline
    payment_id: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    receipts: Mapped[list["Receipt"]] = relationship(
        back_populates="booking", cascade="all, delete-orphan"
    )


class Receipt(Base):
    __tablename__ = "receipts"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    receipt_number: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    payment_id: Mapped[str | None] = mapped_column(String(100))
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    room_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    breakfast_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    breakfast_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    extra_guests: Mapped[int | None] = mapped_column(Integer)
    extra_guest_charges: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cgst: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sgst: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    with_breakfast: Mapped[bool] = mapped_column(Boolean, default=False)
    receipt_data: Mapped[dict | None] = mapped_column(JSONB)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    booking: Mapped["Booking"] = relationship(back_populates="receipts")
