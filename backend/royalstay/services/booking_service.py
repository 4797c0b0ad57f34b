"""Booking service — stay validation, server-side quotes and the booking record sink."""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.models.booking import Booking, Receipt
from royalstay.services.pricing.calculator import PriceBreakdown, calculate_price, count_nights
from royalstay.services.pricing.capacity import CapacityResolution, resize_children, resolve_capacity
from royalstay.services.pricing.config import PricingConfig, pricing_config
from royalstay.services.pricing.promo_gate import PromoGate, PromoOutcome, PromoValidator
from royalstay.services.promo_code_service import promo_code_service
from royalstay.services.room_service import RoomRate, rate_from_room, room_service

logger = logging.getLogger(__name__)


class BookingNotFoundError(ValueError):
    pass


@dataclass
class StayRequest:
    check_in: date
    check_out: date
    room_count: int = 1
    adults: int = 1
    children_ages: list[int] = field(default_factory=list)
    with_breakfast: bool = False


@dataclass
class CustomerDetails:
    name: str
    email: str
    phone: str | None = None
    customer_id: str | None = None
    device_id: str | None = None
    special_requests: str | None = None

    @property
    def promo_identity(self) -> str:
        """Customer identifier handed to promo validators."""
        return self.customer_id or f"guest_{self.device_id or 'anonymous'}"


@dataclass
class Quote:
    """Capacity, price and promo state for one stay request."""
    rate: RoomRate
    capacity: CapacityResolution
    breakdown: PriceBreakdown
    promo: PromoOutcome | None = None

    def to_dict(self) -> dict:
        return {
            "currency": pricing_config.currency,
            "room": self.rate.to_dict(),
            "capacity": self.capacity.to_dict(),
            "price": self.breakdown.to_dict(),
            "display": self.breakdown.display(),
            "promo": self.promo.to_dict() if self.promo else None,
        }


def _money(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def validate_stay_window(
    check_in: date, check_out: date, today: date | None = None, allow_past: bool = False
) -> None:
    """Reject stays starting in the past or not ending after they start."""
    today = today or date.today()
    if not allow_past and check_in < today:
        raise ValueError("Check-in date cannot be in the past")
    if check_out <= check_in:
        raise ValueError("Check-out date must be after check-in date")


def validate_room_count(room_count: int, rate: RoomRate) -> None:
    if room_count < 1:
        raise ValueError("At least one room must be booked")
    if room_count > rate.available_rooms:
        raise ValueError(f"Only {rate.available_rooms} rooms are available")


def price_stay(
    rate: RoomRate,
    stay: StayRequest,
    discounted_base_price: float | None = None,
    config: PricingConfig = pricing_config,
) -> tuple[CapacityResolution, PriceBreakdown]:
    """Capacity correction followed by the price breakdown."""
    capacity = resolve_capacity(rate.category, stay.adults, stay.children_ages, config)
    breakdown = calculate_price(
        nightly_rate=rate.nightly_rate,
        nights=count_nights(stay.check_in, stay.check_out),
        room_count=stay.room_count,
        adults=capacity.adults,
        children=capacity.children,
        effective_adults=capacity.effective_adults,
        with_breakfast=stay.with_breakfast,
        category=rate.category,
        breakfast_rate=rate.breakfast_rate,
        discounted_base_price=discounted_base_price,
        config=config,
    )
    return capacity, breakdown


async def build_quote(
    rate: RoomRate,
    stay: StayRequest,
    promo_code: str | None = None,
    validator: PromoValidator | None = None,
    customer_id: str = "guest_anonymous",
    device_id: str = "",
    config: PricingConfig = pricing_config,
) -> Quote:
    capacity, breakdown = price_stay(rate, stay, config=config)
    if not promo_code or not promo_code.strip():
        return Quote(rate=rate, capacity=capacity, breakdown=breakdown)
    if validator is None:
        raise ValueError("No promo validator available")

    gate = PromoGate(validator, breakdown.base_price, customer_id, device_id)
    outcome = await gate.apply(promo_code)
    if outcome.applied:
        capacity, breakdown = price_stay(rate, stay, discounted_base_price=gate.discounted_amount, config=config)
    return Quote(rate=rate, capacity=capacity, breakdown=breakdown, promo=outcome)


def new_receipt_number() -> str:
    return f"RP-{str(int(time.time() * 1000))[5:]}"


def build_booking_record(
    quote: Quote,
    stay: StayRequest,
    customer: CustomerDetails,
    booking_type: str = "online",
    status: str = "pending",
    payment_status: str = "pending",
    payment_id: str | None = None,
) -> dict:
    """Flat snapshot written once when the booking is confirmed."""
    capacity, price = quote.capacity, quote.breakdown
    promo_code = quote.promo.code if quote.promo and quote.promo.applied else None
    return {
        "room_id": quote.rate.room_id,
        "customer_name": customer.name,
        "customer_email": customer.email,
        "customer_phone": customer.phone,
        "customer_id": customer.customer_id,
        "check_in_date": stay.check_in,
        "check_out_date": stay.check_out,
        "nights": price.nights,
        "room_count": price.room_count,
        "guests": capacity.adults + capacity.children,
        "adults": capacity.adults,
        "children": capacity.children,
        "children_ages": list(capacity.children_ages),
        "effective_adults": capacity.effective_adults,
        "with_breakfast": stay.with_breakfast,
        "special_requests": customer.special_requests,
        "nightly_rate": _money(price.nightly_rate),
        "room_subtotal": _money(price.room_subtotal),
        "extra_guests": price.extra_guests or None,
        "extra_guest_charges": _money(price.extra_guest_charge) if price.extra_guest_charge > 0 else None,
        "breakfast_rate": _money(price.breakfast_rate) if stay.with_breakfast else None,
        "breakfast_charge": _money(price.breakfast_charge),
        "base_price": _money(price.base_price),
        "discounted_base_price": _money(price.discounted_base_price),
        "promo_code": promo_code,
        "cgst": _money(price.cgst),
        "sgst": _money(price.sgst),
        "total_price": _money(price.total),
        "original_total": _money(price.original_total),
        "status": status,
        "payment_status": payment_status,
        "booking_type": booking_type,
        "payment_id": payment_id,
    }


def build_receipt_record(
    booking_id: uuid.UUID,
    quote: Quote,
    stay: StayRequest,
    customer: CustomerDetails,
    payment_id: str | None = None,
    payment_method: str | None = None,
) -> dict:
    capacity, price = quote.capacity, quote.breakdown
    receipt_number = new_receipt_number()
    receipt_data = {
        "booking_id": str(booking_id),
        "customer_name": customer.name,
        "customer_email": customer.email,
        "customer_phone": customer.phone,
        "room_name": quote.rate.name,
        "room_type": quote.rate.category.value,
        "price_per_night": price.nightly_rate,
        "nights": price.nights,
        "check_in_date": stay.check_in.isoformat(),
        "check_out_date": stay.check_out.isoformat(),
        "guests": capacity.adults + capacity.children,
        "adults": capacity.adults,
        "effective_adults": capacity.effective_adults,
        "children": capacity.children,
        "children_ages": list(capacity.children_ages),
        "price": price.discounted_base_price,
        "extra_guest_charges": price.extra_guest_charge,
        "cgst": price.cgst,
        "sgst": price.sgst,
        "tax": price.tax,
        "total": price.total,
        "payment_method": payment_method,
        "payment_id": payment_id,
        "receipt_number": receipt_number,
        "with_breakfast": stay.with_breakfast,
        "breakfast_price": price.breakfast_rate if stay.with_breakfast else 0,
        "room_count": price.room_count,
    }
    return {
        "booking_id": booking_id,
        "receipt_number": receipt_number,
        "payment_id": payment_id,
        "price_per_night": _money(price.nightly_rate),
        "nights": price.nights,
        "room_total": _money(price.room_subtotal),
        "breakfast_price": _money(price.breakfast_rate) if stay.with_breakfast else None,
        "breakfast_total": _money(price.breakfast_charge),
        "extra_guests": price.extra_guests or None,
        "extra_guest_charges": _money(price.extra_guest_charge) if price.extra_guest_charge > 0 else None,
        "base_price": _money(price.discounted_base_price),
        "cgst": _money(price.cgst),
        "sgst": _money(price.sgst),
        "total": _money(price.total),
        "with_breakfast": stay.with_breakfast,
        "receipt_data": receipt_data,
    }


class BookingService:
    """Creates, edits and lists bookings; pricing always runs server-side."""

    async def quote(
        self,
        db: AsyncSession,
        room_id: uuid.UUID,
        stay: StayRequest,
        promo_code: str | None = None,
        customer: CustomerDetails | None = None,
    ) -> Quote:
        rate = await room_service.get_room_rate(db, room_id)
        validate_room_count(stay.room_count, rate)
        validator = promo_code_service.validator_for(db) if promo_code else None
        return await build_quote(
            rate,
            stay,
            promo_code=promo_code,
            validator=validator,
            customer_id=customer.promo_identity if customer else "guest_anonymous",
            device_id=(customer.device_id if customer else None) or "",
        )

    async def create_booking(
        self,
        db: AsyncSession,
        room_id: uuid.UUID,
        stay: StayRequest,
        customer: CustomerDetails,
        promo_code: str | None = None,
        booking_type: str = "online",
        status: str | None = None,
        payment_status: str | None = None,
        payment_id: str | None = None,
        payment_method: str | None = None,
        today: date | None = None,
    ) -> tuple[Booking, Quote]:
        """Validate the stay, price it and persist booking + receipt once."""
        validate_stay_window(stay.check_in, stay.check_out, today)
        quote = await self.quote(db, room_id, stay, promo_code=promo_code, customer=customer)

        if promo_code and not (quote.promo and quote.promo.applied):
            logger.warning(
                f"Booking for {customer.email} proceeds without promo {promo_code}: "
                f"{quote.promo.message if quote.promo else 'not applied'}"
            )

        if status is None:
            status = "confirmed" if payment_id or booking_type == "offline" else "pending"
        if payment_status is None:
            payment_status = "paid" if payment_id else "pending"

        booking = Booking(**build_booking_record(
            quote, stay, customer,
            booking_type=booking_type,
            status=status,
            payment_status=payment_status,
            payment_id=payment_id,
        ))
        db.add(booking)
        await db.flush()

        if quote.promo and quote.promo.applied:
            await promo_code_service.redeem(
                db,
                quote.promo.code,
                customer.promo_identity,
                customer.device_id,
                booking.id,
                original_amount=quote.breakdown.base_price,
                final_amount=quote.breakdown.discounted_base_price,
            )

        db.add(Receipt(**build_receipt_record(
            booking.id, quote, stay, customer,
            payment_id=payment_id,
            payment_method=payment_method,
        )))
        await db.commit()
        await db.refresh(booking)

        logger.info(
            f"Booking {booking.id} created ({booking_type}) for room {room_id}: "
            f"{quote.breakdown.nights} nights, total {quote.breakdown.total:.2f}"
        )
        return booking, quote

    async def get_booking(self, db: AsyncSession, booking_id: uuid.UUID) -> Booking:
        result = await db.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()
        if not booking:
            raise BookingNotFoundError("Booking not found")
        return booking

    async def list_bookings(
        self,
        db: AsyncSession,
        status: str | None = None,
        booking_type: str | None = None,
        limit: int = 100,
    ) -> list[Booking]:
        query = select(Booking).order_by(Booking.created_at.desc()).limit(limit)
        if status:
            query = query.where(Booking.status == status)
        if booking_type:
            query = query.where(Booking.booking_type == booking_type)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def update_booking(
        self, db: AsyncSession, booking_id: uuid.UUID, **changes
    ) -> tuple[Booking, Quote]:
        """Admin edit: merge changes and re-run the pricing formulas.

        A flat promo discount already on the booking is carried over.
        """
        booking = await self.get_booking(db, booking_id)
        room_id = changes.get("room_id") or booking.room_id
        rate = rate_from_room(await room_service.get_room(db, room_id))

        children_ages = list(booking.children_ages or [])
        if changes.get("children_ages") is not None:
            children_ages = changes["children_ages"]
        elif changes.get("children") is not None:
            children_ages = resize_children(children_ages, changes["children"])

        stay = StayRequest(
            check_in=changes.get("check_in") or booking.check_in_date,
            check_out=changes.get("check_out") or booking.check_out_date,
            room_count=changes.get("room_count") or booking.room_count,
            adults=changes.get("adults") or booking.adults,
            children_ages=children_ages,
            with_breakfast=(
                changes["with_breakfast"] if changes.get("with_breakfast") is not None
                else booking.with_breakfast
            ),
        )
        validate_stay_window(stay.check_in, stay.check_out, allow_past=True)
        if changes.get("room_count") or changes.get("room_id"):
            validate_room_count(stay.room_count, rate)

        capacity, breakdown = price_stay(rate, stay)
        promo = None
        if booking.promo_code:
            gate = PromoGate.restored(
                promo_code_service.validator_for(db),
                booking.promo_code,
                float(booking.base_price),
                float(booking.discounted_base_price),
                customer_id=booking.customer_id or "",
            )
            promo = gate.rebase(breakdown.base_price)
            if promo.applied:
                capacity, breakdown = price_stay(
                    rate, stay, discounted_base_price=promo.discounted_amount
                )
            promo.code = booking.promo_code
        quote = Quote(rate=rate, capacity=capacity, breakdown=breakdown, promo=promo)

        customer = CustomerDetails(
            name=changes.get("customer_name") or booking.customer_name,
            email=changes.get("customer_email") or booking.customer_email,
            phone=changes.get("customer_phone") or booking.customer_phone,
            customer_id=booking.customer_id,
            special_requests=changes.get("special_requests") or booking.special_requests,
        )
        record = build_booking_record(
            quote, stay, customer,
            booking_type=booking.booking_type,
            status=changes.get("status") or booking.status,
            payment_status=changes.get("payment_status") or booking.payment_status,
            payment_id=changes.get("payment_id") or booking.payment_id,
        )
        record["promo_code"] = booking.promo_code if breakdown.promo_applied else None
        for key, value in record.items():
            setattr(booking, key, value)

        await db.commit()
        await db.refresh(booking)
        logger.info(f"Booking {booking.id} updated, total now {breakdown.total:.2f}")
        return booking, quote

    async def cancel_booking(self, db: AsyncSession, booking_id: uuid.UUID) -> Booking:
        booking = await self.get_booking(db, booking_id)
        if booking.status == "cancelled":
            return booking
        if booking.status == "checked_out":
            raise ValueError("A checked-out booking cannot be cancelled")
        booking.status = "cancelled"
        await db.commit()
        await db.refresh(booking)
        logger.info(f"Booking {booking.id} cancelled")
        return booking


booking_service = BookingService()
