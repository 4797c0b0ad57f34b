"""Bookings router — quotes, customer and admin bookings."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.database import get_db
from royalstay.schemas.booking import (
    AdminBookingCreate,
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    QuoteRequest,
    StayFields,
)
from royalstay.services.booking_service import (
    BookingNotFoundError,
    CustomerDetails,
    StayRequest,
    booking_service,
)
from royalstay.services.room_service import RoomNotFoundError, RoomUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http(e: ValueError) -> HTTPException:
    if isinstance(e, (BookingNotFoundError, RoomNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, RoomUnavailableError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _stay(req: StayFields) -> StayRequest:
    return StayRequest(
        check_in=req.check_in,
        check_out=req.check_out,
        room_count=req.room_count,
        adults=req.adults,
        children_ages=list(req.children_ages),
        with_breakfast=req.with_breakfast,
    )


def _customer(req: BookingCreate) -> CustomerDetails:
    return CustomerDetails(
        name=req.customer_name,
        email=req.customer_email,
        phone=req.customer_phone,
        customer_id=req.customer_id,
        device_id=req.device_id,
        special_requests=req.special_requests,
    )


@router.post("/quote")
async def quote_booking(req: QuoteRequest, db: AsyncSession = Depends(get_db)):
    """Price a stay: capacity correction, breakdown and optional promo."""
    customer = CustomerDetails(name="", email="", customer_id=req.customer_id, device_id=req.device_id)
    try:
        quote = await booking_service.quote(
            db, req.room_id, _stay(req), promo_code=req.promo_code, customer=customer
        )
    except ValueError as e:
        raise _to_http(e)
    return quote.to_dict()


@router.post("", status_code=201)
async def create_booking(req: BookingCreate, db: AsyncSession = Depends(get_db)):
    """Confirm an online booking; the price is recomputed server-side."""
    try:
        booking, quote = await booking_service.create_booking(
            db,
            req.room_id,
            _stay(req),
            _customer(req),
            promo_code=req.promo_code,
            booking_type="online",
            payment_id=req.payment_id,
            payment_method=req.payment_method,
        )
    except ValueError as e:
        raise _to_http(e)
    return {
        "booking": BookingResponse.model_validate(booking).model_dump(mode="json"),
        "quote": quote.to_dict(),
    }


@router.post("/admin", status_code=201)
async def create_admin_booking(req: AdminBookingCreate, db: AsyncSession = Depends(get_db)):
    """Back-office booking (walk-in or phone); recorded as offline."""
    try:
        booking, quote = await booking_service.create_booking(
            db,
            req.room_id,
            _stay(req),
            _customer(req),
            promo_code=req.promo_code,
            booking_type="offline",
            status=req.status,
            payment_status=req.payment_status,
            payment_id=req.payment_id,
            payment_method=req.payment_method,
        )
    except ValueError as e:
        raise _to_http(e)
    return {
        "booking": BookingResponse.model_validate(booking).model_dump(mode="json"),
        "quote": quote.to_dict(),
    }


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    status: str | None = Query(None),
    booking_type: str | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.list_bookings(db, status=status, booking_type=booking_type, limit=limit)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    try:
        return await booking_service.get_booking(db, booking_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{booking_id}")
async def update_booking(booking_id: uuid.UUID, req: BookingUpdate, db: AsyncSession = Depends(get_db)):
    """Admin edit; pricing is re-run on the merged stay."""
    try:
        booking, quote = await booking_service.update_booking(
            db, booking_id, **req.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise _to_http(e)
    return {
        "booking": BookingResponse.model_validate(booking).model_dump(mode="json"),
        "quote": quote.to_dict(),
    }


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(booking_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    try:
        return await booking_service.cancel_booking(db, booking_id)
    except ValueError as e:
        raise _to_http(e)
