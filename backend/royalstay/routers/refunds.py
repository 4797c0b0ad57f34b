"""Refund requests router — customer tickets and back-office review."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.database import get_db
from royalstay.schemas.refund import (
    GatewayRefund,
    RefundRequestCreate,
    RefundRequestResponse,
    RefundReview,
)
from royalstay.services.booking_service import BookingNotFoundError
from royalstay.services.refund_service import RefundRequestNotFoundError, refund_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http(e: ValueError) -> HTTPException:
    if isinstance(e, (BookingNotFoundError, RefundRequestNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=RefundRequestResponse, status_code=201)
async def create_refund_request(req: RefundRequestCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await refund_service.create_request(db, **req.model_dump())
    except ValueError as e:
        raise _to_http(e)


@router.get("", response_model=list[RefundRequestResponse])
async def list_refund_requests(
    status: str | None = Query(None),
    super_admin: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    return await refund_service.list_requests(db, status=status, super_admin=super_admin)


@router.get("/{request_id}", response_model=RefundRequestResponse)
async def get_refund_request(request_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    try:
        return await refund_service.get_request(db, request_id)
    except ValueError as e:
        raise _to_http(e)


@router.post("/{request_id}/review", response_model=RefundRequestResponse)
async def review_refund_request(
    request_id: uuid.UUID, req: RefundReview, db: AsyncSession = Depends(get_db)
):
    """Admin or super-admin decision on a ticket."""
    try:
        return await refund_service.review(
            db, request_id, req.decision, notes=req.notes, super_admin=req.super_admin
        )
    except ValueError as e:
        raise _to_http(e)


@router.post("/{request_id}/gateway-refund", response_model=RefundRequestResponse)
async def record_gateway_refund(
    request_id: uuid.UUID, req: GatewayRefund, db: AsyncSession = Depends(get_db)
):
    try:
        return await refund_service.record_gateway_refund(
            db, request_id, req.refund_id, req.refund_status
        )
    except ValueError as e:
        raise _to_http(e)


@router.delete("/{request_id}", status_code=204)
async def delete_refund_request(request_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    try:
        await refund_service.delete_request(db, request_id)
    except ValueError as e:
        raise _to_http(e)
