"""Refund service — customer refund tickets and their two-step review.

An admin approves (``approved_by_admin``) or rejects a pending request; a
super admin gives the final approval or rejection. Once approved, the
outcome of the payment gateway refund is recorded against the ticket.
"""

import logging
import secrets
import string
import time
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.data.currency import format_inr
from royalstay.models.refund import RefundRequest
from royalstay.services.booking_service import booking_service

logger = logging.getLogger(__name__)

DELETABLE_STATUSES = ("approved", "rejected", "refund_initiated", "refund_failed")

# role -> current status -> allowed decisions
_REVIEW_TRANSITIONS = {
    "admin": {
        "pending": ("approved_by_admin", "rejected"),
    },
    "super_admin": {
        "pending": ("approved", "rejected"),
        "approved_by_admin": ("approved", "rejected"),
    },
}

_TICKET_ALPHABET = string.ascii_uppercase + string.digits


class RefundRequestNotFoundError(ValueError):
    pass


def next_review_status(current: str, decision: str, super_admin: bool = False) -> str:
    role = "super_admin" if super_admin else "admin"
    allowed = _REVIEW_TRANSITIONS[role].get(current, ())
    if decision not in allowed:
        raise ValueError(
            f"A {current} refund request cannot be moved to {decision} by {role.replace('_', ' ')}"
        )
    return decision


def new_ticket_id(now_ms: int | None = None) -> str:
    """RR-<last 6 digits of epoch ms>-<5 random characters>."""
    ms = str(now_ms if now_ms is not None else int(time.time() * 1000))
    suffix = "".join(secrets.choice(_TICKET_ALPHABET) for _ in range(5))
    return f"RR-{ms[-6:]}-{suffix}"


class RefundService:

    async def create_request(
        self,
        db: AsyncSession,
        booking_id: uuid.UUID,
        customer_name: str,
        customer_email: str,
        reason: str,
        amount: float | None = None,
        customer_id: str | None = None,
    ) -> RefundRequest:
        """Open a pending ticket; the amount defaults to the booking total."""
        booking = await booking_service.get_booking(db, booking_id)
        paid = float(booking.total_price)
        if amount is None:
            amount = paid
        if amount <= 0:
            raise ValueError("Please enter a valid refund amount")
        if amount > paid:
            raise ValueError(f"Refund amount cannot exceed the booking total of {format_inr(paid)}")

        request = RefundRequest(
            ticket_id=new_ticket_id(),
            booking_id=booking.id,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_id=customer_id or booking.customer_id,
            amount=Decimal(str(amount)),
            reason=reason,
            status="pending",
        )
        db.add(request)
        await db.commit()
        await db.refresh(request)
        logger.info(f"Refund request {request.ticket_id} opened for booking {booking.id} ({amount})")
        return request

    async def get_request(self, db: AsyncSession, request_id: uuid.UUID) -> RefundRequest:
        result = await db.execute(select(RefundRequest).where(RefundRequest.id == request_id))
        request = result.scalar_one_or_none()
        if not request:
            raise RefundRequestNotFoundError("Refund request not found")
        return request

    async def list_requests(
        self, db: AsyncSession, status: str | None = None, super_admin: bool = False
    ) -> list[RefundRequest]:
        # Requests waiting on the super admin are hidden from admins
        query = select(RefundRequest).order_by(RefundRequest.created_at.desc())
        if status:
            query = query.where(RefundRequest.status == status)
        if not super_admin:
            query = query.where(RefundRequest.status != "approved_by_admin")
        result = await db.execute(query)
        return list(result.scalars().all())

    async def review(
        self,
        db: AsyncSession,
        request_id: uuid.UUID,
        decision: str,
        notes: str | None = None,
        super_admin: bool = False,
    ) -> RefundRequest:
        request = await self.get_request(db, request_id)
        previous = request.status
        request.status = next_review_status(previous, decision, super_admin)
        if super_admin:
            request.super_admin_notes = notes
        else:
            request.admin_notes = notes
        await db.commit()
        await db.refresh(request)
        logger.info(f"Refund request {request.ticket_id}: {previous} -> {request.status}")
        return request

    async def record_gateway_refund(
        self, db: AsyncSession, request_id: uuid.UUID, refund_id: str, refund_status: str
    ) -> RefundRequest:
        """Store the payment gateway's answer for an approved ticket."""
        request = await self.get_request(db, request_id)
        if request.status not in ("approved", "refund_failed"):
            raise ValueError("Only approved refund requests can be refunded")

        request.refund_id = refund_id
        request.refund_status = refund_status
        request.status = "refund_failed" if refund_status == "failed" else "refund_initiated"
        if refund_status == "processed" and request.booking_id:
            booking = await booking_service.get_booking(db, request.booking_id)
            booking.payment_status = "refunded"
        await db.commit()
        await db.refresh(request)
        if request.status == "refund_failed":
            logger.warning(f"Gateway refund {refund_id} failed for {request.ticket_id}")
        else:
            logger.info(f"Gateway refund {refund_id} for {request.ticket_id}: {refund_status}")
        return request

    async def delete_request(self, db: AsyncSession, request_id: uuid.UUID) -> None:
        request = await self.get_request(db, request_id)
        if request.status not in DELETABLE_STATUSES:
            raise ValueError("Only processed refund requests can be deleted")
        await db.delete(request)
        await db.commit()
        logger.info(f"Refund request {request.ticket_id} deleted")


refund_service = RefundService()
